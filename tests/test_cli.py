"""Tests for the command-line entry point.

Each test builds a vault under tmp_path and runs ``main`` with an explicit
argument list, checking the exit status and printed message.
"""

import pytest

from vaultterms.cli import EXIT_FAILURE, EXIT_NOTHING_TO_DO, EXIT_OK, main
from vaultterms.config import CONFIG_ENV_VAR


@pytest.fixture
def vault(tmp_path, monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)
    root = tmp_path / "vault"
    (root / "notes").mkdir(parents=True)
    (root / "notes" / "a.md").write_text(
        "the PEAR lab\nthe PEAR data\nthe PEAR team\n",
        encoding="utf-8",
    )
    return root


def run(vault, *args: str) -> int:
    return main(["--vault", str(vault), *args])


class TestCli:
    """Tests for the vaultterms command."""

    def test_lifecycle(self, vault, capsys) -> None:
        """Test scan, promote, link and status through the CLI."""
        assert run(vault, "scan") == EXIT_OK
        assert "1 queued for review" in capsys.readouterr().out

        assert run(vault, "promote") == EXIT_NOTHING_TO_DO

        queue = vault / "_term_review_queue.md"
        queue.write_text(queue.read_text(encoding="utf-8").replace("- [ ] **PEAR**", "- [x] **PEAR**"), encoding="utf-8")
        assert run(vault, "promote") == EXIT_OK
        assert not queue.exists()

        assert run(vault, "link") == EXIT_OK
        assert "[[Glossary#PEAR|PEAR]]" in (vault / "notes" / "a.md").read_text(encoding="utf-8")
        assert run(vault, "link") == EXIT_NOTHING_TO_DO

        capsys.readouterr()
        assert run(vault, "status") == EXIT_OK
        assert "Glossary: 1 terms, 0 fully defined" in capsys.readouterr().out

    def test_init(self, vault, capsys) -> None:
        """Test that init creates the custom list and glossary."""
        assert run(vault, "init") == EXIT_OK
        assert (vault / "Custom_Terms.md").is_file()
        assert (vault / "Glossary.md").read_text(encoding="utf-8") == "# Central Glossary\n\n"
        assert "Created" in capsys.readouterr().out

    def test_link_single_document(self, vault) -> None:
        """Test linking one named document."""
        (vault / "Glossary.md").write_text("## PEAR\n", encoding="utf-8")
        assert run(vault, "link", "notes/a.md") == EXIT_OK

    def test_link_missing_document(self, vault, capsys) -> None:
        """Test that a missing named document is an I/O failure."""
        (vault / "Glossary.md").write_text("## PEAR\n", encoding="utf-8")
        assert run(vault, "link", "notes/missing.md") == EXIT_FAILURE
        assert "I/O error" in capsys.readouterr().err

    def test_missing_vault(self, tmp_path) -> None:
        """Test that a missing vault directory fails."""
        assert run(tmp_path / "nope", "scan") == EXIT_FAILURE

    def test_missing_config(self, vault, tmp_path, capsys) -> None:
        """Test that a missing config file fails."""
        assert main(["--vault", str(vault), "--config", str(tmp_path / "none.toml"), "scan"]) == EXIT_FAILURE
        assert "Configuration error" in capsys.readouterr().err

    def test_invalid_min_frequency(self, vault) -> None:
        """Test that a zero minimum frequency is rejected."""
        assert run(vault, "scan", "--min-frequency", "0") == EXIT_FAILURE

    def test_local_scope_without_folder(self, vault, tmp_path) -> None:
        """Test that misconfigured local scope fails before writing a queue."""
        config = tmp_path / "vaultterms.toml"
        config.write_text('[vaultterms]\nscan_scope = "local"\n', encoding="utf-8")

        assert main(["--vault", str(vault), "--config", str(config), "scan"]) == EXIT_FAILURE
        assert not (vault / "_term_review_queue.md").exists()
