"""Pipeline configuration and its TOML loader.

Config file is looked up in order:
  1. Path passed to load_config()
  2. Path in VAULTTERMS_CONFIG env var (if set)
  3. vaultterms.toml in the current working directory

Only the ``[vaultterms]`` table is read. If no file is found, built-in defaults
are used.
"""

from __future__ import annotations

import os
import tomllib
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator

from vaultterms.errors import ConfigurationError

CONFIG_ENV_VAR = "VAULTTERMS_CONFIG"
CONFIG_FILENAME = "vaultterms.toml"

DEFAULT_ALLOW_LIST: tuple[str, ...] = (
    "Master Equation",
    "Lowe Coherence Lagrangian",
    "Ten Laws Framework",
    "PEAR Lab",
    "General Relativity",
    "Quantum Mechanics",
    "Logos field",
    "consciousness collapse",
)

DEFAULT_EXCLUDED_FOLDERS: tuple[str, ...] = ("Assets", "assets", "_Assets", ".obsidian", "audio", "Audio")


class ScanScope(str, Enum):
    """Which part of the vault a scan covers."""

    GLOBAL = "global"
    """Every markdown document in the vault."""

    LOCAL = "local"
    """Only documents under the configured scoped folder."""


class VaultTermsConfig(BaseModel, frozen=True):
    """Immutable settings shared by every pipeline component.

    Components receive this object at construction time; nothing reads
    settings from ambient state.
    """

    min_frequency: int = Field(
        default=3,
        ge=1,
        description="Aggregates with fewer occurrences are dropped from scan results.",
    )
    scan_scope: ScanScope = Field(
        default=ScanScope.GLOBAL,
        description="Whether scans cover the whole vault or only scoped_folder.",
    )
    scoped_folder: str = Field(
        default="",
        description="Folder (path prefix) scanned when scan_scope is 'local'.",
    )
    excluded_folders: tuple[str, ...] = Field(
        default=DEFAULT_EXCLUDED_FOLDERS,
        description="Path prefixes never scanned or linked.",
    )

    detect_equations: bool = Field(default=True, description="Detect identifiers on the left of '='.")
    detect_phrases: bool = Field(default=True, description="Detect capitalized multi-word phrases.")
    detect_acronyms: bool = Field(default=True, description="Detect ALL-CAPS acronyms.")
    detect_citations: bool = Field(default=True, description="Detect 'Label NN:NN' citations.")
    detect_technical: bool = Field(default=True, description="Detect '<word> theorem/law/field...' phrases.")
    detect_math: bool = Field(default=False, description="Detect inline and display $-delimited math spans.")
    use_custom_terms_only: bool = Field(
        default=False,
        description="Disable pattern rules and count only custom-term mentions.",
    )

    allow_list: tuple[str, ...] = Field(
        default=DEFAULT_ALLOW_LIST,
        description="Terms always accepted by the detector filter.",
    )
    deny_list: tuple[str, ...] = Field(
        default=(),
        description="Extra terms rejected by the detector filter, in addition to the stop words.",
    )

    glossary_file: str = Field(default="Glossary.md", description="Path of the glossary document.")
    glossary_title: str = Field(default="Central Glossary", description="Header written into a new glossary.")
    review_queue_file: str = Field(default="_term_review_queue.md", description="Path of the review queue document.")
    custom_terms_file: str = Field(default="Custom_Terms.md", description="Path of the user's custom terms list.")

    high_confidence_threshold: int = Field(default=10, ge=1, description="Minimum count for the high band.")
    medium_confidence_threshold: int = Field(default=5, ge=1, description="Minimum count for the medium band.")
    low_confidence_threshold: int = Field(default=3, ge=1, description="Minimum count for the low band.")

    auto_linking: bool = Field(default=True, description="Link documents when they change.")
    clear_queue_after_promotion: bool = Field(
        default=True,
        description="Delete the review queue once its approved terms are promoted.",
    )

    @model_validator(mode="after")
    def _check_bands(self) -> "VaultTermsConfig":
        if not self.low_confidence_threshold <= self.medium_confidence_threshold <= self.high_confidence_threshold:
            raise ValueError("confidence thresholds must satisfy low <= medium <= high")
        return self

    @property
    def control_documents(self) -> frozenset[str]:
        """Documents the pipeline owns and never scans or links."""
        return frozenset({self.glossary_file, self.review_queue_file, self.custom_terms_file})

    def resolve_scope(self, scope: str | None = None) -> str | None:
        """Return the path prefix a scan should be restricted to.

        An explicit scope wins. Otherwise a local scan_scope requires a
        non-empty scoped_folder.

        Raises:
            ConfigurationError: If local scanning is configured without a folder.
        """
        if scope is not None:
            return normalize_folder(scope) or None
        if self.scan_scope == ScanScope.LOCAL:
            folder = normalize_folder(self.scoped_folder)
            if not folder:
                raise ConfigurationError("scan_scope is 'local' but no scoped_folder is configured")
            return folder
        return None


def normalize_folder(folder: str) -> str:
    """Turn a user-entered folder into a slash-separated prefix without outer slashes."""
    return folder.strip().replace("\\", "/").strip("/")


def is_under(path: str, prefix: str) -> bool:
    """Return True if path equals prefix or lies inside the prefix folder."""
    prefix = normalize_folder(prefix)
    if not prefix:
        return True
    return path == prefix or path.startswith(prefix + "/")


def _default_config_paths() -> list[Path]:
    """Return paths to check for vaultterms.toml (first existing wins)."""
    paths: list[Path] = []
    if os.environ.get(CONFIG_ENV_VAR):
        paths.append(Path(os.environ[CONFIG_ENV_VAR]))
    paths.append(Path.cwd() / CONFIG_FILENAME)
    return paths


def config_from_mapping(data: dict[str, Any]) -> VaultTermsConfig:
    """Build a config from a plain mapping, converting validation failures.

    Raises:
        ConfigurationError: If any value is invalid.
    """
    try:
        return VaultTermsConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid vaultterms configuration: {e}") from e


def load_config(path: Path | None = None) -> VaultTermsConfig:
    """Load configuration from a TOML file.

    Args:
        path: Explicit config file. When given it must exist.

    Returns:
        The parsed config, or the defaults when no file is found.

    Raises:
        ConfigurationError: If the file is unreadable, not valid TOML, or
            holds invalid values.
    """
    if path is not None:
        if not path.is_file():
            raise ConfigurationError(f"Config file not found: {path}")
        candidates = [path]
    else:
        candidates = [p for p in _default_config_paths() if p.is_file()]

    for candidate in candidates:
        try:
            with open(candidate, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigurationError(f"Cannot read config file {candidate}: {e}") from e
        section = data.get("vaultterms", {})
        if not isinstance(section, dict):
            raise ConfigurationError(f"[vaultterms] in {candidate} must be a table")
        return config_from_mapping(section)
    return VaultTermsConfig()
