"""Command-line entry point.

Usage:
  vaultterms --vault ~/Vault init
  vaultterms --vault ~/Vault scan --scope papers --min-frequency 5
  vaultterms --vault ~/Vault promote
  vaultterms --vault ~/Vault link [notes/chapter-1.md]
  vaultterms --vault ~/Vault status

Exit status is 0 when the operation did work, 3 when there was nothing to do
(no checked terms, nothing to link) and 1 on configuration or I/O errors.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from vaultterms.config import load_config
from vaultterms.errors import ConfigurationError, DocumentIOError
from vaultterms.logging import set_default_level
from vaultterms.orchestrator import OperationStatus, TermPipeline, build_pipeline
from vaultterms.storage.filesystem import FileSystemDocumentStore

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_NOTHING_TO_DO = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vaultterms",
        description="Maintain a glossary over a markdown vault and link its terms.",
    )
    parser.add_argument(
        "--vault",
        type=Path,
        default=Path.cwd(),
        help="Vault root directory (default: current directory)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a vaultterms.toml file (default: $VAULTTERMS_CONFIG or ./vaultterms.toml)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug details")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("init", help="Create the custom terms list and glossary if missing")

    scan = subparsers.add_parser("scan", help="Detect terms and regenerate the review queue")
    scan.add_argument("--scope", default=None, help="Only scan documents under this folder")
    scan.add_argument("--min-frequency", type=int, default=None, help="Minimum occurrences for a term to be queued")

    subparsers.add_parser("promote", help="Add checked review-queue terms to the glossary")

    link = subparsers.add_parser("link", help="Link glossary terms in one document or the whole vault")
    link.add_argument("path", nargs="?", default=None, help="Document path relative to the vault root")

    subparsers.add_parser("status", help="Report glossary completeness and pending approvals")
    return parser


async def run_command(pipeline: TermPipeline, args: argparse.Namespace) -> int:
    if args.command == "init":
        created = await pipeline.initialize()
        print(f"Created: {', '.join(created)}" if created else "Nothing to create.")
        return EXIT_OK
    if args.command == "scan":
        if args.min_frequency is not None and args.min_frequency < 1:
            raise ConfigurationError("--min-frequency must be at least 1")
        summary = await pipeline.scan(scope=args.scope, min_frequency=args.min_frequency)
        print(summary.message)
        return EXIT_OK
    if args.command == "promote":
        result = await pipeline.promote()
        print(result.message)
        return EXIT_NOTHING_TO_DO if result.status == OperationStatus.NOTHING_PENDING else EXIT_OK
    if args.command == "link":
        result = await pipeline.link(args.path)
        print(result.message)
        return EXIT_NOTHING_TO_DO if result.status == OperationStatus.NOTHING_TO_LINK else EXIT_OK
    if args.command == "status":
        status = await pipeline.status()
        print(status.message)
        return EXIT_OK
    raise ConfigurationError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    set_default_level(logging.DEBUG if args.verbose else logging.INFO)

    if not args.vault.is_dir():
        print(f"Error: vault directory not found: {args.vault}", file=sys.stderr)
        return EXIT_FAILURE

    try:
        config = load_config(args.config)
        pipeline = build_pipeline(FileSystemDocumentStore(args.vault), config)
        return asyncio.run(run_command(pipeline, args))
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except DocumentIOError as e:
        print(f"I/O error: {e}", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
