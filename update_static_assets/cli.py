"""Command-line entry point for the static asset updater."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Sequence

import requests

from .config import (
    DEFAULT_BRANCH_PREFIX,
    DEFAULT_FILE_EXTENSIONS,
    UpdateOptions,
    parse_file_extensions,
    parse_ignore_entries,
)
from .git import GitCommandError
from .publish import PullRequestError
from .updater import StaticAssetUpdater

logger = logging.getLogger("update_static_assets.cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Update scripts and stylesheets served from cdnjs or jsDelivr to their "
            "latest versions and open a pull request for each update."
        ),
    )
    parser.add_argument(
        "--repo-path",
        type=Path,
        default=None,
        help="Repository checkout to scan (default: $GITHUB_WORKSPACE or the current directory)",
    )
    parser.add_argument(
        "--file-extensions",
        default=",".join(DEFAULT_FILE_EXTENSIONS),
        help="Comma-separated file extensions to scan for assets",
    )
    parser.add_argument(
        "--branch-prefix",
        default=DEFAULT_BRANCH_PREFIX,
        help="Prefix for the names of the branches created for updates",
    )
    parser.add_argument(
        "--commit-message",
        default=None,
        help="Commit message to use instead of the generated one",
    )
    parser.add_argument("--user-name", default=None, help="git user name for commits")
    parser.add_argument("--user-email", default=None, help="git user email for commits")
    parser.add_argument(
        "--labels",
        default=None,
        help="Comma-separated labels to apply to created pull requests",
    )
    parser.add_argument(
        "--ignore",
        action="append",
        default=[],
        metavar="CDN:NAME[@VERSION]",
        help="Package (and optionally version) to leave alone; may be repeated",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Commit locally but do not push or open pull requests",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Write the updates made to STDOUT as JSON",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def build_options(args: argparse.Namespace) -> UpdateOptions:
    return UpdateOptions.from_env(
        repo_path=args.repo_path,
        file_extensions=parse_file_extensions(args.file_extensions),
        branch_prefix=args.branch_prefix,
        commit_message=args.commit_message,
        user_name=args.user_name,
        user_email=args.user_email,
        labels=args.labels,
        dry_run=args.dry_run,
        ignore=parse_ignore_entries(args.ignore),
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    try:
        options = build_options(args)
    except ValueError as exc:
        logger.error("%s", exc)
        return 2

    updater = StaticAssetUpdater(options)
    overall_start = time.perf_counter()
    try:
        result = updater.try_update_assets()
    except (GitCommandError, PullRequestError, requests.RequestException):
        logger.exception("Failed to update static assets")
        return 1
    total_elapsed = time.perf_counter() - overall_start

    logger.info("Finished in %.2fs (%d update(s))", total_elapsed, len(result.updates))
    for update in result.updates:
        logger.info(
            "Updated %s to %s (pull request #%d %s)",
            update.name,
            update.version,
            update.pull_request_number,
            update.pull_request_url,
        )

    if args.json:
        sys.stdout.write(json.dumps(result.to_dict(), indent=2) + "\n")
        sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
