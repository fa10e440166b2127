"""Configuration objects and constants for the asset updater."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Tuple

from .models import CdnProvider, IgnoreAsset

DEFAULT_FILE_EXTENSIONS = ("cshtml", "html", "razor")
DEFAULT_BRANCH_PREFIX = "update-static-assets"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_SERVER_URL = "https://github.com"


@dataclass(frozen=True)
class UpdateOptions:
    """Settings for a single update run."""

    repo_path: Path
    file_extensions: Tuple[str, ...] = DEFAULT_FILE_EXTENSIONS
    access_token: str = ""
    api_url: str = DEFAULT_API_URL
    server_url: str = DEFAULT_SERVER_URL
    repo: Optional[str] = None
    run_id: Optional[str] = None
    branch_prefix: str = DEFAULT_BRANCH_PREFIX
    commit_message: Optional[str] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    labels: Optional[str] = None
    dry_run: bool = False
    ignore: Tuple[IgnoreAsset, ...] = field(default_factory=tuple)

    @classmethod
    def from_env(cls, repo_path: Optional[Path] = None, **overrides) -> "UpdateOptions":
        """Build options from the GitHub Actions environment plus overrides."""
        if repo_path is None:
            repo_path = Path(os.getenv("GITHUB_WORKSPACE") or ".")
        values = {
            "repo_path": Path(repo_path).resolve(),
            "access_token": os.getenv("GITHUB_TOKEN", ""),
            "api_url": os.getenv("GITHUB_API_URL") or DEFAULT_API_URL,
            "server_url": os.getenv("GITHUB_SERVER_URL") or DEFAULT_SERVER_URL,
            "repo": os.getenv("GITHUB_REPOSITORY") or None,
            "run_id": os.getenv("GITHUB_RUN_ID") or None,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


def parse_file_extensions(value: str) -> Tuple[str, ...]:
    """Parse ``html,cshtml`` style lists, tolerating leading dots and ``*.``."""
    extensions = []
    for part in value.split(","):
        extension = part.strip().lstrip("*").lstrip(".")
        if extension and extension not in extensions:
            extensions.append(extension)
    return tuple(extensions)


def parse_ignore_entry(value: str) -> IgnoreAsset:
    """Parse an ignore entry of the form ``<cdn>:<name>[@<version>]``."""
    cdn_name, sep, package = value.strip().partition(":")
    if not sep or not package:
        raise ValueError(f"Invalid ignore entry (expected <cdn>:<name>[@<version>]): {value}")
    try:
        cdn = CdnProvider(cdn_name.strip().lower())
    except ValueError:
        raise ValueError(f"Unknown CDN in ignore entry: {cdn_name}") from None
    name, _, version = package.partition("@")
    if not name:
        raise ValueError(f"Missing package name in ignore entry: {value}")
    return IgnoreAsset(cdn=cdn, name=name, version=version or None)


def parse_ignore_entries(values: Iterable[str]) -> Tuple[IgnoreAsset, ...]:
    return tuple(parse_ignore_entry(value) for value in values)
