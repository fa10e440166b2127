"""Data models used throughout the asset update pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class CdnProvider(Enum):
    """Content delivery networks whose asset URLs can be recognised."""

    CDNJS = "cdnjs"
    JSDELIVR = "jsdelivr"


@dataclass(frozen=True)
class Asset:
    """A package hosted on a CDN, independent of any version."""

    cdn: CdnProvider
    name: str


@dataclass(frozen=True)
class AssetVersion:
    """A specific version of a CDN-hosted package."""

    cdn: CdnProvider
    name: str
    version: str

    @property
    def asset(self) -> Asset:
        return Asset(self.cdn, self.name)


@dataclass(frozen=True)
class AssetVersionItem:
    """A single reference to a CDN asset found in a markup file."""

    cdn: CdnProvider
    name: str
    version: str
    url: str
    integrity: Optional[str]
    file_name: str

    @property
    def asset(self) -> Asset:
        return Asset(self.cdn, self.name)


@dataclass(frozen=True)
class CdnFile:
    """A file published by a CDN for one version of a package."""

    url: str
    file_name: str
    integrity: Optional[str] = None


@dataclass(frozen=True)
class IgnoreAsset:
    """Configured package (and optionally version) that must not be updated."""

    cdn: CdnProvider
    name: str
    version: Optional[str] = None

    def matches(self, asset: Asset, latest_version: str) -> bool:
        if asset.cdn != self.cdn or asset.name != self.name:
            return False
        if self.version in (None, "", "*"):
            return True
        return self.version == latest_version


@dataclass
class PullRequest:
    """Pull request opened for an update branch."""

    number: int
    url: str


@dataclass
class AssetUpdate:
    """Outcome of a published update for one package."""

    cdn: CdnProvider
    name: str
    version: str
    pull_request_number: int
    pull_request_url: str

    def to_dict(self) -> dict:
        return {
            "cdn": self.cdn.value,
            "name": self.name,
            "version": self.version,
            "pullRequestNumber": self.pull_request_number,
            "pullRequestUrl": self.pull_request_url,
        }


@dataclass
class UpdateResult:
    """Updates published during a single run, in the order they were made."""

    updates: List[AssetUpdate] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"updates": [update.to_dict() for update in self.updates]}
