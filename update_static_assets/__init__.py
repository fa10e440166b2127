"""Keep CDN-hosted scripts and stylesheets referenced from markup up to date."""

from .config import UpdateOptions
from .models import AssetUpdate, CdnProvider, UpdateResult
from .updater import StaticAssetUpdater, generate_commit_message

__all__ = [
    "AssetUpdate",
    "CdnProvider",
    "StaticAssetUpdater",
    "UpdateOptions",
    "UpdateResult",
    "generate_commit_message",
]
