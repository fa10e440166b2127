"""High-level orchestration for finding and publishing static asset updates."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from .apply import AssetUpdateApplier
from .clients import CdnClient, default_clients
from .commits import generate_commit_message
from .config import UpdateOptions
from .content import extract_assets
from .git import Git
from .models import AssetUpdate, AssetVersion, AssetVersionItem, CdnProvider, UpdateResult
from .publish import PullRequestPublisher
from .reconcile import reconcile

logger = logging.getLogger("update_static_assets")

__all__ = ["StaticAssetUpdater", "generate_commit_message"]


class StaticAssetUpdater:
    """Finds stale CDN assets in a repository and opens a pull request per update."""

    def __init__(
        self,
        options: UpdateOptions,
        clients: Optional[Mapping[CdnProvider, CdnClient]] = None,
        git: Optional[Git] = None,
        publisher: Optional[PullRequestPublisher] = None,
    ) -> None:
        self.options = options
        self.clients = clients if clients is not None else default_clients()
        self.git = git or Git(options.repo_path)
        self.applier = AssetUpdateApplier(options, self.git)
        self.publisher = publisher or PullRequestPublisher(options)

    def find_files(self) -> List[Path]:
        """List markup files below the repository, skipping hidden paths."""
        root = Path(self.options.repo_path)
        seen = set()
        paths: List[Path] = []
        for extension in self.options.file_extensions:
            for path in sorted(root.glob(f"**/*.{extension}")):
                relative = path.relative_to(root)
                if any(part.startswith(".") for part in relative.parts):
                    continue
                if not path.is_file():
                    continue
                resolved = path.resolve()
                if resolved in seen:
                    continue
                seen.add(resolved)
                paths.append(resolved)
        return paths

    def find_assets(self) -> Dict[str, List[AssetVersionItem]]:
        file_asset_map: Dict[str, List[AssetVersionItem]] = {}
        paths = self.find_files()
        for path in paths:
            assets = extract_assets(path)
            if assets:
                file_asset_map[str(path)] = assets
        logger.info(
            "Found %d CDN asset reference(s) in %d of %d file(s).",
            sum(len(items) for items in file_asset_map.values()),
            len(file_asset_map),
            len(paths),
        )
        return file_asset_map

    def try_update_assets(self) -> UpdateResult:
        file_asset_map = self.find_assets()
        reconciliation = reconcile(file_asset_map, self.clients, self.options.ignore)

        result = UpdateResult()
        assets_to_update = reconciliation.assets_to_update
        if not assets_to_update:
            logger.info("All assets are up to date.")
            return result

        logger.info("Found %d assets to update.", len(assets_to_update))
        base_branch = ""
        for asset in assets_to_update:
            client = self.clients.get(asset.cdn)
            if client is None:
                continue
            version = reconciliation.latest_versions[asset]
            latest_files = client.get_files(asset.name, version)
            if not latest_files:
                logger.warning("No files found for %s %s on %s", asset.name, version, asset.cdn.value)
                continue

            updated_asset = AssetVersion(cdn=asset.cdn, name=asset.name, version=version)

            if base_branch:
                self.git.run(["checkout", base_branch], ignore_errors=True)
            else:
                base_branch = self.git.current_branch()

            head_branch = self.applier.apply(base_branch, file_asset_map, updated_asset, latest_files)
            if not head_branch:
                continue

            pull_request = self.publisher.publish(base_branch, head_branch, updated_asset)
            result.updates.append(
                AssetUpdate(
                    cdn=asset.cdn,
                    name=asset.name,
                    version=version,
                    pull_request_number=pull_request.number,
                    pull_request_url=pull_request.url,
                )
            )

        if base_branch:
            self.git.run(["checkout", base_branch], ignore_errors=True)
        return result
