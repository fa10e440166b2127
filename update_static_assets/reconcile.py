"""Work out which CDN packages are behind their latest published version."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence

from .clients import CdnClient
from .models import Asset, AssetVersionItem, CdnProvider, IgnoreAsset

logger = logging.getLogger("update_static_assets.reconcile")

FileAssetMap = Mapping[str, Sequence[AssetVersionItem]]


@dataclass
class Reconciliation:
    """Stale assets, in first-seen order, and the latest version of each asset."""

    assets_to_update: List[Asset] = field(default_factory=list)
    latest_versions: Dict[Asset, str] = field(default_factory=dict)


def collect_versions(file_asset_map: FileAssetMap) -> Dict[Asset, List[str]]:
    """Map each distinct asset to the distinct versions referenced anywhere."""
    versions: Dict[Asset, List[str]] = {}
    for items in file_asset_map.values():
        for item in items:
            seen = versions.setdefault(item.asset, [])
            if item.version not in seen:
                seen.append(item.version)
    return versions


def resolve_latest_versions(
    assets: Sequence[Asset],
    clients: Mapping[CdnProvider, CdnClient],
) -> Dict[Asset, str]:
    latest: Dict[Asset, str] = {}
    for asset in assets:
        client = clients.get(asset.cdn)
        if client is None:
            continue
        try:
            version = client.get_latest_version(asset.name)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Failed to get the latest version of %s from %s: %s",
                asset.name,
                asset.cdn.value,
                exc,
            )
            continue
        if version:
            latest[asset] = version
        else:
            logger.debug("No latest version found for %s on %s", asset.name, asset.cdn.value)
    return latest


def reconcile(
    file_asset_map: FileAssetMap,
    clients: Mapping[CdnProvider, CdnClient],
    ignore: Sequence[IgnoreAsset] = (),
) -> Reconciliation:
    observed = collect_versions(file_asset_map)
    assets = list(observed)
    latest = resolve_latest_versions(assets, clients)

    result = Reconciliation(latest_versions=latest)
    for asset in assets:
        latest_version = latest.get(asset)
        if latest_version is None:
            continue
        if all(version == latest_version for version in observed[asset]):
            continue
        if any(entry.matches(asset, latest_version) for entry in ignore):
            logger.info("Ignoring update of %s to %s", asset.name, latest_version)
            continue
        result.assets_to_update.append(asset)
    return result
