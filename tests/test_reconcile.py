from __future__ import annotations

from update_static_assets.models import Asset, AssetVersionItem, CdnProvider, IgnoreAsset
from update_static_assets.reconcile import collect_versions, reconcile

from conftest import FakeCdnClient

CDNJS = CdnProvider.CDNJS
JSDELIVR = CdnProvider.JSDELIVR


def item(cdn, name, version, file_name="x.js"):
    return AssetVersionItem(
        cdn=cdn,
        name=name,
        version=version,
        url=f"https://example/{name}/{version}/{file_name}",
        integrity=None,
        file_name=file_name,
    )


def test_collect_versions_deduplicates_across_files() -> None:
    file_asset_map = {
        "a.html": [item(CDNJS, "foo", "1.0.0"), item(JSDELIVR, "foo", "1.0.0")],
        "b.html": [item(CDNJS, "foo", "1.1.0"), item(CDNJS, "foo", "1.0.0")],
    }
    versions = collect_versions(file_asset_map)
    assert list(versions) == [Asset(CDNJS, "foo"), Asset(JSDELIVR, "foo")]
    assert versions[Asset(CDNJS, "foo")] == ["1.0.0", "1.1.0"]
    assert versions[Asset(JSDELIVR, "foo")] == ["1.0.0"]


def test_mixed_versions_produce_one_stale_entry() -> None:
    file_asset_map = {
        "a.html": [item(CDNJS, "foo", "2.0.0")],
        "b.html": [item(CDNJS, "foo", "1.0.0")],
    }
    clients = {CDNJS: FakeCdnClient({"foo": "2.0.0"})}
    result = reconcile(file_asset_map, clients)
    assert result.assets_to_update == [Asset(CDNJS, "foo")]
    assert result.latest_versions == {Asset(CDNJS, "foo"): "2.0.0"}


def test_current_assets_are_not_stale() -> None:
    clients = {CDNJS: FakeCdnClient({"foo": "1.0.0"})}
    result = reconcile({"a.html": [item(CDNJS, "foo", "1.0.0")]}, clients)
    assert result.assets_to_update == []


def test_stale_assets_keep_first_seen_order() -> None:
    file_asset_map = {
        "a.html": [item(JSDELIVR, "zeta", "1.0.0"), item(CDNJS, "alpha", "1.0.0")],
        "b.html": [item(CDNJS, "beta", "1.0.0"), item(JSDELIVR, "zeta", "1.0.0")],
    }
    clients = {
        CDNJS: FakeCdnClient({"alpha": "2.0.0", "beta": "2.0.0"}),
        JSDELIVR: FakeCdnClient({"zeta": "2.0.0"}),
    }
    result = reconcile(file_asset_map, clients)
    assert [asset.name for asset in result.assets_to_update] == ["zeta", "alpha", "beta"]
    assert clients[JSDELIVR].latest_calls == ["zeta"]


def test_unresolved_versions_are_excluded() -> None:
    class BrokenClient(FakeCdnClient):
        def get_latest_version(self, name):
            raise RuntimeError("unavailable")

    file_asset_map = {
        "a.html": [item(CDNJS, "unknown", "1.0.0"), item(JSDELIVR, "broken", "1.0.0")],
    }
    clients = {CDNJS: FakeCdnClient({}), JSDELIVR: BrokenClient({})}
    result = reconcile(file_asset_map, clients)
    assert result.assets_to_update == []
    assert result.latest_versions == {}


def test_assets_without_a_client_are_excluded() -> None:
    result = reconcile({"a.html": [item(JSDELIVR, "foo", "1.0.0")]}, {})
    assert result.assets_to_update == []


def test_ignore_entries_skip_packages_or_versions() -> None:
    file_asset_map = {
        "a.html": [
            item(CDNJS, "foo", "1.0.0"),
            item(CDNJS, "bar", "1.0.0"),
            item(CDNJS, "baz", "1.0.0"),
        ],
    }
    clients = {CDNJS: FakeCdnClient({"foo": "2.0.0", "bar": "2.0.0", "baz": "2.0.0"})}
    ignore = [
        IgnoreAsset(CDNJS, "foo"),
        IgnoreAsset(CDNJS, "bar", "2.0.0"),
        IgnoreAsset(CDNJS, "baz", "1.5.0"),
        IgnoreAsset(JSDELIVR, "baz"),
    ]
    result = reconcile(file_asset_map, clients, ignore)
    assert result.assets_to_update == [Asset(CDNJS, "baz")]
