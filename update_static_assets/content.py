"""Markup parsing and CDN asset discovery."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple, Union
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag

from .models import AssetVersionItem, CdnProvider

logger = logging.getLogger("update_static_assets.content")

CDN_PREFIXES: Sequence[Tuple[str, CdnProvider]] = (
    ("https://cdnjs.cloudflare.com", CdnProvider.CDNJS),
    ("https://cdn.jsdelivr.net", CdnProvider.JSDELIVR),
)


def match_provider(url: str) -> Optional[CdnProvider]:
    """Return the CDN serving ``url``; the first matching prefix wins."""
    for prefix, provider in CDN_PREFIXES:
        if url.startswith(prefix):
            return provider
    return None


def _parse_cdnjs(url: str, segments: List[str], integrity: Optional[str]):
    # /ajax/libs/<name>/<version>/<path...>
    if len(segments) < 4:
        return None
    return AssetVersionItem(
        cdn=CdnProvider.CDNJS,
        name=segments[2],
        version=segments[3],
        url=url,
        integrity=integrity,
        file_name="/".join(segments[4:]),
    )


def _parse_jsdelivr(url: str, segments: List[str], integrity: Optional[str]):
    # /npm/<name>@<version>/<path...>
    if len(segments) < 2:
        return None
    package = segments[1].split("@")
    if len(package) != 2:
        return None
    name, version = package
    return AssetVersionItem(
        cdn=CdnProvider.JSDELIVR,
        name=name,
        version=version,
        url=url,
        integrity=integrity,
        file_name="/" + "/".join(segments[2:]),
    )


_PARSERS = {
    CdnProvider.CDNJS: _parse_cdnjs,
    CdnProvider.JSDELIVR: _parse_jsdelivr,
}


def parse_asset_url(url: str, integrity: Optional[str] = None) -> Optional[AssetVersionItem]:
    """Decompose a CDN URL into package name, version and file path."""
    provider = match_provider(url)
    if provider is None:
        return None
    segments = urlparse(url).path[1:].split("/")
    return _PARSERS[provider](url, segments, integrity)


def _attribute(element: Tag, name: str) -> Optional[str]:
    value = element.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return value or None


def _is_stylesheet(link: Tag) -> bool:
    rel = link.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return any(token.lower() == "stylesheet" for token in rel)


def iter_assets(html: str) -> Iterator[AssetVersionItem]:
    """Yield CDN assets referenced by ``<script>`` and stylesheet ``<link>`` tags."""
    soup = BeautifulSoup(html, "html.parser")
    candidates: List[Tuple[str, Tag]] = []
    for script in soup.find_all("script"):
        src = _attribute(script, "src")
        if src:
            candidates.append((src, script))
    for link in soup.find_all("link"):
        href = _attribute(link, "href")
        if href and _is_stylesheet(link):
            candidates.append((href, link))

    for url, element in candidates:
        asset = parse_asset_url(url, _attribute(element, "integrity"))
        if asset:
            yield asset


def extract_assets(path: Union[str, Path]) -> List[AssetVersionItem]:
    """Find the CDN assets referenced by a markup file.

    Unreadable or unparseable files yield no assets rather than an error.
    """
    try:
        with open(path, encoding="utf-8", newline="") as handle:
            html = handle.read()
        return list(iter_assets(html))
    except Exception as exc:  # noqa: BLE001
        logger.debug("Failed to find assets in '%s': %s", path, exc)
        return []
