"""HTTP clients for the CDNs whose assets can be updated."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from .models import CdnFile, CdnProvider

logger = logging.getLogger("update_static_assets.clients")

REQUEST_TIMEOUT = 30
USER_AGENT = "update-static-assets"


def create_session() -> requests.Session:
    session = requests.Session()
    session.headers.update({"Accept": "application/json", "User-Agent": USER_AGENT})
    return session


class CdnClient:
    """Looks up package versions and files published on a CDN."""

    provider: CdnProvider

    def __init__(self, session: Optional[requests.Session] = None) -> None:
        self._session = session or create_session()

    def get_latest_version(self, name: str) -> Optional[str]:
        raise NotImplementedError

    def get_files(self, name: str, version: str) -> List[CdnFile]:
        raise NotImplementedError

    def _get_json(self, url: str) -> Optional[Any]:
        try:
            resp = self._session.get(url, timeout=REQUEST_TIMEOUT)
            resp.raise_for_status()
            return resp.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Request to %s failed: %s", url, exc)
            return None


class CdnjsClient(CdnClient):
    """Client for https://cdnjs.com."""

    provider = CdnProvider.CDNJS

    API_URL = "https://api.cdnjs.com/libraries"
    CDN_URL = "https://cdnjs.cloudflare.com/ajax/libs"

    def get_latest_version(self, name: str) -> Optional[str]:
        payload = self._get_json(f"{self.API_URL}/{name}?fields=version")
        if not isinstance(payload, dict):
            return None
        return payload.get("version") or None

    def get_files(self, name: str, version: str) -> List[CdnFile]:
        payload = self._get_json(
            f"{self.API_URL}/{name}/{version}?fields=name,version,rawFiles,sri"
        )
        if not isinstance(payload, dict):
            return []
        sri: Dict[str, str] = payload.get("sri") or {}
        files = payload.get("rawFiles") or payload.get("files") or []
        return [
            CdnFile(
                url=f"{self.CDN_URL}/{name}/{version}/{file_name}",
                file_name=file_name,
                integrity=sri.get(file_name),
            )
            for file_name in files
        ]


class JsDelivrClient(CdnClient):
    """Client for https://www.jsdelivr.com (npm packages only)."""

    provider = CdnProvider.JSDELIVR

    API_URL = "https://data.jsdelivr.com/v1/package/npm"
    CDN_URL = "https://cdn.jsdelivr.net/npm"

    def get_latest_version(self, name: str) -> Optional[str]:
        payload = self._get_json(f"{self.API_URL}/{name}")
        if not isinstance(payload, dict):
            return None
        tags = payload.get("tags") or {}
        return tags.get("latest") or None

    def get_files(self, name: str, version: str) -> List[CdnFile]:
        payload = self._get_json(f"{self.API_URL}/{name}@{version}/flat")
        if not isinstance(payload, dict):
            return []
        files: List[CdnFile] = []
        for entry in payload.get("files") or []:
            file_name = entry.get("name")
            if not file_name:
                continue
            digest = entry.get("hash")
            files.append(
                CdnFile(
                    url=f"{self.CDN_URL}/{name}@{version}{file_name}",
                    file_name=file_name,
                    integrity=f"sha256-{digest}" if digest else None,
                )
            )
        return files


_CLIENT_TYPES = {
    CdnProvider.CDNJS: CdnjsClient,
    CdnProvider.JSDELIVR: JsDelivrClient,
}


def get_client(
    provider: CdnProvider, session: Optional[requests.Session] = None
) -> Optional[CdnClient]:
    client_type = _CLIENT_TYPES.get(provider)
    return client_type(session) if client_type else None


def default_clients(
    session: Optional[requests.Session] = None,
) -> Dict[CdnProvider, CdnClient]:
    """Create one client per supported CDN, sharing a single HTTP session."""
    session = session or create_session()
    return {provider: get_client(provider, session) for provider in _CLIENT_TYPES}
