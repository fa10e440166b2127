"""Open pull requests for asset update branches via the GitHub REST API."""

from __future__ import annotations

import json
import logging
from typing import Optional

import requests

from .config import UpdateOptions
from .models import AssetVersion, PullRequest
from .utils import split_labels, split_repository

logger = logging.getLogger("update_static_assets.publish")

REQUEST_TIMEOUT = 30


class PullRequestError(RuntimeError):
    """Raised when the pull request API answers with an unusable payload."""


class PullRequestPublisher:
    """Creates (and labels) the pull request for an update branch."""

    def __init__(
        self,
        options: UpdateOptions,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.options = options
        self._session = session

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(
                {
                    "Accept": "application/vnd.github+json",
                    "Authorization": f"Bearer {self.options.access_token}",
                    "User-Agent": "update-static-assets",
                    "X-GitHub-Api-Version": "2022-11-28",
                }
            )
        return self._session

    def build_body(self, asset: AssetVersion) -> str:
        options = self.options
        run_url = f"{options.server_url}/{options.repo}/actions/runs/{options.run_id}"
        return (
            f"Updates {asset.name} to version `{asset.version}`.\n\n"
            f"This pull request was auto-generated by [GitHub Actions]({run_url})."
        )

    def publish(self, base: str, head: str, asset: AssetVersion) -> PullRequest:
        title = f"Update {asset.name} to {asset.version}"

        if self.options.dry_run:
            logger.info("Skipped creating GitHub pull request for branch %s to %s", head, base)
            return PullRequest(number=0, url="")

        owner, repo = split_repository(self.options.repo)
        api_url = self.options.api_url.rstrip("/")
        request = {
            "title": title,
            "head": head,
            "base": base,
            "body": self.build_body(asset),
            "maintainer_can_modify": True,
            "draft": False,
        }

        resp = self.session.post(
            f"{api_url}/repos/{owner}/{repo}/pulls",
            json=request,
            timeout=REQUEST_TIMEOUT,
        )
        resp.raise_for_status()
        try:
            data = resp.json()
            result = PullRequest(number=int(data["number"]), url=str(data["html_url"]))
        except (ValueError, KeyError, TypeError) as exc:
            raise PullRequestError(
                f"Unexpected response creating pull request for branch {head}: {exc!r}"
            ) from exc
        logger.debug("%s", json.dumps(data, indent=2))

        logger.info("Created pull request #%d: %s", result.number, data.get("title", title))
        logger.info("View the pull request at %s", result.url)

        labels = split_labels(self.options.labels)
        if labels:
            try:
                label_resp = self.session.post(
                    f"{api_url}/repos/{owner}/{repo}/issues/{result.number}/labels",
                    json={"labels": labels},
                    timeout=REQUEST_TIMEOUT,
                )
                label_resp.raise_for_status()
            except requests.RequestException as exc:
                logger.error("Failed to apply label(s) to pull request #%d", result.number)
                logger.error("%s", exc)

        return result
