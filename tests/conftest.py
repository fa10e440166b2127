from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Optional

import pytest
import requests

from update_static_assets.models import CdnFile

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


class FakeResponse:
    def __init__(self, payload=None, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Stands in for ``requests.Session``, answering from canned responses."""

    def __init__(self, responses: Optional[Dict[str, object]] = None) -> None:
        self.responses = responses or {}
        self.calls: List[tuple] = []

    def _respond(self, method: str, url: str, **kwargs):
        self.calls.append((method, url, kwargs))
        response = self.responses.get(url)
        if isinstance(response, Exception):
            raise response
        if response is None:
            return FakeResponse({"message": "Not Found"}, status_code=404)
        return response

    def get(self, url: str, **kwargs):
        return self._respond("GET", url, **kwargs)

    def post(self, url: str, **kwargs):
        return self._respond("POST", url, **kwargs)


class FakeCdnClient:
    def __init__(self, latest: Dict[str, str], files: Optional[Dict[tuple, List[CdnFile]]] = None):
        self.latest = latest
        self.files = files or {}
        self.latest_calls: List[str] = []

    def get_latest_version(self, name: str) -> Optional[str]:
        self.latest_calls.append(name)
        return self.latest.get(name)

    def get_files(self, name: str, version: str) -> List[CdnFile]:
        return self.files.get((name, version), [])


def git(cwd: Path, *args: str) -> str:
    completed = subprocess.run(
        ["git", *args], cwd=cwd, capture_output=True, text=True, check=True
    )
    return completed.stdout.strip()


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def git_remote(tmp_path):
    """A bare repository laid out as ``<server>/owner/site.git``."""
    server = tmp_path / "server"
    bare = server / "owner" / "site.git"
    bare.mkdir(parents=True)
    git(bare, "init", "--bare", "--quiet")
    return server, bare


@pytest.fixture
def git_repo(tmp_path, git_remote):
    """A checkout on ``main`` with one commit, pushed to ``git_remote``."""
    _, bare = git_remote
    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, "init", "--quiet")
    git(repo, "symbolic-ref", "HEAD", "refs/heads/main")
    git(repo, "config", "user.name", "Test User")
    git(repo, "config", "user.email", "test@example.com")
    git(repo, "config", "commit.gpgsign", "false")
    (repo / "README.md").write_text("# Site\n", encoding="utf-8")
    git(repo, "add", ".")
    git(repo, "commit", "--quiet", "-m", "Initial commit")
    git(repo, "remote", "add", "origin", bare.as_uri())
    git(repo, "push", "--quiet", "origin", "main")
    return repo


def commit_all(repo: Path, message: str = "Add pages") -> None:
    git(repo, "add", ".")
    git(repo, "commit", "--quiet", "-m", message)
    git(repo, "push", "--quiet", "origin", "main")
