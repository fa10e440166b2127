"""Rewrite stale asset references and commit them to an update branch."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

from .commits import generate_commit_message
from .config import DEFAULT_BRANCH_PREFIX, UpdateOptions
from .git import Git, GitCommandError
from .models import AssetVersion, AssetVersionItem, CdnFile
from .utils import version_key

logger = logging.getLogger("update_static_assets.apply")


@dataclass
class PatchResult:
    """Files rewritten for one asset update."""

    updated_files: List[str] = field(default_factory=list)
    lowest_version: Optional[str] = None

    @property
    def files_updated(self) -> int:
        return len(self.updated_files)


def _read_text(path: str) -> str:
    with open(path, encoding="utf-8", newline="") as handle:
        return handle.read()


def _write_text(path: str, content: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as handle:
        handle.write(content)


def patch_files(
    file_asset_map: Mapping[str, Sequence[AssetVersionItem]],
    asset_update: AssetVersion,
    cdn_files: Sequence[CdnFile],
) -> PatchResult:
    """Point stale references to ``asset_update`` at the new CDN files."""
    latest_files: Dict[str, CdnFile] = {}
    for cdn_file in cdn_files:
        latest_files.setdefault(cdn_file.file_name, cdn_file)

    result = PatchResult()
    for path, items in file_asset_map.items():
        stale = [
            item
            for item in items
            if item.cdn == asset_update.cdn
            and item.name == asset_update.name
            and item.version != asset_update.version
        ]
        if not stale:
            continue

        content = _read_text(path)
        dirty = False
        for item in stale:
            latest = latest_files.get(item.file_name)
            if latest is None or item.url not in content:
                continue
            content = content.replace(item.url, latest.url, 1)
            if item.integrity:
                content = content.replace(item.integrity, latest.integrity or "", 1)
            dirty = True
            if result.lowest_version is None or version_key(item.version) < version_key(
                result.lowest_version
            ):
                result.lowest_version = item.version

        if dirty:
            _write_text(path, content)
            result.updated_files.append(path)
            logger.debug("Updated %s in %s", asset_update.name, path)
    return result


def branch_name(prefix: Optional[str], asset: AssetVersion) -> str:
    return f"{prefix or DEFAULT_BRANCH_PREFIX}/{asset.name}/{asset.version}".lower()


class AssetUpdateApplier:
    """Applies a single asset update to the working tree and commits it."""

    def __init__(self, options: UpdateOptions, git: Git) -> None:
        self.options = options
        self.git = git

    def apply(
        self,
        base_branch: str,
        file_asset_map: Mapping[str, Sequence[AssetVersionItem]],
        asset_update: AssetVersion,
        cdn_files: Sequence[CdnFile],
    ) -> Optional[str]:
        """Patch, branch, commit and push; return the new branch name.

        Returns ``None`` when no file changed or the branch already exists on
        the remote.
        """
        logger.info("Updating %s to %s...", asset_update.name, asset_update.version)

        patched = patch_files(file_asset_map, asset_update, cdn_files)
        if patched.files_updated < 1:
            logger.info("No files reference a replaceable version of %s", asset_update.name)
            return None

        logger.info(
            "Updated %s version to %s in %d file(s).",
            asset_update.name,
            asset_update.version,
            patched.files_updated,
        )

        options = self.options
        branch = branch_name(options.branch_prefix, asset_update)
        commit_message = options.commit_message or generate_commit_message(
            asset_update.name,
            patched.lowest_version or "0.0.0",
            asset_update.version,
        )

        if options.user_name:
            self.git.run(["config", "user.name", options.user_name])
            logger.info("Updated git user name to '%s'", options.user_name)

        if options.user_email:
            self.git.run(["config", "user.email", options.user_email])
            logger.info("Updated git user email to '%s'", options.user_email)

        if options.repo:
            self.git.run(
                ["remote", "set-url", "origin", f"{options.server_url}/{options.repo}.git"]
            )
            self.git.run(["fetch", "origin"], ignore_errors=True)

        logger.debug("Base branch: %s", base_branch)
        logger.debug("Branch: %s", branch)
        logger.debug("Commit message: %s", commit_message)

        branch_exists = self.git.run(
            ["rev-parse", "--verify", "--quiet", f"remotes/origin/{branch}"],
            ignore_errors=True,
        )
        if branch_exists:
            logger.info("The %s branch already exists", branch)
            self.git.run(["checkout", "--", *patched.updated_files], ignore_errors=True)
            return None

        self.git.run(["checkout", "-B", branch, base_branch], ignore_errors=True)
        current = self.git.current_branch()
        if current != branch:
            raise GitCommandError(
                ["checkout", "-B", branch, base_branch],
                f"expected to be on branch {branch} but HEAD is {current}",
            )
        logger.info("Created git branch %s", branch)

        self.git.run(["add", "."])
        logger.info("Staged git commit for '%s' update", asset_update.name)

        self.git.run(["commit", "-m", commit_message])
        sha = self.git.run(["log", "--format=%H", "-n", "1"])
        logger.info("Committed %s update to git (%s)", asset_update.name, sha[:7])

        if not options.dry_run and options.repo:
            self.git.run(["push", "-u", "origin", branch], ignore_errors=True)
            logger.info("Pushed changes to repository (%s)", options.repo)

        return branch
