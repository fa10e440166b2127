"""Thin wrapper for running the git command-line tool against a checkout."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Sequence, Union

logger = logging.getLogger("update_static_assets.git")


class GitCommandError(RuntimeError):
    """Raised when a git invocation that must succeed fails."""

    def __init__(self, args: Sequence[str], message: str) -> None:
        self.git_args = list(args)
        super().__init__(f"The command 'git {' '.join(args)}' failed: {message}")


class Git:
    """Runs ``git`` with the repository as the working directory."""

    def __init__(self, repo_path: Union[str, Path]) -> None:
        self.repo_path = Path(repo_path)

    def run(self, args: Sequence[str], ignore_errors: bool = False) -> str:
        """Run ``git <args>`` and return its standard output.

        Unless ``ignore_errors`` is set, a non-zero exit status or any output
        on standard error raises :class:`GitCommandError`.
        """
        try:
            completed = subprocess.run(
                ["git", *args],
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise GitCommandError(args, str(exc)) from exc

        stdout = completed.stdout or ""
        stderr = completed.stderr or ""

        if not ignore_errors:
            if completed.returncode != 0:
                raise GitCommandError(
                    args,
                    stderr.strip() or f"exit status {completed.returncode}",
                )
            if stderr:
                raise GitCommandError(args, stderr.strip())

        logger.debug("git std-out: %s", stdout)
        if stderr:
            logger.debug("git std-err: %s", stderr)

        return stdout.rstrip()

    def current_branch(self) -> str:
        return self.run(["rev-parse", "--abbrev-ref", "HEAD"])
