from __future__ import annotations

import pytest

from update_static_assets.git import Git, GitCommandError

from conftest import requires_git

pytestmark = requires_git


def test_current_branch(git_repo) -> None:
    assert Git(git_repo).current_branch() == "main"


def test_run_returns_stdout_without_trailing_whitespace(git_repo) -> None:
    output = Git(git_repo).run(["log", "--format=%s", "-n", "1"])
    assert output == "Initial commit"


def test_failures_raise_with_the_arguments(git_repo) -> None:
    with pytest.raises(GitCommandError) as excinfo:
        Git(git_repo).run(["checkout", "does-not-exist"])
    assert "git checkout does-not-exist" in str(excinfo.value)
    assert excinfo.value.git_args == ["checkout", "does-not-exist"]


def test_failures_can_be_tolerated(git_repo) -> None:
    output = Git(git_repo).run(
        ["rev-parse", "--verify", "--quiet", "remotes/origin/missing"],
        ignore_errors=True,
    )
    assert output == ""


def test_stderr_output_is_an_error_unless_tolerated(git_repo) -> None:
    git = Git(git_repo)
    with pytest.raises(GitCommandError):
        git.run(["checkout", "-b", "feature"])
    assert git.current_branch() == "feature"
    git.run(["checkout", "main"], ignore_errors=True)
    assert git.current_branch() == "main"
