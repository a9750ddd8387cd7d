"""Shared test fixtures."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest

CI_VARIABLES = (
    "CI_MERGE_REQUEST_LABELS",
    "CI_COMMIT_MESSAGE",
    "CI_PROJECT_ID",
    "CI_SERVER_URL",
    "GITLAB_TOKEN",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the CI variables of the machine running the tests out of the way."""
    for name in CI_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    for name in list(os.environ):
        if name.startswith("GITLAB_CI_SEMVER_LABELS_"):
            monkeypatch.delenv(name)


def _run_git(repo: Path, *args: str, date: str | None = None) -> str:
    env = dict(os.environ)
    env.update(
        GIT_AUTHOR_NAME="Test",
        GIT_AUTHOR_EMAIL="test@example.com",
        GIT_COMMITTER_NAME="Test",
        GIT_COMMITTER_EMAIL="test@example.com",
    )
    if date is not None:
        env.update(GIT_AUTHOR_DATE=date, GIT_COMMITTER_DATE=date)
    result = subprocess.run(
        [
            "git",
            "-c",
            "commit.gpgsign=false",
            "-c",
            "tag.gpgsign=false",
            "-c",
            "init.defaultBranch=main",
            *args,
        ],
        cwd=repo,
        env=env,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


@pytest.fixture
def make_repo(tmp_path: Path) -> Callable[[str], Path]:
    """Factory for empty git repositories under tmp_path."""

    def factory(name: str = "repo") -> Path:
        repo = tmp_path / name
        repo.mkdir()
        _run_git(repo, "init", "--quiet")
        return repo

    return factory


@pytest.fixture
def commit() -> Callable[..., str]:
    """Create an empty commit at a fixed date and return its hash.

    With ``encoding`` the message is stored in that encoding, the way git
    does with ``i18n.commitEncoding``.
    """

    def factory(
        repo: Path, date: str, message: str = "commit", encoding: str | None = None
    ) -> str:
        if encoding is None:
            _run_git(
                repo, "commit", "--allow-empty", "--quiet", "-m", message, date=date
            )
        else:
            message_file = repo / ".git" / "COMMIT_MSG"
            message_file.write_bytes(message.encode(encoding))
            _run_git(
                repo,
                "-c",
                f"i18n.commitEncoding={encoding}",
                "commit",
                "--allow-empty",
                "--quiet",
                "-F",
                str(message_file),
                date=date,
            )
        return _run_git(repo, "rev-parse", "HEAD")

    return factory


@pytest.fixture
def tag() -> Callable[..., None]:
    """Tag HEAD, lightweight by default or annotated when a date is given."""

    def factory(repo: Path, name: str, annotated_at: str | None = None) -> None:
        if annotated_at is None:
            _run_git(repo, "tag", name)
        else:
            _run_git(repo, "tag", "-a", name, "-m", name, date=annotated_at)

    return factory
