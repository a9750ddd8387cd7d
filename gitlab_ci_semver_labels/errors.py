"""Error kinds raised while deciding the next version.

All of them are click exceptions, so the command line shows them as
``Error: <message>`` on stderr and exits with code 2.
"""

from __future__ import annotations

import click


class SemverLabelsError(click.ClickException):
    """Base class for runtime failures."""

    exit_code = 2


class RepoOpenError(SemverLabelsError):
    """The work tree is not a git repository (or git is unavailable)."""


class FetchError(SemverLabelsError):
    """Fetching tags from the remote failed."""


class InvalidSemverError(SemverLabelsError):
    """A version string that must be parsed is not a valid semver."""


class BadPrereleaseError(SemverLabelsError):
    """A composed prerelease identifier violates the semver grammar."""


class NoTagFoundError(SemverLabelsError):
    def __init__(self) -> None:
        super().__init__("no tag found")


class AlreadyInitializedError(SemverLabelsError):
    def __init__(self) -> None:
        super().__init__("semver is already initialized")


class MultipleSemverLabelsError(SemverLabelsError):
    def __init__(self) -> None:
        super().__init__("more than 1 semver label")


class NoLabelMatchedError(SemverLabelsError):
    def __init__(self) -> None:
        super().__init__("no label matched")


class GitLabApiError(SemverLabelsError):
    """Creating the GitLab client or fetching the merge request failed."""


class OutputError(SemverLabelsError):
    """The dotenv file could not be created or written."""


class InvalidRegexpError(SemverLabelsError):
    """A configured regular expression does not compile."""
