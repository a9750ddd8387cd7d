"""Data models for gitlab-ci-semver-labels.

These Pydantic models are the immutable records passed between the
components of a single run: tag references read from git, the label
regex set, and the resolved parameters of the invocation.
"""

from __future__ import annotations

import enum
from datetime import datetime
from re import Pattern

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_COMMIT_MESSAGE_REGEXP = r"(?s)(?:^|\n)See merge request (?:\w[\w.+/-]*)?!(\d+)"
DEFAULT_INITIAL_LABEL_REGEXP = r"(?i)initial.release|semver(.|::)initial"
DEFAULT_MAJOR_LABEL_REGEXP = r"(?i)(major|breaking).release|semver(.|::)(major|breaking)"
DEFAULT_MINOR_LABEL_REGEXP = r"(?i)(minor|feature).release|semver(.|::)(minor|feature)"
DEFAULT_PATCH_LABEL_REGEXP = r"(?i)(patch|fix).release|semver(.|::)(patch|fix)"
DEFAULT_PRERELEASE_LABEL_REGEXP = r"(?i)pre.?release"


class BumpKind(str, enum.Enum):
    """Which semver component a run changes."""

    NONE = "none"
    INITIAL = "initial"
    PRERELEASE = "prerelease"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"


class TagKind(str, enum.Enum):
    LIGHTWEIGHT = "lightweight"
    ANNOTATED = "annotated"


class TagReference(BaseModel):
    """A tag ref as listed by git.

    Attributes:
        name: Short name, without the ``refs/tags/`` prefix.
        hash: Object id the ref points to (a commit or a tag object).
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    hash: str


class ResolvedTag(BaseModel):
    """A tag reference with the timestamp used for ordering.

    Attributes:
        name: Short name of the tag.
        timestamp: Tagger time for annotated tags, author time of the
                   commit for lightweight tags.
        kind: Whether the ref points to a tag object or directly to a commit.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    timestamp: datetime
    kind: TagKind


class LabelRegexSet(BaseModel):
    """The five label patterns, compiled once per invocation."""

    model_config = ConfigDict(frozen=True, validate_default=True)

    initial: Pattern[str] = DEFAULT_INITIAL_LABEL_REGEXP  # type: ignore[assignment]
    major: Pattern[str] = DEFAULT_MAJOR_LABEL_REGEXP  # type: ignore[assignment]
    minor: Pattern[str] = DEFAULT_MINOR_LABEL_REGEXP  # type: ignore[assignment]
    patch: Pattern[str] = DEFAULT_PATCH_LABEL_REGEXP  # type: ignore[assignment]
    prerelease: Pattern[str] = DEFAULT_PRERELEASE_LABEL_REGEXP  # type: ignore[assignment]


class SemverLabelsParams(BaseModel):
    """Resolved inputs of one invocation.

    Attributes:
        current: Print the current version instead of bumping.
        bump: Explicitly requested bump, or None to decide from labels.
        prerelease: Compose a prerelease counter onto the bump.
        fail: Fail when no label matched in label-driven mode.
    """

    model_config = ConfigDict(frozen=True, validate_default=True)

    work_tree: str = "."
    remote_name: str = "origin"
    fetch_tags: bool = True
    gitlab_token_env: str = "GITLAB_TOKEN"
    gitlab_url: str = "https://gitlab.com"
    project: str = ""
    dotenv_file: str = ""
    dotenv_var: str = "VERSION"

    current: bool = False
    bump: BumpKind | None = None
    initial_version: str = "0.0.0"
    prerelease: bool = False
    fail: bool = False
    commit_message_regexp: Pattern[str] = DEFAULT_COMMIT_MESSAGE_REGEXP  # type: ignore[assignment]
    label_regexps: LabelRegexSet = Field(default_factory=LabelRegexSet)
