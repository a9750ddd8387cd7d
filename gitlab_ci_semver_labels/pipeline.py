"""Decision pipeline: last tag → bump kind → next version → output.

The kind of bump comes from one of three places:
1. ``current``: no bump, print the canonical form of the last tag
2. an explicit bump requested on the command line
3. the labels of the merge request that produced the current commit
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from . import versions
from .errors import AlreadyInitializedError, NoLabelMatchedError, NoTagFoundError
from .labels import classify
from .merge_request import resolve_labels
from .models import BumpKind, SemverLabelsParams
from .output import emit
from .tags import find_last_tag

logger = logging.getLogger(__name__)


def bump_version(
    kind: BumpKind, tag: str, prerelease: bool, initial_version: str
) -> str:
    """Compute the next version for a bump kind.

    Args:
        kind: Bump to apply; must not be NONE.
        tag: Last tag, or "" if the repository has none yet.
        prerelease: Compose a prerelease counter onto the bump.
        initial_version: Version used for an initial release.

    Raises:
        AlreadyInitializedError: If an initial release is requested but a tag exists.
        NoTagFoundError: If any other bump is requested without a tag.
    """
    logger.debug("Bump: %s (prerelease=%s)", kind.value, prerelease)
    if kind is BumpKind.INITIAL:
        if tag:
            raise AlreadyInitializedError()
        if prerelease:
            return versions.bump_prerelease(initial_version)
        return initial_version

    if not tag:
        raise NoTagFoundError()
    if kind is BumpKind.PRERELEASE:
        return versions.bump_prerelease(tag)
    if kind is BumpKind.PATCH:
        return versions.bump_patch(tag, prerelease)
    if kind is BumpKind.MINOR:
        return versions.bump_minor(tag, prerelease)
    if kind is BumpKind.MAJOR:
        return versions.bump_major(tag, prerelease)
    raise ValueError(f"Cannot bump version for {kind}")


def decide_version(
    params: SemverLabelsParams, tag: str, env: Mapping[str, str]
) -> str:
    """Return the version to publish, or "" when there is nothing to publish."""
    if params.current:
        return versions.current(tag) if tag else ""

    if params.bump is not None:
        return bump_version(params.bump, tag, params.prerelease, params.initial_version)

    labels = resolve_labels(
        env,
        params.commit_message_regexp,
        url=params.gitlab_url,
        token=env.get(params.gitlab_token_env, ""),
        project=params.project,
    )
    if labels is None:
        return ""
    logger.debug("Labels: %s", labels)

    kind, prerelease = classify(labels, params.label_regexps)
    if kind is BumpKind.NONE:
        if params.fail:
            raise NoLabelMatchedError()
        logger.warning("No semver label matched")
        return ""
    return bump_version(
        kind, tag, prerelease or params.prerelease, params.initial_version
    )


def run_semver_labels(
    params: SemverLabelsParams, env: Mapping[str, str] | None = None
) -> str:
    """Execute one invocation end to end and return the emitted version.

    Args:
        params: Resolved command-line/config parameters.
        env: Environment to read CI variables and the token from.
             Defaults to ``os.environ``.
    """
    env = os.environ if env is None else env
    tag = find_last_tag(
        params.work_tree,
        params.remote_name,
        token=env.get(params.gitlab_token_env, ""),
        fetch=params.fetch_tags,
    )
    version = decide_version(params, tag, env)
    if version:
        emit(version, params.dotenv_file, params.dotenv_var)
    return version
