"""Locate the merge request behind the current pipeline and read its labels.

Inside a merge request pipeline GitLab exposes the labels directly in
``CI_MERGE_REQUEST_LABELS``. After a merge, the iid is recovered from the
"See merge request group/project!123" trailer of the merge commit and the
labels are fetched from the GitLab API.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping

import gitlab
import requests

from .errors import GitLabApiError

logger = logging.getLogger(__name__)


def merge_request_iid(commit_message: str, pattern: re.Pattern[str]) -> int | None:
    """Extract the merge request iid from a commit message.

    Returns None when the pattern does not match or has no capture group.

    Raises:
        GitLabApiError: If the captured text is not a number.
    """
    match = pattern.search(commit_message)
    if match is None or not match.re.groups or match.group(1) is None:
        return None
    try:
        return int(match.group(1))
    except ValueError as exc:
        raise GitLabApiError(
            f"merge request number is invalid: {match.group(1)!r}"
        ) from exc


def fetch_labels(url: str, token: str, project: str, iid: int) -> list[str]:
    """Fetch the labels of merge request ``iid`` in ``project``.

    Raises:
        GitLabApiError: If the client cannot be built or the request fails.
    """
    if not project:
        raise GitLabApiError(
            "failed to get information about merge request: project is not set"
        )
    logger.debug("GitLab URL: %s", url)
    logger.debug("Project: %s", project)
    try:
        gl = gitlab.Gitlab(url, private_token=token or None)
        mr = gl.projects.get(project, lazy=True).mergerequests.get(iid)
    except (gitlab.exceptions.GitlabError, requests.RequestException) as exc:
        raise GitLabApiError(
            f"failed to get information about merge request !{iid}: {exc}"
        ) from exc
    logger.debug("Found merge request: !%s", iid)
    return list(mr.labels)


def resolve_labels(
    env: Mapping[str, str],
    pattern: re.Pattern[str],
    url: str,
    token: str,
    project: str,
) -> list[str] | None:
    """Return the labels of the current merge request.

    Args:
        env: Environment variables of the CI job.
        pattern: Regex whose first group captures the iid in a commit message.
        url: GitLab base URL.
        token: GitLab API token; empty for anonymous access.
        project: Project id or path.

    Returns:
        The label list, or None if no merge request could be found.
    """
    mr_labels = env.get("CI_MERGE_REQUEST_LABELS", "")
    if mr_labels:
        return mr_labels.split(",")

    iid = merge_request_iid(env.get("CI_COMMIT_MESSAGE", ""), pattern)
    if iid is None:
        logger.warning("Merge request not found")
        return None
    logger.debug("Merge request: !%s", iid)
    return fetch_labels(url, token, project, iid)
