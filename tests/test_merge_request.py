"""Tests for gitlab_ci_semver_labels.merge_request."""

from __future__ import annotations

import re
from unittest.mock import MagicMock, patch

import gitlab
import pytest
import requests

from gitlab_ci_semver_labels.errors import GitLabApiError
from gitlab_ci_semver_labels.merge_request import (
    fetch_labels,
    merge_request_iid,
    resolve_labels,
)
from gitlab_ci_semver_labels.models import DEFAULT_COMMIT_MESSAGE_REGEXP

PATTERN = re.compile(DEFAULT_COMMIT_MESSAGE_REGEXP)

MERGE_COMMIT = """\
Merge branch 'feature/x' into 'main'

Add x

See merge request group/sub.group/project!42"""


class TestMergeRequestIid:
    def test_full_reference(self) -> None:
        assert merge_request_iid(MERGE_COMMIT, PATTERN) == 42

    def test_short_reference(self) -> None:
        assert merge_request_iid("See merge request !7", PATTERN) == 7

    def test_not_a_merge_commit(self) -> None:
        assert merge_request_iid("Fix typo", PATTERN) is None
        assert merge_request_iid("", PATTERN) is None

    def test_reference_must_start_a_line(self) -> None:
        assert merge_request_iid("Please See merge request !7", PATTERN) is None

    def test_pattern_without_group(self) -> None:
        assert merge_request_iid("MR 5", re.compile(r"MR \d+")) is None

    def test_group_not_a_number(self) -> None:
        with pytest.raises(GitLabApiError, match="merge request number is invalid"):
            merge_request_iid("MR five", re.compile(r"MR (\w+)"))


class TestFetchLabels:
    @patch("gitlab_ci_semver_labels.merge_request.gitlab.Gitlab")
    def test_returns_labels(self, mock_gitlab: MagicMock) -> None:
        project = mock_gitlab.return_value.projects.get.return_value
        project.mergerequests.get.return_value.labels = ["fix.release", "backend"]

        labels = fetch_labels("https://gitlab.example.com", "tok", "123", 42)

        assert labels == ["fix.release", "backend"]
        mock_gitlab.assert_called_once_with(
            "https://gitlab.example.com", private_token="tok"
        )
        mock_gitlab.return_value.projects.get.assert_called_once_with("123", lazy=True)
        project.mergerequests.get.assert_called_once_with(42)

    @patch("gitlab_ci_semver_labels.merge_request.gitlab.Gitlab")
    def test_anonymous(self, mock_gitlab: MagicMock) -> None:
        fetch_labels("https://gitlab.com", "", "group/project", 1)

        mock_gitlab.assert_called_once_with("https://gitlab.com", private_token=None)

    @patch("gitlab_ci_semver_labels.merge_request.gitlab.Gitlab")
    def test_api_error(self, mock_gitlab: MagicMock) -> None:
        project = mock_gitlab.return_value.projects.get.return_value
        project.mergerequests.get.side_effect = gitlab.exceptions.GitlabGetError(
            "404 Not found", 404
        )

        with pytest.raises(GitLabApiError, match="failed to get information"):
            fetch_labels("https://gitlab.com", "tok", "123", 42)

    @patch("gitlab_ci_semver_labels.merge_request.gitlab.Gitlab")
    def test_connection_error(self, mock_gitlab: MagicMock) -> None:
        project = mock_gitlab.return_value.projects.get.return_value
        project.mergerequests.get.side_effect = requests.ConnectionError("refused")

        with pytest.raises(GitLabApiError):
            fetch_labels("https://gitlab.com", "tok", "123", 42)

    @patch("gitlab_ci_semver_labels.merge_request.gitlab.Gitlab")
    def test_missing_project(self, mock_gitlab: MagicMock) -> None:
        with pytest.raises(GitLabApiError, match="project is not set"):
            fetch_labels("https://gitlab.com", "tok", "", 42)
        mock_gitlab.assert_not_called()


class TestResolveLabels:
    @patch("gitlab_ci_semver_labels.merge_request.fetch_labels")
    def test_labels_from_environment(self, mock_fetch: MagicMock) -> None:
        env = {
            "CI_MERGE_REQUEST_LABELS": "fix.release,backend",
            "CI_COMMIT_MESSAGE": MERGE_COMMIT,
        }

        labels = resolve_labels(env, PATTERN, "https://gitlab.com", "", "1")

        assert labels == ["fix.release", "backend"]
        mock_fetch.assert_not_called()

    @patch("gitlab_ci_semver_labels.merge_request.fetch_labels")
    def test_labels_from_api(self, mock_fetch: MagicMock) -> None:
        mock_fetch.return_value = ["feature.release"]
        env = {"CI_MERGE_REQUEST_LABELS": "", "CI_COMMIT_MESSAGE": MERGE_COMMIT}

        labels = resolve_labels(env, PATTERN, "https://gitlab.com", "tok", "1")

        assert labels == ["feature.release"]
        mock_fetch.assert_called_once_with("https://gitlab.com", "tok", "1", 42)

    @patch("gitlab_ci_semver_labels.merge_request.fetch_labels")
    def test_no_merge_request(self, mock_fetch: MagicMock) -> None:
        labels = resolve_labels(
            {"CI_COMMIT_MESSAGE": "Fix typo"}, PATTERN, "https://gitlab.com", "", "1"
        )

        assert labels is None
        mock_fetch.assert_not_called()
