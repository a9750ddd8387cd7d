"""Tests for gitlab_ci_semver_labels.versions."""

from __future__ import annotations

import pytest

from gitlab_ci_semver_labels.errors import InvalidSemverError
from gitlab_ci_semver_labels.versions import (
    bump_major,
    bump_minor,
    bump_patch,
    bump_prerelease,
    current,
    increment_counter,
    is_valid,
    parse_version,
)


class TestParseVersion:
    def test_full_semver(self) -> None:
        v = parse_version("1.2.3-4+build.5")
        assert (v.major, v.minor, v.patch) == (1, 2, 3)
        assert v.prerelease == "4"
        assert v.build == "build.5"

    def test_v_prefix(self) -> None:
        v = parse_version("v2.0.1")
        assert (v.major, v.minor, v.patch) == (2, 0, 1)

    @pytest.mark.parametrize("text", ["", "1.2", "1", "latest", "1.2.3.4", "01.2.3"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(InvalidSemverError, match="is not a valid semver"):
            parse_version(text)


class TestIsValid:
    def test_valid(self) -> None:
        assert is_valid("1.2.3")
        assert is_valid("v1.2.3-rc.1+abc")

    def test_invalid(self) -> None:
        assert not is_valid("release-1")
        assert not is_valid("1.2")
        assert not is_valid("")


class TestIncrementCounter:
    @pytest.mark.parametrize(
        ("prerelease", "expected"),
        [(None, "1"), ("", "1"), ("0", "1"), ("7", "8"), ("alpha", "1"), ("rc.1", "1")],
    )
    def test_increment(self, prerelease: str | None, expected: str) -> None:
        assert increment_counter(prerelease) == expected


class TestCurrent:
    def test_strips_v_prefix(self) -> None:
        assert current("v1.2.3") == "1.2.3"

    def test_keeps_prerelease_and_build(self) -> None:
        assert current("1.2.3-4+b1") == "1.2.3-4+b1"

    def test_stable(self) -> None:
        once = current("v3.0.0-rc.2")
        assert current(once) == once

    def test_invalid(self) -> None:
        with pytest.raises(InvalidSemverError):
            current("not-a-version")


class TestBumpPatch:
    def test_bump(self) -> None:
        assert bump_patch("1.2.3") == "1.2.4"

    def test_clears_prerelease_and_build(self) -> None:
        assert bump_patch("1.2.3-4+b1") == "1.2.4"

    def test_with_prerelease_counter(self) -> None:
        assert bump_patch("1.2.3", prerelease=True) == "1.2.4-1"

    def test_with_prerelease_continues_counter(self) -> None:
        assert bump_patch("v1.2.3-4", prerelease=True) == "1.2.4-5"


class TestBumpMinor:
    def test_bump(self) -> None:
        assert bump_minor("1.2.3") == "1.3.0"

    def test_with_prerelease(self) -> None:
        assert bump_minor("1.2.3-4", prerelease=True) == "1.3.0-5"

    def test_non_numeric_prerelease_restarts(self) -> None:
        assert bump_minor("1.2.3-beta", prerelease=True) == "1.3.0-1"


class TestBumpMajor:
    def test_bump(self) -> None:
        assert bump_major("1.2.3+build") == "2.0.0"

    def test_with_prerelease(self) -> None:
        assert bump_major("0.9.9", prerelease=True) == "1.0.0-1"

    def test_invalid(self) -> None:
        with pytest.raises(InvalidSemverError):
            bump_major("1.x")


class TestBumpPrerelease:
    def test_without_prerelease(self) -> None:
        assert bump_prerelease("1.2.3") == "1.2.3-1"

    def test_increments_counter(self) -> None:
        assert bump_prerelease("1.2.3-41") == "1.2.3-42"

    def test_keeps_build(self) -> None:
        assert bump_prerelease("v1.2.3-7+meta") == "1.2.3-8+meta"

    def test_dotted_prerelease_restarts(self) -> None:
        assert bump_prerelease("1.2.3-rc.1") == "1.2.3-1"
