"""Version parsing and bumping utilities.

Wraps the semver package with the tool's conventions:

- a leading ``v`` is accepted on input and dropped on output;
- prereleases are a plain counter, so bumping ``1.2.3-4`` as a prerelease
  gives ``1.2.3-5`` and any non-numeric prerelease counts as 0.
"""

from __future__ import annotations

import logging

import semver

from .errors import BadPrereleaseError, InvalidSemverError
from .log import TRACE

logger = logging.getLogger(__name__)


def parse_version(version_str: str) -> semver.Version:
    """Parse a version string into a semver.Version object.

    Raises:
        InvalidSemverError: If the string is not a semver 2.0.0 version.
    """
    text = version_str[1:] if version_str.startswith("v") else version_str
    try:
        return semver.Version.parse(text)
    except (ValueError, TypeError) as exc:
        raise InvalidSemverError(f"{version_str!r} is not a valid semver") from exc


def is_valid(version_str: str) -> bool:
    try:
        parse_version(version_str)
    except InvalidSemverError:
        return False
    return True


def increment_counter(prerelease: str | None) -> str:
    """Treat a prerelease as a base-10 counter and return the next value.

    Examples:
        None → "1"
        "7" → "8"
        "alpha" → "1"
    """
    try:
        number = int(prerelease or "")
    except ValueError:
        number = 0
    return str(number + 1)


def _with_prerelease(version: semver.Version, prerelease: str) -> str:
    try:
        return str(semver.Version.parse(str(version.replace(prerelease=prerelease))))
    except (ValueError, TypeError) as exc:
        raise BadPrereleaseError(f"cannot bump semver: {exc}") from exc


def current(version_str: str) -> str:
    """Return the canonical form of a version ("v1.2.3" → "1.2.3")."""
    logger.log(TRACE, "current(version=%s)", version_str)
    return str(parse_version(version_str))


def bump_patch(version_str: str, prerelease: bool = False) -> str:
    """Increment the patch version.

    Examples:
        "1.2.3" → "1.2.4"
        "1.2.3-4", prerelease → "1.2.4-5"
    """
    logger.log(TRACE, "bump_patch(version=%s, prerelease=%s)", version_str, prerelease)
    old = parse_version(version_str)
    new = old.bump_patch()
    if not prerelease:
        return str(new)
    return _with_prerelease(new, increment_counter(old.prerelease))


def bump_minor(version_str: str, prerelease: bool = False) -> str:
    """Increment the minor version and reset patch ("1.2.3" → "1.3.0")."""
    logger.log(TRACE, "bump_minor(version=%s, prerelease=%s)", version_str, prerelease)
    old = parse_version(version_str)
    new = old.bump_minor()
    if not prerelease:
        return str(new)
    return _with_prerelease(new, increment_counter(old.prerelease))


def bump_major(version_str: str, prerelease: bool = False) -> str:
    """Increment the major version and reset minor and patch ("1.2.3" → "2.0.0")."""
    logger.log(TRACE, "bump_major(version=%s, prerelease=%s)", version_str, prerelease)
    old = parse_version(version_str)
    new = old.bump_major()
    if not prerelease:
        return str(new)
    return _with_prerelease(new, increment_counter(old.prerelease))


def bump_prerelease(version_str: str) -> str:
    """Increment the prerelease counter, keeping major.minor.patch.

    Build metadata is kept as is.

    Examples:
        "1.2.3" → "1.2.3-1"
        "1.2.3-4" → "1.2.3-5"
        "1.2.3-rc" → "1.2.3-1"
    """
    logger.log(TRACE, "bump_prerelease(version=%s)", version_str)
    old = parse_version(version_str)
    return _with_prerelease(old, increment_counter(old.prerelease))

