"""Logging setup.

Log output goes to stderr so stdout only ever carries the version. The
threshold comes from ``GITLAB_CI_SEMVER_LABELS_LOG`` and defaults to ERROR.
"""

from __future__ import annotations

import logging

TRACE = 5
LOG_ENV = "GITLAB_CI_SEMVER_LABELS_LOG"
DEFAULT_LEVEL = "ERROR"

logging.addLevelName(TRACE, "TRACE")

_handler: logging.Handler | None = None


def parse_level(name: str | None) -> int:
    """Map a level name (TRACE, DEBUG, WARNING, ERROR, ...) to its number.

    Unknown or empty names fall back to ERROR.
    """
    level = logging.getLevelName((name or DEFAULT_LEVEL).strip().upper())
    return level if isinstance(level, int) else logging.ERROR


def configure_logging(level_name: str | None) -> None:
    """Attach a stderr handler to the package logger at the given threshold."""
    global _handler
    logger = logging.getLogger("gitlab_ci_semver_labels")
    if _handler is not None:
        logger.removeHandler(_handler)
    # StreamHandler binds sys.stderr as it is at construction time.
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.addHandler(_handler)
    logger.setLevel(parse_level(level_name))
