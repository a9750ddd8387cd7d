"""Map merge request labels to a bump kind."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .errors import MultipleSemverLabelsError
from .models import BumpKind, LabelRegexSet

logger = logging.getLogger(__name__)


def classify(labels: Iterable[str], regexps: LabelRegexSet) -> tuple[BumpKind, bool]:
    """Decide the bump kind for a set of labels.

    A label may match several patterns. At most one of initial, major,
    minor and patch may be triggered across all labels; the prerelease
    pattern only sets the returned modifier.

    Returns:
        Tuple of (bump kind, prerelease modifier). The kind is NONE when
        no primary pattern matched.

    Raises:
        MultipleSemverLabelsError: If more than one primary kind matched.
    """
    primary = {
        BumpKind.INITIAL: regexps.initial,
        BumpKind.MAJOR: regexps.major,
        BumpKind.MINOR: regexps.minor,
        BumpKind.PATCH: regexps.patch,
    }

    matched: set[BumpKind] = set()
    prerelease = False
    for label in labels:
        if regexps.prerelease.search(label):
            logger.debug("Label %r: prerelease", label)
            prerelease = True
        for kind, pattern in primary.items():
            if pattern.search(label):
                logger.debug("Label %r: %s", label, kind.value)
                matched.add(kind)

    if len(matched) > 1:
        raise MultipleSemverLabelsError()
    kind = matched.pop() if matched else BumpKind.NONE
    return kind, prerelease
