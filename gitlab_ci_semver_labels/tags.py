"""Find the most recent semver tag of a repository.

Tags are ordered by when they were made, not by version: an annotated tag
counts from its tagger time, a lightweight tag from the author time of the
commit it points to.
"""

from __future__ import annotations

import logging

from .models import ResolvedTag, TagKind, TagReference
from .repository import Repository
from .versions import is_valid

logger = logging.getLogger(__name__)


def resolve_tag(repo: Repository, ref: TagReference) -> ResolvedTag | None:
    """Attach a timestamp to a tag ref.

    Returns None when the ref points to neither a tag object nor a commit
    (e.g., a tagged tree or blob); such tags are ignored.
    """
    when = repo.annotated_tag_time(ref.hash)
    if when is not None:
        return ResolvedTag(name=ref.name, timestamp=when, kind=TagKind.ANNOTATED)
    when = repo.commit_time(ref.hash)
    if when is not None:
        return ResolvedTag(name=ref.name, timestamp=when, kind=TagKind.LIGHTWEIGHT)
    logger.debug("Ignoring tag %s: not a commit or an annotated tag", ref.name)
    return None


def latest_tag(tags: list[ResolvedTag]) -> ResolvedTag | None:
    """Pick the tag with the greatest timestamp; the first one wins on ties."""
    latest: ResolvedTag | None = None
    for tag in tags:
        if latest is None or tag.timestamp > latest.timestamp:
            latest = tag
    return latest


def find_last_tag(path: str, remote: str, token: str = "", fetch: bool = True) -> str:
    """Return the short name of the most recent semver tag, or "" if none.

    Args:
        path: Repository work tree.
        remote: Remote to fetch tags from.
        token: GitLab token for the fetch; empty for anonymous access.
        fetch: Whether to fetch tags before scanning.

    Raises:
        RepoOpenError: If ``path`` is not a git repository.
        FetchError: If fetching tags failed.
    """
    logger.debug("Find last tag in %s (remote=%s, fetch=%s)", path, remote, fetch)
    repo = Repository.open(path)

    if fetch:
        logger.debug("Fetch tags from %s", remote)
        repo.fetch_tags(remote, token)

    candidates: list[ResolvedTag] = []
    for ref in repo.tag_refs():
        if not is_valid(ref.name):
            logger.warning("%s is not a valid semver", ref.name)
            continue
        resolved = resolve_tag(repo, ref)
        if resolved is not None:
            candidates.append(resolved)

    latest = latest_tag(candidates)
    logger.debug("Most recent tag: %s", latest.name if latest else "<none>")
    return latest.name if latest else ""
