"""Read-only access to a local git repository through the git CLI.

Only the handful of operations tag discovery needs: open, fetch tags,
list tag refs, and read the timestamp of a tag object or a commit.
"""

from __future__ import annotations

import base64
import logging
import os
import subprocess
from datetime import datetime, timedelta, timezone

from .errors import FetchError, RepoOpenError
from .models import TagReference
from .shell import git

logger = logging.getLogger(__name__)

TAGS_PREFIX = "refs/tags/"
TAGS_REFSPEC = "+refs/tags/*:refs/tags/*"


def parse_signature_time(signature: str) -> datetime:
    """Parse the trailing ``<epoch> <tz>`` of an author/tagger header line.

    Example:
        "Jane <jane@example.com> 1700000000 +0100" → 2023-11-14 23:13:20+01:00
    """
    _, epoch, offset = signature.rsplit(" ", 2)
    sign = -1 if offset.startswith("-") else 1
    hours, minutes = int(offset[1:3]), int(offset[3:5])
    tz = timezone(sign * timedelta(hours=hours, minutes=minutes))
    return datetime.fromtimestamp(int(epoch), tz=tz)


def _header_time(raw: str, field: str) -> datetime | None:
    """Find ``field`` in the header of a raw git object and return its time."""
    for line in raw.splitlines():
        if not line:
            break  # end of headers
        if line.startswith(field + " "):
            try:
                return parse_signature_time(line[len(field) + 1 :])
            except ValueError:
                logger.warning("Malformed %s line: %s", field, line)
                return None
    return None


def basic_auth_header(token: str) -> str:
    """HTTP Basic credential GitLab accepts for tokens over git-over-HTTPS."""
    credential = base64.b64encode(f"oauth2:{token}".encode()).decode()
    return f"Authorization: Basic {credential}"


def config_env(settings: dict[str, str]) -> dict[str, str]:
    """One-shot git settings as ``GIT_CONFIG_*`` variables.

    Entries are appended after any the caller's environment already holds,
    so values never show up in the process arguments.
    """
    start = int(os.environ.get("GIT_CONFIG_COUNT") or 0)
    env = {"GIT_CONFIG_COUNT": str(start + len(settings))}
    for index, (key, value) in enumerate(settings.items(), start):
        env[f"GIT_CONFIG_KEY_{index}"] = key
        env[f"GIT_CONFIG_VALUE_{index}"] = value
    return env


class Repository:
    """A git work tree opened with :meth:`open`."""

    def __init__(self, path: str) -> None:
        self.path = path

    @classmethod
    def open(cls, path: str) -> Repository:
        """Check that ``path`` is inside a git repository.

        Raises:
            RepoOpenError: If it is not, or git cannot be run at all.
        """
        try:
            git("rev-parse", "--git-dir", cwd=path)
        except subprocess.CalledProcessError as exc:
            raise RepoOpenError(
                f"cannot open git repository {path}: {exc.stderr.strip()}"
            ) from exc
        except OSError as exc:
            raise RepoOpenError(f"cannot open git repository {path}: {exc}") from exc
        return cls(path)

    def fetch_tags(self, remote: str, token: str = "") -> None:
        """Fetch all tags from ``remote``, overwriting local ones.

        The token, when given, is sent as an extra HTTP header through the
        environment of this command only. It is never written to the
        repository config or passed on the command line.
        """
        env = None
        if token:
            env = config_env({"http.extraHeader": basic_auth_header(token)})
        try:
            git("fetch", "--no-tags", remote, TAGS_REFSPEC, cwd=self.path, env=env)
        except subprocess.CalledProcessError as exc:
            raise FetchError(f"cannot fetch tags: {exc.stderr.strip()}") from exc

    def tag_refs(self) -> list[TagReference]:
        """List tag refs, skipping symbolic ones."""
        out = git(
            "for-each-ref",
            "--format=%(refname)\t%(objectname)\t%(symref)",
            "refs/tags",
            cwd=self.path,
        )
        refs: list[TagReference] = []
        for line in out.splitlines():
            refname, objectname, *rest = line.split("\t")
            if rest and rest[0]:
                logger.debug("Skipping symbolic ref %s", refname)
                continue
            name = refname.removeprefix(TAGS_PREFIX)
            if name:
                refs.append(TagReference(name=name, hash=objectname))
        return refs

    def annotated_tag_time(self, object_hash: str) -> datetime | None:
        """Tagger time of a tag object, or None if the hash is not one.

        A tag object without a tagger line falls back to the author time of
        the commit it points to.
        """
        raw = git("cat-file", "tag", object_hash, cwd=self.path, check=False)
        if not raw:
            return None
        when = _header_time(raw, "tagger")
        if when is None:
            logger.debug("Tag object %s has no tagger, using commit time", object_hash)
            when = self.commit_time(object_hash)
        return when

    def commit_time(self, object_hash: str) -> datetime | None:
        """Author time of a commit, or None if the hash is not one."""
        raw = git("cat-file", "commit", object_hash, cwd=self.path, check=False)
        return _header_time(raw, "author") if raw else None
