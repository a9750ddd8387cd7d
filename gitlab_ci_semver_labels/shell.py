"""Git subprocess wrapper.

Every git operation the tool needs goes through :func:`git`, so tests can
patch a single seam instead of shelling out.
"""

from __future__ import annotations

import os
import subprocess


def git(
    *args: str,
    cwd: str | None = None,
    check: bool = True,
    env: dict[str, str] | None = None,
) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "for-each-ref", "refs/tags").
        cwd: Directory to run git in. Defaults to the current directory.
        check: If True (default), raise on non-zero exit. Set to False
               for commands that may legitimately fail (e.g., reading an
               object as the wrong type).
        env: Extra environment variables for this command only. Credentials
             go here rather than into the argument list.

    Returns:
        Stripped stdout from the git command. Bytes that are not UTF-8
        (commit messages in legacy encodings) come back as U+FFFD.
    """
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        env={**os.environ, **env} if env else None,
        capture_output=True,
        text=True,
        errors="replace",
        check=check,
    )
    return result.stdout.strip()
