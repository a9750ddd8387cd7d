"""Write the resulting version for the caller and for later CI stages."""

from __future__ import annotations

import logging

import click

from .errors import OutputError

logger = logging.getLogger(__name__)


def write_dotenv(path: str, name: str, value: str) -> None:
    """Create (or truncate) ``path`` with the single line ``name=value``."""
    try:
        with open(path, "w") as fh:
            fh.write(f"{name}={value}\n")
    except OSError as exc:
        raise OutputError(f"cannot write to file {path}: {exc}") from exc
    logger.debug("Written to file: %s", path)


def emit(version: str, dotenv_file: str = "", dotenv_var: str = "VERSION") -> None:
    """Print the version and, if requested, save it to a dotenv file."""
    if dotenv_file:
        write_dotenv(dotenv_file, dotenv_var, version)
    click.echo(version)
