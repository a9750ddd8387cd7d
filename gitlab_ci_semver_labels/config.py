"""Configuration file support.

Settings can be stored in ``.gitlab-ci-semver-labels.yml`` in the current
directory, keyed by the long option names::

    dotenv-file: version.env
    fail: true
    major-label-regexp: "(?i)breaking"

The values become click's ``default_map`` for every command, so the
command line and the environment still take precedence over the file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import click
import yaml

logger = logging.getLogger(__name__)

CONFIG_FILE = ".gitlab-ci-semver-labels.yml"


class ConfigFileError(click.ClickException):
    """The config file exists but cannot be used."""


def load_config_file(directory: Path) -> dict[str, Any]:
    """Load the config file from ``directory``.

    Returns an empty dict when the file does not exist. Keys are returned
    as parameter names (``dotenv-file`` → ``dotenv_file``).

    Raises:
        ConfigFileError: If the file cannot be read or is not a YAML mapping.
    """
    path = directory / CONFIG_FILE
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text())
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigFileError(f"cannot read config file {path}: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigFileError(f"cannot read config file {path}: not a mapping")
    logger.debug("Config file: %s", path)
    return {str(key).replace("-", "_"): value for key, value in data.items()}

