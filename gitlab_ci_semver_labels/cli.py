"""CLI entry point for gitlab-ci-semver-labels."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
from click.core import ParameterSource
from pydantic import ValidationError

from .config import load_config_file
from .errors import InvalidRegexpError
from .log import LOG_ENV, configure_logging
from .models import (
    DEFAULT_COMMIT_MESSAGE_REGEXP,
    DEFAULT_INITIAL_LABEL_REGEXP,
    DEFAULT_MAJOR_LABEL_REGEXP,
    DEFAULT_MINOR_LABEL_REGEXP,
    DEFAULT_PATCH_LABEL_REGEXP,
    DEFAULT_PRERELEASE_LABEL_REGEXP,
    BumpKind,
    LabelRegexSet,
    SemverLabelsParams,
)
from .pipeline import run_semver_labels

ENV_PREFIX = "GITLAB_CI_SEMVER_LABELS_"
LABEL_KINDS = ("initial", "major", "minor", "patch", "prerelease")
BOOL_FLAGS = {
    "--fetch-tags": ("--fetch-tags", "--no-fetch-tags"),
    "-T": ("--fetch-tags", "--no-fetch-tags"),
    "--prerelease": ("--prerelease", "--no-prerelease"),
    "-P": ("--prerelease", "--no-prerelease"),
    "--fail": ("--fail", "--no-fail"),
    "-f": ("--fail", "--no-fail"),
}


def _env(name: str) -> str:
    """Environment variable for an option ("dotenv-file" → "..._DOTENV_FILE")."""
    return ENV_PREFIX + name.upper().replace("-", "_")


def expand_bool_flags(args: list[str]) -> list[str]:
    """Rewrite ``--flag=VALUE`` for boolean flags into their on/off switch.

    Example:
        ["--fetch-tags=false", "current"] → ["--no-fetch-tags", "current"]

    Raises:
        click.BadParameter: If VALUE is not a boolean.
    """
    expanded: list[str] = []
    for index, arg in enumerate(args):
        if arg == "--":
            expanded.extend(args[index:])
            break
        name, sep, value = arg.partition("=")
        if sep and name in BOOL_FLAGS:
            on, off = BOOL_FLAGS[name]
            expanded.append(on if click.BOOL.convert(value, None, None) else off)
        else:
            expanded.append(arg)
    return expanded


def _apply(options: list[Callable[[Any], Any]]) -> Callable[[Any], Any]:
    def decorator(f: Any) -> Any:
        for option in reversed(options):
            f = option(f)
        return f

    return decorator


common_options = _apply(
    [
        click.option(
            "--work-tree",
            "-C",
            default=".",
            envvar=_env("work-tree"),
            metavar="DIR",
            show_default=True,
            help="DIR to be used for git operations.",
        ),
        click.option(
            "--remote-name",
            "-r",
            default="origin",
            envvar=_env("remote-name"),
            metavar="NAME",
            show_default=True,
            help="NAME of git remote.",
        ),
        click.option(
            "--fetch-tags/--no-fetch-tags",
            "-T",
            default=True,
            envvar=_env("fetch-tags"),
            show_default=True,
            help="Fetch tags from git repo.",
        ),
        click.option(
            "--gitlab-token-env",
            "-t",
            default="GITLAB_TOKEN",
            envvar=_env("gitlab-token-env"),
            metavar="VAR",
            show_default=True,
            help="Name for environment VAR with Gitlab token.",
        ),
        click.option(
            "--gitlab-url",
            "-g",
            default="https://gitlab.com",
            envvar=[_env("gitlab-url"), "CI_SERVER_URL"],
            metavar="URL",
            show_default="$CI_SERVER_URL or https://gitlab.com",
            help="URL of the Gitlab instance.",
        ),
        click.option(
            "--project",
            "-p",
            default="",
            envvar=[_env("project"), "CI_PROJECT_ID"],
            metavar="PROJECT",
            show_default="$CI_PROJECT_ID",
            help="PROJECT id or name.",
        ),
        click.option(
            "--dotenv-file",
            "-d",
            default="",
            envvar=_env("dotenv-file"),
            metavar="FILE",
            help="Write dotenv format to FILE.",
        ),
        click.option(
            "--dotenv-var",
            "-D",
            default="VERSION",
            envvar=_env("dotenv-var"),
            metavar="NAME",
            show_default=True,
            help="Variable NAME in dotenv file.",
        ),
    ]
)

prerelease_option = click.option(
    "--prerelease/--no-prerelease",
    "-P",
    default=False,
    envvar=_env("prerelease"),
    help="Bump version as prerelease.",
)

initial_version_option = click.option(
    "--initial-version",
    "-V",
    default="0.0.0",
    envvar=_env("initial-version"),
    metavar="VERSION",
    show_default=True,
    help="Initial VERSION for initial release.",
)


def _label_option(kind: str, default: str, help_text: str) -> Callable[[Any], Any]:
    return click.option(
        f"--{kind}-label-regexp",
        default=default,
        envvar=_env(f"{kind}-label-regexp"),
        metavar="REGEXP",
        show_default=True,
        help=help_text,
    )


label_options = _apply(
    [
        click.option(
            "--commit-message-regexp",
            default=DEFAULT_COMMIT_MESSAGE_REGEXP,
            envvar=_env("commit-message-regexp"),
            metavar="REGEXP",
            show_default=True,
            help="REGEXP for commit message after merged MR.",
        ),
        click.option(
            "--fail/--no-fail",
            "-f",
            default=False,
            envvar=_env("fail"),
            help="Fail if labels are not matched.",
        ),
        _label_option(
            "initial", DEFAULT_INITIAL_LABEL_REGEXP, "REGEXP for initial release label."
        ),
        _label_option(
            "major",
            DEFAULT_MAJOR_LABEL_REGEXP,
            "REGEXP for major (breaking) release label.",
        ),
        _label_option(
            "minor",
            DEFAULT_MINOR_LABEL_REGEXP,
            "REGEXP for minor (feature) release label.",
        ),
        _label_option(
            "patch", DEFAULT_PATCH_LABEL_REGEXP, "REGEXP for patch (fix) release label."
        ),
        _label_option(
            "prerelease", DEFAULT_PRERELEASE_LABEL_REGEXP, "REGEXP for prerelease label."
        ),
    ]
)


def merged_params(ctx: click.Context) -> dict[str, Any]:
    """Collect parameters along the command chain, outermost first.

    Options repeat on every level (``bump -d out.env major`` and
    ``bump major -d out.env`` are equivalent). A value typed on the command
    line beats an inherited one; otherwise the innermost command wins.
    """
    chain: list[click.Context] = []
    level_ctx: click.Context | None = ctx
    while level_ctx is not None:
        chain.append(level_ctx)
        level_ctx = level_ctx.parent

    merged: dict[str, Any] = {}
    explicit: dict[str, bool] = {}
    for level in reversed(chain):
        for name, value in level.params.items():
            from_cli = level.get_parameter_source(name) is ParameterSource.COMMANDLINE
            if name not in merged or from_cli or not explicit[name]:
                merged[name] = value
                explicit[name] = from_cli
    return merged


def build_params(ctx: click.Context, **overrides: Any) -> SemverLabelsParams:
    """Freeze the merged command-line values into the run parameters.

    Raises:
        InvalidRegexpError: If one of the regexps does not compile.
    """
    values = merged_params(ctx)
    values.update(overrides)
    regexps = {
        kind: values.pop(f"{kind}_label_regexp")
        for kind in LABEL_KINDS
        if f"{kind}_label_regexp" in values
    }
    try:
        return SemverLabelsParams(label_regexps=LabelRegexSet(**regexps), **values)
    except ValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(loc) for loc in error["loc"])
        raise InvalidRegexpError(f"invalid regexp for {field}: {error['msg']}") from exc


class SemverLabelsContext(click.Context):
    """Context that shares one flat ``default_map`` with all subcommands."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        if self.parent is not None:
            self.default_map = self.parent.default_map


class SemverLabelsCommand(click.Command):
    context_class = SemverLabelsContext


class SemverLabelsGroup(click.Group):
    """Command group that maps failures onto the tool's exit codes.

    Usage and config file errors exit with 1, runtime errors with 2.
    """

    context_class = SemverLabelsContext
    command_class = SemverLabelsCommand
    group_class = type

    def main(  # type: ignore[override]
        self,
        args: list[str] | None = None,
        prog_name: str | None = None,
        complete_var: str | None = None,
        standalone_mode: bool = True,
        **extra: Any,
    ) -> Any:
        configure_logging(os.environ.get(LOG_ENV))
        if args is None:
            args = sys.argv[1:]
        try:
            args = expand_bool_flags(list(args))
            if "default_map" not in extra:
                extra["default_map"] = load_config_file(Path.cwd())
            rv = super().main(
                args, prog_name, complete_var, standalone_mode=False, **extra
            )
        except click.UsageError as exc:
            exc.show()
            sys.exit(1)
        except click.ClickException as exc:
            exc.show()
            sys.exit(exc.exit_code)
        except click.Abort:
            click.echo("Aborted!", err=True)
            sys.exit(1)
        if not standalone_mode:
            return rv
        sys.exit(rv if isinstance(rv, int) else 0)


@click.group(cls=SemverLabelsGroup)
@click.version_option(package_name="gitlab-ci-semver-labels")
@common_options
def cli(**_: Any) -> None:
    """Bump the semver for a Gitlab CI project based on merge request labels."""


@cli.command()
@common_options
@click.pass_context
def current(ctx: click.Context, **_: Any) -> None:
    """Show current version."""
    run_semver_labels(build_params(ctx, current=True))


@cli.group(invoke_without_command=True)
@common_options
@label_options
@initial_version_option
@prerelease_option
@click.pass_context
def bump(ctx: click.Context, **_: Any) -> None:
    """Bump version based on merge request labels."""
    if ctx.invoked_subcommand is None:
        run_semver_labels(build_params(ctx))


@bump.command()
@common_options
@initial_version_option
@prerelease_option
@click.pass_context
def initial(ctx: click.Context, **_: Any) -> None:
    """Set to initial version without checking labels."""
    run_semver_labels(build_params(ctx, bump=BumpKind.INITIAL))


@bump.command()
@common_options
@prerelease_option
@click.pass_context
def major(ctx: click.Context, **_: Any) -> None:
    """Bump major version without checking labels."""
    run_semver_labels(build_params(ctx, bump=BumpKind.MAJOR))


@bump.command()
@common_options
@prerelease_option
@click.pass_context
def minor(ctx: click.Context, **_: Any) -> None:
    """Bump minor version without checking labels."""
    run_semver_labels(build_params(ctx, bump=BumpKind.MINOR))


@bump.command()
@common_options
@prerelease_option
@click.pass_context
def patch(ctx: click.Context, **_: Any) -> None:
    """Bump patch version without checking labels."""
    run_semver_labels(build_params(ctx, bump=BumpKind.PATCH))


@bump.command()
@common_options
@click.pass_context
def prerelease(ctx: click.Context, **_: Any) -> None:
    """Bump prerelease counter without checking labels."""
    run_semver_labels(build_params(ctx, bump=BumpKind.PRERELEASE))
