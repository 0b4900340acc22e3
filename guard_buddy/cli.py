"""
Inspects and rewrites the include protection of C/C++ header files.
Inserts include guards, converts them to `#pragma once`, or toggles between both.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

import click
from .config import ConfigError, GuardConfig, build_config
from .detector import detect_state, is_eligible
from .document import TextDocument
from .exceptions import AlreadyProtectedError, EditConflictError, NotAHeaderError
from .filesystem import (
    collect_file_stat,
    enforce_file_size,
    ensure_file_unchanged,
    get_max_file_size,
    normalize_filepath,
    read_document,
    write_document,
)
from .host import describe_result, render_state
from .models import Operation
from .naming import compute_macro
from .planner import apply_operation

__all__ = ["cli"]


@dataclass
class _Session:
    filepath: Path
    base_dir: Path
    config: GuardConfig
    document: TextDocument
    initial_stat: os.stat_result
    post_read_stat: os.stat_result


def _open_session(filepath: str, macro_prefix: str | None = None) -> _Session:
    base_dir = Path.cwd().resolve()
    try:
        path = normalize_filepath(filepath, base_dir)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error
    try:
        config = build_config(path.parent, macro_prefix=macro_prefix)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        initial_stat = collect_file_stat(path)
        enforce_file_size(initial_stat, max_file_size, path)
        document = read_document(path)
        post_read_stat = collect_file_stat(path)
        ensure_file_unchanged(initial_stat, post_read_stat, path)
    except IOError as error:
        raise click.ClickException(str(error)) from error

    return _Session(path, base_dir, config, document, initial_stat, post_read_stat)


def _workspace_root(
    root: str | None, basename: bool, config: GuardConfig, base_dir: Path
) -> Path | None:
    if basename or not config.use_workspace_root:
        return None
    if root is not None:
        return Path(root).expanduser().resolve()
    return base_dir


def _enable_debug_logging(ctx: click.Context) -> None:
    package_logger = logging.getLogger("guard_buddy")
    handler = logging.StreamHandler(click.get_text_stream("stderr"))
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)

    def _restore() -> None:
        package_logger.removeHandler(handler)
        package_logger.setLevel(logging.NOTSET)

    ctx.call_on_close(_restore)


def _naming_options(func):
    func = click.option(
        "--basename",
        is_flag=True,
        help="Derive the macro from the filename only, ignoring the workspace root",
    )(func)
    func = click.option(
        "--root",
        type=click.Path(exists=True, file_okay=False),
        help="Workspace root the macro name is made relative to (default: cwd)",
    )(func)
    func = click.option("--prefix", help="Project prefix for the guard macro")(func)
    return func


def _rewrite_command(name: str, operation: Operation, help_text: str):
    @cli.command(name=name, help=help_text)
    @_naming_options
    @click.option("--dry-run", is_flag=True, help="Print the result instead of writing it")
    @click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
    def command(
        filepath: str,
        prefix: str | None = None,
        root: str | None = None,
        basename: bool = False,
        dry_run: bool = False,
    ):
        session = _open_session(filepath, macro_prefix=prefix)
        workspace_root = _workspace_root(root, basename, session.config, session.base_dir)

        try:
            result = apply_operation(
                session.document, operation, workspace_root, session.config.macro_prefix
            )
        except NotAHeaderError as error:
            raise click.ClickException(str(error)) from error
        except AlreadyProtectedError as error:
            click.echo(str(error), err=True)
            return
        except EditConflictError as error:
            raise click.ClickException(str(error)) from error

        if dry_run:
            click.echo(session.document.text, nl=False)
            return

        try:
            write_document(
                session.document,
                session.filepath,
                session.post_read_stat,
                session.initial_stat,
                warn=lambda message: click.echo(message, err=True),
            )
        except IOError as error:
            raise click.ClickException(str(error)) from error
        click.echo(describe_result(result), err=True)

    return command


@click.group()
@click.version_option(package_name="guard-buddy")
@click.option("-v", "--verbose", is_flag=True, help="Log detection and edit details to stderr")
@click.pass_context
def cli(ctx: click.Context, verbose: bool = False):
    """
    Manage include guards and `#pragma once` in C/C++ headers.

    Examples:
        guard-buddy insert include/math.h
        guard-buddy toggle --prefix acme include/math.h
        guard-buddy status include/math.h
    """
    if verbose:
        _enable_debug_logging(ctx)


@cli.command()
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def status(filepath: str):
    """Print the protection currently present in FILEPATH."""
    session = _open_session(filepath)
    if not is_eligible(session.filepath):
        click.echo(f"{filepath}: not a header")
        return
    click.echo(f"{filepath}: {render_state(detect_state(session.document)).text}")


@cli.command()
@_naming_options
@click.argument("filepath", type=click.Path(dir_okay=False))
def macro(
    filepath: str,
    prefix: str | None = None,
    root: str | None = None,
    basename: bool = False,
):
    """Print the guard macro derived for FILEPATH."""
    path = Path(filepath).expanduser().resolve()
    base_dir = Path.cwd().resolve()
    try:
        config = build_config(path.parent, macro_prefix=prefix)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error
    workspace_root = _workspace_root(root, basename, config, base_dir)
    click.echo(compute_macro(path, workspace_root, config.macro_prefix))


insert = _rewrite_command(
    "insert",
    Operation.INSERT_GUARD,
    "Insert an include guard into FILEPATH unless it is already protected.",
)
pragma = _rewrite_command(
    "pragma",
    Operation.USE_PRAGMA_ONCE,
    "Use `#pragma once` in FILEPATH, replacing an existing include guard.",
)
toggle = _rewrite_command(
    "toggle",
    Operation.TOGGLE,
    "Switch FILEPATH between an include guard and `#pragma once`.",
)


if __name__ == "__main__":
    cli()
