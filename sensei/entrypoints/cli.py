"""Sensei CLI entrypoint.

Command-line interface for revision-aware reads, diffs and commits.
"""

from __future__ import annotations

import functools
import io
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from sensei.core.repo import Repository
    from sensei.domain.config import SenseiConfig

from sensei.core.errors import SenseiCliError
from sensei.core.revision_context import RevisionContext, with_diff_range, with_revision
from sensei.core.staging.streams import BufferedStream
from sensei.domain.entities import HEAD_REVISION
from sensei.domain.exceptions import SenseiDomainError
from sensei.version import __version__

logger = logging.getLogger(__name__)


def handle_cli_errors(command_name: str):
    """Decorator to handle common CLI errors.

    Domain errors keep their message and hint; anything else becomes a
    generic error, with a traceback in verbose mode.

    Args:
        command_name: Name of the command for error messages.

    Returns:
        Decorated function with error handling.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except SenseiCliError:
                raise
            except SenseiDomainError as e:
                raise SenseiCliError(e.message, hint=e.hint) from e
            except OSError as e:
                raise SenseiCliError(
                    f"I/O error in {command_name}: {e}",
                    hint="Check file permissions and paths",
                ) from e
            except Exception as e:
                ctx = click.get_current_context()
                if ctx.obj.get("verbose", False):
                    import traceback

                    traceback.print_exc()
                raise SenseiCliError(
                    f"Unexpected error in {command_name}: {e}",
                    hint="Run with --verbose for more details",
                ) from e

        return wrapper

    return decorator


def _load_config(config_path: Path | None) -> SenseiConfig:
    from sensei.adapters.factory import create_config_provider

    return create_config_provider().load(config_path)


def _open_repository(ctx: click.Context) -> Repository:
    from sensei.adapters.factory import open_repository

    return open_repository(ctx.obj["repo"], _load_config(ctx.obj["config"]))


def _revision_context(rev: str | None) -> RevisionContext | None:
    if rev is None:
        return None
    return with_revision(None, rev)


@click.group()
@click.version_option(version=__version__, prog_name="sensei")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
@click.option(
    "--repo",
    "-C",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Repository working copy.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file layered over the global config.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, repo: Path, config_path: Path | None) -> None:
    """Sensei - revision-aware repository reads, diffs and commits."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["repo"] = repo
    ctx.obj["config"] = config_path
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )


@cli.command()
@click.pass_context
@handle_cli_errors("init")
def init(ctx: click.Context) -> None:
    """Create an empty repository."""
    from sensei.adapters.factory import init_repository

    repo_root: Path = ctx.obj["repo"]
    init_repository(repo_root, _load_config(ctx.obj["config"]))
    click.echo(f"Initialized repository in {repo_root.resolve()}")


@cli.command()
@click.argument("path", type=str)
@click.option("--rev", "-r", default=None, help="Revision to read (default: working copy).")
@click.pass_context
@handle_cli_errors("cat")
def cat(ctx: click.Context, path: str, rev: str | None) -> None:
    """Print PATH as it exists at a revision."""
    repo = _open_repository(ctx)
    buf = io.BytesIO()
    repo.read(_revision_context(rev), path, buf)
    click.echo(buf.getvalue(), nl=False)


@cli.command(name="ls")
@click.option("--rev", "-r", default=None, help="Revision to list (default: working copy).")
@click.pass_context
@handle_cli_errors("ls")
def list_paths(ctx: click.Context, rev: str | None) -> None:
    """List every file at a revision."""
    repo = _open_repository(ctx)
    for path in sorted(repo.list(_revision_context(rev))):
        click.echo(path)


@cli.command()
@click.pass_context
@handle_cli_errors("status")
def status(ctx: click.Context) -> None:
    """Show working copy changes against the last commit."""
    repo = _open_repository(ctx)
    changes = repo.status()
    if not changes:
        click.echo("Working copy clean")
        return
    for path in sorted(changes):
        click.echo(f"{changes[path].value:<10} {path}")


@cli.command()
@click.argument("path", type=str, required=False, default=None)
@click.option("--from", "from_rev", default=None, help="Starting revision.")
@click.option("--to", "to_rev", default=None, help="Ending revision.")
@click.pass_context
@handle_cli_errors("diff")
def diff(ctx: click.Context, path: str | None, from_rev: str | None, to_rev: str | None) -> None:
    """Show changes of the working copy or between two revisions.

    With PATH only that file is diffed.
    """
    if (from_rev is None) != (to_rev is None):
        raise SenseiCliError(
            "--from and --to must be given together",
            hint=f"Use --to {HEAD_REVISION} to compare against the last commit",
        )
    repo = _open_repository(ctx)
    revision_ctx = None
    if from_rev is not None and to_rev is not None:
        revision_ctx = with_diff_range(None, from_rev, to_rev)

    if path is None:
        buf = io.BytesIO()
        repo.diff_patch(revision_ctx, buf)
        click.echo(buf.getvalue(), nl=False)
        return

    from_text, to_text = repo.diff(revision_ctx, path)
    click.echo(repo.engine.render_patch(path, from_text, to_text), nl=False)


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=str)
@click.option("--delete", is_flag=True, help="Stage removal of PATHS instead.")
@click.pass_context
@handle_cli_errors("add")
def add(ctx: click.Context, paths: tuple[str, ...], delete: bool) -> None:
    """Stage PATHS from the working copy."""
    repo = _open_repository(ctx)
    repo_root: Path = ctx.obj["repo"]
    streams = []
    for path in paths:
        content = b"" if delete else (repo_root / path).read_bytes()
        streams.append(BufferedStream(path, content))
    repo.add(None, streams)
    logger.info("Staged %d path(s)", len(streams))


@cli.command()
@click.option("--message", "-m", required=True, help="Commit message.")
@click.pass_context
@handle_cli_errors("commit")
def commit(ctx: click.Context, message: str) -> None:
    """Commit staged changes and print the new revision."""
    repo = _open_repository(ctx)
    click.echo(repo.commit(None, message))


@cli.group()
def config() -> None:
    """Manage sensei configuration."""
    pass


@config.command(name="show")
@click.pass_context
@handle_cli_errors("config show")
def config_show(ctx: click.Context) -> None:
    """Show the effective configuration."""
    from sensei.shared.config_io import config_to_data, get_global_config_path

    click.echo(f"Global config: {get_global_config_path()}")
    if ctx.obj["config"] is not None:
        click.echo(f"Explicit config: {ctx.obj['config']}")
    data = config_to_data(_load_config(ctx.obj["config"]))
    for section, values in data.items():
        click.echo(f"[{section}]")
        for key, value in values.items():
            click.echo(f"{key} = {value!r}")


@config.command(name="init")
@click.option("--force", is_flag=True, help="Overwrite an existing file.")
@click.pass_context
@handle_cli_errors("config init")
def config_init(ctx: click.Context, force: bool) -> None:
    """Write the default configuration to the global config file."""
    from sensei.domain.config import SenseiConfig
    from sensei.shared.config_io import get_global_config_path, save_config

    path = ctx.obj["config"] or get_global_config_path()
    if path.exists() and not force:
        raise SenseiCliError(
            f"Config file already exists: {path}",
            hint="Use --force to overwrite",
        )
    save_config(SenseiConfig.default(), path)
    click.echo(f"Wrote {path}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
