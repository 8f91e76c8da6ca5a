"""CLI entry points: hbctx show, hbctx stats."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, replace
from pathlib import Path

import click

from .config import Config


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log debug details to stderr")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Heartbeat context: read-only tail of a chat session transcript."""
    ctx.ensure_object(dict)
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    ctx.obj["config"] = Config()


def _resolve_session(config: Config, session_file: Path | None, latest: bool) -> Path:
    if session_file is not None:
        return session_file
    if not latest:
        raise click.UsageError("Pass a SESSION_FILE or --latest.")

    from .transcripts.discovery import find_latest_session

    found = find_latest_session(config.sessions_dir)
    if found is None:
        raise click.ClickException(f"No session transcripts found in {config.sessions_dir}")
    return found


def _limit_options(func):
    """Attach the --max-* limit overrides shared by show and stats."""
    func = click.option("--max-line-chars", type=int, help="Max characters per message line")(func)
    func = click.option("--max-chars", type=int, help="Max characters for the whole block")(func)
    func = click.option("--max-messages", type=int, help="Max messages to include")(func)
    func = click.option("--max-bytes", type=int, help="Tail window size in bytes")(func)
    return func


def _apply_limits(config: Config, **limits: int | None) -> Config:
    return replace(config, **{k: v for k, v in limits.items() if v is not None})


def _build_or_fail(path: Path, config: Config):
    from .context import build

    try:
        return build(path, config)
    except OSError as e:
        raise click.ClickException(f"Failed to read {path}: {e}") from e


@cli.command()
@click.argument("session_file", required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--latest", is_flag=True, help="Use the most recently modified session in the sessions dir")
@_limit_options
@click.option("--json", "as_json", is_flag=True, help="Output block and diagnostics as JSON")
@click.pass_context
def show(
    ctx: click.Context,
    session_file: Path | None,
    latest: bool,
    max_bytes: int | None,
    max_messages: int | None,
    max_chars: int | None,
    max_line_chars: int | None,
    as_json: bool,
) -> None:
    """Print the heartbeat context block for a session transcript."""
    config = _apply_limits(
        ctx.obj["config"],
        max_bytes=max_bytes,
        max_messages=max_messages,
        max_chars=max_chars,
        max_line_chars=max_line_chars,
    )
    path = _resolve_session(config, session_file, latest)
    result = _build_or_fail(path, config)

    if as_json:
        output = {"block": result.block, "diagnostics": asdict(result.diagnostics)}
        click.echo(json.dumps(output, indent=2, ensure_ascii=False))
    elif result.block is not None:
        click.echo(result.block)
    else:
        click.echo("No recent context.")


@cli.command()
@click.argument("session_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_limit_options
@click.pass_context
def stats(
    ctx: click.Context,
    session_file: Path,
    max_bytes: int | None,
    max_messages: int | None,
    max_chars: int | None,
    max_line_chars: int | None,
) -> None:
    """Show how many messages were parsed, included, and trimmed."""
    config = _apply_limits(
        ctx.obj["config"],
        max_bytes=max_bytes,
        max_messages=max_messages,
        max_chars=max_chars,
        max_line_chars=max_line_chars,
    )
    result = _build_or_fail(session_file, config)

    diagnostics = result.diagnostics
    click.echo(f"Session: {session_file}")
    click.echo("=" * 40)
    click.echo(f"Parsed messages: {diagnostics.parsed_messages}")
    click.echo(f"Included messages: {diagnostics.included_messages}")
    click.echo(f"Trimmed trailing messages: {diagnostics.trimmed_trailing_messages}")
    click.echo(f"Block: {'present' if result.block is not None else 'none'}")
