"""Command line interface for rendering, formatting and parsing log lines.

Purpose
-------
Expose the writer to shell pipelines (``some-app 2>&1 | lib_log_kv render``)
and give quick access to the logfmt encoder and the line parser.

Contents
--------
* :func:`cli` - Click group with ``--version`` and ``--use-dotenv``.
* Commands ``info``, ``render``, ``fmt`` and ``parse``.
* :func:`main` - test-friendly entry point returning an exit code.

System Role
-----------
Presentation layer. Options are merged with ``LOG_KV_*`` environment variables
through :func:`lib_log_kv.runtime.build_writer_settings`; all rendering goes
through :class:`lib_log_kv.runtime.Writer`.
"""

from __future__ import annotations

import json
import os
from typing import IO, Any, Sequence

import click

from . import __init__conf__
from . import config as dotenv_config
from .domain.keyvals import keyvals
from .domain.levels import LEVEL_THEMES
from .domain.message import parse as parse_message
from .runtime import Writer, build_writer_settings
from .runtime._settings import parse_levels

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def summary_info() -> str:
    """Return the metadata banner printed by ``info``.

    Examples
    --------
    >>> "version" in summary_info()
    True
    """

    lines: list[str] = []
    __init__conf__.print_info(writer=lines.append)
    return "".join(lines)


@click.group(invoke_without_command=True, context_settings=CLICK_CONTEXT_SETTINGS)
@click.version_option(
    version=__init__conf__.version,
    prog_name=__init__conf__.shell_command,
    message=f"{__init__conf__.shell_command} version {__init__conf__.version}",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=False,
    help=f"Load environment variables from the nearest .env (also enabled by {dotenv_config.DOTENV_ENV_VAR}=1).",
)
@click.pass_context
def cli(ctx: click.Context, use_dotenv: bool) -> None:
    """Render key/value log lines for humans."""

    explicit: bool | None = None
    if ctx.get_parameter_source("use_dotenv") is not click.core.ParameterSource.DEFAULT:
        explicit = use_dotenv
    if dotenv_config.should_use_dotenv(explicit=explicit, env_value=os.getenv(dotenv_config.DOTENV_ENV_VAR)):
        dotenv_config.enable_dotenv()
    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print package metadata."""

    click.echo(summary_info(), nl=False)


def _level_option(ctx: click.Context, param: click.Parameter, values: tuple[str, ...]) -> dict[str, str] | None:
    if not values:
        return None
    try:
        return parse_levels(",".join(values), source="--level")
    except ValueError as exc:
        raise click.BadParameter(str(exc), ctx=ctx, param=param) from exc


@cli.command("render", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("source", type=click.File("rb"), default="-")
@click.option("--width", type=click.IntRange(min=1), default=None, help="Wrap at this width instead of the terminal's.")
@click.option("--color/--no-color", "color", default=None, help="Force colour on or off (default: detect).")
@click.option("--terminal/--plain", "terminal", default=None, help="Force wrapped terminal layout or one-line output.")
@click.option("--suppress", "suppress", multiple=True, metavar="LEVEL", help="Hide lines with this level (repeatable).")
@click.option(
    "--level",
    "levels",
    multiple=True,
    metavar="NAME=EFFECT",
    callback=_level_option,
    help="Set the effect of a level (repeatable).",
)
@click.option("--theme", type=click.Choice(sorted(LEVEL_THEMES)), default=None, help="Start from a named level theme.")
def cli_render(
    source: IO[bytes],
    width: int | None,
    color: bool | None,
    terminal: bool | None,
    suppress: tuple[str, ...],
    levels: dict[str, str] | None,
    theme: str | None,
) -> None:
    """Render log lines from SOURCE (a file or - for stdin) to stdout."""

    try:
        settings = build_writer_settings(
            levels=levels,
            suppress=suppress or None,
            theme=theme,
            force_color=True if color else None,
            no_color=True if color is False else None,
            width=width,
        )
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    if terminal is None and settings.width is not None:
        terminal = True
    writer = Writer.from_settings(settings, click.get_text_stream("stdout"), terminal=terminal)
    for raw in source:
        writer.write(raw)
    writer.flush()


@cli.command("fmt", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("args", nargs=-1)
def cli_fmt(args: tuple[str, ...]) -> None:
    """Flatten ARGS into key/value pairs and print them as logfmt."""

    click.echo(keyvals(*args).to_text())


@cli.command("parse", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("text", required=False)
@click.option("--json", "as_json", is_flag=True, help="Print a JSON object instead of plain lines.")
def cli_parse(text: str | None, as_json: bool) -> None:
    """Split TEXT (or stdin) into free text and key/value pairs."""

    if text is None:
        text = click.get_text_stream("stdin").read()
    with parse_message(text) as message:
        if as_json:
            payload: dict[str, Any] = {"text": message.text, "pairs": [list(item) for item in message.iter_pairs()]}
            click.echo(json.dumps(payload, ensure_ascii=False))
            return
        click.echo(f"text: {message.text}")
        for key, value in message.iter_pairs():
            click.echo(f"{key}: {value}")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Click group and return an exit code instead of exiting.

    Examples
    --------
    >>> main(["--version"])
    lib_log_kv version 0.1.0
    0
    >>> main(["fmt", "starting", "port", "8080"])
    msg=starting port=8080
    0
    """

    args = list(argv) if argv is not None else None
    try:
        result = cli.main(args=args, prog_name=__init__conf__.shell_command, standalone_mode=False)
    except click.exceptions.Exit as exc:
        return exc.exit_code
    except click.ClickException as error:
        error.show()
        return error.exit_code
    except click.Abort:
        click.echo("Aborted!", err=True)
        return 1
    return result if isinstance(result, int) else 0


__all__ = ["cli", "main", "summary_info"]
