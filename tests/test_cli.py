"""CLI behaviour coverage for the Click adapter."""

from __future__ import annotations

import json
import re
import sys

import pytest
from click.testing import CliRunner

from lib_log_kv import __init__conf__
from lib_log_kv import cli as cli_mod
from lib_log_kv.cli import summary_info

ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def run_cli(args: list[str] | None = None, *, input: str | bytes | None = None) -> tuple[int, str, BaseException | None]:
    """Invoke the Click group with ``CliRunner`` and capture output."""

    runner = CliRunner()
    result = runner.invoke(
        cli_mod.cli,
        args or [],
        input=input,
        prog_name=__init__conf__.shell_command,
    )
    return result.exit_code, result.output, result.exception


def test_cli_without_subcommand_prints_summary() -> None:
    exit_code, stdout, _ = run_cli()

    assert exit_code == 0
    assert stdout == summary_info()


def test_cli_info_command_matches_summary() -> None:
    exit_code, stdout, _ = run_cli(["info"])

    assert exit_code == 0
    assert stdout == summary_info()
    assert stdout.startswith("Info for lib_log_kv:")


def test_cli_version_option() -> None:
    exit_code, stdout, _ = run_cli(["--version"])

    assert exit_code == 0
    assert stdout.strip() == f"lib_log_kv version {__init__conf__.version}"


def test_cli_fmt_flattens_arguments() -> None:
    exit_code, stdout, _ = run_cli(["fmt", "starting", "path", "/tmp/a b", "retries", "3"])

    assert exit_code == 0
    assert stdout == 'msg=starting path="/tmp/a b" retries=3\n'


def test_cli_parse_prints_text_and_pairs() -> None:
    exit_code, stdout, _ = run_cli(["parse", "request done status=200 path=/health"])

    assert exit_code == 0
    assert stdout.splitlines() == ["text: request done", "status: 200", "path: /health"]


def test_cli_parse_json_reads_stdin() -> None:
    exit_code, stdout, _ = run_cli(["parse", "--json"], input='upload failed err="disk full"')

    assert exit_code == 0
    assert json.loads(stdout) == {"text": "upload failed", "pairs": [["err", "disk full"]]}


def test_cli_render_plain_output() -> None:
    exit_code, stdout, _ = run_cli(
        ["render", "--plain"],
        input="info: listening port=8080\ndebug: noisy\nerror: boom code=7\n",
    )

    assert exit_code == 0
    assert stdout == "info: listening port=8080\ndebug: noisy\nerror: boom code=7\n"


def test_cli_render_suppress_hides_levels() -> None:
    exit_code, stdout, _ = run_cli(
        ["render", "--plain", "--suppress", "debug", "--suppress", "trace"],
        input="trace: a\ndebug: b\ninfo: c\n",
    )

    assert exit_code == 0
    assert stdout == "info: c\n"


def test_cli_render_level_option_hides_custom_level() -> None:
    exit_code, stdout, _ = run_cli(["render", "--plain", "--level", "audit=hide"], input="audit: secret\ninfo: shown\n")

    assert exit_code == 0
    assert stdout == "info: shown\n"


def test_cli_render_rejects_malformed_level() -> None:
    exit_code, stdout, _ = run_cli(["render", "--level", "audit"], input="")

    assert exit_code == 2
    assert "--level entries must look like NAME=EFFECT" in stdout


def test_cli_render_rejects_malformed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_KV_WIDTH", "wide")
    exit_code, stdout, _ = run_cli(["render"], input="info: x\n")

    assert exit_code == 2
    assert "LOG_KV_WIDTH must be an integer" in stdout


def test_cli_render_width_wraps_without_colour() -> None:
    line = "info: " + " ".join(f"key{index}=value{index}" for index in range(8)) + "\n"
    exit_code, stdout, _ = run_cli(["render", "--width", "30", "--no-color"], input=line)

    assert exit_code == 0
    assert not ANSI_RE.search(stdout)
    assert len(stdout.splitlines()) > 1
    assert all(f"value{index}" in stdout for index in range(8))


def test_cli_render_reads_file(tmp_path) -> None:
    source = tmp_path / "app.log"
    source.write_bytes(b"warning: disk low free=5%\n")
    exit_code, stdout, _ = run_cli(["render", "--plain", str(source)])

    assert exit_code == 0
    assert stdout == "warning: disk low free=5%\n"


def test_main_returns_exit_codes(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli_mod.main(["--version"]) == 0
    assert "lib_log_kv version" in capsys.readouterr().out

    assert cli_mod.main(["no-such-command"]) == 2
    assert "No such command" in capsys.readouterr().err


def test_main_consumes_sys_argv(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(sys, "argv", [__init__conf__.shell_command, "fmt", "ready"], raising=False)

    exit_code = cli_mod.main()

    assert exit_code == 0
    assert capsys.readouterr().out == "msg=ready\n"
