from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from lib_log_kv.domain.header import HeaderFormat, HeaderParts, LogFlags

WHEN = datetime(2099, 12, 31, 12, 34, 56, 123456, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "fmt, line, parts, body",
    [
        (
            HeaderFormat(flags=LogFlags.STD),
            "2099/12/31 12:34:56 message a=1",
            HeaderParts(date="2099/12/31", time="12:34:56"),
            "message a=1",
        ),
        (
            HeaderFormat(prefix="prog [400] ", flags=LogFlags.STD),
            "prog [400] 2099/12/31 12:34:56 text",
            HeaderParts(prefix="prog [400] ", date="2099/12/31", time="12:34:56"),
            "text",
        ),
        (
            HeaderFormat(flags=LogFlags.TIME | LogFlags.MICROSECONDS),
            "12:34:56.123456   body",
            HeaderParts(time="12:34:56.123456"),
            "body",
        ),
        (
            HeaderFormat(flags=LogFlags.TIME | LogFlags.SHORTFILE),
            "12:34:56 file.go:123 message",
            HeaderParts(time="12:34:56", file="file.go:123"),
            "message",
        ),
        (
            HeaderFormat(flags=LogFlags.LONGFILE),
            "C:/src/app/main.py:7: info: started",
            HeaderParts(file="C:/src/app/main.py:7"),
            "info: started",
        ),
        (
            HeaderFormat(prefix="2049-07-08"),
            "2049-07-08 message text",
            HeaderParts(prefix="2049-07-08"),
            "message text",
        ),
        (HeaderFormat(), "  plain line", HeaderParts(), "plain line"),
    ],
)
def test_strip_extracts_parts(fmt: HeaderFormat, line: str, parts: HeaderParts, body: str) -> None:
    result = fmt.strip(line)
    assert result.parts == parts
    assert result.body == body
    assert result.changed is False


@pytest.mark.parametrize(
    "fmt, line",
    [
        (HeaderFormat(prefix="app "), "other 12:00:00 x"),
        (HeaderFormat(flags=LogFlags.DATE), "12:34:56 x"),
        (HeaderFormat(flags=LogFlags.TIME), "no time here"),
        (HeaderFormat(flags=LogFlags.SHORTFILE), "no file here"),
    ],
)
def test_strip_reports_drift(fmt: HeaderFormat, line: str) -> None:
    result = fmt.strip(line)
    assert result.changed is True


def test_drift_keeps_remaining_parts() -> None:
    result = HeaderFormat(prefix="app ", flags=LogFlags.TIME).strip("12:34:56 body")
    assert result.changed
    assert result.parts.time == "12:34:56"
    assert result.body == "body"


def test_from_source_reads_prefix_and_flags() -> None:
    fmt = HeaderFormat.from_source(SimpleNamespace(prefix="svc ", flags=LogFlags.TIME | LogFlags.UTC))
    assert fmt == HeaderFormat("svc ", LogFlags.TIME | LogFlags.UTC)
    assert HeaderFormat.from_source(None) == HeaderFormat()
    assert HeaderFormat.from_source(object()) == HeaderFormat()


@pytest.mark.parametrize(
    "flags, file, expected",
    [
        (LogFlags.STD | LogFlags.UTC, None, "2099/12/31 12:34:56 "),
        (LogFlags.TIME | LogFlags.MICROSECONDS | LogFlags.UTC, None, "12:34:56.123456 "),
        (LogFlags.SHORTFILE, "main.py:7", "main.py:7: "),
        (LogFlags.SHORTFILE, None, "???:0: "),
        (LogFlags.NONE, None, ""),
    ],
)
def test_render(flags: LogFlags, file: str | None, expected: str) -> None:
    assert HeaderFormat(flags=flags).render(WHEN, file) == expected


def test_render_then_strip_is_stable() -> None:
    fmt = HeaderFormat(prefix="svc ", flags=LogFlags.STD | LogFlags.MICROSECONDS | LogFlags.SHORTFILE)
    result = fmt.strip(fmt.render(WHEN, "app.py:10") + "info: ready")
    assert not result.changed
    assert result.parts.file == "app.py:10"
    assert result.body == "info: ready"


@pytest.mark.parametrize(
    "flags, expected",
    [
        (LogFlags.SHORTFILE, "main.py:42"),
        (LogFlags.LONGFILE, "/srv/app/main.py:42"),
    ],
)
def test_format_file(flags: LogFlags, expected: str) -> None:
    assert HeaderFormat(flags=flags).format_file("/srv/app/main.py", 42) == expected
    assert HeaderFormat(flags=flags).format_file(None, None) == "???:0"
