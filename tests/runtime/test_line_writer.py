from __future__ import annotations

import io
from types import SimpleNamespace

from lib_log_kv.domain.header import LogFlags
from lib_log_kv.runtime import DRIFT_NOTICE, LineWriter, Writer


def _writer(sink: io.StringIO, clock) -> Writer:
    return Writer(sink, terminal=False, clock=clock)


def test_header_is_stripped_and_rendered(clock) -> None:
    sink = io.StringIO()
    lines = LineWriter(_writer(sink, clock), SimpleNamespace(prefix="svc ", flags=LogFlags.TIME))
    assert lines.write("svc 10:00:00 info: ready port=80\n") == len("svc 10:00:00 info: ready port=80\n")
    assert sink.getvalue() == "svc 10:00:00 info: ready port=80\n"
    assert not lines.drifted


def test_drift_rederives_and_emits_notice(clock) -> None:
    sink = io.StringIO()
    source = SimpleNamespace(prefix="", flags=LogFlags.TIME)
    lines = LineWriter(_writer(sink, clock), source)

    source.flags = LogFlags.STD | LogFlags.UTC
    lines.write("2099/12/31 10:00:00 info: after change\n")
    lines.write("2099/12/31 10:00:01 info: steady\n")

    assert lines.drifted
    assert lines.header.flags == LogFlags.STD | LogFlags.UTC
    assert sink.getvalue().splitlines() == [
        "2099/12/31 10:00:00 info: after change",
        f"2099/12/31 12:34:56 {DRIFT_NOTICE}",
        "2099/12/31 10:00:01 info: steady",
    ]


def test_drift_notice_is_emitted_once_per_shape(clock) -> None:
    sink = io.StringIO()
    source = SimpleNamespace(prefix="app ", flags=LogFlags.NONE)
    lines = LineWriter(_writer(sink, clock), source)
    lines.write("other one")
    lines.write("other two")
    assert sink.getvalue().count(DRIFT_NOTICE) == 1
    assert "other one" in sink.getvalue()
    assert "other two" in sink.getvalue()


def test_empty_writes_are_ignored(clock) -> None:
    sink = io.StringIO()
    lines = LineWriter(_writer(sink, clock))
    assert lines.write("\n") == 1
    assert lines.write("") == 0
    assert sink.getvalue() == ""


def test_bytes_input_and_print_compatibility(clock) -> None:
    sink = io.StringIO()
    lines = LineWriter(_writer(sink, clock))
    lines.write(b"info: from bytes\r\n")
    print("info: from print", file=lines)
    lines.flush()
    assert sink.getvalue() == "info: from bytes\ninfo: from print\n"
    assert lines.writable()


def test_every_later_change_is_rederived(clock) -> None:
    sink = io.StringIO()
    source = SimpleNamespace(prefix="a ", flags=LogFlags.NONE)
    writer = _writer(sink, clock)
    writer.suppress("debug")
    lines = LineWriter(writer, source)

    source.prefix = "b "
    lines.write("b info: one")
    lines.write("b info: two")
    source.prefix = "c "
    lines.write("c debug: hidden")
    lines.write("c info: three")

    assert lines.header.prefix == "c "
    assert sink.getvalue().splitlines() == [
        "b info: one",
        f"b {DRIFT_NOTICE}",
        "b info: two",
        f"c {DRIFT_NOTICE}",
        "c info: three",
    ]
