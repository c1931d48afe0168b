"""File-like adapter feeding logger output into a :class:`Writer`."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from lib_log_kv.domain._codec import decode_text
from lib_log_kv.domain.header import HeaderFormat

if TYPE_CHECKING:
    from ._writer import Writer

DRIFT_NOTICE = "warning: logger details changed after attach"


class LineWriter:
    """Strip a logger's header from each line and hand the rest to ``writer``.

    The header shape is derived from ``source`` (any object exposing
    ``prefix`` and ``flags``) when the adapter is created. A line that no
    longer fits is treated as configuration drift: the shape is derived again
    and the line is processed with it. One notice line follows the first
    drifting line of every derived shape.

    Each :meth:`write` call carries one line; a single trailing newline is
    ignored and calls carrying nothing else are skipped.
    """

    def __init__(self, writer: "Writer", source: Any = None) -> None:
        self._writer = writer
        self._source = source
        self._header = HeaderFormat.from_source(source)
        self._drifted = False

    @property
    def writer(self) -> "Writer":
        return self._writer

    @property
    def header(self) -> HeaderFormat:
        return self._header

    @property
    def drifted(self) -> bool:
        return self._drifted

    def write(self, data: str | bytes) -> int:
        size = len(data)
        line = decode_text(data) if isinstance(data, (bytes, bytearray)) else data
        if line.endswith("\n"):
            line = line[:-1]
            if line.endswith("\r"):
                line = line[:-1]
        if not line:
            return size
        notify = False
        with self._writer.lock:
            result = self._header.strip(line)
            if result.changed:
                derived = HeaderFormat.from_source(self._source)
                if derived != self._header:
                    self._header = derived
                    self._drifted = False
                    result = derived.strip(line)
                notify = not self._drifted
                self._drifted = True
            self._writer.process(result.body, result.parts)
            if notify:
                notice = self._header.strip(self._header.render(self._writer.now()) + DRIFT_NOTICE)
                self._writer.process(notice.body, notice.parts)
        return size

    def flush(self) -> None:
        self._writer.flush()

    def writable(self) -> bool:
        return True


__all__ = ["DRIFT_NOTICE", "LineWriter"]
