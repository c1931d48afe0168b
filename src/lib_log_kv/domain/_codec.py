"""Text/bytes conversion shared by the parser, encoder and printers.

Undecodable input bytes travel through the pipeline as ``surrogateescape``
code points and are written back out as the original bytes.
"""

from __future__ import annotations

ENCODING = "utf-8"


def is_escaped_byte(char: str) -> bool:
    """Return ``True`` for the code points ``surrogateescape`` uses for raw bytes."""

    return "\udc80" <= char <= "\udcff"


def decode_text(raw: bytes | bytearray | memoryview) -> str:
    """Decode ``raw`` as UTF-8, keeping invalid sequences as escaped bytes."""

    return bytes(raw).decode(ENCODING, "surrogateescape")


def encode_text(text: str) -> bytes:
    """Encode ``text`` as UTF-8, restoring escaped bytes.

    Lone surrogates that did not come from ``surrogateescape`` cannot be
    encoded and are replaced with ``?``.
    """

    try:
        return text.encode(ENCODING, "surrogateescape")
    except UnicodeEncodeError:
        return "".join(
            char if is_escaped_byte(char) or not "\ud800" <= char <= "\udfff" else "?" for char in text
        ).encode(ENCODING, "surrogateescape")


__all__ = ["ENCODING", "decode_text", "encode_text", "is_escaped_byte"]
