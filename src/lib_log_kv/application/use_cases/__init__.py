"""Use cases orchestrating the domain objects."""

from __future__ import annotations

from .process_line import ProcessResult, process_line

__all__ = ["ProcessResult", "process_line"]
