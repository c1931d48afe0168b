"""Application layer: ports and the per-line use case."""
