"""Report modules built on the garage kernel and engines."""
