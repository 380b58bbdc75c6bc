"""Shared utilities: I/O, process execution, validation, paths, clipboard."""
