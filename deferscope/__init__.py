"""Scoped deferred cleanup calls that run in reverse order when a scope ends, with examples."""

__version__ = "0.1.0"

__all__ = ["defer", "examples"]