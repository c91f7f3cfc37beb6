"""Scope-bound cleanup actions that run in reverse order of registration."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

T = TypeVar("T")


@dataclass
class Deferred:
    """A cleanup function paired with the argument it will be called with."""

    func: Callable[[Any], Any] | None
    arg: Any

    def run(self) -> None:
        """Call the function with its argument unless either is missing."""
        if self.func is not None and self.arg is not None:
            self.func(self.arg)


def cleanup_free(obj: Any) -> None:
    """Release the contents of ``obj``, reporting what is being cleaned up."""
    if obj is None:
        return
    print(f"Cleaning up free: {id(obj):#x}")
    if isinstance(obj, memoryview):
        obj.release()
    elif hasattr(obj, "clear"):
        obj.clear()


def cleanup_fclose(fp: Any) -> None:
    """Close a file-like object if one was given."""
    if fp is not None:
        fp.close()


def defer_cleanup(data: Deferred | None) -> None:
    """Run a deferred action if there is one."""
    if data is not None:
        data.run()


class DeferScope:
    """Collects cleanup actions and runs them last-in, first-out on exit."""

    def __init__(self) -> None:
        self._stack: list[Deferred] = []

    def __len__(self) -> int:
        return len(self._stack)

    def defer(self, func: Callable[[T], Any], arg: T) -> T:
        """Register ``func(arg)`` to run when the scope closes; returns ``arg``."""
        self._stack.append(Deferred(func, arg))
        return arg

    def defer_free(self, obj: T) -> T:
        """Register ``obj`` to have its contents released on close."""
        return self.defer(cleanup_free, obj)

    def defer_fclose(self, fp: T) -> T:
        """Register a file-like object to be closed on close."""
        return self.defer(cleanup_fclose, fp)

    def close(self) -> None:
        """Run every pending action, newest first.

        All actions run even if some raise; the first error is re-raised.
        """
        first_error: Exception | None = None
        while self._stack:
            deferred = self._stack.pop()
            try:
                defer_cleanup(deferred)
            except Exception as error:  # noqa: BLE001 - keep cleaning up
                if first_error is None:
                    first_error = error
        if first_error is not None:
            raise first_error

    def __enter__(self) -> "DeferScope":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False


def with_defer(func: Callable[..., T]) -> Callable[..., T]:
    """Give ``func`` a fresh DeferScope as its first argument for each call."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        with DeferScope() as scope:
            return func(scope, *args, **kwargs)

    return wrapper