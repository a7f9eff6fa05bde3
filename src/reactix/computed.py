"""Computed values — derived state with automatic dependency tracking.

A ComputedRef wraps a getter in a ReactiveEffect whose scheduler only marks
the cache dirty and tells the computed's own readers. Nothing recomputes
until the next read of `.value`.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from reactix.effect import ReactiveEffect
from reactix.ref import Ref, track_ref_value, trigger_ref_value

T = TypeVar("T")

_UNSET = object()


class ComputedRef(Ref[T]):
    """A derived value that auto-tracks dependencies and caches the result."""

    __slots__ = ("effect", "_value", "_dirty")

    def __init__(self, getter: Callable[[], T]) -> None:
        super().__init__()
        self._value = _UNSET
        self._dirty = True
        self.effect = ReactiveEffect(getter, self._invalidate)
        self.effect.computed = self

    def _invalidate(self) -> None:
        """Called when a dependency changed.

        Only the clean -> dirty transition notifies readers; further
        notifications while dirty are dropped.
        """
        if not self._dirty:
            self._dirty = True
            trigger_ref_value(self)

    @property
    def value(self) -> T:
        """Read the computed value. Recomputes if dirty."""
        track_ref_value(self)
        if self._dirty:
            self._value = self.effect.run()
            # A stopped computed is never told about changes, so never cache.
            self._dirty = not self.effect.active
        return self._value

    @property
    def dirty(self) -> bool:
        return self._dirty

    def stop(self) -> None:
        """Disconnect from all dependencies. Reads then recompute every time, untracked."""
        self.effect.stop()
        self._dirty = True
        self._value = _UNSET

    def __repr__(self) -> str:
        name = getattr(self.effect.fn, "__name__", "getter")
        state = "dirty" if self._dirty else f"cached={self._value!r}"
        return f"ComputedRef({name}, {state})"


def computed(getter: Callable[[], T]) -> ComputedRef[T]:
    """Decorator/factory to create a ComputedRef from a getter.

    Usage:
        state = reactive({"count": 1})

        @computed
        def doubled():
            return state["count"] * 2

        doubled.value  # 2
        state["count"] = 5
        doubled.value  # 10
    """
    if not callable(getter):
        raise TypeError(f"computed() expects a getter function, got {type(getter).__name__}")
    return ComputedRef(getter)
