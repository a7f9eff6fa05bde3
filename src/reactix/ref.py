"""Refs — single reactive cells.

A bare value has no identity to key the registry on, so each ref owns its
own dependency set, created on the first tracked read.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from reactix._shared import has_changed
from reactix._tracking import active_effect
from reactix.effect import Dep, create_dep, track_effects, trigger_effects
from reactix.reactive import to_raw, to_reactive

T = TypeVar("T")


class Ref(Generic[T]):
    """Base of every object exposing a reactive `.value`."""

    __slots__ = ("dep",)

    def __init__(self) -> None:
        self.dep: Dep | None = None


class RefImpl(Ref[T]):
    __slots__ = ("_value", "_raw_value", "_shallow")

    def __init__(self, value: T, shallow: bool = False) -> None:
        super().__init__()
        self._shallow = shallow
        self._raw_value = value if shallow else to_raw(value)
        self._value = value if shallow else to_reactive(value)

    @property
    def value(self) -> T:
        track_ref_value(self)
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        if not self._shallow:
            new_value = to_raw(new_value)
        if has_changed(new_value, self._raw_value):
            self._raw_value = new_value
            self._value = new_value if self._shallow else to_reactive(new_value)
            trigger_ref_value(self)

    def __repr__(self) -> str:
        return f"Ref({self._value!r})"


def track_ref_value(r: Ref) -> None:
    current = active_effect.get()
    if current is not None:
        if r.dep is None:
            r.dep = create_dep()
        track_effects(r.dep, current)


def trigger_ref_value(r: Ref) -> None:
    if r.dep:
        trigger_effects(r.dep)


def ref(value: T = None) -> Ref[T]:
    """Wrap value in a reactive cell. Refs pass through unchanged.

    Usage:
        count = ref(0)
        log = []
        effect(lambda: log.append(count.value))
        count.value = 0   # unchanged, nothing runs
        count.value = 1   # log == [0, 1]
    """
    if is_ref(value):
        return value
    return RefImpl(value)


def shallow_ref(value: T = None) -> Ref[T]:
    """A ref whose value is stored as-is; only `.value` assignment notifies."""
    if is_ref(value):
        return value
    return RefImpl(value, shallow=True)


def is_ref(value: object) -> bool:
    return isinstance(value, Ref)


def unref(value):
    return value.value if is_ref(value) else value


def trigger_ref(r: Ref) -> None:
    """Notify r's dependents without a write, e.g. after mutating a shallow ref in place."""
    trigger_ref_value(r)
