"""Reactive wrappers — plain objects whose reads track and whose writes trigger.

reactive(target) returns one wrapper per raw target:
- dict     -> ReactiveDict   (mapping access)
- list     -> ReactiveList   (sequence access)
- anything else with attributes -> ReactiveObject (attribute access)

Every read funnels through track(target, key), every write through
trigger(target, key). Object-typed values handed out by a read are wrapped
on the way out, so nested state is reactive without eager conversion.

Wrappers and dependency sets are held strongly. Call release(target) to
drop them once the target is retired.
"""

from __future__ import annotations

import inspect
import logging
import types
from collections.abc import MutableMapping, MutableSequence
from typing import Any, Iterable, Iterator, TypeVar

from reactix import _anchor
from reactix._shared import is_object
from reactix.effect import ITERATE_KEY, track, trigger, trigger_all

T = TypeVar("T")

logger = logging.getLogger("reactix.reactive")

_MISSING = object()


class ReactiveProxy:
    """Base of all wrappers. isinstance() against it is the wrapping marker."""

    __slots__ = ("__reactix_target__",)

    def __init__(self, target: object) -> None:
        object.__setattr__(self, "__reactix_target__", target)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.__reactix_target__!r})"


class ReactiveDict(ReactiveProxy, MutableMapping):
    __slots__ = ()

    __reactix_target__: dict

    def __getitem__(self, key):
        track(self.__reactix_target__, key)
        return to_reactive(self.__reactix_target__[key])

    def __setitem__(self, key, value) -> None:
        target = self.__reactix_target__
        added = key not in target
        target[key] = to_raw(value)
        if added:
            trigger(target, key, ITERATE_KEY)
        else:
            trigger(target, key)

    def __delitem__(self, key) -> None:
        target = self.__reactix_target__
        del target[key]
        trigger(target, key, ITERATE_KEY)

    def __contains__(self, key) -> bool:
        track(self.__reactix_target__, key)
        return key in self.__reactix_target__

    def __iter__(self) -> Iterator:
        track(self.__reactix_target__, ITERATE_KEY)
        return iter(list(self.__reactix_target__))

    def __len__(self) -> int:
        track(self.__reactix_target__, ITERATE_KEY)
        return len(self.__reactix_target__)

    # --- Writes that would otherwise read through the tracking mixins ---

    def pop(self, key, default=_MISSING):
        target = self.__reactix_target__
        if key not in target:
            if default is _MISSING:
                raise KeyError(key)
            return default
        value = target.pop(key)
        trigger(target, key, ITERATE_KEY)
        return value

    def popitem(self):
        target = self.__reactix_target__
        key, value = target.popitem()
        trigger(target, key, ITERATE_KEY)
        return key, value

    def setdefault(self, key, default=None):
        target = self.__reactix_target__
        if key in target:
            return self[key]
        target[key] = to_raw(default)
        trigger(target, key, ITERATE_KEY)
        return to_reactive(target[key])

    def clear(self) -> None:
        self.__reactix_target__.clear()
        trigger_all(self.__reactix_target__)


class ReactiveList(ReactiveProxy, MutableSequence):
    """Index reads track the index; structural changes notify the whole list."""

    __slots__ = ()

    __reactix_target__: list

    def __getitem__(self, index):
        target = self.__reactix_target__
        if isinstance(index, slice):
            track(target, ITERATE_KEY)
            return [to_reactive(item) for item in target[index]]
        track(target, _normalize(index, len(target)))
        return to_reactive(target[index])

    def __setitem__(self, index, value) -> None:
        target = self.__reactix_target__
        if isinstance(index, slice):
            target[index] = [to_raw(item) for item in value]
            trigger_all(target)
            return
        target[index] = to_raw(value)
        trigger(target, _normalize(index, len(target)))

    def __delitem__(self, index) -> None:
        del self.__reactix_target__[index]
        trigger_all(self.__reactix_target__)

    def __len__(self) -> int:
        track(self.__reactix_target__, ITERATE_KEY)
        return len(self.__reactix_target__)

    def __iter__(self) -> Iterator:
        track(self.__reactix_target__, ITERATE_KEY)
        for item in list(self.__reactix_target__):
            yield to_reactive(item)

    def __contains__(self, value) -> bool:
        track(self.__reactix_target__, ITERATE_KEY)
        return to_raw(value) in self.__reactix_target__

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, (list, ReactiveList)):
            return NotImplemented
        track(self.__reactix_target__, ITERATE_KEY)
        return self.__reactix_target__ == to_raw(other)

    __hash__ = None

    # --- Structural writes (bypass the mixins so they never track) ---

    def insert(self, index: int, value) -> None:
        self.__reactix_target__.insert(index, to_raw(value))
        trigger_all(self.__reactix_target__)

    def append(self, value) -> None:
        self.__reactix_target__.append(to_raw(value))
        trigger_all(self.__reactix_target__)

    def extend(self, values: Iterable) -> None:
        self.__reactix_target__.extend(to_raw(v) for v in values)
        trigger_all(self.__reactix_target__)

    def pop(self, index: int = -1):
        value = self.__reactix_target__.pop(index)
        trigger_all(self.__reactix_target__)
        return value

    def remove(self, value) -> None:
        self.__reactix_target__.remove(to_raw(value))
        trigger_all(self.__reactix_target__)

    def clear(self) -> None:
        self.__reactix_target__.clear()
        trigger_all(self.__reactix_target__)

    def reverse(self) -> None:
        self.__reactix_target__.reverse()
        trigger_all(self.__reactix_target__)

    def sort(self, *, key=None, reverse: bool = False) -> None:
        self.__reactix_target__.sort(key=key, reverse=reverse)
        trigger_all(self.__reactix_target__)


def _normalize(index: int, length: int) -> int:
    return index + length if index < 0 else index


class ReactiveObject(ReactiveProxy):
    """Attribute access on an arbitrary instance, tracked per attribute name.

    Methods and properties defined on the target's class run with the
    wrapper as `self`, so their reads track and their writes trigger.
    """

    __slots__ = ()

    def __getattr__(self, name: str) -> Any:
        target = object.__getattribute__(self, "__reactix_target__")
        attr = inspect.getattr_static(type(target), name, _MISSING)
        if isinstance(attr, property):
            return attr.__get__(self)
        if isinstance(attr, types.FunctionType) and name not in getattr(target, "__dict__", ()):
            return types.MethodType(attr, self)
        track(target, name)
        return to_reactive(getattr(target, name))

    def __setattr__(self, name: str, value: Any) -> None:
        target = self.__reactix_target__
        attr = inspect.getattr_static(type(target), name, _MISSING)
        if isinstance(attr, property) and attr.fset is not None:
            attr.__set__(self, value)
            return
        setattr(target, name, to_raw(value))
        trigger(target, name)

    def __delattr__(self, name: str) -> None:
        target = self.__reactix_target__
        delattr(target, name)
        trigger(target, name)


def reactive(target: T) -> T:
    """Return the reactive wrapper for target, creating it on first use.

    The same target always yields the same wrapper, and wrappers pass
    through unchanged. Values that cannot be wrapped are returned as-is.
    """
    if is_reactive(target):
        return target
    if not is_object(target):
        logger.warning("value cannot be made reactive: %r", target)
        return target
    existing = _anchor.proxies.get(id(target))
    if existing is not None:
        return existing
    if isinstance(target, dict):
        proxy = ReactiveDict(target)
    elif isinstance(target, list):
        proxy = ReactiveList(target)
    else:
        proxy = ReactiveObject(target)
    _anchor.proxies[_anchor.anchor(target)] = proxy
    return proxy


def is_reactive(value: object) -> bool:
    return isinstance(value, ReactiveProxy)


def to_reactive(value: T) -> T:
    """Wrap value if it is object-typed, otherwise hand it back."""
    return reactive(value) if is_object(value) else value


def to_raw(value: T) -> T:
    """Return the raw target behind a wrapper, or value itself."""
    if isinstance(value, ReactiveProxy):
        return object.__getattribute__(value, "__reactix_target__")
    return value


def release(target: object) -> None:
    """Forget target's wrapper and dependency sets.

    Subscribed effects stop hearing about writes to target; a later
    reactive(target) builds a fresh wrapper.
    """
    raw = to_raw(target)
    deps_map = _anchor.forget(raw)
    if deps_map:
        for dep in deps_map.values():
            for subscriber in dep:
                subscriber.deps[:] = [d for d in subscriber.deps if d is not dep]
            dep.clear()
        logger.debug("Released %d dependency sets of %s", len(deps_map), type(raw).__name__)
