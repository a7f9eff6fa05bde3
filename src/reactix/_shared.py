"""Small predicates shared by the reactive modules."""

from __future__ import annotations

import math
import types

# Values that can never be wrapped: immutable scalars and containers.
_IMMUTABLE = (str, bytes, int, float, complex, bool, tuple, frozenset, range, type(None))


def is_function(value: object) -> bool:
    return callable(value)


def is_string(value: object) -> bool:
    return isinstance(value, str)


def is_object(value: object) -> bool:
    """True for mutable values that reactive() can wrap.

    dicts, lists and plain instances carrying attributes qualify. Classes,
    modules, callables and immutable values do not.
    """
    if isinstance(value, (dict, list)):
        return True
    if isinstance(value, _IMMUTABLE) or isinstance(value, (type, types.ModuleType)):
        return False
    if is_function(value):
        return False
    return hasattr(value, "__dict__") or hasattr(type(value), "__slots__")


def has_changed(value: object, old_value: object) -> bool:
    """Identity for objects, value equality for scalars, NaN equal to NaN."""
    if value is old_value:
        return False
    if is_object(value) or is_object(old_value):
        return True
    if type(value) is not type(old_value):
        return True
    if isinstance(value, float) and math.isnan(value) and math.isnan(old_value):
        return False
    return bool(value != old_value)
