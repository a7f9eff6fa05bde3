"""Reactix error types and the notification failure policy."""

from __future__ import annotations


class ReactivityError(Exception):
    """The engine detected a broken internal invariant."""


def reraise(errors: list[Exception], message: str) -> None:
    """Re-raise failures collected while notifying a whole snapshot.

    One failure propagates unchanged; several are grouped.
    """
    if not errors:
        return
    if len(errors) == 1:
        raise errors[0]
    raise ExceptionGroup(message, errors)
