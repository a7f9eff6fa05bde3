"""Active-effect context and cross-thread notification marshaling.

ReactiveEffect.run() installs itself in `active_effect` with a token and
resets it in a finally block, so nested runs restore the outer effect and
exceptions never leave a stale pointer behind.

Thread safety: call set_thread_scheduler() once from the owner thread. After
that, notifications caused by writes on any other thread are handed to the
scheduler. Owner-thread notifications remain synchronous.
"""

from __future__ import annotations

import contextvars
import threading
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from reactix.effect import ReactiveEffect

# The effect currently collecting dependencies, if any.
active_effect: contextvars.ContextVar[ReactiveEffect | None] = contextvars.ContextVar(
    "active_effect", default=None
)

_scheduler: Callable[[Callable[[], None]], object] | None = None
_scheduler_thread: threading.Thread | None = None


def set_thread_scheduler(scheduler: Callable[[Callable[[], None]], object] | None) -> None:
    """Marshal notifications from background threads through `scheduler`.

    Call once from the owner (main/UI) thread:
        reactix.set_thread_scheduler(app.call_from_thread)

    Pass None to turn marshaling off.
    """
    global _scheduler, _scheduler_thread
    _scheduler = scheduler
    _scheduler_thread = threading.current_thread() if scheduler is not None else None


def marshal(fn: Callable[[], None]) -> None:
    """Run fn now, or hand it to the thread scheduler when off the owner thread."""
    if _scheduler is not None and threading.current_thread() is not _scheduler_thread:
        _scheduler(fn)
    else:
        fn()
