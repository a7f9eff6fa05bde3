"""Textual integration for Reactix. Opt-in — requires textual.

render_effect() turns "state changed" into "re-render on the app's message
loop" instead of recomputing inside the write. Textual coupling stays in this
module; the core engine knows nothing about apps or widgets.
"""

import threading
from contextlib import contextmanager

from textual.css.query import NoMatches

from reactix.effect import ReactiveEffect

# Module-owned pause state — keyed by id(app) so multiple apps work in tests.
_paused_apps: set[int] = set()


@contextmanager
def pause(app):
    """Suspend render effects of app during widget replacement."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


def render_effect(app, fn) -> ReactiveEffect:
    """Run fn now, then re-run it on app's message loop when its state changes.

    Re-runs are skipped while the app is paused or not running, NoMatches from
    widget queries is swallowed, and changes from other threads are marshaled
    with call_from_thread. Call .stop() on the result to dispose.
    """
    _main = threading.get_ident()

    def _safe():
        try:
            fn()
        except NoMatches:
            pass

    def _rerun():
        # Re-runs queued before stop() must not touch widgets afterwards.
        if runner.active and is_safe(app):
            runner.run()

    def _schedule():
        if not is_safe(app):
            return
        if threading.get_ident() != _main:
            app.call_from_thread(_rerun)
        else:
            app.call_later(_rerun)

    runner = ReactiveEffect(_safe, _schedule)
    runner.run()
    return runner
