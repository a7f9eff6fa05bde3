"""Effects — units of computation that re-run when what they read changes.

An effect runs its function as the active effect. Every reactive read made
during that run (wrapper access, ref or computed .value) records an edge from
the effect to the location read, and the effect keeps the reverse list of the
dependency sets it joined so stop() can detach it.

track()/trigger() form the dependency registry over (target, key) pairs.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Generic, Iterable, TypeVar

from reactix import _anchor
from reactix._errors import ReactivityError, reraise
from reactix._tracking import active_effect, marshal

if TYPE_CHECKING:
    from reactix.computed import ComputedRef

T = TypeVar("T")

Dep = set
EffectScheduler = Callable[[], object]

logger = logging.getLogger("reactix.effect")

# Key tracked by len()/iteration; triggered when a container changes shape.
ITERATE_KEY = object()


def create_dep() -> Dep:
    return set()


class ReactiveEffect(Generic[T]):
    """A function whose reactive reads are tracked while it runs."""

    __slots__ = ("fn", "scheduler", "computed", "active", "deps", "on_stop", "parent")

    def __init__(self, fn: Callable[[], T], scheduler: EffectScheduler | None = None) -> None:
        self.fn = fn
        self.scheduler = scheduler
        # Set when this effect backs a ComputedRef.
        self.computed: ComputedRef | None = None
        self.active = True
        self.deps: list[Dep] = []
        self.on_stop: Callable[[], None] | None = None
        # The effect that was active when this one started running.
        self.parent: ReactiveEffect | None = None

    def run(self) -> T:
        """Execute fn as the active effect and return its result."""
        if not self.active:
            return self.fn()

        # Already running further up the stack: re-entering would never end.
        if _on_active_chain(self):
            return None

        _cleanup(self)
        self.parent = active_effect.get()
        token = active_effect.set(self)
        try:
            result = self.fn()
        except BaseException:
            self._restore(token)
            raise
        current = self._restore(token)
        if current is not self:
            raise ReactivityError(
                f"active effect was {current!r} when {self!r} finished running"
            )
        return result

    def _restore(self, token) -> ReactiveEffect | None:
        current = active_effect.get()
        active_effect.reset(token)
        self.parent = None
        return current

    def stop(self) -> None:
        """Detach from every dependency set. The effect stops being notified."""
        if not self.active:
            return
        _cleanup(self)
        self.active = False
        if self.on_stop is not None:
            self.on_stop()
        logger.debug("Stopped %r", self)

    def __repr__(self) -> str:
        name = getattr(self.fn, "__name__", type(self.fn).__name__)
        state = "active" if self.active else "stopped"
        return f"ReactiveEffect({name}, {state})"


def _on_active_chain(target_effect: ReactiveEffect) -> bool:
    current = active_effect.get()
    while current is not None:
        if current is target_effect:
            return True
        current = current.parent
    return False


def _cleanup(effect: ReactiveEffect) -> None:
    for dep in effect.deps:
        dep.discard(effect)
    effect.deps.clear()


def effect(
    fn: Callable[[], T],
    *,
    lazy: bool = False,
    scheduler: EffectScheduler | None = None,
    on_stop: Callable[[], None] | None = None,
) -> ReactiveEffect[T]:
    """Run fn now and again whenever any reactive state it read changes.

    With `scheduler`, a change calls the scheduler instead of re-running fn.
    With `lazy=True`, the initial run is skipped; call .run() yourself.

    Usage:
        state = reactive({"count": 0})
        log = []

        runner = effect(lambda: log.append(state["count"]))
        # log == [0]

        state["count"] = 1
        # log == [0, 1]

        runner.stop()
        state["count"] = 2
        # log == [0, 1]
    """
    runner = ReactiveEffect(fn, scheduler)
    runner.on_stop = on_stop
    if not lazy:
        runner.run()
    return runner


def stop(runner: ReactiveEffect) -> None:
    runner.stop()


def track(target: object, key: object) -> None:
    """Subscribe the active effect to (target, key). No-op outside an effect."""
    current = active_effect.get()
    if current is None:
        return
    target_id = _anchor.anchor(target)
    deps_map = _anchor.deps_maps.get(target_id)
    if deps_map is None:
        deps_map = _anchor.deps_maps[target_id] = {}
    dep = deps_map.get(key)
    if dep is None:
        dep = deps_map[key] = create_dep()
    track_effects(dep, current)


def track_effects(dep: Dep, current: ReactiveEffect | None = None) -> None:
    if current is None:
        current = active_effect.get()
        if current is None:
            return
    if current not in dep:
        dep.add(current)
        current.deps.append(dep)


def trigger(target: object, key: object, *more_keys: object) -> None:
    """Notify every effect subscribed to (target, key) for any of the keys."""
    deps_map = _anchor.deps_maps.get(id(target))
    if not deps_map:
        return
    _trigger_deps([deps_map.get(k) for k in (key, *more_keys)])


def trigger_all(target: object) -> None:
    """Notify every effect subscribed to any key of target."""
    deps_map = _anchor.deps_maps.get(id(target))
    if not deps_map:
        return
    _trigger_deps(deps_map.values())


def _trigger_deps(deps: Iterable[Dep | None]) -> None:
    merged: Dep = create_dep()
    for dep in deps:
        if dep:
            merged.update(dep)
    if merged:
        trigger_effects(merged)


def trigger_effects(dep: Dep) -> None:
    """Dispatch every effect in a snapshot of dep.

    Effects backing a computed go first so plain effects that read the
    computed find it already dirty. Every effect is dispatched even if an
    earlier one raised; failures are re-raised once the snapshot is done.
    """
    effects = list(dep)
    snapshot = [e for e in effects if e.computed is not None]
    snapshot.extend(e for e in effects if e.computed is None)
    marshal(lambda: _notify(snapshot))


def _notify(snapshot: list[ReactiveEffect]) -> None:
    errors: list[Exception] = []
    for target_effect in snapshot:
        try:
            trigger_effect(target_effect)
        except Exception as exc:
            errors.append(exc)
    if errors:
        logger.debug("%d of %d effects failed during trigger", len(errors), len(snapshot))
    reraise(errors, "effects failed during trigger")


def trigger_effect(target_effect: ReactiveEffect) -> None:
    # An effect writing state it or an enclosing effect reads must not re-enter.
    if _on_active_chain(target_effect):
        return
    if target_effect.scheduler is not None:
        target_effect.scheduler()
    else:
        target_effect.run()
