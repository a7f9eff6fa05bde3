"""Reactix: fine-grained reactive dependency tracking for Python."""

from importlib.metadata import version as _version

__version__ = _version("reactix")

from reactix._errors import ReactivityError
from reactix._tracking import set_thread_scheduler
from reactix.effect import (
    ITERATE_KEY,
    ReactiveEffect,
    effect,
    stop,
    track,
    trigger,
    trigger_all,
)
from reactix.reactive import (
    ReactiveDict,
    ReactiveList,
    ReactiveObject,
    is_reactive,
    reactive,
    release,
    to_raw,
    to_reactive,
)
from reactix.ref import Ref, is_ref, ref, shallow_ref, trigger_ref, unref
from reactix.computed import ComputedRef, computed
from reactix.scheduler import batch, flush_jobs, get_pending_count, queue_job
# textual NOT auto-imported — opt-in only

__all__ = [
    "ReactivityError",
    "set_thread_scheduler",
    "ITERATE_KEY",
    "ReactiveEffect",
    "effect",
    "stop",
    "track",
    "trigger",
    "trigger_all",
    "ReactiveDict",
    "ReactiveList",
    "ReactiveObject",
    "is_reactive",
    "reactive",
    "release",
    "to_raw",
    "to_reactive",
    "Ref",
    "is_ref",
    "ref",
    "shallow_ref",
    "trigger_ref",
    "unref",
    "ComputedRef",
    "computed",
    "batch",
    "flush_jobs",
    "get_pending_count",
    "queue_job",
]
