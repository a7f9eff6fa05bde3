"""Tests for reactive() wrappers."""

import logging

import pytest

from reactix import (
    ReactiveDict,
    ReactiveList,
    ReactiveObject,
    effect,
    is_reactive,
    reactive,
    release,
    to_raw,
    to_reactive,
)


class _Point:
    def __init__(self, x, y):
        self.x = x
        self.y = y


class _Counter:
    def __init__(self):
        self.n = 0
        self._target = "own"

    def increment(self):
        self.n += 1

    @property
    def doubled(self):
        return self.n * 2

    @property
    def count(self):
        return self.n

    @count.setter
    def count(self, value):
        self.n = value


class _Slotted:
    __slots__ = ("a",)

    def __init__(self, a):
        self.a = a


class TestIdentity:
    def test_same_target_same_wrapper(self):
        target = {"a": 1}
        assert reactive(target) is reactive(target)

    def test_rewrapping_is_noop(self):
        target = {"a": 1}
        assert reactive(reactive(target)) is reactive(target)

    def test_is_reactive(self):
        target = {"a": 1}
        assert is_reactive(reactive(target))
        assert not is_reactive(target)
        assert not is_reactive(5)

    def test_to_raw(self):
        target = [1, 2]
        assert to_raw(reactive(target)) is target
        assert to_raw(target) is target

    def test_wrapper_types(self):
        assert isinstance(reactive({}), ReactiveDict)
        assert isinstance(reactive([]), ReactiveList)
        assert isinstance(reactive(_Point(1, 2)), ReactiveObject)
        assert isinstance(reactive(_Slotted(1)), ReactiveObject)

    def test_non_object_returned_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="reactix.reactive"):
            assert reactive(5) == 5
            assert reactive("text") == "text"
        assert "cannot be made reactive" in caplog.text

    def test_to_reactive(self):
        assert to_reactive(3) == 3
        assert is_reactive(to_reactive({"a": 1}))

    def test_repr(self):
        assert repr(reactive({"a": 1})) == "ReactiveDict({'a': 1})"


class TestNested:
    def test_nested_value_is_reactive(self):
        state = reactive({"child": {"x": 1}})
        assert is_reactive(state["child"])
        assert state["child"] is reactive(to_raw(state)["child"])

    def test_nested_tracking(self):
        state = reactive({"child": {"x": 1}})
        log = []
        effect(lambda: log.append(state["child"]["x"]))
        state["child"]["x"] = 2
        assert log == [1, 2]

    def test_nested_attribute_tracking(self):
        state = reactive(_Point(_Point(1, 2), 0))
        log = []
        effect(lambda: log.append(state.x.y))
        assert is_reactive(state.x)
        state.x.y = 5
        assert log == [2, 5]

    def test_wrapper_written_is_stored_raw(self):
        inner = {"x": 1}
        state = reactive({"child": None})
        state["child"] = reactive(inner)
        assert to_raw(state)["child"] is inner


class TestReactiveDict:
    def test_get_set(self):
        state = reactive({"a": 1})
        log = []
        effect(lambda: log.append(state["a"]))
        state["a"] = 2
        assert log == [1, 2]
        assert state["a"] == 2

    def test_only_touched_keys_notify(self):
        state = reactive({"a": 1, "b": 2})
        log = []
        effect(lambda: log.append(state["a"]))
        state["b"] = 3
        assert log == [1]

    def test_missing_key_tracked(self):
        state = reactive({})
        log = []
        effect(lambda: log.append(state.get("a")))
        state["a"] = 1
        assert log == [None, 1]

    def test_contains_tracked(self):
        state = reactive({})
        log = []
        effect(lambda: log.append("a" in state))
        state["a"] = 1
        assert log == [False, True]

    def test_iteration_tracks_shape(self):
        state = reactive({"a": 1})
        log = []
        effect(lambda: log.append(sorted(state)))
        state["b"] = 2
        assert log == [["a"], ["a", "b"]]
        del state["a"]
        assert log == [["a"], ["a", "b"], ["b"]]

    def test_add_notifies_once(self):
        state = reactive({})
        log = []
        effect(lambda: log.append((len(state), state.get("k"))))
        state["k"] = 1
        assert log == [(0, None), (1, 1)]

    def test_mapping_helpers(self):
        state = reactive({"a": 1, "b": 2})
        assert dict(state.items()) == {"a": 1, "b": 2}
        assert state.pop("a") == 1
        state.update({"c": 3})
        assert state.setdefault("d", 4) == 4
        assert state == {"b": 2, "c": 3, "d": 4}

    def test_clear_notifies(self):
        state = reactive({"a": 1})
        log = []
        effect(lambda: log.append(state.get("a")))
        state.clear()
        assert log == [1, None]

    def test_pop_does_not_subscribe_writer(self):
        state = reactive({"x": 1, "y": 1})
        log = []

        def fn():
            log.append(state["y"])
            state.pop("x", None)

        effect(fn)
        state["x"] = 5
        assert log == [1]

    def test_pop_notifies_readers(self):
        state = reactive({"x": 1})
        log = []
        effect(lambda: log.append((len(state), state.get("x"))))
        assert state.pop("x") == 1
        assert log == [(1, 1), (0, None)]
        assert state.pop("x", "gone") == "gone"
        with pytest.raises(KeyError):
            state.pop("x")

    def test_popitem_notifies_readers(self):
        state = reactive({"x": 1})
        log = []
        effect(lambda: log.append(state.get("x")))
        assert state.popitem() == ("x", 1)
        assert log == [1, None]

    def test_setdefault_missing_key_is_a_write(self):
        state = reactive({"y": 0})
        readers = []
        writers = []
        effect(lambda: readers.append(state.get("x")))

        def fn():
            writers.append(state["y"])
            state.setdefault("x", {"deep": 1})

        effect(fn)
        assert readers == [None, {"deep": 1}]
        assert is_reactive(state.setdefault("x", None))
        state["x"] = 2
        assert writers == [0]


class TestReactiveList:
    def test_index_tracking(self):
        items = reactive([1, 2, 3])
        log = []
        effect(lambda: log.append(items[0]))
        items[0] = 10
        items[2] = 30
        assert log == [1, 10]

    def test_negative_index_same_key(self):
        items = reactive([1, 2, 3])
        log = []
        effect(lambda: log.append(items[-1]))
        items[2] = 30
        assert log == [3, 30]

    def test_structural_mutations_notify(self):
        items = reactive([1, 2])
        log = []
        effect(lambda: log.append(list(items)))
        items.append(3)
        items.pop()
        items.insert(0, 0)
        items.remove(0)
        items.extend([5, 6])
        assert log == [[1, 2], [1, 2, 3], [1, 2], [0, 1, 2], [1, 2], [1, 2, 5, 6]]

    def test_append_inside_effect_does_not_self_subscribe(self):
        items = reactive([])
        other = reactive({"n": 0})
        runs = []

        def fn():
            runs.append(other["n"])
            items.append(other["n"])

        effect(fn)
        items.append(99)
        assert runs == [0]

    def test_len_and_contains(self):
        items = reactive([1, 2])
        log = []
        effect(lambda: log.append((len(items), 3 in items)))
        items.append(3)
        assert log == [(2, False), (3, True)]

    def test_nested_items_reactive(self):
        items = reactive([{"x": 1}])
        log = []
        effect(lambda: log.append(items[0]["x"]))
        assert all(is_reactive(item) for item in items)
        items[0]["x"] = 2
        assert log == [1, 2]

    def test_slices(self):
        items = reactive([3, 1, 2])
        items[0:2] = [9, 8]
        assert items[:] == [9, 8, 2]
        items.sort()
        assert items == [2, 8, 9]
        items.reverse()
        assert items == [9, 8, 2]
        del items[0]
        assert items == [8, 2]


class TestReactiveObject:
    def test_attribute_tracking(self):
        point = reactive(_Point(1, 2))
        log = []
        effect(lambda: log.append(point.x))
        point.y = 5
        point.x = 3
        assert log == [1, 3]

    def test_slotted_target(self):
        obj = reactive(_Slotted(1))
        log = []
        effect(lambda: log.append(obj.a))
        obj.a = 2
        assert log == [1, 2]

    def test_missing_attribute_tracked(self):
        point = reactive(_Point(1, 2))
        log = []
        effect(lambda: log.append(getattr(point, "z", None)))
        point.z = 7
        assert log == [None, 7]

    def test_delete_notifies(self):
        point = reactive(_Point(1, 2))
        log = []
        effect(lambda: log.append(hasattr(point, "x")))
        del point.x
        assert log == [True, False]


class TestBoundMethods:
    def test_method_writes_trigger(self):
        counter = reactive(_Counter())
        log = []
        effect(lambda: log.append(counter.n))
        counter.increment()
        assert log == [0, 1]
        assert counter.n == 1

    def test_property_reads_track(self):
        counter = reactive(_Counter())
        log = []
        effect(lambda: log.append(counter.doubled))
        counter.n = 3
        assert log == [0, 6]

    def test_property_setter_triggers(self):
        counter = reactive(_Counter())
        log = []
        effect(lambda: log.append(counter.n))
        counter.count = 4
        assert log == [0, 4]
        assert counter.count == 4

    def test_target_attribute_names_pass_through(self):
        counter = reactive(_Counter())
        assert counter._target == "own"


class TestRelease:
    def test_release_drops_subscriptions(self):
        target = {"a": 1}
        state = reactive(target)
        log = []
        runner = effect(lambda: log.append(state["a"]))
        release(target)
        assert runner.deps == []
        state["a"] = 2
        assert log == [1]

    def test_release_allows_fresh_wrapper(self):
        target = {"a": 1}
        first = reactive(target)
        release(first)
        assert reactive(target) is not first
