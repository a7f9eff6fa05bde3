"""Data anchor — plain Python structures that hold the dependency graph.

Dicts and lists cannot be weakly referenced, so everything is keyed by
id(target) and the target itself is held in `targets` to keep the id unique.
release() in reactix.reactive is the only path that drops an entry.
"""

# target_id -> raw target
targets: dict[int, object] = {}

# target_id -> {key -> set of ReactiveEffect}
deps_maps: dict[int, dict[object, set]] = {}

# target_id -> wrapper
proxies: dict[int, object] = {}


def anchor(target: object) -> int:
    key = id(target)
    targets[key] = target
    return key


def forget(target: object) -> dict[object, set] | None:
    key = id(target)
    targets.pop(key, None)
    proxies.pop(key, None)
    return deps_maps.pop(key, None)
