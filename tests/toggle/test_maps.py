from __future__ import annotations

import threading

import pytest

from togglestack.core.exceptions import InvalidFractionError, InvalidNameError
from togglestack.core.toggle.maps import (
    NULL_TOGGLE_MAP,
    ImmutableToggleMap,
    MutableToggleMap,
    StackedToggleMap,
    is_null,
    stack,
)
from togglestack.core.toggle.models import ToggleMetadata


def _immutable(source: str, **toggles: float) -> ImmutableToggleMap:
    return ImmutableToggleMap(
        [ToggleMetadata(toggle_id, fraction, None, source) for toggle_id, fraction in toggles.items()],
        source=source,
    )


def test_null_map_defines_nothing() -> None:
    assert NULL_TOGGLE_MAP.get("anything") is None
    assert list(NULL_TOGGLE_MAP) == []
    assert NULL_TOGGLE_MAP.is_empty
    assert is_null(NULL_TOGGLE_MAP)
    assert "anything" not in NULL_TOGGLE_MAP


def test_immutable_map_lookup_and_len() -> None:
    m = _immutable("lib", a=0.1, b=1.0)
    assert len(m) == 2
    assert m.get("a") == ToggleMetadata("a", 0.1, None, "lib")
    assert m.get("missing") is None
    assert "b" in m
    assert not is_null(m)


def test_empty_immutable_map_is_not_null() -> None:
    m = ImmutableToggleMap([], source="empty.json")
    assert m.is_empty
    assert not is_null(m)


def test_immutable_map_rejects_duplicate_ids() -> None:
    with pytest.raises(ValueError, match="Duplicate toggle id 'a'"):
        ImmutableToggleMap([ToggleMetadata("a", 0.0), ToggleMetadata("a", 1.0)], source="x")


def test_mutable_map_put_remove_clear() -> None:
    m = MutableToggleMap()
    m.put("com.example.A", 0.25, description="first")
    assert m.get("com.example.A") == ToggleMetadata("com.example.A", 0.25, "first", "mutable")

    m.put("com.example.A", 1)
    assert m.get("com.example.A").fraction == 1.0

    m.remove("com.example.A")
    m.remove("never-there")
    assert m.get("com.example.A") is None

    m.put("x", 0.0)
    m.clear()
    assert m.is_empty


def test_mutable_map_validates_input() -> None:
    m = MutableToggleMap()
    with pytest.raises(InvalidNameError):
        m.put("bad id", 0.5)
    with pytest.raises(InvalidFractionError):
        m.put("ok", 1.5)
    assert m.is_empty


def test_mutable_map_iteration_is_a_snapshot() -> None:
    m = MutableToggleMap()
    m.put("a", 0.1)
    it = m.iter_metadata()
    m.put("b", 0.2)
    assert [md.id for md in it] == ["a"]


def test_mutable_map_concurrent_writers() -> None:
    m = MutableToggleMap()

    def writer(prefix: str) -> None:
        for i in range(200):
            m.put(f"{prefix}.{i}", 0.5)

    threads = [threading.Thread(target=writer, args=(f"t{n}",)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(list(m)) == 800


def test_stack_first_defined_wins_and_is_stable() -> None:
    mutable = MutableToggleMap()
    mutable.put("shared", 1.0)
    library = _immutable("library", shared=0.0, only_library=0.3)

    chain = StackedToggleMap.of(mutable, library)
    for _ in range(5):
        assert chain.get("shared").fraction == 1.0
        assert chain.get("shared").source == "mutable"
    assert chain.get("only_library").fraction == 0.3
    assert chain.get("nowhere") is None


def test_stack_sees_later_mutable_changes() -> None:
    mutable = MutableToggleMap()
    chain = StackedToggleMap.of(mutable, _immutable("lib", t=0.0))
    assert chain.get("t").fraction == 0.0
    mutable.put("t", 0.9)
    assert chain.get("t").fraction == 0.9
    mutable.remove("t")
    assert chain.get("t").fraction == 0.0


def test_stack_iter_metadata_reports_winning_definition_once() -> None:
    chain = StackedToggleMap.of(_immutable("high", a=1.0), _immutable("low", a=0.0, b=0.5))
    items = {md.id: md for md in chain.iter_metadata()}
    assert set(items) == {"a", "b"}
    assert items["a"].source == "high"


def test_nested_stacks_are_flattened() -> None:
    a, b, c = _immutable("a", x=0.1), _immutable("b"), _immutable("c")
    chain = StackedToggleMap.of(StackedToggleMap.of(a, b), c)
    assert chain.components() == (a, b, c)


def test_five_layer_stack_routes_each_id_to_its_layer() -> None:
    mutable = MutableToggleMap()
    mutable.put("from.mutable", 0.1)
    layers = [
        mutable,
        _immutable("flags", **{"from.flags": 0.2}),
        _immutable("service", **{"from.service": 0.3}),
        _immutable("dynamic", **{"from.dynamic": 0.4}),
        _immutable("library", **{"from.library": 0.5}),
    ]
    chain = stack(*layers)

    assert chain.components() == tuple(layers)
    expected = {
        "from.mutable": 0.1,
        "from.flags": 0.2,
        "from.service": 0.3,
        "from.dynamic": 0.4,
        "from.library": 0.5,
    }
    for toggle_id, fraction in expected.items():
        assert chain.get(toggle_id).fraction == fraction
    assert chain.get("from.nowhere") is None


def test_stack_precedence_order() -> None:
    names = ["mutable", "flags", "service", "dynamic", "library"]
    layers = [_immutable(name, t=float(i) / 10) for i, name in enumerate(names)]
    # Remove layers from the top one at a time; the next one down must win.
    for i, name in enumerate(names):
        chain = stack(*([NULL_TOGGLE_MAP] * i + layers[i:]))
        assert chain.get("t").source == name
