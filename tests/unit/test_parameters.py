"""Unit tests for ParameterStore and parameter merging."""

import threading

import pytest

from lazyview.parameters import ParameterStore, merge_parameters


@pytest.mark.unit
def test_store_accessors():
    """Test has/get/set/all."""
    store = ParameterStore({"site": "Lazy"})

    assert store.has("site")
    assert not store.has("user")
    assert store.get("site") == "Lazy"
    assert store.get("user") is None
    assert store.get("user", "guest") == "guest"

    store.set("site", "Other")
    store.set("user", "ada")
    assert store.all() == {"site": "Other", "user": "ada"}
    assert len(store) == 2


@pytest.mark.unit
def test_all_returns_snapshot():
    """Test that mutating the snapshot does not touch the store."""
    store = ParameterStore({"x": 1})
    snapshot = store.all()
    snapshot["x"] = 2
    snapshot["y"] = 3

    assert store.all() == {"x": 1}


@pytest.mark.unit
def test_initial_mapping_is_copied():
    """Test that the store owns its parameters."""
    initial = {"x": 1}
    store = ParameterStore(initial)
    initial["x"] = 2

    assert store.get("x") == 1


@pytest.mark.unit
def test_shared_parameters_win():
    """Test the precedence rule: shared values override call values."""
    store = ParameterStore({"x": "A"})

    merged = store.merge({"x": "B", "y": "C"})

    assert merged == {"x": "A", "y": "C"}


@pytest.mark.unit
def test_merge_without_call_params():
    """Test merging with no call parameters."""
    assert ParameterStore({"x": 1}).merge() == {"x": 1}
    assert merge_parameters(None, {}) == {}


@pytest.mark.unit
def test_update():
    """Test bulk set."""
    store = ParameterStore()
    store.update({"a": 1, "b": 2})
    store.update({"b": 3})

    assert store.all() == {"a": 1, "b": 3}


@pytest.mark.unit
def test_concurrent_set():
    """Test that concurrent writers never lose keys."""
    store = ParameterStore()

    def writer(prefix):
        for i in range(200):
            store.set(f"{prefix}{i}", i)
            store.all()

    threads = [threading.Thread(target=writer, args=(p,)) for p in "abcd"]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(store) == 800
