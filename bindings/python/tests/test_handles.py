import gc
from collections import Counter
from typing import Any, Iterator

import pytest

import rdflink.world as world_module
from rdflink import (
    AllocationError,
    Environment,
    Model,
    Node,
    OperationFailedError,
    Parser,
    Query,
    Serializer,
    Statement,
    Storage,
    Uri,
    UseAfterRelease,
)
from rdflink.engines.rdflib_engine import RdflibEngine


class CountingEngine(RdflibEngine):
    """rdflib engine that counts every free call per resource kind."""

    def __init__(self) -> None:
        self.frees: Counter = Counter()
        self.freed_ids: Counter = Counter()

    def _record(self, kind: str, ptr: Any) -> None:
        self.frees[kind] += 1
        self.freed_ids[id(ptr)] += 1

    def free_node(self, node: Any) -> None:
        self._record("node", node)

    def free_uri(self, uri: Any) -> None:
        self._record("uri", uri)

    def free_statement(self, statement: Any) -> None:
        self._record("statement", statement)

    def free_model(self, model: Any) -> None:
        self._record("model", model)
        super().free_model(model)

    def free_storage(self, storage: Any) -> None:
        self._record("storage", storage)
        super().free_storage(storage)

    def free_world(self, world: Any) -> None:
        self._record("world", world)
        super().free_world(world)


@pytest.fixture
def counting(monkeypatch: pytest.MonkeyPatch) -> Iterator[CountingEngine]:
    engine = CountingEngine()
    monkeypatch.setattr(world_module, "load_engine", lambda settings: engine)
    yield engine


def test_handles_require_open_environment() -> None:
    env = Environment(engine="rdflib")
    assert env.is_open is False
    with pytest.raises(UseAfterRelease, match="environment is not open"):
        Uri(env, "http://ex.org/")
    env.open()
    assert env.is_open is True
    env.close()


def test_open_is_idempotent_but_reopen_is_refused() -> None:
    env = Environment(engine="rdflib")
    assert env.open() is env
    assert env.open() is env
    env.close()
    assert env.is_open is False
    with pytest.raises(UseAfterRelease, match="cannot be reopened"):
        env.open()


def test_close_is_idempotent(counting: CountingEngine) -> None:
    env = Environment().open()
    env.close()
    env.close()
    assert counting.frees["world"] == 1


def test_context_manager_opens_and_closes() -> None:
    with Environment(engine="rdflib") as env:
        assert env.is_open
        node = Node.from_literal(env, "x")
    assert env.is_open is False
    assert node.released is True


def test_release_is_idempotent(counting: CountingEngine) -> None:
    with Environment() as env:
        node = Node.from_uri_string(env, "http://ex.org/a")
        node.release()
        node.release()
        assert counting.frees["node"] == 1


def test_use_after_release_raises(env: Environment) -> None:
    node = Node.from_literal(env, "value")
    node.release()
    with pytest.raises(UseAfterRelease, match="node has been released"):
        node.to_string()
    with pytest.raises(UseAfterRelease):
        node.copy()


def test_handle_context_manager_releases(env: Environment) -> None:
    with Uri(env, "http://ex.org/") as uri:
        assert uri.to_string() == "http://ex.org/"
    assert uri.released


def test_environment_close_releases_children_once(counting: CountingEngine) -> None:
    env = Environment().open()
    storage = Storage(env, "memory")
    model = Model(env, storage)
    nodes = [Node.from_literal(env, str(i)) for i in range(5)]
    statement = Statement(env)
    uri = Uri(env, "http://ex.org/")

    env.close()

    assert all(node.released for node in nodes)
    assert model.released and storage.released and statement.released and uri.released
    assert counting.frees["node"] == 5
    assert counting.frees["model"] == 1
    assert counting.frees["storage"] == 1
    assert counting.frees["world"] == 1
    assert max(counting.freed_ids.values()) == 1


def test_storage_release_releases_models_first(counting: CountingEngine) -> None:
    order = []
    original_free_model = counting.free_model
    original_free_storage = counting.free_storage

    def free_model(model: Any) -> None:
        order.append("model")
        original_free_model(model)

    def free_storage(storage: Any) -> None:
        order.append("storage")
        original_free_storage(storage)

    counting.free_model = free_model  # type: ignore[assignment]
    counting.free_storage = free_storage  # type: ignore[assignment]
    with Environment() as env:
        storage = Storage(env, "memory")
        first = Model(env, storage)
        second = Model(env, storage)
        storage.release()
        assert first.released and second.released
        with pytest.raises(UseAfterRelease):
            first.size()
    assert order == ["model", "model", "storage"]


def test_borrowed_views_never_free(counting: CountingEngine) -> None:
    with Environment() as env:
        node = Node.from_uri_string(env, "http://ex.org/a")
        view = node.uri
        assert view is not None
        assert view.owned is False
        view.release()
        assert counting.frees["uri"] == 0
        assert node.to_string() == "<http://ex.org/a>"


def test_views_are_released_with_their_parent(env: Environment) -> None:
    node = Node.from_uri_string(env, "http://ex.org/a")
    view = node.uri
    node.release()
    assert view.released
    with pytest.raises(UseAfterRelease):
        view.to_string()


def test_garbage_collected_handles_are_freed(counting: CountingEngine) -> None:
    with Environment() as env:
        node = Node.from_literal(env, "temporary")
        del node
        gc.collect()
        assert counting.frees["node"] == 1


def test_constructor_failures_raise_allocation_error(env: Environment) -> None:
    with pytest.raises(AllocationError):
        Storage(env, "no-such-storage")
    with pytest.raises(AllocationError):
        Parser(env, "no-such-parser")
    with pytest.raises(AllocationError):
        Serializer(env, "no-such-serializer")
    with pytest.raises(AllocationError, match="unable to compile"):
        Query(env, "SELECT WHERE {")


def test_allocation_error_carries_engine_message(env: Environment) -> None:
    with pytest.raises(AllocationError) as info:
        Storage(env, "no-such-storage")
    assert info.value.detail == env.last_error
    assert "no-such-storage" in str(info.value)


def test_repr_reports_state(env: Environment) -> None:
    uri = Uri(env, "http://ex.org/")
    assert repr(uri) == "<Uri 'http://ex.org/'>"
    uri.release()
    assert repr(uri) == "<Uri released>"
    assert "open" in repr(env)


def test_from_nodes_frees_copies_when_a_copy_fails(counting: CountingEngine, monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []
    original = counting.new_node_from_node

    def new_node_from_node(node: Any) -> Any:
        calls.append(node)
        if len(calls) == 2:
            raise RuntimeError("[ALLOCATION] out of nodes")
        return original(node)

    monkeypatch.setattr(counting, "new_node_from_node", new_node_from_node)
    with Environment() as env:
        s = Node.from_uri_string(env, "http://ex.org/s")
        p = Node.from_uri_string(env, "http://ex.org/p")
        with pytest.raises(AllocationError, match="out of nodes"):
            Statement.from_nodes(env, s, p)
        assert counting.frees["node"] == 1
        assert not s.released and not p.released


def test_from_nodes_frees_copies_when_the_statement_fails(
    counting: CountingEngine, monkeypatch: pytest.MonkeyPatch
) -> None:
    def new_statement_from_nodes(world: Any, subject: Any, predicate: Any, obj: Any) -> Any:
        raise RuntimeError("[OPERATION_FAILED] statement rejected")

    monkeypatch.setattr(counting, "new_statement_from_nodes", new_statement_from_nodes)
    with Environment() as env:
        s = Node.from_uri_string(env, "http://ex.org/s")
        p = Node.from_uri_string(env, "http://ex.org/p")
        o = Node.from_literal(env, "o")
        with pytest.raises(OperationFailedError, match="statement rejected"):
            Statement.from_nodes(env, s, p, o)
        assert counting.frees["node"] == 3
        assert counting.frees["statement"] == 0
