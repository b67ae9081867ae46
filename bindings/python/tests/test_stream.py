import asyncio
import threading
import time
from typing import Any, List, Optional

import pytest

from rdflib import URIRef

from rdflink import (
    Channel,
    Environment,
    Model,
    Node,
    NodeCursor,
    OperationFailedError,
    Statement,
    Storage,
    StreamFaultError,
    StreamState,
    UseAfterRelease,
    open_stream,
)
from rdflink.engines.rdflib_engine import _Cursor

EX = "http://ex.org/"


def node_cursor(env: Environment, items: Optional[List[Any]]) -> NodeCursor:
    """Cursor over a scripted engine iterator; ``None`` items are null slots."""
    ptr = _Cursor(items) if items is not None else None
    return NodeCursor(env, ptr)


def uris(count: int) -> List[URIRef]:
    return [URIRef(f"{EX}{i}") for i in range(count)]


def texts(nodes: List[Node]) -> List[str]:
    return [node.uri.to_string() for node in nodes]


class Releasable:
    def __init__(self) -> None:
        self.released = False

    def release(self) -> None:
        self.released = True


# ============================================================================
# Channel
# ============================================================================


def test_channel_delivers_in_order_then_ends() -> None:
    channel: Channel[int] = Channel(2)
    assert channel.publish(1)
    assert channel.publish(2)
    channel.close()
    assert channel.receive() == 1
    assert channel.receive() == 2
    end = channel.receive()
    assert end not in (1, 2)
    assert channel.receive() is end


def test_channel_publish_blocks_while_full() -> None:
    channel: Channel[int] = Channel(1)
    channel.publish(1)
    published = threading.Event()

    def produce() -> None:
        channel.publish(2)
        published.set()

    worker = threading.Thread(target=produce)
    worker.start()
    assert not published.wait(0.05)
    assert channel.receive() == 1
    assert published.wait(1)
    worker.join()
    assert channel.receive() == 2


def test_channel_zero_capacity_is_a_rendezvous() -> None:
    channel: Channel[str] = Channel(0)
    result: List[bool] = []
    worker = threading.Thread(target=lambda: result.append(channel.publish("item")))
    worker.start()
    time.sleep(0.05)
    assert worker.is_alive()
    assert result == []
    assert channel.receive() == "item"
    worker.join(1)
    assert result == [True]


def test_channel_cancel_releases_buffered_items() -> None:
    channel: Channel[Releasable] = Channel(3)
    items = [Releasable(), Releasable()]
    for item in items:
        channel.publish(item)
    channel.cancel()
    assert all(item.released for item in items)
    assert channel.cancelled and channel.closed
    late = Releasable()
    assert channel.publish(late) is False
    assert late.released


def test_channel_cancel_wakes_blocked_publisher() -> None:
    channel: Channel[Releasable] = Channel(0)
    item = Releasable()
    result: List[bool] = []
    worker = threading.Thread(target=lambda: result.append(channel.publish(item)))
    worker.start()
    time.sleep(0.05)
    channel.cancel()
    worker.join(1)
    assert result == [False]
    assert item.released


def test_channel_receive_timeout() -> None:
    channel: Channel[int] = Channel(1)
    with pytest.raises(TimeoutError):
        channel.receive(timeout=0.01)


def test_channel_close_keeps_error() -> None:
    channel: Channel[int] = Channel(1)
    error = StreamFaultError("boom")
    channel.close(error)
    channel.close(None)
    assert channel.error is error


def test_channel_rejects_negative_capacity() -> None:
    with pytest.raises(ValueError):
        Channel(-1)


# ============================================================================
# Streams over cursors
# ============================================================================


@pytest.mark.parametrize("capacity", [0, 1, 5, 15])
def test_stream_yields_every_item_in_order(env: Environment, capacity: int) -> None:
    items = uris(5)
    stream = open_stream(node_cursor(env, items), capacity, name="scripted")
    assert stream.buffer_size == capacity
    received = list(stream)
    assert texts(received) == [str(item) for item in items]
    assert stream.error is None
    assert stream.closed
    assert stream.state is StreamState.CLOSED


def test_empty_cursor_yields_nothing(env: Environment) -> None:
    cursor = node_cursor(env, [])
    stream = open_stream(cursor, 4)
    assert list(stream) == []
    assert stream.closed
    assert cursor.released


def test_null_cursor_yields_nothing(env: Environment) -> None:
    cursor = node_cursor(env, None)
    assert cursor.is_exhausted()
    stream = open_stream(cursor, 0)
    assert stream.receive(timeout=1) is None
    assert stream.error is None
    assert cursor.released


def test_producer_finishes_without_consumer(env: Environment) -> None:
    stream = open_stream(node_cursor(env, uris(3)), 10)
    stream._producer.thread.join(1)
    assert stream.state is StreamState.EXHAUSTED
    assert len(stream.to_list()) == 3
    assert stream.state is StreamState.CLOSED


def test_null_item_faults_after_delivered_items(env: Environment) -> None:
    items: List[Any] = [URIRef(EX + "a"), None, URIRef(EX + "b")]
    cursor = node_cursor(env, items)
    stream = open_stream(cursor, 4, name="faulty")

    received = []
    with pytest.raises(StreamFaultError, match="node cursor yielded no item"):
        for node in stream:
            received.append(node)

    assert texts(received) == [EX + "a"]
    assert isinstance(stream.error, StreamFaultError)
    assert cursor.released
    with pytest.raises(StreamFaultError):
        stream.receive()


def test_fault_state_before_consumption(env: Environment) -> None:
    stream = open_stream(node_cursor(env, [None]), 2)
    stream._producer.thread.join(1)
    assert stream.state is StreamState.FAULTED
    assert isinstance(stream.error, StreamFaultError)


def test_engine_exception_becomes_stream_fault(env: Environment, monkeypatch: Any) -> None:
    def boom(iterator: Any) -> Any:
        raise RuntimeError("[OPERATION_FAILED] iterator broke")

    monkeypatch.setattr(env.engine, "iterator_next", boom)
    stream = open_stream(node_cursor(env, uris(3)), 1)
    with pytest.raises(StreamFaultError, match="iterator broke"):
        list(stream)
    assert isinstance(stream.error.__cause__, OperationFailedError)


def test_close_cancels_and_releases_cursor(env: Environment) -> None:
    cursor = node_cursor(env, uris(100))
    stream = open_stream(cursor, 1)
    first = stream.receive(timeout=1)
    assert first is not None

    stream.close()
    stream.close()

    assert stream.cancelled
    assert stream.closed
    assert stream.state is StreamState.CLOSED
    assert stream._producer.state is StreamState.CLOSED
    assert cursor.released
    assert not first.released
    with pytest.raises(UseAfterRelease, match="stream is closed"):
        stream.receive()
    assert list(stream) == []


def test_close_on_context_exit(env: Environment) -> None:
    cursor = node_cursor(env, uris(50))
    with open_stream(cursor, 0) as stream:
        next(stream)
    assert stream.cancelled
    assert cursor.released


def test_async_iteration(env: Environment) -> None:
    async def collect() -> List[str]:
        results = []
        async for node in open_stream(node_cursor(env, uris(4)), 1):
            results.append(node.uri.to_string())
        return results

    assert asyncio.run(collect()) == [str(item) for item in uris(4)]


def test_async_close_stops_iteration(env: Environment) -> None:
    cursor = node_cursor(env, uris(20))

    async def run() -> None:
        stream = open_stream(cursor, 1)
        first = await stream.__anext__()
        assert first.uri.to_string() == EX + "0"
        stream.close()
        with pytest.raises(StopAsyncIteration):
            await stream.__anext__()

    asyncio.run(run())
    assert cursor.released


def test_async_with_closes_stream(env: Environment) -> None:
    cursor = node_cursor(env, uris(20))

    async def run() -> None:
        async with open_stream(cursor, 0) as stream:
            await stream.__anext__()

    asyncio.run(run())
    assert cursor.released


def test_invalid_buffer_size(env: Environment) -> None:
    cursor = node_cursor(env, uris(1))
    with pytest.raises(ValueError, match="buffer_size"):
        open_stream(cursor, -1)
    cursor.release()


def test_abandoned_stream_is_cancelled_by_garbage_collection(env: Environment) -> None:
    cursor = node_cursor(env, uris(50))
    stream = open_stream(cursor, 0)
    producer = stream._producer
    del stream
    producer.thread.join(1)
    assert not producer.thread.is_alive()
    assert cursor.released


# ============================================================================
# Streams owned by models and environments
# ============================================================================


def fill(env: Environment, model: Model, count: int) -> None:
    p = Node.from_uri_string(env, EX + "p")
    for i in range(count):
        s = Node.from_uri_string(env, f"{EX}s{i}")
        o = Node.from_literal(env, str(i))
        model.add_statement(Statement.from_nodes(env, s, p, o))


def test_model_release_cancels_active_streams(env: Environment) -> None:
    model = Model(env, Storage(env, "memory"))
    fill(env, model, 10)
    stream = model.find_statements(buffer_size=0)
    stream.receive(timeout=1)

    model.release()

    assert stream.cancelled
    assert not stream._producer.running
    assert list(stream) == []


def test_environment_close_cancels_active_streams() -> None:
    env = Environment(engine="rdflib").open()
    model = Model(env, Storage(env, "memory"))
    fill(env, model, 10)
    stream = model.find_statements(buffer_size=1)

    env.close()

    assert stream.cancelled
    assert not stream._producer.running
    assert model.released


@pytest.mark.parametrize("capacity", [0, 1, 3, 13])
def test_find_statements_streams_every_statement(env: Environment, capacity: int) -> None:
    model = Model(env, Storage(env, "memory"))
    fill(env, model, 3)
    with model.find_statements(buffer_size=capacity) as stream:
        statements = list(stream)
    assert len(statements) == 3
    assert all(model.contains_statement(statement) for statement in statements)


def test_stream_uses_environment_buffer_size() -> None:
    with Environment(engine="rdflib", buffer_size=7) as env:
        model = Model(env, Storage(env, "memory"))
        with model.find_statements() as stream:
            assert stream.buffer_size == 7
