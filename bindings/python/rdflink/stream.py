"""Bridge from engine cursors to bounded, closable, thread-safe streams.

Each stream drains one cursor on its own daemon thread into a bounded
:class:`Channel`. Consumers read with ``for``, ``async for`` or
:meth:`Stream.receive`. The cursor is always released by the producer,
whether the stream ends by exhaustion, by a fault or by cancellation.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import threading
import time
from collections import deque
from typing import Any, Deque, Generic, List, Optional, Sequence, TypeVar

from .cursor import Cursor
from .errors import RDFError, StreamFaultError, UseAfterRelease

logger = logging.getLogger(__name__)

T = TypeVar("T")

_END = object()


class StreamState(enum.Enum):
    CREATED = "created"
    DRAINING = "draining"
    EXHAUSTED = "exhausted"
    FAULTED = "faulted"
    CLOSED = "closed"


def _discard(items: List[Any]) -> None:
    for item in items:
        release = getattr(item, "release", None)
        if release is not None:
            release()


class Channel(Generic[T]):
    """Bounded FIFO between one producer and its consumers.

    ``capacity == 0`` is a rendezvous: :meth:`publish` returns only once a
    consumer has taken the item. Items refused after cancellation, or still
    buffered when the channel is cancelled, are released by the channel.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError("capacity must be non-negative")
        self.capacity = capacity
        self._items: Deque[T] = deque()
        self._cond = threading.Condition()
        self._closed = False
        self._cancelled = False
        self._error: Optional[BaseException] = None
        self._published = 0
        self._taken = 0

    @property
    def closed(self) -> bool:
        return self._closed or self._cancelled

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)

    def publish(self, item: T) -> bool:
        """Queue ``item``, blocking while full. Returns False once cancelled."""
        limit = max(self.capacity, 1)
        with self._cond:
            while not self._cancelled and not self._closed and len(self._items) >= limit:
                self._cond.wait()
            if self._cancelled or self._closed:
                refused = [item]
            else:
                refused = []
                self._items.append(item)
                self._published += 1
                ticket = self._published
                self._cond.notify_all()
                if self.capacity == 0:
                    while not self._cancelled and self._taken < ticket:
                        self._cond.wait()
                    if self._taken < ticket:
                        return False
                return True
        _discard(refused)
        return False

    def receive(self, timeout: Optional[float] = None) -> Any:
        """Next item, or the end marker once the channel is closed and empty."""
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._cond:
            while not self._items and not self._closed and not self._cancelled:
                if deadline is None:
                    self._cond.wait()
                    continue
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise TimeoutError("no item received before the timeout")
                self._cond.wait(remaining)
            if self._items:
                item = self._items.popleft()
                self._taken += 1
                self._cond.notify_all()
                return item
            return _END

    def close(self, error: Optional[BaseException] = None) -> None:
        """Stop accepting items; buffered items stay receivable."""
        with self._cond:
            if self._closed:
                return
            self._closed = True
            self._error = error
            self._cond.notify_all()

    def cancel(self) -> None:
        """Stop the channel and release every buffered item."""
        with self._cond:
            self._cancelled = True
            drained = list(self._items)
            self._items.clear()
            self._cond.notify_all()
        _discard(drained)


class _Producer:
    """Drains a cursor into a channel; the only owner of the cursor."""

    def __init__(self, cursor: Cursor[Any], channel: Channel[Any], name: str) -> None:
        self.cursor = cursor
        self.channel = channel
        self.name = name
        self.state = StreamState.CREATED
        self.thread = threading.Thread(target=self._run, name=f"rdflink-{name}", daemon=True)

    def start(self) -> None:
        self.thread.start()

    def _run(self) -> None:
        error: Optional[RDFError] = None
        self.state = StreamState.DRAINING
        logger.debug("%s stream draining", self.name)
        try:
            while not self.channel.cancelled:
                if self.cursor.is_exhausted():
                    break
                item = self.cursor.take()
                if not self.channel.publish(item):
                    break
                self.cursor.advance()
        except StreamFaultError as err:
            error = err
        except Exception as err:  # noqa: BLE001 - surfaced on the stream
            error = StreamFaultError(f"{self.name} stream failed", str(err) or type(err).__name__)
            error.__cause__ = err
        finally:
            try:
                self.cursor.release()
            except Exception as err:  # noqa: BLE001 - surfaced on the stream
                if error is None:
                    error = StreamFaultError(f"{self.name} cursor release failed", str(err))
                    error.__cause__ = err
            if self.channel.cancelled:
                self.state = StreamState.CLOSED
            elif error is not None:
                self.state = StreamState.FAULTED
                logger.error("%s stream faulted: %s", self.name, error)
            else:
                self.state = StreamState.EXHAUSTED
            self.channel.close(error)
            logger.debug("%s stream %s", self.name, self.state.value)

    @property
    def running(self) -> bool:
        return self.thread.is_alive()

    def release(self) -> None:
        """Cancel and wait for the producer thread to finish."""
        self.channel.cancel()
        if self.thread.is_alive() and self.thread is not threading.current_thread():
            self.thread.join()


class Stream(Generic[T]):
    """Consumer side of a streamed cursor.

    Iterate it with ``for`` or ``async for``, or pull items with
    :meth:`receive`. Items are owned by the consumer. When the producer
    faults, the error is raised after every item delivered before the fault
    has been consumed, and stays available on :attr:`error`.

    Example:
        >>> with model.find_statements() as stream:
        ...     for statement in stream:
        ...         print(statement)
    """

    def __init__(self, producer: _Producer) -> None:
        self._producer = producer
        self._channel = producer.channel
        self._closed = False
        self._finished = False

    @property
    def name(self) -> str:
        return self._producer.name

    @property
    def buffer_size(self) -> int:
        return self._channel.capacity

    @property
    def state(self) -> StreamState:
        if self._closed or self._finished:
            return StreamState.CLOSED
        return self._producer.state

    @property
    def error(self) -> Optional[BaseException]:
        return self._channel.error

    @property
    def closed(self) -> bool:
        return self._closed or self._finished

    @property
    def cancelled(self) -> bool:
        return self._channel.cancelled

    def receive(self, timeout: Optional[float] = None) -> Optional[T]:
        """Return the next item, or ``None`` once the stream has ended.

        Raises:
            TimeoutError: If no item arrives within ``timeout`` seconds
            StreamFaultError: If the producer faulted
            UseAfterRelease: If the stream was closed by the consumer
        """
        if self._closed:
            raise UseAfterRelease(f"{self.name} stream is closed")
        item = self._channel.receive(timeout)
        if item is _END:
            self._finished = True
            if self._channel.error is not None:
                raise self._channel.error
            return None
        return item

    def __iter__(self) -> "Stream[T]":
        return self

    def __next__(self) -> T:
        if self._closed or (self._finished and self._channel.error is None):
            raise StopIteration
        item = self.receive()
        if item is None:
            raise StopIteration
        return item

    def __aiter__(self) -> "Stream[T]":
        return self

    async def __anext__(self) -> T:
        if self._closed or (self._finished and self._channel.error is None):
            raise StopAsyncIteration
        item = await asyncio.to_thread(self.receive)
        if item is None:
            raise StopAsyncIteration
        return item

    def to_list(self) -> List[T]:
        """Drain the remaining items into a list."""
        return list(self)

    def close(self) -> None:
        """Cancel the stream, release undelivered items and wait for the producer."""
        if self._closed:
            return
        self._closed = True
        self._producer.release()

    def __enter__(self) -> "Stream[T]":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    async def __aenter__(self) -> "Stream[T]":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def __del__(self) -> None:
        if not getattr(self, "_closed", True):
            try:
                if self._producer.running:
                    logger.warning("%s stream garbage-collected while producing; cancelling", self.name)
                self._channel.cancel()
            except BaseException:
                pass
            self._closed = True

    def __repr__(self) -> str:
        return f"<Stream {self.name} {self.state.value}>"


def open_stream(
    cursor: Cursor[T], buffer_size: int, *, name: str = "stream", owners: Sequence[Any] = ()
) -> Stream[T]:
    """Start draining ``cursor`` on a producer thread and return its stream.

    Each handle in ``owners`` registers the producer as a dependent, so
    releasing any of them cancels the stream and waits for the producer.
    """
    if not isinstance(buffer_size, int) or isinstance(buffer_size, bool) or buffer_size < 0:
        raise ValueError("buffer_size must be a non-negative integer")
    producer = _Producer(cursor, Channel(buffer_size), name)
    try:
        for owner in owners:
            owner._adopt(producer)
    except UseAfterRelease:
        cursor.release()
        raise
    producer.start()
    return Stream(producer)
