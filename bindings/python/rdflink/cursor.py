"""Pull-style cursors over engine streams, iterators and query results."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, Iterable, List, Optional, TypeVar

from .engines.base import Ptr
from .errors import StreamFaultError, _wrap_native_call
from .handle import Handle
from .node import Node
from .statement import Statement

if TYPE_CHECKING:
    from .query import QueryResultItem, QueryResults
    from .world import Environment

T = TypeVar("T")


class Cursor(Handle, Generic[T]):
    """Wraps one engine cursor: ``is_exhausted()``, ``current()``, ``advance()``.

    A cursor built around a null engine pointer is exhausted from the start.
    Items returned by :meth:`current` are views that become invalid on the
    next :meth:`advance`; :meth:`take` copies the current item out.
    Releasing the cursor is separate from exhausting it.
    """

    _kind = "cursor"

    def __init__(
        self,
        env: "Environment",
        ptr: Optional[Ptr],
        *,
        owned: bool = True,
        owner: Optional[Handle] = None,
        keepalive: Iterable[Handle] = (),
    ) -> None:
        super().__init__(env, ptr, owned=owned, owner=owner)
        self._keepalive: List[Handle] = list(keepalive)

    def _end(self, ptr: Ptr) -> bool:
        raise NotImplementedError

    def _get(self, ptr: Ptr) -> Optional[Ptr]:
        raise NotImplementedError

    def _next(self, ptr: Ptr) -> Any:
        raise NotImplementedError

    def _view(self, raw: Ptr) -> T:
        raise NotImplementedError

    def _copy(self, raw: Ptr) -> T:
        raise NotImplementedError

    def is_exhausted(self) -> bool:
        ptr = self._assert_live()
        if ptr is None:
            return True
        return bool(_wrap_native_call(self._end, ptr))

    def _current_raw(self) -> Ptr:
        ptr = self._assert_live()
        raw = _wrap_native_call(self._get, ptr) if ptr is not None else None
        if raw is None:
            raise StreamFaultError(f"{self._kind} yielded no item", self._env.last_error)
        return raw

    def current(self) -> T:
        """Borrowed view of the current item."""
        return self._view(self._current_raw())

    def take(self) -> T:
        """Owned copy of the current item."""
        return self._copy(self._current_raw())

    def advance(self) -> None:
        ptr = self._assert_live()
        if ptr is None:
            return
        self._release_dependents()
        _wrap_native_call(self._next, ptr)

    def _after_release(self) -> None:
        keepalive, self._keepalive = self._keepalive, []
        for handle in keepalive:
            handle.release()

    def __iter__(self):
        """Yield owned copies until the cursor is exhausted."""
        while not self.is_exhausted():
            yield self.take()
            self.advance()


class StatementCursor(Cursor[Statement]):
    _kind = "statement cursor"

    def _end(self, ptr: Ptr) -> bool:
        return self._engine.stream_end(ptr)

    def _get(self, ptr: Ptr) -> Optional[Ptr]:
        return self._engine.stream_get_object(ptr)

    def _next(self, ptr: Ptr) -> Any:
        return self._engine.stream_next(ptr)

    def _view(self, raw: Ptr) -> Statement:
        return Statement._wrap(self._env, raw, owned=False, owner=self)

    def _copy(self, raw: Ptr) -> Statement:
        return Statement._wrap(self._env, _wrap_native_call(self._engine.new_statement_from_statement, raw))

    def _free(self, ptr: Ptr) -> None:
        self._engine.free_stream(ptr)


class NodeCursor(Cursor[Node]):
    _kind = "node cursor"

    def _end(self, ptr: Ptr) -> bool:
        return self._engine.iterator_end(ptr)

    def _get(self, ptr: Ptr) -> Optional[Ptr]:
        return self._engine.iterator_get_object(ptr)

    def _next(self, ptr: Ptr) -> Any:
        return self._engine.iterator_next(ptr)

    def _view(self, raw: Ptr) -> Node:
        return Node._wrap(self._env, raw, owned=False, owner=self)

    def _copy(self, raw: Ptr) -> Node:
        return Node._wrap(self._env, _wrap_native_call(self._engine.new_node_from_node, raw))

    def _free(self, ptr: Ptr) -> None:
        self._engine.free_iterator(ptr)


class BindingsCursor(Cursor["QueryResultItem"]):
    """Walks the rows of a bindings result.

    The cursor reads through the results handle without owning its engine
    pointer; pass ``close_results=True`` to release the results with it.
    """

    _kind = "bindings cursor"

    def __init__(self, results: "QueryResults", *, close_results: bool = False, owner: Optional[Handle] = None) -> None:
        keepalive = [results] if close_results else []
        super().__init__(results._env, results._assert_live(), owned=False, owner=owner, keepalive=keepalive)
        self._results = results

    def _end(self, ptr: Ptr) -> bool:
        return self._engine.query_results_finished(ptr)

    def _next(self, ptr: Ptr) -> Any:
        return self._engine.query_results_next(ptr)

    def _current_raw(self) -> Ptr:
        ptr = self._assert_live()
        if ptr is None or self._results.released:
            raise StreamFaultError("query results are no longer available")
        return ptr

    def _build(self, ptr: Ptr) -> "QueryResultItem":
        from .query import NameNodePair, QueryResultItem

        engine = self._engine
        count = _wrap_native_call(engine.query_results_get_bindings_count, ptr)
        if count < 0:
            raise StreamFaultError("query results reported a negative binding count", self._env.last_error)
        pairs = []
        try:
            for offset in range(count):
                name = _wrap_native_call(engine.query_results_get_binding_name, ptr, offset)
                if name is None:
                    raise StreamFaultError(f"binding {offset} has no name", self._env.last_error)
                value = _wrap_native_call(engine.query_results_get_binding_value, ptr, offset)
                node = Node._wrap(self._env, value) if value is not None else None
                pairs.append(NameNodePair(name, node))
        except BaseException:
            for pair in pairs:
                if pair.node is not None:
                    pair.node.release()
            raise
        return QueryResultItem(pairs)

    def _view(self, raw: Ptr) -> "QueryResultItem":
        return self._build(raw)

    def _copy(self, raw: Ptr) -> "QueryResultItem":
        return self._build(raw)

    def _free(self, ptr: Ptr) -> None:
        return None
