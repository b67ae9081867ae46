"""Queries, query results and the items streamed out of bindings results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional, Sequence, Union, overload

from .cursor import BindingsCursor, StatementCursor
from .engines.base import Ptr
from .errors import AllocationError, _wrap_native_call
from .handle import Handle
from .node import Node
from .statement import Statement
from .stream import Stream, open_stream
from .uri import Uri, UriLike, _coerce_uri

if TYPE_CHECKING:
    from .model import Model
    from .world import Environment


@dataclass(frozen=True)
class NameNodePair:
    """One binding of a result row; ``node`` is None for an unbound variable."""

    name: str
    node: Optional[Node]


class QueryResultItem(Sequence[NameNodePair]):
    """One result row, in binding declaration order.

    Index by position for the pair or by variable name for the node::

        item[0].name       # "s"
        item["s"]          # Node or None
    """

    def __init__(self, pairs: Sequence[NameNodePair] = ()) -> None:
        self._pairs = tuple(pairs)

    @overload
    def __getitem__(self, key: int) -> NameNodePair: ...

    @overload
    def __getitem__(self, key: str) -> Optional[Node]: ...

    @overload
    def __getitem__(self, key: slice) -> Sequence[NameNodePair]: ...

    def __getitem__(self, key: Any) -> Any:
        if isinstance(key, str):
            for pair in self._pairs:
                if pair.name == key:
                    return pair.node
            raise KeyError(key)
        return self._pairs[key]

    def __len__(self) -> int:
        return len(self._pairs)

    def __iter__(self) -> Iterator[NameNodePair]:
        return iter(self._pairs)

    def names(self) -> List[str]:
        return [pair.name for pair in self._pairs]

    def get(self, name: str, default: Optional[Node] = None) -> Optional[Node]:
        try:
            return self[name]
        except KeyError:
            return default

    def to_dict(self) -> Dict[str, Optional[Node]]:
        return {pair.name: pair.node for pair in self._pairs}

    def release(self) -> None:
        """Release every bound node."""
        for pair in self._pairs:
            if pair.node is not None:
                pair.node.release()

    def __repr__(self) -> str:
        parts = ", ".join(
            f"{pair.name}={'unbound' if pair.node is None else pair.node.to_string()}" for pair in self._pairs
        )
        return f"<QueryResultItem {parts}>"


class Query(Handle):
    """A query compiled by the engine when constructed.

    Example:
        >>> query = Query(env, "SELECT ?s WHERE { ?s ?p ?o }")
    """

    _kind = "query"

    def __init__(
        self,
        env: "Environment",
        text: str,
        language: str = "sparql",
        base_uri: Optional[UriLike] = None,
    ) -> None:
        world = env._assert_open()
        base, temporary = _coerce_uri(env, base_uri)
        try:
            base_ptr = base._assert_live() if base is not None else None
            ptr = _wrap_native_call(env.engine.new_query, world, language, text, base_ptr)
            self._base_uri = base.to_string() if base is not None else None
        finally:
            if temporary and base is not None:
                base.release()
        if ptr is None:
            raise AllocationError(f"unable to compile {language} query", env.last_error)
        super().__init__(env, ptr, owner=env)
        self.text = text
        self.language = language

    @property
    def base_uri(self) -> Optional[str]:
        return self._base_uri

    def _free(self, ptr: Ptr) -> None:
        self._engine.free_query(ptr)

    def __repr__(self) -> str:
        return f"<Query {self.language} {self.text!r}>"


class QueryResults(Handle):
    """One execution of a query against a model.

    The results are a dependent of both the query and the model: releasing
    either releases the results first.
    """

    _kind = "query results"

    def __init__(self, query: Query, model: "Model") -> None:
        env = query._env
        env._assert_open()
        ptr = _wrap_native_call(env.engine.model_query_execute, model._assert_live(), query._assert_live())
        if ptr is None:
            raise model._failed("query execution failed")
        super().__init__(env, ptr, owner=query)
        model._adopt(self)
        self.query = query
        self.model = model

    def is_bindings(self) -> bool:
        return bool(_wrap_native_call(self._engine.query_results_is_bindings, self._assert_live()))

    def is_boolean(self) -> bool:
        return bool(_wrap_native_call(self._engine.query_results_is_boolean, self._assert_live()))

    def is_graph(self) -> bool:
        return bool(_wrap_native_call(self._engine.query_results_is_graph, self._assert_live()))

    @property
    def boolean(self) -> bool:
        """Answer of a boolean (ASK) result."""
        value = _wrap_native_call(self._engine.query_results_get_boolean, self._assert_live())
        if value < 0:
            raise self._failed("query results are not boolean")
        return value > 0

    def bindings(self, buffer_size: Optional[int] = None) -> Stream[QueryResultItem]:
        """Stream the remaining rows of a bindings result."""
        if not self.is_bindings():
            raise self._failed("query results are not variable bindings")
        cursor = BindingsCursor(self)
        size = self._env.buffer_size if buffer_size is None else buffer_size
        return open_stream(cursor, size, name="bindings", owners=(self,))

    def statements(self, buffer_size: Optional[int] = None) -> Stream[Statement]:
        """Stream the triples of a graph (CONSTRUCT/DESCRIBE) result."""
        if not self.is_graph():
            raise self._failed("query results are not a graph")
        ptr = _wrap_native_call(self._engine.query_results_as_stream, self._assert_live())
        cursor = StatementCursor(self._env, ptr)
        size = self._env.buffer_size if buffer_size is None else buffer_size
        return open_stream(cursor, size, name="graph results", owners=(self,))

    def to_string(self, format_name: str = "xml", base_uri: Optional[Union[Uri, str]] = None) -> str:
        """Render the results with the engine's formatter named ``format_name``."""
        ptr = self._assert_live()
        base, temporary = _coerce_uri(self._env, base_uri)
        try:
            base_ptr = base._assert_live() if base is not None else None
            text = _wrap_native_call(self._engine.query_results_to_string, ptr, format_name, base_ptr)
        finally:
            if temporary and base is not None:
                base.release()
        if text is None:
            raise self._failed(f"unable to format query results as {format_name!r}")
        return text

    def _free(self, ptr: Ptr) -> None:
        self._engine.free_query_results(ptr)
