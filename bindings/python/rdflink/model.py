"""Model handles: mutable RDF graphs on one storage."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from .cursor import BindingsCursor, NodeCursor, StatementCursor
from .engines.base import Ptr
from .errors import AllocationError, _wrap_native_call
from .handle import Handle
from .node import Node
from .query import Query, QueryResultItem, QueryResults
from .statement import Statement
from .storage import Storage
from .stream import Stream, open_stream
from .uri import UriLike, _coerce_uri

if TYPE_CHECKING:
    from .world import Environment

logger = logging.getLogger(__name__)


class Model(Handle):
    """A set of statements backed by a :class:`Storage`.

    Example:
        >>> storage = Storage(env, "memory")
        >>> model = Model(env, storage)
        >>> model.add_statement(statement)
        >>> with model.find_statements() as stream:
        ...     statements = list(stream)
    """

    _kind = "model"

    def __init__(self, env: "Environment", storage: Storage, options: str = "") -> None:
        world = env._assert_open()
        ptr = _wrap_native_call(env.engine.new_model, world, storage._assert_live(), options)
        if ptr is None:
            raise AllocationError("unable to create model", env.last_error)
        super().__init__(env, ptr, owner=storage)
        env._adopt(self)
        self.storage = storage

    def _buffer(self, buffer_size: Optional[int]) -> int:
        return self._env.buffer_size if buffer_size is None else buffer_size

    def size(self) -> int:
        """Number of statements, or -1 when the storage cannot count them."""
        return _wrap_native_call(self._engine.model_size, self._assert_live())

    def __len__(self) -> int:
        return max(self.size(), 0)

    def add_statement(self, statement: Statement) -> None:
        status = _wrap_native_call(self._engine.model_add_statement, self._assert_live(), statement._assert_live())
        if status != 0:
            raise self._failed("unable to add statement")

    def remove_statement(self, statement: Statement) -> None:
        status = _wrap_native_call(self._engine.model_remove_statement, self._assert_live(), statement._assert_live())
        if status != 0:
            raise self._failed("unable to remove statement")

    def contains_statement(self, statement: Statement) -> bool:
        return bool(
            _wrap_native_call(self._engine.model_contains_statement, self._assert_live(), statement._assert_live())
        )

    def __contains__(self, statement: object) -> bool:
        return isinstance(statement, Statement) and self.contains_statement(statement)

    def statement_cursor(self, partial: Optional[Statement] = None) -> StatementCursor:
        """Cursor over the statements matching ``partial`` (all statements when None)."""
        ptr = self._assert_live()
        pattern = partial.copy() if partial is not None else Statement(self._env)
        try:
            stream_ptr = _wrap_native_call(self._engine.model_find_statements, ptr, pattern._assert_live())
        except BaseException:
            pattern.release()
            raise
        return StatementCursor(self._env, stream_ptr, owner=self, keepalive=[pattern])

    def _node_cursor(self, method: Any, first: Node, second: Node) -> NodeCursor:
        ptr = self._assert_live()
        first_copy, second_copy = first.copy(), second.copy()
        try:
            iterator = _wrap_native_call(method, ptr, first_copy._assert_live(), second_copy._assert_live())
        except BaseException:
            first_copy.release()
            second_copy.release()
            raise
        return NodeCursor(self._env, iterator, owner=self, keepalive=[first_copy, second_copy])

    def _stream(self, cursor: Any, buffer_size: Optional[int], name: str) -> Stream[Any]:
        # the producer owns the cursor from here on
        with self._lock:
            self._dependents = [ref for ref in self._dependents if ref() is not cursor]
        return open_stream(cursor, self._buffer(buffer_size), name=name, owners=(self,))

    def find_statements(self, partial: Optional[Statement] = None, buffer_size: Optional[int] = None) -> Stream[Statement]:
        """Stream copies of the statements matching ``partial``."""
        return self._stream(self.statement_cursor(partial), buffer_size, "find_statements")

    def find_targets(self, source: Node, arc: Node, buffer_size: Optional[int] = None) -> Stream[Node]:
        """Stream the objects of statements with this subject and predicate."""
        cursor = self._node_cursor(self._engine.model_get_targets, source, arc)
        return self._stream(cursor, buffer_size, "find_targets")

    def find_sources(self, arc: Node, target: Node, buffer_size: Optional[int] = None) -> Stream[Node]:
        """Stream the subjects of statements with this predicate and object."""
        cursor = self._node_cursor(self._engine.model_get_sources, arc, target)
        return self._stream(cursor, buffer_size, "find_sources")

    def find_arcs(self, source: Node, target: Node, buffer_size: Optional[int] = None) -> Stream[Node]:
        """Stream the predicates linking ``source`` to ``target``."""
        cursor = self._node_cursor(self._engine.model_get_arcs, source, target)
        return self._stream(cursor, buffer_size, "find_arcs")

    def load(self, uri: UriLike, parser_name: Optional[str] = None, mime_type: Optional[str] = None) -> None:
        """Parse the document at ``uri`` into this model."""
        ptr = self._assert_live()
        source, temporary = _coerce_uri(self._env, uri)
        try:
            status = _wrap_native_call(self._engine.model_load, ptr, source._assert_live(), parser_name, mime_type)
        finally:
            if temporary:
                source.release()
        if status != 0:
            raise self._failed(f"unable to load {uri}")

    def to_string(
        self, format_name: Optional[str] = None, base_uri: Optional[UriLike] = None, mime_type: Optional[str] = None
    ) -> str:
        """Serialize the whole model with the engine serializer ``format_name``."""
        ptr = self._assert_live()
        base, temporary = _coerce_uri(self._env, base_uri)
        try:
            base_ptr = base._assert_live() if base is not None else None
            text = _wrap_native_call(self._engine.model_to_string, ptr, base_ptr, format_name, mime_type)
        finally:
            if temporary and base is not None:
                base.release()
        if text is None:
            raise self._failed("unable to serialize model")
        return text

    def sync(self) -> None:
        """Flush the model to its storage."""
        if _wrap_native_call(self._engine.model_sync, self._assert_live()) != 0:
            raise self._failed("unable to sync model")

    def execute(self, query: Query) -> QueryResults:
        return QueryResults(query, self)

    def execute_query_to_channel(self, query: Query, buffer_size: Optional[int] = None) -> Stream[QueryResultItem]:
        """Stream the result rows of a bindings query.

        Rows are delivered in engine order; a row binding no variables is
        delivered as an empty item. The results are released with the stream.
        """
        results = self.execute(query)
        try:
            if not results.is_bindings():
                raise self._failed("query does not return variable bindings")
            cursor = BindingsCursor(results, close_results=True)
        except BaseException:
            results.release()
            raise
        logger.debug("streaming %s query results", query.language)
        return open_stream(cursor, self._buffer(buffer_size), name="query", owners=(self, query))

    def execute_query_to_formatted_string(self, query: Query, format_name: str) -> str:
        """Render the complete result of ``query`` as one string."""
        from .formatted import execute_to_string

        return execute_to_string(query, self, format_name)

    def _free(self, ptr: Ptr) -> None:
        self._engine.free_model(ptr)

    def __repr__(self) -> str:
        state = "released" if self._released else "live"
        return f"<Model on {self.storage.kind} storage {state}>"
