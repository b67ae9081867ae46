"""Statement handles: (subject, predicate, object) triples with optional slots."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, List, Optional, Tuple

from .engines.base import STATEMENT_ALL, STATEMENT_OBJECT, STATEMENT_PREDICATE, STATEMENT_SUBJECT, Ptr
from .errors import AllocationError, _wrap_native_call
from .handle import Handle
from .node import Node

if TYPE_CHECKING:
    from .world import Environment

SUBJECT = STATEMENT_SUBJECT
PREDICATE = STATEMENT_PREDICATE
OBJECT = STATEMENT_OBJECT
ALL_PARTS = STATEMENT_ALL


class Statement(Handle):
    """A triple whose slots may be unset; complete iff all three are set.

    Slot getters return borrowed node views that stay valid until the slot
    changes or the statement is released. Setters store a copy of the given
    node, so the caller keeps ownership of what it passed in.
    """

    _kind = "statement"

    def __init__(self, env: "Environment") -> None:
        world = env._assert_open()
        ptr = _wrap_native_call(env.engine.new_statement, world)
        if ptr is None:
            raise AllocationError("unable to create statement", env.last_error)
        super().__init__(env, ptr, owner=env)

    @classmethod
    def from_nodes(
        cls,
        env: "Environment",
        subject: Optional[Node] = None,
        predicate: Optional[Node] = None,
        obj: Optional[Node] = None,
    ) -> "Statement":
        world = env._assert_open()
        engine = env.engine
        copies: List[Optional[Ptr]] = []
        try:
            for node in (subject, predicate, obj):
                copies.append(
                    _wrap_native_call(engine.new_node_from_node, node._assert_live()) if node is not None else None
                )
            ptr = _wrap_native_call(engine.new_statement_from_nodes, world, *copies)
        except BaseException:
            for copy in copies:
                if copy is not None:
                    engine.free_node(copy)
            raise
        # a null statement has already freed the copies
        return cls._wrap(env, ptr)

    @classmethod
    def _decode(cls, env: "Environment", data: bytes) -> Tuple["Statement", Optional[Ptr]]:
        statement = cls(env)
        read, context = _wrap_native_call(env.engine.statement_decode, env._assert_open(), statement._ptr, bytes(data))
        if not read:
            if context is not None:
                env.engine.free_node(context)
            statement.release()
            raise statement._failed("unable to decode statement")
        return statement, context

    @classmethod
    def decode(cls, env: "Environment", data: bytes) -> "Statement":
        """Rebuild a statement from :meth:`encode` output, dropping any context node."""
        statement, context = cls._decode(env, data)
        if context is not None:
            env.engine.free_node(context)
        return statement

    @classmethod
    def decode_with_context(cls, env: "Environment", data: bytes) -> Tuple["Statement", Optional[Node]]:
        """Rebuild a statement and the context node encoded with it.

        The context is an owned :class:`Node`, or None when the data carries
        no context (see :meth:`encode_parts`).
        """
        statement, context = cls._decode(env, data)
        if context is None:
            return statement, None
        return statement, Node._wrap(env, context)

    def _get_slot(self, getter: Callable[[Ptr], Optional[Ptr]]) -> Optional[Node]:
        ptr = _wrap_native_call(getter, self._assert_live())
        if ptr is None:
            return None
        return Node._wrap(self._env, ptr, owned=False, owner=self)

    def _set_slot(
        self,
        getter: Callable[[Ptr], Optional[Ptr]],
        setter: Callable[[Ptr, Optional[Ptr]], None],
        node: Optional[Node],
    ) -> None:
        ptr = self._assert_live()
        new = _wrap_native_call(self._engine.new_node_from_node, node._assert_live()) if node is not None else None
        self._release_dependents()
        old = _wrap_native_call(getter, ptr)
        _wrap_native_call(setter, ptr, new)
        if old is not None:
            self._engine.free_node(old)

    @property
    def subject(self) -> Optional[Node]:
        return self._get_slot(self._engine.statement_get_subject)

    @subject.setter
    def subject(self, node: Optional[Node]) -> None:
        self._set_slot(self._engine.statement_get_subject, self._engine.statement_set_subject, node)

    @property
    def predicate(self) -> Optional[Node]:
        return self._get_slot(self._engine.statement_get_predicate)

    @predicate.setter
    def predicate(self, node: Optional[Node]) -> None:
        self._set_slot(self._engine.statement_get_predicate, self._engine.statement_set_predicate, node)

    @property
    def object(self) -> Optional[Node]:
        return self._get_slot(self._engine.statement_get_object)

    @object.setter
    def object(self, node: Optional[Node]) -> None:
        self._set_slot(self._engine.statement_get_object, self._engine.statement_set_object, node)

    def clear(self) -> None:
        """Unset all three slots."""
        ptr = self._assert_live()
        self._release_dependents()
        _wrap_native_call(self._engine.statement_clear, ptr)

    def copy(self) -> "Statement":
        ptr = _wrap_native_call(self._engine.new_statement_from_statement, self._assert_live())
        return Statement._wrap(self._env, ptr)

    def is_complete(self) -> bool:
        return bool(_wrap_native_call(self._engine.statement_is_complete, self._assert_live()))

    def equals(self, other: "Statement") -> bool:
        return bool(_wrap_native_call(self._engine.statement_equals, self._assert_live(), other._assert_live()))

    def matches(self, partial: "Statement") -> bool:
        """True when every slot set in ``partial`` equals the same slot here."""
        return bool(_wrap_native_call(self._engine.statement_match, self._assert_live(), partial._assert_live()))

    def encode(self) -> bytes:
        data = _wrap_native_call(self._engine.statement_encode, self._env._assert_open(), self._assert_live())
        if data is None:
            raise self._failed("unable to encode statement")
        return data

    def encode_parts(self, parts: int = ALL_PARTS, context: Optional[Node] = None) -> bytes:
        """Encode only the slots selected by ``parts`` (``SUBJECT | PREDICATE | OBJECT``)."""
        context_ptr = context._assert_live() if context is not None else None
        data = _wrap_native_call(
            self._engine.statement_encode_parts, self._env._assert_open(), self._assert_live(), context_ptr, parts
        )
        if data is None:
            raise self._failed("unable to encode statement parts")
        return data

    def to_string(self) -> str:
        return _wrap_native_call(self._engine.statement_to_string, self._assert_live()) or ""

    def _free(self, ptr: Ptr) -> None:
        self._engine.free_statement(ptr)

    def __str__(self) -> str:
        return self.to_string()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Statement):
            return NotImplemented
        return self.equals(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._released:
            return "<Statement released>"
        return f"<Statement {self.to_string()}>"
