"""RDF node handles: resources, literals and blank nodes."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Optional

from .engines.base import NODE_TYPE_BLANK, NODE_TYPE_LITERAL, NODE_TYPE_RESOURCE, NODE_TYPE_UNKNOWN, Ptr
from .errors import _wrap_native_call
from .handle import Handle
from .uri import Uri

if TYPE_CHECKING:
    from .world import Environment


class NodeKind(enum.IntEnum):
    UNKNOWN = NODE_TYPE_UNKNOWN
    RESOURCE = NODE_TYPE_RESOURCE
    LITERAL = NODE_TYPE_LITERAL
    BLANK = NODE_TYPE_BLANK


class Node(Handle):
    """A resource, literal or blank node.

    Nodes come from the ``from_*`` constructors, from :meth:`copy`, or as
    borrowed views handed out by statements and cursors. A view is released
    together with the handle it was read from.
    """

    _kind = "node"

    @classmethod
    def from_uri(cls, env: "Environment", uri: Uri) -> "Node":
        world = env._assert_open()
        return cls._wrap(env, _wrap_native_call(env.engine.new_node_from_uri, world, uri._assert_live()))

    @classmethod
    def from_uri_string(cls, env: "Environment", text: str) -> "Node":
        world = env._assert_open()
        return cls._wrap(env, _wrap_native_call(env.engine.new_node_from_uri_string, world, text))

    @classmethod
    def from_literal(
        cls, env: "Environment", value: str, language: Optional[str] = None, is_xml: bool = False
    ) -> "Node":
        """Plain literal with an optional language tag, or a well-formed XML literal."""
        world = env._assert_open()
        ptr = _wrap_native_call(env.engine.new_node_from_literal, world, value, language, is_xml)
        return cls._wrap(env, ptr)

    @classmethod
    def from_typed_literal(
        cls, env: "Environment", value: str, datatype: Optional[Uri] = None, language: Optional[str] = None
    ) -> "Node":
        world = env._assert_open()
        datatype_ptr = datatype._assert_live() if datatype is not None else None
        ptr = _wrap_native_call(env.engine.new_node_from_typed_literal, world, value, language, datatype_ptr)
        return cls._wrap(env, ptr)

    @classmethod
    def from_blank(cls, env: "Environment", identifier: Optional[str] = None) -> "Node":
        """Blank node; the engine generates an identifier when none is given."""
        world = env._assert_open()
        return cls._wrap(env, _wrap_native_call(env.engine.new_node_from_blank_identifier, world, identifier))

    def copy(self) -> "Node":
        """Return an independently owned copy, also valid for views."""
        return Node._wrap(self._env, _wrap_native_call(self._engine.new_node_from_node, self._assert_live()))

    @property
    def kind(self) -> NodeKind:
        value = _wrap_native_call(self._engine.node_get_type, self._assert_live())
        try:
            return NodeKind(value)
        except ValueError:
            return NodeKind.UNKNOWN

    def is_resource(self) -> bool:
        return self.kind is NodeKind.RESOURCE

    def is_literal(self) -> bool:
        return self.kind is NodeKind.LITERAL

    def is_blank(self) -> bool:
        return self.kind is NodeKind.BLANK

    @property
    def uri(self) -> Optional[Uri]:
        """Borrowed view of a resource node's URI."""
        ptr = _wrap_native_call(self._engine.node_get_uri, self._assert_live())
        if ptr is None:
            return None
        return Uri._wrap(self._env, ptr, owned=False, owner=self)

    @property
    def literal_value(self) -> Optional[str]:
        return _wrap_native_call(self._engine.node_get_literal_value, self._assert_live())

    @property
    def language(self) -> Optional[str]:
        return _wrap_native_call(self._engine.node_get_literal_value_language, self._assert_live()) or None

    @property
    def datatype(self) -> Optional[Uri]:
        """Borrowed view of a typed literal's datatype URI."""
        ptr = _wrap_native_call(self._engine.node_get_literal_value_datatype_uri, self._assert_live())
        if ptr is None:
            return None
        return Uri._wrap(self._env, ptr, owned=False, owner=self)

    @property
    def blank_identifier(self) -> Optional[str]:
        return _wrap_native_call(self._engine.node_get_blank_identifier, self._assert_live())

    def to_string(self) -> str:
        return _wrap_native_call(self._engine.node_to_string, self._assert_live()) or ""

    def equals(self, other: "Node") -> bool:
        return bool(_wrap_native_call(self._engine.node_equals, self._assert_live(), other._assert_live()))

    def _free(self, ptr: Ptr) -> None:
        self._engine.free_node(ptr)

    def __str__(self) -> str:
        return self.to_string()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.equals(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._released:
            return "<Node released>"
        return f"<Node {self.kind.name.lower()} {self.to_string()}>"
