"""Flat call surface every RDF engine implements.

The surface mirrors the Redland C API: functions take and return opaque
handles, a null handle is ``None`` and failing calls report through a null
result or a non-zero status code. Strings cross the surface as ``str``.
Ownership follows librdf: ``new_*`` results and binding values belong to
the caller, ``*_get_*`` results are borrowed from their parent, and
``new_statement_from_nodes``/``statement_set_*`` take ownership of the node
handles passed in, and ``new_statement_from_nodes`` frees them itself when it
returns null.
"""

from __future__ import annotations

import abc
from typing import Any, Optional, Tuple

Ptr = Any

NODE_TYPE_UNKNOWN = 0
NODE_TYPE_RESOURCE = 1
NODE_TYPE_LITERAL = 2
NODE_TYPE_BLANK = 4

STATEMENT_SUBJECT = 1 << 0
STATEMENT_PREDICATE = 1 << 1
STATEMENT_OBJECT = 1 << 2
STATEMENT_ALL = STATEMENT_SUBJECT | STATEMENT_PREDICATE | STATEMENT_OBJECT


class Engine(abc.ABC):
    name = "engine"

    # world

    @abc.abstractmethod
    def new_world(self) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def world_open(self, world: Ptr) -> None: ...

    @abc.abstractmethod
    def free_world(self, world: Ptr) -> None: ...

    @abc.abstractmethod
    def world_last_error(self, world: Ptr) -> Optional[str]:
        """Most recent error message the engine logged for ``world``."""

    @abc.abstractmethod
    def parser_guess_name(self, world: Ptr, mime_type: Optional[str], identifier: Optional[str]) -> Optional[str]: ...

    @abc.abstractmethod
    def world_set_feature(self, world: Ptr, feature: Ptr, value: Ptr) -> int:
        """Set a world feature; ``value`` stays owned by the caller."""

    @abc.abstractmethod
    def world_get_feature(self, world: Ptr, feature: Ptr) -> Optional[Ptr]:
        """New node holding the feature value, or None when unset."""

    @abc.abstractmethod
    def world_set_digest(self, world: Ptr, name: str) -> int: ...

    # uri

    @abc.abstractmethod
    def new_uri(self, world: Ptr, text: str) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def new_uri_from_uri(self, uri: Ptr) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def new_uri_from_uri_local_name(self, uri: Ptr, local_name: str) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def new_uri_normalised_to_base(self, text: str, source_uri: Ptr, base_uri: Ptr) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def new_uri_relative_to_base(self, base_uri: Ptr, text: str) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def new_uri_from_filename(self, world: Ptr, filename: str) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def uri_as_string(self, uri: Ptr) -> str: ...

    @abc.abstractmethod
    def uri_to_filename(self, uri: Ptr) -> Optional[str]: ...

    @abc.abstractmethod
    def uri_is_file_uri(self, uri: Ptr) -> bool: ...

    @abc.abstractmethod
    def uri_equals(self, first: Ptr, second: Ptr) -> bool: ...

    @abc.abstractmethod
    def uri_compare(self, first: Ptr, second: Ptr) -> int: ...

    @abc.abstractmethod
    def free_uri(self, uri: Ptr) -> None: ...

    # node

    @abc.abstractmethod
    def new_node_from_uri(self, world: Ptr, uri: Ptr) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def new_node_from_uri_string(self, world: Ptr, text: str) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def new_node_from_literal(self, world: Ptr, value: str, language: Optional[str], is_xml: bool) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def new_node_from_typed_literal(
        self, world: Ptr, value: str, language: Optional[str], datatype: Optional[Ptr]
    ) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def new_node_from_blank_identifier(self, world: Ptr, identifier: Optional[str]) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def new_node_from_node(self, node: Ptr) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def node_get_type(self, node: Ptr) -> int: ...

    @abc.abstractmethod
    def node_get_uri(self, node: Ptr) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def node_get_literal_value(self, node: Ptr) -> Optional[str]: ...

    @abc.abstractmethod
    def node_get_literal_value_language(self, node: Ptr) -> Optional[str]: ...

    @abc.abstractmethod
    def node_get_literal_value_datatype_uri(self, node: Ptr) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def node_get_blank_identifier(self, node: Ptr) -> Optional[str]: ...

    @abc.abstractmethod
    def node_to_string(self, node: Ptr) -> Optional[str]: ...

    @abc.abstractmethod
    def node_equals(self, first: Ptr, second: Ptr) -> bool: ...

    @abc.abstractmethod
    def free_node(self, node: Ptr) -> None: ...

    # statement

    @abc.abstractmethod
    def new_statement(self, world: Ptr) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def new_statement_from_nodes(
        self, world: Ptr, subject: Optional[Ptr], predicate: Optional[Ptr], obj: Optional[Ptr]
    ) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def new_statement_from_statement(self, statement: Ptr) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def statement_clear(self, statement: Ptr) -> None: ...

    @abc.abstractmethod
    def statement_get_subject(self, statement: Ptr) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def statement_get_predicate(self, statement: Ptr) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def statement_get_object(self, statement: Ptr) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def statement_set_subject(self, statement: Ptr, node: Optional[Ptr]) -> None: ...

    @abc.abstractmethod
    def statement_set_predicate(self, statement: Ptr, node: Optional[Ptr]) -> None: ...

    @abc.abstractmethod
    def statement_set_object(self, statement: Ptr, node: Optional[Ptr]) -> None: ...

    @abc.abstractmethod
    def statement_is_complete(self, statement: Ptr) -> bool: ...

    @abc.abstractmethod
    def statement_equals(self, first: Ptr, second: Ptr) -> bool: ...

    @abc.abstractmethod
    def statement_match(self, statement: Ptr, partial: Ptr) -> bool: ...

    @abc.abstractmethod
    def statement_encode(self, world: Ptr, statement: Ptr) -> Optional[bytes]: ...

    @abc.abstractmethod
    def statement_encode_parts(
        self, world: Ptr, statement: Ptr, context_node: Optional[Ptr], parts: int
    ) -> Optional[bytes]: ...

    @abc.abstractmethod
    def statement_decode(self, world: Ptr, statement: Ptr, data: bytes) -> Tuple[int, Optional[Ptr]]:
        """Decode ``data`` into ``statement``; returns (bytes read, new context node or None)."""

    @abc.abstractmethod
    def statement_to_string(self, statement: Ptr) -> Optional[str]: ...

    @abc.abstractmethod
    def free_statement(self, statement: Ptr) -> None: ...

    # storage and model

    @abc.abstractmethod
    def new_storage(self, world: Ptr, kind: str, name: str, options: str) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def free_storage(self, storage: Ptr) -> None: ...

    @abc.abstractmethod
    def new_model(self, world: Ptr, storage: Ptr, options: str) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def free_model(self, model: Ptr) -> None: ...

    @abc.abstractmethod
    def model_size(self, model: Ptr) -> int: ...

    @abc.abstractmethod
    def model_add_statement(self, model: Ptr, statement: Ptr) -> int: ...

    @abc.abstractmethod
    def model_remove_statement(self, model: Ptr, statement: Ptr) -> int: ...

    @abc.abstractmethod
    def model_contains_statement(self, model: Ptr, statement: Ptr) -> bool: ...

    @abc.abstractmethod
    def model_find_statements(self, model: Ptr, partial: Ptr) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def model_get_targets(self, model: Ptr, source: Ptr, arc: Ptr) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def model_get_sources(self, model: Ptr, arc: Ptr, target: Ptr) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def model_get_arcs(self, model: Ptr, source: Ptr, target: Ptr) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def model_load(self, model: Ptr, uri: Ptr, name: Optional[str], mime_type: Optional[str]) -> int: ...

    @abc.abstractmethod
    def model_to_string(
        self, model: Ptr, base_uri: Optional[Ptr], name: Optional[str], mime_type: Optional[str]
    ) -> Optional[str]: ...

    @abc.abstractmethod
    def model_sync(self, model: Ptr) -> int: ...

    @abc.abstractmethod
    def model_query_execute(self, model: Ptr, query: Ptr) -> Optional[Ptr]: ...

    # stream of statements; get_object returns a borrowed statement

    @abc.abstractmethod
    def stream_end(self, stream: Ptr) -> bool: ...

    @abc.abstractmethod
    def stream_get_object(self, stream: Ptr) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def stream_next(self, stream: Ptr) -> bool: ...

    @abc.abstractmethod
    def free_stream(self, stream: Ptr) -> None: ...

    # iterator of nodes; get_object returns a borrowed node

    @abc.abstractmethod
    def iterator_end(self, iterator: Ptr) -> bool: ...

    @abc.abstractmethod
    def iterator_get_object(self, iterator: Ptr) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def iterator_next(self, iterator: Ptr) -> bool: ...

    @abc.abstractmethod
    def free_iterator(self, iterator: Ptr) -> None: ...

    # parser

    @abc.abstractmethod
    def new_parser(self, world: Ptr, name: Optional[str], mime_type: Optional[str]) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def parser_parse_into_model(self, parser: Ptr, uri: Ptr, base_uri: Optional[Ptr], model: Ptr) -> int: ...

    @abc.abstractmethod
    def parser_parse_string_into_model(self, parser: Ptr, text: str, base_uri: Optional[Ptr], model: Ptr) -> int: ...

    @abc.abstractmethod
    def free_parser(self, parser: Ptr) -> None: ...

    # serializer

    @abc.abstractmethod
    def new_serializer(
        self, world: Ptr, name: Optional[str], mime_type: Optional[str], type_uri: Optional[Ptr]
    ) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def serializer_set_namespace(self, serializer: Ptr, uri: Ptr, prefix: str) -> int: ...

    @abc.abstractmethod
    def serializer_serialize_model_to_string(
        self, serializer: Ptr, base_uri: Optional[Ptr], model: Ptr
    ) -> Optional[str]: ...

    @abc.abstractmethod
    def serializer_serialize_stream_to_string(
        self, serializer: Ptr, base_uri: Optional[Ptr], stream: Ptr
    ) -> Optional[str]: ...

    @abc.abstractmethod
    def free_serializer(self, serializer: Ptr) -> None: ...

    # query

    @abc.abstractmethod
    def new_query(self, world: Ptr, name: str, text: str, base_uri: Optional[Ptr]) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def free_query(self, query: Ptr) -> None: ...

    @abc.abstractmethod
    def query_results_is_bindings(self, results: Ptr) -> bool: ...

    @abc.abstractmethod
    def query_results_is_boolean(self, results: Ptr) -> bool: ...

    @abc.abstractmethod
    def query_results_is_graph(self, results: Ptr) -> bool: ...

    @abc.abstractmethod
    def query_results_get_boolean(self, results: Ptr) -> int:
        """>0 true, 0 false, <0 error."""

    @abc.abstractmethod
    def query_results_finished(self, results: Ptr) -> bool: ...

    @abc.abstractmethod
    def query_results_next(self, results: Ptr) -> bool: ...

    @abc.abstractmethod
    def query_results_get_bindings_count(self, results: Ptr) -> int: ...

    @abc.abstractmethod
    def query_results_get_binding_name(self, results: Ptr, offset: int) -> Optional[str]: ...

    @abc.abstractmethod
    def query_results_get_binding_value(self, results: Ptr, offset: int) -> Optional[Ptr]:
        """New node owned by the caller, or None when the variable is unbound."""

    @abc.abstractmethod
    def query_results_to_string(self, results: Ptr, format_name: str, base_uri: Optional[Ptr]) -> Optional[str]: ...

    @abc.abstractmethod
    def query_results_as_stream(self, results: Ptr) -> Optional[Ptr]: ...

    @abc.abstractmethod
    def free_query_results(self, results: Ptr) -> None: ...
