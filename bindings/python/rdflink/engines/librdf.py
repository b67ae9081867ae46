"""ctypes binding to the Redland librdf shared library."""

from __future__ import annotations

import ctypes
import ctypes.util
import logging
import threading
from ctypes import CFUNCTYPE, POINTER, byref, c_char_p, c_int, c_size_t, c_void_p
from typing import Any, Dict, Optional, Tuple

from .base import Engine, Ptr

logger = logging.getLogger(__name__)

# librdf_log_level
LOG_DEBUG = 1
LOG_INFO = 2
LOG_WARN = 3
LOG_ERROR = 4
LOG_FATAL = 5

_LOG_LEVELS = {
    LOG_DEBUG: logging.DEBUG,
    LOG_INFO: logging.INFO,
    LOG_WARN: logging.WARNING,
    LOG_ERROR: logging.ERROR,
    LOG_FATAL: logging.CRITICAL,
}

LOG_FUNC = CFUNCTYPE(c_int, c_void_p, c_void_p)

_P = c_void_p
_S = c_char_p

# name: (restype, argtypes)
_SIGNATURES: Dict[str, Tuple[Any, list]] = {
    "librdf_free_memory": (None, [_P]),
    # world
    "librdf_new_world": (_P, []),
    "librdf_world_open": (None, [_P]),
    "librdf_free_world": (None, [_P]),
    "librdf_world_set_logger": (None, [_P, _P, LOG_FUNC]),
    "librdf_log_message_level": (c_int, [_P]),
    "librdf_log_message_message": (_S, [_P]),
    "librdf_parser_guess_name2": (_S, [_P, _S, _S, _S]),
    "librdf_world_set_feature": (c_int, [_P, _P, _P]),
    "librdf_world_get_feature": (_P, [_P, _P]),
    "librdf_world_set_digest": (None, [_P, _S]),
    # uri
    "librdf_new_uri": (_P, [_P, _S]),
    "librdf_new_uri_from_uri": (_P, [_P]),
    "librdf_new_uri_from_uri_local_name": (_P, [_P, _S]),
    "librdf_new_uri_normalised_to_base": (_P, [_S, _P, _P]),
    "librdf_new_uri_relative_to_base": (_P, [_P, _S]),
    "librdf_new_uri_from_filename": (_P, [_P, _S]),
    "librdf_uri_as_string": (_S, [_P]),
    "librdf_uri_to_filename": (_P, [_P]),
    "librdf_uri_is_file_uri": (c_int, [_P]),
    "librdf_uri_equals": (c_int, [_P, _P]),
    "librdf_uri_compare": (c_int, [_P, _P]),
    "librdf_free_uri": (None, [_P]),
    # node
    "librdf_new_node_from_uri": (_P, [_P, _P]),
    "librdf_new_node_from_uri_string": (_P, [_P, _S]),
    "librdf_new_node_from_literal": (_P, [_P, _S, _S, c_int]),
    "librdf_new_node_from_typed_literal": (_P, [_P, _S, _S, _P]),
    "librdf_new_node_from_blank_identifier": (_P, [_P, _S]),
    "librdf_new_node_from_node": (_P, [_P]),
    "librdf_node_get_type": (c_int, [_P]),
    "librdf_node_get_uri": (_P, [_P]),
    "librdf_node_get_literal_value": (_S, [_P]),
    "librdf_node_get_literal_value_language": (_S, [_P]),
    "librdf_node_get_literal_value_datatype_uri": (_P, [_P]),
    "librdf_node_get_blank_identifier": (_S, [_P]),
    "librdf_node_to_string": (_P, [_P]),
    "librdf_node_equals": (c_int, [_P, _P]),
    "librdf_free_node": (None, [_P]),
    # statement
    "librdf_new_statement": (_P, [_P]),
    "librdf_new_statement_from_nodes": (_P, [_P, _P, _P, _P]),
    "librdf_new_statement_from_statement": (_P, [_P]),
    "librdf_statement_clear": (None, [_P]),
    "librdf_statement_get_subject": (_P, [_P]),
    "librdf_statement_get_predicate": (_P, [_P]),
    "librdf_statement_get_object": (_P, [_P]),
    "librdf_statement_set_subject": (None, [_P, _P]),
    "librdf_statement_set_predicate": (None, [_P, _P]),
    "librdf_statement_set_object": (None, [_P, _P]),
    "librdf_statement_is_complete": (c_int, [_P]),
    "librdf_statement_equals": (c_int, [_P, _P]),
    "librdf_statement_match": (c_int, [_P, _P]),
    "librdf_statement_encode2": (c_size_t, [_P, _P, _P, c_size_t]),
    "librdf_statement_encode_parts2": (c_size_t, [_P, _P, _P, _P, c_size_t, c_int]),
    "librdf_statement_decode2": (c_size_t, [_P, _P, POINTER(c_void_p), _P, c_size_t]),
    "librdf_statement_to_string": (_P, [_P]),
    "librdf_free_statement": (None, [_P]),
    # storage and model
    "librdf_new_storage": (_P, [_P, _S, _S, _S]),
    "librdf_free_storage": (None, [_P]),
    "librdf_new_model": (_P, [_P, _P, _S]),
    "librdf_free_model": (None, [_P]),
    "librdf_model_size": (c_int, [_P]),
    "librdf_model_add_statement": (c_int, [_P, _P]),
    "librdf_model_remove_statement": (c_int, [_P, _P]),
    "librdf_model_contains_statement": (c_int, [_P, _P]),
    "librdf_model_find_statements": (_P, [_P, _P]),
    "librdf_model_get_targets": (_P, [_P, _P, _P]),
    "librdf_model_get_sources": (_P, [_P, _P, _P]),
    "librdf_model_get_arcs": (_P, [_P, _P, _P]),
    "librdf_model_load": (c_int, [_P, _P, _S, _S, _P]),
    "librdf_model_to_string": (_P, [_P, _P, _S, _S, _P]),
    "librdf_model_sync": (c_int, [_P]),
    "librdf_model_query_execute": (_P, [_P, _P]),
    # stream and iterator
    "librdf_stream_end": (c_int, [_P]),
    "librdf_stream_get_object": (_P, [_P]),
    "librdf_stream_next": (c_int, [_P]),
    "librdf_free_stream": (None, [_P]),
    "librdf_iterator_end": (c_int, [_P]),
    "librdf_iterator_get_object": (_P, [_P]),
    "librdf_iterator_next": (c_int, [_P]),
    "librdf_free_iterator": (None, [_P]),
    # parser and serializer
    "librdf_new_parser": (_P, [_P, _S, _S, _P]),
    "librdf_parser_parse_into_model": (c_int, [_P, _P, _P, _P]),
    "librdf_parser_parse_string_into_model": (c_int, [_P, _S, _P, _P]),
    "librdf_free_parser": (None, [_P]),
    "librdf_new_serializer": (_P, [_P, _S, _S, _P]),
    "librdf_serializer_set_namespace": (c_int, [_P, _P, _S]),
    "librdf_serializer_serialize_model_to_string": (_P, [_P, _P, _P]),
    "librdf_serializer_serialize_stream_to_string": (_P, [_P, _P, _P]),
    "librdf_free_serializer": (None, [_P]),
    # query
    "librdf_new_query": (_P, [_P, _S, _P, _S, _P]),
    "librdf_free_query": (None, [_P]),
    "librdf_query_results_is_bindings": (c_int, [_P]),
    "librdf_query_results_is_boolean": (c_int, [_P]),
    "librdf_query_results_is_graph": (c_int, [_P]),
    "librdf_query_results_get_boolean": (c_int, [_P]),
    "librdf_query_results_finished": (c_int, [_P]),
    "librdf_query_results_next": (c_int, [_P]),
    "librdf_query_results_get_bindings_count": (c_int, [_P]),
    "librdf_query_results_get_binding_name": (_S, [_P, c_int]),
    "librdf_query_results_get_binding_value": (_P, [_P, c_int]),
    "librdf_query_results_to_string2": (_P, [_P, _S, _S, _P, _P]),
    "librdf_query_results_as_stream": (_P, [_P]),
    "librdf_free_query_results": (None, [_P]),
}


def _b(text: Optional[str]) -> Optional[bytes]:
    return text.encode("utf-8") if text is not None else None


def _s(raw: Optional[bytes]) -> Optional[str]:
    return raw.decode("utf-8") if raw is not None else None


def find_library(library_path: Optional[str] = None) -> Optional[str]:
    """Return the path or soname of librdf, or None when it cannot be found."""
    if library_path:
        return library_path
    return ctypes.util.find_library("rdf")


class _WorldLog:
    __slots__ = ("callback", "last_error")

    def __init__(self) -> None:
        self.callback: Any = None
        self.last_error: Optional[str] = None


class LibrdfEngine(Engine):
    name = "librdf"

    def __init__(self, library_path: Optional[str] = None) -> None:
        path = find_library(library_path)
        if path is None:
            raise OSError("librdf shared library not found")
        self.library_path = path
        self._lib = ctypes.CDLL(path)
        for symbol, (restype, argtypes) in _SIGNATURES.items():
            fn = getattr(self._lib, symbol)
            fn.restype = restype
            fn.argtypes = argtypes
        self._logs: Dict[int, _WorldLog] = {}
        self._logs_lock = threading.Lock()
        logger.debug("loaded librdf from %s", path)

    def _take_string(self, ptr: Optional[int]) -> Optional[str]:
        """Copy a string the caller owns and free the librdf allocation."""
        if not ptr:
            return None
        try:
            return ctypes.string_at(ptr).decode("utf-8")
        finally:
            self._lib.librdf_free_memory(ptr)

    # world

    def new_world(self) -> Optional[Ptr]:
        world = self._lib.librdf_new_world()
        if not world:
            return None
        state = _WorldLog()

        def handle_log(user_data: Any, message: Any) -> int:
            level = self._lib.librdf_log_message_level(message)
            text = _s(self._lib.librdf_log_message_message(message)) or ""
            if level >= LOG_WARN:
                state.last_error = text
            logger.log(_LOG_LEVELS.get(level, logging.INFO), "librdf: %s", text)
            return 1

        state.callback = LOG_FUNC(handle_log)
        self._lib.librdf_world_set_logger(world, None, state.callback)
        with self._logs_lock:
            self._logs[world] = state
        return world

    def world_open(self, world: Ptr) -> None:
        self._lib.librdf_world_open(world)

    def free_world(self, world: Ptr) -> None:
        self._lib.librdf_free_world(world)
        with self._logs_lock:
            self._logs.pop(world, None)

    def world_last_error(self, world: Ptr) -> Optional[str]:
        state = self._logs.get(world)
        return state.last_error if state is not None else None

    def parser_guess_name(self, world: Ptr, mime_type: Optional[str], identifier: Optional[str]) -> Optional[str]:
        return _s(self._lib.librdf_parser_guess_name2(world, _b(mime_type), None, _b(identifier)))

    def world_set_feature(self, world: Ptr, feature: Ptr, value: Ptr) -> int:
        return self._lib.librdf_world_set_feature(world, feature, value)

    def world_get_feature(self, world: Ptr, feature: Ptr) -> Optional[Ptr]:
        return self._lib.librdf_world_get_feature(world, feature)

    def world_set_digest(self, world: Ptr, name: str) -> int:
        self._lib.librdf_world_set_digest(world, _b(name))
        return 0

    # uri

    def new_uri(self, world: Ptr, text: str) -> Optional[Ptr]:
        return self._lib.librdf_new_uri(world, _b(text))

    def new_uri_from_uri(self, uri: Ptr) -> Optional[Ptr]:
        return self._lib.librdf_new_uri_from_uri(uri)

    def new_uri_from_uri_local_name(self, uri: Ptr, local_name: str) -> Optional[Ptr]:
        return self._lib.librdf_new_uri_from_uri_local_name(uri, _b(local_name))

    def new_uri_normalised_to_base(self, text: str, source_uri: Ptr, base_uri: Ptr) -> Optional[Ptr]:
        return self._lib.librdf_new_uri_normalised_to_base(_b(text), source_uri, base_uri)

    def new_uri_relative_to_base(self, base_uri: Ptr, text: str) -> Optional[Ptr]:
        return self._lib.librdf_new_uri_relative_to_base(base_uri, _b(text))

    def new_uri_from_filename(self, world: Ptr, filename: str) -> Optional[Ptr]:
        return self._lib.librdf_new_uri_from_filename(world, _b(filename))

    def uri_as_string(self, uri: Ptr) -> str:
        return _s(self._lib.librdf_uri_as_string(uri)) or ""

    def uri_to_filename(self, uri: Ptr) -> Optional[str]:
        return self._take_string(self._lib.librdf_uri_to_filename(uri))

    def uri_is_file_uri(self, uri: Ptr) -> bool:
        return self._lib.librdf_uri_is_file_uri(uri) != 0

    def uri_equals(self, first: Ptr, second: Ptr) -> bool:
        return self._lib.librdf_uri_equals(first, second) != 0

    def uri_compare(self, first: Ptr, second: Ptr) -> int:
        return self._lib.librdf_uri_compare(first, second)

    def free_uri(self, uri: Ptr) -> None:
        self._lib.librdf_free_uri(uri)

    # node

    def new_node_from_uri(self, world: Ptr, uri: Ptr) -> Optional[Ptr]:
        return self._lib.librdf_new_node_from_uri(world, uri)

    def new_node_from_uri_string(self, world: Ptr, text: str) -> Optional[Ptr]:
        return self._lib.librdf_new_node_from_uri_string(world, _b(text))

    def new_node_from_literal(self, world: Ptr, value: str, language: Optional[str], is_xml: bool) -> Optional[Ptr]:
        return self._lib.librdf_new_node_from_literal(world, _b(value), _b(language or None), 1 if is_xml else 0)

    def new_node_from_typed_literal(
        self, world: Ptr, value: str, language: Optional[str], datatype: Optional[Ptr]
    ) -> Optional[Ptr]:
        return self._lib.librdf_new_node_from_typed_literal(world, _b(value), _b(language or None), datatype)

    def new_node_from_blank_identifier(self, world: Ptr, identifier: Optional[str]) -> Optional[Ptr]:
        return self._lib.librdf_new_node_from_blank_identifier(world, _b(identifier or None))

    def new_node_from_node(self, node: Ptr) -> Optional[Ptr]:
        return self._lib.librdf_new_node_from_node(node)

    def node_get_type(self, node: Ptr) -> int:
        return self._lib.librdf_node_get_type(node)

    def node_get_uri(self, node: Ptr) -> Optional[Ptr]:
        return self._lib.librdf_node_get_uri(node)

    def node_get_literal_value(self, node: Ptr) -> Optional[str]:
        return _s(self._lib.librdf_node_get_literal_value(node))

    def node_get_literal_value_language(self, node: Ptr) -> Optional[str]:
        return _s(self._lib.librdf_node_get_literal_value_language(node))

    def node_get_literal_value_datatype_uri(self, node: Ptr) -> Optional[Ptr]:
        return self._lib.librdf_node_get_literal_value_datatype_uri(node)

    def node_get_blank_identifier(self, node: Ptr) -> Optional[str]:
        return _s(self._lib.librdf_node_get_blank_identifier(node))

    def node_to_string(self, node: Ptr) -> Optional[str]:
        return self._take_string(self._lib.librdf_node_to_string(node))

    def node_equals(self, first: Ptr, second: Ptr) -> bool:
        return self._lib.librdf_node_equals(first, second) != 0

    def free_node(self, node: Ptr) -> None:
        self._lib.librdf_free_node(node)

    # statement

    def new_statement(self, world: Ptr) -> Optional[Ptr]:
        return self._lib.librdf_new_statement(world)

    def new_statement_from_nodes(
        self, world: Ptr, subject: Optional[Ptr], predicate: Optional[Ptr], obj: Optional[Ptr]
    ) -> Optional[Ptr]:
        # librdf takes ownership of the nodes it is given
        return self._lib.librdf_new_statement_from_nodes(world, subject, predicate, obj)

    def new_statement_from_statement(self, statement: Ptr) -> Optional[Ptr]:
        return self._lib.librdf_new_statement_from_statement(statement)

    def statement_clear(self, statement: Ptr) -> None:
        self._lib.librdf_statement_clear(statement)

    def statement_get_subject(self, statement: Ptr) -> Optional[Ptr]:
        return self._lib.librdf_statement_get_subject(statement)

    def statement_get_predicate(self, statement: Ptr) -> Optional[Ptr]:
        return self._lib.librdf_statement_get_predicate(statement)

    def statement_get_object(self, statement: Ptr) -> Optional[Ptr]:
        return self._lib.librdf_statement_get_object(statement)

    def statement_set_subject(self, statement: Ptr, node: Optional[Ptr]) -> None:
        self._lib.librdf_statement_set_subject(statement, node)

    def statement_set_predicate(self, statement: Ptr, node: Optional[Ptr]) -> None:
        self._lib.librdf_statement_set_predicate(statement, node)

    def statement_set_object(self, statement: Ptr, node: Optional[Ptr]) -> None:
        self._lib.librdf_statement_set_object(statement, node)

    def statement_is_complete(self, statement: Ptr) -> bool:
        return self._lib.librdf_statement_is_complete(statement) != 0

    def statement_equals(self, first: Ptr, second: Ptr) -> bool:
        return self._lib.librdf_statement_equals(first, second) != 0

    def statement_match(self, statement: Ptr, partial: Ptr) -> bool:
        return self._lib.librdf_statement_match(statement, partial) != 0

    def statement_encode(self, world: Ptr, statement: Ptr) -> Optional[bytes]:
        size = self._lib.librdf_statement_encode2(world, statement, None, 0)
        if not size:
            return None
        buffer = ctypes.create_string_buffer(size)
        written = self._lib.librdf_statement_encode2(world, statement, buffer, size)
        return buffer.raw[:written] if written else None

    def statement_encode_parts(
        self, world: Ptr, statement: Ptr, context_node: Optional[Ptr], parts: int
    ) -> Optional[bytes]:
        encode = self._lib.librdf_statement_encode_parts2
        size = encode(world, statement, context_node, None, 0, parts)
        if not size:
            return None
        buffer = ctypes.create_string_buffer(size)
        written = encode(world, statement, context_node, buffer, size, parts)
        return buffer.raw[:written] if written else None

    def statement_decode(self, world: Ptr, statement: Ptr, data: bytes) -> Tuple[int, Optional[Ptr]]:
        buffer = ctypes.create_string_buffer(data, len(data))
        context = c_void_p()
        read = self._lib.librdf_statement_decode2(world, statement, byref(context), buffer, len(data))
        return read, context.value

    def statement_to_string(self, statement: Ptr) -> Optional[str]:
        return self._take_string(self._lib.librdf_statement_to_string(statement))

    def free_statement(self, statement: Ptr) -> None:
        self._lib.librdf_free_statement(statement)

    # storage and model

    def new_storage(self, world: Ptr, kind: str, name: str, options: str) -> Optional[Ptr]:
        return self._lib.librdf_new_storage(world, _b(kind), _b(name), _b(options))

    def free_storage(self, storage: Ptr) -> None:
        self._lib.librdf_free_storage(storage)

    def new_model(self, world: Ptr, storage: Ptr, options: str) -> Optional[Ptr]:
        return self._lib.librdf_new_model(world, storage, _b(options))

    def free_model(self, model: Ptr) -> None:
        self._lib.librdf_free_model(model)

    def model_size(self, model: Ptr) -> int:
        return self._lib.librdf_model_size(model)

    def model_add_statement(self, model: Ptr, statement: Ptr) -> int:
        return self._lib.librdf_model_add_statement(model, statement)

    def model_remove_statement(self, model: Ptr, statement: Ptr) -> int:
        return self._lib.librdf_model_remove_statement(model, statement)

    def model_contains_statement(self, model: Ptr, statement: Ptr) -> bool:
        return self._lib.librdf_model_contains_statement(model, statement) > 0

    def model_find_statements(self, model: Ptr, partial: Ptr) -> Optional[Ptr]:
        return self._lib.librdf_model_find_statements(model, partial)

    def model_get_targets(self, model: Ptr, source: Ptr, arc: Ptr) -> Optional[Ptr]:
        return self._lib.librdf_model_get_targets(model, source, arc)

    def model_get_sources(self, model: Ptr, arc: Ptr, target: Ptr) -> Optional[Ptr]:
        return self._lib.librdf_model_get_sources(model, arc, target)

    def model_get_arcs(self, model: Ptr, source: Ptr, target: Ptr) -> Optional[Ptr]:
        return self._lib.librdf_model_get_arcs(model, source, target)

    def model_load(self, model: Ptr, uri: Ptr, name: Optional[str], mime_type: Optional[str]) -> int:
        return self._lib.librdf_model_load(model, uri, _b(name), _b(mime_type), None)

    def model_to_string(
        self, model: Ptr, base_uri: Optional[Ptr], name: Optional[str], mime_type: Optional[str]
    ) -> Optional[str]:
        return self._take_string(self._lib.librdf_model_to_string(model, base_uri, _b(name), _b(mime_type), None))

    def model_sync(self, model: Ptr) -> int:
        return self._lib.librdf_model_sync(model)

    def model_query_execute(self, model: Ptr, query: Ptr) -> Optional[Ptr]:
        return self._lib.librdf_model_query_execute(model, query)

    # stream and iterator

    def stream_end(self, stream: Ptr) -> bool:
        return self._lib.librdf_stream_end(stream) != 0

    def stream_get_object(self, stream: Ptr) -> Optional[Ptr]:
        return self._lib.librdf_stream_get_object(stream)

    def stream_next(self, stream: Ptr) -> bool:
        return self._lib.librdf_stream_next(stream) != 0

    def free_stream(self, stream: Ptr) -> None:
        self._lib.librdf_free_stream(stream)

    def iterator_end(self, iterator: Ptr) -> bool:
        return self._lib.librdf_iterator_end(iterator) != 0

    def iterator_get_object(self, iterator: Ptr) -> Optional[Ptr]:
        return self._lib.librdf_iterator_get_object(iterator)

    def iterator_next(self, iterator: Ptr) -> bool:
        return self._lib.librdf_iterator_next(iterator) != 0

    def free_iterator(self, iterator: Ptr) -> None:
        self._lib.librdf_free_iterator(iterator)

    # parser

    def new_parser(self, world: Ptr, name: Optional[str], mime_type: Optional[str]) -> Optional[Ptr]:
        return self._lib.librdf_new_parser(world, _b(name), _b(mime_type), None)

    def parser_parse_into_model(self, parser: Ptr, uri: Ptr, base_uri: Optional[Ptr], model: Ptr) -> int:
        return self._lib.librdf_parser_parse_into_model(parser, uri, base_uri, model)

    def parser_parse_string_into_model(self, parser: Ptr, text: str, base_uri: Optional[Ptr], model: Ptr) -> int:
        return self._lib.librdf_parser_parse_string_into_model(parser, _b(text), base_uri, model)

    def free_parser(self, parser: Ptr) -> None:
        self._lib.librdf_free_parser(parser)

    # serializer

    def new_serializer(
        self, world: Ptr, name: Optional[str], mime_type: Optional[str], type_uri: Optional[Ptr]
    ) -> Optional[Ptr]:
        return self._lib.librdf_new_serializer(world, _b(name), _b(mime_type), type_uri)

    def serializer_set_namespace(self, serializer: Ptr, uri: Ptr, prefix: str) -> int:
        return self._lib.librdf_serializer_set_namespace(serializer, uri, _b(prefix))

    def serializer_serialize_model_to_string(
        self, serializer: Ptr, base_uri: Optional[Ptr], model: Ptr
    ) -> Optional[str]:
        return self._take_string(self._lib.librdf_serializer_serialize_model_to_string(serializer, base_uri, model))

    def serializer_serialize_stream_to_string(
        self, serializer: Ptr, base_uri: Optional[Ptr], stream: Ptr
    ) -> Optional[str]:
        return self._take_string(self._lib.librdf_serializer_serialize_stream_to_string(serializer, base_uri, stream))

    def free_serializer(self, serializer: Ptr) -> None:
        self._lib.librdf_free_serializer(serializer)

    # query

    def new_query(self, world: Ptr, name: str, text: str, base_uri: Optional[Ptr]) -> Optional[Ptr]:
        return self._lib.librdf_new_query(world, _b(name), None, _b(text), base_uri)

    def free_query(self, query: Ptr) -> None:
        self._lib.librdf_free_query(query)

    def query_results_is_bindings(self, results: Ptr) -> bool:
        return self._lib.librdf_query_results_is_bindings(results) != 0

    def query_results_is_boolean(self, results: Ptr) -> bool:
        return self._lib.librdf_query_results_is_boolean(results) != 0

    def query_results_is_graph(self, results: Ptr) -> bool:
        return self._lib.librdf_query_results_is_graph(results) != 0

    def query_results_get_boolean(self, results: Ptr) -> int:
        return self._lib.librdf_query_results_get_boolean(results)

    def query_results_finished(self, results: Ptr) -> bool:
        return self._lib.librdf_query_results_finished(results) != 0

    def query_results_next(self, results: Ptr) -> bool:
        return self._lib.librdf_query_results_next(results) != 0

    def query_results_get_bindings_count(self, results: Ptr) -> int:
        return self._lib.librdf_query_results_get_bindings_count(results)

    def query_results_get_binding_name(self, results: Ptr, offset: int) -> Optional[str]:
        return _s(self._lib.librdf_query_results_get_binding_name(results, offset))

    def query_results_get_binding_value(self, results: Ptr, offset: int) -> Optional[Ptr]:
        return self._lib.librdf_query_results_get_binding_value(results, offset)

    def query_results_to_string(self, results: Ptr, format_name: str, base_uri: Optional[Ptr]) -> Optional[str]:
        return self._take_string(
            self._lib.librdf_query_results_to_string2(results, _b(format_name), None, None, base_uri)
        )

    def query_results_as_stream(self, results: Ptr) -> Optional[Ptr]:
        return self._lib.librdf_query_results_as_stream(results)

    def free_query_results(self, results: Ptr) -> None:
        self._lib.librdf_free_query_results(results)
