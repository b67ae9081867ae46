"""Engine surface implemented on top of rdflib.

Handles are plain Python objects: rdflib terms for URIs and nodes, small
slot classes for everything else. Failures are reported the way librdf
reports them (``None`` or a non-zero status) and the message is kept on the
owning world.
"""

from __future__ import annotations

import hashlib
import json
import logging
import re
from importlib.util import find_spec
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple
from urllib.parse import urljoin, urlparse
from urllib.request import url2pathname

from rdflib import BNode, Graph, Literal, URIRef, plugin
from rdflib.namespace import RDF
from rdflib.parser import Parser as RdflibParser
from rdflib.plugin import PluginException
from rdflib.plugins.sparql import prepareQuery
from rdflib.query import ResultSerializer
from rdflib.serializer import Serializer as RdflibSerializer
from rdflib.term import Node as RdflibNode
from rdflib.term import Variable
from rdflib.util import guess_format

from .base import (
    NODE_TYPE_BLANK,
    NODE_TYPE_LITERAL,
    NODE_TYPE_RESOURCE,
    NODE_TYPE_UNKNOWN,
    STATEMENT_OBJECT,
    STATEMENT_PREDICATE,
    STATEMENT_SUBJECT,
    Engine,
    Ptr,
)

logger = logging.getLogger(__name__)

_PARSER_FORMATS: Dict[str, str] = {
    "rdfxml": "xml",
    "raptor": "xml",
    "ntriples": "nt",
    "turtle": "turtle",
    "trig": "trig",
    "nquads": "nquads",
    "n3": "n3",
    "json-ld": "json-ld",
}

_SERIALIZER_FORMATS: Dict[str, str] = {
    "rdfxml": "xml",
    "rdfxml-abbrev": "pretty-xml",
    "rdfxml-xmp": "pretty-xml",
    "ntriples": "nt",
    "turtle": "turtle",
    "trig": "trig",
    "nquads": "nquads",
    "n3": "n3",
    "json-ld": "json-ld",
}

_MIME_FORMATS: Dict[str, str] = {
    "application/rdf+xml": "xml",
    "text/turtle": "turtle",
    "application/x-turtle": "turtle",
    "application/n-triples": "nt",
    "text/plain": "nt",
    "application/n-quads": "nquads",
    "application/trig": "trig",
    "text/n3": "n3",
    "application/ld+json": "json-ld",
}

_RESULT_FORMATS: Dict[str, str] = {
    "xml": "xml",
    "sparql": "xml",
    "json": "json",
    "csv": "csv",
    "table": "txt",
    "txt": "txt",
}

_GUESSED_NAMES: Dict[str, str] = {value: key for key, value in _PARSER_FORMATS.items() if key != "raptor"}

_QUERY_LANGUAGES = ("sparql", "sparql10", "sparql11", "sparql11-query")

_OPTION_REGEX = re.compile(r"([A-Za-z][\w-]*)\s*=\s*'([^']*)'")

_INVALID_URI_CHARS = set(' <>"{}|\\^`\n\r\t')


class _World:
    __slots__ = ("opened", "freed", "last_error", "features", "digest")

    def __init__(self) -> None:
        self.opened = False
        self.freed = False
        self.last_error: Optional[str] = None
        self.features: Dict[str, Any] = {}
        self.digest = "md5"


class _Statement:
    __slots__ = ("subject", "predicate", "object")

    def __init__(self, subject: Any = None, predicate: Any = None, obj: Any = None) -> None:
        self.subject = subject
        self.predicate = predicate
        self.object = obj

    def triple(self) -> Tuple[Any, Any, Any]:
        return (self.subject, self.predicate, self.object)


class _Cursor:
    __slots__ = ("items", "index")

    def __init__(self, items: Iterable[Any]) -> None:
        self.items = list(items)
        self.index = 0

    def end(self) -> bool:
        return self.index >= len(self.items)

    def remaining(self) -> List[Any]:
        rest = self.items[self.index:]
        self.index = len(self.items)
        return rest


class _Storage:
    __slots__ = ("world", "kind", "name", "graph", "path", "format")

    def __init__(self, world: _World, kind: str, name: str, graph: Graph,
                 path: Optional[Path] = None, fmt: Optional[str] = None) -> None:
        self.world = world
        self.kind = kind
        self.name = name
        self.graph = graph
        self.path = path
        self.format = fmt


class _Model:
    __slots__ = ("world", "storage", "graph")

    def __init__(self, world: _World, storage: _Storage) -> None:
        self.world = world
        self.storage = storage
        self.graph = storage.graph


class _Parser:
    __slots__ = ("world", "format")

    def __init__(self, world: _World, fmt: Optional[str]) -> None:
        self.world = world
        self.format = fmt


class _Serializer:
    __slots__ = ("world", "format", "namespaces")

    def __init__(self, world: _World, fmt: str) -> None:
        self.world = world
        self.format = fmt
        self.namespaces: List[Tuple[str, str]] = []


class _Query:
    __slots__ = ("world", "name", "text", "prepared")

    def __init__(self, world: _World, name: str, text: str, prepared: Any) -> None:
        self.world = world
        self.name = name
        self.text = text
        self.prepared = prepared


class _Results:
    __slots__ = ("world", "kind", "result", "variables", "rows", "index")

    def __init__(self, world: _World, result: Any) -> None:
        self.world = world
        self.kind = result.type
        self.result = result
        self.index = 0
        if self.kind == "SELECT":
            self.variables = [str(var) for var in (result.vars or [])]
            # one row per solution, including solutions that bind nothing
            self.rows = [tuple(row.get(Variable(name)) for name in self.variables) for row in result.bindings]
        else:
            self.variables = []
            self.rows = []


def _fail(world: Optional[_World], message: str, err: Optional[BaseException] = None) -> None:
    if err is not None:
        message = f"{message}: {err}"
    if world is not None:
        world.last_error = message
    logger.debug("rdflib engine: %s", message)


def _parse_options(options: str) -> Dict[str, str]:
    return {key: value for key, value in _OPTION_REGEX.findall(options or "")}


def _valid_uri(text: str) -> bool:
    return bool(text) and not any(ch in _INVALID_URI_CHARS for ch in text)


def _has_plugin(name: str, kind: type) -> bool:
    try:
        plugin.get(name, kind)
    except PluginException:
        return False
    return True


def _resolve_format(name: Optional[str], mime_type: Optional[str], table: Dict[str, str]) -> Optional[str]:
    if name:
        return table.get(name.lower(), name)
    if mime_type:
        return _MIME_FORMATS.get(mime_type.lower())
    return None


def _sniff_format(text: str) -> str:
    head = text.lstrip()[:256]
    if head.startswith("<?xml") or "<rdf:RDF" in head:
        return "xml"
    if head.startswith("{") or head.startswith("["):
        return "json-ld"
    return "turtle"


def _encode_term(term: Any) -> Optional[Dict[str, Any]]:
    if term is None:
        return None
    if isinstance(term, URIRef):
        return {"t": "uri", "v": str(term)}
    if isinstance(term, BNode):
        return {"t": "blank", "v": str(term)}
    encoded: Dict[str, Any] = {"t": "literal", "v": str(term)}
    if term.language:
        encoded["lang"] = term.language
    if term.datatype is not None:
        encoded["dt"] = str(term.datatype)
    return encoded


def _decode_term(value: Optional[Dict[str, Any]]) -> Any:
    if value is None:
        return None
    kind = value["t"]
    if kind == "uri":
        return URIRef(value["v"])
    if kind == "blank":
        return BNode(value["v"])
    if kind == "literal":
        datatype = value.get("dt")
        return Literal(value["v"], lang=value.get("lang"), datatype=URIRef(datatype) if datatype else None)
    raise ValueError(f"unknown term kind {kind!r}")


class RdflibEngine(Engine):
    name = "rdflib"

    # world

    def new_world(self) -> Optional[Ptr]:
        return _World()

    def world_open(self, world: Ptr) -> None:
        world.opened = True

    def free_world(self, world: Ptr) -> None:
        world.freed = True
        world.opened = False

    def world_last_error(self, world: Ptr) -> Optional[str]:
        return world.last_error

    def parser_guess_name(self, world: Ptr, mime_type: Optional[str], identifier: Optional[str]) -> Optional[str]:
        fmt = _MIME_FORMATS.get(mime_type.lower()) if mime_type else None
        if fmt is None and identifier:
            fmt = guess_format(urlparse(identifier).path or identifier)
        if fmt is None:
            return None
        return _GUESSED_NAMES.get(fmt, fmt)

    def world_set_feature(self, world: Ptr, feature: Ptr, value: Ptr) -> int:
        if value is None:
            _fail(world, f"no value for feature {feature}")
            return 1
        world.features[str(feature)] = value
        return 0

    def world_get_feature(self, world: Ptr, feature: Ptr) -> Optional[Ptr]:
        return world.features.get(str(feature))

    def world_set_digest(self, world: Ptr, name: str) -> int:
        algorithm = (name or "").lower()
        if algorithm not in hashlib.algorithms_available:
            _fail(world, f"unknown digest {name!r}")
            return 1
        world.digest = algorithm
        return 0

    # uri

    def new_uri(self, world: Ptr, text: str) -> Optional[Ptr]:
        if not _valid_uri(text):
            _fail(world, f"invalid URI string {text!r}")
            return None
        return URIRef(text)

    def new_uri_from_uri(self, uri: Ptr) -> Optional[Ptr]:
        return URIRef(str(uri))

    def new_uri_from_uri_local_name(self, uri: Ptr, local_name: str) -> Optional[Ptr]:
        text = str(uri) + local_name
        return URIRef(text) if _valid_uri(text) else None

    def new_uri_normalised_to_base(self, text: str, source_uri: Ptr, base_uri: Ptr) -> Optional[Ptr]:
        if not text:
            return None
        absolute = urljoin(str(source_uri), text)
        source = str(source_uri)
        if absolute.startswith(source):
            absolute = str(base_uri) + absolute[len(source):]
        return URIRef(absolute) if _valid_uri(absolute) else None

    def new_uri_relative_to_base(self, base_uri: Ptr, text: str) -> Optional[Ptr]:
        absolute = urljoin(str(base_uri), text)
        return URIRef(absolute) if _valid_uri(absolute) else None

    def new_uri_from_filename(self, world: Ptr, filename: str) -> Optional[Ptr]:
        if not filename:
            _fail(world, "empty filename")
            return None
        return URIRef(Path(filename).absolute().as_uri())

    def uri_as_string(self, uri: Ptr) -> str:
        return str(uri)

    def uri_to_filename(self, uri: Ptr) -> Optional[str]:
        parsed = urlparse(str(uri))
        if parsed.scheme != "file":
            return None
        return url2pathname(parsed.path)

    def uri_is_file_uri(self, uri: Ptr) -> bool:
        return str(uri).startswith("file:")

    def uri_equals(self, first: Ptr, second: Ptr) -> bool:
        return str(first) == str(second)

    def uri_compare(self, first: Ptr, second: Ptr) -> int:
        a, b = str(first), str(second)
        return (a > b) - (a < b)

    def free_uri(self, uri: Ptr) -> None:
        return None

    # node

    def new_node_from_uri(self, world: Ptr, uri: Ptr) -> Optional[Ptr]:
        return URIRef(str(uri))

    def new_node_from_uri_string(self, world: Ptr, text: str) -> Optional[Ptr]:
        return self.new_uri(world, text)

    def new_node_from_literal(self, world: Ptr, value: str, language: Optional[str], is_xml: bool) -> Optional[Ptr]:
        try:
            if is_xml:
                return Literal(value, datatype=RDF.XMLLiteral)
            return Literal(value, lang=language or None)
        except Exception as err:  # noqa: BLE001 - reported as a null node
            _fail(world, "unable to create literal", err)
            return None

    def new_node_from_typed_literal(
        self, world: Ptr, value: str, language: Optional[str], datatype: Optional[Ptr]
    ) -> Optional[Ptr]:
        if datatype is None:
            return self.new_node_from_literal(world, value, language, False)
        try:
            return Literal(value, datatype=URIRef(str(datatype)))
        except Exception as err:  # noqa: BLE001 - reported as a null node
            _fail(world, "unable to create typed literal", err)
            return None

    def new_node_from_blank_identifier(self, world: Ptr, identifier: Optional[str]) -> Optional[Ptr]:
        return BNode(identifier) if identifier else BNode()

    def new_node_from_node(self, node: Ptr) -> Optional[Ptr]:
        return node

    def node_get_type(self, node: Ptr) -> int:
        if isinstance(node, URIRef):
            return NODE_TYPE_RESOURCE
        if isinstance(node, Literal):
            return NODE_TYPE_LITERAL
        if isinstance(node, BNode):
            return NODE_TYPE_BLANK
        return NODE_TYPE_UNKNOWN

    def node_get_uri(self, node: Ptr) -> Optional[Ptr]:
        return node if isinstance(node, URIRef) else None

    def node_get_literal_value(self, node: Ptr) -> Optional[str]:
        return str(node) if isinstance(node, Literal) else None

    def node_get_literal_value_language(self, node: Ptr) -> Optional[str]:
        return node.language if isinstance(node, Literal) else None

    def node_get_literal_value_datatype_uri(self, node: Ptr) -> Optional[Ptr]:
        if isinstance(node, Literal) and node.datatype is not None:
            return URIRef(str(node.datatype))
        return None

    def node_get_blank_identifier(self, node: Ptr) -> Optional[str]:
        return str(node) if isinstance(node, BNode) else None

    def node_to_string(self, node: Ptr) -> Optional[str]:
        return node.n3()

    def node_equals(self, first: Ptr, second: Ptr) -> bool:
        return first == second

    def free_node(self, node: Ptr) -> None:
        return None

    # statement

    def new_statement(self, world: Ptr) -> Optional[Ptr]:
        return _Statement()

    def new_statement_from_nodes(
        self, world: Ptr, subject: Optional[Ptr], predicate: Optional[Ptr], obj: Optional[Ptr]
    ) -> Optional[Ptr]:
        return _Statement(subject, predicate, obj)

    def new_statement_from_statement(self, statement: Ptr) -> Optional[Ptr]:
        return _Statement(*statement.triple())

    def statement_clear(self, statement: Ptr) -> None:
        statement.subject = statement.predicate = statement.object = None

    def statement_get_subject(self, statement: Ptr) -> Optional[Ptr]:
        return statement.subject

    def statement_get_predicate(self, statement: Ptr) -> Optional[Ptr]:
        return statement.predicate

    def statement_get_object(self, statement: Ptr) -> Optional[Ptr]:
        return statement.object

    def statement_set_subject(self, statement: Ptr, node: Optional[Ptr]) -> None:
        statement.subject = node

    def statement_set_predicate(self, statement: Ptr, node: Optional[Ptr]) -> None:
        statement.predicate = node

    def statement_set_object(self, statement: Ptr, node: Optional[Ptr]) -> None:
        statement.object = node

    def statement_is_complete(self, statement: Ptr) -> bool:
        return all(term is not None for term in statement.triple())

    def statement_equals(self, first: Ptr, second: Ptr) -> bool:
        return first.triple() == second.triple()

    def statement_match(self, statement: Ptr, partial: Ptr) -> bool:
        return all(
            wanted is None or wanted == actual
            for actual, wanted in zip(statement.triple(), partial.triple())
        )

    def statement_encode(self, world: Ptr, statement: Ptr) -> Optional[bytes]:
        return self.statement_encode_parts(
            world, statement, None, STATEMENT_SUBJECT | STATEMENT_PREDICATE | STATEMENT_OBJECT
        )

    def statement_encode_parts(
        self, world: Ptr, statement: Ptr, context_node: Optional[Ptr], parts: int
    ) -> Optional[bytes]:
        payload: Dict[str, Any] = {}
        for flag, key, term in (
            (STATEMENT_SUBJECT, "s", statement.subject),
            (STATEMENT_PREDICATE, "p", statement.predicate),
            (STATEMENT_OBJECT, "o", statement.object),
        ):
            if parts & flag:
                payload[key] = _encode_term(term)
        if context_node is not None:
            payload["c"] = _encode_term(context_node)
        return json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")

    def statement_decode(self, world: Ptr, statement: Ptr, data: bytes) -> Tuple[int, Optional[Ptr]]:
        try:
            payload = json.loads(data.decode("utf-8"))
            subject = _decode_term(payload.get("s"))
            predicate = _decode_term(payload.get("p"))
            obj = _decode_term(payload.get("o"))
            context = _decode_term(payload.get("c"))
        except (ValueError, KeyError, TypeError, AttributeError) as err:
            _fail(world, "unable to decode statement", err)
            return 0, None
        statement.subject, statement.predicate, statement.object = subject, predicate, obj
        return len(data), context

    def statement_to_string(self, statement: Ptr) -> Optional[str]:
        parts = [term.n3() if term is not None else "(null)" for term in statement.triple()]
        return "{" + ", ".join(parts) + "}"

    def free_statement(self, statement: Ptr) -> None:
        return None

    # storage and model

    def new_storage(self, world: Ptr, kind: str, name: str, options: str) -> Optional[Ptr]:
        opts = _parse_options(options)
        kind_key = (kind or "").lower()
        try:
            if kind_key == "memory":
                return _Storage(world, kind_key, name, Graph(store="Memory"))
            if kind_key == "hashes":
                hash_type = opts.get("hash-type", "memory")
                if hash_type == "memory":
                    return _Storage(world, kind_key, name, Graph(store="Memory"))
                if hash_type == "bdb":
                    if find_spec("berkeleydb") is None:
                        _fail(world, "hash-type 'bdb' needs the berkeleydb package (install rdflink[bdb])")
                        return None
                    graph = Graph(store="BerkeleyDB")
                    graph.open(str(Path(opts.get("dir", ".")) / name), create=True)
                    return _Storage(world, kind_key, name, graph)
                _fail(world, f"unsupported hash-type {hash_type!r}")
                return None
            if kind_key == "file":
                if not name:
                    _fail(world, "file storage requires a file name")
                    return None
                path = Path(name)
                fmt = guess_format(str(path)) or "xml"
                graph = Graph(store="Memory")
                if opts.get("new") != "yes" and path.exists() and path.stat().st_size > 0:
                    graph.parse(str(path), format=fmt)
                return _Storage(world, kind_key, name, graph, path, fmt)
        except Exception as err:  # noqa: BLE001 - reported as a null storage
            _fail(world, f"unable to create {kind!r} storage", err)
            return None
        _fail(world, f"unknown storage kind {kind!r}")
        return None

    def _sync_storage(self, storage: _Storage) -> int:
        if storage.path is None:
            return 0
        try:
            storage.path.parent.mkdir(parents=True, exist_ok=True)
            storage.graph.serialize(destination=str(storage.path), format=storage.format)
        except Exception as err:  # noqa: BLE001 - reported as a status code
            _fail(storage.world, f"unable to write {storage.path}", err)
            return 1
        return 0

    def free_storage(self, storage: Ptr) -> None:
        self._sync_storage(storage)
        if storage.kind == "hashes" and storage.graph.store.__class__.__name__ == "BerkeleyDB":
            storage.graph.close()

    def new_model(self, world: Ptr, storage: Ptr, options: str) -> Optional[Ptr]:
        if storage is None:
            _fail(world, "model requires a storage")
            return None
        return _Model(world, storage)

    def free_model(self, model: Ptr) -> None:
        self._sync_storage(model.storage)

    def model_size(self, model: Ptr) -> int:
        return len(model.graph)

    def model_add_statement(self, model: Ptr, statement: Ptr) -> int:
        subject, predicate, obj = statement.triple()
        if subject is None or predicate is None or obj is None:
            _fail(model.world, "cannot add an incomplete statement")
            return 1
        if isinstance(subject, Literal) or not isinstance(predicate, URIRef):
            _fail(model.world, "statement subject must be a resource or blank and predicate a resource")
            return 1
        model.graph.add((subject, predicate, obj))
        return 0

    def model_remove_statement(self, model: Ptr, statement: Ptr) -> int:
        triple = statement.triple()
        if any(term is None for term in triple) or triple not in model.graph:
            _fail(model.world, "statement is not in the model")
            return 1
        model.graph.remove(triple)
        return 0

    def model_contains_statement(self, model: Ptr, statement: Ptr) -> bool:
        triple = statement.triple()
        if any(term is None for term in triple):
            return False
        return triple in model.graph

    def model_find_statements(self, model: Ptr, partial: Ptr) -> Optional[Ptr]:
        pattern = partial.triple() if partial is not None else (None, None, None)
        return _Cursor(_Statement(*triple) for triple in model.graph.triples(pattern))

    def model_get_targets(self, model: Ptr, source: Ptr, arc: Ptr) -> Optional[Ptr]:
        return _Cursor(model.graph.objects(source, arc))

    def model_get_sources(self, model: Ptr, arc: Ptr, target: Ptr) -> Optional[Ptr]:
        return _Cursor(model.graph.subjects(arc, target))

    def model_get_arcs(self, model: Ptr, source: Ptr, target: Ptr) -> Optional[Ptr]:
        return _Cursor(model.graph.predicates(source, target))

    def model_load(self, model: Ptr, uri: Ptr, name: Optional[str], mime_type: Optional[str]) -> int:
        parser = self.new_parser(model.world, name, mime_type)
        if parser is None:
            return 1
        return self.parser_parse_into_model(parser, uri, None, model)

    def model_to_string(
        self, model: Ptr, base_uri: Optional[Ptr], name: Optional[str], mime_type: Optional[str]
    ) -> Optional[str]:
        serializer = self.new_serializer(model.world, name or ("rdfxml" if not mime_type else None), mime_type, None)
        if serializer is None:
            return None
        return self.serializer_serialize_model_to_string(serializer, base_uri, model)

    def model_sync(self, model: Ptr) -> int:
        return self._sync_storage(model.storage)

    def model_query_execute(self, model: Ptr, query: Ptr) -> Optional[Ptr]:
        try:
            result = model.graph.query(query.prepared)
            return _Results(model.world, result)
        except Exception as err:  # noqa: BLE001 - reported as null results
            _fail(model.world, "query execution failed", err)
            return None

    # streams and iterators share one cursor type

    def stream_end(self, stream: Ptr) -> bool:
        return stream.end()

    def stream_get_object(self, stream: Ptr) -> Optional[Ptr]:
        return None if stream.end() else stream.items[stream.index]

    def stream_next(self, stream: Ptr) -> bool:
        if not stream.end():
            stream.index += 1
        return stream.end()

    def free_stream(self, stream: Ptr) -> None:
        stream.items = []
        stream.index = 0

    def iterator_end(self, iterator: Ptr) -> bool:
        return self.stream_end(iterator)

    def iterator_get_object(self, iterator: Ptr) -> Optional[Ptr]:
        return self.stream_get_object(iterator)

    def iterator_next(self, iterator: Ptr) -> bool:
        return self.stream_next(iterator)

    def free_iterator(self, iterator: Ptr) -> None:
        self.free_stream(iterator)

    # parser

    def new_parser(self, world: Ptr, name: Optional[str], mime_type: Optional[str]) -> Optional[Ptr]:
        if name and name.lower() == "guess":
            return _Parser(world, None)
        fmt = _resolve_format(name, mime_type, _PARSER_FORMATS)
        if fmt is None:
            if name or mime_type:
                _fail(world, f"no parser for name {name!r} / mime type {mime_type!r}")
                return None
            return _Parser(world, None)
        if not _has_plugin(fmt, RdflibParser):
            _fail(world, f"unknown parser {name or mime_type!r}")
            return None
        return _Parser(world, fmt)

    def parser_parse_into_model(self, parser: Ptr, uri: Ptr, base_uri: Optional[Ptr], model: Ptr) -> int:
        location = self.uri_to_filename(uri) or str(uri)
        fmt = parser.format or guess_format(location)
        try:
            model.graph.parse(location, format=fmt, publicID=str(base_uri) if base_uri is not None else None)
        except Exception as err:  # noqa: BLE001 - reported as a status code
            _fail(parser.world, f"unable to parse {uri}", err)
            return 1
        return 0

    def parser_parse_string_into_model(self, parser: Ptr, text: str, base_uri: Optional[Ptr], model: Ptr) -> int:
        fmt = parser.format or _sniff_format(text)
        try:
            model.graph.parse(data=text, format=fmt, publicID=str(base_uri) if base_uri is not None else None)
        except Exception as err:  # noqa: BLE001 - reported as a status code
            _fail(parser.world, "unable to parse string", err)
            return 1
        return 0

    def free_parser(self, parser: Ptr) -> None:
        return None

    # serializer

    def new_serializer(
        self, world: Ptr, name: Optional[str], mime_type: Optional[str], type_uri: Optional[Ptr]
    ) -> Optional[Ptr]:
        fmt = _resolve_format(name, mime_type, _SERIALIZER_FORMATS) or "xml"
        if not _has_plugin(fmt, RdflibSerializer):
            _fail(world, f"unknown serializer {name or mime_type!r}")
            return None
        return _Serializer(world, fmt)

    def serializer_set_namespace(self, serializer: Ptr, uri: Ptr, prefix: str) -> int:
        serializer.namespaces.append((prefix, str(uri)))
        return 0

    def _render(self, serializer: _Serializer, base_uri: Optional[Ptr], triples: Iterable[Tuple[Any, Any, Any]]) -> Optional[str]:
        graph = Graph()
        for prefix, namespace in serializer.namespaces:
            graph.bind(prefix, namespace)
        for triple in triples:
            graph.add(triple)
        try:
            return graph.serialize(format=serializer.format, base=str(base_uri) if base_uri is not None else None)
        except Exception as err:  # noqa: BLE001 - reported as a null string
            _fail(serializer.world, "serialization failed", err)
            return None

    def serializer_serialize_model_to_string(
        self, serializer: Ptr, base_uri: Optional[Ptr], model: Ptr
    ) -> Optional[str]:
        return self._render(serializer, base_uri, model.graph)

    def serializer_serialize_stream_to_string(
        self, serializer: Ptr, base_uri: Optional[Ptr], stream: Ptr
    ) -> Optional[str]:
        return self._render(serializer, base_uri, (item.triple() for item in stream.remaining()))

    def free_serializer(self, serializer: Ptr) -> None:
        serializer.namespaces = []

    # query

    def new_query(self, world: Ptr, name: str, text: str, base_uri: Optional[Ptr]) -> Optional[Ptr]:
        if (name or "").lower() not in _QUERY_LANGUAGES:
            _fail(world, f"unsupported query language {name!r}")
            return None
        try:
            prepared = prepareQuery(text, base=str(base_uri) if base_uri is not None else None)
        except Exception as err:  # noqa: BLE001 - reported as a null query
            _fail(world, "unable to compile query", err)
            return None
        return _Query(world, name, text, prepared)

    def free_query(self, query: Ptr) -> None:
        query.prepared = None

    def query_results_is_bindings(self, results: Ptr) -> bool:
        return results.kind == "SELECT"

    def query_results_is_boolean(self, results: Ptr) -> bool:
        return results.kind == "ASK"

    def query_results_is_graph(self, results: Ptr) -> bool:
        return results.kind in ("CONSTRUCT", "DESCRIBE")

    def query_results_get_boolean(self, results: Ptr) -> int:
        if results.kind != "ASK":
            return -1
        return 1 if results.result.askAnswer else 0

    def query_results_finished(self, results: Ptr) -> bool:
        return results.index >= len(results.rows)

    def query_results_next(self, results: Ptr) -> bool:
        if results.index < len(results.rows):
            results.index += 1
        return self.query_results_finished(results)

    def query_results_get_bindings_count(self, results: Ptr) -> int:
        return len(results.variables)

    def query_results_get_binding_name(self, results: Ptr, offset: int) -> Optional[str]:
        if 0 <= offset < len(results.variables):
            return results.variables[offset]
        return None

    def query_results_get_binding_value(self, results: Ptr, offset: int) -> Optional[Ptr]:
        if self.query_results_finished(results) or not 0 <= offset < len(results.variables):
            return None
        value = results.rows[results.index][offset]
        return value if isinstance(value, RdflibNode) else None

    def query_results_to_string(self, results: Ptr, format_name: str, base_uri: Optional[Ptr]) -> Optional[str]:
        if self.query_results_is_graph(results):
            serializer = self.new_serializer(results.world, format_name, None, None)
            if serializer is None:
                return None
            return self._render(serializer, base_uri, results.result.graph)
        fmt = _RESULT_FORMATS.get((format_name or "xml").lower(), format_name)
        if not _has_plugin(fmt, ResultSerializer):
            _fail(results.world, f"unknown query results format {format_name!r}")
            return None
        try:
            rendered = results.result.serialize(format=fmt)
        except Exception as err:  # noqa: BLE001 - reported as a null string
            _fail(results.world, f"unable to format results as {format_name!r}", err)
            return None
        return rendered.decode("utf-8") if isinstance(rendered, bytes) else rendered

    def query_results_as_stream(self, results: Ptr) -> Optional[Ptr]:
        if not self.query_results_is_graph(results):
            _fail(results.world, "query results are not a graph")
            return None
        return _Cursor(_Statement(*triple) for triple in results.result.graph)

    def free_query_results(self, results: Ptr) -> None:
        results.rows = []
