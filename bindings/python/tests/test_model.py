import asyncio
from pathlib import Path
from typing import Callable

import pytest

from rdflink import (
    AllocationError,
    Environment,
    Model,
    Node,
    OperationFailedError,
    Parser,
    Serializer,
    Statement,
    Storage,
    Uri,
    UseAfterRelease,
    serialize_to_string,
)
from rdflink.engines import rdflib_engine

EX = "http://ex.org/"

TURTLE = """
@prefix ex: <http://ex.org/> .
ex:alice ex:knows ex:bob, ex:carol .
ex:bob ex:knows ex:carol .
ex:alice ex:name "Alice" .
"""


def load_turtle(env: Environment, model: Model, text: str = TURTLE) -> None:
    with Parser(env, "turtle") as parser:
        parser.parse_string_into_model(text, EX, model)


def uri_node(env: Environment, name: str) -> Node:
    return Node.from_uri_string(env, EX + name)


def test_add_contains_remove(model: Model, triple: Callable[..., Statement]) -> None:
    statement = triple("s", "p", "o")
    assert not model.contains_statement(statement)

    model.add_statement(statement)
    assert model.contains_statement(statement)
    assert statement in model
    assert model.size() == 1
    assert len(model) == 1

    model.remove_statement(statement)
    assert not model.contains_statement(statement)
    assert model.size() == 0


def test_add_is_set_semantics(model: Model, triple: Callable[..., Statement]) -> None:
    model.add_statement(triple("s", "p", "o"))
    model.add_statement(triple("s", "p", "o"))
    assert model.size() == 1


def test_add_incomplete_statement_fails(env: Environment, model: Model) -> None:
    with pytest.raises(OperationFailedError, match="unable to add statement"):
        model.add_statement(Statement(env))


def test_remove_missing_statement_fails(model: Model, triple: Callable[..., Statement]) -> None:
    with pytest.raises(OperationFailedError, match="unable to remove statement"):
        model.remove_statement(triple("s", "p", "missing"))


def test_contains_partial_statement_is_false(env: Environment, model: Model, triple: Callable[..., Statement]) -> None:
    model.add_statement(triple("s", "p", "o"))
    partial = Statement.from_nodes(env, subject=uri_node(env, "s"))
    assert model.contains_statement(partial) is False


def test_find_statements_matches_pattern(env: Environment, model: Model) -> None:
    load_turtle(env, model)
    partial = Statement.from_nodes(env, uri_node(env, "alice"), uri_node(env, "knows"))

    with model.find_statements(partial) as stream:
        found = list(stream)

    assert len(found) == 2
    assert all(statement.matches(partial) for statement in found)
    targets = sorted(statement.object.uri.to_string() for statement in found)
    assert targets == [EX + "bob", EX + "carol"]


def test_find_statements_without_pattern_returns_everything(env: Environment, model: Model) -> None:
    load_turtle(env, model)
    with model.find_statements() as stream:
        assert len(stream.to_list()) == model.size() == 4


def test_find_statements_items_outlive_the_stream(env: Environment, model: Model) -> None:
    load_turtle(env, model)
    stream = model.find_statements(buffer_size=1)
    items = list(stream)
    stream.close()
    assert all(statement.is_complete() for statement in items)


def test_find_targets(env: Environment, model: Model) -> None:
    load_turtle(env, model)
    with model.find_targets(uri_node(env, "alice"), uri_node(env, "knows")) as stream:
        targets = sorted(node.uri.to_string() for node in stream)
    assert targets == [EX + "bob", EX + "carol"]


def test_find_sources(env: Environment, model: Model) -> None:
    load_turtle(env, model)
    with model.find_sources(uri_node(env, "knows"), uri_node(env, "carol")) as stream:
        sources = sorted(node.uri.to_string() for node in stream)
    assert sources == [EX + "alice", EX + "bob"]


def test_find_arcs(env: Environment, model: Model) -> None:
    load_turtle(env, model)
    with model.find_arcs(uri_node(env, "alice"), uri_node(env, "bob")) as stream:
        arcs = [node.uri.to_string() for node in stream]
    assert arcs == [EX + "knows"]


def test_find_targets_async(env: Environment, model: Model) -> None:
    load_turtle(env, model)

    async def collect():
        results = []
        async with model.find_targets(uri_node(env, "alice"), uri_node(env, "knows"), buffer_size=0) as stream:
            async for node in stream:
                results.append(node.uri.to_string())
        return results

    assert sorted(asyncio.run(collect())) == [EX + "bob", EX + "carol"]


def test_statement_cursor_walks_model(env: Environment, model: Model) -> None:
    load_turtle(env, model)
    with model.statement_cursor() as cursor:
        seen = 0
        while not cursor.is_exhausted():
            view = cursor.current()
            assert view.is_complete()
            cursor.advance()
            assert view.released
            seen += 1
    assert seen == 4


def test_load_from_file(env: Environment, model: Model, tmp_path: Path) -> None:
    path = tmp_path / "people.ttl"
    path.write_text(TURTLE, encoding="utf-8")
    model.load(Uri.from_filename(env, str(path)), "turtle")
    assert model.size() == 4


def test_load_missing_file_fails(env: Environment, model: Model, tmp_path: Path) -> None:
    missing = Uri.from_filename(env, str(tmp_path / "missing.ttl"))
    with pytest.raises(OperationFailedError, match="unable to load"):
        model.load(missing, "turtle")


def test_parse_into_model_from_file(env: Environment, model: Model, tmp_path: Path) -> None:
    path = tmp_path / "people.ttl"
    path.write_text(TURTLE, encoding="utf-8")
    with Parser(env, "turtle") as parser:
        parser.parse_into_model(Uri.from_filename(env, str(path)), None, model)
    assert model.size() == 4


def test_parse_string_with_relative_iris(env: Environment, model: Model) -> None:
    with Parser(env, "turtle") as parser:
        parser.parse_string_into_model('<a> <b> "c" .', "http://base.org/", model)
    subject = Node.from_uri_string(env, "http://base.org/a")
    with model.find_statements(Statement.from_nodes(env, subject)) as stream:
        assert len(list(stream)) == 1


def test_parse_bad_input_fails(env: Environment, model: Model) -> None:
    with Parser(env, "turtle") as parser:
        with pytest.raises(OperationFailedError, match="unable to parse"):
            parser.parse_string_into_model("this is { not turtle", None, model)


def test_to_string_ntriples(env: Environment, model: Model, triple: Callable[..., Statement]) -> None:
    model.add_statement(triple("s", "p", "o"))
    text = model.to_string("ntriples")
    assert '<http://ex.org/s> <http://ex.org/p> "o" .' in text


def test_serializer_with_namespace(env: Environment, model: Model) -> None:
    load_turtle(env, model)
    serializer = Serializer(env, "turtle")
    serializer.set_namespace(EX, "people")
    text = serialize_to_string(serializer, model)
    assert "@prefix people: <http://ex.org/>" in text
    assert "people:alice" in text


def test_serializer_rdfxml_default(env: Environment, model: Model, triple: Callable[..., Statement]) -> None:
    model.add_statement(triple("s", "p", "o"))
    with Serializer(env) as serializer:
        text = serializer.serialize_model_to_string(model, "http://ex.org/")
    assert "rdf:RDF" in text


def test_guess_parser_name(env: Environment) -> None:
    assert env.guess_parser_name(mime_type="text/turtle") == "turtle"
    assert env.guess_parser_name(identifier="http://ex.org/data.rdf") == "rdfxml"
    assert env.guess_parser_name(identifier="data.nt") == "ntriples"
    assert env.guess_parser_name() is None


def test_hashes_storage_with_options(env: Environment, triple: Callable[..., Statement]) -> None:
    storage = Storage(env, "hashes", "test", "hash-type='memory',dir='.'")
    model = Model(env, storage)
    model.add_statement(triple("s", "p", "o"))
    assert model.size() == 1


def test_bdb_hashes_storage_names_missing_package(env: Environment, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(rdflib_engine, "find_spec", lambda name: None)
    with pytest.raises(AllocationError) as info:
        Storage(env, "hashes", "test", "hash-type='bdb',dir='.'")
    assert "berkeleydb" in info.value.detail
    assert "rdflink[bdb]" in env.last_error


def test_bdb_hashes_storage_persists(tmp_path: Path) -> None:
    pytest.importorskip("berkeleydb")
    options = f"hash-type='bdb',dir='{tmp_path}'"
    with Environment(engine="rdflib") as env:
        model = Model(env, Storage(env, "hashes", "store", options))
        s = Node.from_uri_string(env, EX + "s")
        p = Node.from_uri_string(env, EX + "p")
        o = Node.from_literal(env, "o")
        model.add_statement(Statement.from_nodes(env, s, p, o))
        assert model.size() == 1

    with Environment(engine="rdflib") as env:
        model = Model(env, Storage(env, "hashes", "store", options))
        assert model.size() == 1


def test_file_storage_persists_on_sync(tmp_path: Path) -> None:
    path = tmp_path / "store.nt"
    with Environment(engine="rdflib") as env:
        model = Model(env, Storage(env, "file", str(path)))
        s = Node.from_uri_string(env, EX + "s")
        p = Node.from_uri_string(env, EX + "p")
        o = Node.from_literal(env, "o")
        model.add_statement(Statement.from_nodes(env, s, p, o))
        model.sync()
        assert path.exists()

    with Environment(engine="rdflib") as env:
        model = Model(env, Storage(env, "file", str(path)))
        assert model.size() == 1


def test_released_model_rejects_operations(model: Model, triple: Callable[..., Statement]) -> None:
    model.release()
    with pytest.raises(UseAfterRelease, match="model has been released"):
        model.add_statement(triple("s", "p", "o"))
