from pathlib import Path

import pytest

from rdflink import AllocationError, Environment, Node, NodeKind, Uri

XSD_INTEGER = "http://www.w3.org/2001/XMLSchema#integer"
RDF_XML_LITERAL = "http://www.w3.org/1999/02/22-rdf-syntax-ns#XMLLiteral"


def test_uri_round_trips_string(env: Environment) -> None:
    uri = Uri(env, "http://ex.org/thing")
    assert uri.to_string() == "http://ex.org/thing"
    assert str(uri) == "http://ex.org/thing"
    assert uri.is_file_uri() is False
    assert uri.to_filename() is None


def test_invalid_uri_raises_allocation_error(env: Environment) -> None:
    with pytest.raises(AllocationError, match="invalid URI"):
        Uri(env, "not a uri")


def test_uri_copy_equals_and_compare(env: Environment) -> None:
    first = Uri(env, "http://ex.org/a")
    copy = first.copy()
    later = Uri(env, "http://ex.org/b")
    assert copy is not first
    assert copy == first
    assert first.equals(copy)
    assert first != later
    assert first.compare(copy) == 0
    assert first.compare(later) < 0
    assert later.compare(first) > 0


def test_uri_local_name_and_relative(env: Environment) -> None:
    base = Uri(env, "http://ex.org/dir/")
    assert base.with_local_name("item").to_string() == "http://ex.org/dir/item"
    assert base.relative("../other").to_string() == "http://ex.org/other"
    assert base.relative("#frag").to_string() == "http://ex.org/dir/#frag"


def test_uri_normalised_to_base(env: Environment) -> None:
    source = Uri(env, "http://a.org/dir/")
    base = Uri(env, "http://b.org/x/")
    result = Uri.normalised_to_base("doc", source, base)
    assert result.to_string() == "http://b.org/x/doc"


def test_uri_from_filename(env: Environment, tmp_path: Path) -> None:
    target = tmp_path / "data.rdf"
    uri = Uri.from_filename(env, str(target))
    assert uri.is_file_uri()
    assert uri.to_string().startswith("file:")
    assert Path(uri.to_filename()) == target


def test_resource_node(env: Environment) -> None:
    node = Node.from_uri_string(env, "http://ex.org/s")
    assert node.kind is NodeKind.RESOURCE
    assert node.is_resource() and not node.is_literal() and not node.is_blank()
    assert node.uri is not None
    assert node.uri.to_string() == "http://ex.org/s"
    assert node.literal_value is None
    assert node.blank_identifier is None


def test_node_from_uri_handle(env: Environment) -> None:
    uri = Uri(env, "http://ex.org/s")
    node = Node.from_uri(env, uri)
    uri.release()
    assert node.uri.to_string() == "http://ex.org/s"


def test_plain_and_language_literals(env: Environment) -> None:
    plain = Node.from_literal(env, "hello")
    tagged = Node.from_literal(env, "bonjour", language="fr")
    assert plain.kind is NodeKind.LITERAL
    assert plain.literal_value == "hello"
    assert plain.language is None
    assert plain.datatype is None
    assert tagged.literal_value == "bonjour"
    assert tagged.language == "fr"
    assert plain != tagged


def test_typed_literal(env: Environment) -> None:
    datatype = Uri(env, XSD_INTEGER)
    node = Node.from_typed_literal(env, "42", datatype)
    assert node.literal_value == "42"
    assert node.datatype is not None
    assert node.datatype.to_string() == XSD_INTEGER


def test_typed_literal_without_datatype_is_plain(env: Environment) -> None:
    node = Node.from_typed_literal(env, "42")
    assert node.datatype is None
    assert node.literal_value == "42"


def test_xml_literal(env: Environment) -> None:
    node = Node.from_literal(env, "<b>bold</b>", is_xml=True)
    assert node.is_literal()
    assert node.datatype.to_string() == RDF_XML_LITERAL


def test_blank_nodes(env: Environment) -> None:
    named = Node.from_blank(env, "b1")
    generated = Node.from_blank(env)
    assert named.kind is NodeKind.BLANK
    assert named.blank_identifier == "b1"
    assert generated.blank_identifier
    assert generated.blank_identifier != "b1"


def test_node_copy_is_independent(env: Environment) -> None:
    original = Node.from_literal(env, "value")
    copy = original.copy()
    original.release()
    assert copy.literal_value == "value"
    assert not copy.released


def test_node_equality(env: Environment) -> None:
    a = Node.from_uri_string(env, "http://ex.org/a")
    again = Node.from_uri_string(env, "http://ex.org/a")
    literal = Node.from_literal(env, "http://ex.org/a")
    assert a == again
    assert a != literal
    assert a.to_string() != literal.to_string()
