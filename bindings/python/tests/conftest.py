from typing import Callable, Iterator

import pytest

from rdflink import Environment, Model, Node, Statement, Storage

EX = "http://ex.org/"


@pytest.fixture
def env() -> Iterator[Environment]:
    environment = Environment(engine="rdflib").open()
    yield environment
    environment.close()


@pytest.fixture
def model(env: Environment) -> Model:
    return Model(env, Storage(env, "memory"))


@pytest.fixture
def triple(env: Environment) -> Callable[..., Statement]:
    """Build a statement from short names: ``triple("s", "p", "o")``.

    The object is a plain literal unless ``uri_object=True``.
    """

    def build(subject: str, predicate: str, obj: str, uri_object: bool = False) -> Statement:
        s = Node.from_uri_string(env, EX + subject)
        p = Node.from_uri_string(env, EX + predicate)
        o = Node.from_uri_string(env, EX + obj) if uri_object else Node.from_literal(env, obj)
        try:
            return Statement.from_nodes(env, s, p, o)
        finally:
            s.release()
            p.release()
            o.release()

    return build
