"""Parse Turtle into a model, then query it three ways."""

from __future__ import annotations

from rdflink import Environment, Model, Parser, Query, Storage

DATA = """
@prefix ex: <http://example.org/> .
ex:ada ex:name "Ada Lovelace" ; ex:knows ex:charles .
ex:charles ex:name "Charles Babbage" .
"""


def main() -> None:
    with Environment() as env:
        print("Engine:", env.engine.name)
        model = Model(env, Storage(env, "memory"))
        with Parser(env, "turtle") as parser:
            parser.parse_string_into_model(DATA, "http://example.org/", model)
        print("Loaded statements:", model.size())

        names = Query(env, "SELECT ?who ?name WHERE { ?who <http://example.org/name> ?name }")
        with model.execute_query_to_channel(names) as rows:
            for row in rows:
                print("Row:", row["who"].uri, row["name"].literal_value)

        ask = Query(env, "ASK { <http://example.org/ada> <http://example.org/knows> ?anyone }")
        print("ASK as JSON:", model.execute_query_to_formatted_string(ask, "json"))

        construct = Query(
            env,
            "CONSTRUCT { ?b <http://example.org/knownBy> ?a } WHERE { ?a <http://example.org/knows> ?b }",
        )
        print("CONSTRUCT as N-Triples:")
        print(model.execute_query_to_formatted_string(construct, "ntriples"))


if __name__ == "__main__":
    main()
