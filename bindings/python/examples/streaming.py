"""Stream statements out of a model with sync and async consumers."""

from __future__ import annotations

import asyncio

from rdflink import Environment, Model, Node, Statement, Storage

EX = "http://example.org/"


def fill(env: Environment, model: Model, count: int) -> None:
    knows = Node.from_uri_string(env, EX + "knows")
    for i in range(count):
        subject = Node.from_uri_string(env, f"{EX}person/{i}")
        obj = Node.from_uri_string(env, f"{EX}person/{(i + 1) % count}")
        model.add_statement(Statement.from_nodes(env, subject, knows, obj))
        subject.release()
        obj.release()


async def count_async(model: Model) -> int:
    total = 0
    async with model.find_statements(buffer_size=16) as stream:
        async for statement in stream:
            statement.release()
            total += 1
    return total


def main() -> None:
    with Environment() as env:
        model = Model(env, Storage(env, "memory"))
        fill(env, model, 50)

        with model.find_statements(buffer_size=0) as stream:
            first = next(stream)
            print("First statement:", first)
            print("Stream state:", stream.state.value)
        print("Stream cancelled after with-block:", stream.cancelled)

        print("Async consumer saw", asyncio.run(count_async(model)), "statements")

        source = Node.from_uri_string(env, EX + "person/0")
        arc = Node.from_uri_string(env, EX + "knows")
        for target in model.find_targets(source, arc):
            print("person/0 knows", target.uri)


if __name__ == "__main__":
    main()
