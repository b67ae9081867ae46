"""Streaming throughput micro-benchmark for the Python bindings."""

from __future__ import annotations

import os
import statistics
import time
from typing import Callable, List

from rdflink import Environment, Model, Node, Query, Statement, Storage

EX = "http://example.org/"


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value >= 0 else default


STATEMENT_COUNT = _env_int("BENCH_STATEMENTS", 5000)
BUFFER_SIZES = (0, 1, 16, _env_int("BENCH_BUFFER_SIZE", 100))


def _format_ops_per_second(ops_per_second: float) -> str:
    if not ops_per_second or ops_per_second <= 0:
        return "n/a"
    for threshold, suffix in ((1_000_000_000, "B"), (1_000_000, "M"), (1_000, "K")):
        if ops_per_second >= threshold:
            return f"{ops_per_second / threshold:.1f}{suffix}"
    return f"{ops_per_second:.0f}"


def time_operation(label: str, fn: Callable[[], int], iterations: int = 5) -> float:
    samples: List[float] = []
    items = 0
    for _ in range(iterations):
        start = time.perf_counter()
        items = fn()
        samples.append(time.perf_counter() - start)
    mean = statistics.mean(samples)
    per_item = mean / max(items, 1)
    items_per_second = items / mean if mean > 0 else float("inf")
    print(f"{label:>28}: {per_item * 1e6:.1f} µs/item | {_format_ops_per_second(items_per_second)} items/s ({items} items)")
    return per_item


def fill(env: Environment, model: Model, count: int) -> None:
    predicate = Node.from_uri_string(env, EX + "value")
    for i in range(count):
        subject = Node.from_uri_string(env, f"{EX}s/{i}")
        obj = Node.from_literal(env, str(i))
        model.add_statement(Statement.from_nodes(env, subject, predicate, obj))
        subject.release()
        obj.release()


def drain(stream) -> int:
    count = 0
    with stream:
        for item in stream:
            item.release()
            count += 1
    return count


def main() -> None:
    with Environment() as env:
        model = Model(env, Storage(env, "memory"))
        fill(env, model, STATEMENT_COUNT)
        query = Query(env, "SELECT ?s ?o WHERE { ?s ?p ?o }")
        print(f"Running streaming benchmarks on the {env.engine.name} engine with {STATEMENT_COUNT} statements")

        for size in BUFFER_SIZES:
            time_operation(f"find_statements buffer={size}", lambda: drain(model.find_statements(buffer_size=size)))
            time_operation(
                f"select rows buffer={size}",
                lambda: drain(model.execute_query_to_channel(query, buffer_size=size)),
            )

        time_operation("select as json", lambda: len(model.execute_query_to_formatted_string(query, "json")))


if __name__ == "__main__":
    main()
