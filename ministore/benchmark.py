"""Timing harness: batch inserts, then single puts, then gets."""

from __future__ import annotations

import time
from pathlib import Path

from pydantic import BaseModel, Field
from tqdm import tqdm

from .database import delete_store
from .store import MiniStore


class BenchmarkResult(BaseModel):
    batch_inserts: int = Field(ge=0)
    puts: int = Field(ge=0)
    gets: int = Field(ge=0)
    batch_ms: float
    puts_ms: float
    gets_ms: float

    def summary_lines(self) -> list[str]:
        return [
            f"Batch Inserts - Took {self.batch_ms:.0f}ms to insert {self.batch_inserts} items",
            f"Puts - Took {self.puts_ms:.0f}ms to insert {self.puts} items",
            f"Gets - Took {self.gets_ms:.0f}ms to get {self.gets} items",
        ]


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000.0


def run_benchmark(
    path: str | Path,
    batch_inserts: int = 10000,
    puts: int = 2000,
    progress: bool = False,
) -> BenchmarkResult:
    """Recreate the store at ``path`` and time each phase.

    Keys are ``Key{i}`` with values ``Value{i}``: the first ``batch_inserts``
    go in through one batch, the next ``puts`` one at a time, and then
    every key is read back.
    """
    if batch_inserts < 0 or puts < 0:
        raise ValueError("batch_inserts and puts must be >= 0")

    _ = delete_store(path)
    store = MiniStore(path)
    gets = batch_inserts + puts

    start = time.perf_counter()
    items = [(f"Key{i}", f"Value{i}") for i in range(batch_inserts)]
    _ = store.batch_put(tqdm(items, desc="batch", disable=not progress))
    batch_ms = _elapsed_ms(start)

    start = time.perf_counter()
    for i in tqdm(range(batch_inserts, gets), desc="puts", disable=not progress):
        store.put(f"Key{i}", f"Value{i}")
    puts_ms = _elapsed_ms(start)

    start = time.perf_counter()
    values: list[str] = []
    for i in tqdm(range(gets), desc="gets", disable=not progress):
        values.append(store.get(f"Key{i}"))
    gets_ms = _elapsed_ms(start)

    store.close()
    return BenchmarkResult(
        batch_inserts=batch_inserts,
        puts=puts,
        gets=len(values),
        batch_ms=batch_ms,
        puts_ms=puts_ms,
        gets_ms=gets_ms,
    )
