"""Batch and parallel inference over a set of per-class binary machines."""

from __future__ import annotations

import math
import os
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from .bitpacked import BitPackedTsetlinMachine, from_floats
from .types import Config


@dataclass
class InferenceResult:
    """Per-class totals gathered by one worker."""

    votes: list[int] = field(default_factory=list)
    match_scores: list[float] = field(default_factory=list)
    clause_counts: list[int] = field(default_factory=list)


def _worker_count() -> int:
    return (os.cpu_count() or 1) * 2


class ShardedInference:
    """Predicts the class whose binary machine gives the highest score."""

    def __init__(self, machines: Sequence[BitPackedTsetlinMachine], config: Config) -> None:
        self.machines = list(machines)
        self.config = config

    def predict(self, values: Sequence[float]) -> int:
        """Return the first class with the highest score."""
        if not self.machines:
            raise ValueError("no machines to predict with")
        bits = from_floats(values)
        scores = [machine.predict_bits(bits) for machine in self.machines]
        return max(range(len(scores)), key=lambda cls: (scores[cls], -cls))

    def predict_batch(self, X: Sequence[Sequence[float]]) -> list[int]:
        return [self.predict(values) for values in X]

    def predict_batch_parallel(self, X: Sequence[Sequence[float]]) -> list[int]:
        """Predict every row of ``X`` using a thread pool; order is preserved."""
        with ThreadPoolExecutor(max_workers=_worker_count()) as pool:
            return list(pool.map(self.predict, X))

    def predict_batch_parallel_with_callback(
        self,
        X: Sequence[Sequence[float]],
        callback: Callable[[int, BitPackedTsetlinMachine], object],
    ) -> list[int]:
        """Predict in parallel and call ``callback(index, machine)`` per row.

        Every row is processed; if any callback raises, the exception of the
        lowest row index is re-raised once all rows are done.
        """

        def work(index: int) -> int:
            predicted = self.predict(X[index])
            callback(index, self.machines[predicted])
            return predicted

        with ThreadPoolExecutor(max_workers=_worker_count()) as pool:
            futures = [pool.submit(work, index) for index in range(len(X))]
        for future in futures:
            error = future.exception()
            if error is not None:
                raise error
        return [future.result() for future in futures]


def compute_confidence(
    votes: Sequence[float],
    match_scores: Sequence[float],
    clause_counts: Sequence[int],
    predicted_class: int,
) -> float:
    """Blend the vote margin and average match score into a value in [0, 1]."""
    second_max = max(
        (v for i, v in enumerate(votes) if i != predicted_class), default=-math.inf
    )
    margin = votes[predicted_class] - second_max
    max_possible = float(clause_counts[predicted_class])
    if max_possible == 0:
        return 0.0
    avg_score = match_scores[predicted_class] / clause_counts[predicted_class]
    confidence = 0.7 * (margin / max_possible) + 0.3 * avg_score
    return max(0.0, min(1.0, confidence))