"""One-vs-all multiclass Tsetlin Machine built from bit-packed binary machines."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import replace

from .bitpacked import BitPackedTsetlinMachine, from_floats
from .types import ClauseInfo, Config, PredictionResult


class MultiClassTsetlinMachine:
    """Multiclass classifier holding one binary machine per class."""

    def __init__(self, config: Config) -> None:
        if config.num_classes < 2:
            raise ValueError("number of classes must be at least 2")
        if config.num_features <= 0:
            raise ValueError("number of features must be positive")
        if config.num_clauses <= 0:
            raise ValueError("number of clauses must be positive")
        self.config = config
        binary_config = replace(config, num_classes=2)
        self.machines: list[BitPackedTsetlinMachine] = [
            BitPackedTsetlinMachine(binary_config) for _ in range(config.num_classes)
        ]

    def _check_features(self, values: Sequence[float]) -> None:
        if len(values) != self.config.num_features:
            raise ValueError(
                "input features dimension mismatch: "
                f"expected {self.config.num_features}, got {len(values)}"
            )

    def fit(self, X: Sequence[Sequence[float]], y: Sequence[int], epochs: int) -> None:
        """Train every per-class machine for ``epochs`` passes over the data."""
        if len(X) != len(y):
            raise ValueError("X and y must have the same length")
        if len(X) == 0:
            raise ValueError("empty training data")
        self._check_features(X[0])

        packed = [from_floats(sample) for sample in X]
        for cls, machine in enumerate(self.machines):
            for _ in range(epochs):
                for bits, target in zip(packed, y):
                    machine.update_bits_with_class(bits, target, cls)

    def _scores(self, values: Sequence[float]) -> list[int]:
        return [machine.predict(values) for machine in self.machines]

    def predict(self, values: Sequence[float]) -> PredictionResult:
        """Return votes per class, the winning class, its margin and confidence."""
        self._check_features(values)
        scores = self._scores(values)

        predicted_class = max(range(len(scores)), key=lambda cls: (scores[cls], -cls))
        max_score = scores[predicted_class]
        second_highest = max(
            (score for cls, score in enumerate(scores) if cls != predicted_class and score > 0),
            default=0,
        )
        margin = float(max_score - second_highest)
        return PredictionResult(
            votes=[float(score) for score in scores],
            predicted_class=predicted_class,
            margin=margin,
            confidence=margin / self.config.num_clauses,
        )

    def predict_class(self, values: Sequence[float]) -> int:
        return self.predict(values).predicted_class

    def predict_proba(self, values: Sequence[float]) -> list[float]:
        """Softmax of the per-class scores."""
        exps = [math.exp(score) for score in self._scores(values)]
        total = sum(exps)
        return [value / total for value in exps]

    def active_clauses(self, values: Sequence[float]) -> list[list[ClauseInfo]]:
        """For each class, the clauses that match ``values``."""
        values = list(values)
        return [
            [
                ClauseInfo(
                    literals=machine.clause_literals(index),
                    is_positive=machine.clauses[index].is_positive,
                )
                for index in machine.active_clauses(values)
            ]
            for machine in self.machines
        ]

    def clause_info(self) -> list[list[ClauseInfo]]:
        """For each class, the include literals and polarity of every clause."""
        features = range(self.config.num_features)
        return [
            [
                ClauseInfo(
                    literals=[clause.has_include(i) for i in features],
                    is_positive=clause.is_positive,
                )
                for clause in machine.clauses
            ]
            for machine in self.machines
        ]