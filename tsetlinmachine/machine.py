"""Binary Tsetlin Machine that tracks automaton states and clause activity."""

from __future__ import annotations

import math
import random
import threading
from collections.abc import Sequence

from .bitpacked import BitPackedClause, BitVec, from_floats
from .multiclass import MultiClassTsetlinMachine
from .types import ClauseInfo, Config, PredictionResult

_DECAY = 0.9
_GAIN = 0.1


def new_tsetlin_machine(config: Config) -> MultiClassTsetlinMachine:
    """Create a machine for ``config``; every case uses the one-vs-all classifier."""
    return MultiClassTsetlinMachine(config)


class TsetlinMachine:
    """Binary classifier whose clauses vote by polarity.

    Training moves the Tsetlin automaton states of the included literals and
    keeps an exponentially decaying match score and momentum per clause.
    """

    def __init__(self, config: Config) -> None:
        if config.num_features <= 0:
            raise ValueError("number of features must be positive")
        if config.num_clauses <= 0:
            raise ValueError("number of clauses must be positive")
        self.config = config
        self.clauses: list[BitPackedClause] = []
        for index in range(config.num_clauses):
            clause = BitPackedClause(config.num_features)
            clause.set_include(index % config.num_features, True)
            self.clauses.append(clause)
        middle = config.n_states // 2
        self.states: list[list[int]] = [
            [middle] * config.num_features for _ in range(config.num_clauses)
        ]
        self.match_scores: list[float] = [0.0] * config.num_clauses
        self.momentums: list[float] = [0.0] * config.num_clauses
        self._rng = random.Random(config.random_seed)
        self._lock = threading.Lock()
        self._training = False

    def _check_features(self, values: Sequence[float]) -> None:
        if len(values) != self.config.num_features:
            raise ValueError(
                "input features dimension mismatch: "
                f"expected {self.config.num_features}, got {len(values)}"
            )

    def _classify(self, bits: BitVec) -> tuple[int, int]:
        """Return the signed clause score for ``bits`` and the class it implies."""
        score = sum(
            (1 if clause.is_positive else -1) for clause in self.clauses if clause.match(bits)
        )
        predicted = 1 if score < 0 else 0
        return score, predicted

    def _toward_extreme(self, j: int, k: int) -> None:
        if self.states[j][k] < self.config.n_states // 2:
            self.states[j][k] += 1
        else:
            self.states[j][k] = self.config.n_states

    def _toward_middle(self, j: int, k: int) -> None:
        if self.states[j][k] > self.config.n_states // 2:
            self.states[j][k] -= 1
        else:
            self.states[j][k] = 1

    def _train_sample(self, bits: BitVec, target: int) -> None:
        _, predicted = self._classify(bits)
        rewarded = target == predicted
        for j, clause in enumerate(self.clauses):
            fired = clause.match(bits)
            for k in range(self.config.num_features):
                if not clause.has_include(k):
                    continue
                if self._rng.random() >= 1.0 / self.config.s:
                    continue
                if fired == rewarded:
                    self._toward_extreme(j, k)
                else:
                    self._toward_middle(j, k)
            gain = _GAIN if fired else 0.0
            self.match_scores[j] = _DECAY * self.match_scores[j] + gain
            self.momentums[j] = _DECAY * self.momentums[j] + gain

    def fit(self, X: Sequence[Sequence[float]], y: Sequence[int], epochs: int) -> None:
        """Train for ``epochs`` passes over ``X`` with labels ``y``."""
        if len(X) != len(y):
            raise ValueError("X and y must have the same length")
        if len(X) == 0:
            raise ValueError("empty training data")
        self._check_features(X[0])

        with self._lock:
            if self._training:
                raise RuntimeError("training already in progress")
            self._training = True
        try:
            if self.config.debug:
                print("\nInitial state summary:")
                self._print_state_summary()
            packed = [from_floats(sample) for sample in X]
            for epoch in range(epochs):
                for bits, target in zip(packed, y):
                    self._train_sample(bits, target)
                correct = sum(
                    1 for bits, target in zip(packed, y)
                    if self._classify(bits)[1] == target
                )
                if self.config.debug:
                    total = len(packed)
                    print(
                        f"Epoch {epoch + 1}/{epochs}: Accuracy = "
                        f"{correct / total * 100:.2f}% ({correct}/{total})"
                    )
        finally:
            with self._lock:
                self._training = False

    def predict(self, values: Sequence[float]) -> PredictionResult:
        """Return the votes, predicted class, margin and confidence for ``values``."""
        self._check_features(values)
        bits = from_floats(values)
        score, predicted = self._classify(bits)
        active = sum(1 for clause in self.clauses if clause.match(bits))

        num_clauses = self.config.num_clauses
        margin = float(abs(score))
        confidence = margin / num_clauses
        if active > 0:
            confidence = max(confidence, active / num_clauses)

        if predicted == 0:
            votes = [float(score), float(-score)]
        else:
            votes = [float(-score), float(score)]

        if active > 0 and abs(votes[0]) < 1e-10 and abs(votes[1]) < 1e-10:
            scale = active / num_clauses
            votes = [scale, -scale] if predicted == 0 else [-scale, scale]

        return PredictionResult(
            votes=votes,
            predicted_class=predicted,
            margin=margin,
            confidence=confidence,
        )

    def predict_class(self, values: Sequence[float]) -> int:
        return self.predict(values).predicted_class

    def predict_proba(self, values: Sequence[float]) -> list[float]:
        """Softmax of the two class votes."""
        exps = [math.exp(vote) for vote in self.predict(values).votes]
        total = sum(exps)
        return [value / total for value in exps]

    def _literals(self, clause: BitPackedClause) -> list[bool]:
        return [clause.has_include(i) for i in range(self.config.num_features)]

    def clause_info(self) -> list[list[ClauseInfo]]:
        """A single group holding the literals, polarity and activity of each clause."""
        with self._lock:
            return [
                [
                    ClauseInfo(
                        literals=self._literals(clause),
                        is_positive=clause.is_positive,
                        match_score=self.match_scores[index],
                        momentum=self.momentums[index],
                    )
                    for index, clause in enumerate(self.clauses)
                ]
            ]

    def active_clauses(self, values: Sequence[float]) -> list[list[ClauseInfo]]:
        """A single group holding the clauses that match ``values``."""
        self._check_features(values)
        bits = from_floats(values)
        return [
            [
                ClauseInfo(literals=self._literals(clause), is_positive=clause.is_positive)
                for clause in self.clauses
                if clause.match(bits)
            ]
        ]

    def _header_text(self) -> str:
        """The configuration lines shared by both state reports."""
        lines = [
            f"Number of clauses: {len(self.clauses)}",
            f"Number of features: {self.config.num_features}",
            f"Number of states: {self.config.n_states}",
            f"Threshold: {self.config.threshold:.2f}",
            f"Specificity: {self.config.s:.2f}",
        ]
        return "\n".join(lines)

    def print_state_info(self) -> None:
        """Print the configuration and every clause's state."""
        with self._lock:
            print(self._header_text())
            for index, clause in enumerate(self.clauses):
                print(f"\nClause {index}:")
                print(f"  Is Positive: {str(clause.is_positive).lower()}")
                print(f"  Match Score: {self.match_scores[index]:.2f}")
                print(f"  Momentum: {self.momentums[index]:.2f}")
                active = "".join(
                    f"{j} " for j in range(self.config.num_features) if clause.has_include(j)
                )
                print(f"  Active Literals: {active}")

    def _print_state_summary(self) -> None:
        with self._lock:
            print(self._header_text())
            total = sum(sum(self._literals(clause)) for clause in self.clauses)
            print(f"\nAverage active literals per clause: {total / len(self.clauses):.2f}")
            print(f"Total active literals: {total}")