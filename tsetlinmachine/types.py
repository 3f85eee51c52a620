"""Configuration and result types shared by the Tsetlin Machine classifiers.

Typical use::

    config = default_config()
    config.num_features = 2
    config.num_clauses = 10
    machine = MultiClassTsetlinMachine(config)
    machine.fit([[0, 0], [0, 1], [1, 0], [1, 1]], [0, 1, 1, 0], 100)
    result = machine.predict([0, 1])
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Config:
    """Hyperparameters that control the behaviour and capacity of a machine."""

    num_classes: int = 2
    num_features: int = 0
    num_clauses: int = 100
    num_literals: int = 4
    threshold: float = 10.0
    s: float = 3.9
    n_states: int = 100
    random_seed: int = 42
    debug: bool = False


def default_config() -> Config:
    """Return a configuration with the default values.

    ``num_features`` is left at zero and must be set by the caller.
    """
    return Config()


@dataclass
class PredictionResult:
    """Votes for each class together with the chosen class and its margin."""

    votes: list[float] = field(default_factory=list)
    predicted_class: int = 0
    margin: float = 0.0
    confidence: float = 0.0

    def __str__(self) -> str:
        votes = ", ".join(
            f"Class {index}: {int(count)} votes" for index, count in enumerate(self.votes)
        )
        return (
            f"Votes: [{votes}], Predicted Class: {self.predicted_class}, "
            f"Margin: {self.margin:.2f}, Confidence: {self.confidence:.2f}"
        )


@dataclass
class ClauseInfo:
    """Description of one clause: included literals, polarity and activity."""

    literals: list[bool] = field(default_factory=list)
    is_positive: bool = True
    match_score: float = 0.0
    momentum: float = 0.0