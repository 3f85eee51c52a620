"""Small demonstration programs: XOR, a three-class pattern set and MNIST."""

from __future__ import annotations

import sys
from collections.abc import Sequence

from .multiclass import MultiClassTsetlinMachine
from .types import ClauseInfo, PredictionResult, default_config

XOR_X: list[list[float]] = [[0, 0], [0, 1], [1, 0], [1, 1]]
XOR_Y: list[int] = [0, 1, 1, 0]

PATTERN_X: list[list[float]] = [
    [1, 1, 0, 0],
    [1, 1, 0, 1],
    [1, 1, 1, 0],
    [0, 0, 1, 1],
    [1, 0, 1, 1],
    [0, 1, 1, 1],
    [1, 0, 1, 0],
    [0, 1, 0, 1],
    [1, 0, 0, 1],
]
PATTERN_Y: list[int] = [0, 0, 0, 1, 1, 1, 2, 2, 2]

EXAMPLES = ("binary", "multiclass", "mnist")


def _format_values(values: Sequence[float]) -> str:
    return "[" + " ".join(f"{value:g}" for value in values) + "]"


def _test_machine(
    machine: MultiClassTsetlinMachine, X: Sequence[Sequence[float]], y: Sequence[int]
) -> list[PredictionResult]:
    print("\nTesting the model...")
    results = []
    for values, expected in zip(X, y):
        result = machine.predict(values)
        results.append(result)
        print(
            f"Input: {_format_values(values)}, Expected: {expected}, "
            f"Predicted: {result.predicted_class}, Confidence: {result.confidence:.2f}"
        )
    return results


def _print_active_counts(clause_info: list[list[ClauseInfo]]) -> None:
    print("\nAnalyzing learned clauses...")
    for cls, clauses in enumerate(clause_info):
        print(f"\nClass {cls} Clauses:")
        active = sum(1 for clause in clauses if any(clause.literals))
        print(f"Active Clauses: {active}/{len(clauses)}")


def run_binary_example() -> list[PredictionResult]:
    """Learn XOR with a two-class machine; print and return the predictions."""
    config = default_config()
    config.num_features = 2
    config.num_clauses = 20
    config.num_literals = 2
    config.threshold = 10.0
    config.s = 2.5
    config.n_states = 100
    config.num_classes = 2
    config.random_seed = 42
    config.debug = True

    machine = MultiClassTsetlinMachine(config)

    print("Training the model...")
    machine.fit(XOR_X, XOR_Y, 100)

    results = _test_machine(machine, XOR_X, XOR_Y)

    print("\nAnalyzing learned clauses...")
    for cls, clauses in enumerate(machine.clause_info()):
        print(f"\nClass {cls} Clauses:")
        for index, clause in enumerate(clauses):
            polarity = "Positive" if clause.is_positive else "Negative"
            print(
                f"Clause {index}: {polarity}, Match Score: {clause.match_score:.2f}, "
                f"Momentum: {clause.momentum:.2f}"
            )
            literals = "".join(f"{i} " for i, active in enumerate(clause.literals) if active)
            print(f"Active Literals: {literals}")
    return results


def run_multiclass_example() -> list[PredictionResult]:
    """Learn three four-bit patterns one-vs-all; print and return the predictions."""
    config = default_config()
    config.num_features = 4
    config.num_classes = 3
    config.num_clauses = 20
    config.num_literals = 4
    config.threshold = 10.0
    config.s = 3.9
    config.n_states = 100
    config.random_seed = 42
    config.debug = True

    machine = MultiClassTsetlinMachine(config)

    print("Training the model...")
    machine.fit(PATTERN_X, PATTERN_Y, 10)

    results = _test_machine(machine, PATTERN_X, PATTERN_Y)
    _print_active_counts(machine.clause_info())
    return results


def main(argv: Sequence[str] | None = None) -> int:
    """Run the example named by the first argument; return the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print(f"Please specify which example to run: {', '.join(EXAMPLES)}")
        print(f"Usage: tsetlinmachine-examples [{'|'.join(EXAMPLES)}]")
        return 1

    name = args[0]
    if name == "binary":
        print("Running binary classification example...")
        run_binary_example()
    elif name == "multiclass":
        print("Running multiclass classification example...")
        run_multiclass_example()
    elif name == "mnist":
        from .mnist import run_mnist_example

        print("Running MNIST classification example...")
        run_mnist_example()
    else:
        print(f"Unknown example: {name}")
        print(f"Available examples: {', '.join(EXAMPLES)}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())