import random

import pytest

from tsetlinmachine.multiclass import MultiClassTsetlinMachine
from tsetlinmachine.types import Config, default_config


def _config(**overrides):
    config = Config(
        num_features=10,
        num_clauses=5,
        num_literals=4,
        threshold=10,
        s=3.0,
        n_states=100,
        num_classes=3,
        random_seed=42,
        debug=True,
    )
    for key, value in overrides.items():
        setattr(config, key, value)
    return config


TRAIN_X = [
    [1.0, 0.0, 1.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0.0, 0.0],
    [0.0, 1.0, 0.0, 1.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0.0],
    [0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 1.0, 1.0, 1.0, 1.0],
]
TRAIN_Y = [0, 1, 2]


def _multiclass_data(num_samples, num_features, num_classes):
    rng = random.Random(42)
    X = [[float(rng.randrange(2)) for _ in range(num_features)] for _ in range(num_samples)]
    y = [rng.randrange(num_classes) for _ in range(num_samples)]
    return X, y


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"num_classes": 1}, "classes"),
        ({"num_features": 0}, "features"),
        ({"num_clauses": 0}, "clauses"),
    ],
)
def test_invalid_config(overrides, message):
    with pytest.raises(ValueError, match=message):
        MultiClassTsetlinMachine(_config(**overrides))


def test_one_machine_per_class():
    machine = MultiClassTsetlinMachine(_config())
    assert len(machine.machines) == 3
    assert all(len(m.clauses) == 5 for m in machine.machines)


def test_prediction_in_range_before_and_after_training():
    machine = MultiClassTsetlinMachine(_config())
    assert 0 <= machine.predict_class(TRAIN_X[0]) < 3
    machine.fit(TRAIN_X, TRAIN_Y, 1)
    for sample in TRAIN_X:
        result = machine.predict(sample)
        assert 0 <= result.predicted_class < 3
        assert len(result.votes) == 3


def test_untrained_below_threshold_predicts_class_zero():
    machine = MultiClassTsetlinMachine(_config())
    result = machine.predict(TRAIN_X[0])
    assert result.votes == [0.0, 0.0, 0.0]
    assert result.predicted_class == 0
    assert result.margin == 0.0
    assert result.confidence == 0.0


def test_predict_picks_highest_scoring_class():
    machine = MultiClassTsetlinMachine(_config())
    machine.machines[1].threshold = 0
    result = machine.predict(TRAIN_X[0])
    assert result.votes == [0.0, 1.0, 0.0]
    assert result.predicted_class == 1
    assert result.margin == 1.0
    assert result.confidence == pytest.approx(1.0 / 5)


def test_predict_proba_is_softmax_distribution():
    machine = MultiClassTsetlinMachine(_config())
    uniform = machine.predict_proba(TRAIN_X[0])
    assert sum(uniform) == pytest.approx(1.0)
    assert uniform[0] == pytest.approx(uniform[1]) == pytest.approx(uniform[2])

    machine.machines[2].threshold = 0
    probs = machine.predict_proba(TRAIN_X[0])
    assert sum(probs) == pytest.approx(1.0)
    assert probs[2] > probs[0]
    assert probs[0] == pytest.approx(probs[1])


def test_predict_dimension_mismatch():
    machine = MultiClassTsetlinMachine(_config())
    with pytest.raises(ValueError, match="dimension mismatch"):
        machine.predict([1.0, 0.0])
    with pytest.raises(ValueError, match="dimension mismatch"):
        machine.predict_class([1.0])


def test_fit_validation():
    machine = MultiClassTsetlinMachine(_config())
    with pytest.raises(ValueError, match="same length"):
        machine.fit(TRAIN_X, [0, 1], 1)
    with pytest.raises(ValueError, match="empty"):
        machine.fit([], [], 1)
    with pytest.raises(ValueError, match="dimension mismatch"):
        machine.fit([[1.0, 0.0]], [0], 1)


def test_fit_zero_epochs_leaves_clauses_unchanged():
    machine = MultiClassTsetlinMachine(_config())
    before = machine.clause_info()
    machine.fit(TRAIN_X, TRAIN_Y, 0)
    assert machine.clause_info() == before


def test_fit_is_deterministic_for_a_seed():
    X, y = _multiclass_data(200, 10, 3)
    first = MultiClassTsetlinMachine(_config(num_clauses=20))
    second = MultiClassTsetlinMachine(_config(num_clauses=20))
    first.fit(X, y, 1)
    second.fit(X, y, 1)
    assert first.clause_info() == second.clause_info()


def test_fit_on_random_multiclass_data():
    config = default_config()
    config.num_features = 10
    config.num_classes = 3
    config.num_clauses = 20
    config.num_literals = 4
    config.threshold = 10.0
    X, y = _multiclass_data(300, 10, 3)
    machine = MultiClassTsetlinMachine(config)
    machine.fit(X, y, 1)
    predictions = [machine.predict_class(sample) for sample in X[:20]]
    assert all(0 <= p < 3 for p in predictions)


def test_clause_info_initial_literals():
    machine = MultiClassTsetlinMachine(_config())
    info = machine.clause_info()
    assert len(info) == 3
    for per_class in info:
        assert len(per_class) == 5
        for index, clause in enumerate(per_class):
            assert clause.is_positive
            assert [i for i, on in enumerate(clause.literals) if on] == [index % 10]


def test_active_clauses_match_input():
    machine = MultiClassTsetlinMachine(_config())
    sample = TRAIN_X[0]
    active = machine.active_clauses(sample)
    assert len(active) == 3
    for per_class in active:
        # Clauses 0, 2 and 4 include features 0, 2 and 4, all set in the sample.
        assert len(per_class) == 3
        for clause in per_class:
            included = [i for i, on in enumerate(clause.literals) if on]
            assert included
            assert all(sample[i] == 1.0 for i in included)