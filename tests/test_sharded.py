import threading

import pytest

from tsetlinmachine.bitpacked import BitPackedTsetlinMachine
from tsetlinmachine.sharded import ShardedInference, compute_confidence
from tsetlinmachine.types import Config


def _config():
    return Config(num_features=4, num_clauses=4, threshold=100, s=3.0, num_classes=3)


def _machines(always_on=()):
    config = _config()
    machines = [BitPackedTsetlinMachine(config) for _ in range(config.num_classes)]
    for index in always_on:
        machines[index].threshold = 0
    return machines, config


SAMPLES = [
    [1.0, 0.0, 1.0, 0.0],
    [0.0, 1.0, 0.0, 1.0],
    [1.0, 1.0, 1.0, 1.0],
    [0.0, 0.0, 0.0, 0.0],
]


def test_predict_chooses_scoring_class():
    machines, config = _machines(always_on=[2])
    inference = ShardedInference(machines, config)
    assert inference.predict(SAMPLES[0]) == 2


def test_predict_tie_goes_to_first_class():
    machines, config = _machines()
    assert ShardedInference(machines, config).predict(SAMPLES[0]) == 0
    machines, config = _machines(always_on=[1, 2])
    assert ShardedInference(machines, config).predict(SAMPLES[0]) == 1


def test_predict_without_machines_raises():
    with pytest.raises(ValueError):
        ShardedInference([], _config()).predict(SAMPLES[0])


def test_batch_matches_single_predictions():
    machines, config = _machines(always_on=[1])
    inference = ShardedInference(machines, config)
    expected = [inference.predict(sample) for sample in SAMPLES]
    assert inference.predict_batch(SAMPLES) == expected
    assert inference.predict_batch_parallel(SAMPLES) == expected
    assert inference.predict_batch([]) == []


def test_parallel_with_callback_reports_machine_of_prediction():
    machines, config = _machines(always_on=[2])
    inference = ShardedInference(machines, config)
    seen = {}
    lock = threading.Lock()

    def callback(index, machine):
        with lock:
            seen[index] = machine

    predictions = inference.predict_batch_parallel_with_callback(SAMPLES, callback)
    assert predictions == [2, 2, 2, 2]
    assert sorted(seen) == [0, 1, 2, 3]
    assert all(machine is machines[2] for machine in seen.values())


def test_parallel_with_callback_propagates_error():
    machines, config = _machines()
    inference = ShardedInference(machines, config)
    calls = []

    def callback(index, machine):
        calls.append(index)
        if index == 1:
            raise RuntimeError("callback failed")

    with pytest.raises(RuntimeError, match="callback failed"):
        inference.predict_batch_parallel_with_callback(SAMPLES, callback)
    assert sorted(calls) == [0, 1, 2, 3]


def test_compute_confidence_zero_clauses():
    assert compute_confidence([3.0, 1.0], [1.0, 1.0], [0, 5], 0) == 0.0


def test_compute_confidence_clamped_to_unit_interval():
    high = compute_confidence([10.0, 0.0], [10.0, 0.0], [10, 10], 0)
    low = compute_confidence([0.0, 10.0], [0.0, 0.0], [10, 10], 0)
    assert high == 1.0
    assert low == 0.0


def test_compute_confidence_grows_with_margin():
    small = compute_confidence([5.0, 4.0], [2.0, 0.0], [10, 10], 0)
    large = compute_confidence([5.0, 1.0], [2.0, 0.0], [10, 10], 0)
    assert 0.0 <= small < large <= 1.0
    assert large == pytest.approx(0.34)