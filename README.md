# tsetlinmachine

Tsetlin Machine classifiers in pure Python. A Tsetlin Machine learns
patterns as conjunctive clauses over binary input features, so the
learned model can be read back as a set of rules.

It has no runtime dependencies beyond the standard library.

## What is in the package

- `tsetlinmachine.types`: `Config` (hyperparameters), `default_config()`,
  `PredictionResult` (votes, predicted class, margin, confidence) and
  `ClauseInfo` (included literals, polarity, match score, momentum).
- `tsetlinmachine.bitpacked`: `BitVec`, a bit vector stored as 64-bit
  words; `from_floats` and `to_floats` to pack and unpack feature lists;
  `BitPackedClause` with include and exclude masks; and
  `BitPackedTsetlinMachine`, a single clause bank that outputs 1 when the
  number of matching clauses reaches its threshold, trained with
  `update` or with per-class Type I / Type II feedback
  (`update_bits_with_class`).
- `tsetlinmachine.multiclass`: `MultiClassTsetlinMachine`, one-vs-all
  classification with one `BitPackedTsetlinMachine` per class.
- `tsetlinmachine.machine`: `TsetlinMachine`, a binary machine whose
  clauses vote by polarity and which keeps automaton states plus a
  decaying match score and momentum for every clause. `new_tsetlin_machine(config)`
  returns a `MultiClassTsetlinMachine`.
- `tsetlinmachine.sharded`: `ShardedInference` for sequential or
  thread-pool batch prediction over a list of per-class machines, and
  `compute_confidence`, which blends a vote margin and an average match
  score into a value between 0 and 1.
- `tsetlinmachine.mnist`: readers for MNIST IDX image and label files,
  a downloader, a train/test splitter and an end-to-end MNIST run.
- `tsetlinmachine.examples`: the demonstration programs behind the
  `tsetlinmachine-examples` command.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Usage

Inputs are sequences of numbers; any non-zero value counts as a set bit.

```python
from tsetlinmachine.types import default_config
from tsetlinmachine.multiclass import MultiClassTsetlinMachine

config = default_config()
config.num_features = 2
config.num_clauses = 20
config.num_literals = 2
config.threshold = 10.0
config.s = 2.5
config.num_classes = 2

machine = MultiClassTsetlinMachine(config)

X = [[0, 0], [0, 1], [1, 0], [1, 1]]
y = [0, 1, 1, 0]
machine.fit(X, y, 100)

result = machine.predict([0, 1])
print(result.predicted_class, result.confidence)
print(result)

print(machine.predict_class([1, 0]))
print(machine.predict_proba([1, 1]))
```

`MultiClassTsetlinMachine` raises `ValueError` for fewer than two
classes, no features or no clauses, for `X` and `y` of different
lengths, for empty training data, and for inputs of the wrong length.
`TsetlinMachine.fit` raises `RuntimeError` if it is called while the
same machine is already training.

### The binary machine with clause activity

```python
from tsetlinmachine.machine import TsetlinMachine

machine = TsetlinMachine(config)
machine.fit(X, y, 10)
for info in machine.clause_info()[0]:
    print(info.literals, info.match_score, info.momentum)
machine.print_state_info()
```

With `config.debug` set, `fit` prints a state summary before training
and the accuracy after each epoch.

### Inspecting clauses

`clause_info()` returns, for every class, a list of `ClauseInfo` records
holding each clause's included literals and polarity.
`active_clauses(values)` returns only the clauses that match a given
input.

```python
for cls, clauses in enumerate(machine.clause_info()):
    active = sum(any(info.literals) for info in clauses)
    print(f"class {cls}: {active}/{len(clauses)} clauses with literals")
```

### Batch prediction

```python
from tsetlinmachine.sharded import ShardedInference

inference = ShardedInference(machine.machines, config)
print(inference.predict_batch(X))
print(inference.predict_batch_parallel(X))
print(inference.predict_batch_parallel_with_callback(X, lambda i, m: print(i)))
```

The parallel methods keep the order of the input rows. If a callback
raises, every row is still processed and then the exception from the
lowest row index is raised.

### MNIST files

```python
from tsetlinmachine.mnist import load_images, load_labels, load_mnist_data

data = load_mnist_data(1000, 0.9, "data")
print(len(data.train_x), len(data.test_x))
```

`load_mnist_data` downloads the training images and labels into the
given directory if they are missing, keeps the first `max_samples`
samples when that is positive, shuffles them and splits them by
`train_ratio`. `load_images` scales pixels to [0, 1]; both readers raise
`ValueError` on a wrong magic number or truncated data.

## Example programs

The `tsetlinmachine-examples` command runs one of the bundled examples:

```
tsetlinmachine-examples binary
tsetlinmachine-examples multiclass
tsetlinmachine-examples mnist
```

`binary` trains a two-class machine on XOR and prints its predictions
and learned clauses. `multiclass` learns three four-bit patterns and
prints the predictions and the number of clauses with literals per
class. `mnist` downloads the MNIST training files into
`examples/mnist/data` under the current directory if they are not
already there, trains a ten-class machine and reports the test accuracy.
With no argument or an unknown name the command prints usage and exits
with status 1.

## What it does not do

Trained machines live only in memory: the package has no way to save a
model to disk or load one back. `MultiClassTsetlinMachine` does not
track match scores or momentum, so those fields of its `ClauseInfo`
records are always 0.