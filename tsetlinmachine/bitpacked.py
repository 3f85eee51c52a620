"""Bit-packed clauses and a simple binary Tsetlin Machine built on them."""

from __future__ import annotations

import random
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field

from .types import Config

_WORD_BITS = 64
_WORD_MASK = (1 << _WORD_BITS) - 1


class BitVec:
    """A fixed-size bit vector stored as 64-bit words."""

    __slots__ = ("_words",)

    def __init__(self, num_bits: int) -> None:
        if num_bits < 0:
            raise ValueError(f"number of bits must not be negative: {num_bits}")
        self._words = [0] * ((num_bits + _WORD_BITS - 1) // _WORD_BITS)

    def _locate(self, index: int) -> tuple[int, int]:
        if index < 0 or index >= len(self._words) * _WORD_BITS:
            raise IndexError(f"bit index out of range: {index}")
        return divmod(index, _WORD_BITS)

    def set(self, index: int) -> None:
        """Set the bit at ``index``."""
        word, bit = self._locate(index)
        self._words[word] |= 1 << bit

    def clear(self, index: int) -> None:
        """Clear the bit at ``index``."""
        word, bit = self._locate(index)
        self._words[word] &= ~(1 << bit) & _WORD_MASK

    def test(self, index: int) -> bool:
        """Return whether the bit at ``index`` is set."""
        word, bit = self._locate(index)
        return bool(self._words[word] >> bit & 1)

    def __len__(self) -> int:
        return len(self._words)

    def __getitem__(self, word: int) -> int:
        return self._words[word]

    def __setitem__(self, word: int, value: int) -> None:
        self._words[word] = value & _WORD_MASK

    def __iter__(self) -> Iterator[int]:
        return iter(self._words)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BitVec):
            return self._words == other._words
        return NotImplemented

    def __repr__(self) -> str:
        return f"BitVec({self._words!r})"


def from_floats(values: Sequence[float]) -> BitVec:
    """Pack a sequence of numbers into bits: non-zero values become set bits."""
    bits = BitVec(len(values))
    for index, value in enumerate(values):
        if value != 0:
            bits.set(index)
    return bits


def to_floats(bits: BitVec, length: int) -> list[float]:
    """Unpack the first ``length`` bits into 1.0 and 0.0 values."""
    return [1.0 if bits.test(index) else 0.0 for index in range(length)]


class BitPackedClause:
    """A conjunctive clause kept as bit-packed include and exclude masks."""

    def __init__(self, num_features: int) -> None:
        self.include_mask = BitVec(num_features)
        self.exclude_mask = BitVec(num_features)
        self.is_positive = True
        self.num_features = num_features

    def set_include(self, index: int, included: bool) -> None:
        if included:
            self.include_mask.set(index)
        else:
            self.include_mask.clear(index)

    def set_exclude(self, index: int, excluded: bool) -> None:
        if excluded:
            self.exclude_mask.set(index)
        else:
            self.exclude_mask.clear(index)

    def has_include(self, index: int) -> bool:
        return self.include_mask.test(index)

    def has_exclude(self, index: int) -> bool:
        return self.exclude_mask.test(index)

    def match(self, bits: BitVec) -> bool:
        """True when every included bit is set and no excluded bit is set."""
        if len(bits) > len(self.include_mask):
            raise ValueError(
                f"input has {len(bits)} words, clause has {len(self.include_mask)}"
            )
        return all(
            word & include == include and word & exclude == 0
            for word, include, exclude in zip(bits, self.include_mask, self.exclude_mask)
        )


@dataclass
class BitPackedClauseInfo:
    """Unpacked include and exclude masks of one clause."""

    include_mask: list[bool] = field(default_factory=list)
    exclude_mask: list[bool] = field(default_factory=list)
    is_positive: bool = True


class BitPackedTsetlinMachine:
    """A binary Tsetlin Machine whose clauses are bit-packed masks."""

    def __init__(self, config: Config) -> None:
        if config.num_features <= 0:
            raise ValueError("number of features must be positive")
        self.num_features = config.num_features
        self.num_clauses = config.num_clauses
        self.threshold = config.threshold
        self.s = config.s
        self._rng = random.Random(config.random_seed)
        self.clauses: list[BitPackedClause] = []
        for index in range(config.num_clauses):
            clause = BitPackedClause(config.num_features)
            # Every clause starts with at least one included literal.
            clause.set_include(index % config.num_features, True)
            self.clauses.append(clause)

    def _chance(self) -> bool:
        return self._rng.random() < 1.0 / self.s

    def _features(self) -> range:
        return range(self.num_features)

    def predict_bits(self, bits: BitVec) -> int:
        """Return 1 when the number of matching clauses reaches the threshold."""
        votes = sum(1 for clause in self.clauses if clause.match(bits))
        return 1 if votes >= self.threshold else 0

    def predict(self, values: Sequence[float]) -> int:
        return self.predict_bits(from_floats(values))

    def update_bits(self, bits: BitVec, target: int) -> None:
        """Adjust clause literals when the prediction disagrees with ``target``."""
        prediction = self.predict_bits(bits)
        if prediction == target:
            return
        for clause in self.clauses:
            if clause.match(bits):
                for i in self._features():
                    if clause.has_include(i) and bits.test(i) and self._chance():
                        clause.set_include(i, False)
            else:
                for i in self._features():
                    if not clause.has_include(i) and bits.test(i) and self._chance():
                        clause.set_include(i, True)

    def update(self, values: Sequence[float], target: int) -> None:
        self.update_bits(from_floats(values), target)

    def clause_literals(self, index: int) -> list[bool]:
        """Return the include mask of one clause."""
        if index < 0 or index >= len(self.clauses):
            raise IndexError(f"invalid clause index: {index}")
        clause = self.clauses[index]
        return [clause.has_include(i) for i in self._features()]

    def clause_info(self) -> list[BitPackedClauseInfo]:
        return [
            BitPackedClauseInfo(
                include_mask=[clause.has_include(i) for i in self._features()],
                exclude_mask=[clause.has_exclude(i) for i in self._features()],
                is_positive=clause.is_positive,
            )
            for clause in self.clauses
        ]

    def active_clauses(self, values: Iterable[float]) -> list[int]:
        """Indices of the clauses that match ``values``."""
        bits = from_floats(list(values))
        return [index for index, clause in enumerate(self.clauses) if clause.match(bits)]

    def update_bits_with_class(self, bits: BitVec, target: int, cls: int) -> None:
        """Apply Type I feedback when ``target == cls`` and Type II otherwise."""
        if target == cls:
            for clause in self.clauses:
                matches = clause.match(bits)
                for i in self._features():
                    if matches and bits.test(i):
                        if self._chance():
                            clause.set_include(i, True)
                    elif self._chance():
                        clause.set_include(i, False)
        else:
            for clause in self.clauses:
                if clause.match(bits):
                    for i in self._features():
                        if bits.test(i) and self._chance():
                            clause.set_include(i, False)