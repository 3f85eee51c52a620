"""Loading the MNIST digit set and training a multiclass machine on it."""

from __future__ import annotations

import gzip
import os
import random
import shutil
import struct
import time
import urllib.request
from dataclasses import dataclass, field
from pathlib import Path

from .multiclass import MultiClassTsetlinMachine
from .types import default_config

MNIST_BASE_URL = "https://storage.googleapis.com/cvdf-datasets/mnist/"
TRAIN_IMAGES = "train-images-idx3-ubyte.gz"
TRAIN_LABELS = "train-labels-idx1-ubyte.gz"
DEFAULT_DATA_DIR = os.path.join("examples", "mnist", "data")

IMAGES_MAGIC = 2051
LABELS_MAGIC = 2049


@dataclass
class MNISTData:
    """Training and test split of the MNIST images and labels."""

    train_x: list[list[float]] = field(default_factory=list)
    train_y: list[int] = field(default_factory=list)
    test_x: list[list[float]] = field(default_factory=list)
    test_y: list[int] = field(default_factory=list)


def _download_and_extract(url: str, output_path: Path) -> None:
    with urllib.request.urlopen(url) as response:
        status = getattr(response, "status", 200)
        if status != 200:
            reason = getattr(response, "reason", "")
            raise OSError(f"bad status: {status} {reason}".rstrip())
        try:
            with gzip.GzipFile(fileobj=response) as source, open(output_path, "wb") as out:
                shutil.copyfileobj(source, out)
        except BaseException:
            output_path.unlink(missing_ok=True)
            raise


def download_mnist_data(base_dir: str | os.PathLike[str]) -> None:
    """Fetch and unpack the training images and labels unless already present."""
    directory = Path(base_dir)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OSError(f"failed to create data directory: {exc}") from exc

    for archive, what in ((TRAIN_IMAGES, "training images"), (TRAIN_LABELS, "training labels")):
        target = directory / archive.removesuffix(".gz")
        if target.exists():
            continue
        try:
            _download_and_extract(MNIST_BASE_URL + archive, target)
        except (OSError, EOFError, gzip.BadGzipFile) as exc:
            raise OSError(f"failed to download {what}: {exc}") from exc


def _read_header(data: bytes, count: int, path: str | os.PathLike[str]) -> tuple[int, ...]:
    size = 4 * count
    if len(data) < size:
        raise ValueError(f"truncated header in {os.fspath(path)}")
    return struct.unpack_from(f">{count}I", data)


def load_images(path: str | os.PathLike[str]) -> list[list[float]]:
    """Read an IDX image file; pixels are scaled to the range [0, 1]."""
    data = Path(path).read_bytes()
    (magic,) = _read_header(data, 1, path)
    if magic != IMAGES_MAGIC:
        raise ValueError(f"invalid magic number for images file: {magic}")
    _, count, rows, cols = _read_header(data, 4, path)
    size = rows * cols
    pixels = data[16 : 16 + count * size]
    if len(pixels) < count * size:
        raise ValueError(f"truncated image data in {os.fspath(path)}")
    return [
        [pixel / 255.0 for pixel in pixels[start : start + size]]
        for start in range(0, count * size, size)
    ]


def load_labels(path: str | os.PathLike[str]) -> list[int]:
    """Read an IDX label file."""
    data = Path(path).read_bytes()
    (magic,) = _read_header(data, 1, path)
    if magic != LABELS_MAGIC:
        raise ValueError(f"invalid magic number for labels file: {magic}")
    _, count = _read_header(data, 2, path)
    labels = data[8 : 8 + count]
    if len(labels) < count:
        raise ValueError(f"truncated label data in {os.fspath(path)}")
    return list(labels)


def load_mnist_data(
    max_samples: int,
    train_ratio: float,
    base_dir: str | os.PathLike[str] = DEFAULT_DATA_DIR,
) -> MNISTData:
    """Load MNIST from ``base_dir``, downloading it if needed, and split it at random.

    A positive ``max_samples`` keeps only that many leading samples; the first
    ``int(n * train_ratio)`` shuffled samples form the training set.
    """
    try:
        download_mnist_data(base_dir)
    except OSError as exc:
        raise OSError(f"failed to download MNIST data: {exc}") from exc

    directory = Path(base_dir)
    images = load_images(directory / TRAIN_IMAGES.removesuffix(".gz"))
    labels = load_labels(directory / TRAIN_LABELS.removesuffix(".gz"))

    if 0 < max_samples < len(images):
        images = images[:max_samples]
        labels = labels[:max_samples]
    if len(labels) < len(images):
        raise ValueError(f"{len(images)} images but only {len(labels)} labels")

    train_size = int(len(images) * train_ratio)
    order = list(range(len(images)))
    random.shuffle(order)

    train, test = order[:train_size], order[train_size:]
    return MNISTData(
        train_x=[images[i] for i in train],
        train_y=[labels[i] for i in train],
        test_x=[images[i] for i in test],
        test_y=[labels[i] for i in test],
    )


def run_mnist_example() -> float:
    """Train a ten-class machine on MNIST, print the results and return the accuracy."""
    data = load_mnist_data(54000, 0.9)
    if not data.train_x:
        raise ValueError("no training samples")

    config = default_config()
    config.num_features = len(data.train_x[0])
    config.num_classes = 10
    config.num_clauses = 100
    config.num_literals = len(data.train_x[0])
    config.threshold = 50.0
    config.s = 10.0
    config.n_states = 100
    config.random_seed = 42
    config.debug = True

    machine = MultiClassTsetlinMachine(config)

    print("Training the model...")
    start = time.perf_counter()
    machine.fit(data.train_x, data.train_y, 10)
    print(f"Training completed in {time.perf_counter() - start:.3f}s")

    print("\nTesting the model...")
    total = len(data.test_x)
    correct = 0
    for done, (values, expected) in enumerate(zip(data.test_x, data.test_y), start=1):
        if machine.predict(values).predicted_class == expected:
            correct += 1
        if done % 1000 == 0:
            print(f"Processed {done}/{total} test samples")

    accuracy = correct / total * 100 if total else 0.0
    print(f"\nTest Accuracy: {accuracy:.2f}% ({correct}/{total})")

    print("\nAnalyzing learned clauses...")
    for digit, clauses in enumerate(machine.clause_info()):
        print(f"\nClass {digit} (Digit {digit}) Clauses:")
        active = sum(1 for clause in clauses if any(clause.literals))
        print(f"Active Clauses: {active}/{len(clauses)}")

    return accuracy