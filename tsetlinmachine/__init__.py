"""Tsetlin Machine classifiers built on bit-packed propositional clauses, with MNIST loaders and example programs."""

__version__ = "0.1.0"