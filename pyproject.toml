[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tsetlinmachine"
version = "0.1.0"
description = "Bit-packed Tsetlin Machine classifiers for binary and multiclass learning with propositional clauses"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "tsetlin",
    "tsetlin-machine",
    "machine-learning",
    "classification",
    "interpretable",
    "propositional-logic",
    "mnist",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tsetlinmachine-examples = "tsetlinmachine.examples:main"

[tool.hatch.build.targets.wheel]
packages = ["tsetlinmachine"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
