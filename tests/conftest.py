"""Shared fixtures: a small corpus with two real classes and a miscellaneous model."""

import json
import os

os.environ.setdefault("MPLBACKEND", "Agg")

import numpy as np
import pytest

from pyshaperetrieval.categories import Category, ModelIndex
from pyshaperetrieval.matrix import DissimilarityMatrix, write_matrix


def make_block_matrix(class_of, within=1.0, across=10.0):
    """Same-class pairs at `within`, cross-class pairs at `across`, zero diagonal."""
    class_of = np.asarray(class_of)
    same = class_of[:, None] == class_of[None, :]
    values = np.where(same, within, across).astype(np.float32)
    np.fill_diagonal(values, 0.0)
    return values


@pytest.fixture
def categories():
    return [
        Category("chair", "furniture__chair", ("1", "2", "3")),
        Category("cup", "cup", ("4", "5")),
        Category("-1", "-1", ("6",)),
    ]


@pytest.fixture
def index(categories):
    return ModelIndex(categories)


@pytest.fixture
def block_values(index):
    # the miscellaneous model is its own class, far from everything
    return make_block_matrix(index.class_of)


@pytest.fixture
def matrix(block_values):
    return DissimilarityMatrix.from_array(block_values)


@pytest.fixture
def corpus_files(tmp_path, block_values):
    """Category JSON and binary matrix on disk."""
    class_path = tmp_path / "categories.json"
    class_path.write_text(json.dumps({
        "categories": [
            {"name": "chair", "full_name": "furniture__chair", "models": ["1", "2", "3"]},
            {"name": "cup", "full_name": "cup", "models": ["4", "5"]},
            {"name": "-1", "full_name": "-1", "models": ["6"]},
        ]
    }))
    matrix_path = tmp_path / "test.matrix"
    write_matrix(matrix_path, block_values)
    return class_path, matrix_path
