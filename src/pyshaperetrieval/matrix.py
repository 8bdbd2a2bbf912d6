"""
Dense pairwise dissimilarity matrix.

The on-disk format is a flat sequence of N x N little-endian 32-bit floats,
row-major: entry (i, j) is the dissimilarity of query i to candidate j.
"""

import logging
from pathlib import Path
from typing import Union

import numpy as np

from .errors import InputTruncated, StructuralError

logger = logging.getLogger(__name__)

MATRIX_DTYPE = np.dtype('<f4')


class DissimilarityMatrix:
    """
    Immutable N x N dissimilarity matrix.

    The underlying array is flagged read-only and shared by reference with
    every per-query computation; rows are returned as views, never copies.
    """

    def __init__(self, values: np.ndarray, source: str = "<memory>"):
        if values.ndim != 2 or values.shape[0] != values.shape[1]:
            raise StructuralError(
                f"Dissimilarity matrix from {source} must be square, got shape {values.shape}"
            )
        if values.flags.writeable:
            values = values.view()
            values.setflags(write=False)
        self._values = values
        self.source = source

    @classmethod
    def from_array(cls, values, source: str = "<memory>") -> 'DissimilarityMatrix':
        """Wrap an in-memory array (copied once to float32)."""
        return cls(np.array(values, dtype=np.float32), source=source)

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def size(self) -> int:
        return self._values.shape[0]

    def row(self, position: int) -> np.ndarray:
        """Dissimilarities of one query model to every model."""
        return self._values[position]

    def check_size(self, num_models: int):
        """
        Raises:
            StructuralError: If the matrix is not num_models x num_models
        """
        if self.size != num_models:
            raise StructuralError(
                f"Matrix {self.source} is {self.size}x{self.size} but the "
                f"category structure has {num_models} models"
            )

    def __len__(self) -> int:
        return self.size


def read_matrix(path: Union[str, Path], num_models: int) -> DissimilarityMatrix:
    """
    Read a binary dissimilarity matrix.

    Args:
        path: Path to the matrix file
        num_models: Number of models N; exactly N*N floats are read

    Returns:
        DissimilarityMatrix

    Raises:
        FileNotFoundError: If the file does not exist
        InputTruncated: If the file holds fewer than N*N floats
    """
    path = Path(path)
    expected = num_models * num_models * MATRIX_DTYPE.itemsize

    with open(path, 'rb') as f:
        data = f.read(expected)
        trailing = f.read(1)

    if len(data) < expected:
        raise InputTruncated(str(path), len(data), expected)
    if trailing:
        logger.warning("%s is larger than %d bytes; extra data ignored", path, expected)

    values = np.frombuffer(data, dtype=MATRIX_DTYPE).reshape(num_models, num_models)
    logger.info("Read %dx%d dissimilarity matrix from %s", num_models, num_models, path)
    return DissimilarityMatrix(values, source=str(path))


def write_matrix(path: Union[str, Path], values: np.ndarray):
    """Write a square array in the binary matrix format."""
    values = np.asarray(values, dtype=MATRIX_DTYPE)
    if values.ndim != 2 or values.shape[0] != values.shape[1]:
        raise StructuralError(f"Matrix must be square, got shape {values.shape}")
    with open(path, 'wb') as f:
        f.write(values.tobytes(order='C'))
