"""Tests for reading and wrapping dissimilarity matrices."""

import numpy as np
import pytest

from pyshaperetrieval.errors import InputTruncated, StructuralError
from pyshaperetrieval.matrix import DissimilarityMatrix, read_matrix, write_matrix


class TestReadMatrix:
    """Tests for the binary matrix reader."""

    def test_read_written_matrix(self, tmp_path):
        values = np.arange(9, dtype=np.float32).reshape(3, 3)
        path = tmp_path / "m.matrix"
        write_matrix(path, values)

        matrix = read_matrix(path, 3)
        assert matrix.size == 3
        np.testing.assert_array_equal(matrix.row(1), [3, 4, 5])
        assert matrix.source == str(path)

    def test_file_layout_is_float32_row_major(self, tmp_path):
        path = tmp_path / "m.matrix"
        write_matrix(path, [[0, 1], [2, 3]])
        assert path.stat().st_size == 4 * 4
        np.testing.assert_array_equal(
            np.fromfile(path, dtype='<f4'), [0, 1, 2, 3]
        )

    def test_truncated_file(self, tmp_path):
        path = tmp_path / "short.matrix"
        path.write_bytes(np.zeros(7, dtype='<f4').tobytes())

        with pytest.raises(InputTruncated) as excinfo:
            read_matrix(path, 3)
        assert excinfo.value.offset == 28
        assert excinfo.value.expected == 36
        assert "short.matrix" in str(excinfo.value)

    def test_trailing_bytes_are_ignored(self, tmp_path):
        path = tmp_path / "long.matrix"
        path.write_bytes(np.ones(5, dtype='<f4').tobytes())
        matrix = read_matrix(path, 2)
        np.testing.assert_array_equal(matrix.values, np.ones((2, 2)))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_matrix(tmp_path / "absent.matrix", 2)


class TestDissimilarityMatrix:
    """Tests for the immutable matrix handle."""

    def test_values_are_read_only(self, matrix):
        with pytest.raises(ValueError):
            matrix.values[0, 0] = 5.0
        with pytest.raises(ValueError):
            matrix.row(0)[1] = 5.0

    def test_row_is_a_view(self, matrix):
        assert np.shares_memory(matrix.row(2), matrix.values)

    def test_non_square(self):
        with pytest.raises(StructuralError):
            DissimilarityMatrix.from_array(np.zeros((2, 3)))

    def test_check_size(self, matrix):
        matrix.check_size(6)
        with pytest.raises(StructuralError, match="6x6"):
            matrix.check_size(5)
