"""Tests for precision/recall curves and their interpolation."""

import numpy as np
import pytest

from pyshaperetrieval.errors import StructuralError
from pyshaperetrieval.evaluation.curves import (
    PerformanceCurve,
    build_curve,
    interpolate_perf,
    recall_levels,
)
from pyshaperetrieval.evaluation.ranking import rank_row

CLASS_OF = np.array([0, 0, 0, 1, 1])
ROW = np.array([0.0, 5.0, 1.0, 2.0, 9.0])  # ranks: 0, 2, 3, 1, 4


class TestBuildCurve:
    """Tests for building a query's curve from its ranking."""

    def test_including_query(self):
        curve = build_curve(rank_row(ROW, 0), CLASS_OF, 3, include_self=True)
        np.testing.assert_array_equal(curve.hit_ranks, [1, 2, 4])
        np.testing.assert_allclose(curve.precision, [1.0, 1.0, 0.75])

    def test_excluding_query(self):
        """The query is not a hit but still holds rank 1."""
        curve = build_curve(rank_row(ROW, 0), CLASS_OF, 3, include_self=False)
        np.testing.assert_array_equal(curve.hit_ranks, [2, 4])
        np.testing.assert_allclose(curve.precision, [0.5, 0.5])

    def test_excluded_query_keeps_its_rank(self):
        curve = build_curve(
            rank_row(np.array([0.0, 1.0, 2.0]), 0), np.array([0, 0, 1]), 2, include_self=False
        )
        np.testing.assert_allclose(curve.precision, [0.5])

    def test_length_matches_class_size(self):
        for include_self, expected in ((True, 2), (False, 1)):
            curve = build_curve(rank_row(ROW, 3), CLASS_OF, 2, include_self)
            assert len(curve) == expected

    def test_recall_levels_of_points(self):
        curve = build_curve(rank_row(ROW, 0), CLASS_OF, 3)
        assert curve.points() == [
            (pytest.approx(1 / 3), 1.0),
            (pytest.approx(2 / 3), 1.0),
            (1.0, 0.75),
        ]

    def test_too_few_class_members(self):
        with pytest.raises(StructuralError, match="expected 4"):
            build_curve(rank_row(ROW, 0), CLASS_OF, 4)

    def test_singleton_without_query_is_empty(self):
        class_of = np.array([0, 1, 1])
        curve = build_curve(rank_row(np.array([0.0, 1.0, 2.0]), 0), class_of, 1, include_self=False)
        assert len(curve) == 0


class TestInterpolatePerf:
    """Tests for linear interpolation at a recall level."""

    CURVE = np.array([1.0, 0.5, 0.25, 0.2])

    def test_full_recall_is_last_point(self):
        assert interpolate_perf(self.CURVE, 1.0) == pytest.approx(0.2)

    def test_first_bin_is_first_point(self):
        assert interpolate_perf(self.CURVE, 1.0 / len(self.CURVE)) == pytest.approx(1.0)

    def test_midpoint(self):
        assert interpolate_perf(self.CURVE, 0.375) == pytest.approx(0.75)

    def test_below_first_bin_extrapolates(self):
        # xx = -0.6: 1.6 * 1.0 - 0.6 * 0.5
        assert interpolate_perf(self.CURVE, 0.1) == pytest.approx(1.3)

    def test_single_point(self):
        assert interpolate_perf(np.array([0.4]), 0.05) == pytest.approx(0.4)
        assert interpolate_perf(np.array([0.4]), 1.0) == pytest.approx(0.4)

    def test_empty_curve(self):
        assert interpolate_perf(PerformanceCurve.empty().precision, 0.5) == 0.0


def test_recall_levels():
    np.testing.assert_allclose(recall_levels(4), [0.25, 0.5, 0.75, 1.0])
