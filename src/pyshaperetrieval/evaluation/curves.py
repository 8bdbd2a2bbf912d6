"""
Precision-at-recall curves.

A model's curve holds one precision value per correct-class hit in its
ranking: the k-th entry is k / rank_of_kth_hit, i.e. the precision at
recall k / curve_length.
"""

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from ..errors import StructuralError
from .ranking import Ranking


@dataclass(frozen=True)
class PerformanceCurve:
    """
    Precision values indexed by hit number 1..len(precision).

    Attributes:
        precision: (L,) precision at each successive correct-class hit
        hit_ranks: (L,) 1-based rank at which each hit occurred; empty for
            curves produced by averaging
    """
    precision: np.ndarray
    hit_ranks: np.ndarray

    @classmethod
    def empty(cls) -> 'PerformanceCurve':
        return cls(np.zeros(0, dtype=np.float64), np.zeros(0, dtype=np.int64))

    def __len__(self) -> int:
        return len(self.precision)

    @property
    def recall(self) -> np.ndarray:
        """(L,) recall level of each point, k / L."""
        n = len(self.precision)
        return np.arange(1, n + 1, dtype=np.float64) / n if n else np.zeros(0)

    def points(self) -> List[Tuple[float, float]]:
        """(recall, precision) pairs."""
        return list(zip(self.recall.tolist(), self.precision.tolist()))


def build_curve(
    ranking: Ranking,
    class_of: np.ndarray,
    class_size: int,
    include_self: bool = True
) -> PerformanceCurve:
    """
    Compute the precision-at-recall curve of one query.

    Args:
        ranking: Ranking of the query; the query itself should still be
            ranked at its true dissimilarity (usually first)
        class_of: (N,) position -> category index
        class_size: Number of models in the query's class, query included
        include_self: If True the query counts as a correct result and the
            curve has class_size points; if False the query is not counted
            as a hit but still occupies its rank, and the curve has
            class_size - 1

    Returns:
        PerformanceCurve with exactly class_size (or class_size - 1) points

    Raises:
        StructuralError: If the ranking holds fewer correct-class models
            than the curve length requires
    """
    query = ranking.query
    c_size = class_size if include_self else class_size - 1
    positions = ranking.positions

    hits = class_of[positions] == class_of[query]
    if not include_self:
        hits &= positions != query
    hit_ranks = np.flatnonzero(hits)[:max(c_size, 0)] + 1

    if len(hit_ranks) != max(c_size, 0):
        raise StructuralError(
            f"Model at position {query}: found {len(hit_ranks)} correct-class "
            f"results, expected {c_size}"
        )

    precision = np.arange(1, len(hit_ranks) + 1, dtype=np.float64) / hit_ranks
    return PerformanceCurve(precision=precision, hit_ranks=hit_ranks)


def interpolate_perf(precision: np.ndarray, recall: float) -> float:
    """
    Linearly interpolate a curve's precision at a recall level.

    The curve's k-th point (0-based) sits at recall (k + 1) / bins. Below
    the first point the first two points are extrapolated.

    Args:
        precision: (bins,) precision values
        recall: Target recall in (0, 1]

    Returns:
        Interpolated precision; 0.0 for an empty curve
    """
    bins = len(precision)
    if bins == 0:
        return 0.0

    xx = recall * bins - 1
    x1 = int(xx)
    x2 = x1 + 1
    dx = xx - x1
    x1 = min(max(x1, 0), bins - 1)
    x2 = min(max(x2, 0), bins - 1)

    return float((1 - dx) * precision[x1] + dx * precision[x2])


def recall_levels(samples: int) -> np.ndarray:
    """Fixed recall levels (j + 1) / samples, j = 0..samples-1."""
    return np.arange(1, samples + 1, dtype=np.float64) / samples
