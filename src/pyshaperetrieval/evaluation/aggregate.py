"""
Aggregation of per-model results into class and corpus statistics.

Averaging over all models is micro averaging; averaging over classes, each
class first averaged over its members, is macro averaging. Entries whose
size does not exceed the minimum class size are left out.
"""

import logging
import warnings
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from ..categories import ModelIndex
from ..errors import DegenerateClass, StructuralError
from .curves import PerformanceCurve, interpolate_perf, recall_levels
from .tiers import Table

logger = logging.getLogger(__name__)

MIN_CLASS_SIZE = 2
TABLE_SAMPLES = 100
PLOT_SAMPLES = 20

_TABLE_FIELDS = ('nearest_neighbor', 'first_tier', 'second_tier', 'dcg', 'e_measure')


@dataclass
class ResampledCurve:
    """
    Curve averaged at fixed recall levels.

    Attributes:
        recall: (S,) recall levels (j + 1) / S
        precision: (S,) mean precision; 0 where nothing contributed
        contributors: (S,) number of curves averaged at each level
    """
    recall: np.ndarray
    precision: np.ndarray
    contributors: np.ndarray

    def pairs(self) -> List[Tuple[float, float]]:
        """(recall, precision) pairs, ready for plotting."""
        return list(zip(self.recall.tolist(), self.precision.tolist()))


def _degenerate_classes(index: ModelIndex, min_class_size: int) -> List[str]:
    return [
        cat.full_name
        for ci, cat in enumerate(index.categories)
        if not index.is_excluded(ci) and cat.size <= min_class_size
    ]


def _warn_degenerate(index: ModelIndex, min_class_size: int):
    names = _degenerate_classes(index, min_class_size)
    if names:
        warnings.warn(
            f"{len(names)} classes have at most {min_class_size} models and are "
            f"excluded from averages: {', '.join(names)}",
            DegenerateClass,
            stacklevel=3,
        )


def mean_table(tables: Sequence[Table], valid_size: int = 0) -> Table:
    """Field-by-field arithmetic mean of tables (NaN fields if empty)."""
    result = Table(valid_size=valid_size)
    for name in _TABLE_FIELDS:
        values = [getattr(t, name) for t in tables]
        setattr(result, name, float(sum(values) / len(values)) if values else float('nan'))
    return result


def class_tables(
    model_tables: Sequence[Table],
    index: ModelIndex,
    min_class_size: int = MIN_CLASS_SIZE
) -> List[Table]:
    """
    Per-class Tables, each the mean of its members' model Tables.

    Args:
        model_tables: One Table per model position
        index: Model index of the corpus
        min_class_size: Classes of at most this many models are not averaged

    Returns:
        One Table per category; invalid for the miscellaneous category,
        zero scores with valid_size set for classes at or under the cutoff
    """
    if len(model_tables) != index.num_models:
        raise StructuralError(
            f"Got {len(model_tables)} model tables for {index.num_models} models"
        )
    _warn_degenerate(index, min_class_size)

    tables = []
    for ci in range(index.num_categories):
        size = index.class_size(ci)
        if index.is_excluded(ci):
            tables.append(Table.invalid())
        elif size <= min_class_size:
            tables.append(Table(valid_size=size))
        else:
            members = [model_tables[p] for p in index.members(ci)]
            tables.append(mean_table(members, valid_size=size))
    return tables


def average_tables(tables: Sequence[Table], min_class_size: int = MIN_CLASS_SIZE) -> Table:
    """
    Mean over the valid entries of a model (micro) or class (macro) table list.

    Returns:
        Table whose valid_size is the number of entries averaged; its scores
        are NaN if no entry was valid
    """
    valid = [t for t in tables if t.is_valid(min_class_size)]
    if not valid:
        logger.warning("No table entry exceeds the minimum class size %d", min_class_size)
    return mean_table(valid, valid_size=len(valid))


def class_curves(
    model_curves: Sequence[PerformanceCurve],
    index: ModelIndex,
    min_class_size: int = MIN_CLASS_SIZE
) -> List[PerformanceCurve]:
    """
    Per-class curves, each the element-wise mean of its members' curves.

    Returns:
        One curve per category; empty for the miscellaneous category and for
        classes of at most min_class_size models
    """
    if len(model_curves) != index.num_models:
        raise StructuralError(
            f"Got {len(model_curves)} model curves for {index.num_models} models"
        )
    _warn_degenerate(index, min_class_size)

    curves = []
    for ci in range(index.num_categories):
        if index.is_excluded(ci) or index.class_size(ci) <= min_class_size:
            curves.append(PerformanceCurve.empty())
            continue

        members = [model_curves[p].precision for p in index.members(ci)]
        lengths = {len(m) for m in members}
        if len(lengths) != 1:
            raise StructuralError(
                f"Curves of class '{index.categories[ci].full_name}' differ in length: {sorted(lengths)}"
            )
        curves.append(PerformanceCurve(
            precision=np.mean(np.stack(members), axis=0),
            hit_ranks=np.zeros(0, dtype=np.int64),
        ))
    return curves


def average_curves(
    curves: Sequence[PerformanceCurve],
    samples: int = TABLE_SAMPLES,
    min_class_size: int = MIN_CLASS_SIZE
) -> ResampledCurve:
    """
    Average curves of differing lengths at fixed recall levels.

    At level j a curve contributes only if its length is at least
    min_class_size and at least samples / (j + 1); short curves are too
    coarse to interpolate at low recall levels.

    Args:
        curves: Model curves (micro) or class curves (macro)
        samples: Number of recall levels S
        min_class_size: Minimum curve length

    Returns:
        ResampledCurve
    """
    levels = recall_levels(samples)
    mean = np.zeros(samples, dtype=np.float64)
    contributors = np.zeros(samples, dtype=np.int64)

    for j, level in enumerate(levels):
        threshold = samples / float(j + 1)
        total = 0.0
        for curve in curves:
            n = len(curve)
            if n < min_class_size or n < threshold:
                continue
            total += interpolate_perf(curve.precision, level)
            contributors[j] += 1
        if contributors[j] > 0:
            mean[j] = total / contributors[j]

    return ResampledCurve(recall=levels, precision=mean, contributors=contributors)
