"""
Scalar retrieval scores for one query model.

Scores computed from a ranking where the query itself has been pushed to
the end (see rank_row(..., exclude_self=True)):

- Nearest neighbor: 1 if the best match shares the query's class
- First tier: recall within the first C results, C = class size - 1
- Second tier: correct results within the first 2C results, divided by C
- DCG: discounted cumulative gain normalized by its ideal value
- E-measure: harmonic mean of precision and recall within the first K results
"""

from dataclasses import dataclass, asdict

import numpy as np

from ..categories import ModelIndex
from .ranking import Ranking

E_MEASURE_DEPTH = 32


@dataclass
class Table:
    """
    Retrieval scores of a model, or their mean over a class or corpus.

    Attributes:
        valid_size: Class size the entry was computed for; 0 marks an entry
            excluded from every average
        nearest_neighbor: Nearest-neighbor accuracy
        first_tier: First-tier recall
        second_tier: Second-tier recall
        dcg: Normalized discounted cumulative gain
        e_measure: E-measure at the fixed depth
    """
    valid_size: int = 0
    nearest_neighbor: float = 0.0
    first_tier: float = 0.0
    second_tier: float = 0.0
    dcg: float = 0.0
    e_measure: float = 0.0

    @classmethod
    def invalid(cls) -> 'Table':
        return cls(valid_size=0)

    def is_valid(self, min_class_size: int) -> bool:
        """True if the entry takes part in averages at this cutoff."""
        return self.valid_size > min_class_size

    def scores(self) -> np.ndarray:
        """(5,) array ordered NN, first tier, second tier, E, DCG."""
        return np.array([
            self.nearest_neighbor, self.first_tier, self.second_tier,
            self.e_measure, self.dcg
        ], dtype=np.float64)

    def to_dict(self) -> dict:
        return asdict(self)


def _dcg_discounts(length: int) -> np.ndarray:
    """Gain of a correct result at 0-based index i: 1 for i == 0, else 1/log2(i+1)."""
    discounts = np.ones(max(length, 0), dtype=np.float64)
    if length > 1:
        discounts[1:] = 1.0 / np.log2(np.arange(2, length + 1, dtype=np.float64))
    return discounts


def score_tiers(relevant: np.ndarray, first_tier_cutoff: int, num_models: int):
    """
    Nearest-neighbor, first-tier and second-tier scores.

    Args:
        relevant: (N,) True where the ranked model is in the query's class
        first_tier_cutoff: Class size excluding the query
        num_models: N

    Returns:
        Tuple (nearest_neighbor, first_tier, second_tier)
    """
    nearest_neighbor = 1.0 if len(relevant) and relevant[0] else 0.0
    if first_tier_cutoff == 0:
        return nearest_neighbor, 0.0, 0.0

    second_tier_cutoff = min(2 * first_tier_cutoff, num_models - 1)
    first = np.count_nonzero(relevant[:first_tier_cutoff])
    second = np.count_nonzero(relevant[:second_tier_cutoff])

    # second tier is normalized by the class size, not by its own window
    return (
        nearest_neighbor,
        first / first_tier_cutoff,
        second / first_tier_cutoff,
    )


def score_dcg(relevant: np.ndarray, class_size: int, num_models: int) -> float:
    """
    Discounted cumulative gain over the first N - 1 results.

    Normalized by the gain of a ranking whose first class_size results are
    all correct.

    Args:
        relevant: (N,) True where the ranked model is in the query's class
        class_size: Class size excluding the query
        num_models: N
    """
    depth = max(num_models - 1, 0)
    discounts = _dcg_discounts(max(depth, class_size))
    total = float(np.dot(relevant[:depth], discounts[:depth]))
    ideal = 1.0 + float(discounts[1:class_size].sum())
    return total / ideal


def score_e_measure(
    relevant: np.ndarray,
    class_size: int,
    num_models: int,
    depth: int = E_MEASURE_DEPTH
) -> float:
    """
    E-measure within the first min(N - 1, depth) results.

    Args:
        relevant: (N,) True where the ranked model is in the query's class
        class_size: Class size excluding the query
        num_models: N
        depth: Cutoff K
    """
    k = min(num_models - 1, depth)
    if k <= 0 or class_size <= 0:
        return 0.0

    count = np.count_nonzero(relevant[:k])
    recall = count / class_size
    precision = count / k
    if recall == 0 or precision == 0:
        return 0.0
    return 2.0 / (1.0 / recall + 1.0 / precision)


def score_model(
    ranking: Ranking,
    index: ModelIndex,
    e_measure_depth: int = E_MEASURE_DEPTH
) -> Table:
    """
    Compute the full Table for one query model.

    Args:
        ranking: Ranking built with exclude_self=True
        index: Model index of the corpus
        e_measure_depth: Cutoff K for the E-measure

    Returns:
        Table; invalid for models of the miscellaneous category
    """
    category = index.category_of(ranking.query)
    if index.is_excluded(category):
        return Table.invalid()

    num_models = index.num_models
    class_size = index.class_size(category)
    cutoff = class_size - 1
    relevant = ranking.relevant(index.class_of)

    nn, first, second = score_tiers(relevant, cutoff, num_models)
    return Table(
        valid_size=class_size,
        nearest_neighbor=nn,
        first_tier=float(first),
        second_tier=float(second),
        dcg=score_dcg(relevant, cutoff, num_models),
        e_measure=float(score_e_measure(relevant, cutoff, num_models, e_measure_depth)),
    )
