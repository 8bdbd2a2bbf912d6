"""
Ranking of candidate models for one query.

A ranking lists every model position ordered by increasing dissimilarity to
the query. Equal dissimilarities are ordered by ascending position so that
tier and curve cutoffs, which land exactly on class-size boundaries, are
reproducible.
"""

from dataclasses import dataclass
from typing import Iterator, Tuple

import numpy as np


@dataclass(frozen=True)
class Ranking:
    """
    Ordered retrieval list for one query.

    Attributes:
        query: Position of the query model
        positions: (N,) original model positions, best match first
        values: (N,) dissimilarity of each ranked model to the query
    """
    query: int
    positions: np.ndarray
    values: np.ndarray

    def __len__(self) -> int:
        return len(self.positions)

    def __iter__(self) -> Iterator[Tuple[int, float]]:
        for pos, value in zip(self.positions, self.values):
            yield int(pos), float(value)

    def relevant(self, class_of: np.ndarray) -> np.ndarray:
        """(N,) boolean array, True where the ranked model shares the query's class."""
        return class_of[self.positions] == class_of[self.query]


def rank_row(row: np.ndarray, query: int, exclude_self: bool = False) -> Ranking:
    """
    Rank all models by dissimilarity to a query.

    Args:
        row: (N,) dissimilarities of the query to every model
        query: Position of the query model
        exclude_self: If True, the query's own entry is forced to +inf so it
            ranks after every finite dissimilarity

    Returns:
        Ranking of all N positions
    """
    values = np.array(row, dtype=np.float32)
    if exclude_self:
        values[query] = np.inf

    # positions are already ascending, so a stable sort breaks ties by position
    order = np.argsort(values, kind='stable')
    return Ranking(query=query, positions=order, values=values[order])
