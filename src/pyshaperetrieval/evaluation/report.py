"""
Text output of evaluation results.

Console rows use the fixed-width layout of the benchmark's table tool;
curve files hold one "recall precision" pair per line.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from ..categories import Category, ModelIndex
from ..matrix import DissimilarityMatrix
from .aggregate import ResampledCurve
from .curves import PerformanceCurve
from .ranking import rank_row
from .tiers import Table

logger = logging.getLogger(__name__)

QUERY = "query"
CORRECT = "correct"
WRONG = "wrong"


def format_model_row(index: ModelIndex, position: int, table: Table) -> str:
    """Full class name, model id, NN, first tier, second tier, E, DCG."""
    category = index.categories[index.category_of(position)]
    return "%-50s %s %12.3f %12.3f %12.3f %12.3f %12.3f" % (
        category.full_name, index.model_label(position),
        table.nearest_neighbor, table.first_tier, table.second_tier,
        table.e_measure, table.dcg
    )


def format_class_row(category: Category, table: Table) -> str:
    return "%-50s %12.3f %12.3f %12.3f %12.3f %12.3f" % (
        category.full_name,
        table.nearest_neighbor, table.first_tier, table.second_tier,
        table.e_measure, table.dcg
    )


def format_summary_row(table: Table) -> str:
    return "%12.3f %12.3f %12.3f %12.3f %12.3f" % tuple(table.scores())


def write_curve(path: Union[str, Path], curve: PerformanceCurve):
    """One line per curve point: recall reached, precision at that point."""
    with open(path, 'w') as f:
        for recall, precision in curve.points():
            f.write(f"{recall:f} {precision:f}\n")


def write_resampled_curve(path: Union[str, Path], curve: ResampledCurve):
    with open(path, 'w') as f:
        for recall, precision in curve.pairs():
            f.write(f"{recall:f}\t{precision:f}\n")


def matrix_base_name(matrix_path: Union[str, Path]) -> str:
    """
    Base name for output files: the matrix file name without directories and
    without its ".matrix" suffix.
    """
    name = Path(matrix_path).name
    pos = name.find(".matrix")
    return name if pos < 0 else name[:pos]


# =============================================================================
# Best-match listings
# =============================================================================

@dataclass
class BestMatch:
    """One entry of a query's ranked result list."""
    rank: int
    model_id: int
    distance: float
    relation: str


def best_matches(
    matrix: DissimilarityMatrix,
    index: ModelIndex,
    position: int
) -> List[BestMatch]:
    """
    Full ranked result list of a query, each entry tagged as the query
    itself, a correct-class match or a wrong-class match.
    """
    ranking = rank_row(matrix.row(position), position)
    query_id = index.model_ids[position]
    query_class = index.category_of(position)

    matches = []
    for rank, (pos, value) in enumerate(ranking, start=1):
        model_id = int(index.model_ids[pos])
        if model_id == query_id:
            relation = QUERY
        elif index.category_of(pos) == query_class:
            relation = CORRECT
        else:
            relation = WRONG
        matches.append(BestMatch(rank=rank, model_id=model_id, distance=value, relation=relation))
    return matches


def write_best_matches(
    output_dir: Union[str, Path],
    matrix: DissimilarityMatrix,
    index: ModelIndex
) -> List[str]:
    """
    Write an index of all categories and one ranked listing per query.

    Files:
        index.txt: "<full_name> ( <size> )" followed by member ids
        <full_name>__<model_id>.txt: "rank\\tmodel_id\\tdistance\\trelation"

    Returns:
        Paths of the listings written
    """
    os.makedirs(output_dir, exist_ok=True)

    with open(os.path.join(output_dir, "index.txt"), 'w') as f:
        for cat in index.categories:
            if cat.size == 0:
                continue
            f.write(f"{cat.full_name} ( {cat.size} )\n")
            for model in cat.models:
                f.write(f"  {model}\n")

    written = []
    for ci, cat in enumerate(index.categories):
        if index.is_excluded(ci):
            continue
        for position in index.members(ci):
            path = os.path.join(
                output_dir, f"{cat.full_name}__{index.model_label(position)}.txt"
            )
            with open(path, 'w') as f:
                f.write("# rank\tmodel_id\tdistance\trelation\n")
                for match in best_matches(matrix, index, position):
                    f.write(
                        f"{match.rank}\tm{match.model_id}\t{match.distance:.3f}\t{match.relation}\n"
                    )
            written.append(path)

    logger.info("Wrote %d best-match listings to %s", len(written), output_dir)
    return written
