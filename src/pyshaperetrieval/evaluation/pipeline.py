"""
Evaluation pipeline for a dissimilarity matrix.

Scores every model against the shared, read-only matrix in a thread pool,
waits for all of them, then aggregates at the requested granularity.
"""

import json
import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Enum
from typing import List, Optional

from tqdm import tqdm

from ..categories import ModelIndex
from ..matrix import DissimilarityMatrix
from .aggregate import (
    MIN_CLASS_SIZE,
    PLOT_SAMPLES,
    TABLE_SAMPLES,
    average_curves,
    average_tables,
    class_curves,
    class_tables,
)
from .curves import PerformanceCurve, build_curve
from .ranking import rank_row
from .report import (
    format_class_row,
    format_model_row,
    format_summary_row,
    write_curve,
    write_resampled_curve,
)
from .tiers import E_MEASURE_DEPTH, Table, score_model

logger = logging.getLogger(__name__)


class Granularity(str, Enum):
    """Level at which results are reported."""
    MODEL = "model"
    CLASS = "class"
    MICRO = "micro"
    MACRO = "macro"


@dataclass
class EvaluationConfig:
    """
    Options shared by the table and plot evaluations.

    Attributes:
        min_class_size: Classes of at most this many models are not averaged
        include_self_in_curve: Count the query as its own first result in
            precision/recall curves
        e_measure_depth: Result list depth K for the E-measure
        samples: Number of recall levels for averaged curves
        max_workers: Threads scoring models concurrently; 1 runs serially
        verbose: Show progress bars
    """
    min_class_size: int = MIN_CLASS_SIZE
    include_self_in_curve: bool = True
    e_measure_depth: int = E_MEASURE_DEPTH
    samples: int = TABLE_SAMPLES
    max_workers: int = 8
    verbose: bool = True


@dataclass
class ModelEvaluation:
    """Results of one query model."""
    position: int
    category: int
    table: Optional[Table] = None
    curve: Optional[PerformanceCurve] = None


def evaluate_model(
    matrix: DissimilarityMatrix,
    index: ModelIndex,
    position: int,
    config: EvaluationConfig,
    with_table: bool = True,
    with_curve: bool = True
) -> ModelEvaluation:
    """
    Score a single query model.

    The table is computed from a ranking with the query pushed last; the
    curve from a ranking where the query keeps its own dissimilarity.

    Args:
        matrix: Shared dissimilarity matrix
        index: Model index of the corpus
        position: Position of the query model
        config: Evaluation options
        with_table: Compute the scalar Table
        with_curve: Compute the precision/recall curve

    Returns:
        ModelEvaluation; miscellaneous models get an invalid table and an
        empty curve
    """
    category = index.category_of(position)
    result = ModelEvaluation(position=position, category=category)

    if index.is_excluded(category):
        if with_table:
            result.table = Table.invalid()
        if with_curve:
            result.curve = PerformanceCurve.empty()
        return result

    row = matrix.row(position)
    if with_table:
        result.table = score_model(
            rank_row(row, position, exclude_self=True), index, config.e_measure_depth
        )
    if with_curve:
        result.curve = build_curve(
            rank_row(row, position), index.class_of,
            index.class_size(category), config.include_self_in_curve
        )
    return result


def evaluate_models(
    matrix: DissimilarityMatrix,
    index: ModelIndex,
    config: Optional[EvaluationConfig] = None,
    with_table: bool = True,
    with_curve: bool = True
) -> List[ModelEvaluation]:
    """
    Score every model, in parallel when config.max_workers > 1.

    Returns:
        One ModelEvaluation per position, in position order
    """
    config = config or EvaluationConfig()
    matrix.check_size(index.num_models)
    n_models = index.num_models
    results: List[Optional[ModelEvaluation]] = [None] * n_models

    if config.max_workers <= 1:
        iterator = range(n_models)
        if config.verbose:
            iterator = tqdm(iterator, total=n_models, desc="Scoring models", leave=False)
        for position in iterator:
            results[position] = evaluate_model(
                matrix, index, position, config, with_table, with_curve
            )
        return results

    with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
        future_to_pos = {
            executor.submit(
                evaluate_model, matrix, index, position, config, with_table, with_curve
            ): position
            for position in range(n_models)
        }

        iterator = as_completed(future_to_pos)
        if config.verbose:
            iterator = tqdm(iterator, total=n_models, desc="Scoring models", leave=False)

        for future in iterator:
            results[future_to_pos[future]] = future.result()

    return results


# =============================================================================
# Table evaluation
# =============================================================================

def run_table_evaluation(
    matrix: DissimilarityMatrix,
    index: ModelIndex,
    granularity: Granularity = Granularity.MICRO,
    config: Optional[EvaluationConfig] = None,
    summary_path: Optional[str] = None,
    verbose: bool = True
) -> dict:
    """
    Compute NN, first tier, second tier, E-measure and DCG statistics.

    Args:
        matrix: Dissimilarity matrix
        index: Model index of the corpus
        granularity: Level printed to stdout
        config: Evaluation options
        summary_path: Optional path of a JSON summary to write
        verbose: Print the table rows

    Returns:
        Dictionary with per-model, per-class, micro and macro tables
    """
    config = config or EvaluationConfig()
    granularity = Granularity(granularity)
    evaluations = evaluate_models(matrix, index, config, with_curve=False)
    model_tables = [e.table for e in evaluations]
    per_class = class_tables(model_tables, index, config.min_class_size)
    micro = average_tables(model_tables, config.min_class_size)
    macro = average_tables(per_class, config.min_class_size)

    if verbose:
        if granularity == Granularity.MODEL:
            for e in evaluations:
                if e.table.valid_size > 0:
                    print(format_model_row(index, e.position, e.table))
        elif granularity == Granularity.CLASS:
            for ci, table in enumerate(per_class):
                if table.is_valid(config.min_class_size):
                    print(format_class_row(index.categories[ci], table))
        elif granularity == Granularity.MICRO:
            print(format_summary_row(micro))
        else:
            print(format_summary_row(macro))

    results = {
        "timestamp": datetime.now().isoformat(),
        "input": {
            "matrix": matrix.source,
            "num_models": index.num_models,
            "num_categories": index.num_categories,
        },
        "config": asdict(config),
        "granularity": granularity.value,
        "models": [
            dict(e.table.to_dict(), model_id=index.model_label(e.position),
                 category=index.categories[e.category].full_name)
            for e in evaluations
        ],
        "classes": [
            dict(t.to_dict(), category=index.categories[ci].full_name)
            for ci, t in enumerate(per_class)
        ],
        "micro": micro.to_dict(),
        "macro": macro.to_dict(),
    }

    if summary_path:
        with open(summary_path, 'w') as f:
            json.dump(results, f, indent=2)
        logger.info("Summary saved to %s", summary_path)

    return results


# =============================================================================
# Plot evaluation
# =============================================================================

def run_plot_evaluation(
    matrix: DissimilarityMatrix,
    index: ModelIndex,
    output_dir: str,
    base_name: str,
    granularity: Granularity = Granularity.MICRO,
    config: Optional[EvaluationConfig] = None,
    plot_image: bool = False
) -> dict:
    """
    Compute precision/recall curves and write them as plot files.

    Files written in output_dir, by granularity:
        model: <base>.models/<full_name>_<model_id>.plot
        class: <base>.classes/<name>.plot
        micro: <base>.plot
        macro: <base>.macro.plot

    Args:
        matrix: Dissimilarity matrix
        index: Model index of the corpus
        output_dir: Directory for output files
        base_name: Prefix of the output files
        granularity: Level of the curves written
        config: Evaluation options; config.samples recall levels are used
            for micro and macro curves
        plot_image: Also render the class, micro or macro curves to a PNG

    Returns:
        Dictionary with the written paths and, for micro/macro, the
        resampled curve as (recall, precision) pairs
    """
    config = config or EvaluationConfig(samples=PLOT_SAMPLES)
    granularity = Granularity(granularity)
    os.makedirs(output_dir, exist_ok=True)

    evaluations = evaluate_models(matrix, index, config, with_table=False)
    model_curves = [e.curve for e in evaluations]
    results = {"granularity": granularity.value, "files": []}

    if granularity == Granularity.MODEL:
        folder = os.path.join(output_dir, f"{base_name}.models")
        os.makedirs(folder, exist_ok=True)
        for e in evaluations:
            if index.is_excluded(e.category):
                continue
            cat = index.categories[e.category]
            path = os.path.join(folder, f"{cat.full_name}_{index.model_label(e.position)}.plot")
            write_curve(path, e.curve)
            results["files"].append(path)
        return results

    if granularity == Granularity.MICRO:
        curves = model_curves
        path = os.path.join(output_dir, f"{base_name}.plot")
    else:
        curves = class_curves(model_curves, index, config.min_class_size)
        path = os.path.join(output_dir, f"{base_name}.macro.plot")

    if granularity == Granularity.CLASS:
        folder = os.path.join(output_dir, f"{base_name}.classes")
        os.makedirs(folder, exist_ok=True)
        written = []
        for ci, curve in enumerate(curves):
            if len(curve) <= config.min_class_size:
                continue
            class_path = os.path.join(folder, f"{index.categories[ci].name}.plot")
            write_curve(class_path, curve)
            results["files"].append(class_path)
            written.append(ci)

        if plot_image and written:
            from ..visualization import plot_model_curves

            image_path = os.path.join(output_dir, f"{base_name}.classes.png")
            plot_model_curves(
                [curves[ci] for ci in written],
                [index.categories[ci].full_name for ci in written],
                image_path,
            )
            results["files"].append(image_path)
        return results

    resampled = average_curves(curves, config.samples, config.min_class_size)
    write_resampled_curve(path, resampled)
    results["files"].append(path)
    results["curve"] = resampled.pairs()

    if plot_image:
        from ..visualization import plot_precision_recall

        image_path = os.path.splitext(path)[0] + ".png"
        plot_precision_recall([resampled], [f"{base_name} ({granularity.value})"], image_path)
        results["files"].append(image_path)

    logger.info("Wrote %s precision/recall curve to %s", granularity.value, path)
    return results
