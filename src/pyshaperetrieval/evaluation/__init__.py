"""
Evaluation subpackage for retrieval quality assessment.

Provides:
- Ranking of models by dissimilarity
- Precision/recall curves and their interpolation
- Nearest neighbor, tier, DCG and E-measure scores
- Class (macro) and corpus (micro) aggregation
- Full evaluation pipeline and text reports
"""

from .ranking import Ranking, rank_row
from .curves import (
    PerformanceCurve,
    build_curve,
    interpolate_perf,
    recall_levels,
)
from .tiers import (
    E_MEASURE_DEPTH,
    Table,
    score_model,
)
from .aggregate import (
    MIN_CLASS_SIZE,
    PLOT_SAMPLES,
    TABLE_SAMPLES,
    ResampledCurve,
    average_curves,
    average_tables,
    class_curves,
    class_tables,
)
from .report import (
    BestMatch,
    best_matches,
    matrix_base_name,
    write_best_matches,
)
from .pipeline import (
    EvaluationConfig,
    Granularity,
    ModelEvaluation,
    evaluate_model,
    evaluate_models,
    run_plot_evaluation,
    run_table_evaluation,
)

__all__ = [
    "Ranking",
    "rank_row",
    "PerformanceCurve",
    "build_curve",
    "interpolate_perf",
    "recall_levels",
    "E_MEASURE_DEPTH",
    "Table",
    "score_model",
    "MIN_CLASS_SIZE",
    "PLOT_SAMPLES",
    "TABLE_SAMPLES",
    "ResampledCurve",
    "average_curves",
    "average_tables",
    "class_curves",
    "class_tables",
    "BestMatch",
    "best_matches",
    "matrix_base_name",
    "write_best_matches",
    "EvaluationConfig",
    "Granularity",
    "ModelEvaluation",
    "evaluate_model",
    "evaluate_models",
    "run_plot_evaluation",
    "run_table_evaluation",
]
