"""
pyshaperetrieval - Retrieval evaluation for shape benchmarks.

This library provides:
- Category structure and flattened model index
- Binary dissimilarity matrix reading
- Retrieval statistics: nearest neighbor, first/second tier, DCG, E-measure
- Precision/recall curves with micro and macro averaging
- Best-match listings and precision/recall plots

Conventions:
- Models are ordered category by category; this is the matrix row order
- Matrix entry (i, j) is the dissimilarity of query i to candidate j
- The miscellaneous category is never scored
"""

from .errors import (
    StructuralError,
    InputTruncated,
    DegenerateClass,
)
from .categories import (
    MISC_CLASS,
    Category,
    ModelIndex,
    categories_from_dict,
    load_categories,
)
from .matrix import (
    DissimilarityMatrix,
    read_matrix,
    write_matrix,
)
from .evaluation import (
    Ranking,
    rank_row,
    PerformanceCurve,
    build_curve,
    interpolate_perf,
    Table,
    score_model,
    ResampledCurve,
    average_curves,
    average_tables,
    class_curves,
    class_tables,
    BestMatch,
    best_matches,
    write_best_matches,
    EvaluationConfig,
    Granularity,
    evaluate_models,
    run_plot_evaluation,
    run_table_evaluation,
)
from .visualization import plot_precision_recall

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Errors
    "StructuralError",
    "InputTruncated",
    "DegenerateClass",
    # Categories
    "MISC_CLASS",
    "Category",
    "ModelIndex",
    "categories_from_dict",
    "load_categories",
    # Matrix
    "DissimilarityMatrix",
    "read_matrix",
    "write_matrix",
    # Evaluation
    "Ranking",
    "rank_row",
    "PerformanceCurve",
    "build_curve",
    "interpolate_perf",
    "Table",
    "score_model",
    "ResampledCurve",
    "average_curves",
    "average_tables",
    "class_curves",
    "class_tables",
    "BestMatch",
    "best_matches",
    "write_best_matches",
    "EvaluationConfig",
    "Granularity",
    "evaluate_models",
    "run_plot_evaluation",
    "run_table_evaluation",
    # Visualization
    "plot_precision_recall",
]
