#!/usr/bin/env python3
"""
Compute retrieval statistics from a dissimilarity matrix.

Prints nearest neighbor, first tier, second tier, E-measure and DCG,
micro averaged over all models by default.

Usage:
    psr-table categories.json distances.matrix [--macro|--class|--model]

Or:
    python -m pyshaperetrieval.scripts.table categories.json distances.matrix
"""

import argparse
import logging
import os
import sys

from ..categories import ModelIndex, load_categories
from ..errors import InputTruncated, StructuralError
from ..evaluation import EvaluationConfig, Granularity, run_table_evaluation
from ..matrix import read_matrix
from ._common import add_evaluation_arguments, granularity_from_args


def main():
    parser = argparse.ArgumentParser(
        description="Compute retrieval statistics (NN, first tier, second tier, E, DCG)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Single table, micro averaged over all models
  psr-table categories.json distances.matrix

  # One row per class
  psr-table categories.json distances.matrix --class

  # Macro average, saving a JSON summary
  psr-table categories.json distances.matrix --macro --summary summary.json
        """
    )
    add_evaluation_arguments(parser)
    parser.add_argument(
        "--summary",
        help="Write a JSON summary with all model, class, micro and macro tables"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(levelname)s: %(message)s'
    )

    for path in (args.classfile, args.matrix):
        if not os.path.exists(path):
            print(f"Error: File not found: {path}")
            sys.exit(1)

    config = EvaluationConfig(
        min_class_size=args.min_class_size,
        e_measure_depth=args.e_depth,
        max_workers=args.workers,
        verbose=args.verbose,
    )

    try:
        index = ModelIndex(load_categories(args.classfile))
        matrix = read_matrix(args.matrix, index.num_models)
        run_table_evaluation(
            matrix, index,
            granularity=granularity_from_args(args, Granularity.MICRO),
            config=config,
            summary_path=args.summary,
        )
    except (StructuralError, InputTruncated) as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
