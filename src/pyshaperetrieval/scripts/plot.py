#!/usr/bin/env python3
"""
Compute precision versus recall curves from a dissimilarity matrix.

Writes <base>.plot (micro average, default), <base>.macro.plot,
<base>.classes/<class>.plot or <base>.models/<class>_<model>.plot, where
<base> is the matrix file name without its .matrix suffix.

Usage:
    psr-plot categories.json distances.matrix [--macro|--class|--model]

Or:
    python -m pyshaperetrieval.scripts.plot categories.json distances.matrix
"""

import argparse
import logging
import os
import sys

from ..categories import ModelIndex, load_categories
from ..errors import InputTruncated, StructuralError
from ..evaluation import (
    PLOT_SAMPLES,
    EvaluationConfig,
    Granularity,
    matrix_base_name,
    run_plot_evaluation,
)
from ..matrix import read_matrix
from ._common import add_evaluation_arguments, granularity_from_args


def main():
    parser = argparse.ArgumentParser(
        description="Compute precision vs recall curves",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Micro averaged curve -> ./distances.plot
  psr-plot categories.json distances.matrix

  # Macro averaged curve with a PNG rendering
  psr-plot categories.json distances.matrix --macro --image

  # Curve for every model, excluding the query from its own results
  psr-plot categories.json distances.matrix --model --exclude-query
        """
    )
    add_evaluation_arguments(parser)
    parser.add_argument(
        "--output-dir", default=".",
        help="Directory for output files (default: current directory)"
    )
    parser.add_argument(
        "--samples", type=int, default=PLOT_SAMPLES,
        help=f"Recall levels of averaged curves (default: {PLOT_SAMPLES})"
    )
    parser.add_argument(
        "--exclude-query", action="store_true",
        help="Do not count the query model as its own first result"
    )
    parser.add_argument(
        "--image", action="store_true",
        help="Also render the averaged or class curves to a PNG"
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
        include_self_in_curve=not args.exclude_query,
        e_measure_depth=args.e_depth,
        samples=args.samples,
        max_workers=args.workers,
        verbose=args.verbose,
    )

    try:
        index = ModelIndex(load_categories(args.classfile))
        matrix = read_matrix(args.matrix, index.num_models)
        results = run_plot_evaluation(
            matrix, index,
            output_dir=args.output_dir,
            base_name=matrix_base_name(args.matrix),
            granularity=granularity_from_args(args, Granularity.MICRO),
            config=config,
            plot_image=args.image,
        )
    except (StructuralError, InputTruncated) as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.verbose:
        print(f"Wrote {len(results['files'])} files to {args.output_dir}")


if __name__ == "__main__":
    main()
