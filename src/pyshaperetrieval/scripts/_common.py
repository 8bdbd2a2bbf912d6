"""
Command-line options shared by the evaluation scripts.
"""

import argparse

from ..evaluation import E_MEASURE_DEPTH, MIN_CLASS_SIZE, Granularity


def add_evaluation_arguments(parser: argparse.ArgumentParser):
    """Positional inputs, granularity switches and common tuning options."""
    parser.add_argument(
        "classfile",
        help="Category structure as JSON ({\"categories\": [{\"name\", \"full_name\", \"models\"}]})"
    )
    parser.add_argument(
        "matrix",
        help="Binary N x N float32 dissimilarity matrix, row-major"
    )

    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--macro", dest="granularity", action="store_const", const=Granularity.MACRO,
        help="Average over all classes"
    )
    group.add_argument(
        "--class", dest="granularity", action="store_const", const=Granularity.CLASS,
        help="Report each class"
    )
    group.add_argument(
        "--model", dest="granularity", action="store_const", const=Granularity.MODEL,
        help="Report each model"
    )

    parser.add_argument(
        "--min-class-size", type=int, default=MIN_CLASS_SIZE,
        help=f"Classes of at most this many models are not averaged (default: {MIN_CLASS_SIZE})"
    )
    parser.add_argument(
        "--e-depth", type=int, default=E_MEASURE_DEPTH,
        help=f"Result list depth for the E-measure (default: {E_MEASURE_DEPTH})"
    )
    parser.add_argument(
        "--workers", type=int, default=8,
        help="Threads scoring models concurrently (default: 8)"
    )
    parser.add_argument(
        "--quiet", dest="verbose", action="store_false",
        help="Suppress progress messages"
    )


def granularity_from_args(args: argparse.Namespace, default: Granularity) -> Granularity:
    return args.granularity or default
