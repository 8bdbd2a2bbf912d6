#!/usr/bin/env python3
"""
List the ranked results of every query model.

Usage:
    psr-bestmatch categories.json distances.matrix output_dir/
"""

import argparse
import logging
import os
import sys

from ..categories import ModelIndex, load_categories
from ..errors import InputTruncated, StructuralError
from ..evaluation import write_best_matches
from ..matrix import read_matrix


def main():
    parser = argparse.ArgumentParser(
        description='Write the ranked result list of every query model',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  psr-bestmatch categories.json distances.matrix ./matches
        """
    )
    parser.add_argument('classfile', help='Category structure as JSON')
    parser.add_argument('matrix', help='Binary N x N float32 dissimilarity matrix')
    parser.add_argument('output_dir', help='Output directory for the listings')

    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')

    for path in (args.classfile, args.matrix):
        if not os.path.exists(path):
            print(f"Error: File not found: {path}")
            sys.exit(1)

    try:
        index = ModelIndex(load_categories(args.classfile))
        matrix = read_matrix(args.matrix, index.num_models)
    except (StructuralError, InputTruncated) as e:
        print(f"Error: {e}")
        sys.exit(1)

    written = write_best_matches(args.output_dir, matrix, index)
    print(f"Wrote {len(written)} listings to {args.output_dir}")


if __name__ == '__main__':
    main()
