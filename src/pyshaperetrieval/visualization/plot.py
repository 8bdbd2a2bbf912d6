"""
Precision/recall plots.

Provides matplotlib-based visualization of retrieval curves.
"""

import matplotlib.pyplot as plt
from typing import List, Optional, Sequence

from ..evaluation.aggregate import ResampledCurve
from ..evaluation.curves import PerformanceCurve


def _finish_axes(title: str):
    plt.xlabel('Recall')
    plt.ylabel('Precision')
    plt.title(title)
    plt.xlim([0, 1])
    plt.ylim([0, 1.05])
    plt.grid(True, alpha=0.3)


def plot_precision_recall(
    curves: Sequence[ResampledCurve],
    labels: Optional[List[str]] = None,
    output_path: Optional[str] = None,
    title: str = 'Precision vs Recall',
    figsize: tuple = (10, 6)
):
    """
    Plot averaged precision/recall curves.

    Args:
        curves: Resampled curves, one line each
        labels: Legend label per curve
        output_path: If given, save the figure as an image and close it
        title: Plot title
        figsize: Figure size tuple (width, height)
    """
    labels = labels or [f'Curve {i + 1}' for i in range(len(curves))]

    plt.figure(figsize=figsize)
    for curve, label in zip(curves, labels):
        plt.plot(curve.recall, curve.precision, marker='o', markersize=3, label=label)
    _finish_axes(title)
    plt.legend(loc='upper right')

    if output_path:
        plt.savefig(output_path, dpi=150, bbox_inches='tight')
        plt.close()


def plot_model_curves(
    curves: Sequence[PerformanceCurve],
    labels: Sequence[str],
    output_path: Optional[str] = None,
    title: str = 'Precision vs Recall per query',
    figsize: tuple = (10, 6)
):
    """
    Plot unsampled curves of individual models or classes.

    Args:
        curves: Curves to draw; empty curves are skipped
        labels: Legend label per curve
        output_path: If given, save the figure as an image and close it
        title: Plot title
        figsize: Figure size tuple (width, height)
    """
    plt.figure(figsize=figsize)
    for curve, label in zip(curves, labels):
        if len(curve) == 0:
            continue
        plt.plot(curve.recall, curve.precision, label=label)
    _finish_axes(title)
    plt.legend(loc='upper right', fontsize='small')

    if output_path:
        plt.savefig(output_path, dpi=150, bbox_inches='tight')
        plt.close()
