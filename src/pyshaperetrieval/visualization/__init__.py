"""
Visualization subpackage.

Provides matplotlib plots of precision/recall curves.
"""

from .plot import (
    plot_precision_recall,
    plot_model_curves,
)

__all__ = [
    "plot_precision_recall",
    "plot_model_curves",
]
