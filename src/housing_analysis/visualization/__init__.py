"""Visualization utilities for housing analysis."""

from housing_analysis.visualization.eda_viz import (
    plot_amount_by_category,
    plot_amount_heatmap,
    plot_amount_scatter,
    plot_yearly_sales,
)

__all__ = [
    "plot_amount_by_category",
    "plot_amount_heatmap",
    "plot_amount_scatter",
    "plot_yearly_sales",
]
