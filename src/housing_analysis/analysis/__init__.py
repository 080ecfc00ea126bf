"""Reporting over cleaned sales data."""

from housing_analysis.analysis.geography import sales_by_zip, top_addresses_by_amount
from housing_analysis.analysis.summary import (
    find_outliers,
    get_summary_stats,
    sale_amount_correlation,
    sale_amount_quartiles,
)
from housing_analysis.analysis.trends import monthly_sales, quarterly_sales, yearly_growth

__all__ = [
    "find_outliers",
    "get_summary_stats",
    "monthly_sales",
    "quarterly_sales",
    "sale_amount_correlation",
    "sale_amount_quartiles",
    "sales_by_zip",
    "top_addresses_by_amount",
    "yearly_growth",
]
