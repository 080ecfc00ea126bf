"""Time-series aggregation of sales: monthly, quarterly and year-over-year."""

import logging

import pandas as pd

from housing_analysis.constants import SALE_AMOUNT, SALE_DATE, SALE_YEAR
from housing_analysis.data.cleaning import parse_sale_date

logger: logging.Logger = logging.getLogger(__name__)


def _dated_sales(df: pd.DataFrame) -> pd.DataFrame:
    """Rows with a valid sale date, as a frame of _date and _amount."""
    frame = pd.DataFrame(
        {
            "_date": pd.to_datetime(df[SALE_DATE].map(parse_sale_date).reset_index(drop=True)),
            "_amount": pd.to_numeric(df[SALE_AMOUNT], errors="coerce").reset_index(drop=True),
        }
    )
    n_undated = int(frame["_date"].isna().sum())
    if n_undated > 0:
        logger.info(f"Excluding {n_undated} sales without a valid sale_date")
    return frame.dropna(subset=["_date"])


def monthly_sales(df: pd.DataFrame) -> pd.DataFrame:
    """Sales volume and total amount per calendar month.

    Args:
        df: Cleaned sales DataFrame

    Returns:
        DataFrame with columns sale_year, sale_month, n_sales, total_sale_amount,
        in chronological order
    """
    dated = _dated_sales(df)
    dated = dated.assign(sale_year=dated["_date"].dt.year, sale_month=dated["_date"].dt.month)
    return (
        dated.groupby(["sale_year", "sale_month"])
        .agg(n_sales=("_amount", "size"), total_sale_amount=("_amount", "sum"))
        .reset_index()
    )


def quarterly_sales(df: pd.DataFrame) -> pd.DataFrame:
    """Sales volume and total amount per quarter, labelled like '2020-Q1'.

    Args:
        df: Cleaned sales DataFrame

    Returns:
        DataFrame with columns quarter, n_sales, total_sale_amount, in chronological order
    """
    dated = _dated_sales(df)
    dated = dated.assign(
        quarter=dated["_date"].dt.year.astype(str) + "-Q" + dated["_date"].dt.quarter.astype(str)
    )
    return (
        dated.groupby("quarter")
        .agg(n_sales=("_amount", "size"), total_sale_amount=("_amount", "sum"))
        .reset_index()
    )


def yearly_growth(df: pd.DataFrame) -> pd.DataFrame:
    """Total sale amount per year with year-over-year growth.

    The previous total is the preceding row in year order, so a gap year
    compares against the last year that had sales. Growth is missing for the
    first year and whenever the previous total is zero. Sales without a
    sale_year are excluded.

    Args:
        df: Cleaned sales DataFrame

    Returns:
        DataFrame with columns sale_year, total_sale_amount, previous_year_sales, yoy_growth_pct
    """
    if SALE_YEAR in df.columns:
        years = df[SALE_YEAR].astype("Int64").reset_index(drop=True)
    else:
        years = _dated_sales(df)["_date"].dt.year.reindex(range(len(df))).astype("Int64")

    frame = pd.DataFrame(
        {
            "sale_year": years,
            "_amount": pd.to_numeric(df[SALE_AMOUNT], errors="coerce").reset_index(drop=True),
        }
    ).dropna(subset=["sale_year"])

    grouped = (
        frame.groupby("sale_year")["_amount"].sum().rename("total_sale_amount").reset_index()
    )
    grouped["sale_year"] = grouped["sale_year"].astype(int)

    previous = grouped["total_sale_amount"].shift(1)
    grouped["previous_year_sales"] = previous
    grouped["yoy_growth_pct"] = (
        (grouped["total_sale_amount"] - previous) / previous.where(previous != 0) * 100
    )
    return grouped
