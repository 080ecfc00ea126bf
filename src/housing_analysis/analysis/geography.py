"""Geographic aggregation of sales."""

import logging

import pandas as pd

from housing_analysis.constants import (
    ANALYSIS_DEFAULTS,
    PROPERTY_ADDRESS,
    PROPERTY_ZIP_CODE,
    SALE_AMOUNT,
)

logger: logging.Logger = logging.getLogger(__name__)


def sales_by_zip(df: pd.DataFrame, zip_col: str = PROPERTY_ZIP_CODE) -> pd.DataFrame:
    """Count sales and average amount per zip code, busiest first.

    Args:
        df: Cleaned sales DataFrame
        zip_col: Zip code column

    Returns:
        DataFrame with columns zip_col, n_sales, average_sale_amount
    """
    columns = [zip_col, "n_sales", "average_sale_amount"]
    if zip_col not in df.columns:
        logger.warning(f"Column '{zip_col}' not in data - no geographic breakdown")
        return pd.DataFrame(columns=columns)

    grouped = (
        df.assign(_amount=pd.to_numeric(df[SALE_AMOUNT], errors="coerce"))
        .groupby(zip_col, dropna=False)
        .agg(n_sales=("_amount", "size"), average_sale_amount=("_amount", "mean"))
        .reset_index()
    )
    # Ties on count keep zip order for stable output
    return grouped.sort_values("n_sales", ascending=False, kind="stable").reset_index(drop=True)[
        columns
    ]


def top_addresses_by_amount(
    df: pd.DataFrame, n: int = ANALYSIS_DEFAULTS["top_n"]
) -> pd.DataFrame:
    """Addresses with the highest average sale amount.

    Args:
        df: Cleaned sales DataFrame
        n: Number of addresses to return

    Returns:
        DataFrame with columns property_address, average_sale_amount
    """
    grouped = (
        df.assign(_amount=pd.to_numeric(df[SALE_AMOUNT], errors="coerce"))
        .groupby(PROPERTY_ADDRESS)["_amount"]
        .mean()
        .rename("average_sale_amount")
        .reset_index()
    )
    return (
        grouped.sort_values("average_sale_amount", ascending=False, kind="stable")
        .head(n)
        .reset_index(drop=True)
    )
