"""Summary statistics, sale amount distribution and correlation."""

import logging

import numpy as np
import pandas as pd

from housing_analysis.constants import ANALYSIS_DEFAULTS, PROPERTY_SIZE, SALE_AMOUNT, SALE_YEAR

logger: logging.Logger = logging.getLogger(__name__)


def _amounts(df: pd.DataFrame) -> pd.Series:
    return pd.to_numeric(df[SALE_AMOUNT], errors="coerce").dropna()


def get_summary_stats(df: pd.DataFrame) -> dict:
    """Get summary statistics for a cleaned sales dataset.

    Args:
        df: Cleaned sales DataFrame

    Returns:
        Dict with summary statistics. Amount statistics are None for an empty frame.
    """
    amounts = _amounts(df)
    has_amounts = not amounts.empty

    by_year = {}
    if SALE_YEAR in df.columns:
        by_year = {
            # Sales without a valid date are counted under None, like a NULL group
            (None if pd.isna(year) else int(year)): int(count)
            for year, count in df[SALE_YEAR].value_counts(dropna=False).sort_index().items()
        }

    return {
        "n_sales": len(df),
        "average_sale_amount": float(amounts.mean()) if has_amounts else None,
        "min_sale_amount": float(amounts.min()) if has_amounts else None,
        "max_sale_amount": float(amounts.max()) if has_amounts else None,
        "median_sale_amount": float(amounts.median()) if has_amounts else None,
        "sales_by_year": by_year,
    }


def sale_amount_quartiles(df: pd.DataFrame) -> dict[str, float | None]:
    """Compute Q1, median and Q3 of sale_amount.

    Uses linear interpolation between ranks (continuous percentiles).

    Args:
        df: Cleaned sales DataFrame

    Returns:
        Dict with keys q1, median, q3
    """
    amounts = _amounts(df)
    if amounts.empty:
        return {"q1": None, "median": None, "q3": None}

    q1, median, q3 = amounts.quantile([0.25, 0.5, 0.75], interpolation="linear")
    return {"q1": float(q1), "median": float(median), "q3": float(q3)}


def find_outliers(
    df: pd.DataFrame, multiplier: float = ANALYSIS_DEFAULTS["iqr_multiplier"]
) -> pd.DataFrame:
    """Find sales whose amount lies outside the IQR fences.

    A sale is an outlier when its amount is below Q1 - multiplier * IQR or
    above Q3 + multiplier * IQR.

    Args:
        df: Cleaned sales DataFrame
        multiplier: Fence width in IQRs

    Returns:
        Outlier rows with q1 and q3 columns attached
    """
    quartiles = sale_amount_quartiles(df)
    if quartiles["q1"] is None:
        return df.iloc[0:0].assign(q1=np.nan, q3=np.nan)

    q1, q3 = quartiles["q1"], quartiles["q3"]
    iqr = q3 - q1
    lower, upper = q1 - multiplier * iqr, q3 + multiplier * iqr

    amounts = pd.to_numeric(df[SALE_AMOUNT], errors="coerce")
    outliers = df[(amounts < lower) | (amounts > upper)].assign(q1=q1, q3=q3)

    logger.info(
        f"Found {len(outliers)} outliers outside [{lower:,.2f}, {upper:,.2f}] "
        f"(IQR multiplier {multiplier})"
    )
    return outliers


def sale_amount_correlation(
    df: pd.DataFrame,
    x_col: str = PROPERTY_SIZE,
    decimals: int = ANALYSIS_DEFAULTS["correlation_decimals"],
) -> float | None:
    """Pearson correlation between a numeric column and sale_amount.

    Only rows where both values are present are used.

    Args:
        df: Cleaned sales DataFrame
        x_col: Column to correlate with sale_amount
        decimals: Rounding precision

    Returns:
        Rounded correlation coefficient, or None if it is undefined
    """
    if x_col not in df.columns:
        logger.warning(f"Column '{x_col}' not in data - correlation unavailable")
        return None

    pair = pd.DataFrame(
        {
            "x": pd.to_numeric(df[x_col], errors="coerce"),
            "y": pd.to_numeric(df[SALE_AMOUNT], errors="coerce"),
        }
    ).dropna()

    if len(pair) < 2 or pair["x"].std() == 0 or pair["y"].std() == 0:
        logger.warning(f"Correlation of {x_col} and sale_amount undefined for {len(pair)} rows")
        return None

    corr = pair["x"].corr(pair["y"])
    if np.isnan(corr):
        return None
    return round(float(corr), decimals)
