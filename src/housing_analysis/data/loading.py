"""CSV adapters for raw and cleaned sales data."""

import logging
from pathlib import Path

import pandas as pd

from housing_analysis.constants import (
    PARCEL_ID,
    PROPERTY_ADDRESS,
    SALE_DATE,
    SOURCE_COLUMN_MAP,
)
from housing_analysis.data.cleaning import CleaningContractError, build_address_lookup

logger: logging.Logger = logging.getLogger(__name__)


def _read_raw_csv(path: str | Path, column_map: dict[str, str] | None) -> pd.DataFrame:
    path = Path(path)
    if not path.exists():
        logger.error(f"CSV not found: {path}")
        raise FileNotFoundError(f"CSV not found: {path}")

    # Read as text so sale dates reach the cleaner unparsed
    df = pd.read_csv(path, dtype=str, skipinitialspace=True)
    df = df.rename(columns=column_map if column_map is not None else SOURCE_COLUMN_MAP)

    duplicated = sorted(set(df.columns[df.columns.duplicated()]))
    if duplicated:
        logger.error(f"Headers in {path} map to the same columns: {duplicated}")
        raise CleaningContractError(
            f"Several source headers map to the same columns {duplicated}; "
            f"pass a column_map that keeps one of them"
        )
    logger.info(f"Loaded {len(df)} rows from {path}")
    return df


def load_sales_csv(path: str | Path, column_map: dict[str, str] | None = None) -> pd.DataFrame:
    """Load raw sales from a CSV export.

    Source headers (e.g. 'ParcelID', 'SaleDate', 'SalePrice') are renamed to
    the cleaned frame's columns. Blank cells become missing values; every
    other cell is kept as text.

    Args:
        path: CSV file path
        column_map: Header rename mapping (default: SOURCE_COLUMN_MAP)

    Returns:
        Raw sales DataFrame ready for clean_sales()

    Raises:
        FileNotFoundError: If path does not exist
        CleaningContractError: If two source headers map to the same column
            (e.g. both 'SaleAmount' and 'SalePrice')
    """
    return _read_raw_csv(path, column_map)


def load_related_addresses(
    path: str | Path, column_map: dict[str, str] | None = None
) -> dict[str, str]:
    """Load a related-records CSV and reduce it to a parcel_id -> address lookup.

    Args:
        path: CSV file path with parcel id and address columns
        column_map: Header rename mapping (default: SOURCE_COLUMN_MAP)

    Returns:
        Dict mapping parcel_id to address
    """
    df = _read_raw_csv(path, column_map)
    return build_address_lookup(df, key_col=PARCEL_ID, address_col=PROPERTY_ADDRESS)


def save_cleaned_csv(df: pd.DataFrame, path: str | Path) -> Path:
    """Write cleaned sales to CSV, creating parent directories.

    Parsed sale dates are written in ISO format; unparsed values as-is.

    Args:
        df: Cleaned sales DataFrame
        path: Output file path

    Returns:
        Path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    out = df.copy()
    if SALE_DATE in out.columns:
        out[SALE_DATE] = out[SALE_DATE].map(
            lambda v: v.strftime("%Y-%m-%d") if isinstance(v, pd.Timestamp) else v
        )
    out.to_csv(path, index=False)
    logger.info(f"Saved {len(out)} cleaned sales to {path}")
    return path
