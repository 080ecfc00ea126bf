"""Record type for property sales and conversion to/from DataFrames."""

from collections.abc import Sequence
from dataclasses import asdict, dataclass, fields
from datetime import date

import numpy as np
import pandas as pd


@dataclass
class PropertySaleRecord:
    """Represents a single property sale.

    sale_date holds a date once validated; raw exports may carry a string
    that failed validation, which is kept as-is.
    """

    parcel_id: str
    property_address: str | None = None
    sale_date: date | str | None = None
    sale_amount: float | None = None
    sale_year: int | None = None
    related_property_address: str | None = None
    property_zip_code: str | None = None
    property_size: float | None = None


RECORD_COLUMNS = [f.name for f in fields(PropertySaleRecord)]


def _to_python(value):
    """Convert a pandas/numpy cell value to a plain Python value (missing -> None)."""
    # NaT subclasses datetime, so it must be caught before the date check below
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, np.floating):
        return None if np.isnan(value) else float(value)
    if not isinstance(value, (str, date)) and pd.isna(value):
        return None
    return value


def records_to_dataframe(records: Sequence[PropertySaleRecord]) -> pd.DataFrame:
    """Convert a sequence of PropertySaleRecord to a DataFrame.

    Args:
        records: Records in their original order

    Returns:
        DataFrame with one row per record and one column per record field
    """
    return pd.DataFrame([asdict(r) for r in records], columns=RECORD_COLUMNS)


def dataframe_to_records(df: pd.DataFrame) -> list[PropertySaleRecord]:
    """Convert a sales DataFrame back to PropertySaleRecord objects.

    Columns that are not record fields are ignored; record fields missing from
    the frame are left at their defaults.

    Args:
        df: Sales DataFrame (raw or cleaned)

    Returns:
        List of records in row order
    """
    columns = [c for c in RECORD_COLUMNS if c in df.columns]
    records = []
    for row in df[columns].itertuples(index=False, name=None):
        values = {col: _to_python(val) for col, val in zip(columns, row)}
        if values.get("sale_year") is not None:
            values["sale_year"] = int(values["sale_year"])
        records.append(PropertySaleRecord(**values))
    return records
