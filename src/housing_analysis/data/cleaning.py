"""Data cleaning and validation for property sale records."""

import logging
from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime

import pandas as pd
from dateutil import parser as date_parser

from housing_analysis.constants import (
    CLEANING_DEFAULTS,
    DEDUP_KEY,
    PARCEL_ID,
    PROPERTY_ADDRESS,
    RELATED_PROPERTY_ADDRESS,
    REQUIRED_COLUMNS,
    SALE_AMOUNT,
    SALE_DATE,
    SALE_YEAR,
)
from housing_analysis.data.records import (
    PropertySaleRecord,
    dataframe_to_records,
    records_to_dataframe,
)

logger: logging.Logger = logging.getLogger(__name__)

_PARSE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


class CleaningContractError(Exception):
    """Raised when the cleaner is called without its inputs or required columns."""

    pass


class DataQualityError(Exception):
    """Raised when cleaned data fails post-clean verification."""

    pass


@dataclass
class ValidationResult:
    """Result of validating a single sale record."""

    is_valid: bool
    warnings: list[str]
    errors: list[str]


def _is_missing(value) -> bool:
    if value is None or value is pd.NaT:
        return True
    if isinstance(value, (str, date)):
        return False
    return bool(pd.isna(value))


def parse_sale_date(value) -> pd.Timestamp | None:
    """Parse a raw sale date into a normalized Timestamp.

    Accepts date/datetime objects and date strings carrying a full year,
    month and day (e.g. '2013-04-09', 'April 9, 2013', '04/09/2013').
    Partial dates ('Jan', '2013') and relative words ('today') are rejected.

    Args:
        value: Raw sale date

    Returns:
        Timestamp at midnight, or None if the value is missing or not a valid date
    """
    if _is_missing(value):
        return None

    if isinstance(value, date):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            # A component missing from the text is filled from the default,
            # so two different defaults disagree unless the date is complete
            first = date_parser.parse(text, default=_PARSE_DEFAULTS[0])
            second = date_parser.parse(text, default=_PARSE_DEFAULTS[1])
        except (ValueError, OverflowError):
            return None
        if first != second:
            return None
        parsed = first
    else:
        # Bare numbers are not accepted as dates
        return None

    try:
        parsed = pd.Timestamp(parsed)
    except (ValueError, OverflowError):
        return None
    if pd.isna(parsed):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.tz_localize(None)
    return parsed.normalize()


def _parse_sale_amount(value):
    if isinstance(value, str):
        return value.replace("$", "").replace(",", "").strip()
    return value


def validate_sale(row: pd.Series) -> ValidationResult:
    """Validate a single sale row.

    Missing or malformed values are reported, never fixed here; the cleaning
    stages decide what to substitute.

    Args:
        row: DataFrame row representing a sale

    Returns:
        ValidationResult with validity flag and any warnings/errors
    """
    warnings: list[str] = []
    errors: list[str] = []

    if _is_missing(row.get(PARCEL_ID)):
        errors.append("Missing parcel_id")

    if _is_missing(row.get(PROPERTY_ADDRESS)):
        warnings.append("Missing property_address")

    raw_amount = row.get(SALE_AMOUNT)
    if _is_missing(raw_amount):
        warnings.append("Missing sale_amount")
    else:
        amount = pd.to_numeric(_parse_sale_amount(raw_amount), errors="coerce")
        if pd.isna(amount):
            warnings.append(f"Non-numeric sale_amount: {raw_amount!r}")
        elif amount < 0:
            errors.append(f"Negative sale_amount: {amount}")

    raw_date = row.get(SALE_DATE)
    if _is_missing(raw_date):
        warnings.append("Missing sale_date")
    elif parse_sale_date(raw_date) is None:
        warnings.append(f"Unparseable sale_date: {raw_date!r}")

    is_valid = len(errors) == 0
    return ValidationResult(is_valid=is_valid, warnings=warnings, errors=errors)


def standardize_sale_dates(df: pd.DataFrame) -> pd.DataFrame:
    """Replace every parseable sale_date with its canonical date.

    Values that fail parsing are left untouched and rows are never dropped.
    """
    df = df.copy()
    values = []
    n_invalid = 0
    for raw in df[SALE_DATE]:
        parsed = parse_sale_date(raw)
        if parsed is None:
            if not _is_missing(raw):
                n_invalid += 1
            values.append(raw)
        else:
            values.append(parsed)

    df[SALE_DATE] = pd.Series(values, index=df.index, dtype=object)

    if n_invalid > 0:
        logger.warning(f"{n_invalid} sale dates could not be parsed and were left unchanged")
    return df


def backfill_addresses(
    df: pd.DataFrame, related_addresses: Mapping[str, str]
) -> pd.DataFrame:
    """Fill missing property addresses from related records with the same parcel_id.

    The related_addresses mapping takes precedence; rows it does not cover fall
    back to a related_property_address column when the frame has one.

    Args:
        df: Sales DataFrame
        related_addresses: Mapping of parcel_id to a known address

    Returns:
        DataFrame with addresses backfilled where a related address exists
    """
    df = df.copy()
    df[PROPERTY_ADDRESS] = df[PROPERTY_ADDRESS].astype(object)
    missing = df[PROPERTY_ADDRESS].isna().to_numpy()
    if not missing.any():
        return df

    related = df.loc[missing, PARCEL_ID].map(dict(related_addresses)).astype(object)
    if RELATED_PROPERTY_ADDRESS in df.columns:
        peer = df.loc[missing, RELATED_PROPERTY_ADDRESS].astype(object)
        related = related.where(related.notna(), peer)

    df.loc[missing, PROPERTY_ADDRESS] = related.to_numpy()

    n_filled = int(related.notna().sum())
    logger.info(f"Backfilled {n_filled} of {int(missing.sum())} missing property addresses")
    return df


def fill_missing_values(
    df: pd.DataFrame,
    unknown_address: str = CLEANING_DEFAULTS["unknown_address"],
    default_sale_amount: float = CLEANING_DEFAULTS["default_sale_amount"],
) -> pd.DataFrame:
    """Substitute placeholders for addresses and sale amounts that are still missing.

    Non-numeric sale amounts count as missing. Currency formatting such as
    '$120,000' is accepted.
    """
    df = df.copy()

    df[PROPERTY_ADDRESS] = df[PROPERTY_ADDRESS].astype(object)
    missing_address = df[PROPERTY_ADDRESS].isna().to_numpy()
    df.loc[missing_address, PROPERTY_ADDRESS] = unknown_address

    amounts = pd.to_numeric(df[SALE_AMOUNT].map(_parse_sale_amount), errors="coerce")
    n_non_numeric = int((amounts.isna() & df[SALE_AMOUNT].notna()).sum())
    missing_amount = amounts.isna()
    df[SALE_AMOUNT] = amounts.fillna(default_sale_amount)

    if missing_address.any():
        logger.warning(f"Set {int(missing_address.sum())} addresses to '{unknown_address}'")
    if missing_amount.any():
        logger.warning(
            f"Set {int(missing_amount.sum())} sale amounts to {default_sale_amount} "
            f"({n_non_numeric} non-numeric)"
        )
    return df


def deduplicate_sales(df: pd.DataFrame) -> pd.DataFrame:
    """Keep one sale per (parcel_id, sale_date).

    Rows are ranked by sale_date descending within each partition. Since the
    partition itself is keyed on sale_date every row ties, so the first row in
    original order wins. Missing dates partition together.
    """
    initial_count = len(df)
    rank = df.groupby(DEDUP_KEY, sort=False, dropna=False).cumcount() + 1
    df = df[(rank == 1).to_numpy()].copy()

    if len(df) < initial_count:
        logger.info(f"Removed {initial_count - len(df)} duplicate sales")
    return df


def _year_of(value) -> int | None:
    if isinstance(value, date) and value is not pd.NaT:
        return value.year
    return None


def add_sale_year(df: pd.DataFrame) -> pd.DataFrame:
    """Derive sale_year from sale_date; rows without a valid date get <NA>."""
    df = df.copy()
    df[SALE_YEAR] = pd.array([_year_of(v) for v in df[SALE_DATE]], dtype="Int64")
    return df


def build_address_lookup(
    df: pd.DataFrame,
    key_col: str = PARCEL_ID,
    address_col: str = PROPERTY_ADDRESS,
) -> dict[str, str]:
    """Build a parcel_id -> address mapping from rows that have an address.

    Works on a related table or on the sales batch itself, where other sales
    of the same parcel supply the address. The first known address per parcel
    wins.

    Args:
        df: DataFrame with key and address columns
        key_col: Parcel identifier column
        address_col: Address column

    Returns:
        Dict mapping parcel_id to address
    """
    missing_cols = [c for c in (key_col, address_col) if c not in df.columns]
    if missing_cols:
        raise CleaningContractError(f"Address lookup source missing columns: {missing_cols}")

    known = df.dropna(subset=[key_col, address_col])
    known = known.drop_duplicates(subset=[key_col], keep="first")
    lookup = dict(zip(known[key_col], known[address_col]))
    logger.info(f"Built address lookup for {len(lookup)} parcels")
    return lookup


def _check_contract(df, related_addresses) -> None:
    if df is None:
        raise CleaningContractError("Sales data must not be None")
    if not isinstance(df, pd.DataFrame):
        raise CleaningContractError(f"Expected a DataFrame, got {type(df).__name__}")
    if related_addresses is None:
        raise CleaningContractError("Related address lookup must not be None")
    if not isinstance(related_addresses, Mapping):
        raise CleaningContractError(
            f"Related address lookup must be a mapping, got {type(related_addresses).__name__}"
        )
    missing_cols = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing_cols:
        raise CleaningContractError(f"Sales data missing required columns: {missing_cols}")
    duplicated = sorted(set(df.columns[df.columns.duplicated()]))
    if duplicated:
        raise CleaningContractError(f"Sales data has duplicate columns: {duplicated}")


def clean_sales(
    df: pd.DataFrame,
    related_addresses: Mapping[str, str],
    unknown_address: str = CLEANING_DEFAULTS["unknown_address"],
    default_sale_amount: float = CLEANING_DEFAULTS["default_sale_amount"],
    verify: bool = CLEANING_DEFAULTS["verify"],
) -> pd.DataFrame:
    """Clean a batch of property sales.

    Performs, in order:
    - Date standardization (invalid dates left as-is)
    - Address backfill from related records
    - Placeholder fill for remaining missing addresses and amounts
    - Deduplication on (parcel_id, sale_date)
    - sale_year derivation

    The input frame is not modified.

    Args:
        df: Raw sales DataFrame
        related_addresses: Mapping of parcel_id to fallback address (may be empty)
        unknown_address: Placeholder for addresses with no related record
        default_sale_amount: Placeholder for missing sale amounts
        verify: If True, run verify_cleaned_sales on the result

    Returns:
        Cleaned DataFrame

    Raises:
        CleaningContractError: If df or related_addresses is missing, or df lacks required columns
        DataQualityError: If verify=True and the result fails verification
    """
    _check_contract(df, related_addresses)
    logger.info(f"Cleaning {len(df)} sale records")

    issues: Counter[str] = Counter()
    for idx, row in df.iterrows():
        result = validate_sale(row)
        for message in result.warnings + result.errors:
            issues[message.split(":")[0]] += 1
        if result.errors:
            logger.debug(f"Sale {row.get(PARCEL_ID, idx)}: {result.errors}")
    if issues:
        logger.warning(f"Data quality issues in input: {dict(issues)}")

    df = standardize_sale_dates(df)
    df = backfill_addresses(df, related_addresses)
    df = fill_missing_values(
        df, unknown_address=unknown_address, default_sale_amount=default_sale_amount
    )
    df = deduplicate_sales(df)
    df = add_sale_year(df)

    if verify:
        verify_cleaned_sales(df)

    logger.info(f"Cleaning complete. Final dataset: {len(df)} sales")
    return df


def clean(
    records: Sequence[PropertySaleRecord],
    related_addresses: Mapping[str, str],
    **kwargs,
) -> list[PropertySaleRecord]:
    """Clean a batch of PropertySaleRecord objects.

    Record-level counterpart of clean_sales(); keyword arguments are passed through.

    Args:
        records: Raw sale records
        related_addresses: Mapping of parcel_id to fallback address (may be empty)

    Returns:
        Cleaned records, in original relative order

    Raises:
        CleaningContractError: If records or related_addresses is None
    """
    if records is None:
        raise CleaningContractError("Sale records must not be None")
    if related_addresses is None:
        raise CleaningContractError("Related address lookup must not be None")

    cleaned = clean_sales(records_to_dataframe(records), related_addresses, **kwargs)
    return dataframe_to_records(cleaned)


def verify_cleaned_sales(df: pd.DataFrame) -> pd.DataFrame:
    """Check that a cleaned dataset holds the cleaning guarantees.

    Checks:
    - No missing property_address
    - No missing sale_amount
    - No duplicate (parcel_id, sale_date) pairs
    - sale_year matches the year of every valid sale_date, and is empty otherwise

    Args:
        df: Output of clean_sales()

    Returns:
        The same DataFrame, for chaining

    Raises:
        DataQualityError: If any check fails
    """
    errors: list[str] = []

    n_missing_address = int(df[PROPERTY_ADDRESS].isna().sum())
    if n_missing_address > 0:
        errors.append(f"{n_missing_address} rows missing property_address")

    n_missing_amount = int(df[SALE_AMOUNT].isna().sum())
    if n_missing_amount > 0:
        errors.append(f"{n_missing_amount} rows missing sale_amount")

    n_duplicates = int(df.duplicated(subset=DEDUP_KEY, keep="first").sum())
    if n_duplicates > 0:
        errors.append(f"{n_duplicates} duplicate (parcel_id, sale_date) rows")

    if SALE_YEAR not in df.columns:
        errors.append("Column 'sale_year' is missing")
    else:
        n_mismatch = 0
        for sale_date, sale_year in zip(df[SALE_DATE], df[SALE_YEAR]):
            expected = _year_of(sale_date)
            actual = None if pd.isna(sale_year) else int(sale_year)
            if expected != actual:
                n_mismatch += 1
        if n_mismatch > 0:
            errors.append(f"{n_mismatch} rows where sale_year does not match sale_date")

    if errors:
        logger.error(f"Cleaned data verification failed: {errors}")
        raise DataQualityError("Cleaned data verification failed:\n  - " + "\n  - ".join(errors))

    logger.info(f"Cleaned data verification passed: {len(df)} sales")
    return df
