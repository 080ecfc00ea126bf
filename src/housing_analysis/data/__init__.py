"""Data cleaning, validation and CSV loading utilities."""

from housing_analysis.data.cleaning import (
    CleaningContractError,
    DataQualityError,
    build_address_lookup,
    clean,
    clean_sales,
    validate_sale,
    verify_cleaned_sales,
)
from housing_analysis.data.loading import (
    load_related_addresses,
    load_sales_csv,
    save_cleaned_csv,
)
from housing_analysis.data.records import (
    PropertySaleRecord,
    dataframe_to_records,
    records_to_dataframe,
)

__all__ = [
    "CleaningContractError",
    "DataQualityError",
    "PropertySaleRecord",
    "build_address_lookup",
    "clean",
    "clean_sales",
    "dataframe_to_records",
    "load_related_addresses",
    "load_sales_csv",
    "records_to_dataframe",
    "save_cleaned_csv",
    "validate_sale",
    "verify_cleaned_sales",
]
