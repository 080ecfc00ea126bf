"""Central constants module for housing analysis.

This module consolidates constants used across the project, including:
- Column names for the cleaned sales frame
- Substitution values for missing data
- Source header mapping for raw CSV exports
- Cleaning and analysis defaults
"""

# Cleaned frame columns
PARCEL_ID = "parcel_id"
PROPERTY_ADDRESS = "property_address"
RELATED_PROPERTY_ADDRESS = "related_property_address"
SALE_DATE = "sale_date"
SALE_AMOUNT = "sale_amount"
SALE_YEAR = "sale_year"
PROPERTY_ZIP_CODE = "property_zip_code"
PROPERTY_SIZE = "property_size"

REQUIRED_COLUMNS = [PARCEL_ID, PROPERTY_ADDRESS, SALE_DATE, SALE_AMOUNT]

# Composite key identifying duplicate sale records
DEDUP_KEY = [PARCEL_ID, SALE_DATE]

# Placeholders for missing data
UNKNOWN_ADDRESS = "Unknown Address"
DEFAULT_SALE_AMOUNT = 0

# Raw export headers -> cleaned frame columns
# SalePrice is the Nashville export name; SaleAmount is used by the reporting queries
SOURCE_COLUMN_MAP = {
    "ParcelID": PARCEL_ID,
    "PropertyAddress": PROPERTY_ADDRESS,
    "RelatedPropertyAddress": RELATED_PROPERTY_ADDRESS,
    "SaleDate": SALE_DATE,
    "SaleAmount": SALE_AMOUNT,
    "SalePrice": SALE_AMOUNT,
    "SaleYear": SALE_YEAR,
    "PropertyZipCode": PROPERTY_ZIP_CODE,
    "PropertySize": PROPERTY_SIZE,
}

CLEANING_DEFAULTS = {
    "unknown_address": UNKNOWN_ADDRESS,
    "default_sale_amount": DEFAULT_SALE_AMOUNT,
    "verify": False,
}

ANALYSIS_DEFAULTS = {
    "iqr_multiplier": 1.5,
    "top_n": 5,
    "correlation_decimals": 2,
}

__all__ = [
    "PARCEL_ID",
    "PROPERTY_ADDRESS",
    "RELATED_PROPERTY_ADDRESS",
    "SALE_DATE",
    "SALE_AMOUNT",
    "SALE_YEAR",
    "PROPERTY_ZIP_CODE",
    "PROPERTY_SIZE",
    "REQUIRED_COLUMNS",
    "DEDUP_KEY",
    "UNKNOWN_ADDRESS",
    "DEFAULT_SALE_AMOUNT",
    "SOURCE_COLUMN_MAP",
    "CLEANING_DEFAULTS",
    "ANALYSIS_DEFAULTS",
]
