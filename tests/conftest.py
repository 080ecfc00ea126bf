"""Shared test fixtures for housing analysis tests."""

from datetime import date

import matplotlib
import pandas as pd
import pytest

from housing_analysis.data.records import PropertySaleRecord

matplotlib.use("Agg")


@pytest.fixture
def sample_sales_df() -> pd.DataFrame:
    """Realistic sample of Nashville-style raw sales for testing.

    Includes:
    - Several date formats and one unparseable date
    - Missing addresses, some recoverable from related records
    - Missing and currency-formatted sale amounts
    - A duplicate (parcel_id, sale_date) pair
    """
    data = [
        # Complete records
        {
            "parcel_id": "007 00 0 125.00",
            "property_address": "1808  FOX CHASE DR, GOODLETTSVILLE",
            "sale_date": "April 9, 2013",
            "sale_amount": "240000",
            "property_zip_code": "37072",
            "property_size": 2.3,
        },
        {
            "parcel_id": "007 00 0 130.00",
            "property_address": "1832  FOX CHASE DR, GOODLETTSVILLE",
            "sale_date": "2014-06-10",
            "sale_amount": "366000",
            "property_zip_code": "37072",
            "property_size": 3.5,
        },
        {
            "parcel_id": "007 14 0 002.00",
            "property_address": "1864 FOX CHASE  DR, GOODLETTSVILLE",
            "sale_date": "09/26/2013",
            "sale_amount": "$435,000",
            "property_zip_code": "37072",
            "property_size": 2.9,
        },
        {
            "parcel_id": "026 05 0 017.00",
            "property_address": "1853  FOX CHASE DR, GOODLETTSVILLE",
            "sale_date": "2015-01-29",
            "sale_amount": "255000",
            "property_zip_code": "37072",
            "property_size": 2.6,
        },
        {
            "parcel_id": "025 07 0 031.00",
            "property_address": "5914  WOODLAWN DR, NASHVILLE",
            "sale_date": "2016-10-10",
            "sale_amount": "150000",
            "property_zip_code": "37205",
            "property_size": 1.2,
        },
        # Missing address, related record available
        {
            "parcel_id": "025 07 0 031.00",
            "property_address": None,
            "sale_date": "2015-03-02",
            "sale_amount": "138000",
            "property_zip_code": "37205",
            "property_size": 1.2,
        },
        # Missing address, no related record
        {
            "parcel_id": "033 15 0 123.00",
            "property_address": None,
            "sale_date": "2014-07-18",
            "sale_amount": "119000",
            "property_zip_code": "37207",
            "property_size": 0.8,
        },
        # Missing sale amount
        {
            "parcel_id": "034 07 0 048.00",
            "property_address": "2504  WHITES CREEK PIKE, NASHVILLE",
            "sale_date": "2016-02-22",
            "sale_amount": None,
            "property_zip_code": "37207",
            "property_size": 0.5,
        },
        # Unparseable sale date
        {
            "parcel_id": "043 03 0 085.00",
            "property_address": "3305  LINCOLN AVE, NASHVILLE",
            "sale_date": "not a date",
            "sale_amount": "98000",
            "property_zip_code": "37216",
            "property_size": 0.7,
        },
        # Duplicate of the first record (same parcel, same date in another format)
        {
            "parcel_id": "007 00 0 125.00",
            "property_address": "1808  FOX CHASE DR, GOODLETTSVILLE",
            "sale_date": "2013-04-09",
            "sale_amount": "245000",
            "property_zip_code": "37072",
            "property_size": 2.3,
        },
    ]
    return pd.DataFrame(data)


@pytest.fixture
def related_addresses() -> dict[str, str]:
    """Parcel -> address lookup from a related table."""
    return {"025 07 0 031.00": "5914  WOODLAWN DR, NASHVILLE"}


@pytest.fixture
def raw_records() -> list[PropertySaleRecord]:
    """Raw records exercising every cleaning stage."""
    return [
        PropertySaleRecord(parcel_id="P1", sale_date="2020-03-05"),
        PropertySaleRecord(parcel_id="P1", sale_date="2021-01-10", sale_amount=500),
        PropertySaleRecord(
            parcel_id="P2", property_address="12 Elm St", sale_date="2019-07-01", sale_amount=300
        ),
        PropertySaleRecord(
            parcel_id="P2", property_address="12 Elm St", sale_date="2019-07-01", sale_amount=310
        ),
        PropertySaleRecord(parcel_id="P3", sale_date="31/31/2019", sale_amount=100),
        PropertySaleRecord(
            parcel_id="P4", property_address="9 Oak Ave", sale_date=date(2018, 11, 30)
        ),
    ]
