"""Tests for record-level cleaning and record/DataFrame conversion."""

from datetime import date

import pandas as pd
import pytest

from housing_analysis.constants import UNKNOWN_ADDRESS
from housing_analysis.data import (
    CleaningContractError,
    PropertySaleRecord,
    clean,
    dataframe_to_records,
    records_to_dataframe,
)


class TestClean:
    """Test clean() over PropertySaleRecord batches."""

    def test_backfill_and_years_without_collapse(self):
        """Same parcel on different dates: both backfilled, both kept, years derived."""
        records = [
            PropertySaleRecord(parcel_id="P1", sale_date="2020-03-05"),
            PropertySaleRecord(parcel_id="P1", sale_date="2021-01-10", sale_amount=500),
        ]
        result = clean(records, {"P1": "100 Main St"})

        assert len(result) == 2
        assert [r.property_address for r in result] == ["100 Main St", "100 Main St"]
        assert [r.sale_year for r in result] == [2020, 2021]
        assert [r.sale_date for r in result] == [date(2020, 3, 5), date(2021, 1, 10)]
        assert result[0].sale_amount == 0
        assert result[1].sale_amount == 500

    def test_same_parcel_same_date_collapses(self):
        """Two sales of one parcel on one date leave a single record."""
        records = [
            PropertySaleRecord(parcel_id="P2", property_address="A", sale_date="2019-07-01"),
            PropertySaleRecord(parcel_id="P2", property_address="B", sale_date="2019-07-01"),
        ]
        result = clean(records, {})

        assert len(result) == 1
        assert result[0].property_address == "A"

    def test_output_has_no_gaps(self, raw_records: list[PropertySaleRecord]):
        """Every output record has an address and an amount."""
        result = clean(raw_records, {"P1": "100 Main St"})

        assert all(r.property_address is not None for r in result)
        assert all(r.sale_amount is not None for r in result)

    def test_one_record_per_key(self, raw_records: list[PropertySaleRecord]):
        """Each (parcel_id, sale_date) pair appears once."""
        result = clean(raw_records, {})
        keys = [(r.parcel_id, r.sale_date) for r in result]

        assert len(keys) == len(set(keys))
        assert len(result) == len(raw_records) - 1

    def test_unparseable_date_kept_without_year(self, raw_records: list[PropertySaleRecord]):
        """Raw invalid date is returned unchanged and sale_year stays None."""
        result = clean(raw_records, {})
        p3 = next(r for r in result if r.parcel_id == "P3")

        assert p3.sale_date == "31/31/2019"
        assert p3.sale_year is None

    @pytest.mark.parametrize("raw_date", ["today", "now", "Jan"])
    def test_relative_and_partial_dates_untouched(self, raw_date: str):
        """Relative words and partial dates are not dates: kept raw, no sale_year."""
        records = [PropertySaleRecord(parcel_id="P", sale_date=raw_date, sale_amount=1)]
        result = clean(records, {})

        assert result[0].sale_date == raw_date
        assert result[0].sale_year is None

    def test_related_address_beats_placeholder(self, raw_records: list[PropertySaleRecord]):
        """A related address is always chosen over the placeholder."""
        with_lookup = clean(raw_records, {"P1": "100 Main St", "P3": "7 Pine Rd"})
        without_lookup = clean(raw_records, {})

        p3_with = next(r for r in with_lookup if r.parcel_id == "P3")
        p3_without = next(r for r in without_lookup if r.parcel_id == "P3")
        assert p3_with.property_address == "7 Pine Rd"
        assert p3_without.property_address == UNKNOWN_ADDRESS

    def test_related_field_used_when_lookup_lacks_parcel(self):
        """A record's own related_property_address backfills when the lookup has no entry."""
        records = [
            PropertySaleRecord(
                parcel_id="P7", sale_date="2017-05-05", related_property_address="3 Peer Ln"
            )
        ]
        result = clean(records, {})

        assert result[0].property_address == "3 Peer Ln"

    def test_idempotent(self, raw_records: list[PropertySaleRecord]):
        """Cleaning cleaned records with an empty lookup is a no-op."""
        lookup = {"P1": "100 Main St"}
        once = clean(raw_records, lookup)

        assert clean(once, {}) == once

    def test_input_records_untouched(self, raw_records: list[PropertySaleRecord]):
        """The caller's records are not mutated."""
        snapshot = [PropertySaleRecord(**vars(r)) for r in raw_records]
        clean(raw_records, {"P1": "100 Main St"})

        assert raw_records == snapshot

    def test_empty_batch(self):
        """No records in, no records out."""
        assert clean([], {}) == []

    @pytest.mark.parametrize("records,lookup", [(None, {}), ([], None)])
    def test_missing_inputs_rejected(self, records, lookup):
        """None records or lookup is a contract violation."""
        with pytest.raises(CleaningContractError):
            clean(records, lookup)


class TestConversion:
    """Test record <-> DataFrame conversion."""

    def test_records_to_dataframe_columns(self, raw_records: list[PropertySaleRecord]):
        """One row per record, one column per field, order preserved."""
        df = records_to_dataframe(raw_records)

        assert len(df) == len(raw_records)
        assert list(df["parcel_id"]) == [r.parcel_id for r in raw_records]
        assert "related_property_address" in df.columns

    def test_empty_records_keep_columns(self):
        """An empty batch still produces the full column set."""
        df = records_to_dataframe([])

        assert df.empty
        assert "sale_date" in df.columns

    def test_missing_markers_become_none(self):
        """NaN, NaT and <NA> convert to None; Timestamps to dates."""
        df = pd.DataFrame(
            {
                "parcel_id": ["P1", "P2"],
                "property_address": ["A", float("nan")],
                "sale_date": pd.Series([pd.Timestamp("2020-01-01"), pd.NaT], dtype=object),
                "sale_amount": [1.5, float("nan")],
                "sale_year": pd.array([2020, None], dtype="Int64"),
            }
        )
        records = dataframe_to_records(df)

        assert records[0] == PropertySaleRecord(
            parcel_id="P1",
            property_address="A",
            sale_date=date(2020, 1, 1),
            sale_amount=1.5,
            sale_year=2020,
        )
        assert records[1] == PropertySaleRecord(parcel_id="P2")

    def test_extra_columns_ignored(self):
        """Columns that are not record fields are dropped."""
        df = pd.DataFrame({"parcel_id": ["P1"], "is_valid": [True]})

        assert dataframe_to_records(df) == [PropertySaleRecord(parcel_id="P1")]
