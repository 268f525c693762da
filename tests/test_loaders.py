"""
Tests for CSV ingestion and selection export.
"""

from datetime import date
from decimal import Decimal
from pathlib import Path

import pandas as pd
import pytest

from capgains.data.loaders import (
    DataLoadError,
    load_account,
    load_fund_prices,
    parse_date,
    parse_usd,
    save_selection,
)
from capgains.data.schemas import SELECTION_SCHEMA
from capgains.models import Lot
from capgains.selection.selector import minimum_cap_gains


class TestParseUsd:
    """Tests for currency string parsing."""

    def test_plain_number(self):
        assert parse_usd("12.5") == Decimal("12.5")

    def test_dollar_sign_and_commas(self):
        assert parse_usd("$3,500,000.00") == Decimal("3500000.00")

    def test_negative(self):
        assert parse_usd("-$1,234.56") == Decimal("-1234.56")

    def test_accounting_negative(self):
        assert parse_usd("($12.00)") == Decimal("-12.00")

    def test_surrounding_whitespace(self):
        assert parse_usd("  $7.25 ") == Decimal("7.25")

    @pytest.mark.parametrize("value", ["", "$", "abc", "NaN", "$1.2.3"])
    def test_invalid(self, value: str):
        with pytest.raises(ValueError):
            parse_usd(value)


class TestParseDate:
    """Tests for transaction date parsing."""

    def test_default_format(self):
        assert parse_date("03/02/2020") == date(2020, 3, 2)

    def test_custom_format(self):
        assert parse_date("2020-03-02", "%Y-%m-%d") == date(2020, 3, 2)

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_date("2020-03-02")


class TestLoadAccount:
    """Tests for the load_account function."""

    def test_loads_every_row(self, account_file: Path):
        lots = load_account(account_file)

        assert len(lots) == 3
        assert lots[0] == Lot(
            purchase_date=date(2018, 1, 15),
            holding_id="Total Stock Market Index",
            shares=Decimal("10.000"),
            cost_basis_per_share=Decimal("50.00"),
        )
        assert lots[2].holding_id == "Total Bond Market Index"
        assert lots[2].shares == Decimal("20.5")
        assert lots[2].cost_basis_per_share == Decimal("1010")

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(DataLoadError, match="File not found"):
            load_account(tmp_path / "nope.csv")

    def test_missing_columns(self, tmp_path: Path):
        path = tmp_path / "account.csv"
        path.write_text("Date,Fund\n01/02/2020,F\n")

        with pytest.raises(DataLoadError, match="missing required columns"):
            load_account(path)

    def test_bad_date_names_line(self, tmp_path: Path):
        path = tmp_path / "account.csv"
        path.write_text(
            "Date,Fund,Transaction type,Shares transacted,Share price,Amount\n"
            "01/02/2020,F,Purchase,1,$10.00,$10.00\n"
            "2020-01-03,F,Purchase,1,$10.00,$10.00\n"
        )

        with pytest.raises(DataLoadError, match="line 3"):
            load_account(path)

    def test_bad_price(self, tmp_path: Path):
        path = tmp_path / "account.csv"
        path.write_text(
            "Date,Fund,Transaction type,Shares transacted,Share price,Amount\n"
            "01/02/2020,F,Purchase,1,ten dollars,$10.00\n"
        )

        with pytest.raises(DataLoadError):
            load_account(path)

    def test_custom_date_format(self, tmp_path: Path):
        path = tmp_path / "account.csv"
        path.write_text(
            "Date,Fund,Transaction type,Shares transacted,Share price,Amount\n"
            "2020-01-02,F,Purchase,1.5,$10.00,$15.00\n"
        )

        lots = load_account(path, date_format="%Y-%m-%d")

        assert lots[0].purchase_date == date(2020, 1, 2)
        assert lots[0].shares == Decimal("1.5")


class TestLoadFundPrices:
    """Tests for the load_fund_prices function."""

    def test_loads_prices(self, fund_prices_file: Path):
        prices = load_fund_prices(fund_prices_file)

        assert prices == {
            "Total Stock Market Index": Decimal("100.00"),
            "Total Bond Market Index": Decimal("1000.00"),
        }

    def test_later_row_overrides(self, tmp_path: Path):
        path = tmp_path / "prices.csv"
        path.write_text("Fund,Share price\nF,$1.00\nF,$2.00\n")

        assert load_fund_prices(path) == {"F": Decimal("2.00")}

    def test_bad_price_names_line(self, tmp_path: Path):
        path = tmp_path / "prices.csv"
        path.write_text("Fund,Share price\nF,$1.00\nG,n/a\n")

        with pytest.raises(DataLoadError, match="line 3"):
            load_fund_prices(path)


class TestSaveSelection:
    """Tests for the save_selection function."""

    def test_writes_one_row_per_entry(
        self,
        example_lots: list[Lot],
        example_prices: dict[str, Decimal],
        temp_output_dir: Path,
    ):
        result = minimum_cap_gains(example_lots, example_prices, Decimal("600"))

        path = save_selection(result, temp_output_dir / "nested" / "selection.csv")

        assert path.exists()
        df = pd.read_csv(path)
        assert df.columns.tolist() == SELECTION_SCHEMA.all_columns
        assert len(df) == 2
        assert df["shares"].tolist() == [5.0, 2.0]
        assert df["original_shares"].tolist() == [5.0, 10.0]
        assert df["partial"].tolist() == [False, True]
        assert df["sale_amount"].sum() == pytest.approx(700.0)
