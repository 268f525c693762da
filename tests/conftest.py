"""
Pytest fixtures for the capital gains lot selector tests.

Provides common test data and utilities used across test modules.
"""

from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from capgains.models import Lot


ACCOUNT_CSV = """Date,Fund,Transaction type,Shares transacted,Share price,Amount
01/15/2018,Total Stock Market Index,Purchase,10.000,$50.00,$500.00
06/01/2019,Total Stock Market Index,Purchase,5.000,$80.00,$400.00
03/02/2020,Total Bond Market Index,Purchase,20.500,"$1,010.00","$20,705.00"
"""

FUND_PRICES_CSV = """Fund,Share price
Total Stock Market Index,$100.00
Total Bond Market Index,"$1,000.00"
"""


@pytest.fixture
def example_lots() -> list[Lot]:
    """Two lots of one fund: A (10 @ 50) and B (5 @ 80)."""
    return [
        Lot(
            purchase_date=date(2018, 1, 15),
            holding_id="F",
            shares=Decimal("10"),
            cost_basis_per_share=Decimal("50"),
        ),
        Lot(
            purchase_date=date(2019, 6, 1),
            holding_id="F",
            shares=Decimal("5"),
            cost_basis_per_share=Decimal("80"),
        ),
    ]


@pytest.fixture
def example_prices() -> dict[str, Decimal]:
    return {"F": Decimal("100")}


@pytest.fixture
def mixed_lots() -> list[Lot]:
    """Lots across three funds with gains, a loss and fractional shares."""
    return [
        Lot(date(2015, 3, 2), "VTSAX", Decimal("12.345"), Decimal("48.10")),
        Lot(date(2017, 8, 15), "VTSAX", Decimal("30.5"), Decimal("61.25")),
        Lot(date(2021, 11, 8), "VTSAX", Decimal("8.75"), Decimal("118.40")),
        Lot(date(2016, 5, 20), "VBTLX", Decimal("100"), Decimal("10.60")),
        Lot(date(2022, 1, 3), "VBTLX", Decimal("40.2"), Decimal("11.05")),
        Lot(date(2019, 9, 9), "VTIAX", Decimal("55"), Decimal("27.80")),
    ]


@pytest.fixture
def mixed_prices() -> dict[str, Decimal]:
    return {
        "VTSAX": Decimal("110.37"),
        "VBTLX": Decimal("9.85"),
        "VTIAX": Decimal("33.12"),
    }


@pytest.fixture
def account_file(tmp_path: Path) -> Path:
    """Account transaction history CSV in the brokerage export format."""
    path = tmp_path / "account.csv"
    path.write_text(ACCOUNT_CSV)
    return path


@pytest.fixture
def fund_prices_file(tmp_path: Path) -> Path:
    path = tmp_path / "fund_prices.csv"
    path.write_text(FUND_PRICES_CSV)
    return path


@pytest.fixture
def temp_output_dir(tmp_path: Path) -> Path:
    """Create a temporary directory for test outputs."""
    out = tmp_path / "output"
    out.mkdir()
    return out
