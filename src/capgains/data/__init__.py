"""
Data ingestion module for the capital gains lot selector.

Provides functionality for loading the account transaction history and
fund prices from CSV files, and for exporting lot selections.
"""

from capgains.data.loaders import (
    DataLoadError,
    load_account,
    load_fund_prices,
    save_selection,
    parse_usd,
    parse_date,
)
from capgains.data.schemas import (
    ACCOUNT_SCHEMA,
    FUND_PRICES_SCHEMA,
    SELECTION_SCHEMA,
)

__all__ = [
    "DataLoadError",
    "load_account",
    "load_fund_prices",
    "save_selection",
    "parse_usd",
    "parse_date",
    "ACCOUNT_SCHEMA",
    "FUND_PRICES_SCHEMA",
    "SELECTION_SCHEMA",
]
