"""
Data loading and saving functions for CSV files.

Handles ingestion of the account transaction history and the fund price
list, as well as export of lot selections.
"""

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path

import pandas as pd

from capgains.models import Lot, SelectionResult
from capgains.data.schemas import (
    ACCOUNT_SCHEMA,
    FUND_PRICES_SCHEMA,
    SELECTION_SCHEMA,
    FileSchema,
)


logger = logging.getLogger(__name__)

DEFAULT_DATE_FORMAT = "%m/%d/%Y"


class DataLoadError(Exception):
    """Raised when data cannot be loaded or is invalid."""
    pass


def parse_usd(value_str: str) -> Decimal:
    """
    Parse a currency string (e.g., '$1,234.56', '-$12.00' or '($12.00)').

    Raises:
        ValueError: If the string is not a number once cleaned
    """
    cleaned = str(value_str).strip().strip('"').replace("$", "").replace(",", "")

    negative = False
    if cleaned.startswith("(") and cleaned.endswith(")"):
        # Accounting format for negatives
        negative = True
        cleaned = cleaned[1:-1]

    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Invalid currency value: {value_str!r}")

    if not value.is_finite():
        raise ValueError(f"Invalid currency value: {value_str!r}")

    return -value if negative else value


def parse_date(date_str: str, date_format: str = DEFAULT_DATE_FORMAT) -> date:
    """Parse a transaction date (default format MM/DD/YYYY)."""
    return datetime.strptime(str(date_str).strip(), date_format).date()


def _parse_shares(value_str: str) -> Decimal:
    try:
        value = Decimal(str(value_str).strip().replace(",", ""))
    except InvalidOperation:
        raise ValueError(f"Invalid share count: {value_str!r}")
    if not value.is_finite():
        raise ValueError(f"Invalid share count: {value_str!r}")
    return value


def load_account(
    file_path: str | Path,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> list[Lot]:
    """
    Load purchase lots from an account transaction history CSV file.

    Expected columns: Date, Fund, Transaction type, Shares transacted,
    Share price, Amount. Every row becomes one Lot; the share price of the
    transaction is the lot's cost basis per share.

    Args:
        file_path: Path to the account CSV file
        date_format: strptime format of the Date column

    Returns:
        List of Lot objects in file order

    Raises:
        DataLoadError: If file cannot be loaded or a row is invalid
    """
    file_path = Path(file_path)
    df = _load_csv(file_path, ACCOUNT_SCHEMA)

    lots = []
    for index, row in df.iterrows():
        line = index + 2  # header is line 1
        try:
            lots.append(
                Lot(
                    purchase_date=parse_date(row["Date"], date_format),
                    holding_id=str(row["Fund"]).strip(),
                    shares=_parse_shares(row["Shares transacted"]),
                    cost_basis_per_share=parse_usd(row["Share price"]),
                )
            )
        except ValueError as e:
            raise DataLoadError(f"{file_path}, line {line}: {e}")

    logger.info("Loaded %d lots from %s", len(lots), file_path)
    return lots


def load_fund_prices(file_path: str | Path) -> dict[str, Decimal]:
    """
    Load current fund prices from CSV file.

    A later row for the same fund overrides an earlier one.

    Args:
        file_path: Path to CSV file with columns: Fund, Share price

    Returns:
        Dictionary mapping fund -> price per share

    Raises:
        DataLoadError: If file cannot be loaded or a row is invalid
    """
    file_path = Path(file_path)
    df = _load_csv(file_path, FUND_PRICES_SCHEMA)

    prices = {}
    for index, row in df.iterrows():
        fund = str(row["Fund"]).strip()
        try:
            prices[fund] = parse_usd(row["Share price"])
        except ValueError as e:
            raise DataLoadError(f"{file_path}, line {index + 2}: {e}")

    logger.info("Loaded %d fund prices from %s", len(prices), file_path)
    return prices


def save_selection(
    result: SelectionResult,
    output_path: str | Path,
) -> Path:
    """
    Save a lot selection to CSV file.

    Args:
        result: Selection to save
        output_path: Path for output CSV file

    Returns:
        Path to the saved file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    records = []
    for entry in result.entries:
        ratio = entry.figures.gain_ratio
        records.append({
            "purchase_date": entry.lot.purchase_date.isoformat(),
            "holding_id": entry.lot.holding_id,
            "shares": float(entry.lot.shares),
            "original_shares": float(entry.original_shares),
            "partial": entry.is_partial,
            "cost_basis_per_share": float(entry.lot.cost_basis_per_share),
            "price_per_share": float(entry.figures.price_per_share),
            "sale_amount": float(entry.figures.sale_amount),
            "capital_gain": float(entry.figures.capital_gain),
            "gain_ratio": float(ratio) if ratio is not None else None,
        })

    df = pd.DataFrame(records, columns=SELECTION_SCHEMA.all_columns)
    df.to_csv(output_path, index=False)

    return output_path


def _load_csv(file_path: Path, schema: FileSchema) -> pd.DataFrame:
    """
    Load a CSV file as strings and validate against schema.

    Args:
        file_path: Path to CSV file
        schema: Expected file schema

    Returns:
        Loaded DataFrame

    Raises:
        DataLoadError: If file cannot be loaded or has missing columns
    """
    if not file_path.exists():
        raise DataLoadError(f"File not found: {file_path}")

    try:
        df = pd.read_csv(
            file_path,
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
        )
    except Exception as e:
        raise DataLoadError(f"Failed to load CSV file {file_path}: {e}")

    df.columns = [str(c).strip() for c in df.columns]

    # Validate columns
    is_valid, missing = schema.validate_columns(df.columns.tolist())
    if not is_valid:
        raise DataLoadError(
            f"File {file_path} is missing required columns: {missing}"
        )

    return df
