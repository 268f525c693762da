"""
Core data models for the capital gains lot selector.

This module defines the records passed between ingestion, lot selection and
reporting: purchase lots, the sale figures derived for a lot at a current
price, selected (possibly partial) lots and the overall selection result.
All monetary and share quantities use Decimal for precision.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class ActionType(Enum):
    """Types of logged actions for the decision log."""
    CONFIG_LOADED = "CONFIG_LOADED"
    LOTS_LOADED = "LOTS_LOADED"
    SELECTION_COMPUTED = "SELECTION_COMPUTED"
    SELECTION_FAILED = "SELECTION_FAILED"


@dataclass(frozen=True)
class Lot:
    """
    A single purchase of shares of one holding.

    Lots are created once at ingestion and never mutated. A lot has no
    synthetic key; it is identified by its position in the portfolio.

    Attributes:
        purchase_date: Date the shares were bought
        holding_id: Fund or security the shares belong to
        shares: Number of shares (may be fractional)
        cost_basis_per_share: Per-share purchase price
    """
    purchase_date: date
    holding_id: str
    shares: Decimal
    cost_basis_per_share: Decimal


@dataclass(frozen=True)
class SaleFigures:
    """
    Figures for selling a lot (or part of one) at the current price.

    Attributes:
        price_per_share: Current price of the holding
        sale_amount: price_per_share * shares
        capital_gain: (price_per_share - cost_basis_per_share) * shares
        gain_ratio: capital_gain / sale_amount, or None when sale_amount is 0
    """
    price_per_share: Decimal
    sale_amount: Decimal
    capital_gain: Decimal
    gain_ratio: Optional[Decimal]

    def net_amount(self, tax_rate: Decimal) -> Decimal:
        """Proceeds left after withholding tax_rate of the capital gain."""
        return self.sale_amount - self.capital_gain * tax_rate


@dataclass(frozen=True)
class SelectedLot:
    """
    One entry of a lot selection.

    For a partial sale, ``lot`` is a new Lot carrying the reduced share
    count, never the original lot object.

    Attributes:
        lot: Lot (or partial lot) being sold
        figures: Sale figures for exactly the shares being sold
        original_shares: Share count of the lot before any split
    """
    lot: Lot
    figures: SaleFigures
    original_shares: Decimal

    @property
    def is_partial(self) -> bool:
        return self.lot.shares < self.original_shares


@dataclass
class SelectionResult:
    """
    Ordered result of a lot selection run.

    Entries are in ranking order (ascending gain ratio); sorting for
    presentation is left to the reporting layer.

    Attributes:
        entries: Selected lots in the order they were taken
        target: Cash amount that was requested
        tax_rate: Flat tax rate applied to realized gains
    """
    entries: list[SelectedLot]
    target: Decimal
    tax_rate: Decimal = Decimal("0")

    @property
    def total_amount(self) -> Decimal:
        return sum((e.figures.sale_amount for e in self.entries), Decimal("0"))

    @property
    def total_capital_gain(self) -> Decimal:
        return sum((e.figures.capital_gain for e in self.entries), Decimal("0"))

    @property
    def taxes(self) -> Decimal:
        """Tax withheld on the realized gain of the whole selection."""
        return self.total_capital_gain * self.tax_rate

    @property
    def net_amount(self) -> Decimal:
        """Tax-adjusted proceeds (total_amount - taxes)."""
        return self.total_amount - self.taxes


@dataclass
class SelectionConfig:
    """
    Run configuration loaded from YAML.

    Attributes:
        account_file: Path to the transaction history CSV
        fundprice_file: Path to the fund price CSV
        sell_target: Cash amount to raise
        tax_rate: Flat tax rate applied to capital gains (0 <= rate < 1)
        output_dir: Directory for the decision log and exports
        date_format: strptime format of the account file's Date column
    """
    account_file: str
    fundprice_file: str
    sell_target: Decimal
    tax_rate: Decimal = Decimal("0")
    output_dir: str = "output"
    date_format: str = "%m/%d/%Y"


@dataclass
class DecisionLogEntry:
    """
    Entry for the append-only decision log.

    Attributes:
        timestamp: When the action occurred
        action_type: Type of action
        run_id: Identifier of the run the action belongs to (if any)
        details: JSON-serializable details dictionary
    """
    timestamp: datetime
    action_type: ActionType
    run_id: Optional[str]
    details: dict = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        action_type: ActionType,
        run_id: Optional[str],
        details: dict,
    ) -> "DecisionLogEntry":
        """Factory method with auto-generated timestamp."""
        return cls(
            timestamp=datetime.now(),
            action_type=action_type,
            run_id=run_id,
            details=details,
        )
