"""
Sale figure calculations for tax lots.

Derives the sale amount, capital gain and gain ratio of selling a lot at
the current price of its holding. The gain ratio (gain per dollar of
proceeds) is what lots are ranked by when choosing what to sell.
"""

from decimal import Decimal
from typing import Optional

from capgains.models import Lot, SaleFigures


class SelectionError(Exception):
    """Base class for errors that abort a lot selection run."""
    pass


class MissingPriceError(SelectionError):
    """Raised when holdings referenced by the lots have no current price."""

    def __init__(self, holdings: list[str] | tuple[str, ...]):
        self.holdings = tuple(sorted(holdings))
        self.holding = self.holdings[0] if self.holdings else None
        super().__init__(f"Missing price for fund: {', '.join(self.holdings)}")


def check_prices(lots: list[Lot], prices: dict[str, Decimal]) -> None:
    """
    Verify every holding referenced by the lots has a price.

    The whole distinct set of holdings is checked before any figures are
    computed, so a missing price is reported even for holdings whose lots
    would never be sold.

    Args:
        lots: Lots to be considered for sale
        prices: Current price per share by holding

    Raises:
        MissingPriceError: If any holding lacks a price
    """
    holdings = {lot.holding_id for lot in lots}
    missing = [h for h in holdings if h not in prices]
    if missing:
        raise MissingPriceError(missing)


def compute_sale_figures(lot: Lot, prices: dict[str, Decimal]) -> SaleFigures:
    """
    Compute the figures for selling a whole lot at its holding's price.

    Args:
        lot: Lot to value
        prices: Current price per share by holding (must contain the lot's holding)

    Returns:
        SaleFigures for all shares of the lot
    """
    return figures_for_shares(lot, prices[lot.holding_id], lot.shares)


def figures_for_shares(lot: Lot, price: Decimal, shares: Decimal) -> SaleFigures:
    """Sale figures for selling ``shares`` shares of ``lot`` at ``price``."""
    sale_amount = price * shares
    capital_gain = (price - lot.cost_basis_per_share) * shares

    # Zero shares or a zero price leaves the ratio undefined
    gain_ratio: Optional[Decimal] = None
    if sale_amount != Decimal("0"):
        gain_ratio = capital_gain / sale_amount

    return SaleFigures(
        price_per_share=price,
        sale_amount=sale_amount,
        capital_gain=capital_gain,
        gain_ratio=gain_ratio,
    )


def compute_all(lots: list[Lot], prices: dict[str, Decimal]) -> list[SaleFigures]:
    """
    Compute sale figures for every lot.

    Args:
        lots: Lots to value
        prices: Current price per share by holding

    Returns:
        List of SaleFigures aligned by index with ``lots``

    Raises:
        MissingPriceError: If any holding lacks a price
    """
    check_prices(lots, prices)
    return [compute_sale_figures(lot, prices) for lot in lots]


def ranking_key(figures: SaleFigures) -> tuple[bool, Decimal]:
    """
    Sort key giving a total order over gain ratios.

    Finite ratios sort ascending; undefined ratios sort after all of them.
    """
    if figures.gain_ratio is None:
        return (True, Decimal("0"))
    return (False, figures.gain_ratio)
