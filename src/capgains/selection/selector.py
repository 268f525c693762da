"""
Lot selection minimizing realized capital gains.

Given the lots of a portfolio, the current price of each holding and a cash
amount to raise, picks which lots to sell so the realized capital gain is
kept low:

1. Lots are ranked by ascending gain ratio (capital gain per dollar of
   proceeds), so the lots that cost the least tax per dollar go first.
2. Lots are taken whole, in ranking order, until the proceeds net of a flat
   tax on the running gain exceed the target.
3. The lot that crosses the target is cut down to the smallest whole number
   of shares that still reaches it.

This is a greedy heuristic. The prefix is not re-optimized once tax is
applied.

Note: lots carrying a loss (negative gain) are ranked and summed exactly
like gains. No loss-harvesting logic is implemented.
"""

import logging
from decimal import Decimal, ROUND_DOWN, ROUND_FLOOR

from capgains.models import Lot, SaleFigures, SelectedLot, SelectionResult
from capgains.selection.gains import (
    SelectionError,
    compute_all,
    figures_for_shares,
    ranking_key,
)


logger = logging.getLogger(__name__)


class InsufficientFundsError(SelectionError):
    """Raised when selling every lot still falls short of the target."""

    def __init__(self, target: Decimal, available: Decimal):
        self.target = target
        self.available = available
        super().__init__(
            f"Insufficient funds: target {target} exceeds the {available} "
            f"available from all lots after tax"
        )


def rank_lots(lots: list[Lot], figures: list[SaleFigures]) -> list[int]:
    """
    Rank lot indices by ascending gain ratio.

    The sort is stable, so lots with equal ratios keep their input order.
    Lots with an undefined ratio (zero sale amount) rank last.

    Args:
        lots: Lots being ranked
        figures: Sale figures aligned by index with ``lots``

    Returns:
        Indices into ``lots`` in ranking order
    """
    return sorted(range(len(lots)), key=lambda i: ranking_key(figures[i]))


def shares_to_reach(
    figures: SaleFigures,
    shares: Decimal,
    remaining: Decimal,
    tax_rate: Decimal,
) -> Decimal:
    """
    Smallest whole number of shares whose net proceeds cover ``remaining``.

    Args:
        figures: Sale figures for the whole lot
        shares: Share count of the whole lot
        remaining: Net-of-tax amount still needed before this lot
        tax_rate: Flat tax rate on capital gains

    Returns:
        floor(remaining / net proceeds per share) + 1
    """
    per_share = figures.net_amount(tax_rate) / shares
    return (remaining / per_share).to_integral_value(rounding=ROUND_FLOOR) + 1


def minimum_cap_gains(
    lots: list[Lot],
    prices: dict[str, Decimal],
    sell_target: Decimal,
    tax_rate: Decimal = Decimal("0"),
) -> SelectionResult:
    """
    Choose lots to sell so that ``sell_target`` is raised net of tax.

    Args:
        lots: All lots available for sale
        prices: Current price per share by holding
        sell_target: Cash amount to raise (must be positive)
        tax_rate: Flat tax rate withheld from realized gains (0 <= rate < 1)

    Returns:
        SelectionResult with entries in ranking order

    Raises:
        ValueError: If sell_target or tax_rate is out of range
        MissingPriceError: If any holding referenced by the lots has no price
        InsufficientFundsError: If all lots together fall short of the target
    """
    if sell_target <= Decimal("0"):
        raise ValueError(f"sell_target must be positive, got {sell_target}")
    if not Decimal("0") <= tax_rate < Decimal("1"):
        raise ValueError(f"tax_rate must be in [0, 1), got {tax_rate}")

    figures = compute_all(lots, prices)
    ranking = rank_lots(lots, figures)

    amount = Decimal("0")
    capital_gain = Decimal("0")
    entries: list[SelectedLot] = []

    for i in ranking:
        lot = lots[i]
        lot_figures = figures[i]

        pre_net = amount - capital_gain * tax_rate
        amount += lot_figures.sale_amount
        capital_gain += lot_figures.capital_gain

        if amount - capital_gain * tax_rate <= sell_target:
            entries.append(SelectedLot(lot, lot_figures, lot.shares))
            continue

        # Target crossed inside this lot; sell only the whole shares needed
        n = shares_to_reach(lot_figures, lot.shares, sell_target - pre_net, tax_rate)
        whole_shares = lot.shares.to_integral_value(rounding=ROUND_DOWN)

        if n < whole_shares:
            logger.debug(
                "Splitting %s lot of %s: selling %s shares",
                lot.holding_id, lot.purchase_date, n,
            )
            partial = Lot(
                purchase_date=lot.purchase_date,
                holding_id=lot.holding_id,
                shares=n,
                cost_basis_per_share=lot.cost_basis_per_share,
            )
            partial_figures = figures_for_shares(lot, lot_figures.price_per_share, n)
            entries.append(SelectedLot(partial, partial_figures, lot.shares))
        else:
            entries.append(SelectedLot(lot, lot_figures, lot.shares))
        break
    else:
        available = amount - capital_gain * tax_rate
        if available < sell_target:
            raise InsufficientFundsError(sell_target, available)

    result = SelectionResult(entries=entries, target=sell_target, tax_rate=tax_rate)
    logger.debug(
        "Selected %d of %d lots: amount=%s capital_gain=%s",
        len(entries), len(lots), result.total_amount, result.total_capital_gain,
    )
    return result
