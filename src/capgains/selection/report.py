"""
Presentation of lot selections.

Sorting for display, summary totals and fixed-width text rendering used by
the command line interface. Nothing here affects which lots are selected.
"""

from decimal import Decimal
from typing import Optional

from capgains.models import Lot, SaleFigures, SelectedLot, SelectionResult
from capgains.selection.selector import rank_lots


HEADER_COLUMNS = ("date", "fund", "amount", "cap gains", "cg ratio", "shares")


def sort_by_purchase_date(
    result: SelectionResult,
    most_recent_first: bool = True,
) -> list[SelectedLot]:
    """
    Order selected lots by purchase date for display.

    Args:
        result: Selection to order
        most_recent_first: Newest purchases first (default) or oldest first

    Returns:
        New list of entries; lots bought on the same date keep ranking order
    """
    return sorted(
        result.entries,
        key=lambda e: e.lot.purchase_date,
        reverse=most_recent_first,
    )


def format_shares(shares: Decimal) -> str:
    """Whole share counts are flagged since they are uncommon in fund histories."""
    if shares == shares.to_integral_value():
        return f"{int(shares):>10} [whole]"
    return f"{shares:10.3f}"


def format_ratio(ratio: Optional[Decimal]) -> str:
    if ratio is None:
        return f"{'n/a':>10}"
    return f"{ratio:10.3f}"


def summarize_selection(result: SelectionResult) -> dict:
    """
    Generate summary statistics for a selection.

    Args:
        result: Selection to summarize

    Returns:
        Dictionary with summary statistics
    """
    return {
        "entry_count": len(result.entries),
        "partial_count": sum(1 for e in result.entries if e.is_partial),
        "target": result.target,
        "tax_rate": result.tax_rate,
        "total_amount": result.total_amount,
        "total_capital_gain": result.total_capital_gain,
        "taxes": result.taxes,
        "net_amount": result.net_amount,
    }


def _render_row(lot: Lot, figures: SaleFigures) -> str:
    return (
        f"  {lot.purchase_date.isoformat():>10}, {lot.holding_id:>25}, "
        f"{figures.sale_amount:10.3f}, {figures.capital_gain:10.3f}, "
        f"{format_ratio(figures.gain_ratio)}, {format_shares(lot.shares)}"
    )


def _render_header() -> str:
    date_col, fund, amount, gains, ratio, shares = HEADER_COLUMNS
    return (
        f"  {date_col:>10}, {fund:>25}, {amount:>10}, "
        f"{gains:>10}, {ratio:>10}, {shares:>10}"
    )


def render_selection(result: SelectionResult) -> list[str]:
    """
    Render a selection as text lines, most recent purchases first.

    Tax and net amount lines are only included for a non-zero tax rate.

    Args:
        result: Selection to render

    Returns:
        List of output lines
    """
    lines = ["Selling the following records:", _render_header()]
    for entry in sort_by_purchase_date(result):
        lines.append(_render_row(entry.lot, entry.figures))

    lines.append("will result in")
    lines.append(f"amount:     {result.total_amount:10.3f}")
    lines.append(f"cap gains:  {result.total_capital_gain:10.3f}")
    if result.tax_rate != Decimal("0"):
        lines.append(f"taxes:      {result.taxes:10.3f}")
        lines.append(f"net amount: {result.net_amount:10.3f}")

    return lines


def render_ranking(lots: list[Lot], figures: list[SaleFigures]) -> list[str]:
    """
    Render every lot in the order the selector would consider it.

    Args:
        lots: All lots
        figures: Sale figures aligned by index with ``lots``

    Returns:
        List of output lines
    """
    lines = ["Lots in selling order:", _render_header()]
    for i in rank_lots(lots, figures):
        lines.append(_render_row(lots[i], figures[i]))
    return lines
