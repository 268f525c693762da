"""
Lot selection module for the capital gains lot selector.

Provides sale figure calculations, the gain-minimizing lot selector and
presentation of its results.
"""

from capgains.selection.gains import (
    SelectionError,
    MissingPriceError,
    check_prices,
    compute_sale_figures,
    compute_all,
)
from capgains.selection.selector import (
    InsufficientFundsError,
    minimum_cap_gains,
    rank_lots,
)
from capgains.selection.report import (
    render_ranking,
    render_selection,
    sort_by_purchase_date,
    summarize_selection,
)

__all__ = [
    "SelectionError",
    "MissingPriceError",
    "InsufficientFundsError",
    "check_prices",
    "compute_sale_figures",
    "compute_all",
    "minimum_cap_gains",
    "rank_lots",
    "render_ranking",
    "render_selection",
    "sort_by_purchase_date",
    "summarize_selection",
]
