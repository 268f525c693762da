"""
Decision logging module for the capital gains lot selector.

Provides append-only decision logging for audit and reproducibility.
"""

from capgains.logging.decision_log import (
    DecisionLogger,
    get_logger,
)

__all__ = [
    "DecisionLogger",
    "get_logger",
]
