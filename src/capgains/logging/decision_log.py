"""
Append-only decision logging for the capital gains lot selector.

Every selection run is logged with timestamps, inputs and outcome to
support auditability and reproducibility.
"""

import json
from datetime import datetime, date
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

from capgains.models import (
    ActionType,
    DecisionLogEntry,
    Lot,
    SelectionConfig,
    SelectionResult,
)


class DecisionLogger:
    """
    Append-only decision logger.

    Writes all decisions to a JSONL file for audit purposes.
    Each line is a complete JSON object representing one action.
    """

    def __init__(self, log_path: str | Path):
        """
        Initialize the decision logger.

        Args:
            log_path: Path to the log file (will be created if not exists)
        """
        self.log_path = Path(log_path)
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

    def log(self, entry: DecisionLogEntry) -> None:
        """
        Write a decision log entry.

        Args:
            entry: DecisionLogEntry to write
        """
        record = {
            "timestamp": entry.timestamp.isoformat(),
            "action_type": entry.action_type.value,
            "run_id": entry.run_id,
            "details": entry.details,
        }

        with open(self.log_path, "a") as f:
            f.write(json.dumps(record, cls=DecimalEncoder) + "\n")

    def log_config_loaded(
        self,
        run_id: str,
        config: SelectionConfig,
        config_path: str,
    ) -> None:
        """
        Log configuration loading.

        Args:
            run_id: Run identifier
            config: Loaded configuration
            config_path: Path to configuration file
        """
        details = {
            "config_path": config_path,
            "account_file": config.account_file,
            "fundprice_file": config.fundprice_file,
            "sell_target": str(config.sell_target),
            "tax_rate": str(config.tax_rate),
        }
        self.log(DecisionLogEntry.create(ActionType.CONFIG_LOADED, run_id, details))

    def log_lots_loaded(
        self,
        run_id: str,
        lots: list[Lot],
        prices: dict[str, Decimal],
    ) -> None:
        """
        Log ingestion of lots and prices.

        Args:
            run_id: Run identifier
            lots: Lots read from the account file
            prices: Prices read from the fund price file
        """
        details = {
            "num_lots": len(lots),
            "holdings": sorted(set(lot.holding_id for lot in lots)),
            "total_shares": str(sum((lot.shares for lot in lots), Decimal("0"))),
            "prices": prices,
        }
        self.log(DecisionLogEntry.create(ActionType.LOTS_LOADED, run_id, details))

    def log_selection_computed(
        self,
        run_id: str,
        result: SelectionResult,
    ) -> None:
        """
        Log a successful selection.

        Args:
            run_id: Run identifier
            result: Selection result
        """
        details = {
            "sell_target": str(result.target),
            "tax_rate": str(result.tax_rate),
            "num_selected": len(result.entries),
            "num_partial": sum(1 for e in result.entries if e.is_partial),
            "total_amount": str(result.total_amount),
            "total_capital_gain": str(result.total_capital_gain),
            "net_amount": str(result.net_amount),
            "selected": [
                {
                    "purchase_date": e.lot.purchase_date,
                    "holding_id": e.lot.holding_id,
                    "shares": e.lot.shares,
                    "original_shares": e.original_shares,
                }
                for e in result.entries
            ],
        }
        self.log(DecisionLogEntry.create(ActionType.SELECTION_COMPUTED, run_id, details))

    def log_selection_failed(
        self,
        run_id: str,
        error: Exception,
        sell_target: Optional[Decimal] = None,
    ) -> None:
        """
        Log a failed selection.

        Args:
            run_id: Run identifier
            error: The error that aborted the run
            sell_target: Requested target, if known
        """
        details = {
            "error_type": type(error).__name__,
            "message": str(error),
            "sell_target": str(sell_target) if sell_target is not None else None,
        }
        holdings = getattr(error, "holdings", None)
        if holdings:
            details["missing_holdings"] = list(holdings)
        self.log(DecisionLogEntry.create(ActionType.SELECTION_FAILED, run_id, details))

    def read_log(self) -> list[DecisionLogEntry]:
        """
        Read all entries from the log file.

        Returns:
            List of DecisionLogEntry objects
        """
        if not self.log_path.exists():
            return []

        entries = []
        with open(self.log_path, "r") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                record = json.loads(line)
                entries.append(
                    DecisionLogEntry(
                        timestamp=datetime.fromisoformat(record["timestamp"]),
                        action_type=ActionType(record["action_type"]),
                        run_id=record.get("run_id"),
                        details=record.get("details", {}),
                    )
                )

        return entries


class DecimalEncoder(json.JSONEncoder):
    """JSON encoder that handles Decimal and date types."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, Decimal):
            return str(obj)
        if isinstance(obj, (date, datetime)):
            return obj.isoformat()
        return super().default(obj)


# Global logger instance (initialized on first use)
_global_logger: Optional[DecisionLogger] = None


def get_logger(log_path: Optional[str | Path] = None) -> DecisionLogger:
    """
    Get or create the global decision logger.

    Args:
        log_path: Optional path to initialize logger (required on first call)

    Returns:
        DecisionLogger instance
    """
    global _global_logger

    if _global_logger is None:
        if log_path is None:
            log_path = "output/decision_log.jsonl"
        _global_logger = DecisionLogger(log_path)
    elif log_path is not None:
        # Allow reinitializing with new path
        _global_logger = DecisionLogger(log_path)

    return _global_logger
