"""
Tests for the append-only decision log.
"""

import json
from decimal import Decimal
from pathlib import Path

from capgains.logging.decision_log import DecimalEncoder, DecisionLogger, get_logger
from capgains.models import ActionType, DecisionLogEntry, Lot
from capgains.selection.gains import MissingPriceError
from capgains.selection.selector import minimum_cap_gains


class TestDecisionLogger:
    """Tests for the DecisionLogger class."""

    def test_selection_computed(
        self,
        example_lots: list[Lot],
        example_prices: dict[str, Decimal],
        temp_output_dir: Path,
    ):
        logger = DecisionLogger(temp_output_dir / "decision_log.jsonl")
        result = minimum_cap_gains(example_lots, example_prices, Decimal("600"))

        logger.log_lots_loaded("run-1", example_lots, example_prices)
        logger.log_selection_computed("run-1", result)

        entries = logger.read_log()
        assert [e.action_type for e in entries] == [
            ActionType.LOTS_LOADED,
            ActionType.SELECTION_COMPUTED,
        ]
        loaded, computed = entries
        assert loaded.details["num_lots"] == 2
        assert loaded.details["prices"] == {"F": "100"}
        assert computed.details["num_selected"] == 2
        assert computed.details["num_partial"] == 1
        assert computed.details["total_amount"] == "700"
        assert computed.details["selected"][1] == {
            "purchase_date": "2018-01-15",
            "holding_id": "F",
            "shares": "2",
            "original_shares": "10",
        }

    def test_selection_failed_records_missing_holdings(self, temp_output_dir: Path):
        logger = DecisionLogger(temp_output_dir / "decision_log.jsonl")

        logger.log_selection_failed("run-2", MissingPriceError(["G", "F"]), Decimal("10"))

        (entry,) = logger.read_log()
        assert entry.action_type == ActionType.SELECTION_FAILED
        assert entry.run_id == "run-2"
        assert entry.details["error_type"] == "MissingPriceError"
        assert entry.details["missing_holdings"] == ["F", "G"]
        assert entry.details["sell_target"] == "10"

    def test_append_only(self, temp_output_dir: Path):
        path = temp_output_dir / "decision_log.jsonl"
        first = DecisionLogger(path)
        first.log(DecisionLogEntry.create(ActionType.LOTS_LOADED, "a", {"num_lots": 1}))
        DecisionLogger(path).log_selection_failed("b", ValueError("bad"))

        lines = path.read_text().strip().splitlines()
        assert len(lines) == 2
        assert [json.loads(line)["run_id"] for line in lines] == ["a", "b"]
        assert [e.action_type for e in first.read_log()] == [
            ActionType.LOTS_LOADED,
            ActionType.SELECTION_FAILED,
        ]

    def test_read_missing_log(self, tmp_path: Path):
        logger = DecisionLogger(tmp_path / "logs" / "decision_log.jsonl")

        assert logger.read_log() == []

    def test_get_logger_reinitializes_with_new_path(self, tmp_path: Path):
        logger = get_logger(tmp_path / "one.jsonl")
        assert logger.log_path == tmp_path / "one.jsonl"

        logger = get_logger(tmp_path / "two.jsonl")
        assert logger.log_path == tmp_path / "two.jsonl"
        assert get_logger() is logger


class TestDecimalEncoder:
    def test_encodes_decimal_as_string(self):
        assert json.dumps({"x": Decimal("1.50")}, cls=DecimalEncoder) == '{"x": "1.50"}'
