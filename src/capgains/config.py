"""
Configuration loading and management for the capital gains lot selector.

This module handles loading run configurations from YAML files and
validation of configuration parameters.
"""

from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from capgains.models import SelectionConfig


class ConfigurationError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""
    pass


def load_selection_config(config_path: str | Path) -> SelectionConfig:
    """
    Load a run configuration from a YAML file.

    Relative file paths in the configuration are resolved against the
    directory containing the configuration file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        SelectionConfig object with validated settings

    Raises:
        ConfigurationError: If the file cannot be loaded or is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file: {e}")

    if not isinstance(raw_config, dict):
        raise ConfigurationError(
            f"Configuration file {config_path} must contain a mapping"
        )

    return parse_selection_config(raw_config, base_dir=config_path.parent)


def parse_selection_config(
    raw: dict[str, Any],
    base_dir: Path | None = None,
) -> SelectionConfig:
    """
    Parse and validate raw configuration dictionary into SelectionConfig.

    Args:
        raw: Dictionary loaded from YAML
        base_dir: Directory that relative paths (input files and output_dir)
            are resolved against

    Returns:
        Validated SelectionConfig

    Raises:
        ConfigurationError: If required fields are missing or invalid
    """
    required_fields = ["account_file", "fundprice_file", "sell_target"]
    for field in required_fields:
        if field not in raw:
            raise ConfigurationError(f"Missing required configuration field: {field}")

    account_file = _parse_path(raw["account_file"], "account_file", base_dir)
    fundprice_file = _parse_path(raw["fundprice_file"], "fundprice_file", base_dir)

    sell_target = _parse_decimal(raw["sell_target"], "sell_target", min_val=Decimal("0"))
    if sell_target == Decimal("0"):
        raise ConfigurationError("sell_target must be positive")

    tax_rate = parse_tax_rate(raw.get("tax_rate", "0"))

    output_dir = "output"
    if "output_dir" in raw:
        output_dir = _parse_path(raw["output_dir"], "output_dir", base_dir)
    date_format = str(raw.get("date_format", "%m/%d/%Y"))

    return SelectionConfig(
        account_file=account_file,
        fundprice_file=fundprice_file,
        sell_target=sell_target,
        tax_rate=tax_rate,
        output_dir=output_dir,
        date_format=date_format,
    )


def parse_tax_rate(value: Any) -> Decimal:
    """
    Parse a flat tax rate, which must lie in [0, 1).

    Raises:
        ConfigurationError: If the value is invalid or out of range
    """
    tax_rate = _parse_decimal(value, "tax_rate", min_val=Decimal("0"))
    if tax_rate >= Decimal("1"):
        raise ConfigurationError(f"tax_rate must be < 1, got {tax_rate}")
    return tax_rate


def _parse_path(value: Any, field_name: str, base_dir: Path | None) -> str:
    if not value:
        raise ConfigurationError(f"{field_name} cannot be empty")

    path = Path(str(value))
    if base_dir is not None and not path.is_absolute():
        path = base_dir / path
    return str(path)


def _parse_decimal(
    value: Any,
    field_name: str,
    min_val: Decimal | None = None,
    max_val: Decimal | None = None,
) -> Decimal:
    """
    Parse a decimal value with optional range validation.

    Args:
        value: The value to parse
        field_name: Name of the field for error messages
        min_val: Minimum allowed value (inclusive)
        max_val: Maximum allowed value (inclusive)

    Returns:
        Parsed Decimal

    Raises:
        ConfigurationError: If the value is invalid or out of range
    """
    try:
        decimal_value = Decimal(str(value))
    except InvalidOperation:
        raise ConfigurationError(f"Invalid decimal value for {field_name}: {value}")

    if not decimal_value.is_finite():
        raise ConfigurationError(f"Invalid decimal value for {field_name}: {value}")

    if min_val is not None and decimal_value < min_val:
        raise ConfigurationError(
            f"{field_name} must be >= {min_val}, got {decimal_value}"
        )

    if max_val is not None and decimal_value > max_val:
        raise ConfigurationError(
            f"{field_name} must be <= {max_val}, got {decimal_value}"
        )

    return decimal_value


def write_config(config: SelectionConfig, output_path: str | Path) -> None:
    """
    Write a SelectionConfig to a YAML file.

    Args:
        config: The configuration to write
        output_path: Path to write the YAML file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    config_dict = {
        "account_file": config.account_file,
        "fundprice_file": config.fundprice_file,
        "sell_target": str(config.sell_target),
        "tax_rate": str(config.tax_rate),
        "output_dir": config.output_dir,
        "date_format": config.date_format,
    }

    with open(output_path, "w") as f:
        yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)
