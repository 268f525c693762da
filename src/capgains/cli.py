"""
Command-line interface for the capital gains lot selector.

Provides commands for:
- select: Choose the lots to sell to raise a target amount with minimal capital gains
- rank: Show every lot in the order it would be considered for sale
"""

import logging
import sys
import uuid
from pathlib import Path
from typing import Optional

import click

from capgains import __version__
from capgains.config import (
    ConfigurationError,
    load_selection_config,
    parse_selection_config,
)
from capgains.data import (
    DataLoadError,
    load_account,
    load_fund_prices,
    save_selection,
)
from capgains.logging import get_logger
from capgains.models import SelectionConfig
from capgains.selection import (
    SelectionError,
    compute_all,
    minimum_cap_gains,
    render_ranking,
    render_selection,
)


@click.group()
@click.version_option(version=__version__, prog_name="capgains")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """
    Calculate the records to sell to minimize capital gains.

    Lots are sold in order of increasing capital gain per dollar of
    proceeds until the target amount, net of a flat tax on gains, is met.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def _resolve_config(
    config_path: Optional[str],
    account_file: Optional[str],
    fundprice_file: Optional[str],
    sell_target: Optional[str],
    tax_rate: Optional[str],
) -> SelectionConfig:
    """Merge the YAML configuration (if any) with positional arguments."""
    raw: dict = {}
    if config_path:
        loaded = load_selection_config(config_path)
        raw = {
            "account_file": loaded.account_file,
            "fundprice_file": loaded.fundprice_file,
            "sell_target": loaded.sell_target,
            "tax_rate": loaded.tax_rate,
            "output_dir": loaded.output_dir,
            "date_format": loaded.date_format,
        }

    if account_file:
        raw["account_file"] = account_file
    if fundprice_file:
        raw["fundprice_file"] = fundprice_file
    if sell_target is not None:
        raw["sell_target"] = sell_target
    if tax_rate is not None:
        raw["tax_rate"] = tax_rate

    return parse_selection_config(raw)


@main.command()
@click.argument("account_file", required=False, type=click.Path(dir_okay=False))
@click.argument("fundprice_file", required=False, type=click.Path(dir_okay=False))
@click.argument("sell_target", required=False, type=str)
@click.argument("tax_rate", required=False, type=str)
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    default=None,
    help="Path to run configuration YAML file",
)
@click.option(
    "--output-dir", "-o",
    type=click.Path(),
    default=None,
    help="Output directory. Defaults to config output_dir.",
)
@click.option(
    "--save/--no-save",
    default=False,
    help="Save the selection to a CSV file in the output directory",
)
def select(
    account_file: Optional[str],
    fundprice_file: Optional[str],
    sell_target: Optional[str],
    tax_rate: Optional[str],
    config: Optional[str],
    output_dir: Optional[str],
    save: bool,
):
    """
    Select the lots to sell to raise SELL_TARGET.

    ACCOUNT_FILE is a CSV with the fields Date, Fund, Transaction type,
    Shares transacted, Share price, Amount. FUNDPRICE_FILE is a CSV with
    the fields Fund, Share price. TAX_RATE is an optional flat tax rate
    applied to capital gains; taxes are accounted for when selecting lots.
    """
    try:
        run_config = _resolve_config(config, account_file, fundprice_file, sell_target, tax_rate)
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    out_dir = Path(output_dir or run_config.output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    run_id = str(uuid.uuid4())
    logger = get_logger(out_dir / "decision_log.jsonl")
    if config:
        logger.log_config_loaded(run_id, run_config, config)

    click.echo(f"Reading account information from: {run_config.account_file}")
    click.echo(f"Reading fund price from: {run_config.fundprice_file}")
    click.echo(f"Minimizing capital gains for target sell amount of: {run_config.sell_target}")
    if run_config.tax_rate != 0:
        click.echo(f"Applying a tax rate of {float(run_config.tax_rate * 100):g}%")
    click.echo()

    try:
        lots = load_account(run_config.account_file, date_format=run_config.date_format)
        prices = load_fund_prices(run_config.fundprice_file)
    except DataLoadError as e:
        click.echo(f"Error loading data: {e}", err=True)
        sys.exit(1)

    logger.log_lots_loaded(run_id, lots, prices)

    try:
        result = minimum_cap_gains(
            lots,
            prices,
            sell_target=run_config.sell_target,
            tax_rate=run_config.tax_rate,
        )
    except SelectionError as e:
        logger.log_selection_failed(run_id, e, run_config.sell_target)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    logger.log_selection_computed(run_id, result)

    for line in render_selection(result):
        click.echo(line)

    if save:
        selection_path = save_selection(result, out_dir / f"selection_{run_id[:8]}.csv")
        click.echo()
        click.echo(f"Selection saved: {selection_path}")


@main.command()
@click.argument("account_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("fundprice_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--date-format",
    default="%m/%d/%Y",
    show_default=True,
    help="strptime format of the account file's Date column",
)
def rank(account_file: str, fundprice_file: str, date_format: str):
    """
    Show every lot in the order it would be sold.

    Lots are listed by increasing capital gain per dollar of proceeds.
    """
    try:
        lots = load_account(account_file, date_format=date_format)
        prices = load_fund_prices(fundprice_file)
    except DataLoadError as e:
        click.echo(f"Error loading data: {e}", err=True)
        sys.exit(1)

    try:
        figures = compute_all(lots, prices)
    except SelectionError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for line in render_ranking(lots, figures):
        click.echo(line)


if __name__ == "__main__":
    main()
