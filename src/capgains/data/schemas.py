"""
Data schemas for CSV file validation.

Defines expected columns for all input and output files.
"""

from dataclasses import dataclass


@dataclass
class ColumnSchema:
    """Schema definition for a single column."""
    name: str
    required: bool = True


@dataclass
class FileSchema:
    """Schema definition for a file."""
    name: str
    columns: list[ColumnSchema]
    description: str

    @property
    def required_columns(self) -> list[str]:
        """Get list of required column names."""
        return [c.name for c in self.columns if c.required]

    @property
    def all_columns(self) -> list[str]:
        """Get list of all column names."""
        return [c.name for c in self.columns]

    def validate_columns(self, df_columns: list[str]) -> tuple[bool, list[str]]:
        """
        Validate that a dataframe has the required columns.

        Args:
            df_columns: List of column names from the dataframe

        Returns:
            Tuple of (is_valid, list of missing columns)
        """
        missing = [col for col in self.required_columns if col not in df_columns]
        return len(missing) == 0, missing


# Account transaction history; every row is one purchase lot
ACCOUNT_SCHEMA = FileSchema(
    name="account",
    description="Transaction history, one purchase lot per row",
    columns=[
        ColumnSchema(name="Date", required=True),
        ColumnSchema(name="Fund", required=True),
        ColumnSchema(name="Transaction type", required=False),
        ColumnSchema(name="Shares transacted", required=True),
        ColumnSchema(name="Share price", required=True),
        ColumnSchema(name="Amount", required=False),
    ],
)

# Current fund prices
FUND_PRICES_SCHEMA = FileSchema(
    name="fund_prices",
    description="Current share price by fund",
    columns=[
        ColumnSchema(name="Fund", required=True),
        ColumnSchema(name="Share price", required=True),
    ],
)

# Selection output
SELECTION_SCHEMA = FileSchema(
    name="selection",
    description="Lots selected for sale with their sale figures",
    columns=[
        ColumnSchema(name="purchase_date", required=True),
        ColumnSchema(name="holding_id", required=True),
        ColumnSchema(name="shares", required=True),
        ColumnSchema(name="original_shares", required=True),
        ColumnSchema(name="partial", required=True),
        ColumnSchema(name="cost_basis_per_share", required=True),
        ColumnSchema(name="price_per_share", required=True),
        ColumnSchema(name="sale_amount", required=True),
        ColumnSchema(name="capital_gain", required=True),
        ColumnSchema(name="gain_ratio", required=True),
    ],
)
