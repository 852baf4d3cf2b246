"""Role-hierarchy gated accounts, balances and internal transfers."""

__version__ = "0.1.0"
