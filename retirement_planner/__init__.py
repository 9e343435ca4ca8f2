"""UK retirement projection: accumulation, tax-aware drawdown and storage."""

__version__ = "0.1.0"
