"""Custom exceptions for the stock research engine."""


class StockResearchError(Exception):
    """Base exception for stock research errors."""

    pass


class ConfigurationError(StockResearchError, ValueError):
    """Raised when the service cannot run at all, e.g. no model API key is configured."""

    pass
