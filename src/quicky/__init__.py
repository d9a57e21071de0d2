"""quicky -- place a quick PostOnly limit order on Bybit."""

__version__ = "0.1.0"
