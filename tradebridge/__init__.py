"""
tradebridge: unified REST trading adapters for crypto exchanges.

This package provides:
- Data models for markets, tickers, order books, orders, trades and balances
- An abstract ExchangeAdapter interface and the HitBTC implementation
- A unified exception hierarchy for exchange failures
- Configuration management
"""

__version__ = "0.1.0"
__author__ = "Om Mengshetti"
