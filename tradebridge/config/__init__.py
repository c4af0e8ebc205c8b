"""
Configuration: Pydantic models plus the YAML loader.

Example:
    >>> from tradebridge.config import load_config
    >>> hitbtc = load_config("config").get_exchange("hitbtc")
    >>> hitbtc.options.default_time_in_force
    'FOK'
"""

from tradebridge.config.loader import ConfigLoadError, ConfigLoader, load_config
from tradebridge.config.models import (
    ApiCredentials,
    ApiUrls,
    AppConfig,
    ConnectionSettings,
    ExchangeConfig,
    ExchangeOptions,
    LogFormat,
    LoggingConfig,
    LogLevel,
    TradingFees,
)

__all__: list[str] = [
    "ApiCredentials",
    "ApiUrls",
    "AppConfig",
    "ConfigLoadError",
    "ConfigLoader",
    "ConnectionSettings",
    "ExchangeConfig",
    "ExchangeOptions",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "TradingFees",
    "load_config",
]
