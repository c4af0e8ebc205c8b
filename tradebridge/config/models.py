"""
Pydantic models for application configuration.

This module defines all configuration models that are validated when loading
YAML configuration files. The models ensure type safety and provide sensible
defaults for optional settings.

Configuration files:
    - config/exchanges.yaml: Exchange endpoints, throttling, fees, options
    - config/logging.yaml: Log level and format (optional)

Example:
    >>> from tradebridge.config.models import AppConfig
    >>> config = AppConfig(...)
    >>> hitbtc = config.get_exchange("hitbtc")
"""

from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, SecretStr, field_validator


# =============================================================================
# ENUMS
# =============================================================================


class LogFormat(str, Enum):
    """Logging format options."""

    JSON = "json"
    TEXT = "text"


class LogLevel(str, Enum):
    """Logging level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# =============================================================================
# EXCHANGE CONFIGURATION
# =============================================================================


class ApiUrls(BaseModel):
    """REST API base URLs for an exchange."""

    model_config = {"frozen": True, "extra": "forbid"}

    public: str = Field(
        ...,
        description="Base URL for public endpoints",
        min_length=1,
    )
    private: str = Field(
        ...,
        description="Base URL for private endpoints",
        min_length=1,
    )

    @field_validator("public", "private")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid API URL: {v}")
        return v.rstrip("/")


class ConnectionSettings(BaseModel):
    """Connection settings for an exchange."""

    model_config = {"frozen": True, "extra": "forbid"}

    rate_limit_ms: int = Field(
        default=1000,
        description="Minimum interval between REST requests in milliseconds",
        ge=0,
        le=60000,
    )
    timeout_seconds: int = Field(
        default=10,
        description="Total request timeout",
        ge=1,
        le=120,
    )


class TradingFees(BaseModel):
    """Default trading fee schedule, used when a market does not report rates."""

    model_config = {"frozen": True, "extra": "forbid"}

    maker: Decimal = Field(default=Decimal("0.001"))
    taker: Decimal = Field(default=Decimal("0.002"))
    percentage: bool = True
    tier_based: bool = False


class ExchangeOptions(BaseModel):
    """Exchange-specific behaviour switches."""

    model_config = {"frozen": True, "extra": "forbid"}

    default_time_in_force: str = Field(
        default="FOK",
        description="timeInForce sent with non-limit orders",
    )
    common_currencies: Dict[str, str] = Field(
        default_factory=dict,
        description="Exchange currency id -> unified code aliases",
    )
    order_cache_size: int = Field(
        default=1000,
        description="Maximum number of orders kept in the order cache",
        ge=1,
    )


class ApiCredentials(BaseModel):
    """API key pair. The secret is never rendered in repr or logs."""

    model_config = {"frozen": True, "extra": "forbid"}

    api_key: Optional[str] = None
    secret: Optional[SecretStr] = None

    @property
    def is_complete(self) -> bool:
        """True when both key and secret are present."""
        return bool(self.api_key) and self.secret is not None and bool(self.secret.get_secret_value())


class ExchangeConfig(BaseModel):
    """Configuration for a single exchange adapter."""

    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(
        ...,
        description="Lowercase exchange identifier",
        min_length=1,
        max_length=50,
    )
    name: Optional[str] = None
    enabled: bool = Field(
        default=True,
        description="Whether this exchange is enabled",
    )
    version: str = Field(
        default="2",
        description="REST API version",
    )
    api: ApiUrls
    connection: ConnectionSettings = Field(default_factory=ConnectionSettings)
    fees: TradingFees = Field(default_factory=TradingFees)
    options: ExchangeOptions = Field(default_factory=ExchangeOptions)
    credentials: ApiCredentials = Field(default_factory=ApiCredentials)

    def with_credentials(self, api_key: Optional[str], secret: Optional[str]) -> "ExchangeConfig":
        """Return a copy of this configuration with the given key pair."""
        credentials = ApiCredentials(
            api_key=api_key,
            secret=SecretStr(secret) if secret is not None else None,
        )
        return self.model_copy(update={"credentials": credentials})


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    format: LogFormat = Field(
        default=LogFormat.JSON,
        description="Log output format",
    )
    level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Log level",
    )


# =============================================================================
# ROOT CONFIGURATION
# =============================================================================


class AppConfig(BaseModel):
    """Root configuration object."""

    model_config = {"frozen": True, "extra": "forbid"}

    exchanges: Dict[str, ExchangeConfig] = Field(
        ...,
        description="Exchange configurations keyed by exchange id",
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def get_exchange(self, exchange_id: str) -> Optional[ExchangeConfig]:
        """
        Get configuration for a specific exchange.

        Args:
            exchange_id: Exchange identifier (e.g., "hitbtc").

        Returns:
            Optional[ExchangeConfig]: Exchange config or None if not found.
        """
        return self.exchanges.get(exchange_id)

    def get_enabled_exchanges(self) -> List[str]:
        """Return identifiers of enabled exchanges."""
        return [name for name, config in self.exchanges.items() if config.enabled]
