"""
YAML configuration loading.

Reads the config directory, validates every section with the Pydantic models
in tradebridge.config.models and layers environment variables on top.

Files:
    - exchanges.yaml: one section per exchange id (required)
    - logging.yaml: level and format (optional)

Environment:
    - <EXCHANGE>_API_KEY / <EXCHANGE>_API_SECRET: API key pair
      (e.g., HITBTC_API_KEY); never read from YAML
    - LOG_LEVEL, LOG_FORMAT: override logging.yaml

Example:
    >>> from tradebridge.config.loader import load_config
    >>> config = load_config("config")
    >>> config.get_exchange("hitbtc").connection.rate_limit_ms
    1500
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from tradebridge.config.models import (
    AppConfig,
    ExchangeConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
)

EXCHANGES_FILE = "exchanges.yaml"
LOGGING_FILE = "logging.yaml"


class ConfigLoadError(Exception):
    """
    Configuration could not be read or validated.

    Attributes:
        message: What went wrong.
        file_path: Offending file or directory, if known.
        cause: Underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[Path] = None,
        cause: Optional[Exception] = None,
    ):
        self.message = message
        self.file_path = file_path
        self.cause = cause
        super().__init__(message)


class ConfigLoader:
    """
    Builds an AppConfig from a config directory.

    Example:
        >>> loader = ConfigLoader("config")
        >>> sorted(loader.load().exchanges)
        ['hitbtc']
    """

    def __init__(self, config_dir: Path | str = "config"):
        """
        Args:
            config_dir: Directory holding exchanges.yaml (default: 'config').

        Raises:
            ConfigLoadError: If the path is missing or not a directory.
        """
        self.config_dir = Path(config_dir)
        if not self.config_dir.is_dir():
            reason = "is not a directory" if self.config_dir.exists() else "does not exist"
            raise ConfigLoadError(
                f"Config directory {self.config_dir} {reason}",
                file_path=self.config_dir,
            )

    def _read(self, filename: str, required: bool = True) -> Dict[str, Any]:
        """
        Parse one YAML file.

        Returns:
            Dict: File content; empty for a missing optional file.

        Raises:
            ConfigLoadError: Missing required file, empty file, bad YAML or I/O error.
        """
        path = self.config_dir / filename
        if not path.exists():
            if required:
                raise ConfigLoadError(f"Missing config file {path}", file_path=path)
            return {}

        try:
            content = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigLoadError(f"Cannot parse {path}: {e}", file_path=path, cause=e) from e
        except OSError as e:
            raise ConfigLoadError(f"Cannot read {path}: {e}", file_path=path, cause=e) from e

        if content is None:
            raise ConfigLoadError(f"Config file {path} is empty", file_path=path)
        if not isinstance(content, dict):
            raise ConfigLoadError(f"Config file {path} must contain a mapping", file_path=path)
        return content

    def _exchanges(self) -> Dict[str, ExchangeConfig]:
        """
        Validate every section of exchanges.yaml.

        A section without ``api.private`` uses the public URL for both.

        Raises:
            ConfigLoadError: Invalid section or no exchanges at all.
        """
        path = self.config_dir / EXCHANGES_FILE
        sections = self._read(EXCHANGES_FILE).get("exchanges") or {}

        exchanges: Dict[str, ExchangeConfig] = {}
        for exchange_id, section in sections.items():
            section = dict(section or {})
            api = dict(section.get("api") or {})
            if "public" in api:
                api.setdefault("private", api["public"])
            section["api"] = api
            if "version" in section:
                section["version"] = str(section["version"])

            try:
                config = ExchangeConfig.model_validate({"id": exchange_id, **section})
            except ValidationError as e:
                raise ConfigLoadError(
                    f"Invalid configuration for exchange {exchange_id}: {e}",
                    file_path=path,
                    cause=e,
                ) from e
            exchanges[exchange_id] = self._with_env_credentials(config)

        if not exchanges:
            raise ConfigLoadError(f"No exchanges defined in {path}", file_path=path)
        return exchanges

    @staticmethod
    def _with_env_credentials(config: ExchangeConfig) -> ExchangeConfig:
        """Attach <EXCHANGE>_API_KEY / <EXCHANGE>_API_SECRET when set."""
        prefix = config.id.upper()
        api_key = os.getenv(f"{prefix}_API_KEY")
        secret = os.getenv(f"{prefix}_API_SECRET")
        if api_key is None and secret is None:
            return config
        return config.with_credentials(api_key, secret)

    def _logging(self) -> LoggingConfig:
        """
        Logging settings from logging.yaml, overridden by LOG_LEVEL / LOG_FORMAT.

        Unknown values fall back to INFO / json.
        """
        content = self._read(LOGGING_FILE, required=False)
        section = content.get("logging", content) or {}

        level_name = os.getenv("LOG_LEVEL", section.get("level", LogLevel.INFO.value)).upper()
        format_name = os.getenv("LOG_FORMAT", section.get("format", LogFormat.JSON.value)).lower()

        level = LogLevel.INFO
        if level_name in LogLevel.__members__:
            level = LogLevel(level_name)
        log_format = LogFormat.JSON
        if format_name in {f.value for f in LogFormat}:
            log_format = LogFormat(format_name)

        return LoggingConfig(format=log_format, level=level)

    def load(self) -> AppConfig:
        """
        Read and validate the whole configuration.

        Raises:
            ConfigLoadError: If any file is missing or invalid.
        """
        try:
            return AppConfig(exchanges=self._exchanges(), logging=self._logging())
        except ValidationError as e:
            raise ConfigLoadError(f"Invalid configuration: {e}", cause=e) from e


def load_config(config_dir: Path | str = "config") -> AppConfig:
    """
    Shortcut for ``ConfigLoader(config_dir).load()``.

    Example:
        >>> config = load_config()
        >>> hitbtc = config.get_exchange("hitbtc")
    """
    return ConfigLoader(config_dir).load()
