"""
Configuration file loader for YAML and JSON files.

File layout (top-level `http_fluent` section is optional):

    http_fluent:
      max_buffer_bytes: 10000000
      timeout_ms: 5000
      headers:
        User-Agent: my-app/1.0
      logging:
        level: DEBUG
        format: json
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..config import DEFAULT_MAX_BUFFER_BYTES, RequestConfig
from ..exceptions import ConfigurationError
from ..logging import LoggingConfig


class ConfigValidationError(Exception):
    """Raised when configuration file is invalid."""

    pass


class ConfigFileLoader:
    """
    Загрузчик конфигурации из файлов.

    Examples:
        >>> config = ConfigFileLoader.from_yaml("config.yaml")
        >>> config = ConfigFileLoader.from_json("config.json")
        >>> config = ConfigFileLoader.from_file("config.yaml")  # Auto-detect
        >>> config = ConfigFileLoader.from_env_path()  # From HTTP_FLUENT_CONFIG_FILE env var
    """

    @staticmethod
    def from_yaml(path: Union[str, Path]) -> RequestConfig:
        """
        Загрузить конфиг из YAML файла.

        Raises:
            FileNotFoundError: Если файл не найден
            ConfigValidationError: Если конфиг невалидный
            ImportError: Если PyYAML не установлен
        """
        try:
            import yaml
        except ImportError:
            raise ImportError(
                "PyYAML is required to load YAML configs. "
                "Install it with: pip install http-fluent[yaml] or pip install pyyaml"
            )

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Invalid YAML syntax in {path}: {e}")

        if not data:
            raise ConfigValidationError(f"Empty config file: {path}")

        return ConfigFileLoader._build_config(data, str(path))

    @staticmethod
    def from_json(path: Union[str, Path]) -> RequestConfig:
        """
        Загрузить конфиг из JSON файла.

        Raises:
            FileNotFoundError: Если файл не найден
            ConfigValidationError: Если конфиг невалидный
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid JSON syntax in {path}: {e}")

        if not data:
            raise ConfigValidationError(f"Empty config file: {path}")

        return ConfigFileLoader._build_config(data, str(path))

    @staticmethod
    def from_file(path: Union[str, Path]) -> RequestConfig:
        """
        Автоопределение формата по расширению (.yaml, .yml, .json).

        Raises:
            ValueError: Если формат не поддерживается
        """
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix in [".yaml", ".yml"]:
            return ConfigFileLoader.from_yaml(path)
        elif suffix == ".json":
            return ConfigFileLoader.from_json(path)
        else:
            raise ValueError(
                f"Unsupported config file format: {suffix}. "
                f"Supported formats: .yaml, .yml, .json"
            )

    @staticmethod
    def from_env_path() -> Optional[RequestConfig]:
        """
        Загрузить из пути указанного в HTTP_FLUENT_CONFIG_FILE.

        Returns:
            RequestConfig или None, если переменная не задана
        """
        config_path = os.environ.get("HTTP_FLUENT_CONFIG_FILE")
        if not config_path:
            return None

        return ConfigFileLoader.from_file(config_path)

    @staticmethod
    def _build_config(data: Any, source: str) -> RequestConfig:
        if isinstance(data, dict) and "http_fluent" in data:
            config_data = data["http_fluent"]
        else:
            config_data = data

        if not isinstance(config_data, dict):
            raise ConfigValidationError(
                f"Config must be a dictionary, got {type(config_data).__name__} in {source}"
            )

        try:
            logging_cfg = None
            if "logging" in config_data:
                logging_cfg = ConfigFileLoader._build_logging(config_data["logging"], source)

            headers: Dict[str, Any] = config_data.get("headers") or {}
            if not isinstance(headers, dict):
                raise ConfigValidationError(
                    f"headers must be a dictionary in {source}"
                )

            return RequestConfig.create(
                max_buffer_bytes=config_data.get("max_buffer_bytes", DEFAULT_MAX_BUFFER_BYTES),
                timeout_ms=config_data.get("timeout_ms"),
                headers={str(k): str(v) for k, v in headers.items()},
                logging=logging_cfg,
            )

        except (ConfigurationError, ValueError, TypeError, AttributeError) as e:
            raise ConfigValidationError(f"Invalid config in {source}: {e}")

    @staticmethod
    def _build_logging(logging_data: Any, source: str) -> LoggingConfig:
        if not isinstance(logging_data, dict):
            raise ConfigValidationError(
                f"logging must be a dictionary in {source}"
            )
        return LoggingConfig.create(
            level=logging_data.get("level", "INFO"),
            format=logging_data.get("format", "text"),
            enable_console=logging_data.get("enable_console", True),
            enable_file=logging_data.get("enable_file", False),
            file_path=logging_data.get("file_path"),
            enable_correlation_id=logging_data.get("enable_correlation_id", True),
        )
