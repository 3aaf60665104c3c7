"""
Конфигурация http-fluent.

Все конфиги immutable (frozen dataclasses): один RequestConfig можно
безопасно разделять между запросами и задачами asyncio.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, TYPE_CHECKING

from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from .logging import LoggingConfig

# Лимит буферизации ответа по умолчанию (байты)
DEFAULT_MAX_BUFFER_BYTES = 50 * 1000000

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MAIN CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _freeze_dict(d: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    """
    Convert dict to immutable MappingProxyType.

    Example:
        >>> frozen = _freeze_dict({"X-API-Key": "secret"})
        >>> frozen["X-New"] = "value"  # Raises TypeError
    """
    if d is None:
        return MappingProxyType({})
    return MappingProxyType(dict(d))

@dataclass(frozen=True)
class RequestConfig:
    """
    Общая конфигурация запросов.

    Args:
        max_buffer_bytes: Лимит накопления тела ответа в буферизованном режиме
        timeout_ms: Таймаут по умолчанию (мс), None = без таймаута
        headers: Заголовки по умолчанию (builder может их переопределить)
        logging: Конфигурация логирования (None = только NullHandler)

    Examples:
        >>> RequestConfig()
        >>> RequestConfig(max_buffer_bytes=1024 * 1024, timeout_ms=5000)
        >>> RequestConfig.create(headers={"User-Agent": "my-app/1.0"})
    """
    max_buffer_bytes: int = DEFAULT_MAX_BUFFER_BYTES
    timeout_ms: Optional[float] = None
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Валидация и заморозка заголовков."""
        if isinstance(self.max_buffer_bytes, bool) or self.max_buffer_bytes <= 0:
            raise ConfigurationError("max_buffer_bytes must be positive")
        if self.timeout_ms is not None and self.timeout_ms <= 0:
            raise ConfigurationError("timeout_ms must be positive")

        if not isinstance(self.headers, MappingProxyType):
            object.__setattr__(self, 'headers', _freeze_dict(self.headers))

    @classmethod
    def create(
        cls,
        max_buffer_bytes: int = DEFAULT_MAX_BUFFER_BYTES,
        timeout_ms: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
        logging: Optional['LoggingConfig'] = None,
    ) -> 'RequestConfig':
        """
        Удобный конструктор конфигурации.

        Examples:
            >>> config = RequestConfig.create(timeout_ms=3000)
            >>> config = RequestConfig.create(headers={"Authorization": "Bearer ..."})
        """
        return cls(
            max_buffer_bytes=max_buffer_bytes,
            timeout_ms=timeout_ms,
            headers=headers or {},
            logging=logging,
        )

    def with_headers(self, headers: Dict[str, str]) -> 'RequestConfig':
        """
        Создать новый конфиг с дополнительными заголовками.

        Example:
            >>> new_config = config.with_headers({"X-API-Key": "secret"})
        """
        merged = dict(self.headers)
        merged.update(headers)

        return RequestConfig(
            max_buffer_bytes=self.max_buffer_bytes,
            timeout_ms=self.timeout_ms,
            headers=merged,
            logging=self.logging,
        )

    def with_max_buffer_bytes(self, max_buffer_bytes: int) -> 'RequestConfig':
        """Создать новый конфиг с другим лимитом буфера."""
        return RequestConfig(
            max_buffer_bytes=max_buffer_bytes,
            timeout_ms=self.timeout_ms,
            headers=self.headers,
            logging=self.logging,
        )

    def with_timeout(self, timeout_ms: Optional[float]) -> 'RequestConfig':
        """Создать новый конфиг с другим таймаутом по умолчанию."""
        return RequestConfig(
            max_buffer_bytes=self.max_buffer_bytes,
            timeout_ms=timeout_ms,
            headers=self.headers,
            logging=self.logging,
        )
