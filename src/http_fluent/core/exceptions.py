"""
Иерархия исключений http-fluent.

Классификация:
- TemporaryError (retryable=True) - сетевые сбои, можно повторить запрос
- FatalError (fatal=True) - повтор не поможет

Библиотека сама ничего не ретраит, флаги только описывают природу ошибки.
"""

from typing import Optional

import httpx

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPFluentException(Exception):
    """Базовое исключение http-fluent."""

    retryable: bool = False
    fatal: bool = False

    def __init__(self, message: str, **kwargs):
        self.message = message
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ВРЕМЕННЫЕ ОШИБКИ (retryable=True)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TemporaryError(HTTPFluentException):
    """
    Временная ошибка.

    Примеры: таймауты, обрыв соединения, отказ в подключении.
    """
    retryable = True

class NetworkError(TemporaryError):
    """Сетевая ошибка."""

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        full_message = f"{message}"
        if url:
            full_message += f" (url: {url})"
        super().__init__(full_message)

class TransportError(NetworkError):
    """
    Ошибка транспорта.

    Примеры:
    - DNS resolution failed
    - Connection refused
    - Connection reset до получения ответа
    """
    pass

class AbortedError(NetworkError):
    """
    Сервер закрыл соединение до конца ответа.

    Args:
        url: URL запроса
        received: Сколько байт тела успели прийти (если известно)
    """

    def __init__(self, url: Optional[str] = None, received: Optional[int] = None):
        self.received = received
        msg = "Server aborted request"
        if received is not None:
            msg += f" after {received} bytes"
        super().__init__(msg, url)

class TimeoutError(NetworkError):
    """
    Истёк таймаут запроса.

    В буферизованном режиме приходит из send(), в потоковом - из итерации
    по ResponseStream, если таймаут сработал после получения заголовков.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
        timeout_ms: Значение таймаута в миллисекундах
    """

    def __init__(
        self,
        message: str = "Timeout reached",
        url: Optional[str] = None,
        timeout_ms: Optional[float] = None
    ):
        self.timeout_ms = timeout_ms

        msg = message
        if timeout_ms is not None:
            msg += f" ({timeout_ms}ms)"

        super().__init__(msg, url)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ФАТАЛЬНЫЕ ОШИБКИ (fatal=True)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class FatalError(HTTPFluentException):
    """
    Фатальная ошибка - повтор не поможет.

    Примеры: неподдерживаемая схема URL, битый JSON, переполнение буфера.
    """
    fatal = True

class ConfigurationError(FatalError):
    """
    Ошибка конфигурации запроса.

    Бросается синхронно, до любого сетевого ввода-вывода.
    """
    pass

class InvalidResponseError(FatalError):
    """
    Невалидный ответ.

    Примеры:
    - Битый JSON
    - Битые gzip/deflate данные
    """
    pass

class ParseError(InvalidResponseError):
    """
    Тело ответа не является JSON.

    Args:
        message: Описание ошибки парсера
        status_code: HTTP статус ответа
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        msg = f"Invalid JSON in response body: {message}"
        if status_code is not None:
            msg += f" (status: {status_code})"
        super().__init__(msg)

class DecodeError(InvalidResponseError):
    """
    Не удалось распаковать тело ответа.

    Args:
        encoding: Значение content-encoding
        message: Описание ошибки zlib
        url: URL
    """

    def __init__(self, encoding: str, message: str, url: Optional[str] = None):
        self.encoding = encoding
        self.url = url

        msg = f"Failed to decode {encoding} response body: {message}"
        if url:
            msg += f" (url: {url})"
        super().__init__(msg)

class ResponseTooLargeError(FatalError):
    """
    Ответ превысил лимит буфера.

    Соединение уже закрыто к моменту, когда исключение видит вызывающий код.

    Args:
        size: Сколько байт успели накопить
        max_size: Максимально допустимый размер
        url: URL
    """

    def __init__(self, size: int, max_size: int, url: Optional[str] = None):
        self.size = size
        self.max_size = max_size
        self.url = url

        msg = (
            f"Received a response which was longer than acceptable when buffering. "
            f"({size} bytes, max: {max_size})"
        )
        if url:
            msg += f" for {url}"
        super().__init__(msg)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def classify_httpx_exception(
    exc: Exception,
    url: Optional[str] = None,
    timeout_ms: Optional[float] = None,
    during_body: bool = False,
    received: Optional[int] = None,
) -> HTTPFluentException:
    """
    Конвертировать исключения httpx в наши.

    Args:
        exc: Исключение из httpx
        url: URL запроса
        timeout_ms: Таймаут запроса (для сообщения)
        during_body: Ошибка случилась после получения заголовков
        received: Сколько байт тела уже получено

    Returns:
        Наше исключение с правильной классификацией

    Examples:
        >>> exc = httpx.ReadTimeout("timed out")
        >>> our_exc = classify_httpx_exception(exc, "https://example.com")
        >>> assert isinstance(our_exc, TimeoutError)
        >>> assert our_exc.retryable == True
    """
    if isinstance(exc, HTTPFluentException):
        return exc

    if isinstance(exc, httpx.TimeoutException):
        return TimeoutError("Timeout reached", url, timeout_ms)

    elif isinstance(exc, httpx.UnsupportedProtocol):
        return ConfigurationError(f"Bad URL protocol: {exc}")

    elif isinstance(exc, httpx.DecodingError):
        # Транспорт сам пытался распаковать тело
        return DecodeError("content", str(exc), url)

    elif during_body and isinstance(exc, (httpx.RemoteProtocolError, httpx.ReadError)):
        # Соединение оборвалось посреди тела
        return AbortedError(url, received)

    elif isinstance(exc, httpx.TransportError):
        return TransportError(str(exc) or type(exc).__name__, url)

    else:
        # Неизвестная ошибка - оборачиваем
        return HTTPFluentException(str(exc))
