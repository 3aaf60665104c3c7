"""
Буферизованный ответ.

Response накапливает тело по кускам в порядке прихода из сети и отдаёт
его в трёх видах: bytes, текст, JSON.
"""

import json
from typing import Any, Mapping, Optional, Union

import httpx

from .exceptions import ParseError


class Response:
    """
    Статус, заголовки и тело одного ответа.

    Тело только растёт: add_chunk() дописывает в конец и никогда не
    меняет уже полученные байты.

    Example:
        >>> res = Response(200)
        >>> res.add_chunk(b'{"id":')
        >>> res.add_chunk(b'1}')
        >>> res.json
        {'id': 1}
    """

    def __init__(
        self,
        status_code: int,
        headers: Optional[Union[httpx.Headers, Mapping[str, str]]] = None,
    ):
        self._status_code = int(status_code)
        self._headers = httpx.Headers(headers or {})
        self._body = bytearray()

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def headers(self) -> httpx.Headers:
        """Заголовки ответа (поиск без учёта регистра)."""
        return self._headers

    @property
    def ok(self) -> bool:
        return 200 <= self._status_code < 300

    @property
    def size(self) -> int:
        """Сколько байт тела накоплено."""
        return len(self._body)

    def add_chunk(self, chunk: bytes) -> None:
        """Дописать кусок тела в конец буфера."""
        self._body += chunk

    @property
    def text(self) -> str:
        """Тело как UTF-8 текст (битые последовательности заменяются на U+FFFD)."""
        return self._body.decode("utf-8", errors="replace")

    @property
    def json(self) -> Any:
        """
        Тело как JSON.

        Для 204 No Content всегда None, что бы ни лежало в буфере.

        Raises:
            ParseError: тело не является JSON
        """
        if self._status_code == 204:
            return None

        try:
            return json.loads(self.text)
        except json.JSONDecodeError as e:
            raise ParseError(str(e), status_code=self._status_code) from e

    @property
    def buffer(self) -> bytes:
        """Независимая копия тела."""
        return bytes(self._body)

    def __len__(self) -> int:
        return len(self._body)

    def __repr__(self) -> str:
        return f"<Response [{self._status_code}] {len(self._body)} bytes>"
