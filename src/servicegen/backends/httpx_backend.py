from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol


class HttpxResponseProtocol(Protocol):
    status_code: int
    headers: Mapping[str, str]
    content: bytes


class HttpxAsyncClientProtocol(Protocol):
    async def request(self, method: str, url: str, **kwargs: object) -> HttpxResponseProtocol: ...


class HttpxAsyncBackend:
    """Adapts an ``httpx.AsyncClient`` to the generated clients' backend protocol."""

    def __init__(self, client: HttpxAsyncClientProtocol) -> None:
        self._client = client

    async def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None,
        body: bytes | None,
        timeout: float | None,
        context: object = None,
    ) -> tuple[int, dict[str, str], bytes]:
        kwargs: dict[str, object] = {"headers": headers, "content": body}
        if timeout is not None:
            kwargs["timeout"] = timeout
        response = await self._client.request(method, url, **kwargs)
        return response.status_code, {str(k): str(v) for k, v in response.headers.items()}, response.content
