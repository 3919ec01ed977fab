from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Protocol

from typing_extensions import Required, TypedDict

logger = logging.getLogger(__name__)


class AsyncBackend(Protocol):
    """Transport used by generated HTTP clients.

    ``context`` is the per-call value the caller passed to the client method,
    such as credentials or tracing data; it is forwarded untouched.
    """

    async def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None,
        body: bytes | None,
        timeout: float | None,
        context: Any = None,
    ) -> tuple[int, dict[str, str], bytes]: ...


class FetchRequest(TypedDict, total=False):
    method: Required[str]
    headers: dict[str, str]
    body: str


@dataclass(frozen=True)
class FetchResult:
    """A transport response.

    Attributes:
        status: The HTTP status code
        headers: Response headers with lower-cased names
        content: The raw response body
    """

    status: int
    headers: Mapping[str, str]
    content: bytes

    @cached_property
    def json(self) -> Any:
        """The parsed JSON body, or ``None`` when there is no parsable JSON body.

        Parsing happens on first access, so outcomes that never look at the
        body never parse it.
        """
        content_type = self.headers.get("content-type", "")
        if not self.content or "json" not in content_type:
            return None
        try:
            return json.loads(self.content)
        except (UnicodeDecodeError, json.JSONDecodeError):
            logger.debug("Ignoring unparsable JSON response body (status %d)", self.status, exc_info=True)
            return None


async def fetch_response(
    backend: AsyncBackend,
    uri: str,
    request: FetchRequest,
    timeout: float | None = None,
    context: Any = None,
) -> FetchResult:
    """Send a request through the backend and wrap its response.

    Transport failures raised by the backend propagate unchanged.
    """
    body = request.get("body")
    logger.debug("%s %s", request["method"], uri)
    status, headers, content = await backend.request(
        request["method"],
        uri,
        request.get("headers"),
        body.encode("utf-8") if body is not None else None,
        timeout,
        context=context,
    )
    logger.debug("%s %s -> %d", request["method"], uri, status)
    return FetchResult(
        status=status,
        headers={str(key).lower(): str(value) for key, value in headers.items()},
        content=content,
    )
