"""Request and response helpers for generated FastAPI servers."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from fastapi import HTTPException, Request, Response
from fastapi.responses import JSONResponse


async def read_json_body(request: Request) -> Any:
    """Read the parsed JSON request body, or ``None`` when the body is empty."""
    content = await request.body()
    if not content.strip():
        return None
    try:
        return json.loads(content)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise HTTPException(status_code=400, detail="Request body must be valid JSON.") from exc


def json_response(status: int, content: Any, headers: Mapping[str, str] | None = None) -> Response:
    return JSONResponse(content=content, status_code=status, headers=dict(headers) if headers else None)


def empty_response(status: int, headers: Mapping[str, str] | None = None) -> Response:
    return Response(status_code=status, headers=dict(headers) if headers else None)
