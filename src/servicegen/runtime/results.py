"""Service result and error shapes shared by generated clients and servers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from typing_extensions import TypedDict

T = TypeVar("T")


class ServiceError(TypedDict, total=False):
    """An error returned by a service method."""

    code: str
    message: str
    details: dict[str, Any]
    innerError: ServiceError


class ServiceResult(TypedDict, Generic[T], total=False):
    """Either a value or an error."""

    value: T
    error: ServiceError


STANDARD_ERROR_CODES: Mapping[str, int] = {
    "NotModified": 304,
    "InvalidRequest": 400,
    "NotAuthenticated": 401,
    "NotAuthorized": 403,
    "NotFound": 404,
    "Conflict": 409,
    "RequestTooLarge": 413,
    "TooManyRequests": 429,
    "InternalError": 500,
    "ServiceUnavailable": 503,
}

_CODES_BY_STATUS: Mapping[int, str] = {status: code for code, status in STANDARD_ERROR_CODES.items()}


def status_for_error(error: Mapping[str, object] | None) -> int:
    """Map an error code to its HTTP status, defaulting to 500."""
    code = error.get("code") if error else None
    if isinstance(code, str):
        return STANDARD_ERROR_CODES.get(code, 500)
    return 500


def create_required_request_field_error(name: str) -> ServiceResult[Any]:
    """Create the failed result for a missing required request field."""
    return {
        "error": {
            "code": "InvalidRequest",
            "message": f"The request field '{name}' is required.",
        }
    }


def create_response_error(status: int, json: object = None) -> ServiceResult[Any]:
    """Create the failed result for a response that matched no declared outcome.

    The error code comes from an error-shaped body when there is one, then
    from the standard status table. ``details`` always carries the status and
    the raw parsed body.
    """
    code: str | None = None
    message: str | None = None
    if isinstance(json, Mapping):
        if isinstance(json.get("code"), str):
            code = json["code"]
        if isinstance(json.get("message"), str):
            message = json["message"]
    if code is None:
        code = _CODES_BY_STATUS.get(status) or _fallback_code(status)
    if message is None:
        message = f"Unexpected HTTP status code: {status}."
    return {
        "error": {
            "code": code,
            "message": message,
            "details": {"status": status, "body": json},
        }
    }


def _fallback_code(status: int) -> str:
    if 400 <= status < 500:
        return "InvalidRequest"
    if status >= 500:
        return "InternalError"
    return "InvalidResponse"
