"""Runtime support imported by generated clients and servers.

The FastAPI helpers live in ``servicegen.runtime.server`` and are only
imported by generated server code.
"""

from .codecs import encode_uri_component, parse_boolean, parse_integer, parse_number, value_text
from .fetch import AsyncBackend, FetchRequest, FetchResult, fetch_response
from .results import (
    STANDARD_ERROR_CODES,
    ServiceError,
    ServiceResult,
    create_required_request_field_error,
    create_response_error,
    status_for_error,
)

__all__ = [
    "AsyncBackend",
    "FetchRequest",
    "FetchResult",
    "STANDARD_ERROR_CODES",
    "ServiceError",
    "ServiceResult",
    "create_required_request_field_error",
    "create_response_error",
    "encode_uri_component",
    "fetch_response",
    "parse_boolean",
    "parse_integer",
    "parse_number",
    "status_for_error",
    "value_text",
]
