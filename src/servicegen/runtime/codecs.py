"""Scalar text codecs used by generated clients and servers.

Generated code calls these helpers to place field values into URIs and
headers, and to turn captured path, query and header text back into values.
"""

from __future__ import annotations

import math
from enum import Enum
from urllib.parse import quote

# Characters left unescaped by ECMAScript encodeURIComponent, besides the
# alphanumerics and "_.-~" that quote() never escapes.
_URI_COMPONENT_SAFE = "!*'()"


def encode_uri_component(value: object) -> str:
    """Percent-encode a value as an opaque URI component.

    Example:
        >>> encode_uri_component("a b/c")
        'a%20b%2Fc'
    """
    return quote(value_text(value), safe=_URI_COMPONENT_SAFE)


def value_text(value: object) -> str:
    """Render a scalar value in its natural textual form.

    Booleans render as ``true``/``false``, enum members as their value and
    floats with ``repr`` so that they parse back to the same number.
    """
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer() and abs(value) < 1e16:
            return str(int(value))
        return repr(value)
    return str(value)


def parse_boolean(text: str | None) -> bool | None:
    """Parse ``true``/``false`` case-insensitively; anything else is ``None``."""
    if isinstance(text, str):
        lowered = text.lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return None


def parse_integer(text: str | None) -> int | None:
    """Parse a base-10 integer, returning ``None`` for unparsable text."""
    if text is None:
        return None
    try:
        return int(text.strip(), 10)
    except ValueError:
        return None


def parse_number(text: str | None) -> float | None:
    """Parse a floating-point number, returning ``None`` for unparsable text."""
    if text is None:
        return None
    try:
        return float(text)
    except ValueError:
        return None
