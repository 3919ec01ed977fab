from __future__ import annotations

import keyword
import re
from dataclasses import dataclass

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def capitalize(name: str) -> str:
    """Uppercase the first character.

    Example:
        >>> capitalize("getWidget")
        'GetWidget'
    """
    return name[:1].upper() + name[1:]


def snake_case(name: str) -> str:
    """Convert a camelCase, PascalCase or kebab-case name to snake_case.

    Example:
        >>> snake_case("getWidgetBatch")
        'get_widget_batch'
        >>> snake_case("ExampleAPIService")
        'example_api_service'
    """
    spaced = _CAMEL_BOUNDARY.sub("_", name)
    cleaned = re.sub(r"[^0-9a-zA-Z]+", "_", spaced)
    return cleaned.strip("_").lower()


def pascal_case(name: str) -> str:
    """Convert a name to PascalCase.

    Example:
        >>> pascal_case("example_api")
        'ExampleApi'
    """
    return "".join(capitalize(part) for part in snake_case(name).split("_"))


def sanitize_name(name: str) -> str:
    """Append an underscore to names that are Python keywords.

    E.g. 'from' becomes 'from_', 'class' becomes 'class_'.
    """
    if keyword.iskeyword(name):
        return f"{name}_"
    return name


def method_name(name: str) -> str:
    """Python method name for a service method."""
    return sanitize_name(snake_case(name))


@dataclass(frozen=True)
class ArtifactNames:
    """Deterministic artifact names derived from a module name."""

    module: str

    @classmethod
    def from_module(cls, name: str) -> "ArtifactNames":
        return cls(module=snake_case(name))

    @property
    def types_module(self) -> str:
        return f"{self.module}_types"

    @property
    def client_module(self) -> str:
        return f"{self.module}_client"

    @property
    def server_module(self) -> str:
        return f"{self.module}_server"

    @staticmethod
    def file_name(module: str) -> str:
        return f"{module}.py"
