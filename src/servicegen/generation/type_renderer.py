"""Type rendering utilities for code generation.

This module provides the TypeRenderer class which converts field types of
the service model into Python type annotation strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..errors import GenerationError
from ..model import TypeKind, TypeRef
from .profile import GenerationProfile

RUNTIME_MODULE = "servicegen.runtime"


@dataclass
class TypeRenderer:
    """Converts field types to Python type annotation strings.

    Attributes:
        profile: Generation profile controlling Python version features
        quote_refs: Whether to quote DTO and enum names (for forward refs)
        evaluated: Whether the annotation is evaluated at import time, which
            rules out ``T | None`` on quoted names
        typing_imports: Names required from ``typing``
        runtime_imports: Names required from ``servicegen.runtime``

    Note:
        render() has side effects: it accumulates the imports required by
        every rendered type.

    Example:
        >>> renderer = TypeRenderer(GenerationProfile())
        >>> renderer.render(TypeRef.array_of(TypeRef.dto("Widget")))
        'list[Widget]'
        >>> renderer.render(TypeRef.nullable_of(TypeRef.of(TypeKind.INT32)))
        'int | None'
    """

    profile: GenerationProfile
    quote_refs: bool = False
    evaluated: bool = False
    typing_imports: set[str] = field(default_factory=set)
    runtime_imports: set[str] = field(default_factory=set)

    def render(self, type_ref: TypeRef) -> str:
        """Convert a field type to a Python type annotation string.

        Raises:
            GenerationError: If the kind is unknown or a container or named
                kind lacks its value type or name
        """
        kind = type_ref.kind
        if kind in (TypeKind.STRING, TypeKind.BYTES):
            return "str"
        if kind is TypeKind.BOOLEAN:
            return "bool"
        if kind in (TypeKind.INT32, TypeKind.INT64):
            return "int"
        if kind in (TypeKind.DOUBLE, TypeKind.DECIMAL):
            return "float"
        if kind is TypeKind.OBJECT:
            self.typing_imports.add("Any")
            return "dict[str, Any]"
        if kind is TypeKind.ERROR:
            self.runtime_imports.add("ServiceError")
            return "ServiceError"
        if kind in (TypeKind.DTO, TypeKind.ENUM):
            if not type_ref.name:
                raise GenerationError(f"Missing name for {kind.value} type")
            return f"{type_ref.name!r}" if self.quote_refs else type_ref.name
        if kind is TypeKind.RESULT:
            self.runtime_imports.add("ServiceResult")
            return f"ServiceResult[{self._render_value(type_ref)}]"
        if kind is TypeKind.ARRAY:
            return f"list[{self._render_value(type_ref)}]"
        if kind is TypeKind.MAP:
            return f"dict[str, {self._render_value(type_ref)}]"
        if kind is TypeKind.NULLABLE:
            return self.optional(self._render_value(type_ref))
        raise GenerationError(f"Unknown field type {kind}")

    def optional(self, base: str) -> str:
        """Wrap a type annotation in a None union."""
        if self.profile.use_pep604 and not self.evaluated:
            return f"{base} | None"
        self.typing_imports.add("Optional")
        return f"Optional[{base}]"

    def _render_value(self, type_ref: TypeRef) -> str:
        if type_ref.value_type is None:
            raise GenerationError(f"Missing value type for {type_ref.kind.value} type")
        return self.render(type_ref.value_type)
