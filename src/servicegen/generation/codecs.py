"""Value codecs for fields bound to URIs and headers.

Each method renders the Python expression that generated code evaluates to
move a scalar field value between its typed form and its wire text. Only the
kinds in ``SCALAR_KINDS`` can occupy a path, query or header slot; any other
kind raises ``ServiceBindingError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..errors import ServiceBindingError
from ..model import TypeKind, TypeRef

SCALAR_KINDS = frozenset(
    {
        TypeKind.STRING,
        TypeKind.BYTES,
        TypeKind.BOOLEAN,
        TypeKind.INT32,
        TypeKind.INT64,
        TypeKind.DOUBLE,
        TypeKind.DECIMAL,
        TypeKind.ENUM,
    }
)


def check_scalar(type_ref: TypeRef, slot: str) -> TypeKind:
    """Return the kind of a field type that is legal in a URI or header slot.

    Raises:
        ServiceBindingError: If the kind is not in the allow-list
    """
    if type_ref.kind not in SCALAR_KINDS:
        raise ServiceBindingError(f"Field type not supported on {slot}: {type_ref.kind.value}")
    return type_ref.kind


@dataclass
class ValueCodec:
    """Renders encode/parse expressions for scalar fields.

    Attributes:
        typed: Whether the typed dialect is emitted (enables enum casts)
        runtime_imports: Helper names required from ``servicegen.runtime``
        typing_imports: Names required from ``typing``

    Example:
        >>> codec = ValueCodec(typed=True)
        >>> codec.uri_component(TypeRef.of(TypeKind.INT32), "request['id']")
        "value_text(request['id'])"
    """

    typed: bool = True
    runtime_imports: set[str] = field(default_factory=set)
    typing_imports: set[str] = field(default_factory=set)

    def uri_component(self, type_ref: TypeRef, expr: str) -> str:
        """Expression encoding ``expr`` as a URI path segment or query value."""
        kind = check_scalar(type_ref, "path/query")
        if kind in (TypeKind.STRING, TypeKind.BYTES, TypeKind.ENUM):
            return self._call("encode_uri_component", expr)
        if kind is TypeKind.DOUBLE:
            return self._call("encode_uri_component", self._call("value_text", expr))
        return self._call("value_text", expr)

    def parse_text(self, type_ref: TypeRef, expr: str) -> str:
        """Expression turning captured text ``expr`` into a field value."""
        kind = check_scalar(type_ref, "path/query/header")
        if kind is TypeKind.ENUM:
            if not self.typed or not type_ref.name:
                return expr
            self.typing_imports.add("cast")
            return f"cast({type_ref.name!r}, {expr})"
        if kind in (TypeKind.STRING, TypeKind.BYTES):
            return expr
        if kind is TypeKind.BOOLEAN:
            return self._call("parse_boolean", expr)
        if kind in (TypeKind.INT32, TypeKind.INT64):
            return self._call("parse_integer", expr)
        return self._call("parse_number", expr)

    def header_text(self, type_ref: TypeRef, expr: str) -> str:
        """Expression rendering ``expr`` as a header value."""
        kind = check_scalar(type_ref, "header")
        if kind in (TypeKind.STRING, TypeKind.BYTES, TypeKind.ENUM):
            return expr
        return self._call("value_text", expr)

    def _call(self, helper: str, expr: str) -> str:
        self.runtime_imports.add(helper)
        return f"{helper}({expr})"
