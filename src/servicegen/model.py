"""Service definition model consumed by the generators.

This module defines the immutable data structures that describe a service:
its DTOs, enums and methods, and the HTTP binding that maps every method onto
a verb, a path template and the path/query/header/body placement of its
fields. The model is built once per generation run (usually by
``servicegen.loader``) and only read by the generation modules.

Key classes:
- TypeRef: Recursive field type (kind tag plus value type or element name)
- ServiceDefinition: Root container for DTOs, enums and methods
- HttpServiceBinding: The resolved HTTP binding of a service
- HttpMethodBinding: Verb, path and field partitions of one method
- ValidResponse: One declared (status code, shape) outcome of a method
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TypeKind(Enum):
    """The closed set of field type kinds."""

    STRING = "string"
    BYTES = "bytes"
    BOOLEAN = "boolean"
    INT32 = "int32"
    INT64 = "int64"
    DOUBLE = "double"
    DECIMAL = "decimal"
    OBJECT = "object"
    ERROR = "error"
    DTO = "dto"
    ENUM = "enum"
    RESULT = "result"
    ARRAY = "array"
    MAP = "map"
    NULLABLE = "nullable"


CONTAINER_KINDS = frozenset({TypeKind.RESULT, TypeKind.ARRAY, TypeKind.MAP, TypeKind.NULLABLE})


@dataclass(frozen=True)
class TypeRef:
    """Recursive field type.

    Attributes:
        kind: The kind tag
        value_type: The wrapped type for result, array, map and nullable kinds
        name: The referenced element name for dto and enum kinds
    """

    kind: TypeKind
    value_type: TypeRef | None = None
    name: str | None = None

    @classmethod
    def of(cls, kind: TypeKind) -> TypeRef:
        return cls(kind=kind)

    @classmethod
    def dto(cls, name: str) -> TypeRef:
        return cls(kind=TypeKind.DTO, name=name)

    @classmethod
    def enum(cls, name: str) -> TypeRef:
        return cls(kind=TypeKind.ENUM, name=name)

    @classmethod
    def array_of(cls, value_type: TypeRef) -> TypeRef:
        return cls(kind=TypeKind.ARRAY, value_type=value_type)

    @classmethod
    def map_of(cls, value_type: TypeRef) -> TypeRef:
        return cls(kind=TypeKind.MAP, value_type=value_type)

    @classmethod
    def result_of(cls, value_type: TypeRef) -> TypeRef:
        return cls(kind=TypeKind.RESULT, value_type=value_type)

    @classmethod
    def nullable_of(cls, value_type: TypeRef) -> TypeRef:
        return cls(kind=TypeKind.NULLABLE, value_type=value_type)

    def uses_kind(self, kind: TypeKind) -> bool:
        """Check whether this type or any type it wraps has the given kind."""
        current: TypeRef | None = self
        while current is not None:
            if current.kind is kind:
                return True
            current = current.value_type
        return False


@dataclass(frozen=True)
class FieldInfo:
    """A request, response or DTO field.

    Attributes:
        name: The field name, also its JSON key
        type: The field type
        summary: Human-readable summary
        obsolete: Whether the field is deprecated
        obsolete_message: Optional deprecation message
    """

    name: str
    type: TypeRef
    summary: str | None = None
    obsolete: bool = False
    obsolete_message: str | None = None


@dataclass(frozen=True)
class DtoInfo:
    name: str
    fields: list[FieldInfo]
    summary: str | None = None
    obsolete: bool = False
    obsolete_message: str | None = None


@dataclass(frozen=True)
class EnumValueInfo:
    name: str
    summary: str | None = None
    obsolete: bool = False
    obsolete_message: str | None = None


@dataclass(frozen=True)
class EnumInfo:
    name: str
    values: list[EnumValueInfo]
    summary: str | None = None
    obsolete: bool = False
    obsolete_message: str | None = None


@dataclass(frozen=True)
class MethodInfo:
    """A service method.

    Attributes:
        name: The method name (camelCase in definitions)
        request_fields: Ordered request fields
        response_fields: Ordered response fields
    """

    name: str
    request_fields: list[FieldInfo]
    response_fields: list[FieldInfo]
    summary: str | None = None
    obsolete: bool = False
    obsolete_message: str | None = None


@dataclass(frozen=True)
class ServiceDefinition:
    """Root container for a parsed service definition."""

    name: str
    methods: list[MethodInfo] = field(default_factory=list)
    dtos: list[DtoInfo] = field(default_factory=list)
    enums: list[EnumInfo] = field(default_factory=list)
    summary: str | None = None
    obsolete: bool = False
    obsolete_message: str | None = None

    def all_fields(self) -> list[FieldInfo]:
        """Return every DTO, request and response field of the service."""
        fields: list[FieldInfo] = []
        for dto in self.dtos:
            fields.extend(dto.fields)
        for method in self.methods:
            fields.extend(method.request_fields)
            fields.extend(method.response_fields)
        return fields


@dataclass(frozen=True)
class HttpFieldBinding:
    """A field bound to an HTTP location.

    Attributes:
        name: The wire name (path placeholder, query key or header name)
        field: The bound service field
    """

    name: str
    field: FieldInfo


@dataclass(frozen=True)
class ValidResponse:
    """One declared success outcome of a method.

    Attributes:
        status_code: The HTTP status code that selects this outcome
        body_field: The field carried as the whole response body, if any
        normal_fields: Fields serialized as a JSON object, if no body field
    """

    status_code: int
    body_field: HttpFieldBinding | None = None
    normal_fields: list[HttpFieldBinding] | None = None


@dataclass(frozen=True)
class HttpMethodBinding:
    """The resolved HTTP binding of one method.

    Every request field appears in exactly one of the path, query, header,
    body and normal partitions.

    Attributes:
        method: The bound service method
        verb: The HTTP method (uppercase: "GET", "POST", etc.)
        path: The path template with ``{name}`` placeholders
        path_fields: Fields substituted into the path
        query_fields: Fields sent as query parameters
        request_header_fields: Fields sent as request headers
        request_body_field: The field sent as the whole request body, if any
        request_normal_fields: Fields sent in the JSON request object
        response_header_fields: Fields read from response headers
        valid_responses: Declared outcomes, matched in order
    """

    method: MethodInfo
    verb: str
    path: str
    path_fields: list[HttpFieldBinding] = field(default_factory=list)
    query_fields: list[HttpFieldBinding] = field(default_factory=list)
    request_header_fields: list[HttpFieldBinding] = field(default_factory=list)
    request_body_field: HttpFieldBinding | None = None
    request_normal_fields: list[HttpFieldBinding] = field(default_factory=list)
    response_header_fields: list[HttpFieldBinding] = field(default_factory=list)
    valid_responses: list[ValidResponse] = field(default_factory=list)


@dataclass(frozen=True)
class HttpServiceBinding:
    """The resolved HTTP binding of a service.

    This is the top-level structure produced by ``load_service()`` and
    consumed by ``generate_service()``.

    Attributes:
        service: The service definition
        url: Default base URL of the service, if declared
        methods: HTTP bindings of the service methods, in declaration order
    """

    service: ServiceDefinition
    url: str | None = None
    methods: list[HttpMethodBinding] = field(default_factory=list)
