"""Service definition loader.

Reads a JSON or YAML service definition document, builds the service model
and resolves the HTTP binding of every method: where each request field
travels (path, query, header, body or the JSON request object), where each
response field comes from, and which status codes the method declares.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from os import PathLike
from pathlib import Path
from typing import cast

from .errors import SpecError
from .generation.codecs import SCALAR_KINDS
from .generation.names import method_name
from .model import (
    DtoInfo,
    EnumInfo,
    EnumValueInfo,
    FieldInfo,
    HttpFieldBinding,
    HttpMethodBinding,
    HttpServiceBinding,
    MethodInfo,
    ServiceDefinition,
    TypeKind,
    TypeRef,
    ValidResponse,
)

logger = logging.getLogger(__name__)

ServiceSource = str | PathLike[str] | Mapping[str, object]
Document = dict[str, object]

HTTP_VERBS = frozenset({"GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"})
QUERY_DEFAULT_VERBS = frozenset({"GET", "DELETE"})

_NAMED_KINDS = {
    kind.value: kind
    for kind in (
        TypeKind.STRING,
        TypeKind.BYTES,
        TypeKind.BOOLEAN,
        TypeKind.INT32,
        TypeKind.INT64,
        TypeKind.DOUBLE,
        TypeKind.DECIMAL,
        TypeKind.OBJECT,
        TypeKind.ERROR,
    )
}
_WRAPPER_KINDS = {"map": TypeKind.MAP, "result": TypeKind.RESULT, "nullable": TypeKind.NULLABLE}
_WRAPPER = re.compile(r"^(map|result|nullable)<(.+)>$")
_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")
_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def load_service(source: ServiceSource) -> HttpServiceBinding:
    """Load a service definition and resolve its HTTP binding.

    Args:
        source: A file path (JSON or YAML) or a dict-like document

    Returns:
        The service definition with its HTTP binding

    Raises:
        SpecError: If the document is malformed or the binding is inconsistent
    """
    document = _read_source(source)
    service = parse_service(document)
    url = document.get("url")
    if url is not None and not isinstance(url, str):
        raise SpecError("'url' must be a string")
    raw_methods = _mapping_list(document, "methods", "service")
    methods = [
        bind_method(method, raw, service)
        for method, raw in zip(service.methods, raw_methods)
    ]
    logger.debug("Loaded service %s with %d methods", service.name, len(methods))
    return HttpServiceBinding(service=service, url=url, methods=methods)


def parse_service(document: Document) -> ServiceDefinition:
    name = _identifier(document, "service", "document")
    raw_enums = _mapping_list(document, "enums", "service")
    raw_dtos = _mapping_list(document, "dtos", "service")
    raw_methods = _mapping_list(document, "methods", "service")

    enum_names = _unique([_identifier(raw, "name", "enum") for raw in raw_enums], "enum")
    dto_names = _unique([_identifier(raw, "name", "dto") for raw in raw_dtos], "dto")
    clashes = set(enum_names) & set(dto_names)
    if clashes:
        raise SpecError(f"Names used by both an enum and a dto: {', '.join(sorted(clashes))}")
    parser = TypeParser(dtos=set(dto_names), enums=set(enum_names))

    enums = [_parse_enum(raw) for raw in raw_enums]
    dtos = [
        DtoInfo(
            name=_identifier(raw, "name", "dto"),
            fields=_parse_fields(raw, "fields", parser, f"dto {raw['name']}"),
            **_doc_attributes(raw),
        )
        for raw in raw_dtos
    ]
    methods = [_parse_method(raw, parser) for raw in raw_methods]
    _unique([method.name for method in methods], "method")
    _check_python_names([method.name for method in methods], "method")
    return ServiceDefinition(
        name=name,
        methods=methods,
        dtos=dtos,
        enums=enums,
        **_doc_attributes(document),
    )


class TypeParser:
    """Parses type strings such as ``nullable<Widget[]>`` into ``TypeRef``.

    Names that are not built-in kinds must be declared DTOs or enums.
    """

    def __init__(self, dtos: set[str] | None = None, enums: set[str] | None = None) -> None:
        self.dtos = dtos or set()
        self.enums = enums or set()

    def parse(self, text: str) -> TypeRef:
        text = text.strip()
        if text.endswith("[]"):
            return TypeRef.array_of(self.parse(text[:-2]))
        match = _WRAPPER.match(text)
        if match:
            kind = _WRAPPER_KINDS[match.group(1)]
            return TypeRef(kind=kind, value_type=self.parse(match.group(2)))
        if text in _NAMED_KINDS:
            return TypeRef.of(_NAMED_KINDS[text])
        if text in self.dtos:
            return TypeRef.dto(text)
        if text in self.enums:
            return TypeRef.enum(text)
        raise SpecError(f"Unknown type: {text!r}")


def bind_method(method: MethodInfo, raw: Mapping[str, object], service: ServiceDefinition) -> HttpMethodBinding:
    """Resolve the HTTP binding of one method.

    Request fields default to the path when a placeholder names them, else to
    the query string for GET and DELETE, else to the JSON request object.
    Response fields default to the JSON response object.
    """
    where = f"method {method.name}"
    http = raw.get("http") or {}
    if not isinstance(http, Mapping):
        raise SpecError(f"'http' must be an object in {where}")
    verb = str(http.get("method", "POST")).upper()
    if verb not in HTTP_VERBS:
        raise SpecError(f"Unsupported HTTP method {verb!r} in {where}")
    path = http.get("path", f"/{method.name}")
    if not isinstance(path, str) or not path.startswith("/"):
        raise SpecError(f"Path must be a string starting with '/' in {where}")
    code = _status_code(http.get("code", 200), where)
    placeholders = _PLACEHOLDER.findall(path)
    for placeholder in placeholders:
        if not _IDENTIFIER.match(placeholder):
            raise SpecError(f"Invalid path placeholder {{{placeholder}}} in {where}")

    path_fields: list[HttpFieldBinding] = []
    query_fields: list[HttpFieldBinding] = []
    header_fields: list[HttpFieldBinding] = []
    body_fields: list[HttpFieldBinding] = []
    normal_fields: list[HttpFieldBinding] = []

    raw_request = _mapping_list(raw, "request", where)
    for field_info, raw_field in zip(method.request_fields, raw_request):
        location, wire_name, _ = _http_attributes(raw_field, where)
        if location is None:
            if field_info.name in placeholders:
                location = "path"
            elif verb in QUERY_DEFAULT_VERBS:
                location = "query"
            else:
                location = "normal"
        binding = HttpFieldBinding(name=wire_name or field_info.name, field=field_info)
        if location == "path":
            _check_scalar(field_info, "path", where)
            path_fields.append(binding)
        elif location == "query":
            _check_scalar(field_info, "query", where)
            query_fields.append(binding)
        elif location == "header":
            _check_scalar(field_info, "header", where)
            header_fields.append(binding)
        elif location == "body":
            body_fields.append(binding)
        elif location == "normal":
            normal_fields.append(binding)
        else:
            raise SpecError(f"Invalid request field location {location!r} in {where}")

    bound = [binding.name for binding in path_fields]
    missing = [p for p in placeholders if p not in bound]
    if missing:
        raise SpecError(f"Path placeholders without path fields in {where}: {', '.join(missing)}")
    extra = [name for name in bound if name not in placeholders]
    if extra:
        raise SpecError(f"Path fields missing from the path in {where}: {', '.join(extra)}")
    if len(body_fields) > 1:
        raise SpecError(f"More than one request body field in {where}")
    if body_fields and normal_fields:
        raise SpecError(f"Request body field cannot be combined with normal fields in {where}")

    response_header_fields: list[HttpFieldBinding] = []
    response_normal_fields: list[HttpFieldBinding] = []
    valid_responses: list[ValidResponse] = []
    raw_response = _mapping_list(raw, "response", where)
    for field_info, raw_field in zip(method.response_fields, raw_response):
        location, wire_name, body_code = _http_attributes(raw_field, where)
        binding = HttpFieldBinding(name=wire_name or field_info.name, field=field_info)
        if location in (None, "normal"):
            response_normal_fields.append(binding)
        elif location == "header":
            _check_scalar(field_info, "header", where)
            response_header_fields.append(binding)
        elif location == "body":
            status = _status_code(body_code if body_code is not None else 200, where)
            valid_responses.append(ValidResponse(status_code=status, body_field=binding))
        else:
            raise SpecError(f"Invalid response field location {location!r} in {where}")

    if response_normal_fields or not valid_responses:
        valid_responses.append(ValidResponse(status_code=code, normal_fields=response_normal_fields))

    statuses = [response.status_code for response in valid_responses]
    duplicates = sorted({status for status in statuses if statuses.count(status) > 1})
    if duplicates:
        raise SpecError(f"Duplicate status codes in {where}: {', '.join(map(str, duplicates))}")

    return HttpMethodBinding(
        method=method,
        verb=verb,
        path=path,
        path_fields=path_fields,
        query_fields=query_fields,
        request_header_fields=header_fields,
        request_body_field=body_fields[0] if body_fields else None,
        request_normal_fields=normal_fields,
        response_header_fields=response_header_fields,
        valid_responses=valid_responses,
    )


def _parse_enum(raw: Mapping[str, object]) -> EnumInfo:
    name = _identifier(raw, "name", "enum")
    values = [
        EnumValueInfo(name=_identifier(value, "name", f"enum {name}"), **_doc_attributes(value))
        for value in _mapping_list(raw, "values", f"enum {name}")
    ]
    _unique([value.name for value in values], f"value of enum {name}")
    return EnumInfo(name=name, values=values, **_doc_attributes(raw))


def _parse_method(raw: Mapping[str, object], parser: TypeParser) -> MethodInfo:
    name = _identifier(raw, "name", "method")
    return MethodInfo(
        name=name,
        request_fields=_parse_fields(raw, "request", parser, f"request of {name}"),
        response_fields=_parse_fields(raw, "response", parser, f"response of {name}"),
        **_doc_attributes(raw),
    )


def _parse_fields(
    raw: Mapping[str, object],
    key: str,
    parser: TypeParser,
    where: str,
) -> list[FieldInfo]:
    fields: list[FieldInfo] = []
    for raw_field in _mapping_list(raw, key, where):
        name = _identifier(raw_field, "name", where)
        type_text = raw_field.get("type")
        if not isinstance(type_text, str):
            raise SpecError(f"Field {name} in {where} must have a type")
        fields.append(FieldInfo(name=name, type=parser.parse(type_text), **_doc_attributes(raw_field)))
    _unique([f.name for f in fields], f"field in {where}")
    return fields


def _http_attributes(raw: Mapping[str, object], where: str) -> tuple[str | None, str | None, object]:
    http = raw.get("http")
    if http is None:
        return None, None, None
    if not isinstance(http, Mapping):
        raise SpecError(f"'http' of field {raw.get('name')} in {where} must be an object")
    location = http.get("from")
    wire_name = http.get("name")
    if location is not None and not isinstance(location, str):
        raise SpecError(f"'from' of field {raw.get('name')} in {where} must be a string")
    if wire_name is not None and not isinstance(wire_name, str):
        raise SpecError(f"'name' of field {raw.get('name')} in {where} must be a string")
    return location, wire_name, http.get("code")


def _check_scalar(field_info: FieldInfo, slot: str, where: str) -> None:
    if field_info.type.kind not in SCALAR_KINDS:
        raise SpecError(
            f"Field {field_info.name} in {where} has type {field_info.type.kind.value}, "
            f"which is not supported on {slot}"
        )


def _status_code(value: object, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 100 <= value <= 599:
        raise SpecError(f"Invalid status code {value!r} in {where}")
    return value


def _doc_attributes(raw: Mapping[str, object]) -> dict[str, object]:
    summary = raw.get("summary")
    message = raw.get("obsoleteMessage")
    return {
        "summary": summary if isinstance(summary, str) else None,
        "obsolete": bool(raw.get("obsolete", False)) or isinstance(message, str),
        "obsolete_message": message if isinstance(message, str) else None,
    }


def _identifier(raw: Mapping[str, object], key: str, where: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value:
        raise SpecError(f"Missing '{key}' in {where}")
    if not _IDENTIFIER.match(value):
        raise SpecError(f"Invalid name {value!r} in {where}")
    return value


def _mapping_list(raw: Mapping[str, object], key: str, where: str) -> list[Mapping[str, object]]:
    value = raw.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, Mapping) for item in value):
        raise SpecError(f"'{key}' must be a list of objects in {where}")
    return cast(list[Mapping[str, object]], value)


def _unique(names: list[str], what: str) -> list[str]:
    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise SpecError(f"Duplicate {what} name: {name}")
        seen.add(name)
    return names


def _check_python_names(names: list[str], what: str) -> None:
    by_identifier: dict[str, str] = {}
    for name in names:
        identifier = method_name(name)
        if identifier in by_identifier:
            raise SpecError(f"The {what} names {by_identifier[identifier]!r} and {name!r} both map to {identifier!r}")
        by_identifier[identifier] = name


def _read_source(source: ServiceSource) -> Document:
    """Read a service definition document from a path or a mapping."""
    if isinstance(source, Mapping):
        return dict(source)
    path = Path(source)
    text = path.read_text(encoding="utf-8")
    if path.suffix in {".yaml", ".yml"}:
        data = _load_yaml(text)
    else:
        data = _load_json_or_yaml(text)
    if not isinstance(data, dict):
        raise SpecError("Service definition must be an object")
    return cast(Document, data)


def _load_json_or_yaml(text: str) -> object:
    """Try to load as JSON, fall back to YAML if that fails."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return _load_yaml(text)


def _load_yaml(text: str) -> object:
    """Load YAML text, requiring PyYAML to be installed."""
    try:
        import yaml  # type: ignore[import-untyped]
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise SpecError("PyYAML is required to load YAML definitions") from exc
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SpecError(f"Invalid YAML: {exc}") from exc
