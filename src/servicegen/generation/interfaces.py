"""Typed declarations: the service Protocol, method records, DTOs and enums."""

from __future__ import annotations

from ..model import DtoInfo, EnumInfo, FieldInfo, HttpMethodBinding
from .context import EmitContext, Section
from .docs import element_doc_lines, write_doc_comment, write_docstring
from .names import method_name, sanitize_name
from .type_renderer import RUNTIME_MODULE


def emit_interfaces(ctx: EmitContext) -> Section:
    """Emit the typed declarations of a service.

    The order is fixed: the service interface, the request and response
    records of every method, the DTO records, then the enums.

    Returns:
        The section; its exports list every declared name in order
    """
    service = ctx.binding.service
    exports: list[str] = []

    emit_service_protocol(ctx)
    exports.append(ctx.interface_name)

    for method in ctx.binding.methods:
        info = method.method
        request_name = ctx.request_type(info.name)
        response_name = ctx.response_type(info.name)
        ctx.code.blank(2)
        emit_record(ctx, request_name, info.request_fields, [f"Request for {info.name}."])
        ctx.code.blank(2)
        emit_record(ctx, response_name, info.response_fields, [f"Response for {info.name}."])
        exports.extend([request_name, response_name])

    for dto in service.dtos:
        ctx.code.blank(2)
        emit_dto(ctx, dto)
        exports.append(dto.name)

    for enum in service.enums:
        ctx.code.blank(2)
        emit_enum(ctx, enum)
        exports.append(enum.name)

    ctx.type_names.extend(exports)
    return ctx.section(exports)


def emit_service_protocol(ctx: EmitContext) -> None:
    ctx.imports.add("typing", "Any", "Protocol")
    with ctx.code.block(f"class {ctx.interface_name}(Protocol):"):
        write_docstring(ctx.code, element_doc_lines(ctx.binding.service))
        for method in ctx.binding.methods:
            ctx.code.blank()
            emit_protocol_method(ctx, method)


def emit_protocol_method(ctx: EmitContext, method: HttpMethodBinding) -> None:
    info = method.method
    with ctx.code.block(f"async def {method_name(info.name)}{method_signature(ctx, info.name)}:"):
        write_docstring(ctx.code, element_doc_lines(info))
        ctx.code.line("...")


def method_signature(ctx: EmitContext, name: str) -> str:
    """Parameters and return annotation shared by the interface and the client.

    Example:
        ``(self, request: GetWidgetRequest, context: Any = None) -> ServiceResult[GetWidgetResponse]``
    """
    if not ctx.typed:
        return "(self, request, context=None)"
    request_name = ctx.request_type(name)
    response_name = ctx.response_type(name)
    if not ctx.profile.use_future_annotations:
        request_name = repr(request_name)
        response_name = repr(response_name)
    ctx.imports.add(RUNTIME_MODULE, "ServiceResult")
    ctx.imports.add("typing", "Any")
    return f"(self, request: {request_name}, context: Any = None) -> ServiceResult[{response_name}]"


def emit_record(
    ctx: EmitContext,
    name: str,
    fields: list[FieldInfo],
    lines: list[str] | None = None,
) -> None:
    """Emit a functional ``TypedDict`` with one optional key per field."""
    typed_dict_module = "typing_extensions" if ctx.profile.use_typing_extensions else "typing"
    ctx.imports.add(typed_dict_module, "TypedDict")
    renderer = ctx.renderer(quote_refs=True, evaluated=True)
    write_doc_comment(ctx.code, lines or [])
    with ctx.code.block(f"{name} = TypedDict({name!r}, {{", "}, total=False)"):
        for field_info in fields:
            write_doc_comment(ctx.code, element_doc_lines(field_info))
            ctx.code.line(f"{field_info.name!r}: {renderer.render(field_info.type)},")
    ctx.collect(renderer)


def emit_dto(ctx: EmitContext, dto: DtoInfo) -> None:
    emit_record(ctx, dto.name, dto.fields, element_doc_lines(dto))


def emit_enum(ctx: EmitContext, enum: EnumInfo) -> None:
    ctx.imports.add("enum", "Enum")
    with ctx.code.block(f"class {enum.name}(str, Enum):"):
        write_docstring(ctx.code, element_doc_lines(enum))
        if enum.values:
            ctx.code.blank()
        for value in enum.values:
            write_doc_comment(ctx.code, element_doc_lines(value))
            ctx.code.line(f"{sanitize_name(value.name)} = {value.name!r}")
