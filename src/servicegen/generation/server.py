"""Server scaffold generation.

The generated ``create_app(service)`` returns a FastAPI application with one
plain Starlette endpoint per method, registered through ``app.add_route`` so
FastAPI does not try to interpret handler signatures. Each handler rebuilds
the request record from the path, query, body and headers, awaits the
service implementation and turns its result into a response.
"""

from __future__ import annotations

from ..model import HttpMethodBinding, TypeKind, ValidResponse
from .context import EmitContext, Section
from .docs import element_doc_lines, write_docstring
from .names import method_name
from .type_renderer import RUNTIME_MODULE

SERVER_RUNTIME_MODULE = "servicegen.runtime.server"


def emit_server(ctx: EmitContext) -> Section:
    code = ctx.code
    ctx.imports.add("fastapi", "FastAPI")
    if ctx.typed:
        header = f"def create_app(service: {ctx.interface_name}) -> FastAPI:"
    else:
        header = "def create_app(service):"
    with code.block(header):
        write_docstring(code, [f"Create a FastAPI application serving the {ctx.binding.service.name} service."])
        code.line("app = FastAPI()")
        for method in ctx.binding.methods:
            code.blank()
            emit_handler(ctx, method)
            code.line(
                f"app.add_route({method.path!r}, {handler_name(method)}, methods=[{method.verb!r}])"
            )
        code.blank()
        code.line("return app")
    return ctx.section(["create_app"])


def handler_name(method: HttpMethodBinding) -> str:
    return f"handle_{method_name(method.method.name).rstrip('_')}"


def emit_handler(ctx: EmitContext, method: HttpMethodBinding) -> None:
    code = ctx.code
    if ctx.typed:
        ctx.imports.add("fastapi", "Request", "Response")
        header = f"async def {handler_name(method)}(req: Request) -> Response:"
    else:
        header = f"async def {handler_name(method)}(req):"
    with code.block(header):
        write_docstring(code, element_doc_lines(method.method))
        emit_request_assembly(ctx, method)
        code.blank()
        code.line(f"result = await service.{method_name(method.method.name)}(request)")
        emit_result_handling(ctx, method)


def emit_request_assembly(ctx: EmitContext, method: HttpMethodBinding) -> None:
    """Fill ``request`` from path params, query params, JSON body and headers."""
    code = ctx.code
    codec = ctx.codec()
    code.line(f"request{ctx.annotate(ctx.request_type(method.method.name))} = {{}}")

    for binding in method.path_fields:
        parsed = codec.parse_text(binding.field.type, f"req.path_params[{binding.name!r}]")
        code.line(f"request[{binding.field.name!r}] = {parsed}")

    for binding in method.query_fields:
        with code.block(f"if {binding.name!r} in req.query_params:"):
            parsed = codec.parse_text(binding.field.type, f"req.query_params[{binding.name!r}]")
            code.line(f"request[{binding.field.name!r}] = {parsed}")

    if method.request_body_field is not None or method.request_normal_fields:
        ctx.imports.add(SERVER_RUNTIME_MODULE, "read_json_body")
        code.line("body = await read_json_body(req)")
        if method.request_body_field is not None:
            with code.block("if body is not None:"):
                code.line(f"request[{method.request_body_field.field.name!r}] = body")
        else:
            with code.block("if isinstance(body, dict):"):
                for binding in method.request_normal_fields:
                    key = binding.field.name
                    with code.block(f"if {key!r} in body:"):
                        code.line(f"request[{key!r}] = body[{key!r}]")

    for binding in method.request_header_fields:
        with code.block(f"if {binding.name!r} in req.headers:"):
            parsed = codec.parse_text(binding.field.type, f"req.headers[{binding.name!r}]")
            code.line(f"request[{binding.field.name!r}] = {parsed}")

    ctx.collect(codec)


def emit_result_handling(ctx: EmitContext, method: HttpMethodBinding) -> None:
    code = ctx.code
    ctx.imports.add(RUNTIME_MODULE, "status_for_error")
    ctx.imports.add(SERVER_RUNTIME_MODULE, "json_response")

    code.line("error = result.get('error')")
    with code.block("if error is not None:"):
        code.line("return json_response(status_for_error(error), error)")
    code.line("value = result.get('value')")
    with code.block("if value is not None:"):
        emit_response_headers(ctx, method)
        if not emit_valid_responses(ctx, method):
            code.line("raise RuntimeError('Result value matches no declared response.')")
    code.line("raise RuntimeError('Result must have an error or value.')")


def emit_response_headers(ctx: EmitContext, method: HttpMethodBinding) -> None:
    code = ctx.code
    code.line(f"headers{ctx.annotate('dict[str, str]')} = {{}}")
    codec = ctx.codec()
    for binding in method.response_header_fields:
        key = binding.field.name
        with code.block(f"if value.get({key!r}) is not None:"):
            code.line(f"headers[{binding.name!r}] = {codec.header_text(binding.field.type, f'value[{key!r}]')}")
    ctx.collect(codec)


def emit_valid_responses(ctx: EmitContext, method: HttpMethodBinding) -> bool:
    """Pick the first satisfied response: body and empty responses, then normal ones.

    Emission stops after an unconditional return; returns whether one was emitted.
    """
    first = [r for r in method.valid_responses if not r.normal_fields]
    second = [r for r in method.valid_responses if r.normal_fields]
    for response in first + second:
        if emit_valid_response(ctx, response):
            return True
    return False


def emit_valid_response(ctx: EmitContext, response: ValidResponse) -> bool:
    """Emit one response branch; returns True when the branch always returns."""
    code = ctx.code
    status = response.status_code
    body_field = response.body_field
    if body_field is not None:
        key = body_field.field.name
        if body_field.field.type.kind is TypeKind.BOOLEAN:
            ctx.imports.add(SERVER_RUNTIME_MODULE, "empty_response")
            with code.block(f"if value.get({key!r}):"):
                code.line(f"return empty_response({status}, headers)")
        else:
            with code.block(f"if value.get({key!r}) is not None:"):
                code.line(f"return json_response({status}, value[{key!r}], headers)")
        return False

    if not response.normal_fields:
        ctx.imports.add(SERVER_RUNTIME_MODULE, "empty_response")
        code.line(f"return empty_response({status}, headers)")
        return True

    keys = ", ".join(repr(binding.field.name) for binding in response.normal_fields)
    if len(response.normal_fields) == 1:
        keys += ","
    code.line(f"return json_response({status}, {{key: value[key] for key in ({keys}) if key in value}}, headers)")
    return True
