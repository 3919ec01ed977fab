"""Status-code dispatch of generated client methods.

The generated code matches the response status against the declared valid
responses in declaration order. The first match decides the shape of the
value; a status nobody declared, or a declared one whose body is missing,
turns into a generic error result carrying the status and the raw body.
"""

from __future__ import annotations

from ...model import HttpMethodBinding, TypeKind, ValidResponse
from ..context import EmitContext
from ..type_renderer import RUNTIME_MODULE


def emit_dispatch(ctx: EmitContext, method: HttpMethodBinding) -> None:
    code = ctx.code
    response_name = ctx.response_type(method.method.name)
    if ctx.typed:
        renderer = ctx.renderer()
        annotation = renderer.optional(response_name)
        ctx.collect(renderer)
        code.line(f"value: {annotation} = None")
    else:
        code.line("value = None")

    keyword = "if"
    for response in method.valid_responses:
        with code.block(f"{keyword} result.status == {response.status_code}:"):
            emit_response_value(ctx, response, response_name)
        keyword = "elif"

    ctx.imports.add(RUNTIME_MODULE, "create_response_error")
    with code.block("if value is None:"):
        code.line("return create_response_error(result.status, result.json)")


def emit_response_value(ctx: EmitContext, response: ValidResponse, response_name: str) -> None:
    """Assign ``value`` for one declared response.

    Example:
        A 201 response with body field ``widget`` emits::

            if result.json is not None:
                value = {'widget': result.json}
    """
    code = ctx.code
    body_field = response.body_field
    if body_field is not None:
        key = body_field.field.name
        if body_field.field.type.kind is TypeKind.BOOLEAN:
            code.line(f"value = {{{key!r}: True}}")
            return
        with code.block("if result.json is not None:"):
            code.line(f"value = {{{key!r}: result.json}}")
        return

    if not response.normal_fields:
        code.line("value = {}")
        return

    with code.block("if isinstance(result.json, dict):"):
        if ctx.typed:
            ctx.imports.add("typing", "cast")
            code.line(f"value = cast({response_name!r}, result.json)")
        else:
            code.line("value = result.json")


def emit_response_headers(ctx: EmitContext, method: HttpMethodBinding) -> None:
    """Overlay parsed response header fields onto ``value``."""
    code = ctx.code
    codec = ctx.codec()
    for binding in method.response_header_fields:
        code.line(f"header_value = result.headers.get({binding.name.lower()!r})")
        with code.block("if header_value is not None:"):
            parsed = codec.parse_text(binding.field.type, "header_value")
            code.line(f"value[{binding.field.name!r}] = {parsed}")
    ctx.collect(codec)
