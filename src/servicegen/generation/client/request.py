from __future__ import annotations

import re

from ...model import HttpMethodBinding
from ...runtime.codecs import encode_uri_component
from ..context import EmitContext
from ..type_renderer import RUNTIME_MODULE

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")


def emit_path(ctx: EmitContext, method: HttpMethodBinding) -> None:
    """Validate path fields, then build ``uri`` from the path template.

    A path field that is missing or encodes to empty text short-circuits the
    call with a required-field error before anything is sent.
    """
    code = ctx.code
    codec = ctx.codec()
    variables: dict[str, str] = {}
    for index, binding in enumerate(method.path_fields):
        key = binding.field.name
        variable = f"uri_part_{index}"
        encoded = codec.uri_component(binding.field.type, f"request[{key!r}]")
        code.line(f"{variable} = {encoded} if request.get({key!r}) is not None else ''")
        with code.block(f"if not {variable}:"):
            code.line(f"return create_required_request_field_error({key!r})")
        variables[binding.name] = variable
    if method.path_fields:
        ctx.imports.add(RUNTIME_MODULE, "create_required_request_field_error")
    ctx.collect(codec)

    code.line(f"uri = {path_expression(method.path, variables)}")


def path_expression(template: str, variables: dict[str, str]) -> str:
    """Concatenation expression for a path template relative to the base URI.

    Example:
        >>> path_expression("/widgets/{id}", {"id": "uri_part_0"})
        "'widgets/' + uri_part_0"
    """
    parts: list[str] = []
    position = 0
    template = template.lstrip("/")
    for match in _PLACEHOLDER.finditer(template):
        if match.start() > position:
            parts.append(repr(template[position : match.start()]))
        parts.append(variables[match.group(1)])
        position = match.end()
    if position < len(template):
        parts.append(repr(template[position:]))
    return " + ".join(parts) if parts else "''"


def emit_query(ctx: EmitContext, method: HttpMethodBinding) -> None:
    if not method.query_fields:
        return
    code = ctx.code
    codec = ctx.codec()
    code.line(f"query{ctx.annotate('list[str]')} = []")
    for binding in method.query_fields:
        key = binding.field.name
        prefix = encode_uri_component(binding.name) + "="
        encoded = codec.uri_component(binding.field.type, f"request[{key!r}]")
        with code.block(f"if request.get({key!r}) is not None:"):
            code.line(f"query.append({prefix!r} + {encoded})")
    with code.block("if query:"):
        code.line("uri += '?' + '&'.join(query)")
    ctx.collect(codec)


def emit_body_check(ctx: EmitContext, method: HttpMethodBinding) -> None:
    if method.request_body_field is None:
        return
    key = method.request_body_field.field.name
    ctx.imports.add(RUNTIME_MODULE, "create_required_request_field_error")
    with ctx.code.block(f"if request.get({key!r}) is None:"):
        ctx.code.line(f"return create_required_request_field_error({key!r})")


def emit_headers(ctx: EmitContext, method: HttpMethodBinding) -> None:
    """Build the ``headers`` dict: content type, then request header fields."""
    code = ctx.code
    sends_body = has_body(method)
    if sends_body:
        code.line(f"headers{ctx.annotate('dict[str, str]')} = {{'Content-Type': 'application/json'}}")
    else:
        code.line(f"headers{ctx.annotate('dict[str, str]')} = {{}}")
    codec = ctx.codec()
    for binding in method.request_header_fields:
        key = binding.field.name
        text = codec.header_text(binding.field.type, f"request[{key!r}]")
        with code.block(f"if request.get({key!r}) is not None:"):
            code.line(f"headers[{binding.name!r}] = {text}")
    ctx.collect(codec)


def emit_fetch_request(ctx: EmitContext, method: HttpMethodBinding) -> None:
    code = ctx.code
    if ctx.typed:
        ctx.imports.add(RUNTIME_MODULE, "FetchRequest")
    with code.block(f"fetch_request{ctx.annotate('FetchRequest')} = {{", "}"):
        code.line(f"'method': {method.verb!r},")
        code.line("'headers': headers,")
        body = body_expression(method)
        if body is not None:
            ctx.imports.add_module("json")
            code.line(f"'body': {body},")


def has_body(method: HttpMethodBinding) -> bool:
    return method.request_body_field is not None or bool(method.request_normal_fields)


def body_expression(method: HttpMethodBinding) -> str | None:
    """JSON text expression sent as the request body, if any.

    The body field is sent as the whole body; a request made only of normal
    fields is sent as is; otherwise the present normal fields are picked out.
    """
    if method.request_body_field is not None:
        return f"json.dumps(request[{method.request_body_field.field.name!r}])"
    if not method.request_normal_fields:
        return None
    if len(method.request_normal_fields) == len(method.method.request_fields):
        return "json.dumps(request)"
    keys = ", ".join(repr(binding.field.name) for binding in method.request_normal_fields)
    if len(method.request_normal_fields) == 1:
        keys += ","
    return f"json.dumps({{key: request[key] for key in ({keys}) if key in request}})"


def emit_fetch(ctx: EmitContext) -> None:
    ctx.imports.add(RUNTIME_MODULE, "fetch_response")
    with ctx.code.block("result = await fetch_response(", ")"):
        ctx.code.line("self._backend,")
        ctx.code.line("self._base_uri + uri,")
        ctx.code.line("fetch_request,")
        ctx.code.line("timeout=self._timeout,")
        ctx.code.line("context=context,")
