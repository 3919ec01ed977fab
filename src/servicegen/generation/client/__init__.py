"""Client code generation module.

This module provides the emit_client() function that generates an
asynchronous HTTP client for a service.

The generated code includes:
- A create_http_client() helper taking the transport backend
- A <Service>HttpClient class with one coroutine per service method

Every method validates path fields, builds the URI, query, headers and JSON
body, awaits the backend once, then decodes the response by status code.
Handled outcomes (missing required fields, undeclared statuses) come back as
error results; only transport failures raise.
"""

from __future__ import annotations

from ...model import HttpMethodBinding
from ..context import EmitContext, Section
from ..docs import element_doc_lines, write_docstring
from ..interfaces import method_signature
from ..names import method_name
from ..type_renderer import RUNTIME_MODULE
from .request import (
    emit_body_check,
    emit_fetch,
    emit_fetch_request,
    emit_headers,
    emit_path,
    emit_query,
)
from .response import emit_dispatch, emit_response_headers

__all__ = ["emit_client"]


def emit_client(ctx: EmitContext) -> Section:
    """Emit the client factory and class.

    Returns:
        The section exporting ``create_http_client`` and the client class
    """
    client_name = f"{ctx.service_name}HttpClient"
    emit_create_helper(ctx, client_name)
    ctx.code.blank(2)
    emit_client_class(ctx, client_name)
    return ctx.section(["create_http_client", client_name])


def emit_create_helper(ctx: EmitContext, client_name: str) -> None:
    code = ctx.code
    if ctx.typed:
        renderer = ctx.renderer()
        optional_str = renderer.optional("str")
        optional_float = renderer.optional("float")
        ctx.collect(renderer)
        ctx.imports.add(RUNTIME_MODULE, "AsyncBackend")
        returns = client_name if ctx.profile.use_future_annotations else repr(client_name)
        signature = (
            f"backend: AsyncBackend, base_uri: {optional_str} = None, "
            f"timeout: {optional_float} = None) -> {returns}"
        )
        header = f"def create_http_client({signature}:"
    else:
        header = "def create_http_client(backend, base_uri=None, timeout=None):"
    with code.block(header):
        write_docstring(code, [f"Create an HTTP client for the {ctx.binding.service.name} service."])
        code.line(f"return {client_name}(backend, base_uri=base_uri, timeout=timeout)")


def emit_client_class(ctx: EmitContext, client_name: str) -> None:
    code = ctx.code
    base = f"({ctx.interface_name})" if ctx.typed else ""
    with code.block(f"class {client_name}{base}:"):
        lines = [f"HTTP client for the {ctx.binding.service.name} service."]
        lines.extend(element_doc_lines(ctx.binding.service))
        write_docstring(code, lines)
        code.blank()
        emit_constructor(ctx)
        for method in ctx.binding.methods:
            code.blank()
            emit_method(ctx, method)


def emit_constructor(ctx: EmitContext) -> None:
    code = ctx.code
    if ctx.typed:
        renderer = ctx.renderer()
        signature = (
            f"self, backend: AsyncBackend, base_uri: {renderer.optional('str')} = None, "
            f"timeout: {renderer.optional('float')} = None) -> None"
        )
        ctx.collect(renderer)
    else:
        signature = "self, backend, base_uri=None, timeout=None)"
    with code.block(f"def __init__({signature}:"):
        with code.block("if not callable(getattr(backend, 'request', None)):"):
            code.line("raise TypeError('backend must provide a callable request()')")
        with code.block("if base_uri is None:"):
            code.line(f"base_uri = {ctx.binding.url or ''!r}")
        with code.block("if base_uri and not base_uri.endswith('/'):"):
            code.line("base_uri += '/'")
        code.line("self._backend = backend")
        code.line("self._base_uri = base_uri")
        code.line("self._timeout = timeout")


def emit_method(ctx: EmitContext, method: HttpMethodBinding) -> None:
    info = method.method
    with ctx.code.block(f"async def {method_name(info.name)}{method_signature(ctx, info.name)}:"):
        write_docstring(ctx.code, element_doc_lines(info))
        emit_path(ctx, method)
        emit_query(ctx, method)
        emit_body_check(ctx, method)
        emit_headers(ctx, method)
        emit_fetch_request(ctx, method)
        emit_fetch(ctx)
        emit_dispatch(ctx, method)
        emit_response_headers(ctx, method)
        ctx.code.line("return {'value': value}")
