from __future__ import annotations

from servicegen.generation.client import emit_client
from servicegen.generation.client.request import body_expression, path_expression
from servicegen.generation.context import EmitContext
from servicegen.generation.names import ArtifactNames
from servicegen.generation.profile import GenerationProfile
from servicegen.loader import load_service
from servicegen.model import HttpMethodBinding, HttpServiceBinding


def emit(binding: HttpServiceBinding, typed: bool = True) -> tuple[str, EmitContext]:
    profile = GenerationProfile.from_version("3.14", typed=typed)
    ctx = EmitContext(profile, binding, ArtifactNames.from_module(binding.service.name))
    section = emit_client(ctx)
    assert section.exports == ["create_http_client", "ExampleApiHttpClient"]
    return "\n".join(section.code.lines()), ctx


def method_binding(binding: HttpServiceBinding, name: str) -> HttpMethodBinding:
    return next(method for method in binding.methods if method.method.name == name)


class TestEmitClient:
    def test_factory_and_constructor(self, example_binding: HttpServiceBinding) -> None:
        code, ctx = emit(example_binding)
        assert (
            "def create_http_client(backend: AsyncBackend, base_uri: str | None = None, "
            "timeout: float | None = None) -> ExampleApiHttpClient:"
        ) in code
        assert "class ExampleApiHttpClient(ExampleApiService):" in code
        assert "        if not callable(getattr(backend, 'request', None)):" in code
        assert "            base_uri = 'http://local.test/v1'" in code
        assert "        if base_uri and not base_uri.endswith('/'):" in code
        assert "AsyncBackend" in ctx.imports.names_from("servicegen.runtime")

    def test_path_fields_are_validated_first(self, example_binding: HttpServiceBinding) -> None:
        code, _ = emit(example_binding)
        assert (
            "        uri_part_0 = encode_uri_component(request['id']) if request.get('id') is not None else ''\n"
            "        if not uri_part_0:\n"
            "            return create_required_request_field_error('id')\n"
            "        uri = 'widgets/' + uri_part_0\n"
        ) in code

    def test_query_and_body(self, example_binding: HttpServiceBinding) -> None:
        code, ctx = emit(example_binding)
        assert "        query: list[str] = []" in code
        assert "            query.append('limit=' + value_text(request['limit']))" in code
        assert "            query.append('dryRun=' + value_text(request['dryRun']))" in code
        assert "            uri += '?' + '&'.join(query)" in code
        assert "        if request.get('widget') is None:" in code
        assert "            'body': json.dumps(request['widget'])," in code
        assert "        headers: dict[str, str] = {'Content-Type': 'application/json'}" in code
        assert "json" in ctx.imports.module_imports

    def test_context_is_passed_to_fetch(self, example_binding: HttpServiceBinding) -> None:
        code, _ = emit(example_binding)
        assert (
            "        result = await fetch_response(\n"
            "            self._backend,\n"
            "            self._base_uri + uri,\n"
            "            fetch_request,\n"
            "            timeout=self._timeout,\n"
            "            context=context,\n"
            "        )\n"
        ) in code

    def test_request_headers(self, example_binding: HttpServiceBinding) -> None:
        code, _ = emit(example_binding)
        assert "            headers['If-None-Match'] = request['ifNoneMatch']" in code

    def test_status_dispatch(self, example_binding: HttpServiceBinding) -> None:
        code, _ = emit(example_binding)
        assert (
            "        if result.status == 200:\n"
            "            if result.json is not None:\n"
            "                value = {'widget': result.json}\n"
            "        elif result.status == 304:\n"
            "            value = {'notModified': True}\n"
            "        if value is None:\n"
            "            return create_response_error(result.status, result.json)\n"
            "        header_value = result.headers.get('etag')\n"
            "        if header_value is not None:\n"
            "            value['eTag'] = header_value\n"
            "        return {'value': value}"
        ) in code
        assert "        if result.status == 204:\n            value = {}" in code
        assert "                value = cast('ListWidgetsResponse', result.json)" in code

    def test_untyped_dialect_has_no_annotations(self, example_binding: HttpServiceBinding) -> None:
        code, ctx = emit(example_binding, typed=False)
        assert "def create_http_client(backend, base_uri=None, timeout=None):" in code
        assert "class ExampleApiHttpClient:" in code
        assert "    async def get_widget(self, request, context=None):" in code
        assert "        query = []" in code
        assert "                value = result.json" in code
        assert "cast(" not in code
        assert "->" not in code
        assert "typing" not in ctx.imports.from_imports


class TestRequestHelpers:
    def test_path_expression(self) -> None:
        assert path_expression("/widgets/{id}/parts/{part}", {"id": "a", "part": "b"}) == (
            "'widgets/' + a + '/parts/' + b"
        )
        assert path_expression("/", {}) == "''"
        assert path_expression("/{id}", {"id": "a"}) == "a"

    def test_body_expression(self, example_binding: HttpServiceBinding) -> None:
        assert body_expression(method_binding(example_binding, "getWidget")) is None
        assert body_expression(method_binding(example_binding, "createWidget")) == "json.dumps(request['widget'])"
        assert body_expression(method_binding(example_binding, "renameWidget")) == (
            "json.dumps({key: request[key] for key in ('name',) if key in request})"
        )

    def test_all_normal_request_is_sent_whole(self, example_document: dict[str, object]) -> None:
        example_document["methods"] = [
            {
                "name": "updateWidget",
                "http": {"method": "POST", "path": "/widgets/update"},
                "request": [{"name": "id", "type": "string"}, {"name": "name", "type": "string"}],
                "response": [],
            }
        ]
        binding = load_service(example_document)
        assert body_expression(binding.methods[0]) == "json.dumps(request)"

    def test_path_fields_with_similar_names_get_distinct_variables(self, example_document: dict[str, object]) -> None:
        example_document["methods"] = [
            {
                "name": "getPart",
                "http": {"method": "GET", "path": "/a/{fooBar}/b/{foo_bar}"},
                "request": [{"name": "fooBar", "type": "string"}, {"name": "foo_bar", "type": "string"}],
                "response": [],
            }
        ]
        code, _ = emit(load_service(example_document))
        assert "        uri_part_0 = encode_uri_component(request['fooBar'])" in code
        assert "        uri_part_1 = encode_uri_component(request['foo_bar'])" in code
        assert "        uri = 'a/' + uri_part_0 + '/b/' + uri_part_1" in code
