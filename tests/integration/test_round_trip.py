"""Integration tests for generated clients and servers.

These tests verify that:
1. Generated packages import in the typed, untyped and single-file dialects
2. A generated client talks to a generated FastAPI server through httpx
3. Handled outcomes come back as results without reaching the network
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from types import SimpleNamespace
from typing import Any

import httpx
import pytest

from servicegen.backends import HttpxAsyncBackend
from servicegen.runtime import fetch as fetch_module


@asynccontextmanager
async def connected_client(generated: Any, service: Any) -> AsyncIterator[Any]:
    app = generated.server.create_app(service)
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app)) as http:
        yield generated.client.create_http_client(HttpxAsyncBackend(http), base_uri="http://testserver")


class TestGeneratedPackage:
    def test_exports(self, generated: Any) -> None:
        assert callable(generated.client.create_http_client)
        assert callable(generated.server.create_app)
        if generated.types is not None:
            assert generated.types.Color.green.value == "green"
            assert "ExampleApiService" in generated.client.__all__

    def test_backend_must_be_callable(self, generated: Any) -> None:
        with pytest.raises(TypeError):
            generated.client.create_http_client(object())


class TestRoundTrip:
    @pytest.mark.anyio
    async def test_get_widget_with_response_header(self, generated: Any, service: Any) -> None:
        async with connected_client(generated, service) as client:
            result = await client.get_widget({"id": "1"})
        assert result == {
            "value": {"widget": {"id": "1", "name": "Gear", "color": "red"}, "eTag": "etag-1"}
        }

    @pytest.mark.anyio
    async def test_boolean_body_field(self, generated: Any, service: Any) -> None:
        async with connected_client(generated, service) as client:
            result = await client.get_widget({"id": "1", "ifNoneMatch": "etag-1"})
        assert result == {"value": {"notModified": True}}
        assert service.requests == [("get_widget", {"id": "1", "ifNoneMatch": "etag-1"})]

    @pytest.mark.anyio
    async def test_service_error(self, generated: Any, service: Any) -> None:
        async with connected_client(generated, service) as client:
            result = await client.get_widget({"id": "404"})
        error = result["error"]
        assert error["code"] == "NotFound"
        assert error["message"] == "No such widget."
        assert error["details"]["status"] == 404

    @pytest.mark.anyio
    async def test_path_field_is_percent_encoded(self, generated: Any, service: Any) -> None:
        async with connected_client(generated, service) as client:
            await client.get_widget({"id": "a b?c"})
        assert service.requests == [("get_widget", {"id": "a b?c"})]

    @pytest.mark.anyio
    async def test_delete_returns_empty_value(self, generated: Any, service: Any) -> None:
        async with connected_client(generated, service) as client:
            result = await client.delete_widget({"id": "1"})
        assert result == {"value": {}}
        assert "1" not in service.widgets

    @pytest.mark.anyio
    async def test_create_returns_body_field(self, generated: Any, service: Any) -> None:
        async with connected_client(generated, service) as client:
            result = await client.create_widget({"widget": {"name": "Sprocket", "color": "blue"}})
        assert result == {"value": {"widget": {"name": "Sprocket", "color": "blue", "id": "3"}}}

    @pytest.mark.anyio
    async def test_list_with_query_fields(self, generated: Any, service: Any) -> None:
        color = generated.types.Color.green if generated.types is not None else "green"
        async with connected_client(generated, service) as client:
            result = await client.list_widgets({"q": "Ga", "limit": 5, "color": color})
        assert result["value"]["total"] == 2
        assert [w["id"] for w in result["value"]["widgets"]] == ["2"]
        assert service.requests == [("list_widgets", {"q": "Ga", "limit": 5, "color": "green"})]

    @pytest.mark.anyio
    async def test_mixed_path_query_and_body_fields(self, generated: Any, service: Any) -> None:
        async with connected_client(generated, service) as client:
            result = await client.rename_widget({"id": "1", "name": "Cog", "dryRun": True})
        assert result["value"]["widget"]["name"] == "Cog"
        assert service.widgets["1"]["name"] == "Gear"
        assert service.requests == [("rename_widget", {"id": "1", "dryRun": True, "name": "Cog"})]

    @pytest.mark.anyio
    async def test_value_matching_no_response_raises(self, generated: Any) -> None:
        class EmptyCreateService:
            async def create_widget(self, request: Any, context: Any = None) -> dict[str, Any]:
                return {"value": {}}

        async with connected_client(generated, EmptyCreateService()) as client:
            with pytest.raises(RuntimeError, match="Result value matches no declared response"):
                await client.create_widget({"widget": {"name": "Sprocket"}})

    @pytest.mark.anyio
    async def test_result_without_value_or_error_raises(self, generated: Any) -> None:
        class EmptyService:
            async def delete_widget(self, request: Any, context: Any = None) -> dict[str, Any]:
                return {}

        async with connected_client(generated, EmptyService()) as client:
            with pytest.raises(RuntimeError, match="Result must have an error or value"):
                await client.delete_widget({"id": "1"})


class TestClientOutcomes:
    @pytest.mark.anyio
    async def test_missing_path_field_never_calls_backend(self, generated: Any, recording_backend: Any) -> None:
        client = generated.client.create_http_client(recording_backend)
        for request in ({}, {"id": ""}):
            result = await client.get_widget(request)
            assert result == {
                "error": {"code": "InvalidRequest", "message": "The request field 'id' is required."}
            }
        assert recording_backend.calls == []

    @pytest.mark.anyio
    async def test_missing_body_field_never_calls_backend(self, generated: Any, recording_backend: Any) -> None:
        client = generated.client.create_http_client(recording_backend)
        result = await client.create_widget({})
        assert result["error"]["message"] == "The request field 'widget' is required."
        assert recording_backend.calls == []

    @pytest.mark.anyio
    async def test_request_shape(self, generated: Any, recording_backend: Any) -> None:
        recording_backend.status = 200
        recording_backend.headers = {"Content-Type": "application/json"}
        recording_backend.content = b'{"widget": {"id": "1"}}'
        client = generated.client.create_http_client(recording_backend, base_uri="http://example/api")
        result = await client.rename_widget({"id": "1 2", "name": "Cog", "dryRun": False})
        assert result == {"value": {"widget": {"id": "1"}}}
        assert recording_backend.calls == [
            (
                "PUT",
                "http://example/api/widgets/1%202/name?dryRun=false",
                {"Content-Type": "application/json"},
                b'{"name": "Cog"}',
            )
        ]

    @pytest.mark.anyio
    async def test_default_base_uri(self, generated: Any, recording_backend: Any) -> None:
        recording_backend.status = 204
        client = generated.client.create_http_client(recording_backend)
        await client.delete_widget({"id": "7"})
        assert recording_backend.calls[0][:2] == ("DELETE", "http://local.test/v1/widgets/7")

    @pytest.mark.anyio
    async def test_empty_response_is_not_parsed(
        self, generated: Any, recording_backend: Any, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def fail(_: object) -> object:
            raise AssertionError("body must not be parsed")

        monkeypatch.setattr(fetch_module, "json", SimpleNamespace(loads=fail, JSONDecodeError=ValueError))
        recording_backend.status = 204
        recording_backend.headers = {"content-type": "application/json"}
        recording_backend.content = b"{oops"
        client = generated.client.create_http_client(recording_backend)
        assert await client.delete_widget({"id": "1"}) == {"value": {}}

    @pytest.mark.anyio
    async def test_declared_status_without_body_is_an_error(self, generated: Any, recording_backend: Any) -> None:
        recording_backend.status = 201
        client = generated.client.create_http_client(recording_backend)
        result = await client.create_widget({"widget": {"name": "Sprocket"}})
        error = result["error"]
        assert error["code"] == "InvalidResponse"
        assert error["details"] == {"status": 201, "body": None}

    @pytest.mark.anyio
    async def test_undeclared_status_is_an_error(self, generated: Any, recording_backend: Any) -> None:
        recording_backend.status = 418
        recording_backend.headers = {"content-type": "application/json"}
        recording_backend.content = b'{"oops": 1}'
        client = generated.client.create_http_client(recording_backend)
        result = await client.get_widget({"id": "1"})
        assert result == {
            "error": {
                "code": "InvalidRequest",
                "message": "Unexpected HTTP status code: 418.",
                "details": {"status": 418, "body": {"oops": 1}},
            }
        }

    @pytest.mark.anyio
    async def test_response_header_fields_are_parsed(self, generated: Any, recording_backend: Any) -> None:
        recording_backend.status = 304
        recording_backend.headers = {"ETag": "etag-9"}
        client = generated.client.create_http_client(recording_backend)
        assert await client.get_widget({"id": "9"}) == {"value": {"notModified": True, "eTag": "etag-9"}}

    @pytest.mark.anyio
    async def test_context_reaches_backend(self, generated: Any, recording_backend: Any) -> None:
        recording_backend.status = 204
        client = generated.client.create_http_client(recording_backend)
        context = {"auth": "token"}
        await client.delete_widget({"id": "1"}, context=context)
        await client.delete_widget({"id": "2"})
        assert recording_backend.contexts == [context, None]
