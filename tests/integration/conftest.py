"""Pytest fixtures for integration tests.

This module provides fixtures for:
- Generating and importing client and server packages in each dialect
- An in-memory widget service implementing the generated interface
- A recording transport backend for tests that must not reach a server
"""

from __future__ import annotations

import importlib
import itertools
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any

import pytest

from servicegen import GenerationProfile, PackageSpec, generate_package
from servicegen.model import HttpServiceBinding

_package_ids = itertools.count()


@dataclass
class GeneratedService:
    dialect: str
    client: ModuleType
    server: ModuleType
    types: ModuleType | None


class FakeWidgetService:
    """In-memory implementation of the example service."""

    def __init__(self) -> None:
        self.widgets: dict[str, dict[str, Any]] = {
            "1": {"id": "1", "name": "Gear", "color": "red"},
            "2": {"id": "2", "name": "Gadget", "color": "green", "weight": 2.5},
        }
        self.requests: list[tuple[str, dict[str, Any]]] = []

    async def get_widget(self, request: dict[str, Any], context: Any = None) -> dict[str, Any]:
        self.requests.append(("get_widget", dict(request)))
        widget = self.widgets.get(request["id"])
        if widget is None:
            return {"error": {"code": "NotFound", "message": "No such widget."}}
        etag = f"etag-{widget['id']}"
        if request.get("ifNoneMatch") == etag:
            return {"value": {"notModified": True}}
        return {"value": {"widget": widget, "eTag": etag}}

    async def delete_widget(self, request: dict[str, Any], context: Any = None) -> dict[str, Any]:
        self.requests.append(("delete_widget", dict(request)))
        if self.widgets.pop(request["id"], None) is None:
            return {"error": {"code": "NotFound", "message": "No such widget."}}
        return {"value": {}}

    async def create_widget(self, request: dict[str, Any], context: Any = None) -> dict[str, Any]:
        self.requests.append(("create_widget", dict(request)))
        widget = dict(request["widget"])
        widget["id"] = str(len(self.widgets) + 1)
        self.widgets[widget["id"]] = widget
        return {"value": {"widget": widget}}

    async def list_widgets(self, request: dict[str, Any], context: Any = None) -> dict[str, Any]:
        self.requests.append(("list_widgets", dict(request)))
        widgets = list(self.widgets.values())
        if request.get("q") is not None:
            widgets = [w for w in widgets if request["q"] in w["name"]]
        if request.get("color") is not None:
            widgets = [w for w in widgets if w["color"] == request["color"]]
        if request.get("limit") is not None:
            widgets = widgets[: request["limit"]]
        return {"value": {"widgets": widgets, "total": len(self.widgets)}}

    async def rename_widget(self, request: dict[str, Any], context: Any = None) -> dict[str, Any]:
        self.requests.append(("rename_widget", dict(request)))
        widget = dict(self.widgets[request["id"]])
        widget["name"] = request["name"]
        if not request.get("dryRun"):
            self.widgets[widget["id"]] = widget
        return {"value": {"widget": widget}}


class RecordingBackend:
    """Backend returning a canned response and recording every call."""

    def __init__(self, status: int = 200, headers: dict[str, str] | None = None, content: bytes = b"") -> None:
        self.status = status
        self.headers = headers or {}
        self.content = content
        self.calls: list[tuple[str, str, dict[str, str] | None, bytes | None]] = []
        self.contexts: list[object] = []

    async def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None,
        body: bytes | None,
        timeout: float | None,
        context: object = None,
    ) -> tuple[int, dict[str, str], bytes]:
        self.calls.append((method, url, headers, body))
        self.contexts.append(context)
        return self.status, self.headers, self.content


def _import(package: str, module: str) -> ModuleType:
    importlib.invalidate_caches()
    return importlib.import_module(f"{package}.{module}")


@pytest.fixture(params=["typed", "untyped", "single"])
def generated(
    request: pytest.FixtureRequest,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    example_binding: HttpServiceBinding,
) -> GeneratedService:
    """Generate the example service in one dialect and import it."""
    dialect: str = request.param
    package = f"generated_{dialect}_{next(_package_ids)}"
    profile = GenerationProfile.from_version(
        "3.10",
        typed=dialect != "untyped",
        server=True,
        single_output=dialect == "single",
    )
    generate_package(PackageSpec(package_name=package, output_dir=tmp_path), example_binding, profile)
    monkeypatch.syspath_prepend(str(tmp_path))

    if dialect == "single":
        module = _import(package, "example_api")
        return GeneratedService(dialect=dialect, client=module, server=module, types=module)
    return GeneratedService(
        dialect=dialect,
        client=_import(package, "example_api_client"),
        server=_import(package, "example_api_server"),
        types=_import(package, "example_api_types") if dialect == "typed" else None,
    )


@pytest.fixture()
def service() -> FakeWidgetService:
    return FakeWidgetService()


@pytest.fixture()
def recording_backend() -> RecordingBackend:
    return RecordingBackend()
