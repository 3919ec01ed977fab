from __future__ import annotations

import pytest

from servicegen.loader import load_service
from servicegen.model import HttpServiceBinding


@pytest.fixture()
def example_document() -> dict[str, object]:
    return {
        "service": "ExampleApi",
        "summary": "Example service.",
        "url": "http://local.test/v1",
        "enums": [
            {
                "name": "Color",
                "summary": "A widget color.",
                "values": [
                    {"name": "red", "summary": "Red."},
                    {"name": "green", "obsolete": True},
                    {"name": "blue", "obsoleteMessage": "Use green."},
                ],
            },
            {"name": "Shape", "obsolete": True, "values": [{"name": "round"}, {"name": "square"}]},
        ],
        "dtos": [
            {
                "name": "Widget",
                "summary": "A widget.",
                "fields": [
                    {"name": "id", "type": "string", "summary": "The identifier."},
                    {"name": "name", "type": "string"},
                    {"name": "color", "type": "Color"},
                    {"name": "weight", "type": "nullable<double>"},
                    {"name": "tags", "type": "map<string[]>", "obsolete": True},
                ],
            }
        ],
        "methods": [
            {
                "name": "getWidget",
                "summary": "Gets a widget.",
                "http": {"method": "GET", "path": "/widgets/{id}"},
                "request": [
                    {"name": "id", "type": "string"},
                    {"name": "ifNoneMatch", "type": "string", "http": {"from": "header", "name": "If-None-Match"}},
                ],
                "response": [
                    {"name": "widget", "type": "Widget", "http": {"from": "body"}},
                    {"name": "eTag", "type": "string", "http": {"from": "header", "name": "ETag"}},
                    {"name": "notModified", "type": "boolean", "http": {"from": "body", "code": 304}},
                ],
            },
            {
                "name": "deleteWidget",
                "summary": "Deletes a widget.",
                "http": {"method": "DELETE", "path": "/widgets/{id}", "code": 204},
                "request": [{"name": "id", "type": "string"}],
                "response": [],
            },
            {
                "name": "createWidget",
                "http": {"method": "POST", "path": "/widgets"},
                "request": [{"name": "widget", "type": "Widget", "http": {"from": "body"}}],
                "response": [{"name": "widget", "type": "Widget", "http": {"from": "body", "code": 201}}],
            },
            {
                "name": "listWidgets",
                "http": {"method": "GET", "path": "/widgets"},
                "request": [
                    {"name": "q", "type": "string"},
                    {"name": "limit", "type": "int32"},
                    {"name": "color", "type": "Color"},
                ],
                "response": [
                    {"name": "widgets", "type": "Widget[]"},
                    {"name": "total", "type": "int64"},
                ],
            },
            {
                "name": "renameWidget",
                "obsolete": True,
                "obsoleteMessage": "Use createWidget.",
                "http": {"method": "PUT", "path": "/widgets/{id}/name"},
                "request": [
                    {"name": "id", "type": "string"},
                    {"name": "name", "type": "string"},
                    {"name": "dryRun", "type": "boolean", "http": {"from": "query"}},
                ],
                "response": [{"name": "widget", "type": "Widget"}],
            },
        ],
    }


@pytest.fixture()
def example_binding(example_document: dict[str, object]) -> HttpServiceBinding:
    return load_service(example_document)
