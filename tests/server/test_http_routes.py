from __future__ import annotations

import asyncio

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from evolution_mcp.config import EvolutionSettings, Settings, ToolsSettings
from evolution_mcp.dispatcher import Dispatcher
from evolution_mcp.evolution.client import OutboundRequest, RemoteResponse
from evolution_mcp.server import app_factory, http
from evolution_mcp.server.schema import ToolRequest


class _FakeClient:
    def __init__(self, data: object) -> None:
        self._data = data
        self.calls: list[OutboundRequest] = []

    async def send(self, request: OutboundRequest) -> RemoteResponse:
        self.calls.append(request)
        return RemoteResponse(status_code=200, data=self._data)


def _install(monkeypatch: pytest.MonkeyPatch, settings: Settings, client: _FakeClient) -> None:
    monkeypatch.setattr(http, "get_dispatcher", lambda: Dispatcher(settings, client=client))


def _build_settings(**overrides) -> Settings:
    tools = overrides.pop("tools", ToolsSettings())
    values = {"api_key": "k", "instance": "inst1", "api_base": "host:8080"}
    values.update(overrides)
    return Settings(evolution=EvolutionSettings(**values), tools=tools)


def test_health() -> None:
    assert asyncio.run(http.health()) == {"status": "ok"}


def test_list_tools_respects_allow_list(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, _build_settings(tools=ToolsSettings(enabled=["find_contacts"])), _FakeClient({}))

    result = asyncio.run(http.list_tools())

    assert [tool["name"] for tool in result["tools"]] == ["find_contacts"]


def test_call_tool_returns_envelope(monkeypatch: pytest.MonkeyPatch) -> None:
    client = _FakeClient([{"id": "c1"}])
    _install(monkeypatch, _build_settings(), client)

    envelope = asyncio.run(http.call_tool("find_contacts", ToolRequest(params={})))

    assert envelope.text.startswith("Contacts found: [")
    assert client.calls[0].url == "https://host:8080/chat/findContacts/inst1"


def test_call_tool_maps_dispatch_errors_to_status_codes(monkeypatch: pytest.MonkeyPatch) -> None:
    settings = _build_settings(api_key="", tools=ToolsSettings(enabled=["find_contacts", "find_settings"]))
    _install(monkeypatch, settings, _FakeClient({}))

    with pytest.raises(HTTPException) as unknown:
        asyncio.run(http.call_tool("send_fax", ToolRequest()))
    with pytest.raises(HTTPException) as disabled:
        asyncio.run(http.call_tool("send_text", ToolRequest()))
    with pytest.raises(HTTPException) as misconfigured:
        asyncio.run(http.call_tool("find_settings", ToolRequest()))

    assert unknown.value.status_code == 404
    assert disabled.value.status_code == 403
    assert misconfigured.value.status_code == 500
    assert misconfigured.value.detail["details"] == {"variable": "EVOLUTION_APIKEY"}


def test_app_serves_tool_routes(monkeypatch: pytest.MonkeyPatch) -> None:
    settings = _build_settings()
    _install(monkeypatch, settings, _FakeClient({"state": "open"}))
    monkeypatch.setattr(app_factory, "setup_logging", lambda _: None)

    client = TestClient(app_factory.create_app(settings))

    listed = client.get("/mcp/tools")
    called = client.post("/mcp/tools/get_connection_state", json={"params": {}})
    invalid = client.post("/mcp/tools/set_presence", json={"params": {"presence": "away"}})
    missing = client.post("/mcp/tools/send_fax", json={"params": {}})

    assert listed.status_code == 200
    assert len(listed.json()["tools"]) == 54
    assert called.status_code == 200
    assert called.json()["content"][0]["text"].startswith("Connection state: {")
    assert invalid.status_code == 200
    assert invalid.json()["content"][0]["text"].startswith("Input validation failed for tool set_presence")
    assert missing.status_code == 404
