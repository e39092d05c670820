from __future__ import annotations

import asyncio

import pytest

from evolution_mcp.config import EvolutionSettings, Settings, ToolsSettings
from evolution_mcp.dispatcher import Dispatcher
from evolution_mcp.errors import (
    ConfigurationError,
    OperationDisabledError,
    RemoteError,
    UnknownOperationError,
)
from evolution_mcp.evolution.client import OutboundRequest, RemoteResponse
from evolution_mcp.tools import ToolRegistry
from evolution_mcp.tools.formatter import Outcome


class _FakeClient:
    def __init__(self, data: object = None, error: RemoteError | None = None) -> None:
        self._data = data
        self._error = error
        self.calls: list[OutboundRequest] = []

    async def send(self, request: OutboundRequest) -> RemoteResponse:
        self.calls.append(request)
        if self._error is not None:
            raise self._error
        return RemoteResponse(status_code=200, data=self._data)


def _build_settings(enabled: list[str] | None = None, **overrides: str) -> Settings:
    values = {"api_key": "k", "instance": "inst1", "api_base": "host:8080"}
    values.update(overrides)
    return Settings(
        evolution=EvolutionSettings(**values),
        tools=ToolsSettings(enabled=enabled or []),
    )


def test_send_text_issues_one_authenticated_post() -> None:
    client = _FakeClient(data={"key": {"id": "BAE5"}, "status": "PENDING"})
    dispatcher = Dispatcher(_build_settings(), client=client)

    envelope = asyncio.run(dispatcher.dispatch("send_text", {"number": "5511999998888", "text": "hi"}))

    assert len(client.calls) == 1
    request = client.calls[0]
    assert request.method == "POST"
    assert request.url == "https://host:8080/message/sendText/inst1"
    assert request.headers["apikey"] == "k"
    assert request.json_body == {"number": "5511999998888", "text": "hi"}
    assert len(envelope.content) == 1
    assert envelope.content[0].type == "text"
    assert envelope.text.startswith("Text message sent to 5511999998888. Response: {")
    assert '"status": "PENDING"' in envelope.text


def test_unknown_operation_raises_before_validation_and_network() -> None:
    client = _FakeClient()
    dispatcher = Dispatcher(_build_settings(), client=client)

    with pytest.raises(UnknownOperationError) as exc_info:
        asyncio.run(dispatcher.dispatch("send_fax", {"number": 1}))

    assert exc_info.value.message == "Unknown tool: send_fax"
    assert client.calls == []


def test_remote_failure_body_lands_in_envelope() -> None:
    error = RemoteError("Request failed with status code 500", status_code=500, body={"error": "down"})
    client = _FakeClient(error=error)
    dispatcher = Dispatcher(_build_settings(), client=client)

    envelope = asyncio.run(dispatcher.dispatch("send_text", {"number": "5511", "text": "hi"}))

    assert len(client.calls) == 1
    assert envelope.text == 'Error sending text message: {"error":"down"}'


def test_validation_failure_makes_no_network_call() -> None:
    client = _FakeClient()
    dispatcher = Dispatcher(_build_settings(), client=client)

    envelope = asyncio.run(dispatcher.dispatch("send_poll", {"number": "5511", "name": "Q"}))

    assert client.calls == []
    assert envelope.text == "Input validation failed for tool send_poll: values: Field required"


def test_missing_configuration_is_raised_without_network_call() -> None:
    client = _FakeClient()
    dispatcher = Dispatcher(_build_settings(api_key=""), client=client)

    with pytest.raises(ConfigurationError) as exc_info:
        asyncio.run(dispatcher.dispatch("find_settings", {}))

    assert exc_info.value.variable == "EVOLUTION_APIKEY"
    assert client.calls == []


def test_other_operations_still_work_without_api_key() -> None:
    client = _FakeClient(data={"base64": "AAA"})
    dispatcher = Dispatcher(_build_settings(api_key=""), client=client)

    envelope = asyncio.run(dispatcher.dispatch("connect_instance"))

    assert client.calls[0].headers == {}
    assert "QR Code base64 data received" in envelope.text


def test_allow_list_hides_and_rejects_disabled_tools() -> None:
    client = _FakeClient(data=[])
    dispatcher = Dispatcher(_build_settings(enabled=["fetch_instances", "send_text"]), client=client)

    assert [tool["name"] for tool in dispatcher.list_tools()] == ["fetch_instances", "send_text"]
    with pytest.raises(OperationDisabledError):
        asyncio.run(dispatcher.dispatch("delete_instance", {}))
    assert client.calls == []

    envelope = asyncio.run(dispatcher.dispatch("fetch_instances", {}))
    assert envelope.text == "Instances fetched: []"


def test_full_catalog_when_allow_list_empty() -> None:
    dispatcher = Dispatcher(_build_settings(), client=_FakeClient())

    assert dispatcher.list_tools() == ToolRegistry.list_tools()


def test_invocations_are_independent() -> None:
    client = _FakeClient(data={"ok": True})
    dispatcher = Dispatcher(_build_settings(), client=client)

    async def _run_both():
        return await asyncio.gather(
            dispatcher.dispatch("fetch_profile", {"number": "1"}),
            dispatcher.dispatch("fetch_profile", {"number": "2"}),
        )

    first, second = asyncio.run(_run_both())

    assert first.text.startswith("Profile for 1: ")
    assert second.text.startswith("Profile for 2: ")
    assert sorted(call.json_body["number"] for call in client.calls) == ["1", "2"]


def test_execute_reports_outcome_alongside_envelope() -> None:
    error = RemoteError("Request failed with status code 404", status_code=404, body={"error": "Not Found"})

    ok = asyncio.run(
        Dispatcher(_build_settings(), client=_FakeClient(data={})).execute("find_contacts", {})
    )
    invalid = asyncio.run(
        Dispatcher(_build_settings(), client=_FakeClient()).execute("send_text", {"number": "5511"})
    )
    remote = asyncio.run(
        Dispatcher(_build_settings(), client=_FakeClient(error=error)).execute("find_contacts", {})
    )

    assert ok[0] is Outcome.SUCCESS
    assert invalid[0] is Outcome.INVALID_INPUT
    assert invalid[1].text == "Input validation failed for tool send_text: text: Field required"
    assert remote[0] is Outcome.REMOTE_ERROR
