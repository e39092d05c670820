from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from evolution_mcp.errors import RemoteError
from evolution_mcp.evolution.client import EvolutionClient, OutboundRequest


def _client(handler) -> EvolutionClient:
    return EvolutionClient(transport=httpx.MockTransport(handler))


def test_send_posts_json_with_headers_and_query() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"key": {"id": "BAE5"}})

    request = OutboundRequest(
        method="POST",
        url="https://host:8080/group/updateParticipant/inst1",
        headers={"Content-Type": "application/json", "apikey": "k"},
        params={"groupJid": "g@g.us"},
        json_body={"action": "add", "participants": ["5511"]},
    )

    response = asyncio.run(_client(handler).send(request))

    assert response.status_code == 201
    assert response.data == {"key": {"id": "BAE5"}}
    sent = seen[0]
    assert sent.method == "POST"
    assert sent.url.path == "/group/updateParticipant/inst1"
    assert sent.url.params["groupJid"] == "g@g.us"
    assert sent.headers["apikey"] == "k"
    assert sent.headers["content-type"] == "application/json"
    assert json.loads(sent.content) == {"action": "add", "participants": ["5511"]}


def test_boolean_query_values_are_lowercase() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    request = OutboundRequest(
        method="GET",
        url="https://host:8080/group/fetchAllGroups/inst1",
        params={"getParticipants": False},
    )
    asyncio.run(_client(handler).send(request))

    assert seen[0].url.params["getParticipants"] == "false"
    assert seen[0].content == b""


def test_non_2xx_raises_remote_error_with_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "down"})

    request = OutboundRequest(method="GET", url="https://host:8080/settings/find/inst1")
    with pytest.raises(RemoteError) as exc_info:
        asyncio.run(_client(handler).send(request))

    assert exc_info.value.status_code == 500
    assert exc_info.value.body == {"error": "down"}
    assert exc_info.value.message == "Request failed with status code 500"
    assert exc_info.value.has_body


def test_non_json_and_empty_bodies_are_decoded() -> None:
    def text_handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="pong")

    def empty_handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    request = OutboundRequest(method="GET", url="https://host:8080/instance/connectionState/inst1")

    assert asyncio.run(_client(text_handler).send(request)).data == "pong"
    with pytest.raises(RemoteError) as exc_info:
        asyncio.run(_client(empty_handler).send(request))
    assert exc_info.value.body == ""
    assert not exc_info.value.has_body


def test_transport_failure_raises_remote_error_without_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    request = OutboundRequest(method="DELETE", url="https://host:8080/instance/logout/inst1")
    with pytest.raises(RemoteError) as exc_info:
        asyncio.run(_client(handler).send(request))

    assert exc_info.value.message == "connection refused"
    assert exc_info.value.status_code is None
    assert not exc_info.value.has_body
