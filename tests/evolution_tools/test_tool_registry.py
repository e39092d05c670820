from __future__ import annotations

import pytest

from evolution_mcp.tools import BaseTool, Operation, ToolRegistry
from evolution_mcp.tools.message import SendTextTool


def test_every_operation_has_exactly_one_tool() -> None:
    ToolRegistry.verify()

    assert len(ToolRegistry.names()) == len(Operation) == 54
    assert ToolRegistry.names() == [operation.value for operation in Operation]


def test_catalog_lists_operations_in_declared_order() -> None:
    names = [tool["name"] for tool in ToolRegistry.list_tools()]

    assert names[:3] == ["create_instance", "fetch_instances", "connect_instance"]
    assert names[-1] == "find_webhook_settings"


def test_catalog_listing_is_idempotent() -> None:
    assert ToolRegistry.list_tools() == ToolRegistry.list_tools()


def test_every_tool_declares_description_schema_and_wording() -> None:
    for tool in ToolRegistry.list_tools():
        schema = tool["inputSchema"]
        assert tool["description"], tool["name"]
        assert schema["type"] == "object"
        assert isinstance(schema["properties"], dict)
        assert isinstance(schema["required"], list)

    for name in ToolRegistry.names():
        tool_cls = ToolRegistry.get(name)
        assert tool_cls is not None
        assert tool_cls.error_prefix.startswith("Error "), name
        assert tool_cls.path, name


def test_lookup_of_unknown_name_returns_none() -> None:
    assert ToolRegistry.get("send_fax") is None
    assert ToolRegistry.get("") is None


def test_register_rejects_duplicate_operation() -> None:
    class _DuplicateSendText(BaseTool):
        operation = Operation.SEND_TEXT

    with pytest.raises(ValueError, match="already registered"):
        ToolRegistry.register(_DuplicateSendText)

    assert ToolRegistry.get("send_text") is SendTextTool


def test_send_text_schema_uses_camel_case_and_hides_pydantic_noise() -> None:
    schema = SendTextTool.parameters()

    assert schema["required"] == ["number", "text"]
    assert "title" not in schema
    assert schema["properties"]["options"] == {"$ref": "#/$defs/TextSendOptions"}

    options = schema["$defs"]["TextSendOptions"]["properties"]
    assert "mentionsEveryOne" in options
    assert options["mentionsEveryOne"]["default"] is False
    assert "title" not in options["mentionsEveryOne"]
    assert options["delay"]["anyOf"] == [{"type": "integer"}, {"type": "number"}]


def test_schema_defaults_are_advertised() -> None:
    poll = ToolRegistry.get("send_poll").parameters()["properties"]
    presence = ToolRegistry.get("send_presence").parameters()["properties"]
    messages = ToolRegistry.get("find_messages").parameters()["properties"]

    assert poll["selectableCount"]["default"] == 1
    assert poll["selectableCount"]["minimum"] == 1
    assert presence["delay"]["default"] == 1200
    assert messages["page"]["default"] == 1
    assert messages["limit"]["default"] == 10


def test_literal_fields_render_as_enums() -> None:
    presence = ToolRegistry.get("set_presence").parameters()["properties"]["presence"]
    ephemeral = ToolRegistry.get("toggle_ephemeral").parameters()["properties"]["expiration"]

    assert presence["enum"] == ["available", "unavailable"]
    assert ephemeral["enum"] == [0, 86400, 604800, 7776000]
