"""
描述: 实例行为设置工具
主要功能:
    - 更新实例设置 (拒接来电、忽略群消息、常驻在线等)
    - 查询当前设置
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import Field, StrictBool, StrictStr

from evolution_mcp.tools.base import BaseTool
from evolution_mcp.tools.models import ToolInput, to_payload
from evolution_mcp.tools.registry import Operation, ToolRegistry


class SetSettingsInput(ToolInput):
    """所有字段均为可选的增量更新"""

    reject_call: Optional[StrictBool] = Field(None, description="Reject incoming calls?")
    msg_call: Optional[StrictStr] = Field(None, description="Message to send when rejecting calls.")
    groups_ignore: Optional[StrictBool] = Field(None, description="Ignore group messages?")
    always_online: Optional[StrictBool] = Field(None, description="Set status to always online?")
    read_messages: Optional[StrictBool] = Field(None, description="Mark messages as read automatically?")
    sync_full_history: Optional[StrictBool] = Field(
        None, description="Sync full chat history on connection?"
    )
    read_status: Optional[StrictBool] = Field(None, description="Mark status/stories as seen?")


@ToolRegistry.register
class SetSettingsTool(BaseTool):
    operation = Operation.SET_SETTINGS
    description = "Updates the settings for the instance."
    input_model = SetSettingsInput
    path = "settings/set"
    success_template = "Settings updated. Response: "
    error_prefix = "Error updating settings"

    def body(self, args: SetSettingsInput) -> dict[str, Any]:
        return to_payload(args) or {}


@ToolRegistry.register
class FindSettingsTool(BaseTool):
    operation = Operation.FIND_SETTINGS
    description = "Retrieves the current settings for the instance."
    method = "GET"
    path = "settings/find"
    success_template = "Current settings: "
    error_prefix = "Error finding settings"
