"""
描述: Evolution 实例管理工具
主要功能:
    - 创建 / 查询 / 删除实例
    - 获取连接二维码与连接状态、重启、登出
    - 设置实例在线状态
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import Field, StrictBool, StrictStr

from evolution_mcp.tools.base import BaseTool
from evolution_mcp.tools.models import ToolInput, to_payload
from evolution_mcp.tools.registry import Operation, ToolRegistry


# region 入参模型
class CreateInstanceInput(ToolInput):
    instance_name: StrictStr = Field(description="Unique name for the new instance.")
    token: Optional[StrictStr] = Field(
        None, description="Optional predefined token (API key) for the instance."
    )
    qrcode: StrictBool = Field(True, description="Whether to return the QR code for connection.")


class FetchInstancesInput(ToolInput):
    instance_name: Optional[StrictStr] = Field(None, description="Filter by instance name.")
    instance_id: Optional[StrictStr] = Field(None, description="Filter by instance ID.")


class SetPresenceInput(ToolInput):
    presence: Literal["available", "unavailable"] = Field(description="Presence status to set.")
# endregion


@ToolRegistry.register
class CreateInstanceTool(BaseTool):
    """创建实例 (全局 API Key，URL 不带实例段)"""

    operation = Operation.CREATE_INSTANCE
    description = "Creates a new Evolution API instance."
    input_model = CreateInstanceInput
    path = "instance/create"
    instance_scoped = False
    success_template = "Instance creation initiated. Response: "
    error_prefix = "Error creating instance"

    def body(self, args: CreateInstanceInput) -> dict[str, Any]:
        return to_payload(args) or {}


@ToolRegistry.register
class FetchInstancesTool(BaseTool):
    operation = Operation.FETCH_INSTANCES
    description = "Retrieves a list of all instances or filters by name/ID."
    input_model = FetchInstancesInput
    method = "GET"
    path = "instance/fetchInstances"
    instance_scoped = False
    success_template = "Instances fetched: "
    error_prefix = "Error fetching instances"

    def query(self, args: FetchInstancesInput) -> dict[str, Any]:
        return to_payload(args) or {}


@ToolRegistry.register
class ConnectInstanceTool(BaseTool):
    """获取连接二维码 / 状态 (不带 apikey)"""

    operation = Operation.CONNECT_INSTANCE
    description = "Gets the connection QR code or status for the specified instance."
    method = "GET"
    path = "instance/connect"
    authenticated = False
    success_template = "Connection status/QR code fetched: "
    error_prefix = "Error connecting instance"
    reports_qr_code = True


@ToolRegistry.register
class RestartInstanceTool(BaseTool):
    operation = Operation.RESTART_INSTANCE
    description = "Restarts the specified instance."
    path = "instance/restart"
    success_template = "Instance restart initiated. Response: "
    error_prefix = "Error restarting instance"
    reports_qr_code = True

    def body(self, args: ToolInput) -> dict[str, Any]:
        return {}


@ToolRegistry.register
class SetPresenceTool(BaseTool):
    operation = Operation.SET_PRESENCE
    description = "Sets the presence status (available/unavailable) for the instance."
    input_model = SetPresenceInput
    path = "instance/setPresence"
    success_template = "Presence set. Response: "
    error_prefix = "Error setting presence"

    def body(self, args: SetPresenceInput) -> dict[str, Any]:
        return {"presence": args.presence}


@ToolRegistry.register
class GetConnectionStateTool(BaseTool):
    operation = Operation.GET_CONNECTION_STATE
    description = "Gets the current connection state of the instance."
    method = "GET"
    path = "instance/connectionState"
    success_template = "Connection state: "
    error_prefix = "Error getting connection state"


@ToolRegistry.register
class LogoutInstanceTool(BaseTool):
    operation = Operation.LOGOUT_INSTANCE
    description = "Logs out the specified instance from WhatsApp Web."
    method = "DELETE"
    path = "instance/logout"
    success_template = "Instance logout initiated. Response: "
    error_prefix = "Error logging out instance"


@ToolRegistry.register
class DeleteInstanceTool(BaseTool):
    operation = Operation.DELETE_INSTANCE
    description = "Deletes the specified instance."
    method = "DELETE"
    path = "instance/delete"
    success_template = "Instance deletion initiated. Response: "
    error_prefix = "Error deleting instance"
