"""
描述: Webhook 配置查询工具
"""

from __future__ import annotations

from evolution_mcp.tools.base import BaseTool
from evolution_mcp.tools.registry import Operation, ToolRegistry


@ToolRegistry.register
class FindWebhookSettingsTool(BaseTool):
    operation = Operation.FIND_WEBHOOK_SETTINGS
    description = "Retrieves the current webhook configuration for the instance."
    method = "GET"
    path = "webhook/find"
    success_template = "Webhook settings: "
    error_prefix = "Error finding webhook settings"
