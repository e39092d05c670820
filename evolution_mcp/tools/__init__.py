"""
描述: MCP 工具包入口
主要功能:
    - 导入全部工具模块以完成注册
    - 校验操作枚举与已注册工具一一对应
"""

from evolution_mcp.tools import chat, group, instance, message, settings, webhook  # noqa: F401
from evolution_mcp.tools.base import BaseTool, ToolContext
from evolution_mcp.tools.registry import Operation, ToolRegistry

ToolRegistry.verify()

__all__ = ["BaseTool", "ToolContext", "Operation", "ToolRegistry"]
