"""
描述: MCP stdio 传输
主要功能:
    - 基于 mcp SDK 低层 Server 暴露工具目录与调用
    - stdout 作为协议通道，日志只写 stderr
"""

from __future__ import annotations

import logging
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from evolution_mcp import SERVER_NAME, __version__
from evolution_mcp.dispatcher import Dispatcher
from evolution_mcp.server.schema import ResultEnvelope

logger = logging.getLogger(__name__)


def to_mcp_tools(catalog: list[dict[str, Any]]) -> list[types.Tool]:
    return [
        types.Tool(
            name=item["name"],
            description=item["description"],
            inputSchema=item["inputSchema"],
        )
        for item in catalog
    ]


def to_text_contents(envelope: ResultEnvelope) -> list[types.TextContent]:
    return [types.TextContent(type="text", text=item.text) for item in envelope.content]


def build_server(dispatcher: Dispatcher) -> Server:
    """
    构建 MCP Server

    未知工具、未启用工具与配置缺失直接抛出，由 SDK 转为 isError 结果。
    参数校验交给 Dispatcher，SDK 侧不做 schema 校验。
    """
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        return to_mcp_tools(dispatcher.list_tools())

    @server.call_tool(validate_input=False)
    async def handle_call_tool(name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
        envelope = await dispatcher.dispatch(name, arguments or {})
        return to_text_contents(envelope)

    return server


async def serve_stdio(dispatcher: Dispatcher) -> None:
    server = build_server(dispatcher)
    logger.info("Evolution API MCP server running on stdio")
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
