"""
描述: 工具调用分发器
主要功能:
    - 查找工具 -> 校验参数 -> 映射请求 -> 调用远端 -> 格式化结果
    - 校验失败与远端失败收敛为结果信封
    - 未知工具、未启用工具与配置缺失向传输层抛出
"""

from __future__ import annotations

import logging
from typing import Any

from evolution_mcp.config import Settings
from evolution_mcp.errors import (
    OperationDisabledError,
    RemoteError,
    UnknownOperationError,
    ValidationError,
)
from evolution_mcp.evolution.client import EvolutionClient, RemoteClient
from evolution_mcp.server.schema import ResultEnvelope
from evolution_mcp.tools import BaseTool, ToolContext, ToolRegistry
from evolution_mcp.tools.formatter import Outcome, format_result
from evolution_mcp.utils.logger import (
    clear_request_context,
    generate_request_id,
    set_request_context,
)

logger = logging.getLogger(__name__)


class Dispatcher:
    """
    单次调用的状态机: Validating -> Mapping -> Calling -> Formatting

    每次调用相互独立，只发起一次出站请求，不重试。
    """

    def __init__(self, settings: Settings, client: RemoteClient | None = None) -> None:
        self.settings = settings
        self.client = client or EvolutionClient()
        self._context = ToolContext(settings=settings)

    def list_tools(self) -> list[dict[str, Any]]:
        """已启用工具的目录 (顺序固定)"""
        tools = ToolRegistry.list_tools()
        return [tool for tool in tools if self.settings.tools.is_enabled(tool["name"])]

    def resolve(self, name: str) -> BaseTool:
        tool_cls = ToolRegistry.get(name)
        if tool_cls is None:
            raise UnknownOperationError(name)
        if not self.settings.tools.is_enabled(name):
            raise OperationDisabledError(name)
        return tool_cls(self._context)

    async def dispatch(self, name: str, arguments: Any = None) -> ResultEnvelope:
        """执行一次工具调用，只返回结果信封"""
        _, envelope = await self.execute(name, arguments)
        return envelope

    async def execute(self, name: str, arguments: Any = None) -> tuple[Outcome, ResultEnvelope]:
        """
        执行一次工具调用

        参数:
            name: 工具名
            arguments: 原始参数 (未校验)

        返回:
            (结果类型, ResultEnvelope); 校验失败与远端失败也以信封形式返回
        """
        request_id = generate_request_id()
        set_request_context(request_id=request_id, tool_name=name)
        try:
            try:
                tool = self.resolve(name)
            except UnknownOperationError:
                logger.warning("Unknown tool requested", extra={"tool": name})
                raise
            logger.info("Tool call started")

            try:
                args = tool.parse_arguments(arguments)
            except ValidationError as exc:
                logger.info(
                    "Tool input rejected",
                    extra={"issues": exc.details.get("issues")},
                )
                return Outcome.INVALID_INPUT, format_result(tool, Outcome.INVALID_INPUT, exc)

            request = tool.build_request(args)
            try:
                response = await self.client.send(request)
            except RemoteError as exc:
                logger.warning(
                    "Evolution API call failed",
                    extra={"status_code": exc.status_code, "error": exc.message},
                )
                return Outcome.REMOTE_ERROR, format_result(tool, Outcome.REMOTE_ERROR, exc, args)

            return Outcome.SUCCESS, format_result(tool, Outcome.SUCCESS, response.data, args)
        finally:
            clear_request_context()
