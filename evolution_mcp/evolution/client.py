"""
描述: Evolution API HTTP 客户端
主要功能:
    - 定义出站请求 (OutboundRequest) 与响应 (RemoteResponse)
    - 基于 httpx 发起单次请求 (无重试、无超时)
    - 非 2xx 状态与传输失败统一封装为 RemoteError
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

import httpx

from evolution_mcp.errors import RemoteError
from evolution_mcp.utils.logger import log_duration

logger = logging.getLogger(__name__)


# region 请求与响应模型
@dataclass(frozen=True)
class OutboundRequest:
    """由 (校验后参数, 环境配置) 唯一确定的出站请求"""
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, Any] | None = None
    json_body: Any | None = None


@dataclass(frozen=True)
class RemoteResponse:
    status_code: int
    data: Any


class RemoteClient(Protocol):
    async def send(self, request: OutboundRequest) -> RemoteResponse:
        ...
# endregion


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return ""
    try:
        return response.json()
    except ValueError:
        return response.text


# region 客户端
class EvolutionClient:
    """
    Evolution API 客户端

    功能:
        - 每次调用独立创建 AsyncClient，调用之间不共享状态
        - 不做重试、超时与熔断，失败直接抛出 RemoteError
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._transport = transport

    @log_duration(__name__)
    async def send(self, request: OutboundRequest) -> RemoteResponse:
        logger.debug(
            "Calling Evolution API",
            extra={"method": request.method, "url": request.url},
        )
        try:
            async with httpx.AsyncClient(
                timeout=None,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    request.method,
                    request.url,
                    headers=request.headers,
                    params=request.params,
                    json=request.json_body,
                )
        except httpx.HTTPError as exc:
            raise RemoteError(str(exc) or exc.__class__.__name__) from exc

        data = _decode_body(response)
        if response.is_error:
            raise RemoteError(
                f"Request failed with status code {response.status_code}",
                status_code=response.status_code,
                body=data,
            )
        return RemoteResponse(status_code=response.status_code, data=data)
# endregion
