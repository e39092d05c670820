"""
描述: 工具结果格式化
主要功能:
    - 按 (工具, 结果类型, 负载) 生成统一文本信封
    - 成功时嵌入格式化后的响应 JSON，失败时原样嵌入远端错误体
    - 永不抛出异常
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from evolution_mcp.errors import RemoteError, ValidationError
from evolution_mcp.server.schema import ResultEnvelope
from evolution_mcp.tools.base import BaseTool
from evolution_mcp.tools.models import ToolInput


QR_CODE_NOTE = "\n\n(QR Code base64 data received, cannot display image here)"


class Outcome(str, Enum):
    SUCCESS = "success"
    REMOTE_ERROR = "remote_error"
    INVALID_INPUT = "invalid_input"


def to_pretty_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def to_compact_json(data: Any) -> str:
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False, default=str)


def _has_base64(data: Any) -> bool:
    return isinstance(data, dict) and bool(data.get("base64"))


def _render_success(tool: BaseTool, args: ToolInput, data: Any) -> str:
    compacted = tool.compact_result(args, data)
    if compacted is not None:
        return compacted
    text = f"{tool.summary(args)}{to_pretty_json(data)}"
    if tool.reports_qr_code and _has_base64(data):
        text += QR_CODE_NOTE
    return text


def _render_remote_error(tool: BaseTool, error: RemoteError) -> str:
    detail = to_compact_json(error.body) if error.has_body else error.message
    return f"{tool.error_prefix}: {detail}"


def format_result(
    tool: BaseTool,
    outcome: Outcome,
    payload: Any,
    args: ToolInput | None = None,
) -> ResultEnvelope:
    """
    生成结果信封

    参数:
        tool: 当前工具实例
        outcome: 结果类型
        payload: 成功时为远端响应体；失败时为对应异常
        args: 校验后的参数 (校验失败时为空)
    """
    try:
        if outcome is Outcome.SUCCESS and args is not None:
            text = _render_success(tool, args, payload)
        elif outcome is Outcome.REMOTE_ERROR and isinstance(payload, RemoteError):
            text = _render_remote_error(tool, payload)
        elif outcome is Outcome.INVALID_INPUT and isinstance(payload, ValidationError):
            text = payload.message
        else:
            text = f"{tool.error_prefix or 'Error'}: {payload}"
    except Exception as exc:  # 文案模板异常也要返回信封
        text = f"{tool.error_prefix or 'Error'}: {exc}"
    return ResultEnvelope.from_text(text)
