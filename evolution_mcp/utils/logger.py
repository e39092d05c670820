"""
描述: 结构化日志工具库
主要功能:
    - JSON 格式结构化输出 (Structured Logging)
    - 自动追踪调用上下文 (Request ID, Tool)
    - 外部请求耗时自动记录
"""

from __future__ import annotations

import inspect
import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from functools import wraps
from typing import Any, Callable

from evolution_mcp.config import LoggingSettings


# region 上下文变量 (Context Vars)
request_id_var: ContextVar[str] = ContextVar("request_id", default="")
tool_name_var: ContextVar[str] = ContextVar("tool_name", default="")
# endregion


_RESERVED_ATTRS = frozenset((
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "taskName", "message", "asctime",
))


# region 日志 Formatter
class StructuredJsonFormatter(logging.Formatter):
    """
    JSON 结构化日志格式化器

    功能:
        - 将日志记录转换为单行 JSON
        - 自动注入当前上下文变量
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if request_id := request_id_var.get():
            payload["request_id"] = request_id
        if tool_name := tool_name_var.get():
            payload["tool"] = tool_name

        # extra 字段（通过 logger.info("msg", extra={...}) 传入）
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            payload[key] = value

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


class SimpleFormatter(logging.Formatter):
    """简单文本格式化器（开发环境用）"""

    def format(self, record: logging.LogRecord) -> str:
        base = f"[{self.formatTime(record)}] {record.levelname:5} {record.name}: {record.getMessage()}"

        context_parts = []
        if request_id := request_id_var.get():
            context_parts.append(f"req={request_id[:8]}")
        if tool_name := tool_name_var.get():
            context_parts.append(f"tool={tool_name}")
        if context_parts:
            base += f" ({', '.join(context_parts)})"

        extras = []
        for key in ("status_code", "duration_ms", "method", "url"):
            if hasattr(record, key):
                extras.append(f"{key}={getattr(record, key)}")
        if extras:
            base += f" [{', '.join(extras)}]"

        return base
# endregion


# region 上下文管理
def set_request_context(request_id: str | None = None, tool_name: str | None = None) -> None:
    """
    设置当前调用的上下文信息

    参数:
        request_id: 调用唯一标识
        tool_name: 当前执行的工具名称
    """
    if request_id:
        request_id_var.set(request_id)
    if tool_name:
        tool_name_var.set(tool_name)


def clear_request_context() -> None:
    """清除调用上下文"""
    request_id_var.set("")
    tool_name_var.set("")


def generate_request_id() -> str:
    """生成请求 ID"""
    return str(uuid.uuid4())[:12]
# endregion


# region 性能监控
def log_duration(logger_name: str = __name__):
    """
    执行耗时记录装饰器

    参数:
        logger_name: 用于输出日志的 Logger 名称

    效果:
        - 自动计算异步函数 (协程) 的执行耗时
        - 输出包含 duration_ms 的 debug/warning 日志
    """
    def decorator(func: Callable):
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"log_duration only supports coroutine functions: {func.__name__}")

        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            logger = logging.getLogger(logger_name)
            start = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                duration_ms = (time.perf_counter() - start) * 1000
                logger.warning(
                    f"{func.__name__} failed",
                    extra={"duration_ms": round(duration_ms, 2), "error": str(e)},
                )
                raise
            duration_ms = (time.perf_counter() - start) * 1000
            logger.debug(
                f"{func.__name__} completed",
                extra={"duration_ms": round(duration_ms, 2)},
            )
            return result

        return async_wrapper

    return decorator
# endregion


# region 初始化配置
def setup_logging(settings: LoggingSettings) -> None:
    """
    初始化全局日志配置

    参数:
        settings: 日志配置对象

    动作:
        - 配置 Root Logger 级别
        - 日志固定输出到 stderr (stdout 为 MCP stdio 通道)
        - 调整第三方库日志级别以减少噪音
    """
    level = getattr(logging, settings.level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    if settings.format == "json":
        handler.setFormatter(StructuredJsonFormatter())
    else:
        handler.setFormatter(SimpleFormatter())

    logging.basicConfig(level=level, handlers=[handler], force=True)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
# endregion
