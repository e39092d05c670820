"""
异常处理模块

统一定义网关异常类，便于 Dispatcher 与传输层精确捕获和处理
"""

from __future__ import annotations

from typing import Any


# ============================================
# region 基础异常
# ============================================
class GatewayError(Exception):
    """网关基础异常类"""

    def __init__(
        self,
        message: str,
        code: str = "MCP_000",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }
# endregion
# ============================================


# ============================================
# region 调用异常
# ============================================
class ValidationError(GatewayError):
    """参数校验失败 (不会发起网络请求)"""

    def __init__(self, tool_name: str, issues: list[tuple[str, str]]) -> None:
        self.tool_name = tool_name
        self.issues = issues
        summary = ", ".join(f"{path}: {message}" for path, message in issues)
        super().__init__(
            f"Input validation failed for tool {tool_name}: {summary}",
            code="MCP_002",
            details={"tool": tool_name, "issues": [list(item) for item in issues]},
        )


class ConfigurationError(GatewayError):
    """必需的环境配置缺失 (仅影响当前操作)"""

    def __init__(self, variable: str) -> None:
        self.variable = variable
        super().__init__(
            f"Missing required environment variable: {variable}",
            code="MCP_003",
            details={"variable": variable},
        )


class RemoteError(GatewayError):
    """Evolution API 返回非成功状态或传输失败"""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: Any | None = None,
    ) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(
            message,
            code="MCP_001",
            details={"status_code": status_code},
        )

    @property
    def has_body(self) -> bool:
        return self.body is not None and self.body != ""


class UnknownOperationError(GatewayError):
    """工具目录中不存在的操作名"""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}", code="MCP_404", details={"tool": name})


class OperationDisabledError(GatewayError):
    """工具存在但未在 tools.enabled 中启用"""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool disabled: {name}", code="MCP_403", details={"tool": name})
# endregion
# ============================================
