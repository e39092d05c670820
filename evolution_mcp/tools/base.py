"""
描述: MCP 工具基类定义
主要功能:
    - 定义 BaseTool 抽象基类 (入参校验 / 请求映射 / 结果文案)
    - 定义 ToolContext 上下文对象
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass
from typing import Any, ClassVar

import pydantic

from evolution_mcp.config import Settings
from evolution_mcp.errors import ValidationError
from evolution_mcp.evolution.client import OutboundRequest
from evolution_mcp.tools.models import EmptyInput, ToolInput, to_payload
from evolution_mcp.tools.registry import Operation


def _format_loc(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc)


def _normalize_schema(schema: Any) -> Any:
    """去掉 pydantic 生成的 title，把 Optional[X] 的 anyOf 折叠回 X"""
    if isinstance(schema, list):
        return [_normalize_schema(item) for item in schema]
    if not isinstance(schema, dict):
        return schema

    any_of = schema.get("anyOf")
    if isinstance(any_of, list) and {"type": "null"} in any_of:
        variants = [item for item in any_of if item != {"type": "null"}]
        schema = {key: value for key, value in schema.items() if key != "anyOf"}
        if len(variants) == 1:
            schema.update(variants[0])
        else:
            schema["anyOf"] = variants

    normalized: dict[str, Any] = {}
    for key, value in schema.items():
        if key == "title" and isinstance(value, str):
            continue
        if key == "default" and value is None:
            continue
        if key in ("properties", "$defs") and isinstance(value, dict):
            normalized[key] = {name: _normalize_schema(item) for name, item in value.items()}
        else:
            normalized[key] = _normalize_schema(value)
    return normalized


# region 工具上下文与基类
@dataclass
class ToolContext:
    """工具执行上下文 (依赖注入)"""
    settings: Settings


class BaseTool(ABC):
    """
    MCP 工具抽象基类

    每个子类即目录中的一个操作，声明三件事:
        - input_model: 入参 schema (校验 + 默认值)
        - method / path / body() / query(): 到 Evolution API 请求的纯映射
        - success_template / error_prefix: 结果文案
    """
    operation: ClassVar[Operation]
    name: ClassVar[str] = ""
    description: ClassVar[str] = ""
    input_model: ClassVar[type[ToolInput]] = EmptyInput

    method: ClassVar[str] = "POST"
    path: ClassVar[str] = ""
    instance_scoped: ClassVar[bool] = True
    authenticated: ClassVar[bool] = True

    success_template: ClassVar[str] = ""
    error_prefix: ClassVar[str] = ""
    # 响应中带 base64 二维码时追加提示
    reports_qr_code: ClassVar[bool] = False

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        operation = cls.__dict__.get("operation")
        if operation is not None:
            cls.name = Operation(operation).value

    def __init__(self, context: ToolContext) -> None:
        self.context = context
        if not self.name:
            raise ValueError(f"{self.__class__.__name__} must define 'operation' attribute")

    # region schema
    @classmethod
    def parameters(cls) -> dict[str, Any]:
        schema = _normalize_schema(cls.input_model.model_json_schema(by_alias=True))
        schema.setdefault("properties", {})
        schema.setdefault("required", [])
        return schema

    @classmethod
    def to_schema(cls) -> dict[str, Any]:
        """返回工具 schema (用于工具发现)"""
        return {
            "name": cls.name,
            "description": cls.description,
            "inputSchema": cls.parameters(),
        }
    # endregion

    # region 校验
    def parse_arguments(self, raw: Any) -> ToolInput:
        """按 input_model 校验原始参数并补齐默认值"""
        try:
            return self.input_model.model_validate({} if raw is None else raw)
        except pydantic.ValidationError as exc:
            issues = [(_format_loc(error["loc"]), error["msg"]) for error in exc.errors()]
            raise ValidationError(self.name, issues) from exc
    # endregion

    # region 请求映射
    def body(self, args: ToolInput) -> dict[str, Any] | None:
        """JSON 请求体；None 表示不带请求体"""
        return None

    def query(self, args: ToolInput) -> dict[str, Any] | None:
        """Query 参数；None 表示不带 query"""
        return None

    def build_request(self, args: ToolInput) -> OutboundRequest:
        evolution = self.context.settings.evolution
        url = f"{evolution.base_url()}/{self.path}"
        if self.instance_scoped:
            url = f"{url}/{evolution.require_instance()}"

        body = self.body(args)
        headers: dict[str, str] = {}
        if body is not None:
            headers["Content-Type"] = "application/json"
        if self.authenticated:
            headers["apikey"] = evolution.require_api_key()

        return OutboundRequest(
            method=self.method,
            url=url,
            headers=headers,
            params=self.query(args),
            json_body=body,
        )
    # endregion

    # region 结果文案
    def summary(self, args: ToolInput) -> str:
        """成功文案前缀，后接格式化后的响应 JSON"""
        return self.success_template.format(**(to_payload(args) or {}))

    def compact_result(self, args: ToolInput, data: Any) -> str | None:
        """需要省略大体积响应时返回替代文案"""
        return None
    # endregion
# endregion
