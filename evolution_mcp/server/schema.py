"""
描述: MCP Server 数据模型
主要功能:
    - 定义工具调用请求 (ToolRequest)
    - 定义统一结果信封 (ResultEnvelope)
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


# region API 数据模型
class ToolRequest(BaseModel):
    """工具调用请求体"""
    params: dict[str, Any] = Field(default_factory=dict)


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ResultEnvelope(BaseModel):
    """工具调用结果信封 (成功与业务失败同形)"""
    content: list[TextContent] = Field(default_factory=list)

    @classmethod
    def from_text(cls, text: str) -> "ResultEnvelope":
        return cls(content=[TextContent(text=text)])

    @property
    def text(self) -> str:
        return "\n".join(item.text for item in self.content)
# endregion
