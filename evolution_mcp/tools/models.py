"""
描述: 工具入参公共模型
主要功能:
    - 定义 ToolInput 基类 (驼峰别名 / 严格类型)
    - 定义消息 Key、引用消息、发送选项等复用结构
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError


Number = Union[StrictInt, StrictFloat]


# region 基础模型
class ToolInput(BaseModel):
    """
    工具入参基类

    对外字段只认 Evolution API 的驼峰命名 (不接受 Python 属性名)，
    未声明字段直接丢弃，显式 null 一律拒绝
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        extra="ignore",
        frozen=True,
    )

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        # 缺省走默认值；null 不等于缺省
        if value is None:
            raise PydanticCustomError("null_not_allowed", "Input should not be null")
        return value


class EmptyInput(ToolInput):
    """无参数工具"""


def to_payload(model: BaseModel | None) -> dict[str, Any] | None:
    """模型转 JSON 负载：使用别名，省略未提供的可选字段"""
    if model is None:
        return None
    return model.model_dump(by_alias=True, exclude_none=True)


def compact(value: Any) -> Any:
    """递归剔除值为 None 的键 (等价于 JSON 序列化时丢弃 undefined)"""
    if isinstance(value, dict):
        return {key: compact(item) for key, item in value.items() if item is not None}
    if isinstance(value, list):
        return [compact(item) for item in value]
    return value
# endregion


# region 消息结构
class MessageId(ToolInput):
    id: StrictStr


class QuotedMessage(ToolInput):
    key: MessageId = Field(description="Key of the message to quote (use message ID).")


class MessageKey(ToolInput):
    remote_jid: StrictStr = Field(description="JID of the chat where the message is.")
    from_me: StrictBool = Field(description="Was the message sent by the bot/instance?")
    id: StrictStr = Field(description="The ID of the message.")


class BaseSendOptions(ToolInput):
    delay: Optional[Number] = Field(None, description="Delay in milliseconds before sending.")
    quoted: Optional[QuotedMessage] = Field(None, description="Message to quote (use message ID).")


class MentionSendOptions(BaseSendOptions):
    mentioned: Optional[list[StrictStr]] = Field(None, description="List of JIDs to mention.")


class TextSendOptions(MentionSendOptions):
    mentions_every_one: StrictBool = Field(False, description="Mention everyone in the group.")


class AudioSendOptions(BaseSendOptions):
    encoding: Optional[StrictBool] = Field(None, description="Force encoding to WhatsApp audio format?")
# endregion
