"""
描述: MCP 工具注册表
主要功能:
    - 定义封闭的操作名枚举 (Operation)
    - 通过装饰器注册工具类，并校验目录完整性
    - 提供目录列表与按名称查找
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from evolution_mcp.tools.base import BaseTool


class Operation(str, Enum):
    """工具目录中所有合法的操作名 (顺序即目录展示顺序)"""

    # 实例
    CREATE_INSTANCE = "create_instance"
    FETCH_INSTANCES = "fetch_instances"
    CONNECT_INSTANCE = "connect_instance"
    RESTART_INSTANCE = "restart_instance"
    SET_PRESENCE = "set_presence"
    GET_CONNECTION_STATE = "get_connection_state"
    LOGOUT_INSTANCE = "logout_instance"
    DELETE_INSTANCE = "delete_instance"
    # 设置
    SET_SETTINGS = "set_settings"
    FIND_SETTINGS = "find_settings"
    # 消息发送
    SEND_TEXT = "send_text"
    SEND_MEDIA = "send_media"
    SEND_PTV = "send_ptv"
    SEND_WHATSAPP_AUDIO = "send_whatsapp_audio"
    SEND_STICKER = "send_sticker"
    SEND_LOCATION = "send_location"
    SEND_CONTACT = "send_contact"
    SEND_REACTION = "send_reaction"
    SEND_POLL = "send_poll"
    SEND_LIST = "send_list"
    SEND_BUTTONS = "send_buttons"
    # 会话
    CHECK_WHATSAPP_NUMBERS = "check_whatsapp_numbers"
    MARK_MESSAGE_AS_READ = "mark_message_as_read"
    ARCHIVE_CHAT = "archive_chat"
    MARK_CHAT_UNREAD = "mark_chat_unread"
    DELETE_MESSAGE = "delete_message"
    FETCH_PROFILE_PICTURE_URL = "fetch_profile_picture_url"
    GET_BASE64_FROM_MEDIA_MESSAGE = "get_base64_from_media_message"
    UPDATE_MESSAGE = "update_message"
    SEND_PRESENCE = "send_presence"
    UPDATE_BLOCK_STATUS = "update_block_status"
    FIND_CONTACTS = "find_contacts"
    FIND_MESSAGES = "find_messages"
    FETCH_PROFILE = "fetch_profile"
    UPDATE_PROFILE_NAME = "update_profile_name"
    UPDATE_PROFILE_STATUS = "update_profile_status"
    UPDATE_PROFILE_PICTURE = "update_profile_picture"
    REMOVE_PROFILE_PICTURE = "remove_profile_picture"
    # 群组
    CREATE_GROUP = "create_group"
    FETCH_ALL_GROUPS = "fetch_all_groups"
    FIND_PARTICIPANTS = "find_participants"
    UPDATE_PARTICIPANT = "update_participant"
    UPDATE_GROUP_SUBJECT = "update_group_subject"
    UPDATE_GROUP_DESCRIPTION = "update_group_description"
    UPDATE_GROUP_PICTURE = "update_group_picture"
    FETCH_INVITE_CODE = "fetch_invite_code"
    REVOKE_INVITE_CODE = "revoke_invite_code"
    SEND_INVITE = "send_invite"
    FIND_GROUP_BY_INVITE_CODE = "find_group_by_invite_code"
    FIND_GROUP_BY_JID = "find_group_by_jid"
    UPDATE_GROUP_SETTING = "update_group_setting"
    TOGGLE_EPHEMERAL = "toggle_ephemeral"
    LEAVE_GROUP = "leave_group"
    # Webhook
    FIND_WEBHOOK_SETTINGS = "find_webhook_settings"


class ToolRegistry:
    """
    工具注册表 (进程级单例，启动时构建，之后只读)

    功能:
        - register: 类装饰器，登记工具并拒绝未知或重复的操作名
        - verify: 校验每个 Operation 恰好对应一个工具
        - list_tools / get: 目录列表与查找
    """

    _tools: dict[Operation, type[BaseTool]] = {}

    @classmethod
    def register(cls, tool_cls: type[BaseTool]) -> type[BaseTool]:
        operation = Operation(tool_cls.name)
        if operation in cls._tools:
            existing = cls._tools[operation].__name__
            raise ValueError(f"Tool '{operation.value}' already registered by {existing}")
        cls._tools[operation] = tool_cls
        return tool_cls

    @classmethod
    def verify(cls) -> None:
        missing = [operation.value for operation in Operation if operation not in cls._tools]
        if missing:
            raise RuntimeError(f"Operations without a registered tool: {', '.join(missing)}")

    @classmethod
    def get(cls, name: str) -> type[BaseTool] | None:
        try:
            operation = Operation(name)
        except ValueError:
            return None
        return cls._tools.get(operation)

    @classmethod
    def names(cls) -> list[str]:
        return [operation.value for operation in Operation if operation in cls._tools]

    @classmethod
    def list_tools(cls) -> list[dict[str, Any]]:
        return [cls._tools[operation].to_schema() for operation in Operation if operation in cls._tools]
