"""
描述: 会话与资料工具
主要功能:
    - 号码校验、已读 / 未读标记、归档、撤回与编辑消息
    - 媒体消息 Base64 下载 (大体积响应不回显)
    - 在线状态推送、拉黑、联系人与消息检索
    - 实例资料 (名称 / 签名 / 头像) 维护
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import Field, StrictBool, StrictInt, StrictStr, field_validator
from pydantic_core import PydanticCustomError

from evolution_mcp.tools.base import BaseTool
from evolution_mcp.tools.models import MessageKey, Number, ToolInput, compact, to_payload
from evolution_mcp.tools.registry import Operation, ToolRegistry


_PROFILE_TARGET = "Phone number (with country code) or JID of the user/group."


# region 入参模型
class CheckWhatsAppNumbersInput(ToolInput):
    numbers: list[StrictStr] = Field(
        min_length=1, description="Array of phone numbers (with country code) to check."
    )


class ReadMessageKey(ToolInput):
    remote_jid: StrictStr = Field(description="JID of the chat.")
    from_me: StrictBool = Field(description="Was the message sent by the bot?")
    id: StrictStr = Field(description="ID of the message to mark as read.")


class MarkMessageAsReadInput(ToolInput):
    read_messages: list[ReadMessageKey] = Field(
        min_length=1, description="List of message keys to mark as read."
    )


class ArchiveChatInput(ToolInput):
    chat: StrictStr = Field(description="JID of the chat to archive/unarchive.")
    archive: StrictBool = Field(description="Set to true to archive, false to unarchive.")


class MarkChatUnreadInput(ToolInput):
    chat: StrictStr = Field(description="JID of the chat to mark as unread.")


class DeleteMessageKey(ToolInput):
    id: StrictStr = Field(description="The ID of the message to delete.")
    remote_jid: StrictStr = Field(description="JID of the chat where the message is.")
    from_me: StrictBool = Field(description="Was the message sent by the bot/instance?")
    participant: Optional[StrictStr] = Field(
        None,
        description=(
            "Participant JID (required for deleting messages in groups sent by others, if allowed)."
        ),
    )


class DeleteMessageInput(ToolInput):
    key: DeleteMessageKey = Field(description="Key identifying the message to delete for everyone.")


class ProfileTargetInput(ToolInput):
    number: StrictStr = Field(description=_PROFILE_TARGET)


class GetBase64FromMediaMessageInput(ToolInput):
    message_key: MessageKey = Field(description="Key identifying the media message.")
    convert_to_mp4: StrictBool = Field(False, description="Convert audio to MP4 format?")


class EditableMessageKey(ToolInput):
    id: StrictStr = Field(description="The ID of the message to edit.")
    remote_jid: StrictStr = Field(description="JID of the chat where the message is.")
    from_me: StrictBool = Field(description="Must be true (bot sent the message).")

    @field_validator("from_me")
    @classmethod
    def _only_own_messages(cls, value: bool) -> bool:
        if value is not True:
            raise PydanticCustomError(
                "from_me_required",
                "Can only edit messages sent by the bot (fromMe must be true).",
            )
        return value


class UpdateMessageInput(ToolInput):
    key: EditableMessageKey = Field(description="Key identifying the message to edit.")
    text: StrictStr = Field(description="The new text content for the message.")


class SendPresenceInput(ToolInput):
    number: StrictStr = Field(description="Chat JID (user or group) to send presence update to.")
    presence: Literal["unavailable", "available", "composing", "recording", "paused"] = Field(
        description="Type of presence update."
    )
    delay: Number = Field(1200, description="Delay in milliseconds (useful for composing/recording).")


class UpdateBlockStatusInput(ToolInput):
    number: StrictStr = Field(description="Phone number (with country code) or JID to block/unblock.")
    status: Literal["block", "unblock"] = Field(description="Action to perform.")


class MessageFilterKey(ToolInput):
    remote_jid: Optional[StrictStr] = Field(None, description="Filter by chat JID.")
    from_me: Optional[StrictBool] = Field(None, description="Filter by sender (bot or other).")
    id: Optional[StrictStr] = Field(None, description="Find specific message by ID.")


class MessageFilter(ToolInput):
    key: Optional[MessageFilterKey] = None


class FindMessagesInput(ToolInput):
    where: Optional[MessageFilter] = Field(None, description="Criteria to filter messages.")
    page: StrictInt = Field(1, gt=0, description="Page number for pagination.")
    limit: StrictInt = Field(10, gt=0, description="Number of messages per page.")


class UpdateProfileNameInput(ToolInput):
    name: StrictStr = Field(description="The new profile name for the bot instance.")


class UpdateProfileStatusInput(ToolInput):
    status: StrictStr = Field(description="The new profile status (about/bio) for the bot instance.")


class UpdateProfilePictureInput(ToolInput):
    picture: StrictStr = Field(description="URL or Base64 encoded string of the new profile picture.")
# endregion


# region 会话
@ToolRegistry.register
class CheckWhatsAppNumbersTool(BaseTool):
    operation = Operation.CHECK_WHATSAPP_NUMBERS
    description = "Checks if a list of phone numbers have active WhatsApp accounts."
    input_model = CheckWhatsAppNumbersInput
    path = "chat/whatsappNumbers"
    success_template = "WhatsApp number check results: "
    error_prefix = "Error checking WhatsApp numbers"

    def body(self, args: CheckWhatsAppNumbersInput) -> dict[str, Any]:
        return {"numbers": list(args.numbers)}


@ToolRegistry.register
class MarkMessageAsReadTool(BaseTool):
    operation = Operation.MARK_MESSAGE_AS_READ
    description = "Marks specific messages as read."
    input_model = MarkMessageAsReadInput
    path = "chat/markMessageAsRead"
    success_template = "Marked messages as read. Response: "
    error_prefix = "Error marking messages as read"

    def body(self, args: MarkMessageAsReadInput) -> dict[str, Any]:
        return to_payload(args) or {}


@ToolRegistry.register
class ArchiveChatTool(BaseTool):
    operation = Operation.ARCHIVE_CHAT
    description = "Archives or unarchives a specific chat."
    input_model = ArchiveChatInput
    path = "chat/archiveChat"
    error_prefix = "Error archiving/unarchiving chat"

    def body(self, args: ArchiveChatInput) -> dict[str, Any]:
        return {"chatId": args.chat, "archive": args.archive}

    def summary(self, args: ArchiveChatInput) -> str:
        state = "archived" if args.archive else "unarchived"
        return f"Chat {args.chat} {state}. Response: "


@ToolRegistry.register
class MarkChatUnreadTool(BaseTool):
    operation = Operation.MARK_CHAT_UNREAD
    description = "Marks a chat as unread."
    input_model = MarkChatUnreadInput
    path = "chat/markChatUnread"
    success_template = "Chat {chat} marked as unread. Response: "
    error_prefix = "Error marking chat unread"

    def body(self, args: MarkChatUnreadInput) -> dict[str, Any]:
        return {"chatId": args.chat}


@ToolRegistry.register
class DeleteMessageTool(BaseTool):
    """撤回消息 (对所有人删除)"""

    operation = Operation.DELETE_MESSAGE
    description = "Deletes a message for everyone."
    input_model = DeleteMessageInput
    path = "chat/deleteMessageForEveryone"
    success_template = "Message deletion requested for {key[id]}. Response: "
    error_prefix = "Error deleting message"

    def body(self, args: DeleteMessageInput) -> dict[str, Any]:
        return {"message": {"key": to_payload(args.key)}}


@ToolRegistry.register
class FetchProfilePictureUrlTool(BaseTool):
    operation = Operation.FETCH_PROFILE_PICTURE_URL
    description = "Gets the URL of a user's or group's profile picture."
    input_model = ProfileTargetInput
    path = "chat/fetchProfilePictureUrl"
    success_template = "Profile picture URL for {number}: "
    error_prefix = "Error fetching profile picture URL"

    def body(self, args: ProfileTargetInput) -> dict[str, Any]:
        return {"number": args.number}


@ToolRegistry.register
class GetBase64FromMediaMessageTool(BaseTool):
    """下载媒体 Base64，响应含 base64 时只回报 MIME 类型"""

    operation = Operation.GET_BASE64_FROM_MEDIA_MESSAGE
    description = "Downloads and returns the Base64 content of a media message."
    input_model = GetBase64FromMediaMessageInput
    path = "chat/getBase64FromMediaMessage"
    success_template = "Media retrieval response for message {messageKey[id]}: "
    error_prefix = "Error getting media Base64"

    def body(self, args: GetBase64FromMediaMessageInput) -> dict[str, Any]:
        return {
            "message": {"key": to_payload(args.message_key)},
            "convertToMp4": args.convert_to_mp4,
        }

    def compact_result(self, args: GetBase64FromMediaMessageInput, data: Any) -> str | None:
        if not (isinstance(data, dict) and data.get("base64")):
            return None
        return (
            f"Successfully retrieved Base64 data for message {args.message_key.id}. "
            f"(Data too long to display). Mimetype: {data.get('mimetype')}"
        )


@ToolRegistry.register
class UpdateMessageTool(BaseTool):
    operation = Operation.UPDATE_MESSAGE
    description = "Edits the text content of a previously sent message."
    input_model = UpdateMessageInput
    path = "chat/updateMessage"
    success_template = "Message {key[id]} updated. Response: "
    error_prefix = "Error updating message"

    def body(self, args: UpdateMessageInput) -> dict[str, Any]:
        return {"key": to_payload(args.key), "update": {"text": args.text}}


@ToolRegistry.register
class SendPresenceTool(BaseTool):
    operation = Operation.SEND_PRESENCE
    description = "Sends a presence update (e.g., typing, recording) to a chat."
    input_model = SendPresenceInput
    path = "chat/sendPresence"
    success_template = "Presence '{presence}' sent to {number}. Response: "
    error_prefix = "Error sending presence"

    def body(self, args: SendPresenceInput) -> dict[str, Any]:
        return {"chatId": args.number, "presence": args.presence, "duration": args.delay}


@ToolRegistry.register
class UpdateBlockStatusTool(BaseTool):
    operation = Operation.UPDATE_BLOCK_STATUS
    description = "Blocks or unblocks a specific contact."
    input_model = UpdateBlockStatusInput
    path = "chat/updateBlockStatus"
    error_prefix = "Error updating block status"

    def body(self, args: UpdateBlockStatusInput) -> dict[str, Any]:
        return {"jid": args.number, "action": args.status}

    def summary(self, args: UpdateBlockStatusInput) -> str:
        state = "blocked" if args.status == "block" else "unblocked"
        return f"Contact {args.number} {state}. Response: "


@ToolRegistry.register
class FindContactsTool(BaseTool):
    operation = Operation.FIND_CONTACTS
    description = "Retrieves the list of contacts synced with the instance."
    path = "chat/findContacts"
    success_template = "Contacts found: "
    error_prefix = "Error finding contacts"

    def body(self, args: ToolInput) -> dict[str, Any]:
        return {}


@ToolRegistry.register
class FindMessagesTool(BaseTool):
    operation = Operation.FIND_MESSAGES
    description = "Searches for messages in the instance's database (if enabled)."
    input_model = FindMessagesInput
    path = "chat/findMessages"
    success_template = "Messages found: "
    error_prefix = "Error finding messages"

    def body(self, args: FindMessagesInput) -> dict[str, Any]:
        return compact({
            "where": to_payload(args.where),
            "page": args.page,
            "limit": args.limit,
        })
# endregion


# region 实例资料
@ToolRegistry.register
class FetchProfileTool(BaseTool):
    operation = Operation.FETCH_PROFILE
    description = "Gets profile information (name, status, picture) for a given number/JID."
    input_model = ProfileTargetInput
    path = "chat/fetchProfile"
    success_template = "Profile for {number}: "
    error_prefix = "Error fetching profile"

    def body(self, args: ProfileTargetInput) -> dict[str, Any]:
        return {"number": args.number}


@ToolRegistry.register
class UpdateProfileNameTool(BaseTool):
    operation = Operation.UPDATE_PROFILE_NAME
    description = "Updates the instance's profile name."
    input_model = UpdateProfileNameInput
    path = "chat/updateProfileName"
    success_template = "Profile name updated. Response: "
    error_prefix = "Error updating profile name"

    def body(self, args: UpdateProfileNameInput) -> dict[str, Any]:
        return {"name": args.name}


@ToolRegistry.register
class UpdateProfileStatusTool(BaseTool):
    operation = Operation.UPDATE_PROFILE_STATUS
    description = "Updates the instance's profile status (about/bio)."
    input_model = UpdateProfileStatusInput
    path = "chat/updateProfileStatus"
    success_template = "Profile status updated. Response: "
    error_prefix = "Error updating profile status"

    def body(self, args: UpdateProfileStatusInput) -> dict[str, Any]:
        return {"status": args.status}


@ToolRegistry.register
class UpdateProfilePictureTool(BaseTool):
    operation = Operation.UPDATE_PROFILE_PICTURE
    description = "Updates the instance's profile picture from a URL or Base64."
    input_model = UpdateProfilePictureInput
    path = "chat/updateProfilePicture"
    success_template = "Profile picture update requested. Response: "
    error_prefix = "Error updating profile picture"

    def body(self, args: UpdateProfilePictureInput) -> dict[str, Any]:
        return {"url": args.picture}


@ToolRegistry.register
class RemoveProfilePictureTool(BaseTool):
    operation = Operation.REMOVE_PROFILE_PICTURE
    description = "Removes the instance's current profile picture."
    method = "DELETE"
    path = "chat/removeProfilePicture"
    success_template = "Profile picture removal requested. Response: "
    error_prefix = "Error removing profile picture"
# endregion
