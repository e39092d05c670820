"""
描述: 消息发送工具
主要功能:
    - 发送文本、媒体、视频便签 (PTV)、语音、贴纸
    - 发送位置、联系人名片、表情回应
    - 发送投票、列表消息、按钮消息
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import Field, StrictInt, StrictStr

from evolution_mcp.tools.base import BaseTool
from evolution_mcp.tools.models import (
    AudioSendOptions,
    BaseSendOptions,
    MentionSendOptions,
    MessageKey,
    Number,
    TextSendOptions,
    ToolInput,
    compact,
    to_payload,
)
from evolution_mcp.tools.registry import Operation, ToolRegistry


_RECIPIENT = "Recipient's phone number or group JID."


# region 入参模型
class SendTextInput(ToolInput):
    number: StrictStr = Field(
        description=(
            "Recipient's phone number including country code (e.g., 5511999998888) "
            "or group JID (e.g., 1234567890@g.us)."
        )
    )
    text: StrictStr = Field(description="The text message content.")
    options: Optional[TextSendOptions] = None


class SendMediaInput(ToolInput):
    number: StrictStr = Field(description=_RECIPIENT)
    mediatype: Literal["image", "video", "document"] = Field(description="Type of media.")
    mimetype: Optional[StrictStr] = Field(
        None,
        description=(
            "MIME type of the media (e.g., image/png, video/mp4). "
            "Required if not obvious from URL/base64."
        ),
    )
    media: StrictStr = Field(description="URL or Base64 encoded string of the media.")
    caption: Optional[StrictStr] = Field(None, description="Caption for the media.")
    file_name: Optional[StrictStr] = Field(
        None, description="Filename for the media (especially for documents)."
    )
    options: Optional[MentionSendOptions] = None


class SendPtvInput(ToolInput):
    number: StrictStr = Field(description=_RECIPIENT)
    video: StrictStr = Field(description="URL or Base64 encoded string of the video.")
    options: Optional[BaseSendOptions] = None


class SendWhatsAppAudioInput(ToolInput):
    number: StrictStr = Field(description=_RECIPIENT)
    audio: StrictStr = Field(description="URL or Base64 encoded string of the audio (e.g., mp3, ogg).")
    options: Optional[AudioSendOptions] = None


class SendStickerInput(ToolInput):
    number: StrictStr = Field(description=_RECIPIENT)
    sticker: StrictStr = Field(
        description="URL or Base64 encoded string of the sticker (e.g., webp, png, jpg)."
    )
    options: Optional[MentionSendOptions] = None


class SendLocationInput(ToolInput):
    number: StrictStr = Field(description=_RECIPIENT)
    latitude: Number = Field(description="Latitude coordinate.")
    longitude: Number = Field(description="Longitude coordinate.")
    name: Optional[StrictStr] = Field(None, description="Name of the location.")
    address: Optional[StrictStr] = Field(None, description="Address of the location.")
    options: Optional[BaseSendOptions] = None


class ContactCard(ToolInput):
    full_name: StrictStr = Field(description="Full name of the contact.")
    wuid: StrictStr = Field(description="WhatsApp User ID (phone number with country code).")
    phone_number: StrictStr = Field(description="Formatted phone number.")
    organization: Optional[StrictStr] = Field(None, description="Organization name.")
    email: Optional[StrictStr] = Field(None, description="Email address.")
    url: Optional[StrictStr] = Field(None, description="Website URL.")


class SendContactInput(ToolInput):
    number: StrictStr = Field(description=_RECIPIENT)
    contacts: list[ContactCard] = Field(description="Array of contacts to send.")
    options: Optional[BaseSendOptions] = None


class SendReactionInput(ToolInput):
    key: MessageKey = Field(description="Key object identifying the message.")
    reaction: StrictStr = Field(
        description="The emoji reaction (e.g., '👍', '❤️', '🚀'). Empty string to remove reaction."
    )


class SendPollInput(ToolInput):
    number: StrictStr = Field(description=_RECIPIENT)
    name: StrictStr = Field(description="The main question or text of the poll.")
    selectable_count: StrictInt = Field(1, ge=1, description="How many options can be selected.")
    values: list[StrictStr] = Field(min_length=1, description="List of poll options/answers.")
    options: Optional[BaseSendOptions] = None


class ListRow(ToolInput):
    title: StrictStr = Field(description="Title of the list row/item.")
    description: Optional[StrictStr] = Field(None, description="Description for the list row/item.")
    row_id: StrictStr = Field(description="Unique ID for this row (sent back when user selects it).")


class ListSection(ToolInput):
    title: StrictStr = Field(description="Title for this section of the list.")
    rows: list[ListRow] = Field(min_length=1, description="Rows within this section.")


class SendListInput(ToolInput):
    number: StrictStr = Field(description=_RECIPIENT)
    title: StrictStr = Field(description="Title of the list message.")
    description: StrictStr = Field(description="Description shown below the title.")
    button_text: StrictStr = Field(description="Text for the button that opens the list.")
    footer_text: Optional[StrictStr] = Field(None, description="Footer text for the list.")
    sections: list[ListSection] = Field(min_length=1, description="Sections of the list message.")
    options: Optional[BaseSendOptions] = None


class MessageButton(ToolInput):
    type: Literal["reply", "url", "call", "copy", "pix"] = Field(description="Type of button.")
    display_text: StrictStr = Field(description="Text displayed on the button.")
    id: Optional[StrictStr] = Field(None, description="ID for 'reply' button (sent back on click).")
    url: Optional[StrictStr] = Field(None, description="URL for 'url' button.")
    phone_number: Optional[StrictStr] = Field(None, description="Phone number for 'call' button.")
    copy_code: Optional[StrictStr] = Field(None, description="Text to copy for 'copy' button.")
    currency: Optional[StrictStr] = Field(None, description="Currency for 'pix' (e.g., BRL).")
    name: Optional[StrictStr] = Field(None, description="Recipient name for 'pix'.")
    key_type: Optional[Literal["phone", "email", "cpf", "cnpj", "random"]] = Field(
        None, description="PIX key type."
    )
    key: Optional[StrictStr] = Field(None, description="PIX key value.")


class SendButtonsInput(ToolInput):
    number: StrictStr = Field(description=_RECIPIENT)
    title: Optional[StrictStr] = Field(
        None, description="Title of the button message (often used for media)."
    )
    description: StrictStr = Field(description="Main text/description of the button message.")
    footer: Optional[StrictStr] = Field(None, description="Footer text.")
    buttons: list[MessageButton] = Field(
        min_length=1, max_length=3, description="Buttons to include (max 3 typical)."
    )
    options: Optional[BaseSendOptions] = None
# endregion


class _SendMessageTool(BaseTool):
    """发送类工具公共部分：body = {number, options, <消息体>}"""

    # 消息体在请求中的键名，为空时消息字段平铺在顶层
    content_key: str = ""

    def content(self, args: Any) -> dict[str, Any] | None:
        return None

    def body(self, args: Any) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "number": args.number,
            "options": to_payload(args.options),
        }
        if self.content_key:
            payload[self.content_key] = self.content(args)
        return compact(payload)


@ToolRegistry.register
class SendTextTool(_SendMessageTool):
    operation = Operation.SEND_TEXT
    description = "Sends a text message via Evolution API."
    input_model = SendTextInput
    path = "message/sendText"
    success_template = "Text message sent to {number}. Response: "
    error_prefix = "Error sending text message"

    def body(self, args: SendTextInput) -> dict[str, Any]:
        return compact({
            "number": args.number,
            "text": args.text,
            "options": to_payload(args.options),
        })


@ToolRegistry.register
class SendMediaTool(_SendMessageTool):
    operation = Operation.SEND_MEDIA
    description = "Sends a media message (image, video, document) via URL or Base64."
    input_model = SendMediaInput
    path = "message/sendMedia"
    success_template = "Media message ({mediatype}) sent to {number}. Response: "
    error_prefix = "Error sending media message"
    content_key = "media"

    def content(self, args: SendMediaInput) -> dict[str, Any]:
        return {
            "mediatype": args.mediatype,
            "mimetype": args.mimetype,
            "media": args.media,
            "caption": args.caption,
            "fileName": args.file_name,
        }


@ToolRegistry.register
class SendPtvTool(_SendMessageTool):
    operation = Operation.SEND_PTV
    description = "Sends a PTV (Push-To-Video) / Video Note message."
    input_model = SendPtvInput
    path = "message/sendPtv"
    success_template = "PTV sent to {number}. Response: "
    error_prefix = "Error sending PTV"
    content_key = "media"

    def content(self, args: SendPtvInput) -> dict[str, Any]:
        return {"media": args.video, "mediatype": "video"}


@ToolRegistry.register
class SendWhatsAppAudioTool(_SendMessageTool):
    operation = Operation.SEND_WHATSAPP_AUDIO
    description = "Sends an audio message as a voice note."
    input_model = SendWhatsAppAudioInput
    path = "message/sendWhatsAppAudio"
    success_template = "WhatsApp Audio sent to {number}. Response: "
    error_prefix = "Error sending WhatsApp audio"
    content_key = "media"

    def content(self, args: SendWhatsAppAudioInput) -> dict[str, Any]:
        return {"media": args.audio, "mediatype": "audio"}


@ToolRegistry.register
class SendStickerTool(_SendMessageTool):
    operation = Operation.SEND_STICKER
    description = "Sends a sticker message via URL or Base64."
    input_model = SendStickerInput
    path = "message/sendSticker"
    success_template = "Sticker sent to {number}. Response: "
    error_prefix = "Error sending sticker"
    content_key = "media"

    def content(self, args: SendStickerInput) -> dict[str, Any]:
        return {"media": args.sticker, "mediatype": "sticker"}


@ToolRegistry.register
class SendLocationTool(_SendMessageTool):
    operation = Operation.SEND_LOCATION
    description = "Sends a location message."
    input_model = SendLocationInput
    path = "message/sendLocation"
    success_template = "Location sent to {number}. Response: "
    error_prefix = "Error sending location"
    content_key = "location"

    def content(self, args: SendLocationInput) -> dict[str, Any]:
        return {
            "degreesLatitude": args.latitude,
            "degreesLongitude": args.longitude,
            "name": args.name,
            "address": args.address,
        }


@ToolRegistry.register
class SendContactTool(_SendMessageTool):
    operation = Operation.SEND_CONTACT
    description = "Sends one or more contact cards."
    input_model = SendContactInput
    path = "message/sendContact"
    success_template = "Contact(s) sent to {number}. Response: "
    error_prefix = "Error sending contact"
    content_key = "contactMessage"

    def content(self, args: SendContactInput) -> dict[str, Any]:
        return {"contacts": [to_payload(contact) for contact in args.contacts]}


@ToolRegistry.register
class SendReactionTool(BaseTool):
    operation = Operation.SEND_REACTION
    description = "Sends an emoji reaction to a specific message."
    input_model = SendReactionInput
    path = "message/sendReaction"
    success_template = "Reaction '{reaction}' sent to message {key[id]}. Response: "
    error_prefix = "Error sending reaction"

    def body(self, args: SendReactionInput) -> dict[str, Any]:
        return {"reactionMessage": to_payload(args)}


@ToolRegistry.register
class SendPollTool(_SendMessageTool):
    operation = Operation.SEND_POLL
    description = "Sends a poll message."
    input_model = SendPollInput
    path = "message/sendPoll"
    success_template = "Poll sent to {number}. Response: "
    error_prefix = "Error sending poll"
    content_key = "poll"

    def content(self, args: SendPollInput) -> dict[str, Any]:
        return {
            "name": args.name,
            "values": list(args.values),
            "selectableCount": args.selectable_count,
        }


@ToolRegistry.register
class SendListTool(_SendMessageTool):
    operation = Operation.SEND_LIST
    description = "Sends a list message."
    input_model = SendListInput
    path = "message/sendList"
    success_template = "List message sent to {number}. Response: "
    error_prefix = "Error sending list message"
    content_key = "listMessage"

    def content(self, args: SendListInput) -> dict[str, Any]:
        return {
            "title": args.title,
            "description": args.description,
            "buttonText": args.button_text,
            "footerText": args.footer_text,
            "sections": [to_payload(section) for section in args.sections],
        }


@ToolRegistry.register
class SendButtonsTool(_SendMessageTool):
    operation = Operation.SEND_BUTTONS
    description = "Sends a message with interactive buttons."
    input_model = SendButtonsInput
    path = "message/sendButtons"
    success_template = "Button message sent to {number}. Response: "
    error_prefix = "Error sending button message"
    content_key = "buttonMessage"

    def content(self, args: SendButtonsInput) -> dict[str, Any]:
        return {
            "text": args.description,
            "title": args.title,
            "footer": args.footer,
            "buttons": [to_payload(button) for button in args.buttons],
        }
