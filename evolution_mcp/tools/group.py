"""
描述: 群组管理工具
主要功能:
    - 建群、群列表、成员查询与成员变更
    - 群名称 / 描述 / 头像 / 设置 / 阅后即焚
    - 邀请码获取、重置、发送与反查
    - 退群
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import Field, StrictBool, StrictInt, StrictStr, field_validator
from pydantic_core import PydanticCustomError

from evolution_mcp.tools.base import BaseTool
from evolution_mcp.tools.models import ToolInput, to_payload
from evolution_mcp.tools.registry import Operation, ToolRegistry


EPHEMERAL_EXPIRATIONS = (0, 86400, 604800, 7776000)
_SECONDS_PER_DAY = 86400
_GROUP_JID = "The JID of the group."


# region 入参模型
class CreateGroupInput(ToolInput):
    subject: StrictStr = Field(description="The name/subject of the new group.")
    description: Optional[StrictStr] = Field(None, description="Optional description for the group.")
    participants: list[StrictStr] = Field(
        min_length=1,
        description="Array of phone numbers (with country code) of initial participants.",
    )


class FetchAllGroupsInput(ToolInput):
    get_participants: StrictBool = Field(
        False, description="Include participant lists in the response?"
    )


class GroupInput(ToolInput):
    group_jid: StrictStr = Field(description=_GROUP_JID)


class FindParticipantsInput(ToolInput):
    group_jid: StrictStr = Field(description="The JID of the group (e.g., 1234567890@g.us).")


class UpdateParticipantInput(GroupInput):
    action: Literal["add", "remove", "promote", "demote"] = Field(
        description="Action to perform on participants."
    )
    participants: list[StrictStr] = Field(
        min_length=1,
        description="Array of participant phone numbers (with country code) or JIDs.",
    )


class UpdateGroupSubjectInput(GroupInput):
    subject: StrictStr = Field(description="The new subject/name for the group.")


class UpdateGroupDescriptionInput(GroupInput):
    description: StrictStr = Field(description="The new description for the group.")


class UpdateGroupPictureInput(GroupInput):
    image: StrictStr = Field(description="URL or Base64 encoded string of the new group picture.")


class SendInviteInput(ToolInput):
    group_jid: StrictStr = Field(description="The JID of the group to invite to.")
    numbers: list[StrictStr] = Field(
        min_length=1,
        description="Array of phone numbers (with country code) or JIDs to send the invite link to.",
    )
    description: Optional[StrictStr] = Field(
        None, description="Optional text to send along with the invite link."
    )


class FindGroupByInviteCodeInput(ToolInput):
    invite_code: StrictStr = Field(description="The group invite code (from the invite link).")


class UpdateGroupSettingInput(GroupInput):
    action: Literal["announcement", "not_announcement", "locked", "unlocked"] = Field(
        description=(
            "'announcement' (only admins send msg), 'not_announcement' (all send msg), "
            "'locked' (only admins edit info), 'unlocked' (all edit info)."
        )
    )


class ToggleEphemeralInput(GroupInput):
    expiration: StrictInt = Field(
        description=(
            "Ephemeral message duration: 0 (Off), 86400 (24h), 604800 (7d), 7776000 (90d)."
        ),
        json_schema_extra={"enum": list(EPHEMERAL_EXPIRATIONS)},
    )

    @field_validator("expiration")
    @classmethod
    def _known_expiration(cls, value: int) -> int:
        if value not in EPHEMERAL_EXPIRATIONS:
            raise PydanticCustomError(
                "literal_error",
                "Input should be {expected}",
                {"expected": ", ".join(str(item) for item in EPHEMERAL_EXPIRATIONS)},
            )
        return value


class LeaveGroupInput(ToolInput):
    group_jid: StrictStr = Field(description="The JID of the group to leave.")
# endregion


class _GroupTool(BaseTool):
    """groupJid 通过 query 参数传递"""

    def query(self, args: Any) -> dict[str, Any]:
        return {"groupJid": args.group_jid}


# region 群组与成员
@ToolRegistry.register
class CreateGroupTool(BaseTool):
    operation = Operation.CREATE_GROUP
    description = "Creates a new WhatsApp group."
    input_model = CreateGroupInput
    path = "group/create"
    success_template = "Group '{subject}' creation initiated. Response: "
    error_prefix = "Error creating group"

    def body(self, args: CreateGroupInput) -> dict[str, Any]:
        return to_payload(args) or {}


@ToolRegistry.register
class FetchAllGroupsTool(BaseTool):
    operation = Operation.FETCH_ALL_GROUPS
    description = "Retrieves a list of all groups the instance is part of."
    input_model = FetchAllGroupsInput
    method = "GET"
    path = "group/fetchAllGroups"
    success_template = "Groups fetched: "
    error_prefix = "Error fetching groups"

    def query(self, args: FetchAllGroupsInput) -> dict[str, Any]:
        return {"getParticipants": args.get_participants}


@ToolRegistry.register
class FindParticipantsTool(_GroupTool):
    operation = Operation.FIND_PARTICIPANTS
    description = "Retrieves the participant list for a specific group."
    input_model = FindParticipantsInput
    method = "GET"
    path = "group/participants"
    success_template = "Participants for group {groupJid}: "
    error_prefix = "Error finding participants"


@ToolRegistry.register
class UpdateParticipantTool(_GroupTool):
    operation = Operation.UPDATE_PARTICIPANT
    description = "Adds, removes, promotes, or demotes participants in a group."
    input_model = UpdateParticipantInput
    path = "group/updateParticipant"
    success_template = "Participant update ({action}) executed for group {groupJid}. Response: "
    error_prefix = "Error updating participants"

    def body(self, args: UpdateParticipantInput) -> dict[str, Any]:
        return {"action": args.action, "participants": list(args.participants)}
# endregion


# region 群资料与设置
@ToolRegistry.register
class UpdateGroupSubjectTool(_GroupTool):
    operation = Operation.UPDATE_GROUP_SUBJECT
    description = "Changes the subject (name) of a group."
    input_model = UpdateGroupSubjectInput
    path = "group/updateGroupSubject"
    success_template = "Group subject updated for {groupJid}. Response: "
    error_prefix = "Error updating group subject"

    def body(self, args: UpdateGroupSubjectInput) -> dict[str, Any]:
        return {"subject": args.subject}


@ToolRegistry.register
class UpdateGroupDescriptionTool(_GroupTool):
    operation = Operation.UPDATE_GROUP_DESCRIPTION
    description = "Changes the description of a group."
    input_model = UpdateGroupDescriptionInput
    path = "group/updateGroupDescription"
    success_template = "Group description updated for {groupJid}. Response: "
    error_prefix = "Error updating group description"

    def body(self, args: UpdateGroupDescriptionInput) -> dict[str, Any]:
        return {"description": args.description}


@ToolRegistry.register
class UpdateGroupPictureTool(_GroupTool):
    operation = Operation.UPDATE_GROUP_PICTURE
    description = "Changes the profile picture of a group."
    input_model = UpdateGroupPictureInput
    path = "group/updateGroupPicture"
    success_template = "Group picture update requested for {groupJid}. Response: "
    error_prefix = "Error updating group picture"

    def body(self, args: UpdateGroupPictureInput) -> dict[str, Any]:
        return {"url": args.image}


@ToolRegistry.register
class UpdateGroupSettingTool(_GroupTool):
    operation = Operation.UPDATE_GROUP_SETTING
    description = "Changes group settings (e.g., who can send messages or edit info)."
    input_model = UpdateGroupSettingInput
    path = "group/updateSetting"
    success_template = "Group setting '{action}' updated for {groupJid}. Response: "
    error_prefix = "Error updating group setting"

    def body(self, args: UpdateGroupSettingInput) -> dict[str, Any]:
        return {"action": args.action}


@ToolRegistry.register
class ToggleEphemeralTool(_GroupTool):
    operation = Operation.TOGGLE_EPHEMERAL
    description = "Enables or disables ephemeral (disappearing) messages for a group."
    input_model = ToggleEphemeralInput
    path = "group/toggleEphemeral"
    error_prefix = "Error toggling ephemeral messages"

    def body(self, args: ToggleEphemeralInput) -> dict[str, Any]:
        return {"expiration": args.expiration}

    def summary(self, args: ToggleEphemeralInput) -> str:
        duration = "Off" if args.expiration == 0 else f"{args.expiration // _SECONDS_PER_DAY} days"
        return f"Ephemeral messages set to {duration} for {args.group_jid}. Response: "
# endregion


# region 邀请
@ToolRegistry.register
class FetchInviteCodeTool(_GroupTool):
    operation = Operation.FETCH_INVITE_CODE
    description = "Gets the current invite code (link) for a group."
    input_model = GroupInput
    method = "GET"
    path = "group/inviteCode"
    success_template = "Invite code for {groupJid}: "
    error_prefix = "Error fetching invite code"


@ToolRegistry.register
class RevokeInviteCodeTool(_GroupTool):
    operation = Operation.REVOKE_INVITE_CODE
    description = "Generates a new invite code (link), invalidating the old one."
    input_model = GroupInput
    path = "group/revokeInviteCode"
    success_template = "Invite code revoked for {groupJid}. New code: "
    error_prefix = "Error revoking invite code"

    def body(self, args: GroupInput) -> dict[str, Any]:
        return {}


@ToolRegistry.register
class SendInviteTool(BaseTool):
    operation = Operation.SEND_INVITE
    description = "Sends the group invite link to specified numbers."
    input_model = SendInviteInput
    path = "group/sendInvite"
    success_template = "Invites sent for group {groupJid}. Response: "
    error_prefix = "Error sending invites"

    def body(self, args: SendInviteInput) -> dict[str, Any]:
        return to_payload(args) or {}


@ToolRegistry.register
class FindGroupByInviteCodeTool(BaseTool):
    operation = Operation.FIND_GROUP_BY_INVITE_CODE
    description = "Retrieves group information using an invite code."
    input_model = FindGroupByInviteCodeInput
    method = "GET"
    path = "group/inviteInfo"
    success_template = "Group info for invite code {inviteCode}: "
    error_prefix = "Error finding group by invite code"

    def query(self, args: FindGroupByInviteCodeInput) -> dict[str, Any]:
        return {"inviteCode": args.invite_code}


@ToolRegistry.register
class FindGroupByJidTool(_GroupTool):
    operation = Operation.FIND_GROUP_BY_JID
    description = "Retrieves detailed information about a specific group by its JID."
    input_model = GroupInput
    method = "GET"
    path = "group/findGroupInfos"
    success_template = "Group info for {groupJid}: "
    error_prefix = "Error finding group by JID"


@ToolRegistry.register
class LeaveGroupTool(_GroupTool):
    operation = Operation.LEAVE_GROUP
    description = "Makes the instance leave a specified group."
    input_model = LeaveGroupInput
    method = "DELETE"
    path = "group/leaveGroup"
    success_template = "Left group {groupJid}. Response: "
    error_prefix = "Error leaving group"
# endregion
