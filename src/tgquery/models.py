"""Typed payloads parsed from engine replies.

Engine objects are JSON mappings tagged with an ``@type`` discriminator. Only
the fields the query layer reads are required; anything else the engine sends
is kept as an extra attribute.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class TdObject(BaseModel):
    """Base class for engine objects."""

    model_config = ConfigDict(extra="allow", frozen=True)


class File(TdObject):
    kind: Literal["file"] = Field("file", alias="@type")
    id: int
    size: int = 0
    expected_size: int = 0


class ProfilePhoto(TdObject):
    kind: Literal["profilePhoto"] = Field("profilePhoto", alias="@type")
    id: int
    small: File | None = None
    big: File | None = None
    has_animation: bool = False
    is_personal: bool = False


class PhotoSize(TdObject):
    kind: Literal["photoSize"] = Field("photoSize", alias="@type")
    type: str = ""
    photo: File | None = None
    width: int = 0
    height: int = 0


class ChatPhoto(TdObject):
    kind: Literal["chatPhoto"] = Field("chatPhoto", alias="@type")
    id: int
    added_date: int = 0
    sizes: list[PhotoSize] = Field(default_factory=list)


class ChatPhotos(TdObject):
    kind: Literal["chatPhotos"] = Field("chatPhotos", alias="@type")
    total_count: int = 0
    photos: list[ChatPhoto] = Field(default_factory=list)


class Usernames(TdObject):
    kind: Literal["usernames"] = Field("usernames", alias="@type")
    active_usernames: list[str] = Field(default_factory=list)
    editable_username: str = ""


class User(TdObject):
    kind: Literal["user"] = Field("user", alias="@type")
    id: int
    first_name: str = ""
    last_name: str = ""
    usernames: Usernames | None = None
    phone_number: str = ""
    profile_photo: ProfilePhoto | None = None
    is_contact: bool = False

    @property
    def username(self) -> str | None:
        if self.usernames is None or not self.usernames.active_usernames:
            return None
        return self.usernames.active_usernames[0]

    @property
    def display_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class FormattedText(TdObject):
    kind: Literal["formattedText"] = Field("formattedText", alias="@type")
    text: str = ""


class UserFullInfo(TdObject):
    kind: Literal["userFullInfo"] = Field("userFullInfo", alias="@type")
    personal_photo: ChatPhoto | None = None
    photo: ChatPhoto | None = None
    public_photo: ChatPhoto | None = None
    bio: FormattedText | None = None
    can_be_called: bool = False
    group_in_common_count: int = 0


class UserLink(TdObject):
    kind: Literal["userLink"] = Field("userLink", alias="@type")
    url: str
    expires_in: int = 0


class ChatTypePrivate(TdObject):
    kind: Literal["chatTypePrivate"] = Field("chatTypePrivate", alias="@type")
    user_id: int


class ChatTypeBasicGroup(TdObject):
    kind: Literal["chatTypeBasicGroup"] = Field("chatTypeBasicGroup", alias="@type")
    basic_group_id: int


class ChatTypeSupergroup(TdObject):
    kind: Literal["chatTypeSupergroup"] = Field("chatTypeSupergroup", alias="@type")
    supergroup_id: int
    is_channel: bool = False


class ChatTypeSecret(TdObject):
    kind: Literal["chatTypeSecret"] = Field("chatTypeSecret", alias="@type")
    secret_chat_id: int
    user_id: int


ChatType = Annotated[
    ChatTypePrivate | ChatTypeBasicGroup | ChatTypeSupergroup | ChatTypeSecret,
    Field(discriminator="kind"),
]


class Chat(TdObject):
    kind: Literal["chat"] = Field("chat", alias="@type")
    id: int
    type: ChatType
    title: str = ""


class Chats(TdObject):
    kind: Literal["chats"] = Field("chats", alias="@type")
    total_count: int = 0
    chat_ids: list[int] = Field(default_factory=list)


class Message(TdObject):
    kind: Literal["message"] = Field("message", alias="@type")
    id: int
    chat_id: int
    date: int = 0
    content: dict[str, Any] | None = None


class FoundChatMessages(TdObject):
    kind: Literal["foundChatMessages"] = Field("foundChatMessages", alias="@type")
    total_count: int = 0
    messages: list[Message] = Field(default_factory=list)
    next_from_message_id: int = 0
