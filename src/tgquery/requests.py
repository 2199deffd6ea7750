"""Immutable request variants understood by the client engine."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any, ClassVar

from pydantic import BaseModel

from tgquery import models


@dataclass(frozen=True)
class Request[T: BaseModel]:
    """One remote operation and its parameters.

    Subclasses declare the engine type name and the model the reply parses into.
    """

    type_name: ClassVar[str]
    response_model: ClassVar[type[BaseModel]]

    def to_query(self) -> dict[str, Any]:
        """Render the request as an engine JSON query."""

        query: dict[str, Any] = {"@type": self.type_name}
        for item in fields(self):
            query[item.name] = getattr(self, item.name)
        return query

    def parse_reply(self, reply: Mapping[str, Any]) -> T:
        return self.response_model.model_validate(reply)  # type: ignore[return-value]


@dataclass(frozen=True)
class GetUser(Request[models.User]):
    type_name: ClassVar[str] = "getUser"
    response_model: ClassVar[type[BaseModel]] = models.User

    user_id: int


@dataclass(frozen=True)
class GetUserFullInfo(Request[models.UserFullInfo]):
    type_name: ClassVar[str] = "getUserFullInfo"
    response_model: ClassVar[type[BaseModel]] = models.UserFullInfo

    user_id: int


@dataclass(frozen=True)
class GetUserLink(Request[models.UserLink]):
    type_name: ClassVar[str] = "getUserLink"
    response_model: ClassVar[type[BaseModel]] = models.UserLink


@dataclass(frozen=True)
class GetMe(Request[models.User]):
    type_name: ClassVar[str] = "getMe"
    response_model: ClassVar[type[BaseModel]] = models.User


@dataclass(frozen=True)
class GetUserProfilePhotos(Request[models.ChatPhotos]):
    type_name: ClassVar[str] = "getUserProfilePhotos"
    response_model: ClassVar[type[BaseModel]] = models.ChatPhotos

    user_id: int
    offset: int
    limit: int


@dataclass(frozen=True)
class SearchUserByPhoneNumber(Request[models.User]):
    type_name: ClassVar[str] = "searchUserByPhoneNumber"
    response_model: ClassVar[type[BaseModel]] = models.User

    phone_number: str
    only_local: bool = False


@dataclass(frozen=True)
class SearchChats(Request[models.Chats]):
    type_name: ClassVar[str] = "searchChats"
    response_model: ClassVar[type[BaseModel]] = models.Chats

    query: str
    limit: int


@dataclass(frozen=True)
class SearchPublicChat(Request[models.Chat]):
    type_name: ClassVar[str] = "searchPublicChat"
    response_model: ClassVar[type[BaseModel]] = models.Chat

    username: str


@dataclass(frozen=True)
class SearchChatMessages(Request[models.FoundChatMessages]):
    type_name: ClassVar[str] = "searchChatMessages"
    response_model: ClassVar[type[BaseModel]] = models.FoundChatMessages

    chat_id: int
    query: str
    sender_id: Mapping[str, Any] | None = None
    from_message_id: int = 0
    offset: int = 0
    limit: int = 1
    filter: Mapping[str, Any] | None = None
    message_thread_id: int = 0
    saved_messages_topic_id: int = 0
