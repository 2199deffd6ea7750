"""User and chat queries composed over a Dispatcher."""

from __future__ import annotations

from typing import Any

from loguru import logger

from tgquery.config import Settings
from tgquery.dispatcher import Dispatcher
from tgquery.envelope import ResultEnvelope
from tgquery.errors import InvalidArgumentError
from tgquery.handle import Pending
from tgquery.models import (
    Chat,
    ChatPhoto,
    ChatPhotos,
    Chats,
    ChatTypePrivate,
    FoundChatMessages,
    ProfilePhoto,
    User,
    UserFullInfo,
    UserLink,
)
from tgquery.requests import (
    GetMe,
    GetUser,
    GetUserFullInfo,
    GetUserLink,
    GetUserProfilePhotos,
    SearchChatMessages,
    SearchChats,
    SearchPublicChat,
    SearchUserByPhoneNumber,
)


def _require_id(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(name, "expected an integer identifier")
    if value < 0:
        raise InvalidArgumentError(name, "must be non-negative")
    return value


def _require_text(name: str, value: Any) -> str:
    if value is None:
        raise InvalidArgumentError(name, "must not be None")
    if not isinstance(value, str):
        raise InvalidArgumentError(name, "expected a string")
    return value


def _require_page(offset: Any, limit: Any, max_limit: int) -> tuple[int, int]:
    offset = _require_id("offset", offset)
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidArgumentError("limit", "expected an integer")
    if not 0 < limit <= max_limit:
        raise InvalidArgumentError("limit", f"must be between 1 and {max_limit}")
    return offset, limit


class UserQueries:
    """Typed user and chat lookups.

    Every operation validates its arguments before anything is sent and
    raises ``InvalidArgumentError`` on bad input. Otherwise it returns a
    ``Pending`` handle that always resolves to an envelope: inspect it for
    error, found payload, or domain miss.

    Operations must be called while an event loop is running.
    """

    def __init__(self, dispatcher: Dispatcher, settings: Settings | None = None) -> None:
        self._dispatcher = dispatcher
        self._settings = settings or Settings()

    def get_user(self, user_id: int) -> Pending[User]:
        """Return information about a user by identifier. This is an offline request."""

        return self._dispatcher.dispatch(GetUser(_require_id("user_id", user_id)))

    def get_user_full_info(self, user_id: int) -> Pending[UserFullInfo]:
        return self._dispatcher.dispatch(GetUserFullInfo(_require_id("user_id", user_id)))

    def get_user_link(self) -> Pending[UserLink]:
        """Return an HTTPS link describing the current user."""

        return self._dispatcher.dispatch(GetUserLink())

    def get_me(self) -> Pending[User]:
        return self._dispatcher.dispatch(GetMe())

    def get_profile_photo(self, user_id: int) -> Pending[ProfilePhoto]:
        """Return the user's profile photo.

        A user without a photo resolves to a miss, not an error.
        """

        return self.get_user(user_id).map(lambda user: user.profile_photo)

    def get_public_photo(self, user_id: int) -> Pending[ChatPhoto]:
        """Return the photo shown when the main one is hidden by privacy settings."""

        return self.get_user_full_info(user_id).map(lambda info: info.public_photo)

    def get_user_profile_photos(self, user_id: int, offset: int, limit: int) -> Pending[ChatPhotos]:
        """Return the user's profile photos. Personal and public photos are not included."""

        user_id = _require_id("user_id", user_id)
        offset, limit = _require_page(offset, limit, self._settings.max_page_limit)
        return self._dispatcher.dispatch(GetUserProfilePhotos(user_id, offset, limit))

    def search_user_by_phone_number(self, phone_number: str) -> Pending[User]:
        phone_number = _require_text("phone_number", phone_number)
        return self._dispatcher.dispatch(SearchUserByPhoneNumber(phone_number, only_local=False))

    def search_chats(self, query: str) -> Pending[Chats]:
        query = _require_text("query", query)
        return self._dispatcher.dispatch(SearchChats(query, self._settings.search_chats_limit))

    def search_user_by_username(self, username: str) -> Pending[User]:
        """Resolve a public username to a user.

        Only private chats resolve to a user; any other chat type is a miss.
        The user lookup is sent after the chat lookup has resolved.
        """

        username = _require_text("username", username)

        def _resolve(chat: ResultEnvelope[Chat]) -> Pending[User] | ResultEnvelope[User]:
            if chat.payload is None:
                return chat.retag()
            if isinstance(chat.payload.type, ChatTypePrivate):
                return self._dispatcher.dispatch(GetUser(chat.payload.type.user_id))
            logger.debug("queries.username.not_private username={} chat_type={}", username, chat.payload.type.kind)
            return ResultEnvelope.not_found()

        return self._dispatcher.dispatch(SearchPublicChat(username)).then(_resolve)

    def search_chat_messages(self, chat_name: str, query: str, limit: int = 1) -> Pending[FoundChatMessages]:
        """Search messages in the first chat matching ``chat_name``.

        The message search is only built once the chat search has resolved
        with at least one chat; no match is a miss.
        """

        chat_name = _require_text("chat_name", chat_name)
        query = _require_text("query", query)
        _, limit = _require_page(0, limit, self._settings.max_page_limit)

        def _search_first(
            chats: ResultEnvelope[Chats],
        ) -> Pending[FoundChatMessages] | ResultEnvelope[FoundChatMessages]:
            if chats.payload is None:
                return chats.retag()
            if not chats.payload.chat_ids:
                logger.debug("queries.chat_messages.no_chat chat_name={}", chat_name)
                return ResultEnvelope.not_found()
            return self._dispatcher.dispatch(SearchChatMessages(chats.payload.chat_ids[0], query, limit=limit))

        return self.search_chats(chat_name).then(_search_first)
