from __future__ import annotations
import logging
from typing import Callable, Optional
from pydantic import ValidationError
from recipe_box.client import SessionClient
from recipe_box.models import AuthUser, NewUser
from recipe_box.store import KeyValueStore

logger = logging.getLogger(__name__)

USER_STORAGE_KEY = "user"


class AuthManager:
    """Owns the signed-in user and keeps it in sync with the store and client.

    A persisted user is resumed on construction without a network round trip.
    Both an explicit sign-out and a server-side expiration end in
    ``on_signed_out``, which is where callers navigate home.
    """

    def __init__(
        self,
        client: SessionClient,
        store: KeyValueStore,
        on_signed_out: Optional[Callable[[], None]] = None,
    ):
        self.client = client
        self.store = store
        self.on_signed_out = on_signed_out
        self.user = self._load_user()
        if self.user is not None:
            client.resume(self.user.token, self._on_token_expired)

    def _load_user(self) -> Optional[AuthUser]:
        raw = self.store.get(USER_STORAGE_KEY)
        if raw is None:
            return None
        try:
            return AuthUser.model_validate_json(raw)
        except ValidationError:
            logger.warning("Discarding unreadable stored session")
            self.store.remove(USER_STORAGE_KEY)
            return None

    async def sign_in(self, username: str, password: str) -> AuthUser:
        token = await self.client.sign_in(username, password, self._on_token_expired)
        self.user = AuthUser(username=username, token=token.token)
        self.store.set(USER_STORAGE_KEY, self.user.model_dump_json())
        return self.user

    async def sign_up(self, name: str, username: str, password: str) -> AuthUser:
        await self.client.create_user(NewUser(username=username, password=password, name=name))
        return await self.sign_in(username, password)

    def sign_out(self) -> None:
        self.client.sign_out()
        self._forget()
        logger.info("Signed out")

    def _on_token_expired(self) -> None:
        self._forget()

    def _forget(self) -> None:
        self.store.remove(USER_STORAGE_KEY)
        self.user = None
        if self.on_signed_out is not None:
            self.on_signed_out()
