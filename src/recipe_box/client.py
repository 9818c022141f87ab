from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Union
import httpx
from recipe_box.case import Multipart, camel_keys, snake_keys
from recipe_box.models import NewUser, RecipeResponse, TokenResponse, User
from recipe_box.transport import Response, Transport, TransportError, is_json

logger = logging.getLogger(__name__)

ExpirationCallback = Callable[[], None]


class ClientError(Exception):
    pass


class AuthenticationError(ClientError):
    pass


class SessionExpiredError(ClientError):
    def __init__(self, message: str = "Your session has expired. Please sign in again."):
        super().__init__(message)
        self.status_code = 401


@dataclass(frozen=True)
class BasicCredential:
    username: str
    password: str

    def header(self) -> str:
        auth = httpx.BasicAuth(self.username, self.password)
        request = next(auth.sync_auth_flow(httpx.Request("POST", "http://localhost/user/token")))
        return request.headers["Authorization"]


@dataclass(frozen=True)
class BearerCredential:
    token: str

    def header(self) -> str:
        return f"Bearer {self.token}"


Credential = Union[BasicCredential, BearerCredential]


class SessionState(Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class SessionClient:
    """Authenticated request pipeline for the recipe API.

    Holds the single active credential. Outbound bodies and query params are
    snake_cased and JSON responses camelCased on the way back, except
    ``Multipart`` bodies which go out untouched. A 401 on an authenticated
    request drops the credential, fires the expiration callback once and
    raises ``SessionExpiredError`` to the caller.
    """

    def __init__(self, transport: Transport):
        self.transport = transport
        self._credential: Optional[BearerCredential] = None
        self._on_expired: Optional[ExpirationCallback] = None

    @property
    def credential(self) -> Optional[BearerCredential]:
        return self._credential

    @property
    def state(self) -> SessionState:
        return SessionState.AUTHENTICATED if self._credential else SessionState.ANONYMOUS

    @property
    def is_authenticated(self) -> bool:
        return self.state is SessionState.AUTHENTICATED

    async def sign_in(
        self, username: str, password: str, on_expired: ExpirationCallback
    ) -> TokenResponse:
        basic = BasicCredential(username, password)
        response = await self.transport.send("POST", "/user/token", body={}, auth_header=basic.header())
        if response.status in (401, 403):
            raise AuthenticationError("Invalid username or password.")
        self._raise_for_status("POST", "/user/token", response)

        token = TokenResponse.model_validate(self.decode_inbound(response))
        self._credential = BearerCredential(token.token)
        self._on_expired = on_expired
        logger.info("Signed in as %s", username)
        return token

    def resume(self, token: str, on_expired: ExpirationCallback) -> None:
        self._credential = BearerCredential(token)
        self._on_expired = on_expired

    def sign_out(self) -> None:
        self._credential = None
        self._on_expired = None

    def encode_outbound(self, body: Any) -> Any:
        if isinstance(body, Multipart):
            return body
        return snake_keys(body)

    def decode_inbound(self, response: Response) -> Any:
        if is_json(response.headers):
            return camel_keys(response.body)
        return response.body

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        auth_header = self._credential.header() if self._credential else None
        response = await self.transport.send(
            method,
            path,
            body=self.encode_outbound(body) if body is not None else None,
            auth_header=auth_header,
            params=snake_keys(params) if params else None,
        )
        if response.status == 401:
            if self._credential is None:
                raise AuthenticationError("You must sign in first.")
            self._expire()
            raise SessionExpiredError()
        self._raise_for_status(method, path, response)
        return self.decode_inbound(response)

    def _expire(self) -> None:
        callback = self._on_expired
        self._credential = None
        self._on_expired = None
        logger.info("Session expired, credential cleared")
        if callback is not None:
            callback()

    def _raise_for_status(self, method: str, path: str, response: Response) -> None:
        if response.status == 404:
            raise TransportError(f"Not found (404): {path}", status_code=404)
        if response.status >= 400:
            raise TransportError(f"HTTP {response.status} error on {method} {path}", status_code=response.status)

    async def create_user(self, user: NewUser) -> User:
        data = await self.request("POST", "/user", body=user.model_dump(by_alias=True))
        return User.model_validate(data)

    async def get_user(self, user_id: int) -> User:
        return User.model_validate(await self.request("GET", f"/user/{user_id}"))

    async def get_auth_user(self) -> User:
        return User.model_validate(await self.request("GET", "/user/auth"))

    async def get_recipes(self) -> list[RecipeResponse]:
        data = await self.request("GET", "/recipe")
        return [RecipeResponse.model_validate(r) for r in data]

    async def get_recipe(self, recipe_id: int) -> dict[str, Any]:
        return await self.request("GET", f"/recipe/{recipe_id}")

    async def create_recipe(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self.request("POST", "/recipe", body=payload)

    async def update_recipe(self, recipe_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        return await self.request("POST", f"/recipe/{recipe_id}", body=payload)
