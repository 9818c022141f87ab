from __future__ import annotations
import logging
from typing import Any, NamedTuple, Optional, Protocol
import httpx
from recipe_box.case import Multipart

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Network failure or an unexpected HTTP status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class Response(NamedTuple):
    status: int
    headers: httpx.Headers
    body: Any


class Transport(Protocol):
    async def send(
        self,
        method: str,
        path: str,
        body: Any = None,
        auth_header: Optional[str] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Response: ...


def is_json(headers: httpx.Headers) -> bool:
    return headers.get("content-type", "").split(";")[0].strip() == "application/json"


class HttpTransport:
    def __init__(self, base_url: str, timeout: float = 10.0):
        self.base_url = base_url
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    async def send(
        self,
        method: str,
        path: str,
        body: Any = None,
        auth_header: Optional[str] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Response:
        headers = {"Authorization": auth_header} if auth_header else {}
        kwargs: dict[str, Any] = {"headers": headers, "params": params}
        if isinstance(body, Multipart):
            kwargs["files"] = body.files
            kwargs["data"] = body.data
        elif body is not None:
            kwargs["json"] = body

        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.ConnectError as e:
            raise TransportError(f"Could not connect to {self.base_url}. Is the server running?") from e
        except httpx.TimeoutException as e:
            raise TransportError(f"{method} {path} timed out.") from e
        except httpx.TransportError as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        logger.debug("%s %s -> %s", method, path, response.status_code)
        if is_json(response.headers) and response.content:
            try:
                data = response.json()
            except ValueError as e:
                raise TransportError(
                    f"{method} {path} returned invalid JSON", status_code=response.status_code
                ) from e
        else:
            data = response.text
        return Response(status=response.status_code, headers=response.headers, body=data)

    async def aclose(self) -> None:
        await self._client.aclose()
