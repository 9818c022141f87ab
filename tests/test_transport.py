import asyncio
import json
import httpx
import pytest
from pytest_httpx import HTTPXMock
from recipe_box.case import Multipart
from recipe_box.transport import HttpTransport, TransportError

BASE = "http://api.test"


def send(*args, **kwargs):
    async def go():
        transport = HttpTransport(BASE)
        try:
            return await transport.send(*args, **kwargs)
        finally:
            await transport.aclose()

    return asyncio.run(go())


def test_send_decodes_json(httpx_mock: HTTPXMock):
    httpx_mock.add_response(url=f"{BASE}/recipe", json=[{"id": 1}])
    response = send("GET", "/recipe")
    assert response.status == 200
    assert response.body == [{"id": 1}]


def test_send_returns_text_for_other_content(httpx_mock: HTTPXMock):
    httpx_mock.add_response(url=f"{BASE}/health", text="ok")
    assert send("GET", "/health").body == "ok"


def test_send_reports_401_without_raising(httpx_mock: HTTPXMock):
    httpx_mock.add_response(url=f"{BASE}/recipe/1", status_code=401)
    assert send("GET", "/recipe/1").status == 401


def test_send_passes_json_body_and_auth_header(httpx_mock: HTTPXMock):
    httpx_mock.add_response(method="POST", url=f"{BASE}/recipe", json={"id": 3})
    send("POST", "/recipe", body={"title": "Soup"}, auth_header="Bearer abc")
    request = httpx_mock.get_request()
    assert request.headers["authorization"] == "Bearer abc"
    assert json.loads(request.content) == {"title": "Soup"}


def test_send_omits_auth_header_when_absent(httpx_mock: HTTPXMock):
    httpx_mock.add_response(url=f"{BASE}/recipe", json=[])
    send("GET", "/recipe")
    assert "authorization" not in httpx_mock.get_request().headers


def test_send_multipart(httpx_mock: HTTPXMock):
    httpx_mock.add_response(method="POST", url=f"{BASE}/upload", json={})
    send("POST", "/upload", body=Multipart(files={"photo": ("a.png", b"PNGDATA", "image/png")}, data={"altText": "x"}))
    request = httpx_mock.get_request()
    assert request.headers["content-type"].startswith("multipart/form-data")
    assert b'name="altText"' in request.content
    assert b"PNGDATA" in request.content


def test_send_connect_error_raises_transport_error(httpx_mock: HTTPXMock):
    httpx_mock.add_exception(httpx.ConnectError("refused"))
    with pytest.raises(TransportError, match="Could not connect"):
        send("GET", "/recipe")


def test_send_timeout_raises_transport_error(httpx_mock: HTTPXMock):
    httpx_mock.add_exception(httpx.ReadTimeout("slow"))
    with pytest.raises(TransportError, match="timed out") as exc_info:
        send("GET", "/recipe")
    assert exc_info.value.status_code is None


def test_send_malformed_json_raises_transport_error(httpx_mock: HTTPXMock):
    httpx_mock.add_response(url=f"{BASE}/recipe", content=b"{oops", headers={"content-type": "application/json"})
    with pytest.raises(TransportError, match="GET /recipe returned invalid JSON") as exc_info:
        send("GET", "/recipe")
    assert exc_info.value.status_code == 200
