import base64
import json

import httpx
import pytest

from snapdish.client import APIClient, resolve_base_url
from snapdish.config import Settings
from snapdish.errors import DecodeError, InvalidInput, NetworkError, NotFound, ServerError

BASE_URL = "http://snapdish.test"


def make_client(handler, **kwargs):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return APIClient(BASE_URL, http_client=http, **kwargs)


def failing_handler(request):
    raise AssertionError(f"unexpected request {request.method} {request.url}")


@pytest.mark.parametrize(
    "raw,expected",
    (
        ("http://127.0.0.1:3000", "http://127.0.0.1:3000"),
        ("  https://snapdish.example/ ", "https://snapdish.example"),
    ),
)
def test_resolve_base_url(raw, expected):
    assert resolve_base_url(raw) == expected


@pytest.mark.parametrize("raw", ("", "   ", "127.0.0.1:3000", "ftp://host"))
def test_resolve_base_url_rejects_invalid(raw):
    with pytest.raises(InvalidInput):
        resolve_base_url(raw)


def test_from_settings_uses_configured_address():
    settings = Settings(server_base_url=" http://10.0.0.2:3000 ", min_ingredients=5)
    client = APIClient.from_settings(settings, http_client=httpx.AsyncClient())
    assert client.base_url == "http://10.0.0.2:3000"
    assert client.min_ingredients == 5


@pytest.mark.asyncio
async def test_health():
    def handler(request):
        assert request.method == "GET"
        assert request.url.path == "/health"
        return httpx.Response(200, json={"status": "ok"})

    res = await make_client(handler).health()
    assert res.status == "ok"


@pytest.mark.asyncio
async def test_create_lobby_sends_trimmed_camel_case_body():
    def handler(request):
        assert request.url.path == "/api/lobby/create"
        assert request.headers["content-type"] == "application/json"
        assert json.loads(request.content) == {"hostName": "Ana"}
        return httpx.Response(
            200,
            json={
                "message": "Lobby created.",
                "lobby": {"id": "l1", "hostId": "u1", "code": "pm683e", "createdAt": "2025-09-20T10:05:57Z"},
                "host": {"id": "u1", "name": "Ana", "createdAt": "2025-09-20T10:05:57Z"},
            },
        )

    res = await make_client(handler).create_lobby("  Ana ")
    assert res.lobby.host_id == "u1"
    assert res.host.name == "Ana"


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ("", "   "))
async def test_create_lobby_rejects_empty_name(name):
    with pytest.raises(InvalidInput):
        await make_client(failing_handler).create_lobby(name)


@pytest.mark.asyncio
@pytest.mark.parametrize("name,code", (("", "abc123"), ("Ben", " ")))
async def test_join_lobby_rejects_empty_fields(name, code):
    with pytest.raises(InvalidInput):
        await make_client(failing_handler).join_lobby(name, code)


@pytest.mark.asyncio
async def test_generate_below_minimum_sends_no_request():
    with pytest.raises(InvalidInput):
        await make_client(failing_handler).generate_recipes("l1", ["egg", "milk", "flour"])


@pytest.mark.asyncio
async def test_cast_vote_rejects_unknown_direction():
    with pytest.raises(InvalidInput):
        await make_client(failing_handler).cast_vote("l1", "u1", "r1", "up")


@pytest.mark.asyncio
async def test_cast_vote_normalizes_direction():
    def handler(request):
        assert json.loads(request.content) == {"userId": "u1", "recipeId": "r1", "direction": "right"}
        return httpx.Response(200, json={"message": "Vote recorded."})

    res = await make_client(handler).cast_vote("l1", "u1", "r1", "RIGHT")
    assert res.message == "Vote recorded."


@pytest.mark.asyncio
async def test_remove_ingredients_sends_delete_with_body():
    def handler(request):
        assert request.method == "DELETE"
        assert request.url.path == "/api/lobby/l1/ingredients"
        assert json.loads(request.content) == {"ingredients": ["milk"]}
        return httpx.Response(200, json={"ingredients": ["egg"]})

    assert await make_client(handler).remove_ingredients("l1", ["milk"]) == ["egg"]


@pytest.mark.asyncio
async def test_extract_ingredients_encodes_image():
    image = b"\xff\xd8\xff\xe0jpeg"

    def handler(request):
        body = json.loads(request.content)
        assert base64.b64decode(body["imageBase64"]) == image
        return httpx.Response(200, json={"ingredients": ["tomato"]})

    assert await make_client(handler).extract_ingredients_from_image("l1", image) == ["tomato"]


@pytest.mark.asyncio
async def test_extract_ingredients_rejects_empty_image():
    with pytest.raises(InvalidInput):
        await make_client(failing_handler).extract_ingredients_from_image("l1", b"")


@pytest.mark.asyncio
async def test_improve_text_uses_snake_case_fields():
    def handler(request):
        assert json.loads(request.content) == {"email_body": "hi there"}
        return httpx.Response(200, json={"email_improved": "Hello there."})

    res = await make_client(handler).improve_text("hi there")
    assert res.email_improved == "Hello there."
    assert res.error is None


@pytest.mark.asyncio
async def test_chat_returns_reply():
    def handler(request):
        assert json.loads(request.content) == {"message": "What can I cook?"}
        return httpx.Response(200, json={"reply": "Pancakes."})

    assert await make_client(handler).chat("What can I cook?") == "Pancakes."


@pytest.mark.asyncio
async def test_transport_failure_is_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkError):
        await make_client(handler).list_recipes("l1")


@pytest.mark.asyncio
async def test_non_2xx_is_server_error_with_body():
    def handler(request):
        return httpx.Response(500, text="boom")

    with pytest.raises(ServerError) as excinfo:
        await make_client(handler).get_ingredients("l1")
    assert excinfo.value.status_code == 500
    assert excinfo.value.body == "boom"
    assert "HTTP 500" in str(excinfo.value)


@pytest.mark.asyncio
async def test_404_is_not_found():
    def handler(request):
        return httpx.Response(404, json={"detail": "Lobby not found."})

    with pytest.raises(NotFound) as excinfo:
        await make_client(handler).join_lobby("Ben", "nope00")
    assert isinstance(excinfo.value, ServerError)
    assert "Lobby not found." in excinfo.value.body


@pytest.mark.asyncio
async def test_malformed_json_is_decode_error():
    def handler(request):
        return httpx.Response(200, text="<html>")

    with pytest.raises(DecodeError):
        await make_client(handler).list_votes("l1")


@pytest.mark.asyncio
async def test_wrong_shape_is_decode_error():
    def handler(request):
        return httpx.Response(200, json={"recipes": [{"id": "r1"}]})

    with pytest.raises(DecodeError):
        await make_client(handler).list_recipes("l1")
