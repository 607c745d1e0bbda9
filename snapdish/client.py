"""
Async HTTP client for the lobby API.

Every coroutine maps to one endpoint. Failures are raised as
:mod:`snapdish.errors` exceptions and never retried here; the caller
decides whether to try again.
"""

import base64
import logging
from typing import List, Optional, Type, TypeVar, Union

import httpx
from pydantic import BaseModel, ValidationError

from snapdish.config import Settings
from snapdish.constants import MIN_INGREDIENTS, Direction
from snapdish.errors import DecodeError, InvalidInput, NetworkError, NotFound, ServerError
from snapdish.ingredients import count_distinct
from snapdish.models import Recipe, User, Vote
from snapdish.schemas import (
    ChatRequest,
    ChatResponse,
    CreateLobbyRequest,
    CreateLobbyResponse,
    HealthResponse,
    ImproveRequest,
    ImproveResponse,
    IngredientsPayload,
    JoinLobbyRequest,
    JoinLobbyResponse,
    MembersResponse,
    MessageResponse,
    RecipesResponse,
    VisionRequest,
    VoteRequest,
    VotesResponse,
)

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)


def resolve_base_url(raw: str) -> str:
    url = (raw or "").strip()
    if not url.startswith(("http://", "https://")):
        raise InvalidInput(f"Invalid server address: {raw!r}")
    return url.rstrip("/")


def _require_text(value: str, field: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise InvalidInput(f"{field} is required.")
    return cleaned


class APIClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 15.0,
        min_ingredients: int = MIN_INGREDIENTS,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = resolve_base_url(base_url)
        self.min_ingredients = min_ingredients
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(
        cls, settings: Settings, http_client: Optional[httpx.AsyncClient] = None
    ) -> "APIClient":
        return cls(
            settings.server_base_url,
            timeout=settings.request_timeout,
            min_ingredients=settings.min_ingredients,
            http_client=http_client,
        )

    async def __aenter__(self) -> "APIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    # Service

    async def health(self) -> HealthResponse:
        return await self._request("GET", "health", HealthResponse)

    # Lobby

    async def create_lobby(self, host_name: str) -> CreateLobbyResponse:
        payload = CreateLobbyRequest(host_name=_require_text(host_name, "Host name"))
        return await self._request("POST", "api/lobby/create", CreateLobbyResponse, payload)

    async def join_lobby(self, name: str, code: str) -> JoinLobbyResponse:
        payload = JoinLobbyRequest(
            name=_require_text(name, "Name"),
            code=_require_text(code, "Lobby code"),
        )
        return await self._request("POST", "api/lobby/join", JoinLobbyResponse, payload)

    async def list_members(self, lobby_id: str) -> List[User]:
        res = await self._request("GET", f"api/lobby/{lobby_id}/members", MembersResponse)
        return res.members

    # Ingredients

    async def get_ingredients(self, lobby_id: str) -> List[str]:
        res = await self._request("GET", f"api/lobby/{lobby_id}/ingredients", IngredientsPayload)
        return res.ingredients

    async def add_ingredients(self, lobby_id: str, names: List[str]) -> List[str]:
        res = await self._request(
            "POST",
            f"api/lobby/{lobby_id}/ingredients",
            IngredientsPayload,
            IngredientsPayload(ingredients=list(names)),
        )
        return res.ingredients

    async def remove_ingredients(self, lobby_id: str, names: List[str]) -> List[str]:
        res = await self._request(
            "DELETE",
            f"api/lobby/{lobby_id}/ingredients",
            IngredientsPayload,
            IngredientsPayload(ingredients=list(names)),
        )
        return res.ingredients

    async def extract_ingredients_from_image(self, lobby_id: str, image: bytes) -> List[str]:
        if not image:
            raise InvalidInput("Image data is empty.")
        payload = VisionRequest(image_base64=base64.b64encode(image).decode("ascii"))
        res = await self._request(
            "POST", f"api/lobby/{lobby_id}/ingredients/vision", IngredientsPayload, payload
        )
        return res.ingredients

    # Recipes

    async def generate_recipes(self, lobby_id: str, ingredients: List[str]) -> List[Recipe]:
        count = count_distinct(ingredients)
        if count < self.min_ingredients:
            raise InvalidInput(
                f"At least {self.min_ingredients} ingredients are required, got {count}."
            )
        res = await self._request(
            "POST",
            f"api/lobby/{lobby_id}/recipes/generate",
            RecipesResponse,
            IngredientsPayload(ingredients=list(ingredients)),
        )
        return res.recipes

    async def list_recipes(self, lobby_id: str) -> List[Recipe]:
        res = await self._request("GET", f"api/lobby/{lobby_id}/recipes", RecipesResponse)
        return res.recipes

    # Voting

    async def cast_vote(
        self, lobby_id: str, user_id: str, recipe_id: str, direction: Union[Direction, str]
    ) -> MessageResponse:
        try:
            direction = Direction(str(getattr(direction, "value", direction)).lower())
        except ValueError as exc:
            raise InvalidInput(f"Unknown vote direction: {direction!r}") from exc
        payload = VoteRequest(user_id=user_id, recipe_id=recipe_id, direction=direction)
        return await self._request("POST", f"api/lobby/{lobby_id}/vote", MessageResponse, payload)

    async def list_votes(self, lobby_id: str) -> List[Vote]:
        res = await self._request("GET", f"api/lobby/{lobby_id}/results", VotesResponse)
        return res.votes

    # Example routes

    async def improve_text(self, text: str) -> ImproveResponse:
        payload = ImproveRequest(email_body=_require_text(text, "Text"))
        return await self._request("POST", "api/example/improve", ImproveResponse, payload)

    async def chat(self, message: str) -> str:
        payload = ChatRequest(message=_require_text(message, "Message"))
        res = await self._request("POST", "api/example/chat", ChatResponse, payload)
        return res.reply

    async def _request(
        self,
        method: str,
        path: str,
        response_model: Type[ResponseT],
        payload: Optional[BaseModel] = None,
    ) -> ResponseT:
        url = f"{self.base_url}/{path}"
        body = None
        if payload is not None:
            body = payload.model_dump(mode="json", by_alias=True)
        logger.debug("%s %s", method, url)
        try:
            response = await self._http.request(method, url, json=body)
        except httpx.RequestError as exc:
            logger.warning("%s /%s failed: %s", method, path, exc)
            raise NetworkError(f"{method} /{path} failed: {exc}") from exc

        if not response.is_success:
            text = response.text or "<no body>"
            message = f"{method} /{path} -> HTTP {response.status_code}: {text}"
            logger.warning(message)
            if response.status_code == 404:
                raise NotFound(message, status_code=404, body=response.text)
            raise ServerError(message, status_code=response.status_code, body=response.text)

        try:
            return response_model.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise DecodeError(f"{method} /{path} returned an unexpected body: {exc}") from exc
