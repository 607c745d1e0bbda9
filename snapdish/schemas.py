"""
Request and response envelopes for the lobby HTTP API.
"""

from typing import List, Optional

from pydantic import BaseModel

from snapdish.constants import Direction
from snapdish.models import Lobby, Recipe, User, Vote, WireModel


class HealthResponse(WireModel):
    status: str


class CreateLobbyRequest(WireModel):
    host_name: str


class CreateLobbyResponse(WireModel):
    message: str
    lobby: Lobby
    host: User


class JoinLobbyRequest(WireModel):
    name: str
    code: str


class JoinLobbyResponse(WireModel):
    message: str
    lobby: Lobby
    user: User


class MembersResponse(WireModel):
    members: List[User]


class IngredientsPayload(WireModel):
    ingredients: List[str]


class VisionRequest(WireModel):
    image_base64: str


class RecipesResponse(WireModel):
    recipes: List[Recipe]


class VoteRequest(WireModel):
    user_id: str
    recipe_id: str
    direction: Direction


class MessageResponse(WireModel):
    message: str


class VotesResponse(WireModel):
    votes: List[Vote]


# The example routes use snake_case field names on the wire.
class ImproveRequest(BaseModel):
    email_body: str


class ImproveResponse(BaseModel):
    email_improved: Optional[str] = None
    error: Optional[str] = None


class ChatRequest(BaseModel):
    message: str


class ChatResponse(BaseModel):
    reply: str
