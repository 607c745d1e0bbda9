"""
In-memory lobby state: members, shared ingredients, recipes and votes.
"""

import asyncio
import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple
from uuid import uuid4

from snapdish.constants import JOIN_CODE_LENGTH
from snapdish.errors import InvalidInput, NotFound
from snapdish.ingredients import merge_ingredients, remove_ingredients
from snapdish.models import Lobby, Recipe, User, Vote

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class LobbyRoom:
    lobby: Lobby
    member_ids: List[str] = field(default_factory=list)
    ingredients: List[str] = field(default_factory=list)
    recipes: List[Recipe] = field(default_factory=list)
    votes: List[Vote] = field(default_factory=list)


class LobbyStore:
    def __init__(self) -> None:
        self._users: Dict[str, User] = {}
        self._rooms: Dict[str, LobbyRoom] = {}
        self._codes: Dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def create_lobby(self, host_name: Optional[str]) -> Tuple[Lobby, User]:
        name = self._sanitize_name(host_name, "Host name")
        async with self._lock:
            host = User(id=str(uuid4()), name=name, created_at=_now())
            lobby = Lobby(
                id=str(uuid4()),
                host_id=host.id,
                code=self._generate_code(),
                created_at=_now(),
            )
            self._users[host.id] = host
            self._rooms[lobby.id] = LobbyRoom(lobby=lobby, member_ids=[host.id])
            self._codes[lobby.code] = lobby.id
        logger.info("Lobby %s created by %s (code %s)", lobby.id, host.name, lobby.code)
        return lobby, host

    async def join_lobby(self, name: Optional[str], code: Optional[str]) -> Tuple[Lobby, User]:
        member_name = self._sanitize_name(name, "Name")
        cleaned_code = (code or "").strip().lower()
        if not cleaned_code:
            raise InvalidInput("Lobby code is required.")
        async with self._lock:
            lobby_id = self._codes.get(cleaned_code)
            if not lobby_id:
                raise NotFound("Lobby not found.")
            room = self._rooms[lobby_id]
            user = User(id=str(uuid4()), name=member_name, created_at=_now())
            self._users[user.id] = user
            room.member_ids.append(user.id)
        logger.info("%s joined lobby %s", user.name, lobby_id)
        return room.lobby, user

    async def members(self, lobby_id: str) -> List[User]:
        async with self._lock:
            room = self._get_room_locked(lobby_id)
            return [self._users[mid] for mid in room.member_ids if mid in self._users]

    async def ingredients(self, lobby_id: str) -> List[str]:
        async with self._lock:
            return list(self._get_room_locked(lobby_id).ingredients)

    async def add_ingredients(self, lobby_id: str, names: List[str]) -> List[str]:
        async with self._lock:
            room = self._get_room_locked(lobby_id)
            room.ingredients = merge_ingredients(room.ingredients, names)
            return list(room.ingredients)

    async def remove_ingredients(self, lobby_id: str, names: List[str]) -> List[str]:
        async with self._lock:
            room = self._get_room_locked(lobby_id)
            room.ingredients = remove_ingredients(room.ingredients, names)
            return list(room.ingredients)

    async def add_recipes(self, lobby_id: str, recipes: List[Recipe]) -> List[Recipe]:
        async with self._lock:
            room = self._get_room_locked(lobby_id)
            room.recipes.extend(recipes)
            return list(recipes)

    async def recipes(self, lobby_id: str) -> List[Recipe]:
        async with self._lock:
            return list(self._get_room_locked(lobby_id).recipes)

    async def cast_vote(self, lobby_id: str, user_id: str, recipe_id: str, direction: str) -> Vote:
        async with self._lock:
            room = self._get_room_locked(lobby_id)
            if user_id not in room.member_ids:
                raise NotFound("User is not a member of this lobby.")
            if not any(recipe.id == recipe_id for recipe in room.recipes):
                raise NotFound("Recipe not found.")
            vote = Vote(user_id=user_id, recipe_id=recipe_id, direction=direction)
            room.votes.append(vote)
            return vote

    async def votes(self, lobby_id: str) -> List[Vote]:
        async with self._lock:
            return list(self._get_room_locked(lobby_id).votes)

    async def require_lobby(self, lobby_id: str) -> Lobby:
        async with self._lock:
            return self._get_room_locked(lobby_id).lobby

    def _get_room_locked(self, lobby_id: str) -> LobbyRoom:
        room = self._rooms.get(lobby_id)
        if not room:
            raise NotFound("Lobby not found.")
        return room

    def _sanitize_name(self, raw_name: Optional[str], field_name: str) -> str:
        cleaned = (raw_name or "").strip()
        if not cleaned:
            raise InvalidInput(f"{field_name} is required.")
        return cleaned

    def _generate_code(self) -> str:
        while True:
            code = secrets.token_hex(JOIN_CODE_LENGTH // 2)
            if code not in self._codes:
                return code
