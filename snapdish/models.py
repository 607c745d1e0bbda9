"""Domain models for lobbies, users, recipes and votes.

Attributes are snake_case in Python and camelCase on the wire.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Lobby(WireModel):
    id: str
    host_id: str
    code: str
    created_at: str


class User(WireModel):
    id: str
    name: str
    created_at: str


class Recipe(WireModel):
    id: str
    lobby_id: str
    title: str
    description: str
    created_at: str
    image_url: Optional[str] = None
    ingredients: List[str] = Field(default_factory=list)
    steps: List[str] = Field(default_factory=list)


class Vote(WireModel):
    user_id: str
    recipe_id: str
    direction: str

    @property
    def is_approval(self) -> bool:
        return self.direction.lower() == "right"
