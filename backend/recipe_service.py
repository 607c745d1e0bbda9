"""Recipe generation and image-based ingredient extraction for lobbies."""

import asyncio
import base64
import binascii
import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4

from snapdish.constants import MIN_INGREDIENTS, RECIPE_BATCH_SIZE
from snapdish.errors import InvalidInput
from snapdish.ingredients import count_distinct, merge_ingredients
from snapdish.models import Recipe

from backend.lobby import LobbyStore

logger = logging.getLogger(__name__)


class VisionUnavailable(Exception):
    pass


class RecipeGenerator:
    def generate(self, lobby_id: str, ingredients: List[str], count: int) -> List[Recipe]:
        raise NotImplementedError


class IngredientExtractor:
    def extract(self, image: bytes) -> List[str]:
        raise NotImplementedError


class PantryRecipeGenerator(RecipeGenerator):
    """Offline generator that builds dishes from fixed cooking styles."""

    STYLES = [
        ("Skillet", "A quick one-pan dish built around {main}."),
        ("Soup", "A warming soup with {main} and {side}."),
        ("Salad", "A fresh salad of {main} and {side}."),
        ("Bake", "An oven bake layering {main} with {side}."),
        ("Stir-Fry", "A fast stir-fry of {main} and {side}."),
        ("Curry", "A mild curry simmered with {main}."),
        ("Omelette", "A fluffy omelette filled with {main}."),
        ("Bowl", "A hearty bowl combining {main} and {side}."),
    ]

    def generate(self, lobby_id: str, ingredients: List[str], count: int) -> List[Recipe]:
        recipes = []
        created_at = datetime.now(timezone.utc).isoformat()
        for index in range(count):
            style, blurb = self.STYLES[index % len(self.STYLES)]
            main = ingredients[index % len(ingredients)]
            side = ingredients[(index + 1) % len(ingredients)]
            used = merge_ingredients([main, side], ingredients[: MIN_INGREDIENTS])
            recipes.append(
                Recipe(
                    id=str(uuid4()),
                    lobby_id=lobby_id,
                    title=f"{main.title()} {style}",
                    description=blurb.format(main=main, side=side),
                    created_at=created_at,
                    image_url=None,
                    ingredients=used,
                    steps=[
                        f"Prepare the {', '.join(used)}.",
                        f"Cook the {main} until done.",
                        f"Add the {side} and season to taste.",
                        "Serve warm.",
                    ],
                )
            )
        return recipes


class RecipeService:
    def __init__(
        self,
        store: LobbyStore,
        generator: Optional[RecipeGenerator] = None,
        extractor: Optional[IngredientExtractor] = None,
        batch_size: int = RECIPE_BATCH_SIZE,
        min_ingredients: int = MIN_INGREDIENTS,
    ) -> None:
        self.store = store
        self.generator = generator or PantryRecipeGenerator()
        self.extractor = extractor
        self.batch_size = batch_size
        self.min_ingredients = min_ingredients

    async def generate(self, lobby_id: str, ingredients: List[str]) -> List[Recipe]:
        await self.store.require_lobby(lobby_id)
        if count_distinct(ingredients) < self.min_ingredients:
            raise InvalidInput(f"At least {self.min_ingredients} ingredients are required.")
        snapshot = merge_ingredients([], ingredients)
        recipes = await asyncio.to_thread(
            self.generator.generate, lobby_id, snapshot, self.batch_size
        )
        logger.info("Generated %d recipes for lobby %s", len(recipes), lobby_id)
        return await self.store.add_recipes(lobby_id, recipes)

    async def extract_ingredients(self, lobby_id: str, image_base64: str) -> List[str]:
        await self.store.require_lobby(lobby_id)
        if self.extractor is None:
            raise VisionUnavailable("Ingredient recognition is not configured.")
        try:
            image = base64.b64decode(image_base64, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise InvalidInput("imageBase64 is not valid base64.") from exc
        if not image:
            raise InvalidInput("Image data is empty.")
        return await asyncio.to_thread(self.extractor.extract, image)
