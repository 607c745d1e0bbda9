"""Rules gating recipe generation."""

from dataclasses import dataclass
from typing import Iterable

from snapdish.constants import MIN_INGREDIENTS, RECIPE_BATCH_SIZE
from snapdish.errors import GenerationNotAllowed, InvalidInput
from snapdish.ingredients import count_distinct


@dataclass
class SessionRules:
    min_ingredients: int = MIN_INGREDIENTS
    recipe_batch_size: int = RECIPE_BATCH_SIZE
    host_only_generation: bool = False

    def can_generate(self, ingredients: Iterable[str], is_host: bool) -> bool:
        try:
            self.check_generate(ingredients, is_host)
        except (InvalidInput, GenerationNotAllowed):
            return False
        return True

    def check_generate(self, ingredients: Iterable[str], is_host: bool) -> None:
        if self.host_only_generation and not is_host:
            raise GenerationNotAllowed("Only the host can generate recipes.")
        count = count_distinct(ingredients)
        if count < self.min_ingredients:
            raise InvalidInput(
                f"At least {self.min_ingredients} ingredients are required, got {count}."
            )
