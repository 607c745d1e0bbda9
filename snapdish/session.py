"""Client-side lobby session: one member's view of a cooking session."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Dict, List, Optional, Union

from snapdish.client import APIClient
from snapdish.config import Settings
from snapdish.constants import Direction, SessionState
from snapdish.errors import SessionStateError, SnapDishError
from snapdish.ingredients import parse_ingredient_input
from snapdish.models import Lobby, Recipe, User
from snapdish.poller import DEFAULT_POLL_INTERVAL, Poller
from snapdish.rules import SessionRules
from snapdish.tally import Tally, tally_votes

logger = logging.getLogger(__name__)

Listener = Callable[[Dict[str, object]], None]

DEFAULT_RESULTS_DELAY = 0.6


class LobbySession:
    def __init__(
        self,
        api: APIClient,
        rules: Optional[SessionRules] = None,
        *,
        results_delay: float = DEFAULT_RESULTS_DELAY,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        auto_results: bool = True,
    ) -> None:
        self.api = api
        self.rules = rules or SessionRules()
        self.results_delay = results_delay
        self.poll_interval = poll_interval
        self.auto_results = auto_results
        self._vote_pending = False

        self.state = SessionState.NO_SESSION
        self.lobby: Optional[Lobby] = None
        self.host: Optional[User] = None
        self.user: Optional[User] = None
        self.members: List[User] = []
        self.ingredients: List[str] = []
        self.recipe_count = 0
        self.generated: List[Recipe] = []
        self.recipes: List[Recipe] = []
        self.index = 0
        self.tally: Optional[Tally] = None
        self.results_recipes: Dict[str, Recipe] = {}
        self.last_error: Optional[SnapDishError] = None

        self._listeners: List[Listener] = []
        self._poller: Optional[Poller] = None

    @classmethod
    def from_settings(cls, api: APIClient, settings: Settings) -> LobbySession:
        return cls(
            api,
            settings.rules(),
            results_delay=settings.results_delay,
            poll_interval=settings.poll_interval,
        )

    # Change notification

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, payload: Dict[str, object]) -> None:
        for listener in list(self._listeners):
            listener(payload)

    def _set_state(self, state: SessionState) -> None:
        if state == self.state:
            return
        previous, self.state = self.state, state
        logger.info("Session %s: %s -> %s", self.lobby.id if self.lobby else "-", previous.value, state.value)
        self._emit({"type": "state_changed", "previous": previous, "state": state})

    # Lobby lifecycle

    @property
    def is_host(self) -> bool:
        if not self.user or not self.lobby:
            return False
        return self.user.id == self.lobby.host_id

    @property
    def can_generate(self) -> bool:
        return self.lobby is not None and self.rules.can_generate(self.ingredients, self.is_host)

    async def create(self, host_name: str) -> Lobby:
        self._require_state(SessionState.NO_SESSION)
        res = await self._call(self.api.create_lobby(host_name))
        self.lobby, self.host, self.user = res.lobby, res.host, res.host
        self._set_state(SessionState.LOBBY_ACTIVE)
        return res.lobby

    async def join(self, name: str, code: str) -> Lobby:
        self._require_state(SessionState.NO_SESSION)
        res = await self._call(self.api.join_lobby(name, code))
        self.lobby, self.user = res.lobby, res.user
        self.host = None
        self._set_state(SessionState.LOBBY_ACTIVE)
        return res.lobby

    async def leave(self) -> None:
        await self.stop_polling()
        self.lobby = self.host = self.user = None
        self.members = []
        self.ingredients = []
        self.recipe_count = 0
        self.generated = []
        self.recipes = []
        self.index = 0
        self.tally = None
        self.results_recipes = {}
        self._set_state(SessionState.NO_SESSION)

    async def refresh(self) -> None:
        lobby = self._require_lobby()
        members, recipes = await self._call(
            _gather(self.api.list_members(lobby.id), self.api.list_recipes(lobby.id))
        )
        # The host is shown separately and must not be counted twice.
        self.members = [member for member in members if member.id != lobby.host_id]
        if self.host is None:
            self.host = next((member for member in members if member.id == lobby.host_id), None)
        self.recipe_count = len(recipes)
        self._emit({"type": "members_updated", "members": list(self.members)})

    # Polling

    def start_polling(self, interval: Optional[float] = None) -> Poller:
        self._require_lobby()
        if interval is None:
            interval = self.poll_interval
        if self._poller is None or not self._poller.running:
            self._poller = Poller(self.refresh, interval)
            self._poller.start()
        return self._poller

    async def stop_polling(self) -> None:
        if self._poller is not None:
            await self._poller.stop()
            self._poller = None

    # Ingredients

    async def load_ingredients(self) -> List[str]:
        lobby = self._require_lobby()
        self._set_ingredients(await self._call(self.api.get_ingredients(lobby.id)))
        return self.ingredients

    async def add_ingredients(self, names: Union[str, List[str]]) -> List[str]:
        lobby = self._require_lobby()
        if isinstance(names, str):
            names = parse_ingredient_input(names)
        if not names:
            return self.ingredients
        self._set_ingredients(await self._call(self.api.add_ingredients(lobby.id, names)))
        return self.ingredients

    async def remove_ingredients(self, names: Union[str, List[str]]) -> List[str]:
        lobby = self._require_lobby()
        if isinstance(names, str):
            names = [names]
        self._set_ingredients(await self._call(self.api.remove_ingredients(lobby.id, names)))
        return self.ingredients

    async def add_ingredients_from_image(self, image: bytes) -> List[str]:
        lobby = self._require_lobby()
        detected = await self._call(self.api.extract_ingredients_from_image(lobby.id, image))
        return await self.add_ingredients([name.strip() for name in detected])

    def _set_ingredients(self, ingredients: List[str]) -> None:
        self.ingredients = list(ingredients)
        self._emit({"type": "ingredients_updated", "ingredients": list(self.ingredients)})

    # Recipes

    async def generate_recipes(self) -> List[Recipe]:
        lobby = self._require_lobby()
        try:
            self.rules.check_generate(self.ingredients, self.is_host)
        except SnapDishError as exc:
            self._fail(exc)
            raise
        batch = await self._call(self.api.generate_recipes(lobby.id, list(self.ingredients)))
        self.generated = batch
        self.recipe_count += len(batch)
        logger.info("Generated %d recipes for lobby %s", len(batch), lobby.id)
        self._emit({"type": "recipes_updated", "count": self.recipe_count})
        if self.state == SessionState.LOBBY_ACTIVE:
            self._set_state(SessionState.RECIPES_GENERATED)
        return batch

    # Voting

    @property
    def current_recipe(self) -> Optional[Recipe]:
        if self.state != SessionState.VOTING or self.index >= len(self.recipes):
            return None
        return self.recipes[self.index]

    async def start_voting(self) -> List[Recipe]:
        """Fetch the recipe list and put the cursor on the first recipe.

        Also restarts voting after completion; recipes already voted on are
        offered again. With no recipes the state is left as it is.
        """
        lobby = self._require_lobby()
        recipes = await self._call(self.api.list_recipes(lobby.id))
        self.recipes = recipes
        self.recipe_count = len(recipes)
        self.index = 0
        if recipes:
            self._set_state(SessionState.VOTING)
        return recipes

    async def vote(self, direction: Union[Direction, str]) -> None:
        """Vote on the current recipe and move the cursor forward.

        Only one vote may be in flight; a second call while the first is
        pending raises ``SessionStateError``. Once the vote is stored this
        returns normally, even if loading the results afterwards fails; that
        failure is reported through ``last_error`` and an ``error`` event.
        """
        lobby = self._require_lobby()
        self._require_state(SessionState.VOTING)
        if self._vote_pending:
            raise SessionStateError("A vote is already in progress.")
        self._vote_pending = True
        try:
            recipe = self.recipes[self.index]
            await self._call(self.api.cast_vote(lobby.id, self.user.id, recipe.id, direction))
            self.index += 1
        finally:
            self._vote_pending = False
        self._emit({"type": "vote_cast", "recipe_id": recipe.id, "index": self.index})
        if self.index < len(self.recipes):
            return
        self._set_state(SessionState.VOTING_COMPLETE)
        if not self.auto_results:
            return
        await asyncio.sleep(self.results_delay)
        try:
            await self.view_results()
        except SnapDishError as exc:
            logger.warning("Results could not be loaded after voting: %s", exc)

    async def view_results(self) -> Tally:
        lobby = self._require_lobby()
        self._require_state(SessionState.VOTING_COMPLETE, SessionState.RESULTS_VIEWED)
        votes, recipes = await self._call(
            _gather(self.api.list_votes(lobby.id), self.api.list_recipes(lobby.id))
        )
        self.tally = tally_votes(votes)
        self.results_recipes = {recipe.id: recipe for recipe in recipes}
        self._emit({"type": "results_updated", "winner_id": self.tally.winner_id})
        self._set_state(SessionState.RESULTS_VIEWED)
        return self.tally

    @property
    def winner(self) -> Optional[Recipe]:
        if self.tally is None or self.tally.winner_id is None:
            return None
        return self.results_recipes.get(self.tally.winner_id)

    # Guards

    async def _call(self, awaitable):
        self.last_error = None
        try:
            return await awaitable
        except SnapDishError as exc:
            self._fail(exc)
            raise

    def _fail(self, exc: SnapDishError) -> None:
        self.last_error = exc
        self._emit({"type": "error", "message": str(exc), "error": exc})

    def _require_lobby(self) -> Lobby:
        if self.lobby is None or self.state == SessionState.NO_SESSION:
            raise SessionStateError("No active lobby.")
        return self.lobby

    def _require_state(self, *states: SessionState) -> None:
        if self.state not in states:
            expected = ", ".join(state.value for state in states)
            raise SessionStateError(f"Expected state {expected}, session is {self.state.value}.")


async def _gather(*awaitables):
    """Run requests concurrently; if one fails, cancel the rest."""
    tasks = [asyncio.ensure_future(awaitable) for awaitable in awaitables]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
