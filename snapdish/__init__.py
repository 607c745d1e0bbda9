"""Client library for SnapDish group cooking sessions."""

from snapdish.client import APIClient
from snapdish.config import Settings
from snapdish.constants import Direction, SessionState
from snapdish.models import Lobby, Recipe, User, Vote
from snapdish.rules import SessionRules
from snapdish.session import LobbySession
from snapdish.tally import Tally, tally_votes

__all__ = [
    "APIClient",
    "Settings",
    "Direction",
    "SessionState",
    "Lobby",
    "Recipe",
    "User",
    "Vote",
    "SessionRules",
    "LobbySession",
    "Tally",
    "tally_votes",
]
