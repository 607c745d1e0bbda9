"""Shared enums and constants for lobby sessions."""

from enum import Enum

MIN_INGREDIENTS = 4
RECIPE_BATCH_SIZE = 8
JOIN_CODE_LENGTH = 6


class Direction(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class SessionState(str, Enum):
    NO_SESSION = "no_session"
    LOBBY_ACTIVE = "lobby_active"
    RECIPES_GENERATED = "recipes_generated"
    VOTING = "voting"
    VOTING_COMPLETE = "voting_complete"
    RESULTS_VIEWED = "results_viewed"
