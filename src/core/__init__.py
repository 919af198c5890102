"""Core module - round state machine and game rules"""

from . import validators
from .bet_selector import BetTierSelector
from .errors import (
    AuthError,
    GameError,
    LegInFlightError,
    NetworkError,
    StaleResponseError,
    ValidationError,
)
from .game_state_machine import GameStateMachine
from .legs import LegTracker
from .outcome import draw_bot_discard, draw_bot_hands, resolve, resolve_from_payout
from .validators import can_select, require_move, validate_bet_amount
from .wager_gate import WagerFailure, WagerGate, WagerOutcome

__all__ = [
    "AuthError",
    "BetTierSelector",
    "GameError",
    "GameStateMachine",
    "LegInFlightError",
    "LegTracker",
    "NetworkError",
    "StaleResponseError",
    "ValidationError",
    "WagerFailure",
    "WagerGate",
    "WagerOutcome",
    "can_select",
    "draw_bot_discard",
    "draw_bot_hands",
    "require_move",
    "resolve",
    "resolve_from_payout",
    "validate_bet_amount",
    "validators",
]
