"""
Enumerations for round phases, hands and outcomes
"""

from enum import Enum


class Choice(str, Enum):
    """A hand. Wire value is the lowercase name."""

    ROCK = "rock"
    PAPER = "paper"
    SCISSORS = "scissors"

    def beats(self, other: "Choice") -> bool:
        """True if this hand beats the other one."""
        return BEATS[self] is other


BEATS: dict[Choice, Choice] = {
    Choice.ROCK: Choice.SCISSORS,
    Choice.PAPER: Choice.ROCK,
    Choice.SCISSORS: Choice.PAPER,
}


class GameResult(str, Enum):
    """Round outcome from the player's point of view"""

    WIN = "win"
    LOSE = "lose"
    DRAW = "draw"


class CurrencyMode(str, Enum):
    """Wallet the wager is drawn from"""

    COINS = "coins"
    SWEEPS = "sweeps"


class GamePhase(str, Enum):
    """Round state machine phases

    AWAITING_WAGER is the initial phase. ROUND_COMPLETE is terminal for the
    round and only leaves through an explicit reset.
    """

    AWAITING_WAGER = "awaiting_wager"
    SELECTING_HANDS = "selecting_hands"
    AWAITING_FIRST_REVEAL = "awaiting_first_reveal"
    AWAITING_SECOND_REVEAL = "awaiting_second_reveal"
    SELECTING_HAND_TO_REMOVE = "selecting_hand_to_remove"
    AWAITING_OUTCOME = "awaiting_outcome"
    ROUND_COMPLETE = "round_complete"

    @classmethod
    def accepts_player_input(cls, phase: "GamePhase") -> bool:
        """Check if the player may act in this phase.

        Input phases:
        - AWAITING_WAGER: place a bet
        - SELECTING_HANDS: pick two distinct hands
        - SELECTING_HAND_TO_REMOVE: discard one of the picked hands
        """
        return phase in (cls.AWAITING_WAGER, cls.SELECTING_HANDS, cls.SELECTING_HAND_TO_REMOVE)


class Leg(str, Enum):
    """One request/response round trip of the protocol"""

    INIT = "init"
    BET = "bet"
    FIRST_HAND = "first_hand"
    SECOND_HAND = "second_hand"
    REMOVE_HAND = "remove_hand"


class Side(str, Enum):
    """Who a revealed or removed hand belongs to"""

    PLAYER = "player"
    BOT = "bot"
