"""
Data models for the Rock-Paper-Scissors-Minus-One client
"""

from .enums import BEATS, Choice, CurrencyMode, GamePhase, GameResult, Leg, Side
from .payloads import (
    BetRequest,
    BetResponse,
    HandRequest,
    HandResponse,
    InitResponse,
    RemoveHandRequest,
    RemoveHandResponse,
    TokenResponse,
    parse_hand,
)
from .session import PendingRequest, RoundSummary, Session

__all__ = [
    "BEATS",
    "Choice",
    "CurrencyMode",
    "GamePhase",
    "GameResult",
    "Leg",
    "Side",
    # Session models
    "PendingRequest",
    "RoundSummary",
    "Session",
    # Wire payloads
    "BetRequest",
    "BetResponse",
    "HandRequest",
    "HandResponse",
    "InitResponse",
    "RemoveHandRequest",
    "RemoveHandResponse",
    "TokenResponse",
    "parse_hand",
]
