"""
Wire payloads for the rock-paper-scissors-minus-one backend

Every response is wrapped in the same envelope:

    {"success": true, "data": {...}}

Field names follow the backend's camelCase. Hands travel as lowercase
strings and are parsed leniently with parse_hand().

Schema Version: 1.0.0
"""

import logging

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .enums import Choice, CurrencyMode

logger = logging.getLogger(__name__)


HAND_SYNONYMS: dict[str, Choice] = {
    "rock": Choice.ROCK,
    "r": Choice.ROCK,
    "stone": Choice.ROCK,
    "paper": Choice.PAPER,
    "p": Choice.PAPER,
    "scissors": Choice.SCISSORS,
    "scissor": Choice.SCISSORS,
    "s": Choice.SCISSORS,
}


def parse_hand(value: str | None) -> Choice:
    """
    Parse a hand sent by the server.

    Case-insensitive and whitespace-tolerant. Known synonyms are mapped,
    anything unparseable falls back to ROCK.
    """
    normalized = (value or "").strip().lower()
    if not normalized:
        logger.warning("Empty hand value from server, defaulting to rock")
        return Choice.ROCK

    choice = HAND_SYNONYMS.get(normalized)
    if choice is None:
        logger.warning(f"Could not parse hand {value!r}, defaulting to rock")
        return Choice.ROCK
    return choice


# =============================================================================
# REQUESTS
# =============================================================================


class BetRequest(BaseModel):
    """POST .../bet"""

    betAmount: int
    sessionId: str
    gameId: str


class HandRequest(BaseModel):
    """POST .../firstHand and .../secondHand"""

    playerHand: str
    sessionId: str
    gameId: int


class RemoveHandRequest(BaseModel):
    """POST .../remove-hand"""

    playerHands: list[str]
    playerHandToRemove: str
    sessionId: str
    gameId: int


# =============================================================================
# RESPONSES
# =============================================================================


class InitData(BaseModel):
    """
    Init response data.

    Example payload:
    {
        "sessionId": "3f1c0c8e-7a1f-4f57-9b8a-2d8f0f6a1c11",
        "betsValues": [1, 5, 10]
    }
    """

    sessionId: str = Field(..., min_length=1, description="Server session ID")
    betsValues: list[int] = Field(
        default_factory=list,
        validation_alias=AliasChoices("betsValues", "betTiers"),
        description="Accepted bet amounts",
    )
    mode: CurrencyMode | None = Field(None, description="Echoed currency mode")

    model_config = ConfigDict(extra="allow")

    @field_validator("betsValues")
    @classmethod
    def positive_tiers(cls, v: list[int]) -> list[int]:
        if any(tier <= 0 for tier in v):
            raise ValueError("bet tiers must be positive")
        return sorted(set(v))


class InitResponse(BaseModel):
    success: bool
    data: InitData | None = None

    model_config = ConfigDict(extra="allow")


class BetData(BaseModel):
    """Bet response data (echo of the accepted amount)"""

    amount: int | None = Field(
        None, validation_alias=AliasChoices("amount", "payoutAmount", "betAmount")
    )

    model_config = ConfigDict(extra="allow")


class BetResponse(BaseModel):
    success: bool
    data: BetData | None = None
    message: str | None = None

    model_config = ConfigDict(extra="allow")


class HandData(BaseModel):
    """
    First/second hand response data.

    Example payload:
    {
        "pcHand": "scissors"
    }
    """

    pcHand: str = Field(..., validation_alias=AliasChoices("pcHand", "opponentHand"))

    model_config = ConfigDict(extra="allow")

    @property
    def opponent_hand(self) -> Choice:
        return parse_hand(self.pcHand)


class HandResponse(BaseModel):
    success: bool
    data: HandData | None = None

    model_config = ConfigDict(extra="allow")


class RemoveHandData(BaseModel):
    """
    Remove-hand response data.

    Example payload:
    {
        "pcHandToRemove": "rock",
        "winAmount": 10
    }
    """

    pcHandToRemove: str = Field(
        ..., validation_alias=AliasChoices("pcHandToRemove", "opponentDiscardedHand")
    )
    winAmount: int = Field(
        ..., ge=0, validation_alias=AliasChoices("winAmount", "payoutAmount")
    )

    model_config = ConfigDict(extra="allow")

    @field_validator("winAmount", mode="before")
    @classmethod
    def coerce_whole_amount(cls, v):
        # Backend serializes payouts as floats ("10.0")
        if isinstance(v, float) and v.is_integer():
            return int(v)
        return v

    @property
    def opponent_discard(self) -> Choice:
        return parse_hand(self.pcHandToRemove)


class RemoveHandResponse(BaseModel):
    success: bool
    data: RemoveHandData | None = None

    model_config = ConfigDict(extra="allow")


class TokenData(BaseModel):
    ACCESS_TOKEN: str = Field(..., min_length=1)
    REFRESH_TOKEN: str | None = None


class TokenResponse(BaseModel):
    """POST auth/refresh_token response"""

    success: bool
    data: TokenData | None = None

    model_config = ConfigDict(extra="allow")
