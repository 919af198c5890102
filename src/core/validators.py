"""
Input validation functions

Predicates used to gate player input. can_select and validate_bet_amount
never raise; require_move raises ValidationError for the state machine.
None of them mutate their arguments.
"""

from collections.abc import Collection, Sequence

from models import Choice, GamePhase

from .errors import ValidationError

REQUIRED_CHOICES = 2


def can_select(phase: GamePhase, choice: Choice, player_set: Collection[Choice]) -> bool:
    """
    Check whether a hand may be picked or discarded in the given phase

    Args:
        phase: Current round phase
        choice: Hand the player wants to act on
        player_set: Hands the player has already picked

    Returns:
        True if the move is legal
        - SELECTING_HANDS: hand not yet picked and fewer than two picked
        - SELECTING_HAND_TO_REMOVE: hand is one of the picked hands
        - any other phase: False
    """
    if phase is GamePhase.SELECTING_HANDS:
        return choice not in player_set and len(player_set) < REQUIRED_CHOICES
    if phase is GamePhase.SELECTING_HAND_TO_REMOVE:
        return choice in player_set
    return False


def require_move(
    phase: GamePhase, expected: GamePhase, choice: Choice, player_set: Collection[Choice]
):
    """
    Raise ValidationError unless the move is legal

    expected is the phase the move belongs to (SELECTING_HANDS for a pick,
    SELECTING_HAND_TO_REMOVE for a discard).
    """
    if phase is not expected:
        raise ValidationError(f"{choice.value} not accepted in {phase.value}")
    if not can_select(phase, choice, player_set):
        picked = ", ".join(c.value for c in player_set) or "none"
        raise ValidationError(f"{choice.value} not allowed with picks ({picked})")


def validate_bet_amount(amount, tiers: Sequence[int] = ()) -> tuple[bool, str | None]:
    """
    Validate a wager amount against the tiers the session advertised

    Args:
        amount: Requested wager
        tiers: Accepted amounts (empty means any positive amount)

    Returns:
        Tuple of (is_valid, error_message)
        - (True, None) if valid
        - (False, "error message") if invalid
    """
    # bool is an int subclass
    if isinstance(amount, bool) or not isinstance(amount, int):
        return False, f"Bet amount {amount!r} must be a whole number"

    if amount <= 0:
        return False, f"Bet amount {amount} must be positive"

    if tiers and amount not in tiers:
        allowed = ", ".join(str(t) for t in tiers)
        return False, f"Bet amount {amount} is not one of the offered tiers ({allowed})"

    return True, None
