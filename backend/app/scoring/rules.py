from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

DARTS_PER_TURN = 3
MAX_TURN_SCORE = 180
DOUBLE_BULL = 50

BUST_RECORD: tuple[int, int, int] = (0, 0, 0)


class TurnResult(str, Enum):
    OPEN = "open"
    BUST = "bust"
    MAX_SCORE = "max_score"
    COMPLETED = "completed"
    CHECKOUT = "checkout"


@dataclass(frozen=True)
class TurnOutcome:
    """
    Result of evaluating a (possibly partial) turn against a remaining score.

    - record: the zero-padded Turn Record to commit, or None while the turn is open
    - remaining: the player's remaining score after the outcome is applied
    """

    result: TurnResult
    record: tuple[int, ...] | None
    remaining: int

    @property
    def commits(self) -> bool:
        return self.record is not None

    @property
    def rotates(self) -> bool:
        return self.commits and self.result is not TurnResult.CHECKOUT


def pad_turn(turn: Sequence[int]) -> tuple[int, ...]:
    if len(turn) > DARTS_PER_TURN:
        raise ValueError("a turn may include at most 3 darts")
    return (*turn, *([0] * (DARTS_PER_TURN - len(turn))))


def is_valid_finishing_dart(value: int) -> bool:
    # Approximates "last dart on a double": any even value (or double bull) counts.
    return value % 2 == 0 or value == DOUBLE_BULL


def _bust(remaining: int) -> TurnOutcome:
    return TurnOutcome(TurnResult.BUST, BUST_RECORD, remaining)


def _checkout(remaining: int, turn: Sequence[int]) -> TurnOutcome:
    if is_valid_finishing_dart(turn[-1]):
        return TurnOutcome(TurnResult.CHECKOUT, pad_turn(turn), 0)
    return _bust(remaining)


def evaluate_turn(remaining: int, turn: Sequence[int]) -> TurnOutcome:
    """
    Evaluate the active turn right after a dart was appended.

    Rules, in order:
    - Bust: the turn overshoots, or reaches exactly zero before the third dart.
      A bust commits (0, 0, 0) and leaves the remaining score unchanged.
    - Max score: a single dart (or the running total) equals 180 before the third
      dart; the turn ends early and is zero padded.
    - Three darts reaching zero: a checkout if the last dart is even or 50,
      otherwise a bust.
    - Three darts leaving points: the turn completes normally.
    - Anything else keeps the turn open.
    """
    if not turn:
        raise ValueError("turn must include at least one dart")
    if len(turn) > DARTS_PER_TURN:
        raise ValueError("a turn may include at most 3 darts")

    total = sum(turn)
    candidate = remaining - total

    if candidate < 0 or (candidate == 0 and len(turn) < DARTS_PER_TURN):
        return _bust(remaining)

    if len(turn) < DARTS_PER_TURN and (turn[-1] == MAX_TURN_SCORE or total == MAX_TURN_SCORE):
        return TurnOutcome(TurnResult.MAX_SCORE, pad_turn(turn), candidate)

    if len(turn) == DARTS_PER_TURN:
        if candidate == 0:
            return _checkout(remaining, turn)
        return TurnOutcome(TurnResult.COMPLETED, tuple(turn), candidate)

    return TurnOutcome(TurnResult.OPEN, None, remaining)


def close_turn(remaining: int, turn: Sequence[int]) -> TurnOutcome:
    """
    Evaluate a partial turn the player has chosen to end early.

    Unlike evaluate_turn, reaching zero with fewer than three darts is a checkout
    attempt (same parity rule) rather than an automatic bust.
    """
    if not turn:
        raise ValueError("cannot end an empty turn")
    if len(turn) > DARTS_PER_TURN:
        raise ValueError("a turn may include at most 3 darts")

    candidate = remaining - sum(turn)
    if candidate < 0:
        return _bust(remaining)
    if candidate == 0:
        return _checkout(remaining, turn)
    return TurnOutcome(TurnResult.COMPLETED, pad_turn(turn), candidate)
