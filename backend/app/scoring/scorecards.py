from __future__ import annotations

from dataclasses import dataclass

from app.scoring.models import Match, Player


@dataclass(frozen=True)
class TurnLine:
    darts: tuple[int, ...]
    total: int


@dataclass(frozen=True)
class ScoreCard:
    """
    Everything a printed score card shows for one player: all committed turns
    in order, each with its total, and where the player finished.
    """

    player_id: str
    name: str
    remaining: int
    turns: tuple[TurnLine, ...]
    is_winner: bool


def _card(p: Player, *, winner_id: str | None) -> ScoreCard:
    return ScoreCard(
        player_id=p.player_id,
        name=p.name,
        remaining=p.score,
        turns=tuple(TurnLine(darts=turn, total=sum(turn)) for turn in p.scores),
        is_winner=p.player_id == winner_id,
    )


def build_score_cards(match: Match) -> tuple[ScoreCard, ...]:
    """
    Score cards for a finished match, in turn order.
    """
    if not match.game_over:
        raise RuntimeError("score cards are available once the match is over")
    return tuple(_card(p, winner_id=match.winner_id) for p in match.players)
