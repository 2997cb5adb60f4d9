from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from app.scoring.rules import DARTS_PER_TURN


class GameMode(Enum):
    X01_501 = 501
    X01_301 = 301

    @property
    def starting_score(self) -> int:
        return self.value

    @property
    def label(self) -> str:
        return str(self.value)

    @classmethod
    def parse(cls, mode: GameMode | int | str) -> GameMode:
        if isinstance(mode, GameMode):
            return mode
        # int or str only; bool is an int subclass.
        if isinstance(mode, bool) or not isinstance(mode, (int, str)):
            raise ValueError("game mode must be 501 or 301")
        try:
            return cls(int(mode))
        except ValueError as e:
            raise ValueError("game mode must be 501 or 301") from e


@dataclass(frozen=True)
class Player:
    player_id: str
    name: str
    score: int
    scores: tuple[tuple[int, ...], ...] = field(default_factory=tuple)
    current_turn: tuple[int, ...] = field(default_factory=tuple)

    @property
    def current_turn_total(self) -> int:
        return sum(self.current_turn)

    @property
    def can_throw(self) -> bool:
        return len(self.current_turn) < DARTS_PER_TURN


@dataclass(frozen=True)
class Match:
    """
    Immutable snapshot of a match. Every engine command produces a new one.
    """

    players: tuple[Player, ...]
    game_mode: GameMode = GameMode.X01_501
    current_player_index: int = 0
    game_over: bool = False
    winner_id: str | None = None

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    @property
    def winner(self) -> Player | None:
        if self.winner_id is None:
            return None
        return self.find_player(self.winner_id)

    def find_player(self, player_id: str) -> Player | None:
        for p in self.players:
            if p.player_id == player_id:
                return p
        return None


def new_match(player_names: list[str] | tuple[str, ...], mode: GameMode) -> Match:
    names = [n.strip() for n in player_names if n and n.strip()]
    if not names:
        raise ValueError("at least one player name is required")
    return Match(
        players=tuple(
            Player(player_id=f"player-{i}", name=name, score=mode.starting_score)
            for i, name in enumerate(names)
        ),
        game_mode=mode,
    )
