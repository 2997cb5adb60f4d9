"""
Persistence codec for a match.

A match is stored as two independently keyed JSON documents:

- the roster document (players + game mode), and
- the progress document (whose turn it is, game over, winner).

Decoding fails closed: a document that does not parse or does not match the
schema is removed from the store and treated as absent.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Annotated, Callable, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from app.log import get_logger
from app.scoring.darts import MAX_DART_VALUE, MIN_DART_VALUE
from app.scoring.kvstore import KeyValueStore
from app.scoring.models import GameMode, Match, Player
from app.scoring.rules import DARTS_PER_TURN

ROSTER_KEY = "dart-scoreboard-game-state"
PROGRESS_KEY = "dart-scoreboard-scoreboard-state"
SCHEMA_VERSION = 1

log = get_logger("scoring.codec")

DartValue = Annotated[int, Field(ge=MIN_DART_VALUE, le=MAX_DART_VALUE)]


class CodecError(ValueError):
    pass


class _Document(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class PlayerDocument(_Document):
    id: str = Field(..., min_length=1)
    name: str
    score: int = Field(..., ge=0)
    scores: list[tuple[DartValue, DartValue, DartValue]] = Field(default_factory=list)
    current_turn: list[DartValue] = Field(default_factory=list, max_length=DARTS_PER_TURN)

    @classmethod
    def from_player(cls, p: Player) -> PlayerDocument:
        return cls(
            id=p.player_id,
            name=p.name,
            score=p.score,
            scores=[tuple(turn) for turn in p.scores],
            current_turn=list(p.current_turn),
        )

    def to_player(self) -> Player:
        return Player(
            player_id=self.id,
            name=self.name,
            score=self.score,
            scores=tuple(tuple(turn) for turn in self.scores),
            current_turn=tuple(self.current_turn),
        )


class RosterDocument(_Document):
    """
    Only players and game_mode are authoritative. The progress fields are
    written as placeholders and ignored on load.
    """

    # Documents written before versioning carry no field; they are version 1.
    version: Literal[1] = SCHEMA_VERSION
    players: list[PlayerDocument] = Field(..., min_length=1)
    game_mode: Literal["501", "301"]
    current_player_index: int = 0
    game_over: bool = False
    winner_id: str | None = None

    @model_validator(mode="after")
    def _check_players(self) -> RosterDocument:
        starting = int(self.game_mode)
        ids = [p.id for p in self.players]
        if len(set(ids)) != len(ids):
            raise ValueError("player ids must be unique")
        for p in self.players:
            if p.score > starting:
                raise ValueError(f"player {p.id} score exceeds starting score {starting}")
        if sum(1 for p in self.players if p.score == 0) > 1:
            raise ValueError("at most one player may have a score of 0")
        return self


class ProgressDocument(_Document):
    version: Literal[1] = SCHEMA_VERSION
    current_player_index: int = 0
    game_over: bool = False
    winner_id: str | None = None


def encode_roster(match: Match) -> str:
    doc = RosterDocument(
        players=[PlayerDocument.from_player(p) for p in match.players],
        game_mode=match.game_mode.label,
        current_player_index=0,
        game_over=False,
        winner_id=None,
    )
    return doc.model_dump_json(by_alias=True)


def encode_progress(match: Match) -> str:
    doc = ProgressDocument(
        current_player_index=match.current_player_index,
        game_over=match.game_over,
        winner_id=match.winner_id,
    )
    return doc.model_dump_json(by_alias=True)


def decode_roster(raw: str | bytes) -> RosterDocument:
    try:
        return RosterDocument.model_validate_json(raw)
    except ValidationError as e:
        raise CodecError(f"invalid roster document: {e}") from e


def decode_progress(raw: str | bytes) -> ProgressDocument:
    try:
        return ProgressDocument.model_validate_json(raw)
    except ValidationError as e:
        raise CodecError(f"invalid progress document: {e}") from e


_D = TypeVar("_D", bound=_Document)


def _read(store: KeyValueStore, key: str, decode: Callable[[str], _D]) -> _D | None:
    try:
        raw = store.get(key)
        if raw is None:
            return None
        return decode(raw)
    except (CodecError, UnicodeDecodeError) as e:
        log.warning(f"Discarding saved document {key!r}: {e}")
        store.remove(key)
        return None


def _clamp_index(index: int, player_count: int) -> int:
    if player_count > 0 and 0 <= index < player_count:
        return index
    return 0


def _resolve_progress(
    store: KeyValueStore, players: tuple[Player, ...], progress: ProgressDocument | None
) -> tuple[int, str | None]:
    """
    Return (current_player_index, winner_id) for the loaded roster.
    """
    if progress is None:
        progress = ProgressDocument()

    index = _clamp_index(progress.current_player_index, len(players))

    if progress.game_over or progress.winner_id is not None:
        winner = next((p for p in players if p.player_id == progress.winner_id), None)
        if not progress.game_over or winner is None or winner.score != 0:
            log.warning(
                f"Discarding saved document {PROGRESS_KEY!r}: "
                f"winner {progress.winner_id!r} does not match the roster"
            )
            store.remove(PROGRESS_KEY)
            return _resolve_progress(store, players, None)
        return index, winner.player_id

    # Roster written with a finished player, progress write lost.
    finished = next((p for p in players if p.score == 0), None)
    if finished is not None:
        log.info(f"Recovering winner {finished.player_id!r} from roster")
        return index, finished.player_id

    return index, None


def load_match(store: KeyValueStore) -> Match | None:
    """
    Rebuild a match from the store, or return None when no game is saved.
    """
    roster = _read(store, ROSTER_KEY, decode_roster)
    progress = _read(store, PROGRESS_KEY, decode_progress)

    if roster is None:
        if progress is not None:
            log.info("Removing progress document without a roster")
            store.remove(PROGRESS_KEY)
        return None

    players = tuple(p.to_player() for p in roster.players)
    index, winner_id = _resolve_progress(store, players, progress)
    game_over = winner_id is not None

    # Only the active player of a running game may hold uncommitted darts.
    players = tuple(
        p if (i == index and not game_over) or not p.current_turn else replace(p, current_turn=())
        for i, p in enumerate(players)
    )

    return Match(
        players=players,
        game_mode=GameMode.parse(roster.game_mode),
        current_player_index=index,
        game_over=game_over,
        winner_id=winner_id,
    )


def _roster_changed(previous: Match | None, match: Match) -> bool:
    return previous is None or previous.players != match.players or previous.game_mode != match.game_mode


def _progress_changed(previous: Match | None, match: Match) -> bool:
    return (
        previous is None
        or previous.current_player_index != match.current_player_index
        or previous.game_over != match.game_over
        or previous.winner_id != match.winner_id
    )


def save_match(store: KeyValueStore, match: Match | None, *, previous: Match | None = None) -> None:
    """
    Write the documents that changed since `previous`. A None match clears the store.
    """
    if match is None:
        clear_match(store)
        return
    if _roster_changed(previous, match):
        store.set(ROSTER_KEY, encode_roster(match))
    if _progress_changed(previous, match):
        store.set(PROGRESS_KEY, encode_progress(match))


def clear_match(store: KeyValueStore) -> None:
    store.remove(ROSTER_KEY)
    store.remove(PROGRESS_KEY)
