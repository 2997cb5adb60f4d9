from __future__ import annotations

from dataclasses import replace
from typing import Callable, Iterable

from app.log import get_logger
from app.scoring.codec import clear_match, load_match, save_match
from app.scoring.darts import Dart, is_valid_dart_value, parse_dart_input
from app.scoring.kvstore import InMemoryKeyValueStore, KeyValueStore
from app.scoring.models import GameMode, Match, Player, new_match
from app.scoring.rules import TurnOutcome, TurnResult, close_turn, evaluate_turn

MatchListener = Callable[[Match | None], None]

log = get_logger("scoring.game")


def _replace_player(players: tuple[Player, ...], index: int, updated: Player) -> tuple[Player, ...]:
    return (*players[:index], updated, *players[index + 1 :])


def apply_outcome(match: Match, outcome: TurnOutcome, turn: tuple[int, ...]) -> Match:
    """
    Build the snapshot that follows `outcome` for the active player.

    `turn` is the active player's current turn including the dart just thrown;
    it is kept as-is while the turn stays open.
    """
    index = match.current_player_index
    active = match.players[index]

    if not outcome.commits:
        return replace(match, players=_replace_player(match.players, index, replace(active, current_turn=turn)))

    updated = replace(
        active,
        score=outcome.remaining,
        scores=(*active.scores, outcome.record),
        current_turn=(),
    )
    players = _replace_player(match.players, index, updated)

    if outcome.result is TurnResult.CHECKOUT:
        return replace(match, players=players, game_over=True, winner_id=active.player_id)

    return replace(match, players=players, current_player_index=(index + 1) % len(players))


class DartScoreboard:
    """
    Count-down (501 / 301) scoreboard for any number of players.

    This module intentionally contains no web/framework imports.

    Key rules implemented:
    - A turn is up to 3 darts. Darts are entered one at a time.
    - Bust: the turn overshoots, or reaches exactly 0 before the third dart.
      The turn is recorded as (0, 0, 0), the score is unchanged and play passes on.
    - Checkout: reaching exactly 0 on the third dart wins if that dart is even
      (or a double bull); otherwise it is a bust.
    - A 180 dart (or running total) before the third dart ends the turn early.
    - Undo removes the last dart of the open turn only.

    Every command builds a complete new Match, publishes it, persists it and then
    notifies listeners. Commands that do not apply (game over, invalid input,
    nothing to undo) are no-ops and return the current state.
    """

    def __init__(self, *, store: KeyValueStore | None = None) -> None:
        self._store: KeyValueStore = store if store is not None else InMemoryKeyValueStore()
        self._state: Match | None = None
        self._listeners: list[MatchListener] = []

    def state(self) -> Match | None:
        return self._state

    def subscribe(self, listener: MatchListener) -> Callable[[], None]:
        """
        Register a "match changed" callback. Returns a function that unsubscribes it.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, match: Match | None) -> Match | None:
        previous = self._state
        if match == previous:
            return previous
        self._state = match
        save_match(self._store, match, previous=previous)
        for listener in list(self._listeners):
            listener(match)
        return match

    def load(self) -> Match | None:
        """
        Restore the saved match, if any. Listeners are not notified.
        """
        self._state = load_match(self._store)
        if self._state is not None:
            log.info(
                f"Loaded {self._state.game_mode.label} match with {len(self._state.players)} player(s)"
            )
        return self._state

    def start_match(self, player_names: Iterable[str], mode: GameMode | int | str = GameMode.X01_501) -> Match:
        """
        Start a fresh match, discarding any previous one. Blank names are dropped.
        """
        match = new_match(tuple(player_names), GameMode.parse(mode))
        if self._state is not None:
            clear_match(self._store)
            self._state = None
        log.info(f"Starting {match.game_mode.label} match for {', '.join(p.name for p in match.players)}")
        self._publish(match)
        return match

    def reset_match(self) -> None:
        """
        Discard the match and its saved state. Confirmation is the caller's job.
        """
        if self._state is not None:
            log.info("Match reset")
        self._publish(None)

    def _active(self) -> Match | None:
        match = self._state
        if match is None or match.game_over or not match.players:
            return None
        return match

    def append_dart(self, value: int) -> Match | None:
        match = self._active()
        if match is None or not is_valid_dart_value(value):
            return self._state

        player = match.current_player
        if not player.can_throw:
            return match

        turn = (*player.current_turn, value)
        outcome = evaluate_turn(player.score, turn)
        self._log_outcome(player, outcome)
        return self._publish(apply_outcome(match, outcome, turn))

    def add_quick_dart(self, dart: Dart) -> Match | None:
        return self.append_dart(dart.score)

    def submit_dart_text(self, text: str | None) -> Match | None:
        """
        Free-text entry. Text that is not a number in 0-180 is ignored.
        """
        value = parse_dart_input(text)
        if value is None:
            return self._state
        return self.append_dart(value)

    def undo_last_dart(self) -> Match | None:
        match = self._active()
        if match is None:
            return self._state

        player = match.current_player
        if not player.current_turn:
            return match

        updated = replace(player, current_turn=player.current_turn[:-1])
        return self._publish(
            replace(match, players=_replace_player(match.players, match.current_player_index, updated))
        )

    def end_turn(self) -> Match | None:
        match = self._active()
        if match is None:
            return self._state

        player = match.current_player
        if not player.current_turn:
            return match

        outcome = close_turn(player.score, player.current_turn)
        self._log_outcome(player, outcome)
        return self._publish(apply_outcome(match, outcome, player.current_turn))

    def _log_outcome(self, player: Player, outcome: TurnOutcome) -> None:
        if outcome.result is TurnResult.BUST:
            log.info(f"{player.name} busts on {player.score}")
        elif outcome.result is TurnResult.CHECKOUT:
            log.info(f"{player.name} checks out and wins")
        elif outcome.commits:
            log.debug(f"{player.name} scores {player.score - outcome.remaining}, {outcome.remaining} left")
