from __future__ import annotations

from threading import RLock

from app.config import Config
from app.scoring.game import DartScoreboard
from app.scoring.kvstore import InMemoryKeyValueStore, JsonFileKeyValueStore, KeyValueStore


def _default_kv_store() -> KeyValueStore:
    if Config.STATE_DIR:
        return JsonFileKeyValueStore(Config.STATE_DIR)
    return InMemoryKeyValueStore()


class InMemoryGameStore:
    """
    Holds the single scoreboard instance served by the API.

    Request handlers may run on a thread pool; `lock` serializes commands so each
    one is applied as a whole before the next is accepted.
    """

    def __init__(self, kv_store: KeyValueStore | None = None) -> None:
        self.lock = RLock()
        self._game = DartScoreboard(store=kv_store if kv_store is not None else _default_kv_store())
        self._game.load()

    def game(self) -> DartScoreboard:
        return self._game

    def clear(self) -> None:
        with self.lock:
            self._game.reset_match()


_STORE: InMemoryGameStore | None = None


def get_store() -> InMemoryGameStore:
    global _STORE
    if _STORE is None:
        _STORE = InMemoryGameStore()
    return _STORE
