from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, Field

from app.config import Config
from app.scoring.darts import MAX_DART_VALUE, Dart
from app.scoring.game import DartScoreboard
from app.scoring.models import Match, Player
from app.scoring.scorecards import ScoreCard, build_score_cards
from app.scoring.store import get_store

app = FastAPI(title="Dart Scoreboard")


@app.get("/", include_in_schema=False)
def root(request: Request):
    # If a browser hits the root, take them to Swagger UI.
    # Keep the JSON response for API clients (e.g. curl, fetch).
    accept = (request.headers.get("accept") or "").lower()
    if "text/html" in accept:
        return RedirectResponse(url="/docs")
    return {
        "name": "Dart Scoreboard",
        "docs": "/docs",
        "health": "/health",
        "endpoints": [
            "GET /game",
            "POST /game/start",
            "POST /game/dart",
            "POST /game/dart/text",
            "POST /game/undo",
            "POST /game/end-turn",
            "POST /game/reset",
            "GET /game/scorecards",
        ],
    }


@app.get("/health")
def health():
    return {"status": "ok"}


class DartDTO(BaseModel):
    value: int = Field(..., ge=0, le=25, description="0=miss, 1-20, 25=bull")
    multiplier: int = Field(
        ..., ge=0, le=3, description="0=miss, 1=single, 2=double, 3=triple"
    )


class DartTextRequest(BaseModel):
    text: str = Field(..., description=f"Free-text dart score (0-{MAX_DART_VALUE})")


class StartRequest(BaseModel):
    player_names: list[str] = Field(..., description="Blank names are ignored")
    game_mode: int | str = Field(default_factory=lambda: Config.DEFAULT_GAME_MODE, description="501 | 301")


class PlayerDTO(BaseModel):
    id: str
    name: str
    score: int
    scores: list[list[int]]
    current_turn: list[int]
    current_turn_total: int


class MatchDTO(BaseModel):
    players: list[PlayerDTO]
    game_mode: str
    current_player_index: int
    current_player_id: str
    game_over: bool
    winner_id: str | None


class GameStateDTO(BaseModel):
    started: bool
    match: MatchDTO | None


class DartTextResponseDTO(GameStateDTO):
    accepted: bool


class TurnLineDTO(BaseModel):
    darts: list[int]
    total: int


class ScoreCardDTO(BaseModel):
    player_id: str
    name: str
    remaining: int
    turns: list[TurnLineDTO]
    is_winner: bool


class ScoreCardsDTO(BaseModel):
    game_mode: str
    winner_id: str
    cards: list[ScoreCardDTO]


def _player_to_dto(p: Player) -> PlayerDTO:
    return PlayerDTO(
        id=p.player_id,
        name=p.name,
        score=p.score,
        scores=[list(turn) for turn in p.scores],
        current_turn=list(p.current_turn),
        current_turn_total=p.current_turn_total,
    )


def _match_to_dto(m: Match) -> MatchDTO:
    return MatchDTO(
        players=[_player_to_dto(p) for p in m.players],
        game_mode=m.game_mode.label,
        current_player_index=m.current_player_index,
        current_player_id=m.current_player.player_id,
        game_over=m.game_over,
        winner_id=m.winner_id,
    )


def _state_to_dto(m: Match | None) -> GameStateDTO:
    return GameStateDTO(started=m is not None, match=_match_to_dto(m) if m is not None else None)


def _card_to_dto(c: ScoreCard) -> ScoreCardDTO:
    return ScoreCardDTO(
        player_id=c.player_id,
        name=c.name,
        remaining=c.remaining,
        turns=[TurnLineDTO(darts=list(t.darts), total=t.total) for t in c.turns],
        is_winner=c.is_winner,
    )


def _game() -> DartScoreboard:
    return get_store().game()


@app.get("/game", response_model=GameStateDTO)
def get_game_state() -> GameStateDTO:
    return _state_to_dto(_game().state())


@app.post("/game/start", response_model=GameStateDTO)
def start_game(req: StartRequest) -> GameStateDTO:
    with get_store().lock:
        try:
            state = _game().start_match(req.player_names, req.game_mode)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e
    return _state_to_dto(state)


@app.post("/game/dart", response_model=GameStateDTO)
def add_dart(req: DartDTO) -> GameStateDTO:
    try:
        dart = Dart(value=req.value, multiplier=req.multiplier)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    with get_store().lock:
        state = _game().add_quick_dart(dart)
    return _state_to_dto(state)


@app.post("/game/dart/text", response_model=DartTextResponseDTO)
def add_dart_text(req: DartTextRequest) -> DartTextResponseDTO:
    with get_store().lock:
        before = _game().state()
        state = _game().submit_dart_text(req.text)
    base = _state_to_dto(state)
    return DartTextResponseDTO(started=base.started, match=base.match, accepted=state is not before)


@app.post("/game/undo", response_model=GameStateDTO)
def undo_last_dart() -> GameStateDTO:
    with get_store().lock:
        state = _game().undo_last_dart()
    return _state_to_dto(state)


@app.post("/game/end-turn", response_model=GameStateDTO)
def end_turn() -> GameStateDTO:
    with get_store().lock:
        state = _game().end_turn()
    return _state_to_dto(state)


@app.post("/game/reset", response_model=GameStateDTO)
def reset_game() -> GameStateDTO:
    # The UI asks for confirmation before calling this while a match is running.
    with get_store().lock:
        _game().reset_match()
    return _state_to_dto(None)


# Data for the "print score cards" view once a match is over.
@app.get("/game/scorecards", response_model=ScoreCardsDTO)
def score_cards() -> ScoreCardsDTO:
    state = _game().state()
    if state is None:
        raise HTTPException(status_code=404, detail="no match in progress")
    try:
        cards = build_score_cards(state)
    except RuntimeError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return ScoreCardsDTO(
        game_mode=state.game_mode.label,
        winner_id=state.winner_id or "",
        cards=[_card_to_dto(c) for c in cards],
    )
