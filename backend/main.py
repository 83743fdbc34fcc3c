from fastapi import FastAPI, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import List, Optional, Dict
from config import (
    GameConfig,
    PlayerConfig,
    DIFFICULTY_DEPTHS,
    DEFAULT_TIME_BUDGET_SECONDS,
)
from errors import ConfigurationError
from game_logic import (
    GameRules,
    VARIATIONS,
    DEFAULT_VARIATION,
    DEFAULT_WIN_LENGTH,
    DEFAULT_DELETE_COOLDOWN,
    DEFAULT_MOVE_COOLDOWN,
    board_rows,
    new_move_counters,
)
from models.minimax_agent import MinimaxAgent
from models.session import GameSession
import logging
import os
import random
import time

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI()

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class MoveCountersModel(BaseModel):
    moves_since_delete: int = Field(..., ge=0)
    moves_since_move: int = Field(..., ge=0)


class BestMoveRequest(BaseModel):
    board: List[Optional[str]]
    mover_symbol: str
    opponent_symbols: List[str] = Field(..., min_length=1)
    move_counters: Dict[str, MoveCountersModel] = Field(default_factory=dict)
    max_depth: int = Field(4, ge=1, le=9, description="Maximum search depth in plies (1-9)")
    board_size: int = Field(..., ge=1)
    win_length: int = Field(DEFAULT_WIN_LENGTH, ge=1)
    delete_cooldown: int = Field(DEFAULT_DELETE_COOLDOWN, ge=0)
    move_cooldown: int = Field(DEFAULT_MOVE_COOLDOWN, ge=0)
    variation: str = DEFAULT_VARIATION
    max_time_seconds: Optional[float] = Field(DEFAULT_TIME_BUDGET_SECONDS, gt=0, le=300)


class PlayerModel(BaseModel):
    name: Optional[str] = None
    control: str = "human"
    difficulty: Optional[str] = None


class SessionRequest(BaseModel):
    num_players: int = Field(2, ge=2, le=5, description="Number of players (2-5)")
    board_size: Optional[int] = Field(None, ge=1)
    win_length: int = Field(DEFAULT_WIN_LENGTH, ge=1)
    delete_cooldown: int = Field(DEFAULT_DELETE_COOLDOWN, ge=0)
    move_cooldown: int = Field(DEFAULT_MOVE_COOLDOWN, ge=0)
    variation: str = DEFAULT_VARIATION
    time_budget_seconds: Optional[float] = Field(DEFAULT_TIME_BUDGET_SECONDS, gt=0, le=300)
    players: Optional[List[PlayerModel]] = None


class MoveRequest(BaseModel):
    symbol: str
    action: str
    index: int
    from_index: Optional[int] = None


# Default search settings
default_settings = {
    "minimax": {
        "max_depth": 4,
        "max_time_seconds": DEFAULT_TIME_BUDGET_SECONDS,
    },
    "difficulty_depths": DIFFICULTY_DEPTHS,
    "variations": list(VARIATIONS),
}

# In-memory sessions for the lifetime of the process
sessions: Dict[str, GameSession] = {}

SESSION_CODE_CHARACTERS = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'


def generate_session_code() -> str:
    """Generate an unused 6-character session code."""
    while True:
        code = ''.join(random.choice(SESSION_CODE_CHARACTERS) for _ in range(6))
        if code not in sessions:
            return code


def get_session(code: str) -> GameSession:
    session = sessions.get(code.upper())
    if session is None:
        raise HTTPException(status_code=404, detail=f"Session not found: {code}")
    return session


def _finite(score: float) -> Optional[float]:
    return None if score in (float('inf'), float('-inf')) else score


@app.get("/agent-settings")
async def get_agent_settings():
    """Get default search settings and the difficulty table"""
    return default_settings


@app.post("/get-best-move")
async def get_best_move(request: BestMoveRequest):
    start_time = time.time()

    if request.variation not in VARIATIONS:
        raise HTTPException(status_code=400, detail=f"Unknown variation: {request.variation}")
    if request.win_length > request.board_size:
        raise HTTPException(status_code=400, detail="Win length must not exceed board size")
    if len(request.board) != request.board_size * request.board_size:
        raise HTTPException(status_code=400, detail="Board length does not match board size")
    if request.mover_symbol in request.opponent_symbols:
        raise HTTPException(status_code=400, detail="Mover cannot be its own opponent")
    known_cells = {None, request.mover_symbol, *request.opponent_symbols}
    unknown_cells = sorted({repr(cell) for cell in request.board if cell not in known_cells})
    if unknown_cells:
        raise HTTPException(status_code=400, detail=f"Board holds unknown cell values: {', '.join(unknown_cells)}")

    # Log board state in a compact format
    logger.info("BOARD STATE:")
    for row in board_rows(request.board, request.board_size):
        logger.info(row)
    logger.info(f"Mover: {request.mover_symbol} | Opponents: {request.opponent_symbols} | Depth: {request.max_depth}")

    rules = GameRules(
        board_size=request.board_size,
        win_length=request.win_length,
        delete_cooldown=request.delete_cooldown,
        move_cooldown=request.move_cooldown,
        variation=request.variation,
    )
    # Players without counters start fresh
    move_counters = new_move_counters(
        [request.mover_symbol] + request.opponent_symbols, request.delete_cooldown, request.move_cooldown
    )
    for symbol, counters in request.move_counters.items():
        move_counters[symbol] = counters.model_dump()

    agent = MinimaxAgent(max_depth=request.max_depth, max_time=request.max_time_seconds)
    try:
        result = await run_in_threadpool(
            agent.search, request.board, request.mover_symbol, request.opponent_symbols, move_counters, rules
        )
    except Exception as e:
        logger.error(f"Error in agent.search(): {str(e)}")
        logger.exception("Detailed agent error traceback:")
        raise HTTPException(status_code=500, detail=f"Agent error: {str(e)}")

    elapsed = time.time() - start_time
    logger.info(f"Agent calculation completed in {result.elapsed:.2f}s (total request: {elapsed:.2f}s)")
    if result.best_move is None:
        logger.warning("Agent returned no move")

    return {
        "best_move": result.best_move,
        "best_score": _finite(result.best_score),
        "completed_depth": result.completed_depth,
        "timed_out": result.timed_out,
    }


@app.post("/sessions")
async def create_session(request: SessionRequest):
    players = [PlayerConfig(**p.model_dump()) for p in request.players] if request.players else []
    config = GameConfig(
        num_players=request.num_players,
        board_size=request.board_size,
        win_length=request.win_length,
        delete_cooldown=request.delete_cooldown,
        move_cooldown=request.move_cooldown,
        variation=request.variation,
        time_budget_seconds=request.time_budget_seconds,
        players=players,
    )
    code = generate_session_code()
    try:
        session = GameSession(config, session_id=code)
    except ConfigurationError as e:
        logger.warning(f"Rejected session configuration: {e}")
        raise HTTPException(status_code=400, detail=e.to_dict())

    sessions[code] = session
    logger.info(f"Session {code} created with {request.num_players} players")
    return session.to_dict()


@app.get("/sessions/{code}")
async def get_session_state(code: str):
    return get_session(code).to_dict()


@app.post("/sessions/{code}/moves")
async def make_move(code: str, request: MoveRequest):
    session = get_session(code)
    move = {"action": request.action, "index": request.index}
    if request.from_index is not None:
        move["from_index"] = request.from_index

    response = session.make_move(request.symbol, move)
    if not response["success"]:
        logger.info(f"Session {code}: move error for {request.symbol}: {response['error']}")
    response["state"] = session.to_dict()
    return response


@app.post("/sessions/{code}/computer-move")
async def computer_move(code: str):
    session = get_session(code)
    try:
        response = await run_in_threadpool(session.play_computer_turn)
    except Exception as e:
        logger.error(f"Error in computer turn: {str(e)}")
        logger.exception("Detailed error traceback:")
        raise HTTPException(status_code=500, detail=str(e))

    if "search" in response:
        response["search"]["best_score"] = _finite(response["search"]["best_score"])
    response["state"] = session.to_dict()
    return response


@app.post("/sessions/{code}/reset")
async def reset_session(code: str):
    return get_session(code).reset()


@app.delete("/sessions/{code}")
async def delete_session(code: str):
    session = get_session(code)
    del sessions[session.session_id]
    logger.info(f"Session {session.session_id} deleted")
    return {"deleted": session.session_id}


@app.get("/")
async def root():
    logger.info("Root endpoint accessed")
    return {"message": "Welcome to the Tic Tac Toe Online AI Backend"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
