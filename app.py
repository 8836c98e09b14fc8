from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

from flask import Flask, jsonify, request

from dragon_core.board import COLUMN_COUNT, FREE_COUNT, GOAL_COUNT, Board, CellIndex, new_board
from dragon_core.cards import Card, Suit
from dragon_core.config import configure_logging, load_api_solve_timeout, load_settings
from dragon_core.deal import Seed, deal
from dragon_core.errors import AmbiguousMove, InvalidMove
from dragon_core.hashkey import board_key
from dragon_core.moves import next_states
from dragon_core.solver import solve

logger = logging.getLogger(__name__)

# Searches started over HTTP always get a time budget.
API_SOLVE_TIMEOUT = load_api_solve_timeout()

app = Flask(__name__)


class BadPayload(ValueError):
    pass


def _code(card: Optional[Card]) -> Optional[str]:
    return None if card is None else card.code


def board_to_json(b: Board) -> Dict[str, Any]:
    return {
        "joker": bool(b.joker.has_joker),
        "free": [_code(cell.card) for cell in b.free],
        "goals": [_code(goal.top_card) for goal in b.goals],
        "columns": [[card.code for card in column.stack] for column in b.columns],
    }


def board_from_json(obj: Any) -> Board:
    if not isinstance(obj, dict):
        raise BadPayload("board required")
    free = obj.get("free", [None] * FREE_COUNT)
    goals = obj.get("goals", [None] * GOAL_COUNT)
    columns = obj.get("columns", [[] for _ in range(COLUMN_COUNT)])
    if not isinstance(free, list) or not isinstance(goals, list) or not isinstance(columns, list):
        raise BadPayload("free, goals and columns must be lists")
    if not all(isinstance(col, list) for col in columns):
        raise BadPayload("every column must be a list of card codes")
    try:
        return new_board(free, bool(obj.get("joker", False)), goals, columns)
    except (ValueError, AttributeError) as e:
        raise BadPayload(f"bad board: {e}") from None


def _result(b: Board, **extra: Any) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "ok": True,
        "board": board_to_json(b),
        "key": board_key(b),
        "solved": b.is_solved(),
    }
    out.update(extra)
    return out


def _cell(body: Dict[str, Any], name: str) -> CellIndex:
    token = body.get(name)
    if not isinstance(token, str):
        raise BadPayload(f"{name} required")
    try:
        return CellIndex.parse(token)
    except ValueError as e:
        raise BadPayload(str(e)) from None


def _positive(body: Dict[str, Any], name: str, parse) -> Optional[Any]:
    raw = body.get(name)
    if raw is None:
        return None
    try:
        value = parse(raw)
    except (TypeError, ValueError):
        raise BadPayload(f"{name} must be a number") from None
    if value <= 0:
        raise BadPayload(f"{name} must be positive")
    return value


@app.errorhandler(BadPayload)
def bad_payload(e: BadPayload) -> Any:
    logger.info("rejected request to %s: %s", request.path, e)
    return jsonify({"ok": False, "error": str(e)}), 400


@app.post("/api/new")
def api_new() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    seed_text = body.get("seed")
    try:
        seed = Seed.from_string(str(seed_text)) if seed_text else Seed.random()
    except ValueError as e:
        raise BadPayload(str(e)) from None
    board = deal(seed).do_automoves()
    return jsonify(_result(board, seed=seed.to_string()))


@app.post("/api/new_from")
def api_new_from() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    board = board_from_json(body.get("board"))
    return jsonify(_result(board))


@app.post("/api/move")
def api_move() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    board = board_from_json(body.get("board"))
    source = _cell(body, "source")
    dest = _cell(body, "dest")
    height = _positive(body, "height", int)
    try:
        if height is None:
            moved = board.move_stack(source, dest)
        else:
            moved = board.move_n_cards(source, dest, height)
    except AmbiguousMove as amb:
        return jsonify({"ok": False, "error": "choose a height", "maxHeight": amb.max_height}), 409
    except InvalidMove as e:
        return jsonify({"ok": False, "error": str(e) or "invalid move"}), 400
    except ValueError as e:
        raise BadPayload(str(e)) from None
    return jsonify(_result(moved.do_automoves()))


@app.post("/api/group")
def api_group() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    board = board_from_json(body.get("board"))
    try:
        suit = Suit.from_letter(str(body.get("suit", "")))
    except ValueError as e:
        raise BadPayload(str(e)) from None
    try:
        grouped = board.group_dragons(suit)
    except InvalidMove as e:
        return jsonify({"ok": False, "error": str(e) or "cannot group"}), 400
    return jsonify(_result(grouped.do_automoves()))


@app.post("/api/successors")
def api_successors() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    board = board_from_json(body.get("board"))
    children: List[Dict[str, Any]] = [
        {"board": board_to_json(child), "key": board_key(child)} for child in next_states(board)
    ]
    return jsonify({"ok": True, "successors": children})


@app.post("/api/solve")
def api_solve() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    board = board_from_json(body.get("board"))
    settings = load_settings()
    timeout = _positive(body, "timeout", float)
    max_states = _positive(body, "maxStates", int)
    if timeout is not None:
        settings.timeout_sec = timeout
    if max_states is not None:
        settings.max_states = max_states
    if settings.timeout_sec is None:
        settings.timeout_sec = API_SOLVE_TIMEOUT

    res = solve(board, settings.make_context())
    return jsonify({
        "ok": True,
        "status": res.status.value,
        "moves": res.move_count,
        "path": [board_to_json(b) for b in res.path] if res.path else None,
        "metrics": {
            "expanded": res.metrics.states_expanded,
            "generated": res.metrics.states_generated,
            "maxFrontier": res.metrics.max_frontier,
            "ms": res.metrics.computation_time_ms,
        },
    })


# Entrypoint for "python app.py"
if __name__ == "__main__":
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    configure_logging(debug or load_settings().debug)
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=debug)
