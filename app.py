from __future__ import annotations

import dataclasses
from typing import Any, Dict, List, Optional, Sequence, Tuple

from flask import Flask, jsonify, request

from colorsort_core.config import debug_log, default_db_path
from game import (
    GameState,
    LevelConfig,
    Move,
    Segment,
    Tube,
    apply_move_to_tubes,
    calculate_star_rating,
    can_undo,
    contiguous_top_run,
    game_stats,
    generate_level,
    generate_progressive_level,
    is_level_complete,
    record_move,
    solve_with_cache,
    star_rating_message,
    transfer_count,
    undo_last_move,
    undos_left,
    validate_move,
    ScoreBook,
    SqliteScoreStore,
)

DEFAULT_DB = default_db_path()

app = Flask(__name__)

# Replaced in tests with an in-memory book.
score_book = ScoreBook(SqliteScoreStore(DEFAULT_DB))


class BadRequest(ValueError):
    pass


# ---------- JSON mapping ----------

def segment_to_json(s: Segment) -> Dict[str, Any]:
    return {"color": s.color, "id": s.id}


def tube_to_json(t: Tube) -> Dict[str, Any]:
    return {"id": int(t.id), "capacity": int(t.capacity), "segments": [segment_to_json(s) for s in t.segments]}


def tubes_to_json(tubes: Sequence[Tube]) -> List[Dict[str, Any]]:
    return [tube_to_json(t) for t in tubes]


def json_to_tubes(items: Any) -> Tuple[Tube, ...]:
    if not isinstance(items, list):
        raise BadRequest("tubes must be a list")
    out: List[Tube] = []
    seen_ids = set()
    for obj in items:
        if not isinstance(obj, dict):
            raise BadRequest("each tube must be an object")
        tube_id = int(obj["id"])
        if tube_id in seen_ids:
            raise BadRequest("duplicate tube id")
        seen_ids.add(tube_id)
        segs: List[Segment] = []
        for s in obj.get("segments", []):
            # Bare color strings are accepted; ids are then minted fresh.
            if isinstance(s, dict):
                segs.append(Segment(str(s["color"]), str(s["id"])) if "id" in s else Segment(str(s["color"])))
            else:
                segs.append(Segment(str(s)))
        out.append(Tube(id=tube_id, segments=tuple(segs), capacity=int(obj["capacity"])))
    return tuple(out)


def move_to_json(m: Move) -> Dict[str, Any]:
    return {
        "sourceTubeId": m.source_tube_id,
        "destinationTubeId": m.destination_tube_id,
        "segmentsMoved": m.segments_moved,
        "timestamp": m.timestamp,
    }


def json_to_move(obj: Dict[str, Any]) -> Move:
    return Move(
        source_tube_id=int(obj["sourceTubeId"]),
        destination_tube_id=int(obj["destinationTubeId"]),
        segments_moved=int(obj["segmentsMoved"]),
        timestamp=float(obj.get("timestamp", 0.0)),
    )


def level_to_json(c: LevelConfig) -> Dict[str, Any]:
    return {
        "levelId": c.level_id,
        "colors": list(c.colors),
        "capacity": c.capacity,
        "initialTubes": tubes_to_json(c.initial_tubes),
        "maxUndos": c.max_undos,
    }


def state_to_json(s: GameState) -> Dict[str, Any]:
    return {
        "levelId": s.level_id,
        "tubes": tubes_to_json(s.tubes),
        "selectedTubeId": s.selected_tube_id,
        "moveHistory": [move_to_json(m) for m in s.move_history],
        "isCompleted": s.is_completed,
        "moveCount": s.move_count,
        "optimalMoves": s.optimal_moves,
        "undosUsed": s.undos_used,
    }


def json_to_state(obj: Any) -> GameState:
    if not isinstance(obj, dict):
        raise BadRequest("state required")
    optimal = obj.get("optimalMoves")
    selected = obj.get("selectedTubeId")
    return GameState(
        level_id=int(obj.get("levelId", 0)),
        tubes=json_to_tubes(obj.get("tubes")),
        selected_tube_id=int(selected) if selected is not None else None,
        move_history=tuple(json_to_move(m) for m in obj.get("moveHistory", [])),
        is_completed=bool(obj.get("isCompleted", False)),
        move_count=int(obj.get("moveCount", 0)),
        optimal_moves=int(optimal) if optimal is not None else None,
        undos_used=int(obj.get("undosUsed", 0)),
    )


def _optional_int(body: Dict[str, Any], name: str) -> Optional[int]:
    val = body.get(name)
    return int(val) if val is not None else None


def _bad_request(e: Exception) -> Any:
    return jsonify({"ok": False, "error": f"bad request: {e}"}), 400


def _find(tubes: Sequence[Tube], tube_id: int) -> Optional[Tube]:
    return next((t for t in tubes if t.id == tube_id), None)


# ---------- Game API ----------

@app.post("/api/new")
def api_new() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        level_id = int(body.get("level", 1))
        seed = _optional_int(body, "seed")
        colors = _optional_int(body, "colors")
        if colors is not None:
            config = generate_level(level_id, colors, int(body.get("empty", 1)), seed=seed,
                                    max_undos=_optional_int(body, "maxUndos"))
        else:
            config = generate_progressive_level(level_id, seed=seed)
            if body.get("maxUndos") is not None:
                config = dataclasses.replace(config, max_undos=int(body["maxUndos"]))
    except (TypeError, ValueError) as e:
        return _bad_request(e)
    state = GameState(level_id=config.level_id, tubes=config.initial_tubes)
    return jsonify({"ok": True, "level": level_to_json(config), "state": state_to_json(state)})


@app.post("/api/validate")
def api_validate() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        tubes = json_to_tubes(body.get("tubes"))
        source = _find(tubes, int(body["source"]))
        dest = _find(tubes, int(body["dest"]))
    except (KeyError, TypeError, ValueError) as e:
        return _bad_request(e)
    if source is None or dest is None:
        return jsonify({"ok": False, "error": "unknown tube"}), 404
    check = validate_move(source, dest)
    return jsonify({
        "ok": True,
        "isValid": check.is_valid,
        "reason": check.reason,
        "topRun": [segment_to_json(s) for s in contiguous_top_run(source)],
        "transferCount": transfer_count(source, dest) if check.is_valid else 0,
    })


@app.post("/api/move")
def api_move() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        state = json_to_state(body.get("state"))
        source_id = int(body["source"])
        dest_id = int(body["dest"])
    except (KeyError, TypeError, ValueError) as e:
        return _bad_request(e)
    source = _find(state.tubes, source_id)
    dest = _find(state.tubes, dest_id)
    if source is None or dest is None:
        return jsonify({"ok": False, "error": "unknown tube"}), 404
    check = validate_move(source, dest)
    if not check.is_valid:
        return jsonify({"ok": False, "error": "Illegal move", "reason": check.reason}), 400
    moving = contiguous_top_run(source)[-transfer_count(source, dest):]
    result = apply_move_to_tubes(state.tubes, source_id, dest_id)
    completed = is_level_complete(result.tubes)
    next_state = dataclasses.replace(
        state,
        tubes=result.tubes,
        move_history=record_move(state.move_history, source_id, dest_id, result.segments_moved),
        move_count=state.move_count + 1,
        selected_tube_id=None,
        is_completed=completed,
    )
    return jsonify({
        "ok": True,
        "state": state_to_json(next_state),
        "segmentsMoved": result.segments_moved,
        "moved": [segment_to_json(s) for s in moving],
        "isCompleted": completed,
        "stats": game_stats(result.tubes).to_json(),
    })


@app.post("/api/undo")
def api_undo() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        state = json_to_state(body.get("state"))
        max_undos = _optional_int(body, "maxUndos")
    except (KeyError, TypeError, ValueError) as e:
        return _bad_request(e)
    if not state.move_history:
        return jsonify({"ok": False, "error": "Nothing to undo"}), 400
    if not can_undo(state.move_history, max_undos, state.undos_used):
        return jsonify({"ok": False, "error": "Undo limit reached", "remainingUndos": 0}), 400
    result = undo_last_move(state.tubes, state.move_history)
    if not result.success:
        debug_log('api', f'undo failed to reverse {state.move_history[-1]}')
        return jsonify({"ok": False, "error": "History does not match tubes"}), 409
    next_state = dataclasses.replace(
        state,
        tubes=result.tubes,
        move_history=result.new_history,
        selected_tube_id=None,
        is_completed=False,
        undos_used=state.undos_used + 1,
    )
    return jsonify({
        "ok": True,
        "state": state_to_json(next_state),
        "remainingUndos": undos_left(max_undos, next_state.undos_used),
    })


@app.post("/api/stats")
def api_stats() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        tubes = json_to_tubes(body.get("tubes"))
    except (KeyError, TypeError, ValueError) as e:
        return _bad_request(e)
    return jsonify({"ok": True, "stats": game_stats(tubes).to_json(), "isCompleted": is_level_complete(tubes)})


@app.post("/api/solve")
def api_solve() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        tubes = json_to_tubes(body.get("tubes"))
        max_depth = _optional_int(body, "maxDepth")
        timeout = float(body["timeout"]) if body.get("timeout") is not None else None
    except (KeyError, TypeError, ValueError) as e:
        return _bad_request(e)
    res = solve_with_cache(tubes, DEFAULT_DB, timeout=timeout, max_depth=max_depth)
    return jsonify({
        "ok": True,
        "optimalMoves": res.optimal_moves,
        "fromCache": res.from_cache,
        "elapsed": round(res.elapsed, 4),
    })


@app.post("/api/rating")
def api_rating() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        actual = int(body["actualMoves"])
        optimal = _optional_int(body, "optimalMoves")
    except (KeyError, TypeError, ValueError) as e:
        return _bad_request(e)
    stars = calculate_star_rating(actual, optimal)
    return jsonify({"ok": True, "stars": stars, "message": star_rating_message(stars)})


# ---------- Best scores ----------

@app.get("/api/scores")
def api_scores() -> Any:
    return jsonify({
        "ok": True,
        "bestScores": {str(k): v for k, v in sorted(score_book.best_moves.items())},
        "bestStars": {str(k): v for k, v in sorted(score_book.best_stars.items())},
    })


@app.post("/api/scores/record")
def api_scores_record() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        level_id = int(body["levelId"])
        moves = int(body["moves"])
        optimal = _optional_int(body, "optimalMoves")
    except (KeyError, TypeError, ValueError) as e:
        return _bad_request(e)
    stars = calculate_star_rating(moves, optimal)
    moves_improved, stars_improved = score_book.record_result(level_id, moves, stars)
    return jsonify({
        "ok": True,
        "stars": stars,
        "newBestMoves": moves_improved,
        "newBestStars": stars_improved,
        "bestMoves": score_book.best_score(level_id),
        "bestStars": score_book.best_star_rating(level_id),
    })


@app.post("/api/scores/reset")
def api_scores_reset() -> Any:
    score_book.reset()
    return jsonify({"ok": True})


if __name__ == "__main__":
    app.run(debug=False)
