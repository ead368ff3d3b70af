from __future__ import annotations

import sqlite3
import threading
import time
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass
from typing import Callable, Deque, Hashable, Optional, Sequence, Set, Tuple

from .tube import Tube
from .moves import apply_move_to_tubes, validate_move
from .win import is_level_complete
from .hashkey import state_hash64, state_key
from .config import debug_log, solver_max_depth, solver_timeout
from .db import db_lookup_solution, db_store_solution

# How many expansions happen between deadline checks.
_DEADLINE_STRIDE = 256

_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = threading.Lock()


def _is_uniform(tube: Tube) -> bool:
    first = tube.segments[0].color
    return all(s.color == first for s in tube.segments)


def calculate_optimal_moves(
    initial_tubes: Sequence[Tube],
    max_depth: int = 100,
    deadline: Optional[float] = None,
    key_fn: Callable[[Sequence[Tube]], Hashable] = state_key,
) -> Optional[int]:
    """
    Calculates the minimum number of pours needed to solve a layout with a breadth-first search.

    Returns None when the frontier is exhausted, every branch hits `max_depth`, or
    `deadline` (a time.monotonic() value) passes. None means "unknown", not "unsolvable".
    """
    start: Tuple[Tube, ...] = tuple(initial_tubes)
    if is_level_complete(start):
        return 0

    queue: Deque[Tuple[Tuple[Tube, ...], int]] = deque([(start, 0)])
    visited: Set[Hashable] = {key_fn(start)}
    expanded = 0

    while queue:
        tubes, moves = queue.popleft()
        if moves >= max_depth:
            continue
        expanded += 1
        if deadline is not None and expanded % _DEADLINE_STRIDE == 0 and time.monotonic() > deadline:
            debug_log('solver', f'deadline passed after {expanded} expansions, {len(visited)} states')
            return None

        for source in tubes:
            if source.is_empty():
                continue
            for dest in tubes:
                if source.id == dest.id:
                    continue
                if not validate_move(source, dest).is_valid:
                    continue
                # Relocating an already uniform tube into an empty one never shortens a solution.
                if dest.is_empty() and _is_uniform(source):
                    continue
                result = apply_move_to_tubes(tubes, source.id, dest.id)
                if not result.success:
                    continue
                key = key_fn(result.tubes)
                if key in visited:
                    continue
                if is_level_complete(result.tubes):
                    debug_log('solver', f'solved in {moves + 1} moves, {len(visited)} states seen')
                    return moves + 1
                visited.add(key)
                queue.append((result.tubes, moves + 1))

    debug_log('solver', f'no solution within depth {max_depth}, {len(visited)} states seen')
    return None


def _get_executor() -> ThreadPoolExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix='colorsort-solver')
        return _executor


def submit_optimal_moves(
    tubes: Sequence[Tube],
    timeout: Optional[float] = None,
    max_depth: Optional[int] = None,
) -> 'Future[Optional[int]]':
    """Starts a bounded search on a worker thread; the future resolves to the move count or None."""
    budget = solver_timeout() if timeout is None else timeout
    depth = solver_max_depth() if max_depth is None else max_depth
    deadline = time.monotonic() + budget
    return _get_executor().submit(calculate_optimal_moves, tuple(tubes), depth, deadline)


def calculate_optimal_moves_with_timeout(
    tubes: Sequence[Tube],
    timeout: Optional[float] = None,
    max_depth: Optional[int] = None,
) -> Optional[int]:
    """Like calculate_optimal_moves but gives up (None) once the wall-clock budget is spent."""
    budget = solver_timeout() if timeout is None else timeout
    future = submit_optimal_moves(tubes, timeout=budget, max_depth=max_depth)
    try:
        return future.result(timeout=budget)
    except FutureTimeout:
        # The worker notices the same deadline and stops on its own.
        debug_log('solver', f'timed out after {budget:.2f}s')
        return None
    except Exception as e:
        debug_log('solver', f'search failed: {e!r}')
        return None


@dataclass
class SolveResult:
    """Result of a cached solve."""
    optimal_moves: Optional[int]
    elapsed: float
    from_cache: bool


def solve_with_cache(
    tubes: Sequence[Tube],
    db_path: str,
    *,
    timeout: Optional[float] = None,
    max_depth: Optional[int] = None,
    lookup: Optional[Callable[[str, str], Optional[int]]] = None,
    store: Optional[Callable[[str, str, int], None]] = None,
    solve: Optional[Callable[..., Optional[int]]] = None,
) -> SolveResult:
    """
    Looks the layout up in the solver cache, otherwise runs the bounded solver.
    Only proven results are stored; a None result may change with a larger budget.
    """
    lookup = lookup or db_lookup_solution
    store = store or db_store_solution
    solve = solve or calculate_optimal_moves_with_timeout
    key = state_hash64(tubes)
    started = time.monotonic()

    try:
        cached = lookup(db_path, key)
    except (sqlite3.Error, OSError) as e:
        debug_log('solver', f'cache lookup failed for {key}: {e}')
        cached = None
    if cached is not None:
        return SolveResult(optimal_moves=cached, elapsed=time.monotonic() - started, from_cache=True)

    optimal = solve(tubes, timeout=timeout, max_depth=max_depth)
    if optimal is not None:
        try:
            store(db_path, key, optimal)
        except (sqlite3.Error, OSError) as e:
            debug_log('solver', f'cache store failed for {key}: {e}')
    return SolveResult(optimal_moves=optimal, elapsed=time.monotonic() - started, from_cache=False)
