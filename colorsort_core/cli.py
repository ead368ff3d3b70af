from __future__ import annotations

import argparse
from typing import Optional

from .tube import pretty_tubes
from .state import LevelConfig
from .deal import generate_level, generate_progressive_level
from .moves import legal_moves, validate_move
from .rating import star_rating_message
from .scores import ScoreBook, SqliteScoreStore
from .session import GameSession
from .solver import solve_with_cache
from .config import default_db_path, solver_max_depth, solver_timeout


def _build_level(args: argparse.Namespace) -> LevelConfig:
    if args.colors is not None:
        return generate_level(args.level, args.colors, args.empty, seed=args.seed)
    return generate_progressive_level(args.level, seed=args.seed)


def _print_level(session: GameSession) -> None:
    print(pretty_tubes(session.state.tubes))
    stats = session.stats()
    print(f"Moves: {session.state.move_count}   Complete tubes: {stats.complete_tubes}/{stats.total_tubes}")


def _parse_pour(text: str) -> Optional[tuple]:
    sep = ',' if ',' in text else ' '
    parts = [t for t in text.split(sep) if t != '']
    if len(parts) != 2:
        return None
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return None


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(description='Color-sort puzzle: generate, solve and play levels')
    parser.add_argument('--level', type=int, default=1, help='Level id (drives difficulty when --colors is not given)')
    parser.add_argument('--colors', type=int, default=None, help='Number of colors (overrides the level progression)')
    parser.add_argument('--empty', type=int, default=1, help='Number of empty tubes when --colors is given')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for level generation')
    parser.add_argument('--db', default=None, help='SQLite DB file path for scores and solver cache')
    parser.add_argument('--max-depth', type=int, default=None, help='Solver depth cap')
    parser.add_argument('--timeout', type=float, default=None, help='Solver time budget in seconds')
    parser.add_argument('--play', action='store_true', help='Play the level interactively')
    args = parser.parse_args(argv)

    db_path = args.db or default_db_path()
    timeout = args.timeout if args.timeout is not None else solver_timeout()
    max_depth = args.max_depth if args.max_depth is not None else solver_max_depth()
    config = _build_level(args)

    def cached_solver(tubes):
        return solve_with_cache(tubes, db_path, timeout=timeout, max_depth=max_depth).optimal_moves

    scores = ScoreBook(SqliteScoreStore(db_path))
    session = GameSession(config, scores=scores, solver=cached_solver)

    print(f"Level {config.level_id}: {len(config.colors)} colors, capacity {config.capacity}")
    _print_level(session)
    optimal = session.compute_optimal_moves()
    if optimal is None:
        print(f'Optimal move count unknown (no solution within depth {max_depth} / {timeout:g}s)')
    else:
        print(f'Optimal solution: {optimal} moves')
    if not args.play:
        return

    print("Commands: 'src dst' pours, 'u' undo, 'r' restart, 'h' hint, 'q' quit")
    while not session.state.is_completed:
        text = input('> ').strip().lower()
        if text in ('q', 'quit'):
            return
        if text in ('u', 'undo'):
            if not session.undo():
                print('Nothing to undo.')
            _print_level(session)
            continue
        if text in ('r', 'restart'):
            session.restart()
            _print_level(session)
            continue
        if text in ('h', 'hint'):
            print('Legal pours:', legal_moves(session.state.tubes))
            continue
        pour = _parse_pour(text)
        if pour is None:
            print('Could not parse. Try again.')
            continue
        source_id, dest_id = pour
        source = session.state.tube_by_id(source_id)
        dest = session.state.tube_by_id(dest_id)
        if source is None or dest is None:
            print('No such tube. Try again.')
            continue
        check = validate_move(source, dest)
        if not check.is_valid:
            print(f'Illegal move: {check.reason}.')
            continue
        session.move(source_id, dest_id)
        _print_level(session)

    stars = session.star_rating()
    print(f"{star_rating_message(stars)} {session.state.move_count} moves, {'*' * stars}")
    best = session.best_score()
    if best is not None:
        print(f'Best for level {config.level_id}: {best} moves')


if __name__ == '__main__':
    main()
