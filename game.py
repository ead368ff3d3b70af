from __future__ import annotations

# Facade module that re-exports the color-sort core.
# Used by the Flask app and the tests; single-responsibility modules live under colorsort_core/*.

from colorsort_core.tube import (  # noqa: F401
    GAME_COLORS,
    COLOR_NAMES,
    Color,
    Segment,
    Tube,
    make_tube,
    pretty_tubes,
)
from colorsort_core.state import (  # noqa: F401
    ApplyResult,
    GameState,
    GameStats,
    LevelConfig,
    Move,
    MoveResult,
    UndoResult,
    ValidationResult,
)
from colorsort_core.moves import (  # noqa: F401
    REASON_DESTINATION_FULL,
    REASON_EMPTY_SOURCE,
    REASON_NO_SPACE,
    REASON_SAME_TUBE,
    apply_move_to_tubes,
    available_space,
    contiguous_top_run,
    execute_move,
    legal_moves,
    transfer_count,
    validate_move,
)
from colorsort_core.win import game_stats, is_level_complete, is_tube_complete  # noqa: F401
from colorsort_core.undo import can_undo, get_remaining_undos, record_move, undo_last_move, undos_left  # noqa: F401
from colorsort_core.deal import (  # noqa: F401
    build_solved_tubes,
    capacity_for,
    colors_for_level,
    create_simple_test_level,
    generate_easy_level,
    generate_hard_level,
    generate_level,
    generate_medium_level,
    generate_progressive_level,
    generate_verified_level,
    redistribute,
)
from colorsort_core.hashkey import serialize_tubes, state_hash64, state_key  # noqa: F401
from colorsort_core.solver import (  # noqa: F401
    SolveResult,
    calculate_optimal_moves,
    calculate_optimal_moves_with_timeout,
    solve_with_cache,
    submit_optimal_moves,
)
from colorsort_core.rating import calculate_star_rating, star_rating_message  # noqa: F401
from colorsort_core.db import db_lookup_solution, db_store_solution, kv_load, kv_save  # noqa: F401
from colorsort_core.scores import (  # noqa: F401
    MemoryScoreStore,
    ScoreBook,
    ScoreStore,
    SqliteScoreStore,
    decode_score_table,
    encode_score_table,
)
from colorsort_core.session import GameSession  # noqa: F401


def main() -> None:
    # CLI driver delegated to colorsort_core.cli
    from colorsort_core.cli import main as _main
    _main()


if __name__ == '__main__':
    main()
