from __future__ import annotations

import math
from typing import Sequence

from .tube import Tube
from .state import GameStats


def is_tube_complete(tube: Tube) -> bool:
    """A tube is complete when it is empty, or full with a single color."""
    if tube.is_empty():
        return True
    if not tube.is_full():
        return False
    first = tube.segments[0].color
    return all(s.color == first for s in tube.segments)


def is_level_complete(tubes: Sequence[Tube]) -> bool:
    return all(is_tube_complete(t) for t in tubes)


def game_stats(tubes: Sequence[Tube]) -> GameStats:
    """Read-only progress snapshot for display; not used for win detection."""
    total = len(tubes)
    complete = sum(1 for t in tubes if is_tube_complete(t))
    empty = sum(1 for t in tubes if t.is_empty())
    full = sum(1 for t in tubes if t.is_full())
    # half-up rounding, 12.5 -> 13
    progress = int(math.floor(100 * complete / total + 0.5)) if total else 0
    return GameStats(
        total_tubes=total,
        complete_tubes=complete,
        empty_tubes=empty,
        full_tubes=full,
        progress_percentage=progress,
    )
