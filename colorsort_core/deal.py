from __future__ import annotations

import random
from typing import List, Optional, Sequence, Tuple

from .tube import GAME_COLORS, Color, Segment, Tube, make_tube
from .state import LevelConfig
from .solver import calculate_optimal_moves_with_timeout

# (highest level id, colors) steps for progressive difficulty; ids past the table use MAX_COLORS.
PROGRESSION: Tuple[Tuple[int, int], ...] = (
    (3, 4),
    (6, 5),
    (10, 6),
    (15, 7),
    (21, 8),
    (28, 9),
    (36, 10),
    (45, 11),
)
MAX_COLORS = 12


def _rng(seed: Optional[int], rng: Optional[random.Random]) -> random.Random:
    return rng if rng is not None else random.Random(seed)


def capacity_for(num_colors: int) -> int:
    """Capacity grows with the color count so there is always one slot of slack."""
    return num_colors + 1


def colors_for_level(level_id: int) -> int:
    if level_id < 1:
        raise ValueError(f'Level ids start at 1, got {level_id}')
    for last_id, colors in PROGRESSION:
        if level_id <= last_id:
            return colors
    return MAX_COLORS


def _check_counts(num_colors: int, num_empty_tubes: int) -> None:
    if num_colors < 1 or num_colors > len(GAME_COLORS):
        raise ValueError(f'num_colors must be in 1..{len(GAME_COLORS)}, got {num_colors}')
    if num_empty_tubes < 1:
        raise ValueError(f'At least one empty tube is required, got {num_empty_tubes}')


def build_solved_tubes(num_colors: int, num_empty_tubes: int) -> Tuple[Tube, ...]:
    """One full single-color tube per color followed by the empty tubes, all with the same capacity."""
    _check_counts(num_colors, num_empty_tubes)
    capacity = capacity_for(num_colors)
    tubes: List[Tube] = []
    for tube_id, color in enumerate(GAME_COLORS[:num_colors]):
        tubes.append(make_tube(tube_id, [color] * capacity, capacity))
    for i in range(num_empty_tubes):
        tubes.append(Tube.empty(num_colors + i, capacity))
    return tuple(tubes)


def redistribute(
    solved_tubes: Sequence[Tube],
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> Tuple[Tube, ...]:
    """
    Shuffles every segment into a new layout: one randomly chosen tube stays empty and the
    others are filled to capacity in tube order until the segments run out. With a single
    spare tube every other tube ends up exactly full.
    """
    if not solved_tubes:
        return tuple()
    r = _rng(seed, rng)
    capacity = solved_tubes[0].capacity
    pool: List[Segment] = [s for t in solved_tubes for s in t.segments]
    # Fisher-Yates
    for i in range(len(pool) - 1, 0, -1):
        j = r.randint(0, i)
        pool[i], pool[j] = pool[j], pool[i]
    empty_index = r.randrange(len(solved_tubes))
    out: List[Tube] = []
    pos = 0
    for i, t in enumerate(solved_tubes):
        if i == empty_index:
            out.append(Tube.empty(t.id, capacity))
            continue
        take = pool[pos:pos + capacity]
        pos += len(take)
        out.append(Tube(id=t.id, segments=tuple(take), capacity=capacity))
    return tuple(out)


def generate_level(
    level_id: int,
    num_colors: int,
    num_empty_tubes: int,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
    max_undos: Optional[int] = None,
) -> LevelConfig:
    solved = build_solved_tubes(num_colors, num_empty_tubes)
    shuffled = redistribute(solved, rng=_rng(seed, rng))
    colors: Tuple[Color, ...] = tuple(GAME_COLORS[:num_colors])
    return LevelConfig(level_id=level_id, colors=colors, initial_tubes=shuffled, max_undos=max_undos)


def generate_progressive_level(
    level_id: int,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> LevelConfig:
    """Difficulty follows the level id; always exactly one empty tube, so tubes == capacity == colors + 1."""
    return generate_level(level_id, colors_for_level(level_id), 1, seed=seed, rng=rng)


def generate_easy_level(level_id: int = 1, seed: Optional[int] = None) -> LevelConfig:
    return generate_level(level_id, 3, 2, seed=seed)


def generate_medium_level(level_id: int = 1, seed: Optional[int] = None) -> LevelConfig:
    return generate_level(level_id, 5, 2, seed=seed)


def generate_hard_level(level_id: int = 1, seed: Optional[int] = None) -> LevelConfig:
    return generate_level(level_id, 7, 1, seed=seed)


def create_simple_test_level() -> LevelConfig:
    """Two colors interleaved in two tubes plus an empty tube, capacity 4."""
    red, blue = GAME_COLORS[0], GAME_COLORS[1]
    tubes = (
        make_tube(0, [red, blue, red, blue], 4),
        make_tube(1, [blue, red, blue, red], 4),
        Tube.empty(2, 4),
    )
    return LevelConfig(level_id=0, colors=(red, blue), initial_tubes=tubes)


def generate_verified_level(
    level_id: int,
    num_colors: int,
    num_empty_tubes: int = 1,
    seed: Optional[int] = None,
    attempts: int = 5,
    timeout: Optional[float] = None,
    max_depth: Optional[int] = None,
) -> Tuple[LevelConfig, Optional[int]]:
    """
    Re-rolls the redistribution until the solver proves a solution within its bounds.
    Returns the level and its optimal move count, or the last candidate and None when no
    attempt could be proven (which does not mean it is unsolvable).
    """
    r = random.Random(seed)
    config = generate_level(level_id, num_colors, num_empty_tubes, rng=r)
    for attempt in range(max(1, attempts)):
        if attempt > 0:
            config = generate_level(level_id, num_colors, num_empty_tubes, rng=r)
        optimal = calculate_optimal_moves_with_timeout(
            config.initial_tubes, timeout=timeout, max_depth=max_depth
        )
        if optimal is not None:
            return config, optimal
    return config, None
