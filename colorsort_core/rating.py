from __future__ import annotations

from typing import Optional


def calculate_star_rating(actual_moves: int, optimal_moves: Optional[int]) -> int:
    """
    Rates a finished level from 1 to 3 stars against the solver's optimum.
    Unknown optimum or matching it gives 3; up to 50% over gives 2; worse gives 1.
    """
    if optimal_moves is None:
        return 3
    if actual_moves <= optimal_moves:
        return 3
    if optimal_moves == 0:
        return 1
    percent_over = 100 * (actual_moves - optimal_moves) / optimal_moves
    if percent_over <= 50:
        return 2
    return 1


def star_rating_message(stars: int) -> str:
    if stars == 3:
        return 'Perfect! Optimal solution!'
    if stars == 2:
        return 'Great job!'
    return 'Level Complete!'
