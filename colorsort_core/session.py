from __future__ import annotations

import dataclasses
from typing import Callable, Optional, Sequence

from .tube import Tube
from .state import ApplyResult, GameState, GameStats, LevelConfig, UndoResult
from .moves import apply_move_to_tubes
from .win import game_stats, is_level_complete
from .undo import can_undo, record_move, undo_last_move, undos_left
from .deal import generate_progressive_level
from .rating import calculate_star_rating
from .scores import ScoreBook
from .solver import calculate_optimal_moves_with_timeout

Solver = Callable[[Sequence[Tube]], Optional[int]]


class GameSession:
    """
    One player's pass through a level: tube selection, pours, undo, restart and level
    progression. The GameState is never mutated; every action swaps in a new one.
    """

    def __init__(
        self,
        level_config: LevelConfig,
        scores: Optional[ScoreBook] = None,
        solver: Optional[Solver] = None,
    ) -> None:
        self.level_config = level_config
        self.scores = scores
        self.solver: Solver = solver or calculate_optimal_moves_with_timeout
        self.state = self._fresh_state(level_config)

    @staticmethod
    def _fresh_state(config: LevelConfig, optimal_moves: Optional[int] = None) -> GameState:
        return GameState(level_id=config.level_id, tubes=tuple(config.initial_tubes), optimal_moves=optimal_moves)

    @classmethod
    def start(cls, level_id: int, scores: Optional[ScoreBook] = None, seed: Optional[int] = None,
              solver: Optional[Solver] = None) -> 'GameSession':
        return cls(generate_progressive_level(level_id, seed=seed), scores=scores, solver=solver)

    def select_tube(self, tube_id: Optional[int]) -> None:
        self.state = dataclasses.replace(self.state, selected_tube_id=tube_id)

    def selected_tube(self) -> Optional[Tube]:
        if self.state.selected_tube_id is None:
            return None
        return self.state.tube_by_id(self.state.selected_tube_id)

    def attempt_move(self, tube_id: int) -> bool:
        """
        Two-tap interaction: the first tap selects a source, tapping it again deselects,
        tapping another tube pours into it. Returns True when a pour happened.
        """
        selected = self.state.selected_tube_id
        if selected is None:
            self.select_tube(tube_id)
            return False
        if selected == tube_id:
            self.select_tube(None)
            return False
        result = self.move(selected, tube_id)
        if not result.success:
            self.select_tube(None)
        return result.success

    def move(self, source_id: int, dest_id: int) -> ApplyResult:
        result = apply_move_to_tubes(self.state.tubes, source_id, dest_id)
        if not result.success:
            return result
        completed = is_level_complete(result.tubes)
        self.state = dataclasses.replace(
            self.state,
            tubes=result.tubes,
            move_history=record_move(self.state.move_history, source_id, dest_id, result.segments_moved),
            move_count=self.state.move_count + 1,
            selected_tube_id=None,
            is_completed=completed,
        )
        if completed:
            self._on_completed()
        return result

    def _on_completed(self) -> None:
        if self.scores is not None:
            self.scores.record_result(self.state.level_id, self.state.move_count, self.star_rating())

    def can_undo(self) -> bool:
        return can_undo(self.state.move_history, self.level_config.max_undos, self.state.undos_used)

    def remaining_undos(self) -> Optional[int]:
        return undos_left(self.level_config.max_undos, self.state.undos_used)

    def undo(self) -> bool:
        """Reverses the last pour. The move counter keeps counting the undone pour."""
        if not self.can_undo():
            return False
        result: UndoResult = undo_last_move(self.state.tubes, self.state.move_history)
        if not result.success:
            return False
        self.state = dataclasses.replace(
            self.state,
            tubes=result.tubes,
            move_history=result.new_history,
            selected_tube_id=None,
            is_completed=False,
            undos_used=self.state.undos_used + 1,
        )
        return True

    def restart(self) -> None:
        self.state = self._fresh_state(self.level_config, optimal_moves=self.state.optimal_moves)

    def load_level(self, config: LevelConfig) -> None:
        self.level_config = config
        self.state = self._fresh_state(config)

    def next_level(self, seed: Optional[int] = None) -> LevelConfig:
        config = generate_progressive_level(self.state.level_id + 1, seed=seed)
        self.load_level(config)
        return config

    def compute_optimal_moves(self) -> Optional[int]:
        """Runs the solver on the level's starting layout and remembers the result."""
        optimal = self.solver(self.level_config.initial_tubes)
        self.state = dataclasses.replace(self.state, optimal_moves=optimal)
        return optimal

    def star_rating(self) -> int:
        return calculate_star_rating(self.state.move_count, self.state.optimal_moves)

    def stats(self) -> GameStats:
        return game_stats(self.state.tubes)

    def best_score(self) -> Optional[int]:
        return self.scores.best_score(self.state.level_id) if self.scores is not None else None
