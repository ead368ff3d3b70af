from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .tube import Color, Tube


@dataclass(frozen=True)
class Move:
    """A recorded pour. Immutable once appended to a history."""
    source_tube_id: int
    destination_tube_id: int
    segments_moved: int
    timestamp: float

    def __post_init__(self) -> None:
        if self.segments_moved < 1:
            raise ValueError(f'segments_moved must be >= 1, got {self.segments_moved}')


@dataclass(frozen=True)
class LevelConfig:
    """The restart baseline of a level."""
    level_id: int
    colors: Tuple[Color, ...]
    initial_tubes: Tuple[Tube, ...]
    max_undos: Optional[int] = None

    @property
    def capacity(self) -> int:
        return self.initial_tubes[0].capacity if self.initial_tubes else 0


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    reason: Optional[str] = None


@dataclass(frozen=True)
class MoveResult:
    success: bool
    new_source: Tube
    new_dest: Tube
    segments_moved: int


@dataclass(frozen=True)
class ApplyResult:
    tubes: Tuple[Tube, ...]
    segments_moved: int
    success: bool


@dataclass(frozen=True)
class UndoResult:
    tubes: Tuple[Tube, ...]
    new_history: Tuple[Move, ...]
    success: bool


@dataclass(frozen=True)
class GameStats:
    total_tubes: int
    complete_tubes: int
    empty_tubes: int
    full_tubes: int
    progress_percentage: int

    def to_json(self) -> Dict[str, int]:
        return {
            'totalTubes': self.total_tubes,
            'completeTubes': self.complete_tubes,
            'emptyTubes': self.empty_tubes,
            'fullTubes': self.full_tubes,
            'progressPercentage': self.progress_percentage,
        }


@dataclass(frozen=True)
class GameState:
    """Dynamic state of one level being played; replaced wholesale on every change."""
    level_id: int
    tubes: Tuple[Tube, ...]
    selected_tube_id: Optional[int] = None
    move_history: Tuple[Move, ...] = field(default_factory=tuple)
    is_completed: bool = False
    move_count: int = 0
    optimal_moves: Optional[int] = None
    undos_used: int = 0

    def tube_by_id(self, tube_id: int) -> Optional[Tube]:
        for t in self.tubes:
            if t.id == tube_id:
                return t
        return None
