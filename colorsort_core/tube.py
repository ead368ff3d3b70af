from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

Color = str  # hex token, e.g. '#FF6B6B'

GAME_COLORS: Tuple[Color, ...] = (
    '#FF6B6B',  # red
    '#45B7D1',  # blue
    '#F7DC6F',  # yellow
    '#52BE80',  # green
    '#BB8FCE',  # purple
    '#FFA07A',  # salmon
    '#4ECDC4',  # teal
    '#EC7063',  # coral
    '#98D8C8',  # mint
    '#F8B88B',  # peach
    '#AAB7B8',  # gray
    '#85C1E2',  # sky blue
)

# One-letter labels for text rendering, aligned with GAME_COLORS.
COLOR_NAMES = dict(zip(GAME_COLORS, 'RBYGPSTCMHWK'))

_segment_ids = itertools.count(1)


def _next_segment_id() -> str:
    return f"seg-{next(_segment_ids)}"


@dataclass(frozen=True)
class Segment:
    """A single colored unit. The id only tracks identity for renderers and never takes part in equality."""
    color: Color
    id: str = field(default_factory=_next_segment_id, compare=False)


@dataclass(frozen=True)
class Tube:
    """A capacity-bounded stack of segments, index 0 is the bottom."""
    id: int
    segments: Tuple[Segment, ...]
    capacity: int

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError(f'Tube {self.id}: capacity must be >= 1, got {self.capacity}')
        if len(self.segments) > self.capacity:
            raise ValueError(
                f'Tube {self.id}: {len(self.segments)} segments exceed capacity {self.capacity}'
            )

    @classmethod
    def empty(cls, tube_id: int, capacity: int) -> 'Tube':
        return cls(id=tube_id, segments=tuple(), capacity=capacity)

    def is_empty(self) -> bool:
        return len(self.segments) == 0

    def is_full(self) -> bool:
        return len(self.segments) == self.capacity

    def available_space(self) -> int:
        return self.capacity - len(self.segments)

    def top(self) -> Optional[Segment]:
        return self.segments[-1] if self.segments else None

    def colors(self) -> Tuple[Color, ...]:
        return tuple(s.color for s in self.segments)

    def with_segments(self, segments: Iterable[Segment]) -> 'Tube':
        return Tube(id=self.id, segments=tuple(segments), capacity=self.capacity)


def make_tube(tube_id: int, colors: Sequence[Color], capacity: int) -> Tube:
    """Builds a tube from a bottom-to-top color list, minting fresh segment ids."""
    return Tube(id=tube_id, segments=tuple(Segment(c) for c in colors), capacity=capacity)


def color_label(color: Color) -> str:
    return COLOR_NAMES.get(color, color[:1] or '?')


def pretty_tubes(tubes: Sequence[Tube]) -> str:
    """Generates a human-readable picture of the tubes, top rows first."""
    if not tubes:
        return ''
    height = max(t.capacity for t in tubes)
    lines: List[str] = []
    for level in range(height - 1, -1, -1):
        row: List[str] = []
        for t in tubes:
            if level >= t.capacity:
                row.append('   ')
            elif level < len(t.segments):
                row.append(f"|{color_label(t.segments[level].color)}|")
            else:
                row.append('| |')
        lines.append(' '.join(row))
    lines.append(' '.join(f"{t.id:^3}" for t in tubes))
    return '\n'.join(lines)
