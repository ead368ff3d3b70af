from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .tube import Segment, Tube
from .state import ApplyResult, MoveResult, ValidationResult

REASON_SAME_TUBE = 'same tube'
REASON_EMPTY_SOURCE = 'empty source'
REASON_DESTINATION_FULL = 'destination full'
REASON_NO_SPACE = 'no space'


def contiguous_top_run(tube: Tube) -> Tuple[Segment, ...]:
    """Returns the maximal same-color block at the top of a tube, bottom-to-top order."""
    if tube.is_empty():
        return tuple()
    target = tube.segments[-1].color
    start = len(tube.segments)
    while start > 0 and tube.segments[start - 1].color == target:
        start -= 1
    return tube.segments[start:]


def available_space(tube: Tube) -> int:
    return tube.available_space()


def transfer_count(source: Tube, dest: Tube) -> int:
    """How many segments a pour would move: the top run, limited by room in the destination."""
    return min(len(contiguous_top_run(source)), available_space(dest))


def validate_move(source: Tube, dest: Tube) -> ValidationResult:
    """
    Checks a pour from source to dest. Any destination with room is legal;
    colors are never matched against each other.
    """
    if source.id == dest.id:
        return ValidationResult(False, REASON_SAME_TUBE)
    if source.is_empty():
        return ValidationResult(False, REASON_EMPTY_SOURCE)
    if dest.is_full():
        return ValidationResult(False, REASON_DESTINATION_FULL)
    if available_space(dest) < 1:
        return ValidationResult(False, REASON_NO_SPACE)
    return ValidationResult(True)


def execute_move(source: Tube, dest: Tube, limit: Optional[int] = None) -> MoveResult:
    """
    Pours the top run of source onto dest and returns fresh tubes.
    `limit` caps the number of segments moved (used to reverse a recorded move exactly).
    """
    unchanged = MoveResult(success=False, new_source=source, new_dest=dest, segments_moved=0)
    if not validate_move(source, dest).is_valid:
        return unchanged
    count = transfer_count(source, dest)
    if limit is not None:
        count = min(count, limit)
    if count <= 0:
        return unchanged
    moving = source.segments[-count:]
    new_source = source.with_segments(source.segments[:-count])
    new_dest = dest.with_segments(dest.segments + moving)
    return MoveResult(success=True, new_source=new_source, new_dest=new_dest, segments_moved=count)


def _find_index(tubes: Sequence[Tube], tube_id: int) -> Optional[int]:
    for i, t in enumerate(tubes):
        if t.id == tube_id:
            return i
    return None


def apply_move_to_tubes(
    tubes: Sequence[Tube],
    source_id: int,
    dest_id: int,
    limit: Optional[int] = None,
) -> ApplyResult:
    """
    Applies a pour to a whole tube collection; tubes not involved are passed through as-is.
    A collection with duplicate tube ids is refused, since the ids would be ambiguous.
    """
    current = tuple(tubes)
    if len({t.id for t in current}) != len(current):
        return ApplyResult(tubes=current, segments_moved=0, success=False)
    source_index = _find_index(current, source_id)
    dest_index = _find_index(current, dest_id)
    if source_index is None or dest_index is None:
        return ApplyResult(tubes=current, segments_moved=0, success=False)
    result = execute_move(current[source_index], current[dest_index], limit=limit)
    if not result.success:
        return ApplyResult(tubes=current, segments_moved=0, success=False)
    new_tubes: List[Tube] = list(current)
    new_tubes[source_index] = result.new_source
    new_tubes[dest_index] = result.new_dest
    return ApplyResult(tubes=tuple(new_tubes), segments_moved=result.segments_moved, success=True)


def legal_moves(tubes: Sequence[Tube]) -> List[Tuple[int, int]]:
    """Calculates all valid (source_id, dest_id) pours, sorted."""
    moves: List[Tuple[int, int]] = []
    for source in tubes:
        if source.is_empty():
            continue
        for dest in tubes:
            if validate_move(source, dest).is_valid:
                moves.append((source.id, dest.id))
    return sorted(moves)
