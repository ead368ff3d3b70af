from __future__ import annotations

import time
from typing import Optional, Sequence, Tuple

from .tube import Tube
from .state import Move, UndoResult
from .moves import apply_move_to_tubes, contiguous_top_run


def record_move(history: Sequence[Move], source_id: int, dest_id: int, segments_moved: int) -> Tuple[Move, ...]:
    """Returns a new history with the move appended; the input sequence is left untouched."""
    move = Move(
        source_tube_id=source_id,
        destination_tube_id=dest_id,
        segments_moved=segments_moved,
        timestamp=time.time(),
    )
    return tuple(history) + (move,)


def undo_last_move(tubes: Sequence[Tube], history: Sequence[Move]) -> UndoResult:
    """
    Reverses the last recorded move by pouring back from its destination to its source.
    Exactly `segments_moved` segments go back, even when the destination's top run is longer.
    """
    current = tuple(tubes)
    past = tuple(history)
    if not past:
        return UndoResult(tubes=current, new_history=past, success=False)
    last = past[-1]
    back_source = next((t for t in current if t.id == last.destination_tube_id), None)
    back_dest = next((t for t in current if t.id == last.source_tube_id), None)
    if back_source is None or back_dest is None:
        return UndoResult(tubes=current, new_history=past, success=False)
    # A short run or a lack of room means the history no longer matches the tubes.
    if len(contiguous_top_run(back_source)) < last.segments_moved:
        return UndoResult(tubes=current, new_history=past, success=False)
    if back_dest.available_space() < last.segments_moved:
        return UndoResult(tubes=current, new_history=past, success=False)
    reverse = apply_move_to_tubes(
        current,
        last.destination_tube_id,
        last.source_tube_id,
        limit=last.segments_moved,
    )
    if not reverse.success:
        return UndoResult(tubes=current, new_history=past, success=False)
    return UndoResult(tubes=reverse.tubes, new_history=past[:-1], success=True)


def can_undo(history: Sequence[Move], max_undos: Optional[int] = None, undos_used: int = 0) -> bool:
    """
    True when there is a move to reverse. When `max_undos` is set, at most that many
    undos may be performed per play session; `undos_used` is the session's running count.
    """
    if len(history) == 0:
        return False
    if max_undos is not None and undos_used >= max_undos:
        return False
    return True


def get_remaining_undos(history: Sequence[Move], max_undos: Optional[int] = None) -> Optional[int]:
    """None means unlimited."""
    if max_undos is None:
        return None
    return max(0, max_undos - len(history))


def undos_left(max_undos: Optional[int], undos_used: int) -> Optional[int]:
    """Undos still allowed in a play session under the cap enforced by can_undo. None means unlimited."""
    if max_undos is None:
        return None
    return max(0, max_undos - undos_used)
