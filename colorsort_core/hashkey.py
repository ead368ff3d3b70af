from __future__ import annotations

from typing import Iterable, Sequence, Tuple

from .tube import Color, Tube

StateKey = Tuple[Tuple[Color, ...], ...]

_MASK64 = 0xFFFFFFFFFFFFFFFF


def serialize_tubes(tubes: Sequence[Tube]) -> str:
    """Canonical text form of a layout, e.g. "[#A,#B]|[]". Capacity and ids are constant within a search."""
    return '|'.join('[' + ','.join(t.colors()) + ']' for t in tubes)


def state_key(tubes: Sequence[Tube]) -> StateKey:
    """Structural key: the ordered color sequence of each tube. Equal keys iff equal layouts."""
    return tuple(t.colors() for t in tubes)


def _pair64(left: int, right: int) -> int:
    # Szudzik pairing
    if left >= right:
        return (left * left) + left + right
    else:
        return left + (right * right)


def _mix64(value: int) -> int:
    # SplitMix64 finalizer
    value = (value + 0x9e3779b97f4a7c15) & _MASK64
    value ^= (value >> 30)
    value = (value * 0xbf58476d1ce4e5b9) & _MASK64
    value ^= (value >> 27)
    value = (value * 0x94d049bb133111eb) & _MASK64
    value ^= (value >> 31)
    return value & _MASK64


def _hash_values64(vals: Iterable[int]) -> int:
    h = 0
    for v in vals:
        h = _mix64(_pair64(h, v & _MASK64) & _MASK64)
    return h


def state_hash64(tubes: Sequence[Tube]) -> str:
    """
    Compact, process-independent 64-bit key for persisting solver results.
    Includes the capacity so equal color layouts in differently sized tubes differ.
    """
    capacity = tubes[0].capacity if tubes else 0
    text = f"{capacity}#{serialize_tubes(tubes)}"
    key64 = _hash_values64(ord(ch) for ch in text)
    return f"{key64:016x}"
