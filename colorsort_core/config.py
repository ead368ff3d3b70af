from __future__ import annotations

import os
import sys


def _env_flag(name: str, default: str = '0') -> bool:
    return os.getenv(name, default).lower() in ('1', 'true', 'yes', 'on')


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def debug_enabled() -> bool:
    return _env_flag('COLORSORT_DEBUG')


def debug_log(tag: str, message: str) -> None:
    """Prints a tagged trace line to stderr when COLORSORT_DEBUG is set."""
    if debug_enabled():
        print(f"[{tag}] {message}", file=sys.stderr)


def default_db_path() -> str:
    return os.getenv('COLORSORT_DB', os.path.join('data', 'colorsort.db'))


def solver_timeout() -> float:
    return _env_float('COLORSORT_SOLVER_TIMEOUT', 5.0)


def solver_max_depth() -> int:
    return _env_int('COLORSORT_SOLVER_MAX_DEPTH', 100)
