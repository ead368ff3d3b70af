from __future__ import annotations

import json
import sqlite3
from typing import Dict, Optional, Tuple

from .config import debug_log
from .db import kv_load, kv_save

BEST_SCORES_KEY = 'colorsort.bestScores'
BEST_STARS_KEY = 'colorsort.bestStars'


def encode_score_table(table: Dict[int, int]) -> str:
    """Serializes a level-id -> integer map as a JSON object with string keys."""
    return json.dumps({str(int(k)): int(v) for k, v in sorted(table.items())}, sort_keys=False)


def decode_score_table(blob: str) -> Dict[int, int]:
    """Inverse of encode_score_table; raises ValueError for anything that is not an integer map."""
    data = json.loads(blob)
    if not isinstance(data, dict):
        raise ValueError('score table must be a JSON object')
    out: Dict[int, int] = {}
    for k, v in data.items():
        if isinstance(v, bool) or not isinstance(v, int):
            raise ValueError(f'score for level {k!r} is not an integer: {v!r}')
        out[int(k)] = v
    return out


class ScoreStore:
    """Narrow key-value blob interface the score book persists through."""

    def load(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def save(self, key: str, blob: str) -> None:
        raise NotImplementedError


class MemoryScoreStore(ScoreStore):
    def __init__(self) -> None:
        self.blobs: Dict[str, str] = {}

    def load(self, key: str) -> Optional[str]:
        return self.blobs.get(key)

    def save(self, key: str, blob: str) -> None:
        self.blobs[key] = blob


class SqliteScoreStore(ScoreStore):
    def __init__(self, db_path: str) -> None:
        self.db_path = db_path

    def load(self, key: str) -> Optional[str]:
        return kv_load(self.db_path, key)

    def save(self, key: str, blob: str) -> None:
        kv_save(self.db_path, key, blob)


class ScoreBook:
    """
    Best move count and best star rating per level. Both only ever improve.
    A store that is unavailable or holds corrupt data reads as "no prior record".
    """

    def __init__(self, store: ScoreStore) -> None:
        self.store = store
        self._best_moves: Optional[Dict[int, int]] = None
        self._best_stars: Optional[Dict[int, int]] = None

    def _load_table(self, key: str) -> Dict[int, int]:
        try:
            blob = self.store.load(key)
            return decode_score_table(blob) if blob else {}
        except (ValueError, OSError, sqlite3.Error) as e:
            debug_log('scores', f'ignoring unreadable {key}: {e}')
            return {}

    def _save_table(self, key: str, table: Dict[int, int]) -> None:
        try:
            self.store.save(key, encode_score_table(table))
        except (OSError, sqlite3.Error) as e:
            debug_log('scores', f'could not save {key}: {e}')

    @property
    def best_moves(self) -> Dict[int, int]:
        if self._best_moves is None:
            self._best_moves = self._load_table(BEST_SCORES_KEY)
        return self._best_moves

    @property
    def best_stars(self) -> Dict[int, int]:
        if self._best_stars is None:
            self._best_stars = self._load_table(BEST_STARS_KEY)
        return self._best_stars

    def best_score(self, level_id: int) -> Optional[int]:
        return self.best_moves.get(level_id)

    def best_star_rating(self, level_id: int) -> Optional[int]:
        return self.best_stars.get(level_id)

    def record_result(self, level_id: int, moves: int, stars: Optional[int] = None) -> Tuple[bool, bool]:
        """Stores a finished level. Returns (new best moves, new best stars)."""
        moves_improved = False
        stars_improved = False
        current = self.best_moves.get(level_id)
        if current is None or moves < current:
            self.best_moves[level_id] = moves
            self._save_table(BEST_SCORES_KEY, self.best_moves)
            moves_improved = True
        if stars is not None:
            current_stars = self.best_stars.get(level_id)
            if current_stars is None or stars > current_stars:
                self.best_stars[level_id] = stars
                self._save_table(BEST_STARS_KEY, self.best_stars)
                stars_improved = True
        return moves_improved, stars_improved

    def reset(self) -> None:
        self._best_moves = {}
        self._best_stars = {}
        self._save_table(BEST_SCORES_KEY, {})
        self._save_table(BEST_STARS_KEY, {})
