import os
import tempfile
import time
import unittest

from game import (
    make_tube,
    calculate_optimal_moves,
    calculate_optimal_moves_with_timeout,
    submit_optimal_moves,
    solve_with_cache,
    generate_progressive_level,
    serialize_tubes,
    state_key,
    state_hash64,
)


def mk_tubes(*columns, capacity=4):
    return tuple(make_tube(i, list(cols), capacity) for i, cols in enumerate(columns))


def three_move_layout():
    # [R,B] [B,R] [] with capacity 2: the shortest solution takes 3 pours.
    return mk_tubes(['R', 'B'], ['B', 'R'], [], capacity=2)


class TestStateKeys(unittest.TestCase):
    def test_given_tubes_when_serializing_then_bracketed_colors_joined(self):
        tubes = mk_tubes(['R', 'B'], [], ['G'])
        self.assertEqual(serialize_tubes(tubes), '[R,B]|[]|[G]')
        self.assertEqual(state_key(tubes), (('R', 'B'), (), ('G',)))

    def test_given_layouts_when_hashing_then_stable_and_distinct(self):
        a = mk_tubes(['R', 'B'], [])
        b = mk_tubes(['B', 'R'], [])
        self.assertEqual(state_hash64(a), state_hash64(mk_tubes(['R', 'B'], [])))
        self.assertEqual(len(state_hash64(a)), 16)
        self.assertNotEqual(state_hash64(a), state_hash64(b))
        self.assertNotEqual(state_hash64(a), state_hash64(mk_tubes(['R', 'B'], [], capacity=5)))


class TestCalculateOptimalMoves(unittest.TestCase):
    def test_given_solved_layout_when_solving_then_zero(self):
        tubes = mk_tubes(['R'] * 4, ['B'] * 4, [])
        self.assertEqual(calculate_optimal_moves(tubes), 0)

    def test_given_one_pour_from_solved_when_solving_then_one(self):
        tubes = mk_tubes(['B', 'B', 'B'], ['B'], ['R'] * 4)
        self.assertEqual(calculate_optimal_moves(tubes), 1)

    def test_given_interleaved_pair_when_solving_then_three(self):
        self.assertEqual(calculate_optimal_moves(three_move_layout()), 3)

    def test_given_string_keys_when_solving_then_same_answer(self):
        self.assertEqual(calculate_optimal_moves(three_move_layout(), key_fn=serialize_tubes), 3)

    def test_given_depth_cap_below_optimum_when_solving_then_none(self):
        self.assertIsNone(calculate_optimal_moves(three_move_layout(), max_depth=2))
        self.assertEqual(calculate_optimal_moves(three_move_layout(), max_depth=3), 3)

    def test_given_no_free_space_when_solving_then_none(self):
        # Every tube is full and mixed: no legal pour exists.
        tubes = mk_tubes(['R', 'B'], ['B', 'R'], capacity=2)
        self.assertIsNone(calculate_optimal_moves(tubes))


class TestBoundedTime(unittest.TestCase):
    def test_given_small_layout_when_timeout_variant_then_result(self):
        self.assertEqual(calculate_optimal_moves_with_timeout(three_move_layout(), timeout=10.0), 3)

    def test_given_huge_layout_when_tiny_budget_then_none_quickly(self):
        tubes = generate_progressive_level(46, seed=1).initial_tubes
        started = time.monotonic()
        self.assertIsNone(calculate_optimal_moves_with_timeout(tubes, timeout=0.2))
        self.assertLess(time.monotonic() - started, 5.0)

    def test_given_submit_when_future_resolves_then_result(self):
        future = submit_optimal_moves(three_move_layout(), timeout=10.0)
        self.assertEqual(future.result(timeout=10.0), 3)


class TestSolveWithCache(unittest.TestCase):
    def test_given_proven_result_when_solved_twice_then_second_from_cache(self):
        calls = []

        def fake_solve(tubes, timeout=None, max_depth=None):
            calls.append(1)
            return 3

        with tempfile.TemporaryDirectory() as td:
            db_path = os.path.join(td, 'cache', 'colorsort.db')
            first = solve_with_cache(three_move_layout(), db_path, solve=fake_solve)
            second = solve_with_cache(three_move_layout(), db_path, solve=fake_solve)
        self.assertEqual(first.optimal_moves, 3)
        self.assertFalse(first.from_cache)
        self.assertEqual(second.optimal_moves, 3)
        self.assertTrue(second.from_cache)
        self.assertEqual(len(calls), 1)

    def test_given_unknown_result_when_solved_then_not_cached(self):
        stored = []
        res = solve_with_cache(
            three_move_layout(),
            'unused.db',
            lookup=lambda db, key: None,
            store=lambda db, key, optimal: stored.append(key),
            solve=lambda tubes, timeout=None, max_depth=None: None,
        )
        self.assertIsNone(res.optimal_moves)
        self.assertEqual(stored, [])

    def test_given_broken_cache_when_solving_then_falls_back_to_search(self):
        import sqlite3

        def broken_lookup(db, key):
            raise sqlite3.OperationalError('disk I/O error')

        res = solve_with_cache(
            three_move_layout(),
            'unused.db',
            lookup=broken_lookup,
            store=lambda db, key, optimal: None,
            solve=lambda tubes, timeout=None, max_depth=None: 3,
        )
        self.assertEqual(res.optimal_moves, 3)
        self.assertFalse(res.from_cache)


if __name__ == '__main__':
    unittest.main(verbosity=2)
