import random
import unittest
from collections import Counter

from game import (
    Tube,
    make_tube,
    contiguous_top_run,
    available_space,
    transfer_count,
    validate_move,
    execute_move,
    apply_move_to_tubes,
    legal_moves,
    generate_progressive_level,
    REASON_SAME_TUBE,
    REASON_EMPTY_SOURCE,
    REASON_DESTINATION_FULL,
)


def mk_tubes(*columns, capacity=4):
    return tuple(make_tube(i, list(cols), capacity) for i, cols in enumerate(columns))


def color_counts(tubes):
    return Counter(c for t in tubes for c in t.colors())


class TestTopRun(unittest.TestCase):
    def test_given_mixed_tube_when_top_run_then_only_top_block_returned(self):
        tube = make_tube(0, ['R', 'B', 'B', 'B'], 4)
        run = contiguous_top_run(tube)
        self.assertEqual([s.color for s in run], ['B', 'B', 'B'])
        # Same segment objects, same order as in the tube
        self.assertEqual([s.id for s in run], [s.id for s in tube.segments[1:]])

    def test_given_uniform_tube_when_top_run_then_whole_tube(self):
        tube = make_tube(0, ['R', 'R', 'R', 'R'], 4)
        self.assertEqual(len(contiguous_top_run(tube)), 4)

    def test_given_empty_tube_when_top_run_then_empty(self):
        self.assertEqual(contiguous_top_run(Tube.empty(0, 4)), tuple())

    def test_given_run_and_space_when_transfer_count_then_minimum(self):
        source = make_tube(0, ['R', 'B', 'B', 'B'], 4)
        self.assertEqual(transfer_count(source, make_tube(1, ['R', 'R', 'R'], 4)), 1)
        self.assertEqual(transfer_count(source, make_tube(1, ['R'], 4)), 3)
        self.assertEqual(available_space(make_tube(1, ['R'], 4)), 3)


class TestValidateMove(unittest.TestCase):
    def test_given_same_tube_when_validate_then_same_tube_reason(self):
        for cols in (['R'], [], ['R', 'R', 'R', 'R']):
            tube = make_tube(3, cols, 4)
            res = validate_move(tube, tube)
            self.assertFalse(res.is_valid)
            self.assertEqual(res.reason, REASON_SAME_TUBE)

    def test_given_empty_source_when_validate_then_empty_source_reason(self):
        res = validate_move(Tube.empty(0, 4), Tube.empty(1, 4))
        self.assertFalse(res.is_valid)
        self.assertEqual(res.reason, REASON_EMPTY_SOURCE)

    def test_given_full_destination_when_validate_then_destination_full_reason(self):
        res = validate_move(make_tube(0, ['R'], 4), make_tube(1, ['B'] * 4, 4))
        self.assertFalse(res.is_valid)
        self.assertEqual(res.reason, REASON_DESTINATION_FULL)

    def test_given_different_colors_when_validate_then_legal_without_color_match(self):
        res = validate_move(make_tube(0, ['B'], 4), make_tube(1, ['R', 'R'], 4))
        self.assertTrue(res.is_valid)
        self.assertIsNone(res.reason)


class TestExecuteMove(unittest.TestCase):
    def test_given_top_run_when_execute_then_run_moves_in_order(self):
        source = make_tube(0, ['R', 'B', 'B'], 4)
        dest = make_tube(1, ['R'], 4)
        res = execute_move(source, dest)
        self.assertTrue(res.success)
        self.assertEqual(res.segments_moved, 2)
        self.assertEqual(res.new_source.colors(), ('R',))
        self.assertEqual(res.new_dest.colors(), ('R', 'B', 'B'))
        self.assertEqual(res.new_dest.segments[1:], source.segments[1:])
        self.assertEqual([s.id for s in res.new_dest.segments[1:]], [s.id for s in source.segments[1:]])
        # identity preserved, inputs untouched
        self.assertEqual((res.new_source.id, res.new_source.capacity), (0, 4))
        self.assertEqual((res.new_dest.id, res.new_dest.capacity), (1, 4))
        self.assertEqual(source.colors(), ('R', 'B', 'B'))

    def test_given_small_space_when_execute_then_limited_by_capacity(self):
        res = execute_move(make_tube(0, ['B', 'B', 'B'], 4), make_tube(1, ['R', 'R', 'R'], 4))
        self.assertTrue(res.success)
        self.assertEqual(res.segments_moved, 1)
        self.assertEqual(res.new_source.colors(), ('B', 'B'))
        self.assertEqual(res.new_dest.colors(), ('R', 'R', 'R', 'B'))

    def test_given_limit_when_execute_then_at_most_limit_moved(self):
        res = execute_move(make_tube(0, ['B', 'B', 'B'], 4), Tube.empty(1, 4), limit=2)
        self.assertEqual(res.segments_moved, 2)
        self.assertEqual(res.new_source.colors(), ('B',))

    def test_given_empty_source_when_execute_then_fails_unchanged(self):
        source = Tube.empty(0, 4)
        dest = make_tube(1, ['R'], 4)
        res = execute_move(source, dest)
        self.assertFalse(res.success)
        self.assertEqual(res.segments_moved, 0)
        self.assertIs(res.new_source, source)
        self.assertIs(res.new_dest, dest)


class TestApplyMoveToTubes(unittest.TestCase):
    def test_given_collection_when_apply_then_only_two_tubes_replaced(self):
        tubes = mk_tubes(['R', 'B'], ['B'], ['R', 'R', 'R'], [])
        res = apply_move_to_tubes(tubes, 0, 1)
        self.assertTrue(res.success)
        self.assertEqual(res.segments_moved, 1)
        self.assertEqual(res.tubes[0].colors(), ('R',))
        self.assertEqual(res.tubes[1].colors(), ('B', 'B'))
        self.assertIs(res.tubes[2], tubes[2])
        self.assertIs(res.tubes[3], tubes[3])

    def test_given_unknown_or_illegal_when_apply_then_fails_and_returns_input(self):
        tubes = mk_tubes(['R'], [])
        for src, dst in ((0, 9), (9, 0), (1, 0), (0, 0)):
            res = apply_move_to_tubes(tubes, src, dst)
            self.assertFalse(res.success)
            self.assertEqual(res.segments_moved, 0)
            self.assertEqual(res.tubes, tubes)

    def test_given_duplicate_tube_ids_when_apply_then_refused_and_counts_kept(self):
        tubes = (make_tube(0, ['R'], 2), make_tube(0, ['B'], 2), Tube.empty(1, 2))
        res = apply_move_to_tubes(tubes, 0, 1)
        self.assertFalse(res.success)
        self.assertEqual(res.segments_moved, 0)
        self.assertEqual(res.tubes, tubes)
        self.assertEqual(color_counts(res.tubes), Counter({'R': 1, 'B': 1}))

    def test_given_tubes_out_of_id_order_when_apply_then_positions_kept(self):
        tubes = (make_tube(2, ['R'], 2), Tube.empty(0, 2), make_tube(1, ['B', 'B'], 2))
        res = apply_move_to_tubes(tubes, 2, 0)
        self.assertTrue(res.success)
        self.assertEqual([t.id for t in res.tubes], [2, 0, 1])
        self.assertEqual(res.tubes[1].colors(), ('R',))
        self.assertIs(res.tubes[2], tubes[2])

    def test_given_random_legal_moves_when_applied_then_color_counts_constant(self):
        rng = random.Random(7)
        tubes = generate_progressive_level(4, seed=3).initial_tubes
        before = color_counts(tubes)
        total = sum(len(t.segments) for t in tubes)
        for _ in range(60):
            moves = legal_moves(tubes)
            self.assertTrue(moves)
            src, dst = rng.choice(moves)
            res = apply_move_to_tubes(tubes, src, dst)
            self.assertTrue(res.success)
            tubes = res.tubes
            self.assertEqual(color_counts(tubes), before)
            self.assertEqual(sum(len(t.segments) for t in tubes), total)
            for t in tubes:
                self.assertLessEqual(len(t.segments), t.capacity)

    def test_given_layout_when_legal_moves_then_all_valid_pairs_sorted(self):
        tubes = mk_tubes(['R', 'R', 'R', 'R'], ['B'], [])
        self.assertEqual(legal_moves(tubes), [(0, 1), (0, 2), (1, 2)])


if __name__ == '__main__':
    unittest.main(verbosity=2)
