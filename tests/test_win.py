import unittest

from game import Tube, make_tube, is_tube_complete, is_level_complete, game_stats


def mk_tubes(*columns, capacity=4):
    return tuple(make_tube(i, list(cols), capacity) for i, cols in enumerate(columns))


class TestWinCondition(unittest.TestCase):
    def test_given_sorted_tubes_when_checking_level_then_complete(self):
        tubes = mk_tubes(['R', 'R', 'R', 'R'], ['B', 'B', 'B', 'B'], [])
        self.assertTrue(is_level_complete(tubes))

    def test_given_mixed_tube_when_checking_level_then_incomplete(self):
        tubes = mk_tubes(['R', 'R', 'R', 'R'], ['B', 'R'], [])
        self.assertFalse(is_level_complete(tubes))

    def test_given_partial_uniform_tube_when_checking_then_incomplete(self):
        self.assertFalse(is_tube_complete(make_tube(0, ['R', 'R'], 4)))
        self.assertTrue(is_tube_complete(Tube.empty(0, 4)))
        self.assertFalse(is_tube_complete(make_tube(0, ['R', 'R', 'B', 'R'], 4)))

    def test_given_no_tubes_when_checking_level_then_vacuously_complete(self):
        self.assertTrue(is_level_complete(()))


class TestGameStats(unittest.TestCase):
    def test_given_tubes_when_stats_then_counts_and_progress(self):
        stats = game_stats(mk_tubes(['R', 'R', 'R', 'R'], ['B', 'R'], []))
        self.assertEqual(stats.total_tubes, 3)
        self.assertEqual(stats.complete_tubes, 2)
        self.assertEqual(stats.empty_tubes, 1)
        self.assertEqual(stats.full_tubes, 1)
        self.assertEqual(stats.progress_percentage, 67)

    def test_given_half_percent_when_stats_then_rounds_half_up(self):
        tubes = mk_tubes(['R', 'R', 'R', 'R'], *([['B']] * 7))
        self.assertEqual(game_stats(tubes).progress_percentage, 13)  # 12.5

    def test_given_stats_when_to_json_then_camel_case_keys(self):
        data = game_stats(mk_tubes([], [])).to_json()
        self.assertEqual(data, {
            'totalTubes': 2,
            'completeTubes': 2,
            'emptyTubes': 2,
            'fullTubes': 0,
            'progressPercentage': 100,
        })


if __name__ == '__main__':
    unittest.main(verbosity=2)
