import unittest

from game import calculate_star_rating, star_rating_message


class TestStarRating(unittest.TestCase):
    def test_given_moves_vs_optimal_when_rating_then_expected_stars(self):
        self.assertEqual(calculate_star_rating(5, 5), 3)
        self.assertEqual(calculate_star_rating(4, 5), 3)
        self.assertEqual(calculate_star_rating(7, 5), 2)   # 40% over
        self.assertEqual(calculate_star_rating(9, 5), 1)   # 80% over
        self.assertEqual(calculate_star_rating(15, 10), 2)  # exactly 50% over
        self.assertEqual(calculate_star_rating(16, 10), 1)

    def test_given_unknown_optimal_when_rating_then_three(self):
        self.assertEqual(calculate_star_rating(5, None), 3)
        self.assertEqual(calculate_star_rating(500, None), 3)

    def test_given_zero_optimal_when_moves_made_then_one(self):
        self.assertEqual(calculate_star_rating(0, 0), 3)
        self.assertEqual(calculate_star_rating(2, 0), 1)

    def test_given_stars_when_message_then_text(self):
        self.assertEqual(star_rating_message(3), 'Perfect! Optimal solution!')
        self.assertEqual(star_rating_message(2), 'Great job!')
        self.assertEqual(star_rating_message(1), 'Level Complete!')


if __name__ == '__main__':
    unittest.main(verbosity=2)
