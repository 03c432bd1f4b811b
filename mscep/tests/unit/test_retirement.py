import pyomo.common.unittest as unittest

from mscep.retirement import get_retirement_stage


# Golden values from stepping through the recurrence by hand.
# lifetime: [retirement stage at current stage 1, 2, ...]
uniform_lengths = [10, 10, 10, 10]
uniform_golden = {
    -3: [1, 2, 3, 4],
    0: [1, 2, 3, 4],
    5: [0, 1, 2, 3],
    10: [0, 1, 2, 3],
    15: [0, 0, 1, 2],
    20: [0, 0, 1, 2],
    25: [0, 0, 0, 1],
    30: [0, 0, 0, 1],
    40: [0, 0, 0, 0],
    60: [0, 0, 0, 0],
}

uneven_lengths = [5, 10, 15]
uneven_golden = {
    1: [0, 1, 2],
    5: [0, 1, 2],
    12: [0, 0, 2],
    12.5: [0, 0, 2],
    20: [0, 0, 1],
    25: [0, 0, 1],
    30: [0, 0, 0],
}


class TestRetirementStage(unittest.TestCase):
    def test_uniform_stage_lengths(self):
        for lifetime, expected in uniform_golden.items():
            computed = [
                get_retirement_stage(p, lifetime, uniform_lengths)
                for p in range(1, len(uniform_lengths) + 1)
            ]
            self.assertEqual(computed, expected, msg=f"lifetime {lifetime}")

    def test_uneven_stage_lengths(self):
        for lifetime, expected in uneven_golden.items():
            computed = [
                get_retirement_stage(p, lifetime, uneven_lengths)
                for p in range(1, len(uneven_lengths) + 1)
            ]
            self.assertEqual(computed, expected, msg=f"lifetime {lifetime}")

    def test_lifetime_25_over_ten_year_stages(self):
        # 10 and 20 years elapsed are both short of 25
        self.assertEqual(get_retirement_stage(1, 25, uniform_lengths), 0)
        self.assertEqual(get_retirement_stage(2, 25, uniform_lengths), 0)
        # 40 years elapsed: 15 remaining covers stage 1, then 5 < 10 stops
        self.assertEqual(get_retirement_stage(4, 25, uniform_lengths), 1)

    def test_monotonic_in_stage_and_lifetime(self):
        for lengths in (uniform_lengths, uneven_lengths, [1, 7, 3, 12, 5]):
            for lifetime in range(-5, 50):
                stages = [
                    get_retirement_stage(p, lifetime, lengths)
                    for p in range(1, len(lengths) + 1)
                ]
                self.assertEqual(stages, sorted(stages))
                for p, ret_stage in enumerate(stages, start=1):
                    self.assertGreaterEqual(ret_stage, 0)
                    self.assertLessEqual(ret_stage, p)
                    self.assertLessEqual(
                        get_retirement_stage(p, lifetime + 1, lengths), ret_stage
                    )

    def test_long_lifetime_never_retires(self):
        for p in range(1, 5):
            self.assertEqual(get_retirement_stage(p, sum(uniform_lengths), uniform_lengths), 0)

    def test_non_positive_lifetime_retires_everything(self):
        for p in range(1, 5):
            self.assertEqual(get_retirement_stage(p, 0, uniform_lengths), p)
            self.assertEqual(get_retirement_stage(p, -10, uniform_lengths), p)

    def test_later_stage_lengths_are_ignored(self):
        self.assertEqual(
            get_retirement_stage(2, 10, [10, 10]),
            get_retirement_stage(2, 10, [10, 10, 99, 1]),
        )

    def test_inputs_are_not_modified(self):
        lengths = [10, 10, 10]
        get_retirement_stage(3, 12, lengths)
        self.assertEqual(lengths, [10, 10, 10])
        self.assertEqual(get_retirement_stage(3, 12, tuple(lengths)), 1)

    def test_stage_out_of_range(self):
        with self.assertRaises(ValueError):
            get_retirement_stage(0, 10, uniform_lengths)
        with self.assertRaises(ValueError):
            get_retirement_stage(5, 10, uniform_lengths)
