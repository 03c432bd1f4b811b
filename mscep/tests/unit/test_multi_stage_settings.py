import pyomo.common.unittest as unittest

from mscep.multi_stage_settings import MultiStageSettings, opex_multiplier


class TestOpexMultiplier(unittest.TestCase):
    def test_undiscounted(self):
        self.assertAlmostEqual(opex_multiplier(10, 0.0), 10)
        # Partial years are counted as whole years
        self.assertAlmostEqual(opex_multiplier(2.5, 0.0), 3)

    def test_discounted(self):
        self.assertAlmostEqual(opex_multiplier(2, 0.1), 1 + 1 / 1.1)
        self.assertAlmostEqual(opex_multiplier(1, 0.5), 1)


class TestMultiStageSettings(unittest.TestCase):
    def test_settings(self):
        settings = MultiStageSettings(
            num_stages=3, current_stage=2, stage_lengths=[5, 10, 15]
        )
        self.assertEqual(settings.num_stages, 3)
        self.assertEqual(settings.current_stage, 2)
        self.assertEqual(settings.stage_lengths, (5.0, 10.0, 15.0))
        self.assertEqual(settings.current_stage_length, 10)
        self.assertEqual(settings.discount_rate, 0.0)
        self.assertAlmostEqual(settings.opex_multiplier, 10)

    def test_settings_from_dict(self):
        settings = MultiStageSettings(
            {"num_stages": 2, "stage_lengths": [10, 10], "discount_rate": 0.05},
            opex_multiplier=4.0,
        )
        self.assertEqual(settings.current_stage, 1)
        self.assertEqual(settings.opex_multiplier, 4.0)

    def test_for_stage(self):
        settings = MultiStageSettings(
            num_stages=2, stage_lengths=[10, 20], opex_multiplier=4.0
        )
        next_settings = settings.for_stage(2)
        self.assertEqual(next_settings.current_stage, 2)
        self.assertEqual(next_settings.stage_lengths, settings.stage_lengths)
        self.assertAlmostEqual(next_settings.opex_multiplier, 20)
        self.assertEqual(settings.current_stage, 1)
        with self.assertRaises(ValueError):
            settings.for_stage(3)

    def test_invalid_settings(self):
        with self.assertRaises(ValueError):
            MultiStageSettings(num_stages=2, current_stage=3, stage_lengths=[10, 10])
        with self.assertRaises(ValueError):
            MultiStageSettings(num_stages=3, stage_lengths=[10, 10])
        with self.assertRaises(ValueError):
            MultiStageSettings(num_stages=2, stage_lengths=[10, -5])
        with self.assertRaises(ValueError):
            MultiStageSettings(num_stages=1, current_stage=0, stage_lengths=[10])
        with self.assertRaises(ValueError):
            MultiStageSettings(num_stages=1, stage_lengths=[10], horizon=30)
