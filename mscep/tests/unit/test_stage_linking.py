import pyomo.common.unittest as unittest

import json
from pathlib import Path

from pyomo.environ import value

from mscep.mscep_data import CapacityExpansionData
from mscep.mscep_model import MultiStageCapacityModel
from mscep.multi_stage_settings import MultiStageSettings
from mscep.stage_linking import PriorStageSnapshot, capture_stage_snapshot


# Helper functions
def read_three_stage_data():
    dataObject = CapacityExpansionData()
    dataObject.load_csv(Path(__file__).parents[2] / "data" / "three_stage_resources.csv")
    return dataObject


def three_stage_settings(current_stage=1):
    return MultiStageSettings(
        num_stages=3, current_stage=current_stage, stage_lengths=[10, 10, 10]
    )


def first_stage_decisions():
    # Stage 1 model with hand-picked decision values in place of a solve
    modObject = MultiStageCapacityModel(
        data=read_three_stage_data(), settings=three_stage_settings()
    )
    modObject.create_model()
    for blk in modObject.context.category_blocks.values():
        for y in blk.resources:
            blk.existingCapacity[y].set_value(value(blk.existingCapacityInput[y]))
    discharge = modObject.model.dischargeCapacity
    discharge.newCapacity["solar_pv"].set_value(100)
    discharge.newCapacityTrack["solar_pv", 1].set_value(100)
    discharge.retiredCapacity["coal_existing"].set_value(1)
    discharge.retiredCapacityTrack["coal_existing", 1].set_value(1)
    modObject.model.energyCapacity.newCapacity["battery"].set_value(50)
    modObject.model.energyCapacity.newCapacityTrack["battery", 1].set_value(50)
    return modObject


class TestPriorStageSnapshot(unittest.TestCase):
    def test_capture_stage_snapshot(self):
        modObject = first_stage_decisions()
        snapshot = capture_stage_snapshot(modObject.model)
        self.assertEqual(snapshot.stage, 2)
        self.assertEqual(set(snapshot.existing_capacity), {"discharge", "charge", "energy"})

        existing = snapshot.existing_capacity["discharge"]
        self.assertAlmostEqual(existing["solar_pv"], 300)
        # One retired block of 300 MW
        self.assertAlmostEqual(existing["coal_existing"], 900)
        self.assertAlmostEqual(existing["nuclear_existing"], 1000)
        self.assertAlmostEqual(snapshot.existing_capacity["energy"]["battery"], 450)
        self.assertAlmostEqual(snapshot.existing_capacity["charge"]["pumped_hydro"], 280)

        new_track = snapshot.new_capacity_track["discharge"]
        self.assertEqual({p for (_, p) in new_track}, {1})
        self.assertAlmostEqual(new_track["solar_pv", 1], 100)
        self.assertAlmostEqual(new_track["natural_gas_cc", 1], 0)
        self.assertAlmostEqual(
            snapshot.retired_capacity_track["discharge"]["coal_existing", 1], 1
        )

    def test_snapshot_seeds_next_stage(self):
        modObject = first_stage_decisions()
        snapshot = capture_stage_snapshot(modObject.model)
        nextObject = MultiStageCapacityModel(
            data=modObject.data,
            settings=modObject.settings.for_stage(2),
            snapshot=snapshot,
        )
        nextObject.create_model()
        discharge = nextObject.model.dischargeCapacity
        self.assertAlmostEqual(value(discharge.existingCapacityInput["solar_pv"]), 300)
        self.assertAlmostEqual(value(discharge.newCapacityTrackPrior["solar_pv", 1]), 100)
        self.assertAlmostEqual(
            value(discharge.retiredCapacityTrackPrior["coal_existing", 1]), 1
        )
        energy = nextObject.model.energyCapacity
        self.assertAlmostEqual(value(energy.existingCapacityInput["battery"]), 450)
        self.assertAlmostEqual(value(energy.newCapacityTrackPrior["battery", 1]), 50)

    def test_dict_round_trip(self):
        snapshot = PriorStageSnapshot(
            existing_capacity={"discharge": {"gas": 400.0, "wind": 50.0}},
            new_capacity_track={"discharge": {("gas", 1): 2.0, ("gas", 2): 1.0}},
            retired_capacity_track={"energy": {("battery", 1): 20.0}},
            stage=3,
        )
        restored = PriorStageSnapshot.from_dict(json.loads(json.dumps(snapshot.to_dict())))
        self.assertEqual(restored.stage, 3)
        self.assertEqual(restored.existing_capacity["discharge"], {"gas": 400.0, "wind": 50.0})
        self.assertEqual(
            restored.new_capacity_track["discharge"], {("gas", 1): 2.0, ("gas", 2): 1.0}
        )
        self.assertEqual(
            restored.retired_capacity_track["energy"], {("battery", 1): 20.0}
        )
        self.assertEqual(restored.existing_capacity["energy"], {})

    def test_dict_round_trip_integer_ids(self):
        snapshot = PriorStageSnapshot(
            existing_capacity={"discharge": {7: 400.0}},
            new_capacity_track={"discharge": {(7, 1): 2.0}},
            retired_capacity_track={"discharge": {(7, 1): 1.0}},
            stage=2,
        )
        restored = PriorStageSnapshot.from_dict(json.loads(json.dumps(snapshot.to_dict())))
        self.assertEqual(restored.existing_capacity["discharge"], {7: 400.0})
        self.assertEqual(restored.new_capacity_track["discharge"], {(7, 1): 2.0})
        self.assertEqual(restored.retired_capacity_track["discharge"], {(7, 1): 1.0})
        restored.validate("discharge", [7], 2)

    def test_validate(self):
        snapshot = PriorStageSnapshot(
            existing_capacity={"discharge": {"gas": 400.0}},
            new_capacity_track={"discharge": {("gas", 1): 2.0}},
        )
        snapshot.validate("discharge", ["gas", "wind"], 2)
        # Nothing is given for other categories
        snapshot.validate("charge", [], 2)
        with self.assertRaises(ValueError):
            snapshot.validate("discharge", ["wind"], 2)
        # Stage 1 has no prior stages to pin
        with self.assertRaises(ValueError):
            snapshot.validate("discharge", ["gas"], 1)

        snapshot.stage = 3
        with self.assertRaises(ValueError):
            snapshot.validate("discharge", ["gas"], 2)
        snapshot.validate("discharge", ["gas"], 3)

    def test_validate_stage_zero(self):
        snapshot = PriorStageSnapshot(
            retired_capacity_track={"charge": {("hydrogen", 0): 1.0}}
        )
        with self.assertRaises(ValueError):
            snapshot.validate("charge", ["hydrogen"], 2)
