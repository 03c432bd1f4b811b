#################################################################################
# The Institute for the Design of Advanced Energy Systems Integrated Platform
# Framework (IDAES IP) was produced under the DOE Institute for the
# Design of Advanced Energy Systems (IDAES).
#
# Copyright (c) 2018-2026 by the software owners: The Regents of the
# University of California, through Lawrence Berkeley National Laboratory,
# National Technology & Engineering Solutions of Sandia, LLC, Carnegie Mellon
# University, West Virginia University Research Corporation, et al.
# All rights reserved.  Please see the files COPYRIGHT.md and LICENSE.md
# for full copyright and license information.
#################################################################################

# Multi-Stage Capacity Expansion Planning
# Values passed from a solved stage to the next one

import logging

from pyomo.environ import Block, value

logger = logging.getLogger(__name__)


class PriorStageSnapshot:
    """Carry-in capacity and tracking values realized before a stage.

    All three mappings are keyed by category name ("discharge", "charge",
    "energy"). ``existing_capacity`` maps resource -> carry-in capacity; the
    tracking mappings map (resource, stage) -> realized value. Anything not
    given defaults to the input existing capacity and to zero, respectively.
    """

    def __init__(
        self,
        existing_capacity=None,
        new_capacity_track=None,
        retired_capacity_track=None,
        stage=None,
    ):
        """
        :param stage: the stage this snapshot seeds, if known
        """
        self.existing_capacity = existing_capacity or {}
        self.new_capacity_track = new_capacity_track or {}
        self.retired_capacity_track = retired_capacity_track or {}
        self.stage = stage

    def validate(self, category, resources, cur_stage):
        """Check that every entry for ``category`` addresses a valid slot."""
        if self.stage is not None and self.stage != cur_stage:
            raise ValueError(
                f"Snapshot seeds stage {self.stage} but stage {cur_stage} is being built"
            )
        universe = set(resources)
        outside = set(self.existing_capacity.get(category, {})) - universe
        for track in (self.new_capacity_track, self.retired_capacity_track):
            for (y, p) in track.get(category, {}):
                if y not in universe:
                    outside.add(y)
                if p < 1 or p >= cur_stage:
                    raise ValueError(
                        f"Snapshot holds a {category} tracking value for stage {p}; "
                        f"only stages before {cur_stage} can be pinned"
                    )
        if outside:
            logger.error(
                "Snapshot refers to %s resources outside the universe: %s",
                category,
                sorted(outside),
            )
            raise ValueError(
                f"Resources {sorted(outside)} are not part of the {category} "
                f"resource universe"
            )

    def to_dict(self):
        """Plain-dict form with one record per value, json friendly.

        Resource ids are stored as record values rather than dict keys so
        integer ids survive a json round trip.
        """
        result = {}
        categories = (
            set(self.existing_capacity)
            | set(self.new_capacity_track)
            | set(self.retired_capacity_track)
        )
        for category in sorted(categories):
            entry = {
                "existing_capacity": [
                    {"resource": y, "value": val}
                    for y, val in self.existing_capacity.get(category, {}).items()
                ]
            }
            for key, track in (
                ("new_capacity_track", self.new_capacity_track),
                ("retired_capacity_track", self.retired_capacity_track),
            ):
                entry[key] = [
                    {"resource": y, "stage": p, "value": val}
                    for (y, p), val in track.get(category, {}).items()
                ]
            result[category] = entry
        return {"stage": self.stage, "categories": result}

    @classmethod
    def from_dict(cls, snapshot_dict):
        snapshot = cls(stage=snapshot_dict.get("stage"))
        for category, entry in snapshot_dict["categories"].items():
            snapshot.existing_capacity[category] = {
                rec["resource"]: rec["value"] for rec in entry["existing_capacity"]
            }
            for key, track in (
                ("new_capacity_track", snapshot.new_capacity_track),
                ("retired_capacity_track", snapshot.retired_capacity_track),
            ):
                track[category] = {
                    (rec["resource"], int(rec["stage"])): rec["value"]
                    for rec in entry[key]
                }
        return snapshot


def capture_stage_snapshot(model):
    """Read a solved stage model and build the snapshot seeding the next stage.

    Carry-in capacity for the next stage is this stage's total capacity;
    tracking values are copied for every stage up to the current one.

    :param model: Pyomo model built by MultiStageCapacityModel
    :return: PriorStageSnapshot for stage ``currentStage + 1``
    """
    cur_stage = value(model.currentStage)
    snapshot = PriorStageSnapshot(stage=cur_stage + 1)
    for blk in model.component_objects(Block, descend_into=False):
        category = getattr(blk, "category", None)
        if category is None:
            continue
        snapshot.existing_capacity[category] = {
            y: value(blk.totalCapacity[y]) for y in blk.resources
        }
        snapshot.new_capacity_track[category] = {
            (y, p): value(blk.newCapacityTrack[y, p])
            for y in blk.resources
            for p in range(1, cur_stage + 1)
        }
        snapshot.retired_capacity_track[category] = {
            (y, p): value(blk.retiredCapacityTrack[y, p])
            for y in blk.resources
            for p in range(1, cur_stage + 1)
        }
        logger.debug("Captured %s capacity at stage %d", category, cur_stage)
    return snapshot
