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
# Capacity and fixed cost results of a solved stage

import json
import logging
from pathlib import Path

import pandas as pd
from pyomo.environ import value

from mscep.mscep_model import MultiStageCapacityModel
from mscep.stage_linking import PriorStageSnapshot, capture_stage_snapshot

logger = logging.getLogger(__name__)


class CapacityExpansionSolution:
    def __init__(self):
        self.stage = None
        self.capacity = []
        self.fixed_costs = {}
        self.objective_contributions = {}
        self.snapshot = None
        self.termination_condition = None

    def load_from_model(self, stage_model):
        """Collect capacity decisions and fixed costs from a solved stage model."""
        if not isinstance(stage_model, MultiStageCapacityModel):
            logger.warning(
                "Solutions must be loaded from MultiStageCapacityModel objects, not %s"
                % type(stage_model)
            )
            raise ValueError
        if stage_model.model is None:
            raise ValueError(
                "CapacityExpansionSolution objects need a model; call create_model() and solve first."
            )
        m = stage_model.model
        self.stage = stage_model.stage
        tc = getattr(stage_model.results, "termination_condition", None)
        self.termination_condition = None if tc is None else getattr(tc, "name", str(tc))

        self.capacity = []
        self.fixed_costs = {}
        for category, blk in stage_model.context.category_blocks.items():
            self.fixed_costs[category] = value(blk.totalFixedCost)
            for y in blk.resources:
                self.capacity.append(
                    {
                        "category": category,
                        "resource": y,
                        "existing": value(blk.existingCapacity[y]),
                        "new": (
                            value(blk.newCapacity[y]) if y in blk.newBuildResources else 0.0
                        ),
                        "retired": (
                            value(blk.retiredCapacity[y])
                            if y in blk.retirementResources
                            else 0.0
                        ),
                        "total": value(blk.totalCapacity[y]),
                        "fixed_cost": value(blk.fixedCost[y]),
                        "retirement_stage": value(blk.retirementStage[y]),
                    }
                )
        self.objective_contributions = (
            stage_model.context.objective.contribution_values()
        )
        self.snapshot = capture_stage_snapshot(m)

    def capacity_dataframe(self):
        """One row per (category, resource) with capacity decisions and fixed cost."""
        columns = [
            "category",
            "resource",
            "existing",
            "new",
            "retired",
            "total",
            "fixed_cost",
            "retirement_stage",
        ]
        return pd.DataFrame(self.capacity, columns=columns)

    def fixed_cost_by_category(self):
        return pd.Series(self.fixed_costs, name="fixed_cost", dtype=float)

    def read_json(self, filepath):
        # read a json file and recover a stage solution
        json_filepath = Path(filepath)
        with open(json_filepath, "r") as fobj:
            json_read = json.loads(fobj.read())
        results = json_read["results"]
        self.stage = results["stage"]
        self.termination_condition = results["termination_condition"]
        self.capacity = results["capacity"]
        self.fixed_costs = results["fixed_costs"]
        self.objective_contributions = results["objective_contributions"]
        if results["snapshot"] is not None:
            self.snapshot = PriorStageSnapshot.from_dict(results["snapshot"])

    def dump_json(self, filename="./mscep_solution.json"):
        dump_filepath = Path(filename)
        with open(dump_filepath, "w") as fobj:
            json.dump(self._to_dict(), fobj)

    def _to_dict(self):
        return {
            "results": {
                "stage": self.stage,
                "termination_condition": self.termination_condition,
                "capacity": self.capacity,
                "fixed_costs": self.fixed_costs,
                "objective_contributions": self.objective_contributions,
                "snapshot": (
                    None if self.snapshot is None else self.snapshot.to_dict()
                ),
            }
        }
