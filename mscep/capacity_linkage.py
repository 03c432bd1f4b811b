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
# Capacity linkage shared by the discharge, charge and energy categories

import enum
import logging

from pyomo.environ import (
    Constraint,
    Expression,
    NonNegativeIntegers,
    NonNegativeReals,
    Param,
    Reals,
    Set,
    Var,
)

from mscep.retirement import get_retirement_stage

logger = logging.getLogger(__name__)


class CapacityProfile(enum.Enum):
    """Which capacity decisions a resource has within one category."""

    FIXED_ONLY = "fixed_only"
    BUILD_ONLY = "build_only"
    RETIRE_ONLY = "retire_only"
    BUILD_AND_RETIRE = "build_and_retire"

    @classmethod
    def from_sets(cls, resource, new_build, retirement):
        if resource in new_build and resource in retirement:
            return cls.BUILD_AND_RETIRE
        elif resource in new_build:
            return cls.BUILD_ONLY
        elif resource in retirement:
            return cls.RETIRE_ONLY
        return cls.FIXED_ONLY

    @property
    def builds(self):
        return self in (CapacityProfile.BUILD_ONLY, CapacityProfile.BUILD_AND_RETIRE)

    @property
    def retires(self):
        return self in (CapacityProfile.RETIRE_ONLY, CapacityProfile.BUILD_AND_RETIRE)


class CapacityCategory:
    """Resource universe, eligibility sets and data keys of one capacity category.

    :param name: category name used for objective bookkeeping and snapshots
    :param block_name: name of the model block holding the category
    :param resources: resource universe of the category
    :param new_build: resources eligible for new capacity
    :param retirement: resources eligible for capacity retirements
    :param commit: resources whose decisions are counted in blocks of ``cap_size``
    :param scale_min_retirement: convert minimum forced retirements to blocks
        for ``commit`` resources
    """

    def __init__(
        self,
        name,
        block_name,
        resources,
        new_build,
        retirement,
        commit,
        existing_key,
        min_cap_key,
        max_cap_key,
        inv_cost_key,
        fom_cost_key,
        min_retired_key,
        scale_min_retirement=False,
    ):
        self.name = name
        self.block_name = block_name
        self.resources = list(resources)
        self.new_build = set(new_build)
        self.retirement = set(retirement)
        self.commit = set(commit)
        self.existing_key = existing_key
        self.min_cap_key = min_cap_key
        self.max_cap_key = max_cap_key
        self.inv_cost_key = inv_cost_key
        self.fom_cost_key = fom_cost_key
        self.min_retired_key = min_retired_key
        self.scale_min_retirement = scale_min_retirement

    def validate(self, data):
        universe = set(self.resources)
        for label, members in (
            ("new build", self.new_build),
            ("retirement", self.retirement),
            ("commit", self.commit),
        ):
            outside = members - universe
            if outside:
                logger.error(
                    "%s %s set has resources outside its universe: %s",
                    self.name,
                    label,
                    sorted(outside),
                )
                raise ValueError(
                    f"Resources {sorted(outside)} in the {self.name} {label} set "
                    f"are not part of the {self.name} resource universe"
                )
        unknown = universe - set(data.resources)
        if unknown:
            raise ValueError(f"Resources {sorted(unknown)} have no resource data")

    def profiles(self):
        return {
            y: CapacityProfile.from_sets(y, self.new_build, self.retirement)
            for y in self.resources
        }


def build_capacity_linkage(ctx, data, category, snapshot=None):
    """Add one capacity category's variables, expressions and constraints.

    All components are placed on a new block named ``category.block_name``.
    The category's annualized fixed cost, divided by the opex multiplier, is
    added to the context's objective total.

    :param ctx: StageModelContext of the stage being built
    :param data: CapacityExpansionData with the resource attributes
    :param category: CapacityCategory to build
    :param snapshot: optional PriorStageSnapshot with carry-in capacity and
        tracking values realized in earlier stages
    :return: the category block
    """
    m = ctx.model
    settings = ctx.settings
    cur_stage = ctx.cur_stage
    attrs = data.resources

    category.validate(data)
    profiles = category.profiles()
    commit = category.commit

    carry_in = {y: attrs[y][category.existing_key] for y in category.resources}
    new_track_prior = {}
    ret_track_prior = {}
    if snapshot is not None:
        snapshot.validate(category.name, category.resources, cur_stage)
        carry_in.update(snapshot.existing_capacity.get(category.name, {}))
        new_track_prior = dict(snapshot.new_capacity_track.get(category.name, {}))
        ret_track_prior = dict(snapshot.retired_capacity_track.get(category.name, {}))

    ret_stage = {
        y: get_retirement_stage(cur_stage, attrs[y]["lifetime"], settings.stage_lengths)
        for y in category.resources
    }

    min_retired = {}
    for y in category.resources:
        total = sum(
            data.min_retired_capacity(y, category.min_retired_key, p)
            for p in range(1, cur_stage + 1)
        )
        if category.scale_min_retirement and y in commit:
            total = total / attrs[y]["cap_size"]
        min_retired[y] = total

    def scaled(y, expr):
        # Decisions of commit resources count blocks of cap_size
        if y in commit:
            return attrs[y]["cap_size"] * expr
        return expr

    b = ctx.add_category_block(category.block_name, category.name)

    ### Sets ###

    ctx.register_component(b, "resources", Set(initialize=category.resources))
    ctx.register_component(
        b,
        "newBuildResources",
        Set(within=b.resources, initialize=[y for y in b.resources if profiles[y].builds]),
    )
    ctx.register_component(
        b,
        "retirementResources",
        Set(within=b.resources, initialize=[y for y in b.resources if profiles[y].retires]),
    )
    ctx.register_component(
        b,
        "maxCapResources",
        Set(
            within=b.resources,
            initialize=[y for y in b.resources if attrs[y][category.max_cap_key] > 0],
        ),
    )
    ctx.register_component(
        b,
        "minCapResources",
        Set(
            within=b.resources,
            initialize=[y for y in b.resources if attrs[y][category.min_cap_key] > 0],
        ),
    )
    ctx.register_component(
        b, "priorStages", Set(within=m.stages, initialize=list(range(1, cur_stage)))
    )

    ### Parameters ###

    # Carry-in capacity; input data at the first stage, prior stage total after
    ctx.register_component(
        b,
        "existingCapacityInput",
        Param(b.resources, mutable=True, within=Reals, initialize=carry_in),
    )
    # Tracking values realized in earlier stages; zero unless supplied
    ctx.register_component(
        b,
        "newCapacityTrackPrior",
        Param(
            b.resources,
            b.priorStages,
            mutable=True,
            within=Reals,
            default=0,
            initialize=new_track_prior,
        ),
    )
    ctx.register_component(
        b,
        "retiredCapacityTrackPrior",
        Param(
            b.resources,
            b.priorStages,
            mutable=True,
            within=Reals,
            default=0,
            initialize=ret_track_prior,
        ),
    )
    ctx.register_component(
        b,
        "retirementStage",
        Param(b.resources, within=NonNegativeIntegers, initialize=ret_stage),
    )
    ctx.register_component(
        b,
        "minRetiredCapacityCumulative",
        Param(b.resources, within=Reals, initialize=min_retired),
    )

    ### Variables ###

    ctx.register_variable(
        b,
        "newCapacity",
        Var(b.newBuildResources, within=NonNegativeReals, initialize=0),
    )
    ctx.register_variable(
        b,
        "retiredCapacity",
        Var(b.retirementResources, within=NonNegativeReals, initialize=0),
    )
    ctx.register_variable(
        b, "existingCapacity", Var(b.resources, within=NonNegativeReals, initialize=0)
    )
    # Keep track of all new and retired capacity from all stages
    ctx.register_variable(
        b,
        "newCapacityTrack",
        Var(b.resources, m.stages, within=NonNegativeReals, initialize=0),
    )
    ctx.register_variable(
        b,
        "retiredCapacityTrack",
        Var(b.resources, m.stages, within=NonNegativeReals, initialize=0),
    )

    ### Expressions ###

    def total_capacity_rule(b, y):
        profile = profiles[y]
        if profile is CapacityProfile.BUILD_AND_RETIRE:
            return b.existingCapacity[y] + scaled(
                y, b.newCapacity[y] - b.retiredCapacity[y]
            )
        elif profile is CapacityProfile.BUILD_ONLY:
            return b.existingCapacity[y] + scaled(y, b.newCapacity[y])
        elif profile is CapacityProfile.RETIRE_ONLY:
            return b.existingCapacity[y] - scaled(y, b.retiredCapacity[y])
        return b.existingCapacity[y]

    ctx.register_component(
        b, "totalCapacity", Expression(b.resources, rule=total_capacity_rule)
    )

    # Annualized investment cost plus fixed O&M; only O&M without new capacity
    def fixed_cost_rule(b, y):
        fom_cost = attrs[y][category.fom_cost_key] * b.totalCapacity[y]
        if profiles[y].builds:
            inv_cost = attrs[y][category.inv_cost_key]
            return scaled(y, inv_cost * b.newCapacity[y]) + fom_cost
        return fom_cost

    ctx.register_component(b, "fixedCost", Expression(b.resources, rule=fixed_cost_rule))
    ctx.register_component(
        b,
        "totalFixedCost",
        Expression(expr=sum(b.fixedCost[y] for y in b.resources)),
    )
    # Stage fixed costs already span the stage's years; the whole objective is
    # multiplied by the opex multiplier later
    ctx.register_component(
        b,
        "objectiveContribution",
        Expression(expr=(1 / settings.opex_multiplier) * b.totalFixedCost),
    )
    ctx.accumulate_objective(category.name, b.objectiveContribution)

    def new_capacity_current_rule(b, y):
        return b.newCapacity[y] if profiles[y].builds else 0

    def retired_capacity_current_rule(b, y):
        return b.retiredCapacity[y] if profiles[y].retires else 0

    ctx.register_component(
        b, "newCapacityCurrent", Expression(b.resources, rule=new_capacity_current_rule)
    )
    ctx.register_component(
        b,
        "retiredCapacityCurrent",
        Expression(b.resources, rule=retired_capacity_current_rule),
    )

    def retired_capacity_cumulative_rule(b, y):
        return sum(b.retiredCapacityTrack[y, p] for p in range(1, cur_stage + 1))

    # New capacity old enough that it must already be retired
    def new_capacity_aged_rule(b, y):
        return sum(b.newCapacityTrack[y, p] for p in range(1, ret_stage[y] + 1))

    ctx.register_component(
        b,
        "retiredCapacityCumulative",
        Expression(b.resources, rule=retired_capacity_cumulative_rule),
    )
    ctx.register_component(
        b, "newCapacityAged", Expression(b.resources, rule=new_capacity_aged_rule)
    )

    ### Constraints ###

    def existing_capacity_anchor_rule(b, y):
        return b.existingCapacity[y] == b.existingCapacityInput[y]

    ctx.register_constraint(
        b,
        "existingCapacityAnchor",
        Constraint(b.resources, rule=existing_capacity_anchor_rule),
    )

    # Cannot retire more capacity than existing capacity
    def max_retirement_rule(b, y):
        return scaled(y, b.retiredCapacity[y]) <= b.existingCapacity[y]

    ctx.register_constraint(
        b,
        "maxRetirement",
        Constraint(b.retirementResources, rule=max_retirement_rule),
    )

    # Bounds are not reconciled with the carry-in capacity; inconsistent data
    # leaves the stage infeasible
    def max_capacity_rule(b, y):
        return b.totalCapacity[y] <= attrs[y][category.max_cap_key]

    def min_capacity_rule(b, y):
        return b.totalCapacity[y] >= attrs[y][category.min_cap_key]

    ctx.register_constraint(
        b, "maxCapacity", Constraint(b.maxCapResources, rule=max_capacity_rule)
    )
    ctx.register_constraint(
        b, "minCapacity", Constraint(b.minCapResources, rule=min_capacity_rule)
    )

    def new_capacity_track_current_rule(b, y):
        return b.newCapacityTrack[y, cur_stage] == b.newCapacityCurrent[y]

    def retired_capacity_track_current_rule(b, y):
        return b.retiredCapacityTrack[y, cur_stage] == b.retiredCapacityCurrent[y]

    ctx.register_constraint(
        b,
        "newCapacityTrackCurrent",
        Constraint(b.resources, rule=new_capacity_track_current_rule),
    )
    ctx.register_constraint(
        b,
        "retiredCapacityTrackCurrent",
        Constraint(b.resources, rule=retired_capacity_track_current_rule),
    )

    def new_capacity_track_past_rule(b, y, p):
        return b.newCapacityTrack[y, p] == b.newCapacityTrackPrior[y, p]

    def retired_capacity_track_past_rule(b, y, p):
        return b.retiredCapacityTrack[y, p] == b.retiredCapacityTrackPrior[y, p]

    ctx.register_constraint(
        b,
        "newCapacityTrackPast",
        Constraint(b.resources, b.priorStages, rule=new_capacity_track_past_rule),
    )
    ctx.register_constraint(
        b,
        "retiredCapacityTrackPast",
        Constraint(b.resources, b.priorStages, rule=retired_capacity_track_past_rule),
    )

    # Retirements through the current stage cover forced minimums plus all
    # new capacity past its lifetime, in aggregate over vintages
    def lifetime_retirement_rule(b, y):
        return (
            b.newCapacityAged[y] + b.minRetiredCapacityCumulative[y]
            <= b.retiredCapacityCumulative[y]
        )

    ctx.register_constraint(
        b,
        "lifetimeRetirement",
        Constraint(b.resources, rule=lifetime_retirement_rule),
    )

    logger.debug(
        "Built %s capacity linkage for %d resources at stage %d",
        category.name,
        len(category.resources),
        cur_stage,
    )
    return b
