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
# Power generation / discharge capacity linkage

import logging

from mscep.capacity_linkage import CapacityCategory, build_capacity_linkage

logger = logging.getLogger(__name__)


def discharge_category(data):
    """Power/discharge capacity category over every resource.

    Resources eligible for unit commitment build and retire in blocks of
    ``cap_size``; their minimum forced retirements (given in MW) are converted
    to blocks as well.
    """
    return CapacityCategory(
        name="discharge",
        block_name="dischargeCapacity",
        resources=data.resource_ids,
        new_build=data.new_cap,
        retirement=data.ret_cap,
        commit=data.commit,
        existing_key="existing_cap_mw",
        min_cap_key="min_cap_mw",
        max_cap_key="max_cap_mw",
        inv_cost_key="inv_cost_per_mwyr",
        fom_cost_key="fixed_om_cost_per_mwyr",
        min_retired_key="min_retired_cap_mw",
        scale_min_retirement=True,
    )


def investment_discharge_multi_stage(ctx, data, snapshot=None):
    """Total power generation/discharge capacity linkage for one stage.

    Total capacity of resource y at the current stage p is

        totalCapacity[y] = existingCapacity[y]
                           + size[y] * newCapacity[y]
                           - size[y] * retiredCapacity[y]

    where the new and retired terms only appear for resources eligible for
    them and size[y] is ``cap_size`` for unit commitment resources and 1
    otherwise. existingCapacity is a linking variable anchored to the input
    existing capacity at the first stage and to the prior stage's total
    capacity afterwards (taken from ``snapshot``).

    Fixed costs are the annuitized investment cost of new capacity plus fixed
    O&M of total capacity, divided by the opex multiplier before entering the
    objective since they already account for every year of the stage.

    Endogenous retirements use the tracking variables newCapacityTrack[y, p]
    and retiredCapacityTrack[y, p]: retirements through stage p must at least
    equal the user specified minimum retirements plus all capacity built in
    stages whose vintages reach the end of their lifetime by the end of
    stage p (see Lara et al., Deterministic electric power infrastructure
    planning: Mixed-integer programming model and nested decomposition
    algorithm, EJOR 271(3), 2018, eqs. 18-21).

    :param ctx: StageModelContext of the stage being built
    :param data: CapacityExpansionData
    :param snapshot: optional PriorStageSnapshot from earlier stages
    :return: the ``dischargeCapacity`` block
    """
    logger.info("Investment discharge multi-stage module")
    return build_capacity_linkage(ctx, data, discharge_category(data), snapshot)
