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
# Storage energy capacity linkage

import logging

from mscep.capacity_linkage import CapacityCategory, build_capacity_linkage

logger = logging.getLogger(__name__)


def energy_category(data):
    return CapacityCategory(
        name="energy",
        block_name="energyCapacity",
        resources=data.stor_all,
        new_build=data.new_cap_energy,
        retirement=data.ret_cap_energy,
        commit=(),
        existing_key="existing_cap_mwh",
        min_cap_key="min_cap_mwh",
        max_cap_key="max_cap_mwh",
        inv_cost_key="inv_cost_per_mwhyr",
        fom_cost_key="fixed_om_cost_per_mwhyr",
        min_retired_key="min_retired_energy_cap_mw",
    )


def investment_energy_multi_stage(ctx, data, snapshot=None):
    """Energy (MWh) capacity linkage for all storage resources.

    Same structure as the discharge linkage over every storage resource
    (``stor >= 1``), using the energy capacity columns. The maximum and
    minimum bounds apply to total energy capacity.

    :param ctx: StageModelContext of the stage being built
    :param data: CapacityExpansionData
    :param snapshot: optional PriorStageSnapshot from earlier stages
    :return: the ``energyCapacity`` block
    """
    logger.info("Storage investment energy multi-stage module")
    return build_capacity_linkage(ctx, data, energy_category(data), snapshot)
