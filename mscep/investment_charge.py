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
# Storage charge capacity linkage (asymmetric charge/discharge storage)

import logging

from mscep.capacity_linkage import CapacityCategory, build_capacity_linkage

logger = logging.getLogger(__name__)


def charge_category(data):
    """Charge capacity category over storage with separate charge capacity.

    Charge capacity is continuous; no resource is scaled by ``cap_size``.
    """
    return CapacityCategory(
        name="charge",
        block_name="chargeCapacity",
        resources=data.stor_asymmetric,
        new_build=data.new_cap_charge,
        retirement=data.ret_cap_charge,
        commit=(),
        existing_key="existing_charge_cap_mw",
        min_cap_key="min_charge_cap_mw",
        max_cap_key="max_charge_cap_mw",
        inv_cost_key="inv_cost_charge_per_mwyr",
        fom_cost_key="fixed_om_cost_charge_per_mwyr",
        min_retired_key="min_retired_charge_cap_mw",
    )


def investment_charge_multi_stage(ctx, data, snapshot=None):
    """Charge capacity linkage for storage with asymmetric charge/discharge.

    Same structure as the discharge linkage, restricted to storage resources
    with independent charge capacity (``stor == 2``) and using the charge
    capacity columns. Minimum forced retirements are taken as given.

    :param ctx: StageModelContext of the stage being built
    :param data: CapacityExpansionData
    :param snapshot: optional PriorStageSnapshot from earlier stages
    :return: the ``chargeCapacity`` block
    """
    logger.info("Storage investment charge multi-stage module")
    return build_capacity_linkage(ctx, data, charge_category(data), snapshot)
