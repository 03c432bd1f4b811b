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
# Endogenous lifetime retirement horizon


def get_retirement_stage(cur_stage, lifetime, stage_lengths):
    """Determine the stage before which all newly built capacity must be retired.

    Capacity built in any stage up to and including the returned stage has
    reached the end of its lifetime by the end of ``cur_stage``. A return
    value of 0 means nothing built so far has aged out yet.

    :param cur_stage: current model stage p (1-indexed)
    :param lifetime: resource lifetime in years
    :param stage_lengths: ordered stage lengths in years, covering stages 1..p
    :return: stage index in [0, cur_stage]
    """
    if cur_stage < 1:
        raise ValueError(f"Current stage must be at least 1, got {cur_stage}")
    if cur_stage > len(stage_lengths):
        raise ValueError(
            f"Stage lengths cover {len(stage_lengths)} stages but the current "
            f"stage is {cur_stage}"
        )

    # Years from the start of the horizon to the END of the current stage
    years_from_start = sum(stage_lengths[:cur_stage])
    ret_years = years_from_start - lifetime

    ret_stage = 0
    while ret_stage < cur_stage and ret_years - stage_lengths[ret_stage] >= 0:
        ret_years -= stage_lengths[ret_stage]
        ret_stage += 1

    return ret_stage
