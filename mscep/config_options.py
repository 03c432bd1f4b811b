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

from pyomo.common.config import (
    ConfigBlock,
    ConfigValue,
    NonNegativeFloat,
    PositiveFloat,
    PositiveInt,
    Bool,
)


def _stage_length_list(val):
    """Domain validator for ordered stage lengths (years)."""
    lengths = tuple(float(length) for length in val)
    for length in lengths:
        if length <= 0:
            raise ValueError(f"Stage lengths must be positive, got {length}")
    return lengths


def _get_multi_stage_config():
    CONFIG = ConfigBlock("MultiStageSettingsConfig")

    CONFIG.declare(
        "num_stages",
        ConfigValue(
            default=1,
            domain=PositiveInt,
            description="Number of model stages in the planning horizon.",
        ),
    )
    CONFIG.declare(
        "current_stage",
        ConfigValue(
            default=1,
            domain=PositiveInt,
            description="Stage currently being built (1-indexed).",
        ),
    )
    CONFIG.declare(
        "stage_lengths",
        ConfigValue(
            default=(),
            domain=_stage_length_list,
            description="Ordered stage lengths in years, one per stage.",
        ),
    )
    CONFIG.declare(
        "discount_rate",
        ConfigValue(
            default=0.0,
            domain=NonNegativeFloat,
            description="Discount rate (WACC) used for annuitizing stage costs.",
        ),
    )
    CONFIG.declare(
        "opex_multiplier",
        ConfigValue(
            default=None,
            domain=PositiveFloat,
            description="Operational cost multiplier for the current stage. "
            "Computed from the stage length and discount rate when not given.",
        ),
    )
    return CONFIG


def _get_model_config():
    CONFIG = ConfigBlock("MSCEPModelConfig")

    CONFIG.declare(
        "declare_objective",
        ConfigValue(
            default=True,
            domain=Bool,
            description="Declare a minimization objective over the accumulated cost total.",
        ),
    )
    return CONFIG


def _add_storage_configs(CONFIG):
    CONFIG.declare(
        "include_charge",
        ConfigValue(
            default=True,
            domain=Bool,
            description="Build charge capacity linkage for asymmetric storage resources.",
        ),
    )
    CONFIG.declare(
        "include_energy",
        ConfigValue(
            default=True,
            domain=Bool,
            description="Build energy capacity linkage for storage resources.",
        ),
    )
