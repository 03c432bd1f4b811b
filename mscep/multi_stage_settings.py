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
# Settings shared by every stage of a multi-stage run

import logging
from math import ceil

from mscep.config_options import _get_multi_stage_config

logger = logging.getLogger(__name__)


def opex_multiplier(stage_length, discount_rate):
    """Annuity factor counting every year of a stage, discounted to its first year.

    :param stage_length: stage length in years (rounded up to whole years)
    :param discount_rate: discount rate (WACC)
    :return: sum over i = 0..L-1 of 1 / (1 + discount_rate)^i
    """
    return sum(
        1 / (1 + discount_rate) ** i for i in range(int(ceil(stage_length)))
    )


class MultiStageSettings:
    """Validated multi-stage settings for one stage invocation."""

    def __init__(self, config=None, **kwds):
        """Create settings from keyword arguments or a settings dict.

        :param config: dict (or ConfigBlock) of settings values
        :param kwds: individual settings; override entries in ``config``
        """
        self.config = _get_multi_stage_config()
        if config is not None:
            self.config.set_value(config)
        self.config.set_value(kwds)
        self._validate()

    def _validate(self):
        if self.current_stage > self.num_stages:
            logger.error(
                "Current stage %s exceeds the number of stages %s",
                self.current_stage,
                self.num_stages,
            )
            raise ValueError(
                f"Current stage {self.current_stage} exceeds the declared "
                f"number of stages {self.num_stages}"
            )
        if len(self.stage_lengths) != self.num_stages:
            raise ValueError(
                f"Expected {self.num_stages} stage lengths, got "
                f"{len(self.stage_lengths)}"
            )

    @property
    def num_stages(self):
        return self.config.num_stages

    @property
    def current_stage(self):
        return self.config.current_stage

    @property
    def stage_lengths(self):
        return self.config.stage_lengths

    @property
    def discount_rate(self):
        return self.config.discount_rate

    @property
    def current_stage_length(self):
        return self.stage_lengths[self.current_stage - 1]

    @property
    def opex_multiplier(self):
        if self.config.opex_multiplier is not None:
            return self.config.opex_multiplier
        return opex_multiplier(self.current_stage_length, self.discount_rate)

    def for_stage(self, stage):
        """Return a copy of these settings pointing at another stage.

        An explicitly configured opex multiplier belongs to the current stage
        and is not carried over.
        """
        values = self.config.value()
        values["current_stage"] = stage
        values["opex_multiplier"] = None
        return MultiStageSettings(values)
