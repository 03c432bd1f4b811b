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
# Capacity linkage and endogenous retirement model for one stage of a
# nested decomposition (cf. Lara et al., EJOR 271(3), 2018)

import logging

from pyomo.common.timing import TicTocTimer

from mscep.config_options import _get_model_config, _add_storage_configs
from mscep.investment_charge import investment_charge_multi_stage
from mscep.investment_discharge import investment_discharge_multi_stage
from mscep.investment_energy import investment_energy_multi_stage
from mscep.mscep_data import CapacityExpansionData
from mscep.multi_stage_settings import MultiStageSettings
from mscep.stage_context import StageModelContext

logger = logging.getLogger(__name__)


class MultiStageCapacityModel:
    """Capacity linkage and lifetime retirement constraints for one model stage."""

    def __init__(self, data=None, settings=None, snapshot=None, config=None):
        """Initialize the stage model object.

        :param data: CapacityExpansionData with every resource
        :param settings: MultiStageSettings, or a dict of settings values
        :param snapshot: PriorStageSnapshot carrying values from earlier stages
        :param config: dict of model configuration options
        """
        self.data = data
        if settings is None or isinstance(settings, MultiStageSettings):
            self.settings = settings
        else:
            self.settings = MultiStageSettings(settings)
        self.snapshot = snapshot
        self.config = _get_model_config()
        _add_storage_configs(self.config)
        if config is not None:
            self.config.set_value(config)
        self.timer = TicTocTimer(logger=logger)
        self.model = None
        self.context = None
        self.results = None

    @property
    def stage(self):
        return self.settings.current_stage

    def create_model(self):
        """Create the concrete Pyomo model for the current stage.

        Every call builds a new model from the current inputs; nothing is
        reused from earlier calls.
        """
        if self.data is None:
            raise ValueError("MultiStageCapacityModel requires resource data")
        if not isinstance(self.data, CapacityExpansionData):
            raise ValueError(
                f"Resource data must be CapacityExpansionData, not {type(self.data)}"
            )
        if self.settings is None:
            raise ValueError("MultiStageCapacityModel requires multi-stage settings")
        if not self.data.resources:
            raise ValueError("Resource data holds no resources")

        self.timer.tic(f"Creating capacity linkage model for stage {self.stage}")
        ctx = StageModelContext(self.settings)

        investment_discharge_multi_stage(ctx, self.data, self.snapshot)
        if self.config["include_charge"] and self.data.stor_asymmetric:
            investment_charge_multi_stage(ctx, self.data, self.snapshot)
        if self.config["include_energy"] and self.data.stor_all:
            investment_energy_multi_stage(ctx, self.data, self.snapshot)

        if self.config["declare_objective"]:
            ctx.declare_objective()

        self.context = ctx
        self.model = ctx.model
        self.timer.toc("Capacity linkage model created")
        return self.model

    def report_model(self, outfile="stage_model_output.txt"):
        """Pretty print the stage model.

        :outfile: file name or open text stream
        """
        if self.model is None:
            raise ValueError("No model to report; call create_model() first")
        if hasattr(outfile, "write"):
            self.model.pprint(ostream=outfile)
            return
        with open(outfile, "w") as outf:
            self.model.pprint(ostream=outf)
