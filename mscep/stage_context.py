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
# Stage model context: component registration and objective accumulation

import logging

from pyomo.environ import (
    Block,
    ConcreteModel,
    Constraint,
    Expression,
    Objective,
    Param,
    PositiveIntegers,
    RangeSet,
    minimize,
    Var,
    value,
)

logger = logging.getLogger(__name__)


class ObjectiveAccumulator:
    """Additive cost total that each capacity category contributes a term to.

    Contributions are recorded by name so they can be reported per category;
    the running total lives on the model as the named expression ``eObj``.
    """

    def __init__(self, model, name="eObj"):
        model.add_component(name, Expression(expr=0))
        self.expression = model.component(name)
        self.contributions = {}

    def add(self, name, expr):
        if name in self.contributions:
            raise ValueError(f"Objective already has a contribution named {name}")
        self.contributions[name] = expr
        self.expression.set_value(self.expression.expr + expr)

    def value(self):
        return value(self.expression)

    def contribution_values(self):
        return {name: value(expr) for name, expr in self.contributions.items()}


class StageModelContext:
    """Everything a category builder may touch while building one stage.

    Wraps the Pyomo model being built together with the multi-stage settings
    and the shared objective accumulator. Builders register their components
    through this object rather than reaching into the model directly.
    """

    def __init__(self, settings, model=None):
        """
        :param settings: MultiStageSettings for the stage being built
        :param model: Pyomo model to build into; a new ConcreteModel by default
        """
        self.settings = settings
        self.model = ConcreteModel() if model is None else model
        self.model.stages = RangeSet(settings.num_stages, doc="Set of model stages")
        self.model.currentStage = Param(
            initialize=settings.current_stage, within=PositiveIntegers
        )
        self.objective = ObjectiveAccumulator(self.model)
        self.registry = []
        self.category_blocks = {}

    @property
    def cur_stage(self):
        return self.settings.current_stage

    def add_category_block(self, name, category):
        """Create the block holding one capacity category's components."""
        if self.model.component(name) is not None:
            raise ValueError(f"Category block {name} is already built on this model")
        self.model.add_component(name, Block())
        blk = self.model.component(name)
        blk.category = category
        self.category_blocks[category] = blk
        return blk

    def register_component(self, block, name, component):
        """Add a component to a category block and record its full name."""
        block.add_component(name, component)
        component = block.component(name)
        self.registry.append(component.name)
        return component

    def register_variable(self, block, name, component):
        if not isinstance(component, Var):
            raise TypeError(f"{name} is a {type(component).__name__}, not a Var")
        return self.register_component(block, name, component)

    def register_constraint(self, block, name, component):
        if not isinstance(component, Constraint):
            raise TypeError(f"{name} is a {type(component).__name__}, not a Constraint")
        return self.register_component(block, name, component)

    def accumulate_objective(self, name, expr):
        logger.debug("Adding %s to the objective", name)
        self.objective.add(name, expr)

    def declare_objective(self):
        """Minimize the accumulated cost total."""
        self.model.totalCostObjective = Objective(
            expr=self.objective.expression, sense=minimize
        )
        return self.model.totalCostObjective
