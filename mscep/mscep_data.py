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
# Resource data and eligibility sets

import logging
from pathlib import Path

import pandas as pd

logger = logging.getLogger(__name__)

# Capacity bounds use -1 for "unconstrained"; any non-positive value works
_resource_defaults = {
    "cap_size": 1,
    "existing_cap_mw": 0,
    "existing_charge_cap_mw": 0,
    "existing_cap_mwh": 0,
    "min_cap_mw": -1,
    "max_cap_mw": -1,
    "min_charge_cap_mw": -1,
    "max_charge_cap_mw": -1,
    "min_cap_mwh": -1,
    "max_cap_mwh": -1,
    "inv_cost_per_mwyr": 0,
    "fixed_om_cost_per_mwyr": 0,
    "inv_cost_charge_per_mwyr": 0,
    "fixed_om_cost_charge_per_mwyr": 0,
    "inv_cost_per_mwhyr": 0,
    "fixed_om_cost_per_mwhyr": 0,
    "new_build": False,
    "can_retire": False,
    "commit": False,
    "stor": 0,
    "min_retired_cap_mw": (),
    "min_retired_charge_cap_mw": (),
    "min_retired_energy_cap_mw": (),
}

_flag_keys = ("new_build", "can_retire", "commit")

_schedule_keys = (
    "min_retired_cap_mw",
    "min_retired_charge_cap_mw",
    "min_retired_energy_cap_mw",
)

_numeric_keys = ("lifetime",) + tuple(
    key
    for key in _resource_defaults
    if key not in _flag_keys and key not in _schedule_keys and key != "stor"
)

# Column names of the tabular (GenX-style) resource input
_column_map = {
    "Cap_Size": "cap_size",
    "Lifetime": "lifetime",
    "Existing_Cap_MW": "existing_cap_mw",
    "Existing_Charge_Cap_MW": "existing_charge_cap_mw",
    "Existing_Cap_MWh": "existing_cap_mwh",
    "Min_Cap_MW": "min_cap_mw",
    "Max_Cap_MW": "max_cap_mw",
    "Min_Charge_Cap_MW": "min_charge_cap_mw",
    "Max_Charge_Cap_MW": "max_charge_cap_mw",
    "Min_Cap_MWh": "min_cap_mwh",
    "Max_Cap_MWh": "max_cap_mwh",
    "Inv_Cost_per_MWyr": "inv_cost_per_mwyr",
    "Fixed_OM_Cost_per_MWyr": "fixed_om_cost_per_mwyr",
    "Inv_Cost_Charge_per_MWyr": "inv_cost_charge_per_mwyr",
    "Fixed_OM_Cost_Charge_per_MWyr": "fixed_om_cost_charge_per_mwyr",
    "Inv_Cost_per_MWhyr": "inv_cost_per_mwhyr",
    "Fixed_OM_Cost_per_MWhyr": "fixed_om_cost_per_mwhyr",
    "New_Build": "new_build",
    "Can_Retire": "can_retire",
    "Commit": "commit",
    "STOR": "stor",
}

_schedule_column_prefix = {
    "min_retired_cap_mw": "Min_Retired_Cap_MW_p",
    "min_retired_charge_cap_mw": "Min_Retired_Charge_Cap_MW_p",
    "min_retired_energy_cap_mw": "Min_Retired_Energy_Cap_MW_p",
}


class CapacityExpansionData:
    """Standard data storage class for multi-stage capacity linkage.

    Resources are kept as a dict of attribute dicts keyed by resource id, in
    insertion order. Eligibility sets follow the GenX naming (NEW_CAP,
    RET_CAP, COMMIT, STOR_ALL, STOR_ASYMMETRIC and their charge/energy
    variants) and are derived from the per-resource flags.
    """

    def __init__(self, resources=None):
        """
        :param resources: optional dict of {resource id: attribute dict}
        """
        self.resources = {}
        if resources is not None:
            for resource, attrs in resources.items():
                self.add_resource(resource, **attrs)

    def add_resource(self, resource, **attrs):
        """Add one resource. ``lifetime`` is required; everything else has a default."""
        if resource in self.resources:
            raise ValueError(f"Resource {resource} is already defined")
        unknown = set(attrs) - set(_resource_defaults) - {"lifetime"}
        if unknown:
            raise ValueError(
                f"Unknown attributes for resource {resource}: {sorted(unknown)}"
            )
        if attrs.get("lifetime") is None:
            logger.error("Resource %s is missing a lifetime", resource)
            raise ValueError(f"Resource {resource} requires a lifetime")

        entry = dict(_resource_defaults)
        entry.update(attrs)
        for key in _flag_keys:
            entry[key] = bool(entry[key])
        entry["stor"] = int(entry["stor"])
        for key in _schedule_keys:
            entry[key] = [float(v) for v in entry[key]]
        for key in _numeric_keys:
            entry[key] = float(entry[key])
        if entry["cap_size"] <= 0:
            raise ValueError(
                f"Resource {resource} has non-positive block size {entry['cap_size']}"
            )
        self.resources[resource] = entry

    def load_dataframe(self, df, resource_column="Resource"):
        """Load resources from a DataFrame using GenX-style column names.

        Per-stage minimum retirement schedules are read from numbered columns,
        e.g. ``Min_Retired_Cap_MW_p1``, ``Min_Retired_Cap_MW_p2``, ... Blank
        cells fall back to the attribute defaults.

        Retirement eligibility is read from a ``Can_Retire`` column. The GenX
        ``New_Build = -1`` marker (neither build nor retire) is also accepted
        and overrides ``Can_Retire``.

        :param df: pandas DataFrame, one row per resource
        :param resource_column: column holding resource ids
        """
        if resource_column not in df.columns:
            raise ValueError(f"Resource data has no '{resource_column}' column")

        schedule_columns = {}
        for key, prefix in _schedule_column_prefix.items():
            columns = [c for c in df.columns if c.startswith(prefix)]
            schedule_columns[key] = sorted(columns, key=lambda c: int(c[len(prefix) :]))

        # tolist() gives python ids; rows of an all-numeric frame are upcast to float
        resource_ids = df[resource_column].tolist()
        for resource, (_, row) in zip(resource_ids, df.iterrows()):
            attrs = {}
            for column, key in _column_map.items():
                if column in df.columns and not pd.isna(row[column]):
                    attrs[key] = row[column]
            if attrs.get("new_build") == -1:
                attrs["new_build"] = False
                attrs["can_retire"] = False
            for key, columns in schedule_columns.items():
                if columns:
                    attrs[key] = [
                        0 if pd.isna(row[column]) else row[column] for column in columns
                    ]
            self.add_resource(resource, **attrs)

        logger.info("Loaded %d resources", len(df))

    def load_csv(self, data_path, resource_column="Resource"):
        """Load resources from a GenX-style csv file.

        :param data_path: path to the csv file
        """
        self.data_path = Path(data_path)
        self.load_dataframe(pd.read_csv(self.data_path), resource_column)

    def min_retired_capacity(self, resource, schedule, stage):
        """Minimum forced retirement of ``resource`` in ``stage`` from ``schedule``.

        Resources without a schedule have no forced retirements. A schedule
        that does not reach ``stage`` is a missing input.
        """
        values = self.resources[resource][schedule]
        if not values:
            return 0.0
        if stage > len(values):
            raise ValueError(
                f"Resource {resource} has {len(values)} entries in {schedule}; "
                f"stage {stage} is not covered"
            )
        return values[stage - 1]

    def _select(self, predicate):
        return [y for y, attrs in self.resources.items() if predicate(attrs)]

    @property
    def resource_ids(self):
        return list(self.resources)

    # Set of all resources eligible for new capacity
    @property
    def new_cap(self):
        return self._select(lambda a: a["new_build"] and a["max_cap_mw"] != 0)

    # Set of all resources eligible for capacity retirements
    @property
    def ret_cap(self):
        return self._select(lambda a: a["can_retire"])

    # Set of all resources eligible for unit commitment
    @property
    def commit(self):
        return self._select(lambda a: a["commit"])

    @property
    def stor_all(self):
        return self._select(lambda a: a["stor"] >= 1)

    # Storage with separate charge and discharge capacity components
    @property
    def stor_asymmetric(self):
        return self._select(lambda a: a["stor"] == 2)

    @property
    def new_cap_charge(self):
        return self._select(
            lambda a: a["stor"] == 2 and a["new_build"] and a["max_charge_cap_mw"] != 0
        )

    @property
    def ret_cap_charge(self):
        return self._select(lambda a: a["stor"] == 2 and a["can_retire"])

    @property
    def new_cap_energy(self):
        return self._select(
            lambda a: a["stor"] >= 1 and a["new_build"] and a["max_cap_mwh"] != 0
        )

    @property
    def ret_cap_energy(self):
        return self._select(lambda a: a["stor"] >= 1 and a["can_retire"])
