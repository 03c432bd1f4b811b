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

from setuptools import setup, find_packages

requires = [
    "pyomo",
    "pandas",
]

setup(
    name="mscep",
    version="0.1.dev0",
    python_requires=">=3.9",
    description="Multi-stage capacity linkage and endogenous retirement constraints",
    packages=find_packages(include=["mscep", "mscep.*"]),
    package_data={"mscep": ["data/*.csv"]},
    install_requires=requires,
    extras_require={
        "tests": ["pytest", "highspy"],
    },
)
