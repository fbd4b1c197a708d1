# This file is part of https://github.com/Turku-Quantum-Optics/hops
#
# Copyright (c) 2024-2025, Turku Quantum Optics
#
# Licensed under the BSD 3-Clause License, see accompanying LICENSE,
# and README.md for further information.

import logging

from .ADOs import ADOState, Parity
from .liouvillian import LiouvillianModel
from .config import PropagatorOptions, ODEOptions
from .propagator import PropagatorBuilder, propagator
from .fixed_step import FixedStepIntegrator
from .ODE_solvers import AdaptiveODEIntegrator, SOLVERS
from .time_dependent import TimeDependentLiouvillianUpdater
from .recorder import TrajectoryRecorder, HDF5Recorder, load_trajectory
from .trajectory import Trajectory
from .evolution import evolution, evolution_propagator, evolution_ode
from .heom_utils import spre, spost, commutator_superoperator
from .log_utils import configure_logging
from .errors import (
    HEOMError,
    ConsistencyError,
    DimensionMismatch,
    AlreadyExistsError,
    IterationBudgetExceeded,
    IntegrationFailed
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ADOState",
    "Parity",
    "LiouvillianModel",
    "PropagatorOptions",
    "ODEOptions",
    "PropagatorBuilder",
    "propagator",
    "FixedStepIntegrator",
    "AdaptiveODEIntegrator",
    "SOLVERS",
    "TimeDependentLiouvillianUpdater",
    "TrajectoryRecorder",
    "HDF5Recorder",
    "load_trajectory",
    "Trajectory",
    "evolution",
    "evolution_propagator",
    "evolution_ode",
    "spre",
    "spost",
    "commutator_superoperator",
    "configure_logging",
    "HEOMError",
    "ConsistencyError",
    "DimensionMismatch",
    "AlreadyExistsError",
    "IterationBudgetExceeded",
    "IntegrationFailed"
]
