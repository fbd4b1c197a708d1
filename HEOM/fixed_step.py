# This file is part of https://github.com/Turku-Quantum-Optics/hops
#
# Copyright (c) 2024-2025, Turku Quantum Optics
#
# Licensed under the BSD 3-Clause License, see accompanying LICENSE,
# and README.md for further information.

import logging
import numbers

import numpy as np
import scipy as sp

from .ADOs import ADOState
from .progress_management import NullProgressBar, ProgressReporter
from .recorder import TrajectoryRecorder
from .trajectory import Trajectory

log = logging.getLogger(__name__)

class FixedStepIntegrator:
    """Advances ADOs by uniform time steps with a precomputed propagator P ≈ exp(M dt).

    Step n produces ρ_n = P ρ_{n-1} at time n dt; exactly `steps` steps are
    taken. A recorder, if given, has stored a snapshot before the next step
    is computed.
    """
    P: sp.sparse.csr_matrix
    dt: float

    def __init__(self, P: sp.sparse.csr_matrix, dt: float, recorder: TrajectoryRecorder | None = None, progress: ProgressReporter | None = None):
        self.P = P
        self.dt = float(dt)
        self.recorder = recorder
        self.progress = progress if progress is not None else NullProgressBar()

    def run(self, ados: ADOState, steps: int, trajectory: Trajectory | None = None) -> Trajectory:
        """Take `steps` steps from `ados`.

        If `trajectory` is None the initial state is appended to a fresh one
        (and recorded); otherwise the caller has already done so.
        """
        if not isinstance(steps, numbers.Integral):
            raise TypeError(f"The number of steps must be an integer, got {steps!r}")
        if steps < 0:
            raise ValueError(f"The number of steps must be non-negative, got {steps}")
        if trajectory is None:
            trajectory = Trajectory()
            trajectory.append(0.0, ados)
            if self.recorder is not None:
                self.recorder.record("0", ados)

        rho_vector = np.array(ados.data, dtype=complex, copy=True)
        for n in range(1, steps + 1):
            rho_vector = self.P @ rho_vector
            t = n * self.dt

            # save the ADOs
            current = ADOState(rho_vector, ados.dim, ados.N, ados.parity)
            trajectory.append(t, current)
            if self.recorder is not None:
                self.recorder.record(str(t), current)
            self.progress.advance()
        log.debug("Took %d steps of dt = %g", steps, self.dt)
        return trajectory
