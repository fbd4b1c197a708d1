# This file is part of https://github.com/Turku-Quantum-Optics/hops
#
# Copyright (c) 2024-2025, Turku Quantum Optics
#
# Licensed under the BSD 3-Clause License, see accompanying LICENSE,
# and README.md for further information.

import logging

import numpy as np

from scipy.integrate import RK23, RK45, DOP853
from typing import Callable, Iterator

from .ADOs import ADOState
from .config import ODEOptions
from .errors import IterationBudgetExceeded, IntegrationFailed
from .progress_management import NullProgressBar, ProgressReporter
from .recorder import TrajectoryRecorder
from .trajectory import Trajectory

log = logging.getLogger(__name__)

# Adaptive step Runge-Kutta solvers. Basically the ones
# provided by Scipy
class AdaptiveStepRK23(RK23): ...

# Dormand-Prince 5(4)
class AdaptiveStepRK45(RK45): ...

class AdaptiveStepDOP853(DOP853): ...

SOLVERS: dict[str, type] = {
    "DP5": AdaptiveStepRK45,
    "RK45": AdaptiveStepRK45,
    "RK23": AdaptiveStepRK23,
    "DOP853": AdaptiveStepDOP853,
}

class AdaptiveODEIntegrator:
    """Integrates dy/dt = fun(t, y) across an increasing list of time points.

    The stepper is bounded at every requested time point so it lands on it
    exactly; in between it picks its own step sizes to satisfy reltol and
    abstol. The last step size proposed before landing on a time point is used
    as the first step of the next interval. Every accepted step counts against
    maxiters.
    """
    fun: Callable[[float, np.ndarray], np.ndarray]
    options: ODEOptions
    # Accepted steps so far
    n_steps: int = 0

    _h_abs: float | None = None

    def __init__(self, fun: Callable[[float, np.ndarray], np.ndarray], options: ODEOptions | None = None,
                 recorder: TrajectoryRecorder | None = None, progress: ProgressReporter | None = None):
        self.fun = fun
        self.options = options if options is not None else ODEOptions()
        self.recorder = recorder
        self.progress = progress if progress is not None else NullProgressBar()
        self.solver_class = SOLVERS[self.options.solver]
        self.n_steps = 0
        self._h_abs = None

    def integrate(self, t_list: np.ndarray, y0: np.ndarray, step_callback: Callable[[float, np.ndarray], None] | None = None) -> Iterator[tuple[float, np.ndarray]]:
        """Yield (t, y) for every time point after t_list[0], in order.

        step_callback, if given, receives every accepted internal step.
        """
        y = np.array(y0, dtype=complex, copy=True)
        for t_start, t_end in zip(t_list[:-1], t_list[1:]):
            y = self.advance(float(t_start), float(t_end), y, step_callback)
            yield float(t_end), y

    def advance(self, t_start: float, t_end: float, y: np.ndarray, step_callback: Callable[[float, np.ndarray], None] | None = None) -> np.ndarray:
        extra = dict(self.options.extra)
        first_step = extra.pop("first_step", None)
        if self._h_abs is not None:
            first_step = self._h_abs
        if first_step is not None:
            first_step = min(first_step, t_end - t_start)

        solver = self.solver_class(self.fun, t_start, y, t_end,
                                   rtol=self.options.reltol, atol=self.options.abstol,
                                   first_step=first_step, **extra)
        while solver.status == "running":
            if self.n_steps >= self.options.maxiters:
                raise IterationBudgetExceeded(self.options.maxiters, solver.t, t_end)
            message = solver.step()
            if solver.status == "failed":
                raise IntegrationFailed(solver.t, message)
            self.n_steps += 1
            # The landing step is clipped to t_end, its proposal is not carried over
            if solver.status == "running":
                self._h_abs = solver.h_abs
            if step_callback is not None:
                step_callback(solver.t, solver.y)
        log.debug("Reached t = %g after %d steps", t_end, self.n_steps)
        return np.array(solver.y, dtype=complex, copy=True)

    def run(self, ados: ADOState, t_list: np.ndarray, trajectory: Trajectory | None = None) -> Trajectory:
        """Evolve `ados` (the state at t_list[0]) to every later time point.

        If `trajectory` is None the initial state is appended to a fresh one
        (and recorded); otherwise the caller has already done so.
        """
        if trajectory is None:
            trajectory = Trajectory()
            trajectory.append(float(t_list[0]), ados)
            if self.recorder is not None:
                self.recorder.record(str(float(t_list[0])), ados)

        step_callback = None
        if self.options.save_everystep:
            def step_callback(t, y):
                trajectory.intermediate.append((t, ADOState(y, ados.dim, ados.N, ados.parity)))

        for t, y in self.integrate(t_list, ados.data, step_callback):
            # save the ADOs
            current = ADOState(y, ados.dim, ados.N, ados.parity)
            trajectory.append(t, current)
            if self.recorder is not None:
                self.recorder.record(str(t), current)
            self.progress.advance()
        return trajectory
