# This file is part of https://github.com/Turku-Quantum-Optics/hops
#
# Copyright (c) 2024-2025, Turku Quantum Optics
#
# Licensed under the BSD 3-Clause License, see accompanying LICENSE,
# and README.md for further information.

"""Time evolution of the auxiliary density operators (ADOs).

Two strategies are available:

- `evolution_propagator`: builds P ≈ exp(M dt) once and applies it `steps`
  times, giving the ADOs at t = 0, dt, ..., steps * dt.
- `evolution_ode`: integrates dρ/dt = M ρ (or L(t) ρ with a time-dependent
  system Hamiltonian) with an adaptive Runge-Kutta method, giving the ADOs
  at every time in `tlist`.

The initial state is either the density matrix of the system (all ADOs
beyond the reduced density matrix start from zero) or the ADOState of a
previous run. If `filename` is given, every snapshot is also written to the
HDF5 file "<filename>.h5", which must not exist yet.
"""

import logging
import numbers

import numpy as np

from typing import Any, Callable

from .ADOs import ADOState
from .ODE_solvers import AdaptiveODEIntegrator
from .config import ODEOptions, PropagatorOptions
from .fixed_step import FixedStepIntegrator
from .liouvillian import LiouvillianModel
from .progress_management import make_progress
from .propagator import PropagatorBuilder
from .recorder import HDF5Recorder, TrajectoryRecorder
from .time_dependent import TimeDependentLiouvillianUpdater
from .trajectory import Trajectory
from .validation import check_time_grid, prepare_initial_state

log = logging.getLogger(__name__)

__all__ = ["evolution", "evolution_propagator", "evolution_ode"]

def _say(verbose: bool, message: str, *args):
    log.log(logging.INFO if verbose else logging.DEBUG, message, *args)

def _open_recorder(filename: str, recorder: TrajectoryRecorder | None) -> TrajectoryRecorder | None:
    if filename and recorder is not None:
        raise ValueError("Give either filename or recorder, not both")
    if filename:
        return HDF5Recorder(filename)
    return recorder

def evolution_propagator(M: LiouvillianModel, initial: ADOState | np.ndarray, dt: float, steps: int, *,
                         threshold: float = 1.0e-6,
                         nonzero_tol: float = 1.0e-14,
                         verbose: bool = True,
                         filename: str = "",
                         recorder: TrajectoryRecorder | None = None) -> Trajectory:
    """ADOs at t = 0, dt, 2 dt, ..., steps * dt from repeated application of exp(M dt).

    Parameters
    ----------
    M : LiouvillianModel
        The HEOM generator.
    initial : ADOState or array_like
        Initial ADOs, or the initial density matrix of the system.
    dt : float
        Time step.
    steps : int
        Number of time steps.
    threshold : float
        Relative size of the last Taylor term kept in exp(M dt). Defaults to 1e-6.
    nonzero_tol : float
        Entries of the propagator below this magnitude are dropped. Defaults to 1e-14.
    verbose : bool
        Show a progress bar and log at INFO level. Defaults to True.
    filename : str
        Save every snapshot into "<filename>.h5", keyed by its time.
    recorder : TrajectoryRecorder
        Custom sink for the snapshots (instead of filename).

    Returns
    -------
    Trajectory
        steps + 1 ADOState, the first being the initial state.
    """
    options = PropagatorOptions(threshold=threshold, nonzero_tol=nonzero_tol)
    dt = float(dt)
    if not dt > 0:
        raise ValueError(f"The time step must be positive, got {dt}")
    if not isinstance(steps, numbers.Integral):
        raise TypeError(f"The number of steps must be an integer, got {steps!r}")
    if steps < 0:
        raise ValueError(f"The number of steps must be non-negative, got {steps}")

    ados = prepare_initial_state(M, initial)
    recorder = _open_recorder(filename, recorder)

    trajectory = Trajectory()
    trajectory.append(0.0, ados)
    if recorder is not None:
        recorder.record("0", ados)

    _say(verbose, "Generating propagator...")
    builder = PropagatorBuilder(options)
    P = builder.build(M, dt)
    _say(verbose, "Generating propagator...[DONE] (%d terms, nnz = %d)", builder.n_terms, P.nnz)

    _say(verbose, "Solving time evolution for auxiliary density operators...")
    progress = make_progress(verbose)
    progress.start(steps + 1)
    progress.advance()
    try:
        FixedStepIntegrator(P, dt, recorder, progress).run(ados, steps, trajectory)
    finally:
        progress.finish()
    _say(verbose, "Solving time evolution for auxiliary density operators...[DONE]")
    return trajectory

def evolution_ode(M: LiouvillianModel, initial: ADOState | np.ndarray, tlist,
                  H: Callable[[Any, float], np.ndarray] | None = None,
                  params: Any = (), *,
                  solver: str = "DP5",
                  reltol: float = 1.0e-6,
                  abstol: float = 1.0e-8,
                  maxiters: int | float = 1e5,
                  save_everystep: bool = False,
                  verbose: bool = True,
                  filename: str = "",
                  recorder: TrajectoryRecorder | None = None,
                  **solver_options) -> Trajectory:
    """ADOs at every time in `tlist` from adaptive integration of the HEOM.

    Parameters
    ----------
    M : LiouvillianModel
        The HEOM generator. With `H` it must not contain the time-dependent
        part of the system Hamiltonian.
    initial : ADOState or array_like
        Initial ADOs, or the initial density matrix of the system.
    tlist : array_like
        Strictly increasing times at which the ADOs are returned.
    H : callable, optional
        Time-dependent part of the system Hamiltonian, called as H(params, t).
    params : optional
        Passed to H unchanged. Defaults to ().
    solver : str
        "DP5" (Dormand-Prince 5(4), the default, alias "RK45"), "RK23" or "DOP853".
    reltol, abstol : float
        Tolerances of the adaptive stepper. Default to 1e-6 and 1e-8.
    maxiters : int
        Maximum number of accepted steps. Defaults to 1e5.
    save_everystep : bool
        Keep every accepted step in `Trajectory.intermediate`. Defaults to False.
    verbose : bool
        Show a progress bar and log at INFO level. Defaults to True.
    filename : str
        Save every snapshot at the times in tlist into "<filename>.h5".
    recorder : TrajectoryRecorder
        Custom sink for the snapshots (instead of filename).
    **solver_options
        Passed to the scipy stepper as they are (e.g. max_step, first_step).

    Returns
    -------
    Trajectory
        len(tlist) ADOState, the first being the initial state.
    """
    options = ODEOptions.from_kwargs(solver=solver, reltol=reltol, abstol=abstol, maxiters=maxiters,
                                     save_everystep=save_everystep, **solver_options)
    t_list = check_time_grid(tlist)
    ados = prepare_initial_state(M, initial)

    if H is None:
        generator = M.data
        def rhs(t, y):
            return generator @ y
        description = "Solving time evolution for auxiliary density operators..."
    else:
        updater = TimeDependentLiouvillianUpdater(M, H, params)
        # Checks the returned Hamiltonian before any step is taken
        updater.update(float(t_list[0]))
        rhs = updater.rhs
        description = "Solving time evolution for auxiliary density operators with time-dependent Hamiltonian..."

    recorder = _open_recorder(filename, recorder)

    trajectory = Trajectory()
    trajectory.append(float(t_list[0]), ados)
    if recorder is not None:
        recorder.record(str(float(t_list[0])), ados)

    _say(verbose, description)
    progress = make_progress(verbose)
    progress.start(t_list.size)
    progress.advance()
    integrator = AdaptiveODEIntegrator(rhs, options, recorder, progress)
    try:
        integrator.run(ados, t_list, trajectory)
    finally:
        progress.finish()
    _say(verbose, "%s[DONE] (%d steps)", description, integrator.n_steps)
    return trajectory

def evolution(M: LiouvillianModel, initial: ADOState | np.ndarray, *args, **kwargs) -> Trajectory:
    """Dispatch on the time specification.

    - evolution(M, initial, dt, steps, ...) -> evolution_propagator
    - evolution(M, initial, tlist, ...) -> evolution_ode
    - evolution(M, initial, tlist, H, params=(), ...) -> evolution_ode with a time-dependent Hamiltonian
    """
    if len(args) == 2 and isinstance(args[0], numbers.Real) and isinstance(args[1], numbers.Integral):
        return evolution_propagator(M, initial, args[0], args[1], **kwargs)
    if len(args) == 1:
        return evolution_ode(M, initial, args[0], **kwargs)
    if len(args) in (2, 3) and callable(args[1]):
        return evolution_ode(M, initial, *args, **kwargs)
    raise TypeError("Expected (dt, steps), (tlist) or (tlist, H[, params]) after the initial state")
