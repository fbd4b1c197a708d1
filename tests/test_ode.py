import h5py
import numpy as np
import pytest
import scipy as sp

from HEOM import (
    ADOState,
    AdaptiveODEIntegrator,
    ConsistencyError,
    IterationBudgetExceeded,
    ODEOptions,
    evolution,
    evolution_ode,
    evolution_propagator,
)

TIGHT = dict(reltol=1e-10, abstol=1e-12)

def exact_states(M, rho0, t_list):
    y0 = ADOState.from_density_matrix(rho0, M.N).data
    return [sp.linalg.expm(M.data.toarray() * t) @ y0 for t in t_list]

def test_returns_states_on_the_grid(toy_model, rho0):
    t_list = [0.0, 0.3, 0.7, 2.0]
    trajectory = evolution_ode(toy_model, rho0, t_list, verbose=False)
    assert len(trajectory) == len(t_list)
    assert trajectory.times == t_list
    assert np.array_equal(trajectory[0].get_rho(), rho0)

def test_single_time_point(toy_model, rho0):
    trajectory = evolution_ode(toy_model, rho0, [1.5], verbose=False)
    assert trajectory.times == [1.5]
    assert len(trajectory) == 1

@pytest.mark.parametrize("solver", ["DP5", "RK45", "DOP853", "rk23"])
def test_matches_dense_exponential(toy_model, rho0, solver):
    t_list = np.linspace(0, 3, 7)
    trajectory = evolution_ode(toy_model, rho0, t_list, solver=solver, verbose=False, **TIGHT)
    atol = 1e-6 if solver == "rk23" else 1e-8
    for ados, expected in zip(trajectory, exact_states(toy_model, rho0, t_list)):
        assert np.allclose(ados.data, expected, atol=atol)

def test_agrees_with_propagator(toy_model, rho0):
    by_ode = evolution_ode(toy_model, rho0, [0.0, 0.5, 1.0, 1.5], verbose=False, **TIGHT)
    by_propagator = evolution_propagator(toy_model, rho0, 0.5, 3, threshold=1e-12, verbose=False)
    for a, b in zip(by_ode, by_propagator):
        assert np.allclose(a.data, b.data, atol=1e-8)

def test_dispatch(toy_model, rho0):
    trajectory = evolution(toy_model, rho0, [0.0, 1.0], verbose=False)
    assert trajectory.times == [0.0, 1.0]

def test_checkpoint_keys(tmp_path, toy_model, rho0):
    evolution_ode(toy_model, rho0, [0, 0.5, 1], verbose=False, filename=str(tmp_path / "ode"))
    with h5py.File(tmp_path / "ode.h5", "r") as file:
        assert sorted(file.keys()) == ["0.0", "0.5", "1.0"]

def test_recorder_keys(toy_model, rho0, list_recorder):
    evolution_ode(toy_model, rho0, [0.25, 0.5, 1.0], verbose=False, recorder=list_recorder)
    assert [key for key, _ in list_recorder.entries] == ["0.25", "0.5", "1.0"]

def test_iteration_budget(toy_model, rho0):
    with pytest.raises(IterationBudgetExceeded, match="maxiters"):
        evolution_ode(toy_model, rho0, [0.0, 1000.0], maxiters=3, verbose=False, **TIGHT)

def test_save_everystep(toy_model, rho0):
    trajectory = evolution_ode(toy_model, rho0, [0.0, 1.0, 2.0], save_everystep=True, verbose=False)
    times = [t for t, _ in trajectory.intermediate]
    assert len(times) >= 2
    assert all(a < b for a, b in zip(times, times[1:]))
    assert times[-1] == pytest.approx(2.0)
    assert all(isinstance(ados, ADOState) for _, ados in trajectory.intermediate)

def test_no_intermediate_steps_by_default(toy_model, rho0):
    trajectory = evolution_ode(toy_model, rho0, [0.0, 1.0], verbose=False)
    assert trajectory.intermediate == []

@pytest.mark.parametrize("tlist", [[0.0, 1.0, 1.0], [1.0, 0.5], [], [[0.0, 1.0]], [0.0, float("inf")]])
def test_invalid_time_list(toy_model, rho0, tlist):
    with pytest.raises(ValueError, match="tlist"):
        evolution_ode(toy_model, rho0, tlist, verbose=False)

def test_unknown_solver(toy_model, rho0):
    with pytest.raises(ValueError, match="Unknown solver"):
        evolution_ode(toy_model, rho0, [0.0, 1.0], solver="Euler", verbose=False)

def test_inconsistent_initial_state(tmp_path, toy_model):
    ados = ADOState.from_density_matrix(np.eye(2) / 2, N=1)
    with pytest.raises(ConsistencyError):
        evolution_ode(toy_model, ados, [0.0, 1.0], verbose=False, filename=str(tmp_path / "ode"))
    assert not (tmp_path / "ode.h5").exists()

def test_extra_stepper_options(toy_model, rho0):
    y0 = ADOState.from_density_matrix(rho0, toy_model.N).data
    generator = toy_model.data
    def rhs(t, y):
        return generator @ y

    free = AdaptiveODEIntegrator(rhs, ODEOptions())
    list(free.integrate(np.array([0.0, 2.0]), y0))
    limited = AdaptiveODEIntegrator(rhs, ODEOptions.from_kwargs(max_step=0.01))
    list(limited.integrate(np.array([0.0, 2.0]), y0))
    assert limited.n_steps >= 200
    assert limited.n_steps > free.n_steps

def test_steps_are_counted_across_intervals(toy_model, rho0):
    y0 = ADOState.from_density_matrix(rho0, toy_model.N).data
    generator = toy_model.data
    def rhs(t, y):
        return generator @ y

    integrator = AdaptiveODEIntegrator(rhs, ODEOptions.from_kwargs(max_step=0.1))
    results = list(integrator.integrate(np.array([0.0, 1.0, 2.0]), y0))
    assert [t for t, _ in results] == [1.0, 2.0]
    assert integrator.n_steps >= 20

def test_short_interval_keeps_the_step_size(toy_model, rho0):
    y0 = ADOState.from_density_matrix(rho0, toy_model.N).data
    generator = toy_model.data
    def rhs(t, y):
        return generator @ y

    integrator = AdaptiveODEIntegrator(rhs, ODEOptions.from_kwargs(max_step=0.2))
    results = integrator.integrate(np.array([0.0, 1.0, 1.0 + 1e-6, 2.0]), y0)
    next(results)
    h_abs = integrator._h_abs
    assert h_abs > 1e-3
    next(results)
    assert integrator._h_abs == h_abs
    assert [t for t, _ in results] == [2.0]
