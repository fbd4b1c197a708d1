import numpy as np
import pytest
import scipy as sp

from HEOM import PropagatorBuilder, PropagatorOptions, propagator
from HEOM.math_utils import inf_norm, prune, scaling_exponent

def test_zero_generator_gives_identity():
    P = propagator(sp.sparse.csr_matrix((8, 8), dtype=complex), 0.3)
    assert np.allclose(P.toarray(), np.eye(8))

def test_diagonal_generator(dephasing_model):
    P = propagator(dephasing_model, 1.0, threshold=1e-12)
    assert np.allclose(P.diagonal(), [1, np.exp(-1), np.exp(-1), 1], atol=1e-10)
    assert P.nnz == 4

@pytest.mark.parametrize("dt", [0.1, 1.0, 7.5])
def test_matches_dense_exponential(toy_model, dt):
    builder = PropagatorBuilder(PropagatorOptions(threshold=1e-12))
    P = builder.build(toy_model, dt)
    expected = sp.linalg.expm(toy_model.data.toarray() * dt)
    assert np.allclose(P.toarray(), expected, atol=1e-8)
    assert builder.n_terms > 0

def test_large_steps_are_squared(toy_model):
    builder = PropagatorBuilder()
    builder.build(toy_model, 10.0)
    assert builder.n_squarings == scaling_exponent(inf_norm(toy_model.data * 10.0))
    assert builder.n_squarings > 0
    builder.build(toy_model, 1e-3)
    assert builder.n_squarings == 0

def test_no_small_entries_survive(toy_model):
    P = propagator(toy_model, 0.5, nonzero_tol=1e-6)
    assert np.all(np.abs(P.data) >= 1e-6)

@pytest.mark.parametrize("dt", [0.0, -1.0, float("nan")])
def test_non_positive_step(toy_model, dt):
    with pytest.raises(ValueError, match="time step"):
        propagator(toy_model, dt)

def test_invalid_options():
    with pytest.raises(ValueError):
        PropagatorOptions(threshold=0)
    with pytest.raises(ValueError):
        PropagatorOptions(nonzero_tol=-1.0)

def test_prune_drops_entries_in_place():
    A = sp.sparse.csr_matrix(np.array([[1.0, 1e-20], [0.0, -2e-3]], dtype=complex))
    pruned = prune(A, 1e-10)
    assert pruned is A
    assert A.nnz == 2
    assert inf_norm(A) == pytest.approx(1.0)

def test_scaling_exponent():
    assert scaling_exponent(0.0) == 0
    assert scaling_exponent(1.0) == 0
    assert scaling_exponent(1.5) == 1
    assert scaling_exponent(1024.0) == 10
    with pytest.raises(ValueError):
        scaling_exponent(float("inf"))
