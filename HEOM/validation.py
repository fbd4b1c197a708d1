# This file is part of https://github.com/Turku-Quantum-Optics/hops
#
# Copyright (c) 2024-2025, Turku Quantum Optics
#
# Licensed under the BSD 3-Clause License, see accompanying LICENSE,
# and README.md for further information.

import numpy as np
import scipy as sp

from .ADOs import ADOState
from .errors import ConsistencyError, DimensionMismatch
from .liouvillian import LiouvillianModel

def handle_matrix_type(matrix, dim: int, name: str) -> np.ndarray:
    """Return `matrix` as a dense complex (dim, dim) array.

    Accepts numpy arrays, nested sequences and scipy sparse matrices.
    """
    if sp.sparse.issparse(matrix):
        matrix = matrix.toarray()
    matrix = np.asarray(matrix, dtype=complex)
    if matrix.shape != (dim, dim):
        raise DimensionMismatch(f"The dimension of {name} should be ({dim}, {dim}), got {matrix.shape}.")
    return matrix

def check_consistency(M: LiouvillianModel, ados: ADOState):
    if M.dim != ados.dim:
        raise ConsistencyError("dim", M.dim, ados.dim)
    if M.N != ados.N:
        raise ConsistencyError("N", M.N, ados.N)
    if M.parity != ados.parity:
        raise ConsistencyError("parity", M.parity.name, ados.parity.name)

def prepare_initial_state(M: LiouvillianModel, initial) -> ADOState:
    # Either the ADOs of a previous run or a density matrix of the system
    if isinstance(initial, ADOState):
        check_consistency(M, initial)
        return initial.copy()
    rho0 = handle_matrix_type(initial, M.dim, "rho0 (initial state)")
    return ADOState.from_density_matrix(rho0, M.N, M.parity)

def check_time_grid(t_list) -> np.ndarray:
    t_list = np.asarray(t_list, dtype=float)
    if t_list.ndim != 1 or t_list.size == 0:
        raise ValueError("tlist must be a non-empty one-dimensional list of times")
    if not np.all(np.isfinite(t_list)):
        raise ValueError("tlist must only contain finite times")
    if np.any(np.diff(t_list) <= 0):
        raise ValueError("tlist must be strictly increasing")
    return t_list
