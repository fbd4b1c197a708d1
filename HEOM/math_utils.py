# This file is part of https://github.com/Turku-Quantum-Optics/hops
#
# Copyright (c) 2024-2025, Turku Quantum Optics
#
# Licensed under the BSD 3-Clause License, see accompanying LICENSE,
# and README.md for further information.

import numpy as np
import scipy as sp

def inf_norm(A: sp.sparse.spmatrix) -> float:
    # Maximum absolute row sum
    if A.nnz == 0: return 0.0
    return float(np.max(np.abs(A).sum(axis=1)))

def prune(A: sp.sparse.csr_matrix, tolerance: float) -> sp.sparse.csr_matrix:
    """Drop (in place) the stored entries with magnitude below tolerance."""
    if tolerance > 0 and A.nnz > 0:
        A.data[np.abs(A.data) < tolerance] = 0
    A.eliminate_zeros()
    return A

def scaling_exponent(norm: float) -> int:
    # Smallest s >= 0 with norm / 2^s <= 1
    if not np.isfinite(norm):
        raise ValueError(f"Matrix norm is not finite: {norm}")
    if norm <= 1.0: return 0
    return int(np.ceil(np.log2(norm)))
