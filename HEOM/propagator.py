# This file is part of https://github.com/Turku-Quantum-Optics/hops
#
# Copyright (c) 2024-2025, Turku Quantum Optics
#
# Licensed under the BSD 3-Clause License, see accompanying LICENSE,
# and README.md for further information.

import logging

import scipy as sp

from . import math_utils
from .config import PropagatorOptions
from .liouvillian import LiouvillianModel

log = logging.getLogger(__name__)

class PropagatorBuilder:
    """Sparse approximation of exp(M dt) by a truncated Taylor series.

    M dt is first scaled by 2^-s so that its infinity norm is at most one.
    Taylor terms A^k / k! are summed until the newest term is smaller than
    `threshold` relative to the running sum, and the result is squared s
    times. Entries below `nonzero_tol` are dropped from every term and after
    every squaring, which keeps the fill-in of repeated sparse products
    (and the cost of later matrix-vector products) bounded.
    """
    options: PropagatorOptions
    # Statistics of the last build
    n_terms: int = 0
    n_squarings: int = 0

    def __init__(self, options: PropagatorOptions | None = None):
        self.options = options if options is not None else PropagatorOptions()

    def build(self, M, dt: float) -> sp.sparse.csr_matrix:
        if isinstance(M, LiouvillianModel):
            M = M.data
        dt = float(dt)
        if not dt > 0:
            raise ValueError(f"The time step must be positive, got {dt}")
        threshold = self.options.threshold
        nonzero_tol = self.options.nonzero_tol

        A = sp.sparse.csr_matrix(M, dtype=complex) * dt
        self.n_squarings = math_utils.scaling_exponent(math_utils.inf_norm(A))
        if self.n_squarings > 0:
            A = A / (2 ** self.n_squarings)

        P = sp.sparse.identity(A.shape[0], dtype=complex, format="csr")
        term = P
        k = 0
        while True:
            k += 1
            term = math_utils.prune((A @ term) / k, nonzero_tol)
            P = P + term
            if math_utils.inf_norm(term) <= threshold * math_utils.inf_norm(P):
                break
        self.n_terms = k

        for _ in range(self.n_squarings):
            P = math_utils.prune(P @ P, nonzero_tol)

        P = math_utils.prune(sp.sparse.csr_matrix(P), nonzero_tol)
        P.sort_indices()
        log.debug("Propagator: %d Taylor terms, %d squarings, nnz = %d", self.n_terms, self.n_squarings, P.nnz)
        return P

def propagator(M, dt: float, threshold: float = 1.0e-6, nonzero_tol: float = 1.0e-14) -> sp.sparse.csr_matrix:
    return PropagatorBuilder(PropagatorOptions(threshold=threshold, nonzero_tol=nonzero_tol)).build(M, dt)
