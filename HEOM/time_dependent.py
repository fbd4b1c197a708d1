# This file is part of https://github.com/Turku-Quantum-Optics/hops
#
# Copyright (c) 2024-2025, Turku Quantum Optics
#
# Licensed under the BSD 3-Clause License, see accompanying LICENSE,
# and README.md for further information.

import numpy as np
import scipy as sp

from typing import Any, Callable

from . import heom_utils
from .liouvillian import LiouvillianModel
from .validation import handle_matrix_type

class TimeDependentLiouvillianUpdater:
    """Generator L(t) = M + I_N ⊗ (-i[H(params, t), ·]) for a time-dependent system Hamiltonian.

    Every instance owns its generator buffer: the sparsity pattern is the
    union of M and the commutator blocks of all N tiers, and `update` only
    rewrites the entries that depend on the Hamiltonian. Evolution calls
    must not share an updater.
    """
    H: Callable[[Any, float], np.ndarray]
    params: Any
    # The system dimension
    dim: int
    # Number of ADOs, including the reduced density matrix
    N: int
    buffer: sp.sparse.csr_matrix

    _t: float | None = None

    def __init__(self, M: LiouvillianModel, H: Callable[[Any, float], np.ndarray], params: Any = ()):
        self.H = H
        self.params = params
        self.dim = M.dim
        self.N = M.N

        # Union of the two patterns, all entries strictly positive so nothing cancels
        block_rows, block_columns = heom_utils.commutator_pattern(self.dim)
        block_pattern = sp.sparse.csr_matrix((np.ones(block_rows.size), (block_rows, block_columns)), shape=(M.sup_dim, M.sup_dim))
        pattern = (abs(M.data) + heom_utils.block_diagonal(block_pattern, self.N)).tocsr()
        pattern.sort_indices()

        static = M.data.tocoo()
        stored = static.data != 0
        self._static_data = np.zeros(pattern.nnz, dtype=complex)
        self._static_data[heom_utils.csr_positions(pattern, static.row[stored], static.col[stored])] = static.data[stored]

        offsets = (np.arange(self.N) * M.sup_dim)[:, np.newaxis]
        # Entry (i + dim j, k + dim l) of -i[H, .] is -i (δ_jl H[i, k] - δ_ik H[l, j])
        self._i, self._j = block_rows % self.dim, block_rows // self.dim
        self._k, self._l = block_columns % self.dim, block_columns // self.dim
        self._same_jl = self._j == self._l
        self._same_ik = self._i == self._k
        # Shape (N, entries per block)
        self._positions = heom_utils.csr_positions(pattern, (offsets + block_rows).ravel(), (offsets + block_columns).ravel()).reshape(self.N, -1)

        self.buffer = sp.sparse.csr_matrix((self._static_data.copy(), pattern.indices.copy(), pattern.indptr.copy()), shape=pattern.shape)
        self._t = None

    def hamiltonian(self, t: float) -> np.ndarray:
        return handle_matrix_type(self.H(self.params, t), self.dim, f"H (Hamiltonian) at t={t}")

    def update(self, t: float) -> sp.sparse.csr_matrix:
        if self._t is not None and t == self._t:
            return self.buffer
        Ht = self.hamiltonian(t)
        block = -1j * (np.where(self._same_jl, Ht[self._i, self._k], 0) - np.where(self._same_ik, Ht[self._l, self._j], 0))
        self.buffer.data[self._positions] = self._static_data[self._positions] + block
        self._t = t
        return self.buffer

    def rhs(self, t: float, y: np.ndarray) -> np.ndarray:
        return self.update(t) @ y
