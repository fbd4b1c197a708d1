# This file is part of https://github.com/Turku-Quantum-Optics/hops
#
# Copyright (c) 2024-2025, Turku Quantum Optics
#
# Licensed under the BSD 3-Clause License, see accompanying LICENSE,
# and README.md for further information.

import scipy as sp

from .ADOs import Parity
from .errors import DimensionMismatch

class LiouvillianModel:
    """The HEOM generator M (dρ/dt = M ρ) over all ADOs, built elsewhere.

    For time-dependent problems `data` holds the time-independent part only:
    the bath couplings and the static system Hamiltonian.
    """
    # Generator matrix of size (N * sup_dim, N * sup_dim)
    data: sp.sparse.csr_matrix
    # The system dimension
    dim: int
    # Number of ADOs, including the reduced density matrix
    N: int
    sup_dim: int
    parity: Parity

    def __init__(self, data, dim: int, N: int, parity: Parity | str = Parity.EVEN):
        if dim < 1 or N < 1:
            raise DimensionMismatch(f"Invalid model shape: dim = {dim}, N = {N}")
        data = sp.sparse.csr_matrix(data, dtype=complex, copy=True)
        size = N * dim * dim
        if data.shape != (size, size):
            raise DimensionMismatch(f"The generator must have shape ({size}, {size}) for dim = {dim} and N = {N}, got {data.shape}")
        data.sum_duplicates()
        data.sort_indices()
        self.data = data
        self.dim = int(dim)
        self.N = int(N)
        self.sup_dim = self.dim * self.dim
        self.parity = Parity.parse(parity)

    @property
    def shape(self) -> tuple[int, int]:
        return self.data.shape

    def __repr__(self) -> str:
        return f"LiouvillianModel(dim={self.dim}, N={self.N}, parity={self.parity.name}, nnz={self.data.nnz})"
