# This file is part of https://github.com/Turku-Quantum-Optics/hops
#
# Copyright (c) 2024-2025, Turku Quantum Optics
#
# Licensed under the BSD 3-Clause License, see accompanying LICENSE,
# and README.md for further information.

import enum

import numpy as np

from . import heom_utils
from .errors import DimensionMismatch

class Parity(enum.Enum):
    EVEN = "even"
    ODD = "odd"

    @classmethod
    def parse(cls, value) -> "Parity":
        if isinstance(value, cls): return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown parity: {value!r}, expected 'even' or 'odd'") from None

class ADOState:
    """Snapshot of all auxiliary density operators (ADOs) of a hierarchy.

    `data` holds the column-stacked ADOs one after another, tier 0 (the
    reduced density matrix of the system) first.
    """
    data: np.ndarray
    # The system dimension
    dim: int
    # Number of ADOs, including the reduced density matrix
    N: int
    parity: Parity

    def __init__(self, data: np.ndarray, dim: int, N: int, parity: Parity | str = Parity.EVEN):
        data = np.array(data, dtype=complex, copy=True).reshape(-1)
        if dim < 1 or N < 1:
            raise DimensionMismatch(f"Invalid ADOs shape: dim = {dim}, N = {N}")
        if data.size != N * dim * dim:
            raise DimensionMismatch(f"The length of data ({data.size}) must be N * dim^2 = {N * dim * dim}")
        self.data = data
        self.dim = int(dim)
        self.N = int(N)
        self.parity = Parity.parse(parity)

    @classmethod
    def from_density_matrix(cls, rho: np.ndarray, N: int, parity: Parity | str = Parity.EVEN) -> "ADOState":
        rho = np.asarray(rho, dtype=complex)
        if rho.ndim != 2 or rho.shape[0] != rho.shape[1]:
            raise DimensionMismatch(f"The density matrix must be square, got shape {rho.shape}")
        dim = rho.shape[0]
        data = np.zeros(N * dim * dim, dtype=complex)
        data[0:dim * dim] = heom_utils.vectorize(rho)
        return cls(data, dim, N, parity)

    @property
    def sup_dim(self) -> int:
        return self.dim * self.dim

    def get_rho(self) -> np.ndarray:
        return heom_utils.unvectorize(self.data[0:self.sup_dim], self.dim).copy()

    def get_ado(self, index: int) -> np.ndarray:
        if index < 0 or index >= self.N:
            raise IndexError(f"ADO index {index} is out of range for N = {self.N}")
        start = index * self.sup_dim
        return heom_utils.unvectorize(self.data[start:start + self.sup_dim], self.dim).copy()

    def expect(self, op: np.ndarray) -> complex:
        op = np.asarray(op.toarray() if hasattr(op, "toarray") else op, dtype=complex)
        if op.shape != (self.dim, self.dim):
            raise DimensionMismatch(f"The operator must have shape ({self.dim}, {self.dim}), got {op.shape}")
        return complex(np.trace(op @ self.get_rho()))

    def copy(self) -> "ADOState":
        return ADOState(self.data, self.dim, self.N, self.parity)

    def __len__(self) -> int:
        return self.N

    def __iter__(self):
        for index in range(self.N):
            yield self.get_ado(index)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ADOState): return NotImplemented
        return (self.dim == other.dim and self.N == other.N and self.parity == other.parity
                and np.array_equal(self.data, other.data))

    __hash__ = None

    def __repr__(self) -> str:
        return f"ADOState(dim={self.dim}, N={self.N}, parity={self.parity.name})"
