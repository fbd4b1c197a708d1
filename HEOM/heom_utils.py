# This file is part of https://github.com/Turku-Quantum-Optics/hops
#
# Copyright (c) 2024-2025, Turku Quantum Optics
#
# Licensed under the BSD 3-Clause License, see accompanying LICENSE,
# and README.md for further information.

import numpy as np
import scipy as sp

# Superoperators act on column-stacked density matrices, vec(A X B) = (B^T ⊗ A) vec(X)

def vectorize(matrix: np.ndarray) -> np.ndarray:
    return np.asarray(matrix).flatten(order="F")

def unvectorize(vector: np.ndarray, dimension: int) -> np.ndarray:
    return np.asarray(vector).reshape((dimension, dimension), order="F")

def spre(A) -> sp.sparse.csr_matrix:
    """Superoperator of left multiplication, X -> A X."""
    A = sp.sparse.csr_matrix(A, dtype=complex)
    identity = sp.sparse.identity(A.shape[0], dtype=complex, format="csr")
    return sp.sparse.kron(identity, A, format="csr")

def spost(A) -> sp.sparse.csr_matrix:
    """Superoperator of right multiplication, X -> X A."""
    A = sp.sparse.csr_matrix(A, dtype=complex)
    identity = sp.sparse.identity(A.shape[0], dtype=complex, format="csr")
    return sp.sparse.kron(A.T, identity, format="csr")

def commutator_superoperator(H) -> sp.sparse.csr_matrix:
    """Superoperator of -i[H, X]."""
    return -1j * (spre(H) - spost(H))

def block_diagonal(block, N: int) -> sp.sparse.csr_matrix:
    # The same block repeated on the diagonal of every tier of the hierarchy
    identity = sp.sparse.identity(N, dtype=complex, format="csr")
    return sp.sparse.kron(identity, sp.sparse.csr_matrix(block, dtype=complex), format="csr")

def commutator_pattern(dimension: int) -> tuple[np.ndarray, np.ndarray]:
    # Every (row, column) of a system superoperator that a generic Hamiltonian can fill
    ones = np.ones((dimension, dimension), dtype=complex)
    pattern = (abs(spre(ones)) + abs(spost(ones))).tocoo()
    order = np.lexsort((pattern.col, pattern.row))
    return pattern.row[order], pattern.col[order]

def csr_positions(matrix: sp.sparse.csr_matrix, rows: np.ndarray, columns: np.ndarray) -> np.ndarray:
    """Indices into matrix.data of the entries (rows[i], columns[i]).

    The matrix must have sorted indices and every requested entry must be
    stored in its sparsity pattern.
    """
    stored_rows = np.repeat(np.arange(matrix.shape[0]), np.diff(matrix.indptr))
    stored_keys = stored_rows.astype(np.int64) * matrix.shape[1] + matrix.indices
    keys = np.asarray(rows, dtype=np.int64) * matrix.shape[1] + np.asarray(columns, dtype=np.int64)
    positions = np.searchsorted(stored_keys, keys)
    if positions.size > 0:
        if np.any(positions >= stored_keys.size) or np.any(stored_keys[np.minimum(positions, stored_keys.size - 1)] != keys):
            raise KeyError("Requested entries are not part of the sparsity pattern")
    return positions
