"""Shared generators and states for the tests."""

import numpy as np
import pytest
import scipy as sp

from HEOM import LiouvillianModel, Parity
from HEOM.heom_utils import commutator_superoperator, spre, spost

SIGMA_X = np.array([[0, 1], [1, 0]], dtype=complex)
SIGMA_Z = np.array([[1, 0], [0, -1]], dtype=complex)

def toy_generator(H: np.ndarray, gamma: float = 0.5, coupling: float = 0.3) -> sp.sparse.csr_matrix:
    """Two-tier generator: system tier and one damped auxiliary tier coupled through sigma_z."""
    L_system = commutator_superoperator(H)
    identity = sp.sparse.identity(L_system.shape[0], dtype=complex, format="csr")
    C = -1j * coupling * (spre(SIGMA_Z) - spost(SIGMA_Z))
    return sp.sparse.bmat([[L_system, C], [C, L_system - gamma * identity]], format="csr")

@pytest.fixture
def dephasing_model():
    return LiouvillianModel(np.diag([0, -1, -1, 0]).astype(complex), dim=2, N=1)

@pytest.fixture
def system_hamiltonian():
    return 0.5 * SIGMA_Z + 0.2 * SIGMA_X

@pytest.fixture
def toy_model(system_hamiltonian):
    return LiouvillianModel(toy_generator(system_hamiltonian), dim=2, N=2, parity=Parity.EVEN)

@pytest.fixture
def bath_only_model():
    # Same hierarchy without any system Hamiltonian
    return LiouvillianModel(toy_generator(np.zeros((2, 2), dtype=complex)), dim=2, N=2)

@pytest.fixture
def rho0():
    return np.array([[0.5, 0.5], [0.5, 0.5]], dtype=complex)

class ListRecorder:
    """Keeps recorded snapshots in memory, optionally failing at a given call."""
    def __init__(self, fail_at: int | None = None):
        self.entries = []
        self.fail_at = fail_at

    def record(self, key, ados):
        if self.fail_at is not None and len(self.entries) == self.fail_at:
            raise OSError("disk full")
        self.entries.append((key, ados))

@pytest.fixture
def list_recorder():
    return ListRecorder()

@pytest.fixture
def failing_recorder():
    return ListRecorder(fail_at=2)

@pytest.fixture
def make_generator():
    return toy_generator
