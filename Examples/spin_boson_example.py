# This file is part of https://github.com/Turku-Quantum-Optics/hops
#
# Copyright (c) 2024-2025, Turku Quantum Optics
#
# Licensed under the BSD 3-Clause License, see accompanying LICENSE,
# and README.md for further information.

import numpy as np
import scipy as sp
import matplotlib.pyplot as plt

import HEOM

def drude_lorentz_generator(H: np.ndarray, Q: np.ndarray, lam: float, gamma: float, T: float, depth: int) -> HEOM.LiouvillianModel:
    # Single exponential (no Matsubara terms): C(t) = c exp(-gamma t)
    c = lam * gamma * (1 / np.tan(gamma / (2 * T)) - 1j)
    N = depth + 1
    L_system = HEOM.commutator_superoperator(H)
    identity = sp.sparse.identity(L_system.shape[0], dtype=complex, format="csr")
    down = -1j * (HEOM.spre(Q) - HEOM.spost(Q))
    blocks = [[None] * N for _ in range(N)]
    for n in range(N):
        blocks[n][n] = L_system - n * gamma * identity
        if n + 1 < N:
            blocks[n][n + 1] = down
        if n > 0:
            blocks[n][n - 1] = -1j * n * (c * HEOM.spre(Q) - np.conj(c) * HEOM.spost(Q))
    return HEOM.LiouvillianModel(sp.sparse.bmat(blocks, format="csr"), dim=H.shape[0], N=N)

def _main():
    HEOM.configure_logging()

    sigma_x = np.array([[0, 1], [1, 0]], dtype=complex)
    sigma_z = np.array([[1, 0], [0, -1]], dtype=complex)

    # System parameters
    epsilon = 0.5
    Delta = 1.0
    H = 0.5 * epsilon * sigma_z + 0.5 * Delta * sigma_x

    # Bath parameters
    lam = 0.1 # Reorganization energy
    gamma = 0.5 # Cut-off frequency
    T = 1.0 # Temperature
    depth = 8 # Hierarchy depth

    M = drude_lorentz_generator(H, sigma_z, lam, gamma, T, depth)
    rho0 = np.array([[1, 0],
                     [0, 0]], dtype=complex)

    # Fixed time step with the propagator
    dt = 0.1
    steps = 200
    # The checkpoint file must not exist yet, remove spin_boson_propagator.h5 before running again
    by_propagator = HEOM.evolution(M, rho0, dt, steps, filename="spin_boson_propagator")

    # Adaptive time step, saved at the same times
    tlist = np.linspace(0, dt * steps, 51)
    by_ode = HEOM.evolution(M, rho0, tlist, reltol=1e-8, abstol=1e-10)

    plt.figure()
    plt.plot(by_propagator.times, by_propagator.expect(sigma_z).real, label="<sigma_z> (propagator)")
    plt.plot(by_ode.times, by_ode.expect(sigma_z).real, label="<sigma_z> (ODE)", linestyle="--")
    plt.plot(by_propagator.times, by_propagator.expect(sigma_x).real, label="<sigma_x> (propagator)")
    plt.legend()
    plt.xlabel("t")
    plt.ylabel("expectation value")
    plt.show()
    plt.close()

    # The checkpoint file can be read back
    loaded = HEOM.load_trajectory("spin_boson_propagator")
    print(f"Loaded {len(loaded)} snapshots, final state:\n{loaded[-1].get_rho()}")

if __name__ == "__main__":
    _main()
