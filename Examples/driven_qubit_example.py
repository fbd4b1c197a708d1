# This file is part of https://github.com/Turku-Quantum-Optics/hops
#
# Copyright (c) 2024-2025, Turku Quantum Optics
#
# Licensed under the BSD 3-Clause License, see accompanying LICENSE,
# and README.md for further information.

import numpy as np
import matplotlib.pyplot as plt

import HEOM

from spin_boson_example import drude_lorentz_generator

class Drive:
    def __init__(self, amplitude: float, omega: float):
        self.amplitude = amplitude
        self.omega = omega
        self.sigma_x = np.array([[0, 1], [1, 0]], dtype=complex)

    def __call__(self, params, t):
        # params scales the amplitude for the second run
        return params * self.amplitude * np.cos(self.omega * t) * self.sigma_x

def _main():
    HEOM.configure_logging()

    sigma_z = np.array([[1, 0], [0, -1]], dtype=complex)

    # Static part of the system Hamiltonian
    omega0 = 1.0
    H0 = 0.5 * omega0 * sigma_z

    # Bath parameters
    lam = 0.05
    gamma = 0.5
    T = 0.5
    depth = 6

    # M only contains the static part, the drive is added at every step
    M = drude_lorentz_generator(H0, sigma_z, lam, gamma, T, depth)
    drive = Drive(0.2, omega0)

    rho0 = np.array([[0, 0],
                     [0, 1]], dtype=complex)
    tlist = np.linspace(0, 60, 301)

    plt.figure()
    for params in (1.0, 0.5):
        trajectory = HEOM.evolution(M, rho0, tlist, drive, params, solver="DOP853", reltol=1e-8, abstol=1e-10)
        population = 0.5 * (1 + trajectory.expect(sigma_z).real)
        plt.plot(trajectory.times, population, label=f"Excited state population (amplitude x {params})")
    plt.legend()
    plt.xlabel("t")
    plt.ylabel("p")
    plt.show()
    plt.close()

if __name__ == "__main__":
    _main()
