# This file is part of https://github.com/Turku-Quantum-Optics/hops
#
# Copyright (c) 2024-2025, Turku Quantum Optics
#
# Licensed under the BSD 3-Clause License, see accompanying LICENSE,
# and README.md for further information.

import numpy as np

from collections.abc import Sequence

from .ADOs import ADOState

class Trajectory(Sequence):
    """Time-ordered ADOs produced by an evolution, indexable like a list of ADOState."""
    times: list[float]
    states: list[ADOState]
    # Every accepted internal step of the adaptive stepper (only with save_everystep)
    intermediate: list[tuple[float, ADOState]]

    def __init__(self):
        self.times = []
        self.states = []
        self.intermediate = []

    def append(self, t: float, ados: ADOState):
        if len(self.times) > 0 and not t > self.times[-1]:
            raise ValueError(f"Times of a trajectory must be strictly increasing, got {t} after {self.times[-1]}")
        self.times.append(t)
        self.states.append(ados)

    def __getitem__(self, index):
        return self.states[index]

    def __len__(self) -> int:
        return len(self.states)

    def get_rho_list(self) -> list[np.ndarray]:
        return [ados.get_rho() for ados in self.states]

    def expect(self, op) -> np.ndarray:
        return np.array([ados.expect(op) for ados in self.states], dtype=complex)

    def __repr__(self) -> str:
        if len(self) == 0: return "Trajectory([])"
        return f"Trajectory({len(self)} states, t = {self.times[0]} ... {self.times[-1]})"
