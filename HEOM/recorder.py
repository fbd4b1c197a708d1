# This file is part of https://github.com/Turku-Quantum-Optics/hops
#
# Copyright (c) 2024-2025, Turku Quantum Optics
#
# Licensed under the BSD 3-Clause License, see accompanying LICENSE,
# and README.md for further information.

import logging
import os

import h5py
import numpy as np

from .ADOs import ADOState
from .errors import AlreadyExistsError
from .trajectory import Trajectory

log = logging.getLogger(__name__)

FILE_EXTENSION = ".h5"

class TrajectoryRecorder:
    """Append-only sink for the snapshots of an evolution.

    `record` is called once per snapshot, in the order the snapshots are
    produced, and must have persisted the snapshot when it returns.
    """
    def record(self, key: str, ados: ADOState): ...

class HDF5Recorder(TrajectoryRecorder):
    """Writes every snapshot as its own group of an HDF5 file "<filename>.h5".

    The file must not exist yet. It is opened and closed for every snapshot,
    so every snapshot recorded before a failure stays readable.
    """
    path: str

    def __init__(self, filename: str):
        self.path = os.fspath(filename) + FILE_EXTENSION
        if os.path.exists(self.path):
            raise AlreadyExistsError(f"FILE: {self.path} already exist.")

    def record(self, key: str, ados: ADOState):
        with h5py.File(self.path, "a") as file:
            if key in file:
                raise AlreadyExistsError(f"Key {key!r} already exists in {self.path}")
            group = file.create_group(key)
            group.create_dataset("data", data=ados.data)
            group.attrs.update(dict(dim=ados.dim, N=ados.N, parity=ados.parity.value))
        log.debug("Saved ADOs at t = %s into %s", key, self.path)

def load_trajectory(filename: str) -> Trajectory:
    """Read a file written by HDF5Recorder back into a Trajectory ordered by time."""
    path = os.fspath(filename)
    if not path.endswith(FILE_EXTENSION):
        path += FILE_EXTENSION
    trajectory = Trajectory()
    with h5py.File(path, "r") as file:
        for key in sorted(file.keys(), key=float):
            group = file[key]
            ados = ADOState(np.asarray(group["data"][...]), int(group.attrs["dim"]), int(group.attrs["N"]), str(group.attrs["parity"]))
            trajectory.append(float(key), ados)
    return trajectory
