# This file is part of https://github.com/Turku-Quantum-Optics/hops
#
# Copyright (c) 2024-2025, Turku Quantum Optics
#
# Licensed under the BSD 3-Clause License, see accompanying LICENSE,
# and README.md for further information.

"""Errors raised by the time evolution engine.

- HEOMError: base class of every error below
- ConsistencyError: model and state disagree on dim, N or parity
- DimensionMismatch: a matrix or vector has the wrong shape
- AlreadyExistsError: a checkpoint destination (or key) already exists
- IterationBudgetExceeded: the adaptive stepper ran out of steps
- IntegrationFailed: the adaptive stepper could not take a step
"""

__all__ = [
    "HEOMError",
    "ConsistencyError",
    "DimensionMismatch",
    "AlreadyExistsError",
    "IterationBudgetExceeded",
    "IntegrationFailed",
]

class HEOMError(Exception):
    """Base exception for all errors raised by this package."""

class ConsistencyError(HEOMError, ValueError):
    field: str

    def __init__(self, field: str, model_value, state_value):
        self.field = field
        self.model_value = model_value
        self.state_value = state_value
        super().__init__(f"The {field} between M and ados are not consistent (M: {model_value}, ados: {state_value}).")

class DimensionMismatch(HEOMError, ValueError):
    pass

class AlreadyExistsError(HEOMError, FileExistsError):
    pass

class IterationBudgetExceeded(HEOMError, RuntimeError):
    def __init__(self, maxiters: int, t: float, t_target: float):
        self.maxiters = maxiters
        self.t = t
        self.t_target = t_target
        super().__init__(f"Reached maxiters = {maxiters} at t = {t} before the time point t = {t_target}.")

class IntegrationFailed(HEOMError, RuntimeError):
    def __init__(self, t: float, message: str | None):
        self.t = t
        super().__init__(f"Integration failed at t = {t}: {message}")
