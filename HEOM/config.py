# This file is part of https://github.com/Turku-Quantum-Optics/hops
#
# Copyright (c) 2024-2025, Turku Quantum Optics
#
# Licensed under the BSD 3-Clause License, see accompanying LICENSE,
# and README.md for further information.

"""Options of the two evolution strategies.

Named options are validated fields. Stepper-specific options that have no
field of their own (e.g. ``max_step`` or ``first_step``) are collected in
``ODEOptions.extra`` and handed to the scipy stepper unchanged.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = ["PropagatorOptions", "ODEOptions"]

class PropagatorOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    threshold: float = Field(default=1.0e-6, gt=0, description="Relative size of the last Taylor term kept in the series.")
    nonzero_tol: float = Field(default=1.0e-14, ge=0, description="Entries below this magnitude are dropped to keep the propagator sparse.")

class ODEOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    solver: str = Field(default="DP5", description="Adaptive Runge-Kutta method, see ODE_solvers.SOLVERS.")
    reltol: float = Field(default=1.0e-6, gt=0)
    abstol: float = Field(default=1.0e-8, gt=0)
    maxiters: int = Field(default=100_000, ge=1, description="Maximum number of accepted steps over the whole time list.")
    save_everystep: bool = False
    extra: dict[str, Any] = Field(default_factory=dict, description="Extra options passed to the stepper as they are.")

    @field_validator("solver")
    @classmethod
    def _known_solver(cls, value: str) -> str:
        from .ODE_solvers import SOLVERS
        if value.upper() not in SOLVERS:
            raise ValueError(f"Unknown solver {value!r}, available solvers: {', '.join(sorted(SOLVERS))}")
        return value.upper()

    @field_validator("maxiters", mode="before")
    @classmethod
    def _integer_maxiters(cls, value):
        # 1e5 is accepted as long as it is integral
        if isinstance(value, float):
            if not value.is_integer():
                raise ValueError(f"maxiters must be an integer, got {value}")
            return int(value)
        return value

    @classmethod
    def from_kwargs(cls, **kwargs) -> "ODEOptions":
        # Unknown keywords go into the extra map
        named = {key: kwargs.pop(key) for key in list(kwargs) if key in cls.model_fields and key != "extra"}
        extra = dict(kwargs.pop("extra", None) or {})
        extra.update(kwargs)
        return cls(extra=extra, **named)
