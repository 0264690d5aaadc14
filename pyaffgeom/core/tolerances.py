# pyaffgeom/core/tolerances.py
import os
from dataclasses import dataclass, replace

import numpy as np


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a float, got {raw!r}.") from None
    if not value > 0.0:
        raise ValueError(f"{name} must be positive, got {value}.")
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from None
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}.")
    return value


@dataclass(frozen=True)
class GeometryTolerances:
    """
    Tolerances used when verifying the invariants of a geometry.
    """
    # Absolute tolerance for corners, center, J^T J^{-T} = I, integration element and volume.
    absolute: float = 1e-8
    # Bound on |x - local(global(x))| for the round-trip test.
    roundtrip: float = float(np.sqrt(np.finfo(np.float64).eps))
    # Degree of the quadrature rule whose points are used as test points.
    quadrature_degree: int = 2
    # Log every passed sub-check at DEBUG level.
    verbose: bool = False

    @classmethod
    def from_env(cls) -> "GeometryTolerances":
        base = cls()
        return cls(
            absolute=_env_float("PYAFFGEOM_CHECK_TOL", base.absolute),
            roundtrip=_env_float("PYAFFGEOM_ROUNDTRIP_TOL", base.roundtrip),
            quadrature_degree=_env_int("PYAFFGEOM_CHECK_DEGREE", base.quadrature_degree),
            verbose=os.getenv("PYAFFGEOM_DEBUG", "").lower() in {"1", "true", "yes"},
        )

    def with_(self, **changes) -> "GeometryTolerances":
        return replace(self, **changes)


# Global, editable in one place:
TOL = GeometryTolerances.from_env()
