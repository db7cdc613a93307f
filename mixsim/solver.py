from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple
import warnings

import numpy as np
from scipy.integrate import solve_ivp

from .settings import settings

STIFF_METHODS = ("BDF", "Radau", "LSODA")


@dataclass(frozen=True)
class SolverOptions:
    method: str = "LSODA"
    rtol: float = 1e-15
    atol: float = 1e-21

    @classmethod
    def from_settings(cls) -> "SolverOptions":
        return cls(method=settings.ode_method, rtol=settings.ode_rtol, atol=settings.ode_atol)


@dataclass(frozen=True)
class SolveResult:
    t: np.ndarray  # (n_samples,)
    y: np.ndarray  # (n_states, n_samples)
    status: int
    message: str
    nfev: int

    @property
    def success(self) -> bool:
        return self.status >= 0


def integrate_ode(
    rhs: Callable[[float, Sequence[float]], Sequence[float]],
    y0: Sequence[float],
    t_span: Tuple[float, float],
    t_eval: Optional[Sequence[float]] = None,
    method: str = "LSODA",
    rtol: float = 1e-15,
    atol: float = 1e-21,
) -> SolveResult:
    method_name = method
    for name in STIFF_METHODS:
        if method.upper() == name.upper():
            method_name = name
    with warnings.catch_warnings():
        # solve_ivp raises rtol to 100 * eps on its own
        warnings.filterwarnings("ignore", message="At least one element of `rtol` is too small")
        sol = solve_ivp(
            fun=rhs,
            y0=np.asarray(y0, dtype=float),
            t_span=t_span,
            t_eval=np.asarray(t_eval, dtype=float) if t_eval is not None else None,
            method=method_name,
            rtol=rtol,
            atol=atol,
        )
    return SolveResult(t=sol.t, y=sol.y, status=sol.status, message=sol.message, nfev=sol.nfev)
