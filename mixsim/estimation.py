from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Callable, Optional, Tuple
import logging

import numpy as np
from scipy.optimize import minimize

from .errors import NumericalDomainError
from .objectives import segregation_objective, triiodide_objective
from .reactors import Trajectory, simulate_incorporation
from .settings import settings
from .solver import SolverOptions

logger = logging.getLogger(__name__)

Objective = Callable[[float], float]


@dataclass(frozen=True)
class EstimationResult:
    tm: float  # s
    objective: float
    converged: bool
    n_evaluations: int
    n_iterations: int
    n_failed: int  # evaluations scored as +inf
    message: str


class _GuardedObjective:
    """Scalar adapter for scipy; failed evaluations score +inf."""

    def __init__(self, objective: Objective):
        self.objective = objective
        self.failures = 0

    def __call__(self, x: np.ndarray) -> float:
        tm = float(np.atleast_1d(x)[0])
        try:
            value = float(self.objective(tm))
        except NumericalDomainError as e:
            self.failures += 1
            logger.warning("Evaluation at tm = %f ms failed: %s", tm * 1000.0, e)
            return np.inf
        if not np.isfinite(value):
            self.failures += 1
            logger.warning("Evaluation at tm = %f ms returned %r", tm * 1000.0, value)
            return np.inf
        return value


def estimate_mixing_time(
    objective: Objective,
    tm0: float,
    *,
    xatol: Optional[float] = None,
    fatol: Optional[float] = None,
    maxiter: Optional[int] = None,
    maxfev: Optional[int] = None,
) -> EstimationResult:
    """Minimize objective(tm) with a Nelder-Mead simplex started at tm0 (s).

    Only a local minimum is guaranteed. If the iteration or evaluation cap is
    hit, the last iterate is returned with converged=False.
    """
    options = {
        "xatol": settings.fmin_xatol if xatol is None else xatol,
        "fatol": settings.fmin_fatol if fatol is None else fatol,
        "maxiter": settings.fmin_maxiter if maxiter is None else maxiter,
        "maxfev": settings.fmin_maxfev if maxfev is None else maxfev,
        "disp": False,
    }
    guarded = _GuardedObjective(objective)
    res = minimize(guarded, np.array([float(tm0)]), method="Nelder-Mead", options=options)

    result = EstimationResult(
        tm=float(res.x[0]),
        objective=float(res.fun),
        converged=bool(res.success),
        n_evaluations=int(res.nfev),
        n_iterations=int(res.nit),
        n_failed=guarded.failures,
        message=str(res.message),
    )
    if not result.converged:
        logger.warning(
            "Mixing time search did not converge after %d evaluations (%s); returning tm = %f ms",
            result.n_evaluations, result.message, result.tm * 1000.0,
        )
    return result


@dataclass(frozen=True)
class ExperimentCase:
    """Inputs of one mixing-time determination."""
    c0: Tuple[float, ...]  # mol/L, species order
    flows_ml_min: Tuple[float, float]  # (V1 buffer, V2 acid)
    xs_exp: float
    i3_exp: float  # mol/L
    convention: str = "modified"
    shape: str = "exponential"

    @staticmethod
    def default() -> "ExperimentCase":
        return ExperimentCase(
            c0=(0.03, 0.0898, 0.0898, 0.03197, 6.34e-3, 0.0, 0.0, 0.0),
            flows_ml_min=(2.0, 2.0),
            xs_exp=0.0546,
            i3_exp=0.1374e-3,
        )

    def segregation_objective(self, options: Optional[SolverOptions] = None) -> Objective:
        return partial(
            segregation_objective,
            c0=self.c0,
            flows_ml_min=self.flows_ml_min,
            xs_exp=self.xs_exp,
            convention=self.convention,
            shape=self.shape,
            options=options,
        )

    def triiodide_objective(self, options: Optional[SolverOptions] = None) -> Objective:
        return partial(
            triiodide_objective,
            c0=self.c0,
            flows_ml_min=self.flows_ml_min,
            i3_exp=self.i3_exp,
            convention=self.convention,
            shape=self.shape,
            options=options,
        )


@dataclass(frozen=True)
class MixingTimeFit:
    segregation: EstimationResult  # tm from Xs
    triiodide: EstimationResult  # tm from I3-
    trajectory: Trajectory  # at the triiodide tm


def fit_mixing_time(
    case: ExperimentCase,
    tm0: float = 0.2,
    options: Optional[SolverOptions] = None,
    **estimator_options,
) -> MixingTimeFit:
    """Fit tm to both observables and simulate the trajectory at the I3- fit."""
    options = options or SolverOptions.from_settings()
    from_xs = estimate_mixing_time(case.segregation_objective(options), tm0, **estimator_options)
    logger.info("tm from segregation index: %f ms", from_xs.tm * 1000.0)
    from_i3 = estimate_mixing_time(case.triiodide_objective(options), tm0, **estimator_options)
    logger.info("tm from triiodide concentration: %f ms", from_i3.tm * 1000.0)
    traj = simulate_incorporation(
        from_i3.tm, case.c0, case.flows_ml_min, case.convention, case.shape, options
    )
    return MixingTimeFit(segregation=from_xs, triiodide=from_i3, trajectory=traj)
