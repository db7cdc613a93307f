from typing import Optional, Sequence
import logging

from .reactors import simulate_incorporation
from .solver import SolverOptions

logger = logging.getLogger(__name__)


def triiodide_objective(
    tm: float,
    c0: Sequence[float],
    flows_ml_min: Sequence[float],
    i3_exp: float,
    convention: str = "modified",
    shape: str = "exponential",
    options: Optional[SolverOptions] = None,
) -> float:
    """Squared difference of measured and simulated outlet I3- concentration (mol/L)^2."""
    traj = simulate_incorporation(tm, c0, flows_ml_min, convention, shape, options)
    delta = (i3_exp - traj.final_triiodide_concentration) ** 2
    logger.info("(I3-I3_exp)² = %.3g at tm = %f ms", delta, tm * 1000.0)
    return delta


def segregation_objective(
    tm: float,
    c0: Sequence[float],
    flows_ml_min: Sequence[float],
    xs_exp: float,
    convention: str = "modified",
    shape: str = "exponential",
    options: Optional[SolverOptions] = None,
) -> float:
    """Squared difference of measured and simulated segregation index."""
    traj = simulate_incorporation(tm, c0, flows_ml_min, convention, shape, options)
    delta = (traj.final_segregation_index - xs_exp) ** 2
    logger.info("(Xs-Xs_exp)² = %.3g at tm = %f ms", delta, tm * 1000.0)
    return delta
