from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .errors import NumericalDomainError
from .incorporation import IncorporationLaw, resolve_configuration
from .kinetics import SPECIES, H, TRIS, TRISH, I, IO3, I2, I3, reaction_rates
from .solver import SolverOptions, integrate_ode

Vector = List[float]

ML_PER_MIN_TO_L_PER_S: float = 1.0 / 1000.0 / 60.0


def flows_to_si(flows_ml_min: Sequence[float]) -> Tuple[float, float]:
    """(V1, V2) in mL/min -> L/s."""
    if len(flows_ml_min) != 2:
        raise ValueError("flows must be a (V1, V2) pair")
    V1, V2 = (float(f) for f in flows_ml_min)
    if not (V1 > 0.0 and V2 > 0.0):
        raise ValueError(f"flow rates must be positive, got {V1}, {V2}")
    return V1 * ML_PER_MIN_TO_L_PER_S, V2 * ML_PER_MIN_TO_L_PER_S


def inlet_fluxes(c0: Sequence[float], V1: float, V2: float) -> np.ndarray:
    """Inlet molar fluxes n0 (mol/s); H+ arrives with the acid stream V2, the rest with V1."""
    c = np.asarray(c0, dtype=float)
    if c.shape != (len(SPECIES),):
        raise ValueError(f"c0 must have one concentration per species ({len(SPECIES)})")
    if np.any(c < 0.0) or not np.all(np.isfinite(c)):
        raise ValueError("initial concentrations must be finite and non-negative")
    n0 = c * V1
    n0[H] = c[H] * V2
    n0.setflags(write=False)
    return n0


@dataclass(frozen=True)
class IncorporationReactor:
    """Species balances of the incorporation model.

    dn/dt = nu^T r(n, v(t)) + s * n0 * dg/dt for the buffer-stream species,
    where s = V2/V1 for the original model and 1 for the modified model.
    """
    law: IncorporationLaw
    n0: np.ndarray  # mol/s

    def rhs(self, t: float, n: Sequence[float]) -> Vector:
        law = self.law
        v = law.volume(t)
        feed = law.inlet_scale() * law.dgdt(t)
        rates = reaction_rates(n, self.n0, v)
        r1, r2, r3 = rates.buffer, rates.dushman, rates.triiodide
        n0 = self.n0
        return [
            -r1 - 6.0 * r2,
            -r1 + n0[TRIS] * feed,
            r1 + n0[TRISH] * feed,
            -5.0 * r2 - r3 + n0[I] * feed,
            -r2 + n0[IO3] * feed,
            3.0 * r2 - r3,
            3.0 * r2,
            r3,
        ]

    def initial_state(self) -> np.ndarray:
        n = np.zeros(len(SPECIES), dtype=float)
        n[H] = self.n0[H]
        return n


@dataclass(frozen=True)
class Trajectory:
    t: np.ndarray  # (n_samples,)
    n: np.ndarray  # (n_samples, n_species), mol/s
    v: np.ndarray  # (n_samples,), L/s
    Xs: np.ndarray  # (n_samples,)
    n0: np.ndarray
    V1: float  # L/s
    V2: float  # L/s
    tm: float
    law: IncorporationLaw

    @property
    def Yst(self) -> float:
        return stoichiometric_yield(self.n0)

    @property
    def final_segregation_index(self) -> float:
        return float(self.Xs[-1])

    @property
    def final_triiodide_concentration(self) -> float:
        """I3- concentration at the outlet, mol/L."""
        return float(self.n[-1, I3] / (self.V1 + self.V2))

    def to_frame(self) -> pd.DataFrame:
        df = pd.DataFrame({"t": self.t})
        for i, name in enumerate(SPECIES):
            df[name] = self.n[:, i]
        df["v"] = self.v
        df["Xs"] = self.Xs
        return df


def stoichiometric_yield(n0: Sequence[float]) -> float:
    """Maximum Dushman yield Yst = 6 IO3- / (6 IO3- + TRIS)."""
    return 6.0 * n0[IO3] / (6.0 * n0[IO3] + n0[TRIS])


def segregation_index(n: np.ndarray, n0: Sequence[float]) -> np.ndarray:
    """Xs = Y / Yst with Y = 2 (I2 + I3-) / H+(inlet); n is (..., n_species)."""
    Y = 2.0 * (n[..., I2] + n[..., I3]) / n0[H]
    return Y / stoichiometric_yield(n0)


def simulate_incorporation(
    tm: float,
    c0: Sequence[float],
    flows_ml_min: Sequence[float],
    convention: str = "modified",
    shape: str = "exponential",
    options: Optional[SolverOptions] = None,
    t_eval: Optional[Sequence[float]] = None,
) -> Trajectory:
    """Integrate the incorporation model over [0, horizon] for mixing time tm (s).

    c0: concentrations (mol/L) in species order, flows_ml_min: (V1 buffer, V2 acid).
    """
    tm = float(tm)
    if not (np.isfinite(tm) and tm > 0.0):
        raise NumericalDomainError(f"mixing time must be positive, got {tm!r}")
    options = options or SolverOptions.from_settings()

    V1, V2 = flows_to_si(flows_ml_min)
    n0 = inlet_fluxes(c0, V1, V2)
    law = IncorporationLaw(resolve_configuration(convention, shape), V1=V1, V2=V2, tm=tm)
    reactor = IncorporationReactor(law=law, n0=n0)

    tend = law.horizon()
    if t_eval is not None:
        t_eval = np.asarray(t_eval, dtype=float)
        if t_eval.ndim != 1 or np.any(t_eval < 0.0) or np.any(t_eval > tend):
            raise ValueError(f"t_eval must be a 1-D sequence within [0, {tend!r}]")
        # final observables are read at tend
        t_eval = np.unique(np.append(t_eval, tend))
    res = integrate_ode(
        reactor.rhs,
        y0=reactor.initial_state(),
        t_span=(0.0, tend),
        t_eval=t_eval,
        method=options.method,
        rtol=options.rtol,
        atol=options.atol,
    )
    if not res.success:
        raise NumericalDomainError(f"integration failed at tm={tm!r}: {res.message}")
    n_hist = res.y.T
    if not np.all(np.isfinite(n_hist)):
        raise NumericalDomainError(f"non-finite species flux at tm={tm!r}")

    return Trajectory(
        t=res.t,
        n=n_hist,
        v=law.volume(res.t),
        Xs=segregation_index(n_hist, n0),
        n0=n0,
        V1=V1,
        V2=V2,
        tm=tm,
        law=law,
    )
