from dataclasses import dataclass
from typing import List, Sequence
import math

from .errors import NumericalDomainError

Species = str

# Reaction system
# (I)    TRIS + H+               <-->  TRISH+           buffer
# (II)   5 I- + IO3- + 6 H+       -->  3 I2 + 3 H2O     Dushman
# (III)  I2 + I-                 <-->  I3-              triiodide equilibrium
SPECIES: List[Species] = ["H+", "TRIS", "TRISH+", "I-", "IO3-", "I2", "H2O", "I3-"]
H, TRIS, TRISH, I, IO3, I2, H2O, I3 = range(len(SPECIES))

K_BUFFER_FORWARD: float = 1e11  # L/mol/s (Owen 1934)
K_BUFFER_BACKWARD: float = 8.71e2  # 1/s (Owen 1934)
K_DUSHMAN_REF: float = 1.37e9  # L^4/mol^4/s (Arian 2021)
K_TRIIODIDE_FORWARD: float = 5.6e9  # L/mol/s (Ruasse 1986)
K_TRIIODIDE_BACKWARD: float = 7.5e6  # 1/s (Ruasse 1986)


@dataclass(frozen=True)
class ReactionRates:
    buffer: float  # r1, mol/s
    dushman: float  # r2, mol/s
    triiodide: float  # r3, mol/s
    k_dushman: float  # k3 at the current ionic strength
    ionic_strength: float  # mol/L


def ionic_strength(n: Sequence[float], n0: Sequence[float], v: float) -> float:
    """Ionic strength of the incorporation volume.

    Charged species are counted from the current fluxes plus the inlet fluxes
    of their counter-ions (ClO4-, K+ ...), divided by the incorporation volume
    flow v (L/s).
    """
    Z = 0.5 / v * (
        n0[H] + n[H] + n[TRISH]
        + n0[I] + n[I]
        + n0[IO3] + n[IO3]
        + n[I3]
    )
    if not Z >= 0.0:
        raise NumericalDomainError(f"ionic strength must be non-negative, got {Z!r}")
    return Z


def dushman_rate_constant(Z: float) -> float:
    """k3 with the activity-coefficient correction for ionic strength Z."""
    sqrt_Z = math.sqrt(Z)
    return K_DUSHMAN_REF * 10.0 ** (-1.93 * sqrt_Z / (1.0 + sqrt_Z) + 0.40 * Z)


def reaction_rates(n: Sequence[float], n0: Sequence[float], v: float) -> ReactionRates:
    """Rates of reactions I-III for fluxes n (mol/s) in volume flow v (L/s)."""
    Z = ionic_strength(n, n0, v)
    k3 = dushman_rate_constant(Z)
    r1 = K_BUFFER_FORWARD / v * n[H] * n[TRIS] - K_BUFFER_BACKWARD * n[TRISH]
    r2 = k3 / v ** 4 * n[H] ** 2 * n[I] ** 2 * n[IO3]
    r3 = K_TRIIODIDE_FORWARD / v * n[I] * n[I2] - K_TRIIODIDE_BACKWARD * n[I3]
    return ReactionRates(buffer=r1, dushman=r2, triiodide=r3, k_dushman=k3, ionic_strength=Z)
