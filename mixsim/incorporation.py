"""Incorporation laws for the original and the modified incorporation model.

Original model (Fournier 1996): the acid stream V2 grows by incorporating
the buffer stream, v(t) = V2 * g(t).
Modified model (Arian 2021): the buffer stream V1 is incorporated into V2,
v(t) = V2 + V1 * g(t).

Each model comes with a linear and an exponential incorporation function g.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple
import logging
import math

import numpy as np

logger = logging.getLogger(__name__)

ORIGINAL = "original"
MODIFIED = "modified"
LINEAR = "linear"
EXPONENTIAL = "exponential"

CONVENTIONS = {
    "original": ORIGINAL,
    "fournier": ORIGINAL,
    "modified": MODIFIED,
    "arian": MODIFIED,
}
SHAPES = {
    "linear": LINEAR,
    "lin": LINEAR,
    "exponential": EXPONENTIAL,
    "exp": EXPONENTIAL,
}


@dataclass(frozen=True)
class Configuration:
    convention: str
    shape: str
    diagnostics: Tuple[str, ...] = ()

    @property
    def is_fallback(self) -> bool:
        return bool(self.diagnostics)


def _lookup(table: dict, value) -> str | None:
    if not isinstance(value, str):
        return None
    return table.get(value.strip().lower())


def resolve_configuration(convention, shape) -> Configuration:
    """Map user spellings to a (convention, shape) pair.

    An unrecognized value on either axis selects the modified/linear pair,
    even when the other axis is valid.
    """
    conv = _lookup(CONVENTIONS, convention)
    shp = _lookup(SHAPES, shape)
    if conv is not None and shp is not None:
        return Configuration(convention=conv, shape=shp)

    fallback = "Proceed with modified incorporation model and linear incorporation function."
    diagnostics = []
    if conv is None:
        diagnostics.append(
            f"Invalid incorporation model {convention!r}. Options: 'original' or 'modified'. {fallback}"
        )
    if shp is None:
        diagnostics.append(
            f"Invalid incorporation function {shape!r}. Options: 'linear' or 'exponential'. {fallback}"
        )
    for message in diagnostics:
        logger.warning(message)
    return Configuration(convention=MODIFIED, shape=LINEAR, diagnostics=tuple(diagnostics))


@dataclass(frozen=True)
class IncorporationLaw:
    """Incorporation volume v(t) for one run.

    V1, V2: buffer and acid volume flows in L/s
    tm: micro-mixing time in s
    """
    configuration: Configuration
    V1: float
    V2: float
    tm: float

    @property
    def original(self) -> bool:
        return self.configuration.convention == ORIGINAL

    @property
    def exponential(self) -> bool:
        return self.configuration.shape == EXPONENTIAL

    def g(self, t):
        tau = t / self.tm
        if self.original:
            return np.exp(tau) if self.exponential else 1.0 + tau
        return 1.0 - np.exp(-tau) if self.exponential else tau

    def dgdt(self, t):
        if not self.exponential:
            return 1.0 / self.tm + 0.0 * t  # broadcast over t
        if self.original:
            return np.exp(t / self.tm) / self.tm
        return np.exp(-t / self.tm) / self.tm

    def volume(self, t):
        g = self.g(t)
        if self.original:
            return self.V2 * g
        return self.V2 + self.V1 * g

    def horizon(self) -> float:
        if self.original:
            if self.exponential:
                return math.log((self.V1 + self.V2) / self.V2) * self.tm
            return self.V1 / self.V2 * self.tm
        if self.exponential:
            return 5.0 * self.tm
        return self.tm

    def inlet_scale(self) -> float:
        """Factor on the inlet replenishment term of the species balances."""
        if self.original:
            return self.V2 / self.V1
        return 1.0
