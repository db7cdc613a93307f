import math

import pytest

from mixsim.errors import NumericalDomainError
from mixsim.kinetics import (
    SPECIES,
    K_BUFFER_FORWARD,
    K_BUFFER_BACKWARD,
    K_DUSHMAN_REF,
    K_TRIIODIDE_FORWARD,
    K_TRIIODIDE_BACKWARD,
    dushman_rate_constant,
    ionic_strength,
    reaction_rates,
)


def _state():
    # mol/s, species order H+ TRIS TRISH+ I- IO3- I2 H2O I3-
    n = [1e-9, 2e-6, 1e-6, 5e-7, 1e-7, 1e-9, 1e-9, 2e-9]
    n0 = [1e-6, 3e-6, 3e-6, 1e-6, 2e-7, 0.0, 0.0, 0.0]
    return n, n0


def test_species_order():
    assert SPECIES == ["H+", "TRIS", "TRISH+", "I-", "IO3-", "I2", "H2O", "I3-"]


def test_ionic_strength_counts_charged_species_and_counter_ions():
    n, n0 = _state()
    v = 5e-5
    expected = 0.5 / v * (n0[0] + n[0] + n[2] + n0[3] + n[3] + n0[4] + n[4] + n[7])
    assert ionic_strength(n, n0, v) == expected


def test_negative_ionic_strength_raises():
    n, n0 = _state()
    n = list(n)
    n[0] = -1.0
    with pytest.raises(NumericalDomainError):
        ionic_strength(n, n0, 5e-5)


def test_dushman_constant_without_salt_is_reference_value():
    assert dushman_rate_constant(0.0) == K_DUSHMAN_REF
    # activity correction lowers k3 at moderate ionic strength
    assert dushman_rate_constant(0.1) < K_DUSHMAN_REF


def test_reaction_rates_match_rate_laws():
    n, n0 = _state()
    v = 5e-5
    rates = reaction_rates(n, n0, v)
    Z = ionic_strength(n, n0, v)
    k3 = K_DUSHMAN_REF * 10 ** (-1.93 * math.sqrt(Z) / (1 + math.sqrt(Z)) + 0.40 * Z)
    assert rates.ionic_strength == Z
    assert abs(rates.k_dushman - k3) <= 1e-12 * k3
    assert rates.buffer == K_BUFFER_FORWARD / v * n[0] * n[1] - K_BUFFER_BACKWARD * n[2]
    assert abs(rates.dushman - k3 / v ** 4 * n[0] ** 2 * n[3] ** 2 * n[4]) <= 1e-12 * abs(rates.dushman)
    assert rates.triiodide == K_TRIIODIDE_FORWARD / v * n[3] * n[5] - K_TRIIODIDE_BACKWARD * n[7]
