import warnings

import numpy as np

from mixsim.settings import Settings
from mixsim.solver import SolverOptions, integrate_ode


def test_stiff_decay_matches_analytic_solution():
    # A -> B with k = 1e4 1/s alongside a slow mode
    def rhs(t, y):
        return [-1e4 * y[0], 1e4 * y[0] - 0.5 * y[1]]

    res = integrate_ode(rhs, y0=[1.0, 0.0], t_span=(0.0, 2.0), t_eval=np.linspace(0, 2, 21),
                        method="bdf", rtol=1e-10, atol=1e-14)
    assert res.success
    assert res.y.shape == (2, 21)
    expected = 1e4 / (1e4 - 0.5) * (np.exp(-0.5 * 2.0) - np.exp(-1e4 * 2.0))
    assert abs(res.y[1][-1] - expected) < 1e-8


def test_tight_rtol_does_not_warn():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        res = integrate_ode(lambda t, y: [-y[0]], y0=[1.0], t_span=(0.0, 1.0), rtol=1e-20, atol=1e-21)
    assert abs(res.y[0][-1] - np.exp(-1.0)) < 1e-10


def test_settings_defaults_and_env_override(monkeypatch):
    s = Settings()
    assert s.ode_rtol <= 1e-15
    assert s.ode_method == "LSODA"
    monkeypatch.setenv("MIXSIM_ODE_RTOL", "1e-9")
    monkeypatch.setenv("MIXSIM_FMIN_MAXFEV", "50")
    s = Settings()
    assert s.ode_rtol == 1e-9
    assert s.fmin_maxfev == 50


def test_solver_options_from_settings():
    opts = SolverOptions.from_settings()
    assert opts.method == "LSODA"
    assert opts.atol == 1e-21
