"""MixSim: micro-mixing time estimation for the Villermaux-Dushman reaction.

This package provides:
- Kinetics: buffer, Dushman and triiodide rates with ionic-strength correction
- Incorporation: original (Fournier) and modified (Arian) incorporation laws
- Solver: SciPy solve_ivp wrapper for stiff ODEs
- Reactors: incorporation-model forward simulation and derived observables
- Objectives / Estimation: squared residuals and Nelder-Mead fit of tm
- Settings / CLI: environment-driven defaults and the command line
"""

__version__ = "0.1.0"
