import argparse
import logging

from .estimation import ExperimentCase, fit_mixing_time
from .reactors import simulate_incorporation
from .settings import settings
from .solver import SolverOptions


def _add_case_arguments(p: argparse.ArgumentParser) -> None:
    case = ExperimentCase.default()
    p.add_argument("--c0", nargs=8, type=float, default=list(case.c0),
                   help="Concentrations (mol/L): H+ TRIS TRISH+ I- IO3- I2 H2O I3-")
    p.add_argument("--V1", type=float, default=case.flows_ml_min[0], help="Buffer volume flow (mL/min)")
    p.add_argument("--V2", type=float, default=case.flows_ml_min[1], help="Acid volume flow (mL/min)")
    p.add_argument("--model", default=case.convention, help="'original' (Fournier) or 'modified' (Arian)")
    p.add_argument("--fcn", default=case.shape, help="'linear' or 'exponential' incorporation function")
    p.add_argument("--method", default=settings.ode_method, help="solve_ivp method (BDF, Radau, LSODA)")
    p.add_argument("--rtol", type=float, default=settings.ode_rtol)
    p.add_argument("--atol", type=float, default=settings.ode_atol)


def run_cli() -> None:
    parser = argparse.ArgumentParser(description="MixSim - micro-mixing time from the Villermaux-Dushman reaction")
    parser.add_argument("--log-level", default=settings.log_level)
    sub = parser.add_subparsers(dest="cmd", required=True)

    # Forward simulation
    p_sim = sub.add_parser("simulate", help="Simulate the incorporation model for a given tm")
    _add_case_arguments(p_sim)
    p_sim.add_argument("--tm", type=float, required=True, help="Micro-mixing time (s)")
    p_sim.add_argument("--csv", type=str, default="incorporation.csv")

    # Parameter estimation
    default_case = ExperimentCase.default()
    p_fit = sub.add_parser("fit", help="Estimate tm from measured Xs and I3-")
    _add_case_arguments(p_fit)
    p_fit.add_argument("--xs-exp", type=float, default=default_case.xs_exp, help="Measured segregation index")
    p_fit.add_argument("--i3-exp", type=float, default=default_case.i3_exp, help="Measured I3- (mol/L)")
    p_fit.add_argument("--tm0", type=float, default=0.2, help="Initial guess for tm (s)")
    p_fit.add_argument("--xatol", type=float, default=settings.fmin_xatol)
    p_fit.add_argument("--fatol", type=float, default=settings.fmin_fatol)
    p_fit.add_argument("--maxfev", type=int, default=settings.fmin_maxfev)
    p_fit.add_argument("--csv", type=str, default=None, help="Write the trajectory at the I3- fit")

    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    options = SolverOptions(method=args.method, rtol=args.rtol, atol=args.atol)
    flows = (args.V1, args.V2)

    if args.cmd == "simulate":
        traj = simulate_incorporation(args.tm, args.c0, flows, args.model, args.fcn, options)
        traj.to_frame().to_csv(args.csv, index=False)
        print(f"Xs = {traj.final_segregation_index:.6g}, "
              f"I3- = {traj.final_triiodide_concentration:.6g} mol/L at tm = {args.tm * 1000:.3f} ms")
        return

    if args.cmd == "fit":
        case = ExperimentCase(
            c0=tuple(args.c0),
            flows_ml_min=flows,
            xs_exp=args.xs_exp,
            i3_exp=args.i3_exp,
            convention=args.model,
            shape=args.fcn,
        )
        fit = fit_mixing_time(case, tm0=args.tm0, options=options,
                              xatol=args.xatol, fatol=args.fatol, maxfev=args.maxfev)
        for label, res in (("Xs", fit.segregation), ("I3-", fit.triiodide)):
            flag = "" if res.converged else " (not converged)"
            print(f"tm from {label}: {res.tm * 1000:.4f} ms{flag}")
        if args.csv:
            fit.trajectory.to_frame().to_csv(args.csv, index=False)
        return


if __name__ == "__main__":
    run_cli()
