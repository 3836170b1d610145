"""
Command-Line Front End
======================
Parses `T n steps`, runs the implicit solver for the selected problem and
writes the Geomview script.

Why is this file needed?
------------------------
It acts as the orchestration root. It:
1. Validates the command line before anything is computed.
2. Configures logging. An unwritable log file ends the run like an unwritable
   mesh file.
3. Opens the output file first, so an unwritable destination aborts the run
   without computing anything.
4. Wires the solver's row callback to the Geomview writer.
"""
from __future__ import annotations

import argparse
import logging
import math
from typing import Optional, Sequence

from heatimplicit.config import DEFAULT_PROBLEM, default_mesh_filename, get_output_path
from heatimplicit.fdm.post.geomview import GeomviewWriter, plot_mesh, read_mesh
from heatimplicit.fdm.pre.problems import ProblemName, get_problem
from heatimplicit.fdm.solvers.solver import ImplicitSolver
from heatimplicit.fdm.solvers.tridiagonal import NumericalError
from heatimplicit.logging_config import setup_logging

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def positive_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{text}' is not a number") from None
    if not (value > 0.0 and math.isfinite(value)):
        raise argparse.ArgumentTypeError(f"T must be a finite number > 0, got {text}")
    return value


def bounded_int(minimum: int):
    """argparse type accepting integers >= minimum."""
    def parse(text: str) -> int:
        try:
            value = int(text, 10)
        except ValueError:
            raise argparse.ArgumentTypeError(f"'{text}' is not an integer") from None
        if value < minimum:
            raise argparse.ArgumentTypeError(f"must be >= {minimum}, got {text}")
        return value
    return parse


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="heatimplicit",
        description="Solve u_t = u_xx with the implicit (backward Euler) scheme and write a Geomview mesh.",
    )
    parser.add_argument("T", type=positive_float, help="final time, 0 <= t <= T")
    parser.add_argument("n", type=bounded_int(1), help="interior grid points, a = x[0], x[1], ..., x[n], x[n+1] = b")
    parser.add_argument("steps", type=bounded_int(0), help="time steps, 0 = t[0], t[1], ..., t[steps] = T")
    parser.add_argument(
        "--problem",
        choices=[p.value for p in ProblemName],
        default=DEFAULT_PROBLEM,
        help="problem to solve (default: %(default)s)",
    )
    parser.add_argument("--output", "-o", help="Geomview output file (default: per-problem name in the working directory)")
    parser.add_argument("--checked", action="store_true", help="reject degenerate pivots instead of propagating inf/nan")
    parser.add_argument("--plot", action="store_true", help="plot the problem data and the written mesh with matplotlib")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging level (default: %(default)s)",
    )
    parser.add_argument("--log-file", help="also write the log to this file")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    # 1. Command line. Invalid input exits with status 2 here.
    args = parse_args(argv)

    # 2. Logging. The console handler is up even when the log file fails.
    try:
        setup_logging(level=getattr(logging, args.log_level), log_file=args.log_file)
    except OSError as e:
        logger.error(f"Log file '{args.log_file}' cannot be opened for writing: {e}")
        return EXIT_FAILURE

    problem = get_problem(args.problem)
    logger.info(f"Problem: {problem.NAME}")

    output_path = get_output_path(args.output or default_mesh_filename(args.problem))
    grid = problem.grid(args.n)
    solver = ImplicitSolver(problem, checked=args.checked)

    # 3. Output first, then compute
    try:
        writer = GeomviewWriter(output_path)
        writer.open()
    except OSError as e:
        logger.error(f"File '{output_path}' cannot be opened for writing: {e}")
        return EXIT_FAILURE

    complete = False
    try:
        writer.write_header(grid, args.steps)
        solution = solver.solve(args.T, args.n, args.steps, on_row=writer.write_row)
        complete = True
    except NumericalError as e:
        logger.error(f"Numerical failure: {e}")
        return EXIT_FAILURE
    finally:
        writer.close(complete=complete)

    logger.info(f"Geomview script written to {output_path}")
    if solution.max_error is not None:
        logger.info(f"Maximum error at t = {args.T:g} is {solution.max_error:g}")

    # 4. Optional preview: problem data, then the computed surface
    if args.plot:
        problem.plot()
        plot_mesh(read_mesh(output_path), title=problem.NAME)

    return EXIT_SUCCESS
