from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

import numpy as np

from heatimplicit.fdm.analysis.grid import Grid
from heatimplicit.fdm.solvers.tridiagonal import trisolve, trisolve_checked
from heatimplicit.fdm.utils import empty_or_exit, format_vector

if TYPE_CHECKING:
    import numpy.typing as npt

    from heatimplicit.fdm.pre.problems import ProblemSpec

logger = logging.getLogger(__name__)

RowCallback = Callable[[int, "npt.NDArray[np.float64]"], None]


@dataclass
class Solution:
    """Result of an implicit run."""
    grid: Grid
    u: npt.NDArray[np.float64]
    t: float
    dt: float
    r: float
    steps: int
    max_error: Optional[float] = None


def get_error(problem: ProblemSpec, u: npt.NDArray[np.float64], grid: Grid, t: float) -> float:
    """
    Maximum pointwise difference between `u` and the exact solution at time t.

    Args:
        problem: Problem with an exact solution.
        u: Solution on all grid points, (n+2, ) array.
        grid: Grid the solution lives on.
        t: Time of the solution.

    Returns:
        The L-infinity error over the grid, boundaries included.
    """
    err = 0.0
    for j, x in enumerate(grid.points):
        diff = abs(u[j] - problem.exact(x, t))
        # nan has to win, max() would silently drop it
        if diff > err or np.isnan(diff):
            err = diff
    return float(err)


class ImplicitSolver:
    """
    Backward Euler finite difference solver of u_t = u_xx with Dirichlet boundaries.

    Every step solves (1 + 2r) u_j - r u_{j-1} - r u_{j+1} = u_j^old for the
    interior points, with the boundary values of the new time level moved to
    the right-hand side. The scheme is unconditionally stable.
    """

    def __init__(
        self,
        problem: ProblemSpec,
        checked: bool = False,
    ) -> None:
        """
        Initialize the solver with a problem.

        Args:
            problem: The problem to be solved. It is never modified.
            checked: Reject degenerate pivots with `NumericalError` instead of
                letting inf/nan propagate.
        """
        self.problem = problem
        self.checked = checked
        self._trisolve = trisolve_checked if checked else trisolve

    def solve(
        self,
        T: float,
        n: int,
        steps: int,
        on_row: Optional[RowCallback] = None,
    ) -> Solution:
        """
        March from t = 0 to t = T.

        Args:
            T: Final time, T > 0.
            n: Number of interior grid points, n >= 1.
            steps: Number of time steps, steps >= 0. Zero steps only samples the initial condition,
                the error is still measured against the exact solution at T.
            on_row: Called with (k, u) after the initial condition (k = 0) and after every
                step. `u` is the solver's own buffer and is overwritten later, copy it to keep it.

        Raises:
            ValueError: If T, n or steps are out of range.
            NumericalError: Only with `checked`, on a degenerate solve.

        Returns:
            The solution at the last time level.
        """
        if not T > 0.0:
            raise ValueError(f"Final time must be positive, got {T}.")
        if n < 1:
            raise ValueError(f"Number of interior points must be at least 1, got {n}.")
        if steps < 0:
            raise ValueError(f"Number of time steps must not be negative, got {steps}.")

        problem = self.problem
        grid = problem.grid(n)
        dx = grid.dx
        dt = T / steps if steps > 0 else float("inf")
        r = dt / (dx * dx)

        logger.info(
            f"{problem.a:g} < x < {problem.b:g}, 0 < t < {T:g}, "
            f"dx = {dx:g}, dt = {dt:g}, r = dt/dx^2 = {r:g}"
        )

        # Two solution buffers. `cur` says which one holds the current time level.
        buffers = (empty_or_exit(n + 2), empty_or_exit(n + 2))
        d = empty_or_exit(n)
        c = empty_or_exit(n - 1)
        cur = 0

        u = buffers[cur]
        for j, x in enumerate(grid.points):
            u[j] = problem.initial(x)
        if on_row is not None:
            on_row(0, u)

        # Sub- and super-diagonal are the same constant vector for every step
        c[:] = -r

        for k in range(1, steps + 1):
            t = T * k / steps
            u = buffers[cur]
            v = buffers[1 - cur]

            # New boundary values go into the buffer that becomes current below
            v[0] = problem.boundary_left(t)
            v[n + 1] = problem.boundary_right(t)
            u[1] += r * v[0]
            u[n] += r * v[n + 1]

            # The solve consumes d and u[1:n+1]
            d[:] = 1.0 + 2.0 * r
            self._trisolve(n, c, d, c, u[1:n + 1], v[1:n + 1])

            cur = 1 - cur
            if on_row is not None:
                on_row(k, buffers[cur])

            logger.debug(f"Step: {k}/{steps} - Time: {t:g}")

        u = buffers[cur]
        t_final = T if steps > 0 else 0.0
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"u(x, {t_final:g}) = [{format_vector(u)}]")

        solution = Solution(grid=grid, u=u.copy(), t=t_final, dt=dt, r=r, steps=steps)
        if problem.has_exact:
            # Always against the exact solution at T, also when no step was taken
            solution.max_error = get_error(problem, u, grid, T)
            logger.debug(f"Maximum error at t = {T:g}: {solution.max_error:g}")

        return solution
