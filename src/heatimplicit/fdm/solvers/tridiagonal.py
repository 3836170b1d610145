"""
Tridiagonal linear solver (Thomas algorithm).

The system A x = b is stored as three diagonals:

    | d0  c0                    |   | x0   |   | b0   |
    | a0  d1  c1                |   | x1   |   | b1   |
    |     a1  d2  c2            |   | x2   | = | b2   |
    |         ..  ..  ..        |   | ..   |   | ..   |
    |           a(n-2)  d(n-1)  |   | x(n-1) | | b(n-1) |

Both solvers work in place: the diagonal `d` and the right-hand side `b` are
consumed by the elimination and must be rebuilt before the next call. The
solution vector `x` may be the same buffer as `b`.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numba as nb

from heatimplicit.config import PIVOT_TOLERANCE

if TYPE_CHECKING:
    import numpy.typing as npt


class NumericalError(ArithmeticError):
    """Raised by the checked solve when a pivot vanishes or the result is not finite."""


# error_model="numpy": a zero pivot gives inf/nan instead of ZeroDivisionError
@nb.njit(cache=True, error_model="numpy")
def _thomas(
    n: int,
    a: npt.NDArray[np.float64],
    d: npt.NDArray[np.float64],
    c: npt.NDArray[np.float64],
    b: npt.NDArray[np.float64],
    x: npt.NDArray[np.float64],
) -> None:
    # Forward sweep: eliminate the sub-diagonal
    for i in range(1, n):
        m = a[i - 1] / d[i - 1]
        d[i] -= m * c[i - 1]
        b[i] -= m * b[i - 1]

    # Back substitution on the upper bidiagonal system
    x[n - 1] = b[n - 1] / d[n - 1]
    for i in range(n - 2, -1, -1):
        x[i] = (b[i] - c[i] * x[i + 1]) / d[i]


@nb.njit(cache=True, error_model="numpy")
def _thomas_guarded(
    n: int,
    a: npt.NDArray[np.float64],
    d: npt.NDArray[np.float64],
    c: npt.NDArray[np.float64],
    b: npt.NDArray[np.float64],
    x: npt.NDArray[np.float64],
    tol: float,
) -> int:
    """Thomas sweep that stops at the first tiny pivot. Returns its row, or -1."""
    scale = 0.0
    for i in range(n):
        if abs(d[i]) > scale:
            scale = abs(d[i])
    threshold = tol * scale

    for i in range(1, n):
        if not abs(d[i - 1]) > threshold:
            return i - 1
        m = a[i - 1] / d[i - 1]
        d[i] -= m * c[i - 1]
        b[i] -= m * b[i - 1]

    if not abs(d[n - 1]) > threshold:
        return n - 1
    x[n - 1] = b[n - 1] / d[n - 1]
    for i in range(n - 2, -1, -1):
        x[i] = (b[i] - c[i] * x[i + 1]) / d[i]
    return -1


def _check_system(
    n: int,
    a: npt.NDArray[np.float64],
    d: npt.NDArray[np.float64],
    c: npt.NDArray[np.float64],
    b: npt.NDArray[np.float64],
    x: npt.NDArray[np.float64],
) -> None:
    if n < 1:
        raise ValueError(f"System dimension must be at least 1, got {n}.")
    for name, vector, length in (("a", a, n - 1), ("c", c, n - 1), ("d", d, n), ("b", b, n), ("x", x, n)):
        if len(vector) < length:
            raise ValueError(f"Vector '{name}' has {len(vector)} entries, expected at least {length}.")


def trisolve(
    n: int,
    a: npt.NDArray[np.float64],
    d: npt.NDArray[np.float64],
    c: npt.NDArray[np.float64],
    b: npt.NDArray[np.float64],
    x: npt.NDArray[np.float64],
) -> None:
    """
    Solve a tridiagonal system with the Thomas algorithm.

    No pivoting is performed. The matrix has to be diagonally dominant; a zero
    pivot is not detected and propagates inf/nan into `x`.

    Args:
        n: Dimension of the system.
        a: Sub-diagonal, (n-1, ) array.
        d: Diagonal, (n, ) array. Overwritten.
        c: Super-diagonal, (n-1, ) array.
        b: Right-hand side, (n, ) array. Overwritten.
        x: Output, (n, ) array. May alias `b`.

    Raises:
        ValueError: If `n` < 1 or a vector is too short.
    """
    _check_system(n, a, d, c, b, x)
    _thomas(n, a, d, c, b, x)


def trisolve_checked(
    n: int,
    a: npt.NDArray[np.float64],
    d: npt.NDArray[np.float64],
    c: npt.NDArray[np.float64],
    b: npt.NDArray[np.float64],
    x: npt.NDArray[np.float64],
    tol: float = PIVOT_TOLERANCE,
) -> None:
    """
    Solve a tridiagonal system like `trisolve`, refusing degenerate input.

    A pivot is rejected when |pivot| <= tol * max|d|, measured on the diagonal
    before elimination.

    Args:
        n: Dimension of the system.
        a: Sub-diagonal, (n-1, ) array.
        d: Diagonal, (n, ) array. Overwritten.
        c: Super-diagonal, (n-1, ) array.
        b: Right-hand side, (n, ) array. Overwritten.
        x: Output, (n, ) array. May alias `b`.
        tol: Relative pivot tolerance.

    Raises:
        ValueError: If `n` < 1 or a vector is too short.
        NumericalError: If a pivot is too small or the solution is not finite.
    """
    _check_system(n, a, d, c, b, x)
    row = _thomas_guarded(n, a, d, c, b, x, tol)
    if row >= 0:
        raise NumericalError(f"Pivot {d[row]:g} in row {row} is too small (tolerance {tol:g}).")
    if not np.all(np.isfinite(x[:n])):
        raise NumericalError("Tridiagonal solve produced non-finite values.")
