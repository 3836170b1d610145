from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


class Grid:
    """
    Uniform spatial grid on [a, b] with n interior points.

    Points x_0 = a and x_{n+1} = b carry the boundary values, the n points in
    between are the unknowns of each time step.
    """
    def __init__(
        self,
        a: float,
        b: float,
        n: int,
    ) -> None:
        """
        Initialize the grid.

        Args:
            a: Left end point of the domain.
            b: Right end point of the domain.
            n: Number of interior points.

        Raises:
            ValueError: If `n` < 1 or the interval is empty.
        """
        if n < 1:
            raise ValueError(f"Number of interior points must be at least 1, got {n}.")
        if not a < b:
            raise ValueError(f"Domain end points must satisfy a < b, got a={a}, b={b}.")

        self.a = float(a)
        self.b = float(b)
        self.n = int(n)

    def __repr__(self) -> str:
        """String representation of the grid."""
        return f"{self.__class__.__name__}(a={self.a}, b={self.b}, n={self.n})"

    @property
    def number_of_points(self) -> int:
        """Return the number of grid points, boundaries included."""
        return self.n + 2

    @property
    def dx(self) -> float:
        """Return the grid spacing."""
        return (self.b - self.a) / (self.n + 1)

    def x(self, j: int) -> float:
        """Coordinate of grid point j."""
        return self.a + (self.b - self.a) / (self.n + 1) * j

    @property
    def points(self) -> npt.NDArray[np.float64]:
        """Return the coordinates of all grid points."""
        return np.array([self.x(j) for j in range(self.number_of_points)], dtype=np.float64)

    @property
    def normalized_points(self) -> npt.NDArray[np.float64]:
        """Return j / (n + 1) for all grid points."""
        return np.arange(self.number_of_points, dtype=np.float64) / (self.n + 1)
