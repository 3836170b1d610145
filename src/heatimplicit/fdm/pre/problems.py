from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum

import numpy as np
import matplotlib.pyplot as plt

from heatimplicit.fdm.analysis.grid import Grid


class ProblemName(StrEnum):
    HEAT1 = "heat1"
    HEAT3 = "heat3"


class ProblemSpec(ABC):
    """
    Abstract base class for 1D heat equation problems u_t = u_xx on [a, b].

    A problem provides the initial condition, the Dirichlet data on both ends
    and optionally the exact solution. Instances are read-only inputs of the solver.
    """
    NAME: str = "Heat Problem"

    a: float = -1.0
    b: float = 1.0

    @abstractmethod
    def initial(self, x: float) -> float:
        """
        Get the initial condition u(x, 0).

        Args:
            x: Position in [a, b].

        Returns:
            Initial value at x.
        """
        pass

    @abstractmethod
    def boundary_left(self, t: float) -> float:
        """Dirichlet value u(a, t)."""
        pass

    @abstractmethod
    def boundary_right(self, t: float) -> float:
        """Dirichlet value u(b, t)."""
        pass

    @property
    def has_exact(self) -> bool:
        """Whether `exact` is available for error reporting."""
        return False

    def exact(self, x: float, t: float) -> float:
        """
        Get the exact solution u(x, t).

        Raises:
            NotImplementedError: If the problem has no closed-form solution.
        """
        raise NotImplementedError(f"Problem '{self.NAME}' has no exact solution.")

    def grid(self, n: int) -> Grid:
        """Uniform grid on [a, b] with n interior points."""
        return Grid(self.a, self.b, n)

    def plot(self, times: tuple[float, ...] = (0.0, 0.25, 0.5, 1.0)) -> None:
        """
        Plot the initial condition, and the exact solution at `times` when available.
        """
        x = np.linspace(self.a, self.b, 401)

        plt.rcParams["figure.constrained_layout.use"] = True
        fig = plt.figure(figsize=(7, 5))

        plt.plot(x, [self.initial(xi) for xi in x], 'k', lw=2, label="u(x, 0)")
        if self.has_exact:
            for t in times:
                plt.plot(x, [self.exact(xi, t) for xi in x], '--', lw=1, label=f"exact, t = {t:g}")

        plt.grid(visible=True, which='major', axis='both', linestyle='-', color='gray', lw=0.5)
        plt.minorticks_on()
        plt.grid(visible=True, which='minor', axis='both', linestyle=':', color='gray', lw=0.5)

        plt.title(self.NAME)
        plt.xlabel("x")
        plt.ylabel("u")
        plt.legend()
        plt.show()


class Heat1Problem(ProblemSpec):
    """
    Heat equation on [-1, 1] with exact solution exp(-pi^2 t / 4) cos(pi x / 2).
    """
    NAME = "Heat 1 (exact solution)"

    a = -1.0
    b = 1.0

    @property
    def has_exact(self) -> bool:
        return True

    def exact(self, x: float, t: float) -> float:
        return float(np.exp(-np.pi * np.pi / 4 * t) * np.cos(np.pi / 2 * x))

    def initial(self, x: float) -> float:
        return self.exact(x, 0.0)

    def boundary_left(self, t: float) -> float:
        return self.exact(self.a, t)

    def boundary_right(self, t: float) -> float:
        return self.exact(self.b, t)


class Heat3Problem(ProblemSpec):
    """
    Rectangular bump: u0(x) = 1 for |x| < 0.4, else 0, with zero boundary values.
    """
    NAME = "Heat 3 (rectangular bump)"

    a = -1.0
    b = 1.0

    HALF_WIDTH: float = 0.4

    def initial(self, x: float) -> float:
        return 1.0 if abs(x) < self.HALF_WIDTH else 0.0

    def boundary_left(self, t: float) -> float:
        return 0.0

    def boundary_right(self, t: float) -> float:
        return 0.0


PROBLEMS: dict[ProblemName, type[ProblemSpec]] = {
    ProblemName.HEAT1: Heat1Problem,
    ProblemName.HEAT3: Heat3Problem,
}


def get_problem(name: str) -> ProblemSpec:
    """
    Create the problem registered under `name`.

    Raises:
        ValueError: If no problem is registered under that name.
    """
    try:
        key = ProblemName(name)
    except ValueError:
        choices = ", ".join(p.value for p in ProblemName)
        raise ValueError(f"Unknown problem '{name}'. Available problems: {choices}.") from None
    return PROBLEMS[key]()
