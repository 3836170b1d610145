"""
Geomview MESH output
====================
Writes the space-time solution u(x, t) as a Geomview `MESH` object:

    { appearance { +edge }
    MESH <n+2> <steps+1>
    <k/steps> <j/(n+1)> <u_j>
    ...
    }

Rows are written block by block, one block of n+2 vertices per time step, in
increasing step order.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING, TextIO

import numpy as np
import matplotlib.pyplot as plt

if TYPE_CHECKING:
    import numpy.typing as npt

    from heatimplicit.fdm.analysis.grid import Grid

logger = logging.getLogger(__name__)

COMMENT_LINE = "# heat_implicit: Geomview script"
APPEARANCE_LINE = "{ appearance { +edge }"
MESH_KEYWORD = "MESH"
TRAILER_LINE = "}"


def normalized_time(k: int, steps: int) -> float:
    """Step index scaled to [0, 1]. A run without steps only has k = 0."""
    if steps == 0:
        return 0.0
    return k / steps


class GeomviewWriter:
    """
    Streaming writer of a Geomview MESH file.

    Usage:
        with GeomviewWriter("im1.gv") as writer:
            writer.write_header(grid, steps)
            writer.write_row(0, u)
            ...
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self._fp: TextIO | None = None
        self._positions: npt.NDArray[np.float64] | None = None
        self._steps: int | None = None
        self.rows_written: int = 0

    def open(self) -> None:
        """
        Open the destination and write the preamble.

        Raises:
            OSError: If the file cannot be opened or the preamble cannot be written.
                The file is closed again in the latter case.
        """
        fp = open(self.path, "w", encoding="utf-8")
        try:
            fp.write(f"{COMMENT_LINE}\n")
            fp.write(f"{APPEARANCE_LINE}\n")
        except OSError:
            fp.close()
            raise
        self._fp = fp
        logger.debug(f"Opened Geomview script {self.path}")

    def write_header(self, grid: Grid, steps: int) -> None:
        """Declare a mesh of (n + 2) x (steps + 1) vertices on `grid`."""
        if self._fp is None:
            raise RuntimeError("Writer is not open.")
        self._positions = grid.normalized_points
        self._steps = steps
        self._fp.write(f"{MESH_KEYWORD} {grid.number_of_points} {steps + 1}\n")

    def write_row(self, k: int, u: npt.NDArray[np.float64]) -> None:
        """
        Write the vertex block of time step k.

        Args:
            k: Step index, 0..steps.
            u: Solution at step k, (n+2, ) array including the boundary values.
        """
        if self._fp is None or self._positions is None or self._steps is None:
            raise RuntimeError("Header has to be written before any row.")
        tk = normalized_time(k, self._steps)
        lines = [f"{tk:g} {xj:g} {u[j]:g}\n" for j, xj in enumerate(self._positions)]
        self._fp.writelines(lines)
        self.rows_written += 1

    def close(self, complete: bool = True) -> None:
        """Write the trailer (unless `complete` is False) and close the file."""
        if self._fp is None:
            return
        try:
            if complete:
                self._fp.write(f"{TRAILER_LINE}\n")
        finally:
            self._fp.close()
            self._fp = None
        logger.debug(f"Closed Geomview script {self.path} after {self.rows_written} row blocks")

    def __enter__(self) -> GeomviewWriter:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close(complete=exc_type is None)


@dataclass
class MeshData:
    """Parsed Geomview MESH: `data[k, j]` is the (t, x, u) vertex of step k, point j."""
    rows: int
    cols: int
    data: npt.NDArray[np.float64]

    @property
    def times(self) -> npt.NDArray[np.float64]:
        return self.data[:, 0, 0]

    @property
    def positions(self) -> npt.NDArray[np.float64]:
        return self.data[0, :, 1]

    @property
    def values(self) -> npt.NDArray[np.float64]:
        return self.data[:, :, 2]


def read_mesh(path: str | os.PathLike[str]) -> MeshData:
    """
    Read a Geomview MESH file written by `GeomviewWriter`.

    Raises:
        ValueError: If the file is not a well-formed MESH.
    """
    with open(path, "r", encoding="utf-8") as f:
        lines = [line.strip() for line in f]

    body = [line for line in lines if line and not line.startswith("#")]
    if not body or body[0] != APPEARANCE_LINE:
        raise ValueError(f"'{path}' does not start with a Geomview appearance block.")

    header = body[1].split() if len(body) > 1 else []
    if len(header) != 3 or header[0] != MESH_KEYWORD:
        raise ValueError(f"'{path}' has no MESH header.")
    rows, cols = int(header[1]), int(header[2])

    vertices = body[2:2 + rows * cols]
    if len(vertices) != rows * cols:
        raise ValueError(f"'{path}' declares {rows * cols} vertices but holds {len(vertices)}.")
    if len(body) != 3 + rows * cols or body[-1] != TRAILER_LINE:
        raise ValueError(f"'{path}' is not terminated by '{TRAILER_LINE}'.")

    data = np.array([[float(v) for v in line.split()] for line in vertices], dtype=np.float64)
    if data.shape != (rows * cols, 3):
        raise ValueError(f"'{path}' has vertices that are not (t, x, u) triples.")

    return MeshData(rows=rows, cols=cols, data=data.reshape(cols, rows, 3))


def plot_mesh(mesh: MeshData, title: str = "u(x, t)") -> None:
    """
    Plot the space-time surface of a mesh in normalized coordinates.
    """
    t = mesh.data[:, :, 0]
    x = mesh.data[:, :, 1]
    u = mesh.data[:, :, 2]

    plt.rcParams["figure.constrained_layout.use"] = True
    fig = plt.figure(figsize=(8, 6))
    ax = fig.add_subplot(111, projection="3d")
    ax.plot_surface(x, t, u, cmap="jet", edgecolor="grey", linewidth=0.2)

    ax.set_title(title)
    ax.set_xlabel("x (normalized)")
    ax.set_ylabel("t (normalized)")
    ax.set_zlabel("u")
    plt.show()
