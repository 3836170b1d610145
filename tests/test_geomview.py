import numpy as np
import pytest

from heatimplicit.fdm.analysis.grid import Grid
from heatimplicit.fdm.post import geomview
from heatimplicit.fdm.post.geomview import GeomviewWriter, normalized_time, plot_mesh, read_mesh
from heatimplicit.fdm.solvers.solver import ImplicitSolver


def test_writes_geomview_mesh_layout(tmp_path):
    path = tmp_path / "mesh.gv"

    with GeomviewWriter(path) as writer:
        writer.write_header(Grid(0.0, 1.0, 1), steps=2)
        writer.write_row(0, np.array([1.0, 2.0, 3.0]))
        writer.write_row(1, np.array([0.5, 0.25, 0.125]))
        writer.write_row(2, np.array([1e-7, 123456789.0, -0.0]))

    assert path.read_text() == (
        "# heat_implicit: Geomview script\n"
        "{ appearance { +edge }\n"
        "MESH 3 3\n"
        "0 0 1\n"
        "0 0.5 2\n"
        "0 1 3\n"
        "0.5 0 0.5\n"
        "0.5 0.5 0.25\n"
        "0.5 1 0.125\n"
        "1 0 1e-07\n"
        "1 0.5 1.23457e+08\n"
        "1 1 -0\n"
        "}\n"
    )


def test_read_back_solver_output(heat1, tmp_path):
    path = tmp_path / "im1.gv"
    n, steps = 7, 5

    with GeomviewWriter(path) as writer:
        writer.write_header(heat1.grid(n), steps)
        solution = ImplicitSolver(heat1).solve(T=0.5, n=n, steps=steps, on_row=writer.write_row)

    mesh = read_mesh(path)

    assert (mesh.rows, mesh.cols) == (n + 2, steps + 1)
    assert mesh.data.shape == (steps + 1, n + 2, 3)
    assert np.allclose(mesh.times, np.arange(steps + 1) / steps)
    assert np.allclose(mesh.positions, np.arange(n + 2) / (n + 1))
    assert np.allclose(mesh.values[-1], solution.u, rtol=1e-5, atol=1e-6)


def test_zero_steps_has_single_block_at_time_zero(heat1, tmp_path):
    path = tmp_path / "im1.gv"

    with GeomviewWriter(path) as writer:
        writer.write_header(heat1.grid(3), 0)
        ImplicitSolver(heat1).solve(T=1.0, n=3, steps=0, on_row=writer.write_row)

    mesh = read_mesh(path)
    assert (mesh.rows, mesh.cols) == (5, 1)
    assert np.all(mesh.data[:, :, 0] == 0.0)


def test_non_finite_values_are_written_as_is(tmp_path):
    path = tmp_path / "nan.gv"

    with GeomviewWriter(path) as writer:
        writer.write_header(Grid(0.0, 1.0, 1), 0)
        writer.write_row(0, np.array([np.nan, np.inf, -np.inf]))

    assert path.read_text().splitlines()[3:6] == ["0 0 nan", "0 0.5 inf", "0 1 -inf"]


def test_open_fails_for_missing_directory(tmp_path):
    writer = GeomviewWriter(tmp_path / "missing" / "im1.gv")

    with pytest.raises(OSError):
        writer.open()


def test_failed_preamble_closes_the_file(tmp_path, monkeypatch):
    class FullDisk:
        closed = False

        def write(self, text):
            raise OSError(28, "No space left on device")

        def close(self):
            self.closed = True

    fp = FullDisk()
    monkeypatch.setattr(geomview, "open", lambda *args, **kwargs: fp, raising=False)
    writer = GeomviewWriter(tmp_path / "im1.gv")

    with pytest.raises(OSError):
        writer.open()

    assert fp.closed
    with pytest.raises(RuntimeError):
        writer.write_header(Grid(0.0, 1.0, 1), 0)


def test_positions_come_from_the_grid(heat1, tmp_path):
    path = tmp_path / "im1.gv"
    grid = heat1.grid(3)

    with GeomviewWriter(path) as writer:
        writer.write_header(grid, 0)
        writer.write_row(0, np.zeros(grid.number_of_points))

    assert np.array_equal(read_mesh(path).positions, grid.normalized_points)


def test_row_before_header_is_an_error(tmp_path):
    with GeomviewWriter(tmp_path / "x.gv") as writer:
        with pytest.raises(RuntimeError):
            writer.write_row(0, np.zeros(3))
        writer.write_header(Grid(0.0, 1.0, 1), 0)
        writer.write_row(0, np.zeros(3))


def test_failed_run_leaves_file_without_trailer(tmp_path):
    path = tmp_path / "partial.gv"

    with pytest.raises(ZeroDivisionError):
        with GeomviewWriter(path) as writer:
            writer.write_header(Grid(0.0, 1.0, 1), 1)
            writer.write_row(0, np.zeros(3))
            1 / 0

    assert not path.read_text().rstrip().endswith("}")
    with pytest.raises(ValueError):
        read_mesh(path)


def test_read_rejects_truncated_mesh(tmp_path):
    path = tmp_path / "bad.gv"
    path.write_text("{ appearance { +edge }\nMESH 3 2\n0 0 1\n0 0.5 1\n0 1 1\n}\n")

    with pytest.raises(ValueError, match="declares 6 vertices"):
        read_mesh(path)


def test_read_rejects_missing_header(tmp_path):
    path = tmp_path / "bad.gv"
    path.write_text("{ appearance { +edge }\nOFF 3 2\n}\n")

    with pytest.raises(ValueError, match="MESH header"):
        read_mesh(path)


def test_normalized_time():
    assert normalized_time(0, 0) == 0.0
    assert normalized_time(3, 4) == 0.75


def test_plot_mesh(heat1, tmp_path, no_show):
    path = tmp_path / "im1.gv"
    with GeomviewWriter(path) as writer:
        writer.write_header(heat1.grid(4), 3)
        ImplicitSolver(heat1).solve(T=0.2, n=4, steps=3, on_row=writer.write_row)

    plot_mesh(read_mesh(path))

    assert no_show == [True]
