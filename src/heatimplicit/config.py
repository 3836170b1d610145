"""
Configuration & Path Management
===============================
This module serves as the central registry for output paths and global constants.

Why is this file needed?
------------------------
1. Abstraction: It keeps default file names and numeric thresholds in one place
   instead of scattering them over the solver and the CLI.
2. Paths: It resolves where Geomview scripts are written, relative to the
   working directory unless an explicit directory is given.

Exports:
    DEFAULT_PROBLEM (str): Registry name of the problem solved when none is given.
    MESH_FILENAMES (dict): Default Geomview output file per problem name.
    PIVOT_TOLERANCE (float): Relative pivot threshold of the checked Thomas solve.
"""
from __future__ import annotations

import os
from pathlib import Path

# Global Constants
DEFAULT_PROBLEM: str = "heat1"

MESH_FILENAMES: dict[str, str] = {
    "heat1": "im1.gv",
    "heat3": "im3.gv",
}

PIVOT_TOLERANCE: float = 1e-12


def get_output_path(filename: str, directory: str | os.PathLike[str] | None = None) -> Path:
    """
    Get absolute path of an output file.

    Args:
        filename: File name (or relative path) of the output.
        directory: Directory to resolve against. Defaults to the current working directory.

    Returns:
        Absolute path of the output file.
    """
    path = Path(filename)
    if path.is_absolute():
        return path

    base_path = Path(directory) if directory is not None else Path.cwd()
    return (base_path / path).resolve()


def default_mesh_filename(problem_name: str) -> str:
    """Return the default Geomview file name for a problem."""
    return MESH_FILENAMES.get(problem_name, f"{problem_name}.gv")
