"""
Finite Difference Engine
========================
The core implementation of the implicit heat equation solver.

Why is this package needed?
---------------------------
1. Physics: It defines the problems (initial data, boundary data, exact solutions).
2. Time-Stepping: It manages the backward Euler loop (t=0 to t=T) and the
   tridiagonal solve of every step.
3. Output: It streams every time level into a Geomview MESH file.

Note: This package is pure Python/NumPy (plus numba for the Thomas kernels).
"""
