from __future__ import annotations

import inspect
import logging
import os
import sys
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


def empty_or_exit(size: int) -> npt.NDArray[np.float64]:
    """
    Allocate an uninitialized float64 vector or terminate the run.

    An allocation failure is logged together with the file and line of the call
    site and the process exits.

    Args:
        size: Number of entries. Zero is allowed (e.g. the off-diagonal of a 1x1 system).

    Raises:
        SystemExit: If the vector cannot be allocated.

    Returns:
        The allocated vector.
    """
    try:
        return np.empty(size, dtype=np.float64)
    except (MemoryError, ValueError) as e:
        caller = inspect.currentframe().f_back
        filename = os.path.basename(caller.f_code.co_filename) if caller else "<unknown>"
        lineno = caller.f_lineno if caller else 0
        logger.critical(f"{filename}:{lineno}: allocation of {size} float64 values failed ({e})")
        sys.exit(1)


def format_vector(v: npt.ArrayLike, fmt: str = "g") -> str:
    """Space separated rendering of a vector, used in debug logs."""
    return " ".join(f"{float(value):{fmt}}" for value in np.asarray(v).ravel())
