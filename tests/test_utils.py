import logging

import numpy as np
import pytest

from heatimplicit.fdm import utils
from heatimplicit.fdm.utils import empty_or_exit, format_vector


def test_allocates_float_vectors():
    v = empty_or_exit(4)

    assert v.shape == (4,)
    assert v.dtype == np.float64
    assert empty_or_exit(0).shape == (0,)


def test_allocation_failure_exits_and_names_call_site(caplog):
    with caplog.at_level(logging.CRITICAL, logger="heatimplicit"):
        with pytest.raises(SystemExit) as excinfo:
            empty_or_exit(-1)

    assert excinfo.value.code == 1
    assert "test_utils.py:" in caplog.text


def test_memory_error_exits(monkeypatch, caplog):
    def fail(*args, **kwargs):
        raise MemoryError("out of memory")

    monkeypatch.setattr(utils.np, "empty", fail)

    with caplog.at_level(logging.CRITICAL, logger="heatimplicit"):
        with pytest.raises(SystemExit):
            empty_or_exit(10)

    assert "out of memory" in caplog.text


def test_format_vector():
    assert format_vector([1.0, 0.5, 1e-7]) == "1 0.5 1e-07"
    assert format_vector(np.array([[1.0], [2.0]]), fmt=".2f") == "1.00 2.00"
