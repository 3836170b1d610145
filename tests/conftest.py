import logging

import matplotlib

matplotlib.use("Agg")

import pytest

from heatimplicit.fdm.pre.problems import Heat1Problem, Heat3Problem
from heatimplicit.logging_config import reset_handlers


@pytest.fixture
def heat1():
    return Heat1Problem()


@pytest.fixture
def heat3():
    return Heat3Problem()


@pytest.fixture
def no_show(monkeypatch):
    """Keep matplotlib from blocking on plt.show()."""
    import matplotlib.pyplot as plt

    shown = []
    monkeypatch.setattr(plt, "show", lambda *args, **kwargs: shown.append(True))
    yield shown
    plt.close("all")


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger("heatimplicit")
    reset_handlers(logger)
    logger.setLevel(logging.NOTSET)
