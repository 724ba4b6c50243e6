from __future__ import annotations

import random
from typing import TYPE_CHECKING

import numpy as np
import pytest

from tinymat import runtime

if TYPE_CHECKING:
    from _pytest.python import Metafunc

BACKENDS = [runtime.NumPyBackend, runtime.PythonBackend]
BACKEND_FIXTURE = "backend"


def pytest_generate_tests(metafunc: Metafunc) -> None:
    if BACKEND_FIXTURE in metafunc.fixturenames:
        metafunc.parametrize(BACKEND_FIXTURE, BACKENDS, indirect=True, ids=[b.__name__ for b in BACKENDS])


@pytest.fixture
def backend(request: pytest.FixtureRequest) -> runtime.Backend:
    if request.param in BACKENDS:
        return request.param()
    raise ValueError("invalid internal test config")


@pytest.fixture(autouse=True)
def set_random_seeds(seed: int = 42):
    np.random.seed(seed)
    random.seed(seed)
