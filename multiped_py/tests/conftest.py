import pytest

from multiped_py.config import GaitConfig
from multiped_py.tests.robots import HEXAPOD_HIPS, QUADRUPED_HIPS, make_chains


@pytest.fixture
def hexapod_chains():
    return make_chains(HEXAPOD_HIPS)


@pytest.fixture
def quadruped_chains():
    return make_chains(QUADRUPED_HIPS)


@pytest.fixture
def gait_config():
    return GaitConfig(body_height=100.0, standoff_distance=60.0, step_length=50.0, cycle_time=2.0)
