import math

import pytest

from multiped_py.geometry.vector import Vector3
from multiped_py.locomotion import catalog
from multiped_py.locomotion.gait_base import StepMode
from multiped_py.locomotion.static_gaits import HEXAPOD_LEGS
from multiped_py.locomotion.turning_gaits import (
    crab_step_vector, get_differential_step_length, leg_side, pivot_step_position,
)

RIGHT_LEGS = ("front_right", "middle_right", "rear_right")
LEFT_LEGS = ("front_left", "middle_left", "rear_left")


@pytest.mark.parametrize("leg", HEXAPOD_LEGS)
def test_no_turn_keeps_base_step(leg):
    assert get_differential_step_length(leg, 50.0, 0.0) == 50.0


def test_turning_right_shortens_right_legs():
    for right, left in zip(RIGHT_LEGS, LEFT_LEGS):
        inside = get_differential_step_length(right, 50.0, 0.2)
        outside = get_differential_step_length(left, 50.0, 0.2)
        assert inside < 50.0 < outside
        assert inside == pytest.approx(40.0)
        assert outside == pytest.approx(60.0)


def test_turning_left_shortens_left_legs():
    assert get_differential_step_length("front_left", 50.0, -0.2) < 50.0
    assert get_differential_step_length("front_right", 50.0, -0.2) > 50.0


def test_differential_step_is_clamped():
    assert get_differential_step_length("front_right", 50.0, 5.0) == pytest.approx(5.0)
    assert get_differential_step_length("front_left", 50.0, 5.0) == pytest.approx(100.0)


def test_leg_side():
    assert leg_side("front_right") == "right"
    assert leg_side("rear_left") == "left"
    assert leg_side("FR") == "right"
    assert leg_side("ML") == "left"
    assert leg_side("tail") is None


def test_crab_step_vector():
    step = crab_step_vector(0.0, 10.0)
    assert step == Vector3(10, 0, 0)
    sideways = crab_step_vector(math.pi / 2, 10.0)
    assert sideways.x == pytest.approx(0.0, abs=1e-12)
    assert sideways.y == pytest.approx(10.0)


def test_pivot_step_position_keeps_height():
    rotated = pivot_step_position(Vector3(10, 0, 5), Vector3.zero(), math.pi / 2)
    assert rotated.x == pytest.approx(0.0, abs=1e-12)
    assert rotated.y == pytest.approx(10.0)
    assert rotated.z == 5.0
    reverse = pivot_step_position(Vector3(10, 0, 5), Vector3.zero(), math.pi / 2, turn_direction=-1)
    assert reverse.y == pytest.approx(-10.0)


def test_pivot_about_offset_centre():
    rotated = pivot_step_position(Vector3(2, 1, 0), Vector3(1, 1, 0), math.pi)
    assert rotated.x == pytest.approx(0.0, abs=1e-12)
    assert rotated.y == pytest.approx(1.0)


def test_differential_wave_reverses_for_left_turns():
    right = catalog.create("differential_wave", {"leg_count": 6, "turn_rate": 0.3})
    left = catalog.create("differential_wave", {"leg_count": 6, "turn_rate": -0.3})
    assert right.get_leg_phase_offset("front_right") == 0.0
    assert right.get_leg_phase_offset("middle_right") == pytest.approx(1 / 6)
    assert left.get_leg_phase_offset("front_left") == 0.0
    assert left.get_leg_phase_offset("front_right") == pytest.approx(5 / 6)
    assert right.step_mode is StepMode.DIFFERENTIAL


def test_crab_and_pivot_patterns():
    crab = catalog.create("crab_walk", {"leg_count": 6, "direction": 0.25})
    assert crab.step_mode is StepMode.CRAB
    assert crab.param("direction") == 0.25
    assert crab.get_leg_phase_offset("front_left") == 0.5
    quad = catalog.create("pivot_turn", {"leg_count": 4, "turn_direction": -1})
    assert quad.param("turn_direction") == -1
    assert quad.get_leg_phase_offset("front_right") == quad.get_leg_phase_offset("rear_left") == 0.0
    odd = catalog.create("pivot_turn", {"leg_count": 5})
    assert [odd.get_leg_phase_offset(f"leg_{i}") for i in range(1, 6)] == [0.0, 0.5, 0.0, 0.5, 0.0]
