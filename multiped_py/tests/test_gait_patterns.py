import pytest

from multiped_py.errors import InvalidPatternError, UnknownPatternError
from multiped_py.locomotion import catalog
from multiped_py.locomotion.gait_base import GaitPattern, normalize_phase
from multiped_py.locomotion.static_gaits import HEXAPOD_LEGS, QUADRUPED_LEGS

PHASES = [i / 100 for i in range(100)]


def test_normalize_phase():
    assert normalize_phase(1.25) == pytest.approx(0.25)
    assert normalize_phase(-0.25) == pytest.approx(0.75)
    assert normalize_phase(1.0) == 0.0
    assert normalize_phase(0.1 + 0.4) == 0.5
    assert normalize_phase(-1e-17) == 0.0


def test_tripod_offsets():
    tripod = catalog.create("tripod")
    assert tripod.duty_factor == 0.5
    for leg in ("front_right", "middle_left", "rear_right"):
        assert tripod.get_leg_phase_offset(leg) == 0.0
    for leg in ("front_left", "middle_right", "rear_left"):
        assert tripod.get_leg_phase_offset(leg) == 0.5
    assert tripod.calculate_leg_phase("front_right", 0.0) == (0.0, True)
    assert tripod.calculate_leg_phase("front_left", 0.0) == (0.5, False)


@pytest.mark.parametrize("phase", PHASES)
def test_tripod_always_has_three_stance_legs(phase):
    tripod = catalog.create("tripod")
    stance = tripod.get_stance_legs(phase, HEXAPOD_LEGS)
    assert len(stance) == 3
    assert set(stance) in ({"front_right", "middle_left", "rear_right"}, {"front_left", "middle_right", "rear_left"})


@pytest.mark.parametrize("phase", PHASES)
def test_wave_keeps_five_legs_down(phase):
    wave = catalog.create("wave", {"leg_count": 6})
    assert len(wave.get_stance_legs(phase, HEXAPOD_LEGS)) >= 5


def test_wave_offsets_follow_the_ring():
    wave = catalog.create("wave", {"leg_count": 6})
    assert wave.duty_factor == pytest.approx(5 / 6)
    for i, leg in enumerate(["front_right", "middle_right", "rear_right", "rear_left", "middle_left", "front_left"]):
        assert wave.get_leg_phase_offset(leg) == pytest.approx(i / 6)
    quad = catalog.create("wave", {"leg_count": 4})
    assert quad.duty_factor == pytest.approx(0.75)
    assert [quad.get_leg_phase_offset(leg) for leg in ("front_right", "rear_right", "rear_left", "front_left")] == [0.0, 0.25, 0.5, 0.75]


def test_wave_for_other_leg_counts_uses_generic_names():
    wave = catalog.create("wave", {"leg_count": 8})
    assert wave.legs == tuple(f"leg_{i}" for i in range(1, 9))
    named = catalog.create("wave", {"leg_count": 5, "leg_names": ["a", "b", "c", "d", "e"]})
    assert named.get_leg_phase_offset("c") == pytest.approx(0.4)


def test_ripple_offsets():
    ripple = catalog.create("ripple", {"leg_count": 6})
    assert ripple.duty_factor == 0.75
    for i, leg in enumerate(["front_right", "rear_left", "middle_right", "front_left", "rear_right", "middle_left"]):
        assert ripple.get_leg_phase_offset(leg) == pytest.approx(i / 6)


def test_pronk_all_legs_together():
    pronk = catalog.create("pronk", {"leg_count": 4})
    assert pronk.duty_factor == 0.3
    assert len(pronk.get_stance_legs(0.1, QUADRUPED_LEGS)) == 4
    assert pronk.get_stance_legs(0.5, QUADRUPED_LEGS) == []


def test_gallop_offsets_and_stance():
    gallop = catalog.create("gallop")
    legs = ("front_right", "front_left", "rear_right", "rear_left")
    assert [gallop.get_leg_phase_offset(leg) for leg in legs] == [0.0, 0.125, 0.25, 0.375]
    assert gallop.duty_factor == 0.25
    assert sorted(gallop.get_stance_legs(0.0)) == ["front_left", "front_right"]
    assert sorted(gallop.get_stance_legs(0.9)) == ["front_left", "rear_right"]


def test_trot_and_bound_offsets():
    trot = catalog.create("quadruped_trot")
    assert trot.duty_factor == 0.6
    assert trot.get_leg_phase_offset("front_right") == trot.get_leg_phase_offset("rear_left") == 0.0
    assert trot.get_leg_phase_offset("front_left") == trot.get_leg_phase_offset("rear_right") == 0.5
    bound = catalog.create("bound")
    assert bound.duty_factor == 0.35
    assert bound.get_leg_phase_offset("front_left") == 0.0
    assert bound.get_leg_phase_offset("rear_left") == 0.5


def test_calculate_leg_phase():
    tripod = catalog.create("tripod")
    assert tripod.calculate_leg_phase("front_right", 0.2) == (pytest.approx(0.2), True)
    assert tripod.calculate_leg_phase("front_left", 0.2) == (pytest.approx(0.7), False)
    assert tripod.calculate_leg_phase("front_left", 0.6) == (pytest.approx(0.1), True)


def test_unknown_leg_uses_zero_offset():
    tripod = catalog.create("tripod")
    assert tripod.get_leg_phase_offset("tail") == 0.0
    assert tripod.calculate_leg_phase("tail", 0.3) == (pytest.approx(0.3), True)


def test_stance_and_swing_sub_phases():
    trot = catalog.create("quadruped_trot")
    assert trot.stance_phase(0.3) == pytest.approx(0.5)
    assert trot.swing_phase(0.3) is None
    assert trot.swing_phase(0.8) == pytest.approx(0.5)
    assert trot.stance_phase(0.8) is None


def test_max_swing_legs():
    assert catalog.create("tripod").max_swing_legs(6) == 3
    assert catalog.create("wave").max_swing_legs(6) == 1


@pytest.mark.parametrize("duty", [0.0, -0.1, 1.5])
def test_invalid_duty_factor(duty):
    with pytest.raises(InvalidPatternError):
        GaitPattern("bad", duty, {"front_right": 0.0})


@pytest.mark.parametrize("offset", [1.0, -0.1, float("nan")])
def test_invalid_offset(offset):
    with pytest.raises(InvalidPatternError):
        GaitPattern("bad", 0.5, {"front_right": offset})


def test_pattern_is_read_only():
    tripod = catalog.create("tripod")
    with pytest.raises(TypeError):
        tripod.offsets["front_right"] = 0.3


def test_unknown_pattern():
    with pytest.raises(UnknownPatternError):
        catalog.create("moonwalk")
    with pytest.raises(KeyError):
        catalog.create("moonwalk")


def test_catalog_lists_fourteen_patterns():
    assert len(catalog.available_patterns()) == 14
    for name in catalog.available_patterns():
        assert catalog.create(name, {"leg_count": 6 if catalog.is_suitable_for_legs(name, 6) else 4}).name == name


@pytest.mark.parametrize("name,count,expected", [
    ("tripod", 6, True),
    ("tripod", 4, False),
    ("fast_tripod", 6, True),
    ("differential_tripod", 8, False),
    ("quadruped_trot", 4, True),
    ("quadruped_trot", 6, False),
    ("bound", 4, True),
    ("gallop", 6, False),
    ("wave", 4, True),
    ("wave", 8, True),
    ("wave", 3, False),
    ("ripple", 6, True),
    ("crab_walk", 4, True),
    ("pivot_turn", 2, False),
    ("pronk", 1, True),
    ("pronk", 6, True),
])
def test_is_suitable_for_legs(name, count, expected):
    assert catalog.is_suitable_for_legs(name, count) is expected


@pytest.mark.parametrize("name,expected", [
    ("dynamic_trot", True),
    ("bound", True),
    ("gallop", True),
    ("pronk", True),
    ("tripod", False),
    ("fast_tripod", False),
    ("wave", False),
])
def test_requires_dynamic_stability(name, expected):
    assert catalog.requires_dynamic_stability(name) is expected


def test_velocity_requirements():
    assert catalog.velocity_requirements("gallop") == (150.0, 200.0)
    assert catalog.velocity_requirements("tripod") == (0.0, 0.0)
    with pytest.raises(UnknownPatternError):
        catalog.velocity_requirements("moonwalk")


def test_dynamic_variants():
    assert catalog.create("fast_tripod").duty_factor == 0.35
    assert catalog.create("dynamic_trot").duty_factor == 0.6
    dynamic_wave = catalog.create("dynamic_wave", {"leg_count": 6})
    assert dynamic_wave.duty_factor == 0.6
    assert dynamic_wave.get_leg_phase_offset("rear_right") == pytest.approx(2 / 6)


def test_short_leg_names_are_aliases():
    tripod = catalog.create("tripod")
    assert tripod.calculate_leg_phase("FL", 0.0) == (0.5, False)
    assert tripod.covers("MR")
    assert not tripod.covers("tail")
    gallop = catalog.create("gallop")
    assert [gallop.get_leg_phase_offset(leg) for leg in ("FR", "FL", "RR", "RL")] == [0.0, 0.125, 0.25, 0.375]


def test_rings_keep_the_callers_leg_names():
    short = ("FR", "FL", "MR", "ML", "RR", "RL")
    wave = catalog.create("wave", {"leg_count": 6, "leg_names": short})
    assert wave.legs == ("FR", "MR", "RR", "RL", "ML", "FL")
    ripple = catalog.create("ripple", {"leg_count": 6, "leg_names": short})
    assert ripple.get_leg_phase_offset("RL") == pytest.approx(1 / 6)
    crab = catalog.create("crab_walk", {"leg_count": 4, "leg_names": ("FR", "FL", "RR", "RL")})
    assert dict(crab.offsets) == {"FR": 0.0, "RR": 0.5, "RL": 0.0, "FL": 0.5}
