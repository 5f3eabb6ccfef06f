import pytest

from multiped_py.config import GaitConfig, MotionCommand, SolverConfig
from multiped_py.errors import ConfigurationError
from multiped_py.geometry.vector import Vector3


def test_defaults():
    config = GaitConfig().validate()
    assert config.step_height == 30.0
    assert config.step_length == 50.0
    assert config.cycle_time == 2.0
    assert config.body_height == 100.0
    assert config.default_gait_name == "tripod"
    assert config.solver == SolverConfig(0.01, 20, 0.01)


@pytest.mark.parametrize("key,value", [
    ("step_height", 0.0),
    ("cycle_time", -1.0),
    ("max_velocity", float("nan")),
    ("body_height", -5.0),
    ("blend_duration", float("inf")),
    ("stability_min_stance_legs", 2.5),
    ("default_gait_name", ""),
])
def test_invalid_values(key, value):
    with pytest.raises(ConfigurationError):
        GaitConfig().updated(key, value)


def test_invalid_solver():
    with pytest.raises(ConfigurationError):
        SolverConfig(tolerance=0).validate()
    with pytest.raises(ConfigurationError):
        SolverConfig(max_iterations=0).validate()
    with pytest.raises(ConfigurationError):
        GaitConfig(solver="fast").validate()


def test_from_mapping():
    config = GaitConfig.from_mapping({"cycle_time": 1.5, "solver": {"max_iterations": 50}})
    assert config.cycle_time == 1.5
    assert config.solver.max_iterations == 50
    assert config.solver.tolerance == 0.01


def test_from_mapping_rejects_unknown_keys():
    with pytest.raises(ConfigurationError):
        GaitConfig.from_mapping({"warp_factor": 9})
    with pytest.raises(ConfigurationError):
        GaitConfig.from_mapping({"solver": {"speed": 1}})


def test_updated_leaves_original_untouched():
    config = GaitConfig()
    changed = config.updated("step_length", 80.0)
    assert changed.step_length == 80.0
    assert config.step_length == 50.0
    with pytest.raises(ConfigurationError):
        config.updated("warp_factor", 1)


def test_scalar_velocity_means_forward():
    assert MotionCommand(25.0).velocity == Vector3(25, 0, 0)
    assert MotionCommand((1, 2, 0)).velocity == Vector3(1, 2, 0)


def test_command_clamping():
    clamped = MotionCommand(Vector3(300, 400, 0), -2.0).clamped(100.0, 0.5)
    assert clamped.velocity.x == pytest.approx(60.0)
    assert clamped.velocity.y == pytest.approx(80.0)
    assert clamped.turn_rate == -0.5


def test_command_finiteness():
    assert MotionCommand(10.0, 0.1).is_finite()
    assert not MotionCommand(float("nan")).is_finite()
    assert not MotionCommand(0.0, float("-inf")).is_finite()
    assert not MotionCommand("fast").is_finite()


def test_coerce():
    assert MotionCommand.coerce(None) is None
    assert MotionCommand.coerce(5.0) == MotionCommand(5.0)
    assert MotionCommand.coerce({"velocity": 3.0, "turn_rate": 0.1}) == MotionCommand(3.0, 0.1)
