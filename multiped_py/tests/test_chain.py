import pytest

from multiped_py.errors import ChainStructureError, InvalidJointError, InvalidLinkError
from multiped_py.geometry.angle import Angle
from multiped_py.geometry.vector import Vector3
from multiped_py.kinematics.chain import Chain
from multiped_py.kinematics.joint import Joint, JointKind, RotationLimit, TranslationLimit
from multiped_py.kinematics.link import Link


def straight_chain(lengths, origin=None):
    chain = Chain(origin)
    for length in lengths:
        chain.add(Joint.revolute(Vector3.unit_z(), Vector3.unit_x())).add(Link(length))
    return chain


def test_chain_must_start_with_joint():
    with pytest.raises(ChainStructureError):
        Chain().add(Link(1.0))


def test_chain_rejects_two_joints_in_a_row():
    chain = Chain().add(Joint.revolute(Vector3.unit_z()))
    with pytest.raises(ChainStructureError):
        chain.add(Joint.revolute(Vector3.unit_z()))


def test_incomplete_chain():
    chain = Chain().add(Joint.revolute(Vector3.unit_z()))
    assert not chain.is_complete
    assert not Chain().is_complete
    with pytest.raises(ChainStructureError):
        chain.require_complete()


@pytest.mark.parametrize("length", [0.0, -1.0, float("nan"), float("inf")])
def test_invalid_link_length(length):
    with pytest.raises(InvalidLinkError):
        Link(length)


def test_link_is_immutable():
    chain = straight_chain([10.0])
    link = chain.links()[0]
    with pytest.raises(AttributeError):
        link.length = -5.0
    with pytest.raises(AttributeError):
        link.name = "tibia"
    assert link.length == 10.0
    assert chain.reach() == 10.0


def test_joint_axis_must_be_non_zero():
    with pytest.raises(InvalidJointError):
        Joint.revolute(Vector3.zero())


def test_joint_direction_is_normalised():
    joint = Joint.prismatic(Vector3.unit_x(), Vector3(0, 3, 4))
    assert joint.direction.length() == pytest.approx(1.0)
    joint.direction = Vector3(10, 0, 0)
    assert joint.direction == Vector3(1, 0, 0)
    with pytest.raises(InvalidJointError):
        joint.direction = Vector3.zero()


def test_joint_kinds_and_limits():
    limit = RotationLimit(Angle.from_degrees(-45), Angle.from_degrees(45))
    revolute = Joint.revolute(Vector3.unit_z(), limit=limit)
    assert revolute.kind is JointKind.REVOLUTE
    assert revolute.limits["rotation"] is limit
    assert limit.contains(Angle.from_degrees(10))
    cylinder = Joint.cylindrical(Vector3.unit_z(), rotation_limit=limit,
                                 translation_limit=TranslationLimit(0, 5))
    assert cylinder.kind.degrees_of_freedom == 2
    assert JointKind.PRISMATIC.degrees_of_freedom == 1


def test_inverted_limits_rejected():
    with pytest.raises(InvalidJointError):
        RotationLimit(Angle.from_degrees(10), Angle.from_degrees(-10))
    with pytest.raises(InvalidJointError):
        TranslationLimit(5, 1)


def test_reach_and_end_location():
    chain = straight_chain([1.0, 2.0, 3.0], origin=Vector3(1, 1, 0))
    assert chain.reach() == 6.0
    assert chain.end_location() == Vector3(7, 1, 0)
    assert chain.link_location(0) == Vector3(1, 1, 0)
    assert chain.link_location(2) == Vector3(4, 1, 0)
    assert len(chain) == 6
    assert len(chain.pairs()) == 3


def test_link_location_out_of_range():
    chain = straight_chain([1.0])
    with pytest.raises(IndexError):
        chain.link_location(2)


def test_chain_state_walks_from_origin():
    chain = straight_chain([2.0, 3.0])
    chain.joints()[1].direction = Vector3.unit_y()
    state = chain.chain_state()
    assert [s.length for s in state] == [2.0, 3.0]
    assert state[0].root_location == Vector3(0, 0, 0)
    assert state[0].tip_location == Vector3(2, 0, 0)
    assert state[1].root_location == state[0].tip_location
    assert state[1].tip_location == Vector3(2, 3, 0)
    assert chain.end_location() == Vector3(2, 3, 0)
