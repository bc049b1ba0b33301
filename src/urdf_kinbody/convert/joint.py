"""Joint ordering and conversion.

Joints are first put in the order requested by the optional joint-order
mapping, then each one is converted to a JointInfo. Fixed joints are kept
as inactive rotational joints so the body keeps its full link tree.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import jax.numpy as jnp

from urdf_kinbody.core.kinbody import JointInfo, KinJointType
from urdf_kinbody.core.source_model import JointType, SourceJoint
from urdf_kinbody.errors import ConversionError, ErrorKind
from urdf_kinbody.transforms import se3, so3

logger = logging.getLogger(__name__)

# Source joint type -> (body joint type, active)
JOINT_TYPE_MAP: Dict[JointType, Tuple[KinJointType, bool]] = {
    JointType.REVOLUTE: (KinJointType.ROTATIONAL, True),
    JointType.PRISMATIC: (KinJointType.LINEAR, True),
    JointType.FIXED: (KinJointType.ROTATIONAL, False),
    JointType.CONTINUOUS: (KinJointType.ROTATIONAL, True),
}


def map_joint_type(joint_type: JointType) -> Tuple[KinJointType, bool]:
    """Return the body joint type and active flag for a URDF joint type.

    Raises:
        ConversionError: For planar, floating and unknown joints.
    """
    try:
        return JOINT_TYPE_MAP[joint_type]
    except KeyError:
        logger.error("Unable to determine joint type [%s].", joint_type.value)
        raise ConversionError(ErrorKind.UNSUPPORTED_JOINT_TYPE,
                              f"Failed to convert URDF joint of type '{joint_type.value}'")


def order_joints(
    joints: Sequence[SourceJoint],
    order_map: Optional[Mapping[str, int]] = None,
) -> List[Optional[SourceJoint]]:
    """Arrange joints in the order given by ``order_map``.

    ``order_map`` reserves ``len(order_map)`` leading slots. Each mapped
    joint is placed in its slot and the remaining joints follow in their
    original order. A reserved slot that no joint claims stays None.

    Raises:
        ConversionError: If a slot lies outside the reserved range or two
            joints claim the same slot.
    """
    if order_map is None:
        return list(joints)

    num_slots = len(order_map)
    ordered: List[Optional[SourceJoint]] = [None] * num_slots
    for joint in joints:
        slot = order_map.get(joint.name)
        if slot is None:
            ordered.append(joint)
            continue
        # bool is an int subclass but never a valid slot
        if isinstance(slot, bool) or not isinstance(slot, int):
            raise ConversionError(
                ErrorKind.INVALID_JOINT_ORDER,
                f"Joint '{joint.name}' has non-integer order slot {slot!r}")
        if not 0 <= slot < num_slots:
            raise ConversionError(
                ErrorKind.INVALID_JOINT_ORDER,
                f"Joint '{joint.name}' has order slot {slot}, expected 0 to {num_slots - 1}")
        if ordered[slot] is not None:
            raise ConversionError(
                ErrorKind.INVALID_JOINT_ORDER,
                f"Joints '{ordered[slot].name}' and '{joint.name}' share order slot {slot}")
        ordered[slot] = joint
    return ordered


def convert_joint(joint: SourceJoint) -> JointInfo:
    """Build the JointInfo for ``joint``.

    The anchor is the joint origin's position. Active joints have their axis
    rotated into the parent link frame; inactive joints get a unit X
    placeholder axis.
    """
    joint_type, active = map_joint_type(joint.joint_type)

    if active:
        axis = so3.apply(se3.get_rotation(joint.origin), joint.axis)
    else:
        axis = jnp.array([1.0, 0.0, 0.0], dtype=jnp.float64)

    info = JointInfo(
        name=joint.name,
        link0=joint.parent,
        link1=joint.child,
        joint_type=joint_type,
        active=active,
        anchor=se3.get_position(joint.origin),
        axis=axis,
    )

    limits = joint.limits
    if limits is not None:
        info = info.replace(lower_limit=limits.lower, upper_limit=limits.upper,
                            max_velocity=limits.velocity, max_effort=limits.effort)
    elif not active:
        # A fixed joint cannot move
        info = info.replace(lower_limit=0.0, upper_limit=0.0)

    # <mimic> is not translated
    return info


def convert_joints(
    joints: Sequence[SourceJoint],
    order_map: Optional[Mapping[str, int]] = None,
) -> List[JointInfo]:
    """Order ``joints`` and convert each one, skipping unfilled order slots."""
    infos = []
    for slot, joint in enumerate(order_joints(joints, order_map)):
        if joint is None:
            logger.warning("No joint in the model fills order slot %d; skipping it.", slot)
            continue
        infos.append(convert_joint(joint))
    return infos
