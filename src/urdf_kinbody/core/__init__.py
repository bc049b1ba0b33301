"""Data structures for the source URDF tree and the target kinematic body.

Both sides are immutable flax PyTrees.
"""

from .source_model import (
    Collision,
    Geometry,
    GeometryKind,
    Inertial,
    JointLimits,
    JointMimic,
    JointType,
    Material,
    RobotDescription,
    SourceJoint,
    SourceLink,
    Visual,
)
from .kinbody import (
    GeometryInfo,
    GeometryRole,
    GeometryType,
    JointInfo,
    KinBody,
    KinJointType,
    LinkInfo,
    TriMesh,
)

__all__ = [
    "Collision",
    "Geometry",
    "GeometryKind",
    "Inertial",
    "JointLimits",
    "JointMimic",
    "JointType",
    "Material",
    "RobotDescription",
    "SourceJoint",
    "SourceLink",
    "Visual",
    "GeometryInfo",
    "GeometryRole",
    "GeometryType",
    "JointInfo",
    "KinBody",
    "KinJointType",
    "LinkInfo",
    "TriMesh",
]
