"""Typed URDF tree produced by the parser.

These records mirror the URDF schema closely. They are immutable and are
consumed once by the converters; origins are (4, 4) SE(3) arrays.
"""

import enum
from typing import Optional, Tuple, Union

from flax import struct
from jax import Array


class GeometryKind(str, enum.Enum):
    SPHERE = "sphere"
    BOX = "box"
    CYLINDER = "cylinder"
    MESH = "mesh"


class JointType(str, enum.Enum):
    REVOLUTE = "revolute"
    PRISMATIC = "prismatic"
    FIXED = "fixed"
    CONTINUOUS = "continuous"
    PLANAR = "planar"
    FLOATING = "floating"
    UNKNOWN = "unknown"


@struct.dataclass
class Geometry:
    """One shape from a ``<geometry>`` element.

    Attributes:
        kind: The shape variant. Holds the raw element tag when the parser
              met a shape it has no variant for.
        size: Variant payload. Sphere ``(radius,)``, box full dimensions
              ``(x, y, z)``, cylinder ``(radius, length)``, mesh scale
              ``(sx, sy, sz)``.
        filename: Mesh URI as written in the document, empty otherwise.
    """
    kind: Union[GeometryKind, str] = struct.field(pytree_node=False)
    size: Tuple[float, ...] = struct.field(pytree_node=False, default=())
    filename: str = struct.field(pytree_node=False, default="")


@struct.dataclass
class Inertial:
    origin: Array
    mass: float = 0.0
    ixx: float = 0.0
    iyy: float = 0.0
    izz: float = 0.0
    # Off-diagonal terms are kept for completeness but never converted.
    ixy: float = 0.0
    ixz: float = 0.0
    iyz: float = 0.0


@struct.dataclass
class Collision:
    origin: Array
    geometry: Geometry


@struct.dataclass
class Material:
    name: str = struct.field(pytree_node=False, default="")
    rgba: Optional[Tuple[float, float, float, float]] = struct.field(pytree_node=False, default=None)


@struct.dataclass
class Visual:
    origin: Array
    geometry: Geometry
    material: Optional[Material] = None


@struct.dataclass
class SourceLink:
    """A ``<link>`` element.

    ``parent_joint`` names the joint whose child this link is, or is None for
    the root. It is only used to look up that joint's origin.
    """
    name: str = struct.field(pytree_node=False)
    parent_joint: Optional[str] = struct.field(pytree_node=False, default=None)
    inertial: Optional[Inertial] = None
    collision: Optional[Collision] = None
    visual: Optional[Visual] = None


@struct.dataclass
class JointLimits:
    lower: float = 0.0
    upper: float = 0.0
    velocity: float = 0.0
    effort: float = 0.0


@struct.dataclass
class JointMimic:
    joint: str = struct.field(pytree_node=False)
    multiplier: float = 1.0
    offset: float = 0.0


@struct.dataclass
class SourceJoint:
    """A ``<joint>`` element. ``origin`` is the parent-to-joint transform."""
    name: str = struct.field(pytree_node=False)
    joint_type: JointType = struct.field(pytree_node=False)
    parent: str = struct.field(pytree_node=False)
    child: str = struct.field(pytree_node=False)
    origin: Array
    axis: Array
    limits: Optional[JointLimits] = None
    mimic: Optional[JointMimic] = None


@struct.dataclass
class RobotDescription:
    """A parsed URDF document, links and joints in document order."""
    name: str = struct.field(pytree_node=False)
    links: Tuple[SourceLink, ...]
    joints: Tuple[SourceJoint, ...]

    def get_link(self, name: str) -> SourceLink:
        for link in self.links:
            if link.name == name:
                return link
        raise ValueError(f"Link '{name}' not found in robot description")

    def get_joint(self, name: str) -> SourceJoint:
        for joint in self.joints:
            if joint.name == name:
                return joint
        raise ValueError(f"Joint '{name}' not found in robot description")

    @property
    def joints_by_name(self):
        return {joint.name: joint for joint in self.joints}
