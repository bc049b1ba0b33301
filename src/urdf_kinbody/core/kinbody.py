"""Flattened kinematic-body model: the conversion target.

Links are independent records that own their geometry; joints reference
links by name. All records are immutable PyTrees so a finished body can be
passed straight into JAX transformations.
"""

import enum
from typing import Optional, Tuple

import jax.numpy as jnp
from flax import struct
from jax import Array

from urdf_kinbody.transforms import se3


class GeometryType(str, enum.Enum):
    SPHERE = "sphere"
    BOX = "box"
    CYLINDER = "cylinder"
    TRIMESH = "trimesh"


class GeometryRole(str, enum.Enum):
    COLLISION = "collision"
    VISUAL = "visual"


class KinJointType(str, enum.Enum):
    """Joint motion classes understood by the kinematic body."""
    ROTATIONAL = "rotational"
    LINEAR = "linear"


def _zeros3() -> Array:
    return jnp.zeros(3, dtype=jnp.float64)


def _ones3() -> Array:
    return jnp.ones(3, dtype=jnp.float64)


@struct.dataclass
class TriMesh:
    """Triangle mesh with vertices of shape (N, 3) and indices of shape (M, 3)."""
    vertices: Array
    indices: Array

    @classmethod
    def empty(cls) -> "TriMesh":
        return cls(
            vertices=jnp.zeros((0, 3), dtype=jnp.float64),
            indices=jnp.zeros((0, 3), dtype=jnp.int32),
        )

    @property
    def is_empty(self) -> bool:
        return self.vertices.shape[0] == 0


@struct.dataclass
class GeometryInfo:
    """One geometry owned by a link.

    Attributes:
        geom_type: Primitive shape used by the engine.
        role: Whether this record came from a collision or a visual block.
        transform: (4, 4) pose of the geometry in the link frame.
        geom_data: (3,) shape parameters. Sphere (r, r, r), box half
                   extents, cylinder (radius, height, 0).
        visible: Rendered by viewers.
        modifiable: Can be changed after the body is built.
        filename_collision: Path the collision mesh was loaded from.
        filename_render: Path of the mesh viewers should draw instead of
                         the primitive.
        render_scale: (3,) scale applied to the render mesh.
        mesh_collision: Loaded collision mesh, empty if none.
        diffuse_color: (4,) RGBA, None when no material was given.
        ambient_color: (4,) RGBA, None when no material was given.
    """
    geom_type: GeometryType = struct.field(pytree_node=False)
    role: GeometryRole = struct.field(pytree_node=False)
    transform: Array = struct.field(default_factory=se3.identity)
    geom_data: Array = struct.field(default_factory=_zeros3)
    visible: bool = struct.field(pytree_node=False, default=True)
    modifiable: bool = struct.field(pytree_node=False, default=True)
    filename_collision: str = struct.field(pytree_node=False, default="")
    filename_render: str = struct.field(pytree_node=False, default="")
    render_scale: Array = struct.field(default_factory=_ones3)
    mesh_collision: TriMesh = struct.field(default_factory=TriMesh.empty)
    diffuse_color: Optional[Array] = None
    ambient_color: Optional[Array] = None


@struct.dataclass
class LinkInfo:
    """One rigid link of the body.

    Attributes:
        name: Link name, unique within the body.
        transform: (4, 4) local frame of the link.
        mass: Link mass.
        mass_frame: (4, 4) pose of the inertial frame in the link frame.
        inertia_moments: (3,) principal moments (ixx, iyy, izz).
        geometries: Zero, one or two geometry records.
    """
    name: str = struct.field(pytree_node=False)
    transform: Array = struct.field(default_factory=se3.identity)
    mass: float = 0.0
    mass_frame: Array = struct.field(default_factory=se3.identity)
    inertia_moments: Array = struct.field(default_factory=_zeros3)
    geometries: Tuple[GeometryInfo, ...] = ()


@struct.dataclass
class JointInfo:
    """One joint of the body.

    A limit of None means the engine treats that quantity as unconstrained.
    Inactive joints are kept in the body but never move.
    """
    name: str = struct.field(pytree_node=False)
    link0: str = struct.field(pytree_node=False)
    link1: str = struct.field(pytree_node=False)
    joint_type: KinJointType = struct.field(pytree_node=False)
    active: bool = struct.field(pytree_node=False)
    anchor: Array
    axis: Array
    lower_limit: Optional[float] = None
    upper_limit: Optional[float] = None
    max_velocity: Optional[float] = None
    max_effort: Optional[float] = None


@struct.dataclass
class KinBody:
    """A built body: the link and joint collections under one name."""
    name: str = struct.field(pytree_node=False)
    links: Tuple[LinkInfo, ...]
    joints: Tuple[JointInfo, ...]

    @property
    def link_names(self) -> Tuple[str, ...]:
        return tuple(link.name for link in self.links)

    @property
    def joint_names(self) -> Tuple[str, ...]:
        return tuple(joint.name for joint in self.joints)

    @property
    def active_joints(self) -> Tuple[JointInfo, ...]:
        return tuple(joint for joint in self.joints if joint.active)

    @property
    def dof(self) -> int:
        return len(self.active_joints)

    def get_link(self, name: str) -> LinkInfo:
        try:
            return self.links[self.link_names.index(name)]
        except ValueError:
            raise ValueError(f"Link '{name}' not found in body '{self.name}'")

    def get_joint(self, name: str) -> JointInfo:
        try:
            return self.joints[self.joint_names.index(name)]
        except ValueError:
            raise ValueError(f"Joint '{name}' not found in body '{self.name}'")
