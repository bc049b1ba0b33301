"""Conversion of one URDF link into a kinematic-body link record."""

from typing import List, Mapping

import jax.numpy as jnp

from urdf_kinbody.convert.geometry import MeshReader, convert_geometry
from urdf_kinbody.convert.uri import UriResolver
from urdf_kinbody.core.kinbody import GeometryInfo, GeometryRole, LinkInfo
from urdf_kinbody.core.source_model import SourceJoint, SourceLink
from urdf_kinbody.transforms import se3


def convert_link(
    link: SourceLink,
    joints: Mapping[str, SourceJoint],
    resolver: UriResolver,
    read_trimesh: MeshReader,
) -> LinkInfo:
    """Build the LinkInfo for ``link``.

    The link frame is taken from its parent joint's origin, or identity for
    the root. At most one collision and one visual geometry are produced.

    Args:
        link: Source link.
        joints: Joints by name, used to look up the parent joint's origin.
        resolver: Mesh URI resolver.
        read_trimesh: Collision mesh loader.
    """
    transform = se3.identity()
    if link.parent_joint is not None:
        transform = joints[link.parent_joint].origin

    info = LinkInfo(name=link.name, transform=transform)

    inertial = link.inertial
    if inertial is not None:
        # Only the principal moments are carried over
        info = info.replace(
            mass=inertial.mass,
            mass_frame=inertial.origin,
            inertia_moments=jnp.array([inertial.ixx, inertial.iyy, inertial.izz], dtype=jnp.float64),
        )

    geometries: List[GeometryInfo] = []

    collision = link.collision
    if collision is not None:
        geom = convert_geometry(collision.geometry, GeometryRole.COLLISION, resolver, read_trimesh,
                                owner=link.name)
        geometries.append(geom.replace(transform=collision.origin, visible=False, modifiable=False))

    visual = link.visual
    if visual is not None:
        geom = convert_geometry(visual.geometry, GeometryRole.VISUAL, resolver, read_trimesh,
                                material=visual.material, owner=link.name)
        # Visuals are placed at the collision origin, not their own
        frame = collision.origin if collision is not None else se3.identity()
        geometries.append(geom.replace(transform=frame, visible=True, modifiable=False))

    return info.replace(geometries=tuple(geometries))
