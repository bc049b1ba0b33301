"""Conversion of one URDF geometry into a kinematic-body geometry record.

Collision and visual geometry are encoded differently. Collision shapes map
onto engine primitives, with meshes loaded eagerly. Every visual becomes a
zero-radius sphere: the engine only renders a separate mesh for a geometry
that owns a primitive, so the visual mesh travels as a render path next to
an empty sphere.
"""

import logging
from typing import Callable, Optional

import jax.numpy as jnp

from urdf_kinbody.convert.uri import UriResolver
from urdf_kinbody.core.kinbody import GeometryInfo, GeometryRole, GeometryType, TriMesh
from urdf_kinbody.core.source_model import Geometry, GeometryKind, Material
from urdf_kinbody.errors import ConversionError, ErrorKind

logger = logging.getLogger(__name__)

MeshReader = Callable[[str], Optional[TriMesh]]


def _vec3(x: float, y: float, z: float):
    return jnp.array([x, y, z], dtype=jnp.float64)


def _collision_sphere(geometry: Geometry) -> GeometryInfo:
    (radius,) = geometry.size
    return GeometryInfo(geom_type=GeometryType.SPHERE, role=GeometryRole.COLLISION,
                        geom_data=radius * _vec3(1.0, 1.0, 1.0))


def _collision_box(geometry: Geometry) -> GeometryInfo:
    # URDF gives full dimensions, the engine wants half extents
    return GeometryInfo(geom_type=GeometryType.BOX, role=GeometryRole.COLLISION,
                        geom_data=0.5 * _vec3(*geometry.size))


def _collision_cylinder(geometry: Geometry) -> GeometryInfo:
    radius, length = geometry.size
    return GeometryInfo(geom_type=GeometryType.CYLINDER, role=GeometryRole.COLLISION,
                        geom_data=_vec3(radius, length, 0.0))


_COLLISION_PRIMITIVES = {
    GeometryKind.SPHERE: _collision_sphere,
    GeometryKind.BOX: _collision_box,
    GeometryKind.CYLINDER: _collision_cylinder,
}


def _check_kind(geometry: Geometry) -> GeometryKind:
    try:
        return GeometryKind(geometry.kind)
    except ValueError:
        logger.error("Unable to determine geometry type [%s].", geometry.kind)
        raise ConversionError(ErrorKind.UNSUPPORTED_GEOMETRY,
                              f"Failed to convert URDF geometry of type '{geometry.kind}'")


def convert_geometry(
    geometry: Geometry,
    role: GeometryRole,
    resolver: UriResolver,
    read_trimesh: MeshReader,
    material: Optional[Material] = None,
    owner: str = "",
) -> GeometryInfo:
    """Build the geometry record for ``geometry`` in the given role.

    The returned record carries shape data only; the caller places it in the
    link frame and sets its visibility.

    Args:
        geometry: Source shape.
        role: Collision or visual.
        resolver: Used to turn mesh URIs into paths.
        read_trimesh: Loads a collision mesh, returning None on failure.
        material: Visual material; its color fills the diffuse and ambient
                  slots.
        owner: Link name, only used in diagnostics.

    Raises:
        ConversionError: If the shape kind is not supported.
    """
    kind = _check_kind(geometry)

    if role == GeometryRole.COLLISION:
        if kind != GeometryKind.MESH:
            return _COLLISION_PRIMITIVES[kind](geometry)

        filename = resolver.resolve(geometry.filename)
        mesh = read_trimesh(filename) if filename else None
        if mesh is None:
            logger.warning("Link[%s]: Failed loading collision mesh %s", owner, filename or geometry.filename)
            mesh = TriMesh.empty()
        return GeometryInfo(geom_type=GeometryType.TRIMESH, role=role,
                            filename_collision=filename, mesh_collision=mesh)

    info = GeometryInfo(geom_type=GeometryType.SPHERE, role=GeometryRole.VISUAL,
                        geom_data=_vec3(0.0, 0.0, 0.0))
    if kind == GeometryKind.MESH:
        info = info.replace(filename_render=resolver.resolve(geometry.filename),
                            render_scale=_vec3(1.0, 1.0, 1.0))
    else:
        logger.warning("Link[%s]: Only trimeshes are supported for visual geometry.", owner)

    if material is not None and material.rgba is not None:
        color = jnp.array(material.rgba, dtype=jnp.float64)
        info = info.replace(diffuse_color=color, ambient_color=color)
    return info
