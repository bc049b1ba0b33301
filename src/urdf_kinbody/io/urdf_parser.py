"""URDF parser producing the typed source tree.

Parsing is all-or-nothing: any problem with the document raises a
ConversionError of kind PARSE_FAILED before conversion starts, so the
converters can rely on every joint naming existing links.
"""

import logging
from typing import Dict, List, Optional, Tuple

import jax.numpy as jnp
from lxml import etree

from urdf_kinbody.core.source_model import (
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
from urdf_kinbody.errors import ConversionError, ErrorKind
from urdf_kinbody.transforms import se3

logger = logging.getLogger(__name__)


class _MalformedURDF(ValueError):
    pass


def parse_urdf(urdf_path: str) -> RobotDescription:
    """Parse a URDF file into a RobotDescription.

    Args:
        urdf_path: Path to the URDF file to load.

    Returns:
        RobotDescription with links and joints in document order.

    Raises:
        ConversionError: If the file cannot be read or is not a valid URDF.
    """
    try:
        tree = etree.parse(str(urdf_path))
        return _parse_robot(tree.getroot())
    except (OSError, etree.XMLSyntaxError, _MalformedURDF) as e:
        logger.error("Unable to open URDF file [%s]: %s", urdf_path, e)
        raise ConversionError(ErrorKind.PARSE_FAILED,
                              f"Failed to open URDF file '{urdf_path}': {e}") from e


def parse_urdf_string(xml: str) -> RobotDescription:
    """Parse URDF text already held in memory."""
    try:
        root = etree.fromstring(xml.encode("utf-8"))
        return _parse_robot(root)
    except (etree.XMLSyntaxError, _MalformedURDF) as e:
        logger.error("Unable to parse URDF string: %s", e)
        raise ConversionError(ErrorKind.PARSE_FAILED, f"Failed to parse URDF: {e}") from e


def _parse_robot(root) -> RobotDescription:
    if root.tag != "robot":
        raise _MalformedURDF(f"root element must be <robot>, got <{root.tag}>")

    # Named materials may be declared once at the top level and referenced later
    materials: Dict[str, Material] = {}
    for material_elem in root.findall("material"):
        material = _parse_material(material_elem, {})
        if material.name:
            materials[material.name] = material

    link_elems = root.findall("link")
    joint_elems = root.findall("joint")

    # First pass: joints, so each link can learn its parent joint
    joints: List[SourceJoint] = []
    parent_joint_of: Dict[str, str] = {}
    for joint_elem in joint_elems:
        joint = _parse_joint(joint_elem)
        if any(j.name == joint.name for j in joints):
            raise _MalformedURDF(f"duplicate joint name '{joint.name}'")
        if joint.child in parent_joint_of:
            raise _MalformedURDF(
                f"link '{joint.child}' has two parent joints: "
                f"'{parent_joint_of[joint.child]}' and '{joint.name}'")
        parent_joint_of[joint.child] = joint.name
        joints.append(joint)

    # Second pass: links
    links: List[SourceLink] = []
    for link_elem in link_elems:
        name = _required(link_elem, "name")
        if any(link.name == name for link in links):
            raise _MalformedURDF(f"duplicate link name '{name}'")
        links.append(SourceLink(
            name=name,
            parent_joint=parent_joint_of.get(name),
            inertial=_parse_inertial(link_elem.find("inertial")),
            collision=_parse_collision(link_elem.find("collision")),
            visual=_parse_visual(link_elem.find("visual"), materials),
        ))

    link_names = {link.name for link in links}
    for joint in joints:
        for role, link_name in (("parent", joint.parent), ("child", joint.child)):
            if link_name not in link_names:
                raise _MalformedURDF(
                    f"joint '{joint.name}' references missing {role} link '{link_name}'")

    return RobotDescription(
        name=root.get("name", ""),
        links=tuple(links),
        joints=tuple(joints),
    )


def _required(elem, attribute: str) -> str:
    value = elem.get(attribute)
    if not value:
        raise _MalformedURDF(f"<{elem.tag}> on line {elem.sourceline} is missing '{attribute}'")
    return value


def _floats(text: Optional[str], default: Tuple[float, ...]) -> Tuple[float, ...]:
    if text is None:
        return default
    try:
        values = tuple(float(x) for x in text.split())
    except ValueError:
        raise _MalformedURDF(f"expected numbers, got '{text}'")
    if len(values) != len(default):
        raise _MalformedURDF(f"expected {len(default)} numbers, got '{text}'")
    return values


def _float(elem, attribute: str, default: float) -> float:
    return _floats(elem.get(attribute), (default,))[0]


def _parse_origin(origin_elem):
    if origin_elem is None:
        return se3.identity()
    xyz = _floats(origin_elem.get("xyz"), (0.0, 0.0, 0.0))
    rpy = _floats(origin_elem.get("rpy"), (0.0, 0.0, 0.0))
    return se3.from_xyz_rpy(xyz, rpy)


def _parse_geometry(geometry_elem) -> Geometry:
    if geometry_elem is None:
        raise _MalformedURDF("missing <geometry>")
    shapes = [child for child in geometry_elem if isinstance(child.tag, str)]
    if not shapes:
        raise _MalformedURDF(f"empty <geometry> on line {geometry_elem.sourceline}")
    shape = shapes[0]

    if shape.tag == "sphere":
        return Geometry(kind=GeometryKind.SPHERE, size=(_float(shape, "radius", 0.0),))
    if shape.tag == "box":
        return Geometry(kind=GeometryKind.BOX, size=_floats(shape.get("size"), (0.0, 0.0, 0.0)))
    if shape.tag == "cylinder":
        return Geometry(kind=GeometryKind.CYLINDER,
                        size=(_float(shape, "radius", 0.0), _float(shape, "length", 0.0)))
    if shape.tag == "mesh":
        return Geometry(kind=GeometryKind.MESH,
                        size=_floats(shape.get("scale"), (1.0, 1.0, 1.0)),
                        filename=_required(shape, "filename"))

    # Unknown shapes are rejected by the geometry converter, not here
    return Geometry(kind=shape.tag)


def _parse_inertial(inertial_elem) -> Optional[Inertial]:
    if inertial_elem is None:
        return None
    mass_elem = inertial_elem.find("mass")
    inertia_elem = inertial_elem.find("inertia")
    values = {}
    if inertia_elem is not None:
        for key in ("ixx", "ixy", "ixz", "iyy", "iyz", "izz"):
            values[key] = _float(inertia_elem, key, 0.0)
    mass = _float(mass_elem, "value", 0.0) if mass_elem is not None else 0.0
    if mass < 0.0:
        raise _MalformedURDF(f"negative mass {mass}")
    return Inertial(origin=_parse_origin(inertial_elem.find("origin")), mass=mass, **values)


def _parse_collision(collision_elem) -> Optional[Collision]:
    if collision_elem is None:
        return None
    return Collision(
        origin=_parse_origin(collision_elem.find("origin")),
        geometry=_parse_geometry(collision_elem.find("geometry")),
    )


def _parse_material(material_elem, materials: Dict[str, Material]) -> Material:
    name = material_elem.get("name", "")
    color_elem = material_elem.find("color")
    if color_elem is not None:
        rgba = _floats(color_elem.get("rgba"), (0.0, 0.0, 0.0, 0.0))
        return Material(name=name, rgba=rgba)
    if name in materials:
        return materials[name]
    return Material(name=name)


def _parse_visual(visual_elem, materials: Dict[str, Material]) -> Optional[Visual]:
    if visual_elem is None:
        return None
    material_elem = visual_elem.find("material")
    material = _parse_material(material_elem, materials) if material_elem is not None else None
    return Visual(
        origin=_parse_origin(visual_elem.find("origin")),
        geometry=_parse_geometry(visual_elem.find("geometry")),
        material=material,
    )


def _parse_joint(joint_elem) -> SourceJoint:
    name = _required(joint_elem, "name")
    type_str = _required(joint_elem, "type")
    try:
        joint_type = JointType(type_str)
    except ValueError:
        joint_type = JointType.UNKNOWN

    parent_elem = joint_elem.find("parent")
    child_elem = joint_elem.find("child")
    if parent_elem is None or child_elem is None:
        raise _MalformedURDF(f"joint '{name}' needs both <parent> and <child>")

    axis_elem = joint_elem.find("axis")
    axis_xyz = _floats(axis_elem.get("xyz") if axis_elem is not None else None, (1.0, 0.0, 0.0))

    limits = None
    limit_elem = joint_elem.find("limit")
    if limit_elem is not None:
        limits = JointLimits(
            lower=_float(limit_elem, "lower", 0.0),
            upper=_float(limit_elem, "upper", 0.0),
            velocity=_float(limit_elem, "velocity", 0.0),
            effort=_float(limit_elem, "effort", 0.0),
        )

    mimic = None
    mimic_elem = joint_elem.find("mimic")
    if mimic_elem is not None:
        mimic = JointMimic(
            joint=_required(mimic_elem, "joint"),
            multiplier=_float(mimic_elem, "multiplier", 1.0),
            offset=_float(mimic_elem, "offset", 0.0),
        )

    return SourceJoint(
        name=name,
        joint_type=joint_type,
        parent=_required(parent_elem, "link"),
        child=_required(child_elem, "link"),
        origin=_parse_origin(joint_elem.find("origin")),
        axis=jnp.array(axis_xyz, dtype=jnp.float64),
        limits=limits,
        mimic=mimic,
    )
