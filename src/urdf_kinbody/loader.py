"""Top-level URDF loading: parse, convert, build and register a body.

``convert_model`` reports failure as a value; ``load`` is the convenience
entry point that raises. Either way a failed conversion produces nothing:
the link and joint collections are only handed over when both are complete.
"""

from typing import Mapping, Optional, Tuple

from flax import struct

from urdf_kinbody.convert.joint import convert_joints
from urdf_kinbody.convert.link import convert_link
from urdf_kinbody.convert.uri import UriResolver, default_resolver
from urdf_kinbody.core.kinbody import JointInfo, KinBody, LinkInfo
from urdf_kinbody.core.source_model import RobotDescription
from urdf_kinbody.environment import Environment
from urdf_kinbody.errors import ConversionError
from urdf_kinbody.io.joint_order import load_joint_order
from urdf_kinbody.io.urdf_parser import parse_urdf

DEFAULT_BODY_NAME = "urdf"


@struct.dataclass
class ConversionResult:
    """Outcome of converting one robot description.

    Attributes:
        links: Link records, empty on failure.
        joints: Joint records in their final order, empty on failure.
        error: The fatal condition that stopped the conversion, if any.
    """
    links: Tuple[LinkInfo, ...] = ()
    joints: Tuple[JointInfo, ...] = ()
    error: Optional[ConversionError] = struct.field(pytree_node=False, default=None)

    @property
    def ok(self) -> bool:
        return self.error is None


def convert_model(
    model: RobotDescription,
    joint_order: Optional[Mapping[str, int]] = None,
    *,
    resolver: Optional[UriResolver] = None,
    environment: Optional[Environment] = None,
) -> ConversionResult:
    """Convert a parsed robot description into link and joint records.

    Links are converted in a single pass in document order, then joints are
    ordered by ``joint_order`` and converted.

    Args:
        model: Parsed URDF.
        joint_order: Optional joint name to slot mapping.
        resolver: Mesh URI resolver; the process-wide one by default.
        environment: Supplies collision mesh loading; a fresh one by default.

    Returns:
        ConversionResult, with ``error`` set if a fatal condition was hit.
    """
    resolver = resolver if resolver is not None else default_resolver()
    environment = environment if environment is not None else Environment()

    try:
        joints_by_name = model.joints_by_name
        links = tuple(
            convert_link(link, joints_by_name, resolver, environment.read_trimesh)
            for link in model.links
        )
        joints = tuple(convert_joints(model.joints, joint_order))
    except ConversionError as e:
        return ConversionResult(error=e)

    return ConversionResult(links=links, joints=joints)


def load(
    urdf_path: str,
    config_path: Optional[str] = None,
    *,
    environment: Optional[Environment] = None,
    resolver: Optional[UriResolver] = None,
    name: str = DEFAULT_BODY_NAME,
) -> KinBody:
    """Load a URDF file into ``environment`` as a KinBody.

    Args:
        urdf_path: Path to the URDF file to load.
        config_path: Optional YAML file with a ``joints`` order mapping.
        environment: Environment to build the body in and add it to.
        resolver: Mesh URI resolver; the process-wide one by default.
        name: Name given to the body.

    Returns:
        The body, already added to the environment.

    Raises:
        ConversionError: If the URDF cannot be parsed or contains an
            unsupported geometry or joint type.
    """
    environment = environment if environment is not None else Environment()

    model = parse_urdf(urdf_path)
    joint_order = load_joint_order(config_path)

    result = convert_model(model, joint_order, resolver=resolver, environment=environment)
    if not result.ok:
        raise result.error

    body = environment.create_kinbody(result.links, result.joints, name=name)
    environment.add(body)
    return body
