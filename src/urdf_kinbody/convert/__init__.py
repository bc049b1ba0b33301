"""URDF to kinematic-body conversion steps."""

from .uri import UriResolver, default_resolver, resolve_uri
from .geometry import convert_geometry
from .link import convert_link
from .joint import convert_joint, convert_joints, map_joint_type, order_joints

__all__ = [
    "UriResolver",
    "default_resolver",
    "resolve_uri",
    "convert_geometry",
    "convert_link",
    "convert_joint",
    "convert_joints",
    "map_joint_type",
    "order_joints",
]
