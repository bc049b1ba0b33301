"""I/O for the converter's inputs.

- URDF documents (urdf_parser)
- The optional joint-ordering YAML file (joint_order)
- ROS package directory lookup for package:// URIs (packages)
"""

from .urdf_parser import parse_urdf, parse_urdf_string
from .joint_order import load_joint_order
from .packages import find_package

__all__ = ["parse_urdf", "parse_urdf_string", "load_joint_order", "find_package"]
