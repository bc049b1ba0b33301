"""
URDF Kinbody: convert URDF robot descriptions into flat kinematic bodies.

A URDF tree of links and joints is turned into independent link records and
name-referencing joint records, with resolved transforms, geometry and
joint limits, stored as immutable JAX PyTrees.
"""

import jax
jax.config.update("jax_enable_x64", True)

from . import transforms
from . import core
from . import io
from . import convert
from .environment import Environment
from .errors import ConversionError, ErrorKind
from .loader import ConversionResult, convert_model, load

__version__ = "0.1.0"
__all__ = [
    "transforms",
    "core",
    "io",
    "convert",
    "Environment",
    "ConversionError",
    "ErrorKind",
    "ConversionResult",
    "convert_model",
    "load",
]
