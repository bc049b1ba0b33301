"""Environment that builds and holds kinematic bodies.

The environment is the consumer side of a conversion: it loads collision
meshes on request, assembles link and joint records into a KinBody and
keeps the bodies it has been given, by name.
"""

import logging
from typing import Dict, Optional, Sequence, Tuple

import jax.numpy as jnp
import trimesh

from urdf_kinbody.core.kinbody import JointInfo, KinBody, LinkInfo, TriMesh

logger = logging.getLogger(__name__)


class Environment:
    """Registry of bodies plus the engine services a conversion needs."""

    def __init__(self):
        self._bodies: Dict[str, KinBody] = {}

    def read_trimesh(self, filename: str) -> Optional[TriMesh]:
        """Load a triangle mesh from ``filename``.

        Returns:
            The mesh, or None if the path is empty or the file cannot be
            loaded as a mesh.
        """
        if not filename:
            return None
        try:
            mesh = trimesh.load(filename, force="mesh")
        except Exception as e:
            logger.warning("trimesh could not load %s: %s: %s", filename, type(e).__name__, e)
            return None
        if not isinstance(mesh, trimesh.Trimesh) or len(mesh.faces) == 0:
            return None
        return TriMesh(
            vertices=jnp.asarray(mesh.vertices, dtype=jnp.float64),
            indices=jnp.asarray(mesh.faces, dtype=jnp.int32),
        )

    def create_kinbody(
        self,
        links: Sequence[LinkInfo],
        joints: Sequence[JointInfo],
        name: str = "",
    ) -> KinBody:
        """Assemble a KinBody from link and joint records.

        Raises:
            ValueError: If names repeat or a joint references an unknown link.
        """
        link_names = [link.name for link in links]
        if len(set(link_names)) != len(link_names):
            raise ValueError(f"Duplicate link names in {link_names}")
        joint_names = [joint.name for joint in joints]
        if len(set(joint_names)) != len(joint_names):
            raise ValueError(f"Duplicate joint names in {joint_names}")

        known = set(link_names)
        for joint in joints:
            for link_name in (joint.link0, joint.link1):
                if link_name not in known:
                    raise ValueError(f"Joint '{joint.name}' references unknown link '{link_name}'")

        return KinBody(name=name, links=tuple(links), joints=tuple(joints))

    def add(self, body: KinBody) -> None:
        if body.name in self._bodies:
            raise ValueError(f"A body named '{body.name}' is already in the environment")
        self._bodies[body.name] = body

    def get_body(self, name: str) -> Optional[KinBody]:
        return self._bodies.get(name)

    @property
    def bodies(self) -> Tuple[KinBody, ...]:
        return tuple(self._bodies.values())
