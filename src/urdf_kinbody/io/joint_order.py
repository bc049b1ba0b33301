"""Reader for the optional joint-ordering YAML file.

Expected structure::

    joints:
      shoulder_pan: 0
      shoulder_lift: 1
      elbow: 2

Any other key (``adjacent`` for instance) is ignored. A missing or unusable
file means "keep document order", so every failure here degrades to None.
"""

import logging
import os
from typing import Dict, Optional

import yaml

logger = logging.getLogger(__name__)


def load_joint_order(config_path: Optional[str]) -> Optional[Dict[str, int]]:
    """Load the joint name to slot mapping from ``config_path``.

    Returns:
        The ``joints`` mapping, or None when there is no usable mapping.
    """
    if not config_path or not os.path.isfile(config_path):
        return None

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            root = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable joint order file [%s]: %s", config_path, e)
        return None

    if not isinstance(root, dict):
        logger.warning("Ignoring joint order file [%s]: top level is not a mapping", config_path)
        return None

    joints = root.get("joints")
    if joints is None:
        return None
    if not isinstance(joints, dict):
        logger.warning("Ignoring joint order file [%s]: 'joints' is not a mapping", config_path)
        return None

    order: Dict[str, int] = {}
    for name, slot in joints.items():
        # bool is an int subclass but never a valid slot
        if isinstance(slot, bool) or not isinstance(slot, int):
            logger.warning("Ignoring joint order file [%s]: slot for '%s' is not an integer (%r)",
                           config_path, name, slot)
            return None
        order[str(name)] = slot
    return order
