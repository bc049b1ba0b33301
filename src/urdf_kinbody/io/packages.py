"""Default package-name to directory lookup.

Looks through ``ROS_PACKAGE_PATH`` roots (ROS 1 style, package directories
anywhere below a root) and then ``AMENT_PREFIX_PATH`` prefixes (ROS 2 style,
``<prefix>/share/<name>``). A package is a directory holding ``package.xml``.
"""

import os
from pathlib import Path
from typing import Iterator

PACKAGE_MANIFEST = "package.xml"


def _search_roots(variable: str) -> Iterator[Path]:
    for entry in os.environ.get(variable, "").split(os.pathsep):
        if entry:
            yield Path(entry)


def find_package(name: str) -> str:
    """Return the directory of package ``name``, or "" if it cannot be found."""
    if not name:
        return ""

    for root in _search_roots("ROS_PACKAGE_PATH"):
        if not root.is_dir():
            continue
        if root.name == name and (root / PACKAGE_MANIFEST).is_file():
            return str(root)
        for manifest in sorted(root.rglob(PACKAGE_MANIFEST)):
            if manifest.parent.name == name:
                return str(manifest.parent)

    for prefix in _search_roots("AMENT_PREFIX_PATH"):
        share = prefix / "share" / name
        if (share / PACKAGE_MANIFEST).is_file():
            return str(share)

    return ""
