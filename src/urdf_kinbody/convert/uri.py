"""Resolution of mesh URIs to filesystem paths.

Two schemes are understood: ``file://<path>`` and
``package://<package>/<relative path>``. Resolution never raises; an empty
string means "no file", and the owning geometry simply ends up without mesh
data.
"""

import logging
import os
from typing import Callable, Dict

from urdf_kinbody.io.packages import find_package

logger = logging.getLogger(__name__)

FILE_SCHEME = "file://"
PACKAGE_SCHEME = "package://"


class UriResolver:
    """Resolves mesh URIs, memoizing package directory lookups.

    The cache only grows. A package that could not be found is cached as ""
    and is not looked up again by this resolver.

    Args:
        find_package: Maps a package name to its directory, "" if unknown.
    """

    def __init__(self, find_package: Callable[[str], str] = find_package):
        self._find_package = find_package
        self._package_cache: Dict[str, str] = {}

    @property
    def package_cache(self) -> Dict[str, str]:
        return dict(self._package_cache)

    def package_path(self, package: str) -> str:
        if package not in self._package_cache:
            self._package_cache[package] = self._find_package(package)
        return self._package_cache[package]

    def resolve(self, uri: str) -> str:
        if uri.startswith(FILE_SCHEME):
            return uri[len(FILE_SCHEME):]

        if uri.startswith(PACKAGE_SCHEME):
            remainder = uri[len(PACKAGE_SCHEME):]
            package, sep, relative = remainder.partition("/")

            package_path = self.package_path(package)
            if not package_path:
                logger.warning("Unable to find package [%s].", package)
                return ""

            if not sep:
                return package_path
            return os.path.join(package_path, relative.lstrip("/"))

        logger.warning("Cannot handle mesh URI type [%s].", uri)
        return ""


_default_resolver = UriResolver()


def default_resolver() -> UriResolver:
    """The process-wide resolver used when a caller does not supply one."""
    return _default_resolver


def resolve_uri(uri: str) -> str:
    """Resolve ``uri`` with the process-wide resolver."""
    return _default_resolver.resolve(uri)
