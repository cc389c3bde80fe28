"""
Maven POM reader.

Extracts the ``<properties>`` block of a ``pom.xml`` so it can be merged
into the build Environment. Project coordinates are exposed under the
``project.*`` names Maven itself uses (``project.version`` etc.) unless the
properties block already declares them.

Error policy:
    - file absent                -> ``{}`` (nothing to merge)
    - file present, unreadable   -> ``{}`` with a warning
    - file present, bad XML      -> ManifestError
    - root element not <project> -> ManifestError
"""

from __future__ import annotations

from pathlib import Path
from xml.etree import ElementTree

from donut.core.errors import ManifestError
from donut.logging import get_logger

log = get_logger(__name__)

MANIFEST_FILENAME = "pom.xml"

_COORDINATES = ("groupId", "artifactId", "version", "name")


def _local_name(tag: str) -> str:
    """Strip an ``{namespace}`` prefix from an element tag."""
    return tag.rsplit("}", 1)[-1]


def _child(element: ElementTree.Element, name: str) -> ElementTree.Element | None:
    for child in element:
        if isinstance(child.tag, str) and _local_name(child.tag) == name:
            return child
    return None


def read_manifest_properties(path: str | Path) -> dict[str, str]:
    """Return the properties declared by the POM at ``path``.

    Raises:
        ManifestError: If the file exists but is not a parseable POM.
    """
    path = Path(path)

    if not path.is_file():
        log.debug("manifest.missing", path=str(path))
        return {}

    try:
        content = path.read_bytes()
    except OSError as e:
        log.warning("manifest.unreadable", path=str(path), error=str(e))
        return {}

    try:
        root = ElementTree.fromstring(content)
    except ElementTree.ParseError as e:
        raise ManifestError(f"Malformed manifest {path}: {e}", cause=e).with_context(path=str(path))

    if _local_name(root.tag) != "project":
        raise ManifestError(
            f"Manifest {path} is not a Maven POM (root element <{_local_name(root.tag)}>)"
        ).with_context(path=str(path))

    properties: dict[str, str] = {}
    block = _child(root, "properties")
    if block is not None:
        for element in block:
            if not isinstance(element.tag, str):
                continue  # comments / processing instructions
            properties[_local_name(element.tag)] = (element.text or "").strip()

    for name in _COORDINATES:
        element = _child(root, name)
        key = f"project.{name}"
        if element is not None and key not in properties:
            properties[key] = (element.text or "").strip()

    log.debug("manifest.read", path=str(path), count=len(properties))
    return properties
