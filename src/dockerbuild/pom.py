"""
Minimal pom.xml reader: coordinates, descriptive fields, scm, properties and build output.

Parent inheritance is limited to groupId and version taken from <parent>.
`${...}` references to project fields and properties are interpolated.
"""

import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Dict, Optional

from .exceptions import PomError

logger = logging.getLogger(__name__)

_REF_RE = re.compile(r"\$\{([^}]+)\}")


def get_child_text(parent: Optional[ET.Element], child: str) -> Optional[str]:
    if parent is None:
        return None
    tag = parent.find(child)
    if tag is None or tag.text is None:
        return None
    return tag.text.strip()


def _interpolate(value: Optional[str], variables: Dict[str, str]) -> Optional[str]:
    if value is None:
        return None

    def replace(match):
        return variables.get(match.group(1), match.group(0))

    # nested references resolve within a few rounds
    for _ in range(5):
        new = _REF_RE.sub(replace, value)
        if new == value:
            break
        value = new
    return value


def parse_pom(content: bytes) -> Dict[str, Any]:
    """
    Parse pom.xml content into ProjectInfo fields (camelCase keys).

    Raises:
        PomError: malformed xml, unexpected root tag or missing coordinates
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise PomError(f"malformed pom.xml: {e}") from e
    match = re.match(r"^(\{.*\})?project$", root.tag)
    if not match:
        raise PomError(f"Unexpected root tag `{root.tag}`, expected project")
    ns = match.group(1) or ""

    parent = root.find(f"{ns}parent")
    group_id = get_child_text(root, f"{ns}groupId") or get_child_text(parent, f"{ns}groupId")
    artifact_id = get_child_text(root, f"{ns}artifactId")
    version = get_child_text(root, f"{ns}version") or get_child_text(parent, f"{ns}version")

    properties: Dict[str, str] = {}
    props = root.find(f"{ns}properties")
    if props is not None:
        for prop in props:
            name = prop.tag[len(ns):] if ns and prop.tag.startswith(ns) else prop.tag
            properties[name] = (prop.text or "").strip()

    variables = dict(properties)
    variables.update({
        "project.groupId": group_id or "",
        "project.artifactId": artifact_id or "",
        "project.version": version or "",
        "pom.groupId": group_id or "",
        "pom.artifactId": artifact_id or "",
        "pom.version": version or "",
    })
    group_id = _interpolate(group_id, variables)
    artifact_id = _interpolate(artifact_id, variables)
    version = _interpolate(version, variables)

    missing = [name for name, value in (("groupId", group_id), ("artifactId", artifact_id), ("version", version))
               if not value]
    if missing:
        raise PomError(f"pom.xml lacks {', '.join(missing)}")

    scm = root.find(f"{ns}scm")
    build = root.find(f"{ns}build")

    result: Dict[str, Any] = {
        "groupId": group_id,
        "artifactId": artifact_id,
        "version": version,
        "name": _interpolate(get_child_text(root, f"{ns}name"), variables),
        "description": _interpolate(get_child_text(root, f"{ns}description"), variables),
        "url": _interpolate(get_child_text(root, f"{ns}url"), variables),
        "scm": {
            "connection": _interpolate(get_child_text(scm, f"{ns}connection"), variables),
            "developerConnection": _interpolate(get_child_text(scm, f"{ns}developerConnection"), variables),
            "url": _interpolate(get_child_text(scm, f"{ns}url"), variables),
        },
        "properties": {k: _interpolate(v, variables) for k, v in properties.items()},
    }
    directory = _interpolate(get_child_text(build, f"{ns}directory"), variables)
    if directory:
        result["buildDirectory"] = directory.replace("${project.basedir}/", "").replace("${basedir}/", "")
    final_name = _interpolate(get_child_text(build, f"{ns}finalName"), variables)
    if final_name:
        result["finalName"] = final_name
    return result


def read_pom(path: Path) -> Dict[str, Any]:
    """Read a pom.xml file; the result carries `basedir` set to its directory."""
    path = Path(path)
    try:
        content = path.read_bytes()
    except OSError as e:
        raise PomError(f"cannot read {path}: {e}") from e
    logger.debug(f"Reading project metadata from {path}")
    result = parse_pom(content)
    result["basedir"] = path.parent.absolute()
    return result
