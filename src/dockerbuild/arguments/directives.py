"""
Built-in directives of the argument value evaluator.

A directive is a function `(inner_value, ctx) -> str` marked with
@directive(name). `inner_value` has already been evaluated when the
function runs. Directives that add files to the build context only ever
write below `ctx.context_dir`.
"""

import base64 as _base64
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Optional

from jinja2 import Environment, StrictUndefined, TemplateError

from .. import constants
from ..datacls import ProjectInfo
from ..exceptions import ArtifactNotFoundError, EvaluationError, MetadataNotFoundError
from ..io import copy_into, read_text
from ..registry import directive

logger = logging.getLogger(__name__)


@dataclass
class EvalContext:
    """
    Everything a directive may consult: project metadata and the build context directory.
    """
    project: ProjectInfo
    context_dir: Path
    jinja_env: Environment = field(
        default_factory=lambda: Environment(undefined=StrictUndefined, keep_trailing_newline=True)
    )


def _pom_scm(project: ProjectInfo) -> Optional[str]:
    return project.scm.developer_connection or project.scm.connection


POM_KEYS: Dict[str, Callable[[ProjectInfo], Optional[str]]] = {
    "scm": _pom_scm,
    "groupId": lambda p: p.group_id,
    "artifactId": lambda p: p.artifact_id,
    "version": lambda p: p.version,
    "name": lambda p: p.name,
    "description": lambda p: p.description,
    "url": lambda p: p.url,
    "finalName": lambda p: p.final_name,
}


@directive("base64")
def base64_directive(value: str, ctx: EvalContext) -> str:
    return _base64.b64encode(value.encode("utf-8")).decode("ascii")


@directive("file")
def file_directive(value: str, ctx: EvalContext) -> str:
    """Contents of a file, read as UTF-8."""
    return read_text(ctx.project.resolve_path(value))


@directive("filter")
def filter_directive(value: str, ctx: EvalContext) -> str:
    """Contents of a file rendered as a Jinja2 template against the project metadata."""
    path = ctx.project.resolve_path(value)
    source = read_text(path)
    try:
        return ctx.jinja_env.from_string(source).render(**ctx.project.template_vars())
    except TemplateError as e:
        raise EvaluationError(f"cannot filter {path}: {e}") from e


@directive("copy")
def copy_directive(value: str, ctx: EvalContext) -> str:
    """Copy a file into the build context, evaluating to its file name."""
    return copy_into(ctx.context_dir, ctx.project.resolve_path(value))


@directive("artifact")
def artifact_directive(value: str, ctx: EvalContext) -> str:
    """
    Copy `<finalName>[-<classifier>].<extension>` from the build directory into the
    context. The value is `[<classifier>:]<extension>`.
    """
    classifier, sep, extension = value.rpartition(constants.DIRECTIVE_SEPARATOR)
    if not extension or (sep and not classifier):
        raise EvaluationError(f"invalid artifact value, expected [<classifier>:]<extension>: {value}")
    filename = ctx.project.final_name
    if classifier:
        filename += f"-{classifier}"
    filename += f".{extension}"
    source = ctx.project.build_directory / filename
    if not source.is_file():
        raise ArtifactNotFoundError(f"artifact not found: {source}")
    return copy_into(ctx.context_dir, source)


@directive("pom")
def pom_directive(value: str, ctx: EvalContext) -> str:
    """Project metadata by key, see POM_KEYS."""
    getter = POM_KEYS.get(value)
    if getter is None:
        raise EvaluationError(f"unknown pom key: {value} (available: {' '.join(POM_KEYS)})")
    result = getter(ctx.project)
    if result is None:
        raise MetadataNotFoundError(f"pom {value}: not defined in this project")
    return result


@directive("property")
def property_directive(value: str, ctx: EvalContext) -> str:
    try:
        return ctx.project.properties[value]
    except KeyError:
        raise MetadataNotFoundError(f"property not defined in this project: {value}")
