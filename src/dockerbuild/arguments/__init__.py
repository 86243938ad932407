"""
dockerbuild Arguments Module

Resolution of Dockerfile build arguments:

- scanner: Finds the ARG declarations of a Dockerfile
- directives: Built-in `%name:value` directives and their EvalContext
- evaluator: Evaluates directive values, inside out
- contributors: Passes binding `artifact*`, `build*` and `pom*` arguments
- binding: Arguments state, explicit overrides and completeness check

Usage:
    from dockerbuild.arguments import scan, Evaluator, EvalContext, bind

    formals = scan(dockerfile_text)
    evaluator = Evaluator(EvalContext(project, context_dir))
    values = bind(formals, {"greeting": "%base64:hi"}, evaluator)
"""

from .scanner import scan, scan_file
from .directives import EvalContext
from .evaluator import Evaluator
from .contributors import (
    Contributor,
    ArtifactContributor,
    BuildContributor,
    PomContributor,
    build_origin,
)
from .binding import Arguments, bind

__all__ = [
    # Scanner
    'scan',
    'scan_file',
    # Evaluation
    'EvalContext',
    'Evaluator',
    # Contributors
    'Contributor',
    'ArtifactContributor',
    'BuildContributor',
    'PomContributor',
    'build_origin',
    # Binding
    'Arguments',
    'bind',
]
