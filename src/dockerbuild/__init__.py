"""
dockerbuild

Packages a Maven module's build artifact into a Docker image from a reusable
dockerbuild template, resolving the Dockerfile's build arguments on the way.

Main modules:
- arguments: Dockerfile ARG scanner, directive evaluator, contributors and binding
- placeholders: Image reference templates (%a, %g, %V, %b)
- builder: Build context, build engines, build and push orchestration
- io: Template sources and confined file operations
- config: Configuration loading and validation
- pom: pom.xml reader
- vcs: git origin and branch
- auth: Registry credentials from the docker client config
- datacls: Type-safe data classes and models
- registry: Directive discovery and registration
- utils: Utility functions

Quick start example:
```python
from dockerbuild import Builder, Config

config = Config("dockerbuild.yml")
result = Builder(config).run()
print(result.tag, result.image_id)
```
"""

from .datacls import FormalArgument, ProjectInfo, Scm
from .registry import DirectiveRegistry, directive
from .arguments import scan, Evaluator, EvalContext, Arguments, bind
from .placeholders import Placeholders, sanitize
from .config import Config, ConfigModel
from .builder import Builder, Pusher, Properties, BuildListener
from .exceptions import (
    DockerbuildError,
    ConfigurationError,
    ConfigValidationError,
    DefinitionError,
    BuildError,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    '__version__',
    # Data classes
    'FormalArgument',
    'ProjectInfo',
    'Scm',
    # Registry
    'DirectiveRegistry',
    'directive',
    # Arguments
    'scan',
    'Evaluator',
    'EvalContext',
    'Arguments',
    'bind',
    # Placeholders
    'Placeholders',
    'sanitize',
    # Config
    'Config',
    'ConfigModel',
    # Builder
    'Builder',
    'Pusher',
    'Properties',
    'BuildListener',
    # Exceptions
    'DockerbuildError',
    'ConfigurationError',
    'ConfigValidationError',
    'DefinitionError',
    'BuildError',
]
