"""
dockerbuild Builder Module

- Builder: Resolves the image reference, assembles the context, binds arguments and builds
- Pusher: Pushes the image recorded by the last build
- Properties: Resolves image reference and origin without building
- Context: The build context directory (tar packing, Dockerfile scanning)
- BuildEngine, ApiEngine, CliEngine: docker SDK / docker CLI build engines
- BuildListener: Single-resolution result of a build's progress stream

Usage:
    from dockerbuild.builder import Builder
    from dockerbuild.config import Config

    config = Config("dockerbuild.yml")
    result = Builder(config, no_cache=True).run()
"""

from .build import Builder, BuildResult, command_line
from .push import Pusher, Properties
from .context import Context
from .engine import BuildEngine, ApiEngine, CliEngine, create_engine
from .listener import BuildListener

__all__ = [
    'Builder',
    'BuildResult',
    'command_line',
    'Pusher',
    'Properties',
    'Context',
    'BuildEngine',
    'ApiEngine',
    'CliEngine',
    'create_engine',
    'BuildListener',
]
