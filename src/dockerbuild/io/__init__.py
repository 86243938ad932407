"""
dockerbuild IO Module

- TemplateSource: Abstract dockerbuild template source
- DirectoryTemplateSource, ArchiveTemplateSource: fsspec backed sources (local directory, zip/jar/war)
- ResourceTemplateSource: Templates shipped in dockerbuild.resources.templates
- open_template: Picks the source for a configured template string
- contained_path, copy_into: Writes confined to a root directory (the build context)

Usage:
    from dockerbuild.io import open_template

    source = open_template("src/main/docker", basedir=Path("."))
    source.copy_to(Path("target/dockerbuild/context"))
"""

from .path import contained_path, copy_into, read_text, write_text, rmtree
from .sources import (
    TemplateSource,
    DirectoryTemplateSource,
    ArchiveTemplateSource,
    ResourceTemplateSource,
    builtin_templates,
    open_template,
)

__all__ = [
    # Path
    'contained_path',
    'copy_into',
    'read_text',
    'write_text',
    'rmtree',
    # Sources
    'TemplateSource',
    'DirectoryTemplateSource',
    'ArchiveTemplateSource',
    'ResourceTemplateSource',
    'builtin_templates',
    'open_template',
]
