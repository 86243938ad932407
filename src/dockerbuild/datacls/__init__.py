from .arguments import FormalArgument
from .project import ProjectInfo, Scm

__all__ = [
    'FormalArgument',
    'ProjectInfo',
    'Scm',
]
