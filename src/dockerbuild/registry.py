"""
dockerbuild Registries

This module contains registry classes for discovering and registering directive
functions used by the argument value evaluator.

Dependencies:
- arguments.directives: scanned on discovery for functions marked with @directive
"""

from typing import Callable, Dict, Generic, List, Optional, TypeVar, TYPE_CHECKING
from abc import ABC, abstractmethod
import importlib
import inspect
import logging

from .utils import override

if TYPE_CHECKING:
    from .arguments.directives import EvalContext

logger = logging.getLogger(__name__)

K = TypeVar('K')
V = TypeVar('V')

DirectiveFunc = Callable[[str, "EvalContext"], str]

_DIRECTIVE_ATTR = "__directive_name__"


def directive(name: str):
    """Mark a function `(inner_value, ctx) -> str` as the directive `name`."""
    def decorator(func: DirectiveFunc) -> DirectiveFunc:
        setattr(func, _DIRECTIVE_ATTR, name)
        return func
    return decorator


class Registry(Generic[K, V], ABC):
    """
    An abstract base class for a generic discoverable registry.
    """

    # --- Configuration: To be defined by subclasses ---
    package: Optional[str] = None  # module to scan

    def __init__(self):
        self._registry: Dict[K, V] = {}

        if self.package is None:
            raise NotImplementedError(
                f"{self.__class__.__name__} must define class attribute 'package'."
            )

        logger.debug(f"Initialized {self.__class__.__name__}")

    def register(self, key: K, value: V):
        self._registry[key] = value
        logger.debug(f"Registered in {self.__class__.__name__}: {key} -> {getattr(value, '__name__', str(value))}")

    def get(self, key: K) -> Optional[V]:
        return self._registry.get(key)

    def __contains__(self, key: K) -> bool:
        return key in self._registry

    @property
    def registry(self) -> Dict[K, V]:
        return self._registry

    @abstractmethod
    def _register_item(self, member_name: str, member: V):
        """
        Register a single discovered member if it qualifies.
        """
        raise NotImplementedError

    def discover(self) -> "Registry[K, V]":
        """
        Import `package` and offer each of its functions to `_register_item`.
        """
        logger.debug(f"Starting discovery for {self.__class__.__name__} in '{self.package}'...")
        module = importlib.import_module(self.package)
        for name, obj in inspect.getmembers(module, inspect.isfunction):
            self._register_item(name, obj)

        logger.debug(f"Discovery for {self.__class__.__name__} finished. Total items: {len(self._registry)}")
        return self


class DirectiveRegistry(Registry[str, DirectiveFunc]):
    """
    Registry mapping directive names (the text between `%` and `:`) to functions.
    """
    package = "dockerbuild.arguments.directives"

    @override
    def _register_item(self, member_name: str, member: DirectiveFunc):
        name = getattr(member, _DIRECTIVE_ATTR, None)
        if name:
            self.register(name, member)

    def directive(self, name: str) -> Optional[DirectiveFunc]:
        return self.get(name)

    def names(self) -> List[str]:
        return sorted(self._registry)

    @classmethod
    def default(cls) -> "DirectiveRegistry":
        """A registry holding the built-in directives."""
        return cls().discover()
