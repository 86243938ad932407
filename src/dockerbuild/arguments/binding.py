import logging
from typing import Dict, Iterable, List, Mapping, Optional

from ..datacls import FormalArgument
from ..exceptions import MissingArgumentError, UnknownArgumentError
from .evaluator import Evaluator

logger = logging.getLogger(__name__)


class Arguments:
    """
    Binding state of one build: values for the formal arguments of a Dockerfile.

    Only declared names can be bound; later writes overwrite earlier ones.
    `finalize()` applies defaults, checks that every mandatory argument has
    a value and returns the result in declaration order.
    """

    def __init__(self, formals: Mapping[str, FormalArgument]):
        self.formals: Dict[str, FormalArgument] = dict(formals)
        self.bound: Dict[str, str] = {}
        self._final: Optional[Dict[str, str]] = None

    def names(self) -> List[str]:
        return list(self.formals)

    def available(self) -> str:
        return " ".join(self.formals)

    def set(self, name: str, value: str):
        if self._final is not None:
            raise RuntimeError("arguments already finalized")
        if name not in self.formals:
            raise UnknownArgumentError(
                f"unknown argument: {name}\n(available build arguments: {self.available()})\n"
            )
        self.bound[name] = value

    def override(self, explicit: Mapping[str, str], evaluator: Evaluator):
        """Validate every explicit key first, then evaluate and bind the values."""
        for name in explicit:
            if name not in self.formals:
                raise UnknownArgumentError(
                    f"unknown argument: {name}\n(available build arguments: {self.available()})\n"
                )
        for name, raw in explicit.items():
            value = evaluator.evaluate(raw)
            logger.debug(f"Explicit argument {name}={value}")
            self.set(name, value)

    def finalize(self) -> Dict[str, str]:
        if self._final is not None:
            return dict(self._final)
        missing = [
            name for name, formal in self.formals.items()
            if name not in self.bound and formal.default is None
        ]
        if missing:
            raise MissingArgumentError(missing)
        final = {}
        for name, formal in self.formals.items():
            final[name] = self.bound[name] if name in self.bound else formal.default
        self._final = final
        return dict(final)


def bind(formals: Mapping[str, FormalArgument], explicit: Mapping[str, str],
         evaluator: Evaluator, contributors: Iterable = ()) -> Dict[str, str]:
    """
    Run the contributor passes in order, then the explicit overrides, then finalize.

    Raises:
        UnknownArgumentError: an explicit name the Dockerfile does not declare
        MissingArgumentError: mandatory arguments left without a value
    """
    arguments = Arguments(formals)
    for contributor in contributors:
        contributor.contribute(arguments)
    arguments.override(explicit, evaluator)
    return arguments.finalize()
