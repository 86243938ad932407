import logging
from typing import Optional

from .. import constants
from ..exceptions import EvaluationError
from ..registry import DirectiveRegistry
from .directives import EvalContext

logger = logging.getLogger(__name__)


class Evaluator:
    """
    Evaluates argument values written in the directive mini-language.

    A value not starting with `%` is a literal. Otherwise it reads
    `%<directive>:<inner>`; the inner value is evaluated first and the
    directive is applied to the result, so `%base64:%file:token.txt`
    encodes the contents of token.txt.
    """

    def __init__(self, ctx: EvalContext, registry: Optional[DirectiveRegistry] = None):
        self.ctx = ctx
        self.registry = registry if registry is not None else DirectiveRegistry.default()

    def evaluate(self, raw: str) -> str:
        """
        Raises:
            EvaluationError: for a value without ':' or an unknown directive
        """
        if not raw.startswith(constants.DIRECTIVE_SIGIL):
            return raw
        name, sep, inner = raw[len(constants.DIRECTIVE_SIGIL):].partition(constants.DIRECTIVE_SEPARATOR)
        if not sep:
            raise EvaluationError(f"invalid value: {raw}")
        func = self.registry.directive(name)
        if func is None:
            raise EvaluationError(
                f"unknown directive: {name} (available directives: {' '.join(self.registry.names())})"
            )
        resolved = self.evaluate(inner)
        logger.debug(f"Applying directive '{name}' to '{resolved}'")
        return func(resolved, self.ctx)
