import logging
from typing import Any

from cfneval.engine.errors import TemplateResolutionError
from cfneval.engine.intrinsics import get_intrinsic
from cfneval.engine.resolving_context import ResolvingContext

LOG = logging.getLogger(__name__)


def resolve_value(value: Any, ctx: ResolvingContext) -> Any:
    """
    Resolves all intrinsic function calls in the given value tree.

    Primitives are returned unchanged, lists and plain mappings are rebuilt with resolved elements (keys and
    order are kept), and intrinsic function objects are replaced by the result of their evaluator.

    :param value: a node of the template value tree
    :param ctx: the resolving context of the current pass
    :return: the resolved value, the input is never modified
    """
    if isinstance(value, list):
        result = []
        for index, item in enumerate(value):
            with ctx.path_segment(index):
                result.append(resolve_value(item, ctx))
        return result

    if not isinstance(value, dict):
        return value

    intrinsic = get_intrinsic(value)
    if intrinsic is not None:
        # imported here, the evaluators call back into resolve_value
        from cfneval.engine.intrinsic_functions import evaluate_intrinsic

        with ctx.path_segment(intrinsic.value):
            try:
                return evaluate_intrinsic(intrinsic, value, ctx)
            except TemplateResolutionError as e:
                if e.path is None:
                    e.path = ctx.current_path
                    LOG.error("Error resolving %s at %s: %s", intrinsic, e.path, e.message)
                raise

    result = {}
    for key, item in value.items():
        with ctx.path_segment(key):
            result[key] = resolve_value(item, ctx)
    return result
