"""
Evaluators for the condition functions (Fn::Not, Fn::And, Fn::Or, Fn::Equals, Fn::If, Fn::Contains).
"""
import logging
from typing import Any, Dict

from cfneval.engine.errors import UnexpectedVariableTypeError, WrongIntrinsicFormatError
from cfneval.engine.intrinsics import IntrinsicFunction, expect_list, get_operand, is_intrinsic
from cfneval.engine.resolving_context import ResolvingContext
from cfneval.engine.value_resolver import resolve_value

LOG = logging.getLogger(__name__)

CONDITION_REFERENCE_KEYS = ("Condition", "Fn::Condition")


def resolve_condition(condition: Any, ctx: ResolvingContext, function: IntrinsicFunction) -> bool:
    """
    Evaluates a single condition operand to a boolean. Accepted operands are boolean literals, the strings
    "true"/"false" (case-insensitive), names of entries of the Conditions section, and nested intrinsic
    functions. Named conditions and nested intrinsics must resolve to a boolean.
    """
    if isinstance(condition, bool):
        return condition

    if isinstance(condition, str):
        if condition.lower() in ("true", "false"):
            return condition.lower() == "true"
        conditions = ctx.template.get("Conditions") or {}
        if condition in conditions:
            LOG.debug("%s: evaluating condition %s", function, condition)
            with ctx.path_segment(condition):
                resolved = resolve_value(conditions[condition], ctx)
            if not isinstance(resolved, bool):
                raise UnexpectedVariableTypeError(
                    f"{function}: condition '{condition}' does not resolve to a boolean"
                )
            return resolved

    # {"Condition": name} inside a condition function, "!Condition name" in short form YAML
    if isinstance(condition, dict) and len(condition) == 1:
        key, name = next(iter(condition.items()))
        if key in CONDITION_REFERENCE_KEYS and isinstance(name, str):
            if name not in (ctx.template.get("Conditions") or {}):
                raise UnexpectedVariableTypeError(f"{function}: condition '{name}' is not defined")
            return resolve_condition(name, ctx, function)

    if is_intrinsic(condition):
        resolved = resolve_value(condition, ctx)
        if not isinstance(resolved, bool):
            raise UnexpectedVariableTypeError(
                f"{function}: nested intrinsic resolved to {type(resolved).__name__}, expected a boolean"
            )
        return resolved

    LOG.warning("%s: cannot evaluate condition %r", function, condition)
    raise UnexpectedVariableTypeError(f"{function}: cannot resolve the condition value {condition!r}")


def _expect_conditions(node: Dict[str, Any], function: IntrinsicFunction) -> list:
    operand = expect_list(get_operand(node, function), function)
    if not operand:
        raise WrongIntrinsicFormatError(f"{function} requires at least one condition")
    return operand


def fn_not(node: Dict[str, Any], ctx: ResolvingContext) -> bool:
    (condition,) = expect_list(get_operand(node, IntrinsicFunction.NOT), IntrinsicFunction.NOT, 1)
    return not resolve_condition(condition, ctx, IntrinsicFunction.NOT)


def fn_and(node: Dict[str, Any], ctx: ResolvingContext) -> bool:
    """Evaluates the conditions from left to right and stops at the first false one."""
    for index, condition in enumerate(_expect_conditions(node, IntrinsicFunction.AND)):
        with ctx.path_segment(index):
            if not resolve_condition(condition, ctx, IntrinsicFunction.AND):
                return False
    return True


def fn_or(node: Dict[str, Any], ctx: ResolvingContext) -> bool:
    """Evaluates the conditions from left to right and stops at the first true one."""
    for index, condition in enumerate(_expect_conditions(node, IntrinsicFunction.OR)):
        with ctx.path_segment(index):
            if resolve_condition(condition, ctx, IntrinsicFunction.OR):
                return True
    return False


def values_equal(left: Any, right: Any) -> bool:
    """
    Deep structural equality. Lists are compared element-wise in order, mappings key by key. Numbers compare
    by value (``1 == 1.0``), booleans only equal booleans.
    """
    if isinstance(left, list) or isinstance(right, list):
        if not (isinstance(left, list) and isinstance(right, list)) or len(left) != len(right):
            return False
        return all(values_equal(a, b) for a, b in zip(left, right))
    if isinstance(left, dict) or isinstance(right, dict):
        if not (isinstance(left, dict) and isinstance(right, dict)) or left.keys() != right.keys():
            return False
        return all(values_equal(value, right[key]) for key, value in left.items())
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    return left == right


def fn_equals(node: Dict[str, Any], ctx: ResolvingContext) -> bool:
    left, right = expect_list(get_operand(node, IntrinsicFunction.EQUALS), IntrinsicFunction.EQUALS, 2)
    with ctx.path_segment(0):
        left = resolve_value(left, ctx)
    with ctx.path_segment(1):
        right = resolve_value(right, ctx)
    return values_equal(left, right)


def fn_if(node: Dict[str, Any], ctx: ResolvingContext) -> Any:
    """
    Evaluates the condition and returns the matching branch without resolving it. Intrinsic functions left in
    the returned branch are resolved by the next resolution pass over the template.
    """
    condition, when_true, when_false = expect_list(get_operand(node, IntrinsicFunction.IF), IntrinsicFunction.IF, 3)
    with ctx.path_segment(0):
        result = resolve_condition(condition, ctx, IntrinsicFunction.IF)
    LOG.debug("Fn::If: condition evaluated to %s", result)
    return when_true if result else when_false


def fn_contains(node: Dict[str, Any], ctx: ResolvingContext) -> bool:
    values, value = expect_list(get_operand(node, IntrinsicFunction.CONTAINS), IntrinsicFunction.CONTAINS, 2)
    with ctx.path_segment(0):
        values = resolve_value(values, ctx)
    if not isinstance(values, list):
        raise UnexpectedVariableTypeError(
            f"Fn::Contains: expected a list as first argument, got {type(values).__name__}"
        )
    with ctx.path_segment(1):
        value = resolve_value(value, ctx)
    return any(values_equal(item, value) for item in values)
