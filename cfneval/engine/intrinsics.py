"""
The closed set of intrinsic functions understood by the engine, and the classifier deciding whether a node of
the value tree is an intrinsic function call.
"""
import logging
from enum import Enum
from typing import Any, List, Optional

from cfneval.engine.errors import (
    InvalidIntrinsicObjectError,
    MissingIntrinsicKeyError,
    WrongIntrinsicFormatError,
)

LOG = logging.getLogger(__name__)


class IntrinsicFunction(str, Enum):
    REF = "Ref"
    GET_ATT = "Fn::GetAtt"
    FIND_IN_MAP = "Fn::FindInMap"
    JOIN = "Fn::Join"
    SPLIT = "Fn::Split"
    SELECT = "Fn::Select"
    SUB = "Fn::Sub"
    BASE64 = "Fn::Base64"
    IMPORT_VALUE = "Fn::ImportValue"
    GET_AZS = "Fn::GetAZs"
    TO_JSON_STRING = "Fn::ToJsonString"
    NOT = "Fn::Not"
    AND = "Fn::And"
    OR = "Fn::Or"
    EQUALS = "Fn::Equals"
    IF = "Fn::If"
    CONTAINS = "Fn::Contains"

    def __str__(self):
        return self.value


INTRINSIC_NAMES = frozenset(fn.value for fn in IntrinsicFunction)


def get_intrinsic(node: Any) -> Optional[IntrinsicFunction]:
    """
    Classifies the given node. Returns the intrinsic function if the node is a mapping with exactly one key that
    names a supported intrinsic function, None otherwise.
    """
    if not isinstance(node, dict) or len(node) != 1:
        return None
    key = next(iter(node))
    if key not in INTRINSIC_NAMES:
        return None
    return IntrinsicFunction(key)


def is_intrinsic(node: Any) -> bool:
    return get_intrinsic(node) is not None


def contains_intrinsic(value: Any) -> bool:
    """Whether there is any intrinsic function call left in the given value tree."""
    if isinstance(value, list):
        return any(contains_intrinsic(item) for item in value)
    if isinstance(value, dict):
        return is_intrinsic(value) or any(contains_intrinsic(item) for item in value.values())
    return False


def get_operand(node: Any, function: IntrinsicFunction) -> Any:
    """
    Returns the argument of the intrinsic function object ``{function: argument}``.

    :raises InvalidIntrinsicObjectError: if the node is not a mapping with exactly one key
    :raises MissingIntrinsicKeyError: if the single key is not the expected function name
    """
    if not isinstance(node, dict) or len(node) != 1:
        raise InvalidIntrinsicObjectError(
            f"Expected an object with exactly one key '{function}', got: {node!r}"
        )
    if function.value not in node:
        raise MissingIntrinsicKeyError(f"Intrinsic object does not contain key '{function}': {node!r}")
    return node[function.value]


def expect_list(operand: Any, function: IntrinsicFunction, length: int = None) -> List[Any]:
    """
    Checks that the argument of an intrinsic function is a list, optionally of the given length.

    :raises WrongIntrinsicFormatError: if the argument is not a list or has the wrong number of elements
    """
    if not isinstance(operand, list):
        LOG.warning("%s: expected a list of arguments, got %r", function, operand)
        raise WrongIntrinsicFormatError(f"Expected a list of arguments for {function}")
    if length is not None and len(operand) != length:
        LOG.warning("%s: expected %s arguments, got %s", function, length, len(operand))
        raise WrongIntrinsicFormatError(f"Expected {length} items in {function} array, got {len(operand)}")
    return operand
