"""
Building blocks for resource resolvers: the strategy type and helpers to derive physical names and ids from
resource properties, generating them where the template leaves them unspecified.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from cfneval.constants import RUNTIME_VALUE_PREFIX
from cfneval.engine.intrinsics import is_intrinsic
from cfneval.engine.resolving_context import ResolvingContext
from cfneval.engine.types import Resource
from cfneval.engine.value_resolver import resolve_value
from cfneval.utils.strings import random_alphanumeric, random_hex

LOG = logging.getLogger(__name__)

# ref(resource_type, logical_id, resource, ctx)
RefFunction = Callable[[str, str, Resource, ResolvingContext], Any]
# get_attribute(resource_type, attribute, logical_id, resource, ctx)
GetAttributeFunction = Callable[[str, str, str, Resource, ResolvingContext], Any]
# value(logical_id, resource, ctx)
ValueFunction = Callable[[str, Resource, ResolvingContext], Any]


@dataclass(frozen=True)
class ResourceStrategy:
    """How ``Ref`` and ``Fn::GetAtt`` are answered for one kind of resource."""

    ref: RefFunction
    get_attribute: GetAttributeFunction


def build_strategy(
    physical_id: ValueFunction,
    attributes: Dict[str, ValueFunction] = None,
    ref: ValueFunction = None,
) -> ResourceStrategy:
    """
    Creates a strategy from per-attribute value functions.

    :param physical_id: computes the physical id of the resource, returned for unknown attributes
    :param attributes: value functions by attribute name
    :param ref: computes the value of ``Ref``, defaults to the physical id
    :return: the strategy
    """
    attributes = attributes or {}
    ref = ref or physical_id

    def _ref(resource_type: str, logical_id: str, resource: Resource, ctx: ResolvingContext) -> Any:
        return ref(logical_id, resource, ctx)

    def _get_attribute(
        resource_type: str, attribute: str, logical_id: str, resource: Resource, ctx: ResolvingContext
    ) -> Any:
        value_function = attributes.get(attribute)
        if value_function is None:
            LOG.warning(
                "Attribute %s of %s (%s) is not supported, using the physical id instead",
                attribute,
                logical_id,
                resource_type,
            )
            return physical_id(logical_id, resource, ctx)
        return value_function(logical_id, resource, ctx)

    return ResourceStrategy(ref=_ref, get_attribute=_get_attribute)


#
# helpers for value functions
#


def get_property(resource: Resource, *path: str) -> Any:
    """Returns the (unresolved) nested property, or None if any level is missing."""
    value = resource.get("Properties") or {}
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def resolve_string_with_default(value: Any, default: Optional[str], ctx: ResolvingContext) -> Optional[str]:
    """Resolves the given property value, falling back to ``default`` if it is empty or not a string."""
    if value is None or value == "":
        return default
    resolved = resolve_value(value, ctx)
    # Fn::If returns the selected branch unresolved
    while is_intrinsic(resolved):
        resolved = resolve_value(resolved, ctx)
    if not isinstance(resolved, str) or not resolved:
        LOG.debug("Property value %r did not resolve to a string, using default %s", value, default)
        return default
    return resolved


def generate_alphanumeric(ctx: ResolvingContext, length: int, lowercase: bool = False) -> str:
    return ctx.generate_unique_id(lambda rnd: random_alphanumeric(length, rnd, lowercase=lowercase))


def generate_short_id(ctx: ResolvingContext) -> str:
    return ctx.generate_unique_id(lambda rnd: random_hex(12, rnd))


def named_resource(
    property_path: str, default: Callable[[ResolvingContext], str], kind: str = "name"
) -> ValueFunction:
    """
    Value function returning the name given in the (dotted) property path, or a generated default. The result
    is memoized per resource in the context.
    """
    path = property_path.split(".")

    def _name(logical_id: str, resource: Resource, ctx: ResolvingContext) -> str:
        def _create():
            name = resolve_string_with_default(get_property(resource, *path), None, ctx)
            if name is None:
                name = default(ctx)
                LOG.debug("No %s given for %s, generated %s", property_path, logical_id, name)
            return name

        return ctx.physical_id(logical_id, kind, _create)

    return _name


def generated_id(length: int, kind: str = "id", lowercase: bool = False) -> ValueFunction:
    """Value function returning a generated alphanumeric id, memoized per resource."""

    def _id(logical_id: str, resource: Resource, ctx: ResolvingContext) -> str:
        return ctx.physical_id(logical_id, kind, lambda: generate_alphanumeric(ctx, length, lowercase))

    return _id


def property_value(property_path: str, default: Callable[[ResolvingContext], Optional[str]]) -> ValueFunction:
    """Value function resolving the property at the (dotted) path, not memoized."""
    path = property_path.split(".")

    def _value(logical_id: str, resource: Resource, ctx: ResolvingContext) -> Any:
        return resolve_string_with_default(get_property(resource, *path), default(ctx), ctx)

    return _value


def use_logical_id(logical_id: str, resource: Resource, ctx: ResolvingContext) -> str:
    return logical_id


def runtime_value(attribute: str) -> ValueFunction:
    """Value function for attributes that are only known once the resource is deployed."""

    def _value(logical_id: str, resource: Resource, ctx: ResolvingContext) -> str:
        return f"{RUNTIME_VALUE_PREFIX}{attribute}"

    return _value


def generate_uuid(ctx: ResolvingContext) -> str:
    return ctx.generate_unique_id(lambda rnd: str(uuid.UUID(int=rnd.getrandbits(128), version=4)))
