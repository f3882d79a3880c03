"""
Evaluators for the intrinsic functions of CloudFormation templates.

Each evaluator receives the complete intrinsic function object (e.g. ``{"Fn::Join": [",", ["a", "b"]]}``) and the
resolving context. Evaluators always validate the shape of their arguments before resolving any operand, and
raise on the first problem they encounter.
"""
import base64
import logging
from typing import Any, Callable, Dict, List

from cfneval.engine.errors import (
    MappingNotFoundError,
    MissingIntrinsicKeyError,
    UnexpectedVariableTypeError,
    UnresolvedReferenceError,
    WrongIntrinsicFormatError,
)
from cfneval.engine.intrinsics import IntrinsicFunction, expect_list, get_operand
from cfneval.engine.resolving_context import ResolvingContext
from cfneval.engine.value_resolver import resolve_value
from cfneval.utils.json import compact_json
from cfneval.utils.strings import extract_placeholders, is_blank, substitute_placeholders, to_bytes, to_str

LOG = logging.getLogger(__name__)

IntrinsicEvaluator = Callable[[Dict[str, Any], ResolvingContext], Any]


#
# helpers shared by the evaluators
#


def resolve_to_string(value: Any, ctx: ResolvingContext, description: str) -> str:
    """Returns the value if it is a string, otherwise resolves it and checks that the result is a string."""
    if isinstance(value, str):
        return value
    resolved = resolve_value(value, ctx)
    if not isinstance(resolved, str):
        LOG.warning("Expected %s to resolve to a string, got %r", description, resolved)
        raise UnexpectedVariableTypeError(
            f"Expected {description} to be a string, got {type(resolved).__name__}"
        )
    return resolved


def get_resources(ctx: ResolvingContext) -> Dict[str, Any]:
    return ctx.template.get("Resources") or {}


#
# reference lookups
#


def fn_ref(node: Dict[str, Any], ctx: ResolvingContext) -> Any:
    """
    Resolves ``{"Ref": name}``. Parameters and pseudo parameters are served from the cache, logical resource
    ids are resolved with the resource resolver registered for the resource type, and cached.
    """
    from cfneval.engine.resource_resolvers import lookup

    name = resolve_to_string(get_operand(node, IntrinsicFunction.REF), ctx, "the name of Ref")
    if ctx.has_key(name):
        LOG.debug("Ref: cache hit for %s", name)
        return ctx.get(name)

    resource = get_resources(ctx).get(name)
    if resource is None:
        LOG.warning("Ref: %s is neither a parameter nor a resource", name)
        raise UnresolvedReferenceError(name)

    resource_type = resource.get("Type", "")
    with ctx.resolving_resource(name):
        result = lookup(resource_type).ref(resource_type, name, resource, ctx)
    LOG.debug("Ref: resolved %s (%s) to %r", name, resource_type, result)
    ctx.add(name, result)
    return result


def fn_get_att(node: Dict[str, Any], ctx: ResolvingContext) -> Any:
    """
    Resolves ``{"Fn::GetAtt": [logicalId, attributeName]}``. The dotted string form ``"logicalId.attributeName"``
    of the short YAML syntax is accepted as well.
    """
    from cfneval.engine.resource_resolvers import lookup

    operand = get_operand(node, IntrinsicFunction.GET_ATT)
    if isinstance(operand, str) and "." in operand:
        operand = operand.split(".", 1)
    logical_id, attribute = expect_list(operand, IntrinsicFunction.GET_ATT, 2)

    logical_id = resolve_to_string(logical_id, ctx, "the logical id of Fn::GetAtt")
    attribute = resolve_to_string(attribute, ctx, "the attribute name of Fn::GetAtt")

    cache_key = f"{logical_id}:{attribute}"
    if ctx.has_key(cache_key):
        LOG.debug("Fn::GetAtt: cache hit for %s", cache_key)
        return ctx.get(cache_key)

    resource = get_resources(ctx).get(logical_id)
    if resource is None:
        LOG.warning("Fn::GetAtt: resource %s not found", logical_id)
        raise UnresolvedReferenceError(logical_id)

    resource_type = resource.get("Type", "")
    with ctx.resolving_resource(logical_id):
        result = lookup(resource_type).get_attribute(resource_type, attribute, logical_id, resource, ctx)
    LOG.debug("Fn::GetAtt: resolved %s to %r", cache_key, result)
    ctx.add(cache_key, result)
    return result


def fn_find_in_map(node: Dict[str, Any], ctx: ResolvingContext) -> Any:
    """Resolves ``{"Fn::FindInMap": [mapName, topLevelKey, secondLevelKey]}``."""
    operand = expect_list(get_operand(node, IntrinsicFunction.FIND_IN_MAP), IntrinsicFunction.FIND_IN_MAP, 3)
    map_name = resolve_to_string(operand[0], ctx, "the map name of Fn::FindInMap")
    top_level_key = resolve_to_string(operand[1], ctx, "the top level key of Fn::FindInMap")
    second_level_key = resolve_to_string(operand[2], ctx, "the second level key of Fn::FindInMap")

    mappings = ctx.template.get("Mappings")
    if mappings is None:
        raise MappingNotFoundError("Fn::FindInMap: the template has no Mappings section")
    if map_name not in mappings:
        raise MappingNotFoundError(f"Fn::FindInMap: mapping '{map_name}' not found")
    mapping = mappings[map_name] or {}
    if top_level_key not in mapping:
        raise MappingNotFoundError(
            f"Fn::FindInMap: key '{top_level_key}' not found in mapping '{map_name}'"
        )
    entries = mapping[top_level_key] or {}
    if second_level_key not in entries:
        raise MappingNotFoundError(
            f"Fn::FindInMap: key '{second_level_key}' not found in '{map_name}.{top_level_key}'"
        )
    value = entries[second_level_key]
    if value is None:
        raise MappingNotFoundError(
            f"Fn::FindInMap: value of '{map_name}.{top_level_key}.{second_level_key}' is empty"
        )
    return value


#
# string functions
#


def fn_join(node: Dict[str, Any], ctx: ResolvingContext) -> str:
    delimiter, values = expect_list(get_operand(node, IntrinsicFunction.JOIN), IntrinsicFunction.JOIN, 2)
    if not isinstance(delimiter, str):
        raise UnexpectedVariableTypeError("Fn::Join: the delimiter must be a string")
    if not isinstance(values, list):
        raise UnexpectedVariableTypeError("Fn::Join: the values must be a list")

    resolved = resolve_value(values, ctx)
    for item in resolved:
        if not isinstance(item, str):
            raise UnexpectedVariableTypeError(
                f"Fn::Join: all values must resolve to strings, got {type(item).__name__}"
            )
    return delimiter.join(resolved)


def fn_split(node: Dict[str, Any], ctx: ResolvingContext) -> List[str]:
    delimiter, source = expect_list(get_operand(node, IntrinsicFunction.SPLIT), IntrinsicFunction.SPLIT, 2)
    if not isinstance(delimiter, str):
        raise UnexpectedVariableTypeError("Fn::Split: the delimiter must be a string")
    source = resolve_to_string(source, ctx, "the source string of Fn::Split")
    if delimiter == "":
        return list(source)
    return source.split(delimiter)


def fn_select(node: Dict[str, Any], ctx: ResolvingContext) -> Any:
    index, values = expect_list(get_operand(node, IntrinsicFunction.SELECT), IntrinsicFunction.SELECT, 2)

    resolved_index = index if isinstance(index, (str, int)) else resolve_value(index, ctx)
    if isinstance(resolved_index, bool):
        raise UnexpectedVariableTypeError("Fn::Select: the index must be an integer")
    if isinstance(resolved_index, int):
        position = resolved_index
    else:
        try:
            position = int(str(resolved_index).strip(), 10)
        except ValueError:
            raise UnexpectedVariableTypeError(f"Fn::Select: cannot parse index {resolved_index!r}")

    resolved_values = resolve_value(values, ctx)
    if not isinstance(resolved_values, list):
        raise UnexpectedVariableTypeError(
            f"Fn::Select: expected a list to select from, got {type(resolved_values).__name__}"
        )
    if position < 0 or position >= len(resolved_values):
        raise WrongIntrinsicFormatError(
            f"Fn::Select index {position} is out of bounds for a list of length {len(resolved_values)}"
        )
    return resolved_values[position]


def _lookup_substitution(name: str, ctx: ResolvingContext) -> Any:
    if ctx.has_key(name):
        return ctx.get(name)
    # "${Resource.Attribute}" uses the value of a previous Fn::GetAtt
    if "." in name:
        attribute_key = name.replace(".", ":", 1)
        if ctx.has_key(attribute_key):
            return ctx.get(attribute_key)
    LOG.warning("Fn::Sub: variable %s not found in cache", name)
    raise MissingIntrinsicKeyError(f"Expected variable '{name}' is not found in cache")


def fn_sub(node: Dict[str, Any], ctx: ResolvingContext) -> str:
    """
    Resolves ``{"Fn::Sub": template}`` and ``{"Fn::Sub": [template, variables]}``.

    In the string form, every placeholder must name a value that is already cached (parameters, pseudo
    parameters, previously resolved references). ``${!Literal}`` is written out as ``${Literal}``. In the list
    form, only the given variables are substituted, each of them is resolved first.
    """
    operand = get_operand(node, IntrinsicFunction.SUB)

    if isinstance(operand, str):
        values = {}
        literals = {}
        for name in extract_placeholders(operand):
            if name.startswith("!"):
                literals[name] = "${%s}" % name[1:]
                continue
            values[name] = _lookup_substitution(name, ctx)
        return substitute_placeholders(substitute_placeholders(operand, values), literals)

    if isinstance(operand, list):
        template, variables = expect_list(operand, IntrinsicFunction.SUB, 2)
        if not isinstance(template, str):
            raise UnexpectedVariableTypeError("Fn::Sub: the first element must be a string")
        if not isinstance(variables, dict):
            raise UnexpectedVariableTypeError("Fn::Sub: the second element must be a mapping of variables")
        values = {}
        for name, value in variables.items():
            with ctx.path_segment(name):
                resolved = resolve_value(value, ctx)
            if resolved is None:
                raise UnexpectedVariableTypeError(f"Fn::Sub: value of variable '{name}' could not be resolved")
            values[name] = resolved
        return substitute_placeholders(template, values)

    raise WrongIntrinsicFormatError("Fn::Sub must be either a string or an array of two elements")


def fn_base64(node: Dict[str, Any], ctx: ResolvingContext) -> str:
    value = resolve_to_string(get_operand(node, IntrinsicFunction.BASE64), ctx, "the value of Fn::Base64")
    return to_str(base64.b64encode(to_bytes(value)))


def fn_import_value(node: Dict[str, Any], ctx: ResolvingContext) -> str:
    # exports of other stacks are not available, the export name itself is used as value
    return resolve_to_string(
        get_operand(node, IntrinsicFunction.IMPORT_VALUE), ctx, "the export name of Fn::ImportValue"
    )


def fn_get_azs(node: Dict[str, Any], ctx: ResolvingContext) -> List[str]:
    region = get_operand(node, IntrinsicFunction.GET_AZS)
    if region is not None and not isinstance(region, str):
        region = resolve_value(region, ctx)
    if not isinstance(region, str) or is_blank(region):
        return ctx.availability_zones()
    return ctx.availability_zones(region)


def fn_to_json_string(node: Dict[str, Any], ctx: ResolvingContext) -> str:
    operand = get_operand(node, IntrinsicFunction.TO_JSON_STRING)
    if isinstance(operand, str):
        return operand
    resolved = resolve_value(operand, ctx)
    if isinstance(resolved, str):
        return resolved
    if isinstance(resolved, (dict, list)):
        return compact_json(resolved)
    raise UnexpectedVariableTypeError(
        f"Fn::ToJsonString: expected an object or a list, got {type(resolved).__name__}"
    )


def _build_dispatch_table() -> Dict[IntrinsicFunction, IntrinsicEvaluator]:
    from cfneval.engine import conditions

    table = {
        IntrinsicFunction.REF: fn_ref,
        IntrinsicFunction.GET_ATT: fn_get_att,
        IntrinsicFunction.FIND_IN_MAP: fn_find_in_map,
        IntrinsicFunction.JOIN: fn_join,
        IntrinsicFunction.SPLIT: fn_split,
        IntrinsicFunction.SELECT: fn_select,
        IntrinsicFunction.SUB: fn_sub,
        IntrinsicFunction.BASE64: fn_base64,
        IntrinsicFunction.IMPORT_VALUE: fn_import_value,
        IntrinsicFunction.GET_AZS: fn_get_azs,
        IntrinsicFunction.TO_JSON_STRING: fn_to_json_string,
        IntrinsicFunction.NOT: conditions.fn_not,
        IntrinsicFunction.AND: conditions.fn_and,
        IntrinsicFunction.OR: conditions.fn_or,
        IntrinsicFunction.EQUALS: conditions.fn_equals,
        IntrinsicFunction.IF: conditions.fn_if,
        IntrinsicFunction.CONTAINS: conditions.fn_contains,
    }
    missing = set(IntrinsicFunction) - set(table)
    if missing:
        raise NotImplementedError(f"No evaluator for intrinsic functions: {sorted(missing)}")
    return table


INTRINSIC_EVALUATORS: Dict[IntrinsicFunction, IntrinsicEvaluator] = _build_dispatch_table()


def evaluate_intrinsic(function: IntrinsicFunction, node: Dict[str, Any], ctx: ResolvingContext) -> Any:
    LOG.debug("Evaluating %s at %s", function, ctx.current_path)
    return INTRINSIC_EVALUATORS[function](node, ctx)
