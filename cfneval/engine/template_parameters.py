"""
Preparation of the parameter values a template is resolved with: template defaults, values given by the user,
and generated stubs for required parameters without a value.
"""
import logging
import random
import string
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from cfneval.engine.errors import MissingParametersError
from cfneval.engine.types import Template

LOG = logging.getLogger(__name__)

PSEUDO_PARAMETER_NAMES = (
    "AWS::AccountId",
    "AWS::NotificationARNs",
    "AWS::NoValue",
    "AWS::Partition",
    "AWS::Region",
    "AWS::StackId",
    "AWS::StackName",
    "AWS::URLSuffix",
)


@dataclass
class TemplateParameter:
    key: str
    type: str
    value: Any
    is_required: bool
    generated_stub: Any = None


@dataclass
class MergeStatistics:
    total_params_processed: int = 0
    overridden_params: List[str] = field(default_factory=list)
    missing_required_params: List[str] = field(default_factory=list)

    @property
    def changed_count(self) -> int:
        return len(self.overridden_params)


def _random_string(rnd: random.Random, min_length: int = 5, max_length: int = 10) -> str:
    length = rnd.randint(min_length, max_length)
    return "".join(rnd.choice(string.ascii_lowercase) for _ in range(length))


def _random_integer(rnd: random.Random) -> int:
    return rnd.randint(1, 1000)


def _random_list(rnd: random.Random, generator) -> list:
    return [generator() for _ in range(rnd.randint(1, 5))]


def generate_stub(parameter_type: str, rnd: random.Random = None) -> Any:
    """Generates a value for a parameter of the given type, used for required parameters without a value."""
    rnd = rnd or random.Random()
    if parameter_type == "String":
        return _random_string(rnd)
    if parameter_type in ("Number", "Integer"):
        return _random_integer(rnd)
    if parameter_type == "List<Number>":
        return _random_list(rnd, lambda: _random_integer(rnd))
    if parameter_type == "CommaDelimitedList":
        return ",".join(_random_list(rnd, lambda: _random_string(rnd, 3, 10)))
    if parameter_type.startswith("List<") and parameter_type.endswith(">"):
        if parameter_type[5:-1] == "Integer":
            return _random_list(rnd, lambda: _random_integer(rnd))
        return _random_list(rnd, lambda: _random_string(rnd))
    if parameter_type.startswith("AWS::"):
        return f"Stub{_random_string(rnd, 4, 8)}"
    return "StubValue"


def coerce_parameter_value(parameter_type: Optional[str], value: Any) -> Any:
    """List parameters given as comma separated strings are referenced as lists."""
    if not isinstance(value, str) or not parameter_type:
        return value
    if parameter_type == "CommaDelimitedList" or parameter_type.startswith("List<"):
        return [item.strip() for item in value.split(",")]
    return value


def analyze_parameters(template: Template, rnd: random.Random = None) -> List[TemplateParameter]:
    """
    Determines the value of each parameter declared in the template: the ``Default`` if present, otherwise the
    first of the ``AllowedValues``. Parameters with neither are required, and get a generated stub.
    """
    result = []
    for key, declaration in (template.get("Parameters") or {}).items():
        declaration = declaration or {}
        parameter_type = declaration.get("Type", "String")
        default = declaration.get("Default")
        allowed_values = declaration.get("AllowedValues")
        if default is not None:
            result.append(TemplateParameter(key, parameter_type, default, False, default))
        elif isinstance(allowed_values, list) and allowed_values:
            result.append(TemplateParameter(key, parameter_type, allowed_values[0], False, allowed_values[0]))
        else:
            stub = generate_stub(parameter_type, rnd)
            result.append(TemplateParameter(key, parameter_type, None, True, stub))
    return result


def merge_user_parameters(
    parameters: List[TemplateParameter], user_values: Dict[str, Any] = None
) -> Tuple[Dict[str, Any], MergeStatistics]:
    """
    Merges the analyzed template parameters with the values given by the user. User values take precedence
    over template values, which take precedence over generated stubs. User values for names the template does
    not declare (e.g. pseudo parameters) are passed through.

    :return: tuple of the parameter values by name, and statistics of the merge
    """
    user_values = user_values or {}
    stats = MergeStatistics()
    merged = {}

    for parameter in parameters:
        stats.total_params_processed += 1
        if parameter.key in user_values:
            value = user_values[parameter.key]
            stats.overridden_params.append(parameter.key)
            LOG.debug(
                "Parameter %s overridden by user, template value: %s, user value: %s",
                parameter.key,
                parameter.value,
                value,
            )
        elif parameter.value is not None:
            value = parameter.value
        elif parameter.generated_stub is not None:
            value = parameter.generated_stub
            LOG.info("Using generated value %r for required parameter %s", value, parameter.key)
        else:
            value = None
            stats.missing_required_params.append(parameter.key)
            LOG.warning("Missing required parameter value for key %s", parameter.key)
        merged[parameter.key] = coerce_parameter_value(parameter.type, value)

    for key, value in user_values.items():
        if key not in merged:
            stats.total_params_processed += 1
            stats.overridden_params.append(key)
            merged[key] = value

    LOG.debug(
        "Merged %s parameters, overridden: %s",
        stats.total_params_processed,
        ", ".join(stats.overridden_params) or "none",
    )
    return merged, stats


def validate_parameters(values: Dict[str, Any]) -> None:
    """
    Checks that all parameters, including the pseudo parameters, have a value.

    :raises MissingParametersError: listing the parameters without value
    """
    missing = [key for key, value in values.items() if value is None]
    missing += [key for key in PSEUDO_PARAMETER_NAMES if values.get(key) is None and key not in missing]
    if missing:
        raise MissingParametersError(missing)
