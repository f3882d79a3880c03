"""
Top level entry points: load a template, prepare its parameters, and resolve all intrinsic functions in it.
"""
import copy
import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from cfneval import config
from cfneval.engine.errors import TemplateProcessingError
from cfneval.engine.intrinsics import contains_intrinsic
from cfneval.engine.resolving_context import AvailabilityZoneTable, ResolvingContext
from cfneval.engine.template_loader import load_template
from cfneval.engine.template_parameters import (
    MergeStatistics,
    TemplateParameter,
    analyze_parameters,
    merge_user_parameters,
    validate_parameters,
)
from cfneval.engine.types import Template
from cfneval.engine.value_resolver import resolve_value
from cfneval.utils.objects import remove_none_values

LOG = logging.getLogger(__name__)

# sections of the template that contain intrinsic functions to resolve, in resolution order
RESOLVED_SECTIONS = ("Conditions", "Resources", "Outputs")


@dataclass
class ParsingResult:
    template: Template
    parameters_to_review: List[TemplateParameter]


@dataclass
class EvaluationResult:
    template: Template
    parameters: Dict[str, Any]
    statistics: MergeStatistics
    passes: int


def parse_template_body(template_body, seed: int = None) -> ParsingResult:
    """Loads the template and determines the values of its parameters, for review by the user."""
    template = load_template(template_body)
    rnd = random.Random(config.RANDOM_SEED if seed is None else seed)
    parameters = analyze_parameters(template, rnd)
    LOG.debug(
        "Template loaded, %s parameters, %s of them without value",
        len(parameters),
        len([p for p in parameters if p.is_required]),
    )
    return ParsingResult(template, parameters)


def resolve_template(template: Template, ctx: ResolvingContext, max_passes: int = None) -> tuple:
    """
    Resolves the intrinsic functions in the sections of the given template. Resolution is repeated while
    intrinsic functions are left (e.g. in the branches returned by ``Fn::If``), up to ``max_passes`` times.

    :return: tuple of the resolved template, with ``AWS::NoValue`` removed, and the number of passes
    :raises TemplateProcessingError: if intrinsic functions are left after the last pass
    """
    max_passes = max_passes or config.MAX_RESOLVE_PASSES
    result = copy.deepcopy(template)

    for current_pass in range(1, max_passes + 1):
        for section in RESOLVED_SECTIONS:
            if section in result:
                with ctx.path_segment(section):
                    result[section] = resolve_value(result[section], ctx)
        if not any(contains_intrinsic(result.get(section)) for section in RESOLVED_SECTIONS):
            LOG.debug("Template resolved after %s pass(es)", current_pass)
            return remove_none_values(result), current_pass

    raise TemplateProcessingError(f"Template still contains intrinsic functions after {max_passes} passes")


def apply_user_parameters(
    parsing_result: ParsingResult,
    user_values: Dict[str, Any] = None,
    region: str = None,
    partition: str = None,
    account_id: str = None,
    az_table: Optional[AvailabilityZoneTable] = None,
    stack_name: str = None,
    seed: int = None,
    max_passes: int = None,
) -> EvaluationResult:
    if parsing_result is None or parsing_result.template is None:
        raise TemplateProcessingError("Parsing result is invalid: no template to resolve")

    values, stats = merge_user_parameters(parsing_result.parameters_to_review, user_values)
    if stats.missing_required_params:
        LOG.warning("Missing required parameters: %s", ", ".join(stats.missing_required_params))

    ctx = ResolvingContext(
        parsing_result.template,
        region=region or values.get("AWS::Region"),
        partition=partition or values.get("AWS::Partition"),
        account_id=account_id or values.get("AWS::AccountId"),
        az_table=az_table,
        parameters=values,
        stack_name=stack_name or values.get("AWS::StackName"),
        seed=seed,
    )
    validate_parameters(ctx.cache)

    resolved, passes = resolve_template(parsing_result.template, ctx, max_passes)
    return EvaluationResult(template=resolved, parameters=values, statistics=stats, passes=passes)


def evaluate_template(template: Template, user_values: Dict[str, Any] = None, **kwargs) -> EvaluationResult:
    """
    Resolves all intrinsic functions of an already loaded template.

    :param template: the template document, it is not modified
    :param user_values: parameter values overriding the template defaults
    :param kwargs: options of the resolving context (region, partition, account_id, ...)
    :return: the evaluation result
    """
    rnd = random.Random(config.RANDOM_SEED if kwargs.get("seed") is None else kwargs["seed"])
    parsing_result = ParsingResult(template, analyze_parameters(template, rnd))
    return apply_user_parameters(parsing_result, user_values, **kwargs)


def evaluate_template_body(template_body, user_values: Dict[str, Any] = None, **kwargs) -> EvaluationResult:
    return evaluate_template(load_template(template_body), user_values, **kwargs)
