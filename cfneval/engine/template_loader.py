"""
Loading of templates from their serialized (JSON or YAML) form into a validated template document.
"""
import json
import logging
from typing import Any, Dict

import jsonschema
import yaml
from moto.cloudformation.utils import yaml_tag_constructor

from cfneval.engine.errors import (
    InvalidTemplateInputError,
    TemplateParsingError,
    TemplateValidationError,
)
from cfneval.engine.types import Template
from cfneval.utils.strings import is_blank, to_str

LOG = logging.getLogger(__name__)


class NoDatesSafeLoader(yaml.SafeLoader):
    """SafeLoader that keeps date-like values (e.g. ``AWSTemplateFormatVersion``) as strings."""


NoDatesSafeLoader.yaml_implicit_resolvers = {
    k: [r for r in v if r[0] != "tag:yaml.org,2002:timestamp"]
    for k, v in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
# short form intrinsic functions, e.g. "!Ref MyBucket" or "!GetAtt MyBucket.Arn"
NoDatesSafeLoader.add_multi_constructor("", yaml_tag_constructor)


_OBJECT = {"type": "object"}

TEMPLATE_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["Resources"],
    "properties": {
        "AWSTemplateFormatVersion": {"type": "string"},
        "Description": {"type": "string"},
        "Metadata": _OBJECT,
        "Transform": {"type": ["string", "array"]},
        "Parameters": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "required": ["Type"],
                "properties": {
                    "Type": {"type": "string"},
                    "AllowedValues": {"type": "array"},
                },
            },
        },
        "Mappings": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "additionalProperties": _OBJECT,
            },
        },
        "Conditions": _OBJECT,
        "Resources": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "required": ["Type"],
                "properties": {
                    "Type": {"type": "string", "minLength": 1},
                    "Properties": _OBJECT,
                    "Condition": {"type": "string"},
                    "DependsOn": {"type": ["string", "array"]},
                },
            },
        },
        "Outputs": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "required": ["Value"],
            },
        },
    },
}


def parse_template(template_body) -> Any:
    """
    Parses the given template text, trying JSON first and YAML second.

    :raises InvalidTemplateInputError: if the input is None or blank
    :raises TemplateParsingError: if the input is neither valid JSON nor valid YAML
    """
    template_body = to_str(template_body)
    if is_blank(template_body):
        raise InvalidTemplateInputError("Template body must not be empty")
    try:
        return json.loads(template_body)
    except ValueError:
        LOG.debug("Template is not valid JSON, parsing it as YAML")
    try:
        return yaml.load(template_body, Loader=NoDatesSafeLoader)
    except yaml.YAMLError as e:
        raise TemplateParsingError(f"Unable to parse template: {e}") from e


def validate_template(document: Any) -> Template:
    """
    Validates the parsed document against ``TEMPLATE_SCHEMA``.

    :raises TemplateValidationError: if the document does not conform to the schema
    """
    try:
        jsonschema.validate(document, TEMPLATE_SCHEMA)
    except jsonschema.ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise TemplateValidationError(f"Invalid template at {location}: {e.message}", location) from e
    return document


def load_template(template_body) -> Template:
    return validate_template(parse_template(template_body))


def load_template_file(path: str) -> Template:
    with open(path, "r") as template_file:
        return load_template(template_file.read())
