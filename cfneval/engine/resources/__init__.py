"""Resolvers for the resource types known to the engine, by resource type name."""
from typing import Dict

from cfneval.engine.resources import (
    apigateway,
    apigatewayv2,
    awslambda,
    cdk,
    dynamodb,
    ecs,
    elbv2,
    events,
    iam,
    logs,
    pipes,
    s3,
    sns,
    sqs,
    stepfunctions,
)
from cfneval.engine.resources.base import ResourceStrategy


def builtin_strategies() -> Dict[str, ResourceStrategy]:
    result = {}
    for module in (
        apigateway,
        apigatewayv2,
        awslambda,
        cdk,
        dynamodb,
        ecs,
        elbv2,
        events,
        iam,
        logs,
        pipes,
        s3,
        sns,
        sqs,
        stepfunctions,
    ):
        result.update(module.STRATEGIES)
    return result
