from cfneval.engine.resources.base import (
    build_strategy,
    generate_alphanumeric,
    named_resource,
    property_value,
    runtime_value,
    use_logical_id,
)
from cfneval.utils.aws.arns import lambda_function_arn, lambda_function_name

# FunctionName may be a name or a complete ARN
function_name_or_arn = named_resource("FunctionName", lambda ctx: f"lambda-{generate_alphanumeric(ctx, 6)}")


def function_arn(logical_id, resource, ctx):
    name = function_name_or_arn(logical_id, resource, ctx)
    return lambda_function_arn(name, ctx.account_id, ctx.region, ctx.partition)


def function_name(logical_id, resource, ctx):
    return lambda_function_name(function_arn(logical_id, resource, ctx))


STRATEGIES = {
    "AWS::Lambda::Function": build_strategy(
        physical_id=function_arn,
        ref=function_name,
        attributes={
            "Arn": function_arn,
            "SnapStartResponse.ApplyOn": property_value(
                "SnapStart.ApplyOn", lambda ctx: "None"
            ),
            "SnapStartResponse.OptimizationStatus": runtime_value("SnapStartResponse.OptimizationStatus"),
        },
    ),
    "AWS::Lambda::Permission": build_strategy(
        physical_id=use_logical_id,
        attributes={"Id": use_logical_id},
    ),
}
