"""Resolvers for the resources of API Gateway HTTP and WebSocket APIs (v2)."""
from cfneval.engine.resources.base import (
    build_strategy,
    generate_alphanumeric,
    generated_id,
    named_resource,
)

api_id = generated_id(10, lowercase=True)


def api_endpoint(logical_id, resource, ctx):
    return f"https://{api_id(logical_id, resource, ctx)}.execute-api.{ctx.region}.{ctx.url_suffix}"


authorizer_id = generated_id(9, lowercase=True)

deployment_id = generated_id(6, lowercase=True)

model_id = generated_id(6, lowercase=True)

stage_name = named_resource("StageName", lambda ctx: f"stage-{generate_alphanumeric(ctx, 4)}")


STRATEGIES = {
    "AWS::ApiGatewayV2::Api": build_strategy(
        physical_id=api_id,
        attributes={
            "ApiEndpoint": api_endpoint,
            "ApiId": api_id,
        },
    ),
    "AWS::ApiGatewayV2::Authorizer": build_strategy(
        physical_id=authorizer_id,
        attributes={"AuthorizerId": authorizer_id},
    ),
    "AWS::ApiGatewayV2::Deployment": build_strategy(
        physical_id=deployment_id,
        attributes={"DeploymentId": deployment_id},
    ),
    "AWS::ApiGatewayV2::Model": build_strategy(
        physical_id=model_id,
        attributes={"ModelId": model_id},
    ),
    "AWS::ApiGatewayV2::Stage": build_strategy(
        physical_id=stage_name,
        attributes={"Id": stage_name},
    ),
}
