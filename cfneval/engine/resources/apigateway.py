"""Resolvers for the resources of API Gateway REST APIs (v1)."""
from cfneval.engine.resources.base import (
    build_strategy,
    generate_alphanumeric,
    generated_id,
    named_resource,
    runtime_value,
    use_logical_id,
)

rest_api_id = generated_id(10, lowercase=True)

resource_id = generated_id(16, lowercase=True)

deployment_id = generated_id(12, lowercase=True)

authorizer_id = generated_id(10, lowercase=True)

request_validator_id = generated_id(10, lowercase=True)

stage_name = named_resource("StageName", lambda ctx: f"stage-{generate_alphanumeric(ctx, 4)}")

model_name = named_resource("Name", lambda ctx: f"model{generate_alphanumeric(ctx, 6)}")


STRATEGIES = {
    "AWS::ApiGateway::RestApi": build_strategy(
        physical_id=rest_api_id,
        attributes={
            "RestApiId": rest_api_id,
            "RootResourceId": runtime_value("RootResourceId"),
        },
    ),
    "AWS::ApiGateway::Resource": build_strategy(
        physical_id=resource_id,
        attributes={"ResourceId": resource_id},
    ),
    "AWS::ApiGateway::Deployment": build_strategy(
        physical_id=deployment_id,
        attributes={"DeploymentId": deployment_id},
    ),
    "AWS::ApiGateway::Authorizer": build_strategy(
        physical_id=authorizer_id,
        attributes={"AuthorizerId": authorizer_id},
    ),
    "AWS::ApiGateway::RequestValidator": build_strategy(
        physical_id=request_validator_id,
        attributes={"RequestValidatorId": request_validator_id},
    ),
    "AWS::ApiGateway::Method": build_strategy(physical_id=use_logical_id),
    "AWS::ApiGateway::Model": build_strategy(physical_id=model_name),
    "AWS::ApiGateway::Stage": build_strategy(physical_id=stage_name),
}
