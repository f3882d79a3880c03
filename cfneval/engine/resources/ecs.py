from cfneval.engine.resources.base import (
    build_strategy,
    generate_alphanumeric,
    get_property,
    named_resource,
    resolve_string_with_default,
)
from cfneval.utils.aws.arns import ecs_service_arn, ecs_task_definition_arn

task_definition_family = named_resource(
    "Family", lambda ctx: f"task-{generate_alphanumeric(ctx, 5)}", kind="family"
)


def task_definition_arn(logical_id, resource, ctx):
    family = task_definition_family(logical_id, resource, ctx)
    return ecs_task_definition_arn(family, 1, ctx.account_id, ctx.region, ctx.partition)


service_name = named_resource("ServiceName", lambda ctx: f"service-{generate_alphanumeric(ctx, 6)}")


def service_arn(logical_id, resource, ctx):
    cluster = resolve_string_with_default(get_property(resource, "Cluster"), "default", ctx)
    # the cluster may be given by name or by ARN
    cluster_name = cluster.rpartition("/")[2]
    name = service_name(logical_id, resource, ctx)
    return ecs_service_arn(cluster_name, name, ctx.account_id, ctx.region, ctx.partition)


STRATEGIES = {
    "AWS::ECS::TaskDefinition": build_strategy(
        physical_id=task_definition_arn,
        attributes={"TaskDefinitionArn": task_definition_arn},
    ),
    "AWS::ECS::Service": build_strategy(
        physical_id=service_arn,
        attributes={
            "Name": service_name,
            "ServiceArn": service_arn,
        },
    ),
}
