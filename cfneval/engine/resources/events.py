from cfneval.engine.resources.base import (
    build_strategy,
    generate_alphanumeric,
    generate_uuid,
    named_resource,
    property_value,
    runtime_value,
)
from cfneval.utils.aws.arns import (
    event_bus_arn,
    events_api_destination_arn,
    events_archive_arn,
    events_connection_arn,
    events_rule_arn,
    generic_arn,
)

rule_name = named_resource("Name", lambda ctx: f"rule-{generate_alphanumeric(ctx, 6)}")


def rule_arn(logical_id, resource, ctx):
    return events_rule_arn(rule_name(logical_id, resource, ctx), ctx.account_id, ctx.region, ctx.partition)


bus_name = named_resource("Name", lambda ctx: f"bus-{generate_alphanumeric(ctx, 6)}")


def bus_arn(logical_id, resource, ctx):
    return event_bus_arn(bus_name(logical_id, resource, ctx), ctx.account_id, ctx.region, ctx.partition)


def bus_policy_arn(logical_id, resource, ctx):
    return ctx.physical_id(
        logical_id,
        "arn",
        lambda: generic_arn(
            "events", f"event-bus-policy/{generate_alphanumeric(ctx, 8)}", ctx.account_id, ctx.region, ctx.partition
        ),
    )


connection_name = named_resource("Name", lambda ctx: f"connection-{generate_alphanumeric(ctx, 6)}")


def connection_arn(logical_id, resource, ctx):
    connection_id = ctx.physical_id(logical_id, "connection-id", lambda: generate_uuid(ctx))
    name = connection_name(logical_id, resource, ctx)
    return events_connection_arn(name, connection_id, ctx.account_id, ctx.region, ctx.partition)


archive_name = named_resource("ArchiveName", lambda ctx: f"archive-{generate_alphanumeric(ctx, 6)}")


def archive_arn(logical_id, resource, ctx):
    return events_archive_arn(archive_name(logical_id, resource, ctx), ctx.account_id, ctx.region, ctx.partition)


api_destination_name = named_resource("Name", lambda ctx: f"destination-{generate_alphanumeric(ctx, 6)}")


def api_destination_arn(logical_id, resource, ctx):
    destination_id = ctx.physical_id(logical_id, "destination-id", lambda: generate_uuid(ctx))
    name = api_destination_name(logical_id, resource, ctx)
    return events_api_destination_arn(name, destination_id, ctx.account_id, ctx.region, ctx.partition)


STRATEGIES = {
    "AWS::Events::Rule": build_strategy(
        physical_id=rule_name,
        attributes={"Arn": rule_arn},
    ),
    "AWS::Events::EventBus": build_strategy(
        physical_id=bus_name,
        attributes={
            "Arn": bus_arn,
            "Name": bus_name,
            "Policy": runtime_value("Policy"),
        },
    ),
    "AWS::Events::EventBusPolicy": build_strategy(physical_id=bus_policy_arn),
    "AWS::Events::Connection": build_strategy(
        physical_id=connection_name,
        attributes={
            "Arn": connection_arn,
            "SecretArn": property_value("SecretArn", lambda ctx: "RUNTIME_SecretArn"),
            "AuthParameters.ConnectivityParameters.ResourceParameters.ResourceAssociationArn": property_value(
                "AuthParameters.ConnectivityParameters.ResourceParameters.ResourceAssociationArn",
                lambda ctx: "RUNTIME_ResourceAssociationArn",
            ),
            "InvocationConnectivityParameters.ResourceParameters.ResourceAssociationArn": property_value(
                "InvocationConnectivityParameters.ResourceParameters.ResourceAssociationArn",
                lambda ctx: "RUNTIME_ResourceAssociationArn",
            ),
        },
    ),
    "AWS::Events::Archive": build_strategy(
        physical_id=archive_name,
        attributes={"Arn": archive_arn},
    ),
    "AWS::Events::ApiDestination": build_strategy(
        physical_id=api_destination_name,
        attributes={"Arn": api_destination_arn},
    ),
}
