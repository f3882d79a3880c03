from cfneval.engine.resources.base import (
    build_strategy,
    generate_alphanumeric,
    named_resource,
    runtime_value,
)
from cfneval.utils.aws.arns import dynamodb_table_arn

table_name = named_resource("TableName", lambda ctx: f"table-{generate_alphanumeric(ctx, 6)}")


def table_arn(logical_id, resource, ctx):
    return dynamodb_table_arn(table_name(logical_id, resource, ctx), ctx.account_id, ctx.region, ctx.partition)


STRATEGIES = {
    "AWS::DynamoDB::Table": build_strategy(
        physical_id=table_name,
        attributes={
            "Arn": table_arn,
            "StreamArn": runtime_value("StreamArn"),
        },
    ),
}
