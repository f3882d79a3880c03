from cfneval.engine.resources.base import (
    build_strategy,
    generate_alphanumeric,
    named_resource,
    runtime_value,
)
from cfneval.utils.aws.arns import pipes_pipe_arn

pipe_name = named_resource("Name", lambda ctx: f"pipe-{generate_alphanumeric(ctx, 6)}")


def pipe_arn(logical_id, resource, ctx):
    return pipes_pipe_arn(pipe_name(logical_id, resource, ctx), ctx.account_id, ctx.region, ctx.partition)


STRATEGIES = {
    "AWS::Pipes::Pipe": build_strategy(
        physical_id=pipe_name,
        attributes={
            "Arn": pipe_arn,
            "CreationTime": runtime_value("CreationTime"),
            "CurrentState": runtime_value("CurrentState"),
            "LastModifiedTime": runtime_value("LastModifiedTime"),
            "StateReason": runtime_value("StateReason"),
        },
    ),
}
