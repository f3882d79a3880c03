from cfneval.engine.resources.base import build_strategy, generate_alphanumeric, named_resource
from cfneval.utils.aws.arns import log_group_arn

log_group_name = named_resource("LogGroupName", lambda ctx: f"/aws/logs/group-{generate_alphanumeric(ctx, 6)}")


def group_arn(logical_id, resource, ctx):
    return log_group_arn(log_group_name(logical_id, resource, ctx), ctx.account_id, ctx.region, ctx.partition)


STRATEGIES = {
    "AWS::Logs::LogGroup": build_strategy(
        physical_id=log_group_name,
        attributes={"Arn": group_arn},
    ),
}
