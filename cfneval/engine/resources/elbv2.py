from cfneval.engine.resources.base import (
    build_strategy,
    generate_alphanumeric,
    named_resource,
    runtime_value,
)
from cfneval.utils.aws.arns import elbv2_listener_rule_arn, elbv2_target_group_arn


def listener_rule_arn(logical_id, resource, ctx):
    def _create():
        ids = [generate_alphanumeric(ctx, 16, lowercase=True) for _ in range(3)]
        return elbv2_listener_rule_arn(
            f"stub-cluster/{'/'.join(ids)}", ctx.account_id, ctx.region, ctx.partition
        )

    return ctx.physical_id(logical_id, "arn", _create)


target_group_name = named_resource("Name", lambda ctx: f"tg-{generate_alphanumeric(ctx, 4)}")


def target_group_arn(logical_id, resource, ctx):
    group_id = ctx.physical_id(
        logical_id, "target-group-id", lambda: generate_alphanumeric(ctx, 16, lowercase=True)
    )
    name = target_group_name(logical_id, resource, ctx)
    return elbv2_target_group_arn(name, group_id, ctx.account_id, ctx.region, ctx.partition)


def target_group_full_name(logical_id, resource, ctx):
    # the full name is the resource part of the ARN, e.g. "targetgroup/my-group/0123456789abcdef"
    return target_group_arn(logical_id, resource, ctx).split(":")[-1]


STRATEGIES = {
    "AWS::ElasticLoadBalancingV2::ListenerRule": build_strategy(
        physical_id=listener_rule_arn,
        attributes={
            "IsDefault": runtime_value("IsDefault"),
            "RuleArn": listener_rule_arn,
        },
    ),
    "AWS::ElasticLoadBalancingV2::TargetGroup": build_strategy(
        physical_id=target_group_arn,
        attributes={
            "LoadBalancerArns": runtime_value("LoadBalancerArns"),
            "TargetGroupArn": target_group_arn,
            "TargetGroupFullName": target_group_full_name,
            "TargetGroupName": target_group_name,
        },
    ),
}
