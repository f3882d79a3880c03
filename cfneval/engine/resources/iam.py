from cfneval.engine.resources.base import (
    build_strategy,
    generate_alphanumeric,
    named_resource,
    use_logical_id,
)
from cfneval.utils.aws.arns import iam_policy_arn, iam_role_arn

role_name = named_resource("RoleName", lambda ctx: f"role-{generate_alphanumeric(ctx, 6)}")


def role_arn(logical_id, resource, ctx):
    return iam_role_arn(role_name(logical_id, resource, ctx), ctx.account_id, ctx.region, ctx.partition)


def role_id(logical_id, resource, ctx):
    # role ids are 21 upper case characters starting with AROA
    return ctx.physical_id(
        logical_id, "role-id", lambda: f"AROA{generate_alphanumeric(ctx, 17).upper()}"
    )


policy_name = named_resource("PolicyName", lambda ctx: f"policy-{generate_alphanumeric(ctx, 6)}")


def policy_arn(logical_id, resource, ctx):
    return iam_policy_arn(policy_name(logical_id, resource, ctx), ctx.account_id, ctx.region, ctx.partition)


STRATEGIES = {
    "AWS::IAM::Role": build_strategy(
        physical_id=role_name,
        attributes={
            "Arn": role_arn,
            "RoleId": role_id,
        },
    ),
    "AWS::IAM::Policy": build_strategy(
        physical_id=use_logical_id,
        attributes={"Id": use_logical_id},
    ),
    "AWS::IAM::ManagedPolicy": build_strategy(
        physical_id=policy_arn,
        attributes={
            "PolicyArn": policy_arn,
            "PolicyName": policy_name,
        },
    ),
}
