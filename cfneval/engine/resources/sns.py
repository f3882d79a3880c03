from cfneval.engine.resources.base import (
    build_strategy,
    generate_alphanumeric,
    generate_uuid,
    get_property,
    named_resource,
    resolve_string_with_default,
    use_logical_id,
)
from cfneval.utils.aws.arns import sns_topic_arn

topic_name = named_resource("TopicName", lambda ctx: f"topic-{generate_alphanumeric(ctx, 6)}")


def topic_arn(logical_id, resource, ctx):
    return sns_topic_arn(topic_name(logical_id, resource, ctx), ctx.account_id, ctx.region, ctx.partition)


def subscription_arn(logical_id, resource, ctx):
    def _create():
        topic = resolve_string_with_default(get_property(resource, "TopicArn"), None, ctx)
        if topic is None:
            topic = sns_topic_arn(f"topic-{logical_id}", ctx.account_id, ctx.region, ctx.partition)
        return f"{topic}:{generate_uuid(ctx)}"

    return ctx.physical_id(logical_id, "arn", _create)


STRATEGIES = {
    # a topic is referenced by its ARN
    "AWS::SNS::Topic": build_strategy(
        physical_id=topic_arn,
        attributes={
            "TopicArn": topic_arn,
            "TopicName": topic_name,
        },
    ),
    "AWS::SNS::Subscription": build_strategy(
        physical_id=subscription_arn,
        attributes={"Arn": subscription_arn},
    ),
    "AWS::SNS::TopicPolicy": build_strategy(
        physical_id=use_logical_id,
        attributes={"Id": use_logical_id},
    ),
}
