from cfneval.engine.resources.base import build_strategy, generate_alphanumeric, named_resource
from cfneval.utils.aws.arns import sqs_queue_arn, sqs_queue_url

queue_name = named_resource("QueueName", lambda ctx: f"sqs{generate_alphanumeric(ctx, 6)}")


def queue_url(logical_id, resource, ctx):
    return sqs_queue_url(queue_name(logical_id, resource, ctx), ctx.account_id, ctx.region, ctx.url_suffix)


def queue_arn(logical_id, resource, ctx):
    return sqs_queue_arn(queue_name(logical_id, resource, ctx), ctx.account_id, ctx.region, ctx.partition)


STRATEGIES = {
    # a queue is referenced by its URL
    "AWS::SQS::Queue": build_strategy(
        physical_id=queue_url,
        attributes={
            "Arn": queue_arn,
            "QueueName": queue_name,
            "QueueUrl": queue_url,
        },
    ),
}
