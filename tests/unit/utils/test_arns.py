import pytest
from botocore.utils import InvalidArnException

from cfneval.utils.aws import arns


@pytest.mark.parametrize(
    "region,partition",
    [
        (None, "aws"),
        ("eu-central-1", "aws"),
        ("cn-northwest-1", "aws-cn"),
        ("us-gov-east-1", "aws-us-gov"),
        ("us-iso-west-1", "aws-iso"),
        ("us-isob-east-1", "aws-iso-b"),
    ],
)
def test_get_partition(region, partition):
    assert arns.get_partition(region) == partition


def test_parse_arn():
    arn = arns.parse_arn("arn:aws:lambda:us-east-1:123456789012:function:handler")
    assert arn["service"] == "lambda"
    assert arn["account"] == "123456789012"
    assert arn["resource"] == "function:handler"

    with pytest.raises(InvalidArnException):
        arns.parse_arn("not-an-arn")

    assert arns.is_arn("arn:aws:s3:::bucket")
    assert not arns.is_arn("bucket")


def test_resource_arns():
    account, region = "123456789012", "us-west-2"
    assert arns.iam_role_arn("r", account, region) == "arn:aws:iam::123456789012:role/r"
    assert arns.iam_policy_arn("p", account, region) == "arn:aws:iam::123456789012:policy/p"
    assert arns.dynamodb_table_arn("t", account, region) == "arn:aws:dynamodb:us-west-2:123456789012:table/t"
    assert arns.sns_topic_arn("t", account, region) == "arn:aws:sns:us-west-2:123456789012:t"
    assert arns.sqs_queue_arn("q", account, region) == "arn:aws:sqs:us-west-2:123456789012:q"
    assert arns.sqs_queue_url("q", account, region) == "https://sqs.us-west-2.amazonaws.com/123456789012/q"
    assert arns.s3_bucket_arn("b", region) == "arn:aws:s3:::b"
    assert (
        arns.ecs_task_definition_arn("web", 2, account, region)
        == "arn:aws:ecs:us-west-2:123456789012:task-definition/web:2"
    )
    assert (
        arns.events_connection_arn("c", "id-1", account, region)
        == "arn:aws:events:us-west-2:123456789012:connection/c/id-1"
    )
    assert (
        arns.cloudformation_stack_arn("s", "uuid", account, region)
        == "arn:aws:cloudformation:us-west-2:123456789012:stack/s/uuid"
    )


def test_explicit_partition():
    assert arns.sns_topic_arn("t", "1", "us-east-1", "aws-cn") == "arn:aws-cn:sns:us-east-1:1:t"
    assert arns.s3_bucket_arn("b", "cn-north-1") == "arn:aws-cn:s3:::b"


def test_existing_arns_are_kept():
    role = "arn:aws:iam::111111111111:role/existing"
    assert arns.iam_role_arn(role, "123456789012", "us-east-1") == role
    function = "arn:aws:lambda:eu-west-1:111111111111:function:f"
    assert arns.lambda_function_arn(function, "123456789012", "us-east-1") == function
    assert arns.lambda_function_name(function) == "f"
    assert arns.lambda_function_name("f") == "f"
    assert arns.lambda_function_name("f:live") == "f:live"
    with pytest.raises(ValueError):
        arns.lambda_function_name(role)
