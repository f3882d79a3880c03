import logging
import re
from typing import Optional, TypedDict

from botocore.utils import ArnParser, InvalidArnException

LOG = logging.getLogger(__name__)

#
# Partition Utilities
#

DEFAULT_PARTITION = "aws"
REGION_PREFIX_TO_PARTITION = {
    # (region prefix, aws partition)
    "cn-": "aws-cn",
    "us-gov-": "aws-us-gov",
    "us-iso-": "aws-iso",
    "us-isob-": "aws-iso-b",
}
PARTITION_NAMES = list(REGION_PREFIX_TO_PARTITION.values()) + [DEFAULT_PARTITION]
ARN_PARTITION_REGEX = r"^arn:(" + "|".join(sorted(PARTITION_NAMES)) + ")"


def get_partition(region: Optional[str]) -> str:
    if not region:
        return DEFAULT_PARTITION
    if region in PARTITION_NAMES:
        return region
    # longest prefix first, so that "us-isob-" is not shadowed by "us-iso-"
    for prefix in sorted(REGION_PREFIX_TO_PARTITION, key=len, reverse=True):
        if region.startswith(prefix):
            return REGION_PREFIX_TO_PARTITION[prefix]
    return DEFAULT_PARTITION


#
# ARN parsing utilities
#


class ArnData(TypedDict):
    partition: str
    service: str
    region: str
    account: str
    resource: str


_arn_parser = ArnParser()


def parse_arn(arn: str) -> ArnData:
    """
    Uses a botocore ArnParser to parse an arn.

    :param arn: the arn string to parse
    :returns: a dictionary containing the ARN components
    :raises InvalidArnException: if the arn is invalid
    """
    return _arn_parser.parse_arn(arn)


def is_arn(possible_arn: str) -> bool:
    try:
        parse_arn(possible_arn)
        return True
    except InvalidArnException:
        return False


#
# Generic ARN builder
#


def _resource_arn(
    name: str, pattern: str, account_id: str, region_name: str, partition: str = None
) -> str:
    if ":" in name:
        return name
    partition = partition or get_partition(region_name)
    if len(pattern.split("%s")) == 4:
        return pattern % (partition, account_id, name)
    return pattern % (partition, region_name, account_id, name)


def generic_arn(
    service: str, resource: str, account_id: str, region_name: str, partition: str = None
) -> str:
    partition = partition or get_partition(region_name)
    return f"arn:{partition}:{service}:{region_name}:{account_id}:{resource}"


#
# IAM
#


def iam_role_arn(role_name: str, account_id: str, region_name: str, partition: str = None) -> str:
    if not role_name:
        return role_name
    if re.match(f"{ARN_PARTITION_REGEX}:iam::", role_name):
        return role_name
    partition = partition or get_partition(region_name)
    return "arn:%s:iam::%s:role/%s" % (partition, account_id, role_name)


def iam_policy_arn(policy_name: str, account_id: str, region_name: str, partition: str = None) -> str:
    pattern = "arn:%s:iam::%s:policy/%s"
    return _resource_arn(policy_name, pattern, account_id, region_name, partition)


#
# DynamoDB
#


def dynamodb_table_arn(table_name: str, account_id: str, region_name: str, partition: str = None) -> str:
    pattern = "arn:%s:dynamodb:%s:%s:table/%s"
    return _resource_arn(table_name, pattern, account_id, region_name, partition)


#
# Logs
#


def log_group_arn(group_name: str, account_id: str, region_name: str, partition: str = None) -> str:
    pattern = "arn:%s:logs:%s:%s:log-group:%s:*"
    return _resource_arn(group_name, pattern, account_id, region_name, partition)


#
# Events
#


def events_archive_arn(archive_name: str, account_id: str, region_name: str, partition: str = None) -> str:
    pattern = "arn:%s:events:%s:%s:archive/%s"
    return _resource_arn(archive_name, pattern, account_id, region_name, partition)


def event_bus_arn(bus_name: str, account_id: str, region_name: str, partition: str = None) -> str:
    pattern = "arn:%s:events:%s:%s:event-bus/%s"
    return _resource_arn(bus_name, pattern, account_id, region_name, partition)


def events_rule_arn(rule_name: str, account_id: str, region_name: str, partition: str = None) -> str:
    pattern = "arn:%s:events:%s:%s:rule/%s"
    return _resource_arn(rule_name, pattern, account_id, region_name, partition)


def events_connection_arn(
    name: str, connection_id: str, account_id: str, region_name: str, partition: str = None
) -> str:
    pattern = "arn:%s:events:%s:%s:connection/%s"
    return _resource_arn(f"{name}/{connection_id}", pattern, account_id, region_name, partition)


def events_api_destination_arn(
    name: str, destination_id: str, account_id: str, region_name: str, partition: str = None
) -> str:
    pattern = "arn:%s:events:%s:%s:api-destination/%s"
    return _resource_arn(f"{name}/{destination_id}", pattern, account_id, region_name, partition)


#
# Pipes
#


def pipes_pipe_arn(name: str, account_id: str, region_name: str, partition: str = None) -> str:
    pattern = "arn:%s:pipes:%s:%s:pipe/%s"
    return _resource_arn(name, pattern, account_id, region_name, partition)


#
# Lambda
#


def lambda_function_arn(function_name: str, account_id: str, region_name: str, partition: str = None) -> str:
    pattern = "arn:%s:lambda:%s:%s:function:%s"
    if re.match(f"{ARN_PARTITION_REGEX}:lambda:", function_name):
        return function_name
    partition = partition or get_partition(region_name)
    return pattern % (partition, region_name, account_id, function_name)


def lambda_function_name(name_or_arn: str) -> str:
    if is_arn(name_or_arn):
        arn = parse_arn(name_or_arn)
        if arn["service"] != "lambda":
            raise ValueError("arn is not a lambda arn %s" % name_or_arn)

        return arn["resource"].split(":")[1]
    else:
        return name_or_arn


#
# Step Functions
#


def stepfunctions_state_machine_arn(name: str, account_id: str, region_name: str, partition: str = None) -> str:
    pattern = "arn:%s:states:%s:%s:stateMachine:%s"
    if re.match(f"{ARN_PARTITION_REGEX}:states:", name):
        return name
    partition = partition or get_partition(region_name)
    return pattern % (partition, region_name, account_id, name)


#
# ECS
#


def ecs_task_definition_arn(
    family: str, revision: int, account_id: str, region_name: str, partition: str = None
) -> str:
    partition = partition or get_partition(region_name)
    return f"arn:{partition}:ecs:{region_name}:{account_id}:task-definition/{family}:{revision}"


def ecs_service_arn(
    cluster_name: str, service_name: str, account_id: str, region_name: str, partition: str = None
) -> str:
    pattern = "arn:%s:ecs:%s:%s:service/%s"
    return _resource_arn(f"{cluster_name}/{service_name}", pattern, account_id, region_name, partition)


#
# Elastic Load Balancing v2
#


def elbv2_target_group_arn(
    name: str, group_id: str, account_id: str, region_name: str, partition: str = None
) -> str:
    pattern = "arn:%s:elasticloadbalancing:%s:%s:targetgroup/%s"
    return _resource_arn(f"{name}/{group_id}", pattern, account_id, region_name, partition)


def elbv2_listener_rule_arn(rule_path: str, account_id: str, region_name: str, partition: str = None) -> str:
    pattern = "arn:%s:elasticloadbalancing:%s:%s:listener-rule/%s"
    return pattern % (partition or get_partition(region_name), region_name, account_id, rule_path)


#
# S3
#


def s3_bucket_arn(bucket_name_or_arn: str, region="us-east-1", partition: str = None) -> str:
    bucket_name = s3_bucket_name(bucket_name_or_arn)
    return f"arn:{partition or get_partition(region)}:s3:::{bucket_name}"


def s3_bucket_name(bucket_name_or_arn: str) -> str:
    return bucket_name_or_arn.split(":::")[-1]


#
# SQS
#


def sqs_queue_arn(queue_name: str, account_id: str, region_name: str, partition: str = None) -> str:
    partition = partition or get_partition(region_name)
    return "arn:%s:sqs:%s:%s:%s" % (partition, region_name, account_id, queue_name)


def sqs_queue_url(queue_name: str, account_id: str, region_name: str, url_suffix: str = "amazonaws.com") -> str:
    return f"https://sqs.{region_name}.{url_suffix}/{account_id}/{queue_name}"


#
# SNS
#


def sns_topic_arn(topic_name: str, account_id: str, region_name: str, partition: str = None) -> str:
    return f"arn:{partition or get_partition(region_name)}:sns:{region_name}:{account_id}:{topic_name}"


#
# CloudFormation
#


def cloudformation_stack_arn(
    stack_name: str, stack_id: str, account_id: str, region_name: str, partition: str = None
) -> str:
    pattern = "arn:%s:cloudformation:%s:%s:stack/%s"
    return _resource_arn(f"{stack_name}/{stack_id}", pattern, account_id, region_name, partition)
