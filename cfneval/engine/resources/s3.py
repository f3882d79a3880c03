from cfneval.engine.resources.base import (
    build_strategy,
    generate_short_id,
    named_resource,
    property_value,
    runtime_value,
)
from cfneval.utils.aws.arns import s3_bucket_arn

bucket_name = named_resource("BucketName", lambda ctx: f"bucket-{generate_short_id(ctx)}")


def bucket_arn(logical_id, resource, ctx):
    return s3_bucket_arn(bucket_name(logical_id, resource, ctx), ctx.region, ctx.partition)


STRATEGIES = {
    "AWS::S3::Bucket": build_strategy(
        physical_id=bucket_name,
        attributes={
            "Arn": bucket_arn,
            "DomainName": runtime_value("DomainName"),
            "DualStackDomainName": runtime_value("DualStackDomainName"),
            "RegionalDomainName": runtime_value("RegionalDomainName"),
            "WebsiteURL": runtime_value("WebsiteURL"),
            "MetadataTableConfiguration.S3TablesDestination.TableArn": property_value(
                "MetadataTableConfiguration.S3TablesDestination.TableArn",
                lambda ctx: "RUNTIME_MetadataTableConfiguration",
            ),
            "MetadataTableConfiguration.S3TablesDestination.TableNamespace": property_value(
                "MetadataTableConfiguration.S3TablesDestination.TableNamespace",
                lambda ctx: "RUNTIME_MetadataTableConfiguration",
            ),
        },
    ),
}
