from unittest import mock

import pytest

from cfneval.constants import PLACEHOLDER_AWS_NO_VALUE
from cfneval.engine.errors import (
    CircularReferenceError,
    DuplicateParameterError,
    ParameterNotFoundError,
    ResolvingContextError,
)
from cfneval.engine.resolving_context import AvailabilityZoneTable, ResolvingContext


class TestPseudoParameters:
    def test_pseudo_parameters_are_cached(self, create_context):
        ctx = create_context(region="eu-west-1")

        assert ctx.get("AWS::Region") == "eu-west-1"
        assert ctx.get("AWS::AccountId") == "123456789012"
        assert ctx.get("AWS::Partition") == "aws"
        assert ctx.get("AWS::StackName") == "test-stack"
        assert ctx.get("AWS::URLSuffix") == "amazonaws.com"
        assert ctx.get("AWS::NotificationARNs") == []
        assert ctx.get("AWS::NoValue") == PLACEHOLDER_AWS_NO_VALUE
        assert ctx.get("AWS::StackId").startswith(
            "arn:aws:cloudformation:eu-west-1:123456789012:stack/test-stack/"
        )

    @pytest.mark.parametrize(
        "region,partition",
        [
            ("us-east-1", "aws"),
            ("cn-north-1", "aws-cn"),
            ("us-gov-west-1", "aws-us-gov"),
            ("us-iso-east-1", "aws-iso"),
            ("us-isob-east-1", "aws-iso-b"),
        ],
    )
    def test_partition_derived_from_region(self, create_context, region, partition):
        ctx = create_context(region=region)
        assert ctx.partition == partition
        assert ctx.get("AWS::Partition") == partition

    def test_explicit_partition(self, create_context):
        ctx = create_context(region="us-east-1", partition="aws-cn")
        assert ctx.get("AWS::Partition") == "aws-cn"

    def test_stack_id_is_deterministic_with_seed(self, create_context):
        assert create_context(seed=7).get("AWS::StackId") == create_context(seed=7).get("AWS::StackId")
        assert create_context(seed=7).get("AWS::StackId") != create_context(seed=8).get("AWS::StackId")

    def test_parameters_are_cached(self, create_context):
        ctx = create_context(parameters={"Environment": "prod", "AWS::Region": "ap-southeast-2"})
        assert ctx.get("Environment") == "prod"
        # parameter values take precedence over the derived pseudo parameters
        assert ctx.get("AWS::Region") == "ap-southeast-2"


class TestCache:
    def test_get_missing_key(self, create_context):
        ctx = create_context()
        assert not ctx.has_key("Missing")
        with pytest.raises(ParameterNotFoundError) as e:
            ctx.get("Missing")
        assert e.value.key == "Missing"

    def test_add_is_write_once(self, create_context):
        ctx = create_context()
        ctx.add("Bucket", "my-bucket")
        assert ctx.has_key("Bucket")
        assert ctx.get("Bucket") == "my-bucket"

        with pytest.raises(DuplicateParameterError):
            ctx.add("Bucket", "other-bucket")
        assert ctx.get("Bucket") == "my-bucket"

    def test_put_overwrites(self, create_context):
        ctx = create_context()
        ctx.put("Key", 1)
        ctx.put("Key", 2)
        assert ctx.get("Key") == 2


class TestPath:
    def test_current_path(self, create_context):
        ctx = create_context()
        assert ctx.current_path == ""

        ctx.push_path("Resources")
        ctx.push_path("Bucket")
        ctx.push_path("Tags")
        ctx.push_path(0)
        ctx.push_path("Value")
        assert ctx.current_path == "Resources.Bucket.Tags[0].Value"
        assert ctx.path == ["Resources", "Bucket", "Tags", 0, "Value"]

        assert ctx.pop_path() == "Value"
        assert ctx.current_path == "Resources.Bucket.Tags[0]"

    def test_pop_on_empty_path(self, create_context):
        ctx = create_context()
        with pytest.raises(ResolvingContextError):
            ctx.pop_path()

    def test_path_segment_is_popped_on_error(self, create_context):
        ctx = create_context()
        with pytest.raises(ValueError):
            with ctx.path_segment("Outputs"):
                with ctx.path_segment(1):
                    raise ValueError("test")
        assert ctx.path == []


class TestAvailabilityZones:
    def test_known_region(self):
        table = AvailabilityZoneTable("us-east-1")
        assert table.get("us-west-2") == ["us-west-2a", "us-west-2b", "us-west-2c", "us-west-2d"]

    def test_default_region(self):
        table = AvailabilityZoneTable("eu-west-1")
        assert table.get() == ["eu-west-1a", "eu-west-1b", "eu-west-1c"]
        assert table.get("") == ["eu-west-1a", "eu-west-1b", "eu-west-1c"]
        assert table.get("  ") == ["eu-west-1a", "eu-west-1b", "eu-west-1c"]

    def test_unknown_region(self):
        table = AvailabilityZoneTable("us-east-1")
        assert table.get("xx-test-1") == ["xx-test-1a", "xx-test-1b", "xx-test-1c"]

    def test_custom_zones(self):
        table = AvailabilityZoneTable("local-1", {"local-1": ["local-1x"]})
        assert table.get() == ["local-1x"]
        # returned lists are copies
        table.get().append("other")
        assert table.get() == ["local-1x"]

    def test_context_uses_its_region_as_default(self, create_context):
        ctx = create_context(region="us-east-2")
        assert ctx.availability_zones() == ["us-east-2a", "us-east-2b", "us-east-2c"]


class TestGeneratedIds:
    def test_generate_unique_id(self, create_context):
        ctx = create_context()
        generated = ctx.generate_unique_id(lambda rnd: "id-1")
        assert generated == "id-1"
        assert ctx.has_generated_id("id-1")

    def test_generate_unique_id_retries(self, create_context):
        ctx = create_context()
        ctx.register_generated_id("taken")
        generator = mock.Mock(side_effect=["taken", "taken", "free"])

        assert ctx.generate_unique_id(generator) == "free"
        assert generator.call_count == 3

    def test_generate_unique_id_gives_up(self, create_context):
        ctx = create_context()
        ctx.generate_unique_id(lambda rnd: "constant")
        with pytest.raises(ResolvingContextError):
            ctx.generate_unique_id(lambda rnd: "constant")

    def test_physical_id_is_memoized(self, create_context):
        ctx = create_context()
        factory = mock.Mock(return_value="bucket-1")

        assert ctx.physical_id("Bucket", "name", factory) == "bucket-1"
        assert ctx.physical_id("Bucket", "name", factory) == "bucket-1"
        assert factory.call_count == 1

        factory.return_value = "other"
        assert ctx.physical_id("Bucket", "arn", factory) == "other"

    def test_template_is_not_modified(self, create_context):
        template = {"Resources": {"Bucket": {"Type": "AWS::S3::Bucket"}}}
        ctx = create_context(template)
        ctx.physical_id("Bucket", "name", lambda: "bucket-1")
        assert template == {"Resources": {"Bucket": {"Type": "AWS::S3::Bucket"}}}


class TestCycleDetection:
    def test_cycle_is_detected(self, create_context):
        ctx = create_context(detect_cycles=True)
        with pytest.raises(CircularReferenceError) as e:
            with ctx.resolving_resource("A"):
                with ctx.resolving_resource("B"):
                    with ctx.resolving_resource("A"):
                        pass
        assert e.value.chain == ["A", "B", "A"]
        assert "A -> B -> A" in str(e.value)

    def test_sequential_resolution_is_no_cycle(self, create_context):
        ctx = create_context(detect_cycles=True)
        with ctx.resolving_resource("A"):
            pass
        with ctx.resolving_resource("A"):
            with ctx.resolving_resource("B"):
                pass

    def test_detection_disabled(self, create_context):
        ctx = create_context(detect_cycles=False)
        with ctx.resolving_resource("A"):
            with ctx.resolving_resource("A"):
                pass


def test_context_with_defaults():
    ctx = ResolvingContext({"Resources": {}}, region="us-east-1", account_id="000000000000", stack_name="s")
    assert ctx.region == "us-east-1"
    assert ctx.account_id == "000000000000"
    assert ctx.template == {"Resources": {}}
