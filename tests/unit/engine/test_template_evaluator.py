import copy
import json

import pytest

from cfneval.constants import PLACEHOLDER_AWS_NO_VALUE
from cfneval.engine.errors import (
    CircularReferenceError,
    MissingParametersError,
    TemplateProcessingError,
    UnresolvedReferenceError,
)
from cfneval.engine.template_evaluator import (
    ParsingResult,
    apply_user_parameters,
    evaluate_template,
    evaluate_template_body,
    parse_template_body,
    resolve_template,
)
from cfneval.engine.template_parameters import TemplateParameter

TEMPLATE = {
    "Parameters": {
        "Env": {"Type": "String", "Default": "dev"},
        "Subnets": {"Type": "CommaDelimitedList", "Default": "subnet-1,subnet-2"},
    },
    "Mappings": {"Sizes": {"dev": {"Memory": "128"}, "prod": {"Memory": "1024"}}},
    "Conditions": {
        "IsProd": {"Fn::Equals": [{"Ref": "Env"}, "prod"]},
        "IsDev": {"Fn::Not": [{"Condition": "IsProd"}]},
    },
    "Resources": {
        "Bucket": {
            "Type": "AWS::S3::Bucket",
            "Properties": {
                "BucketName": {"Fn::If": ["IsProd", "prod-data", {"Fn::Sub": "${Env}-data"}]},
                "Tags": [
                    {"Key": "env", "Value": {"Ref": "Env"}},
                    {"Fn::If": ["IsProd", {"Key": "critical", "Value": "yes"}, {"Ref": "AWS::NoValue"}]},
                ],
            },
        },
        "Queue": {
            "Type": "AWS::SQS::Queue",
            "Properties": {
                "QueueName": {"Fn::Join": ["-", [{"Ref": "Env"}, "jobs"]]},
                "RedrivePolicy": {"Fn::If": ["IsProd", {"maxReceiveCount": 3}, {"Ref": "AWS::NoValue"}]},
            },
        },
        "Function": {
            "Type": "AWS::Lambda::Function",
            "Properties": {
                "FunctionName": "handler",
                "MemorySize": {"Fn::FindInMap": ["Sizes", {"Ref": "Env"}, "Memory"]},
                "Environment": {"Variables": {"QUEUE_URL": {"Ref": "Queue"}}},
                "SubnetIds": {"Ref": "Subnets"},
            },
        },
    },
    "Outputs": {
        "BucketName": {"Value": {"Ref": "Bucket"}},
        "QueueArn": {"Value": {"Fn::GetAtt": ["Queue", "Arn"]}},
        "FirstSubnet": {"Value": {"Fn::Select": ["0", {"Ref": "Subnets"}]}},
    },
}

EVALUATION_OPTIONS = {"region": "us-east-1", "account_id": "123456789012", "stack_name": "test-stack", "seed": 1}


class TestEvaluateTemplate:
    def test_evaluate_with_defaults(self):
        result = evaluate_template(TEMPLATE, **EVALUATION_OPTIONS)
        template = result.template

        assert template["Conditions"] == {"IsProd": False, "IsDev": True}
        bucket = template["Resources"]["Bucket"]["Properties"]
        assert bucket["BucketName"] == "dev-data"
        # AWS::NoValue is removed from lists and mappings
        assert bucket["Tags"] == [{"Key": "env", "Value": "dev"}]
        assert "RedrivePolicy" not in template["Resources"]["Queue"]["Properties"]

        function = template["Resources"]["Function"]["Properties"]
        assert function["MemorySize"] == "128"
        assert function["Environment"]["Variables"]["QUEUE_URL"] == (
            "https://sqs.us-east-1.amazonaws.com/123456789012/dev-jobs"
        )
        assert function["SubnetIds"] == ["subnet-1", "subnet-2"]

        assert template["Outputs"] == {
            "BucketName": {"Value": "dev-data"},
            "QueueArn": {"Value": "arn:aws:sqs:us-east-1:123456789012:dev-jobs"},
            "FirstSubnet": {"Value": "subnet-1"},
        }
        # the branch selected by Fn::If needs a second pass
        assert result.passes == 2
        assert PLACEHOLDER_AWS_NO_VALUE not in json.dumps(template)

    def test_evaluate_with_user_values(self):
        result = evaluate_template(TEMPLATE, {"Env": "prod"}, **EVALUATION_OPTIONS)
        template = result.template

        bucket = template["Resources"]["Bucket"]["Properties"]
        assert bucket["BucketName"] == "prod-data"
        assert bucket["Tags"][1] == {"Key": "critical", "Value": "yes"}
        assert template["Resources"]["Queue"]["Properties"]["RedrivePolicy"] == {"maxReceiveCount": 3}
        assert template["Resources"]["Function"]["Properties"]["MemorySize"] == "1024"
        assert result.statistics.overridden_params == ["Env"]
        assert result.parameters["Env"] == "prod"

    def test_template_is_not_modified(self):
        original = copy.deepcopy(TEMPLATE)
        evaluate_template(TEMPLATE, {"Env": "prod"}, **EVALUATION_OPTIONS)
        assert TEMPLATE == original

    def test_deterministic_with_seed(self):
        template = {"Resources": {"Bucket": {"Type": "AWS::S3::Bucket"}}, "Outputs": {"B": {"Value": {"Ref": "Bucket"}}}}
        first = evaluate_template(template, seed=3)
        second = evaluate_template(template, seed=3)
        assert first.template == second.template

    def test_pseudo_parameters_from_user_values(self):
        template = {"Resources": {}, "Outputs": {"Region": {"Value": {"Fn::Sub": "${AWS::Region}/${AWS::Partition}"}}}}
        result = evaluate_template(template, {"AWS::Region": "cn-north-1"}, seed=1)
        assert result.template["Outputs"]["Region"]["Value"] == "cn-north-1/aws-cn"

    def test_unresolved_reference(self):
        template = {"Resources": {"Bucket": {"Type": "AWS::S3::Bucket", "Properties": {"Tag": {"Ref": "Nope"}}}}}
        with pytest.raises(UnresolvedReferenceError) as e:
            evaluate_template(template, **EVALUATION_OPTIONS)
        assert e.value.path == "Resources.Bucket.Properties.Tag.Ref"

    def test_circular_reference(self):
        template = {
            "Resources": {
                "A": {"Type": "AWS::S3::Bucket", "Properties": {"BucketName": {"Fn::GetAtt": ["B", "QueueName"]}}},
                "B": {"Type": "AWS::SQS::Queue", "Properties": {"QueueName": {"Ref": "A"}}},
            }
        }
        with pytest.raises(CircularReferenceError) as e:
            evaluate_template(template, **EVALUATION_OPTIONS)
        # the properties of A are resolved in place, the chain starts at the first resolved reference
        assert e.value.chain == ["B", "A", "B"]


class TestResolveTemplate:
    def test_passes_exhausted(self, create_context):
        template = {
            "Resources": {},
            "Outputs": {"Out": {"Value": {"Fn::If": [True, {"Fn::If": [True, {"Fn::If": [True, "x", "y"]}, "y"]}, "y"]}}},
        }
        ctx = create_context(template)
        with pytest.raises(TemplateProcessingError):
            resolve_template(template, ctx, max_passes=2)

        resolved, passes = resolve_template(template, create_context(template), max_passes=3)
        assert resolved["Outputs"]["Out"]["Value"] == "x"
        assert passes == 3

    def test_sections_without_intrinsics(self, create_context):
        template = {"Description": {"Ref": "NotResolved"}, "Resources": {"A": {"Type": "AWS::SNS::Topic"}}}
        resolved, passes = resolve_template(template, create_context(template))
        assert resolved == template
        assert passes == 1


class TestParsingResult:
    def test_parse_template_body(self):
        result = parse_template_body('{"Parameters": {"Key": {"Type": "String"}}, "Resources": {}}', seed=1)
        (parameter,) = result.parameters_to_review
        assert parameter.key == "Key"
        assert parameter.is_required
        assert parameter.generated_stub

    def test_apply_user_parameters_without_template(self):
        with pytest.raises(TemplateProcessingError):
            apply_user_parameters(ParsingResult(None, []))

    def test_apply_user_parameters_missing_value(self):
        parsing_result = ParsingResult(
            {"Resources": {}}, [TemplateParameter("Secret", "String", None, True, None)]
        )
        with pytest.raises(MissingParametersError) as e:
            apply_user_parameters(parsing_result, seed=1)
        assert e.value.missing == ["Secret"]

    def test_evaluate_template_body(self):
        body = """
Parameters:
  Name:
    Type: String
Resources:
  Topic:
    Type: AWS::SNS::Topic
    Properties:
      TopicName: !Sub "${Name}-topic"
Outputs:
  TopicArn:
    Value: !Ref Topic
"""
        result = evaluate_template_body(body, {"Name": "alerts"}, **EVALUATION_OPTIONS)
        assert result.template["Outputs"]["TopicArn"]["Value"] == "arn:aws:sns:us-east-1:123456789012:alerts-topic"
