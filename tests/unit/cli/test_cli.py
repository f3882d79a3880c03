import json

import click
import pytest
from click.testing import CliRunner

from cfneval.cli.cfneval import cfneval as cli
from cfneval.cli.cfneval import parse_parameter_options
from cfneval.cli.exceptions import CLIError
from cfneval.constants import VERSION

cli: click.Group

TEMPLATE = """
Parameters:
  Env:
    Type: String
    Default: dev
  Owner:
    Type: String
Resources:
  Queue:
    Type: AWS::SQS::Queue
    Properties:
      QueueName: !Sub "${Env}-jobs"
Outputs:
  QueueUrl:
    Value: !Ref Queue
  Owner:
    Value: !Ref Owner
  Region:
    Value: !Ref AWS::Region
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def template_file(tmp_path):
    path = tmp_path / "template.yml"
    path.write_text(TEMPLATE)
    return str(path)


def test_help(runner):
    result = runner.invoke(cli, ["-h"])
    assert result.exit_code == 0
    assert "Usage: cfneval" in result.output
    assert "resolve" in result.output


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert VERSION in result.output


def test_resolve(runner, template_file):
    result = runner.invoke(
        cli,
        [
            "resolve",
            template_file,
            "--parameter",
            "Env=prod",
            "-p",
            "Owner=team-a",
            "--region",
            "eu-west-1",
            "--account-id",
            "123456789012",
            "--seed",
            "1",
        ],
    )
    assert result.exit_code == 0, result.output

    template = json.loads(result.output)
    assert template["Outputs"] == {
        "QueueUrl": {"Value": "https://sqs.eu-west-1.amazonaws.com/123456789012/prod-jobs"},
        "Owner": {"Value": "team-a"},
        "Region": {"Value": "eu-west-1"},
    }


def test_resolve_generates_missing_parameters(runner, template_file):
    result = runner.invoke(cli, ["resolve", template_file, "--seed", "1"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["Outputs"]["Owner"]["Value"]


def test_resolve_error_shows_path(runner, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text(json.dumps({"Resources": {}, "Outputs": {"Out": {"Value": {"Ref": "Missing"}}}}))

    result = runner.invoke(cli, ["resolve", str(path)])

    assert result.exit_code == 1
    assert "UnresolvedReferenceError" in result.output
    assert "Outputs.Out.Value.Ref" in result.output


def test_resolve_invalid_template(runner, tmp_path):
    path = tmp_path / "invalid.json"
    path.write_text('{"Description": "no resources"}')

    result = runner.invoke(cli, ["resolve", str(path)])

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_resolve_invalid_parameter_option(runner, template_file):
    result = runner.invoke(cli, ["resolve", template_file, "-p", "no-separator"])
    assert result.exit_code == 1
    assert "expected KEY=VALUE" in result.output


def test_parameters_json(runner, template_file):
    result = runner.invoke(cli, ["parameters", template_file, "--format", "json", "--seed", "1"])
    assert result.exit_code == 0, result.output

    parameters = json.loads(result.output)
    assert parameters["Env"]["Value"] == "dev"
    assert not parameters["Env"]["Required"]
    assert parameters["Owner"]["Required"]
    assert parameters["Owner"]["GeneratedStub"]


def test_parse_parameter_options():
    assert parse_parameter_options(("A=1", " B =x=y", "C=")) == {"A": "1", "B": "x=y", "C": ""}
    with pytest.raises(CLIError):
        parse_parameter_options(("=value",))


def test_version_command(runner):
    result = runner.invoke(cli, ["version"])
    assert result.exit_code == 0
    assert result.output.strip() == VERSION
