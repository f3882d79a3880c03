import json
import logging
import traceback
from typing import Dict, Tuple

import click
from rich.console import Console
from rich.table import Table

from cfneval import config
from cfneval.cli.exceptions import CLIError
from cfneval.constants import VERSION
from cfneval.engine.errors import TemplateInputError, TemplateProcessingError, TemplateResolutionError

console = Console()


class CfnEvalCliGroup(click.Group):
    """
    Top-level ``cfneval`` command group. Errors of template loading and resolution are reported with their
    template path as a ``CLIError``, unexpected errors are wrapped in a ``CLIError`` as well.
    """

    def invoke(self, ctx: click.Context):
        try:
            return super(CfnEvalCliGroup, self).invoke(ctx)
        except click.exceptions.Exit:
            raise
        except click.ClickException:
            if ctx and ctx.params.get("debug"):
                click.echo(traceback.format_exc())
            raise
        except TemplateResolutionError as e:
            if ctx and ctx.params.get("debug"):
                click.echo(traceback.format_exc())
            raise CLIError(f"{type(e).__name__}: {e}") from e
        except Exception as e:
            if ctx and ctx.params.get("debug"):
                click.echo(traceback.format_exc())
            raise CLIError(str(e)) from e


def _setup_cli_debug() -> None:
    from cfneval.logging.setup import setup_logging

    config.DEBUG = True
    setup_logging(logging.DEBUG)


def parse_parameter_options(parameters: Tuple[str, ...]) -> Dict[str, str]:
    """Parses ``KEY=VALUE`` pairs given with ``--parameter``."""
    result = {}
    for parameter in parameters:
        key, sep, value = parameter.partition("=")
        if not sep or not key.strip():
            raise CLIError(f"Invalid parameter '{parameter}', expected KEY=VALUE")
        result[key.strip()] = value
    return result


def _read_template(template_file) -> str:
    with open(template_file, "r") as f:
        return f.read()


@click.group(
    name="cfneval",
    help="Resolve the intrinsic functions of CloudFormation templates offline",
    cls=CfnEvalCliGroup,
    context_settings={
        "help_option_names": ["-h", "--help"],
        "show_default": True,
    },
)
@click.version_option(
    VERSION,
    "--version",
    "-v",
    message="cfneval %(version)s",
    help="Show the version of cfneval and exit",
)
@click.option("-d", "--debug", is_flag=True, help="Enable debug logging")
def cfneval(debug) -> None:
    if debug:
        _setup_cli_debug()
    else:
        from cfneval.logging.setup import setup_logging_from_config

        setup_logging_from_config()


@cfneval.command(name="resolve", short_help="Resolve a template")
@click.argument("template_file", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option(
    "-p",
    "--parameter",
    "parameters",
    multiple=True,
    help="Parameter value as KEY=VALUE, may be given multiple times",
)
@click.option("--region", help="Region used for AWS::Region", default=None)
@click.option("--account-id", help="Account id used for AWS::AccountId", default=None)
@click.option("--partition", help="Partition used for AWS::Partition (derived from the region if not set)")
@click.option("--stack-name", help="Stack name used for AWS::StackName", default=None)
@click.option("--seed", type=int, help="Seed for generated ids, for reproducible output", default=None)
@click.option("--indent", type=int, default=2, help="Indentation of the JSON output")
def cmd_resolve(
    template_file: str,
    parameters: Tuple[str, ...],
    region: str,
    account_id: str,
    partition: str,
    stack_name: str,
    seed: int,
    indent: int,
) -> None:
    """
    Resolve all intrinsic functions in TEMPLATE_FILE and print the resulting template as JSON.

    Parameters without default value get generated values unless they are given with --parameter.
    """
    from cfneval.engine.template_evaluator import evaluate_template
    from cfneval.engine.template_loader import load_template_file

    try:
        result = evaluate_template(
            load_template_file(template_file),
            parse_parameter_options(parameters),
            region=region,
            partition=partition,
            account_id=account_id,
            stack_name=stack_name,
            seed=seed,
        )
    except (TemplateInputError, TemplateProcessingError) as e:
        raise CLIError(str(e)) from e
    click.echo(json.dumps(result.template, indent=indent or None))


@cfneval.command(name="parameters", short_help="Show the parameters of a template")
@click.argument("template_file", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option(
    "-f",
    "--format",
    "format_",
    type=click.Choice(["table", "json"]),
    default="table",
    help="The formatting style for the command output.",
)
@click.option("--seed", type=int, help="Seed for generated values", default=None)
def cmd_parameters(template_file: str, format_: str, seed: int) -> None:
    """
    Show the parameters declared in TEMPLATE_FILE with the values they are resolved with by default.
    """
    from cfneval.engine.template_evaluator import parse_template_body

    try:
        parsing_result = parse_template_body(_read_template(template_file), seed=seed)
    except TemplateInputError as e:
        raise CLIError(str(e)) from e

    if format_ == "json":
        doc = {
            p.key: {
                "Type": p.type,
                "Value": p.value,
                "Required": p.is_required,
                "GeneratedStub": p.generated_stub,
            }
            for p in parsing_result.parameters_to_review
        }
        click.echo(json.dumps(doc, indent=2))
        return

    table = Table(title="Template parameters")
    table.add_column("Parameter")
    table.add_column("Type")
    table.add_column("Value")
    table.add_column("Required")
    for p in parsing_result.parameters_to_review:
        value = p.value if p.value is not None else f"{p.generated_stub} (generated)"
        table.add_row(p.key, p.type, str(value), "yes" if p.is_required else "no")
    console.print(table)


@cfneval.command(name="version", short_help="Show the version of cfneval")
def cmd_version() -> None:
    click.echo(VERSION)
