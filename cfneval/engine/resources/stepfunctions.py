from cfneval.engine.resources.base import (
    build_strategy,
    generate_alphanumeric,
    named_resource,
    runtime_value,
)
from cfneval.utils.aws.arns import stepfunctions_state_machine_arn

state_machine_name = named_resource("StateMachineName", lambda ctx: f"sf-{generate_alphanumeric(ctx, 6)}")


def state_machine_arn(logical_id, resource, ctx):
    name = state_machine_name(logical_id, resource, ctx)
    return stepfunctions_state_machine_arn(name, ctx.account_id, ctx.region, ctx.partition)


STRATEGIES = {
    # a state machine is referenced by its ARN
    "AWS::StepFunctions::StateMachine": build_strategy(
        physical_id=state_machine_arn,
        attributes={
            "Arn": state_machine_arn,
            "Name": state_machine_name,
            "StateMachineRevisionId": runtime_value("StateMachineRevisionId"),
        },
    ),
}
