from cfneval.engine.resources.base import build_strategy, use_logical_id

STRATEGIES = {
    "AWS::CDK::Metadata": build_strategy(physical_id=use_logical_id),
}
