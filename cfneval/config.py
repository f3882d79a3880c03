import logging
import os
from typing import Optional, Union

from cfneval.constants import (
    AWS_REGION_US_EAST_1,
    DEFAULT_AWS_ACCOUNT_ID,
    DEFAULT_MAX_RESOLVE_PASSES,
    DEFAULT_STACK_NAME,
    DEFAULT_URL_SUFFIX,
    FALSE_STRINGS,
    LOG_LEVELS,
    TRACE_LOG_LEVELS,
    TRUE_STRINGS,
)

LOG = logging.getLogger(__name__)


def eval_log_type(env_var_name: str) -> Union[str, bool]:
    """Get the log type from environment variable"""
    cfn_log = os.environ.get(env_var_name, "").lower().strip()
    return cfn_log if cfn_log in LOG_LEVELS else False


def parse_boolean_env(env_var_name: str) -> Optional[bool]:
    """Parse the value of the given env variable and return True/False, or None if it is not a boolean value."""
    value = os.environ.get(env_var_name, "").lower().strip()
    if value in TRUE_STRINGS:
        return True
    if value in FALSE_STRINGS:
        return False
    return None


def is_env_true(env_var_name: str) -> bool:
    """Whether the given environment variable has a truthy value."""
    return os.environ.get(env_var_name, "").lower().strip() in TRUE_STRINGS


def is_env_not_false(env_var_name: str) -> bool:
    """Whether the given environment variable is empty or has a truthy value."""
    return os.environ.get(env_var_name, "").lower().strip() not in FALSE_STRINGS


def parse_int_env(env_var_name: str, default: Optional[int] = None) -> Optional[int]:
    """Parse the given env variable as an integer, falling back to ``default`` if it is unset or malformed."""
    value = os.environ.get(env_var_name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        LOG.warning("Ignoring non-integer value %r of environment variable %s", value, env_var_name)
        return default


def is_trace_logging_enabled():
    if CFN_LOG:
        return CFN_LOG.lower() in TRACE_LOG_LEVELS
    return False


# log level, one of LOG_LEVELS
CFN_LOG = eval_log_type("CFN_LOG")
DEBUG = is_env_true("DEBUG") or CFN_LOG in TRACE_LOG_LEVELS

# region used for AWS::Region when the caller does not pass one
DEFAULT_REGION = (
    os.environ.get("CFN_DEFAULT_REGION", "").strip()
    or os.environ.get("AWS_DEFAULT_REGION", "").strip()
    or AWS_REGION_US_EAST_1
)

# account id used for AWS::AccountId and all generated ARNs
ACCOUNT_ID = os.environ.get("CFN_ACCOUNT_ID", "").strip() or DEFAULT_AWS_ACCOUNT_ID

# name of the stack used for AWS::StackName / AWS::StackId
STACK_NAME = os.environ.get("CFN_STACK_NAME", "").strip() or DEFAULT_STACK_NAME

# domain suffix used for AWS::URLSuffix and generated service URLs
URL_SUFFIX = os.environ.get("CFN_URL_SUFFIX", "").strip() or DEFAULT_URL_SUFFIX

# seed for generated physical ids, makes output reproducible if set
RANDOM_SEED = parse_int_env("CFN_RANDOM_SEED")

# maximum number of passes over a template until no more intrinsic functions are left
MAX_RESOLVE_PASSES = parse_int_env("CFN_MAX_RESOLVE_PASSES", DEFAULT_MAX_RESOLVE_PASSES)

# whether circular Ref/Fn::GetAtt chains between resources raise an error instead of exhausting the stack
DETECT_CYCLES = is_env_not_false("CFN_DETECT_CYCLES")

# whether resource resolvers contributed by plugins are loaded into the registry
LOAD_PLUGINS = is_env_not_false("CFN_LOAD_PLUGINS")
