from cfneval.version import __version__

VERSION = __version__

# truthy/falsy values accepted for boolean environment variables
TRUE_STRINGS = ("1", "true", "True")
FALSE_STRINGS = ("0", "false", "False")

# log levels accepted by CFN_LOG
LOG_LEVELS = ("trace", "debug", "info", "warn", "error", "warning")
CFN_LOG_TRACE = "trace"
TRACE_LOG_LEVELS = [CFN_LOG_TRACE]

# default values for the pseudo parameters
AWS_REGION_US_EAST_1 = "us-east-1"
DEFAULT_AWS_ACCOUNT_ID = "000000000000"
DEFAULT_STACK_NAME = "teststack"
DEFAULT_URL_SUFFIX = "amazonaws.com"

# upper bound of resolution passes over a template (Fn::If branches may yield new expressions)
DEFAULT_MAX_RESOLVE_PASSES = 10

# placeholder used to mark AWS::NoValue until the final cleanup of the resolved template
PLACEHOLDER_AWS_NO_VALUE = "__aws_no_value__"

# value returned for attributes that only exist once a resource has actually been deployed
RUNTIME_VALUE_PREFIX = "RUNTIME_"

# plux namespace for resource resolver plugins
RESOURCE_RESOLVER_NAMESPACE = "cfneval.resource_resolvers"
