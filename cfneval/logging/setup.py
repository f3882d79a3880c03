import logging
import sys
import warnings

from cfneval import config, constants

from .format import AddFormattedAttributes, DefaultFormatter

default_log_levels = {
    "botocore": logging.ERROR,
    "moto": logging.WARNING,
    "plux": logging.WARNING,
    "cfneval.engine.value_resolver": logging.INFO,
    "cfneval.engine.intrinsic_functions": logging.INFO,
    "cfneval.engine.conditions": logging.INFO,
}

# per-intrinsic tracing is only enabled with CFN_LOG=trace
trace_log_levels = {
    "cfneval.engine.value_resolver": logging.DEBUG,
    "cfneval.engine.intrinsic_functions": logging.DEBUG,
    "cfneval.engine.conditions": logging.DEBUG,
}


def get_log_level_from_config():
    # overriding the log level if CFN_LOG has been set
    if config.CFN_LOG:
        log_level = str(config.CFN_LOG).upper()
        if log_level.lower() in constants.TRACE_LOG_LEVELS:
            log_level = "DEBUG"
        log_level = logging._nameToLevel[log_level]
        return log_level

    return logging.DEBUG if config.DEBUG else logging.WARNING


def setup_logging_from_config():
    log_level = get_log_level_from_config()
    setup_logging(log_level)

    if config.is_trace_logging_enabled():
        for name, level in trace_log_levels.items():
            logging.getLogger(name).setLevel(level)


def create_default_handler(log_level: int):
    log_handler = logging.StreamHandler(stream=sys.stderr)
    log_handler.setLevel(log_level)
    log_handler.setFormatter(DefaultFormatter())
    log_handler.addFilter(AddFormattedAttributes())
    return log_handler


def setup_logging(log_level=logging.INFO) -> None:
    """
    Configures the python logging environment for cfneval.

    :param log_level: the optional log level.
    """
    log_handler = create_default_handler(log_level)

    # replace any existing handlers
    logging.basicConfig(level=log_level, handlers=[log_handler], force=True)

    warnings.filterwarnings("ignore")
    logging.captureWarnings(True)

    logging.root.setLevel(log_level)
    logging.getLogger("cfneval").setLevel(log_level)
    for logger, level in default_log_levels.items():
        logging.getLogger(logger).setLevel(max(level, log_level))
