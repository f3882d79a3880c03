"""Tools for formatting cfneval logs."""
import logging
from functools import lru_cache

MAX_NAME_LEN = 26

LOG_FORMAT = f"%(asctime)s.%(msecs)03d %(cfn_level)5s --- %(cfn_name)-{MAX_NAME_LEN}s : %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

CUSTOM_LEVEL_NAMES = {
    50: "FATAL",
    40: "ERROR",
    30: "WARN",
    20: "INFO",
    10: "DEBUG",
}


class DefaultFormatter(logging.Formatter):
    """
    A formatter that uses ``LOG_FORMAT`` and ``LOG_DATE_FORMAT``.
    """

    def __init__(self):
        super(DefaultFormatter, self).__init__(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


class AddFormattedAttributes(logging.Filter):
    """
    Filter that adds two attributes to a log record:

    - cfn_level: the abbreviated loglevel that's max 5 characters long
    - cfn_name: the abbreviated name of the logger (e.g., `c.engine.value_resolver`), trimmed to ``MAX_NAME_LEN``
    """

    def filter(self, record):
        record.cfn_level = CUSTOM_LEVEL_NAMES.get(record.levelno, record.levelname)
        record.cfn_name = _compressed_logger_name(record.name)
        return True


@lru_cache(maxsize=256)
def _compressed_logger_name(name: str) -> str:
    return compress_logger_name(name, MAX_NAME_LEN)


def compress_logger_name(name: str, length: int) -> str:
    """
    Creates a short version of a logger name. For example ``cfneval.engine.resources.awslambda`` with length=24
    turns into ``c.e.resources.awslambda``.

    :param name: the logger name
    :param length: the max length of the logger name
    :return: the compressed name
    """
    if len(name) <= length:
        return name

    parts = name.split(".")
    parts.reverse()

    new_parts = []

    # all parts collapsed to a single character, x.x.x needs 2n - 1 characters
    cur_length = (len(parts) * 2) - 1

    for i in range(len(parts)):
        part = parts[i]
        next_len = cur_length + (len(part) - 1)

        if next_len > length:
            # the remaining parts only keep their first letter
            new_parts += [p[0] for p in parts[i:]]

            # the last part is always shown with as many characters as fit
            if i == 0:
                remaining = length - cur_length
                if remaining > 0:
                    new_parts[0] = part[: (remaining + 1)]

            break

        new_parts.append(part)
        cur_length = next_len

    new_parts.reverse()
    return ".".join(new_parts)
