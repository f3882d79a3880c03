import random
import re
import string
from typing import Dict, List, Optional, Union

DEFAULT_ENCODING = "utf-8"

# `${name}` placeholders used by Fn::Sub, names may contain spaces but not a closing brace
PLACEHOLDER_REGEX = re.compile(r"\$\{([^}]+)\}")

ALPHANUMERIC_CHARS = string.ascii_letters + string.digits


def to_str(obj: Union[str, bytes], encoding: str = DEFAULT_ENCODING, errors="strict") -> str:
    """If ``obj`` is an instance of ``binary_type``, return
    ``obj.decode(encoding, errors)``, otherwise return ``obj``"""
    return obj.decode(encoding, errors) if isinstance(obj, bytes) else obj


def to_bytes(obj: Union[str, bytes], encoding: str = DEFAULT_ENCODING, errors="strict") -> bytes:
    """If ``obj`` is an instance of ``text_type``, return
    ``obj.encode(encoding, errors)``, otherwise return ``obj``"""
    return obj.encode(encoding, errors) if isinstance(obj, str) else obj


def is_blank(value) -> bool:
    """Whether the given value is None, or a string that is empty or only contains whitespace."""
    return value is None or (isinstance(value, str) and not value.strip())


def random_alphanumeric(length: int, rnd: Optional[random.Random] = None, lowercase: bool = False) -> str:
    rnd = rnd or random
    chars = string.ascii_lowercase + string.digits if lowercase else ALPHANUMERIC_CHARS
    return "".join(rnd.choice(chars) for _ in range(length))


def random_hex(length: int, rnd: Optional[random.Random] = None) -> str:
    rnd = rnd or random
    return "".join(rnd.choice("0123456789abcdef") for _ in range(length))


def extract_placeholders(template: str) -> List[str]:
    """
    Returns the names of all ``${name}`` placeholders in the given string, in order of appearance.
    Unterminated placeholders (``${name`` without closing brace) are ignored.

    :param template: the string to scan
    :return: list of placeholder names, duplicates included
    """
    return PLACEHOLDER_REGEX.findall(template)


def substitute_placeholders(template: str, values: Dict[str, object]) -> str:
    """
    Replaces every ``${key}`` occurrence for each key in ``values`` with the textual form of its value.
    Placeholders without a matching key are left untouched.
    """
    result = template
    for key, value in values.items():
        result = result.replace("${%s}" % key, value if isinstance(value, str) else str(value))
    return result
