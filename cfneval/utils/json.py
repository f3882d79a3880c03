import json
from typing import Any


def compact_json(obj: Any) -> str:
    """Serializes the given object without insignificant whitespace (the format of Fn::ToJsonString)."""
    return json.dumps(obj, separators=(",", ":"))
