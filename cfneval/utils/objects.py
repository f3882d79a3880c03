from typing import Callable, Dict, List, Union

from cfneval.constants import PLACEHOLDER_AWS_NO_VALUE

ComplexType = Union[List, Dict, object]


def recurse_object(obj: ComplexType, func: Callable, path: str = "") -> ComplexType:
    """Recursively apply `func` to `obj` (might be a list, dict, or other object)."""
    obj = func(obj, path=path)
    if isinstance(obj, list):
        for i in range(len(obj)):
            tmp_path = f"{path or '.'}[{i}]"
            obj[i] = recurse_object(obj[i], func, tmp_path)
    elif isinstance(obj, dict):
        for k, v in obj.items():
            tmp_path = f"{f'{path}.' if path else ''}{k}"
            obj[k] = recurse_object(v, func, tmp_path)
    return obj


def remove_none_values(params):
    """Remove None values and AWS::NoValue placeholders (recursively) in the given object."""

    def remove_nones(o, **kwargs):
        if isinstance(o, dict):
            for k, v in dict(o).items():
                if v is None or v == PLACEHOLDER_AWS_NO_VALUE:
                    o.pop(k)
        if isinstance(o, list):
            o[:] = [e for e in o if e is not None and e != PLACEHOLDER_AWS_NO_VALUE]
        return o

    return recurse_object(params, remove_nones)
