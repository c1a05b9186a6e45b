"""JSONPath-style template resolution for invocation parameters.

Parameter values may reference job data supplied by the host, e.g.
``"{$.user.email}"`` or ``"group-{$.groups[0].id}"``. A value that is a
single template keeps the type of the resolved value; templates embedded in
longer strings are stringified. Templates that cannot be resolved become an
empty string and are reported back to the caller.
"""

import re
from typing import Any, Dict, List, Mapping, Tuple

TEMPLATE_PATTERN = re.compile(r"\{(\$(?:\.[^{}]*|\[[^{}]*)?)\}")
_SEGMENT_PATTERN = re.compile(r"([^.\[\]]+)|\[(\d+)\]")

_MISSING = object()


def _lookup(path: str, data: Any) -> Any:
    """Walk a ``$.a.b[0]`` path through nested mappings and lists."""
    current = data
    for name, index in _SEGMENT_PATTERN.findall(path[1:]):
        if index:
            position = int(index)
            if not isinstance(current, list) or position >= len(current):
                return _MISSING
            current = current[position]
        else:
            if not isinstance(current, Mapping) or name not in current:
                return _MISSING
            current = current[name]
    return current


def _resolve_string(value: str, data: Mapping[str, Any], errors: List[str]) -> Any:
    whole = TEMPLATE_PATTERN.fullmatch(value)
    if whole:
        resolved = _lookup(whole.group(1), data)
        if resolved is _MISSING:
            errors.append(f"Failed to resolve template {value}: no value at path")
            return ""
        return resolved

    def replace(match: re.Match) -> str:
        resolved = _lookup(match.group(1), data)
        if resolved is _MISSING:
            errors.append(
                f"Failed to resolve template {match.group(0)}: no value at path"
            )
            return ""
        return "" if resolved is None else str(resolved)

    return TEMPLATE_PATTERN.sub(replace, value)


def _resolve(value: Any, data: Mapping[str, Any], errors: List[str]) -> Any:
    if isinstance(value, str):
        return _resolve_string(value, data, errors)
    if isinstance(value, Mapping):
        return {key: _resolve(item, data, errors) for key, item in value.items()}
    if isinstance(value, list):
        return [_resolve(item, data, errors) for item in value]
    return value


def resolve_templates(
    params: Mapping[str, Any], data: Mapping[str, Any]
) -> Tuple[Dict[str, Any], List[str]]:
    """Resolve templates in every parameter value.

    :param params: Raw invocation parameters
    :type params: Mapping[str, Any]
    :param data: Job data the templates are resolved against
    :type data: Mapping[str, Any]
    :return: Resolved parameters and a list of resolution errors
    :rtype: Tuple[Dict[str, Any], List[str]]
    """
    errors: List[str] = []
    resolved = {key: _resolve(value, data or {}, errors) for key, value in params.items()}
    return resolved, errors
