"""``${ENV_VAR}`` and ``${ENV_VAR:-default}`` substitution over parsed YAML data."""

import os
import re
from collections.abc import Mapping

_REFERENCE = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<default>[^}]*))?\}")

type RawValue = (
    str | int | float | bool | None | list["RawValue"] | dict[str, "RawValue"]
)


def find_missing_vars(data: RawValue, environ: Mapping[str, str] | None = None) -> list[str]:
    """Return every referenced variable that is unset and has no default, in first-seen order."""
    env = os.environ if environ is None else environ
    missing: list[str] = []
    for text in _strings(data):
        for match in _REFERENCE.finditer(text):
            name = match.group("name")
            if match.group("default") is None and name not in env and name not in missing:
                missing.append(name)
    return missing


def interpolate(data: RawValue, environ: Mapping[str, str] | None = None) -> RawValue:
    """Return a copy of ``data`` with references replaced in every string value.

    Unset variables without a default raise KeyError; check ``find_missing_vars`` first.
    """
    env = os.environ if environ is None else environ

    def substitute(match: re.Match[str]) -> str:
        name = match.group("name")
        default = match.group("default")
        if default is not None:
            return env.get(name, default)
        return env[name]

    match data:
        case str():
            return _REFERENCE.sub(substitute, data)
        case list():
            return [interpolate(item, env) for item in data]
        case dict():
            return {key: interpolate(value, env) for key, value in data.items()}
        case _:
            return data


def _strings(data: RawValue) -> list[str]:
    match data:
        case str():
            return [data]
        case list():
            return [text for item in data for text in _strings(item)]
        case dict():
            return [text for value in data.values() for text in _strings(value)]
        case _:
            return []
