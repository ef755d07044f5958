"""Resolution of names and universes from positional arguments and flags."""

from __future__ import annotations

import re
from typing import Sequence

from dreamland.config import DEFAULT_UNIVERSE_NAME

_FLAG_ORDER_MESSAGE = "Parse arguments failed: write [arguments] after -flags"
_NO_CAMEL_RE = re.compile(r"(^|[a-z])([A-Z])")


class ArgumentError(ValueError):
    """Raised when command arguments cannot be resolved."""


def _arg(positional: Sequence[str], index: int) -> str:
    return positional[index] if len(positional) > index else ""


def get_name(positional: Sequence[str], flag_value: str) -> str:
    """Name from the first argument, falling back to the ``--name`` flag."""
    name = _arg(positional, 0)
    if not name:
        if not flag_value:
            raise ArgumentError("Please provide a name")
        return flag_value
    if _arg(positional, 1).startswith("-"):
        raise ArgumentError(_FLAG_ORDER_MESSAGE)
    return name


def _universe_from(positional: Sequence[str], flag_value: str, index: int) -> str:
    universe = flag_value
    if universe == DEFAULT_UNIVERSE_NAME:
        candidate = _arg(positional, index)
        if candidate:
            if candidate.startswith("-"):
                raise ArgumentError(_FLAG_ORDER_MESSAGE)
            universe = candidate
    return universe


def get_universe(positional: Sequence[str], flag_value: str) -> str:
    """Universe from the flag, or from the second argument when the flag is default."""
    return _universe_from(positional, flag_value, 1)


def get_universe0(positional: Sequence[str], flag_value: str) -> str:
    """Universe from the flag, or from the first argument when the flag is default."""
    return _universe_from(positional, flag_value, 0)


def no_camel(name: str) -> str:
    """Turn a camel-cased name into a lower-case, dash-separated one."""
    result = _NO_CAMEL_RE.sub(r"\1-\2", name).lower()
    return result[1:] if result.startswith("-") else result