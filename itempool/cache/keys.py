"""
itempool - Key Validation
"""

import re
from collections.abc import Iterable
from typing import Any

from ..errors import ErrorCode, InvalidArgumentError

RESERVED_CHARACTERS = "{}()/\\@:"

_RESERVED_RE = re.compile(r"[{}()/\\@:]")


def validate_key(key: Any) -> str:
    """
    Check that ``key`` is a non-empty string without reserved characters.

    Returns:
        The key, unchanged

    Raises:
        InvalidArgumentError: If the key is malformed
    """
    if not isinstance(key, str) or not key or _RESERVED_RE.search(key):
        shown = key if isinstance(key, str) else type(key).__name__
        raise InvalidArgumentError(
            f"Key must be a string and not contain '{RESERVED_CHARACTERS}'; '{shown}' given",
            details={"key": shown},
            code=ErrorCode.INVALID_KEY,
        )
    return key


def validate_keys(keys: Iterable[Any]) -> list[str]:
    """
    Validate every key before returning any of them.

    Raises:
        InvalidArgumentError: On the first malformed key; nothing is returned
    """
    if isinstance(keys, str):
        raise InvalidArgumentError(
            "Keys must be given as a collection of strings, not a single string",
            details={"given": keys},
            code=ErrorCode.INVALID_KEY,
        )
    return [validate_key(key) for key in keys]
