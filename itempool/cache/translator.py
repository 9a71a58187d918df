"""
itempool - Storage Error Translation

Maps errors raised by a storage backend onto the pool's error model:

- BackendValidationError  -> InvalidArgumentError, propagated to the caller
- BackendRuntimeError     -> soft failure, recorded on the outcome and absorbed

Usage:
    with backend_call("has_item", key=key) as outcome:
        found = await storage.has_item(key)
    if outcome.failed:
        found = False
"""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from ..errors import BackendError, InvalidArgumentError

logger = logging.getLogger(__name__)


@dataclass
class CallOutcome:
    """What happened inside a ``backend_call`` block."""

    operation: str
    error: BackendError | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


def translate(error: BackendError) -> InvalidArgumentError | None:
    """
    Return the InvalidArgumentError to raise for ``error``, or None if the
    error is a soft failure.
    """
    if error.kind == "validation":
        return InvalidArgumentError(error.message, details=dict(error.details))
    return None


@contextmanager
def backend_call(
    operation: str,
    absorb_validation: bool = False,
    **context: Any,
) -> Generator[CallOutcome, None, None]:
    """
    Run a block of storage calls under the pool's error policy.

    Args:
        operation: Pool operation name, for logging
        absorb_validation: Treat validation errors as soft failures too
        context: Extra fields for the log record

    Raises:
        InvalidArgumentError: If the storage rejected its input and
            ``absorb_validation`` is False
    """
    outcome = CallOutcome(operation=operation)
    try:
        yield outcome
    except BackendError as e:
        replacement = None if absorb_validation else translate(e)
        if replacement is not None:
            raise replacement from e

        outcome.error = e
        logger.debug(
            "Storage %s failed during %s, treating as soft failure: %s",
            e.kind,
            operation,
            e.message,
            extra={"operation": operation, "error_kind": e.kind, **context},
        )
