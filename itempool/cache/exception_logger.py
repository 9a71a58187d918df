"""
itempool - Storage Exception Logger

Logs errors raised by a storage backend. The pool absorbs storage failures
into False results and misses, so this is where they become visible.

Errors are logged at ERROR with a one-line summary and at DEBUG with the
full traceback. Logging does not stop the error: the storage still raises it
and the pool still translates it.
"""

import logging
import traceback

from ..errors import BackendError, ConfigurationError, extract_error_code
from ..storage.interface import StorageInterface

# Helpers between the failing storage call and the logger
_REPORTING_FRAMES = frozenset({"_fail", "_runtime_error", "_notify_exception", "log_exception", "_origin_frames"})


class ExceptionLogger:
    """Register with a storage on construction and log every error it raises."""

    def __init__(self, storage: StorageInterface, logger: logging.Logger | None = None):
        """
        Args:
            storage: Storage whose errors are logged
            logger: Target logger (default: ``itempool.storage.errors``)

        Raises:
            ConfigurationError: If the storage already has an ExceptionLogger
        """
        if has_exception_logger(storage):
            raise ConfigurationError(
                f"Storage {type(storage).__name__} already has an exception logger",
                details={"storage": type(storage).__name__},
            )

        self._storage = storage
        self._logger = logger or logging.getLogger("itempool.storage.errors")
        storage.add_exception_callback(self.log_exception)

    def detach(self) -> None:
        """Stop logging errors from the storage."""
        self._storage.remove_exception_callback(self.log_exception)

    def log_exception(self, exception: BackendError) -> None:
        """Log an exception raised by the storage."""
        frames = _origin_frames(exception)
        location = f"{frames[-1].filename}:{frames[-1].lineno}" if frames else "<unknown>:0"

        self._logger.error(
            '[CACHE] %s %s "%s"',
            location,
            extract_error_code(exception).value,
            exception.message,
            extra={"error_kind": exception.kind, "backend": exception.backend},
        )
        self._logger.debug("".join(traceback.format_list(frames)))


def _origin_frames(exception: BaseException) -> list[traceback.FrameSummary]:
    """Frames leading to ``exception``, without the error-reporting helpers."""
    if exception.__traceback__ is not None:
        return list(traceback.extract_tb(exception.__traceback__))

    # Reported before being raised: use the current stack
    return [frame for frame in traceback.extract_stack() if frame.name not in _REPORTING_FRAMES]


def has_exception_logger(storage: StorageInterface) -> bool:
    """Whether an ExceptionLogger is registered on ``storage``."""
    return any(isinstance(getattr(cb, "__self__", None), ExceptionLogger) for cb in storage.exception_callbacks)
