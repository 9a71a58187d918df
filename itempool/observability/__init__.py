"""
itempool - Observability Module

Logging setup for the itempool runtime. Storage errors reach the logs through
the ExceptionLogger bridge in ``itempool.cache.exception_logger``.
"""

from .logs import JSONFormatter, configure_from_config, configure_logging

__all__ = [
    "JSONFormatter",
    "configure_logging",
    "configure_from_config",
]
