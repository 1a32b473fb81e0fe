"""Observability for aasdb load runs.

Provides JSON and console log formatting plus load correlation context.
"""

from aasdb.observability.logging import (
    ConsoleFormatter,
    JsonFormatter,
    LogContext,
    configure_logging,
)

__all__ = [
    "ConsoleFormatter",
    "JsonFormatter",
    "LogContext",
    "configure_logging",
]
