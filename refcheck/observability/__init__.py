"""
Observability Module.

Structured logging for refcheck runs.
"""

from refcheck.observability.logging import (
    LogContext,
    configure_logging,
)

__all__ = [
    # Logging
    "configure_logging",
    "LogContext",
]
