"""Correlation-aware logging helpers for xmlite.

Wraps the standard library logger so every record emitted by the tokenizer,
tree builder and API layer carries the component name and the optional
correlation ID of the parse that produced it. Parse failures are expected
outcomes, so the wrapper stops at WARNING and never attaches tracebacks.
"""

import logging
from typing import Any, Dict, Optional


class CorrelationLogger:
    """Logger that stamps records with a parse's component and correlation ID."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID for request tracking
            component: Component name for structured logging
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.split(".")[-1]

    def _get_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        combined_extra = {
            "component": self.component,
            "correlation_id": self.correlation_id,
        }

        if extra:
            combined_extra.update(extra)

        return combined_extra

    def _log(self, level: int, message: str, extra: Optional[Dict[str, Any]]) -> None:
        # Building the extra mapping is skipped for disabled levels
        if self.logger.isEnabledFor(level):
            self.logger.log(level, message, extra=self._get_extra(extra))

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log a tokenizer or builder progress message."""
        self._log(logging.DEBUG, message, extra)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log a completed parse or a parser lifecycle event."""
        self._log(logging.INFO, message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log a rejected input."""
        self._log(logging.WARNING, message, extra)


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a correlation-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for request tracking
        component: Component name for structured logging

    Returns:
        CorrelationLogger instance
    """
    return CorrelationLogger(name, correlation_id, component)
