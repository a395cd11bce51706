"""Base service logging mixin.

Gives application services one structured logging convention: a logger bound
to the service class name and component, plus _log_operation() for
operation-scoped loggers carrying the active correlation ID.

Usage:
    class MyService(LoggingMixin):
        def __init__(self, gateway: LedgerGatewayProtocol) -> None:
            self._gateway = gateway
            self._init_logger(component="ledger")

        async def refresh(self) -> None:
            log = self._log_operation("refresh")
            log.info("refresh_started")
"""

import structlog

from confidential_aid.infrastructure.observability.correlation import (
    get_correlation_id,
)


class LoggingMixin:
    """Mixin providing structured logging for services.

    Attributes:
        _log: The structlog BoundLogger for this service instance.
    """

    _log: structlog.BoundLogger

    def _init_logger(self, component: str = "lifecycle") -> None:
        """Bind the service logger. Call from __init__ after dependencies."""
        self._log = structlog.get_logger().bind(
            service=self.__class__.__name__,
            component=component,
        )

    def _log_operation(
        self,
        operation: str,
        **context: object,
    ) -> structlog.BoundLogger:
        """Create an operation-scoped logger with correlation ID.

        Args:
            operation: Name of the operation being performed.
            **context: Additional context to bind to the logger.

        Returns:
            BoundLogger with operation and correlation context.
        """
        return self._log.bind(
            operation=operation,
            correlation_id=get_correlation_id(),
            **context,
        )
