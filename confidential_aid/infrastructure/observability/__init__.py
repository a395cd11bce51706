"""Observability: structured logging and correlation IDs.

Usage:
    from confidential_aid.infrastructure.observability import (
        configure_structlog,
        correlation_scope,
    )

    configure_structlog(environment="production")
"""

from confidential_aid.infrastructure.observability.correlation import (
    correlation_id_processor,
    correlation_scope,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from confidential_aid.infrastructure.observability.logging import (
    configure_structlog,
    get_logger_for_service,
)

__all__: list[str] = [
    "configure_structlog",
    "correlation_id_processor",
    "correlation_scope",
    "generate_correlation_id",
    "get_correlation_id",
    "get_logger_for_service",
    "set_correlation_id",
]
