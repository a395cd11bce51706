"""Configuration module for Confidential Aid.

Available Configurations:
- LifecycleConfig: Status visibility, confirmation timeout, id generation
- LedgerHttpConfig: HTTP ledger relay connection settings
"""

from confidential_aid.config.lifecycle_config import (
    DEFAULT_LEDGER_HTTP_CONFIG,
    DEFAULT_LIFECYCLE_CONFIG,
    TEST_LIFECYCLE_CONFIG,
    LedgerHttpConfig,
    LifecycleConfig,
)

__all__ = [
    "LifecycleConfig",
    "LedgerHttpConfig",
    "DEFAULT_LIFECYCLE_CONFIG",
    "DEFAULT_LEDGER_HTTP_CONFIG",
    "TEST_LIFECYCLE_CONFIG",
]
