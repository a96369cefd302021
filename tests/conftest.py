"""Root test fixtures shared across all test types.

Database-specific fixtures are in tests/integration/conftest.py.
"""

import os
import tempfile

# Settings are read at import time, so the environment comes first.
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{tempfile.gettempdir()}/boardsync-test-{os.getpid()}.db",
)
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")

# ruff: noqa: E402 - Imports must be after env var setup
import pytest
import structlog
from structlog.testing import CapturingLogger

from src.boardsync.core.config import get_settings
from src.boardsync.core.logging import clear_request_context

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()


@pytest.fixture
def capturing_logger():
    """Route structlog output to a CapturingLogger for the duration of a test."""
    cap_logger = CapturingLogger()
    old_config = structlog.get_config()

    structlog.configure(
        processors=[structlog.contextvars.merge_contextvars],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=lambda *args, **kwargs: cap_logger,
        cache_logger_on_first_use=False,
    )

    clear_request_context()
    yield cap_logger
    clear_request_context()
    structlog.configure(**old_config)
