"""Root conftest — shared test configuration."""

import os

# Ensure tests never sign with a real secret
os.environ.setdefault(
    "SESSION_SECRET",
    "test-secret-test-secret-test-secret-test-secret-test-secret-test-secret",
)
os.environ.setdefault("HTTPS_ONLY_COOKIES", "false")
os.environ.setdefault("LOG_FORMAT", "text")
