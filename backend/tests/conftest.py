"""Root conftest: shared test configuration."""

import os

# Keep developer .env overrides and JSON logs out of test runs
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("API_KEY_PREFIX", "rfl_")
