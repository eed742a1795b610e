"""Root conftest: shared test configuration."""

import os

# Keep tests away from the real data directory and noisy JSON logs
os.environ.setdefault("DATA_DIR", "test-data")
os.environ.setdefault("LOG_FORMAT", "text")
