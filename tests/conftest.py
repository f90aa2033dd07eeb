"""Root conftest — shared test configuration."""

import os

# Ensure tests never pick up a host's global disable switch
os.environ.setdefault("RETENTION_DISABLED", "false")
os.environ.setdefault("LOG_FORMAT", "text")
