"""Root conftest — shared test configuration."""

import os
import tempfile

# Ensure tests never write into a real ./db directory
os.environ.setdefault(
    "STORE_PATH",
    os.path.join(tempfile.mkdtemp(prefix="phonebook-test-"), "records.sqlite3"),
)
os.environ.setdefault("LOG_FORMAT", "text")
