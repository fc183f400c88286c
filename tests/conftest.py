# tests/conftest.py
"""Test environment: in-memory SQLite, local KV sync, known admin password."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_PASSWORD"] = "test-pass"
os.environ.pop("SYNC_BASE_URL", None)
os.environ.pop("STORE_API_KEY", None)
