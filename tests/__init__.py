#!/usr/bin/env python3
"""
Test suite configuration and utilities.

All tests can be run with standard Python tools:

    # Run all tests
    python -m pytest tests/ -v

    # Run only tests that do not touch a database
    python -m pytest tests/ -v -m "not db"

Database tests use a throwaway SQLite file per test, so no external
database is required.
"""

import os
from datetime import datetime, timezone

# Fixed "now" for recency-sensitive tests
FIXED_NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_NOW


def sqlite_url(directory: str, name: str = "ranking_test.db") -> str:
    """SQLAlchemy URL for a SQLite file inside ``directory``."""
    return f"sqlite:///{os.path.join(directory, name)}"
