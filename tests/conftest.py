"""Global pytest fixtures for SKINNYSPEC."""

from __future__ import annotations

pytest_plugins = [
    "tests.fixtures.sqlite",
]
