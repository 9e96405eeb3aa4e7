"""pytest plugin registered through the ``pytest11`` entry point.

Registers the ``controller`` marker and adds it to every test generated by a
:class:`~skinnyspec.helpers.group.ControllerSpec` subclass, so a suite can
run ``pytest -m controller``.
"""

from __future__ import annotations

import logging

import pytest

from skinnyspec.config import Settings, load_settings
from skinnyspec.helpers.group import ControllerSpec

# pylint: disable=unused-argument

logger = logging.getLogger(__name__)

MARKER_NAME = "controller"


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers", f"{MARKER_NAME}: example generated by a skinnyspec ControllerSpec group"
    )


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Add the `controller` mark to examples of ControllerSpec groups."""
    tagged = 0
    for item in items:
        cls = getattr(item, "cls", None)
        if cls is None or not issubclass(cls, ControllerSpec):
            continue
        if not any(marker.name == MARKER_NAME for marker in item.iter_markers()):
            item.add_marker(pytest.mark.controller)
            tagged += 1
    logger.debug("Marked %d controller examples", tagged)


@pytest.fixture
def skinnyspec_settings() -> Settings:
    """Settings loaded from ``SKINNYSPEC_*`` environment variables."""
    return load_settings()
