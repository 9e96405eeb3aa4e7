"""Flask host: resource controllers, a testing app factory and a test-client harness."""

from .app import StubTemplateLoader, create_app
from .controller import MIMETYPES, Controller, serialize
from .harness import ControllerHarness, NoRequestProcessedError, UnknownActionError

__all__ = [
    "MIMETYPES",
    "Controller",
    "ControllerHarness",
    "NoRequestProcessedError",
    "StubTemplateLoader",
    "UnknownActionError",
    "create_app",
    "serialize",
]
