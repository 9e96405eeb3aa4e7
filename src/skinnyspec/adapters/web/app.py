"""Flask application factory for controller examples.

Controller examples never evaluate real views. :class:`StubTemplateLoader`
answers every template name with an empty template, so which template an
action rendered (and with what assigns) is still observable through Flask's
``template_rendered`` signal without the templates existing.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from flask import Flask
from jinja2 import BaseLoader, Environment

from skinnyspec.config import Settings

from .controller import Controller

logger = logging.getLogger(__name__)

TEST_SECRET_KEY = "skinnyspec-test-secret"  # pragma: no mutate


class StubTemplateLoader(BaseLoader):
    """Resolve every template name to an empty, never-stale template."""

    def get_source(self, environment: Environment, template: str) -> tuple[str, str | None, Callable[[], bool]]:
        return "", None, lambda: True


def create_app(
    settings: Settings | None = None,
    controllers: Iterable[type[Controller]] = (),
    *,
    template_loader: BaseLoader | None = None,
) -> Flask:
    """Build a testing app with one blueprint per controller.

    Args:
        settings: Host and login path; defaults to :class:`Settings`.
        controllers: Controller classes to route.
        template_loader: Jinja loader for real views; the stub loader by default.

    Returns:
        Flask: App with ``TESTING`` on, so errors raised by actions (failed
        expectations included) reach the caller.
    """
    settings = settings or Settings()
    app = Flask(__name__)
    app.config.update(
        TESTING=True,
        SECRET_KEY=TEST_SECRET_KEY,
        SERVER_NAME=settings.host,
        LOGIN_PATH=settings.login_path,
    )
    app.jinja_loader = template_loader or StubTemplateLoader()  # type: ignore[method-assign]
    for controller in controllers:
        app.register_blueprint(controller.blueprint())
        logger.debug("Routed %s under %s", controller.__name__, controller.url_prefix())
    return app
