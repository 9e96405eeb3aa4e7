"""Functional-test harness over Flask's test client.

One harness lives for the duration of one example. ``params``, ``session``,
``cookies`` and ``environ`` are plain dicts the example edits between
requests; the harness pushes them into the client before each request and
pulls the controller's changes back afterwards. Flask's signals report the
templates rendered and the messages flashed while the request ran.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import ExitStack, contextmanager
from typing import Any

from flask import Flask, g, message_flashed, request, request_finished, session, template_rendered, url_for
from werkzeug.http import parse_cookie
from werkzeug.test import TestResponse
from werkzeug.wrappers import Request

from skinnyspec.config import Settings
from skinnyspec.domain.routes import HTTP_VERBS
from skinnyspec.interfaces.harness import AbstractControllerHarness

from .app import create_app
from .controller import Controller

logger = logging.getLogger(__name__)

#: Parameters the controller adds itself; never sent with a request.
ROUTING_PARAMS = frozenset({"controller", "action"})


class UnknownActionError(LookupError):
    """Raised when a request names an action the controller does not route."""

    def __init__(self, controller: type, action: str) -> None:
        super().__init__(f"{controller.__name__} has no action {action!r}")
        self.controller = controller
        self.action = action


class NoRequestProcessedError(RuntimeError):
    """Raised when response data is read before any request was processed."""

    def __init__(self) -> None:
        super().__init__("No request has been processed yet")


class ControllerHarness(AbstractControllerHarness):
    """Process requests against one controller class.

    Args:
        controller_class: Controller the requests address.
        app: App routing the controller; built with :func:`create_app` when
            omitted. It needs a ``SECRET_KEY`` for the session.
        settings: Runtime settings (host, login path, ...).
    """

    def __init__(
        self,
        controller_class: type[Controller],
        *,
        app: Flask | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.controller_class = controller_class
        self.settings = settings or Settings()
        self.app = app or create_app(self.settings, [controller_class])
        self.client = self.app.test_client()
        self.params: dict[str, Any] = {}
        self.session: dict[str, Any] = {}
        self.cookies: dict[str, Any] = {}
        self.environ: dict[str, Any] = {}
        self._response: TestResponse | None = None
        self._request: Request | None = None
        self._controller: Controller | None = None
        self._flash: dict[str, Any] = {}
        self._templates: list[str] = []

    # ------------------------------------------------------------------
    # Request processing
    # ------------------------------------------------------------------

    def process(self, verb: str, action: str, params: dict[str, Any] | None = None) -> TestResponse:
        """Run one request through the test client and return its response.

        GET parameters travel in the query string, the others as a JSON
        body; parameters named by the URL rule (``id``, ``post_id``) fill
        the path.

        Args:
            verb: HTTP verb (``get``, ``post``, ``put``, ``patch``, ``delete``).
            action: Controller action name.
            params: Request parameters. The dict is updated in place with the
                parameters the controller saw.

        Raises:
            UnknownActionError: If the controller does not route the action.
            ValueError: If ``verb`` is not an HTTP verb.
        """
        verb = verb.lower()
        if verb not in HTTP_VERBS:
            raise ValueError(f"Unsupported HTTP verb {verb!r}")
        if action not in self.controller_class.action_names():
            raise UnknownActionError(self.controller_class, action)
        if params is not None:
            self.params = params

        path, values = self._split_params(action)
        self._push_session()
        self._push_cookies()
        label = {"request": f"{verb.upper()} {self.controller_class.controller_name()}.{action}"}
        logger.debug("Processing %s params=%s", path, values, extra=label)
        with self._recording():
            response = self.client.open(
                path,
                method=verb.upper(),
                query_string=values if verb == "get" else None,
                json=None if verb == "get" else values,
                environ_overrides=self.environ,
            )
        self._response = response
        self._pull_cookies(response)
        logger.debug("Completed %s %s", response.status_code, response.location or "", extra=label)
        return response

    def _split_params(self, action: str) -> tuple[str, dict[str, Any]]:
        endpoint = f"{self.controller_class.controller_name()}.{action}"
        arguments: set[str] = set()
        for rule in self.app.url_map.iter_rules(endpoint):
            arguments |= rule.arguments
        values = {key: value for key, value in self.params.items() if key not in ROUTING_PARAMS}
        path_values = {key: values.pop(key) for key in arguments if key in values}
        return self.url_for(endpoint, **path_values), values

    def _push_session(self) -> None:
        with self.client.session_transaction() as stored:
            # underscored keys (``_flashes``) belong to Flask
            for key in [key for key in stored if not key.startswith("_") and key not in self.session]:
                del stored[key]
            stored.update(self.session)

    def _push_cookies(self) -> None:
        for key, value in self.cookies.items():
            self.client.set_cookie(key, str(value), domain=self.settings.host)

    def _pull_cookies(self, response: TestResponse) -> None:
        session_cookie = self.app.config["SESSION_COOKIE_NAME"]
        for header in response.headers.getlist("Set-Cookie"):
            pair, _, attributes = header.partition(";")
            expired = "max-age=0" in attributes.lower().replace(" ", "")
            for key, value in parse_cookie(pair).items():
                if key == session_cookie:
                    continue
                if expired:
                    self.cookies.pop(key, None)
                else:
                    self.cookies[key] = value

    @contextmanager
    def _recording(self) -> Iterator[None]:
        templates: list[str] = []
        flashes: dict[str, Any] = {}
        finished: dict[str, Any] = {}

        def on_template(sender: Flask, template: Any, context: dict[str, Any], **extra: Any) -> None:
            templates.append(template.name)

        def on_flash(sender: Flask, message: Any, category: str, **extra: Any) -> None:
            flashes[category] = message

        def on_finished(sender: Flask, response: Any, **extra: Any) -> None:
            finished["controller"] = g.get("controller")
            finished["session"] = {key: value for key, value in session.items() if not key.startswith("_")}
            finished["request"] = request._get_current_object()  # pylint: disable=protected-access

        with ExitStack() as stack:
            stack.enter_context(template_rendered.connected_to(on_template, self.app))
            stack.enter_context(message_flashed.connected_to(on_flash, self.app))
            stack.enter_context(request_finished.connected_to(on_finished, self.app))
            yield

        self._templates = templates
        self._flash = flashes
        self._controller = finished.get("controller")
        self._request = finished.get("request")
        if "session" in finished:
            self.session.clear()
            self.session.update(finished["session"])
        if self._controller is not None:
            self.params.clear()
            self.params.update(self._controller.params)

    # ------------------------------------------------------------------
    # State after the most recent request
    # ------------------------------------------------------------------

    @property
    def response(self) -> TestResponse:
        if self._response is None:
            raise NoRequestProcessedError
        return self._response

    @property
    def controller(self) -> Controller:
        if self._controller is None:
            raise NoRequestProcessedError
        return self._controller

    @property
    def request(self) -> Request:
        if self._request is None:
            raise NoRequestProcessedError
        return self._request

    @property
    def assigns(self) -> dict[str, Any]:
        if self._controller is None:
            return {}
        return self._controller.assigns()

    @property
    def flash(self) -> dict[str, Any]:
        return dict(self._flash)

    @property
    def rendered_templates(self) -> list[str]:
        return list(self._templates)

    def url_for(self, endpoint: str, **values: Any) -> str:
        """Build a URL the way the app would; paths unless ``_external=True``."""
        with self.app.test_request_context():
            return url_for(endpoint, **values)

    def template_name(self, name: str, partial: bool = False) -> str:
        return self.controller_class.template_name(name, partial)
