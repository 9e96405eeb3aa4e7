"""Contract for the request/response test harness.

The example DSL issues requests and reads back the response, assigns, flash,
session and cookies through this interface only, so the bundled Flask host
(``skinnyspec.adapters.web``) can be swapped for another framework's
functional-test client.
"""

from __future__ import annotations

import abc
import posixpath
from collections.abc import Mapping
from typing import Any, Protocol


class Response(Protocol):
    """What the DSL reads from a processed request (a werkzeug response fits)."""

    status_code: int

    @property
    def mimetype(self) -> str | None: ...

    @property
    def location(self) -> str | None: ...

    @property
    def text(self) -> str: ...


class AbstractControllerHarness(abc.ABC):
    """Drives one controller through functional-test requests.

    ``params``, ``session``, ``cookies`` and ``environ`` persist across the
    requests issued by a single example; everything else describes the most
    recent request.
    """

    params: dict[str, Any]
    session: dict[str, Any]
    cookies: dict[str, Any]
    environ: dict[str, Any]

    @abc.abstractmethod
    def process(self, verb: str, action: str, params: dict[str, Any] | None = None) -> Response:
        """Run ``action`` as an HTTP ``verb`` request and return the response."""

    @property
    @abc.abstractmethod
    def response(self) -> Response:
        """Response of the most recent request."""

    @property
    @abc.abstractmethod
    def assigns(self) -> dict[str, Any]:
        """Attributes the controller set while handling the most recent request."""

    @property
    @abc.abstractmethod
    def flash(self) -> Mapping[str, Any]:
        """Messages flashed during the most recent request, by category."""

    @property
    @abc.abstractmethod
    def request(self) -> Any:
        """The request object of the most recent request."""

    @property
    @abc.abstractmethod
    def controller(self) -> Any:
        """The controller instance that handled the most recent request."""

    @property
    @abc.abstractmethod
    def rendered_templates(self) -> list[str]:
        """Names of every template rendered during the most recent request."""

    @abc.abstractmethod
    def url_for(self, endpoint: str, **values: Any) -> str:
        """Build the URL of ``endpoint`` the way the application would."""

    @abc.abstractmethod
    def template_name(self, name: str, partial: bool = False) -> str:
        """Map a short template or partial name to the name the host renders."""

    @property
    def rendered_template(self) -> str | None:
        """The first rendered template that is not a partial."""
        for name in self.rendered_templates:
            if not posixpath.basename(name).startswith("_"):
                return name
        return None

    @property
    def rendered_partials(self) -> list[str]:
        return [name for name in self.rendered_templates if posixpath.basename(name).startswith("_")]

    @property
    def redirect_url(self) -> str | None:
        response = self.response
        return response.location if 300 <= response.status_code < 400 else None
