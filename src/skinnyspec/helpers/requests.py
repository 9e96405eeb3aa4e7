"""Issuing requests from examples.

Example groups declare the request every generated example runs::

    class TestFoosShow(ControllerSpec):
        controller_class = FoosController
        the_request = define_request("get", "show", id=lambda spec: spec.foo.id)

Parameter values may be callables taking the running example; they are
resolved once per example, the first time ``params`` is read.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar

from skinnyspec.domain import descriptions
from skinnyspec.domain.errors import MissingRequestError
from skinnyspec.domain.routes import HTTP_VERBS

from .examples import Example, ExampleSet

if TYPE_CHECKING:
    from skinnyspec.config import Settings
    from skinnyspec.interfaces.harness import AbstractControllerHarness, Response

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RequestDefinition:
    """Verb, action and parameters of the request an example group issues."""

    verb: str
    action: str
    params: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        verb = self.verb.lower()
        if verb not in HTTP_VERBS:
            raise ValueError(f"Unsupported HTTP verb {self.verb!r}")
        object.__setattr__(self, "verb", verb)

    def resolve_params(self, spec: Any) -> dict[str, Any]:
        """Evaluate callable parameter values against the running example."""
        return {
            key: value(spec) if callable(value) and not isinstance(value, type) else value
            for key, value in self.params.items()
        }

    def __str__(self) -> str:
        return f"{self.verb.upper()} {self.action}"


def define_request(verb: str, action: str, **params: Any) -> RequestDefinition:
    """Declare the request an example group's examples evaluate."""
    return RequestDefinition(verb, action, MappingProxyType(dict(params)))


def create_status_expectation(status: int) -> ExampleSet:
    """Expect the response to carry HTTP ``status``."""

    def body(spec: Any) -> None:
        spec.eval_request()
        actual = spec.response.status_code
        assert actual == status, f"expected status {status}, got {actual}"

    return ExampleSet([Example(descriptions.status(status), body)])


def create_content_type_expectation(content_type: str) -> ExampleSet:
    """Expect the response mimetype (Content-Type without parameters) to be ``content_type``."""

    def body(spec: Any) -> None:
        spec.eval_request()
        actual = spec.response.mimetype
        assert actual == content_type, f"expected content type {content_type!r}, got {actual!r}"

    return ExampleSet([Example(descriptions.content_type(content_type), body)])


class ControllerRequestHelpers:
    """Instance-level request helpers mixed into the example group."""

    the_request: ClassVar[RequestDefinition | None] = None

    harness: AbstractControllerHarness
    settings: Settings

    _params: dict[str, Any] | None = None
    _param_overrides: dict[str, Any] | None = None
    _implicit_request: RequestDefinition | None = None

    # ------------------------------------------------------------------
    # Request definition
    # ------------------------------------------------------------------

    def define_implicit_request(self, verb: str, action: str) -> RequestDefinition:
        """Use ``verb action`` when the group did not declare ``the_request``."""
        if self._implicit_request is None:
            self._implicit_request = define_request(verb, action)
        return self.request_definition() or self._implicit_request

    def request_definition(self) -> RequestDefinition | None:
        return type(self).the_request or self._implicit_request

    @property
    def params(self) -> dict[str, Any]:
        """Parameters for the example's request.

        Before the request runs these are the declared parameters (callables
        resolved); afterwards the same dict also reflects whatever the
        controller changed.
        """
        if self._params is None:
            definition = self.request_definition()
            params = definition.resolve_params(self) if definition else {}
            self._params = {**self.parentize_params(), **params, **(self._param_overrides or {})}
        return self._params

    def set_param(self, key: str, value: Any) -> None:
        """Set a request parameter without resolving the declared ones yet."""
        if self._params is not None:
            self._params[key] = value
        else:
            if self._param_overrides is None:
                self._param_overrides = {}
            self._param_overrides[key] = value

    def parentize_params(self) -> dict[str, Any]:
        return {}

    # ------------------------------------------------------------------
    # Issuing requests
    # ------------------------------------------------------------------

    def eval_request(self) -> Response:
        """Run the group's request with the example's ``params``.

        Raises:
            MissingRequestError: If no request was declared or implied.
        """
        definition = self.request_definition()
        if definition is None:
            raise MissingRequestError(type(self).__name__)
        return self.harness.process(definition.verb, definition.action, self.params)

    def get_response(self, callback: Callable[[Response], Any] | None = None) -> Response:
        """Run the request and hand the response to ``callback``."""
        response = self.eval_request()
        if callback is not None:
            callback(response)
        return response

    def process(self, verb: str, action: str, params: Mapping[str, Any] | None = None) -> Response:
        self._params = dict(params or {})
        return self.harness.process(verb, action, self._params)

    def get(self, action: str, params: Mapping[str, Any] | None = None) -> Response:
        return self.process("get", action, params)

    def post(self, action: str, params: Mapping[str, Any] | None = None) -> Response:
        return self.process("post", action, params)

    def put(self, action: str, params: Mapping[str, Any] | None = None) -> Response:
        return self.process("put", action, params)

    def patch(self, action: str, params: Mapping[str, Any] | None = None) -> Response:
        return self.process("patch", action, params)

    def delete(self, action: str, params: Mapping[str, Any] | None = None) -> Response:
        return self.process("delete", action, params)

    # ------------------------------------------------------------------
    # Request/response state
    # ------------------------------------------------------------------

    @property
    def response(self) -> Response:
        return self.harness.response

    @property
    def assigns(self) -> dict[str, Any]:
        return self.harness.assigns

    @property
    def flash(self) -> Any:
        return self.harness.flash

    @property
    def session(self) -> dict[str, Any]:
        return self.harness.session

    @property
    def cookies(self) -> dict[str, Any]:
        return self.harness.cookies

    @property
    def environ(self) -> dict[str, Any]:
        """WSGI environ overrides sent with every following request."""
        return self.harness.environ

    @property
    def request(self) -> Any:
        return self.harness.request

    @property
    def controller(self) -> Any:
        return self.harness.controller

    @property
    def redirect_url(self) -> str | None:
        return self.harness.redirect_url

    def url_for(self, endpoint: str, **values: Any) -> str:
        """``spec.url_for("foos.show", id=spec.foo.id)`` -> ``"/foos/1001"``."""
        return self.harness.url_for(endpoint, **values)

    # ------------------------------------------------------------------
    # Redirect assertions
    # ------------------------------------------------------------------

    def normalize_location(self, location: str | None) -> str | None:
        base_url = self.settings.base_url
        if location is not None and location.startswith(base_url):
            return location[len(base_url):] or "/"
        return location

    def assert_redirected_to(self, expected: str) -> None:
        actual = self.redirect_url
        assert actual is not None, (
            f"expected a redirect to {expected}, got status {self.response.status_code}"
        )
        assert self.normalize_location(actual) == self.normalize_location(expected), (
            f"expected a redirect to {expected}, got a redirect to {actual}"
        )

    def assert_not_redirected_to(self, expected: str) -> None:
        actual = self.redirect_url
        assert actual is None or (
            self.normalize_location(actual) != self.normalize_location(expected)
        ), f"expected no redirect to {expected}"
