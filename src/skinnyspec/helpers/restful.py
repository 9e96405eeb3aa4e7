"""Iterating over RESTful actions and the ORM expectations macros build on."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from typing import TYPE_CHECKING, Any

from skinnyspec.domain.routes import Route, plan_routes
from skinnyspec.domain.sentinels import ALL

from .mocking import MessageExpectation, hash_including

if TYPE_CHECKING:
    from skinnyspec.config import Settings

    from .mocking import MockSpace

logger = logging.getLogger(__name__)


class RestfulHelpers:
    """Instance methods issuing one request per RESTful action."""

    mocks: MockSpace
    settings: Settings

    def with_default_restful_actions(self, **params: Any) -> Iterator[Route]:
        """Same as ``with_restful_actions("all", **params)``."""
        yield from self.with_restful_actions(ALL, **params)

    def with_restful_actions(
        self,
        *actions: str,
        before: Callable[[Any], Any] | None = None,
        collection: Mapping[str, str] | None = None,
        member: Mapping[str, str] | None = None,
        **params: Any,
    ) -> Iterator[Route]:
        """Issue one request per planned action, yielding each route after it ran.

        With no actions, or with ``"all"`` among them, every default action is
        requested; otherwise only the named ones. Extra routes come from
        ``member`` and ``collection`` (``{"preview": "post"}``).

        Example:
            ```py
            for route in spec.with_restful_actions("edit", "update", collection={"list": "get"}):
                assert spec.redirect_url == "/login", route
            ```

        Args:
            *actions: Default action names, or ``"all"``.
            before: Called with the example once, before the first member request.
            collection: Extra ``action -> verb`` collection routes.
            member: Extra ``action -> verb`` member routes.
            **params: Parameters sent with every request.
        """
        params = {**params, **self.parentize_params()}
        for route in plan_routes(actions, collection=collection, member=member):
            if route.member:
                if before is not None:
                    before(self)
                    before = None
                request_params = {**params, "id": self.settings.member_id}
            else:
                request_params = dict(params)
            logger.debug("Requesting %s with %s", route, request_params)
            self.process(route.verb, route.action, request_params)
            yield route

    def create_ar_class_expectation(
        self, name: str, method: str, argument: Any = None, /, **options: Any
    ) -> MessageExpectation:
        """Expect the model class for ``name`` to receive ``method``.

        The expected arguments are ``argument`` (when not None) followed by
        ``hash_including(options)`` (when options remain), unless
        ``only_method`` is set. ``find_method`` replaces ``method``. The
        class returns ``self.<name>``.
        """
        only_method = options.pop("only_method", False)
        method = options.pop("find_method", None) or method
        args: list[Any] = []
        if not only_method:
            if argument is not None:
                args.append(argument)
            if options:
                args.append(hash_including(options))
        expectation = self.mocks.should_receive(self.class_for(name), method)
        if args:
            expectation.with_args(*args)
        return expectation.and_return(self.instance_for(name))

    def create_positive_ar_instance_expectation(
        self, name: str, method: str, *args: Any
    ) -> MessageExpectation:
        """Expect ``self.<name>`` to receive ``method`` (with ``args``) and return True."""
        expectation = self.mocks.should_receive(self.require_instance(name), method)
        if args:
            expectation.with_args(*args)
        return expectation.and_return(True)
