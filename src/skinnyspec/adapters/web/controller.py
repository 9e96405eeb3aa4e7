"""Rails-style resource controllers on top of Flask.

A :class:`Controller` groups the actions of one resource. Its public methods
are actions, :meth:`Controller.blueprint` routes them RESTfully and every
request gets a fresh instance, as with :class:`flask.views.View`::

    class FoosController(Controller):
        before_actions = ("require_user",)
        collection_actions = {"search": "get"}

        def require_user(self):
            if not session.get("user_id"):
                return redirect(current_app.config["LOGIN_PATH"])
            return None

        def index(self):
            self.foos = Foo.find("all")

        def create(self):
            self.foo = Foo.new(self.params.get("foo"))
            if self.foo.save():
                flash("Foo was created.", "notice")
                return redirect(url_for("foos.index"))
            return self.render("new")

An action that returns None renders its own template, with the attributes it
set on ``self`` (its *assigns*) as the template context. A filter that
returns a response halts the chain, like a ``before_request`` function.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, ClassVar

from flask import Blueprint, Response, current_app, g, redirect, render_template, request
from flask.typing import ResponseReturnValue
from flask.views import View

from skinnyspec.adapters.orm.active_record import records_to_json, records_to_xml
from skinnyspec.domain.inflection import pluralize, underscore
from skinnyspec.domain.routes import DEFAULT_ACTIONS

logger = logging.getLogger(__name__)

MIMETYPES: Mapping[str, str] = MappingProxyType(
    {
        "html": "text/html",
        "xml": "application/xml",
        "json": "application/json",
    }
)

#: URL rule of each default action, relative to the resource prefix.
DEFAULT_RULES: Mapping[str, str] = MappingProxyType(
    {
        "index": "",
        "show": "/<int:id>",
        "new": "/new",
        "create": "",
        "edit": "/<int:id>/edit",
        "update": "/<int:id>",
        "destroy": "/<int:id>",
    }
)


def serialize(obj: Any, format_name: str) -> str:
    """Serialize a record, a record collection or a plain string for ``format_name``."""
    if isinstance(obj, str):
        return obj
    method = getattr(obj, f"to_{format_name}", None)
    if callable(method):
        return method()
    if isinstance(obj, (list, tuple)):
        if format_name == "json":
            return records_to_json(obj)
        if format_name == "xml":
            root = pluralize(underscore(type(obj[0]).__name__)) if obj else "records"
            return records_to_xml(obj, root=root)
    raise TypeError(f"Cannot render {type(obj).__name__} as {format_name}")


def _methods(action: str, verb: str) -> list[str]:
    # update answers both PUT and PATCH
    return ["PUT", "PATCH"] if action == "update" else [verb.upper()]


class Controller(View):
    """Base class for resource controllers.

    Class attributes:
        before_actions: Methods run before every action, in order.
        member_actions: Extra ``action -> verb`` routes on a single resource
            (``/foos/<id>/<action>``).
        collection_actions: Extra ``action -> verb`` routes on the collection
            (``/foos/<action>``).
        parent: Singular name of the resource this one is nested under;
            ``"post"`` routes comments under ``/posts/<post_id>/comments``.
    """

    before_actions: ClassVar[tuple[str, ...]] = ()
    member_actions: ClassVar[Mapping[str, str]] = MappingProxyType({})
    collection_actions: ClassVar[Mapping[str, str]] = MappingProxyType({})
    parent: ClassVar[str | None] = None

    init_every_request = True

    def __init__(self, action: str) -> None:
        self.action_name = action
        self.params: dict[str, Any] = {}
        self._framework_attributes = frozenset(vars(self)) | {"_framework_attributes"}

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    @classmethod
    def controller_name(cls) -> str:
        return underscore(cls.__name__.removesuffix("Controller"))

    @classmethod
    def _public_methods(cls) -> set[str]:
        names: set[str] = set()
        for klass in cls.__mro__:
            if klass in (Controller, View, object):
                continue
            names.update(
                name
                for name, value in vars(klass).items()
                if not name.startswith("_") and callable(value)
                and not isinstance(value, (classmethod, staticmethod))
            )
        return names - set(cls.before_actions)

    @classmethod
    def routes(cls) -> dict[str, tuple[str, str]]:
        """``action -> (rule, verb)`` for every action the controller defines.

        Default actions are routed when a method of that name exists; member
        and collection actions must also be declared.
        """
        defined = cls._public_methods()
        table = {
            action: (DEFAULT_RULES[action], verb)
            for action, verb in DEFAULT_ACTIONS.items()
            if action in defined
        }
        for action, verb in cls.member_actions.items():
            table[action] = (f"/<int:id>/{action}", verb.lower())
        for action, verb in cls.collection_actions.items():
            table[action] = (f"/{action}", verb.lower())
        return {action: route for action, route in table.items() if action in defined}

    @classmethod
    def action_names(cls) -> frozenset[str]:
        return frozenset(cls.routes())

    @classmethod
    def url_prefix(cls) -> str:
        name = cls.controller_name()
        if cls.parent is None:
            return f"/{name}"
        return f"/{pluralize(cls.parent)}/<int:{cls.parent}_id>/{name}"

    @classmethod
    def blueprint(cls) -> Blueprint:
        """Build a blueprint routing every action; endpoints are ``<controller>.<action>``."""
        blueprint = Blueprint(cls.controller_name(), cls.__module__, url_prefix=cls.url_prefix())
        for action, (rule, verb) in cls.routes().items():
            blueprint.add_url_rule(rule, view_func=cls.as_view(action, action), methods=_methods(action, verb))
        return blueprint

    @classmethod
    def template_name(cls, name: str, partial: bool = False) -> str:
        """``"index"`` -> ``"foos/index.html"``; partials get a leading underscore.

        Names that already carry a directory or an extension are kept as-is.
        """
        if "/" in name or "." in name:
            return name
        return f"{cls.controller_name()}/{'_' if partial else ''}{name}.html"

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch_request(self, **view_args: Any) -> ResponseReturnValue:
        g.controller = self
        self.params = self._collect_params(view_args)
        for name in self.before_actions:
            rv = getattr(self, name)()
            if rv is not None:
                logger.debug("Filter %s halted %s#%s", name, type(self).__name__, self.action_name)
                return rv
        rv = getattr(self, self.action_name)()
        return self.render() if rv is None else rv

    def _collect_params(self, view_args: Mapping[str, Any]) -> dict[str, Any]:
        params: dict[str, Any] = request.args.to_dict()
        body = request.get_json(silent=True)
        if isinstance(body, Mapping):
            params.update(body)
        params.update(view_args)
        params.update(controller=self.controller_name(), action=self.action_name)
        return params

    def assigns(self) -> dict[str, Any]:
        return {
            name: value
            for name, value in vars(self).items()
            if name not in self._framework_attributes and not name.startswith("_")
        }

    # ------------------------------------------------------------------
    # Responses
    # ------------------------------------------------------------------

    def render(self, template: str | None = None, *, status: int = 200) -> Response:
        """Render ``template`` (the action's own by default) with the assigns."""
        body = render_template(self.template_name(template or self.action_name), **self.assigns())
        return current_app.response_class(body, status=status, mimetype=MIMETYPES["html"])

    def render_partial(self, name: str, *, status: int = 200) -> Response:
        body = render_template(self.template_name(name, partial=True), **self.assigns())
        return current_app.response_class(body, status=status, mimetype=MIMETYPES["html"])

    def render_xml(self, obj: Any, *, status: int = 200) -> Response:
        return current_app.response_class(serialize(obj, "xml"), status=status, mimetype=MIMETYPES["xml"])

    def render_json(self, obj: Any, *, status: int = 200) -> Response:
        return current_app.response_class(serialize(obj, "json"), status=status, mimetype=MIMETYPES["json"])

    def head(self, status: int) -> Response:
        return current_app.response_class(status=status)

    def redirect_back(self, fallback: str | None = None) -> Response:
        """Redirect to the referring page, or ``fallback`` when there is none.

        Raises:
            RuntimeError: If the request has no referrer and no fallback is given.
        """
        target = request.referrer or fallback
        if target is None:
            raise RuntimeError("No HTTP_REFERER was set and no fallback was given")
        return redirect(target)
