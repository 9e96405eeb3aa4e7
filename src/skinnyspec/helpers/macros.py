"""Example-group macros.

Each macro returns an :class:`~skinnyspec.helpers.examples.ExampleSet`;
list them in a group's ``examples`` and every entry becomes a test::

    class TestFoosIndex(ControllerSpec):
        controller_class = FoosController
        the_request = define_request("get", "index")

        examples = [
            it_should_find_and_assign("foos"),
            it_should_render_template("index"),
        ]

        def setup_example(self):
            self.foos = self.stub_index(Foo)

Resource names resolve through the group (``"foo"`` -> ``self.foo`` and
``Foo``); see :mod:`skinnyspec.helpers.common`.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Mapping
from typing import Any

from skinnyspec.domain import descriptions
from skinnyspec.domain.errors import (
    MissingRenderTargetError,
    UnknownCollectionError,
    UnknownRenderMethodError,
)
from skinnyspec.domain.inflection import is_singular
from skinnyspec.domain.sentinels import ALL, NIL, NOT_NIL, UNDEFINED
from skinnyspec.interfaces.record import Record

from .examples import Example, ExampleSet
from .requests import create_content_type_expectation, create_status_expectation

logger = logging.getLogger(__name__)

#: Collections ``it_should_set`` can inspect on the example.
COLLECTIONS = frozenset({"flash", "session", "params", "cookies"})

type RedirectTarget = str | Callable[[Any], str]


def _examples(*items: Any) -> ExampleSet:
    return ExampleSet(item for item in items if item is not None)


# ============================================================================
#                               Authentication
# ============================================================================


def it_should_require_user(
    *actions: str,
    check: Callable[[Any], Any] | None = None,
    collection: Mapping[str, str] | None = None,
    member: Mapping[str, str] | None = None,
    **params: Any,
) -> ExampleSet:
    """Expect every listed action to turn away an anonymous request.

    By default each response must redirect to the login path. ``check``
    replaces that: it receives each response and fails the example by
    raising or by returning a falsy value other than None.

    Example:
        ```py
        it_should_require_user("new", "create", "edit", "update", "destroy")
        it_should_require_user("destroy", check=lambda response: response.status_code == 404)
        ```
    """

    def body(spec: Any) -> None:
        for route in spec.with_restful_actions(
            *actions, collection=collection, member=member, **params
        ):
            if check is None:
                spec.assert_redirected_to(spec.settings.login_path)
            else:
                result = check(spec.response)
                assert result is None or result, f"{route}: check failed for {spec.response!r}"

    return _examples(Example(descriptions.require_user(actions, collection, member), body))


# ============================================================================
#                               Finding and building
# ============================================================================


def it_should_find(
    name: str,
    /,
    *args: Any,
    params: str | None = None,
    method: str = "find",
    **options: Any,
) -> ExampleSet:
    """Expect the model class to be asked for ``name``.

    Example:
        ```py
        it_should_find("foos")                                   # Foo.find("all")
        it_should_find("foos", conditions={"foo": "bar"})        # Foo.find("all", conditions=...)
        it_should_find("foos", "joe", method="find_all_by_name") # Foo.find_all_by_name("joe")
        it_should_find("foo")                                    # Foo.find(self.foo.id)
        it_should_find("foo", params="id")                       # Foo.find(params["id"])
        it_should_find("foo", 2)                                 # Foo.find(2)
        ```

    Nested groups expect the lookup through the parent's association scope
    instead.
    """

    def body(spec: Any) -> None:
        param = spec.params.get(params) if params is not None else None
        if param is not None:
            argument = param
        elif args and args[0] is not None:
            argument = args[0]
        elif isinstance(instance := spec.instance_for(name), Record):
            argument = instance.id
        else:
            argument = ALL
        if spec.has_parent():
            spec.create_nested_resource_collection_expectations(name)
        else:
            spec.create_ar_class_expectation(name, method, argument, **options)
        spec.eval_request()

    return _examples(Example(descriptions.find(name), body))


def it_should_not_find(name: str) -> ExampleSet:
    """Expect the model class never to receive ``find`` (``find("all")`` for plurals)."""

    def body(spec: Any) -> None:
        expectation = spec.mocks.should_not_receive(spec.class_for(name), "find")
        if not is_singular(name):
            expectation.with_args(ALL)
        spec.eval_request()

    return _examples(Example(descriptions.not_find(name), body))


def it_should_initialize(name: str, /, params: str | None = None, **options: Any) -> ExampleSet:
    """Expect ``Foo.new`` to be called.

    Example:
        ```py
        it_should_initialize("foo")                 # Foo.new(...)
        it_should_initialize("foo", params="bar")   # Foo.new(params["bar"])
        it_should_initialize("foo", bar="baz")      # Foo.new({"bar": "baz", ...})
        it_should_initialize("foo", name="bar")     # Foo.new({"name": "bar", ...})
        ```
    """

    def body(spec: Any) -> None:
        if spec.has_parent():
            spec.create_nested_resource_instance_expectation(name)
        else:
            argument = spec.params.get(params) if params is not None else None
            spec.create_ar_class_expectation(name, "new", argument, **options)
        spec.eval_request()

    return _examples(Example(descriptions.initialize(name), body))


def it_should_not_initialize(name: str) -> ExampleSet:
    """Expect ``Foo.new`` never to be called."""

    def body(spec: Any) -> None:
        spec.mocks.should_not_receive(spec.class_for(name), "new")
        spec.eval_request()

    return _examples(Example(descriptions.not_initialize(name), body))


# ============================================================================
#                               Persistence
# ============================================================================


def it_should_save(name: str) -> ExampleSet:
    """Expect ``self.<name>.save()`` to be called (and succeed).

    To spec a failed save, stub ``save`` to return False and use
    :func:`it_should_assign` for the re-rendered form instead.
    """

    def body(spec: Any) -> None:
        spec.create_positive_ar_instance_expectation(name, "save")
        spec.eval_request()

    return _examples(Example(descriptions.save(name), body))


def it_should_not_save(name: str) -> ExampleSet:
    """Expect ``self.<name>.save()`` never to be called."""

    def body(spec: Any) -> None:
        spec.mocks.should_not_receive(spec.require_instance(name), "save")
        spec.eval_request()

    return _examples(Example(descriptions.not_save(name), body))


def it_should_update(name: str, params: str | None = None) -> ExampleSet:
    """Expect ``self.<name>.update_attributes(params[<params or name>])``.

    The argument is left unconstrained when the request has no such param.
    """

    def body(spec: Any) -> None:
        attributes = spec.params.get(params or name)
        args = () if attributes is None else (attributes,)
        spec.create_positive_ar_instance_expectation(name, "update_attributes", *args)
        spec.eval_request()

    return _examples(Example(descriptions.update(name), body))


def it_should_not_update(name: str) -> ExampleSet:
    """Expect ``self.<name>.update_attributes(...)`` never to be called."""

    def body(spec: Any) -> None:
        spec.mocks.should_not_receive(spec.require_instance(name), "update_attributes")
        spec.eval_request()

    return _examples(Example(descriptions.not_update(name), body))


def it_should_destroy(name: str) -> ExampleSet:
    """Expect ``self.<name>.destroy()`` to be called (and succeed)."""

    def body(spec: Any) -> None:
        spec.create_positive_ar_instance_expectation(name, "destroy")
        spec.eval_request()

    return _examples(Example(descriptions.destroy(name), body))


def it_should_not_destroy(name: str) -> ExampleSet:
    """Expect ``self.<name>.destroy()`` never to be called."""

    def body(spec: Any) -> None:
        spec.mocks.should_not_receive(spec.require_instance(name), "destroy")
        spec.eval_request()

    return _examples(Example(descriptions.not_destroy(name), body))


# ============================================================================
#                               Assignment
# ============================================================================


def _assign_check(name: str, value: Any) -> Callable[[Any], None]:
    if value is NIL:

        def check(spec: Any) -> None:
            actual = spec.assigns.get(name)
            assert actual is None, f"expected @{name} to be None, got {actual!r}"

    elif value is NOT_NIL:

        def check(spec: Any) -> None:
            assert spec.assigns.get(name) is not None, f"expected @{name} to be assigned"

    elif value is UNDEFINED:

        def check(spec: Any) -> None:
            assert name not in spec.assigns, f"expected @{name} to be left undefined"

    else:

        def check(spec: Any) -> None:
            actual = spec.assigns.get(name)
            assert actual == value, f"expected @{name} to be {value!r}, got {actual!r}"

    return check


def _assign_example(name: str, value: Any) -> Example:
    check = _assign_check(name, value)

    def body(spec: Any) -> None:
        spec.eval_request()
        check(spec)

    return Example(descriptions.assign(name, value), body)


def _assign_same_example(name: str) -> Example:
    def body(spec: Any) -> None:
        spec.eval_request()
        expected = spec.instance_for(name)
        actual = spec.assigns.get(name)
        if expected is None:
            assert actual is not None, f"expected @{name} to be assigned"
        else:
            assert actual == expected, f"expected @{name} to be {expected!r}, got {actual!r}"

    return Example(descriptions.assign(name), body)


def it_should_assign(*names: str, **assignments: Any) -> ExampleSet:
    """Expect the controller to assign attributes.

    Example:
        ```py
        it_should_assign("foo")              # assigns["foo"] == self.foo
        it_should_assign(foo="bar")          # assigns["foo"] == "bar"
        it_should_assign(foo=NIL)            # assigns["foo"] is None
        it_should_assign(foo=NOT_NIL)        # assigns["foo"] is not None
        it_should_assign(foo=UNDEFINED)      # "foo" never assigned
        ```

    A bare name compares against ``self.<name>`` when the example set one and
    only requires a value otherwise.
    """
    return _examples(
        *(_assign_same_example(name) for name in names),
        *(_assign_example(name, value) for name, value in assignments.items()),
    )


def it_should_not_assign(*names: str) -> ExampleSet:
    """Shorthand for ``it_should_assign(name=NIL)`` for every name."""
    return _examples(*(_assign_example(name, NIL) for name in names))


# ============================================================================
#                               Combined shorthands
# ============================================================================


def it_should_find_and_assign(*names: str) -> ExampleSet:
    """Use for actions like ``index``, ``show`` and ``edit`` that look records up and assign them.

    Combines :func:`it_should_find` (method only) and :func:`it_should_assign`
    for every name.
    """
    return _examples(
        *((it_should_find(name, only_method=True), it_should_assign(name)) for name in names)
    )


def it_should_not_find_and_assign(*names: str) -> ExampleSet:
    """Expect no lookup of ``names`` and leave each assign None."""
    return _examples(
        *((it_should_not_find(name), it_should_assign(**{name: NIL})) for name in names)
    )


def it_should_initialize_and_assign(*names: str) -> ExampleSet:
    """Use for actions like ``new`` that build an instance without saving it."""
    return _examples(
        *((it_should_initialize(name, only_method=True), it_should_assign(name)) for name in names)
    )


def it_should_not_initialize_and_assign(*names: str) -> ExampleSet:
    """Expect no ``new`` for ``names`` and leave each assign None."""
    return _examples(
        *((it_should_not_initialize(name), it_should_assign(**{name: NIL})) for name in names)
    )


def it_should_initialize_and_save(*names: str) -> ExampleSet:
    """Use for actions like ``create`` that build and successfully save an instance."""
    return _examples(
        *((it_should_initialize(name, only_method=True), it_should_save(name)) for name in names)
    )


def it_should_find_and_update(*names: str) -> ExampleSet:
    """Use for ``update``: look the record up, then ``update_attributes`` with its params."""
    return _examples(
        *((it_should_find(name, only_method=True), it_should_update(name)) for name in names)
    )


def it_should_find_and_destroy(*names: str) -> ExampleSet:
    """Use for ``destroy``: look the record up, then destroy it."""
    return _examples(
        *((it_should_find(name, only_method=True), it_should_destroy(name)) for name in names)
    )


# ============================================================================
#                               Flash, session, params, cookies
# ============================================================================


def it_should_set(
    collection: str,
    key: str,
    value: Any = None,
    *,
    block: Callable[[Any], Any] | None = None,
) -> ExampleSet:
    """Expect ``collection[key]`` to be set after the request.

    ``value`` is compared for equality, ``NIL`` requires the key to be unset,
    and ``block`` computes the expected value from the example. With neither,
    any value other than None passes.

    Raises:
        UnknownCollectionError: If ``collection`` is not flash, session,
            params or cookies.
    """
    if collection not in COLLECTIONS:
        raise UnknownCollectionError(collection)

    def body(spec: Any) -> None:
        spec.eval_request()
        actual = getattr(spec, collection).get(key)
        label = f"{collection}[{key!r}]"
        if value is NIL:
            assert actual is None, f"expected {label} to be None, got {actual!r}"
        elif value is not None:
            assert actual == value, f"expected {label} to be {value!r}, got {actual!r}"
        elif block is not None:
            expected = block(spec)
            assert actual == expected, f"expected {label} to be {expected!r}, got {actual!r}"
        else:
            assert actual is not None, f"expected {label} to be set"

    return _examples(Example(descriptions.set_value(collection, key, value), body))


def it_should_set_flash(key: str, value: Any = None, *, block: Callable[[Any], Any] | None = None) -> ExampleSet:
    """Expect ``flash[key]`` to be set during the request; see :func:`it_should_set`."""
    return it_should_set("flash", key, value, block=block)


def it_should_not_set_flash(key: str) -> ExampleSet:
    """Expect no message flashed under category ``key``."""
    return it_should_set("flash", key, NIL)


def it_should_set_session(key: str, value: Any = None, *, block: Callable[[Any], Any] | None = None) -> ExampleSet:
    """Expect ``session[key]`` after the request; see :func:`it_should_set`."""
    return it_should_set("session", key, value, block=block)


def it_should_not_set_session(key: str) -> ExampleSet:
    """Expect ``session[key]`` to be unset after the request."""
    return it_should_set("session", key, NIL)


def it_should_set_params(key: str, value: Any = None, *, block: Callable[[Any], Any] | None = None) -> ExampleSet:
    """Expect ``params[key]`` as the controller saw it; see :func:`it_should_set`."""
    return it_should_set("params", key, value, block=block)


def it_should_not_set_params(key: str) -> ExampleSet:
    """Expect ``params[key]`` to be unset after the request."""
    return it_should_set("params", key, NIL)


def it_should_set_cookies(key: str, value: Any = None, *, block: Callable[[Any], Any] | None = None) -> ExampleSet:
    """Expect cookie ``key`` after the request; see :func:`it_should_set`."""
    return it_should_set("cookies", key, value, block=block)


def it_should_not_set_cookies(key: str) -> ExampleSet:
    """Expect cookie ``key`` to be unset after the request."""
    return it_should_set("cookies", key, NIL)


# ============================================================================
#                               Rendering
# ============================================================================


def _with_response_options(
    example: Example, status: int | None, content_type: str | None
) -> ExampleSet:
    return _examples(
        create_status_expectation(status) if status is not None else None,
        example,
        create_content_type_expectation(content_type) if content_type is not None else None,
    )


def it_should_render(render_method: str, *args: Any, **kwargs: Any) -> ExampleSet:
    """Dispatch to ``it_should_render_<render_method>``.

    Raises:
        UnknownRenderMethodError: For anything but template, partial, xml,
            json, formatted or nothing.
    """
    try:
        macro = _RENDER_METHODS[render_method]
    except KeyError as e:
        raise UnknownRenderMethodError(render_method) from e
    return macro(*args, **kwargs)


def it_should_render_template(
    name: str, *, status: int | None = None, content_type: str | None = None
) -> ExampleSet:
    """Expect the action to render template ``name``.

    ``status`` and ``content_type`` add one example each.
    """

    def body(spec: Any) -> None:
        spec.eval_request()
        expected = spec.harness.template_name(name)
        actual = spec.harness.rendered_template
        assert actual == expected, f"expected template {expected!r} to be rendered, got {actual!r}"

    return _with_response_options(
        Example(descriptions.render_template(name), body), status, content_type
    )


def it_should_render_partial(
    name: str, *, status: int | None = None, content_type: str | None = None
) -> ExampleSet:
    """Expect partial ``name`` (``foos/_foo.html`` for ``"foo"``) among the rendered templates."""

    def body(spec: Any) -> None:
        spec.eval_request()
        expected = spec.harness.template_name(name, partial=True)
        partials = spec.harness.rendered_partials
        assert expected in partials, f"expected partial {expected!r} to be rendered, got {partials!r}"

    return _with_response_options(
        Example(descriptions.render_partial(name), body), status, content_type
    )


def _resolve_record(spec: Any, record: str) -> Any:
    # "foo.bar" -> self.foo.bar
    first, *rest = record.split(".")
    target = spec.require_instance(first)
    for attr in rest:
        target = getattr(target, attr)
    return target


def it_should_render_formatted(
    format_name: str,
    record: str | None = None,
    *,
    block: Callable[[Any], str] | None = None,
    status: int | None = None,
    content_type: str | None = None,
) -> ExampleSet:
    """Expect the response body to be ``record.to_<format_name>()``.

    ``record`` names an example attribute, optionally dotted (``"foo.bars"``);
    ``block`` computes the expected body from the example instead.

    Raises:
        MissingRenderTargetError: If neither ``record`` nor ``block`` is given.
    """
    if record is None and block is None:
        raise MissingRenderTargetError

    def body(spec: Any) -> None:
        def check(response: Any) -> None:
            if block is not None:
                expected = block(spec)
            else:
                expected = getattr(_resolve_record(spec, record), f"to_{format_name}")()
            assert response.text == expected, (
                f"expected the response body to be {expected!r}, got {response.text!r}"
            )

        spec.get_response(check)

    return _with_response_options(
        Example(descriptions.render_formatted(format_name), body), status, content_type
    )


def it_should_render_xml(record: str | None = None, **options: Any) -> ExampleSet:
    """Shorthand for ``it_should_render_formatted("xml", record, ...)``."""
    return it_should_render_formatted("xml", record, **options)


def it_should_render_json(record: str | None = None, **options: Any) -> ExampleSet:
    """Shorthand for ``it_should_render_formatted("json", record, ...)``."""
    return it_should_render_formatted("json", record, **options)


def it_should_render_nothing(*, status: int | None = None) -> ExampleSet:
    """Expect a blank response body."""

    def body(spec: Any) -> None:
        def check(response: Any) -> None:
            assert not response.text.strip(), f"expected a blank body, got {response.text!r}"

        spec.get_response(check)

    return _with_response_options(Example(descriptions.render_nothing(), body), status, None)


_RENDER_METHODS: dict[str, Callable[..., ExampleSet]] = {
    "template": it_should_render_template,
    "partial": it_should_render_partial,
    "xml": it_should_render_xml,
    "json": it_should_render_json,
    "formatted": it_should_render_formatted,
    "nothing": it_should_render_nothing,
}


# ============================================================================
#                               Redirection
# ============================================================================


def _lambda_body(source: str) -> str | None:
    start = source.find("lambda")
    if start < 0:
        return None
    colon = source.find(":", start)
    if colon < 0:
        return None
    text = source[colon + 1:]
    depth, end = 0, len(text)
    for index, char in enumerate(text):
        if char in "([{":
            depth += 1
        elif char in ")]}":
            if depth == 0:
                end = index
                break
            depth -= 1
        elif char in ",\n" and depth == 0:
            end = index
            break
    return " ".join(text[:end].split()) or None


def route_hint(route: RedirectTarget) -> str:
    """Describe a redirect target for an example description.

    Strings describe themselves; a lambda is described by its body with the
    example parameter dropped (``lambda spec: spec.url_for("foos.index")`` ->
    ``url_for("foos.index")``); other callables by their name.
    """
    if isinstance(route, str):
        return route
    name = getattr(route, "__name__", None)
    if name != "<lambda>":
        return f"{name}()" if name else repr(route)
    try:
        source = inspect.getsource(route)
    except (OSError, TypeError):
        return repr(route)
    hint = _lambda_body(source)
    if hint is None:
        return repr(route)
    code = route.__code__
    if code.co_argcount:
        hint = hint.replace(f"{code.co_varnames[0]}.", "")
    return hint


def _redirect_target(spec: Any, route: RedirectTarget) -> str:
    return route if isinstance(route, str) else route(spec)


def it_should_redirect_to(route: RedirectTarget, hint: str | None = None) -> ExampleSet:
    """Expect a redirect to ``route``.

    ``route`` is a path/URL or a callable evaluated against the example, so
    URLs can be built: ``it_should_redirect_to(lambda spec: spec.url_for("foos.index"))``.
    """

    def body(spec: Any) -> None:
        spec.eval_request()
        spec.assert_redirected_to(_redirect_target(spec, route))

    return _examples(Example(descriptions.redirect(hint or route_hint(route)), body))


def it_should_not_redirect_to(route: RedirectTarget, hint: str | None = None) -> ExampleSet:
    """Expect the response not to redirect to ``route`` (no redirect at all passes too)."""

    def body(spec: Any) -> None:
        spec.eval_request()
        spec.assert_not_redirected_to(_redirect_target(spec, route))

    return _examples(Example(descriptions.not_redirect(hint or route_hint(route)), body))


def it_should_redirect_to_referer() -> ExampleSet:
    """Expect a redirect back to the referring page."""

    def body(spec: Any) -> None:
        referer = spec.settings.referer
        spec.environ["HTTP_REFERER"] = referer
        spec.eval_request()
        spec.assert_redirected_to(referer)

    return _examples(Example(descriptions.redirect_to_referer(), body))


it_should_redirect_to_referrer = it_should_redirect_to_referer
