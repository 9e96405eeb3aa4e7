"""Unit tests for the macros in skinnyspec.helpers.macros.

These only check what the macros declare (descriptions, argument
validation); running them against a controller is covered by the
functional tests.
"""

import pytest

from skinnyspec.domain.errors import (
    MissingRenderTargetError,
    UnknownCollectionError,
    UnknownRenderMethodError,
)
from skinnyspec.helpers import (
    NIL,
    NOT_NIL,
    UNDEFINED,
    it_should_assign,
    it_should_destroy,
    it_should_find,
    it_should_find_and_assign,
    it_should_find_and_destroy,
    it_should_find_and_update,
    it_should_initialize,
    it_should_initialize_and_assign,
    it_should_initialize_and_save,
    it_should_not_assign,
    it_should_not_destroy,
    it_should_not_find,
    it_should_not_find_and_assign,
    it_should_not_initialize_and_assign,
    it_should_not_redirect_to,
    it_should_not_save,
    it_should_not_set_flash,
    it_should_not_update,
    it_should_redirect_to,
    it_should_redirect_to_referer,
    it_should_redirect_to_referrer,
    it_should_render,
    it_should_render_json,
    it_should_render_nothing,
    it_should_render_partial,
    it_should_render_template,
    it_should_render_xml,
    it_should_require_user,
    it_should_save,
    it_should_set,
    it_should_set_cookies,
    it_should_set_flash,
    it_should_set_params,
    it_should_set_session,
    it_should_update,
)
from skinnyspec.helpers import macros
from skinnyspec.helpers.macros import _lambda_body, route_hint


@pytest.mark.parametrize(
    "examples, expected",
    [
        (it_should_find("foos"), ["should find foos"]),
        (it_should_find("foo", params="id"), ["should find a foo"]),
        (it_should_find("item"), ["should find an item"]),
        (it_should_not_find("foos"), ["should not find foos"]),
        (it_should_initialize("foo"), ["should initialize a foo"]),
        (it_should_save("foo"), ["should save the foo"]),
        (it_should_not_save("foo"), ["should not save the foo"]),
        (it_should_update("foo"), ["should update the foo"]),
        (it_should_not_update("foo"), ["should not update the foo"]),
        (it_should_destroy("foo"), ["should delete the foo"]),
        (it_should_not_destroy("foo"), ["should not destroy the foo"]),
    ],
)
def test_record_macro_descriptions(examples, expected):
    assert examples.descriptions == expected


def test_resource_name_does_not_clash_with_options():
    assert it_should_find("foo", name="bar").descriptions == ["should find a foo"]
    assert it_should_initialize("foo", name="bar").descriptions == ["should initialize a foo"]


def test_assign_descriptions_keep_argument_order():
    examples = it_should_assign("foo", "bar", baz="qux", gone=NIL, set=NOT_NIL, unset=UNDEFINED)
    assert examples.descriptions == [
        "should assign @foo",
        "should assign @bar",
        "should assign @baz",
        "should not assign @gone",
        "should assign @set",
        "should assign @unset",
    ]


def test_not_assign_is_assign_nil():
    assert it_should_not_assign("foo", "bar").descriptions == [
        "should not assign @foo",
        "should not assign @bar",
    ]


@pytest.mark.parametrize(
    "examples, expected",
    [
        (it_should_find_and_assign("foos"), ["should find foos", "should assign @foos"]),
        (it_should_not_find_and_assign("foo"), ["should not find a foo", "should not assign @foo"]),
        (it_should_initialize_and_assign("foo"), ["should initialize a foo", "should assign @foo"]),
        (
            it_should_not_initialize_and_assign("foo"),
            ["should not initialize a foo", "should not assign @foo"],
        ),
        (it_should_initialize_and_save("foo"), ["should initialize a foo", "should save the foo"]),
        (it_should_find_and_update("foo"), ["should find a foo", "should update the foo"]),
        (it_should_find_and_destroy("foo"), ["should find a foo", "should delete the foo"]),
    ],
)
def test_combined_macros_pair_up_per_name(examples, expected):
    assert examples.descriptions == expected


def test_combined_macros_accept_several_names():
    assert it_should_find_and_assign("foo", "bar").descriptions == [
        "should find a foo",
        "should assign @foo",
        "should find a bar",
        "should assign @bar",
    ]


class TestSetMacros:
    """it_should_set and its per-collection shorthands."""

    @staticmethod
    def test_descriptions() -> None:
        assert it_should_set_flash("notice", "Saved").descriptions == [
            "should set flash['notice'] with 'Saved'"
        ]
        assert it_should_set_session("user_id", 3).descriptions == [
            "should set session['user_id'] with 3"
        ]
        assert it_should_set_params("q").descriptions == ["should set params['q']"]
        assert it_should_set_cookies("theme", block=lambda spec: "dark").descriptions == [
            "should set cookies['theme']"
        ]
        assert it_should_not_set_flash("error").descriptions == ["should set flash['error'] with NIL"]

    @staticmethod
    def test_unknown_collection() -> None:
        with pytest.raises(UnknownCollectionError, match="'headers'") as excinfo:
            it_should_set("headers", "X-Foo")
        assert excinfo.value.collection == "headers"


class TestRenderMacros:
    """Rendering macros and their response options."""

    @staticmethod
    def test_template() -> None:
        assert it_should_render_template("index").descriptions == ["should render 'index' template"]

    @staticmethod
    def test_status_and_content_type_surround_the_render_example() -> None:
        examples = it_should_render_template("index", status=200, content_type="text/html")
        assert examples.descriptions == [
            "should respond with 200",
            "should render 'index' template",
            "should respond with content type 'text/html'",
        ]

    @staticmethod
    def test_partial() -> None:
        assert it_should_render_partial("row", status=201).descriptions == [
            "should respond with 201",
            "should render 'row' partial",
        ]

    @staticmethod
    def test_formatted() -> None:
        assert it_should_render_xml("foos").descriptions == ["should render 'xml'"]
        assert it_should_render_json(block=lambda spec: "[]").descriptions == ["should render 'json'"]

    @staticmethod
    def test_nothing() -> None:
        assert it_should_render_nothing(status=204).descriptions == [
            "should respond with 204",
            "should render nothing",
        ]

    @staticmethod
    @pytest.mark.parametrize(
        "args, expected",
        [
            (("template", "show"), ["should render 'show' template"]),
            (("partial", "row"), ["should render 'row' partial"]),
            (("xml", "foo"), ["should render 'xml'"]),
            (("json", "foo"), ["should render 'json'"]),
            (("formatted", "csv", "foo"), ["should render 'csv'"]),
            (("nothing",), ["should render nothing"]),
        ],
    )
    def test_dispatch(args, expected) -> None:
        assert it_should_render(*args).descriptions == expected

    @staticmethod
    def test_unknown_render_method() -> None:
        with pytest.raises(UnknownRenderMethodError, match="it_should_render_csv"):
            it_should_render("csv", "foo")

    @staticmethod
    def test_formatted_render_needs_a_target() -> None:
        with pytest.raises(MissingRenderTargetError, match="neither was given"):
            it_should_render_xml()


class TestRedirectMacros:
    """Redirect macros and how they describe their target."""

    @staticmethod
    def test_string_targets() -> None:
        assert it_should_redirect_to("/foos").descriptions == ["should redirect to /foos"]
        assert it_should_not_redirect_to("/foos").descriptions == ["should not redirect to /foos"]

    @staticmethod
    def test_explicit_hint_wins() -> None:
        examples = it_should_redirect_to(lambda spec: spec.url_for("foos.index"), hint="the foo list")
        assert examples.descriptions == ["should redirect to the foo list"]

    @staticmethod
    def test_lambda_targets_are_described_by_their_body() -> None:
        examples = it_should_redirect_to(lambda spec: spec.url_for("foos.show", id=spec.foo.id))
        assert examples.descriptions == ['should redirect to url_for("foos.show", id=foo.id)']

    @staticmethod
    def test_referer_aliases() -> None:
        assert it_should_redirect_to_referrer is it_should_redirect_to_referer
        assert it_should_redirect_to_referer().descriptions == [
            "should redirect to the referring page"
        ]


class TestRouteHint:
    """route_hint and the lambda body extraction it uses."""

    @staticmethod
    def test_strings() -> None:
        assert route_hint("/foos/1") == "/foos/1"

    @staticmethod
    def test_lambda_without_arguments_to_the_helper() -> None:
        assert route_hint(lambda spec: spec.foos_path()) == "foos_path()"

    @staticmethod
    def test_lambda_parameter_name_is_dropped() -> None:
        assert route_hint(lambda s: s.edit_foo_path(s.foo)) == "edit_foo_path(foo)"

    @staticmethod
    def test_named_functions() -> None:
        def dashboard(spec):
            return "/dashboard"

        assert route_hint(dashboard) == "dashboard()"

    @staticmethod
    @pytest.mark.parametrize(
        "source, expected",
        [
            ("it_should_redirect_to(lambda s: s.a(1, 2), 'x')", "s.a(1, 2)"),
            ("route = lambda spec: spec.foos_url()\n", "spec.foos_url()"),
            ("f(lambda spec: spec.foo_path(\n    spec.foo))", "spec.foo_path( spec.foo)"),
            ("f(lambda spec: {'a': 1}[spec.key])", "{'a': 1}[spec.key]"),
            ("no callable here", None),
            ("lambda spec:", None),
        ],
    )
    def test_lambda_body(source, expected) -> None:
        assert _lambda_body(source) == expected


class TestRequireUser:
    """it_should_require_user descriptions."""

    @staticmethod
    def test_defaults_to_every_action() -> None:
        assert it_should_require_user().descriptions == [
            "should require a user for actions index, show, new, create, edit, update, destroy"
        ]

    @staticmethod
    def test_lists_named_and_extra_actions() -> None:
        examples = it_should_require_user(
            "new", "create", collection={"search": "get"}, member={"preview": "post"}
        )
        assert examples.descriptions == [
            "should require a user for actions new, create, search, preview"
        ]


@pytest.mark.parametrize(
    "macro",
    [
        value
        for name, value in vars(macros).items()
        if name.startswith("it_should_") and callable(value)
    ],
    ids=lambda macro: macro.__name__,
)
def test_every_macro_is_documented(macro):
    assert macro.__doc__ and macro.__doc__.strip()
