"""Unit tests for skinnyspec.domain.descriptions."""

import pytest

from skinnyspec.domain import descriptions
from skinnyspec.domain.sentinels import NIL, NOT_NIL


@pytest.mark.parametrize(
    "builder, name, expected",
    [
        (descriptions.find, "foo", "should find a foo"),
        (descriptions.find, "apple", "should find an apple"),
        (descriptions.find, "foos", "should find foos"),
        (descriptions.not_find, "foo", "should not find a foo"),
        (descriptions.not_find, "foos", "should not find foos"),
        (descriptions.initialize, "foo", "should initialize a foo"),
        (descriptions.initialize, "item", "should initialize an item"),
        (descriptions.not_initialize, "foo", "should not initialize a foo"),
        (descriptions.save, "foo", "should save the foo"),
        (descriptions.not_save, "foo", "should not save the foo"),
        (descriptions.update, "foo", "should update the foo"),
        (descriptions.not_update, "foo", "should not update the foo"),
        (descriptions.destroy, "foo", "should delete the foo"),
        (descriptions.not_destroy, "foo", "should not destroy the foo"),
    ],
)
def test_resource_descriptions(builder, name, expected):
    assert builder(name) == expected


@pytest.mark.parametrize(
    "args, expected",
    [
        (("foo",), "should assign @foo"),
        (("foo", "bar"), "should assign @foo"),
        (("foo", NOT_NIL), "should assign @foo"),
        (("foo", NIL), "should not assign @foo"),
    ],
)
def test_assign(args, expected):
    assert descriptions.assign(*args) == expected


@pytest.mark.parametrize(
    "args, expected",
    [
        (("flash", "notice"), "should set flash['notice']"),
        (("session", "user_id", 3), "should set session['user_id'] with 3"),
        (("flash", "notice", "Saved"), "should set flash['notice'] with 'Saved'"),
        (("cookies", "token", NIL), "should set cookies['token'] with NIL"),
    ],
)
def test_set_value(args, expected):
    assert descriptions.set_value(*args) == expected


def test_rendering():
    assert descriptions.render_template("index") == "should render 'index' template"
    assert descriptions.render_partial("row") == "should render 'row' partial"
    assert descriptions.render_formatted("xml") == "should render 'xml'"
    assert descriptions.render_nothing() == "should render nothing"
    assert descriptions.status(201) == "should respond with 201"
    assert descriptions.content_type("text/csv") == "should respond with content type 'text/csv'"


def test_redirection():
    assert descriptions.redirect("url_for('foos.index')") == "should redirect to url_for('foos.index')"
    assert descriptions.not_redirect("/") == "should not redirect to /"
    assert descriptions.redirect_to_referer() == "should redirect to the referring page"


def test_require_user():
    assert (
        descriptions.require_user(("new", "create"), None, {"preview": "post"})
        == "should require a user for actions new, create, preview"
    )
