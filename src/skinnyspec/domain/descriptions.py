"""Naming conventions for generated example descriptions.

Every macro builds its description here so the wording stays consistent and
can be tested without running a request.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .inflection import indefinite_article, is_singular
from .routes import describe_actions
from .sentinels import NIL

_NO_VALUE = object()


def find(name: str) -> str:
    """``should find a foo`` / ``should find an apple`` / ``should find foos``."""
    if is_singular(name):
        return f"should find {indefinite_article(name)} {name}"
    return f"should find {name}"


def not_find(name: str) -> str:
    """``should not find a foo`` / ``should not find foos``."""
    if is_singular(name):
        return f"should not find {indefinite_article(name)} {name}"
    return f"should not find {name}"


def initialize(name: str) -> str:
    return f"should initialize {indefinite_article(name)} {name}"


def not_initialize(name: str) -> str:
    return f"should not initialize {indefinite_article(name)} {name}"


def save(name: str) -> str:
    return f"should save the {name}"


def not_save(name: str) -> str:
    return f"should not save the {name}"


def update(name: str) -> str:
    return f"should update the {name}"


def not_update(name: str) -> str:
    return f"should not update the {name}"


def destroy(name: str) -> str:
    return f"should delete the {name}"


def not_destroy(name: str) -> str:
    return f"should not destroy the {name}"


def assign(name: str, value: object = _NO_VALUE) -> str:
    """``should assign @foo``, or ``should not assign @foo`` for ``NIL``."""
    negation = "not " if value is NIL else ""
    return f"should {negation}assign @{name}"


def set_value(collection: str, key: str, value: object = None) -> str:
    """``should set flash['notice']`` with an optional `` with <repr>`` suffix."""
    suffix = f" with {value!r}" if value is not None else ""
    return f"should set {collection}[{key!r}]{suffix}"


def render_template(name: str) -> str:
    return f"should render {name!r} template"


def render_partial(name: str) -> str:
    return f"should render {name!r} partial"


def render_formatted(format_name: str) -> str:
    return f"should render {format_name!r}"


def render_nothing() -> str:
    return "should render nothing"


def status(code: int) -> str:
    return f"should respond with {code}"


def content_type(value: str) -> str:
    return f"should respond with content type {value!r}"


def redirect(hint: str) -> str:
    return f"should redirect to {hint}"


def not_redirect(hint: str) -> str:
    return f"should not redirect to {hint}"


def redirect_to_referer() -> str:
    return "should redirect to the referring page"


def require_user(
    actions: Iterable[str] = (),
    collection: Mapping[str, str] | None = None,
    member: Mapping[str, str] | None = None,
) -> str:
    """``should require a user for actions new, create, preview``."""
    return f"should require a user for actions {describe_actions(actions, collection, member)}"
