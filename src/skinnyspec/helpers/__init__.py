"""The example-group DSL.

Import everything a controller spec module needs from here::

    from skinnyspec.helpers import ControllerSpec, define_request, it_should_find
"""

from skinnyspec.domain.sentinels import ALL, NIL, NOT_NIL, UNDEFINED

from .examples import Example, ExampleSet, example
from .group import ControllerSpec
from .macros import (
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
    it_should_not_initialize,
    it_should_not_initialize_and_assign,
    it_should_not_redirect_to,
    it_should_not_save,
    it_should_not_set_cookies,
    it_should_not_set_flash,
    it_should_not_set_params,
    it_should_not_set_session,
    it_should_not_update,
    it_should_redirect_to,
    it_should_redirect_to_referer,
    it_should_redirect_to_referrer,
    it_should_render,
    it_should_render_formatted,
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
from .mocking import MockSpace, hash_including
from .requests import (
    RequestDefinition,
    create_content_type_expectation,
    create_status_expectation,
    define_request,
)
from .stubs import StubCollection

__all__ = [
    "ALL",
    "NIL",
    "NOT_NIL",
    "UNDEFINED",
    "ControllerSpec",
    "Example",
    "ExampleSet",
    "MockSpace",
    "RequestDefinition",
    "StubCollection",
    "create_content_type_expectation",
    "create_status_expectation",
    "define_request",
    "example",
    "hash_including",
    "it_should_assign",
    "it_should_destroy",
    "it_should_find",
    "it_should_find_and_assign",
    "it_should_find_and_destroy",
    "it_should_find_and_update",
    "it_should_initialize",
    "it_should_initialize_and_assign",
    "it_should_initialize_and_save",
    "it_should_not_assign",
    "it_should_not_destroy",
    "it_should_not_find",
    "it_should_not_find_and_assign",
    "it_should_not_initialize",
    "it_should_not_initialize_and_assign",
    "it_should_not_redirect_to",
    "it_should_not_save",
    "it_should_not_set_cookies",
    "it_should_not_set_flash",
    "it_should_not_set_params",
    "it_should_not_set_session",
    "it_should_not_update",
    "it_should_redirect_to",
    "it_should_redirect_to_referer",
    "it_should_redirect_to_referrer",
    "it_should_render",
    "it_should_render_formatted",
    "it_should_render_json",
    "it_should_render_nothing",
    "it_should_render_partial",
    "it_should_render_template",
    "it_should_render_xml",
    "it_should_require_user",
    "it_should_save",
    "it_should_set",
    "it_should_set_cookies",
    "it_should_set_flash",
    "it_should_set_params",
    "it_should_set_session",
    "it_should_update",
]
