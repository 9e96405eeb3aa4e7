"""Errors raised by the example-group DSL.

Failed expectations are plain ``AssertionError``s so pytest reports them as
test failures; the classes below flag *misuse* of the DSL itself.
"""


class SkinnySpecError(Exception):
    """Base class for DSL usage errors."""


class MissingRenderTargetError(SkinnySpecError, ValueError):
    """Raised when a formatted-render expectation has no record and no block."""

    def __init__(self) -> None:
        super().__init__(
            "it_should_render must be called with either a record or a block "
            "and neither was given."
        )


class UnknownRenderMethodError(SkinnySpecError, LookupError):
    """Raised when ``it_should_render`` is given an unsupported render method."""

    def __init__(self, render_method: str) -> None:
        super().__init__(f"No it_should_render_{render_method} expectation exists.")
        self.render_method = render_method


class UnknownCollectionError(SkinnySpecError, LookupError):
    """Raised when ``it_should_set`` names something other than flash/session/params/cookies."""

    def __init__(self, collection: str) -> None:
        super().__init__(
            f"Unknown collection {collection!r}; "
            "expected one of flash, session, params, cookies."
        )
        self.collection = collection


class UnknownModelError(SkinnySpecError, LookupError):
    """Raised when a resource name cannot be resolved to a model class."""

    def __init__(self, name: str, class_name: str) -> None:
        super().__init__(
            f"Cannot resolve model class {class_name!r} for resource {name!r}; "
            "register it in the example group's `models` mapping."
        )
        self.name = name
        self.class_name = class_name


class MissingInstanceError(SkinnySpecError, LookupError):
    """Raised when an expectation needs ``self.<name>`` and the example never set it."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Example has no {name!r} instance; set self.{name} in setup_example()."
        )
        self.name = name


class MissingRequestError(SkinnySpecError):
    """Raised when ``eval_request`` runs in a group without ``the_request``."""

    def __init__(self, group: str) -> None:
        super().__init__(
            f"{group} does not define a request; "
            "declare `the_request = define_request(verb, action, ...)`."
        )
        self.group = group
