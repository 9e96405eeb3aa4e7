"""The example-group base class pytest collects.

Subclass :class:`ControllerSpec` with a ``Test`` prefix, point it at a
controller, declare the request and list the examples::

    class TestFoosCreate(ControllerSpec):
        controller_class = FoosController
        the_request = define_request("post", "create", foo={"name": "bar"})

        examples = [
            it_should_initialize_and_save("foo"),
            it_should_set_flash("notice", "Foo created"),
            it_should_redirect_to(lambda spec: spec.url_for("foos.index")),
        ]

        def setup_example(self):
            self.foo = self.stub_create(Foo)

Every example runs on a fresh instance: a new harness, a new mock space and
``setup_example``; every patched method is restored afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any, ClassVar

import pytest
from flask import Flask

from skinnyspec.adapters.web import ControllerHarness, create_app
from skinnyspec.config import Settings, load_settings
from skinnyspec.domain.errors import SkinnySpecError

from .common import CommonSpecHelpers
from .examples import Example, flatten_examples, method_name_for
from .mocking import MockSpace
from .nested import NestedResourceHelpers
from .requests import ControllerRequestHelpers
from .restful import RestfulHelpers
from .stubs import ControllerStubHelpers

logger = logging.getLogger(__name__)


def _example_test(example: Example, name: str) -> Callable[[Any], None]:
    def test(self: Any) -> None:
        example.run(self)

    test.__name__ = test.__qualname__ = name
    test.__doc__ = example.description
    test.example = example  # type: ignore[attr-defined]
    return test


class ControllerSpec(
    NestedResourceHelpers,
    RestfulHelpers,
    ControllerStubHelpers,
    ControllerRequestHelpers,
    CommonSpecHelpers,
):
    """Base class for controller example groups.

    Class attributes:
        controller_class: Controller under test (required).
        the_request: Request the examples evaluate (``define_request(...)``).
        examples: Macro results to expand into ``test_*`` methods.
        models: Explicit ``name -> model class`` registrations.
        model_namespace: Module searched for model classes.
        nested_under: Singular parent resource name for nested controllers.
        settings: Settings to use instead of the environment.
    """

    examples: ClassVar[Any] = ()
    settings: ClassVar[Settings | None] = None

    # Per-example state, set up by the autouse fixture below.
    harness: ControllerHarness
    mocks: MockSpace

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        own = cls.__dict__.get("examples", ())
        if not own:
            return
        taken = {name for name in dir(cls) if name.startswith("test")}
        examples = flatten_examples(own)
        for example in examples:
            name = method_name_for(example.description, taken)
            setattr(cls, name, _example_test(example, name))
        logger.debug("Expanded %d examples on %s", len(examples), cls.__qualname__)

    @classmethod
    def generated_examples(cls) -> list[tuple[str, Example]]:
        """``(method name, example)`` pairs in definition order, inherited ones included."""
        found: list[tuple[str, Example]] = []
        seen: set[str] = set()
        for klass in reversed(cls.__mro__):
            for name, value in vars(klass).items():
                if name not in seen and isinstance(getattr(value, "example", None), Example):
                    seen.add(name)
                    found.append((name, value.example))
        return found

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @pytest.fixture(autouse=True)
    def skinnyspec_example_context(self) -> Iterator[None]:
        self.setup_context()
        try:
            self.setup_example()
            yield
        finally:
            self.teardown_context()

    def setup_context(self) -> None:
        controller_class = type(self).controller_class
        if controller_class is None:
            raise SkinnySpecError(f"{type(self).__name__} must set controller_class")
        self.settings = type(self).settings or load_settings()
        self.mocks = MockSpace()
        self.harness = ControllerHarness(
            controller_class, app=self.create_app(), settings=self.settings
        )

    def teardown_context(self) -> None:
        self.mocks.reset()

    def setup_example(self) -> None:
        """Hook for per-example setup: stub models, set ``self.<name>``."""

    def create_app(self) -> Flask:
        """Build the app the example's requests go through.

        The default routes only the controller under test; override it to
        route other controllers the examples build URLs for.
        """
        return create_app(self.settings, [type(self).controller_class])

    def verify_mocks(self) -> None:
        self.mocks.verify()
