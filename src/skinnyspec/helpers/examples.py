"""Generated examples and their expansion into pytest test methods.

A macro such as ``it_should_find("foos")`` returns an :class:`ExampleSet`:
descriptions paired with bodies that take the running example group
instance. :class:`~skinnyspec.helpers.group.ControllerSpec` turns each one
into a ``test_*`` method named after its description.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

type ExampleBody = Callable[[Any], None]


@dataclass(frozen=True, slots=True)
class Example:
    """One generated test: a description and a body run against the example."""

    description: str
    body: ExampleBody

    def run(self, spec: Any) -> None:
        """Run the body, then verify every mock expectation it registered."""
        logger.debug("Running example %r", self.description)
        self.body(spec)
        spec.verify_mocks()


class ExampleSet(tuple[Example, ...]):
    """The examples declared by one macro call, in declaration order."""

    __slots__ = ()

    def __new__(cls, examples: Iterable[Example] = ()) -> ExampleSet:
        return super().__new__(cls, flatten_examples(examples))

    @property
    def descriptions(self) -> list[str]:
        return [example.description for example in self]


def flatten_examples(items: Iterable[Any]) -> list[Example]:
    """Flatten nested example sets/lists into a flat list of examples.

    Raises:
        TypeError: If an item is neither an :class:`Example` nor iterable.
    """
    flat: list[Example] = []
    for item in items:
        if isinstance(item, Example):
            flat.append(item)
        elif isinstance(item, (list, tuple)):
            flat.extend(flatten_examples(item))
        else:
            raise TypeError(f"Expected an Example or ExampleSet, got {type(item).__name__}")
    return flat


def example(description: str) -> Callable[[ExampleBody], ExampleSet]:
    """Declare a hand-written example alongside the generated ones.

    Example:
        ```py
        @example("should count the foos")
        def counts_foos(spec):
            spec.eval_request()
            assert spec.assigns["count"] == 3
        ```
    """

    def decorate(body: ExampleBody) -> ExampleSet:
        return ExampleSet([Example(description, body)])

    return decorate


_NON_WORD = re.compile(r"[^0-9a-zA-Z]+")


def method_name_for(description: str, taken: set[str]) -> str:
    """Build a unique ``test_*`` identifier from a description.

    ``"should render 'index' template"`` -> ``test_should_render_index_template``;
    collisions get ``_2``, ``_3``... suffixes. The chosen name is added to
    ``taken``.
    """
    slug = _NON_WORD.sub("_", description).strip("_").lower() or "example"
    name = f"test_{slug}"
    candidate, counter = name, 2
    while candidate in taken:
        candidate = f"{name}_{counter}"
        counter += 1
    taken.add(candidate)
    return candidate

