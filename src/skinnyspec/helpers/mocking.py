"""Message expectations on top of :mod:`unittest.mock`.

A :class:`MockSpace` patches methods on classes or instances with
``unittest.mock.patch.object`` and keeps per-method bookkeeping so an example
can say what it expects to happen:

    mocks.should_receive(Foo, "find").with_args("all").and_return(foos)
    mocks.should_not_receive(foo, "destroy")
    mocks.stub(foo, "save", return_value=False)
    ...
    mocks.verify()   # positive expectations matched exactly once
    mocks.reset()    # restore every patched attribute

Expectations are consulted newest first, then stubs. A call whose arguments
match no expectation while a positive expectation with arguments exists fails
immediately, as does any call matching a negative expectation.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from contextlib import ExitStack
from enum import Enum
from typing import Any, Self
from unittest import mock

logger = logging.getLogger(__name__)

# pylint: disable=too-few-public-methods


class HashIncluding:
    """Argument matcher equal to any mapping that contains ``subset``."""

    def __init__(self, subset: Mapping[str, Any]) -> None:
        self.subset = dict(subset)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        return all(key in other and other[key] == value for key, value in self.subset.items())

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"hash_including({self.subset!r})"


def hash_including(subset: Mapping[str, Any] | None = None, /, **entries: Any) -> HashIncluding:
    """Build a :class:`HashIncluding` matcher from a mapping and/or keywords."""
    return HashIncluding({**(subset or {}), **entries})


def arguments_match(
    expected_args: tuple[Any, ...],
    expected_kwargs: Mapping[str, Any],
    args: tuple[Any, ...],
    kwargs: Mapping[str, Any],
) -> bool:
    """Compare a call against expected arguments.

    A trailing :class:`HashIncluding` in the expected positional arguments also
    matches options passed as keyword arguments (``find("all", conditions=...)``).
    """
    if (
        expected_args
        and isinstance(expected_args[-1], HashIncluding)
        and not expected_kwargs
        and kwargs
        and len(args) == len(expected_args) - 1
    ):
        return list(args) == list(expected_args[:-1]) and expected_args[-1] == dict(kwargs)
    return list(args) == list(expected_args) and dict(kwargs) == dict(expected_kwargs)


def format_call(args: tuple[Any, ...], kwargs: Mapping[str, Any]) -> str:
    parts = [repr(arg) for arg in args]
    parts.extend(f"{key}={value!r}" for key, value in kwargs.items())
    return f"({', '.join(parts)})"


def label_for(target: Any) -> str:
    if isinstance(target, type):
        return target.__name__
    return repr(target)


class Kind(Enum):
    """How an expectation participates in dispatch and verification."""

    EXPECT = "expect"
    FORBID = "forbid"
    ALLOW = "allow"


class MessageExpectation:
    """One expected, forbidden or allowed message on a patched method."""

    def __init__(self, double: MethodDouble, kind: Kind) -> None:
        self.double = double
        self.kind = kind
        self.expected_args: tuple[Any, ...] | None = None
        self.expected_kwargs: dict[str, Any] = {}
        self.expected_count: int | None = 1 if kind is Kind.EXPECT else None
        self.call_count = 0
        self._return_value: Any = None
        self._exception: BaseException | None = None

    # -- fluent configuration ---------------------------------------------

    def with_args(self, *args: Any, **kwargs: Any) -> Self:
        self.expected_args = args
        self.expected_kwargs = kwargs
        return self

    def and_return(self, value: Any) -> Self:
        self._return_value = value
        return self

    def and_raise(self, exception: BaseException) -> Self:
        self._exception = exception
        return self

    def exactly(self, count: int) -> Self:
        self.expected_count = count
        return self

    def any_number_of_times(self) -> Self:
        self.expected_count = None
        return self

    # -- dispatch -----------------------------------------------------------

    @property
    def constrains_arguments(self) -> bool:
        return self.expected_args is not None

    def matches(self, args: tuple[Any, ...], kwargs: Mapping[str, Any]) -> bool:
        if self.expected_args is None:
            return True
        return arguments_match(self.expected_args, self.expected_kwargs, args, kwargs)

    def invoke(self, args: tuple[Any, ...], kwargs: Mapping[str, Any]) -> Any:
        self.call_count += 1
        if self.kind is Kind.FORBID:
            raise AssertionError(
                f"expected {self.double.label} not to be called with {self.describe_args()}, "
                f"but it was called with {format_call(args, kwargs)}"
            )
        if self._exception is not None:
            raise self._exception
        return self._return_value

    # -- reporting ----------------------------------------------------------

    def describe_args(self) -> str:
        if self.expected_args is None:
            return "(any args)"
        return format_call(self.expected_args, self.expected_kwargs)

    def failure(self) -> str | None:
        """Return a failure message, or None when the expectation is satisfied."""
        if self.kind is not Kind.EXPECT or self.expected_count is None:
            return None
        if self.call_count == self.expected_count:
            return None
        return (
            f"expected {self.double.label} to be called with {self.describe_args()} "
            f"{_times(self.expected_count)}, but it was called {_times(self.call_count)}"
        )


def _times(count: int) -> str:
    return {0: "0 times", 1: "once", 2: "twice"}.get(count, f"{count} times")


class MethodDouble:
    """Replacement for one attribute of one target, shared by its expectations."""

    def __init__(self, target: Any, name: str, stack: ExitStack) -> None:
        self.target = target
        self.name = name
        self.label = f"{label_for(target)}.{name}"
        self.expectations: list[MessageExpectation] = []
        self.stubs: list[MessageExpectation] = []
        self.mock = mock.MagicMock(name=self.label, side_effect=self._dispatch)
        stack.enter_context(mock.patch.object(target, name, self.mock, create=True))

    def add(self, kind: Kind) -> MessageExpectation:
        expectation = MessageExpectation(self, kind)
        if kind is Kind.ALLOW:
            self.stubs.append(expectation)
        else:
            self.expectations.append(expectation)
        return expectation

    def _dispatch(self, *args: Any, **kwargs: Any) -> Any:
        for expectation in reversed(self.expectations):
            if expectation.matches(args, kwargs):
                return expectation.invoke(args, kwargs)
        for stub in reversed(self.stubs):
            if stub.matches(args, kwargs):
                return stub.invoke(args, kwargs)
        expected = [e for e in self.expectations if e.kind is Kind.EXPECT and e.constrains_arguments]
        if expected:
            raise AssertionError(
                f"{self.label} received unexpected arguments {format_call(args, kwargs)}; "
                f"expected {' or '.join(e.describe_args() for e in expected)}"
            )
        return None


class MockSpace:
    """All method doubles created during one example."""

    def __init__(self) -> None:
        self._stack = ExitStack()
        self._doubles: dict[tuple[int, str], MethodDouble] = {}

    def double_for(self, target: Any, name: str) -> MethodDouble:
        key = (id(target), name)
        if (double := self._doubles.get(key)) is None:
            double = MethodDouble(target, name, self._stack)
            self._doubles[key] = double
        return double

    def should_receive(self, target: Any, name: str) -> MessageExpectation:
        logger.debug("Expecting %s.%s", label_for(target), name)
        return self.double_for(target, name).add(Kind.EXPECT)

    def should_not_receive(self, target: Any, name: str) -> MessageExpectation:
        logger.debug("Forbidding %s.%s", label_for(target), name)
        return self.double_for(target, name).add(Kind.FORBID)

    def stub(self, target: Any, name: str, return_value: Any = None) -> MessageExpectation:
        return self.double_for(target, name).add(Kind.ALLOW).and_return(return_value)

    def verify(self) -> None:
        """Raise ``AssertionError`` listing every unsatisfied expectation."""
        failures = [
            message
            for double in self._doubles.values()
            for expectation in double.expectations
            if (message := expectation.failure()) is not None
        ]
        if failures:
            raise AssertionError("\n".join(failures))

    def reset(self) -> None:
        """Restore every patched attribute and forget all doubles."""
        self._stack.close()
        self._doubles.clear()
        self._stack = ExitStack()

    def __enter__(self) -> MockSpace:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.reset()
