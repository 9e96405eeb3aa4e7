"""Unit tests for skinnyspec.helpers.mocking."""

import pytest

from skinnyspec.helpers.mocking import (
    HashIncluding,
    MockSpace,
    arguments_match,
    format_call,
    hash_including,
)

# pylint: disable=redefined-outer-name


class Widget:
    @classmethod
    def find(cls, *args, **options):
        return ("real find", args, options)

    def save(self):
        return "real save"


@pytest.fixture
def mocks():
    space = MockSpace()
    yield space
    space.reset()


class TestHashIncluding:
    """Tests for the hash_including matcher."""

    @staticmethod
    def test_matches_supersets() -> None:
        matcher = hash_including(name="bar")
        assert matcher == {"name": "bar", "size": 2}
        assert {"name": "bar"} == matcher
        assert matcher != {"name": "baz"}
        assert matcher != {"size": 2}

    @staticmethod
    def test_never_equals_non_mappings() -> None:
        assert hash_including(name="bar") != ["name"]
        assert hash_including() != "name"

    @staticmethod
    def test_merges_mapping_and_keywords() -> None:
        assert hash_including({"a": 1}, b=2).subset == {"a": 1, "b": 2}

    @staticmethod
    def test_repr_and_hash() -> None:
        assert repr(HashIncluding({"a": 1})) == "hash_including({'a': 1})"
        with pytest.raises(TypeError):
            hash(HashIncluding({}))


@pytest.mark.parametrize(
    "expected, call, matches",
    [
        ((("all",), {}), (("all",), {}), True),
        ((("all",), {}), ((3,), {}), False),
        (((), {"limit": 1}), ((), {"limit": 1}), True),
        (((), {"limit": 1}), ((), {"limit": 2}), False),
        # a trailing hash_including also matches keyword options
        ((("all", hash_including(order="name")), {}), (("all",), {"order": "name", "limit": 5}), True),
        ((("all", hash_including(order="name")), {}), (("all",), {"order": "id"}), False),
        ((("all", hash_including(order="name")), {}), (("first",), {"order": "name"}), False),
        # ...or a positional mapping
        (((hash_including(name="bar"),), {}), (({"name": "bar", "x": 1},), {}), True),
    ],
)
def test_arguments_match(expected, call, matches):
    assert arguments_match(*expected, *call) is matches


def test_format_call():
    assert format_call((1, "a"), {"limit": 2}) == "(1, 'a', limit=2)"
    assert format_call((), {}) == "()"


class TestExpectations:
    """Tests for should_receive / should_not_receive / stub."""

    @staticmethod
    def test_expected_call_returns_value_and_verifies(mocks) -> None:
        mocks.should_receive(Widget, "find").with_args(1).and_return("stubbed")
        assert Widget.find(1) == "stubbed"
        mocks.verify()

    @staticmethod
    def test_reset_restores_the_original(mocks) -> None:
        mocks.should_receive(Widget, "find").and_return("stubbed")
        Widget.find()
        mocks.reset()
        assert Widget.find(1)[0] == "real find"

    @staticmethod
    def test_missing_call_fails_verification(mocks) -> None:
        mocks.should_receive(Widget, "find").with_args("all")
        with pytest.raises(AssertionError, match=r"expected Widget.find to be called with \('all'\) once, but it was called 0 times"):
            mocks.verify()

    @staticmethod
    def test_unexpected_arguments_fail_immediately(mocks) -> None:
        mocks.should_receive(Widget, "find").with_args("all")
        with pytest.raises(AssertionError, match=r"Widget.find received unexpected arguments \(7\)"):
            Widget.find(7)

    @staticmethod
    def test_call_count(mocks) -> None:
        mocks.should_receive(Widget, "find").exactly(2)
        Widget.find()
        with pytest.raises(AssertionError, match="called with \\(any args\\) twice, but it was called once"):
            mocks.verify()
        Widget.find()
        mocks.verify()

    @staticmethod
    def test_calling_twice_when_once_is_expected_fails(mocks) -> None:
        mocks.should_receive(Widget, "find")
        Widget.find()
        Widget.find()
        with pytest.raises(AssertionError, match="but it was called twice"):
            mocks.verify()

    @staticmethod
    def test_any_number_of_times(mocks) -> None:
        mocks.should_receive(Widget, "find").any_number_of_times()
        mocks.verify()
        Widget.find()
        Widget.find()
        mocks.verify()

    @staticmethod
    def test_and_raise(mocks) -> None:
        mocks.should_receive(Widget, "find").and_raise(LookupError("gone"))
        with pytest.raises(LookupError, match="gone"):
            Widget.find(1)

    @staticmethod
    def test_forbidden_call_fails_immediately(mocks) -> None:
        mocks.should_not_receive(Widget, "find")
        with pytest.raises(AssertionError, match=r"expected Widget.find not to be called with \(any args\)"):
            Widget.find(1)

    @staticmethod
    def test_forbidden_arguments_only(mocks) -> None:
        mocks.stub(Widget, "find", "one widget")
        mocks.should_not_receive(Widget, "find").with_args("all")
        assert Widget.find(3) == "one widget"
        with pytest.raises(AssertionError):
            Widget.find("all")
        # negative expectations never fail verification by themselves
        mocks.should_not_receive(Widget, "save")
        mocks.verify()

    @staticmethod
    def test_expectations_take_precedence_over_stubs(mocks) -> None:
        mocks.stub(Widget, "find", "stub")
        mocks.should_receive(Widget, "find").with_args(1).and_return("expected")
        assert Widget.find(1) == "expected"
        mocks.verify()

    @staticmethod
    def test_newest_stub_wins(mocks) -> None:
        mocks.stub(Widget, "find", "old")
        mocks.stub(Widget, "find", "new")
        assert Widget.find() == "new"

    @staticmethod
    def test_unmatched_calls_without_constraints_return_none(mocks) -> None:
        mocks.stub(Widget, "find", "only for 1").with_args(1)
        assert Widget.find(2) is None


class TestInstances:
    """Patching single instances."""

    @staticmethod
    def test_stub_only_affects_one_instance(mocks) -> None:
        widget, other = Widget(), Widget()
        mocks.stub(widget, "save", False)
        assert widget.save() is False
        assert other.save() == "real save"
        mocks.reset()
        assert widget.save() == "real save"

    @staticmethod
    def test_missing_methods_can_be_stubbed(mocks) -> None:
        widget = Widget()
        mocks.stub(widget, "to_csv", "a,b")
        assert widget.to_csv() == "a,b"
        mocks.reset()
        assert not hasattr(widget, "to_csv")

    @staticmethod
    def test_labels_use_repr_for_instances(mocks) -> None:
        widget = Widget()
        mocks.should_receive(widget, "save")
        with pytest.raises(AssertionError, match=r"expected <.*Widget object at .*>\.save"):
            mocks.verify()


def test_context_manager_resets():
    with MockSpace() as space:
        space.stub(Widget, "find", "inside")
        assert Widget.find() == "inside"
    assert Widget.find()[0] == "real find"


def test_one_double_per_target_and_name(mocks):
    assert mocks.double_for(Widget, "find") is mocks.double_for(Widget, "find")
    assert mocks.double_for(Widget, "find") is not mocks.double_for(Widget, "save")
