"""Tests for spindle.core.errors module."""

import pytest

from spindle.core.errors import (
    AggregateError,
    ConfigError,
    ErrorCategory,
    InvalidArgumentError,
    SpindleError,
    categorize_error,
    is_retryable,
)


def _raised(error: Exception) -> Exception:
    """Raise and catch ``error`` so it carries a traceback."""
    try:
        raise error
    except Exception as e:
        return e


class TestSpindleError:
    """Test the base error type."""

    def test_defaults(self):
        error = SpindleError("Something went wrong")
        assert error.message == "Something went wrong"
        assert str(error) == "Something went wrong"
        assert error.category == ErrorCategory.INTERNAL
        assert error.retryable is False
        assert error.cause is None

    def test_cause_is_chained(self):
        original = ConnectionError("DNS failure")
        error = SpindleError("Network error", cause=original)
        assert error.cause is original
        assert error.__cause__ is original

    def test_to_dict(self):
        error = SpindleError(
            "Test error",
            category=ErrorCategory.VALIDATION,
            cause=ValueError("inner"),
        )
        d = error.to_dict()
        assert d["error_type"] == "SpindleError"
        assert d["message"] == "Test error"
        assert d["category"] == "VALIDATION"
        assert d["retryable"] is False
        assert d["cause"] == "inner"

    def test_repr(self):
        assert repr(SpindleError("boom")) == "SpindleError('boom', category=INTERNAL)"


class TestSubclasses:
    def test_invalid_argument_is_value_error(self):
        error = InvalidArgumentError("limit must be positive")
        assert isinstance(error, ValueError)
        assert isinstance(error, SpindleError)
        assert error.category == ErrorCategory.VALIDATION
        assert error.retryable is False

    def test_config_error_category(self):
        assert ConfigError("bad").category == ErrorCategory.CONFIG


class TestAggregateError:
    """Test the aggregate error container."""

    def test_holds_errors_in_order(self):
        first, second = ValueError("a"), KeyError("b")
        error = AggregateError([first, second])
        assert error.errors == [first, second]

    def test_message_states_count(self):
        error = AggregateError([ValueError("a"), ValueError("b"), ValueError("c")])
        assert error.message == "AggregateError with 3 errors"
        assert str(error) == "AggregateError with 3 errors"

    def test_name_from_first_error(self):
        error = AggregateError([TypeError("a"), ValueError("b")])
        assert error.name == "AggregateError(TypeError...)"

    def test_name_prefers_name_attribute(self):
        class Named(Exception):
            name = "UpstreamFailure"

        error = AggregateError([Named("x")])
        assert error.name == "AggregateError(UpstreamFailure...)"

    def test_name_skips_empty_name_attribute(self):
        class Blank(Exception):
            name = ""

        error = AggregateError([Blank("x")])
        assert error.name == "AggregateError(Blank...)"

    def test_name_uses_only_first_error(self):
        class Named(Exception):
            name = "UpstreamFailure"

        error = AggregateError([KeyError("k"), Named("x")])
        assert error.name == "AggregateError(KeyError...)"

    def test_empty_list(self):
        error = AggregateError([])
        assert error.errors == []
        assert error.name == "AggregateError(...)"
        assert error.message == "AggregateError with 0 errors"

    def test_stack_borrowed_from_first_raised_error(self):
        never_raised = ValueError("never raised")
        raised = _raised(KeyError("raised"))
        error = AggregateError([never_raised, raised])
        assert "KeyError" in error.stack
        assert "_raised" in error.stack

    def test_stack_falls_back_to_own(self):
        error = AggregateError([ValueError("never raised")])
        assert "AggregateError with 1 errors" in error.stack

    def test_category_and_retryable(self):
        error = AggregateError([ValueError("a")])
        assert error.category == ErrorCategory.EXECUTION
        assert error.retryable is False

    def test_retryable_when_all_wrapped_errors_are(self):
        error = AggregateError([ConnectionError("a"), TimeoutError("b")])
        assert error.retryable is True

    def test_to_dict_lists_errors(self):
        d = AggregateError([ValueError("bad 2")]).to_dict()
        assert d["error_type"] == "AggregateError"
        assert d["name"] == "AggregateError(ValueError...)"
        assert d["errors"] == [{"error_type": "ValueError", "message": "bad 2"}]

    def test_is_raisable(self):
        with pytest.raises(AggregateError) as exc_info:
            raise AggregateError([RuntimeError("x")])
        assert len(exc_info.value.errors) == 1


class TestUtilities:
    def test_is_retryable(self):
        assert is_retryable(ConnectionError()) is True
        assert is_retryable(TimeoutError()) is True
        assert is_retryable(ValueError()) is False
        assert is_retryable(SpindleError("x", retryable=True)) is True

    def test_categorize_error(self):
        assert categorize_error(InvalidArgumentError("x")) == ErrorCategory.VALIDATION
        assert categorize_error(ValueError("x")) == ErrorCategory.VALIDATION
        assert categorize_error(RuntimeError("x")) == ErrorCategory.UNKNOWN
