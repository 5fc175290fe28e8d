"""Tests for fgp.core.validated module."""

from fgp.core.result import Err, Ok
from fgp.core.validated import (
    Invalid,
    Valid,
    from_result,
    sequence_validated,
    to_result,
    traverse_validated,
    zip_validated,
)


def positive(n: int):
    return Valid(n) if n > 0 else Invalid([f"{n} is not positive"])


class TestValidated:
    """Test Valid and Invalid."""

    def test_valid(self):
        checked = Valid(3)
        assert checked.is_valid() is True
        assert checked.errors == ()
        assert checked.unsafe_value() == 3
        assert checked.map(lambda n: n * 2) == Valid(6)

    def test_invalid_copies_errors(self):
        """Errors are stored as an immutable tuple independent of the input list."""
        source = ["a"]
        checked = Invalid(source)
        source.append("b")
        assert checked.errors == ("a",)
        assert checked.is_valid() is False
        assert checked.unsafe_value() is None

    def test_invalid_without_errors_is_still_invalid(self):
        assert Invalid().is_valid() is False

    def test_invalid_map_keeps_errors(self):
        assert Invalid(["e"]).map(lambda n: n * 2) == Invalid(("e",))


class TestCombinators:
    """Test error accumulation."""

    def test_zip_accumulates_both_sides(self):
        assert zip_validated(Valid(1), Valid("a")) == Valid((1, "a"))
        assert zip_validated(Invalid(["x"]), Invalid(["y"])).errors == ("x", "y")
        assert zip_validated(Valid(1), Invalid(["y"])).errors == ("y",)

    def test_traverse_collects_every_error(self):
        checked = traverse_validated([1, -2, -3], positive)
        assert checked.errors == ("-2 is not positive", "-3 is not positive")

    def test_traverse_all_valid(self):
        assert traverse_validated([1, 2], positive) == Valid([1, 2])

    def test_empty_input(self):
        assert traverse_validated([], positive) == Valid([])
        assert sequence_validated([]) == Valid([])

    def test_sequence(self):
        assert sequence_validated([Valid(1), Invalid(["a"]), Invalid(["b"])]).errors == ("a", "b")


class TestResultInterop:
    """Test conversions to and from Result."""

    def test_from_result(self):
        error = ValueError("bad")
        assert from_result(Ok(1)) == Valid(1)
        assert from_result(Err(error)) == Invalid((error,))

    def test_to_result_single_error_unwrapped(self):
        error = ValueError("bad")
        assert to_result(Invalid([error])) == Err(error)

    def test_to_result_joins_errors(self):
        first, second = ValueError("a"), KeyError("b")
        result = to_result(Invalid([first, second]))
        assert isinstance(result.error, ExceptionGroup)
        assert list(result.error.exceptions) == [first, second]

    def test_to_result_valid(self):
        assert to_result(Valid(5)) == Ok(5)
