"""Tests for SafeInt checked arithmetic."""

import pytest

from dex.constants import UINT256_MAX
from dex.errors import (
    ArithmeticOverflow,
    DivisionByZero,
    PoolError,
    SafeIntError,
    Underflow,
)
from dex.safe_int import S, SafeInt


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        """SafeInt can be constructed from int."""
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        """SafeInt can be constructed from another SafeInt."""
        assert SafeInt(SafeInt(42)).value == 42

    def test_bounds(self):
        """Zero and uint256 max are both representable."""
        assert SafeInt(0).value == 0
        assert SafeInt(UINT256_MAX).value == UINT256_MAX

    def test_negative_raises(self):
        """Negative values are not uint256."""
        with pytest.raises(Underflow):
            SafeInt(-1)

    def test_above_max_raises(self):
        """Values above uint256 max overflow."""
        with pytest.raises(ArithmeticOverflow):
            SafeInt(UINT256_MAX + 1)

    def test_invalid_type_raises(self):
        """SafeInt rejects non-integers, including bools."""
        with pytest.raises(TypeError):
            SafeInt("42")  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            SafeInt(3.14)  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            SafeInt(True)

    def test_alias(self):
        """S is an alias for SafeInt."""
        assert S is SafeInt


class TestSafeIntArithmetic:
    """Tests for SafeInt arithmetic operations."""

    def test_add(self):
        assert (S(10) + S(5)).value == 15
        assert (S(10) + 5).value == 15

    def test_add_overflow(self):
        """Sum past uint256 max raises instead of wrapping."""
        with pytest.raises(ArithmeticOverflow):
            S(UINT256_MAX) + 1

    def test_sub(self):
        assert (S(10) - S(3)).value == 7
        assert (S(5) - 5).value == 0

    def test_sub_underflow(self):
        """Subtraction below zero raises Underflow."""
        with pytest.raises(Underflow) as exc_info:
            S(5) - S(10)
        assert "5 - 10" in str(exc_info.value)

    def test_mul(self):
        assert (S(6) * S(7)).value == 42

    def test_mul_overflow(self):
        """Product of two 2**128 values does not fit in uint256."""
        with pytest.raises(ArithmeticOverflow):
            S(2**128) * S(2**128)

    def test_mul_at_limit(self):
        """(2**128 - 1)**2 still fits."""
        assert (S(2**128 - 1) * S(2**128 - 1)).value == (2**128 - 1) ** 2

    def test_floordiv_rounds_down(self):
        assert (S(1994000) // S(109970)).value == 18
        assert (S(7) // 2).value == 3

    def test_floordiv_by_zero(self):
        with pytest.raises(DivisionByZero):
            S(10) // 0

    def test_min(self):
        assert S(70).min(71).value == 70
        assert S(71).min(S(70)).value == 70


class TestSafeIntComparison:
    """Tests for equality and representation."""

    def test_equality(self):
        assert S(3) == 3
        assert S(3) == S(3)
        assert S(3) != 4

    def test_repr(self):
        assert str(S(5)) == "5"
        assert repr(S(5)) == "SafeInt(5)"


class TestErrorHierarchy:
    """Overflow is both a pool error and an arithmetic error."""

    def test_overflow_is_pool_error(self):
        assert issubclass(ArithmeticOverflow, PoolError)
        assert issubclass(ArithmeticOverflow, SafeIntError)
        assert issubclass(ArithmeticOverflow, ArithmeticError)

    def test_underflow_is_arithmetic_error(self):
        assert issubclass(Underflow, ArithmeticError)
        assert issubclass(DivisionByZero, ArithmeticError)
