"""Pool error classes.

Every failure of a pool operation is raised as a PoolError subclass before
any state is mutated, so callers always observe all-or-nothing behavior.
"""


class PoolError(Exception):
    """Base error for pool operations."""

    pass


class SafeIntError(ArithmeticError):
    """Base class for checked integer arithmetic errors."""

    pass


class DivisionByZero(SafeIntError):
    """Division by zero."""

    pass


class Underflow(SafeIntError):
    """Subtraction would produce a negative amount."""

    pass


class ArithmeticOverflow(PoolError, SafeIntError):
    """An intermediate product or sum exceeds the uint256 range."""

    pass


class InvalidAmount(PoolError):
    """A required amount is zero, negative, or not an integer."""

    pass


class InvalidIdentifier(PoolError):
    """An asset or account identifier is missing, malformed, or not part of the pool."""

    pass


class InsufficientLiquidity(PoolError):
    """The operation needs positive reserves but at least one is zero."""

    pass


class InsufficientLiquidityForSwap(PoolError):
    """The swap output would meet or exceed the output-side reserve."""

    pass


class InsufficientOutputAmount(PoolError):
    """The swap output rounds down to zero."""

    pass


class InsufficientSharesMinted(PoolError):
    """The deposit is too small to mint a single share."""

    pass


class InsufficientSharesBurned(PoolError):
    """The redemption is too small to return a non-zero amount of both assets."""

    pass


class InsufficientShareBalance(PoolError):
    """The provider is trying to burn more shares than they own."""

    pass


class NoLiquidity(PoolError):
    """Price requested from a pool with no reserves."""

    pass


class TransferFailed(PoolError):
    """The asset ledger refused to move funds."""

    pass


class InvariantViolation(PoolError):
    """A post-condition on the pool state does not hold."""

    pass


class UnwindFailed(PoolError):
    """A failed operation could not be undone because the ledger refused to
    return a payout. The pool keeps the steps made up to that payout, so its
    state matches what the ledger actually moved.
    """

    pass
