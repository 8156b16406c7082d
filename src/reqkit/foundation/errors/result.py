"""Result monad for request outcomes.

A success carries a value; a failure carries a human-readable message plus an
optional underlying cause (the raw transport error or a constructed one).
Exactly one side is populated.

- Functor: map
- Monad: flat_map (bind)
- Total consumption: match
"""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Callable,
    Generic,
    TypeVar,
    cast,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

T = TypeVar("T")  # Success type
U = TypeVar("U")  # Mapped success type


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class Result(Generic[T]):
    """Discriminated union of success (value) or failure (message + cause).

    Examples:
        >>> Result.success(21).map(lambda x: x * 2).unwrap()
        42

        >>> failed = Result.failure("boom", cause=ValueError("bad"))
        >>> failed.map(lambda x: x * 2).error
        'boom'

        >>> Result.success(1).match(
        ...     lambda v: f"ok {v}",
        ...     lambda msg, cause: f"failed {msg}",
        ... )
        'ok 1'

    Notes:
        - Exceptions raised inside map/flat_map become failures, the thrown
          exception kept as cause
        - Accessing the wrong side raises RuntimeError
    """

    __slots__ = ("_value", "_error", "_cause", "_is_ok")

    def __init__(self, value: T | None, error: str | None, cause: BaseException | None, is_ok: bool) -> None:
        """Private constructor. Use success()/failure() or Ok()/Err() instead."""
        self._value = value
        self._error = error
        self._cause = cause
        self._is_ok = is_ok

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value, None, None, True)

    @classmethod
    def failure(cls, message: str, cause: BaseException | None = None) -> Result[T]:
        return cls(None, message or "Unknown error", cause, False)

    # ─────────────────────────────────────────────────────────────────
    # Type Checking
    # ─────────────────────────────────────────────────────────────────

    def is_ok(self) -> bool:
        return self._is_ok

    def is_err(self) -> bool:
        return not self._is_ok

    @property
    def is_success(self) -> bool:
        return self._is_ok

    @property
    def is_failure(self) -> bool:
        return not self._is_ok

    # ─────────────────────────────────────────────────────────────────
    # Value Extraction
    # ─────────────────────────────────────────────────────────────────

    def unwrap(self) -> T:
        """Extract success value.

        Raises:
            RuntimeError: If Result is a failure
        """
        if self._is_ok:
            return cast(T, self._value)
        raise RuntimeError(f"Cannot access value of failed result: {self._error}")

    @property
    def value(self) -> T:
        return self.unwrap()

    @property
    def error(self) -> str:
        """Failure message.

        Raises:
            RuntimeError: If Result is a success
        """
        if self._is_ok:
            raise RuntimeError("Cannot access error of successful result")
        return cast(str, self._error)

    @property
    def cause(self) -> BaseException | None:
        """Underlying cause of a failure (None on success or when absent)."""
        return self._cause

    def unwrap_or(self, default: T) -> T:
        return cast(T, self._value) if self._is_ok else default

    def ok(self) -> T | None:
        return cast(T, self._value) if self._is_ok else None

    # ─────────────────────────────────────────────────────────────────
    # Functor / Monad
    # ─────────────────────────────────────────────────────────────────

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """Apply f to a success value; failures pass through untouched.

        An exception raised by f becomes a failure with the exception as cause.
        """
        if not self._is_ok:
            return Result.failure(cast(str, self._error), self._cause)
        try:
            return Result.success(f(cast(T, self._value)))
        except Exception as e:
            return Result.failure(f"Mapping failed: {_describe(e)}", e)

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """Monadic bind (>>=) - chain operations that can fail.

        Example:
            >>> def parse_int(s: str) -> Result[int]:
            ...     try:
            ...         return Ok(int(s))
            ...     except ValueError as e:
            ...         return Err(f"invalid int: {s}", e)
            >>>
            >>> Ok("42").flat_map(parse_int).unwrap()
            42
        """
        if not self._is_ok:
            return Result.failure(cast(str, self._error), self._cause)
        try:
            return f(cast(T, self._value))
        except Exception as e:
            return Result.failure(f"FlatMap failed: {_describe(e)}", e)

    def and_then(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """Alias for flat_map."""
        return self.flat_map(f)

    def inspect(self, f: Callable[[T], None]) -> Result[T]:
        """Call f with the success value for side effects, return self."""
        if self._is_ok:
            f(cast(T, self._value))
        return self

    def inspect_err(self, f: Callable[[str, BaseException | None], None]) -> Result[T]:
        if not self._is_ok:
            f(cast(str, self._error), self._cause)
        return self

    # ─────────────────────────────────────────────────────────────────
    # Pattern Matching
    # ─────────────────────────────────────────────────────────────────

    def match(
        self,
        ok: Callable[[T], U],
        err: Callable[[str, BaseException | None], U],
    ) -> U:
        """Exhaustive case analysis - exactly one branch runs, its result is returned."""
        if self._is_ok:
            return ok(cast(T, self._value))
        return err(cast(str, self._error), self._cause)

    # ─────────────────────────────────────────────────────────────────
    # Dunder Methods
    # ─────────────────────────────────────────────────────────────────

    def __bool__(self) -> bool:
        return self._is_ok

    def __repr__(self) -> str:
        if self._is_ok:
            return f"Ok({self._value!r})"
        return f"Err({self._error!r})"

    def __eq__(self, other: object) -> bool:
        """Structural equality (causes are not compared)."""
        if not isinstance(other, Result):
            return NotImplemented
        return self._is_ok == other._is_ok and self._value == other._value and self._error == other._error

    def __hash__(self) -> int:
        return hash((self._is_ok, self._error))

    def __iter__(self) -> Iterator[T]:
        """Yield the success value (0 or 1 element)."""
        if self._is_ok:
            yield cast(T, self._value)


# ═════════════════════════════════════════════════════════════════════════════
# Constructor Functions
# ═════════════════════════════════════════════════════════════════════════════


def Ok(value: T) -> Result[T]:  # noqa: N802
    """Construct a success."""
    return Result.success(value)


def Err(message: str, cause: BaseException | None = None) -> Result[T]:  # noqa: N802
    """Construct a failure."""
    return Result.failure(message, cause)


def try_fn(f: Callable[[], T], message: str = "Operation failed") -> Result[T]:
    """Run f, capturing any exception as a failure prefixed with message."""
    try:
        return Ok(f())
    except Exception as e:
        return Err(f"{message}: {_describe(e)}", e)


def sequence(results: list[Result[T]]) -> Result[list[T]]:
    """Convert list of Results to Result of list, failing fast on the first failure.

    Example:
        >>> sequence([Ok(1), Ok(2)]).unwrap()
        [1, 2]
    """
    values: list[T] = []
    for result in results:
        if result.is_err():
            return Err(result.error, result.cause)
        values.append(result.unwrap())
    return Ok(values)
