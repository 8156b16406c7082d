"""Tests for Result monad implementation.

Validates:
- Functor laws
- Monad laws
- Exhaustive match
- Wrong-side access fails loudly
"""

from __future__ import annotations

from typing import Callable

import pytest

from reqkit.foundation.errors import Err, Ok, Result, sequence, try_fn


# ═════════════════════════════════════════════════════════════════════════════
# Property Tests - Functor Laws
# ═════════════════════════════════════════════════════════════════════════════


def test_functor_identity() -> None:
    """Functor law: fmap id = id"""
    result: Result[int] = Ok(42)
    assert result.map(lambda x: x) == result

    err_result: Result[int] = Err("fail")
    assert err_result.map(lambda x: x) == err_result


def test_functor_composition() -> None:
    """Functor law: fmap (f . g) = fmap f . fmap g"""
    f: Callable[[int], int] = lambda x: x + 1
    g: Callable[[int], int] = lambda x: x * 2

    result: Result[int] = Ok(5)
    assert result.map(lambda x: f(g(x))) == result.map(g).map(f)


# ═════════════════════════════════════════════════════════════════════════════
# Property Tests - Monad Laws
# ═════════════════════════════════════════════════════════════════════════════


def test_monad_left_identity() -> None:
    """Monad law: return a >>= f = f a"""
    f: Callable[[int], Result[int]] = lambda x: Ok(x * 2)
    assert Ok(42).flat_map(f) == f(42)


def test_monad_right_identity() -> None:
    """Monad law: m >>= return = m"""
    m: Result[int] = Ok(42)
    assert m.flat_map(Ok) == m


def test_monad_associativity() -> None:
    """Monad law: (m >>= f) >>= g = m >>= (\\x -> f x >>= g)"""
    m: Result[int] = Ok(5)
    f: Callable[[int], Result[int]] = lambda x: Ok(x + 1)
    g: Callable[[int], Result[int]] = lambda x: Ok(x * 2)
    assert m.flat_map(f).flat_map(g) == m.flat_map(lambda x: f(x).flat_map(g))


# ═════════════════════════════════════════════════════════════════════════════
# Error Handling
# ═════════════════════════════════════════════════════════════════════════════


def test_map_converts_exception_to_failure() -> None:
    boom = ValueError("bad value")

    def explode(_: int) -> int:
        raise boom

    result = Ok(1).map(explode)
    assert result.is_failure
    assert result.error == "Mapping failed: bad value"
    assert result.cause is boom


def test_flat_map_converts_exception_to_failure() -> None:
    def explode(_: int) -> Result[int]:
        raise KeyError("k")

    result = Ok(1).flat_map(explode)
    assert result.error.startswith("FlatMap failed:")
    assert isinstance(result.cause, KeyError)


def test_failure_propagates_untouched() -> None:
    cause = OSError("down")
    failed: Result[int] = Err("network", cause)
    called: list[int] = []

    mapped = failed.map(lambda x: called.append(x) or x).flat_map(Ok)
    assert called == []
    assert mapped.error == "network"
    assert mapped.cause is cause


def test_empty_failure_message_defaults() -> None:
    assert Result.failure("").error == "Unknown error"


def test_wrong_side_access_raises() -> None:
    with pytest.raises(RuntimeError, match="Cannot access value of failed result: nope"):
        Err("nope").unwrap()
    with pytest.raises(RuntimeError, match="Cannot access error of successful result"):
        _ = Ok(1).error


def test_exactly_one_side_populated() -> None:
    ok, err = Ok(0), Err("x")
    assert ok.is_ok() and not ok.is_err() and ok.cause is None
    assert err.is_err() and not err.is_ok()
    assert ok.ok() == 0 and err.ok() is None


# ═════════════════════════════════════════════════════════════════════════════
# Match
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize("result", [Ok(7), Err("failed", ValueError("v"))])
def test_match_invokes_exactly_one_branch(result: Result[int]) -> None:
    calls: list[str] = []
    out = result.match(
        lambda v: calls.append("ok") or f"ok:{v}",
        lambda msg, cause: calls.append("err") or f"err:{msg}:{type(cause).__name__}",
    )
    assert len(calls) == 1
    if result.is_success:
        assert calls == ["ok"] and out == "ok:7"
    else:
        assert calls == ["err"] and out == "err:failed:ValueError"


def test_inspect_and_inspect_err() -> None:
    seen: list[object] = []
    Ok(3).inspect(seen.append).inspect_err(lambda m, c: seen.append(m))
    Err("e").inspect(seen.append).inspect_err(lambda m, c: seen.append(m))
    assert seen == [3, "e"]


# ═════════════════════════════════════════════════════════════════════════════
# Helpers
# ═════════════════════════════════════════════════════════════════════════════


def test_try_fn() -> None:
    assert try_fn(lambda: 1 + 1) == Ok(2)
    failed = try_fn(lambda: int("x"), "parse")
    assert failed.error.startswith("parse: ")
    assert isinstance(failed.cause, ValueError)


def test_sequence() -> None:
    assert sequence([Ok(1), Ok(2), Ok(3)]) == Ok([1, 2, 3])
    assert sequence([Ok(1), Err("second"), Err("third")]).error == "second"


def test_dunder_behaviour() -> None:
    assert bool(Ok(0)) and not bool(Err("x"))
    assert repr(Ok(1)) == "Ok(1)"
    assert repr(Err("x")) == "Err('x')"
    assert list(Ok(5)) == [5] and list(Err("x")) == []
    assert Err("x", ValueError()) == Err("x", KeyError())
