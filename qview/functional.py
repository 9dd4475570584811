from __future__ import annotations

from functools import reduce
from typing import Callable, Generic, Type, TypeVar

SM = TypeVar("SM")
TM = TypeVar("TM", covariant=True)
UM = TypeVar("UM")


class MonadicFunction(Generic[SM, TM]):
    """
    Single-argument callable that composes with others left to right.
    """

    def __init__(self, _fn: Callable[[SM], TM]) -> None:
        self._fn: Callable[[SM], TM] = _fn

    def __call__(self, _s: SM) -> TM:
        return self._fn(_s)

    def lcompose(self, _outer: Callable[[TM], UM]) -> MonadicFunction[SM, UM]:
        inner = self._fn
        return MonadicFunction(lambda x: _outer(inner(x)))

    @classmethod
    def identity(cls: Type[MonadicFunction[SM, SM]]) -> MonadicFunction[SM, SM]:
        return cls(lambda x: x)


def fold_l(*_fn: Callable) -> MonadicFunction:
    """
    (f, g) -> g(f(x))
    """
    return reduce(MonadicFunction.lcompose, _fn, MonadicFunction.identity())
