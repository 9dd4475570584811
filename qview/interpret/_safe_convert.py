import re
from typing import Any, Callable, Optional, TypeVar, Union

T = TypeVar("T")

_INTEGER = re.compile(r"\s*[+-]?[0-9]+\s*")


def type_cast_float_unsafe_to_safe(_safe_v: float, _v: Union[str, None]) -> float:
    out = type_cast_value_unsafe_to_safe(float, _safe_v, _v)
    assert out is not None
    return out


def type_cast_int_unsafe_to_none(_v: Union[str, None]) -> Optional[int]:
    return type_cast_value_unsafe_to_safe(strict_int, None, _v)


def type_cast_int_unsafe_to_safe(_safe_v: int, _v: Union[str, None]) -> int:
    out = type_cast_value_unsafe_to_safe(strict_int, _safe_v, _v)
    assert out is not None
    return out


def strict_int(_v: Union[str, None]) -> int:
    """
    Plain decimal digits with an optional sign. Unlike `int`, underscores and
    non-ASCII digits are rejected.

    "042" -> 42
    "-1" -> -1
    "1_2" -> ValueError
    """
    if _v is None or _INTEGER.fullmatch(_v) is None:
        raise ValueError(f"not an integer: {_v!r}")
    return int(_v)


def type_cast_value_unsafe_to_safe(
    _type: Callable[[Any], T], _safe_v: Union[T, None], _v: Union[str, None]
) -> Optional[T]:
    try:
        out = _type(_v)  # type: ignore
    except (TypeError, ValueError):
        out = _safe_v
    return out


def value_at(_values: list, _index: int, _default: str = "") -> str:
    """
    Positional lookup that reads past the end as `_default`.

    (["a", "b"], 1) -> "b"
    (["a", "b"], 5) -> ""
    """
    if 0 <= _index < len(_values):
        return _values[_index]
    return _default
