from __future__ import annotations

from functools import partial
from typing import NamedTuple, Optional

from qview.functional import MonadicFunction as M
from qview.functional import fold_l
from qview.interpret import _common, _safe_convert

CORE_NUMBER_DIGITS = 3
FALLBACK_DIGITS = 1


class CoreSpec(NamedTuple):
    """
    Node name split into its prefix and trailing node index. The index is
    `_common.UNKNOWN_INDEX` when the trailing characters are not a number.
    """

    name: str
    number: int

    @classmethod
    def from_host_spec(cls, _v: str) -> CoreSpec:
        """
        "long@d12chas042.crc.nd.edu" -> ("d12chas", 42)
        "long@d12chasabc.crc.nd.edu" -> ("d12chas", -1)
        "long@ab" -> ("ab", -1)
        "long@42" -> ("42", 42)
        "" -> ("", -1)
        """
        host = dotted_component(split_component(_common.HOST_SEPARATOR, 1, _v), 0)
        number = trailing_int(CORE_NUMBER_DIGITS, host)
        if number is None:
            number = _common.UNKNOWN_INDEX

        if len(host) < CORE_NUMBER_DIGITS:
            name = host
        else:
            name = host[:-CORE_NUMBER_DIGITS]
        return cls(name, number)


def split_component(_separator: str, _index: int, _v: str) -> str:
    """
    ("@", 1, "long@d12chas042") -> "d12chas042"
    ("@", 1, "d12chas042") -> ""
    """
    parts = _v.split(_separator)
    return _safe_convert.value_at(parts, _index)


def dotted_component(_v: str, _index: int) -> str:
    return split_component(_common.DOMAIN_SEPARATOR, _index, _v)


def trailing(_count: int, _v: str) -> str:
    """
    (3, "d12chas042") -> "042"
    (3, "42") -> "42"
    """
    if _count <= 0:
        return ""
    return _v[-_count:]


def trailing_int(_count: int, _v: str) -> Optional[int]:
    return fold_l(
        M(partial(trailing, _count)),
        M(_safe_convert.type_cast_int_unsafe_to_none),
    )(_v)


def node_index(_v: str, _digits: int) -> Optional[int]:
    """
    Index of a node-status queue instance, read from the first dotted component.

    ("long@d12chas042.crc.nd.edu", 3) -> 42
    ("graphics@proteus2.crc.nd.edu", 1) -> 2
    ("long@d12chasX.crc.nd.edu", 3) -> None
    """
    return trailing_int(_digits, dotted_component(_v, 0))


def placement_index(_v: str) -> Optional[int]:
    """
    Index of a placement token. Reads three trailing digits, falling back to
    one digit for short node names.

    "d12chas041" -> 41
    "proteus2" -> 2
    "node" -> None
    """
    out = trailing_int(CORE_NUMBER_DIGITS, _v)
    if out is None:
        out = trailing_int(FALLBACK_DIGITS, _v)
    return out


def pe_task_index(_v: str) -> Optional[int]:
    """
    "PET_id" values look like "<task>.<host>".

    "1.d12chas041" -> 41
    "1" -> None
    """
    return placement_index(dotted_component(_v, 1))


def granted_host_index(_v: str) -> Optional[int]:
    """
    "JG_qhostname" values are fully qualified host names.

    "d12chas042.crc.nd.edu" -> 42
    """
    return placement_index(dotted_component(_v, 0))
