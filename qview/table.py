import abc
import enum
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

VALUES_TYPE = List[List[Any]]
VALUES_STR_TYPE = List[List[str]]


@enum.unique
class Alignment(enum.Enum):
    LEFT = "l"
    CENTER = "c"
    RIGHT = "r"


class Table:
    """
    tables are indexed by row, then column
    """

    def __init__(self, _columns: List[str], _values: VALUES_TYPE) -> None:
        for row in _values:
            assert len(row) == len(_columns)
        self._columns: List[str] = list(_columns)
        self._values: VALUES_TYPE = [list(row) for row in _values]

    @property
    def shape(self) -> Tuple[int, int]:
        return (len(self._values), len(self._columns))

    @property
    def columns(self) -> List[str]:
        return self._columns.copy()

    @property
    def values(self) -> VALUES_TYPE:
        return [row.copy() for row in self._values]

    def values_as_str(self) -> VALUES_STR_TYPE:
        return [[_format_cell(cell) for cell in row] for row in self._values]

    @classmethod
    def from_df(cls, _df: pd.DataFrame) -> "Table":
        columns = [str(c) for c in _df.columns]
        values = [list(row) for row in _df.itertuples(index=False, name=None)]
        return cls(columns, values)


class Style(abc.ABC):
    @abc.abstractmethod
    def render(
        self,
        table: Table,
        column_alignments: Optional[Dict[str, Alignment]] = None,
        default_alignment: Alignment = Alignment.LEFT,
    ) -> str:
        ...

    @staticmethod
    def _build_alignment_list(
        column_alignments: Optional[Dict[str, Alignment]],
        default_alignment: Alignment,
        columns: List[str],
        alignment_map: Dict[Alignment, str],
    ) -> List[str]:
        """
        One formatted alignment per column, user selected where given and the
        default otherwise.
        """
        if column_alignments is None:
            column_alignments = {}
        for column in column_alignments.keys():
            assert column in columns

        out = [
            alignment_map[column_alignments.get(c, default_alignment)] for c in columns
        ]
        return out


class AsciiStyle(Style):
    _ALIGNMENT_MAP: Dict[Alignment, str] = {
        Alignment.LEFT: "<",
        Alignment.CENTER: "^",
        Alignment.RIGHT: ">",
    }

    def __init__(
        self,
        joint_element: str = "+",
        horizontal_element: str = "-",
        vertical_element: str = "|",
        pad_amount: int = 1,
        render_borders: bool = True,
    ):
        assert len(joint_element) == 1
        assert len(horizontal_element) == 1
        assert len(vertical_element) == 1
        assert 0 <= pad_amount

        self._j_el: str = joint_element
        self._h_el: str = horizontal_element
        self._v_el: str = vertical_element
        self._p_amt: int = pad_amount
        self._borders: bool = render_borders

    def render(
        self,
        table: Table,
        column_alignments: Optional[Dict[str, Alignment]] = None,
        default_alignment: Alignment = Alignment.LEFT,
    ) -> str:
        headers = table.columns
        values = table.values_as_str()
        alignments = self._build_alignment_list(
            column_alignments, default_alignment, headers, self._ALIGNMENT_MAP
        )
        widths = self._get_column_widths(headers, values)

        lines = []
        if self._borders:
            lines.append(self._render_h_line(widths))
        lines.append(self._render_row_line(alignments, widths, headers))
        lines.append(self._render_separator_line(widths, alignments))
        for row in values:
            lines.append(self._render_row_line(alignments, widths, row))
        if self._borders:
            lines.append(self._render_h_line(widths))

        out = "\n".join(lines)
        out += "\n"
        return out

    def _render_row_line(
        self, alignments: List[str], widths: List[int], row: List[str]
    ) -> str:
        # e.g. "{: >4s}" right aligns in four characters
        cells = [
            f"{{: {alignment}{width}s}}".format(cell)
            for alignment, width, cell in zip(alignments, widths, row)
        ]
        line = self._v_el.join([self._pad_cell(c) for c in cells])
        return self._v_el + line + self._v_el

    def _render_separator_line(self, widths: List[int], alignments: List[str]) -> str:
        return self._render_h_line(widths)

    def _render_h_line(self, widths: List[int]) -> str:
        struts = [self._h_el * (w + 2 * self._p_amt) for w in widths]
        return self._j_el + self._j_el.join(struts) + self._j_el

    def _pad_cell(self, cell: str) -> str:
        padding = " " * self._p_amt
        return padding + cell + padding

    @staticmethod
    def _get_column_widths(columns: List[str], values: VALUES_STR_TYPE) -> List[int]:
        widths = [len(c) for c in columns]
        for row in values:
            widths = [max(w, len(cell)) for w, cell in zip(widths, row)]
        return widths


class MarkdownStyle(AsciiStyle):
    def __init__(self):
        super().__init__(
            joint_element="|",
            horizontal_element="-",
            vertical_element="|",
            pad_amount=1,
            render_borders=False,
        )

    def _render_separator_line(self, widths: List[int], alignments: List[str]) -> str:
        struts = [
            self._pad_cell(self._render_alignment_strut(max(width, 3), alignment))
            for width, alignment in zip(widths, alignments)
        ]
        return self._j_el + self._j_el.join(struts) + self._j_el

    def _render_alignment_strut(self, width: int, alignment: str) -> str:
        if alignment == self._ALIGNMENT_MAP[Alignment.LEFT]:
            ends = (":", "")
        elif alignment == self._ALIGNMENT_MAP[Alignment.CENTER]:
            ends = (":", ":")
        elif alignment == self._ALIGNMENT_MAP[Alignment.RIGHT]:
            ends = ("", ":")
        else:
            assert False

        mid = (width - len(ends[0]) - len(ends[1])) * self._h_el
        return ends[0] + mid + ends[1]

    @staticmethod
    def _get_column_widths(columns: List[str], values: VALUES_STR_TYPE) -> List[int]:
        widths = AsciiStyle._get_column_widths(columns, values)
        return [max(w, 3) for w in widths]


class CsvStyle(Style):
    def __init__(self, delimiter: str = ",", quote_char: str = '"'):
        assert len(delimiter) == 1
        assert len(quote_char) == 1
        self._delim: str = delimiter
        self._quote_char: str = quote_char

    def render(
        self,
        table: Table,
        column_alignments: Optional[Dict[str, Alignment]] = None,
        default_alignment: Alignment = Alignment.LEFT,
    ) -> str:
        rows = [table.columns] + table.values_as_str()
        lines = [self._delim.join([self._quote(c) for c in row]) for row in rows]
        out = "\n".join(lines)
        out += "\n"
        return out

    def _quote(self, _cell: str) -> str:
        """
        Minimal quoting. Cells holding the delimiter, a quote character or a
        newline are wrapped in quote characters, and embedded quote characters
        are doubled.

        a,b -> "a,b"
        """
        q = self._quote_char
        if self._delim in _cell or q in _cell or "\n" in _cell:
            return q + _cell.replace(q, q + q) + q
        return _cell


STYLES: Dict[str, Style] = {
    "ascii": AsciiStyle(),
    "csv": CsvStyle(),
    "markdown": MarkdownStyle(),
}


def _format_cell(_v: Any) -> str:
    """
    1.5 -> "1.5"
    None -> ""
    """
    if _v is None:
        return ""
    if isinstance(_v, float):
        return f"{_v:g}"
    return str(_v)
