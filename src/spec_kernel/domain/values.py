from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True, slots=True)
class Table:
    """Tabular step data: the header row names the columns, each row maps column -> cell."""

    columns: tuple[str, ...]
    rows: tuple[Mapping[str, str], ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if len(self.columns) != len(set(self.columns)):
            raise ValueError("Table.columns must not contain duplicates")

    def has_columns(self, names: Sequence[str]) -> bool:
        return set(names).issubset(self.columns)

    def column(self, name: str) -> list[str]:
        if name not in self.columns:
            raise KeyError(name)
        return [row[name] for row in self.rows]

    def __len__(self) -> int:
        return len(self.rows)


@dataclass(frozen=True, slots=True)
class TextBlock:
    # Literal contents of a fenced code block; language is the info string after the fence.
    language: str
    content: str


def make_table(raw: Sequence[Sequence[str]]) -> Table:
    """Build a Table from raw rows where the first row is the header.

    Short rows are padded with empty cells and long rows are truncated, so every
    row maps exactly the header's columns. A repeated header name keeps one
    column whose cells come from the last occurrence.
    """
    if not raw:
        raise ValueError("Table requires at least a header row")
    header = list(raw[0])
    position = {name: index for index, name in enumerate(header)}
    columns = tuple(dict.fromkeys(header))
    rows: list[Mapping[str, str]] = []
    for cells in raw[1:]:
        padded = list(cells[: len(header)]) + [""] * (len(header) - len(cells))
        rows.append(MappingProxyType({name: padded[position[name]] for name in columns}))
    return Table(columns=columns, rows=tuple(rows))
