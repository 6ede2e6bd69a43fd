from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from spec_kernel.domain.values import Table

_DELIMITER_CELL_RE = re.compile(r"^:?-+:?$")
_UNESCAPED_PIPE_RE = re.compile(r"(?<!\\)\|")


def split_row(line: str) -> list[str]:
    # GFM rows: optional outer pipes, "\|" is a literal pipe inside a cell.
    body = line.strip()
    if body.startswith("|"):
        body = body[1:]
    if body.endswith("|") and not body.endswith("\\|"):
        body = body[:-1]
    return [cell.strip().replace("\\|", "|") for cell in _UNESCAPED_PIPE_RE.split(body)]


def is_delimiter_row(line: str) -> bool:
    if "-" not in line:
        return False
    cells = split_row(line)
    return bool(cells) and all(_DELIMITER_CELL_RE.match(cell) for cell in cells)


def starts_table(line: str, following: str | None) -> bool:
    # A header row must be directly followed by its delimiter row.
    return "|" in line and following is not None and is_delimiter_row(following)


def find_table_with_params(tables: Iterable[Table], names: Sequence[str]) -> Table | None:
    for table in tables:
        if table.has_columns(names):
            return table
    return None
