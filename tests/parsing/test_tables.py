from __future__ import annotations

from spec_kernel.domain.values import make_table
from spec_kernel.parsing.tables import find_table_with_params, is_delimiter_row, split_row, starts_table


def test_split_row_handles_outer_pipes_and_escapes() -> None:
    assert split_row("| a \\| b | c |") == ["a | b", "c"]
    assert split_row("a | b") == ["a", "b"]


def test_delimiter_row_detection() -> None:
    assert is_delimiter_row("|---|:--:|--:|")
    assert is_delimiter_row("--- | ---")
    assert not is_delimiter_row("| a | b |")
    assert not is_delimiter_row("|---|x|")


def test_starts_table_needs_delimiter_on_next_line() -> None:
    assert starts_table("| a | b |", "|---|---|")
    assert not starts_table("| a | b |", "| 1 | 2 |")
    assert not starts_table("| a | b |", None)
    assert not starts_table("no pipes here", "|---|")


def test_find_table_with_params_returns_first_cover() -> None:
    narrow = make_table([["a"], ["1"]])
    wide = make_table([["a", "b"], ["1", "2"]])
    later = make_table([["a", "b", "c"], ["1", "2", "3"]])
    assert find_table_with_params([narrow, wide, later], ["a", "b"]) is wide
    assert find_table_with_params([narrow], ["z"]) is None
