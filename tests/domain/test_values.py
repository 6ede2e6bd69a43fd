from __future__ import annotations

import pytest

from spec_kernel.domain.model import Scenario, SpecDocument, Step
from spec_kernel.domain.values import Table, make_table


def test_make_table_uses_first_row_as_header() -> None:
    table = make_table([["x", "y"], ["1", "2"], ["3"], ["4", "5", "6"]])
    assert table.columns == ("x", "y")
    assert len(table) == 3
    # Short rows are padded, long rows truncated.
    assert dict(table.rows[1]) == {"x": "3", "y": ""}
    assert dict(table.rows[2]) == {"x": "4", "y": "5"}
    assert table.column("x") == ["1", "3", "4"]


def test_table_rows_are_read_only() -> None:
    table = make_table([["a"], ["1"]])
    with pytest.raises(TypeError):
        table.rows[0]["a"] = "2"  # type: ignore[index]


def test_table_rejects_duplicate_columns() -> None:
    with pytest.raises(ValueError):
        Table(columns=("a", "a"))


def test_table_requires_header() -> None:
    with pytest.raises(ValueError):
        make_table([])


def test_has_columns_and_missing_column() -> None:
    table = make_table([["x", "y", "sum"]])
    assert table.has_columns(["x", "sum"])
    assert not table.has_columns(["z"])
    with pytest.raises(KeyError):
        table.column("z")


def test_steps_for_wraps_scenario_with_shared_steps() -> None:
    before = Step(text="setup")
    after = Step(text="teardown")
    main = Step(text="work")
    document = SpecDocument(
        path="a.md",
        name="Doc",
        scenarios=(Scenario(name="S", steps=(main,)), Scenario(name="Empty")),
        before_steps=(before,),
        after_steps=(after,),
    )
    assert list(document.steps_for(document.scenarios[0])) == [before, main, after]
    # Shared steps alone do not make an empty scenario runnable.
    assert list(document.steps_for(document.scenarios[1])) == []
    assert document.title == "a.md/Doc"


def test_step_with_params_is_pending() -> None:
    assert Step(text="add <x>", params=("<x>",)).is_pending
    assert not Step(text="add 1").is_pending


def test_make_table_repeated_header_uses_last_occurrence() -> None:
    table = make_table([["a", "b", "a"], ["1", "2", "3"], ["4"]])
    assert table.columns == ("a", "b")
    assert dict(table.rows[0]) == {"a": "3", "b": "2"}
    assert dict(table.rows[1]) == {"a": "", "b": ""}
