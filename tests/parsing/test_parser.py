from __future__ import annotations

from pathlib import Path

import pytest

from spec_kernel.domain.model import Step
from spec_kernel.domain.values import TextBlock, make_table
from spec_kernel.parsing.parser import DocumentParseError, expand_step, parse_document, parse_document_file

ADD_NUMBERS = """\
# Calculator

## Add numbers

- The sum of <a> and <b> is <sum>

Examples:

| a  | b  | sum |
|----|----|-----|
| 2  | 3  | 5   |
| 10 | -1 | 9   |
"""


def test_scenario_table_expands_parameterised_step() -> None:
    # One concrete step per data row, every token substituted.
    document = parse_document(ADD_NUMBERS, path="calc.md")
    assert document.name == "Calculator"
    assert document.path == "calc.md"
    (scenario,) = document.scenarios
    assert scenario.name == "Add numbers"
    assert [step.text for step in scenario.steps] == [
        "The sum of 2 and 3 is 5",
        "The sum of 10 and -1 is 9",
    ]
    assert all(step.params == () for step in scenario.steps)
    # The table stays with the scenario.
    assert len(scenario.tables) == 1


def test_step_own_table_does_not_drive_expansion() -> None:
    # A table under the step is its argument; the step stays pending with its params.
    text = "\n".join(
        [
            "## Add",
            "- Add <x> and <y>",
            "",
            "| x | y |",
            "|---|---|",
            "| 1 | 2 |",
            "| 3 | 4 |",
        ]
    )
    (scenario,) = parse_document(text).scenarios
    (step,) = scenario.steps
    assert step.text == "Add <x> and <y>"
    assert step.params == ("<x>", "<y>")
    assert step.is_pending
    assert len(step.tables) == 1
    assert step.tables[0].column("x") == ["1", "3"]


def test_document_table_is_used_when_scenario_has_none() -> None:
    text = "\n".join(
        [
            "# Doc",
            "",
            "| who |",
            "|-----|",
            "| Ann |",
            "",
            "## Greet",
            "- Hello <who>",
        ]
    )
    document = parse_document(text)
    assert [step.text for step in document.scenarios[0].steps] == ["Hello Ann"]
    assert len(document.tables) == 1


def test_unresolved_params_are_kept() -> None:
    (scenario,) = parse_document("## S\n- Use <missing>\n").scenarios
    (step,) = scenario.steps
    assert step.text == "Use <missing>"
    assert step.params == ("<missing>",)
    assert step.is_pending


def test_before_and_after_steps_are_shared() -> None:
    text = "\n".join(
        [
            "# Doc",
            "- Open the app",
            "## First",
            "- Do one",
            "## Second",
            "- Do two",
            "---",
            "- Close the app",
        ]
    )
    document = parse_document(text)
    assert [step.text for step in document.before_steps] == ["Open the app"]
    assert [step.text for step in document.after_steps] == ["Close the app"]
    assert [scenario.name for scenario in document.scenarios] == ["First", "Second"]
    assert [step.text for step in document.steps_for(document.scenarios[1])] == [
        "Open the app",
        "Do two",
        "Close the app",
    ]


def test_fenced_block_attaches_to_step() -> None:
    text = "\n".join(
        [
            "## Config",
            "- Given the config",
            "  ```yaml",
            "  name: demo",
            "    nested: true",
            "  ```",
        ]
    )
    (step,) = parse_document(text).scenarios[0].steps
    assert step.text_blocks == (TextBlock(language="yaml", content="name: demo\n  nested: true"),)


def test_unterminated_fence_runs_to_end_of_document() -> None:
    text = "## S\n- Step\n```\nline one\nline two\n"
    (step,) = parse_document(text).scenarios[0].steps
    assert step.text_blocks[0].content == "line one\nline two"
    assert step.text_blocks[0].language == ""


def test_table_directly_after_step_belongs_to_the_step() -> None:
    text = "## S\n- Users exist\n\n| name |\n|------|\n| ann  |\n"
    (scenario,) = parse_document(text).scenarios
    (step,) = scenario.steps
    assert len(step.tables) == 1
    assert step.tables[0].column("name") == ["ann"]
    assert scenario.tables == ()


def test_paragraph_closes_the_step() -> None:
    # Prose between a step and a table moves the table to the scenario.
    text = "## S\n- Users exist\n\nSome prose.\n\n| name |\n|------|\n| ann  |\n"
    (scenario,) = parse_document(text).scenarios
    assert scenario.steps[0].tables == ()
    assert len(scenario.tables) == 1


def test_emphasis_marks_step_forced() -> None:
    (scenario,) = parse_document("## S\n- Work\n- **Always** clean up\n").scenarios
    assert [step.force for step in scenario.steps] == [False, True]
    assert scenario.steps[1].text == "Always clean up"


def test_continuations_and_nested_items_fold_into_step_text() -> None:
    text = "## S\n- First part\n  second part\n  - nested detail\n1. Numbered step\n"
    (scenario,) = parse_document(text).scenarios
    assert [step.text for step in scenario.steps] == [
        "First part second part nested detail",
        "Numbered step",
    ]


def test_empty_scenario_has_no_steps() -> None:
    document = parse_document("# Doc\n- shared\n## Empty\nJust words.\n")
    assert document.scenarios[0].steps == ()
    assert document.steps_for(document.scenarios[0]) == ()


def test_parse_rejects_non_text() -> None:
    with pytest.raises(DocumentParseError):
        parse_document(b"# bytes")  # type: ignore[arg-type]


def test_parse_document_file_records_path(tmp_path: Path) -> None:
    path = tmp_path / "spec.md"
    path.write_text("# From file\n## S\n- Step\n", encoding="utf-8")
    document = parse_document_file(path)
    assert document.name == "From file"
    assert document.path == str(path)


def test_expand_step_prefers_outer_tables_over_own() -> None:
    own = make_table([["n"], ["own"]])
    outer = make_table([["n"], ["a"], ["b"]])
    step = Step(text="Use <n>", params=("<n>",), tables=(own,))
    expanded = expand_step(step, (outer,))
    assert [item.text for item in expanded] == ["Use a", "Use b"]
    # The own table did not drive expansion, so it is still passed along.
    assert all(item.tables == (own,) for item in expanded)


def test_expand_step_without_params_is_identity() -> None:
    step = Step(text="plain")
    assert expand_step(step, ()) == [step]


def test_repeated_table_header_keeps_last_column() -> None:
    text = "# D\n## A\n| a | a |\n|---|---|\n| 1 | 2 |\n- step\n"
    (scenario,) = parse_document(text).scenarios
    (table,) = scenario.tables
    assert table.columns == ("a",)
    assert table.column("a") == ["2"]
    assert [step.text for step in scenario.steps] == ["step"]


def test_step_own_table_is_kept_when_outer_table_is_missing() -> None:
    own = make_table([["n"], ["own"]])
    step = Step(text="Use <n>", params=("<n>",), tables=(own,))
    assert expand_step(step, ()) == [step]
