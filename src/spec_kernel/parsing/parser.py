"""Parse spec documents (a constrained markdown dialect) into SpecDocument trees.

Grammar handled:
  - ``#`` heading: document name; ``##`` heading: new scenario
  - horizontal rule: leave the current scenario, so later list items become
    shared before-steps (no scenario yet) or after-steps
  - list items: one step each
  - GFM table: attached to the current step, scenario or document
  - fenced code block after a list item: attached to that step as a TextBlock
  - any other paragraph: closes the current step

The parser keeps mutable drafts while walking the lines and hands back a frozen
tree; steps with ``<param>`` tokens are expanded against tables at the end.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

from spec_kernel.domain.model import Scenario, SpecDocument, Step
from spec_kernel.domain.values import Table, TextBlock, make_table
from spec_kernel.parsing.inline import param_name, parse_inline
from spec_kernel.parsing.tables import find_table_with_params, split_row, starts_table

_HEADING_RE = re.compile(r"^ {0,3}(#{1,6})(?:\s+(.*?))?(?:\s+#+)?\s*$")
_HRULE_RE = re.compile(r"^ {0,3}([-*_])(?:[ \t]*\1){2,}[ \t]*$")
_LIST_ITEM_RE = re.compile(r"^( *)([-*+]|\d{1,9}[.)])(?:[ \t]+(.*)|[ \t]*)$")
_FENCE_RE = re.compile(r"^( *)(`{3,}|~{3,})[ \t]*([^`\s]*)[^`]*$")


class DocumentParseError(ValueError):
    # Raised when the input cannot be treated as a spec document at all.
    pass


@dataclass
class _StepDraft:
    lines: list[str]
    indent: int
    tables: list[Table] = field(default_factory=list)
    text_blocks: list[TextBlock] = field(default_factory=list)


@dataclass
class _ScenarioDraft:
    name: str
    steps: list[_StepDraft] = field(default_factory=list)
    tables: list[Table] = field(default_factory=list)


@dataclass
class _Builder:
    # Cursor state: which scenario/step later tables and code blocks attach to.
    name: str = ""
    scenarios: list[_ScenarioDraft] = field(default_factory=list)
    before_steps: list[_StepDraft] = field(default_factory=list)
    after_steps: list[_StepDraft] = field(default_factory=list)
    tables: list[Table] = field(default_factory=list)
    scenario: _ScenarioDraft | None = None
    step: _StepDraft | None = None

    def open_scenario(self, name: str) -> None:
        self.scenario = _ScenarioDraft(name=name)
        self.scenarios.append(self.scenario)
        self.step = None

    def leave_scope(self) -> None:
        self.scenario = None
        self.step = None

    def add_step(self, text: str, indent: int) -> _StepDraft:
        draft = _StepDraft(lines=[text], indent=indent)
        if self.scenario is not None:
            self.scenario.steps.append(draft)
        elif not self.scenarios:
            self.before_steps.append(draft)
        else:
            self.after_steps.append(draft)
        self.step = draft
        return draft

    def add_table(self, table: Table) -> None:
        if self.step is not None:
            self.step.tables.append(table)
        elif self.scenario is not None:
            self.scenario.tables.append(table)
        else:
            self.tables.append(table)


def parse_document(text: str, path: str = "") -> SpecDocument:
    if not isinstance(text, str):
        raise DocumentParseError(f"Spec document {path or '<string>'} must be text, got {type(text).__name__}")

    builder = _Builder()
    lines = text.splitlines()
    index = 0
    # True while the previous line belongs to a list item, so the next one may continue it.
    in_item = False

    while index < len(lines):
        line = lines[index]
        if not line.strip():
            in_item = False
            index += 1
            continue

        fence = _FENCE_RE.match(line)
        if fence:
            block, index = _read_fence(lines, index, fence)
            if builder.step is not None:
                builder.step.text_blocks.append(block)
            in_item = False
            continue

        following = lines[index + 1] if index + 1 < len(lines) else None
        if starts_table(line, following):
            rows, index = _read_table(lines, index)
            builder.add_table(make_table(rows))
            in_item = False
            continue

        heading = _HEADING_RE.match(line)
        if heading:
            level = len(heading.group(1))
            title = parse_inline(heading.group(2) or "").text
            if level == 1:
                builder.name = title
                builder.leave_scope()
            elif level == 2:
                builder.open_scenario(title)
            else:
                builder.step = None
            in_item = False
            index += 1
            continue

        if _HRULE_RE.match(line):
            builder.leave_scope()
            in_item = False
            index += 1
            continue

        item = _LIST_ITEM_RE.match(line)
        if item and not _continues_item(builder, in_item, len(item.group(1))):
            builder.add_step(item.group(3) or "", len(item.group(1)))
            in_item = True
            index += 1
            continue

        if in_item and builder.step is not None:
            # Lazy or indented continuation; a nested item contributes its text only.
            builder.step.lines.append((item.group(3) or "") if item else line.strip())
        else:
            builder.step = None
        index += 1

    return _freeze(builder, path)


def parse_document_file(path: Path) -> SpecDocument:
    return parse_document(path.read_text(encoding="utf-8"), path=str(path))


def _continues_item(builder: _Builder, in_item: bool, indent: int) -> bool:
    # Nested list items fold into the text of their top-level step.
    return in_item and builder.step is not None and indent >= builder.step.indent + 2


def _read_fence(lines: list[str], start: int, opening: re.Match[str]) -> tuple[TextBlock, int]:
    indent = len(opening.group(1))
    marker = opening.group(2)
    language = opening.group(3)
    closing = re.compile(rf"^ *{re.escape(marker[0])}{{{len(marker)},}}\s*$")
    content: list[str] = []
    index = start + 1
    # An unterminated fence runs to the end of the document.
    while index < len(lines) and not closing.match(lines[index]):
        content.append(_dedent(lines[index], indent))
        index += 1
    return TextBlock(language=language, content="\n".join(content)), index + 1


def _dedent(line: str, indent: int) -> str:
    strip = min(indent, len(line) - len(line.lstrip(" ")))
    return line[strip:]


def _read_table(lines: list[str], start: int) -> tuple[list[list[str]], int]:
    rows = [split_row(lines[start])]
    index = start + 2  # skip the delimiter row
    while index < len(lines) and lines[index].strip() and "|" in lines[index]:
        rows.append(split_row(lines[index]))
        index += 1
    return rows, index


def _freeze(builder: _Builder, path: str) -> SpecDocument:
    document_tables = tuple(builder.tables)
    scenarios = tuple(
        Scenario(
            name=draft.name,
            steps=_build_steps(draft.steps, (*draft.tables, *document_tables)),
            tables=tuple(draft.tables),
        )
        for draft in builder.scenarios
    )
    return SpecDocument(
        path=path,
        name=builder.name,
        scenarios=scenarios,
        before_steps=_build_steps(builder.before_steps, document_tables),
        after_steps=_build_steps(builder.after_steps, document_tables),
        tables=document_tables,
    )


def _build_steps(drafts: list[_StepDraft], tables: tuple[Table, ...]) -> tuple[Step, ...]:
    # Tables are searched in order: the scenario's own first, then the document's.
    steps: list[Step] = []
    for draft in drafts:
        inline = parse_inline(" ".join(part for part in draft.lines if part))
        if not inline.text:
            continue
        step = Step(
            text=inline.text,
            params=inline.params,
            tables=tuple(draft.tables),
            text_blocks=tuple(draft.text_blocks),
            force=inline.force,
        )
        steps.extend(expand_step(step, tables))
    return tuple(steps)


def expand_step(step: Step, tables: tuple[Table, ...]) -> list[Step]:
    """Replace a parameterised step with one concrete step per data row.

    The first table whose columns cover every ``<param>`` wins, scenario tables
    before document tables. Tables attached to the step itself are arguments,
    never expansion sources. Without any match the step is returned unchanged
    and keeps its params, which makes it pending.
    """
    if not step.params:
        return [step]
    names = [param_name(token) for token in step.params]
    table = find_table_with_params(tables, names)
    if table is None:
        return [step]
    expanded: list[Step] = []
    for row in table.rows:
        text = step.text
        for token, name in zip(step.params, names):
            text = text.replace(token, row[name])
        expanded.append(
            Step(
                text=text,
                params=(),
                tables=step.tables,
                text_blocks=step.text_blocks,
                force=step.force,
            )
        )
    return expanded
