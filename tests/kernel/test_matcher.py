from __future__ import annotations

from spec_kernel.domain.values import Table, TextBlock, make_table
from spec_kernel.kernel.context import StepContext
from spec_kernel.kernel.matcher import MatchKind, StepMatcher
from spec_kernel.kernel.step_registry import StepRegistry
from spec_kernel.kernel.transforms import TransformRegistry


def _matcher(steps: dict[str, object]) -> StepMatcher:
    registry = StepRegistry()
    for pattern, fn in steps.items():
        registry.register(pattern, fn)
    return StepMatcher(steps=registry, transforms=TransformRegistry.with_builtins())


def test_single_viable_implementation_is_bound_with_converted_args() -> None:
    def add(ctx: StepContext, x: int, y: int) -> int:
        return x + y

    outcome = _matcher({r"(-?\d+) plus (-?\d+)": add}).match("2 plus -3")
    assert outcome.kind is MatchKind.BOUND
    assert outcome.bound
    assert outcome.call is not None
    assert outcome.call.args == (2, -3)
    assert outcome.call(StepContext(name="2 plus -3")) == -1


def test_word_for_integer_capture_is_not_viable() -> None:
    # "three" satisfies the regex but not the integer transform.
    def apples(ctx: StepContext, count: int) -> None:
        pass

    matcher = _matcher({r"^I have (\w+) apples$": apples})
    assert matcher.match("I have three apples").kind is MatchKind.NONE
    assert matcher.match("I have 3 apples").kind is MatchKind.BOUND


def test_two_viable_implementations_are_ambiguous() -> None:
    def literal(ctx: StepContext) -> None:
        pass

    def captured(ctx: StepContext, what: str) -> None:
        pass

    outcome = _matcher({"A thing happens": literal, r"A (.*) happens": captured}).match("A thing happens")
    assert outcome.kind is MatchKind.AMBIGUOUS
    assert outcome.call is None
    assert [candidate.fn for candidate in outcome.candidates] == [literal, captured]


def test_table_and_text_block_counts_must_match() -> None:
    def with_table(ctx: StepContext, table: Table) -> None:
        pass

    matcher = _matcher({"users exist": with_table})
    table = make_table([["name"], ["ann"]])
    assert matcher.match("users exist").kind is MatchKind.NONE
    assert matcher.match("users exist", tables=[table, table]).kind is MatchKind.NONE
    assert matcher.match("users exist", tables=[table], text_blocks=[TextBlock("", "x")]).kind is MatchKind.NONE
    assert matcher.match("users exist", tables=[table]).kind is MatchKind.BOUND


def test_arguments_are_captures_then_trailing_in_declared_order() -> None:
    def configure(ctx: StepContext, name: str, block: TextBlock, table: Table) -> None:
        pass

    table = make_table([["k"], ["v"]])
    block = TextBlock(language="json", content="{}")
    outcome = _matcher({r"configure (\w+)": configure}).match("configure app", [table], [block])
    assert outcome.call is not None
    assert outcome.call.args == ("app", block, table)


def test_list_capture_and_optional_group() -> None:
    def total(ctx: StepContext, values: list[int]) -> None:
        pass

    def say(ctx: StepContext, name: str) -> None:
        pass

    matcher = _matcher({r"total of (.+)": total, r"say(?: (\w+))?": say})
    listed = matcher.match("total of 1, 2, 3")
    assert listed.call is not None
    assert listed.call.args == ([1, 2, 3],)
    # A group that did not participate is offered as an empty string.
    silent = matcher.match("say")
    assert silent.call is not None
    assert silent.call.args == ("",)


def test_partial_match_is_not_viable() -> None:
    def open_app(ctx: StepContext) -> None:
        pass

    assert _matcher({"open the app": open_app}).match("open the app now").kind is MatchKind.NONE
