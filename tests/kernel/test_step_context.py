from __future__ import annotations

import pytest

from spec_kernel.kernel.assertions import Assertion
from spec_kernel.kernel.context import StepContext, StepFailed, StepSkipped


def test_fail_marks_without_stopping() -> None:
    ctx = StepContext(name="step")
    ctx.fail()
    assert ctx.failed
    assert not ctx.skipped


def test_error_records_message_and_fails(capsys: pytest.CaptureFixture[str]) -> None:
    ctx = StepContext(name="step")
    ctx.errorf("expected %d, got %d", 1, 2)
    assert ctx.failed
    assert ctx.errors == ["expected 1, got 2"]
    assert capsys.readouterr().out == "expected 1, got 2\n"


def test_fail_now_and_fatal_stop_the_step() -> None:
    ctx = StepContext(name="step")
    with pytest.raises(StepFailed):
        ctx.fail_now()
    assert ctx.failed
    other = StepContext(name="other")
    with pytest.raises(StepFailed):
        other.fatal("cannot continue")
    assert other.errors == ["cannot continue"]


def test_skip_stops_the_step() -> None:
    ctx = StepContext(name="step")
    with pytest.raises(StepSkipped):
        ctx.skip("not today")
    assert ctx.skipped
    assert not ctx.failed


def test_assertions_fail_softly() -> None:
    ctx = StepContext(name="step")
    assert isinstance(ctx.assert_that(1), Assertion)
    ctx.assert_that(True).is_true()
    ctx.assert_that(False).is_false()
    ctx.assert_that(3).is_equal(3)
    ctx.assert_that("b").is_in("a", "b")
    ctx.assert_that([1]).is_not_empty()
    assert not ctx.failed

    ctx.assert_that(1).is_true()
    ctx.assert_that(2).is_equal(3)
    ctx.assert_that("z").is_in("a", "b")
    ctx.assert_that("").is_not_empty()
    ctx.assert_that(5).is_not_empty()
    assert ctx.failed
    assert ctx.errors[0] == "expected True, got 1"
    assert ctx.errors[1] == "expected 3, got 2"
    assert len(ctx.errors) == 5
