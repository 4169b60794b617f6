from __future__ import annotations

import pytest

SCENARIOS = """
from stepwise import FailurePolicy, example, scenario


def _fail():
    raise AssertionError("expected failure")


class TestCalculator:
    @scenario
    def failing(self, steps):
        steps.given("Given a passing step", lambda: None)
        steps.when("When a step fails", _fail)
        steps.then("Then this step is skipped", lambda: None)

    @scenario
    @example(ints=[1, 2, 3])
    @example(ints=[2, 3, 5])
    def addition(self, steps, a, b, expected):
        steps.then(f"Then {a} + {b} is {expected}", lambda: None)

    @scenario
    def tolerant(self, steps):
        steps.given("Given a tolerated failure", _fail).on_failure(FailurePolicy.CONTINUE)
        steps.step("When not ready").skip("Not implemented")(lambda: None)
        steps.then("Then it still runs", lambda: None)


class TestPlain:
    def test_regular(self):
        assert True
"""


def test_steps_are_collected_as_items(pytester: pytest.Pytester) -> None:
    # One pytest item per step, nested under scenario and example nodes.
    pytester.makepyfile(test_scenarios=SCENARIOS)
    result = pytester.runpytest("-p", "stepwise.plugin", "--collect-only", "-q")
    result.stdout.fnmatch_lines(
        [
            "*TestCalculator::failing::1: Given a passing step",
            "*TestCalculator::failing::3: Then this step is skipped",
            "*TestCalculator::addition::Example #1: [[]1, 2, 3[]]::1: Then 1 + 2 is 3",
            "*TestCalculator::addition::Example #2: [[]2, 3, 5[]]::1: Then 2 + 3 is 5",
            "*TestPlain::test_regular",
        ]
    )


def test_outcomes_follow_failure_policy(pytester: pytest.Pytester) -> None:
    # A failure skips the rest of its scenario unless the step tolerates failure.
    pytester.makepyfile(test_scenarios=SCENARIOS)
    result = pytester.runpytest("-p", "stepwise.plugin", "-rs")
    result.assert_outcomes(passed=5, failed=2, skipped=2)
    result.stdout.fnmatch_lines(["*Previous step failed*", "*Not implemented*"])


def test_discovery_error_is_a_collection_error(pytester: pytest.Pytester) -> None:
    pytester.makepyfile(
        test_broken="""
from stepwise import example, scenario


class TestBroken:
    @scenario
    @example(ints=[1, 2])
    def mismatch(self, steps, a):
        steps.given("Given", lambda: None)
"""
    )
    result = pytester.runpytest("-p", "stepwise.plugin")
    result.assert_outcomes(errors=1)
    result.stdout.fnmatch_lines(["*ParameterCountError*"])
