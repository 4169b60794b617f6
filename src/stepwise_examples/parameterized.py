from __future__ import annotations

from stepwise import Steps, example, scenario
from stepwise_examples.calculator import Calculator


class ParameterizedScenarios:
    @scenario
    @example(ints=[1, 2, 3])
    @example(ints=[2, 3, 5])
    @example(ints=[5, 7, 12])
    @example(ints=[10, 20, 30])
    def addition_with_examples(self, steps: Steps, x: int, y: int, expected: int) -> None:
        # Every example gets its own invocation, so this dict is never shared between them.
        state: dict[str, int] = {}

        steps.given("Given a calculator", lambda: None)
        steps.and_(f"And the numbers {x} and {y}", lambda: None)
        steps.when("When I add them together", lambda: state.update(result=Calculator().add(x, y)))

        @steps.then(f"Then the result should be {expected}")
        def _check() -> None:
            assert state["result"] == expected

    @scenario
    @example(ints=[10, 5, 5])
    @example(ints=[20, 10, 10])
    @example(ints=[100, 50, 50])
    def subtraction_with_examples(self, steps: Steps, x: int, y: int, expected: int) -> None:
        state: dict[str, int] = {}

        steps.given(f"Given the numbers {x} and {y}", lambda: None)
        steps.when(f"When I subtract {y} from {x}", lambda: state.update(result=Calculator().subtract(x, y)))

        @steps.then(f"Then the result should be {expected}")
        def _check() -> None:
            assert state["result"] == expected

    @scenario
    @example(ints=[3], texts=["ab"], booleans=[True])
    def repeated_text(self, steps: Steps, times: int, text: str, upper: bool) -> None:
        state: dict[str, str] = {}

        @steps.when(f"When '{text}' is repeated {times} times")
        def _repeat() -> None:
            value = text * times
            state["value"] = value.upper() if upper else value

        @steps.then("Then the text has the expected length and case")
        def _check() -> None:
            assert len(state["value"]) == len(text) * times
            assert state["value"].isupper() is upper
