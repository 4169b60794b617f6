from __future__ import annotations

from stepwise import Steps, scenario
from stepwise_examples.calculator import Calculator


class BasicScenarios:
    @scenario
    def simple_addition(self, steps: Steps) -> None:
        state: dict[str, object] = {}

        steps.given("Given a calculator", lambda: state.update(calculator=Calculator()))

        @steps.when("When I add 2 and 3")
        def _add() -> None:
            calculator = state["calculator"]
            assert isinstance(calculator, Calculator)
            state["result"] = calculator.add(2, 3)

        @steps.then("Then the result should be 5")
        def _check() -> None:
            assert state["result"] == 5

    @scenario(display_name="scenario with string interpolation")
    def interpolated(self, steps: Steps) -> None:
        x, y = 10, 5
        state = {"result": 0}

        steps.given(f"Given the numbers {x} and {y}", lambda: None)
        steps.when("When I multiply them together", lambda: state.update(result=x * y))

        @steps.then(f"Then the result should be {x * y}")
        def _check() -> None:
            assert state["result"] == 50

    @scenario
    def multiple_operations(self, steps: Steps) -> None:
        calculator = Calculator()
        state = {"sum": 0, "product": 0}

        steps.given("Given a calculator", lambda: None)
        steps.when("When I add 5 and 7", lambda: state.update(sum=calculator.add(5, 7)))
        steps.and_("And I multiply 4 and 6", lambda: state.update(product=calculator.multiply(4, 6)))

        @steps.then("Then the sum should be 12")
        def _sum() -> None:
            assert state["sum"] == 12

        @steps.and_("And the product should be 24")
        def _product() -> None:
            assert state["product"] == 24
