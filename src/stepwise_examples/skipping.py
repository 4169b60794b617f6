from __future__ import annotations

from stepwise import Steps, scenario


class SkipScenarios:
    @scenario
    def scenario_with_skipped_step(self, steps: Steps) -> None:
        calls: list[str] = []

        steps.given("Given this step executes", lambda: calls.append("given"))

        @steps.step("When this step is skipped").skip("Feature not yet implemented")
        def _never() -> None:
            raise AssertionError("A skipped step must not run")

        @steps.then("Then this step also executes")
        def _check() -> None:
            assert calls == ["given"]

    @scenario
    def scenario_with_conditional_skip(self, steps: Steps) -> None:
        feature_enabled = False

        steps.given("Given a feature flag", lambda: None)

        when_step = steps.step("When the feature is used")
        if not feature_enabled:
            when_step.skip("Feature disabled")
        when_step(lambda: None)

        steps.then("Then the scenario continues", lambda: None)
