from __future__ import annotations

from stepwise import FailurePolicy, Steps, scenario


class OnFailureScenarios:
    @scenario
    def continue_policy_on_every_step(self, steps: Steps) -> None:
        state = {"setup": False, "action": False}

        steps.given("Given a resource is set up", lambda: state.update(setup=True)).on_failure(
            FailurePolicy.CONTINUE
        )

        @steps.when("When an action is performed")
        def _act() -> None:
            assert state["setup"]
            state["action"] = True

        _act.on_failure(FailurePolicy.CONTINUE)

        @steps.then("Then cleanup happens")
        def _cleanup() -> None:
            assert state["action"]

        _cleanup.on_failure(FailurePolicy.CONTINUE)

    @scenario
    def continue_policy_for_cleanup_steps(self, steps: Steps) -> None:
        resource: list[str] = []

        steps.given("Given a resource is created", lambda: resource.append("created"))

        @steps.step("When the resource is used").on_failure(FailurePolicy.CONTINUE)
        def _use() -> None:
            resource.append("used")
            assert resource == ["created", "used"]

        @steps.step("Then the resource is cleaned up").on_failure(FailurePolicy.CONTINUE)
        def _clean() -> None:
            resource.append("cleaned")
            assert resource == ["created", "used", "cleaned"]
