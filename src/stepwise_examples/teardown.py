from __future__ import annotations

from stepwise import Steps, scenario


class Resource:
    def __init__(self, name: str) -> None:
        self.name = name
        self.is_open = False
        self.is_closed = False

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_closed = True
        self.is_open = False


class TeardownScenarios:
    @scenario
    def resource_cleanup(self, steps: Steps) -> None:
        state: dict[str, Resource] = {}

        @steps.given("Given a resource")
        def _open() -> None:
            state["resource"] = Resource("test-resource")
            state["resource"].open()
            assert state["resource"].is_open

        _open.teardown(lambda: state["resource"].close())

        @steps.when("When I check the resource was cleaned up")
        def _check() -> None:
            assert state["resource"].is_closed

        steps.then("Then subsequent steps continue normally", lambda: None)

    @scenario
    def multiple_teardowns(self, steps: Steps) -> None:
        resources: list[Resource] = []
        closed: list[str] = []

        def _close(resource: Resource) -> None:
            resource.close()
            closed.append(resource.name)

        @steps.given("Given multiple resources")
        def _open() -> None:
            for name in ("resource-1", "resource-2", "resource-3"):
                resource = Resource(name)
                resource.open()
                resources.append(resource)

        (
            _open.teardown(lambda: _close(resources[0]))
            .teardown(lambda: _close(resources[1]))
            .teardown(lambda: _close(resources[2]))
        )

        @steps.when("When I verify they were all cleaned up in order")
        def _check() -> None:
            assert all(resource.is_closed for resource in resources)
            assert closed == ["resource-1", "resource-2", "resource-3"]

    @scenario
    def teardown_declared_up_front(self, steps: Steps) -> None:
        log: list[str] = []

        @steps.step("Given a step with a pre-declared teardown").teardown(lambda: log.append("teardown"))
        def _body() -> None:
            log.append("body")

        @steps.then("Then the teardown ran after the body")
        def _check() -> None:
            assert log == ["body", "teardown"]
