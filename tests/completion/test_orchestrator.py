from djangoql_completion.completion import Candidates, CompletionOrchestrator, CompletionRequest, Suggestion, matches
from djangoql_completion.core.context import Context, Scope
from djangoql_completion.core.schema import Schema


class StubStrategy:
    def __init__(self, name: str, match: bool, result: list[str], anchored: bool = False):
        self.name = name
        self._match = match
        self._result = result
        self._anchored = anchored
        self.calls = 0

    def can_handle(self, request: CompletionRequest) -> bool:
        self.calls += 1
        return self._match

    def get_candidates(self, request: CompletionRequest) -> Candidates:
        return Candidates(
            prefix=request.prefix,
            suggestions=[Suggestion(value) for value in self._result],
            anchored=self._anchored,
        )


class BrokenStrategy:
    def can_handle(self, request: CompletionRequest) -> bool:
        return True

    def get_candidates(self, request: CompletionRequest) -> Candidates:
        raise RuntimeError("boom")


def make_request(prefix: str = "") -> CompletionRequest:
    context = Context(
        prefix=prefix,
        scope=Scope.FIELD,
        model="core.book",
        field=None,
        current_full_token=None,
        model_stack=("core.book",),
    )
    return CompletionRequest(context=context, schema=Schema())


def test_orchestrator_selects_first_matching_strategy() -> None:
    strategies = [
        StubStrategy("A", match=False, result=[]),
        StubStrategy("B", match=True, result=["hit"]),
        StubStrategy("C", match=True, result=["miss"]),
    ]
    orchestrator = CompletionOrchestrator(strategies)

    result = orchestrator.get_completions(make_request())

    assert [s.text for s in result.suggestions] == ["hit"]
    assert strategies[0].calls == 1
    assert strategies[1].calls == 1
    assert strategies[2].calls == 0


def test_orchestrator_filters_by_substring() -> None:
    orchestrator = CompletionOrchestrator([StubStrategy("A", True, ["name", "username", "id"])])

    result = orchestrator.get_completions(make_request("name"))

    assert [s.text for s in result.suggestions] == ["name", "username"]
    assert result.prefix == "name"
    assert result.selected is None


def test_orchestrator_preselects_single_suggestion() -> None:
    orchestrator = CompletionOrchestrator([StubStrategy("A", True, ["name", "id"])])
    assert orchestrator.get_completions(make_request("i")).selected == 0


def test_orchestrator_without_matching_strategy() -> None:
    orchestrator = CompletionOrchestrator([StubStrategy("A", False, ["x"])])
    result = orchestrator.get_completions(make_request())
    assert result.suggestions == ()
    assert result.prefix == ""


def test_orchestrator_swallows_strategy_errors() -> None:
    orchestrator = CompletionOrchestrator([BrokenStrategy(), StubStrategy("B", True, ["x"])])
    result = orchestrator.get_completions(make_request())
    assert result.suggestions == ()


def test_matches() -> None:
    assert matches(Suggestion("username"), "name")
    assert not matches(Suggestion("username"), "Name")
    assert matches(Suggestion("username"), "Name", case_sensitive=False)
    assert matches(Suggestion("startswith"), "st", anchored=True)
    assert matches(Suggestion("not startswith"), "st", anchored=True)
    assert not matches(Suggestion("endswith"), "st", anchored=True)
    assert not matches(Suggestion("!="), "=", anchored=True)
    assert matches(Suggestion("anything"), "", anchored=True)
