import pytest

from fantasy_recap.config import RecapSettings
from fantasy_recap.recap import RecapRequest, generate_recap

from .samples import two_matchup_league


class RecordingGenerator:
    def __init__(self, *, fail: bool = False):
        self.prompts: list[str] = []
        self.fail = fail

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.fail:
            raise RuntimeError("upstream unavailable")
        return f"Recap number {len(self.prompts)}."


class RecordingNotifier:
    def __init__(self):
        self.messages: list[str] = []

    async def send(self, message: str) -> None:
        self.messages.append(message)


class BrokenNotifier:
    async def send(self, message: str) -> None:
        raise ConnectionError("webhook down")


@pytest.mark.anyio
async def test_two_matchup_recap_end_to_end():
    generator = RecordingGenerator()
    notifier = RecordingNotifier()

    outcome = await generate_recap(
        RecapRequest(scoreboard=two_matchup_league(), mood="spooky"),
        settings=RecapSettings(),
        generator=generator,
        notifier=notifier,
    )

    assert outcome.ok
    assert outcome.matchups == 2
    assert outcome.fallback_fragments == 0
    markup = outcome.markup
    assert markup.count("<h3>") == 2
    assert markup.index("Matchup 1: Team A 🆚 Team B") < markup.index("Matchup 2: Team D 🆚 Team C")
    assert "Highest scoring team: Team D with 130.8 points." in markup
    assert "Lowest scoring team: Team C with 95.0 points." in markup
    assert len(generator.prompts) == 2
    assert "spooky-themed" in generator.prompts[0]
    assert "Alpha Back (24.3 pts)" in generator.prompts[0]
    assert len(notifier.messages) == 1
    assert notifier.messages[0].startswith("✅ Recap for Test League week 3")


@pytest.mark.anyio
async def test_failing_generator_still_succeeds_with_fallbacks():
    outcome = await generate_recap(
        RecapRequest(scoreboard=two_matchup_league()),
        settings=RecapSettings(),
        generator=RecordingGenerator(fail=True),
        notifier=RecordingNotifier(),
    )

    assert outcome.ok
    assert outcome.fallback_fragments == 2
    assert markup_paragraphs(outcome.markup) >= 2


def markup_paragraphs(markup: str) -> int:
    return sum(1 for line in markup.splitlines() if line.startswith("<p>") and line.endswith("</p>"))


@pytest.mark.anyio
async def test_missing_api_key_fails_before_any_work():
    notifier = RecordingNotifier()

    outcome = await generate_recap(
        RecapRequest(scoreboard=two_matchup_league()),
        settings=RecapSettings(openai_api_key=None),
        notifier=notifier,
    )

    assert not outcome.ok
    assert outcome.status_code == 500
    assert "OPENAI_API_KEY" in outcome.reason
    assert notifier.messages[0].startswith("❌ Recap failed")


@pytest.mark.anyio
async def test_malformed_document_reports_bad_request_without_generating():
    generator = RecordingGenerator()

    outcome = await generate_recap(
        RecapRequest(scoreboard="<fantasy_content><league>"),
        settings=RecapSettings(),
        generator=generator,
        notifier=RecordingNotifier(),
    )

    assert outcome.status == "failure"
    assert outcome.status_code == 400
    assert generator.prompts == []


@pytest.mark.anyio
async def test_missing_scoreboard_path_is_named():
    outcome = await generate_recap(
        RecapRequest(scoreboard={"fantasy_content": {"league": {"name": "No Board"}}}),
        settings=RecapSettings(),
        generator=RecordingGenerator(),
        notifier=RecordingNotifier(),
    )

    assert outcome.status_code == 400
    assert "fantasy_content.league.scoreboard" in outcome.reason


@pytest.mark.anyio
async def test_notifier_failure_does_not_change_outcome():
    outcome = await generate_recap(
        RecapRequest(scoreboard=two_matchup_league()),
        settings=RecapSettings(),
        generator=RecordingGenerator(),
        notifier=BrokenNotifier(),
    )

    assert outcome.ok
    assert outcome.markup


@pytest.mark.anyio
async def test_non_numeric_week_is_a_bad_request():
    scoreboard = two_matchup_league().replace("<week>3</week>", "<week>inf</week>")
    generator = RecordingGenerator()

    outcome = await generate_recap(
        RecapRequest(scoreboard=scoreboard),
        settings=RecapSettings(),
        generator=generator,
        notifier=RecordingNotifier(),
    )

    assert outcome.status_code == 400
    assert "week" in outcome.reason
    assert generator.prompts == []
