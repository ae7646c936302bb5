"""Tests for guessgame.orchestrator -- the round-robin session loop."""

import asyncio

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from guessgame.game_constants import (
    FEEDBACK_ERROR,
    FEEDBACK_HELP,
    FEEDBACK_INFO,
    FEEDBACK_SUCCESS,
    IN_GAME_HELP,
)
from guessgame.line_reader import LineReader
from guessgame.models import OutcomeKind, SessionConfig
from guessgame.orchestrator import RoundOrchestrator, run_session
from guessgame.turn_resolver import TurnResolver
from tests.helpers import Delay, FakeClock, RecordingFeedback, ScriptedLineSource


def _config(players=("Ana",), target=25, max_range=50, difficulty="easy", time_limit=2.0):
    return SessionConfig(
        difficulty=difficulty,
        target=target,
        max_range=max_range,
        time_limit=time_limit,
        players=players,
    )


# ---------------------------------------------------------------------------
# End-to-end scenarios
# ---------------------------------------------------------------------------

class TestScenarios:

    @pytest.mark.asyncio
    async def test_single_player_first_guess_wins(self, scripted_source, feedback, clock):
        result = await run_session(_config(), scripted_source("25"), feedback, clock=clock)
        assert result.winner == "Ana"
        assert result.attempts == 1
        assert result.elapsed_seconds == 0.0
        # One attempt costs 10 points even with no time penalty
        assert result.scores == {"Ana": 990}
        assert feedback.messages(FEEDBACK_SUCCESS) == ["Ana wins with 1 attempts in 0s!"]

    @pytest.mark.asyncio
    async def test_too_low_hint(self, scripted_source, feedback):
        config = _config(target=70, max_range=100, difficulty="medium")
        result = await run_session(config, scripted_source("50", "70"), feedback)
        assert feedback.messages(FEEDBACK_INFO) == ["Too low! Getting warmer..."]
        assert result.turns[0].kind is OutcomeKind.VALID_INCORRECT
        assert result.turns[0].value == 50

    @pytest.mark.asyncio
    async def test_invalid_input_consumes_attempt_and_advances(self, scripted_source, feedback):
        config = _config(players=("Ana", "Bo"))
        result = await run_session(config, scripted_source("abc", "25"), feedback)
        assert result.attempts == 2
        assert result.winner == "Bo"
        assert feedback.messages(FEEDBACK_ERROR) == ["Please enter a valid number (digits only)"]

    @pytest.mark.asyncio
    async def test_timeout_then_other_player_wins(self, scripted_source, feedback):
        # Ana's answer arrives after her deadline and must not count for Bo
        config = _config(players=("Ana", "Bo"), time_limit=0.5)
        source = scripted_source(Delay(0.7, "25\n"), "25")
        result = await run_session(config, source, feedback)
        assert result.attempts == 2
        assert result.winner == "Bo"
        assert "Ana" not in result.scores
        assert [t.kind for t in result.turns] == [OutcomeKind.TIMED_OUT, OutcomeKind.CORRECT]
        assert "Time's up, Ana! Your turn is skipped." in feedback.messages(FEEDBACK_ERROR)

    @pytest.mark.asyncio
    async def test_late_input_never_reaches_next_player(self, scripted_source, feedback):
        config = _config(players=("Ana", "Bo"), time_limit=0.5)
        source = scripted_source(Delay(0.7, "25\n"), "10", "25")
        result = await run_session(config, source, feedback)
        assert [(t.player, t.kind) for t in result.turns] == [
            ("Ana", OutcomeKind.TIMED_OUT),
            ("Bo", OutcomeKind.VALID_INCORRECT),
            ("Ana", OutcomeKind.CORRECT),
        ]
        assert result.turns[1].value == 10
        assert result.winner == "Ana"
        assert result.attempts == 3


# ---------------------------------------------------------------------------
# State machine details
# ---------------------------------------------------------------------------

class TestTurnLoop:

    @pytest.mark.asyncio
    async def test_help_repeats_same_player_without_attempt(self, scripted_source, feedback):
        config = _config(players=("Ana", "Bo"))
        result = await run_session(config, scripted_source("help", "help", "25"), feedback)
        assert result.winner == "Ana"
        assert result.attempts == 1
        assert feedback.messages(FEEDBACK_HELP) == [IN_GAME_HELP, IN_GAME_HELP]
        assert all(p.startswith("[Ana's Turn]") for p in feedback.prompts())
        assert len(feedback.prompts()) == 3

    @pytest.mark.asyncio
    async def test_out_of_range_feedback(self, scripted_source, feedback):
        result = await run_session(_config(), scripted_source("99", "25"), feedback)
        assert result.attempts == 2
        assert feedback.messages(FEEDBACK_ERROR) == ["Number must be between 1 and 50"]

    @pytest.mark.asyncio
    async def test_end_of_stream_is_reported_and_game_continues(self, scripted_source, feedback):
        from tests.helpers import EOF
        result = await run_session(_config(), scripted_source(EOF, "25"), feedback)
        assert result.attempts == 2
        assert result.turns[0].kind is OutcomeKind.INVALID_FORMAT
        assert any("Input unavailable" in m for m in feedback.messages(FEEDBACK_ERROR))

    @pytest.mark.asyncio
    async def test_prompt_names_player_and_range(self, scripted_source, feedback):
        await run_session(_config(max_range=50), scripted_source("25"), feedback)
        assert feedback.prompts() == ["[Ana's Turn] Enter your guess (1-50) or 'help': "]

    @pytest.mark.asyncio
    async def test_round_robin_wraps(self, scripted_source, feedback):
        config = _config(players=("Ana", "Bo", "Cy"))
        source = scripted_source("1", "2", "3", "4", "25")
        result = await run_session(config, source, feedback)
        assert [t.player for t in result.turns] == ["Ana", "Bo", "Cy", "Ana", "Bo"]
        assert result.winner == "Bo"

    @pytest.mark.asyncio
    async def test_score_uses_elapsed_time_and_difficulty(self, scripted_source, feedback, clock):
        class AdvancingResolver(TurnResolver):
            async def resolve(self, target, max_range, time_limit):
                clock.advance(7.0)
                return await super().resolve(target, max_range, time_limit)

        config = _config(players=("Ana", "Bo"), target=150, max_range=200, difficulty="hard")
        resolver = AdvancingResolver(LineReader(scripted_source("10", "150")))
        orchestrator = RoundOrchestrator(config, resolver, feedback, clock=clock)
        result = await orchestrator.run()
        # 2 attempts, 14s elapsed: (1000 - 20 - 2) * 2
        assert result.elapsed_seconds == 14.0
        assert result.scores == {"Bo": 1956}
        assert orchestrator.attempts == 2

    @pytest.mark.asyncio
    async def test_accepts_shared_reader(self, scripted_source, feedback):
        reader = LineReader(scripted_source("25"))
        result = await run_session(_config(), reader, feedback)
        assert result.winner == "Ana"
        assert reader.busy is False

    @pytest.mark.asyncio
    async def test_result_carries_session_details(self, scripted_source, feedback):
        config = _config(players=("Ana", "Bo"), target=33)
        result = await run_session(config, scripted_source("33"), feedback)
        assert result.target == 33
        assert result.max_range == 50
        assert result.players == ("Ana", "Bo")
        assert result.difficulty.value == "easy"


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

miss = st.one_of(
    st.sampled_from(["abc", "", "4.5", "help", "0", "51", "-7"]),
    st.integers(min_value=1, max_value=24).map(str),
    st.integers(min_value=26, max_value=50).map(str),
)


@settings(max_examples=40, deadline=None)
@given(player_count=st.integers(min_value=1, max_value=5), misses=st.lists(miss, max_size=12))
def test_round_robin_and_attempt_count(player_count, misses):
    players = tuple(f"P{i}" for i in range(player_count))
    source = ScriptedLineSource(misses + ["25"])
    try:
        result = asyncio.run(run_session(_config(players=players), source, RecordingFeedback(),
                                         clock=FakeClock()))
    finally:
        source.close()

    resolved = [m for m in misses if m != "help"] + ["25"]
    assert result.attempts == len(resolved)
    assert len(result.turns) == result.attempts
    for i, turn in enumerate(result.turns):
        assert turn.player == players[i % player_count]
    assert result.winner == players[(len(resolved) - 1) % player_count]
    assert list(result.scores) == [result.winner]
