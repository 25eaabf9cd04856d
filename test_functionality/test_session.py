"""
Test the chat session state machine
"""
import asyncio

import pytest

from application.session import PREVIEW_LIMIT, ChatSession, SessionState, preview
from application.transcript import TranscriptWriter
from domain.models import Role
from domain.ports import NoticeLevel

from conftest import FakeAgent, RecordingPresenter


async def _chat(session, *lines):
    for line in lines:
        await session.handle_line(line)


# ---------------------------------------------------------------------------
# Chat turns
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
@pytest.mark.parametrize("turns", [1, 2, 5])
async def test_successful_turns_alternate_user_agent(session, turns):
    await _chat(session, *(f"question {i}" for i in range(turns)))

    transcript = session.ctx.transcript
    assert len(transcript) == 2 * turns
    assert [t.role for t in transcript] == [Role.USER, Role.AGENT] * turns
    assert session.ctx.turn_count == turns
    assert session.state is SessionState.AWAITING_INPUT


@pytest.mark.asyncio
async def test_turn_uses_session_thread_and_reports_reply(session, agent, presenter):
    await session.handle_line("What is Azure Functions?")

    assert agent.calls == [("What is Azure Functions?", session.ctx.thread)]
    text, elapsed_ms, message_count = presenter.replies[0]
    assert text == "echo: What is Azure Functions?"
    assert elapsed_ms >= 0
    assert message_count == 2


@pytest.mark.asyncio
async def test_failed_turn_rolls_back_user_message(presenter, memory, tmp_path):
    agent = FakeAgent(fail_on={3})
    session = ChatSession(agent, presenter, TranscriptWriter(tmp_path), memory)

    await _chat(session, "one", "two", "three")

    assert len(session.ctx.transcript) == 4
    assert session.ctx.transcript[-1].text == "echo: two"
    assert session.ctx.turn_count == 2
    assert presenter.notices[-1] == (NoticeLevel.ERROR, "Error: service unavailable")
    assert session.active


@pytest.mark.asyncio
async def test_session_continues_after_failure(presenter, tmp_path):
    session = ChatSession(FakeAgent(fail_on={1}), presenter, TranscriptWriter(tmp_path))

    await _chat(session, "first", "second")

    assert [t.text for t in session.ctx.transcript] == ["second", "echo: second"]


@pytest.mark.asyncio
async def test_interrupted_turn_rolls_back_and_keeps_cancelling(presenter, tmp_path):
    session = ChatSession(FakeAgent(cancel_on={2}), presenter, TranscriptWriter(tmp_path))
    await session.handle_line("first")
    before = list(session.ctx.transcript)

    with pytest.raises(asyncio.CancelledError):
        await session.handle_line("second")

    assert session.ctx.transcript == before
    assert session.ctx.turn_count == 1
    assert not any(level is NoticeLevel.ERROR for level, _ in presenter.notices)


@pytest.mark.asyncio
@pytest.mark.parametrize("line", ["", "   ", "\t\n"])
async def test_blank_input_is_a_no_op(session, agent, presenter, line):
    state = await session.handle_line(line)

    assert state is SessionState.AWAITING_INPUT
    assert agent.calls == []
    assert session.ctx.transcript == []
    assert presenter.notices == []


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_unknown_command_prints_one_notice(session, presenter):
    await _chat(session, "hello")
    before = list(session.ctx.transcript)

    state = await session.handle_line("/unknown")

    assert state is SessionState.AWAITING_INPUT
    assert session.active
    assert len(presenter.notices) == 1
    level, text = presenter.notices[0]
    assert level is NoticeLevel.ERROR
    assert "/unknown" in text
    assert session.ctx.transcript == before


@pytest.mark.asyncio
async def test_exit_ends_session(session, presenter):
    state = await session.handle_line("/exit")

    assert state is SessionState.EXITED
    assert not session.active
    assert presenter.notices == [(NoticeLevel.INFO, "Goodbye! Thanks for chatting.")]


@pytest.mark.asyncio
@pytest.mark.parametrize("command", ["/clear", "/new", "/NEW"])
async def test_reset_clears_transcript_and_thread(session, agent, presenter, command):
    await _chat(session, "one", "two")
    old_thread = session.ctx.thread

    await session.handle_line(command)

    assert session.ctx.transcript == []
    assert session.ctx.turn_count == 0
    assert session.ctx.thread != old_thread
    assert agent.threads_created == 2
    assert presenter.clears == 1 and presenter.banners == 1


@pytest.mark.asyncio
async def test_reset_on_empty_session(session):
    await session.handle_line("/clear")
    assert session.ctx.transcript == []
    assert session.ctx.turn_count == 0


@pytest.mark.asyncio
async def test_turn_after_reset_uses_new_thread(session, agent):
    await _chat(session, "one", "/clear", "two")
    assert agent.calls[0][1] != agent.calls[1][1]
    assert len(session.ctx.transcript) == 2


@pytest.mark.asyncio
async def test_history_when_empty(session, presenter):
    await session.handle_line("/history")
    assert presenter.histories == []
    assert presenter.notices[0][0] is NoticeLevel.INFO


@pytest.mark.asyncio
async def test_history_shows_transcript_without_modifying_it(session, presenter):
    long_text = "x" * 250
    await _chat(session, long_text, "/history")

    assert presenter.histories == [session.ctx.transcript]
    assert session.ctx.transcript[0].text == long_text


def test_preview_truncates_long_text():
    text = "a" * (PREVIEW_LIMIT + 1)
    assert preview(text) == "a" * PREVIEW_LIMIT + "..."


@pytest.mark.parametrize("length", [0, 1, PREVIEW_LIMIT])
def test_preview_keeps_short_text(length):
    text = "b" * length
    assert preview(text) == text


@pytest.mark.asyncio
async def test_help_lists_commands(session, presenter):
    await session.handle_line("/help")
    usages = [usage for usage, _ in presenter.help_entries[0]]
    assert usages == ["/help", "/clear", "/new", "/history", "/memory", "/profile", "/save", "/exit"]


@pytest.mark.asyncio
async def test_save_with_no_turns_writes_nothing(session, presenter, tmp_path):
    await session.handle_line("/save")

    assert list(tmp_path.iterdir()) == []
    assert presenter.notices == [(NoticeLevel.INFO, "No conversation to save yet.")]


@pytest.mark.asyncio
async def test_save_writes_file(session, presenter, tmp_path):
    await _chat(session, "hello", "/save")

    files = list(tmp_path.glob("conversation_*.txt"))
    assert len(files) == 1
    assert "Messages: 2" in files[0].read_text(encoding="utf-8")
    assert presenter.notices[-1][0] is NoticeLevel.SUCCESS


@pytest.mark.asyncio
async def test_save_failure_is_reported_and_session_continues(agent, presenter, tmp_path):
    session = ChatSession(agent, presenter, TranscriptWriter(tmp_path / "missing"))

    await _chat(session, "hello", "/save", "again")

    level, text = presenter.notices[-1]
    assert level is NoticeLevel.ERROR
    assert text.startswith("Failed to save conversation:")
    assert len(session.ctx.transcript) == 4


@pytest.mark.asyncio
async def test_memory_command_shows_context_block(session, presenter, memory):
    await session.handle_line("/memory")
    assert presenter.memory_blocks == [memory.render_context()]


@pytest.mark.asyncio
async def test_memory_command_on_empty_store_shows_empty_block(agent, presenter, tmp_path):
    from agent.memory import MemoryStore

    session = ChatSession(agent, presenter, TranscriptWriter(tmp_path), MemoryStore())
    await session.handle_line("/memory")

    assert presenter.memory_blocks == [""]


@pytest.mark.asyncio
async def test_profile_command_shows_default_fields(session, presenter):
    await session.handle_line("/profile")
    rows = presenter.profiles[0]
    assert [label for label, _ in rows] == ["Name", "Nickname", "Title", "Interests", "City", "Country"]
    assert rows[0] == ("Name", "Pablo Piovano")
    assert rows[5] == ("Country", "Argentina")


@pytest.mark.asyncio
@pytest.mark.parametrize("command", ["/memory", "/profile"])
async def test_memory_commands_without_memory(agent, presenter, tmp_path, command):
    session = ChatSession(agent, presenter, TranscriptWriter(tmp_path), memory=None)
    await session.handle_line(command)

    assert presenter.memory_blocks == [] and presenter.profiles == []
    assert presenter.notices[0][0] is NoticeLevel.WARNING


# ---------------------------------------------------------------------------
# Loop
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_run_stops_at_exit(session, agent):
    lines = iter(["hi", "/history", "/exit", "never read"])

    await session.run(lambda: next(lines))

    assert not session.active
    assert [call[0] for call in agent.calls] == ["hi"]
    assert next(lines) == "never read"


@pytest.mark.asyncio
async def test_run_treats_end_of_input_as_exit(session, presenter):
    await session.run(lambda: None)

    assert session.state is SessionState.EXITED
    assert presenter.notices[-1][1] == "Goodbye! Thanks for chatting."


def test_sessions_do_not_share_state(agent, tmp_path):
    first = ChatSession(agent, RecordingPresenter(), TranscriptWriter(tmp_path))
    second = ChatSession(agent, RecordingPresenter(), TranscriptWriter(tmp_path))
    assert first.ctx is not second.ctx
    assert first.ctx.thread != second.ctx.thread
