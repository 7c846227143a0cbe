"""Tests for ConversationOrchestrator."""

import asyncio
from dataclasses import replace

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from salestrainer.core.db import Base
from salestrainer.core.errors import InvalidStateError, NotFoundError, TransientServiceError
from salestrainer.models import MessageRole, SessionStatus
from salestrainer.services.conversation import (
    AssistantTurn,
    ConversationOrchestrator,
    build_context,
)
from salestrainer.services.evaluation import EvaluationEngine
from salestrainer.services.locks import SessionLocks
from salestrainer.services.session_store import SessionStore
from tests.factories import (
    FakeGenerativeClient,
    MessageFactory,
    TrainingSessionFactory,
    evaluation_json,
)


@pytest.fixture
def llm() -> FakeGenerativeClient:
    return FakeGenerativeClient()


@pytest.fixture
def orchestrator(db_session, llm, settings) -> ConversationOrchestrator:
    return ConversationOrchestrator(
        SessionStore(db_session), llm, SessionLocks(), replace(settings, tts_enabled=False)
    )


class TestSubmitUserTurn:
    @pytest.mark.asyncio
    async def test_context_includes_full_history(self, orchestrator, llm, db_session):
        session = await TrainingSessionFactory.create(db_session, language="English")
        llm.queue("r1", "r2")

        first = await orchestrator.submit_user_turn(session.id, "Hi")
        second = await orchestrator.submit_user_turn(str(session.id), "What about price?")

        assert first.reply == "r1"
        assert second.reply == "r2"

        context = llm.calls[1]["messages"]
        assert [m["role"] for m in context] == ["system", "user", "assistant", "user"]
        assert [m["content"] for m in context[1:]] == ["Hi", "r1", "What about price?"]
        assert session.scenario in context[0]["content"]
        assert llm.calls[1]["temperature"] == 0.7

    @pytest.mark.asyncio
    async def test_log_records_both_sides(self, orchestrator, llm, db_session):
        session = await TrainingSessionFactory.create(db_session)
        llm.queue("Hello, I'm looking for a battery.")

        await orchestrator.submit_user_turn(session.id, "Welcome!")

        messages = await SessionStore(db_session).messages(session.id)
        assert [(m.sequence, m.role) for m in messages] == [(1, "user"), (2, "assistant")]

    @pytest.mark.asyncio
    async def test_user_message_survives_backend_failure(self, orchestrator, llm, db_session):
        session = await TrainingSessionFactory.create(db_session)
        llm.queue(TransientServiceError("timeout"))

        with pytest.raises(TransientServiceError):
            await orchestrator.submit_user_turn(session.id, "Hi")

        messages = await SessionStore(db_session).messages(session.id)
        assert [(m.role, m.content) for m in messages] == [("user", "Hi")]

    @pytest.mark.asyncio
    async def test_empty_reply_is_a_failure(self, orchestrator, llm, db_session):
        session = await TrainingSessionFactory.create(db_session)
        llm.queue("   ")

        with pytest.raises(TransientServiceError):
            await orchestrator.submit_user_turn(session.id, "Hi")

    @pytest.mark.asyncio
    async def test_completed_session_rejects_turns(self, orchestrator, llm, db_session):
        session = await TrainingSessionFactory.create(
            db_session, status=SessionStatus.COMPLETED.value, score=4.0
        )

        with pytest.raises(InvalidStateError):
            await orchestrator.submit_user_turn(session.id, "Hi")

        assert llm.calls == []
        assert await SessionStore(db_session).messages(session.id) == []

    @pytest.mark.asyncio
    async def test_unknown_session_raises_not_found(self, orchestrator):
        with pytest.raises(NotFoundError):
            await orchestrator.submit_user_turn("00000000-0000-0000-0000-000000000000", "Hi")

    @pytest.mark.asyncio
    async def test_context_window_keeps_newest_messages(self, db_session, llm, settings):
        session = await TrainingSessionFactory.create(db_session)
        for sequence in range(1, 5):
            role = MessageRole.USER if sequence % 2 else MessageRole.ASSISTANT
            await MessageFactory.create(db_session, session, sequence, role, f"m{sequence}")
        orchestrator = ConversationOrchestrator(
            SessionStore(db_session),
            llm,
            SessionLocks(),
            replace(settings, tts_enabled=False, context_max_messages=2),
        )
        llm.queue("ok")

        await orchestrator.submit_user_turn(session.id, "latest")

        context = llm.calls[0]["messages"]
        assert context[0]["role"] == "system"
        assert [m["content"] for m in context[1:]] == ["m4", "latest"]


class TestSpeech:
    @pytest.mark.asyncio
    async def test_reply_audio_written_to_audio_dir(self, db_session, llm, settings):
        session = await TrainingSessionFactory.create(db_session)
        orchestrator = ConversationOrchestrator(
            SessionStore(db_session), llm, SessionLocks(), settings
        )
        llm.queue("Sounds good.")

        turn = await orchestrator.submit_user_turn(session.id, "Hi")

        assert turn.audio_url.startswith(f"/audio/{session.id}-")
        assert turn.audio_url.endswith(".mp3")
        filename = turn.audio_url.rsplit("/", 1)[1]
        assert (settings.audio_dir / filename).read_bytes() == llm.audio
        assert llm.speech_calls == ["Sounds good."]

    @pytest.mark.asyncio
    async def test_speech_failure_keeps_text_turn(self, db_session, llm, settings):
        session = await TrainingSessionFactory.create(db_session)
        orchestrator = ConversationOrchestrator(
            SessionStore(db_session), llm, SessionLocks(), settings
        )
        llm.speech_error = TransientServiceError("tts down")
        llm.queue("Sounds good.")

        turn = await orchestrator.submit_user_turn(session.id, "Hi")

        assert turn.reply == "Sounds good."
        assert turn.audio_url is None
        assert len(await SessionStore(db_session).messages(session.id)) == 2

    @pytest.mark.asyncio
    async def test_speech_disabled(self, orchestrator, llm, db_session):
        session = await TrainingSessionFactory.create(db_session)
        llm.queue("Sounds good.")

        turn = await orchestrator.submit_user_turn(session.id, "Hi")

        assert turn.audio_url is None
        assert llm.speech_calls == []


class TestBuildContext:
    @pytest.mark.asyncio
    async def test_persona_uses_session_language(self, db_session):
        session = await TrainingSessionFactory.create(db_session, language="German")

        context = build_context(session, [])

        assert len(context) == 1
        assert "German" in context[0]["content"]
        assert session.ideal_resolution in context[0]["content"]


class TestSessionLocks:
    def test_same_session_shares_lock(self):
        locks = SessionLocks()

        first = locks.lock_for("abc")
        assert locks.lock_for("abc") is first
        assert locks.lock_for("other") is not first

    @pytest.mark.asyncio
    async def test_lock_serializes_holders(self):
        locks = SessionLocks()
        order = []

        async def worker(name: str):
            async with locks.lock_for("session"):
                order.append(f"{name}-start")
                await asyncio.sleep(0.01)
                order.append(f"{name}-end")

        await asyncio.gather(worker("a"), worker("b"))

        assert order == ["a-start", "a-end", "b-start", "b-end"]

    def test_released_locks_are_dropped(self):
        locks = SessionLocks()
        lock = locks.lock_for("abc")
        assert len(locks) == 1

        del lock

        assert len(locks) == 0


@pytest_asyncio.fixture
async def session_maker(tmp_path):
    """File-backed SQLite so each concurrent task gets its own connection."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'concurrent.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


class RoutingClient(FakeGenerativeClient):
    """Answers evaluation requests with an evaluation and dialogue with a reply."""

    async def complete(self, messages, temperature=0.7, response_format=None):
        self.queue(evaluation_json() if response_format else "Tell me more.")
        return await super().complete(messages, temperature, response_format)


class TestConcurrentSessionAccess:
    @pytest.mark.asyncio
    async def test_concurrent_turns_keep_each_reply_after_its_message(
        self, session_maker, settings
    ):
        llm = FakeGenerativeClient(["reply-1", "reply-2"], delay=0.01)
        locks = SessionLocks()
        turn_settings = replace(settings, tts_enabled=False)
        async with session_maker() as db:
            session_id = (await TrainingSessionFactory.create(db)).id

        async def submit(text: str) -> AssistantTurn:
            async with session_maker() as db:
                orchestrator = ConversationOrchestrator(SessionStore(db), llm, locks, turn_settings)
                return await orchestrator.submit_user_turn(session_id, text)

        first, second = await asyncio.gather(submit("first"), submit("second"))

        replies = {"first": first.reply, "second": second.reply}
        assert sorted(replies.values()) == ["reply-1", "reply-2"]

        async with session_maker() as db:
            messages = await SessionStore(db).messages(session_id)

        assert [m.sequence for m in messages] == [1, 2, 3, 4]
        assert [m.role for m in messages] == ["user", "assistant", "user", "assistant"]
        for user_message, assistant_message in zip(messages[0::2], messages[1::2]):
            assert assistant_message.content == replies[user_message.content]

        # The later turn saw the earlier exchange in full
        later_context = llm.calls[1]["messages"]
        assert [m["role"] for m in later_context] == [
            "system",
            "user",
            "assistant",
            "user",
        ]

    @pytest.mark.asyncio
    async def test_turn_racing_completion_is_never_split(self, session_maker, settings):
        llm = RoutingClient(delay=0.01)
        locks = SessionLocks()
        turn_settings = replace(settings, tts_enabled=False)
        async with session_maker() as db:
            session_id = (await TrainingSessionFactory.create(db)).id

        async def submit() -> AssistantTurn:
            async with session_maker() as db:
                orchestrator = ConversationOrchestrator(SessionStore(db), llm, locks, turn_settings)
                return await orchestrator.submit_user_turn(session_id, "Hi")

        async def complete():
            async with session_maker() as db:
                return await EvaluationEngine(SessionStore(db), llm, locks).complete(session_id)

        turn, result = await asyncio.gather(submit(), complete(), return_exceptions=True)

        assert result.final_score == 4.0
        async with session_maker() as db:
            store = SessionStore(db)
            stored = await store.require(session_id)
            messages = await store.messages(session_id)
        assert stored.status == SessionStatus.COMPLETED.value

        if isinstance(turn, InvalidStateError):
            # Completion won the lock; the turn left nothing behind
            assert messages == []
        else:
            assert isinstance(turn, AssistantTurn)
            assert [(m.role, m.content) for m in messages] == [
                ("user", "Hi"),
                ("assistant", "Tell me more."),
            ]
            evaluation_call = next(c for c in llm.calls if c["response_format"])
            assert "user: Hi\nassistant: Tell me more." in evaluation_call["messages"][1]["content"]
