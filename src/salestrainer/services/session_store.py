"""Durable record of training sessions and their ordered message logs."""

from typing import Any
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from salestrainer.core.errors import InvalidStateError, NotFoundError
from salestrainer.core.logging import get_logger
from salestrainer.models import Message, MessageRole, Scenario, SessionStatus, TrainingSession
from salestrainer.utils.datetime import now_utc

logger = get_logger(__name__)


def parse_session_id(session_id: UUID | str) -> UUID | None:
    """Parse a path parameter into a UUID, None when malformed."""
    if isinstance(session_id, UUID):
        return session_id
    try:
        return UUID(str(session_id))
    except (ValueError, TypeError):
        return None


class SessionStore:
    """
    Single source of truth for session state.

    Every write commits on its own: a message append is durable before any
    external call that follows it, and completion is one conditional UPDATE.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, mode: str, language: str, scenario: Scenario) -> TrainingSession:
        session = TrainingSession(
            mode=mode,
            language=language,
            scenario=scenario.scenario_description,
            scenario_context=scenario.customer_goal,
            ideal_resolution=scenario.ideal_resolution,
            scenario_details=scenario.details() or None,
            status=SessionStatus.ACTIVE.value,
            created_at=now_utc(),
        )
        self.db.add(session)
        await self.db.commit()
        await self.db.refresh(session)

        logger.info("session.created", session_id=str(session.id), mode=mode, language=language)
        return session

    async def get(self, session_id: UUID | str) -> TrainingSession | None:
        session_uuid = parse_session_id(session_id)
        if session_uuid is None:
            return None
        stmt = (
            select(TrainingSession)
            .where(TrainingSession.id == session_uuid)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def require(self, session_id: UUID | str) -> TrainingSession:
        session = await self.get(session_id)
        if session is None:
            raise NotFoundError("TrainingSession", str(session_id))
        return session

    async def require_active(self, session_id: UUID | str) -> TrainingSession:
        session = await self.require(session_id)
        if not session.is_active:
            raise InvalidStateError(
                "Session is not active",
                details={"session_id": str(session.id), "status": session.status},
            )
        return session

    async def list_recent(self, limit: int = 50) -> list[TrainingSession]:
        stmt = (
            select(TrainingSession)
            .order_by(TrainingSession.created_at.desc(), TrainingSession.id)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def append_message(self, session_id: UUID, role: MessageRole, content: str) -> Message:
        """Append to the log with the next per-session sequence number."""
        stmt = select(func.coalesce(func.max(Message.sequence), 0)).where(
            Message.session_id == session_id
        )
        last_sequence = (await self.db.execute(stmt)).scalar_one()

        message = Message(
            session_id=session_id,
            sequence=last_sequence + 1,
            role=role.value,
            content=content,
            created_at=now_utc(),
        )
        self.db.add(message)
        await self.db.commit()

        logger.debug(
            "message.appended",
            session_id=str(session_id),
            sequence=message.sequence,
            role=message.role,
        )
        return message

    async def messages(self, session_id: UUID) -> list[Message]:
        stmt = (
            select(Message)
            .where(Message.session_id == session_id)
            .order_by(Message.sequence.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def complete(
        self,
        session_id: UUID,
        score: float | None,
        analysis: dict[str, Any],
        suggestions: str | None,
    ) -> TrainingSession:
        """Write status, score, analysis and completed_at in one statement.

        The UPDATE only matches an active row, so a second completion (even a
        concurrent one) is rejected instead of overwriting the first.
        """
        stmt = (
            update(TrainingSession)
            .where(
                TrainingSession.id == session_id,
                TrainingSession.status == SessionStatus.ACTIVE.value,
            )
            .values(
                status=SessionStatus.COMPLETED.value,
                score=score,
                analysis=analysis,
                suggestions=suggestions,
                completed_at=now_utc(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        if result.rowcount != 1:
            await self.db.rollback()
            raise InvalidStateError(
                "Session is already completed",
                details={"session_id": str(session_id)},
            )
        await self.db.commit()

        logger.info("session.completed", session_id=str(session_id), score=score)
        return await self.require(session_id)

    async def completed_scores(self) -> list[float]:
        """Scores of completed sessions, most recently completed first."""
        stmt = (
            select(TrainingSession.score)
            .where(
                TrainingSession.status == SessionStatus.COMPLETED.value,
                TrainingSession.score.is_not(None),
            )
            .order_by(TrainingSession.completed_at.desc(), TrainingSession.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return [float(score) for score in result.scalars().all()]
