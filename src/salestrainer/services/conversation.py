"""Turn orchestration between the trainee and the simulated customer."""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from uuid import UUID

from salestrainer.core.config import Settings
from salestrainer.core.errors import TransientServiceError
from salestrainer.core.logging import get_logger
from salestrainer.llm.client import GenerativeClient
from salestrainer.models import Message, MessageRole, TrainingSession
from salestrainer.services.locks import SessionLocks
from salestrainer.services.prompts import customer_persona_prompt
from salestrainer.services.session_store import SessionStore
from salestrainer.utils.datetime import epoch_millis

logger = get_logger(__name__)

DIALOGUE_TEMPERATURE = 0.7
AUDIO_URL_PREFIX = "/audio"


@dataclass
class AssistantTurn:
    reply: str
    audio_url: str | None = None


def build_context(
    session: TrainingSession,
    history: list[Message],
    max_messages: int = 0,
) -> list[dict[str, str]]:
    """Persona directive followed by the ordered message log.

    With max_messages > 0 only the newest messages are kept; the persona
    directive is always first.
    """
    if max_messages > 0:
        history = history[-max_messages:]
    return [{"role": "system", "content": customer_persona_prompt(session)}] + [
        {"role": message.role, "content": message.content} for message in history
    ]


class ConversationOrchestrator:
    def __init__(
        self,
        store: SessionStore,
        client: GenerativeClient,
        locks: SessionLocks,
        settings: Settings,
    ):
        self.store = store
        self.client = client
        self.locks = locks
        self.settings = settings

    async def submit_user_turn(self, session_id: UUID | str, text: str) -> AssistantTurn:
        """Persist the trainee message, get the customer reply, persist it.

        The user message is committed before the dialogue call, so it stays in
        the log even when the reply cannot be generated.
        """
        session = await self.store.require(session_id)

        async with self.locks.lock_for(session.id):
            session = await self.store.require_active(session.id)
            await self.store.append_message(session.id, MessageRole.USER, text)

            history = await self.store.messages(session.id)
            context = build_context(session, history, self.settings.context_max_messages)

            response = await self.client.complete(context, temperature=DIALOGUE_TEMPERATURE)
            reply = response.content.strip()
            if not reply:
                raise TransientServiceError(
                    "Failed to generate reply",
                    details={"session_id": str(session.id), "reason": "empty reply"},
                )

            await self.store.append_message(session.id, MessageRole.ASSISTANT, reply)

        logger.info(
            "conversation.turn_completed",
            session_id=str(session.id),
            messages=len(history) + 1,
            context_messages=len(context),
        )

        audio_url = None
        if self.settings.tts_enabled:
            audio_url = await self._synthesize(session.id, reply)

        return AssistantTurn(reply=reply, audio_url=audio_url)

    async def _synthesize(self, session_id: UUID, reply: str) -> str | None:
        """Render the reply to an audio artifact. The text turn is already stored."""
        filename = f"{session_id}-{epoch_millis()}.mp3"
        path = Path(self.settings.audio_dir) / filename
        try:
            audio = await self.client.synthesize_speech(reply)
            await asyncio.to_thread(_write_blob, path, audio)
        except (TransientServiceError, OSError) as exc:
            logger.warning(
                "conversation.speech_failed",
                session_id=str(session_id),
                error=str(exc),
            )
            return None
        return f"{AUDIO_URL_PREFIX}/{filename}"


def _write_blob(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
