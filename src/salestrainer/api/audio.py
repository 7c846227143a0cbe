"""Speech-to-text endpoint for trainee voice input."""

from fastapi import APIRouter, Depends, File, UploadFile

from salestrainer.api.deps import get_generative_client
from salestrainer.core.errors import ValidationError
from salestrainer.core.logging import get_logger
from salestrainer.llm.client import GenerativeClient
from salestrainer.models import TranscriptionResult

logger = get_logger(__name__)

router = APIRouter(prefix="/api/audio", tags=["audio"])


@router.post("/transcribe", response_model=TranscriptionResult)
async def transcribe_audio(
    audio: UploadFile = File(..., description="Recorded audio"),
    client: GenerativeClient = Depends(get_generative_client),
):
    content = await audio.read()
    if not content:
        raise ValidationError("audio file is required", details={"field": "audio"})

    text = await client.transcribe(audio.filename or "audio.webm", content, audio.content_type)
    logger.info("audio.transcribed", bytes=len(content), characters=len(text))
    return TranscriptionResult(text=text)
