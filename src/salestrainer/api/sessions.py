"""Training session endpoints (create, list, get, message, complete)."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from salestrainer.api.deps import (
    get_app_settings,
    get_catalog_repository,
    get_conversation_orchestrator,
    get_evaluation_engine,
    get_scenario_generator,
    get_session_store,
)
from salestrainer.core.config import Settings
from salestrainer.core.db import get_db
from salestrainer.core.errors import ValidationError
from salestrainer.models import (
    CompletionResult,
    MessageRead,
    SessionCreate,
    SessionCreated,
    SessionDetail,
    SessionList,
    SessionRead,
    SessionSummary,
    TurnCreate,
    TurnReply,
)
from salestrainer.services.catalog import CatalogRepository
from salestrainer.services.conversation import ConversationOrchestrator
from salestrainer.services.evaluation import EvaluationEngine
from salestrainer.services.scenario import ScenarioGenerator
from salestrainer.services.session_store import SessionStore

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


@router.post("", response_model=SessionCreated, status_code=status.HTTP_201_CREATED)
async def create_session(
    payload: SessionCreate | None = None,
    generator: ScenarioGenerator = Depends(get_scenario_generator),
    catalog: CatalogRepository = Depends(get_catalog_repository),
    store: SessionStore = Depends(get_session_store),
    db: AsyncSession = Depends(get_db),
):
    """Generate a scenario from the catalog and open a session around it."""
    payload = payload or SessionCreate()

    products = await catalog.load(db)
    if not products:
        raise ValidationError("Upload a products JSON list first.")

    scenario = await generator.generate(payload.mode, catalog.sample(products), payload.language)
    session = await store.create(payload.mode, payload.language, scenario)

    return SessionCreated(
        session_id=session.id,
        mode=session.mode,
        scenario=scenario,
        created_at=session.created_at,
    )


@router.get("", response_model=SessionList)
async def list_sessions(
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_app_settings),
):
    """Most recent sessions first, bounded by SESSION_LIST_LIMIT."""
    sessions = await store.list_recent(limit=settings.session_list_limit)
    return SessionList(sessions=[SessionSummary.model_validate(s) for s in sessions])


@router.get("/{session_id}", response_model=SessionDetail)
async def get_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
):
    session = await store.require(session_id)
    messages = await store.messages(session.id)
    return SessionDetail(
        session=SessionRead.model_validate(session),
        messages=[MessageRead.model_validate(m) for m in messages],
    )


@router.post("/{session_id}/message", response_model=TurnReply)
async def submit_turn(
    session_id: str,
    payload: TurnCreate,
    orchestrator: ConversationOrchestrator = Depends(get_conversation_orchestrator),
):
    """Send the trainee's message and return the customer's reply."""
    turn = await orchestrator.submit_user_turn(session_id, payload.text)
    return TurnReply(reply=turn.reply, audio_url=turn.audio_url)


@router.post("/{session_id}/complete", response_model=CompletionResult)
async def complete_session(
    session_id: str,
    engine: EvaluationEngine = Depends(get_evaluation_engine),
):
    """Evaluate the conversation and close the session. Rejected if already completed."""
    return await engine.complete(session_id)
