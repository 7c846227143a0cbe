"""FastAPI dependency providers for services and shared application state."""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from salestrainer.core.config import Settings
from salestrainer.core.db import get_db
from salestrainer.llm.client import GenerativeClient, create_client
from salestrainer.services.catalog import CatalogRepository
from salestrainer.services.conversation import ConversationOrchestrator
from salestrainer.services.evaluation import EvaluationEngine
from salestrainer.services.locks import SessionLocks
from salestrainer.services.metrics import MetricsAggregator
from salestrainer.services.scenario import ScenarioGenerator
from salestrainer.services.session_store import SessionStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_catalog_repository(request: Request) -> CatalogRepository:
    return request.app.state.catalog


def get_session_locks(request: Request) -> SessionLocks:
    return request.app.state.session_locks


def get_generative_client(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> GenerativeClient:
    """Shared client; raises ConfigurationError while credentials are missing."""
    client = getattr(request.app.state, "generative_client", None)
    if client is None:
        client = create_client(settings)
        request.app.state.generative_client = client
    return client


def get_session_store(db: AsyncSession = Depends(get_db)) -> SessionStore:
    return SessionStore(db)


def get_scenario_generator(
    client: GenerativeClient = Depends(get_generative_client),
    settings: Settings = Depends(get_app_settings),
) -> ScenarioGenerator:
    return ScenarioGenerator(client, sample_size=settings.catalog_sample_size)


def get_conversation_orchestrator(
    store: SessionStore = Depends(get_session_store),
    client: GenerativeClient = Depends(get_generative_client),
    locks: SessionLocks = Depends(get_session_locks),
    settings: Settings = Depends(get_app_settings),
) -> ConversationOrchestrator:
    return ConversationOrchestrator(store, client, locks, settings)


def get_evaluation_engine(
    store: SessionStore = Depends(get_session_store),
    client: GenerativeClient = Depends(get_generative_client),
    locks: SessionLocks = Depends(get_session_locks),
) -> EvaluationEngine:
    return EvaluationEngine(store, client, locks)


def get_metrics_aggregator(
    store: SessionStore = Depends(get_session_store),
) -> MetricsAggregator:
    return MetricsAggregator(store)
