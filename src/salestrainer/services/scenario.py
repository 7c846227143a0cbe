"""Scenario generation from a product catalog sample."""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from salestrainer.core.errors import GenerationError
from salestrainer.core.logging import get_logger
from salestrainer.llm.client import JSON_OBJECT, GenerativeClient
from salestrainer.models import Scenario
from salestrainer.services.prompts import scenario_messages

logger = get_logger(__name__)

SCENARIO_TEMPERATURE = 0.8


class ScenarioGenerator:
    """Produces a roleplay premise via the generative backend.

    Output that does not parse into a Scenario fails the call; nothing is
    synthesized in its place.
    """

    def __init__(self, client: GenerativeClient, sample_size: int = 12):
        self.client = client
        self.sample_size = sample_size

    async def generate(self, mode: str, catalog_sample: list[Any], language: str) -> Scenario:
        sample = list(catalog_sample[: self.sample_size])
        response = await self.client.complete(
            scenario_messages(mode, sample, language),
            temperature=SCENARIO_TEMPERATURE,
            response_format=JSON_OBJECT,
        )

        try:
            scenario = Scenario.model_validate_json(response.content)
        except PydanticValidationError as exc:
            logger.warning(
                "scenario.unparseable",
                mode=mode,
                errors=exc.error_count(),
            )
            raise GenerationError(
                "Failed to generate scenario",
                details={"mode": mode, "errors": exc.error_count()},
            ) from exc

        logger.info("scenario.generated", mode=mode, language=language, catalog_items=len(sample))
        return scenario
