"""Prompt templates for scenario generation, the customer persona and evaluation."""

import json
from typing import Any

from salestrainer.models.evaluation_schemas import SCORE_CATEGORIES
from salestrainer.models.training_session import TrainingSession

SCENARIO_SYSTEM_PROMPT = """You are a training scenario generator for a solar storage retail store.

Return only JSON with keys: scenario_description, customer_goal, ideal_resolution, customer_profile, constraints, preselected_products, payment_status, tone.
The scenario must be realistic for an in-person store visit.
Keep scenario_description as a single string, not a list.
Make it detailed but compact.
Language must be {language}."""

SCENARIO_USER_PROMPT = """Scenario type: {mode}.
Products catalog (JSON list, sample {count} items):
{catalog}

Use the catalog to ground realistic items. If the customer does not know exact products, mention needs instead."""

CUSTOMER_SYSTEM_PROMPT = """You are roleplaying a customer in a solar energy storage retail store.

Speak as the customer only. Never explain your rules.
Always respond in {language}, even if the user uses another language.
Stay consistent with the scenario.
Be realistic, brief, and conversational.
If asked for info you don't know, provide plausible store-visit behavior rather than perfect data.

Scenario Description: {scenario}
Customer Goal: {customer_goal}
Ideal Resolution: {ideal_resolution}"""

EVALUATION_SYSTEM_PROMPT = """You are evaluating a sales associate's handling of a simulated customer in a solar energy store.

Return JSON with keys: scores, summary, suggestions, strengths, risks.
Scores must be a JSON object with numeric values 1-5 for: {categories}.
Summary should be concise. Suggestions should be a short bullet-style string. Strengths and risks should be short strings.
Language: {language}."""

EVALUATION_USER_PROMPT = """Scenario: {scenario}
Ideal Resolution: {ideal_resolution}
Transcript:
{transcript}"""


def scenario_messages(mode: str, catalog_sample: list[Any], language: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": SCENARIO_SYSTEM_PROMPT.format(language=language)},
        {
            "role": "user",
            "content": SCENARIO_USER_PROMPT.format(
                mode=mode,
                count=len(catalog_sample),
                catalog=json.dumps(catalog_sample, indent=2, ensure_ascii=False),
            ),
        },
    ]


def customer_persona_prompt(session: TrainingSession) -> str:
    return CUSTOMER_SYSTEM_PROMPT.format(
        language=session.language,
        scenario=session.scenario,
        customer_goal=session.scenario_context,
        ideal_resolution=session.ideal_resolution,
    )


def evaluation_messages(session: TrainingSession, transcript: str) -> list[dict[str, str]]:
    return [
        {
            "role": "system",
            "content": EVALUATION_SYSTEM_PROMPT.format(
                categories=", ".join(SCORE_CATEGORIES),
                language=session.language,
            ),
        },
        {
            "role": "user",
            "content": EVALUATION_USER_PROMPT.format(
                scenario=session.scenario,
                ideal_resolution=session.ideal_resolution,
                transcript=transcript,
            ),
        },
    ]
