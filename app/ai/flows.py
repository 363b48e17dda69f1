"""
Prompt wrappers. Each flow renders one prompt template, sends it to the
provider and validates the JSON answer against its output schema. There are
no retries and no chaining; a failed call raises AIFlowError.
"""
import logging
from typing import List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from app.ai.provider import BaseProvider

logger = logging.getLogger(__name__)

OutputT = TypeVar("OutputT", bound=BaseModel)


class AIFlowError(Exception):
    pass


# ── Output schemas ────────────────────────────────────────────────
class LinkTitle(BaseModel):
    title: str

class ApiIntegration(BaseModel):
    api_type: str
    integration_guide: str

class ProjectResources(BaseModel):
    suggested_tools: List[str]
    case_studies: List[str]
    reference_links: List[str]
    prompt_examples: List[str]

class DailyWisdom(BaseModel):
    wisdom: str


# ── Prompts ───────────────────────────────────────────────────────
AUTOCOMPLETE_LINK_TITLE_PROMPT = """You are a title autocompletion service. Given a link, you will return a concise and descriptive title for the link.

Link: {link}

Respond with a JSON object of the form {{"title": "..."}}."""

SUGGEST_API_INTEGRATIONS_PROMPT = """You are an expert in API integrations. Given the name and value of an API key, you will determine the type of API and provide a relevant integration guide or code snippet.

API Key Name: {key_name}
API Key Value: {key_value}

Respond with a JSON object with the keys:
- api_type: the type of API detected (e.g. Stripe, OpenAI).
- integration_guide: a guide or code snippet for integrating with the API."""

RECOMMEND_PROJECT_RESOURCES_PROMPT = """You are an AI assistant helping users find resources for their projects.

Based on the project type, recommend relevant tools, case studies, reference links, and prompt examples.

Project Type: {project_type}

Respond with a JSON object with the following keys, each a list of strings:
- suggested_tools: tools recommended for the project.
- case_studies: relevant case studies, each written as "Title: description".
- reference_links: reference links (URLs) relevant to the project.
- prompt_examples: prompt examples relevant to the project."""

DAILY_WISDOM_PROMPT = """You are an oracle of concise and profound daily insights.
Generate a single, unique piece of wisdom or a thought-provoking statement.
It should be impactful and inspiring, suitable for a user to see once a day.
The statement could be about creativity, problem-solving, productivity, general life insights, or a gentle challenge.
Avoid cliches if possible. Aim for originality or a fresh perspective on a known truth.
Do not use markdown or any special characters like asterisks or quotes unless they are part of the wisdom itself.
Keep it to one or two sentences at most.

Respond with a JSON object of the form {{"wisdom": "..."}}."""


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


async def run_prompt(provider: BaseProvider, prompt: str, output_schema: Type[OutputT]) -> OutputT:
    result = await provider.generate(prompt)
    if result.get("status") != "success" or not result.get("text"):
        raise AIFlowError(result.get("error") or "Empty response from AI provider")
    try:
        return output_schema.model_validate_json(_strip_code_fence(result["text"]))
    except ValidationError as e:
        logger.warning("AI answer did not match %s: %s", output_schema.__name__, e)
        raise AIFlowError(f"AI answer did not match {output_schema.__name__}") from e


async def autocomplete_link_title(provider: BaseProvider, link: str) -> LinkTitle:
    return await run_prompt(provider, AUTOCOMPLETE_LINK_TITLE_PROMPT.format(link=link), LinkTitle)


async def suggest_api_integrations(provider: BaseProvider, key_name: str, key_value: str) -> ApiIntegration:
    prompt = SUGGEST_API_INTEGRATIONS_PROMPT.format(key_name=key_name, key_value=key_value)
    return await run_prompt(provider, prompt, ApiIntegration)


async def recommend_project_resources(provider: BaseProvider, project_type: str) -> ProjectResources:
    prompt = RECOMMEND_PROJECT_RESOURCES_PROMPT.format(project_type=project_type)
    return await run_prompt(provider, prompt, ProjectResources)


async def generate_daily_wisdom(provider: BaseProvider) -> DailyWisdom:
    return await run_prompt(provider, DAILY_WISDOM_PROMPT, DailyWisdom)
