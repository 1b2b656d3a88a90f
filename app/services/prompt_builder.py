from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from langchain_core.prompts import PromptTemplate

from app.models.language import language_name
from app.prompts.chat_system_prompt import CHAT_SYSTEM_PROMPT
from app.prompts.nearby_places_prompt import (
    NEARBY_PLACES_LANGUAGE_DIRECTIVE,
    NEARBY_PLACES_SCHEMA,
    NEARBY_PLACES_TASK,
)
from app.prompts.news_prompt import (
    NEWS_LANGUAGE_DIRECTIVE,
    NEWS_PIB_FETCHED,
    NEWS_PIB_SEARCH,
    NEWS_SCHEMA,
    NEWS_TASK,
    NEWS_TIMES_FETCHED,
    NEWS_TIMES_SEARCH,
)
from app.prompts.schemes_prompt import (
    SCHEMES_LANGUAGE_DIRECTIVE,
    SCHEMES_SCHEMA,
    SCHEMES_TASK,
)
from app.prompts.soil_analysis_prompt import (
    SOIL_ANALYSIS_LANGUAGE_DIRECTIVE,
    SOIL_ANALYSIS_SCHEMA,
    SOIL_ANALYSIS_TASK,
)

DEFAULT_LOCATION = "India"


class Capability(str, Enum):
    ANALYZE_SOIL = "analyze_soil"
    CHAT = "chat"
    NEWS = "news"
    SCHEMES = "schemes"
    NEARBY_PLACES = "nearby_places"


@dataclass(frozen=True)
class CapabilityTemplate:
    task: str
    schema: Optional[str]
    language_directive: str


TEMPLATES: dict[Capability, CapabilityTemplate] = {
    Capability.ANALYZE_SOIL: CapabilityTemplate(
        SOIL_ANALYSIS_TASK, SOIL_ANALYSIS_SCHEMA, SOIL_ANALYSIS_LANGUAGE_DIRECTIVE
    ),
    Capability.CHAT: CapabilityTemplate(CHAT_SYSTEM_PROMPT, None, ""),
    Capability.NEWS: CapabilityTemplate(NEWS_TASK, NEWS_SCHEMA, NEWS_LANGUAGE_DIRECTIVE),
    Capability.SCHEMES: CapabilityTemplate(
        SCHEMES_TASK, SCHEMES_SCHEMA, SCHEMES_LANGUAGE_DIRECTIVE
    ),
    Capability.NEARBY_PLACES: CapabilityTemplate(
        NEARBY_PLACES_TASK, NEARBY_PLACES_SCHEMA, NEARBY_PLACES_LANGUAGE_DIRECTIVE
    ),
}


@dataclass
class PromptContext:
    location: Optional[str] = None
    language: Optional[str] = None
    current_date: Optional[str] = None
    pib_summary: Optional[str] = None
    times_summary: Optional[str] = None


def news_date(today: Optional[date] = None) -> str:
    """Date in the ``Sun Oct 18 2026`` form used for news prompts."""
    return (today or date.today()).strftime("%a %b %d %Y")


def report_date(today: Optional[date] = None) -> str:
    """Date in the ``October 2026`` form used for soil analysis prompts."""
    return (today or date.today()).strftime("%B %Y")


def _default_date(capability: Capability) -> str:
    if capability == Capability.ANALYZE_SOIL:
        return report_date()
    return news_date()


def _fill_values(capability: Capability, context: PromptContext) -> dict[str, str]:
    location = (context.location or "").strip() or DEFAULT_LOCATION
    values = {
        "location": location,
        "language": language_name(context.language),
        "current_date": context.current_date or _default_date(capability),
    }
    if capability == Capability.NEWS:
        values["pib_block"] = (
            NEWS_PIB_FETCHED.format(summary=context.pib_summary)
            if context.pib_summary
            else NEWS_PIB_SEARCH
        )
        values["times_block"] = (
            NEWS_TIMES_FETCHED.format(summary=context.times_summary)
            if context.times_summary
            else NEWS_TIMES_SEARCH
        )
    return values


def _render(template: str, values: dict[str, str]) -> str:
    prompt = PromptTemplate.from_template(template)
    return prompt.format(
        **{name: values[name] for name in prompt.input_variables if name in values}
    )


def build_prompt(capability: Capability, context: Optional[PromptContext] = None) -> str:
    """Build the full instruction for one capability call.

    The task text is interpolated, the JSON schema example is appended verbatim
    so its braces never reach the template engine.
    """
    context = context or PromptContext()
    template = TEMPLATES[capability]
    values = _fill_values(capability, context)

    sections = [_render(template.task, values).strip()]
    if template.language_directive:
        sections.append(_render(template.language_directive, values))
    if template.schema:
        sections.append("JSON Structure:\n" + template.schema)
    return "\n\n".join(sections)


def build_chat_system_prompt(language: Optional[str]) -> str:
    return build_prompt(Capability.CHAT, PromptContext(language=language))
