import logging
from typing import List, Optional, Tuple, Type, TypeVar, Union

from app.core.call_result import CallResult, CallState
from app.models.chat_session import InlineData, Part
from app.models.lab import LabItem
from app.models.news import NewsItem, NewsPayload, NewsResponse, NewsSource, dedupe_sources
from app.models.scheme import SchemeResponse
from app.models.soil_analysis import SoilAnalysis
from app.services.fallbacks import (
    CHAT_FALLBACK_TEXT,
    DEFAULT_AREA_NAME,
    nearby_places_fallback,
    news_fallback,
    schemes_fallback,
)
from app.services.model_invoker import (
    AgriChatSession,
    GenAIInvoker,
    ModelCallError,
    ModelInvoker,
    get_model_invoker,
)
from app.services.news_sources import (
    fetch_pib_press_releases,
    fetch_times_of_india,
    headlines_summary,
)
from app.services.prompt_builder import (
    Capability,
    PromptContext,
    build_prompt,
    news_date,
    report_date,
)
from app.services.response_normalizer import ModelResponseParseError, normalize

logger = logging.getLogger(__name__)

T = TypeVar("T")

Location = Union[str, Tuple[float, float]]


class SoilAnalysisError(Exception):
    """Soil report analysis failed; the farmer must retry."""

    def __init__(self, message: str = "Failed to analyze report. Please try again."):
        super().__init__(message)


class CapabilityService:
    """Runs each capability through build -> invoke -> normalize.

    Informational capabilities (news, schemes, nearby places, chat) always
    return a value, substituting fallbacks on failure. Soil analysis raises
    instead, so a report is never fabricated.
    """

    def __init__(self, invoker: ModelInvoker):
        self.invoker = invoker

    async def _call(
        self,
        capability: Capability,
        schema: Type[T],
        context: PromptContext,
        attachments: Optional[List[InlineData]] = None,
    ) -> CallResult[T]:
        result: CallResult[T] = CallResult(capability=capability.value)
        prompt = build_prompt(capability, context)
        result.advance(CallState.INVOKING)
        try:
            raw_text = await self.invoker.invoke(prompt, attachments)
        except ModelCallError as e:
            return result.fail(e)

        result.advance(CallState.SUCCESS).advance(CallState.NORMALIZING)
        try:
            value = normalize(raw_text, schema)
        except ModelResponseParseError as e:
            logger.warning("Could not normalize %s reply: %s", capability.value, e)
            return result.fail(e)
        return result.complete(value)

    async def synthesize_news(
        self,
        location: Optional[str],
        language: Optional[str],
        current_date: Optional[str] = None,
        pib_summary: Optional[str] = None,
        times_summary: Optional[str] = None,
    ) -> CallResult[List[NewsItem]]:
        context = PromptContext(
            location=location,
            language=language,
            current_date=current_date or news_date(),
            pib_summary=pib_summary,
            times_summary=times_summary,
        )
        result = await self._call(Capability.NEWS, NewsPayload, context)
        if result.ok:
            result.value = result.value.news
        return result

    async def get_agricultural_news(
        self, location: Optional[str], language: Optional[str]
    ) -> NewsResponse:
        current_date = news_date()
        pib_items = await fetch_pib_press_releases()
        times_items = await fetch_times_of_india()

        result = await self.synthesize_news(
            location,
            language,
            current_date=current_date,
            pib_summary=headlines_summary(pib_items),
            times_summary=headlines_summary(times_items),
        )
        if not result.ok:
            return result.or_else(lambda: news_fallback(current_date))

        news = result.value
        sources = [
            NewsSource(title=item.source, uri=item.link)
            for item in news
            if item.link and item.source
        ]
        sources.extend(NewsSource(title=f"PIB: {p.title}", uri=p.link) for p in pib_items)
        sources.extend(NewsSource(title=f"ToI: {t.title}", uri=t.link) for t in times_items)
        return NewsResponse(news=news, sources=dedupe_sources(sources))

    async def fetch_schemes(
        self, location: Optional[str], language: Optional[str]
    ) -> CallResult[SchemeResponse]:
        context = PromptContext(location=location, language=language)
        return await self._call(Capability.SCHEMES, SchemeResponse, context)

    async def get_government_schemes(
        self, location: Optional[str], language: Optional[str]
    ) -> SchemeResponse:
        result = await self.fetch_schemes(location, language)
        return result.or_else(schemes_fallback)

    async def fetch_nearby_places(
        self, location_query: str, language: Optional[str]
    ) -> CallResult[List[LabItem]]:
        context = PromptContext(location=location_query, language=language)
        result = await self._call(Capability.NEARBY_PLACES, List[LabItem], context)
        if result.ok and not result.value:
            return CallResult.normalize_failed(
                ModelResponseParseError("No places found"),
                capability=Capability.NEARBY_PLACES.value,
            )
        return result

    async def find_nearby_places(
        self, location: Location, language: Optional[str]
    ) -> List[LabItem]:
        if isinstance(location, str):
            location_query = location
            location_name = location
        else:
            lat, lng = location
            location_query = f"{lat}, {lng}"
            location_name = DEFAULT_AREA_NAME

        result = await self.fetch_nearby_places(location_query, language)
        return result.or_else(lambda: nearby_places_fallback(location_name))

    async def analyze_soil_report(
        self,
        file_data: str,
        mime_type: str,
        language: Optional[str],
        current_date: Optional[str] = None,
    ) -> SoilAnalysis:
        context = PromptContext(language=language, current_date=current_date or report_date())
        result = await self._call(
            Capability.ANALYZE_SOIL,
            SoilAnalysis,
            context,
            attachments=[InlineData(mime_type=mime_type, data=file_data)],
        )
        if not result.ok:
            logger.error(
                "Soil report analysis failed in state %s: %s", result.state.value, result.error
            )
            raise SoilAnalysisError() from result.error
        return result.value

    async def chat_turn(
        self, session: AgriChatSession, message: Union[str, List[Part]]
    ) -> CallResult[str]:
        result: CallResult[str] = CallResult(capability=Capability.CHAT.value)
        result.advance(CallState.INVOKING)
        try:
            text = await session.send_message(message)
        except ModelCallError as e:
            return result.fail(e)
        # Chat replies are plain text, so normalizing accepts them as is.
        result.advance(CallState.SUCCESS).advance(CallState.NORMALIZING)
        return result.complete(text)

    async def send_chat_message(
        self, session: AgriChatSession, message: Union[str, List[Part]]
    ) -> str:
        result = await self.chat_turn(session, message)
        return result.or_else(lambda: CHAT_FALLBACK_TEXT)

    def create_chat_session(self, language: Optional[str], history=None) -> AgriChatSession:
        return AgriChatSession(self.invoker, language=language, history=history)


def get_server_invoker() -> ModelInvoker:
    # The relay backend always talks to the model directly.
    return GenAIInvoker()


def get_capability_service() -> CapabilityService:
    # Relays to BACKEND_BASE_URL when configured, else calls Gemini directly.
    return CapabilityService(get_model_invoker())
