from typing import List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import AliasChoices, BaseModel, Field

from app.models.chat_session import InlineData, Part, Turn
from app.models.lab import LabItem
from app.models.news import NewsItem
from app.models.scheme import SchemeResponse
from app.models.soil_analysis import SoilAnalysis
from app.services.capabilities import (
    CapabilityService,
    SoilAnalysisError,
    get_capability_service,
    get_server_invoker,
)
from app.services.fallbacks import news_fallback
from app.services.model_invoker import ModelCallError, ModelInvoker

router = APIRouter(prefix="/api", tags=["AI"])


class ChatRequest(BaseModel):
    message: Union[str, List[Part]]
    history: List[Turn] = Field(default_factory=list)
    language: Optional[str] = None


class TextResponse(BaseModel):
    text: str


class NewsRequest(BaseModel):
    location: Optional[str] = None
    language: Optional[str] = None
    current_date: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("currentDate", "current_date")
    )
    pib_summary: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("pibSummary", "pib_summary")
    )
    times_summary: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("timesSummary", "times_summary")
    )


class NewsListResponse(BaseModel):
    news: List[NewsItem]


class SchemesRequest(BaseModel):
    location: Optional[str] = None
    language: Optional[str] = None


class NearbyPlacesRequest(BaseModel):
    location_query: str = Field(
        validation_alias=AliasChoices("locationQuery", "location_query")
    )
    language: Optional[str] = None


class AnalyzeSoilRequest(BaseModel):
    file_data: str = Field(validation_alias=AliasChoices("fileData", "file_data"))
    mime_type: str = Field(validation_alias=AliasChoices("mimeType", "mime_type"))
    language: Optional[str] = None
    current_date: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("currentDate", "current_date")
    )


class GenerateRequest(BaseModel):
    prompt: str
    attachments: List[InlineData] = Field(default_factory=list)
    history: List[Turn] = Field(default_factory=list)
    system_instruction: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("systemInstruction", "system_instruction"),
    )
    json_output: bool = Field(
        default=True, validation_alias=AliasChoices("jsonOutput", "json_output")
    )


@router.post("/chat", response_model=TextResponse)
async def chat(
    request: ChatRequest,
    service: CapabilityService = Depends(get_capability_service),
):
    """
    Stateless chat turn: the caller sends the history it holds.
    """
    session = service.create_chat_session(request.language, history=request.history)
    result = await service.chat_turn(session, request.message)
    if not result.ok:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="GenAI service error, please try again.",
        )
    return TextResponse(text=result.value)


@router.post("/news", response_model=NewsListResponse, response_model_exclude_none=True)
async def news(
    request: NewsRequest,
    service: CapabilityService = Depends(get_capability_service),
):
    result = await service.synthesize_news(
        request.location,
        request.language,
        current_date=request.current_date,
        pib_summary=request.pib_summary,
        times_summary=request.times_summary,
    )
    items = result.or_else(lambda: news_fallback(request.current_date).news)
    return NewsListResponse(news=items)


@router.post("/schemes", response_model=SchemeResponse)
async def schemes(
    request: SchemesRequest,
    service: CapabilityService = Depends(get_capability_service),
):
    return await service.get_government_schemes(request.location, request.language)


@router.post("/nearby-places", response_model=List[LabItem], response_model_exclude_none=True)
async def nearby_places(
    request: NearbyPlacesRequest,
    service: CapabilityService = Depends(get_capability_service),
):
    return await service.find_nearby_places(request.location_query, request.language)


@router.post("/analyze-soil", response_model=SoilAnalysis)
async def analyze_soil(
    request: AnalyzeSoilRequest,
    service: CapabilityService = Depends(get_capability_service),
):
    """
    Analyze a base64 encoded soil test report. Never falls back to a made-up report.
    """
    try:
        return await service.analyze_soil_report(
            request.file_data,
            request.mime_type,
            request.language,
            current_date=request.current_date,
        )
    except SoilAnalysisError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.post("/generate", response_model=TextResponse)
async def generate(
    request: GenerateRequest,
    invoker: ModelInvoker = Depends(get_server_invoker),
):
    """
    Relay a raw prompt to the model with the server-side key.
    """
    try:
        text = await invoker.invoke(
            request.prompt,
            request.attachments,
            history=request.history,
            system_instruction=request.system_instruction,
            json_output=request.json_output,
        )
    except ModelCallError:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="GenAI service error, please try again.",
        )
    return TextResponse(text=text)
