from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, Field

NewsCategory = Literal["Weather", "Accidents", "Technology", "Crops", "Market", "General"]

MAX_NEWS_SOURCES = 10


class NewsItem(BaseModel):
    category: NewsCategory
    title: str
    summary: str
    date: Optional[str] = None
    source: Optional[str] = None
    link: Optional[str] = None
    image_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("imageUrl", "image_url"),
        serialization_alias="imageUrl",
    )


class NewsSource(BaseModel):
    title: str
    uri: str


class NewsPayload(BaseModel):
    """Shape the model is asked to return for news synthesis."""

    news: List[NewsItem] = Field(default_factory=list)


class NewsResponse(BaseModel):
    news: List[NewsItem] = Field(default_factory=list)
    sources: List[NewsSource] = Field(default_factory=list)


class ScrapedHeadline(BaseModel):
    title: str
    link: str


def dedupe_sources(
    sources: List[NewsSource], limit: int = MAX_NEWS_SOURCES
) -> List[NewsSource]:
    seen: set[str] = set()
    unique: List[NewsSource] = []
    for source in sources:
        if source.uri in seen:
            continue
        seen.add(source.uri)
        unique.append(source)
    return unique[:limit]
