from datetime import datetime
from enum import Enum
from typing import List, Optional, Union
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

TITLE_MAX_LENGTH = 30
DEFAULT_CHAT_TITLE = "New Conversation"
DEFAULT_IMAGE_PROMPT = "Analyze this image"


class Role(str, Enum):
    USER = "user"
    MODEL = "model"


class TextPart(BaseModel):
    model_config = ConfigDict(extra="forbid")

    text: str


class InlineData(BaseModel):
    """Base64 encoded binary attachment (image or PDF)."""

    model_config = ConfigDict(populate_by_name=True)

    mime_type: str = Field(
        validation_alias=AliasChoices("mimeType", "mime_type"),
        serialization_alias="mimeType",
    )
    data: str = Field(description="Base64 payload without the data: URL prefix.")


class ImagePart(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    inline_data: InlineData = Field(
        validation_alias=AliasChoices("inlineData", "inline_data"),
        serialization_alias="inlineData",
    )


Part = Union[TextPart, ImagePart]


class Turn(BaseModel):
    """One entry of the model-facing conversation history."""

    role: Role
    parts: List[Part] = Field(default_factory=list)


class ChatTurn(BaseModel):
    """One message as shown to and persisted for the farmer."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    role: Role
    content: str = ""
    image: Optional[str] = Field(
        default=None, description="Data URL of an attached image, if any."
    )


class ChatSession(BaseModel):
    id: str = Field(
        default_factory=lambda: uuid4().hex,
        validation_alias=AliasChoices("id", "_id"),
        serialization_alias="_id",
    )
    user_id: str = Field(...)
    title: str = Field(default=DEFAULT_CHAT_TITLE)
    messages: List[ChatTurn] = Field(default_factory=list)
    updated_at: float = Field(default_factory=lambda: datetime.now().timestamp())


def derive_title(content: str) -> str:
    if not content:
        return DEFAULT_CHAT_TITLE
    if len(content) > TITLE_MAX_LENGTH:
        return content[:TITLE_MAX_LENGTH] + "..."
    return content


def split_parts(parts: List[Part]) -> tuple[str, List[InlineData]]:
    """Split message parts into the prompt text and binary attachments."""
    texts = [part.text for part in parts if isinstance(part, TextPart)]
    attachments = [part.inline_data for part in parts if isinstance(part, ImagePart)]
    return "\n".join(texts), attachments


def parse_data_url(data_url: str) -> Optional[InlineData]:
    """Turn ``data:<mime>;base64,<payload>`` into InlineData."""
    if not data_url or not data_url.startswith("data:") or "," not in data_url:
        return None
    header, payload = data_url.split(",", 1)
    mime_type = header[len("data:"):].split(";", 1)[0] or "application/octet-stream"
    return InlineData(mime_type=mime_type, data=payload)


def chat_turn_to_turn(message: ChatTurn) -> Turn:
    # Stored images are not replayed to the model, only their text. An
    # image-only turn is replayed as the prompt that was sent with it.
    text = message.content
    if not text.strip() and message.image:
        text = DEFAULT_IMAGE_PROMPT
    return Turn(role=message.role, parts=[TextPart(text=text)])


def history_from_chat_turns(messages: List[ChatTurn]) -> List[Turn]:
    """Model-facing history for stored messages, skipping turns with no text."""
    turns = [chat_turn_to_turn(message) for message in messages]
    return [turn for turn in turns if turn.parts[0].text.strip()]
