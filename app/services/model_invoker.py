import base64
import binascii
import logging
from typing import Any, List, Optional, Sequence, Union

import httpx
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from app.core.config import settings
from app.core.genai_client import get_chat_model
from app.models.chat_session import (
    DEFAULT_IMAGE_PROMPT,
    ImagePart,
    InlineData,
    Part,
    Role,
    TextPart,
    Turn,
    split_parts,
)
from app.services.prompt_builder import build_chat_system_prompt

logger = logging.getLogger(__name__)

CHAT_GENERATION_CONFIG = {"max_output_tokens": 2000, "temperature": 0.7}


class ModelCallError(Exception):
    """The model could not be reached or returned nothing usable."""

    def __init__(self, message: str = "Model call failed"):
        super().__init__(message)


def _media_block(inline: InlineData) -> dict[str, Any]:
    try:
        data = base64.b64decode(inline.data, validate=False)
    except (binascii.Error, ValueError) as e:
        raise ModelCallError("Attachment is not valid base64") from e
    return {"type": "media", "mime_type": inline.mime_type, "data": data}


def parts_to_langchain_content(parts: Sequence[Part]) -> list[dict[str, Any]]:
    blocks: list[dict[str, Any]] = []
    for part in parts:
        if isinstance(part, TextPart):
            if part.text.strip():
                blocks.append({"type": "text", "text": part.text})
        elif isinstance(part, ImagePart):
            blocks.append(_media_block(part.inline_data))
    return blocks


def turn_to_langchain_message(turn: Turn) -> BaseMessage:
    content = parts_to_langchain_content(turn.parts)
    if turn.role == Role.MODEL:
        text = "\n".join(block["text"] for block in content if block["type"] == "text")
        return AIMessage(content=text)
    return HumanMessage(content=content)


def message_text(message: BaseMessage) -> str:
    content = message.content
    if isinstance(content, str):
        return content
    texts = []
    for block in content or []:
        if isinstance(block, str):
            texts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            texts.append(block.get("text", ""))
    return "".join(texts)


class ModelInvoker:
    """Sends one prompt to the generative model and returns its raw text."""

    async def invoke(
        self,
        prompt: str,
        attachments: Optional[List[InlineData]] = None,
        history: Optional[Sequence[Turn]] = None,
        *,
        system_instruction: Optional[str] = None,
        json_output: bool = True,
    ) -> str:
        raise NotImplementedError


class GenAIInvoker(ModelInvoker):
    """Calls Gemini directly with the configured API key."""

    def __init__(self, model: Optional[str] = None):
        self.model = model or settings.GEMINI_MODEL

    def _build_messages(
        self,
        prompt: str,
        attachments: Optional[List[InlineData]],
        history: Optional[Sequence[Turn]],
        system_instruction: Optional[str],
    ) -> list[BaseMessage]:
        messages: list[BaseMessage] = []
        if system_instruction:
            messages.append(SystemMessage(content=system_instruction))
        messages.extend(turn_to_langchain_message(turn) for turn in history or [])

        user_content: list[dict[str, Any]] = [{"type": "text", "text": prompt}]
        user_content.extend(_media_block(inline) for inline in attachments or [])
        messages.append(HumanMessage(content=user_content))
        return messages

    async def invoke(
        self,
        prompt: str,
        attachments: Optional[List[InlineData]] = None,
        history: Optional[Sequence[Turn]] = None,
        *,
        system_instruction: Optional[str] = None,
        json_output: bool = True,
    ) -> str:
        messages = self._build_messages(prompt, attachments, history, system_instruction)
        # A missing or rejected API key fails while the client is built.
        try:
            if json_output:
                model = get_chat_model(self.model, response_mime_type="application/json")
            else:
                model = get_chat_model(self.model, **CHAT_GENERATION_CONFIG)
            response = await model.ainvoke(messages)
        except Exception as e:
            logger.exception("Gemini call failed for model=%s", self.model)
            raise ModelCallError() from e

        text = message_text(response)
        if not text.strip():
            # Safety blocks come back as an empty candidate.
            raise ModelCallError("Model returned an empty response")
        return text


class RelayInvoker(ModelInvoker):
    """Calls the backend relay, which holds the API key."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.BACKEND_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.MODEL_TIMEOUT_SECONDS
        self._transport = transport

    async def invoke(
        self,
        prompt: str,
        attachments: Optional[List[InlineData]] = None,
        history: Optional[Sequence[Turn]] = None,
        *,
        system_instruction: Optional[str] = None,
        json_output: bool = True,
    ) -> str:
        payload = {
            "prompt": prompt,
            "attachments": [a.model_dump(by_alias=True) for a in attachments or []],
            "history": [t.model_dump(mode="json", by_alias=True) for t in history or []],
            "systemInstruction": system_instruction,
            "jsonOutput": json_output,
        }
        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self._transport
        ) as client:
            try:
                response = await client.post("/api/generate", json=payload)
                response.raise_for_status()
                text = response.json()["text"]
            except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
                logger.exception("Relay call to %s failed", self.base_url)
                raise ModelCallError() from e

        if not isinstance(text, str) or not text.strip():
            raise ModelCallError("Relay returned an empty response")
        return text


def get_model_invoker() -> ModelInvoker:
    if settings.BACKEND_BASE_URL:
        return RelayInvoker()
    return GenAIInvoker()


class AgriChatSession:
    """Conversation handle owned by the caller.

    History only grows: each successful ``send_message`` appends the user turn
    and then the model turn. Failed sends leave it untouched. Sends on the same
    session must be serialized by the caller.
    """

    def __init__(
        self,
        invoker: ModelInvoker,
        language: Optional[str] = None,
        history: Optional[Sequence[Turn]] = None,
    ):
        self.invoker = invoker
        self.language = language
        self.system_instruction = build_chat_system_prompt(language)
        self._history: list[Turn] = list(history or [])

    @property
    def history(self) -> tuple[Turn, ...]:
        return tuple(self._history)

    async def send_message(self, message: Union[str, List[Part]]) -> str:
        parts: List[Part] = [TextPart(text=message)] if isinstance(message, str) else list(message)
        prompt, attachments = split_parts(parts)
        if not prompt and attachments:
            prompt = DEFAULT_IMAGE_PROMPT

        text = await self.invoker.invoke(
            prompt,
            attachments,
            history=list(self._history),
            system_instruction=self.system_instruction,
            json_output=False,
        )

        self._history.append(Turn(role=Role.USER, parts=parts))
        self._history.append(Turn(role=Role.MODEL, parts=[TextPart(text=text)]))
        return text
