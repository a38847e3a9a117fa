"""
Generation client used by the streaming driver.

The driver only needs `generate_content_stream`; tests pass a fake with the
same method instead of `GenAIClient`.
"""
import base64
from typing import Any, AsyncIterator, Optional, Protocol

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from core.config import Settings
from core.domain import Content, GenerateRequest, InlineDataPart
from core.errors import ConfigError, TransportError


class GenerationClient(Protocol):
    async def generate_content_stream(self, request: GenerateRequest) -> AsyncIterator[Any]:
        ...


def _to_genai_content(content: Content) -> types.Content:
    parts = []
    for part in content.parts:
        if isinstance(part, InlineDataPart):
            blob = types.Blob(mime_type=part.mime_type, data=base64.b64decode(part.data))
            parts.append(types.Part(inline_data=blob))
        else:
            parts.append(types.Part(text=part.text))
    return types.Content(role=content.role, parts=parts)


async def _translate_errors(stream: AsyncIterator[Any]) -> AsyncIterator[Any]:
    try:
        async for response in stream:
            yield response
    except genai_errors.APIError as e:
        raise TransportError(e.message or str(e), status_code=e.code) from e


class GenAIClient:
    """Streams responses from the Gemini API through google-genai."""

    def __init__(self, client: genai.Client):
        self.client = client

    async def generate_content_stream(self, request: GenerateRequest) -> AsyncIterator[Any]:
        config = types.GenerateContentConfig(
            system_instruction=request.system_instruction or None,
        )
        try:
            stream = await self.client.aio.models.generate_content_stream(
                model=request.model,
                contents=[_to_genai_content(c) for c in request.contents],
                config=config,
            )
        except genai_errors.APIError as e:
            raise TransportError(e.message or str(e), status_code=e.code) from e
        return _translate_errors(stream)


def create_client(settings: Settings, api_key: Optional[str] = None) -> GenAIClient:
    key = api_key or settings.api_key
    if not key:
        raise ConfigError('no API key configured; set GEMINI_API_KEY')
    return GenAIClient(genai.Client(api_key=key))
