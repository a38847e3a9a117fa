"""
Request payload types and the events flowing out of a streaming session.
"""

from dataclasses import dataclass
from typing import Any, Literal, TypedDict, Union

from core.errors import TransportError


@dataclass(frozen=True)
class TextPart:
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {'text': self.text}


@dataclass(frozen=True)
class InlineDataPart:
    mime_type: str
    data: str

    def to_dict(self) -> dict[str, Any]:
        return {'inlineData': {'mimeType': self.mime_type, 'data': self.data}}


Part = Union[InlineDataPart, TextPart]


@dataclass(frozen=True)
class Content:
    role: Literal['user', 'model']
    parts: tuple[Part, ...]

    def to_dict(self) -> dict[str, Any]:
        return {'role': self.role, 'parts': [p.to_dict() for p in self.parts]}


@dataclass(frozen=True)
class GenerateRequest:
    model: str
    contents: tuple[Content, ...]
    system_instruction: str = ''

    def to_dict(self) -> dict[str, Any]:
        return {
            'model': self.model,
            'contents': [c.to_dict() for c in self.contents],
            'config': {'systemInstruction': self.system_instruction},
        }


class ChunkEvent(TypedDict):
    type: Literal['chunk']
    text: str


class DoneEvent(TypedDict):
    type: Literal['done']


class ErrorEvent(TypedDict):
    type: Literal['error']
    error: TransportError


class CancelledEvent(TypedDict):
    type: Literal['cancelled']


StreamEvent = Union[ChunkEvent, DoneEvent, ErrorEvent, CancelledEvent]

TERMINAL_EVENTS = frozenset({'done', 'error', 'cancelled'})


class UIEvent(TypedDict, total=False):
    """Published to the UI after the transcript has been changed."""
    type: Literal['turn', 'chunk', 'done', 'error', 'cancelled', 'reset']
    turn_id: str
