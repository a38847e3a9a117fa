"""
Data models for the Nexus chat application.
"""
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum


class Role(str, Enum):
    USER = 'user'
    MODEL = 'model'


class ModelType(str, Enum):
    FLASH = 'gemini-2.5-flash'
    PRO = 'gemini-3-pro-preview'


@dataclass(frozen=True)
class Attachment:
    """
    Inline binary content attached to a turn.

    `data` is the base64 encoding of the raw bytes, without any
    `data:<mime>;base64,` header.
    """
    mime_type: str
    data: str

    @property
    def data_url(self) -> str:
        return f'data:{self.mime_type};base64,{self.data}'


def _new_turn_id() -> str:
    return uuid.uuid4().hex


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class Turn:
    """
    Represents a single conversation message, authored by the user or the model.

    Only an assistant turn with status 'streaming' may have its text changed.
    """
    role: Role
    text: str = ""
    attachments: tuple[Attachment, ...] = ()
    status: str = 'final'
    turn_id: str = field(default_factory=_new_turn_id)
    timestamp: int = field(default_factory=_now_ms)

    @property
    def is_error(self) -> bool:
        return self.status == 'error'

    @property
    def in_flight(self) -> bool:
        return self.status == 'streaming'
