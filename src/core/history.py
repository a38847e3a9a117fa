"""
Maps transcript turns to the `contents` list of a generation request.
"""
from typing import Iterable, Sequence

from core.domain import Content, InlineDataPart, Part, TextPart
from models import Attachment, Role, Turn


def _parts(text: str, attachments: Sequence[Attachment]) -> tuple[Part, ...]:
    # attachments first, in order, then the text; the API expects this layout
    parts: list[Part] = [InlineDataPart(a.mime_type, a.data) for a in attachments]
    parts.append(TextPart(text))
    return tuple(parts)


def turn_to_content(turn: Turn) -> Content:
    role = 'user' if turn.role == Role.USER else 'model'
    return Content(role=role, parts=_parts(turn.text, turn.attachments))


def build_contents(
    history: Iterable[Turn],
    text: str,
    attachments: Sequence[Attachment] = (),
) -> tuple[Content, ...]:
    """
    Build the request contents for a new user message.

    Errored turns are left out. The new message goes last and keeps its text
    part even when the text is empty.
    """
    contents = [turn_to_content(t) for t in history if not t.is_error]
    contents.append(Content(role='user', parts=_parts(text, attachments)))
    return tuple(contents)
