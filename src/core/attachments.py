"""
Turns user supplied image files into inline attachments.
"""
import base64
import logging
import mimetypes
import os
from typing import BinaryIO, Iterable, Optional, Union

from core.errors import ReadError
from models import Attachment

logger = logging.getLogger("nexus.attachments")

ACCEPTED_MIME_TYPES = frozenset({
    'image/png',
    'image/jpeg',
    'image/webp',
    'image/heic',
    'image/heif',
})

# not every platform's mimetypes table knows these
_EXTRA_SUFFIXES = {
    '.heic': 'image/heic',
    '.heif': 'image/heif',
    '.webp': 'image/webp',
}

Source = Union[str, 'os.PathLike[str]', BinaryIO]


def _source_name(source: Source) -> Optional[str]:
    if isinstance(source, (str, os.PathLike)):
        return os.fspath(source)
    name = getattr(source, 'name', None)
    return name if isinstance(name, str) else None


def guess_mime_type(name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    suffix = os.path.splitext(name)[1].lower()
    if suffix in _EXTRA_SUFFIXES:
        return _EXTRA_SUFFIXES[suffix]
    mime, _ = mimetypes.guess_type(name)
    return mime


def _read_bytes(source: Source, name: Optional[str]) -> bytes:
    try:
        if isinstance(source, (str, os.PathLike)):
            with open(source, 'rb') as fh:
                raw = fh.read()
        else:
            raw = source.read()
    except (OSError, ValueError) as e:
        # ValueError: read on a closed file object
        raise ReadError(f'cannot read {name or "attachment"}: {e}', source=name) from e

    if not isinstance(raw, (bytes, bytearray)):
        raise ReadError(f'{name or "attachment"} is not a binary source', source=name)
    if not raw:
        raise ReadError(f'{name or "attachment"} is empty', source=name)
    return bytes(raw)


def encode_attachment(source: Source, mime_type: Optional[str] = None) -> Attachment:
    """
    Read `source` and return it as a base64 inline attachment.

    Args:
        source: a file path or a binary file-like object
        mime_type: overrides the type guessed from the file name

    Raises:
        ReadError: the source cannot be read, is empty, or is not an accepted image type
    """
    name = _source_name(source)
    mime = (mime_type or guess_mime_type(name) or '').lower()
    if mime not in ACCEPTED_MIME_TYPES:
        raise ReadError(f'unsupported attachment type {mime or "unknown"!r}', source=name)

    raw = _read_bytes(source, name)
    return Attachment(mime_type=mime, data=base64.b64encode(raw).decode('ascii'))


def encode_attachments(sources: Iterable[Source]) -> list[Attachment]:
    """Encode every readable source; unreadable ones are logged and skipped."""
    attachments: list[Attachment] = []
    for source in sources:
        try:
            attachments.append(encode_attachment(source))
        except ReadError as e:
            logger.warning("skipping attachment %s: %s", e.source or '<stream>', e)
    return attachments
