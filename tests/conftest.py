"""
Fake generation clients shared by the tests.
"""

import asyncio

import pytest

from core.domain import Content, TextPart


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeClient:
    """
    Replays `chunks` as responses.

    `setup_error` is raised by the handshake; `fail_after=n` raises `error`
    after n responses were produced.
    """

    def __init__(self, chunks=(), setup_error=None, fail_after=None, error=None):
        self.chunks = list(chunks)
        self.setup_error = setup_error
        self.fail_after = fail_after
        self.error = error or ConnectionError("connection reset")
        self.requests = []
        self.closed = False

    async def generate_content_stream(self, request):
        self.requests.append(request)
        await asyncio.sleep(0)
        if self.setup_error is not None:
            raise self.setup_error
        return self._responses()

    async def _responses(self):
        try:
            for i, chunk in enumerate(self.chunks):
                if self.fail_after == i:
                    raise self.error
                await asyncio.sleep(0)
                yield FakeResponse(chunk)
            if self.fail_after is not None and self.fail_after >= len(self.chunks):
                raise self.error
        finally:
            self.closed = True


class QueueClient:
    """
    Produces whatever the test puts on `feed`: a string becomes a chunk, an
    exception is raised, None ends the stream.
    """

    def __init__(self):
        self.feed: asyncio.Queue = asyncio.Queue()
        self.requests = []
        self.closed = False

    async def generate_content_stream(self, request):
        self.requests.append(request)
        return self._responses()

    async def _responses(self):
        try:
            while True:
                item = await self.feed.get()
                if item is None:
                    return
                if isinstance(item, BaseException):
                    raise item
                yield FakeResponse(item)
        finally:
            self.closed = True


async def drain(orchestrator, rounds=50):
    """Let the event loop run until the orchestrator is idle."""
    for _ in range(rounds):
        if not orchestrator.busy:
            return
        await asyncio.sleep(0)
    raise AssertionError("orchestrator still busy")


@pytest.fixture
def user_content():
    return (Content(role='user', parts=(TextPart('Hello'),)),)
