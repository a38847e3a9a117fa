"""
Streaming session driver.

`stream_events` turns one generation request into an async sequence of
chunk events followed by exactly one terminal event ('done', 'error' or
'cancelled'). `stream` and `StreamSession` dispatch that sequence to
callbacks.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, Optional

from core.client import GenerationClient
from core.domain import GenerateRequest, StreamEvent
from core.errors import TransportError

logger = logging.getLogger("nexus.driver")


class CancelToken:
    def __init__(self):
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


def _extract_text(response: Any) -> Optional[str]:
    if isinstance(response, str):
        return response or None
    text = getattr(response, 'text', None)
    return text if isinstance(text, str) and text else None


async def _close(stream: Any) -> None:
    aclose = getattr(stream, 'aclose', None)
    if aclose is None:
        return
    try:
        await aclose()
    except Exception:
        logger.debug("error while closing response stream", exc_info=True)


async def stream_events(
    client: GenerationClient,
    request: GenerateRequest,
    token: Optional[CancelToken] = None,
) -> AsyncIterator[StreamEvent]:
    """
    Issue `request` and yield its events.

    Chunks without text are dropped. A fault at any point ends the sequence
    with an 'error' event; chunks yielded before it stay delivered.
    """
    token = token or CancelToken()
    responses = None
    try:
        responses = await client.generate_content_stream(request)
        if token.cancelled:
            yield {'type': 'cancelled'}
            return

        iterator = responses.__aiter__()
        while True:
            try:
                response = await iterator.__anext__()
            except StopAsyncIteration:
                break
            except Exception as e:
                logger.exception("generation stream failed for model %s", request.model)
                yield {'type': 'error', 'error': TransportError.from_exception(e)}
                return

            if token.cancelled:
                logger.debug("stream cancelled for model %s", request.model)
                yield {'type': 'cancelled'}
                return

            text = _extract_text(response)
            if text:
                yield {'type': 'chunk', 'text': text}
    except Exception as e:
        # handshake failure or a response that could not be read
        logger.exception("generation request failed for model %s", request.model)
        yield {'type': 'error', 'error': TransportError.from_exception(e)}
        return
    finally:
        if responses is not None:
            await _close(responses)

    if token.cancelled:
        yield {'type': 'cancelled'}
    else:
        yield {'type': 'done'}


def _noop(*args: Any) -> None:
    pass


@dataclass
class StreamCallbacks:
    on_chunk: Callable[[str], None]
    on_complete: Callable[[], None]
    on_error: Callable[[TransportError], None]
    on_cancel: Callable[[], None] = _noop


async def stream(
    client: GenerationClient,
    request: GenerateRequest,
    callbacks: StreamCallbacks,
    token: Optional[CancelToken] = None,
) -> str:
    """
    Run one request, dispatching its events to `callbacks`.

    Exactly one of on_complete / on_error / on_cancel fires. Returns the
    terminal event type.
    """
    token = token or CancelToken()
    events = stream_events(client, request, token)
    try:
        async for ev in events:
            etype = ev['type']
            if etype == 'chunk':
                callbacks.on_chunk(ev['text'])
            elif etype == 'done':
                callbacks.on_complete()
                return etype
            elif etype == 'error':
                callbacks.on_error(ev['error'])
                return etype
            elif etype == 'cancelled':
                callbacks.on_cancel()
                return etype
    except asyncio.CancelledError:
        if not token.cancelled:
            raise
        # torn down by StreamHandle.cancel while waiting on the network
        callbacks.on_cancel()
        return 'cancelled'
    finally:
        await events.aclose()
    # unreachable: stream_events always ends with a terminal event
    raise RuntimeError('stream ended without a terminal event')


class StreamHandle:
    def __init__(self, task: 'asyncio.Task[str]', token: CancelToken):
        self.task = task
        self.token = token

    @property
    def done(self) -> bool:
        return self.task.done()

    def cancel(self) -> None:
        """Stop dispatching chunks and tear down the pending network call."""
        if self.task.done():
            return
        self.token.cancel()
        self.task.cancel()

    async def wait(self) -> str:
        try:
            return await self.task
        except asyncio.CancelledError:
            if self.token.cancelled and self.task.cancelled():
                # cancelled before the stream got to run
                return 'cancelled'
            raise


class StreamSession:
    """
    Generation client bound to a model and system instruction.

    At most one stream per session is live: `start` cancels the previous one.
    """

    def __init__(self, client: GenerationClient, model: str, system_instruction: str = ''):
        self.client = client
        self.model = model
        self.system_instruction = system_instruction
        self.active: Optional[StreamHandle] = None

    def build_request(self, contents) -> GenerateRequest:
        return GenerateRequest(
            model=self.model,
            contents=tuple(contents),
            system_instruction=self.system_instruction,
        )

    def start(self, contents, callbacks: StreamCallbacks) -> StreamHandle:
        self.cancel()
        token = CancelToken()
        request = self.build_request(contents)
        task = asyncio.create_task(stream(self.client, request, callbacks, token))
        self.active = StreamHandle(task, token)
        return self.active

    def cancel(self) -> None:
        if self.active is not None and not self.active.done:
            logger.info("cancelling active stream")
            self.active.cancel()
        self.active = None
