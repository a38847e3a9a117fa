import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from core.attachments import Source, encode_attachments
from core.driver import StreamCallbacks, StreamHandle, StreamSession
from core.errors import TransportError
from core.history import build_contents
from core.transcript import Transcript

logger = logging.getLogger("nexus.orchestrator")


@dataclass
class SubmitResult:
    user_turn_id: str
    assistant_turn_id: str
    handle: StreamHandle


class Orchestrator:
    """
    Runs one submission at a time: encodes attachments, records the user turn
    and an assistant placeholder, then streams the reply into the placeholder.

    Every transcript change is also published to `events_q` for the UI.
    """

    def __init__(
        self,
        session: StreamSession,
        transcript: Optional[Transcript] = None,
        events_q: Optional[asyncio.Queue] = None,
    ):
        self.session = session
        self.transcript = transcript if transcript is not None else Transcript()
        self.events_q = events_q
        self.busy = False
        self._handle: Optional[StreamHandle] = None

    def _emit(self, ev_type: str, turn_id: Optional[str] = None) -> None:
        if self.events_q is None:
            return
        ev = {'type': ev_type}
        if turn_id is not None:
            ev['turn_id'] = turn_id
        self.events_q.put_nowait(ev)

    def _callbacks(self, turn_id: str) -> StreamCallbacks:
        def settle():
            # callbacks run inside the stream task; a reset may have dropped it
            if self._handle is not None and self._handle.task is asyncio.current_task():
                self.busy = False
                self._handle = None

        def on_chunk(text: str) -> None:
            if self.transcript.append_chunk(turn_id, text):
                self._emit('chunk', turn_id)

        def on_complete() -> None:
            if self.transcript.finalize(turn_id):
                self._emit('done', turn_id)
            settle()

        def on_error(error: TransportError) -> None:
            logger.error("response for turn %s failed: %s", turn_id, error)
            if self.transcript.mark_error(turn_id):
                self._emit('error', turn_id)
            settle()

        def on_cancel() -> None:
            if self.transcript.finalize(turn_id, status='cancelled'):
                self._emit('cancelled', turn_id)
            settle()

        return StreamCallbacks(on_chunk, on_complete, on_error, on_cancel)

    def submit(self, text: str, files: Iterable[Source] = ()) -> Optional[SubmitResult]:
        """
        Start a new exchange.

        Returns None when the submission is rejected: another reply is still
        streaming, or there is neither text nor a file to send.
        """
        files = list(files)
        if self.busy:
            logger.info("submission rejected: a response is still streaming")
            return None
        if not text.strip() and not files:
            logger.info("submission rejected: nothing to send")
            return None

        attachments = encode_attachments(files)
        if not text.strip() and not attachments:
            logger.info("submission rejected: none of the %d files could be read", len(files))
            return None
        history = self.transcript.history()

        user_turn_id = self.transcript.append_user_turn(text, attachments)
        self._emit('turn', user_turn_id)
        assistant_turn_id = self.transcript.append_placeholder_assistant_turn()
        self._emit('turn', assistant_turn_id)

        contents = build_contents(history, text, attachments)

        self.busy = True
        handle = self.session.start(contents, self._callbacks(assistant_turn_id))
        self._handle = handle
        logger.debug(
            "streaming turn %s (%d prior turns, %d attachments)",
            assistant_turn_id, len(history), len(attachments),
        )
        return SubmitResult(user_turn_id, assistant_turn_id, handle)

    def set_model(self, model: str) -> None:
        logger.info("switching model to %s", model)
        self.session.model = model

    def reset(self) -> None:
        """Start a new conversation, cancelling any reply still streaming."""
        self.session.cancel()
        self._handle = None
        self.busy = False
        self.transcript.reset()
        self._emit('reset')
