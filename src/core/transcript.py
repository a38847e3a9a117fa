"""
The conversation transcript: the only mutable conversation state.
"""
import logging
from typing import Dict, Iterator, Optional, Sequence

from core.errors import TranscriptError
from models import Attachment, Role, Turn

logger = logging.getLogger("nexus.transcript")

ERROR_MESSAGE = "Sorry, something went wrong while generating a response. Please try again."


class Transcript:
    """
    Ordered list of turns with O(1) lookup by turn id.

    Updates aimed at a turn id that is gone (after `reset`) or no longer
    streaming are ignored and reported by returning False.
    """

    def __init__(self):
        self.turns: Dict[str, Turn] = {}
        self.turn_order: list[str] = []
        self.in_flight_id: Optional[str] = None

    def __len__(self) -> int:
        return len(self.turn_order)

    def __iter__(self) -> Iterator[Turn]:
        return (self.turns[tid] for tid in self.turn_order)

    def get(self, turn_id: str) -> Optional[Turn]:
        return self.turns.get(turn_id)

    def history(self) -> list[Turn]:
        return list(self)

    def _append(self, turn: Turn) -> str:
        self.turns[turn.turn_id] = turn
        self.turn_order.append(turn.turn_id)
        return turn.turn_id

    def append_user_turn(self, text: str, attachments: Sequence[Attachment] = ()) -> str:
        return self._append(Turn(role=Role.USER, text=text, attachments=tuple(attachments)))

    def append_placeholder_assistant_turn(self) -> str:
        if self.in_flight_id is not None:
            raise TranscriptError(f'turn {self.in_flight_id} is still streaming')
        turn_id = self._append(Turn(role=Role.MODEL, status='streaming'))
        self.in_flight_id = turn_id
        return turn_id

    def _streaming_turn(self, turn_id: str) -> Optional[Turn]:
        turn = self.turns.get(turn_id)
        if turn is None or not turn.in_flight:
            logger.debug("ignoring update for stale turn %s", turn_id)
            return None
        return turn

    def append_chunk(self, turn_id: str, text: str) -> bool:
        turn = self._streaming_turn(turn_id)
        if turn is None:
            return False
        turn.text += text
        return True

    def finalize(self, turn_id: str, status: str = 'final') -> bool:
        """Close the in-flight turn; `status` is 'final' or 'cancelled'."""
        turn = self._streaming_turn(turn_id)
        if turn is None:
            return False
        turn.status = status
        self.in_flight_id = None
        return True

    def mark_error(self, turn_id: str, message: str = ERROR_MESSAGE) -> bool:
        """Replace the turn's partial text with `message` and flag it as errored."""
        turn = self._streaming_turn(turn_id)
        if turn is None:
            return False
        turn.text = message
        turn.status = 'error'
        self.in_flight_id = None
        return True

    def reset(self) -> None:
        self.turns.clear()
        self.turn_order.clear()
        self.in_flight_id = None
