from typing import Dict

from textual.containers import VerticalScroll

from core.transcript import Transcript
from .message_bubble import MessageBubble


class ChatLog(VerticalScroll):
    """Scrolling view of a transcript, one bubble per turn."""

    def __init__(self, transcript: Transcript, **kwargs) -> None:
        super().__init__(**kwargs)
        self.transcript = transcript
        self.bubbles: Dict[str, MessageBubble] = {}

    async def add_turn(self, turn_id: str) -> None:
        turn = self.transcript.get(turn_id)
        if turn is None or turn_id in self.bubbles:
            return
        bubble = MessageBubble(turn)
        self.bubbles[turn_id] = bubble
        await self.mount(bubble)
        self.scroll_end(animate=False)

    def update_turn(self, turn_id: str) -> None:
        bubble = self.bubbles.get(turn_id)
        if bubble is None:
            return
        bubble.refresh_turn()
        self.scroll_end(animate=False)

    async def clear_turns(self) -> None:
        self.bubbles.clear()
        await self.remove_children()
