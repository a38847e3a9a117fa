"""
Custom input widgets for the Nexus chat application.
"""
from textual.widgets import Input
from textual.message import Message


class InputArea(Input):
    class Submit(Message, bubble=True):
        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    async def on_key(self, event) -> None:
        if event.key == "enter":
            event.stop()
            if self.disabled:
                return
            self.post_message(self.Submit(self.value))
            self.value = ""


def parse_command(text: str) -> tuple[str, str] | None:
    """
    Split a slash command into (name, argument).

    '/attach ~/cat.png' -> ('attach', '~/cat.png'); plain messages give None.
    """
    text = text.strip()
    if not text.startswith('/') or text.startswith('//'):
        return None
    name, _, arg = text[1:].partition(' ')
    return name.lower(), arg.strip()
