"""
Nexus chat: a terminal chat client for Gemini with streamed replies.
"""

import logging
import os
import sys
from typing import Optional
from textual import work
from textual.app import App, ComposeResult
from textual.logging import TextualHandler
from textual.widgets import Footer, Static
import asyncio

from core.client import create_client
from core.config import Settings, load_settings
from core.driver import StreamSession
from core.errors import ConfigError
from core.orchestrator import Orchestrator
from screens import ModelSelectScreen
from widgets import InputArea, ChatLog, parse_command

logger = logging.getLogger("nexus.app")

HELP_TEXT = (
    "/attach <path>  queue an image for the next message\n"
    "/detach         drop queued images\n"
    "/model          choose the model\n"
    "/new            start a new conversation"
)


class ChatApp(App):
    CSS = """
#attachments {
    height: auto;
    padding: 0 1;
    color: $text-muted;
}
#status {
    height: auto;
    padding: 0 1;
    color: $warning;
}
    """
    BINDINGS = [
        ('ctrl+n', 'new_chat', 'New chat'),
        ('ctrl+o', 'choose_model', 'Model'),
    ]

    def __init__(self, session: StreamSession):
        """Initialize the chat application around a streaming session."""
        super().__init__()
        self.event_q: asyncio.Queue = asyncio.Queue()
        self.orchestrator = Orchestrator(session, events_q=self.event_q)
        self.pending_files: list[str] = []

    def compose(self) -> ComposeResult:
        yield ChatLog(self.orchestrator.transcript, id="chat_log")
        yield Static("", id="status")
        yield Static("", id="attachments")
        yield InputArea(id="input_text", placeholder="Ask Nexus something... (/help for commands)")
        yield Footer()

    async def on_mount(self) -> None:
        self.sub_title = self.orchestrator.session.model
        self.set_focus(self.query_one('#input_text', InputArea))
        self._pump()

    async def on_input_area_submit(self, message: InputArea.Submit) -> None:
        """
        1. Runs slash commands
        2. Otherwise submits the text with any queued images
        """
        command = parse_command(message.value)
        if command is not None:
            self._run_command(*command)
            return

        result = self.orchestrator.submit(message.value, self.pending_files)
        if result is None:
            self._show_status("Nothing sent." if not self.orchestrator.busy
                              else "Still answering, please wait.")
            return

        self.pending_files = []
        self._refresh_attachments()
        self._show_status("")
        self._set_busy(True)

    def _run_command(self, name: str, arg: str) -> None:
        if name == 'attach':
            if not arg:
                self._show_status("usage: /attach <path>")
                return
            path = os.path.expanduser(arg)
            logger.debug("queued attachment %s", path)
            self.pending_files.append(path)
            self._refresh_attachments()
        elif name == 'detach':
            self.pending_files = []
            self._refresh_attachments()
        elif name == 'new':
            self.action_new_chat()
        elif name == 'model':
            self.action_choose_model()
        elif name == 'help':
            self._show_status(HELP_TEXT)
        else:
            self._show_status(f"unknown command /{name}, try /help")

    def _refresh_attachments(self) -> None:
        names = ', '.join(os.path.basename(p) for p in self.pending_files)
        self.query_one('#attachments', Static).update(f"attached: {names}" if names else "")

    def _show_status(self, text: str) -> None:
        self.query_one('#status', Static).update(text)

    def _set_busy(self, busy: bool) -> None:
        input_text = self.query_one('#input_text', InputArea)
        input_text.disabled = busy
        input_text.placeholder = "Generating response..." if busy else "Ask Nexus something..."
        if not busy:
            input_text.focus()

    def action_new_chat(self) -> None:
        self.orchestrator.reset()
        self.pending_files = []
        self._refresh_attachments()
        self._show_status("")
        self._set_busy(False)

    @work(exclusive=True, group='model')
    async def action_choose_model(self) -> None:
        model: Optional[str] = await self.push_screen_wait(
            ModelSelectScreen(self.orchestrator.session.model)
        )
        if model:
            self.orchestrator.set_model(model)
            self.sub_title = model

    @work(exclusive=True, group='pump')
    async def _pump(self):
        """
        Event processing loop.

        Event types handled:
        - 'turn': a turn was appended to the transcript
        - 'chunk': streamed text was added to the in-flight turn
        - 'done' / 'error' / 'cancelled': the in-flight turn was closed
        - 'reset': the transcript was cleared
        """
        chat_log = self.query_one("#chat_log", ChatLog)

        while True:
            ev = await self.event_q.get()
            type = ev.get("type", '')
            turn_id = ev.get("turn_id")

            if type == "turn":
                await chat_log.add_turn(turn_id)
            elif type == "chunk":
                chat_log.update_turn(turn_id)
            elif type in ("done", "error", "cancelled"):
                chat_log.update_turn(turn_id)
                self._set_busy(self.orchestrator.busy)
            elif type == "reset":
                await chat_log.clear_turns()


def setup_logging(settings: Settings) -> None:
    # the terminal belongs to the app, so records go to the textual console
    logging.basicConfig(level=settings.log_level, handlers=[TextualHandler()])


def main():
    settings = load_settings()
    setup_logging(settings)
    try:
        client = create_client(settings)
    except ConfigError as e:
        print(f"nexus: {e}", file=sys.stderr)
        sys.exit(1)

    session = StreamSession(client, settings.model, settings.system_instruction)
    app = ChatApp(session)
    app.run()


if __name__ == "__main__":
    main()
