from datetime import datetime

from rich.markup import escape
from textual.widgets import Static

from models import Role, Turn


class MessageBubble(Static):
    """Renders one turn; `refresh_turn` redraws it after the turn changed."""

    DEFAULT_CSS = """
MessageBubble {
    margin: 0 1 1 1;
    padding: 0 1;
    border: round $secondary;
}
MessageBubble.user {
    border: round $primary;
    margin-left: 8;
}
MessageBubble.model {
    margin-right: 8;
}
MessageBubble.error {
    border: round $error;
    color: $error;
}
    """

    def __init__(self, turn: Turn) -> None:
        super().__init__(self.render_turn(turn), markup=True)
        self.turn = turn
        self.add_class('user' if turn.role == Role.USER else 'model')
        self.set_class(turn.is_error, 'error')

    @staticmethod
    def render_turn(turn: Turn) -> str:
        author = 'you' if turn.role == Role.USER else 'nexus'
        when = datetime.fromtimestamp(turn.timestamp / 1000).strftime('%H:%M')
        lines = [f"[bold]{author}[/bold] [dim]{when}[/dim]"]
        if turn.attachments:
            badges = ' '.join(f"\\[{escape(a.mime_type)}]" for a in turn.attachments)
            lines.append(f"[dim]{badges}[/dim]")

        if turn.in_flight and not turn.text:
            lines.append("[dim italic]thinking...[/dim italic]")
        elif turn.text:
            lines.append(escape(turn.text))
        if turn.status == 'cancelled':
            lines.append("[dim](stopped)[/dim]")
        return '\n'.join(lines)

    def refresh_turn(self) -> None:
        self.set_class(self.turn.is_error, 'error')
        self.update(self.render_turn(self.turn))
