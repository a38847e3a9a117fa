"""
Modal screens for the Nexus chat application.
"""

from typing import Optional

from textual import on
from textual.widgets import Static, OptionList
from textual.widgets.option_list import Option
from textual.containers import Center, Vertical
from textual.screen import ModalScreen

from models import ModelType

MODEL_LABELS = {
    ModelType.FLASH: "Gemini 2.5 Flash (fast)",
    ModelType.PRO: "Gemini 3 Pro (preview)",
}


class ModelSelectScreen(ModalScreen[Optional[str]]):
    """Lets the user pick the model used for the next replies."""
    CSS = """
#panel {
    width: 80%;
    max-width: 80;
    border: round $secondary;
    padding: 1 2;
}
#model_options {
    margin-top: 1;
}
#panel OptionList {
    border: none;
    background: transparent;
}
    """
    BINDINGS = [
        ('1', 'choose("gemini-2.5-flash")', 'flash'),
        ('2', 'choose("gemini-3-pro-preview")', 'pro'),
        ('escape', 'dismiss_none', 'cancel'),
    ]

    def __init__(self, current: str) -> None:
        """
        Args:
            current (str): the model currently in use, marked in the list
        """
        super().__init__()
        self.current = current

    def compose(self):
        options = []
        for i, (model, label) in enumerate(MODEL_LABELS.items(), start=1):
            marker = " [green](current)[/green]" if model.value == self.current else ""
            options.append(Option(f"{i}. {label}{marker}", id=model.value))

        yield Center(
                Vertical(
                    Static("[bold]Choose a model[/bold]", markup=True, classes="title"),
                    OptionList(*options, id="model_options"),
                ),
                id="panel",
        )

    def on_mount(self) -> None:
        ol = self.query_one(OptionList)
        ol.focus()
        ol.index = 0

    @on(OptionList.OptionSelected)
    def on_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.dismiss(event.option_id)

    def action_choose(self, model: str) -> None:
        self.dismiss(model)

    def action_dismiss_none(self) -> None:
        self.dismiss(None)
