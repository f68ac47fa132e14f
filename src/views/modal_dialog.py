from typing import Dict, Generic, Literal, Optional, Sequence, Tuple, TypeVar

from typing_extensions import override

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Label

from utils.messages import QuitRequestedMessage

T = TypeVar("T")

Tone = Literal["default", "positive", "warning", "error"]


class _FramedModal(ModalScreen[T], Generic[T]):
    """
    Caption above a row of buttons. Escape dismisses with `cancel_value`.
    """

    BINDINGS = [Binding("escape", "cancel", "Cancel", show=False)]

    cancel_value: Optional[T] = None

    def __init__(self, caption: str):
        super().__init__()
        self.caption = caption

    def buttons(self) -> ComposeResult:
        yield from ()

    def compose(self) -> ComposeResult:
        with Container(id="div-dialog"):
            yield Label(self.caption, id="caption")
            with Horizontal(id="dialog"):
                yield from self.buttons()

    def action_cancel(self) -> None:
        self.dismiss(self.cancel_value)


class DialogModal(_FramedModal[bool]):
    """
    A yes/no dialog. Dismisses with True for the primary button.
    """

    # tone -> (primary variant, secondary variant)
    VARIANT_MAP: Dict[str, Tuple[str, str]] = {
        "default": ("primary", "default"),
        "positive": ("success", "default"),
        "warning": ("warning", "default"),
        "error": ("error", "primary"),
    }

    cancel_value = False

    def __init__(
        self,
        caption: str,
        primary_text: str = "OK",
        secondary_text: str = "",
        tone: Tone = "default",
    ):
        super().__init__(caption)
        self.primary_text = primary_text
        self.secondary_text = secondary_text
        self.tone = tone

    def buttons(self) -> ComposeResult:
        primary, secondary = self.VARIANT_MAP[self.tone]
        if self.secondary_text:
            yield Button(self.secondary_text, variant=secondary, id="btn-secondary")
        yield Button(self.primary_text, variant=primary, id="btn-primary")

    def on_mount(self):
        # destructive dialogs focus the safe choice
        safe = self.secondary_text and self.tone == "error"
        self.query_one("#btn-secondary" if safe else "#btn-primary").focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "btn-primary")


class ConfirmDeleteModal(DialogModal):
    def __init__(self, what: str):
        super().__init__(
            f"Are you sure? This {what} will be deleted permanently.",
            primary_text="Yes, delete it!",
            secondary_text="Cancel",
            tone="error",
        )


class QuitDialogModal(DialogModal):
    def __init__(self):
        super().__init__("Are you sure you want to quit?", "Yes", "No", "error")

    @override
    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-primary":
            self.post_message(QuitRequestedMessage())
        super().on_button_pressed(event)


class ChoiceModal(_FramedModal[Optional[str]]):
    """
    Pick one of several values; dismisses with the value or None on cancel.
    The current value is highlighted.
    """

    def __init__(self, caption: str, choices: Sequence[str], current: str = ""):
        super().__init__(caption)
        self.choices = list(choices)
        self.current = current

    def buttons(self) -> ComposeResult:
        for choice in self.choices:
            yield Button(
                choice.capitalize(),
                id=f"btn-choice-{choice}",
                variant="primary" if choice == self.current else "default",
            )
        yield Button("Cancel", id="btn-cancel", variant="error")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-cancel":
            self.dismiss(None)
        else:
            self.dismiss(event.button.id.removeprefix("btn-choice-"))
