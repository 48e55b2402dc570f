"""Main Textual application for termban."""

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widget import Widget

from termban.keys import INTERRUPT, KeyEvent
from termban.session import Session
from termban.viewport import Frame, Viewport


class BoardView(Widget):
    """Full-screen widget showing the current frame of a session."""

    DEFAULT_CSS = """
    BoardView {
        width: 100%;
        height: 100%;
    }
    """

    def __init__(self, session: Session, **kwargs) -> None:
        super().__init__(**kwargs)
        self.session = session
        self.viewport = Viewport()

    def frame(self) -> Frame:
        """Render the session at the widget's current size."""
        return self.viewport.render(self.session.board, self.session.state, self.size.width, self.size.height)

    def render(self) -> Frame:
        return self.frame()


class TermbanApp(App):
    """Keyboard-driven kanban board TUI."""

    TITLE = "termban"
    ENABLE_COMMAND_PALETTE = False
    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", show=False, priority=True),
    ]

    def __init__(self, session: Session):
        super().__init__()
        self.session = session
        self.exit_message: str | None = None

    def compose(self) -> ComposeResult:
        yield BoardView(self.session)

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.dispatch_key_event(KeyEvent.from_textual(event))

    def action_quit(self) -> None:
        """Quit through the session so the board is saved first."""
        self.dispatch_key_event(KeyEvent(INTERRUPT))

    def dispatch_key_event(self, key: KeyEvent) -> None:
        """Hand one key to the session, then redraw or exit."""
        if self.session.handle(key):
            self.query_one(BoardView).refresh()
            return
        if self.session.state.error:
            self.exit_message = f"error: {self.session.state.error}"
        self.exit(return_code=self.session.exit_code, message=self.exit_message)
