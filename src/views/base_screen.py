from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.events import ScreenResume
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Label, ListItem, ListView, Markdown

from engine.errors import EngineError
from utils.messages import ModeSwitchedMessage, UserLoginMessage, UserLogoutMessage
from utils.pure import markdown_table
from views.modal_dialog import DialogModal, QuitDialogModal


class Sidebar(Container):
    """User card, logout button and the menu of screens the role may open."""

    def compose(self) -> ComposeResult:
        yield Label("Signed in", id="label-info-1")
        yield Markdown("", id="md-userinfo")
        yield Button("Log out", id="btn-logout", variant="error")
        yield Label("Menu", id="label-info-2")
        yield ListView(id="list-menu")

    def on_mount(self) -> None:
        self.rebuild()

    @work(exclusive=True, group="sidebar")
    async def rebuild(self) -> None:
        state = self.app.state
        if not state.signed_in:
            return

        rows = [["User", state.username], ["Name", state.name], ["Role", state.role_label]]
        await self.query_one("#md-userinfo", Markdown).update(
            markdown_table(["", ""], rows)
        )

        # items are keyed by name, not id, so an overlapping rebuild can't clash
        list_menu = self.query_one("#list-menu", ListView)
        await list_menu.clear()
        await list_menu.extend(
            ListItem(Label(label), name=mode)
            for mode, label in self.app.modes_for(state).items()
        )
        self.highlight_item(self.app.current_mode)

    async def on_list_view_selected(self, event: ListView.Selected) -> None:
        selected_mode = event.item.name
        if selected_mode and self.app.current_mode != selected_mode:
            self.post_message(ModeSwitchedMessage(self.app.current_mode, selected_mode))
            await self.app.switch_mode(selected_mode)

    @on(Button.Pressed, "#btn-logout")
    @work()
    async def handle_logout(self) -> None:
        if await self.app.push_screen_wait(
            DialogModal(
                "Log out? Items left in the cart are discarded.",
                primary_text="Log out",
                secondary_text="Stay",
                tone="warning",
            )
        ):
            self.post_message(UserLogoutMessage())

    def highlight_item(self, mode: str) -> None:
        for item in self.query_one("#list-menu", ListView).children:
            item.highlighted = item.name == mode


class BaseScreen(Screen):
    """
    Inherited by all screens, contains common elements like
    headers, footers, sidebar, and keybindings.
    """

    BINDINGS = [
        Binding("ctrl+z", "quit", "Quit App", show=True),
    ]

    def __init__(self):
        super().__init__()
        self.configure()

    def configure(
        self,
        header_sub_title: str = "",
        show_sidebar: bool = True,
    ) -> None:
        self.app.title = "Store Manager"
        self.sub_title = header_sub_title
        for mode, screen_cls in self.app.MODES.items():
            if isinstance(self, screen_cls):
                self.sub_title = self.app.MODE_LABELS.get(mode, header_sub_title)
        self._show_sidebar = show_sidebar

    def compose(self) -> ComposeResult:
        if self._show_sidebar:
            yield Sidebar()
        yield Header()
        yield Footer(show_command_palette=False)

    @property
    def engine(self):
        return self.app.state.engine

    def report_error(self, error: EngineError) -> None:
        self.notify(str(error), severity="error")

    @on(ScreenResume)
    def handle_sidebar_resume(self) -> None:
        # another user may have signed in since this screen was last shown
        if self._show_sidebar:
            self.query_one(Sidebar).rebuild()

    @on(UserLoginMessage)
    def handle_user_login(self) -> None:
        self.refresh()

    @work()
    async def action_quit(self) -> None:
        await self.app.push_screen_wait(QuitDialogModal())
