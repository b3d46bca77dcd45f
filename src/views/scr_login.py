from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Input, Label, Markdown

from utils.messages import UserLoginMessage
from views.base_screen import BaseScreen
from views.modal_dialog import QuitDialogModal

DEMO_HINT = """\
**Demo logins**

- `owner / owner123` (full access)
- `cashier / cashier123` (checkout + orders)
- `stock / stock123` (inventory + suppliers)
"""


class LoginScreen(BaseScreen):
    """
    Dismissed once a user signed in; app.state then holds the user.
    """

    def __init__(self):
        super().__init__()
        self.configure(header_sub_title="Login", show_sidebar=False)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-login"):
            yield Label("Username")
            yield Input(placeholder="cashier", id="input-login-user")
            yield Label("Password")
            yield Input(placeholder="*********", password=True, id="input-login-pwd")
            with Horizontal(id="div-login-btns"):
                yield Button("Quit", id="btn-quit")
                yield Button("Login", id="btn-login", variant="primary")
            yield Markdown(DEMO_HINT, id="md-login-hint")

    def on_mount(self) -> None:
        self.query_one("#input-login-user").focus()

    @on(Input.Submitted, "#input-login-user")
    def handle_user_submitted(self) -> None:
        self.query_one("#input-login-pwd").focus()

    @on(Input.Submitted, "#input-login-pwd")
    @on(Button.Pressed, "#btn-login")
    @work(exclusive=True)
    async def handle_login_submit(self) -> None:
        username = self.query_one("#input-login-user", Input).value.strip()
        input_pwd = self.query_one("#input-login-pwd", Input)

        if not username or not input_pwd.value:
            self.notify("Username or password cannot be empty!", severity="error")
            return

        if await self.app.state.login(username, input_pwd.value):
            self.notify(f"Hello {self.app.state.name}!")
            self.app.post_message(UserLoginMessage())
            self.dismiss()
        else:
            self.notify("Invalid username or password.", severity="error")
            input_pwd.value = ""
            input_pwd.focus()
            input_pwd.add_class("-invalid")

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self) -> None:
        self.app.push_screen(QuitDialogModal())
