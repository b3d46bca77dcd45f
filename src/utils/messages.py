from textual.message import Message


class QuitRequestedMessage(Message):
    """
    broadcasted when the app is about to quit
    """

    bubble = True


class UserLogoutMessage(Message):
    """
    broadcasted when the user logs out
    """

    bubble = True


class UserLoginMessage(Message):
    """
    Fired once a user signed in, so screens can rebuild their menus
    """

    bubble = True


class StateChangedMessage(Message):
    """
    Posted at app level whenever the engine commits a change.
    Screens showing engine data reload on it (or on ScreenResume).
    """

    bubble = True

    def __init__(self, event: str) -> None:
        super().__init__()
        self.event = event


class CartChangedMessage(Message):
    """
    Fired by the checkout screen after any cart line was added, edited or removed
    """

    bubble = True


class ModeSwitchedMessage(Message):
    """
    fired whenever switch_mode is called
    must be fired from app level
    """

    bubble = True

    def __init__(self, old_mode: str, new_mode: str) -> None:
        super().__init__()
        self.old_mode = old_mode
        self.new_mode = new_mode
