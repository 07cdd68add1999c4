"""
textcmd calls: the context a dispatched line travels with.

A Call carries the raw line (read-only `text`) and is the only way commands
talk back: respond() is the sink every message ends in, while error(),
success() and info() let hosts tell message kinds apart (each defaults to
respond()). Hosts subclass Call for their transport: chat message, socket,
game console, test recorder.

ConsoleCall is a ready-made sink that prints to a rich console.
"""
from abc import ABC, abstractmethod
from collections import defaultdict

from rich.console import Console
from rich.text import Text

from .utils import *


class Call(ABC):
    """
    abstract call context: raw text in, messages out.
    """

    def __init__(self, text, /):
        if not isinstance(text, str):
            raise TypeError(f"{type(self).__name__} text must be a string")
        self._text = text

    @property
    def text(self):
        return self._text

    @abstractmethod
    def respond(self, message, /):
        """
        deliver a message to whoever issued the line.
        """

    def error(self, message, /):
        self.respond(message)

    def success(self, message, /):
        self.respond(message)

    def info(self, message, /):
        self.respond(message)

    def __repr__(self):
        return f"{type(self).__name__}({self._text!r})"


class ConsoleCall(Call):
    """
    call whose responses are printed to a rich console.

    Palette keys
    - response, error, success, info

    Customization
    - Define a mapping named __styles__ in __main__ to override any palette entry.
    - colorful=False prints plain text.
    """

    def __init__(self, text, /, console=Unset, *, colorful=True):
        super().__init__(text)
        self._console = nullify(console) or Console()
        self._colorful = bool(colorful)

    @property
    def console(self):
        return self._console

    def _print(self, message, style):
        styles = defaultdict(str, {
            "response": "",
            "error": "bold #FF4DA6",  # friendly pinky errors
            "success": "#22C55E",  # GREEN for success
            "info": "#9CA3AF",  # Muted gray for help and listings
        } | getattr(__import__("__main__"), "__styles__", {}))
        self._console.print(Text(str(message), styles[style] if self._colorful else ""))

    def respond(self, message, /):
        self._print(message, "response")

    def error(self, message, /):
        self._print(message, "error")

    def success(self, message, /):
        self._print(message, "success")

    def info(self, message, /):
        self._print(message, "info")


__all__ = (
    "Call",
    "ConsoleCall",
)
