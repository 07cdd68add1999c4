"""
textcmd faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every issue the library
  raises or emits. Codes are grouped by domain to keep copy consistent and make
  logs/searches predictable.
- ConfigurationError: misuse of the registration/retrieval API by the embedding
  program. Never recovered by the dispatch loop; meant to fail fast.
- CommandSyntaxError: malformed end-user input. Always recoverable; the manager
  reports it through the call sink together with the command help.
- CommandWarning: soft diagnostics emitted through the warnings machinery.
- trigger(): central entry point to surface any fault with extra options.
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).
"""
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes used across the library (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • UNKNOWN_COMMAND
    - argument input (1111x/1112x)
      • MALFORMED_VALUE, UNRECOGNIZED_ARGUMENT, MISSING_VALUE, MISSING_ARGUMENT
    - warnings (121xx)
      • PREFIX_COLLISION
    - configuration (131xx)
      • DUPLICATED_ARGUMENT, OPTIONAL_ORDERED_ARGUMENT, FROZEN_COMMAND,
        INVALID_DEFINITION, UNKNOWN_ARGUMENT, UNKNOWN_KIND, KIND_MISMATCH,
        MISDIRECTED_CALL

    spacing leaves room for future additions without reshuffling existing codes.
    """
    # --- routing errors (11xxx) ---
    UNKNOWN_COMMAND             = 11101

    # --- argument input errors (11xxx) ---
    MALFORMED_VALUE             = 11111
    UNRECOGNIZED_ARGUMENT       = 11112
    MISSING_VALUE               = 11117
    MISSING_ARGUMENT            = 11125

    # --- warnings (12xxx) ---
    PREFIX_COLLISION            = 12101

    # --- configuration errors (13xxx) ---
    DUPLICATED_ARGUMENT         = 13101
    OPTIONAL_ORDERED_ARGUMENT   = 13102
    FROZEN_COMMAND              = 13103
    INVALID_DEFINITION          = 13104
    UNKNOWN_ARGUMENT            = 13111
    UNKNOWN_KIND                = 13112
    KIND_MISMATCH               = 13113
    MISDIRECTED_CALL            = 13121

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, /):
    """
    build the rich renderable shared by exceptions and warnings.

    options read from the fault
    - command: name of the command the fault belongs to (falls back to __prog__
      in __main__, then to the library name).
    - colorful: bool, default True.
    """
    main = __import__("__main__")
    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    colorful = fault.options.get("colorful", True)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    prog = fault.options.get("command") or getattr(main, "__prog__", "textcmd")

    header = Text.assemble(
        "[ ",
        text(prog, "prog-name"),
        " · ",
        text(fault.code.normalize(), "code"),
        " | ",
        text(fault.title.title(), "title"),
        " ]"
    )
    renders = [header, text(fault.message, "message")]
    if fault.hint:
        renders.append(Text.assemble(text(" → ", "hint-arrow"), text(fault.hint, "hint")))
    return Group(*renders)


class _Fault:
    """
    shared behavior for exceptions and warnings: message + read-only options.

    class attributes
    - __fault__: default FaultCode when no 'code' option is given.
    - __title__: default short title when no 'title' option is given.
    """
    __fault__ = Unset
    __title__ = "fault"
    __palette__ = {}

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__} message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code", type(self).__fault__)

    @property
    def title(self):
        return self.options.get("title", type(self).__title__)

    @property
    def hint(self):
        return self.options.get("hint")

    def __str__(self):
        return self.message

    def __rich__(self):
        return _render(self, type(self).__palette__)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class CommandException(_Fault, Exception):
    __palette__ = {
        "prog-name": "bold #E6E6F0",  # near-white program name
        "code": "bold #00E5FF",  # neon cyan fault code
        "title": "bold #FF4DA6",  # friendly pinky title
        "message": "#C8C8D0",  # soft light gray message
        "hint-arrow": "#9CE19C dim",  # gentle green arrow
        "hint": "italic #9CE19C",  # gentle green hint text
    }

    def __trigger__(self):
        raise self


class ConfigurationError(CommandException):
    __title__ = "bad configuration"


class DuplicatedArgumentError(ConfigurationError):
    __fault__ = FaultCode.DUPLICATED_ARGUMENT
    __title__ = "duplicated argument"
class OptionalOrderedArgumentError(ConfigurationError):
    __fault__ = FaultCode.OPTIONAL_ORDERED_ARGUMENT
    __title__ = "optional argument on ordered command"
class FrozenCommandError(ConfigurationError):
    __fault__ = FaultCode.FROZEN_COMMAND
    __title__ = "frozen command"
class InvalidDefinitionError(ConfigurationError):
    __fault__ = FaultCode.INVALID_DEFINITION
    __title__ = "invalid definition"
class UnknownArgumentError(ConfigurationError):
    __fault__ = FaultCode.UNKNOWN_ARGUMENT
    __title__ = "unknown argument"
class UnknownKindError(ConfigurationError):
    __fault__ = FaultCode.UNKNOWN_KIND
    __title__ = "unknown value kind"
class KindMismatchError(ConfigurationError):
    __fault__ = FaultCode.KIND_MISMATCH
    __title__ = "value kind mismatch"
class MisdirectedCallError(ConfigurationError):
    __fault__ = FaultCode.MISDIRECTED_CALL
    __title__ = "misdirected call"


class CommandSyntaxError(CommandException):
    __title__ = "bad input"


class MalformedValueError(CommandSyntaxError):
    __fault__ = FaultCode.MALFORMED_VALUE
    __title__ = "malformed value"
class MissingValueError(CommandSyntaxError):
    __fault__ = FaultCode.MISSING_VALUE
    __title__ = "missing value"
class MissingArgumentError(CommandSyntaxError):
    __fault__ = FaultCode.MISSING_ARGUMENT
    __title__ = "missing argument"
class UnrecognizedArgumentError(CommandSyntaxError):
    __fault__ = FaultCode.UNRECOGNIZED_ARGUMENT
    __title__ = "unrecognized argument"
class UnknownCommandError(CommandSyntaxError):
    __fault__ = FaultCode.UNKNOWN_COMMAND
    __title__ = "unknown command"


class CommandWarning(_Fault, Warning):
    __palette__ = {
        "prog-name": "bold #E6E6F0",  # near-white program name
        "code": "bold #FFB400",  # amber fault code for warnings
        "title": "bold #FFC2E0",  # softer pinky title for warnings
        "message": "#D6D6DE",  # slightly lighter gray body
        "hint-arrow": "#B8EFAF dim",  # softer green arrow
        "hint": "italic #B8EFAF",  # softer green hint text
    }

    def __trigger__(self):
        warnings.warn(self, stacklevel=self.options.get("stacklevel", 2))


class PrefixCollisionWarning(CommandWarning):
    __fault__ = FaultCode.PREFIX_COLLISION
    __title__ = "prefix collision"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - exceptions are raised; warnings are emitted through warnings.warn.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "CommandException",
    "ConfigurationError",
    "DuplicatedArgumentError",
    "OptionalOrderedArgumentError",
    "FrozenCommandError",
    "InvalidDefinitionError",
    "UnknownArgumentError",
    "UnknownKindError",
    "KindMismatchError",
    "MisdirectedCallError",
    "CommandSyntaxError",
    "MalformedValueError",
    "MissingValueError",
    "MissingArgumentError",
    "UnrecognizedArgumentError",
    "UnknownCommandError",
    "CommandWarning",
    "PrefixCollisionWarning",
    "trigger",
    "getdoc",
)
