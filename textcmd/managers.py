"""
textcmd manager: dispatch raw lines to registered commands.

What this module provides
- CommandManager: an ordered registry of commands with a built-in `help`
  command. run(call) finds the command addressed by the line, executes it,
  and turns user input faults into messages on the call:
  • exactly one call.error(<fault message>), then
  • exactly one call.info(<help text of that command>).
  Configuration errors are programming mistakes and propagate.
- invoke(target, call): run anything implementing __invoke__ (managers and
  commands).

Prefix
- a manager prefix (for example "!" in chat bots) is optional: a line is
  matched both as-is and with the prefix stripped.

Managers are plain objects passed around explicitly by the host; there is no
process-wide instance.
"""
import difflib
import logging
from types import MappingProxyType

from .commands import Command
from .faults import *

logger = logging.getLogger(__name__)


class CommandManager:
    """
    Ordered command registry and dispatch loop.

    Parameters
    - prefix: str
      Stripped from the front of lines before alias matching is retried.
    - strict: bool (keyword-only)
      Report lines that address no command through call.error() instead of
      dropping them silently.
    """

    def __init__(self, prefix="", *, strict=False):
        if not isinstance(prefix, str):
            raise TypeError("CommandManager prefix must be a string")
        self._prefix = prefix
        self._strict = bool(strict)
        self._commands = {}

        self._help = Command(
            "help",
            "Lists commands and gets the help/usage text for a command.",
            ("h", "?"),
            callback=self._helper
        ).string("command", False, "Command to get help/usage text of.", "c")
        self.add(self._help)

    @property
    def prefix(self):
        return self._prefix

    @property
    def strict(self):
        return self._strict

    @property
    def commands(self):
        return MappingProxyType(self._commands)

    @property
    def help(self):
        return self._help

    def add(self, command, /):
        """
        Freeze and register a command under its name; return it.

        A command registered under a name already in use replaces the previous
        one (this is how hosts swap the built-in help).
        """
        if not isinstance(command, Command):
            raise TypeError("add() argument must be a command")
        if (previous := self._commands.get(command.name)) is not None and previous is not command:
            logger.debug("replacing command %r", command.name)
        self._commands[command.name] = command.freeze()
        return command

    def extend(self, commands, /):
        for command in commands:
            self.add(command)

    def get(self, name, /):
        """
        Look a command up by name, then by alias. Returns None when unknown.
        """
        try:
            return self._commands[name]
        except KeyError:
            pass
        for command in self._commands.values():
            if name in command.aliases:
                return command
        return None

    def __contains__(self, name):
        return self.get(name) is not None

    def __iter__(self):
        return iter(self._commands.values())

    def __len__(self):
        return len(self._commands)

    def list_commands(self):
        """
        Return the command listing:

            Available Commands:
             - name: description
             - other
        """
        return "Available Commands:" + "".join(
            f"\n - {name}: {command.descr}" if command.descr else f"\n - {name}"
            for name, command in self._commands.items()
        )

    def _helper(self, call, parsed):
        if (name := parsed.get_any("command", "string")) is None:
            call.info(self.list_commands())
        elif (command := self.get(name)) is None:
            call.error("no command with name %r" % name)
        else:
            call.info(command.help_text())

    def _resolve(self, text):
        """
        Internal: return (command, text-to-execute) for the first command the
        line addresses, as-is or with the prefix stripped; (None, None) otherwise.
        """
        candidates = [text]
        if self._prefix and text.startswith(self._prefix):
            candidates.append(text.removeprefix(self._prefix))
        for command in self._commands.values():
            for candidate in candidates:
                if command.matches(candidate):
                    return command, candidate
        return None, None

    def run(self, call, /):
        """
        Dispatch a call to the first command its text addresses.

        Behavior
        - commands are tried in registration order; the first match runs and
          scanning stops.
        - a CommandSyntaxError is reported as call.error(message) followed by
          call.info(help text) and does not propagate.
        - when no command matches the line is dropped, or reported as an
          unknown command when the manager is strict.

        Returns
        - the Command that handled the line, or None.
        """
        command, text = self._resolve(call.text)

        if command is None:
            logger.debug("no command matches %r", call.text)
            if self._strict:
                self._unknown(call)
            return None

        try:
            command.execute(call, text)
        except CommandSyntaxError as fault:
            logger.debug("command %r rejected its input: %s", command.name, fault)
            call.error(str(fault))
            call.info(command.help_text())
        return command

    def _unknown(self, call):
        word = call.text.removeprefix(self._prefix).split(" ", 1)[0]
        aliases = [alias for command in self._commands.values() for alias in command.aliases]
        suggestions = difflib.get_close_matches(word, aliases, 5)
        fault = UnknownCommandError(
            "unknown command %r" % word + (", did you mean %r?" % suggestions[0] if suggestions else ""),
            title="unknown command",
            code=FaultCode.UNKNOWN_COMMAND,
            hint="run '%shelp' to see available commands" % self._prefix,
            input=word,
            suggestions=suggestions,
            docs=getdoc(FaultCode.UNKNOWN_COMMAND)
        )
        call.error(str(fault))

    def __invoke__(self, call):
        return self.run(call)

    def __repr__(self):
        return f"command-manager(prefix={self._prefix!r}, commands={tuple(self._commands)!r})"


def invoke(object, call, /):
    """
    Convenience runner for managers and commands.

    Parameters
    - object: an instance providing __invoke__(call) (CommandManager, Command).
    - call: the Call to dispatch.

    Raises
    - TypeError: when 'object' does not implement __invoke__.
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(call)
    raise TypeError("invoke() first argument must implement __invoke__ method")


__all__ = (
    "CommandManager",
    "invoke",
)
