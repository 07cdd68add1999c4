"""
textcmd command layer: declare, match, parse and run textual commands.

What this module provides
- Command: an ordered collection of typed arguments plus a main callback.
  • Fluent registration (string/boolean/integer/long/float/double), validated
    eagerly and frozen before the first execution.
  • Alias matching against a raw line.
  • Two parsing strategies: prefix mode (--name/-short tokens, any order) and
    order mode (positional slots, every argument required).
  • Cached help text and a rich rendering of the same content.
- Parsed: the value table of one execution. Each execute() allocates a fresh
  one, so a frozen Command holds no per-run state and can run reentrantly.
- command(...): decorator that turns a function into a Command.

Quick start
    from textcmd import command

    @command("greet", aliases=("hi",))
    def greet(call, parsed):
        call.success("hello %s" % parsed.get_optional("name", "string"))

    greet.string("name", required=False, short="n", default="world")

Callbacks
- argument callbacks receive (call, value) as soon as their value is parsed.
- the command callback receives (call, parsed) once every argument is done.

See also
- textcmd.arguments for argument kinds and conversion rules.
- textcmd.managers for alias dispatch and error recovery.
"""
import functools
import inspect
import logging
import operator
import re
from collections import defaultdict, deque

from rich.console import Group
from rich.text import Text

from .arguments import ValueKind, argument
from .faults import *
from .tokens import split
from .utils import *

logger = logging.getLogger(__name__)


class CommandType(type):
    """
    Metaclass that gives commands read-only introspection and stable reprs.

    Responsibilities
    - Expose selected fields as read-only properties (see utils.view) for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ for diagnostics.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      for consistent, human-friendly labels in messages.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: view(name) for name in namespace.get("__introspectable__", ())
            },
            **options
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - command(name='greet', descr='say hello', aliases=('greet', 'hi'), ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield a sequence of (name, object) pairs for pretty printers.
            """
            for name in nullify(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate command metadata in place.

    - name: str, trimmed, non-empty.
    - descr: str, trimmed (may be empty).
    - aliases: iterable of str; each trimmed and non-empty. The result is an
      ordered, duplicate-free tuple that always starts with the name.
    - callback: Unset or callable.

    Raises
    - InvalidDefinitionError
    """
    def invalid(message):
        return InvalidDefinitionError(
            f"{cls.__typename__} {message}",
            title="invalid command definition",
            code=FaultCode.INVALID_DEFINITION,
            hint="check the arguments passed when creating it",
            docs=getdoc(FaultCode.INVALID_DEFINITION)
        )

    if not isinstance(name := metadata["name"], str):
        raise invalid("'name' must be a string")
    elif not (name := name.strip()):
        raise invalid("'name' cannot be empty")
    metadata["name"] = name

    if not isinstance(descr := metadata["descr"], str):
        raise invalid("'descr' must be a string")
    metadata["descr"] = descr.strip()

    if isinstance(aliases := metadata["aliases"], str):
        raise invalid("'aliases' must be an iterable of strings, not a string")
    aliases = [name, *aliases]
    for alias in aliases:
        if not isinstance(alias, str):
            raise invalid("aliases must be strings")
        elif not alias.strip():
            raise invalid("aliases cannot be empty-strings")
    metadata["aliases"] = tuple(dict.fromkeys(alias.strip() for alias in aliases))

    if not (metadata["callback"] is Unset or callable(metadata["callback"])):
        raise invalid("'callback' must be callable")


class Parsed:
    """
    Values parsed by one execution of a command.

    Each value is stored together with its ValueKind tag; typed retrieval
    compares the tag the caller expects with the stored one.

    Retrieval
    - get_any(name, kind, usedefault=False): value, default, or None.
    - get_optional(name, kind): value or default, never None.
    - get_required(name, kind): value, or MissingArgumentError when absent.

    Names are normalized like argument names, so "dry run" finds "dry_run".
    """

    def __init__(self, command, /):
        self._command = command
        self._values = {}

    @property
    def command(self):
        return self._command

    def _store(self, argument, value, /):
        self._values[argument.name] = (argument.kind, value)

    def _lookup(self, name, /):
        try:
            return self._command.arguments[normalize(name)]
        except KeyError:
            raise UnknownArgumentError(
                "%r is not an argument of %r" % (name, self._command.name),
                title="unknown argument",
                code=FaultCode.UNKNOWN_ARGUMENT,
                hint="registered arguments are %s" % (", ".join(map(repr, self._command.arguments)) or "none"),
                command=self._command.name,
                docs=getdoc(FaultCode.UNKNOWN_ARGUMENT)
            ) from None

    def get_any(self, name, kind, usedefault=False):
        """
        Return the parsed value of an argument, checked against the expected kind.

        Parameters
        - name: argument name (normalized before lookup).
        - kind: ValueKind | str expected by the caller.
        - usedefault: when nothing was parsed, return the argument default
          instead of None.

        Raises
        - UnknownArgumentError: the command declares no such argument.
        - UnknownKindError: kind is not a ValueKind.
        - KindMismatchError: the argument holds another kind of value.
        """
        kind = ValueKind.resolve(kind)
        argument = self._lookup(name)
        try:
            stored, value = self._values[argument.name]
        except KeyError:
            if not usedefault:
                return None
            stored, value = argument.kind, argument.default
        if stored is not kind:
            raise KindMismatchError(
                "argument %r of %r is a %s, not a %s" % (argument.name, self._command.name, stored, kind),
                title="value kind mismatch",
                code=FaultCode.KIND_MISMATCH,
                hint="retrieve it as %s" % stored,
                command=self._command.name,
                docs=getdoc(FaultCode.KIND_MISMATCH)
            )
        return value

    def get_optional(self, name, kind):
        return self.get_any(name, kind, True)

    def get_required(self, name, kind):
        """
        Return the parsed value of an argument that must have been supplied.

        Raises
        - MissingArgumentError: nothing was parsed for it (user-facing).
        - the configuration errors of get_any().
        """
        if (value := self.get_any(name, kind, False)) is None:
            raise MissingArgumentError(
                "argument %r of %r is missing" % (normalize(name), self._command.name),
                title="missing argument",
                code=FaultCode.MISSING_ARGUMENT,
                hint="pass it as --%s=<value>" % normalize(name),
                command=self._command.name,
                docs=getdoc(FaultCode.MISSING_ARGUMENT)
            )
        return value

    def __contains__(self, name):
        return isinstance(name, str) and normalize(name) in self._values

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __repr__(self):
        return "parsed(%s)" % ", ".join("%s=%r" % (name, value) for name, (_, value) in self._values.items())


class Command(metaclass=CommandType):
    """
    Textual command: aliases, typed arguments, callback and help.

    Lifecycle
    - Built once through the fluent registration API, then frozen (explicitly
      with freeze(), when added to a manager, or on the first execute()).
      Registering on a frozen command raises FrozenCommandError.
    - execute() never mutates the command: parsed values live in the Parsed
      table it returns, so frozen commands are safe to run reentrantly.

    Modes
    - prefix mode (default): tokens are matched against --name/-short prefixes
      in any order; optional arguments may be left out.
    - order mode (ordered=True): tokens fill the arguments positionally in
      registration order; every argument must be required.

    Extension points
    - run(call, parsed) invokes the main callback; override it in subclasses
      that prefer methods over callbacks.
    """

    __introspectable__ = (
        "name",
        "descr",
        "aliases",
        "ordered",
        "strict",
        "arguments",
        "required",
        "callback",
        "frozen",
    )

    __displayable__ = (
        "name",
        "descr",
        "aliases",
        "ordered",
        "strict",
        "arguments",
        "frozen",
    )

    def __new__(cls, name, /, descr="", aliases=(), ordered=False, callback=Unset, *, strict=False):
        """
        Construct a command.

        Parameters
        - name: str
          Primary name, always the first alias.
        - descr: str
          One-line description used in help and command listings.
        - aliases: Iterable[str]
          Extra strings that select this command when they start a line.
        - ordered: bool
          Parse arguments by position instead of by prefix.
        - callback: Callable[[Call, Parsed], None]
          Invoked once all arguments are parsed.
        - strict: bool (keyword-only)
          In prefix mode, reject tokens that match no argument instead of
          skipping them.
        """
        metadata = {
            "name": name,
            "descr": descr,
            "aliases": aliases,
            "callback": callback,
        }
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        self._ordered = bool(ordered)
        self._strict = bool(strict)
        self._arguments = {}
        self._required = set()
        self._frozen = False
        self._help = Unset
        return self

    def _register(self, kind, name, required, descr, short, default, callback):
        """
        Internal: validate and add one argument definition; return self.
        """
        if self._frozen:
            raise FrozenCommandError(
                "command %r is frozen, argument %r cannot be added" % (self.name, name),
                title="frozen command",
                code=FaultCode.FROZEN_COMMAND,
                hint="register every argument before adding the command to a manager or executing it",
                command=self.name,
                docs=getdoc(FaultCode.FROZEN_COMMAND)
            )
        if self._ordered and not required:
            raise OptionalOrderedArgumentError(
                "argument %r of %r cannot be optional when parsing by order" % (name, self.name),
                title="optional argument on ordered command",
                code=FaultCode.OPTIONAL_ORDERED_ARGUMENT,
                hint="register it with required=True or create the command with ordered=False",
                command=self.name,
                docs=getdoc(FaultCode.OPTIONAL_ORDERED_ARGUMENT)
            )

        definition = argument(kind, name, descr, short, default, callback)

        if definition.name in self._arguments:
            raise DuplicatedArgumentError(
                "there is already an argument called %r in %r" % (definition.name, self.name),
                title="duplicated argument",
                code=FaultCode.DUPLICATED_ARGUMENT,
                hint="argument names are compared after trimming and replacing spaces with underscores",
                command=self.name,
                docs=getdoc(FaultCode.DUPLICATED_ARGUMENT)
            )

        # prefixes are matched with startswith, so overlapping ones shadow each other
        heads = [head for head in (definition.prefix, definition.short_prefix) if head]
        for other in self._arguments.values():
            for head in heads:
                for taken in filter(None, (other.prefix, other.short_prefix)):
                    if head.startswith(taken) or taken.startswith(head):
                        trigger(PrefixCollisionWarning(
                            "prefix %r of argument %r overlaps %r of argument %r in %r" % (
                                head, definition.name, taken, other.name, self.name
                            ),
                            title="prefix collision",
                            code=FaultCode.PREFIX_COLLISION,
                            hint="tokens starting with %r go to whichever argument comes first" % min(head, taken, key=len),
                            command=self.name,
                            docs=getdoc(FaultCode.PREFIX_COLLISION)
                        ), stacklevel=5)

        self._arguments[definition.name] = definition
        if required:
            self._required.add(definition.name)
        return self

    def string(self, name, required=True, descr="", short="", default=Unset, callback=Unset):
        """
        Register a string argument and return the command for chaining.

        Raises
        - OptionalOrderedArgumentError: required is False on an ordered command.
        - DuplicatedArgumentError: the normalized name is already registered.
        - FrozenCommandError: the command no longer accepts registrations.
        - InvalidDefinitionError: malformed name, default or callback.
        """
        return self._register(ValueKind.STRING, name, required, descr, short, default, callback)

    def boolean(self, name, required=True, descr="", short="", default=Unset, callback=Unset):
        return self._register(ValueKind.BOOLEAN, name, required, descr, short, default, callback)

    def integer(self, name, required=True, descr="", short="", default=Unset, callback=Unset):
        return self._register(ValueKind.INTEGER, name, required, descr, short, default, callback)

    def long(self, name, required=True, descr="", short="", default=Unset, callback=Unset):
        return self._register(ValueKind.LONG, name, required, descr, short, default, callback)

    def float(self, name, required=True, descr="", short="", default=Unset, callback=Unset):
        return self._register(ValueKind.FLOAT, name, required, descr, short, default, callback)

    def double(self, name, required=True, descr="", short="", default=Unset, callback=Unset):
        return self._register(ValueKind.DOUBLE, name, required, descr, short, default, callback)

    def freeze(self):
        """
        Stop accepting registrations. Idempotent; returns self.
        """
        self._frozen = True
        return self

    def match(self, text, /):
        """
        Return the alias that selects this command for text, or None.

        An alias selects a line when the line equals it or starts with it
        followed by a space.
        """
        for alias in self._aliases:
            if text == alias or text.startswith(alias + " "):
                return alias
        return None

    def matches(self, text, /):
        return self.match(text) is not None

    def execute(self, call, text=Unset):
        """
        Parse a line addressed to this command and run the callbacks.

        Parameters
        - call: the Call sink/context; passed to every callback.
        - text: the line to parse; defaults to call.text. Managers pass the line
          with their prefix already stripped.

        Behavior
        - the matched alias and one following space are stripped, the rest is
          tokenized; the alias is token 0.
        - the selected strategy parses the tokens into a fresh Parsed table,
          invoking argument callbacks as values are produced.
        - the command callback runs last (see run()).

        Returns
        - Parsed: the values of this execution.

        Raises
        - CommandSyntaxError subclasses for malformed user input.
        - MisdirectedCallError when text is not addressed to this command.
        """
        self.freeze()
        text = nullify(text, call.text)

        if (alias := self.match(text)) is None:
            raise MisdirectedCallError(
                "%r is not addressed to command %r" % (text, self.name),
                title="misdirected call",
                code=FaultCode.MISDIRECTED_CALL,
                hint="check matches() before executing, or dispatch through a manager",
                command=self.name,
                docs=getdoc(FaultCode.MISDIRECTED_CALL)
            )

        tokens = [alias, *split(text.removeprefix(alias).removeprefix(" "))]
        logger.debug("executing %r through alias %r with %d token(s)", self.name, alias, len(tokens) - 1)

        parsed = Parsed(self)
        if self._ordered:
            self._parse_ordered(call, tokens, parsed)
        else:
            self._parse_prefixed(call, tokens, parsed)

        self.run(call, parsed)
        return parsed

    def _accept(self, call, parsed, argument, value):
        """
        Internal: store a parsed value and run the argument callback when there
        is a value to hand over.
        """
        if value is None:
            return
        parsed._store(argument, value)
        if argument.callback is not Unset:
            argument.callback(call, value)

    def _parse_ordered(self, call, tokens, parsed):
        """
        order mode: the i-th argument takes the i-th token after the alias.

        extra tokens are ignored; the first argument without a token raises
        MissingArgumentError and stops the execution.
        """
        for index, argument in enumerate(self._arguments.values(), start=1):
            if index >= len(tokens):
                raise MissingArgumentError(
                    "argument %r of %r is missing at %s position" % (argument.name, self.name, ordinal(index)),
                    title="missing argument",
                    code=FaultCode.MISSING_ARGUMENT,
                    hint="usage: %s" % self._usage(),
                    command=self.name,
                    argument=argument.name,
                    index=index,
                    docs=getdoc(FaultCode.MISSING_ARGUMENT)
                )
            self._accept(call, parsed, argument, argument.parse(tokens[index]))

    def _parse_prefixed(self, call, tokens, parsed):
        """
        prefix mode: each token goes to the first unresolved argument it matches.

        - bare '--name'/'-short' takes the next token as its value; that token is
          consumed and never scanned again, even when it looks like a flag
          ('--a --b=3' gives a='--b=3' and leaves b alone). As the last token
          a bare flag carries no value.
        - any other matching token is parsed inline ('--name=value').
        - an argument resolves at most once; later tokens for it are unmatched.
        - unmatched tokens are skipped, or rejected when the command is strict.
        - required arguments must end up with a value.
        """
        resolved = set()
        queue = deque(tokens[1:])
        index = 0

        while queue:
            token = queue.popleft()
            index += 1

            for argument in self._arguments.values():
                if argument.name in resolved or not argument.matches(token):
                    continue

                if not argument.prefixonly(token):
                    value = argument.parse(token)
                elif queue:
                    value = argument.parse(queue.popleft())
                    index += 1
                else:
                    value = None

                if value is None and argument.name in self._required:
                    raise MissingValueError(
                        "argument %r of %r requires a value at %s position" % (argument.name, self.name, ordinal(index)),
                        title="missing value",
                        code=FaultCode.MISSING_VALUE,
                        hint="pass it as %s=<%s> or %s <%s>" % (argument.prefix, argument.kind, argument.prefix, argument.kind),
                        command=self.name,
                        argument=argument.name,
                        index=index,
                        docs=getdoc(FaultCode.MISSING_VALUE)
                    )

                resolved.add(argument.name)
                self._accept(call, parsed, argument, value)
                break
            else:
                if self._strict:
                    raise UnrecognizedArgumentError(
                        "unrecognized argument %r at %s position of %r" % (token, ordinal(index), self.name),
                        title="unrecognized argument",
                        code=FaultCode.UNRECOGNIZED_ARGUMENT,
                        hint="arguments are given as --name=value or --name value",
                        command=self.name,
                        token=token,
                        index=index,
                        docs=getdoc(FaultCode.UNRECOGNIZED_ARGUMENT)
                    )
                logger.debug("skipping unmatched token %r at %s position of %r", token, ordinal(index), self.name)

        for name in self._arguments:
            if name in self._required and name not in resolved:
                raise MissingArgumentError(
                    "argument %r of %r is missing" % (name, self.name),
                    title="missing argument",
                    code=FaultCode.MISSING_ARGUMENT,
                    hint="pass it as --%s=<%s>" % (name, self._arguments[name].kind),
                    command=self.name,
                    argument=name,
                    docs=getdoc(FaultCode.MISSING_ARGUMENT)
                )

    def run(self, call, parsed):
        """
        Invoke the main callback with the call and this execution's values.
        """
        if self._callback is not Unset:
            self._callback(call, parsed)

    def __invoke__(self, call):
        return self.execute(call)

    def _usage(self):
        return " ".join([self._name, *("<%s>" % name for name in self._arguments)])

    def _entries(self):
        """
        Internal: yield (required, label-parts, descr) per argument in registration order.
        """
        for name, argument in self._arguments.items():
            if self._ordered:
                parts = ("- ", name, Unset, argument.kind)
            else:
                parts = ("--", name, argument.short_prefix, argument.kind)
            yield name in self._required, parts, argument.descr

    def help_text(self):
        """
        Return the help text, computing it once.

        Format (prefix mode)
            name: description
              Required Arguments:
                --name [-s] (kind): description
              Optional Arguments:
                --name (kind): description

        Format (order mode)
            name: description
              Arguments:
                - name (kind): description
              Usage: name <a> <b>

        Empty blocks are left out; an "Aliases:" line follows the header when
        the command has aliases besides its name.
        """
        if self._help is not Unset:
            return self._help

        lines = [f"{self._name}: {self._descr}" if self._descr else self._name]
        if len(self._aliases) > 1:
            lines.append("  Aliases: " + ", ".join(self._aliases[1:]))

        blocks = defaultdict(list)
        for required, (lead, name, short, kind), descr in self._entries():
            label = lead + name + (f" [{short}]" if short else "") + f" ({kind})"
            blocks[required].append(f"    {label}: {descr}" if descr else f"    {label}")

        if blocks[True]:
            lines.append("  Arguments:" if self._ordered else "  Required Arguments:")
            lines.extend(blocks[True])
        if blocks[False]:
            lines.append("  Optional Arguments:")
            lines.extend(blocks[False])
        if self._ordered:
            lines.append("  Usage: " + self._usage())

        self._help = "\n".join(lines)
        return self._help

    def reset_help(self):
        """
        Drop the cached help text; the next help_text() call recomputes it.
        """
        self._help = Unset

    def __rich__(self):
        """
        Render the help content with rich styling.

        Palette keys
        - command-name, command-description, aliases, section-label
        - argument-name, short-name, kind, argument-description, usage

        Customization
        - Define a mapping named __styles__ in __main__ to override any palette entry.
        """
        styles = defaultdict(str, {
            "command-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
            "command-description": "italic #A3A3A3",  # Neutral gray
            "aliases": "#36C5F0",  # SKY-BLUE → softer than cyan
            "section-label": "bold #FFFFFF",  # Pure white headers
            "argument-name": "bold #00E6FF",  # CYAN for argument names
            "short-name": "#22C55E",  # GREEN for short names
            "kind": "bold #FFD600",  # AMBER for value kinds
            "argument-description": "#9CA3AF",  # Muted gray
            "usage": "bold #36C5F0",
        } | getattr(__import__("__main__"), "__styles__", {}))

        renders = [Text.assemble(
            (self._name, styles["command-name"]),
            *((": ", ""), (self._descr, styles["command-description"])) * bool(self._descr)
        )]
        if len(self._aliases) > 1:
            renders.append(Text.assemble("  ", ("Aliases: ", styles["section-label"]), (", ".join(self._aliases[1:]), styles["aliases"])))

        blocks = defaultdict(list)
        for required, (lead, name, short, kind), descr in self._entries():
            blocks[required].append(Text.assemble(
                "    ",
                (lead + name, styles["argument-name"]),
                *((" [", ""), (short, styles["short-name"]), ("]", "")) * bool(short),
                " (", (str(kind), styles["kind"]), ")",
                *((": ", ""), (descr, styles["argument-description"])) * bool(descr)
            ))

        for required, label in ((True, "Arguments:" if self._ordered else "Required Arguments:"), (False, "Optional Arguments:")):
            if blocks[required]:
                renders.append(Text.assemble("  ", (label, styles["section-label"])))
                renders.extend(blocks[required])
        if self._ordered:
            renders.append(Text.assemble("  ", ("Usage: ", styles["section-label"]), (self._usage(), styles["usage"])))

        return Group(*renders)


def command(source=Unset, /, descr=Unset, aliases=(), ordered=False, *, strict=False):
    """
    Create a Command from a function, or return a decorator that does.

    Invocation modes
    - Bare decorator:
        @command
        def ping(call, parsed): ...
    - Decorator with metadata (the first argument may be the command name):
        @command("greet", "say hello", aliases=("hi",))
        def greet(call, parsed): ...
    - Direct:
        ping = command(ping_function)

    Defaults
    - name: the function's __name__ unless a name is given.
    - descr: the first line of the function's docstring unless given.

    Returns
    - Command | Callable[[Callable], Command]
    """
    name = source if isinstance(source, str) else Unset

    @rename("command")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@command() must be applied to a callable")
        docstring = (inspect.getdoc(callback) or "").strip()
        return Command(
            nullify(name, callback.__name__),
            nullify(descr, docstring.splitlines()[0] if docstring else ""),
            aliases,
            ordered,
            callback,
            strict=strict
        )

    # Direct mode if a callable was provided, otherwise return the decorator.
    return wrapper(source) if callable(source) else wrapper


__all__ = (
    "Command",
    "Parsed",
    "command",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del CommandType
