r"""
textcmd argument definitions.

Overview
- ValueKind: closed tag identifying the payload of an argument
  (string, boolean, integer, long, float, double). Values parsed during an
  execution are stored next to their tag, and typed retrieval compares tags.
- Argument[_V]: named, typed leaf definition. It recognizes its own tokens
  (--name, --name=value, -short, -short=value) and converts a literal into a
  typed value or fails with a MalformedValueError.
- StringArgument, BooleanArgument, IntegerArgument, LongArgument,
  FloatArgument, DoubleArgument: the six concrete kinds.
- argument(kind, ...): build the concrete argument for a kind.

Introspection & representation
- ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes
  selected fields via read-only properties declared in __introspectable__.

Metadata (sanitized on construction)
- name: str, trimmed, interior spaces replaced by underscores, non-empty.
- short: str, normalized like name; empty means "no short name".
- descr: str, trimmed (may be empty).
- default: instance of the kind's python type (bool is not a number here);
  omitted → the kind's own default.
- callback: Unset | Callable[[Call, _V], None], invoked when a value is parsed.

Conversion
- string: passthrough.
- boolean: "true" (any case) is True, anything else False; never fails.
- integer/long: strict decimal digits with optional sign, 32/64-bit range.
- float/double: strict decimal or scientific literal, nan, inf or infinity.

Quick example:
    >>> count = argument("long", "count", short="c", default=10)
    >>> count.parse("--count=42")
    42
    >>> count.parse("-c=7"), count.matches("-c"), count.prefixonly("-c")
    (7, True, True)
"""
import functools
import operator
import re
from enum import StrEnum

from .faults import *
from .utils import *


class ValueKind(StrEnum):
    """
    closed tag for argument payloads.

    members carry their python type and the default used when a definition
    does not declare one. integer/long and float/double share a python type;
    the tag is what keeps them apart at retrieval time.
    """
    STRING = "string"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"

    @property
    def type(self):
        return {
            ValueKind.STRING: str,
            ValueKind.BOOLEAN: bool,
            ValueKind.INTEGER: int,
            ValueKind.LONG: int,
            ValueKind.FLOAT: float,
            ValueKind.DOUBLE: float,
        }[self]

    @property
    def default(self):
        return {
            ValueKind.STRING: "",
            ValueKind.BOOLEAN: False,
            ValueKind.INTEGER: -1,
            ValueKind.LONG: -1,
            ValueKind.FLOAT: -1.0,
            ValueKind.DOUBLE: -1.0,
        }[self]

    @classmethod
    def resolve(cls, kind, /):
        """
        coerce a ValueKind or its string value into a member.

        Raises
        - UnknownKindError: when kind names no member.
        """
        try:
            return cls(kind)
        except ValueError:
            raise UnknownKindError(
                "%r is not a value kind" % (kind,),
                title="unknown value kind",
                code=FaultCode.UNKNOWN_KIND,
                hint="use one of %s" % ", ".join(map(str, cls)),
                docs=getdoc(FaultCode.UNKNOWN_KIND)
            ) from None

    def accepts(self, value, /):
        """
        tell whether a python value is a legal payload for this kind.
        """
        match self:
            case ValueKind.STRING:
                return isinstance(value, str)
            case ValueKind.BOOLEAN:
                return isinstance(value, bool)
            case ValueKind.INTEGER | ValueKind.LONG:
                bits = 32 if self is ValueKind.INTEGER else 64
                return (
                    isinstance(value, int) and
                    not isinstance(value, bool) and
                    -2 ** (bits - 1) <= value < 2 ** (bits - 1)
                )
            case _:
                return isinstance(value, int | float) and not isinstance(value, bool)


class ArgumentType(type):
    """
    Metaclass that turns argument classes into introspectable definitions.

    Responsibilities
    - Expose selected fields as read-only properties (see utils.view) for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
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
            - long-argument(name='count', short='c', kind=<ValueKind.LONG: 'long'>, ...)
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
    Internal: normalize and validate argument metadata in place.

    Raises
    - InvalidDefinitionError: when a field has the wrong type, the name is empty
      after normalization, the default does not fit the kind or the callback is
      not callable.
    """
    def invalid(message):
        return InvalidDefinitionError(
            f"{cls.__typename__} {message}",
            title="invalid argument definition",
            code=FaultCode.INVALID_DEFINITION,
            hint="check the arguments passed when registering it",
            docs=getdoc(FaultCode.INVALID_DEFINITION)
        )

    for field in ("name", "short", "descr"):
        if not isinstance(metadata[field], str):
            raise invalid(f"'{field}' must be a string")

    if not (name := normalize(metadata["name"])):
        raise invalid("'name' cannot be empty")
    metadata["name"] = name
    metadata["short"] = normalize(metadata["short"])
    metadata["descr"] = metadata["descr"].strip()

    kind = metadata["kind"]
    default = nullify(metadata["default"], kind.default)
    if not kind.accepts(default):
        raise invalid(f"{name!r} default {default!r} is not a valid {kind}")
    # store floats as floats even when declared with an int literal
    metadata["default"] = kind.type(default)

    if not (metadata["callback"] is Unset or callable(metadata["callback"])):
        raise invalid(f"{name!r} callback must be callable")


class Argument[_V](metaclass=ArgumentType):
    """
    Named, typed argument definition.

    An Argument only describes and converts; it never stores parsed values.
    Commands keep per-execution values in a fresh table (see commands.Parsed).

    Prefixes
    - prefix: "--" + name, always present.
    - short_prefix: "-" + short, None when no short name was declared.
    """

    __kind__ = Unset

    __introspectable__ = (
        "name",
        "short",
        "descr",
        "default",
        "kind",
        "callback",
    )

    __displayable__ = (
        "name",
        "short",
        "kind",
        "default",
        "descr",
    )

    def __new__(cls, name, /, descr="", short="", default=Unset, callback=Unset):
        """
        Construct a typed argument definition.

        Parameters
        - name: str
          Long name; normalized (trimmed, interior spaces → underscores).
        - descr: str
          Short description used in help text.
        - short: str
          Short name (ideally one or two characters); empty for none.
        - default: _V
          Value returned by optional retrieval when nothing was parsed.
        - callback: Callable[[Call, _V], None]
          Invoked with the call and the parsed value each time a value is parsed.
        """
        if cls.__kind__ is Unset:
            raise TypeError(f"{cls.__typename__} is abstract, use one of the typed arguments")

        metadata = {
            "name": name,
            "short": short,
            "descr": descr,
            "default": default,
            "kind": cls.__kind__,
            "callback": callback,
        }
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def prefix(self):
        return "--" + self.name

    @property
    def short_prefix(self):
        return "-" + self.short if self.short else None

    def matches(self, token, /):
        """
        True when the token starts with the long prefix or (when a short name
        exists) with the short prefix.
        """
        if token.startswith(self.prefix):
            return True
        return bool(self.short) and token.startswith(self.short_prefix)

    def prefixonly(self, token, /):
        """
        True when the token is exactly the bare flag form: the value must then
        come from the following token.
        """
        return token == self.prefix or (bool(self.short) and token == self.short_prefix)

    def parse(self, token, /):
        """
        Convert a token into a typed value.

        '--name=value' and '-short=value' are stripped of their head first;
        anything else is converted whole.

        Raises
        - MalformedValueError: when the literal cannot be converted.
        """
        for head in (self.prefix, self.short_prefix):
            if head and token.startswith(head + "="):
                return self.convert(token.removeprefix(head + "="))
        return self.convert(token)

    def convert(self, literal, /):
        raise NotImplementedError

    def _malformed(self, literal):
        return MalformedValueError(
            "%r is not a valid %s for argument %r" % (literal, self.kind, self.name),
            title="malformed value",
            code=FaultCode.MALFORMED_VALUE,
            hint="pass a %s, for example %s=<%s>" % (self.kind, self.prefix, self.kind),
            argument=self.name,
            literal=literal,
            docs=getdoc(FaultCode.MALFORMED_VALUE)
        )


_INTEGRAL = re.compile(r"[+-]?\d+", re.ASCII)
_DECIMAL = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?|nan|inf(?:inity)?)",
    re.ASCII | re.IGNORECASE
)


class StringArgument(Argument[str]):
    __kind__ = ValueKind.STRING

    def convert(self, literal, /):
        return literal


class BooleanArgument(Argument[bool]):
    __kind__ = ValueKind.BOOLEAN

    def convert(self, literal, /):
        return literal.lower() == "true"


class _IntegralArgument(Argument[int]):
    def convert(self, literal, /):
        if not _INTEGRAL.fullmatch(literal):
            raise self._malformed(literal)
        try:
            value = int(literal)
        except ValueError:
            # beyond the interpreter's digit limit for str -> int
            raise self._malformed(literal) from None
        if not self.kind.accepts(value):
            raise self._malformed(literal)
        return value


class IntegerArgument(_IntegralArgument):
    __kind__ = ValueKind.INTEGER


class LongArgument(_IntegralArgument):
    __kind__ = ValueKind.LONG


class _DecimalArgument(Argument[float]):
    def convert(self, literal, /):
        if not _DECIMAL.fullmatch(literal):
            raise self._malformed(literal)
        return float(literal)


class FloatArgument(_DecimalArgument):
    __kind__ = ValueKind.FLOAT


class DoubleArgument(_DecimalArgument):
    __kind__ = ValueKind.DOUBLE


_KINDS = {
    ValueKind.STRING: StringArgument,
    ValueKind.BOOLEAN: BooleanArgument,
    ValueKind.INTEGER: IntegerArgument,
    ValueKind.LONG: LongArgument,
    ValueKind.FLOAT: FloatArgument,
    ValueKind.DOUBLE: DoubleArgument,
}


def argument(kind, /, *args, **kwargs):
    """
    Build the concrete argument definition for a kind.

    Parameters
    - kind: ValueKind | str
      The tag (or its string value, e.g. "long").
    - *args, **kwargs: forwarded to the argument class (name, descr, short,
      default, callback).

    Raises
    - UnknownKindError: when kind names no ValueKind.
    """
    return _KINDS[ValueKind.resolve(kind)](*args, **kwargs)


__all__ = (
    "ValueKind",
    "Argument",
    "StringArgument",
    "BooleanArgument",
    "IntegerArgument",
    "LongArgument",
    "FloatArgument",
    "DoubleArgument",
    "argument",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del ArgumentType
