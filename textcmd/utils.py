import functools
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    sentinel for "argument not given", distinct from None and other falsy values.

    Unset is the only instance; it is falsy, survives copies and cannot be
    subclassed.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return type(self), ()

    def __init_subclass__(cls):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()


def nullify(object, default=None, /):
    """
    return default in place of Unset, anything else unchanged.
    """
    return default if object is Unset else object


def rename(x, /, name=None):
    """
    give a function a stable __name__/__qualname__.

    called with a string, return a decorator applying that name.
    """
    if isinstance(x, str):
        return functools.partial(rename, name=x)
    if not isinstance(name, str):
        raise TypeError("callable name must be a string")
    x.__name__ = x.__qualname__ = name
    return x


def view(name):
    """
    read-only property over the backing field '_' + name.

    containers are handed out frozen: sequences as tuples, mappings as
    mapping proxies and sets as frozensets.
    """

    @rename(name)
    def getter(self):
        value = getattr(self, "_" + name)
        match value:
            case str():
                return value
            case Sequence():
                return tuple(value)
            case Mapping():
                return MappingProxyType(value)
            case Set():
                return frozenset(value)
        return value

    return property(getter)


def normalize(name, /):
    """
    trim a declared name and replace interior spaces with underscores.

    "  dry run " → "dry_run"
    """
    if not isinstance(name, str):
        raise TypeError("normalize() argument must be a string")
    return name.strip().replace(" ", "_")


_ORDINALS = ("first", "second", "third", "fourth", "fifth", "sixth", "seventh", "eighth", "ninth", "tenth")


@functools.cache
def ordinal(number, /):
    """
    position label for messages: words up to ten, then 11th, 22nd, 103rd...
    """
    if 1 <= number <= len(_ORDINALS):
        return _ORDINALS[number - 1]
    if 10 < number % 100 < 20:
        return f"{number}th"
    return "%d%s" % (number, {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th"))


__all__ = (
    "UnsetType",
    "Unset",
    "nullify",
    "rename",
    "view",
    "normalize",
    "ordinal",
)
