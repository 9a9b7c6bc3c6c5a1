r"""
Pennant option descriptors.

Overview
- Option: one declared command-line option, built from a commander-style flags
  string such as:
    "-p, --pepper"          presence-only flag
    "-C, --no-cheese"       negated flag (stores False under 'cheese')
    "-c, --chdir <path>"    required value
    "-c, --cheese [type]"   optional value
    "-p|--pepper", "-p --pepper"  alternative separators
- Arity: whether the option consumes no value, an optional one, or a required one.

Introspection & representation
- OptionType metaclass provides stable __repr__/__rich_repr__ and exposes the
  parsed fields via read-only properties declared in __introspectable__.

Parsing rules (applied once, at construction)
- arity: "<" anywhere ⇒ REQUIRED, else "[" ⇒ OPTIONAL, else NONE.
- negation: "--no-" only at the start of the string or right after a space,
  comma or pipe; "--enable-notifications" is not a negation.
- the string is split on r"[ ,|]+"; with more than one piece, the first piece
  is the short flag unless the second piece is an arity marker; the next piece
  is the long flag.
- attribute: camelCase of the long flag without its dashes (and without "no-"
  for negations), so "--no-cheese" and "--cheese" share the key "cheese".

Quick example:
    >>> option = Option("-c, --chdir <path>", "change the working directory")
    >>> option.short, option.long, option.arity, option.attribute
    ('-c', '--chdir', <Arity.REQUIRED: 2>, 'chdir')
"""
import functools
import operator
import re
from enum import IntEnum

from rich.text import Text

from .utils import *

NEGATION = re.compile(r"(^|[\s,|])--no-")
SEPARATORS = re.compile(r"[ ,|]+")


class Arity(IntEnum):
    """How many values an option consumes from the command line."""
    NONE = 0
    OPTIONAL = 1
    REQUIRED = 2


def is_flaglike(token, /):
    """
    Return True when `token` looks like an option: a leading dash and more than
    one character. A lone "-" is a plain value (conventionally stdin).
    """
    return len(token) > 1 and token[0] == "-"


class OptionType(type):
    """
    Metaclass that turns option specs into introspectable descriptors.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_flags(cls, metadata, /):
    """
    Internal: parse and validate the flags string into option metadata.

    Mutates `metadata` in place, filling short/long/arity/negate/name/attribute.

    Raises
    - TypeError: flags is not a string, or descr is neither a string nor a Text.
    - ValueError: flags is empty, or no long flag (a token starting with "-") is present.
    """
    if not isinstance(flags := metadata["flags"], str):
        raise TypeError(f"{cls.__typename__} 'flags' must be a string")
    elif not flags.strip():
        raise ValueError(f"{cls.__typename__} 'flags' cannot be empty")

    if "<" in flags:
        metadata["arity"] = Arity.REQUIRED
    elif "[" in flags:
        metadata["arity"] = Arity.OPTIONAL
    else:
        metadata["arity"] = Arity.NONE

    metadata["negate"] = NEGATION.search(flags) is not None

    pieces = [piece for piece in SEPARATORS.split(flags) if piece]
    short = None
    if len(pieces) > 1 and not re.match(r"[\[<]", pieces[1]):
        short = pieces.pop(0)
    long = pieces.pop(0) if pieces else ""

    if not is_flaglike(long):
        raise ValueError(f"{cls.__typename__} flags {flags!r} must declare a long flag (e.g. '--name')")

    metadata["short"] = short
    metadata["long"] = long
    metadata["name"] = long.lstrip("-")
    metadata["attribute"] = camelcase(re.sub(r"^no-", "", metadata["name"]) if metadata["negate"] else metadata["name"])

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    metadata["descr"] = coalesce(descr, "")


class Option(metaclass=OptionType):
    """
    One declared command-line option.

    Option is a lightweight, read-only descriptor: everything is derived from
    the flags string at construction time. The default value is the only field
    filled in later, by the owning Program, when it pre-seeds the value store.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    """

    __introspectable__ = (
        "flags",
        "short",
        "long",
        "arity",
        "negate",
        "name",
        "attribute",
        "descr",
        "default",
    )

    def __init__(self, flags, descr=Unset, /):
        metadata = {
            "flags": flags,
            "descr": descr,
        }
        _sanitize_flags(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._default = Unset  # Pre-seeded later by Program.option()

    @property
    def required(self):
        return self._arity is Arity.REQUIRED

    @property
    def optional(self):
        return self._arity is Arity.OPTIONAL

    def matches(self, token, /):
        """
        Check if `token` matches the short or long flag exactly.
        """
        return token is not None and (self._short == token or self._long == token)


__all__ = (
    "Arity",
    "Option",
    "is_flaglike",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del OptionType
