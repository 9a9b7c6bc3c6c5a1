"""
Pennant utilities shared by the option and program layers.

Overview
- Unset: "no argument given", kept apart from None because None is a real
  option value (an absent optional value, a user default).
- coalesce(): swap Unset for a fallback, leaving None/0/""/[] alone.
- rename(): give generated closures readable names in tracebacks.
- mirror(): read-only property over a "_name" backing field.
- camelcase(), pad(): option attribute keys and help columns.

Quick examples
    >>> coalesce(Unset, "dist")
    'dist'
    >>> coalesce(None, "dist") is None
    True
    >>> camelcase("version-info")
    'versionInfo'
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset singleton.

    Unset is falsy, prints as "Unset", and takes part in PEP 604 unions so
    that isinstance(value, str | Unset) reads naturally.
    """

    def __or__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """Return `object`, or `default` when `object` is Unset."""
    return default if object is Unset else object


def rename(name, /):
    """
    Decorator: set __name__ and __qualname__ of the decorated callable to `name`.

        @rename("assign_dir")
        def assign(value): ...
    """
    if not isinstance(name, str):
        raise TypeError("rename() argument must be a string")

    def decorator(callable):
        if not builtins.callable(callable):
            raise TypeError("@rename() must decorate a callable")
        callable.__name__ = callable.__qualname__ = name
        return callable

    return decorator


def _detached(object):
    # Containers are copied (recursively) before leaving an instance.
    if isinstance(object, Sequence) and not isinstance(object, str):
        return [_detached(item) for item in object]
    if isinstance(object, Mapping):
        return {key: _detached(value) for key, value in object.items()}
    if isinstance(object, Set):
        return {_detached(item) for item in object}
    return object


def mirror(name, /):
    """
    Read-only property returning self._<name> (containers come back as copies).
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _detached(getattr(self, "_" + name))

    return property(getter)


def camelcase(name, /):
    """
    Camel-case a dashed option name: "dry-run" -> "dryRun", "-v" -> "v".

    Empty segments from doubled or leading dashes are skipped.
    """
    if not isinstance(name, str):
        raise TypeError("camelcase() argument must be a string")
    head, *tail = [word for word in name.split("-") if word] or [""]
    return head + "".join(word[0].upper() + word[1:] for word in tail)


def pad(text, width, /):
    """Right-pad `text` with spaces to `width`; longer text is left as is."""
    return text + " " * max(0, width - len(text))


Unset = UnsetType()


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "camelcase",
    "pad",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
