"""
Ordered collection of the options declared on one program.

Lookup is by exact short/long flag string and returns the first option
registered under that flag, so registration order decides ties.
"""
from collections.abc import Iterable

from .options import Option


class Registry:
    """
    Ordered registry of Option descriptors.

    Attribute names may repeat (a "--x"/"--no-x" pair shares "x"); flags are
    not checked for uniqueness, the earliest registration simply wins lookups.
    """

    def __init__(self, options=(), /):
        if not isinstance(options, Iterable):
            raise TypeError("registry options must be iterable")
        self._options = []
        for option in options:
            self.append(option)

    def append(self, option, /):
        if not isinstance(option, Option):
            raise TypeError("registry entries must be options")
        self._options.append(option)
        return option

    def find(self, token, /):
        """
        Return the option whose short or long flag is exactly `token`, or None.
        """
        for option in self._options:
            if option.matches(token):
                return option
        return None

    def attributes(self):
        """
        Return the distinct attribute names in registration order.
        """
        return list(dict.fromkeys(option.attribute for option in self._options))

    def __contains__(self, token):
        return self.find(token) is not None

    def __iter__(self):
        return iter(self._options)

    def __len__(self):
        return len(self._options)

    def __repr__(self):
        return f"registry({", ".join(option.flags for option in self._options)})"


__all__ = ("Registry",)
