"""
Pennant faults (user-input errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing parse
  error. Codes are grouped by domain so logs and searches stay predictable.
- ParseException: base type that carries message + options and knows how to
  render itself (plain, colorful or boxed in a panel) and how to surface
  itself (print-and-exit in shell mode, raise otherwise).
- trigger(): central entry point to surface any fault.
- getdoc(): optional description lookup for a code from the host application.

Wire format
- The plain rendering is fixed, byte for byte:
    error: unknown option '--mystery'
    error: option '-k, --known <v>' argument missing
  and the process exits with status 1.

Programming errors (malformed option definitions, bad callbacks) are not
faults: they raise TypeError/ValueError at registration time.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping
    - options (2110x)
      • UNKNOWN_OPTION, MISSING_ARGUMENT
    - values (2112x)
      • COERCION_FAILURE

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- option errors (21xxx) ---
    UNKNOWN_OPTION              = 21101
    MISSING_ARGUMENT            = 21102

    # --- value errors (21xxx) ---
    COERCION_FAILURE            = 21121

    def normalize(self):
        """
        label of this code as shown to users.

        a __codes__ mapping in __main__ (FaultCode -> label) relabels codes;
        unmapped codes fall back to their number.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ParseException(Exception):
    """
    base class of every parse fault.

    options (all optional, merged in by trigger()/copy.replace())
    - code: FaultCode, title: str, hint: str, docs: str
    - tool: the Program that raised it (used for fancy headers)
    - shell: print and exit instead of raising
    - fancy: render inside a rich Panel
    - colorful: apply the palette (overridable with __styles__ in __main__)
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message) if self.message is not Unset else ""

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            "prog-name": "bold #FF4D94",
            "code": "bold #00E6FF",
            "error-label": "bold #EF4444",  # RED label
            "error-message": "#D1D5DB",
            "hint-arrow": "#22C55E dim",
            "hint": "italic #22C55E",  # GREEN hints
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", False)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment if colorful else Text(fragment.plain)
            return Text(str(fragment), style)

        line = Text.assemble(text("error", styler("error-label")), ": ", text(self.message, styler("error-message")))

        if not self.options.get("fancy", False):
            return line

        tool = self.options.get("tool")
        prog = text(getattr(main, "__prog__", getattr(tool, "_name", "") or "pennant"), styler("prog-name"))
        header = Text.assemble("[ ", prog, " — ", text(self.options["code"].normalize(), styler("code")), " ]") \
            if "code" in self.options else None
        body = [line]
        if hint := self.options.get("hint"):
            body.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))
        return Panel(Text("\n").join(body), title=header, title_align="left")

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from self.__cause__
        console = Console(stderr=True, highlight=False, soft_wrap=True)
        if self.options.get("fancy", False) or self.options.get("colorful", False):
            console.print(self, crop=False)
        else:
            # Plain mode writes the message unchanged, control characters included.
            console.file.write(f"error: {self}\n")
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        replaced = type(self)(self.message, **{**self.options, **overrides})
        replaced.__cause__ = self.__cause__
        return replaced


class UnknownOptionError(ParseException):
    """An unrecognized flag-like token was seen while unknown options are not allowed."""

    def __init__(self, message=Unset, /, **options):
        if message is Unset and "token" in options:
            message = "unknown option '%s'" % options["token"]
        super().__init__(message, **{"code": FaultCode.UNKNOWN_OPTION, "title": "unknown option"} | options)


class MissingArgumentError(ParseException):
    """An option declared with a required value (`<value>`) was last on the command line."""

    def __init__(self, message=Unset, /, **options):
        if message is Unset and "option" in options:
            message = "option '%s' argument missing" % options["option"].flags
            if options.get("got"):
                message += ", got '%s'" % options["got"]
        super().__init__(message, **{"code": FaultCode.MISSING_ARGUMENT, "title": "missing argument"} | options)


class CoercionError(ParseException):
    """A registered coercion function raised while converting an option value."""

    def __init__(self, message=Unset, /, **options):
        if message is Unset and "option" in options:
            message = "option '%s' argument %r is invalid" % (options["option"].flags, options.get("value"))
        super().__init__(message, **{"code": FaultCode.COERCION_FAILURE, "title": "invalid argument"} | options)


def trigger(fault, /, **options):
    """
    merge runtime `options` into `fault`, then surface it.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ParseException).
    - the merge goes through copy.replace(), the given fault is left untouched.
    - in shell mode the fault is printed to stderr and the process exits with
      status 1; otherwise the fault is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must be a parse fault")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    documentation string for `code`, or None.

    looked up in a __docs__ mapping (FaultCode -> str) in __main__.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ParseException",
    "UnknownOptionError",
    "MissingArgumentError",
    "CoercionError",
    "trigger",
    "getdoc",
)
