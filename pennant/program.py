"""
Pennant program layer: declare options, parse argv, read resolved values.

What this module provides
- Program: the parser object a tool owns. It keeps
  • an ordered Registry of Option descriptors,
  • a value store (attribute -> value; a missing key means "undefined"),
  • a dispatch table mapping each Option to the closure that assigns it,
  • an internal listener table for "option:<name>", help and "help" events,
  • help/version metadata and presentation flags (shell, fancy, colorful).

Control flow
    option(...)   -> Option built, default pre-seeded, assignment closure stored
    evaluate(argv)
      -> normalize()            canonical token stream
      -> Scan                   one Assignment per matched occurrence
      -> dispatch[option]       resolve() + store, then "option:<name>" listeners
      -> help / unknown checks  on the tokens nobody claimed
      -> Parsed | HelpRequested | VersionRequested | Failed
    parse(argv)  -> evaluate() + the process-level reaction:
      Parsed            returned
      HelpRequested     help on stdout, exit 0
      VersionRequested  "<version>\\n" on stdout, exit 0
      Failed            trigger(): "error: ..." on stderr and exit 1 in shell
                        mode, raised otherwise

Quick start
    from pennant import Program

    program = Program("deploy")
    program.version("1.0.0")
    program.option("-d, --dir <dir>", "base directory", "dist")
    program.option("-n, --dry-run", "skip publishing")
    program.option("--no-dotfiles", "exclude dotfiles")
    program.parse(["--dir", "out", "--no-dotfiles"])
    program.values()  # {'version': '1.0.0', 'dir': 'out', 'dryRun': None, 'dotfiles': False}

Styling
- Help and version rendering honour __styles__ in __main__ (rich style strings)
  when colorful=True; fancy=True frames them in a rich Panel. With both off the
  output is plain text, byte for byte.
"""
import json
import os.path
import re
import shlex
import sys
from collections import defaultdict
from collections.abc import Iterable

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .engine import Scan
from .faults import *
from .options import Option, SEPARATORS
from .outcomes import *
from .registry import Registry
from .resolver import preseed, resolve, regex_coercion
from .tokens import normalize
from .utils import *


def _console():
    # Created per write so a redirected sys.stdout is honoured.
    return Console(highlight=False, soft_wrap=True)


def _plain(fragment):
    return fragment.plain if isinstance(fragment, Text) else str(fragment)


def _split_lines(fragments):
    """
    Internal: break a line of (fragment, style) pairs at embedded newlines.
    """
    lines = [[]]
    for fragment, style in fragments:
        if isinstance(fragment, Text):
            parts = list(fragment.split("\n", allow_blank=True))
        else:
            parts = str(fragment).split("\n")
        lines[-1].append((parts[0], style))
        lines.extend([(part, style)] for part in parts[1:])
    return lines


def _sanitize_prompt(prompt):
    """
    Internal: turn a prompt into a list of string tokens.

    - str: shell-like string, split via shlex.split.
    - Iterable[str]: taken as-is (tokens are not trimmed, "" is a valid value).
    """
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if not isinstance(prompt, Iterable):
        raise TypeError("parse() argument must be a string or an iterable of strings")
    tokens = list(prompt)
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError("parse() argument must be a string or an iterable of strings")
    return tokens


class Program:
    """
    A command-line program: option declarations plus the state of the last parse.

    Parameters
    - name: program name shown in help (default: basename of sys.argv[0]).
    - descr: description shown under the usage line.
    - usage: usage string after the name (default: "[options]").
    - shell: on faults, print to stderr and exit 1 (True) or raise (False).
    - fancy: frame help, version and faults in a rich Panel.
    - colorful: apply the palette (see __styles__).

    Values persist across repeated parse() calls unless overwritten;
    positionals are reset by every call.
    """

    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")
    phase = mirror("phase")
    positionals = mirror("positionals")
    args = mirror("positionals")

    def __init__(self, name=Unset, /, descr=Unset, usage=Unset, *, shell=True, fancy=False, colorful=False):
        for label, object in (("name", name), ("descr", descr), ("usage", usage)):
            if not isinstance(object, str | Text | Unset):
                raise TypeError(f"program '{label}' must be a string")
        for label, object in (("shell", shell), ("fancy", fancy), ("colorful", colorful)):
            if not isinstance(object, bool):
                raise TypeError(f"program '{label}' must be a boolean")

        if name is Unset:
            name = os.path.basename(sys.argv[0]).removesuffix(".py") if sys.argv and sys.argv[0] else "pennant"

        self._name = name
        self._descr = descr
        self._usage = usage
        self._shell = shell
        self._fancy = fancy
        self._colorful = colorful

        self._registry = Registry()
        self._values = {}
        self._dispatch = {}
        self._listeners = defaultdict(list)
        self._allow_unknown = False
        self._positionals = []
        self._phase = Phase.IDLE

        self._version = Unset
        self._version_option = None
        self._versions = {}

        self._help_flags = "-h, --help"
        self._help_descr = "output usage information"
        self._help_short = "-h"
        self._help_long = "--help"

    # --- declaration --------------------------------------------------------

    def option(self, flags, descr=Unset, coerce=Unset, default=Unset, /):
        """
        Declare an option.

        Parameters
        - flags: commander-style flags string ("-c, --cheese [type]").
        - descr: help description.
        - coerce: callable(raw, previous) -> value, a compiled regular
          expression (first match wins), or, when neither, the default.
        - default: initial value, pre-seeded for negated, valued and
          boolean-defaulted options.

        Malformed flags raise TypeError/ValueError right away.
        """
        option = Option(flags, descr)

        if isinstance(coerce, re.Pattern):
            coerce = regex_coercion(coerce)
        elif coerce is not Unset and not callable(coerce):
            coerce, default = Unset, coerce

        seeded = preseed(option, default, self._values, self._registry.attributes())
        if seeded is not Unset:
            option._default = seeded
        if option.negate:
            default = seeded

        self._registry.append(option)
        self._dispatch[option] = self._assigner(option, default, coerce)
        return self

    def _assigner(self, option, default, coerce):
        @rename(f"assign_{option.attribute}")
        def assign(value):
            current = self._values.get(option.attribute, Unset)
            if (value := resolve(option, value, current, default, coerce)) is not Unset:
                self._values[option.attribute] = value

        return assign

    def version(self, string=Unset, flags=Unset, descr=Unset, /):
        """
        Register the version string and its option, or return the version
        string when called without arguments.

        Defaults: flags "-V, --version", descr "output the version number".
        """
        if string is Unset and flags is Unset and descr is Unset:
            return self._version

        option = Option(flags or "-V, --version", descr or "output the version number")
        self._version = string
        self._version_option = option
        self._versions[option] = string
        self._registry.append(option)
        return self

    def help_option(self, flags=Unset, descr=Unset, /):
        """
        Override the help flags and/or description. Only the new flags trigger
        help afterwards; the stable "help" event fires regardless.
        """
        if not isinstance(flags, str | Unset):
            raise TypeError("help_option() 'flags' must be a string")
        self._help_flags = flags or self._help_flags
        self._help_descr = descr or self._help_descr

        # A single flag replaces the long one; the short one stays as it was.
        pieces = SEPARATORS.split(self._help_flags)
        if len(pieces) > 1:
            self._help_short = pieces.pop(0)
        self._help_long = pieces.pop(0)
        return self

    def allow_unknown_option(self, enabled=True, /):
        self._allow_unknown = bool(enabled)
        return self

    def name(self, text=Unset, /):
        if text is Unset:
            return self._name
        self._name = text
        return self

    def description(self, text=Unset, /):
        if text is Unset:
            return coalesce(self._descr, None)
        self._descr = text
        return self

    def usage(self, text=Unset, /):
        if text is Unset:
            return self._usage or "[options]"
        self._usage = text
        return self

    # --- listeners ----------------------------------------------------------

    def on(self, event, listener, /):
        """
        Subscribe `listener` to `event`.

        Events
        - "option:<name>": after each occurrence of the option whose long flag
          is "--<name>"; receives the raw value (None for bare flags).
        - the long help flag (e.g. "--help") and "help": when help is output.
        """
        if not isinstance(event, str):
            raise TypeError("on() event must be a string")
        if not callable(listener):
            raise TypeError("on() listener must be callable")
        self._listeners[event].append(listener)
        return self

    def off(self, event, listener, /):
        try:
            self._listeners[event].remove(listener)
        except ValueError:
            raise ValueError(f"no such listener for event {event!r}") from None
        return self

    def _emit(self, event, *args):
        for listener in list(self._listeners.get(event, ())):
            listener(*args)

    # --- parsing ------------------------------------------------------------

    def option_for(self, token, /):
        return self._registry.find(token)

    def normalize(self, tokens, /):
        return normalize(tokens, self._registry)

    def parse_options(self, tokens, /):
        """
        Walk normalized `tokens` without assigning anything and return the
        finished Scan (positionals and unknown tokens). A required value
        missing at the end raises MissingArgumentError.
        """
        scan = Scan(tokens, self._registry)
        for _ in scan:
            pass
        return scan

    def evaluate(self, argv, /):
        """
        Parse `argv` into the value store and return the outcome.

        Nothing is printed and the process is never terminated here; see parse().

        Order of precedence
        - a version flag stops the walk at once (VersionRequested);
        - a fault during the walk (missing value, failing coercion) -> Failed;
        - a help flag among the unclaimed tokens -> HelpRequested;
        - any other unclaimed flag, unless tolerated -> Failed(UnknownOptionError);
        - otherwise Parsed.
        """
        tokens = _sanitize_prompt(argv)
        self._phase = Phase.PARSING
        self._positionals = []

        scan = Scan(self.normalize(tokens), self._registry)
        try:
            for option, value, token in scan:
                raw = None if value is Unset else value
                if option in self._versions:
                    self._emit("option:" + option.name, raw)
                    self._phase = Phase.VERSION_REQUESTED
                    return VersionRequested(self._versions[option])
                try:
                    self._dispatch[option](value)
                except Exception as exception:
                    raise CoercionError(option=option, value=raw, token=token) from exception
                self._emit("option:" + option.name, raw)
        except ParseException as fault:
            self._phase = Phase.ERROR
            return Failed(fault)

        self._positionals = scan.positionals

        for token in scan.unknown:
            if token in (self._help_short, self._help_long):
                self._phase = Phase.HELP_REQUESTED
                return HelpRequested(token)

        if scan.unknown and not self._allow_unknown:
            self._phase = Phase.ERROR
            return Failed(UnknownOptionError(token=scan.unknown[0]))

        self._phase = Phase.PARSED
        return Parsed(list(scan.positionals), list(scan.unknown))

    def parse(self, argv=Unset, /):
        """
        Parse `argv` (default: sys.argv[1:]) and react like a command-line tool.

        Returns the Parsed outcome; help and version exit with status 0, faults
        exit with status 1 in shell mode and are raised otherwise.
        """
        outcome = self.evaluate(sys.argv[1:] if argv is Unset else argv)
        match outcome:
            case HelpRequested():
                self.help()
            case VersionRequested(version=version):
                self._versioner(version)
                sys.exit(0)
            case Failed(fault=fault):
                # The hint only shows in fancy mode.
                hint = f"run '{self._name} {self._help_long}' for the list of options" if self._help_long else ""
                trigger(fault, tool=self, hint=hint, shell=self._shell, fancy=self._fancy, colorful=self._colorful)
        return outcome

    # --- values -------------------------------------------------------------

    def values(self):
        """
        Return a snapshot attribute -> value for every declared option, in
        declaration order. Undefined values are None; the version option's
        attribute holds the version string.
        """
        version = self._version_option.attribute if self._version_option is not None else None
        return {
            option.attribute: self._version if option.attribute == version else self._values.get(option.attribute)
            for option in self._registry
        }

    def __contains__(self, attribute):
        return attribute in self._values

    def __getitem__(self, attribute):
        return self._values[attribute]

    # --- help & version -----------------------------------------------------

    def _layout(self):
        """
        Internal: the help text as lines of (fragment, palette key) pairs.

        help_information() joins the fragments as they are; _helper() styles them.
        """
        entries = [
            (option.flags, option.descr, option.default if not option.negate else Unset)
            for option in self._registry
        ]
        entries.append((self._help_flags, self._help_descr, Unset))
        width = max(len(flags) for flags, _, _ in entries)

        lines = [
            [("Usage:", "usage-label"), (" ", ""), (self._name, "program-name"), (" ", ""),
             (self.usage(), "usage-section")],
            [],
        ]
        if self._descr:
            lines += [[(self._descr, "description-section")], []]
        lines.append([("Options:", "options-label")])

        for flags, descr, default in entries:
            fragments = [(pad(flags, width), "option-flags"), ("  ", ""), (descr, "option-description")]
            if default is not Unset:
                fragments += [
                    (" (default: ", ""),
                    (json.dumps(default, separators=(",", ":"), ensure_ascii=False, default=str), "default-value"),
                    (")", ""),
                ]
            # Multi-line descriptions stay inside the indented block.
            lines.extend([("  ", "")] + line for line in _split_lines(fragments))

        lines.append([])
        return lines

    def _helper(self, colorful=False):
        """
        Build the help text as a rich Text.

        Palette keys
        - usage-label, program-name, usage-section, description-section
        - options-label, option-flags, option-description, default-value
        """
        styles = defaultdict(str, {
            "usage-label": "bold #00E6FF",  # CYAN
            "program-name": "bold #FF4D94",  # MAGENTA-PINK
            "usage-section": "bold #36C5F0",  # SKY-BLUE
            "description-section": "italic #A3A3A3",
            "options-label": "bold #FFFFFF",
            "option-flags": "bold #22C55E",  # GREEN
            "option-description": "#9CA3AF",
            "default-value": "#FFD600",  # AMBER
        } | getattr(__import__("__main__"), "__styles__", {}))

        def text(fragment, style=""):
            if isinstance(fragment, Text):
                return fragment if colorful else Text(fragment.plain)
            return Text(str(fragment), styles[style] if colorful else "")

        return Text("\n").join(
            Text.assemble(*(text(fragment, style) for fragment, style in line)) for line in self._layout()
        )

    def help_information(self):
        """Return the plain help text (ends with a newline)."""
        return "\n".join(
            "".join(_plain(fragment) for fragment, _ in line) for line in self._layout()
        )

    def output_help(self, callback=Unset, /):
        """
        Write help to stdout, then fire the long help flag event and "help".

        `callback` receives the plain help text and must return the text to
        write (a str); anything else raises TypeError.

        Without fancy or colorful the text is written unchanged (tabs and
        control characters included).
        """
        output = self.help_information()
        if callback is not Unset:
            output = callback(output)
            if not isinstance(output, str):
                raise TypeError("output_help() callback must return a string")

        if self._fancy:
            body = self._helper(self._colorful) if callback is Unset else Text(output)
            body.rstrip()
            _console().print(Panel(body, title=Text(str(self._name)), title_align="left"), crop=False)
        elif self._colorful and callback is Unset:
            _console().print(self._helper(True), end="", crop=False)
        else:
            _console().file.write(output)

        if self._help_long:
            self._emit(self._help_long)
        self._emit("help")

    def help(self, callback=Unset, /):
        """Output help and exit with status 0."""
        self.output_help(callback)
        sys.exit(0)

    def _versioner(self, version):
        styles = defaultdict(str, {
            "program-version": "bold #00E6FF",
        } | getattr(__import__("__main__"), "__styles__", {}))

        if not (self._fancy or self._colorful):
            _console().file.write(f"{version}\n")
            return

        renderable = Text(str(version), styles["program-version"] if self._colorful else "")
        if self._fancy:
            _console().print(Panel(renderable, title=Text(str(self._name)), title_align="left"), crop=False)
        else:
            _console().print(renderable + Text("\n"), end="", crop=False)

    def __repr__(self):
        return f"program(name={self._name!r}, options={len(self._registry)}, phase={self._phase.name.lower()})"

    def __rich_repr__(self):
        yield "name", self._name
        yield "options", list(self._registry)
        yield "phase", self._phase


__all__ = ("Program",)
