"""
Parse outcomes and program lifecycle phases.

Program.evaluate() never prints and never exits: it returns one of the tagged
outcomes below and leaves the process-level reaction (print, exit status) to
Program.parse().

    Parsed(positionals, unknown)   -> normal completion, exit status 0
    HelpRequested(flag)            -> help text on stdout, exit status 0
    VersionRequested(version)      -> version + newline on stdout, exit status 0
    Failed(fault)                  -> fault on stderr, exit status 1
"""
from enum import Enum, auto
from typing import NamedTuple, Any

from .faults import ParseException


class Phase(Enum):
    """Lifecycle of one program: IDLE, PARSING, then one terminal phase per evaluation."""
    IDLE = auto()
    PARSING = auto()
    HELP_REQUESTED = auto()
    VERSION_REQUESTED = auto()
    ERROR = auto()
    PARSED = auto()


class Parsed(NamedTuple):
    positionals: list[str]
    unknown: list[str]

    @property
    def args(self):
        return self.positionals


class HelpRequested(NamedTuple):
    flag: str


class VersionRequested(NamedTuple):
    version: Any


class Failed(NamedTuple):
    fault: ParseException


type Outcome = Parsed | HelpRequested | VersionRequested | Failed


__all__ = (
    "Phase",
    "Parsed",
    "HelpRequested",
    "VersionRequested",
    "Failed",
    "Outcome",
)
