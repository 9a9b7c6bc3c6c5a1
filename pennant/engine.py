"""
Parse engine: walk a normalized token stream and match it against a registry.

Scan is a single-use iterable. Iterating it yields one Assignment per matched
option occurrence, in command-line order, and records positionals and unknown
tokens on the side. Callers drive the iteration so they can stop early (the
version flag does) and resolve each assignment as it happens.

state machine per token
- literal mode (after "--"): positional.
- registered, REQUIRED: the next token is the value, unconditionally; when
  nothing is left a MissingArgumentError is raised.
- registered, OPTIONAL: the next token is the value unless it is missing or
  flag-like (a lone "-" is a value); otherwise the value is None.
- registered, NONE: value is Unset (a bare flag occurrence).
- unregistered flag-like token: appended to `unknown`, together with the next
  token when that one is not flag-like, so "--mystery foo" and
  "--mystery=foo" leave the same trace.
- anything else: positional.
"""
from typing import NamedTuple, Any

from .faults import MissingArgumentError
from .options import Option, Arity, is_flaglike
from .utils import Unset


class Assignment(NamedTuple):
    """One matched option occurrence: the option, its raw value and the token seen."""
    option: Option
    value: Any
    token: str


class Scan:
    """
    Iterate assignments out of `tokens`; positionals and unknown tokens are
    available on the instance once iteration finished.
    """

    def __init__(self, tokens, registry, /):
        self._tokens = list(tokens)
        self._registry = registry
        self.positionals = []
        self.unknown = []
        self.done = False

    def __iter__(self):
        if self.done:
            raise RuntimeError("scan can only be iterated once")
        tokens = self._tokens
        literal = False
        index = 0

        while index < len(tokens):
            token = tokens[index]
            index += 1

            if literal:
                self.positionals.append(token)
                continue

            if token == "--":
                literal = True
                continue

            option = self._registry.find(token)

            if option is not None:
                match option.arity:
                    case Arity.REQUIRED:
                        if index >= len(tokens):
                            raise MissingArgumentError(option=option, token=token)
                        value = tokens[index]
                        index += 1
                    case Arity.OPTIONAL:
                        value = tokens[index] if index < len(tokens) else None
                        if value is None or is_flaglike(value):
                            value = None
                        else:
                            index += 1
                    case _:
                        value = Unset
                yield Assignment(option, value, token)
                continue

            if is_flaglike(token):
                self.unknown.append(token)
                # a trailing value is kept with the unknown flag; it is never assigned
                if index < len(tokens) and (not tokens[index].startswith("-") or tokens[index] == "-"):
                    self.unknown.append(tokens[index])
                    index += 1
                continue

            self.positionals.append(token)

        self.done = True

    def __repr__(self):
        return f"scan(positionals={self.positionals!r}, unknown={self.unknown!r})"


__all__ = (
    "Assignment",
    "Scan",
)
