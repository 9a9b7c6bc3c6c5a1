"""
Value resolution: defaulting, coercion and negation policy.

Two moments matter:
- registration time: preseed() writes defaults into the value store so unset
  options already have a defined value before anything is parsed;
- parse time: resolve() computes the stored value for one assignment, given
  what is stored right now.

Value store convention: a missing key means "undefined" (never assigned, no
default). Stored None is a real value.

Bare flags and coercions: a value-less flag occurrence still runs the
coercion, with None as the raw value. This is what makes counting options
work ("-vvv" with lambda _, total: total + 1 and a default of 0). An optional
value option given without its value does not run the coercion.
"""
import re

from .utils import Unset, coalesce, rename


def preseed(option, default, store, /, attributes=()):
    """
    Pre-assign `default` for `option` into `store` when the option calls for it.

    applies to negated options, options with an optional or required value,
    and options with a boolean default. A negated option defaults to True,
    unless its attribute is already among `attributes` (the ones registered
    before it): then it inherits whatever is stored, possibly nothing.

    returns the default that was seeded (Unset when nothing was written), which
    the caller records on the option for help display.
    """
    if not (option.negate or option.optional or option.required or isinstance(default, bool)):
        return Unset

    if option.negate:
        default = store.get(option.attribute, Unset) if option.attribute in attributes else True

    if default is Unset:
        return Unset

    store[option.attribute] = default
    return default


def resolve(option, value, current, /, fallback=Unset, coerce=Unset):
    """
    Compute the value to store for one occurrence of `option`.

    parameters
    - option: Option that matched.
    - value: raw value (str), None for an absent optional value, Unset for a bare flag.
    - current: value currently stored for option.attribute, Unset when undefined.
    - fallback: default given at registration (used when nothing is stored yet).
      Coercions see None where neither a stored value nor a default exists.
    - coerce: callable (raw, previous) -> value, or Unset.

    returns
    - the value to store, or Unset to leave the store untouched.

    exceptions raised by `coerce` propagate to the caller.
    """
    if value is not None and coerce is not Unset:
        value = coerce(None if value is Unset else value, coalesce(fallback if current is Unset else current))

    if value is Unset:
        value = None

    if current is Unset or isinstance(current, bool):
        if value is None:
            return False if option.negate else (fallback or True)
        return value

    if option.negate:
        return False

    if value is not None:
        return value

    return Unset


def regex_coercion(pattern, /):
    """
    Build a coercion from a compiled regular expression.

    The first match of the raw value is stored; when nothing matches, the
    previous value (or default) is kept.
    """
    if not isinstance(pattern, re.Pattern):
        raise TypeError("regex_coercion() argument must be a compiled pattern")

    @rename("regex_coercion")
    def coerce(value, previous):
        if value is None:
            return previous
        match = pattern.search(value)
        return match[0] if match else previous

    return coerce


__all__ = (
    "preseed",
    "resolve",
    "regex_coercion",
)
