"""
Argv normalization: rewrite raw tokens into the canonical stream the engine walks.

Rules, applied left to right
- "--" passes through together with everything after it; normalization stops.
- a token right after a registered option that requires a value passes
  through untouched, even when it looks like a flag ("-k -5").
- "-abc": when "-a" is registered and takes a value it becomes "-a", "bc";
  otherwise every letter becomes its own flag: "-a", "-b", "-c".
- "--name=value" splits at the first "=" into "--name", "value".
- anything else passes through unchanged.

Only the previous *raw* token is consulted for the required-value rule, never
the rewritten output.
"""


def normalize(tokens, registry, /):
    """
    Return the canonical token list for `tokens` using `registry` for lookups.

    parameters
    - tokens: Iterable[str], raw arguments (program name and script excluded).
    - registry: Registry (anything with find(token) -> Option | None).

    returns
    - list[str]
    """
    tokens = list(tokens)
    normalized = []

    for index, token in enumerate(tokens):
        last = registry.find(tokens[index - 1]) if index > 0 else None

        if token == "--":
            normalized.extend(tokens[index:])
            break
        elif last is not None and last.required:
            normalized.append(token)
        elif len(token) > 2 and token[0] == "-" and token[1] != "-":
            option = registry.find(short := token[:2])
            if option is not None and (option.required or option.optional):
                normalized.extend((short, token[2:]))
            else:
                normalized.extend("-" + letter for letter in token[1:])
        elif token.startswith("--") and "=" in token:
            name, _, value = token.partition("=")
            normalized.extend((name, value))
        else:
            normalized.append(token)

    return normalized


__all__ = ("normalize",)
