"""
gnuish tokenizer: raw argument vector → Invocation.

Grammar (GNU-ish)
- token 0 is the command name (trimmed); an empty vector yields an empty Invocation,
  which callers read as “no command, show the summary list”.
- '--key'   long option. 'verbose', 'debug' and 'help' are reserved presence flags and
            never take a value. any other key slurps the next token as its value.
- '-k'      short option, same slurping rule as long options.
- '-abc'    bundle of presence-only short flags; equivalent to '-a -b -c'.
- anything else is a positional argument, kept in encounter order.

Slurping
- the next token is taken as the value unless it looks like another option, that is,
  it starts with '-', is longer than one character and its second character is not a
  digit. '-5' and a lone '-' are therefore values.
- when nothing can be slurped the option value is the literal "true".

Repeated keys overwrite earlier ones (last occurrence wins). Unknown keys are kept
verbatim; only the dispatcher decides whether some descriptor claims them.
"""
from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import NamedTuple

from .logs import get_logger

logger = get_logger(__name__)

RESERVED = frozenset({"verbose", "debug", "help"})


class Invocation(NamedTuple):
    """
    immutable result of tokenizing one argument vector.

    fields
    - command: str — command name, "" when the vector was empty.
    - shorts: Mapping[str, str] — single-character key → raw value.
    - longs: Mapping[str, str] — long key → raw value.
    - arguments: tuple[str, ...] — leftover positional tokens, in order.
    """
    command: str = ""
    shorts: Mapping[str, str] = MappingProxyType({})
    longs: Mapping[str, str] = MappingProxyType({})
    arguments: tuple[str, ...] = ()

    @property
    def help(self):
        return "help" in self.longs

    @property
    def debug(self):
        return "debug" in self.longs

    @property
    def verbose(self):
        return "verbose" in self.longs


def _looks_like_option(token):
    return token.startswith("-") and len(token) > 1 and not token[1].isdigit()


def _slurp(tokens, index):
    """
    return (value, next index) for an option whose key sits right before `index`.
    """
    if index < len(tokens) and not _looks_like_option(tokens[index]):
        return tokens[index], index + 1
    return "true", index


def parse(args, /):
    """
    tokenize a raw argument vector (program name already stripped).

    parameters
    - args: Sequence[str] | Iterable[str]

    returns
    - Invocation

    examples
    - parse(["cmd", "-abc"]).shorts        → {"a": "true", "b": "true", "c": "true"}
    - parse(["cmd", "-n", "-5"]).shorts    → {"n": "-5"}
    - parse(["cmd", "--flag"]).longs       → {"flag": "true"}
    """
    if isinstance(args, str) or not isinstance(args, Iterable):
        raise TypeError("parse() argument must be a sequence of strings")
    tokens = list(args) if not isinstance(args, Sequence) else args
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError("parse() argument must be a sequence of strings")

    if not tokens:
        return Invocation()

    command = tokens[0].strip()
    shorts = {}
    longs = {}
    arguments = []

    index = 1
    while index < len(tokens):
        token = tokens[index]
        index += 1
        if token.startswith("--"):
            key = token[2:]
            if key in RESERVED:
                longs[key] = "true"
            else:
                longs[key], index = _slurp(tokens, index)
        elif token.startswith("-") and len(token) == 2:
            shorts[token[1]], index = _slurp(tokens, index)
        elif token.startswith("-") and len(token) > 2:
            # bundles never take a value
            shorts.update(dict.fromkeys(token[1:], "true"))
        else:
            arguments.append(token)

    logger.debug("tokenized %r: shorts=%r longs=%r arguments=%r", command, shorts, longs, arguments)

    return Invocation(
        command=command,
        shorts=MappingProxyType(shorts),
        longs=MappingProxyType(longs),
        arguments=tuple(arguments),
    )


__all__ = (
    "RESERVED",
    "Invocation",
    "parse",
)
