"""
Flint argument tokenizer and flag parser.

- parse_command(tokens): split argv into (command name, remaining tokens).
  The first token names a command only when it does not start with '-';
  otherwise the default command "" is selected and every token is a flag.
- parse_arg(token) / parse_args(tokens): turn '--name=value' tokens into Flag
  pairs. Parsing is purely syntactic: no schema, no deduplication, values stay
  raw strings.
"""
from collections import namedtuple

from .faults import FaultCode, MalformedFlagError, getdoc
from .utils import ordinal

Flag = namedtuple("Flag", ("name", "value"))
Flag.__doc__ = "a parsed '--name=value' token (value is the raw string)"


def parse_command(tokens, /):
    """
    return (command_name, remaining_tokens) for an argv without program name.

    examples
    - []                  → ("", [])
    - ["foo", "--x=1"]    → ("foo", ["--x=1"])
    - ["--x=1"]           → ("", ["--x=1"])
    """
    tokens = list(tokens)
    if tokens and not tokens[0].startswith("-"):
        return tokens[0], tokens[1:]
    return "", tokens


def parse_arg(token, /, *, index=1):
    """
    parse a single '--name=value' token.

    the token must start with '--' and, after the prefix, contain exactly one
    '='. the name may be empty ('--=x') and so may the value ('--name=');
    both are left for the binder to judge.

    raises
    - MalformedFlagError carrying the token and its 1-based position.
    """
    if not token.startswith("--"):
        raise MalformedFlagError(
            "bad form of flag %r at %s position" % (token, ordinal(index)),
            title="malformed flag",
            code=FaultCode.MALFORMED_FLAG,
            hint="flags are written as --name=value",
            token=token,
            index=index,
            docs=getdoc(FaultCode.MALFORMED_FLAG)
        )

    parts = token[2:].split("=")
    if len(parts) != 2:
        raise MalformedFlagError(
            "flag %r at %s position must contain exactly one '='" % (token, ordinal(index)),
            title="malformed flag",
            code=FaultCode.MALFORMED_FLAG,
            hint="write the value right after a single '=' (for example: --%s=<value>)" % parts[0],
            token=token,
            index=index,
            docs=getdoc(FaultCode.MALFORMED_FLAG)
        )

    return Flag(*parts)


def parse_args(tokens, /, *, start=1):
    """
    parse every token in order; the first malformed one aborts parsing.

    start is the 1-based position of the first token on the original command
    line (2 when a command name preceded the flags), used in messages.
    """
    return [parse_arg(token, index=index) for index, token in enumerate(tokens, start)]


__all__ = (
    "Flag",
    "parse_command",
    "parse_arg",
    "parse_args",
)
