"""
Flint registry codec (manifest format).

Format
- one line per command, in sorted command-name order, joined by '\\n' with no
  trailing newline:

      <name>-<target>-<param>:<type>-<param>:<type>

- a command without parameters still ends with the field separator
  ("name-target-"); the default command has an empty name ("-hello-...").
- types are written in canonical descriptor text ("i32", "Optional[str]").

Example
    >>> print(dumps(registry))
    -hello-name:str-age:i32
    bye-greet::bye-
"""
from .descriptors import parse
from .registry import Parameter, Registry, Subcommand


def dumps(registry, /):
    """
    encode a registry into manifest text.
    """
    lines = []
    for name, subcommand in registry.items():
        params = "-".join(f"{param.name}:{param.type}" for param in subcommand.params)
        lines.append(f"{name}-{subcommand.target}-{params}")
    return "\n".join(lines)


def _loadline(line, /):
    parts = line.split("-", 2)
    if len(parts) != 3:
        raise ValueError(f"manifest line {line!r} must have a name, a target and a parameter block")
    name, target, blob = parts

    params = []
    if blob:
        for token in blob.split("-"):
            param, separator, type = token.partition(":")
            if not separator:
                raise ValueError(f"manifest line {line!r} parameter {token!r} is missing its type")
            params.append(Parameter(param, parse(type)))

    return Subcommand(name, target, params)


def loads(text, /):
    """
    decode manifest text into a fresh, frozen registry.

    the empty string decodes to an empty registry; any other malformed line
    raises ValueError naming the line.
    """
    if not isinstance(text, str):
        raise TypeError("loads() argument must be a string")

    registry = Registry()
    if text:
        for line in text.split("\n"):
            registry.register(_loadline(line))
    return registry.freeze()


__all__ = (
    "dumps",
    "loads",
)
