"""
Flint argument binder.

Binding matches parsed flags to a subcommand's declared parameters by name, in
declared order, and produces one entry per parameter:

- Bound(value): the parameter was supplied; value is the raw string.
- Missing: the parameter was not supplied.

Every supplied flag must be consumed by some parameter; leftovers are an
UnexpectedArgumentError naming the first of them. A parameter consumes at most
one flag (the earliest unconsumed one with its name), so a repeated flag is
reported as unexpected.

Absence is the Missing object, never a reserved string, so every supplied
value (whatever its text) reaches the dispatcher as Bound(value).
"""
import difflib
import functools
from collections import namedtuple
from typing import final

from .faults import (
    CommandNotFoundError,
    EmptyRegistryError,
    FaultCode,
    UnexpectedArgumentError,
    getdoc,
)

Bound = namedtuple("Bound", ("value",))
Bound.__doc__ = "a supplied parameter value (raw string)"


@final
class MissingType:
    """
    singleton marker for a parameter that was not supplied.

    falsy, printable as "Missing", non-subclassable.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Missing"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'MissingType' is not an acceptable base type")


Missing = MissingType()


def lookup(registry, name, /):
    """
    return the subcommand registered under name.

    raises
    - EmptyRegistryError when nothing was registered at all.
    - CommandNotFoundError when name is unknown (with near-match suggestions).
    """
    if not registry:
        raise EmptyRegistryError(
            "no commands are registered",
            title="empty registry",
            code=FaultCode.EMPTY_REGISTRY,
            hint="register at least one function before running the program",
            docs=getdoc(FaultCode.EMPTY_REGISTRY)
        )

    try:
        return registry[name]
    except KeyError:
        pass

    suggestions = difflib.get_close_matches(name, known := [command for command in registry if command], 5)
    if suggestions:
        hint = "did you mean %r?" % suggestions[0]
    elif known:
        hint = "available commands: %s" % ", ".join(known)
    else:
        hint = "this program only has a default command; pass flags without a command name"
    raise CommandNotFoundError(
        "unknown command %r" % name if name else "no default command is registered",
        title="unknown command",
        code=FaultCode.COMMAND_NOT_FOUND,
        hint=hint,
        name=name,
        suggestions=suggestions,
        docs=getdoc(FaultCode.COMMAND_NOT_FOUND)
    )


def bind(params, flags, /):
    """
    bind flags to params in declared order.

    parameters
    - params: ordered parameters (anything with a .name).
    - flags: parsed (name, value) pairs, in command-line order.

    returns
    - tuple of Bound(value) | Missing, one per parameter.

    raises
    - UnexpectedArgumentError for the first flag no parameter consumed.
    """
    remaining = [tuple(flag) for flag in flags]
    bound = []

    for param in params:
        for index, (name, value) in enumerate(remaining):
            if name == param.name:
                bound.append(Bound(value))
                del remaining[index]
                break
        else:
            bound.append(Missing)

    if remaining:
        name, value = remaining[0]
        declared = [param.name for param in params]
        if name in declared:
            hint = "--%s can be given only once" % name
        elif suggestions := difflib.get_close_matches(name, declared, 1):
            hint = "did you mean --%s?" % suggestions[0]
        elif declared:
            hint = "accepted flags: %s" % ", ".join("--" + declaration for declaration in declared)
        else:
            hint = "this command takes no flags"
        raise UnexpectedArgumentError(
            "unexpected flag %r" % ("--" + name),
            title="unexpected flag",
            code=FaultCode.UNEXPECTED_ARGUMENT,
            hint=hint,
            name=name,
            value=value,
            docs=getdoc(FaultCode.UNEXPECTED_ARGUMENT)
        )

    return tuple(bound)


__all__ = (
    "Bound",
    "MissingType",
    "Missing",
    "lookup",
    "bind",
)
