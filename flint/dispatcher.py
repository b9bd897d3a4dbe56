"""
Flint dispatcher: coercion and invocation.

coerce(param, entry) turns one binder entry into the value passed to the
callback:

    declared type      | Missing                       | Bound(value)
    -------------------+-------------------------------+------------------------------
    Optional[str]      | None                          | value
    Optional[T]        | None                          | T(value) or TypeCoercionError
    str                | MissingRequiredArgumentError  | value
    T                  | MissingRequiredArgumentError  | T(value) or TypeCoercionError

dispatch(subcommand, bound, namespace) coerces every position in declared
order, resolves the target and calls it exactly once with positional values.
"""
import importlib

from .binding import Bound, MissingType
from .descriptors import Kind, Optional, Scalar
from .faults import (
    FaultCode,
    MissingRequiredArgumentError,
    TypeCoercionError,
    UnresolvedTargetError,
    getdoc,
)
from .utils import Unset, coalesce


def _convert(param, kind, value, /):
    try:
        return kind.convert(value)
    except ValueError as exception:
        raise TypeCoercionError(
            "value %r of flag %r is not a valid %s: %s" % (value, "--" + param.name, kind.value, exception),
            title="invalid value",
            code=FaultCode.UNCOERCIBLE_VALUE,
            hint="pass a %s value (for example: --%s=<%s>)" % (kind.value, param.name, kind.value),
            name=param.name,
            value=value,
            kind=kind,
            docs=getdoc(FaultCode.UNCOERCIBLE_VALUE)
        ) from None


def coerce(param, entry, /):
    """
    coerce one bound entry according to param's declared type.
    """
    match param.type, entry:
        case Optional(), MissingType():
            return None
        case Optional(Scalar(Kind.STR)), Bound(value):
            return value
        case Optional(Scalar(kind)), Bound(value):
            return _convert(param, kind, value)
        case Scalar(kind), MissingType():
            raise MissingRequiredArgumentError(
                "missing required flag %r" % ("--" + param.name),
                title="missing flag",
                code=FaultCode.MISSING_REQUIRED_ARGUMENT,
                hint="add --%s=<%s>" % (param.name, kind.value),
                name=param.name,
                kind=kind,
                docs=getdoc(FaultCode.MISSING_REQUIRED_ARGUMENT)
            )
        case Scalar(Kind.STR), Bound(value):
            return value
        case Scalar(kind), Bound(value):
            return _convert(param, kind, value)

    raise TypeError(f"coerce() cannot handle {param!r} with entry {entry!r}")


def resolve(target, namespace=Unset, /):
    """
    find the callable addressed by target.

    lookup order
    - namespace[target] (callables recorded at registration time).
    - "module::function": import module and fetch function.
    - bare "function": fetch it from __main__.

    raises
    - UnresolvedTargetError (a LookupError) when nothing callable is found.
    """
    namespace = coalesce(namespace, {})
    try:
        return namespace[target]
    except KeyError:
        pass

    def unresolved(message, hint):
        return UnresolvedTargetError(
            message,
            title="unresolved target",
            code=FaultCode.UNRESOLVED_TARGET,
            hint=hint,
            target=target,
            docs=getdoc(FaultCode.UNRESOLVED_TARGET)
        )

    module, separator, function = target.rpartition("::")
    try:
        owner = importlib.import_module(module) if separator else __import__("__main__")
        callback = getattr(owner, function)
    except (ImportError, AttributeError):
        raise unresolved(
            "target %r cannot be resolved" % target,
            "register the function with the program, or make %r importable" % (module or "__main__")
        ) from None

    if not callable(callback):
        raise unresolved("target %r is not callable" % target, "point the command at a function")
    return callback


def dispatch(subcommand, bound, namespace=Unset, /):
    """
    coerce bound entries and call the subcommand's target once.

    returns
    - whatever the target returns.
    """
    if len(bound) != len(subcommand.params):
        raise ValueError(f"dispatch() expected {len(subcommand.params)} bound entries, got {len(bound)}")
    arguments = [coerce(param, entry) for param, entry in zip(subcommand.params, bound)]
    return resolve(subcommand.target, namespace)(*arguments)


__all__ = (
    "coerce",
    "resolve",
    "dispatch",
)
