"""
Flint faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues
  raised while routing, parsing, binding and coercing command-line input.
- FlintException / FlintWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Messages name the offending token, flag or command and, where it helps, its
  ordinal position on the command line (“from third position”).
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.

Integration
- The pipeline builds faults and hands them to Program.trigger(fault, **ctx).
- In non-shell mode, exceptions are raised; in shell mode, they are rendered via
  rich and the process exits with status 1.
"""
import copy
import inspect
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across flint (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • EMPTY_REGISTRY, COMMAND_NOT_FOUND, UNRESOLVED_TARGET, INVALID_SOURCE
    - flags (1111x)
      • MALFORMED_FLAG, UNEXPECTED_ARGUMENT
    - values (1112x)
      • MISSING_REQUIRED_ARGUMENT, UNCOERCIBLE_VALUE
    - warnings (12xxx)
      • OVERWRITTEN_COMMAND
    """
    # --- routing errors (11xxx) ---
    EMPTY_REGISTRY              = 11100
    COMMAND_NOT_FOUND           = 11101
    UNRESOLVED_TARGET           = 11102
    INVALID_SOURCE              = 11103

    # --- flag errors (11xxx) ---
    MALFORMED_FLAG              = 11111
    UNEXPECTED_ARGUMENT         = 11112

    # --- value errors (11xxx) ---
    MISSING_REQUIRED_ARGUMENT   = 11125
    UNCOERCIBLE_VALUE           = 11126

    # --- warnings (12xxx) ---
    OVERWRITTEN_COMMAND         = 12111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, /):
    """
    build the rich renderable shared by exceptions and warnings.

    header: "[ prog — code | Title ]", then the message and a "→ hint" line.
    with fancy=True the body is wrapped in a Panel titled with the header.
    """
    main = __import__("__main__")
    options = fault.options

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    colorful = options.get("colorful", False)
    fancy = options.get("fancy", False)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    tool = options.get("tool")
    prog = text(getattr(main, "__prog__", getattr(tool, "name", None) or "flint"), "prog-name")

    code = options.get("code")
    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "?", "code"),
        " | ",
        text(str(options.get("title", type(fault).__name__)).title(), "title"),
        " ]"
    )
    message = text(fault.message, "message")
    hint = Text.assemble(text(" → ", "hint-arrow"), text(options.get("hint"), "hint"))

    if fancy:
        return Panel(Group(message, hint), title=header, title_align="left")
    return Group(header, message, hint)


class FlintException(Exception):
    """
    base class for every user-facing flint error.

    carries
    - message: one-sentence, lowercased description naming the offender.
    - options: read-only mapping of rendering/context options (title, code,
      hint, tool, shell, fancy, colorful, plus contextual fields such as
      token/name/value). contextual fields are also readable as attributes.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __getattr__(self, name):
        if name == "options":
            raise AttributeError(name)
        try:
            return self.options[name]
        except KeyError:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}") from None

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",  # friendly pinky title
            "message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell"):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ParseError(FlintException): ...
class MalformedFlagError(ParseError): ...
class CommandNotFoundError(FlintException): ...
class UnexpectedArgumentError(FlintException): ...
class MissingRequiredArgumentError(FlintException): ...
class TypeCoercionError(FlintException): ...
class EmptyRegistryError(FlintException): ...
class UnresolvedTargetError(FlintException, LookupError): ...
class InvalidSourceError(FlintException): ...


class FlintWarning(Warning):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",  # amber fault code for warnings
            "title": "bold #FFC2E0",
            "message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell"):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class OverwrittenCommandWarning(FlintWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are raised
      and warnings go through the warnings module.

    typical options
    - tool, shell, fancy, colorful, title, code, hint, docs, and any other
      context the reporter may want to show (e.g., token/index/name/value).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FlintException",
    "ParseError",
    "MalformedFlagError",
    "CommandNotFoundError",
    "UnexpectedArgumentError",
    "MissingRequiredArgumentError",
    "TypeCoercionError",
    "EmptyRegistryError",
    "UnresolvedTargetError",
    "InvalidSourceError",
    "FlintWarning",
    "OverwrittenCommandWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
