r"""
Flint parameter type descriptors.

Overview
- Kind: enumeration of the scalar kinds a command parameter may declare.
  Values are the canonical spellings used in manifests ("str", "i32", ...).
- Scalar(kind): a required scalar parameter type.
- Optional(Scalar(kind)): an optional-of-scalar parameter type; optional of
  optional is not representable.

Descriptors are decided once, at registration time, either from a Python
annotation (see from_annotation) or from descriptor text (see parse). The
dispatcher pattern-matches on them, so coercion is an exhaustive switch over
structured values rather than substring checks on type names.

Descriptor text
- canonical: "str", "int", "i32", ..., and "Optional[<scalar>]".
- accepted aliases: "string", "String", "&str", "&'static str", "isize" (i64),
  "usize" (u64), "float64" (f64), "float32" (f32).
- accepted optional wrappers: "Optional[T]", "typing.Optional[T]", "Option<T>",
  "T | None", "None | T", "Union[T, None]".

Quick example:
    >>> parse("Option<&str>")
    Optional(Scalar('str'))
    >>> str(parse("int | None"))
    'Optional[int]'
    >>> Kind.U8.convert("255")
    255
"""
import re
import types
import typing
from enum import Enum

from .utils import mirror

_INTEGER = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"\+?[0-9]+")
_FLOATING = re.compile(r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)", re.IGNORECASE)
# 'i32' as seen by inspect under postponed evaluation of annotations
_QUOTED = re.compile(r"""\s*(?P<quote>['"])(?P<text>.*)(?P=quote)\s*""")


class Kind(Enum):
    """
    scalar kinds understood by the dispatcher.

    sized integer kinds (iN/uN) are range-checked on conversion; "int" is
    unbounded; all float kinds convert to a Python float.
    """
    STR = "str"
    CHAR = "char"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    I128 = "i128"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    U128 = "u128"
    F32 = "f32"
    F64 = "f64"

    @property
    def bounds(self):
        """
        inclusive (low, high) range for sized integer kinds, None otherwise.
        """
        if match := re.fullmatch(r"([iu])(\d+)", self.value):
            bits = int(match[2])
            if match[1] == "i":
                return -2 ** (bits - 1), 2 ** (bits - 1) - 1
            return 0, 2 ** bits - 1
        return None

    def convert(self, raw, /):
        """
        convert a raw command-line string into a value of this kind.

        rules are strict: no surrounding whitespace and no '_' digit
        separators (both of which int()/float() would otherwise accept).

        raises
        - ValueError with a short reason when the text does not denote a
          value of this kind.
        """
        match self:
            case Kind.STR:
                return raw
            case Kind.CHAR:
                if len(raw) != 1:
                    raise ValueError("expected exactly one character")
                return raw
            case Kind.BOOL:
                if raw == "true":
                    return True
                if raw == "false":
                    return False
                raise ValueError("expected 'true' or 'false'")
            case Kind.FLOAT | Kind.F32 | Kind.F64:
                if not _FLOATING.fullmatch(raw):
                    raise ValueError("expected a floating point number")
                return float(raw)

        pattern = _UNSIGNED if self.value.startswith("u") else _INTEGER
        if not pattern.fullmatch(raw):
            raise ValueError("expected %s integer" % ("an unsigned" if pattern is _UNSIGNED else "an"))
        value = int(raw)
        if (bounds := self.bounds) and not bounds[0] <= value <= bounds[1]:
            raise ValueError("out of range for %s (%d to %d)" % (self.value, *bounds))
        return value


_ALIASES = {
    "string": Kind.STR,
    "String": Kind.STR,
    "&str": Kind.STR,
    "&'static str": Kind.STR,
    "isize": Kind.I64,
    "usize": Kind.U64,
    "float64": Kind.F64,
    "float32": Kind.F32,
}

_BUILTINS = {
    str: Kind.STR,
    int: Kind.INT,
    float: Kind.FLOAT,
    bool: Kind.BOOL,
}

_WRAPPERS = (
    r"(?:typing\.)?Optional\[(?P<inner>.+)\]",
    r"Option<(?P<inner>.+)>",
    r"(?:typing\.)?Union\[(?P<inner>[^,]+),\s*None\]",
    r"(?P<inner>[^|]+?)\s*\|\s*None",
    r"None\s*\|\s*(?P<inner>[^|]+)",
)


class Scalar:
    """
    required scalar parameter type.
    """
    __slots__ = ("_kind",)
    __match_args__ = ("kind",)

    kind = mirror("kind")

    def __init__(self, kind, /):
        if isinstance(kind, str):
            try:
                kind = Kind(kind)
            except ValueError:
                raise ValueError(f"scalar kind {kind!r} is not supported") from None
        if not isinstance(kind, Kind):
            raise TypeError("scalar 'kind' must be a kind or a kind name")
        self._kind = kind

    def __eq__(self, other):
        if not isinstance(other, Scalar):
            return NotImplemented
        return self.kind is other.kind

    def __hash__(self):
        return hash((Scalar, self.kind))

    def __repr__(self):
        return f"Scalar({self.kind.value!r})"

    def __str__(self):
        return self.kind.value


class Optional:
    """
    optional-of-scalar parameter type: an omitted flag yields None.
    """
    __slots__ = ("_inner",)
    __match_args__ = ("inner",)

    inner = mirror("inner")

    def __init__(self, inner, /):
        if not isinstance(inner, Scalar):
            raise TypeError("optional 'inner' must be a scalar")
        self._inner = inner

    @property
    def kind(self):
        return self.inner.kind

    def __eq__(self, other):
        if not isinstance(other, Optional):
            return NotImplemented
        return self.inner == other.inner

    def __hash__(self):
        return hash((Optional, self.inner))

    def __repr__(self):
        return f"Optional({self.inner!r})"

    def __str__(self):
        return f"Optional[{self.inner}]"


def _scalar(text, source, /):
    text = text.strip()
    try:
        return Scalar(_ALIASES.get(text) or Kind(text))
    except ValueError:
        raise ValueError(f"type descriptor {source!r} is not supported") from None


def parse(text, /):
    """
    parse descriptor text (canonical or alias form) into a descriptor.

    raises
    - TypeError when text is not a string.
    - ValueError when the text names no supported scalar or wraps an
      optional in another optional.
    """
    if not isinstance(text, str):
        raise TypeError("parse() argument must be a string")
    text = text.strip()
    for wrapper in _WRAPPERS:
        if match := re.fullmatch(wrapper, text):
            return Optional(_scalar(match["inner"], text))
    return _scalar(text, text)


def from_annotation(annotation, /):
    """
    map a parameter annotation onto a descriptor.

    accepted
    - descriptors (Scalar/Optional) as-is.
    - strings, parsed as descriptor text (covers postponed annotations and
      sized kinds such as "i32"). one layer of quoting is removed first, so
      age: "i32" reads the same with or without
      `from __future__ import annotations`.
    - str, int, float, bool.
    - X | None, Optional[X] and Union[X, None] over the above.
    """
    if isinstance(annotation, Scalar | Optional):
        return annotation
    if isinstance(annotation, str):
        if match := _QUOTED.fullmatch(annotation):
            annotation = match["text"]
        return parse(annotation)
    if isinstance(annotation, type) and annotation in _BUILTINS:
        return Scalar(_BUILTINS[annotation])
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        arguments = typing.get_args(annotation)
        if len(arguments) == 2 and type(None) in arguments:
            inner, = (argument for argument in arguments if argument is not type(None))
            if isinstance(descriptor := from_annotation(inner), Scalar):
                return Optional(descriptor)
    raise TypeError(f"annotation {annotation!r} is not a supported parameter type")


__all__ = (
    "Kind",
    "Scalar",
    "Optional",
    "parse",
    "from_annotation",
)
