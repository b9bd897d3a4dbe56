"""
Flint command registry.

What this module provides
- Parameter: one declared parameter (name + type descriptor), immutable.
- Subcommand: a command's dispatch descriptor (command name, qualified target,
  ordered parameters), immutable.
- Registry: ordered mapping from command name to Subcommand.

Lifecycle
- construct → register() N times → freeze() → read-only use for dispatch.
- register() and clear() are serialized under the registry's own lock, so
  concurrent registration sites (e.g. parallel tests sharing one program) see
  a consistent table. clear() is the atomic reset point between scenarios and
  also lifts the freeze.

Ordering
- Iteration yields command names in sorted order, which gives the manifest a
  total order over its (unique) keys.

Naming constraints
- The manifest uses '-' between fields and ':' between a parameter's name and
  type, so command names must contain neither, targets must not contain '-',
  and parameter names must be identifiers.
"""
import threading
from collections.abc import Iterable, Mapping

from .descriptors import Optional, Scalar, from_annotation
from .utils import Unset, mirror


class Parameter:
    """
    a declared command parameter.

    type accepts a descriptor, descriptor text ("i32", "Optional[str]") or a
    supported annotation (str, int | None, ...); it is normalized to a
    descriptor on construction.
    """
    __slots__ = ("_name", "_type")
    __match_args__ = ("name", "type")

    name = mirror("name")
    type = mirror("type")

    def __init__(self, name, type, /):
        if not isinstance(name, str):
            raise TypeError("parameter 'name' must be a string")
        elif not name.isidentifier():
            raise ValueError(f"parameter name {name!r} must be an identifier")
        self._name = name
        self._type = from_annotation(type)

    @property
    def optional(self):
        return isinstance(self.type, Optional)

    def __eq__(self, other):
        if not isinstance(other, Parameter):
            return NotImplemented
        return (self.name, self.type) == (other.name, other.type)

    def __hash__(self):
        return hash((self.name, self.type))

    def __iter__(self):
        yield self.name
        yield self.type

    def __repr__(self):
        return f"Parameter({self.name!r}, {str(self.type)!r})"

    def __rich_repr__(self):
        yield "name", self.name
        yield "type", str(self.type)


class Subcommand:
    """
    dispatch descriptor for one command.

    - name: "" for the default command, otherwise the function's own name.
    - target: "group::function" or a bare "function" reference.
    - params: ordered parameters; the order is the call order.

    duplicate parameter names are rejected, since binding by name could not
    tell them apart.
    """
    __slots__ = ("_name", "_target", "_params")
    __match_args__ = ("name", "target", "params")

    name = mirror("name")
    target = mirror("target")
    params = mirror("params")

    def __init__(self, name, target, params=(), /):
        if not isinstance(name, str):
            raise TypeError("subcommand 'name' must be a string")
        elif set(name) & set("-:\n"):
            raise ValueError(f"subcommand name {name!r} cannot contain '-', ':' or line breaks")

        if not isinstance(target, str):
            raise TypeError("subcommand 'target' must be a string")
        elif not target.strip():
            raise ValueError("subcommand 'target' cannot be empty")
        elif set(target) & set("-\n"):
            raise ValueError(f"subcommand target {target!r} cannot contain '-' or line breaks")

        if not isinstance(params, Iterable):
            raise TypeError("subcommand 'params' must be an iterable of parameters")

        seen = set()
        resolved = []
        for param in params:
            if not isinstance(param, Parameter):
                param = Parameter(*param)
            if param.name in seen:
                raise ValueError(f"subcommand {target!r} parameter {param.name!r} is declared twice")
            seen.add(param.name)
            resolved.append(param)

        self._name = name
        self._target = target
        self._params = tuple(resolved)

    @property
    def required(self):
        """
        names of the parameters that must be supplied on the command line.
        """
        return tuple(param.name for param in self.params if isinstance(param.type, Scalar))

    def __eq__(self, other):
        if not isinstance(other, Subcommand):
            return NotImplemented
        return (self.name, self.target, self.params) == (other.name, other.target, other.params)

    def __hash__(self):
        return hash((self.name, self.target, self.params))

    def __repr__(self):
        return f"Subcommand({self.name!r}, {self.target!r}, {list(self.params)!r})"

    def __rich_repr__(self):
        yield "name", self.name
        yield "target", self.target
        yield "params", self.params


class Registry(Mapping):
    """
    ordered, lock-guarded table of subcommands keyed by command name.

    registration semantics
    - keys are unique; registering an existing name replaces its descriptor
      (last registration wins) and returns the replaced one.
    - a frozen registry rejects registration with RuntimeError.
    """

    def __init__(self, subcommands=(), /):
        self._commands = {}
        self._lock = threading.Lock()
        self._frozen = False
        for subcommand in subcommands:
            self.register(subcommand)

    @property
    def frozen(self):
        return self._frozen

    def register(self, subcommand, /, target=Unset, params=()):
        """
        insert a descriptor, either prebuilt or as (name, target, params).

        returns
        - the descriptor previously registered under the same name, or None.
        """
        if not isinstance(subcommand, Subcommand):
            if target is Unset:
                raise TypeError("register() requires a target when the first argument is a command name")
            subcommand = Subcommand(subcommand, target, params)
        elif target is not Unset:
            raise TypeError("register() takes no target when given a subcommand")

        with self._lock:
            if self._frozen:
                raise RuntimeError("registry is frozen and cannot accept new commands")
            previous = self._commands.get(subcommand.name)
            self._commands[subcommand.name] = subcommand
        return previous

    def freeze(self):
        with self._lock:
            self._frozen = True
        return self

    def clear(self):
        with self._lock:
            self._commands.clear()
            self._frozen = False

    def __getitem__(self, name):
        return self._commands[name]

    def __iter__(self):
        return iter(sorted(self._commands))

    def __len__(self):
        return len(self._commands)

    def __repr__(self):
        return f"Registry({list(self.values())!r})"

    def __rich_repr__(self):
        for name in self:
            yield name, self[name]


__all__ = (
    "Parameter",
    "Subcommand",
    "Registry",
)
