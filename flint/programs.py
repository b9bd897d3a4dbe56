"""
Flint program layer: register functions, then run them from argv.

What this module provides
- Program: owns a Registry plus the callables behind each target, and runs the
  pipeline  manifest → loads → parse_command → parse_args → lookup → bind →
  dispatch.
- Group: a named group of commands inside a program; each function fired into
  a group becomes the command named after the function, with target
  "group::function".
- fire / group / run / reset: the same operations on a process-wide default
  program, for scripts that do not want to hold a Program themselves.

Quick start
    from flint import Program

    app = Program("greeter", shell=True)

    @app.fire
    def hello(name: str, age: "i32"):
        print(f"hello, {name}, age: {age}")

    farewells = app.group("farewells")

    @farewells.fire
    def bye(name: str, loud: bool | None):
        print(("BYE " if loud else "bye ") + name)

    if __name__ == "__main__":
        app.run()   # greeter --name=Ann --age=22 / greeter bye --name=Ann

Registration by introspection
- every parameter must be annotated with a supported type (see
  flint.descriptors.from_annotation) and must be passable positionally;
  *args, **kwargs and keyword-only parameters are rejected.

Fault surfacing
- all pipeline faults pass through Program.trigger, which merges the program's
  runtime options (shell/fancy/colorful). With shell=True the fault is printed
  on stderr and the process exits with status 1; otherwise it is raised.
"""
import inspect
import os.path
import shlex
import sys
import threading
from collections.abc import Iterable

from .binding import bind, lookup
from .codec import dumps, loads
from .dispatcher import dispatch
from .faults import *
from .parsing import parse_args, parse_command
from .registry import Parameter, Registry, Subcommand
from .utils import Unset, coalesce, mirror, rename


def _describe(callback, /):
    """
    read the ordered parameter list of a callback from its signature.
    """
    try:
        signature = inspect.signature(callback)
    except TypeError:
        raise TypeError("program 'callback' must be callable") from None
    except ValueError:
        raise ValueError("program 'callback' must be an inspectable callable") from None

    params = []
    for name, parameter in signature.parameters.items():
        if parameter.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD, inspect.Parameter.KEYWORD_ONLY):
            raise TypeError(f"program 'callback' parameter {name!r} must be passable positionally")
        if parameter.annotation is inspect.Parameter.empty:
            raise TypeError(f"program 'callback' parameter {name!r} must be annotated with its type")
        params.append(Parameter(name, parameter.annotation))
    return params


def _tokens(argv, /):
    if argv is Unset:
        return sys.argv[1:]
    if isinstance(argv, str):
        return shlex.split(argv)
    if isinstance(argv, Iterable):
        tokens = list(argv)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("run() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("run() argument must be a string or an iterable of strings")


class Program:
    """
    a runnable set of commands.

    options
    - name: shown in fault headers (defaults to the script name).
    - shell: print faults and exit(1) instead of raising them.
    - fancy: render faults inside a panel.
    - colorful: render faults with colours.

    lifecycle
    - register commands (fire/group/register), then read manifest or call run();
      the first of those freezes the registry. reset() starts over.
    """
    name = mirror("name")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")

    def __init__(self, name=Unset, /, *, shell=Unset, fancy=Unset, colorful=Unset):
        if not isinstance(name, str | Unset):
            raise TypeError("program 'name' must be a string")
        self._name = coalesce(name, os.path.basename(sys.argv[0]) or "flint")
        self._shell = bool(coalesce(shell, False))
        self._fancy = bool(coalesce(fancy, False))
        self._colorful = bool(coalesce(colorful, False))
        self._registry = Registry()
        self._namespace = {}
        self._groups = {}
        self._manifest = Unset
        self._lock = threading.RLock()

    @property
    def registry(self):
        return self._registry

    @property
    def manifest(self):
        """
        the encoded registry; reading it freezes the registry.
        """
        with self._lock:
            if self._manifest is Unset:
                self._manifest = dumps(self._registry.freeze())
            return self._manifest

    def register(self, name, target, params=(), /, callback=Unset):
        """
        declarative registration of one command.

        callback, when given, is what target resolves to at dispatch time;
        otherwise target is resolved by import ("module::function") or from
        __main__ (bare name).
        """
        subcommand = Subcommand(name, target, params)
        with self._lock:
            previous = self._registry.register(subcommand)
            if callback is not Unset:
                self._namespace[target] = callback
        if previous is not None:
            self.trigger(OverwrittenCommandWarning(
                "command %r was registered again; %r replaces %r" % (name, target, previous.target),
                title="command overwritten",
                code=FaultCode.OVERWRITTEN_COMMAND,
                hint="give each function a distinct command name",
                name=name,
                previous=previous,
                docs=getdoc(FaultCode.OVERWRITTEN_COMMAND)
            ))
        return subcommand

    def fire(self, callback=Unset, /):
        """
        register callback as the default command (decorator or direct call).
        """
        @rename("fire")
        def wrapper(callback, /):
            if not callable(callback):
                raise TypeError("@fire() must be applied to a callable")
            self.register("", callback.__name__, _describe(callback), callback=callback)
            return callback

        return wrapper(callback) if callback is not Unset else wrapper

    def group(self, name, /):
        """
        return the group with this name, creating it on first use.
        """
        with self._lock:
            try:
                return self._groups[name]
            except KeyError:
                group = self._groups[name] = Group(self, name)
                return group

    def reset(self):
        """
        forget every command, group and callable (atomic reset point).
        """
        with self._lock:
            self._registry.clear()
            self._namespace.clear()
            self._groups.clear()
            self._manifest = Unset

    def trigger(self, fault, /, **options):
        """
        surface a fault with this program's runtime options merged in.
        """
        trigger(fault, **options, tool=self, shell=self.shell, fancy=self.fancy, colorful=self.colorful)

    def run(self, argv=Unset, /):
        """
        parse argv and call the addressed command once.

        argv
        - Unset: sys.argv[1:].
        - str: split with shlex.split.
        - Iterable[str]: used as-is.

        returns
        - the command's return value (faults raise, or exit in shell mode).
        """
        tokens = _tokens(argv)
        registry = loads(self.manifest)
        try:
            name, rest = parse_command(tokens)
            flags = parse_args(rest, start=len(tokens) - len(rest) + 1)
            subcommand = lookup(registry, name)
            bound = bind(subcommand.params, flags)
            return dispatch(subcommand, bound, self._namespace)
        except FlintException as fault:
            self.trigger(fault)

    def __repr__(self):
        return f"Program({self.name!r}, commands={list(self._registry)!r})"

    def __rich_repr__(self):
        yield "name", self.name
        yield "commands", list(self._registry)
        yield "shell", self.shell
        yield "fancy", self.fancy
        yield "colorful", self.colorful


class Group:
    """
    named group of commands within a program.
    """
    name = mirror("name")
    program = mirror("program")

    def __init__(self, program, name, /):
        if not isinstance(program, Program):
            raise TypeError("group 'program' must be a program")
        if not isinstance(name, str):
            raise TypeError("group 'name' must be a string")
        elif not (name := name.strip()):
            raise ValueError("group 'name' cannot be empty")
        elif set(name) & set("-:\n"):
            raise ValueError(f"group name {name!r} cannot contain '-', ':' or line breaks")
        self._program = program
        self._name = name

    def fire(self, callback=Unset, /):
        """
        register callback as the command named after it (decorator or direct call).
        """
        @rename("fire")
        def wrapper(callback, /):
            if not callable(callback):
                raise TypeError("@fire() must be applied to a callable")
            self.program.register(
                callback.__name__,
                f"{self.name}::{callback.__name__}",
                _describe(callback),
                callback=callback
            )
            return callback

        return wrapper(callback) if callback is not Unset else wrapper

    def __repr__(self):
        return f"Group({self.name!r})"


_default = Program()


def fire(callback=Unset, /):
    """
    register callback as the default command of the process-wide program.
    """
    return _default.fire(callback)


def group(name, /):
    """
    return a group of the process-wide program.
    """
    return _default.group(name)


def run(argv=Unset, /):
    """
    run the process-wide program (see Program.run).
    """
    return _default.run(argv)


def reset():
    """
    clear the process-wide program.
    """
    _default.reset()


__all__ = (
    "Program",
    "Group",
    "fire",
    "group",
    "run",
    "reset",
)
