"""
python -m flint: inspect the commands of a flint program.

    python -m flint                                   version banner
    python -m flint manifest --source=pkg.mod:app     print the encoded registry
    python -m flint show --source=pkg.mod:app         render the command table
    python -m flint check --source=pkg.mod:app        verify the manifest round trip

--source names a module and the attribute holding a Program, separated by ':'.
"""
import importlib

from rich.box import ROUNDED
from rich.console import Console
from rich.table import Table
from rich.text import Text

from . import Program, __version__
from .codec import dumps, loads
from .faults import FaultCode, InvalidSourceError, getdoc

__prog__ = "flint"

console = Console()

tool = Program("flint", shell=True, colorful=True)
tools = tool.group("tools")


def _load(source):
    def invalid(message, hint):
        return InvalidSourceError(
            message,
            title="invalid source",
            code=FaultCode.INVALID_SOURCE,
            hint=hint,
            source=source,
            docs=getdoc(FaultCode.INVALID_SOURCE)
        )

    module, separator, attribute = source.partition(":")
    if not separator or not module or not attribute:
        raise invalid("source %r must name a module and an attribute" % source, "write it as --source=package.module:attribute")
    try:
        program = getattr(importlib.import_module(module), attribute)
    except ImportError as exception:
        raise invalid("cannot import %r: %s" % (module, exception), "check that %r is importable from here" % module) from None
    except AttributeError:
        raise invalid("module %r has no attribute %r" % (module, attribute), "name the attribute holding the program") from None
    if not isinstance(program, Program):
        raise invalid("%r is not a flint program" % source, "point --source at a flint.Program instance")
    return program


@tool.fire
def version():
    console.print(Text.assemble(("flint", "bold"), " ", (__version__, "cyan")))


@tools.fire
def manifest(source: str):
    # plain print: the manifest is meant to be piped
    print(_load(source).manifest)


@tools.fire
def show(source: str):
    program = _load(source)
    table = Table(title=program.name, box=ROUNDED, title_justify="left")
    table.add_column("command", style="bold")
    table.add_column("target", style="cyan")
    table.add_column("parameters")
    for name, subcommand in loads(program.manifest).items():
        table.add_row(
            name or Text("(default)", style="dim"),
            subcommand.target,
            ", ".join(f"--{param.name}: {param.type}" for param in subcommand.params) or Text("-", style="dim"),
        )
    console.print(table)


@tools.fire
def check(source: str):
    text = _load(source).manifest
    if dumps(loads(text)) != text:
        raise SystemExit("flint: manifest does not survive a round trip")
    console.print(Text("ok", style="green"))


if __name__ == "__main__":
    tool.run()
