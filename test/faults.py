"""
Faults module behavioral tests (codes, exceptions, warnings, rendering).

Scope
- Validate trigger() raising/warning/printing depending on runtime options.
- Validate fault option access, replacement and string forms.
- Validate rendering of headers, messages and hints through rich.
- Validate host customisation hooks (__codes__, __docs__, __prog__).

Conventions
- Test method names follow CamelCase per project convention.
"""
import contextlib
import copy
import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

from flint.faults import *


def render(fault):
    console = Console(file=io.StringIO(), width=120)
    console.print(fault)
    return console.file.getvalue()


class TestExceptions(TestCase):
    """Error faults."""

    def setUp(self):
        self.fault = UnexpectedArgumentError(
            "unexpected flag '--bogus'",
            title="unexpected flag",
            code=FaultCode.UNEXPECTED_ARGUMENT,
            hint="this command takes no flags",
            name="bogus",
        )

    def testStringIsMessage(self):
        self.assertEqual(str(self.fault), "unexpected flag '--bogus'")

    def testOptionsReadableAsAttributes(self):
        self.assertEqual(self.fault.name, "bogus")
        self.assertIs(self.fault.code, FaultCode.UNEXPECTED_ARGUMENT)
        with self.assertRaises(AttributeError):
            self.fault.missing

    def testOptionsAreReadOnly(self):
        with self.assertRaises(TypeError):
            self.fault.options["name"] = "other"

    def testReplaceMergesOptions(self):
        replaced = copy.replace(self.fault, shell=False, name="other")
        self.assertIsInstance(replaced, UnexpectedArgumentError)
        self.assertEqual(replaced.name, "other")
        self.assertEqual(replaced.hint, "this command takes no flags")
        self.assertEqual(self.fault.name, "bogus")

    def testTriggerRaisesOutsideShell(self):
        with self.assertRaises(UnexpectedArgumentError) as context:
            trigger(self.fault, tool=None)
        self.assertIn("tool", context.exception.options)

    def testTriggerExitsInShell(self):
        stream = io.StringIO()
        with contextlib.redirect_stderr(stream):
            with self.assertRaises(SystemExit) as context:
                trigger(self.fault, shell=True)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("Unexpected Flag", stream.getvalue())

    def testTriggerRejectsOtherObjects(self):
        for value in (ValueError("x"), "fault", None):
            with self.subTest(value=value):
                with self.assertRaises(TypeError):
                    trigger(value)

    def testHierarchy(self):
        self.assertTrue(issubclass(MalformedFlagError, ParseError))
        for error in (
            ParseError,
            CommandNotFoundError,
            UnexpectedArgumentError,
            MissingRequiredArgumentError,
            TypeCoercionError,
            EmptyRegistryError,
        ):
            with self.subTest(error=error.__name__):
                self.assertTrue(issubclass(error, FlintException))


class TestWarnings(TestCase):
    """Warning faults."""

    def setUp(self):
        self.warning = OverwrittenCommandWarning(
            "command 'hello' was registered again",
            title="command overwritten",
            code=FaultCode.OVERWRITTEN_COMMAND,
        )

    def testWarnsOutsideShell(self):
        with self.assertWarns(OverwrittenCommandWarning) as context:
            trigger(self.warning)
        self.assertEqual(str(context.warning), "command 'hello' was registered again")

    def testPrintsInShellWithoutExit(self):
        stream = io.StringIO()
        with contextlib.redirect_stderr(stream):
            trigger(self.warning, shell=True)
        self.assertIn("Command Overwritten", stream.getvalue())
        self.assertIn("12111", stream.getvalue())

    def testIsAWarning(self):
        self.assertTrue(issubclass(OverwrittenCommandWarning, FlintWarning))
        self.assertTrue(issubclass(FlintWarning, Warning))


class TestRendering(TestCase):
    """Rich output of faults."""

    def setUp(self):
        self.fault = MalformedFlagError(
            "bad form of flag 'oops' at second position",
            title="malformed flag",
            code=FaultCode.MALFORMED_FLAG,
            hint="flags look like --name=value",
        )

    def testPlainLayout(self):
        output = render(self.fault)
        self.assertIn("[ flint — 11111 | Malformed Flag ]", output)
        self.assertIn("bad form of flag 'oops' at second position", output)
        self.assertIn("→ flags look like --name=value", output)

    def testProgramNameFromTool(self):
        tool = mock.Mock()
        tool.name = "greeter"
        output = render(copy.replace(self.fault, tool=tool))
        self.assertIn("[ greeter — 11111", output)

    def testFancyPanel(self):
        output = render(copy.replace(self.fault, fancy=True))
        self.assertIn("╭", output)
        self.assertIn("Malformed Flag", output)

    def testUnknownCode(self):
        output = render(FlintException("something broke"))
        self.assertIn("— ? |", output)

    def testHostProgramName(self):
        with mock.patch.object(sys.modules["__main__"], "__prog__", "host", create=True):
            self.assertIn("[ host — ", render(self.fault))


class TestFaultCode(TestCase):
    """Stable codes and host hooks."""

    def testStableValues(self):
        self.assertEqual(FaultCode.EMPTY_REGISTRY, 11100)
        self.assertEqual(FaultCode.COMMAND_NOT_FOUND, 11101)
        self.assertEqual(FaultCode.MALFORMED_FLAG, 11111)
        self.assertEqual(FaultCode.UNEXPECTED_ARGUMENT, 11112)
        self.assertEqual(FaultCode.MISSING_REQUIRED_ARGUMENT, 11125)
        self.assertEqual(FaultCode.UNCOERCIBLE_VALUE, 11126)
        self.assertEqual(FaultCode.OVERWRITTEN_COMMAND, 12111)

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.MALFORMED_FLAG.normalize(), "11111")

    def testNormalizeUsesHostCodes(self):
        codes = {FaultCode.MALFORMED_FLAG: "E-FLAG"}
        with mock.patch.object(sys.modules["__main__"], "__codes__", codes, create=True):
            self.assertEqual(FaultCode.MALFORMED_FLAG.normalize(), "E-FLAG")
            self.assertEqual(FaultCode.EMPTY_REGISTRY.normalize(), "11100")

    def testGetdoc(self):
        self.assertIsNone(getdoc(FaultCode.EMPTY_REGISTRY))
        docs = {FaultCode.EMPTY_REGISTRY: "register a command first"}
        with mock.patch.object(sys.modules["__main__"], "__docs__", docs, create=True):
            self.assertEqual(getdoc(FaultCode.EMPTY_REGISTRY), "register a command first")
        with self.assertRaises(TypeError):
            getdoc(11100)


if __name__ == "__main__":
    unittest.main()
