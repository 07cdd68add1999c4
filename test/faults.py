"""
Fault tests (codes, options, triggering and rendering).

Scope
- Hierarchy: configuration errors vs syntax errors vs warnings.
- Options, defaults and replacement.
- trigger() for exceptions and warnings.
- Host hooks read from __main__ (__docs__, __codes__).
- Rich rendering of the fault banner.

Conventions
- Test method names follow CamelCase per project convention.
"""
import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

from textcmd.faults import *


class FaultHierarchyTest(TestCase):

    def testConfigurationAndSyntaxBranches(self):
        for cls in (DuplicatedArgumentError, FrozenCommandError, KindMismatchError, MisdirectedCallError):
            with self.subTest(cls=cls):
                self.assertTrue(issubclass(cls, ConfigurationError))
                self.assertFalse(issubclass(cls, CommandSyntaxError))
        for cls in (MalformedValueError, MissingValueError, MissingArgumentError, UnrecognizedArgumentError):
            with self.subTest(cls=cls):
                self.assertTrue(issubclass(cls, CommandSyntaxError))
                self.assertTrue(issubclass(cls, CommandException))

    def testWarningsAreWarnings(self):
        self.assertTrue(issubclass(PrefixCollisionWarning, Warning))
        self.assertTrue(issubclass(PrefixCollisionWarning, CommandWarning))


class FaultOptionsTest(TestCase):

    def testClassDefaults(self):
        fault = MissingValueError("argument 'n' of 'cmd' requires a value")
        self.assertEqual(fault.code, FaultCode.MISSING_VALUE)
        self.assertEqual(fault.title, "missing value")
        self.assertIsNone(fault.hint)
        self.assertEqual(str(fault), "argument 'n' of 'cmd' requires a value")

    def testExplicitOptions(self):
        fault = MalformedValueError("bad", title="odd value", hint="try again", literal="x")
        self.assertEqual(fault.title, "odd value")
        self.assertEqual(fault.hint, "try again")
        self.assertEqual(fault.options["literal"], "x")

    def testOptionsAreReadOnly(self):
        fault = MalformedValueError("bad")
        with self.assertRaises(TypeError):
            fault.options["hint"] = "x"  # type: ignore

    def testMessageMustBeString(self):
        with self.assertRaises(TypeError):
            MalformedValueError(42)  # type: ignore

    def testReplaceMergesOptions(self):
        fault = MalformedValueError("bad", hint="a", literal="x")
        replaced = fault.__replace__(hint="b")
        self.assertIsNot(replaced, fault)
        self.assertEqual(replaced.hint, "b")
        self.assertEqual(replaced.options["literal"], "x")
        self.assertEqual(str(replaced), "bad")


class TriggerTest(TestCase):

    def testRaisesExceptions(self):
        with self.assertRaises(FrozenCommandError) as context:
            trigger(FrozenCommandError("frozen"), command="cmd")
        self.assertEqual(context.exception.options["command"], "cmd")

    def testEmitsWarnings(self):
        with self.assertWarns(PrefixCollisionWarning) as context:
            trigger(PrefixCollisionWarning("overlap"), hint="rename one")
        self.assertEqual(context.warning.hint, "rename one")

    def testRejectsOtherObjects(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("x"))


class HostHooksTest(TestCase):

    def testGetdocReadsMainDocs(self):
        main = sys.modules["__main__"]
        with mock.patch.object(main, "__docs__", {FaultCode.MISSING_VALUE: "pass a value"}, create=True):
            self.assertEqual(getdoc(FaultCode.MISSING_VALUE), "pass a value")
            self.assertIsNone(getdoc(FaultCode.MISSING_ARGUMENT))

    def testGetdocRejectsNonCodes(self):
        with self.assertRaises(TypeError):
            getdoc(11117)

    def testCodesNormalizeThroughMain(self):
        main = sys.modules["__main__"]
        self.assertEqual(FaultCode.MISSING_VALUE.normalize(), "11117")
        with mock.patch.object(main, "__codes__", {FaultCode.MISSING_VALUE: "E-VALUE"}, create=True):
            self.assertEqual(FaultCode.MISSING_VALUE.normalize(), "E-VALUE")


class FaultRenderingTest(TestCase):

    def render(self, fault):
        console = Console(file=io.StringIO(), color_system=None, width=200)
        console.print(fault)
        return console.file.getvalue()

    def testBannerMessageAndHint(self):
        fault = MissingArgumentError(
            "argument 'b' of 'add' is missing",
            hint="usage: add <a> <b>",
            command="add"
        )
        self.assertEqual(self.render(fault).splitlines(), [
            "[ add · 11125 | Missing Argument ]",
            "argument 'b' of 'add' is missing",
            " → usage: add <a> <b>",
        ])

    def testPlainRendering(self):
        fault = MalformedValueError("bad", command="cmd", colorful=False)
        self.assertEqual(self.render(fault).splitlines(), [
            "[ cmd · 11111 | Malformed Value ]",
            "bad",
        ])


if __name__ == "__main__":
    unittest.main()
