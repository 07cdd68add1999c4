"""
Call sink tests.

Scope
- The abstract Call contract and its default message routing.
- ConsoleCall output through a rich console, plain and styled.

Conventions
- Test method names follow CamelCase per project convention.
"""
import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

from textcmd import Call, ConsoleCall


class EchoCall(Call):
    def __init__(self, text):
        super().__init__(text)
        self.messages = []

    def respond(self, message):
        self.messages.append(message)


class CallTest(TestCase):

    def testCallIsAbstract(self):
        with self.assertRaises(TypeError):
            Call("x")  # type: ignore

    def testTextIsReadOnly(self):
        call = EchoCall("cmd --a=1")
        self.assertEqual(call.text, "cmd --a=1")
        with self.assertRaises(AttributeError):
            call.text = "other"  # type: ignore

    def testTextMustBeString(self):
        with self.assertRaises(TypeError):
            EchoCall(None)

    def testKindsDefaultToRespond(self):
        call = EchoCall("x")
        call.error("e")
        call.success("s")
        call.info("i")
        self.assertEqual(call.messages, ["e", "s", "i"])

    def testRepr(self):
        self.assertEqual(repr(EchoCall("x")), "EchoCall('x')")


class ConsoleCallTest(TestCase):

    def console(self, **options):
        return Console(file=io.StringIO(), width=120, **options)

    def testPrintsEveryKind(self):
        console = self.console(color_system=None)
        call = ConsoleCall("x", console)
        call.respond("r")
        call.error("e")
        call.success("s")
        call.info("i")
        self.assertEqual(console.file.getvalue().splitlines(), ["r", "e", "s", "i"])

    def testErrorsAreStyled(self):
        console = self.console(force_terminal=True, color_system="truecolor")
        ConsoleCall("x", console).error("boom")
        self.assertIn("\x1b[", console.file.getvalue())

    def testColorlessCallPrintsPlainText(self):
        console = self.console(force_terminal=True, color_system="truecolor")
        ConsoleCall("x", console, colorful=False).error("boom")
        self.assertEqual(console.file.getvalue(), "boom\n")

    def testStylesOverriddenFromMain(self):
        console = self.console(force_terminal=True, color_system="truecolor")
        with mock.patch.object(sys.modules["__main__"], "__styles__", {"info": "bold"}, create=True):
            ConsoleCall("x", console).info("note")
        self.assertEqual(console.file.getvalue(), "\x1b[1mnote\x1b[0m\n")


if __name__ == "__main__":
    unittest.main()
