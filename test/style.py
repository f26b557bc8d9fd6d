"""
Style module tests (tones, colour policy and consoles).

Conventions
- Test method names follow CamelCase per project convention.
- Palette overrides are installed on __main__ with unittest.mock.
"""

from __future__ import annotations

import sys
import unittest
from unittest import TestCase, mock

from rich.text import Text

from argmatch import Colorizer, ColorWhen, Tone, paint


class TestPaint(TestCase):

    def testPlainContentIsPreserved(self):
        for tone in Tone:
            for when in ColorWhen:
                with self.subTest(tone=tone, when=when):
                    self.assertEqual(paint("text", tone, when).plain, "text")

    def testDefaultPalette(self):
        self.assertEqual(paint("ok", Tone.SUCCESS).style, "green")
        self.assertEqual(paint("boom", Tone.ERROR).style, "bold red")
        self.assertEqual(paint("plain").style, "")

    def testNeverDropsStyles(self):
        self.assertEqual(paint("boom", Tone.ERROR, ColorWhen.NEVER).style, "")
        styled = Text("boom", "red")
        self.assertEqual(paint(styled, Tone.PLAIN, ColorWhen.NEVER).style, "")

    def testHostPaletteOverride(self):
        with mock.patch.object(sys.modules["__main__"], "__styles__", {"error": "magenta"}, create=True):
            self.assertEqual(paint("boom", Tone.ERROR).style, "magenta")
            self.assertEqual(paint("ok", Tone.SUCCESS).style, "green")

    def testRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            paint(42)
        with self.assertRaises(TypeError):
            paint("text", "error")
        with self.assertRaises(TypeError):
            paint("text", Tone.ERROR, "never")


class TestColorizer(TestCase):

    def testToneHelpers(self):
        colorizer = Colorizer(ColorWhen.ALWAYS)
        self.assertEqual(colorizer.good("ok").style, "green")
        self.assertEqual(colorizer.warning("careful").style, "yellow")
        self.assertEqual(colorizer.error("boom").style, "bold red")
        self.assertEqual(colorizer.none("plain").style, "")

    def testNeverConsoleHasNoColours(self):
        console = Colorizer(ColorWhen.NEVER).console()
        self.assertIsNone(console.color_system)
        self.assertTrue(console.no_color)

    def testAlwaysConsoleIsATerminal(self):
        self.assertTrue(Colorizer(ColorWhen.ALWAYS).console().is_terminal)

    def testRejectsBadPolicy(self):
        with self.assertRaises(TypeError):
            Colorizer("auto")

    def testRepr(self):
        self.assertEqual(repr(Colorizer(ColorWhen.NEVER)), "colorizer(when='never')")


if __name__ == "__main__":
    unittest.main()
