"""
End-to-end tests of the bundled example program (main.py).
"""
import contextlib
import io
import unittest
from unittest import TestCase

import main


class ExampleTest(TestCase):
    def setUp(self):
        main.foo.value = "YES"
        main.bar.value = None
        main.baz.value = None
        main.key.value = "default key value"
        main.help.value = None
        main.pos1.value = "default pos1 value"
        main.pos2.value = None

    def run_main(self, *arguments):
        stdout, stderr = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
            status = main.main(["example", *arguments])
        return status, stdout.getvalue(), stderr.getvalue()

    def testDefaults(self):
        status, stdout, stderr = self.run_main()
        self.assertEqual(status, 0)
        self.assertEqual(stderr, "")
        self.assertIn("default key value", stdout)
        self.assertIn("default pos1 value", stdout)

    def testValues(self):
        status, _, _ = self.run_main("--no-foo", "-b", "--baz", "--key", "v", "one", "two")
        self.assertEqual(status, 0)
        self.assertIsNone(main.foo.value)
        self.assertEqual(main.bar.value, "-b")
        self.assertEqual(main.baz.value, "--baz")
        self.assertEqual(main.key.value, "v")
        self.assertEqual((main.pos1.value, main.pos2.value), ("one", "two"))

    def testSpecialHandler(self):
        status, stdout, _ = self.run_main("--special")
        self.assertEqual(status, 0)
        self.assertIn("special handler called", stdout)

    def testHelp(self):
        status, stdout, _ = self.run_main("-h")
        self.assertEqual(status, 0)
        self.assertTrue(stdout.startswith("Usage: example [options] [pos1] [pos2]\n"))
        self.assertIn(" -f, --foo    Sets foo.\n", stdout)
        self.assertIn(" pos2         Positional argument 2.\n", stdout)

    def testErrorsAreReported(self):
        status, _, stderr = self.run_main("-fq", "--nope", "a", "b", "c")
        self.assertEqual(status, 1)
        self.assertIn("Invalid Flag", stderr)
        self.assertIn("Invalid Argument", stderr)
        self.assertIn("Unexpected Positional", stderr)
        self.assertIn("exiting due to invocation errors", stderr)


if __name__ == "__main__":
    unittest.main()
