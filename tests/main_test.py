import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest import mock

from acalc.main import main, make_parser


class FakeStdin:
    """Standard input stand-in: main only needs isatty and the binary buffer."""

    def __init__(self, raw, tty=False):
        self.buffer = io.BytesIO(raw)
        self.tty = tty

    def isatty(self):
        return self.tty


class MainTestCase(unittest.TestCase):

    def setUp(self):
        patcher = mock.patch.dict(os.environ, {"ANSI_COLORS_DISABLED": "1"})
        patcher.start()
        self.addCleanup(patcher.stop)

    def run_main(self, argv, raw=b"", tty=False):
        stdout = io.StringIO()
        with redirect_stdout(stdout):
            main(argv, FakeStdin(raw, tty))
        return stdout.getvalue()

    def test_parser(self):
        args = make_parser().parse_args([])
        self.assertIsNone(args.file)
        self.assertFalse(args.trace)
        self.assertFalse(args.no_color)

        args = make_parser().parse_args(["-", "--trace", "--no-color"])
        self.assertEqual("-", args.file)
        self.assertTrue(args.trace)
        self.assertTrue(args.no_color)

    def test_stdin(self):
        cases = {b"": "", b"35": "I32(35)\n", b"81 + 2": "I32(83)\n", b"81 + 2\n1 + 1\n": "I32(83)\nI32(2)\n"}
        for case, expected in cases.items():
            self.assertEqual(expected, self.run_main([], case), case)
            self.assertEqual(expected, self.run_main(["-"], case, tty=True), case)

    def test_file(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "sums.txt")
            with open(path, "wb") as file:
                file.write("1 + 2\n".encode("utf-8"))
            self.assertEqual("I32(3)\n", self.run_main([path]))

    def test_error_stops_run(self):
        stdout = io.StringIO()
        with redirect_stdout(stdout), self.assertRaises(SystemExit) as context:
            main([], FakeStdin(b"1 + 2 3 +"))

        self.assertEqual(1, context.exception.code)
        self.assertEqual("I32(3)\n<stdin>:1:10: error: reached end of input mid-expression\n  1 + 2 3 +\n"
                         "           ^\n", stdout.getvalue())

    def test_invalid_encoding(self):
        stdout = io.StringIO()
        with redirect_stdout(stdout), self.assertRaises(SystemExit):
            main([], FakeStdin(b"\xff\xfe"))
        self.assertEqual("<stdin>: error: '<stdin>' is not valid UTF-8\n", stdout.getvalue())

    def test_missing_file(self):
        stdout = io.StringIO()
        with redirect_stdout(stdout), self.assertRaises(SystemExit):
            main([os.path.join("does", "not", "exist.txt")], FakeStdin(b""))
        self.assertIn("could not be opened", stdout.getvalue())

    def test_trace(self):
        output = self.run_main(["--trace"], b"7").splitlines()
        self.assertEqual(["[lex]", "[parse]", "[eval]", "I32(7)"], [line.split(" ")[0] for line in output])

    def test_no_color(self):
        with mock.patch.dict(os.environ, {}, clear=False):
            os.environ.pop("ANSI_COLORS_DISABLED")
            self.run_main(["--no-color"], b"1")
            self.assertEqual("1", os.environ.get("ANSI_COLORS_DISABLED"))

    def test_shell(self):
        with mock.patch("acalc.main.Shell") as shell:
            self.run_main([], tty=True)
        shell.return_value.cmdloop.assert_called_once_with()


if __name__ == '__main__':
    unittest.main()
