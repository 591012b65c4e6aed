"""Tests for the protover command-line interface."""

from __future__ import annotations

import contextlib
import io
import os
import sys
import tempfile
import unittest
from typing import List, Optional, Tuple

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from protover import __version__, get_supported_protocols
from protover._cli import main


def _run(argv: List[str], stdin: Optional[str] = None) -> Tuple[int, str, str]:
    """Run the CLI, returning (exit code, stdout, stderr)."""
    out, err = io.StringIO(), io.StringIO()
    old_stdin = sys.stdin
    if stdin is not None:
        sys.stdin = io.StringIO(stdin)
    code = 0
    try:
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            try:
                main(argv)
            except SystemExit as e:
                code = e.code if isinstance(e.code, int) else 1
    finally:
        sys.stdin = old_stdin
    return code, out.getvalue(), err.getvalue()


class TestCli(unittest.TestCase):
    def test_version(self):
        code, out, _ = _run(["version"])
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "protover {}".format(__version__))

    def test_no_command(self):
        code, _, _ = _run([])
        self.assertEqual(code, 1)

    def test_vote_stdin(self):
        code, out, _ = _run(["vote", "--threshold", "2"], stdin="Link=3-4\nLink=3\n")
        self.assertEqual(code, 0)
        self.assertEqual(out, "Link=3\n")

    def test_vote_file(self):
        with tempfile.NamedTemporaryFile("w", suffix=".txt", delete=False) as f:
            f.write("Link=1-2 Cons=1\nLink=2\nnot a ballot\n")
            path = f.name
        try:
            code, out, _ = _run(["vote", "-t", "2", "-i", path])
        finally:
            os.unlink(path)
        self.assertEqual(code, 0)
        self.assertEqual(out, "Link=2\n")

    def test_vote_missing_file(self):
        code, _, err = _run(["vote", "-t", "1", "-i", "/nonexistent/ballots.txt"])
        self.assertEqual(code, 2)
        self.assertIn("cannot read input", err)

    def test_canon(self):
        code, out, _ = _run(["canon", "Link=1,2,3,5 HSDir=1-2"])
        self.assertEqual(code, 0)
        self.assertEqual(out, "HSDir=1-2 Link=1-3,5\n")

    def test_canon_error(self):
        code, _, err = _run(["canon", "Wombat=1"])
        self.assertEqual(code, 2)
        self.assertIn("[ERR_UNKNOWN_PROTOCOL]", err)

    def test_canon_permissive(self):
        code, out, _ = _run(["canon", "--permissive", "Wombat=2,1"])
        self.assertEqual(code, 0)
        self.assertEqual(out, "Wombat=1-2\n")

    def test_check(self):
        code, out, _ = _run(["check", "Link=1-5"])
        self.assertEqual((code, out), (0, ""))
        code, out, _ = _run(["check", "Link=5-6 Cons=1"])
        self.assertEqual((code, out), (1, "Link=5-6\n"))

    def test_supports(self):
        code, out, _ = _run(["supports", "Link=3-4 Cons=5", "Cons", "4"])
        self.assertEqual((code, out), (1, "no\n"))
        code, out, _ = _run(["supports", "Link=3-4 Cons=5", "Cons", "4", "--or-later"])
        self.assertEqual((code, out), (0, "yes\n"))

    def test_here(self):
        self.assertEqual(_run(["here", "Link", "5"])[:2], (0, "yes\n"))
        self.assertEqual(_run(["here", "Link", "6"])[:2], (1, "no\n"))

    def test_supported(self):
        code, out, _ = _run(["supported"])
        self.assertEqual(code, 0)
        self.assertEqual(out, get_supported_protocols() + "\n")

    def test_old_tor(self):
        code, out, _ = _run(["old-tor", "0.2.4.19"])
        self.assertEqual(code, 0)
        self.assertTrue(out.startswith("Cons=1 Desc=1 "))
        self.assertEqual(_run(["old-tor", "0.4.0.1"])[1], "\n")


if __name__ == "__main__":
    unittest.main()
