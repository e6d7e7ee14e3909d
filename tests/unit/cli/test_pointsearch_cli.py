"""CLI argument handling and output tests for ``pointsearch.cli.main``."""

from __future__ import annotations

import io
import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from pointsearch import cli
from pointsearch.config import Settings

SOURCE = "def alpha():\n    return beta\n"


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        self.file = self.root / "mod.py"
        self.file.write_text(SOURCE, encoding="utf-8")
        patcher = mock.patch("pointsearch.cli.load_settings", return_value=Settings(root_resolvers=()))
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(self._tmp.cleanup)

    def run_main(self, argv: list[str]) -> str:
        stdout = io.StringIO()
        with mock.patch("sys.stdout", stdout):
            cli.main(argv)
        return stdout.getvalue()

    def test_print_request_outputs_json(self) -> None:
        out = self.run_main(
            ["rg", str(self.file), "--line", "2", "--column", "12", "--cwd", str(self.root), "--print-request"]
        )
        payload = json.loads(out)
        self.assertEqual(payload["backend"], "rg")
        self.assertEqual(payload["seed_text"], "beta")
        self.assertEqual(payload["root_path"], str(self.root))
        self.assertEqual(payload["preselect_key"], "mod.py:2:")

    def test_selection_argument_seeds_query(self) -> None:
        out = self.run_main(
            ["grep", str(self.file), "--selection", "4:11", "--cwd", str(self.root), "--print-request"]
        )
        payload = json.loads(out)
        self.assertEqual(payload["seed_text"], "alpha()")
        self.assertEqual(payload["query"], "alpha\\(\\)")

    def test_prints_jump_target_from_picker(self) -> None:
        def pick_second(candidates, **_options):
            return candidates[1]

        with mock.patch("pointsearch.cli.picker_for_name", return_value=pick_second):
            out = self.run_main(["buffer-grep", str(self.file), "--cwd", str(self.root)])
        self.assertEqual(out, f"{self.file}:2\n")

    def test_unknown_command_exits_with_message(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            cli.main(["no-such-backend", str(self.file)])
        self.assertIn("Unknown search backend", str(ctx.exception.code))

    def test_missing_file_exits(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            cli.main(["rg", str(self.root / "missing.py")])
        self.assertIn("Path not found", str(ctx.exception.code))

    def test_missing_arguments_exit(self) -> None:
        with self.assertRaises(SystemExit):
            cli.main([])

    def test_picker_abort_exits_nonzero(self) -> None:
        with mock.patch("pointsearch.cli.picker_for_name", return_value=lambda _c, **_o: None):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["buffer-grep", str(self.file), "--cwd", str(self.root)])
        self.assertEqual(ctx.exception.code, 1)

    def test_bad_selection_is_rejected_by_argparse(self) -> None:
        with mock.patch("sys.stderr", io.StringIO()), self.assertRaises(SystemExit) as ctx:
            cli.main(["rg", str(self.file), "--selection", "nope"])
        self.assertEqual(ctx.exception.code, 2)


if __name__ == "__main__":
    unittest.main()
