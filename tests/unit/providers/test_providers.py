"""Tests for backend candidate collection.

External tools are faked through ``subprocess.run`` and ``shutil.which``.
"""

from __future__ import annotations

import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from pointsearch.backends import Backend
from pointsearch.providers import (
    buffer_candidates,
    collect_content_candidates,
    collect_file_candidates,
    content_command,
)


def _completed(returncode: int, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class ContentCommandTests(unittest.TestCase):
    def test_pattern_is_passed_as_single_argument(self) -> None:
        for backend in (Backend.RIPGREP, Backend.SILVER_SEARCHER, Backend.GIT_GREP, Backend.GREP):
            with self.subTest(backend=backend):
                cmd = content_command(backend, "a\\.b c")
                self.assertIn("a\\.b c", cmd)

    def test_buffer_grep_is_not_an_external_command(self) -> None:
        with self.assertRaises(ValueError):
            content_command(Backend.BUFFER_GREP, "x")


class CollectContentCandidatesTests(unittest.TestCase):
    def test_rows_are_normalized_relative_to_root(self) -> None:
        root = Path("/tmp/project")
        output = "./src/a.py:3:alpha\nsrc/b.py:10:beta\n\n"
        with mock.patch("pointsearch.providers.shutil.which", return_value="/usr/bin/rg"), mock.patch(
            "pointsearch.providers.subprocess.run",
            return_value=_completed(0, output),
        ) as run:
            lines, error = collect_content_candidates(Backend.RIPGREP, root, "alpha")

        self.assertIsNone(error)
        self.assertEqual(lines, ["src/a.py:3:alpha", "src/b.py:10:beta"])
        self.assertEqual(run.call_args.kwargs["cwd"], root)

    def test_no_match_exit_status_is_not_an_error(self) -> None:
        with mock.patch("pointsearch.providers.shutil.which", return_value="/usr/bin/grep"), mock.patch(
            "pointsearch.providers.subprocess.run",
            return_value=_completed(1),
        ):
            lines, error = collect_content_candidates(Backend.GREP, Path("/tmp"), "zzz")
        self.assertEqual((lines, error), ([], None))

    def test_failure_reports_stderr(self) -> None:
        with mock.patch("pointsearch.providers.shutil.which", return_value="/usr/bin/git"), mock.patch(
            "pointsearch.providers.subprocess.run",
            return_value=_completed(128, stderr="fatal: not a git repository\n"),
        ):
            lines, error = collect_content_candidates(Backend.GIT_GREP, Path("/tmp"), "x")
        self.assertEqual(lines, [])
        self.assertEqual(error, "fatal: not a git repository")

    def test_missing_tool_is_reported(self) -> None:
        with mock.patch("pointsearch.providers.shutil.which", return_value=None):
            lines, error = collect_content_candidates(Backend.SILVER_SEARCHER, Path("/tmp"), "x")
        self.assertEqual(lines, [])
        self.assertEqual(error, "ag is not installed.")

    def test_timeout_is_reported(self) -> None:
        with mock.patch("pointsearch.providers.shutil.which", return_value="/usr/bin/rg"), mock.patch(
            "pointsearch.providers.subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="rg", timeout=30),
        ):
            lines, error = collect_content_candidates(Backend.RIPGREP, Path("/tmp"), "x")
        self.assertEqual(lines, [])
        self.assertIn("timed out", error or "")


class BufferCandidatesTests(unittest.TestCase):
    def test_lines_are_numbered_from_one(self) -> None:
        self.assertEqual(buffer_candidates("a\nb\n"), ["1:a", "2:b"])
        self.assertEqual(buffer_candidates("solo"), ["1:solo"])
        self.assertEqual(buffer_candidates(""), ["1:"])


class CollectFileCandidatesTests(unittest.TestCase):
    def _make_tree(self, root: Path) -> None:
        (root / "pkg").mkdir()
        (root / "pkg" / "mod.py").write_text("", encoding="utf-8")
        (root / "README.md").write_text("", encoding="utf-8")
        (root / ".hidden").mkdir()
        (root / ".hidden" / "secret.txt").write_text("", encoding="utf-8")
        (root / ".env").write_text("", encoding="utf-8")

    def test_find_file_walks_root_skipping_hidden(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            self._make_tree(root)
            files, error = collect_file_candidates(Backend.FIND_FILE, root)
        self.assertIsNone(error)
        self.assertEqual(files, ["README.md", "pkg/mod.py"])

    def test_file_jump_falls_back_to_walk_without_rg(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            self._make_tree(root)
            with mock.patch("pointsearch.providers.shutil.which", return_value=None):
                files, error = collect_file_candidates(Backend.FILE_JUMP, root)
        self.assertIsNone(error)
        self.assertEqual(files, ["README.md", "pkg/mod.py"])

    def test_fuzzy_file_uses_fd_output(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            with mock.patch("pointsearch.providers.shutil.which", return_value="/usr/bin/fd"), mock.patch(
                "pointsearch.providers.subprocess.run",
                return_value=_completed(0, "./a.txt\n.git/config\nsub/b.txt\n"),
            ) as run:
                files, error = collect_file_candidates(Backend.FUZZY_FILE, root)
        self.assertIsNone(error)
        self.assertEqual(files, ["a.txt", "sub/b.txt"])
        self.assertEqual(run.call_args.args[0][0], "fd")

    def test_missing_root_is_reported(self) -> None:
        files, error = collect_file_candidates(Backend.FIND_FILE, Path("/definitely/not/here"))
        self.assertEqual(files, [])
        self.assertIn("Not a directory", error or "")

    def test_non_file_backend_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            collect_file_candidates(Backend.RIPGREP, Path("/tmp"))


if __name__ == "__main__":
    unittest.main()
