from __future__ import annotations

from pathlib import Path
import os
import tempfile
import unittest
from unittest.mock import MagicMock

from core.console import Console
from core.filetree import copy_file, delete_path_recursive, ensure_directory


class DeletePathRecursiveTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def _snapshot(self) -> list[str]:
        return sorted(str(path.relative_to(self.root)) for path in self.root.rglob("*"))

    def test_missing_path_is_a_no_op(self) -> None:
        (self.root / "keep.txt").write_text("keep")
        before = self._snapshot()
        for missing in ("absent", "absent/nested/deeper", "absent.json"):
            self.assertFalse(delete_path_recursive(self.root / missing))
        self.assertEqual(self._snapshot(), before)

    def test_removes_whole_tree(self) -> None:
        tree = self.root / "dist"
        (tree / "out" / "spec-edit-darwin-x64").mkdir(parents=True)
        (tree / "elm.js").write_text("compiled")
        (tree / "out" / "spec-edit-darwin-x64" / "app.bin").write_bytes(b"\x00\x01")
        (tree / "empty").mkdir()

        self.assertTrue(delete_path_recursive(tree))
        self.assertFalse(tree.exists())
        self.assertEqual(self._snapshot(), [])

    def test_removes_single_file(self) -> None:
        target = self.root / "elm.js"
        target.write_text("compiled")
        self.assertTrue(delete_path_recursive(str(target)))
        self.assertFalse(target.exists())

    @unittest.skipIf(os.name == "nt", "symlinks need extra privileges on Windows")
    def test_symlink_is_removed_without_following(self) -> None:
        outside = self.root / "outside"
        outside.mkdir()
        (outside / "precious.txt").write_text("keep me")
        tree = self.root / "tree"
        tree.mkdir()
        (tree / "link").symlink_to(outside, target_is_directory=True)

        self.assertTrue(delete_path_recursive(tree))
        self.assertFalse(tree.exists())
        self.assertTrue((outside / "precious.txt").exists())


class CopyFileTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)
        self.console = MagicMock(spec=Console)
        self.console.dry_run = False

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_copy_overwrites_destination(self) -> None:
        source = self.root / "spec.css"
        dest = self.root / "copy.css"
        source.write_bytes(b"body { margin: 0 }\r\n")
        dest.write_text("old contents that are longer than the new ones")

        self.assertTrue(copy_file(source, dest, console=self.console))
        self.assertEqual(dest.read_bytes(), b"body { margin: 0 }\r\n")
        self.console.error.assert_not_called()

    def test_missing_source_fails_and_reports(self) -> None:
        dest = self.root / "copy.css"
        self.assertFalse(copy_file(self.root / "missing.css", dest, console=self.console))
        self.assertFalse(dest.exists())
        self.console.error.assert_called_once()

    def test_unwritable_destination_fails(self) -> None:
        source = self.root / "index.html"
        source.write_text("<html></html>")
        self.assertFalse(copy_file(source, self.root / "no-such-dir" / "index.html"))


class EnsureDirectoryTests(unittest.TestCase):
    def test_creates_once(self) -> None:
        with tempfile.TemporaryDirectory() as temp:
            target = Path(temp) / "temp"
            self.assertTrue(ensure_directory(target))
            self.assertFalse(ensure_directory(target))
            self.assertTrue(target.is_dir())


if __name__ == "__main__":
    unittest.main()
