from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from repodoctor.detector import detect_framework, detect_project
from repodoctor.fs import iter_files, max_directory_depth, relative_path


class DetectorTests(unittest.TestCase):
    def test_unknown_project(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            detected = detect_framework(Path(tmp))
        self.assertEqual(detected.framework, "unknown")
        self.assertIsNone(detected.package_manager)
        self.assertFalse(detected.has_git)

    def test_nextjs_wins_over_plain_node(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "package.json").write_text('{"name": "web", "version": "1.2.3"}', encoding="utf-8")
            (root / "next.config.js").write_text("module.exports = {}\n", encoding="utf-8")
            (root / "yarn.lock").write_text("", encoding="utf-8")
            detected = detect_framework(root)
        self.assertEqual(detected.framework, "nextjs")
        self.assertEqual(detected.package_manager, "yarn")
        self.assertEqual(detected.version, "1.2.3")

    def test_rust_version_from_cargo_toml(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "Cargo.toml").write_text('[package]\nname = "x"\nversion = "0.4.0"\n', encoding="utf-8")
            detected = detect_framework(root)
        self.assertEqual(detected.framework, "rust_cargo")
        self.assertEqual(detected.package_manager, "cargo")
        self.assertEqual(detected.version, "0.4.0")

    def test_symfony_from_bundles(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "config").mkdir()
            (root / "config" / "bundles.php").write_text("<?php return [];\n", encoding="utf-8")
            detected = detect_framework(root)
        self.assertEqual(detected.framework, "symfony")
        self.assertEqual(detected.language, "php")

    def test_git_and_ci_detection(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / ".git").mkdir()
            (root / ".github" / "workflows").mkdir(parents=True)
            (root / "requirements.txt").write_text("requests==2.0\n", encoding="utf-8")
            detected = detect_framework(root)
        self.assertTrue(detected.has_git)
        self.assertEqual(detected.ci_provider, "github_actions")
        self.assertEqual(detected.framework, "python")
        self.assertEqual(detected.package_manager, "pip")

    def test_detect_project_rejects_missing_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(FileNotFoundError):
                detect_project(Path(tmp) / "missing")

    def test_detect_project_rejects_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "file.txt"
            target.write_text("x", encoding="utf-8")
            with self.assertRaises(NotADirectoryError):
                detect_project(target)


class FsTests(unittest.TestCase):
    def test_iter_files_is_sorted_and_skips_vendor_dirs(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "b").mkdir()
            (root / "node_modules").mkdir()
            (root / ".hidden").mkdir()
            (root / "b" / "z.py").write_text("", encoding="utf-8")
            (root / "a.py").write_text("", encoding="utf-8")
            (root / "node_modules" / "x.js").write_text("", encoding="utf-8")
            (root / ".hidden" / "y.py").write_text("", encoding="utf-8")
            files = [relative_path(path, root) for path in iter_files(root)]
        self.assertEqual(files, ["a.py", "b/z.py"])

    def test_max_directory_depth(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            self.assertEqual(max_directory_depth(root), 0)
            (root / "a" / "b" / "c").mkdir(parents=True)
            self.assertEqual(max_directory_depth(root), 3)


if __name__ == "__main__":
    unittest.main()
