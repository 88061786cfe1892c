from __future__ import annotations

from contextlib import redirect_stderr, redirect_stdout
import io
import json
from pathlib import Path
import tempfile
import unittest

from repodoctor.cli import build_parser, expand_analyzer_name, main, narrow_result, parse_csv
from repodoctor.models import Issue, Project, ScanResult
from repodoctor.score import calculate_health_score


def _run(argv: list[str]) -> tuple[int, str, str]:
    stdout = io.StringIO()
    stderr = io.StringIO()
    with redirect_stdout(stdout), redirect_stderr(stderr):
        try:
            main(argv)
        except SystemExit as exc:
            code = exc.code
        else:
            raise AssertionError("main() did not exit")
    return code, stdout.getvalue(), stderr.getvalue()


class CLIParserTests(unittest.TestCase):
    def test_version_flag(self) -> None:
        parser = build_parser()
        with self.assertRaises(SystemExit) as exc:
            with redirect_stdout(io.StringIO()):
                parser.parse_args(["--version"])
        self.assertEqual(exc.exception.code, 0)

    def test_scan_defaults(self) -> None:
        args = build_parser().parse_args(["scan"])
        self.assertEqual(args.path, ".")
        self.assertEqual(args.format, "text")
        self.assertIsNone(args.fail_on)
        self.assertFalse(args.ci)

    def test_analyzer_aliases(self) -> None:
        self.assertEqual(expand_analyzer_name("deps"), "dependencies")
        self.assertEqual(expand_analyzer_name("docs"), "documentation")
        self.assertEqual(expand_analyzer_name(" sec "), "security")
        self.assertEqual(expand_analyzer_name("config"), "config_files")
        self.assertEqual(expand_analyzer_name("custom"), "custom")

    def test_parse_csv(self) -> None:
        self.assertEqual(parse_csv("STR-001, STR-003,,"), ["STR-001", "STR-003"])
        self.assertEqual(parse_csv(None), [])

    def test_narrow_result(self) -> None:
        issues = [
            Issue("SEC-001", "security", "Security", "critical", "t", "d"),
            Issue("STR-004", "structure", "Structure", "low", "t", "d"),
        ]
        result = ScanResult(project=Project(root=Path(".")), issues=issues, score=calculate_health_score(issues), duration=0.0)

        by_severity = narrow_result(result, severity="high")
        self.assertEqual([issue.rule_id for issue in by_severity.issues], ["SEC-001"])
        self.assertEqual(by_severity.score, result.score)

        by_analyzer = narrow_result(result, only=["struct"])
        self.assertEqual([issue.rule_id for issue in by_analyzer.issues], ["STR-004"])
        self.assertEqual(by_analyzer.score.total, calculate_health_score(issues[1:]).total)


class CLIScanTests(unittest.TestCase):
    def test_scan_json_output(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            code, out, err = _run(["scan", tmp, "--format", "json"])
        self.assertEqual(code, 0)
        payload = json.loads(out)
        self.assertIn("STR-003", payload["rule_counts"])
        self.assertIn("[summary]", err)

    def test_ci_mode_fails_on_committed_env(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / ".env").write_text("DEBUG=1\n", encoding="utf-8")
            code, _, err = _run(["scan", tmp, "--format", "json", "--ci"])
        self.assertEqual(code, 1)
        self.assertIn("[gate]", err)

    def test_ci_mode_passes_on_healthy_tree(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            code, _, _ = _run(["scan", tmp, "--format", "json", "--ci", "--fail-on", "critical"])
        self.assertEqual(code, 0)

    def test_only_restricts_analyzers(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            code, out, _ = _run(["scan", tmp, "--format", "json", "--only", "docs"])
        self.assertEqual(code, 0)
        payload = json.loads(out)
        self.assertTrue(all(issue["analyzer"] == "documentation" for issue in payload["issues"]))

    def test_invalid_config_exits_2(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / ".repodoctor.yml").write_text("ignore: [oops\n", encoding="utf-8")
            code, out, err = _run(["scan", tmp, "--format", "json"])
        self.assertEqual(code, 2)
        self.assertEqual(out, "")
        self.assertIn("[config]", err)

    def test_unknown_threshold_exits_2(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / ".repodoctor.yml").write_text("severity_threshold: loud\n", encoding="utf-8")
            code, _, err = _run(["scan", tmp])
        self.assertEqual(code, 2)
        self.assertIn("severity_threshold", err)

    def test_missing_path_is_an_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            code, _, err = _run(["scan", str(Path(tmp) / "missing")])
        self.assertEqual(code, 2)
        self.assertIn("[error]", err)

    def test_non_utf8_config_exits_2(self) -> None:
        for command in ("scan", "fix"):
            with tempfile.TemporaryDirectory() as tmp:
                (Path(tmp) / ".repodoctor.yml").write_bytes(b"severity_threshold: \xff\xfe high\n")
                code, out, err = _run([command, tmp])
            self.assertEqual(code, 2)
            self.assertIn("[config]", err)
            self.assertIn("UTF-8", err)

    def test_negative_max_issues_exits_2(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            code, _, err = _run(["scan", tmp, "--max-issues", "-1"])
        self.assertEqual(code, 2)
        self.assertIn("max_issues", err)

    def test_report_written_to_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            out_path = Path(tmp) / "out" / "report.sarif"
            code, out, _ = _run(["scan", tmp, "--format", "sarif", "--out", str(out_path)])
            payload = json.loads(out_path.read_text(encoding="utf-8"))
        self.assertEqual(code, 0)
        self.assertEqual(out, "")
        self.assertEqual(payload["version"], "2.1.0")


class CLIFixTests(unittest.TestCase):
    def test_dry_run_leaves_tree_untouched(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            code, out, _ = _run(["fix", tmp, "--dry-run"])
            self.assertEqual(list(Path(tmp).iterdir()), [])
        self.assertEqual(code, 0)
        self.assertIn("DRY-RUN", out)

    def test_fix_applies_and_reports_counts(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / ".env").write_text("DEBUG=1\n", encoding="utf-8")
            code, out, _ = _run(["fix", tmp])

            self.assertEqual((root / ".gitignore").read_text(encoding="utf-8"), ".env\n")
            self.assertTrue((root / ".editorconfig").exists())
        self.assertEqual(code, 0)
        self.assertIn("FIXED", out)
        self.assertIn("2 fixed, 2 skipped, 0 failed.", out)

    def test_only_limits_rules(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            code, out, _ = _run(["fix", tmp, "--only", "cfg-002"])
            self.assertTrue((root / ".editorconfig").exists())
            self.assertFalse((root / ".gitignore").exists())
        self.assertEqual(code, 0)
        self.assertIn("1 fixed, 0 skipped, 0 failed.", out)

    def test_nothing_to_fix(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / ".gitignore").write_text(".env\n", encoding="utf-8")
            (root / ".editorconfig").write_text("root = true\n", encoding="utf-8")
            code, out, _ = _run(["fix", tmp])
        self.assertEqual(code, 0)
        self.assertIn("No auto-fixable issues found.", out)


class CLIInitTests(unittest.TestCase):
    def test_init_writes_then_keeps_existing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / ".repodoctor.yml"

            code, out, _ = _run(["init", tmp])
            self.assertEqual(code, 0)
            self.assertIn("DONE", out)
            self.assertIn("severity_threshold: low", config_path.read_text(encoding="utf-8"))

            config_path.write_text("severity_threshold: high\n", encoding="utf-8")
            code, out, _ = _run(["init", tmp])
            self.assertEqual(code, 0)
            self.assertIn("SKIP", out)
            self.assertEqual(config_path.read_text(encoding="utf-8"), "severity_threshold: high\n")

            _run(["init", tmp, "--force"])
            self.assertIn("severity_threshold: low", config_path.read_text(encoding="utf-8"))


if __name__ == "__main__":
    unittest.main()
