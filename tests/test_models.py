from __future__ import annotations

import unittest

from repodoctor.models import DetectedProject, FixOutcome, FixResult, Issue, parse_severity


class ModelTests(unittest.TestCase):
    def test_issue_rejects_unknown_severity(self) -> None:
        with self.assertRaises(ValueError):
            Issue("STR-001", "structure", "Structure", "blocker", "t", "d")  # type: ignore[arg-type]

    def test_issue_rejects_unknown_category(self) -> None:
        with self.assertRaises(ValueError):
            Issue("STR-001", "structure", "Layout", "high", "t", "d")  # type: ignore[arg-type]

    def test_issue_defaults(self) -> None:
        issue = Issue("DOC-003", "documentation", "Documentation", "info", "t", "d")
        self.assertIsNone(issue.file_path)
        self.assertIsNone(issue.line)
        self.assertFalse(issue.auto_fixable)
        self.assertEqual(issue.references, ())
        self.assertEqual(issue.fix_hint, ())

    def test_parse_severity_normalizes_case(self) -> None:
        self.assertEqual(parse_severity(" HIGH "), "high")
        with self.assertRaises(ValueError):
            parse_severity("urgent")

    def test_framework_label(self) -> None:
        self.assertEqual(DetectedProject(framework="nextjs").framework_label, "Next.js")
        self.assertEqual(DetectedProject().framework_label, "Unknown")

    def test_outcome_constructors(self) -> None:
        self.assertEqual(FixResult.applied("done").status, "applied")
        self.assertEqual(FixResult.skipped("nope").message, "nope")
        self.assertEqual(FixOutcome.dry_run("plan").status, "dry_run")
        self.assertEqual(FixOutcome.error("boom").status, "error")


if __name__ == "__main__":
    unittest.main()
