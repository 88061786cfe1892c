from __future__ import annotations

from pathlib import Path
import unittest

from repodoctor.models import Issue, Project, ScanResult
from repodoctor.quality_gate import evaluate_gate
from repodoctor.score import calculate_health_score


def _result(severities: list[str]) -> ScanResult:
    issues = [Issue("X-001", "test", "Security", severity, "t", "d") for severity in severities]  # type: ignore[arg-type]
    return ScanResult(
        project=Project(root=Path(".")),
        issues=issues,
        score=calculate_health_score(issues),
        duration=0.0,
    )


class QualityGateTests(unittest.TestCase):
    def test_fails_on_severity_threshold(self) -> None:
        passed, reasons = evaluate_gate(_result(["critical", "low"]), fail_on="high")
        self.assertFalse(passed)
        self.assertEqual(reasons, ["1 issue(s) with severity >= 'high'"])

    def test_passes_below_severity_threshold(self) -> None:
        passed, reasons = evaluate_gate(_result(["medium", "low"]), fail_on="high")
        self.assertTrue(passed)
        self.assertEqual(reasons, [])

    def test_passes_under_max_issues(self) -> None:
        passed, _ = evaluate_gate(_result([]), max_issues=0)
        self.assertTrue(passed)

    def test_fails_over_max_issues(self) -> None:
        passed, reasons = evaluate_gate(_result(["info", "info"]), max_issues=1)
        self.assertFalse(passed)
        self.assertTrue(any("max_issues" in reason for reason in reasons))

    def test_fails_below_min_score(self) -> None:
        result = _result(["critical"] * 4)
        passed, reasons = evaluate_gate(result, min_score=90)
        self.assertFalse(passed)
        self.assertTrue(any("min_score" in reason for reason in reasons))

    def test_no_gates_always_pass(self) -> None:
        self.assertEqual(evaluate_gate(_result(["critical"])), (True, []))


if __name__ == "__main__":
    unittest.main()
