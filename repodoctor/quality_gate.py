from __future__ import annotations

from repodoctor.models import SEVERITY_ORDER, ScanResult, Severity


def evaluate_gate(
    result: ScanResult,
    fail_on: Severity | None = None,
    max_issues: int | None = None,
    min_score: int | None = None,
) -> tuple[bool, list[str]]:
    failed_reasons: list[str] = []

    if fail_on is not None:
        threshold = SEVERITY_ORDER[fail_on]
        failing = sum(1 for issue in result.issues if SEVERITY_ORDER[issue.severity] >= threshold)
        if failing:
            failed_reasons.append(f"{failing} issue(s) with severity >= '{fail_on}'")

    if max_issues is not None and len(result.issues) > max_issues:
        failed_reasons.append(f"Issue count {len(result.issues)} exceeds max_issues={max_issues}")

    if min_score is not None and result.score.total < min_score:
        failed_reasons.append(f"Health score {result.score.total} is below min_score={min_score}")

    return (len(failed_reasons) == 0, failed_reasons)
