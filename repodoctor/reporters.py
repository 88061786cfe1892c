from __future__ import annotations

from collections import Counter
import json
from pathlib import Path
from typing import Any

from repodoctor import __version__
from repodoctor.models import SEVERITY_ORDER, FixOutcome, Issue, ScanResult


def _issue_to_dict(issue: Issue) -> dict[str, Any]:
    return {
        "id": issue.rule_id,
        "analyzer": issue.analyzer,
        "category": issue.category,
        "severity": issue.severity,
        "title": issue.title,
        "description": issue.description,
        "file": issue.file_path,
        "line": issue.line,
        "suggestion": issue.suggestion,
        "auto_fixable": issue.auto_fixable,
        "references": list(issue.references),
    }


def to_json_report(result: ScanResult) -> dict[str, Any]:
    counts = Counter(issue.severity for issue in result.issues)
    rule_counts = Counter(issue.rule_id for issue in result.issues)
    detected = result.project.detected
    return {
        "version": __version__,
        "project": {
            "path": str(result.project.root),
            "framework": detected.framework,
            "language": detected.language,
            "version": detected.version,
            "package_manager": detected.package_manager,
            "has_git": detected.has_git,
            "ci_provider": detected.ci_provider,
        },
        "score": {
            "total": result.score.total,
            "grade": result.score.grade,
            "breakdown": [
                {
                    "name": category.name,
                    "score": category.score,
                    "issues_count": category.issues_count,
                    "critical_count": category.critical_count,
                }
                for category in result.score.breakdown
            ],
        },
        "issues_total": len(result.issues),
        "severity_counts": {severity: counts.get(severity, 0) for severity in SEVERITY_ORDER},
        "rule_counts": dict(sorted(rule_counts.items())),
        "duration_ms": round(result.duration * 1000.0, 2),
        "issues": [_issue_to_dict(issue) for issue in result.issues],
    }


def to_sarif_report(result: ScanResult) -> dict[str, Any]:
    sarif_results: list[dict[str, Any]] = []
    for issue in result.issues:
        entry: dict[str, Any] = {
            "ruleId": issue.rule_id,
            "level": _severity_to_level(issue.severity),
            "message": {"text": f"{issue.title}: {issue.description}"},
        }
        if issue.file_path is not None:
            region = {"startLine": issue.line} if issue.line is not None else None
            physical: dict[str, Any] = {"artifactLocation": {"uri": issue.file_path}}
            if region is not None:
                physical["region"] = region
            entry["locations"] = [{"physicalLocation": physical}]
        sarif_results.append(entry)

    return {
        "$schema": "https://json.schemastore.org/sarif-2.1.0.json",
        "version": "2.1.0",
        "runs": [
            {
                "tool": {"driver": {"name": "repodoctor", "version": __version__}},
                "results": sarif_results,
                "properties": {"healthScore": result.score.total, "grade": result.score.grade},
            }
        ],
    }


def to_text_report(result: ScanResult) -> str:
    detected = result.project.detected
    lines = [
        f"Project: {result.project.root} ({detected.framework_label})",
        f"Health score: {result.score.total}/100 (grade {result.score.grade})",
        "",
    ]
    for category in result.score.breakdown:
        lines.append(
            f"  {category.name:<14} {category.score:>3}  issues={category.issues_count} critical={category.critical_count}"
        )
    lines.append("")
    if not result.issues:
        lines.append("No issues found.")
    for issue in result.issues:
        location = ""
        if issue.file_path is not None:
            location = f" ({issue.file_path}" + (f":{issue.line}" if issue.line is not None else "") + ")"
        lines.append(f"[{issue.severity.upper():<8}] {issue.rule_id} {issue.title}{location}")
        if issue.suggestion:
            lines.append(f"           -> {issue.suggestion}")
    return "\n".join(lines)


def write_report(payload: dict[str, Any] | str, out: str | None) -> None:
    rendered = payload if isinstance(payload, str) else json.dumps(payload, indent=2)
    if out is None:
        print(rendered)
        return
    output_path = Path(out)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(rendered, encoding="utf-8")


def format_summary(result: ScanResult) -> str:
    counts = Counter(issue.severity for issue in result.issues)
    return (
        f"[summary] score={result.score.total} grade={result.score.grade} issues={len(result.issues)} "
        + " ".join(f"{severity}={counts.get(severity, 0)}" for severity in reversed(list(SEVERITY_ORDER)))
        + f" duration={result.duration:.2f}s"
    )


def format_fix_outcome(rule_id: str, outcome: FixOutcome) -> str:
    label = {
        "applied": "FIXED",
        "skipped": "SKIP",
        "dry_run": "DRY-RUN",
        "error": "ERROR",
    }[outcome.status]
    return f"  {label:<7} [{rule_id}] {outcome.message}"


def _severity_to_level(severity: str) -> str:
    mapping = {
        "info": "note",
        "low": "note",
        "medium": "warning",
        "high": "error",
        "critical": "error",
    }
    return mapping.get(severity, "warning")
