from __future__ import annotations

import argparse
import sys

import structlog

from repodoctor import __version__
from repodoctor.config import CONFIG_FILENAME, Config, ConfigError, load_config, render_config_template, validate_config
from repodoctor.detector import detect_project
from repodoctor.fixers import default_registry
from repodoctor.log import configure_logging
from repodoctor.models import SEVERITY_ORDER, ScanResult
from repodoctor.quality_gate import evaluate_gate
from repodoctor.reporters import (
    format_fix_outcome,
    format_summary,
    to_json_report,
    to_sarif_report,
    to_text_report,
    write_report,
)
from repodoctor.scanner import default_scanner
from repodoctor.score import calculate_health_score

logger = structlog.get_logger(__name__)

SEVERITY_CHOICES = list(SEVERITY_ORDER)
FAIL_ON_CHOICES = ["low", "medium", "high", "critical"]
CI_DEFAULT_FAIL_ON = "high"

ANALYZER_ALIASES = {
    "deps": "dependencies",
    "dependencies": "dependencies",
    "config": "config_files",
    "configuration": "config_files",
    "config_files": "config_files",
    "docs": "documentation",
    "documentation": "documentation",
    "struct": "structure",
    "structure": "structure",
    "sec": "security",
    "security": "security",
    "test": "testing",
    "testing": "testing",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repodoctor",
        description="Repository health checker: scan a project, score it and fix common problems.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan = subparsers.add_parser("scan", help="Scan a project and report its health.")
    scan.add_argument("path", nargs="?", default=".", help="Project root to scan.")
    scan.add_argument("--config", help=f"Path to a config file. Defaults to <path>/{CONFIG_FILENAME}.")
    scan.add_argument("--format", choices=["text", "json", "sarif"], default="text", help="Report output format.")
    scan.add_argument("--out", help="Write report to file. Defaults to stdout.")
    scan.add_argument("--severity", choices=SEVERITY_CHOICES, help="Minimum severity to display.")
    scan.add_argument(
        "--only",
        help="Comma-separated analyzers to keep (structure,deps,config,security,testing,docs).",
    )
    scan.add_argument(
        "--ci",
        action="store_true",
        help=f"Fail when issues at or above --fail-on exist (default '{CI_DEFAULT_FAIL_ON}').",
    )
    scan.add_argument("--fail-on", choices=FAIL_ON_CHOICES, help="Fail on severity level.")
    scan.add_argument("--max-issues", type=int, help="Fail if issue count exceeds this number.")
    scan.add_argument("--min-score", type=int, help="Fail if the health score is below this number.")
    scan.add_argument("--verbose", action="store_true", help="Print debug logs on stderr.")

    fix = subparsers.add_parser("fix", help="Apply automatic fixes for fixable issues.")
    fix.add_argument("path", nargs="?", default=".", help="Project root to fix.")
    fix.add_argument("--config", help=f"Path to a config file. Defaults to <path>/{CONFIG_FILENAME}.")
    fix.add_argument("--dry-run", action="store_true", help="Describe fixes without touching files.")
    fix.add_argument("--only", help="Comma-separated rule ids to fix, e.g. STR-001,STR-003.")
    fix.add_argument("--verbose", action="store_true", help="Print debug logs on stderr.")

    init = subparsers.add_parser("init", help=f"Write a starter {CONFIG_FILENAME}.")
    init.add_argument("path", nargs="?", default=".", help="Project root.")
    init.add_argument("--force", action="store_true", help=f"Overwrite an existing {CONFIG_FILENAME}.")

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(getattr(args, "verbose", False))

    if args.command == "scan":
        exit_code = run_scan(args)
    elif args.command == "fix":
        exit_code = run_fix(args)
    else:
        exit_code = run_init(args)
    raise SystemExit(exit_code)


def run_scan(args: argparse.Namespace) -> int:
    gate_errors = validate_gate_args(args)
    if gate_errors:
        for error in gate_errors:
            print(f"[gate] {error}", file=sys.stderr)
        return 2

    try:
        project = detect_project(args.path)
        config = _load_checked_config(project.root, args.config)
    except ConfigError as exc:
        print(f"[config] {exc}", file=sys.stderr)
        return 2
    except OSError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return 2

    if config is None:
        return 2

    on_analyzer = None
    if args.format == "text" and args.out is None:
        on_analyzer = _print_progress

    try:
        result = default_scanner().scan(project, config=config, on_analyzer=on_analyzer)
    except Exception as exc:
        logger.error("scan_failed", root=str(project.root), error=str(exc))
        print(f"[error] scan failed: {exc}", file=sys.stderr)
        return 2

    result = narrow_result(result, severity=args.severity, only=parse_csv(args.only))
    write_report(render_report(result, args.format), args.out)
    print(format_summary(result), file=sys.stderr)

    fail_on = args.fail_on
    if args.ci and fail_on is None:
        fail_on = CI_DEFAULT_FAIL_ON
    passed, reasons = evaluate_gate(
        result,
        fail_on=fail_on,
        max_issues=args.max_issues,
        min_score=args.min_score,
    )
    if not passed:
        for reason in reasons:
            print(f"[gate] {reason}", file=sys.stderr)
        return 1
    return 0


def run_fix(args: argparse.Namespace) -> int:
    try:
        project = detect_project(args.path)
        config = _load_checked_config(project.root, args.config)
    except ConfigError as exc:
        print(f"[config] {exc}", file=sys.stderr)
        return 2
    except OSError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return 2

    if config is None:
        return 2

    try:
        result = default_scanner().scan(project, config=config)
    except Exception as exc:
        logger.error("scan_failed", root=str(project.root), error=str(exc))
        print(f"[error] scan failed: {exc}", file=sys.stderr)
        return 2

    fixable = [issue for issue in result.issues if issue.auto_fixable]
    only = parse_csv(args.only)
    if only:
        wanted = {rule_id.upper() for rule_id in only}
        fixable = [issue for issue in fixable if issue.rule_id in wanted]

    if not fixable:
        print("No auto-fixable issues found.")
        return 0

    print(f"{len(fixable)} auto-fixable issue(s) found.\n")
    outcomes = default_registry().apply_fixes(fixable, project, dry_run=args.dry_run)

    applied = skipped = failed = 0
    for rule_id, outcome in outcomes:
        print(format_fix_outcome(rule_id, outcome))
        if outcome.status == "applied":
            applied += 1
        elif outcome.status == "skipped":
            skipped += 1
        elif outcome.status == "error":
            failed += 1

    if args.dry_run:
        print(f"\nDry run: {len(outcomes) - skipped} fix(es) planned, {skipped} skipped.")
        return 0
    print(f"\n{applied} fixed, {skipped} skipped, {failed} failed.")
    return 1 if failed else 0


def run_init(args: argparse.Namespace) -> int:
    try:
        project = detect_project(args.path)
    except OSError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return 2

    config_path = project.root / CONFIG_FILENAME
    if config_path.exists() and not args.force:
        print(f"  SKIP    {CONFIG_FILENAME} already exists. Use --force to overwrite.")
        return 0

    config_path.write_text(render_config_template(project.detected.framework), encoding="utf-8")
    print(f"  DONE    {CONFIG_FILENAME} created for {project.detected.framework_label} project")
    print(f"  Edit {config_path} to customize rules and thresholds.")
    return 0


def narrow_result(result: ScanResult, severity: str | None = None, only: list[str] | None = None) -> ScanResult:
    """Apply display-side filters to a finished scan.

    ``severity`` hides lower issues and keeps the score; ``only`` restricts
    issues to the named analyzers and rescores what is left.
    """
    issues = result.issues
    score = result.score
    if severity is not None:
        threshold = SEVERITY_ORDER[severity]  # type: ignore[index]
        issues = [issue for issue in issues if SEVERITY_ORDER[issue.severity] >= threshold]
    if only:
        allowed = {expand_analyzer_name(name) for name in only}
        issues = [issue for issue in issues if issue.analyzer in allowed]
        score = calculate_health_score(issues)
    return ScanResult(project=result.project, issues=issues, score=score, duration=result.duration)


def expand_analyzer_name(name: str) -> str:
    normalized = name.strip().lower()
    return ANALYZER_ALIASES.get(normalized, normalized)


def parse_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def render_report(result: ScanResult, output_format: str):
    if output_format == "sarif":
        return to_sarif_report(result)
    if output_format == "json":
        return to_json_report(result)
    if output_format == "text":
        return to_text_report(result)
    raise ValueError(f"Unsupported report format: {output_format}")


def validate_gate_args(args: argparse.Namespace) -> list[str]:
    errors: list[str] = []
    if args.max_issues is not None and args.max_issues < 0:
        errors.append("max_issues must be >= 0")
    if args.min_score is not None and not 0 <= args.min_score <= 100:
        errors.append("min_score must be between 0 and 100")
    return errors


def _load_checked_config(project_root, config_path: str | None) -> Config | None:
    config = load_config(project_root, config_path)
    errors = validate_config(config)
    for error in errors:
        print(f"[config] {error}", file=sys.stderr)
    return None if errors else config


def _print_progress(analyzer_name: str) -> None:
    print(f"[scan] {analyzer_name}", file=sys.stderr)


if __name__ == "__main__":
    main()
