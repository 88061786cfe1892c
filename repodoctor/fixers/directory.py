from __future__ import annotations

from pathlib import Path

from repodoctor.fixers.base import Fixer
from repodoctor.models import FixResult, Issue, Project

MISSING_DIRECTORY_PREFIX = "Missing required directory: "
FIXED_DIRECTORIES: dict[str, str] = {
    "SYM-001": "src/Controller",
    "SYM-002": "src/Entity",
    "SYM-031": "tests",
    "FLT-031": "integration_test",
    "NJS-031": "__tests__",
}


class DirectoryFixer(Fixer):
    rule_ids = frozenset({"STR-001", *FIXED_DIRECTORIES})

    def describe(self, issue: Issue, project: Project) -> str:
        directory = directory_for_issue(issue, project.root)
        if directory is None:
            return "Create missing directory"
        return f"Create directory: {(project.root / directory).as_posix()}"

    def apply(self, issue: Issue, project: Project) -> FixResult:
        directory = directory_for_issue(issue, project.root)
        if directory is None:
            return FixResult.skipped("Cannot determine a directory inside the project to create")

        target = project.root / directory
        if target.exists():
            return FixResult.skipped(f"{directory} already exists")
        target.mkdir(parents=True)
        return FixResult.applied(f"Created directory: {directory}")


def directory_for_issue(issue: Issue, root: Path | None = None) -> str | None:
    """Return the directory an issue asks for, relative to the project root.

    With ``root`` given, a directory that would land outside it (``..``
    segments, absolute paths, symlinks pointing elsewhere) yields ``None``.
    """
    directory = _requested_directory(issue)
    if directory is None or root is None:
        return directory
    resolved_root = root.resolve()
    if not (resolved_root / directory).resolve().is_relative_to(resolved_root):
        return None
    return directory


def _requested_directory(issue: Issue) -> str | None:
    if issue.rule_id == "STR-001":
        if issue.fix_hint:
            return issue.fix_hint[0].strip() or None
        # Issues built without a hint still carry the directory in the title.
        if issue.title.startswith(MISSING_DIRECTORY_PREFIX):
            return issue.title[len(MISSING_DIRECTORY_PREFIX):].strip() or None
        return None
    return FIXED_DIRECTORIES.get(issue.rule_id)
